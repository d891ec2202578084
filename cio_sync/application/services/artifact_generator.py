"""
Generacion de artefactos derivados del barcode.

En orden:
1. PNG con el barcode Code 39
2. SVG con el mismo barcode
3. Etiqueta PDF (4x6in) que embebe el PNG y texto descriptivo

Todas las salidas son deterministas para un mismo barcode + texto (el PDF
se genera con `invariant=1`, sin fecha ni id aleatorio), asi que re-subir
un artefacto sin cambios produce exactamente los mismos bytes.

Las funciones son sincronas y bloqueantes: el pipeline las corre con
`run_blocking`.
"""
from __future__ import annotations

import io
from dataclasses import dataclass

from reportlab.graphics import renderPM, renderSVG
from reportlab.graphics.barcode import createBarcodeDrawing
from reportlab.graphics.shapes import Drawing
from reportlab.lib.units import inch
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas


@dataclass(frozen=True)
class LabelText:
    """Texto impreso en la etiqueta."""

    title: str
    subtitle: str = ""


class ArtifactGenerator:
    """Renderiza barcodes e etiquetas con reportlab."""

    PNG_BAR_HEIGHT = 45
    SVG_BAR_HEIGHT = 200
    LABEL_PAGE_SIZE = (4 * inch, 6 * inch)

    def _drawing(self, barcode: str, bar_height: float) -> Drawing:
        return createBarcodeDrawing(
            "Standard39",
            value=barcode,
            barHeight=bar_height,
            checksum=0,
            humanReadable=False,
        )

    def render_png(self, barcode: str) -> bytes:
        """Barcode Code 39 como PNG."""
        drawing = self._drawing(barcode, self.PNG_BAR_HEIGHT)
        # rl_renderPM es el backend instalado; el default de reportlab 4 es rlPyCairo.
        return renderPM.drawToString(drawing, fmt="PNG", backend="_renderPM")

    def render_svg(self, barcode: str) -> bytes:
        """Barcode Code 39 como SVG."""
        drawing = self._drawing(barcode, self.SVG_BAR_HEIGHT)
        return renderSVG.drawToString(drawing).encode("utf-8")

    def render_label(self, png: bytes, barcode: str, text: LabelText) -> bytes:
        """
        Compone la etiqueta imprimible.

        Args:
            png: PNG del paso 1 (se embebe tal cual)
            barcode: texto del barcode, impreso debajo de la imagen
            text: titulo y subtitulo de la etiqueta
        """
        width, height = self.LABEL_PAGE_SIZE
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=self.LABEL_PAGE_SIZE, invariant=1)
        pdf.setTitle(f"{text.title} - Barcode Label")

        pdf.setFont("Helvetica-Bold", 16)
        pdf.drawCentredString(width / 2, height - 0.9 * inch, text.title)

        image = ImageReader(io.BytesIO(png))
        image_w, image_h = image.getSize()
        scale = min((width - 0.5 * inch) / image_w, (1.5 * inch) / image_h)
        draw_w, draw_h = image_w * scale, image_h * scale
        image_y = height / 2 - draw_h / 2
        pdf.drawImage(image, (width - draw_w) / 2, image_y, width=draw_w, height=draw_h)

        pdf.setFont("Courier-Bold", 14)
        pdf.drawCentredString(width / 2, image_y - 0.35 * inch, barcode)

        if text.subtitle:
            pdf.setFont("Helvetica", 10)
            pdf.drawCentredString(width / 2, image_y - 0.75 * inch, text.subtitle)

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()
