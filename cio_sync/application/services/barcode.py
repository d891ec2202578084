"""
Identificador derivado (barcode) y nombres de reemplazo para claves vacias.

El barcode se deriva solo de la clave natural, asi que es estable entre
corridas mientras el nombre no cambie; de eso depende que las imagenes y
etiquetas se regeneren con el mismo nombre de archivo.
"""
import hashlib
import string
from typing import Collection

# Para entrar en la etiqueta con el DPI de la impresora el barcode no
# deberia superar este largo.
BARCODE_LENGTH = 13

# Solo A-Z y 0-9: entra en Code 39 sin escapes y es legible en la etiqueta.
_BARCODE_ALPHABET = frozenset(string.ascii_uppercase + string.digits)


def derive_barcode(name: str) -> str:
    """
    Deriva el barcode de un nombre.

    Mayusculas, sin ``espacio / ( ) - '``, y con ceros a la izquierda hasta
    BARCODE_LENGTH. Cualquier otro caracter fuera de A-Z y 0-9 (``& , # .``,
    acentos) tambien se descarta. Si ya es mas largo NO se trunca (ver is_over_length).

    Ejemplo:
        >>> derive_barcode("Dell XPS 13 (2020)")
        'DELLXPS132020'
        >>> derive_barcode("Yubikey")
        '000000YUBIKEY'
    """
    barcode = "".join(c for c in name.upper() if c in _BARCODE_ALPHABET)
    return barcode.rjust(BARCODE_LENGTH, "0")


def is_over_length(barcode: str) -> bool:
    """True si el barcode excede el largo que entra en la etiqueta."""
    return len(barcode) > BARCODE_LENGTH


_ADJECTIVES = (
    "amber", "bold", "brave", "calm", "clever", "crimson", "eager", "fancy",
    "gentle", "golden", "happy", "jolly", "lively", "lucky", "mellow", "nimble",
    "proud", "quiet", "rapid", "silent", "steady", "swift", "tidy", "witty",
)
_NOUNS = (
    "badger", "beacon", "cactus", "comet", "falcon", "fjord", "gecko", "harbor",
    "heron", "lantern", "maple", "meadow", "otter", "pebble", "quasar", "raven",
    "summit", "tundra", "walrus", "willow", "yak", "zephyr", "canyon", "ember",
)


def placeholder_name(seed: str, taken: Collection[str] = ()) -> str:
    """
    Nombre legible para un registro sin clave natural.

    Se deriva del id externo del registro (seed), asi el mismo registro
    recibe el mismo nombre en cada corrida y el upsert no crea duplicados.
    Si el nombre ya esta tomado en el lote se le agrega un sufijo.
    """
    digest = hashlib.sha1(seed.encode("utf-8")).hexdigest()
    adjective = _ADJECTIVES[int(digest[0:8], 16) % len(_ADJECTIVES)]
    noun = _NOUNS[int(digest[8:16], 16) % len(_NOUNS)]
    name = f"{adjective}-{noun}-{digest[16:20]}"

    candidate = name
    suffix = 1
    while candidate in taken:
        suffix += 1
        candidate = f"{name}-{suffix}"
    return candidate
