"""
Tests unitarios para el executor de operaciones bloqueantes.
"""
from __future__ import annotations

import asyncio
import threading

import pytest

from cio_sync.infrastructure.executor import run_blocking


class TestRunBlocking:
    """Tests para run_blocking()."""

    @pytest.mark.asyncio
    async def test_runs_in_artifact_thread(self) -> None:
        """La funcion corre fuera del event loop, en un thread del pool dedicado."""
        name = await run_blocking(lambda: threading.current_thread().name)

        assert name.startswith("artifacts-")

    @pytest.mark.asyncio
    async def test_passes_args_and_kwargs(self) -> None:
        def join(a: str, b: str, sep: str = "") -> str:
            return f"{a}{sep}{b}"

        assert await run_blocking(join, "a", "b", sep="-") == "a-b"

    @pytest.mark.asyncio
    async def test_propagates_exception(self) -> None:
        def boom() -> None:
            raise ValueError("render fallo")

        with pytest.raises(ValueError, match="render fallo"):
            await run_blocking(boom)

    @pytest.mark.asyncio
    async def test_event_loop_stays_responsive(self) -> None:
        """Mientras un render bloquea, otras corutinas avanzan."""
        release = threading.Event()
        ticks: list[int] = []

        async def ticker() -> None:
            for i in range(3):
                ticks.append(i)
                await asyncio.sleep(0)
            release.set()

        await asyncio.gather(run_blocking(release.wait, 1), ticker())

        assert ticks == [0, 1, 2]

