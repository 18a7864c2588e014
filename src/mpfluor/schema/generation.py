import asyncio
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple

from pydantic import Field, PrivateAttr

from mpfluor._logger import logger

from ._base_model import SimBaseModel
from .backend import RandomSource
from .datasets import (
    FiltrationGrid,
    FiltrationRow,
    ProgressCallback,
    RetentionFilter,
    SweepGrid,
    SweepRow,
    iter_filtration,
    iter_sweep,
)
from .measurement import MeasurementGenerator
from .settings import Settings

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import TypeVar

    T = TypeVar("T")

# progress ranges of the two phases of a full run
SWEEP_SPAN = (0, 50)
FILTRATION_SPAN = (50, 50)


class GenerationResult(NamedTuple):
    sweep: list[SweepRow]
    filtration: list[FiltrationRow]


class DatasetGeneration(SimBaseModel):
    """Top level object: generates the sweep and filtration datasets."""

    generator: MeasurementGenerator = Field(default_factory=MeasurementGenerator)
    sweep_grid: SweepGrid = Field(default_factory=SweepGrid)
    filtration_grid: FiltrationGrid = Field(default_factory=FiltrationGrid)
    retention: RetentionFilter = Field(default_factory=RetentionFilter)
    settings: Settings = Field(default_factory=Settings)
    output_dir: Path | None = None

    _generating: bool = PrivateAttr(default=False)

    @property
    def generating(self) -> bool:
        """True while a generation pass is in progress."""
        return self._generating

    def random_source(self) -> RandomSource:
        return self.settings.random_source()

    @contextmanager
    def _guard(self) -> Iterator[None]:
        if self._generating:
            raise RuntimeError("A generation pass is already running.")
        self._generating = True
        try:
            yield
        finally:
            self._generating = False

    def iter_sweep(
        self,
        xp: RandomSource | None = None,
        progress: ProgressCallback | None = None,
    ) -> Iterator[SweepRow]:
        offset, span = SWEEP_SPAN
        return iter_sweep(
            self.generator,
            self.sweep_grid,
            xp or self.random_source(),
            progress,
            offset=offset,
            span=span,
        )

    def iter_filtration(
        self,
        xp: RandomSource | None = None,
        progress: ProgressCallback | None = None,
    ) -> Iterator[FiltrationRow]:
        offset, span = FILTRATION_SPAN
        return iter_filtration(
            self.generator,
            self.filtration_grid,
            self.retention,
            xp or self.random_source(),
            progress,
            offset=offset,
            span=span,
        )

    def run_sweep(
        self,
        xp: RandomSource | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[SweepRow]:
        """Return the full-factorial sweep table, in generation order."""
        with self._guard():
            return list(self.iter_sweep(xp, progress))

    def run_filtration(
        self,
        xp: RandomSource | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[FiltrationRow]:
        """Return the before/after filtration table, in generation order."""
        with self._guard():
            return list(self.iter_filtration(xp, progress))

    def run(self, progress: ProgressCallback | None = None) -> GenerationResult:
        """Generate both datasets from a single random source.

        The sweep is generated first, then the filtration trials.  This will
        also write both tables to disk if `output_dir` is set.
        """
        xp = self.random_source()
        with self._guard():
            result = GenerationResult(
                sweep=list(self.iter_sweep(xp, progress)),
                filtration=list(self.iter_filtration(xp, progress)),
            )
        self._finish(result, progress)
        return result

    async def arun(self, progress: ProgressCallback | None = None) -> GenerationResult:
        """Like `run`, but yields to the event loop every `settings.yield_every` rows.

        Consumes the same random sequence as `run`, so both return identical
        tables for the same seed.
        """
        xp = self.random_source()
        with self._guard():
            sweep = await self._acollect(self.iter_sweep(xp, progress))
            filtration = await self._acollect(self.iter_filtration(xp, progress))
        result = GenerationResult(sweep=sweep, filtration=filtration)
        self._finish(result, progress)
        return result

    async def _acollect(self, rows: "Iterable[T]") -> "list[T]":
        out = []
        for row in rows:
            out.append(row)
            if len(out) % self.settings.yield_every == 0:
                await asyncio.sleep(0)
        return out

    def _finish(
        self, result: GenerationResult, progress: ProgressCallback | None
    ) -> None:
        logger.info(
            f"Generated {len(result.sweep)} sweep rows and "
            f"{len(result.filtration)} filtration rows"
        )
        if progress is not None:
            progress(100)
        self._write(result)

    def _write(self, result: GenerationResult) -> None:
        if not self.output_dir:
            return
        from mpfluor.export import write_datasets

        write_datasets(result.sweep, result.filtration, self.output_dir)
        meta = Path(self.output_dir, "generation.json")
        meta.write_text(self.model_dump_json(indent=2), encoding="utf-8")
