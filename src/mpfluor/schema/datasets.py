"""Full-factorial sweep and paired before/after filtration datasets."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Annotated

import numpy as np
from annotated_types import Ge, Gt, Interval, MinLen
from pydantic import Field

from mpfluor._logger import logger, logging_indented
from mpfluor.schema._base_model import FrozenModel
from mpfluor.schema.backend import RandomSource
from mpfluor.schema.polymer import POLYMERS, PolymerName

if TYPE_CHECKING:
    import numpy.typing as npt

    from mpfluor.schema.measurement import MeasurementGenerator

ProgressCallback = Callable[[int], None]
PositiveInt = Annotated[int, Gt(0)]
PositiveFloat = Annotated[float, Gt(0)]
DEFAULT_POLYMERS: tuple[PolymerName, ...] = tuple(POLYMERS)  # type: ignore[assignment]


def _percent(done: int, total: int, offset: int = 0, span: int = 100) -> int:
    # round half up
    return offset + int(done * span / total + 0.5)


# ---------------------------------------------------------------------------
# Sweep
# ---------------------------------------------------------------------------


class SweepGrid(FrozenModel):
    """Condition grid of the main dataset.

    Iteration order is polymer, particle count, dye concentration,
    excitation wavelength, replicate (innermost).
    """

    polymers: Annotated[tuple[PolymerName, ...], MinLen(1)] = DEFAULT_POLYMERS
    particle_counts: Annotated[tuple[PositiveInt, ...], MinLen(1)] = (
        10, 25, 50, 100, 250, 500, 1000,
    )
    dye_concs: Annotated[tuple[PositiveFloat, ...], MinLen(1)] = Field(
        (0.5, 1.0, 5.0, 10.0), description="Nile Red concentrations, µg/mL"
    )
    excitation_nms: Annotated[tuple[PositiveFloat, ...], MinLen(1)] = Field(
        (450, 488, 520), description="Excitation wavelengths, nm"
    )
    replicates: PositiveInt = 3

    def __len__(self) -> int:
        return (
            len(self.polymers)
            * len(self.particle_counts)
            * len(self.dye_concs)
            * len(self.excitation_nms)
            * self.replicates
        )

    def conditions(self) -> Iterator[tuple[str, int, float, float, int]]:
        """Yield (polymer, count, dye_conc, excitation_nm, replicate) tuples.

        Replicates are numbered from 1.
        """
        yield from itertools.product(
            self.polymers,
            self.particle_counts,
            self.dye_concs,
            self.excitation_nms,
            range(1, self.replicates + 1),
        )


class SweepRow(FrozenModel):
    sample_id: Annotated[int, Ge(0)]
    polymer_type: str
    particle_count: int
    nile_red_conc_ugmL: float
    excitation_nm: float
    replicate: int
    mean_particle_size_um: float
    std_particle_size_um: float
    total_analog_voltage: float
    noisy_analog_voltage: float
    digital_counts: int
    background_voltage: float
    signal_to_noise_ratio: float


def iter_sweep(
    generator: MeasurementGenerator,
    grid: SweepGrid | None = None,
    xp: RandomSource | None = None,
    progress: ProgressCallback | None = None,
    *,
    offset: int = 0,
    span: int = 100,
) -> Iterator[SweepRow]:
    """Yield one `SweepRow` per grid condition, in generation order.

    `progress` receives an integer percentage in ``[offset, offset + span]``
    after every row.
    """
    grid = SweepGrid() if grid is None else grid
    xp = RandomSource.create(xp)
    total = len(grid)
    logger.info(f"Generating sweep dataset: {total} readings")

    for sample_id, (polymer, count, conc, wvl, rep) in enumerate(grid.conditions()):
        m = generator.generate(count, polymer, conc, wvl, xp)
        yield SweepRow(
            sample_id=sample_id,
            polymer_type=polymer,
            particle_count=count,
            nile_red_conc_ugmL=conc,
            excitation_nm=wvl,
            replicate=rep,
            mean_particle_size_um=m.mean_size_um,
            std_particle_size_um=m.std_size_um,
            total_analog_voltage=m.total_analog_v,
            noisy_analog_voltage=m.noisy_analog_v,
            digital_counts=m.digital_counts,
            background_voltage=m.background_v,
            signal_to_noise_ratio=m.signal_to_noise,
        )
        if progress is not None:
            progress(_percent(sample_id + 1, total, offset, span))


def build_sweep(
    generator: MeasurementGenerator,
    grid: SweepGrid | None = None,
    xp: RandomSource | None = None,
    progress: ProgressCallback | None = None,
    **kwargs: int,
) -> list[SweepRow]:
    return list(iter_sweep(generator, grid, xp, progress, **kwargs))


# ---------------------------------------------------------------------------
# Filtration
# ---------------------------------------------------------------------------


class RetentionFilter(FrozenModel):
    """Size-selective filter.

    A particle is captured with probability
    ``efficiency * (1 - exp(-size / size_scale_um))``; larger particles are
    removed more often, approaching `efficiency` for very large sizes.
    """

    efficiency: Annotated[float, Interval(ge=0, le=1)] = 0.95
    size_scale_um: PositiveFloat = 1000

    def retention_probability(self, sizes: npt.ArrayLike) -> npt.NDArray:
        sizes = np.asarray(sizes, dtype=float)
        return self.efficiency * (1 - np.exp(-sizes / self.size_scale_um))

    def passes(
        self, sizes: npt.ArrayLike, xp: RandomSource | None = None
    ) -> npt.NDArray:
        """Boolean mask of particles that pass through (one uniform each)."""
        xp = RandomSource.create(xp)
        prob = self.retention_probability(sizes)
        return xp.uniform(prob.shape) > prob

    def apply(
        self, sizes: npt.ArrayLike, xp: RandomSource | None = None
    ) -> npt.NDArray:
        """Return the sizes of the particles remaining in the filtrate."""
        sizes = np.asarray(sizes, dtype=float)
        return sizes[self.passes(sizes, xp)]


class FiltrationGrid(FrozenModel):
    """Trial grid of the filtration dataset: polymer, initial count, replicate."""

    polymers: Annotated[tuple[PolymerName, ...], MinLen(1)] = DEFAULT_POLYMERS
    initial_counts: Annotated[tuple[PositiveInt, ...], MinLen(1)] = (
        100, 500, 1000, 5000,
    )
    replicates: PositiveInt = 5
    dye_conc: PositiveFloat = Field(5.0, description="µg/mL")
    excitation_nm: PositiveFloat = Field(488, description="nm")

    def __len__(self) -> int:
        return len(self.polymers) * len(self.initial_counts) * self.replicates

    def trials(self) -> Iterator[tuple[str, int, int]]:
        yield from itertools.product(
            self.polymers, self.initial_counts, range(1, self.replicates + 1)
        )


class FiltrationRow(FrozenModel):
    sample_id: Annotated[int, Ge(0)]
    polymer_type: str
    initial_particle_count: int
    final_particle_count: int
    before_digital_counts: int
    after_digital_counts: int
    before_analog_voltage: float
    after_analog_voltage: float
    removal_efficiency: float = Field(description="percent")
    replicate: int


def removal_efficiency(initial: int, final: int) -> float:
    """Percentage of particles removed by the filter."""
    return (initial - final) / initial * 100


def iter_filtration(
    generator: MeasurementGenerator,
    grid: FiltrationGrid | None = None,
    retention: RetentionFilter | None = None,
    xp: RandomSource | None = None,
    progress: ProgressCallback | None = None,
    *,
    offset: int = 0,
    span: int = 100,
) -> Iterator[FiltrationRow]:
    """Yield one before/after `FiltrationRow` per trial, in generation order.

    The filtered population is an independent size draw of the same initial
    count, not a subset of the particles behind the "before" reading.
    """
    grid = FiltrationGrid() if grid is None else grid
    retention = RetentionFilter() if retention is None else retention
    xp = RandomSource.create(xp)
    total = len(grid)
    logger.info(f"Generating filtration dataset: {total} trials")

    for sample_id, (polymer, initial, rep) in enumerate(grid.trials()):
        before = generator.generate(
            initial, polymer, grid.dye_conc, grid.excitation_nm, xp
        )
        batch = generator.sizes.sample(initial, xp)
        final = int(retention.apply(batch, xp).size)
        after = generator.generate(
            final, polymer, grid.dye_conc, grid.excitation_nm, xp
        )
        with logging_indented():
            logger.debug(f"{polymer} trial {sample_id}: {initial} -> {final}")

        yield FiltrationRow(
            sample_id=sample_id,
            polymer_type=polymer,
            initial_particle_count=initial,
            final_particle_count=final,
            before_digital_counts=before.digital_counts,
            after_digital_counts=after.digital_counts,
            before_analog_voltage=before.total_analog_v,
            after_analog_voltage=after.total_analog_v,
            removal_efficiency=removal_efficiency(initial, final),
            replicate=rep,
        )
        if progress is not None:
            progress(_percent(sample_id + 1, total, offset, span))


def build_filtration(
    generator: MeasurementGenerator,
    grid: FiltrationGrid | None = None,
    retention: RetentionFilter | None = None,
    xp: RandomSource | None = None,
    progress: ProgressCallback | None = None,
    **kwargs: int,
) -> list[FiltrationRow]:
    return list(iter_filtration(generator, grid, retention, xp, progress, **kwargs))
