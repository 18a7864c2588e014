from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

import numpy as np
from annotated_types import Ge, Gt
from pydantic import Field

from mpfluor._logger import logger
from mpfluor.schema._base_model import FrozenModel
from mpfluor.schema.backend import RandomSource
from mpfluor.schema.detectors import NoiseModel, Photodiode
from mpfluor.schema.emission import FluorescenceModel
from mpfluor.schema.polymer import get_polymer
from mpfluor.schema.sample import LogNormalSizes

if TYPE_CHECKING:
    import numpy.typing as npt

    from mpfluor.schema.polymer import PolymerProfile


class Measurement(FrozenModel):
    """One simulated sensor reading and the statistics of its particle population."""

    n_particles: Annotated[int, Ge(0)]
    mean_size_um: float
    std_size_um: float
    total_analog_v: float
    noisy_analog_v: float
    digital_counts: Annotated[int, Ge(0)]
    background_v: float
    signal_to_noise: float


def size_statistics(sizes: npt.ArrayLike) -> tuple[float, float]:
    """Return (mean, population std) of `sizes`, or (0.0, 0.0) when empty."""
    sizes = np.asarray(sizes, dtype=float)
    if sizes.size == 0:
        return 0.0, 0.0
    return float(np.mean(sizes)), float(np.std(sizes))


class Background(FrozenModel):
    """Ambient (organic matter) fluorescence voltage, ``offset_v + span_v * U``."""

    offset_v: Annotated[float, Ge(0)] = 0.05
    span_v: Annotated[float, Ge(0)] = 0.1

    def sample(self, xp: RandomSource | None = None) -> float:
        xp = RandomSource.create(xp)
        return xp.uniform() * self.span_v + self.offset_v


class MeasurementGenerator(FrozenModel):
    """Compose sizes, fluorescence, background, noise and digitization.

    Per reading, uniforms are consumed in this order: particle sizes
    (two per particle), background (one), dye loading (one per particle),
    detector noise (four).
    """

    sizes: LogNormalSizes = Field(default_factory=LogNormalSizes)
    fluorescence: FluorescenceModel = Field(default_factory=FluorescenceModel)
    background: Background = Field(default_factory=Background)
    noise: NoiseModel = Field(default_factory=NoiseModel)
    detector: Photodiode = Field(default_factory=Photodiode)
    noise_floor_v: Annotated[float, Gt(0)] = Field(
        0.005, description="Reference noise floor used for the signal-to-noise ratio."
    )

    def generate(
        self,
        n: int,
        polymer: str | PolymerProfile,
        dye_conc: float,
        excitation_nm: float,
        xp: RandomSource | None = None,
    ) -> Measurement:
        """Simulate a single reading of `n` stained particles."""
        if n < 0:
            raise ValueError(f"Particle count must be non-negative, got {n}")
        xp = RandomSource.create(xp)
        profile = get_polymer(polymer)

        sizes = self.sizes.sample(n, xp)
        mean_size, std_size = size_statistics(sizes)
        background = self.background.sample(xp)
        signal = self.fluorescence.synthesize(
            sizes, profile, dye_conc, excitation_nm, self.detector, xp
        )
        total_analog = signal + background
        noisy = self.noise.apply(total_analog, self.detector, xp)
        if n == 0:
            logger.debug(f"Empty {profile} reading, background {background:.4f} V")

        return Measurement(
            n_particles=n,
            mean_size_um=mean_size,
            std_size_um=std_size,
            total_analog_v=total_analog,
            noisy_analog_v=noisy,
            digital_counts=self.detector.digitize(noisy),
            background_v=background,
            signal_to_noise=total_analog / self.noise_floor_v,
        )
