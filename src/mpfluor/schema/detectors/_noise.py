from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, NamedTuple

import numpy as np
from annotated_types import Ge

from mpfluor.schema._base_model import FrozenModel
from mpfluor.schema.backend import RandomSource

if TYPE_CHECKING:
    from ._photodiode import Photodiode

NonNegativeFloat = Annotated[float, Ge(0)]


class NoiseTerms(NamedTuple):
    shot: float
    dark: float
    johnson: float
    flicker: float

    @property
    def total(self) -> float:
        return self.shot + self.dark + self.johnson + self.flicker


class NoiseModel(FrozenModel):
    """Additive, zero-mean, uniformly distributed detector noise.

    Each term is drawn as ``(U - 0.5) * scale`` with a fresh uniform ``U``.

    Attributes
    ----------
    shot_coefficient : float
        Shot noise scale per sqrt(V); the scale is ``coef * sqrt(|signal|)``.
    dark_fraction : float
        Dark noise scale as a fraction of the dark voltage of the detector.
    johnson_v : float
        Thermal (Johnson) noise scale in V.
    flicker_v : float
        Flicker (1/f) noise scale in V.
    """

    shot_coefficient: NonNegativeFloat = 0.002
    dark_fraction: NonNegativeFloat = 0.2
    johnson_v: NonNegativeFloat = 0.002
    flicker_v: NonNegativeFloat = 0.001

    def scales(self, signal: float, detector: Photodiode) -> NoiseTerms:
        return NoiseTerms(
            shot=self.shot_coefficient * float(np.sqrt(abs(signal))),
            dark=detector.dark_voltage * self.dark_fraction,
            johnson=self.johnson_v,
            flicker=self.flicker_v,
        )

    def sample(
        self, signal: float, detector: Photodiode, xp: RandomSource | None = None
    ) -> NoiseTerms:
        """Draw one perturbation per noise source (four uniforms, in field order)."""
        xp = RandomSource.create(xp)
        draws = xp.uniform(4)
        scales = self.scales(signal, detector)
        return NoiseTerms(*(float((u - 0.5) * s) for u, s in zip(draws, scales)))

    def apply(
        self, signal: float, detector: Photodiode, xp: RandomSource | None = None
    ) -> float:
        """Return `signal` plus the sum of all noise terms.  No clipping."""
        return signal + self.sample(signal, detector, xp).total
