"""Fluorescence signal of a stained particle population at the photodiode."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

import numpy as np
from annotated_types import Ge, Gt

from mpfluor.schema._base_model import FrozenModel
from mpfluor.schema.backend import RandomSource

if TYPE_CHECKING:
    import numpy.typing as npt

    from mpfluor.schema.detectors import Photodiode
    from mpfluor.schema.polymer import PolymerProfile

PositiveFloat = Annotated[float, Gt(0)]


class FluorescenceModel(FrozenModel):
    """Nile Red fluorescence response of a particle population.

    Attributes
    ----------
    half_saturation_ugml : float
        Dye concentration (µg/mL) at which binding reaches half saturation.
    peak_excitation_nm : float
        Excitation wavelength of maximum efficiency.
    excitation_width_nm : float
        Standard deviation of the Gaussian excitation efficiency curve.
    reference_size_um : float
        Diameter at which the relative intensity of a particle is one.
    loading_min, loading_span : float
        Per-particle dye loading factor is ``loading_min + loading_span * U``.
    amps_per_unit : float
        Converts arbitrary intensity units into photocurrent (A).
    """

    half_saturation_ugml: PositiveFloat = 2.0
    peak_excitation_nm: PositiveFloat = 550
    excitation_width_nm: PositiveFloat = 40
    reference_size_um: PositiveFloat = 500
    loading_min: Annotated[float, Ge(0)] = 0.85
    loading_span: Annotated[float, Ge(0)] = 0.3
    amps_per_unit: PositiveFloat = 1e-9

    def concentration_factor(self, dye_conc: float) -> float:
        """Saturating binding curve; 0 at zero concentration, approaching 1."""
        return dye_conc / (dye_conc + self.half_saturation_ugml)

    def wavelength_factor(self, excitation_nm: float) -> float:
        """Gaussian excitation efficiency, 1 at the peak wavelength."""
        return float(
            np.exp(
                -((excitation_nm - self.peak_excitation_nm) ** 2)
                / (2 * self.excitation_width_nm**2)
            )
        )

    def relative_intensity(
        self, sizes: npt.ArrayLike, xp: RandomSource | None = None
    ) -> npt.NDArray:
        """Surface-area scaling with a random dye loading factor per particle."""
        xp = RandomSource.create(xp)
        sizes = np.asarray(sizes, dtype=float)
        loading = self.loading_min + xp.uniform(sizes.shape) * self.loading_span
        return (sizes / self.reference_size_um) ** 2 * loading

    def photocurrents(
        self,
        sizes: npt.ArrayLike,
        polymer: PolymerProfile,
        dye_conc: float,
        excitation_nm: float,
        detector: Photodiode,
        xp: RandomSource | None = None,
    ) -> npt.NDArray:
        """Per-particle photocurrent (A)."""
        return (
            polymer.emission_scale
            * self.relative_intensity(sizes, xp)
            * self.concentration_factor(dye_conc)
            * self.wavelength_factor(excitation_nm)
            * detector.responsivity
            * self.amps_per_unit
        )

    def synthesize(
        self,
        sizes: npt.ArrayLike,
        polymer: PolymerProfile,
        dye_conc: float,
        excitation_nm: float,
        detector: Photodiode,
        xp: RandomSource | None = None,
    ) -> float:
        """Return the aggregate pre-noise voltage (V) of all particles.

        Consumes one uniform per particle.  An empty population yields 0.0.
        """
        currents = self.photocurrents(
            sizes, polymer, dye_conc, excitation_nm, detector, xp
        )
        return float(np.sum(detector.current_to_voltage(currents)))
