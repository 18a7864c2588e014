from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

import numpy as np
from annotated_types import Gt
from pydantic import Field, model_validator

from mpfluor.schema._base_model import FrozenModel
from mpfluor.schema.backend import RandomSource

if TYPE_CHECKING:
    from typing import Self

    import numpy.typing as npt


def box_muller(u1: npt.NDArray, u2: npt.NDArray) -> npt.NDArray:
    """Map pairs of uniform draws to standard-normal variates.

    A zero `u1` produces an infinite variate rather than a warning.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.sqrt(-2 * np.log(u1)) * np.cos(2 * np.pi * u2)


class LogNormalSizes(FrozenModel):
    """Log-normal particle diameter distribution, clamped to a physical range.

    Attributes
    ----------
    mean_um : float
        Median diameter in µm (``exp(mu)`` of the underlying normal).
    sigma : float
        Log-space standard deviation (shape parameter).
    min_um, max_um : float
        Every sampled diameter is clamped into ``[min_um, max_um]``.
    """

    mean_um: Annotated[float, Gt(0)] = 500
    sigma: Annotated[float, Gt(0)] = 0.6
    min_um: Annotated[float, Gt(0)] = Field(5, description="µm")
    max_um: Annotated[float, Gt(0)] = Field(5000, description="µm")

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if self.min_um > self.max_um:
            raise ValueError("min_um must not exceed max_um")
        return self

    def sample(self, n: int, xp: RandomSource | None = None) -> npt.NDArray:
        """Draw `n` particle diameters (µm).

        Two uniforms are consumed per particle, in (u1, u2) order.  ``n == 0``
        returns an empty array.
        """
        xp = RandomSource.create(xp)
        draws = xp.uniform((n, 2))
        z = box_muller(draws[:, 0], draws[:, 1])
        sizes = np.exp(np.log(self.mean_um) + self.sigma * z)
        return np.clip(sizes, self.min_um, self.max_um)
