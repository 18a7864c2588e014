from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Literal

from annotated_types import Gt, Interval
from pydantic import Field

from mpfluor.schema._base_model import FrozenModel

PolymerName = Literal["PE", "PP", "PS", "PET"]
Fraction = Annotated[float, Interval(ge=0, le=1)]


class PolymerProfile(FrozenModel):
    """Nile Red staining response of one polymer type.

    Attributes
    ----------
    name : str
        Polymer identifier (PE, PP, PS or PET).
    quantum_yield : float
        Fraction of absorbed excitation photons re-emitted as fluorescence, 0-1.
    binding_efficiency : float
        Fraction of the particle surface effectively stained by the dye, 0-1.
    baseline_fluorescence : float
        Fluorescence intensity of a reference particle, arbitrary units.
    size_coefficient : float
        Relative size scaling of the polymer.  Carried with the profile but not
        used by the fluorescence model.
    """

    name: PolymerName
    quantum_yield: Fraction
    binding_efficiency: Fraction
    baseline_fluorescence: Annotated[float, Gt(0)]
    size_coefficient: Annotated[float, Gt(0)] = Field(1.0)

    @property
    def emission_scale(self) -> float:
        """Product of the polymer-dependent terms of the photocurrent."""
        return self.baseline_fluorescence * self.quantum_yield * self.binding_efficiency

    def __str__(self) -> str:
        return self.name


PE = PolymerProfile(
    name="PE",
    quantum_yield=0.38,
    binding_efficiency=0.85,
    baseline_fluorescence=1200,
    size_coefficient=1.0,
)
PP = PolymerProfile(
    name="PP",
    quantum_yield=0.35,
    binding_efficiency=0.80,
    baseline_fluorescence=1100,
    size_coefficient=0.95,
)
PS = PolymerProfile(
    name="PS",
    quantum_yield=0.42,
    binding_efficiency=0.90,
    baseline_fluorescence=1400,
    size_coefficient=1.05,
)
PET = PolymerProfile(
    name="PET",
    quantum_yield=0.33,
    binding_efficiency=0.75,
    baseline_fluorescence=1000,
    size_coefficient=0.90,
)

# insertion order is the generation order of both datasets
POLYMERS: Mapping[str, PolymerProfile] = MappingProxyType(
    {p.name: p for p in (PE, PP, PS, PET)}
)


def get_polymer(name: "str | PolymerProfile") -> PolymerProfile:
    """Return the profile registered under `name`."""
    if isinstance(name, PolymerProfile):
        return name
    try:
        return POLYMERS[name]
    except KeyError:
        raise KeyError(
            f"Unknown polymer {name!r}. Available: {', '.join(POLYMERS)}"
        ) from None
