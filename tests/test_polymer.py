import pytest

from mpfluor.schema import PE, PET, POLYMERS, PP, PS, PolymerProfile, get_polymer


def test_four_profiles() -> None:
    assert list(POLYMERS) == ["PE", "PP", "PS", "PET"]
    assert POLYMERS["PS"] is PS


@pytest.mark.parametrize(
    ("profile", "qy", "binding", "baseline", "size_coef"),
    [
        (PE, 0.38, 0.85, 1200, 1.0),
        (PP, 0.35, 0.80, 1100, 0.95),
        (PS, 0.42, 0.90, 1400, 1.05),
        (PET, 0.33, 0.75, 1000, 0.90),
    ],
    ids=str,
)
def test_profile_values(
    profile: PolymerProfile,
    qy: float,
    binding: float,
    baseline: float,
    size_coef: float,
) -> None:
    assert profile.quantum_yield == qy
    assert profile.binding_efficiency == binding
    assert profile.baseline_fluorescence == baseline
    assert profile.size_coefficient == size_coef


def test_profiles_immutable() -> None:
    with pytest.raises(ValueError):
        PE.quantum_yield = 0.9  # type: ignore[misc]
    with pytest.raises(TypeError):
        POLYMERS["PE"] = PS  # type: ignore[index]


def test_invalid_profile() -> None:
    with pytest.raises(ValueError):
        PolymerProfile(
            name="PE", quantum_yield=1.2, binding_efficiency=0.5,
            baseline_fluorescence=100,
        )
    with pytest.raises(ValueError):
        PolymerProfile(
            name="PVC", quantum_yield=0.2, binding_efficiency=0.5,
            baseline_fluorescence=100,
        )


def test_get_polymer() -> None:
    assert get_polymer("PET") is PET
    assert get_polymer(PP) is PP
    with pytest.raises(KeyError):
        get_polymer("nylon")


@pytest.mark.parametrize("profile", list(POLYMERS.values()), ids=str)
def test_emission_scale(profile: PolymerProfile) -> None:
    expected = (
        profile.baseline_fluorescence
        * profile.quantum_yield
        * profile.binding_efficiency
    )
    assert profile.emission_scale == pytest.approx(expected)
