import pytest

import mpfluor.schema as ms

SMALL_SWEEP = ms.SweepGrid(
    polymers=("PE", "PS"),
    particle_counts=(10, 100),
    dye_concs=(1.0, 5.0),
    excitation_nms=(488,),
    replicates=2,
)
SMALL_FILTRATION = ms.FiltrationGrid(
    polymers=("PP", "PET"), initial_counts=(100, 500), replicates=2
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("RANDOM_SEED", "YIELD_EVERY", "LOG_LEVEL", "SHOW_PROGRESS"):
        monkeypatch.delenv(f"MPFLUOR_{name}", raising=False)


@pytest.fixture
def generator() -> ms.MeasurementGenerator:
    return ms.MeasurementGenerator()


@pytest.fixture
def gen1() -> ms.DatasetGeneration:
    return ms.DatasetGeneration(settings=ms.Settings(random_seed=100))


@pytest.fixture
def small_gen() -> ms.DatasetGeneration:
    return ms.DatasetGeneration(
        sweep_grid=SMALL_SWEEP,
        filtration_grid=SMALL_FILTRATION,
        settings=ms.Settings(random_seed=7, yield_every=3),
    )


@pytest.fixture(scope="module")
def sweep_rows() -> list[ms.SweepRow]:
    gen = ms.DatasetGeneration(settings=ms.Settings(random_seed=1))
    return gen.run_sweep()


@pytest.fixture(scope="module")
def filtration_rows() -> list[ms.FiltrationRow]:
    gen = ms.DatasetGeneration(settings=ms.Settings(random_seed=1))
    return gen.run_filtration()
