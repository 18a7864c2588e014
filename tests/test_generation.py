import asyncio
import json
import logging
import pickle
from pathlib import Path

import pytest

import mpfluor.schema as ms


def test_generation_json_schema() -> None:
    assert isinstance(ms.DatasetGeneration.model_json_schema(), dict)


def test_model_dump(gen1: ms.DatasetGeneration) -> None:
    assert isinstance(gen1.model_dump(mode="python"), dict)
    assert isinstance(gen1.model_dump(mode="json"), dict)
    assert isinstance(gen1.model_dump_json(), str)


def test_run(small_gen: ms.DatasetGeneration) -> None:
    result = small_gen.run()
    assert len(result.sweep) == len(small_gen.sweep_grid) == 16
    assert len(result.filtration) == len(small_gen.filtration_grid) == 8
    assert not small_gen.generating


@pytest.mark.parametrize("seed", [None, 100])
def test_run_reproducible(small_gen: ms.DatasetGeneration, seed: int | None) -> None:
    small_gen.settings.random_seed = seed
    out1 = small_gen.run()
    out2 = small_gen.run()
    if seed is None:
        assert out1.sweep != out2.sweep
    else:
        assert out1 == out2


def test_run_shares_one_source(small_gen: ms.DatasetGeneration) -> None:
    # the filtration phase continues the sweep's random sequence
    result = small_gen.run()
    alone = small_gen.run_filtration()
    assert result.sweep == small_gen.run_sweep()
    assert result.filtration != alone


def test_arun_matches_run(small_gen: ms.DatasetGeneration) -> None:
    assert asyncio.run(small_gen.arun()) == small_gen.run()


def test_arun_yields(small_gen: ms.DatasetGeneration) -> None:
    ticks: list[int] = []

    async def _ticker() -> None:
        while True:
            ticks.append(1)
            await asyncio.sleep(0)

    async def _main() -> ms.GenerationResult:
        task = asyncio.create_task(_ticker())
        await asyncio.sleep(0)
        start = len(ticks)
        result = await small_gen.arun()
        task.cancel()
        # 16 + 8 rows with a yield every 3 rows
        assert len(ticks) - start >= 16 // 3 + 8 // 3
        return result

    assert len(asyncio.run(_main()).sweep) == 16


def test_progress(small_gen: ms.DatasetGeneration) -> None:
    seen: list[int] = []
    small_gen.run(progress=seen.append)
    assert seen == sorted(seen)
    assert seen[len(small_gen.sweep_grid) - 1] == 50
    assert seen[-1] == 100
    assert all(0 <= p <= 100 for p in seen)


def test_reentrant_run_rejected(small_gen: ms.DatasetGeneration) -> None:
    def _progress(_: int) -> None:
        with pytest.raises(RuntimeError, match="already running"):
            small_gen.run_sweep()

    small_gen.run_filtration(progress=_progress)
    assert not small_gen.generating


def test_output_dir(small_gen: ms.DatasetGeneration, tmp_path: Path) -> None:
    small_gen.output_dir = tmp_path / "out"
    small_gen.run()
    files = sorted(p.name for p in small_gen.output_dir.iterdir())
    assert files == [
        "generation.json",
        "microplastic_filtration_dataset.csv",
        "microplastic_main_dataset.csv",
    ]
    meta = json.loads((small_gen.output_dir / "generation.json").read_text())
    assert meta["settings"]["random_seed"] == 7
    restored = ms.DatasetGeneration.model_validate(meta)
    assert restored.sweep_grid == small_gen.sweep_grid


def test_from_json() -> None:
    json_string = """
    {
        "sweep_grid": {
            "polymers": ["PS"],
            "particle_counts": [10, 20],
            "replicates": 1
        },
        "generator": {
            "detector": {"bit_depth": 16, "full_scale_voltage": 3.3},
            "sizes": {"mean_um": 100}
        },
        "settings": {"random_seed": 1}
    }
    """
    gen = ms.DatasetGeneration.model_validate_json(json_string)
    assert gen.generator.detector.max_intensity == 65535
    assert len(gen.run_sweep()) == 2 * 4 * 3


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MPFLUOR_RANDOM_SEED", "1234")
    monkeypatch.setenv("MPFLUOR_YIELD_EVERY", "10")
    settings = ms.Settings()
    assert settings.random_seed == 1234
    assert settings.yield_every == 10


def test_invalid_settings() -> None:
    with pytest.raises(ValueError):
        ms.Settings(yield_every=0)


def test_logging(
    small_gen: ms.DatasetGeneration, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG, logger="mpfluor")
    small_gen.run()
    assert "Generating sweep dataset: 16 readings" in caplog.text
    assert "Generating filtration dataset: 8 trials" in caplog.text
    assert "PP trial 0:" in caplog.text


def test_pickle(gen1: ms.DatasetGeneration) -> None:
    pickled = pickle.dumps(gen1)
    assert pickle.loads(pickled) == gen1
    assert gen1.model_copy(deep=True) is not gen1
