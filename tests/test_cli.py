from pathlib import Path

import pytest

from mpfluor import cli
from mpfluor.export import FILTRATION_FILENAME, SWEEP_FILENAME


def test_polymers(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["polymers"])
    out = capsys.readouterr().out
    for name in ("PE", "PP", "PS", "PET"):
        assert name in out


def test_measure(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["measure", "100", "PS", "--seed", "1", "--no-progress"])
    first = capsys.readouterr().out
    cli.main(["measure", "100", "PS", "--seed", "1", "--no-progress"])
    assert "digital_counts" in first
    assert capsys.readouterr().out == first


def test_measure_bad_polymer() -> None:
    with pytest.raises(SystemExit):
        cli.main(["measure", "100", "PVC"])


def test_generate(tmp_path: Path) -> None:
    cli.main(
        ["generate", "--seed", "3", "--output-dir", str(tmp_path), "--no-progress"]
    )
    sweep = (tmp_path / SWEEP_FILENAME).read_text().splitlines()
    filtration = (tmp_path / FILTRATION_FILENAME).read_text().splitlines()
    assert len(sweep) == 1008 + 1
    assert len(filtration) == 80 + 1
    assert (tmp_path / "generation.json").exists()


def test_generate_async_matches(tmp_path: Path) -> None:
    sync_dir, async_dir = tmp_path / "sync", tmp_path / "async"
    cli.main(
        ["generate", "--seed", "5", "--output-dir", str(sync_dir), "--no-progress"]
    )
    cli.main(
        ["generate", "--seed", "5", "--output-dir", str(async_dir), "--no-progress",
         "--async"]
    )
    for name in (SWEEP_FILENAME, FILTRATION_FILENAME):
        assert (sync_dir / name).read_bytes() == (async_dir / name).read_bytes()


def test_config_file(tmp_path: Path) -> None:
    config = tmp_path / "config.json"
    config.write_text(
        '{"filtration_grid": {"polymers": ["PS"], "initial_counts": [100], '
        '"replicates": 3}}'
    )
    out = tmp_path / "filt.csv"
    cli.main(
        ["filtration", "--config", str(config), "--seed", "2", "--output", str(out),
         "--no-progress"]
    )
    assert len(out.read_text().splitlines()) == 3 + 1


def test_sweep_default_name(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    cli.main(["sweep", "--seed", "4", "--no-progress"])
    assert (tmp_path / SWEEP_FILENAME).exists()
