"""Tabular export of generated datasets."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from mpfluor._logger import logger
from mpfluor.schema.datasets import FiltrationRow, SweepRow

if TYPE_CHECKING:
    from mpfluor.schema._base_model import FrozenModel

SWEEP_FILENAME = "microplastic_main_dataset.csv"
FILTRATION_FILENAME = "microplastic_filtration_dataset.csv"

# fixed decimal places per column; other float columns are written compactly
DECIMALS: Mapping[str, int] = {
    "mean_particle_size_um": 2,
    "std_particle_size_um": 2,
    "total_analog_voltage": 6,
    "noisy_analog_voltage": 6,
    "background_voltage": 6,
    "signal_to_noise_ratio": 2,
    "before_analog_voltage": 6,
    "after_analog_voltage": 6,
    "removal_efficiency": 2,
}
LABEL_COLUMNS = ("nile_red_conc_ugmL", "excitation_nm")


def _check_extension(path: Path) -> Path:
    if path.suffix != ".csv":
        raise ValueError(f"Unsupported extension {path.suffix!r}: expected .csv")
    return path


def to_dataframe(
    rows: Sequence[FrozenModel], row_type: type[FrozenModel] | None = None
) -> pd.DataFrame:
    """Return `rows` as a DataFrame, columns in field order.

    `row_type` supplies the columns when `rows` is empty.
    """
    if row_type is None:
        row_type = type(rows[0]) if rows else SweepRow
    columns = list(row_type.model_fields)
    return pd.DataFrame([r.model_dump() for r in rows], columns=columns)


def format_table(df: pd.DataFrame) -> pd.DataFrame:
    """Render numeric columns as strings at their reporting precision."""
    out = df.copy()
    for col in out.columns:
        if (decimals := DECIMALS.get(col)) is not None:
            out[col] = out[col].map(lambda v, d=decimals: f"{v:.{d}f}")
        elif col in LABEL_COLUMNS:
            out[col] = out[col].map(lambda v: f"{v:.15g}")
    return out


def write_csv(
    rows: Sequence[FrozenModel],
    path: str | Path,
    row_type: type[FrozenModel] | None = None,
) -> Path:
    """Write `rows` to a CSV file at `path` and return the path."""
    path = _check_extension(Path(path))
    path.parent.mkdir(parents=True, exist_ok=True)
    format_table(to_dataframe(rows, row_type)).to_csv(
        path, index=False, lineterminator="\n"
    )
    logger.info(f"Wrote {len(rows)} rows to {path}")
    return path


def write_datasets(
    sweep: Sequence[SweepRow],
    filtration: Sequence[FiltrationRow],
    output_dir: str | Path,
) -> tuple[Path, Path]:
    """Write both datasets to `output_dir` under their default file names."""
    output_dir = Path(output_dir)
    return (
        write_csv(sweep, output_dir / SWEEP_FILENAME, SweepRow),
        write_csv(filtration, output_dir / FILTRATION_FILENAME, FiltrationRow),
    )
