"""Command line interface for generating datasets.

python -m mpfluor --help
"""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from rich import print
from rich.table import Table
from tqdm import tqdm

from mpfluor._logger import configure_logging
from mpfluor.export import FILTRATION_FILENAME, SWEEP_FILENAME, write_csv
from mpfluor.schema import POLYMERS, DatasetGeneration, FiltrationRow, SweepRow


def _load(args: argparse.Namespace) -> DatasetGeneration:
    if args.config:
        gen = DatasetGeneration.model_validate_json(
            Path(args.config).read_text(encoding="utf-8")
        )
    else:
        gen = DatasetGeneration()
    if args.seed is not None:
        gen.settings.random_seed = args.seed
    if args.no_progress:
        gen.settings.show_progress = False
    configure_logging(gen.settings.log_level)
    return gen


@contextmanager
def _progress_bar(enabled: bool) -> Iterator[Callable[[int], None]]:
    with tqdm(total=100, unit="%", disable=not enabled) as pbar:

        def _update(percent: int) -> None:
            pbar.update(percent - pbar.n)

        yield _update


def _generate(args: argparse.Namespace) -> None:
    gen = _load(args)
    gen.output_dir = Path(args.output_dir)
    with _progress_bar(gen.settings.show_progress) as progress:
        if args.use_async:
            result = asyncio.run(gen.arun(progress))
        else:
            result = gen.run(progress)
    print(
        f"[green]Generated {len(result.sweep)} sweep rows and "
        f"{len(result.filtration)} filtration rows in {gen.output_dir}[/green]"
    )


def _sweep(args: argparse.Namespace) -> None:
    gen = _load(args)
    with _progress_bar(gen.settings.show_progress) as progress:
        rows = gen.run_sweep(progress=progress)
    path = write_csv(rows, args.output or SWEEP_FILENAME, SweepRow)
    print(f"Wrote {len(rows)} rows to {path}")


def _filtration(args: argparse.Namespace) -> None:
    gen = _load(args)
    with _progress_bar(gen.settings.show_progress) as progress:
        rows = gen.run_filtration(progress=progress)
    path = write_csv(rows, args.output or FILTRATION_FILENAME, FiltrationRow)
    print(f"Wrote {len(rows)} rows to {path}")


def _polymers(args: argparse.Namespace) -> None:
    table = Table(title="Polymer profiles")
    for col in ("polymer", "quantum yield", "binding eff.", "baseline", "size coef."):
        table.add_column(col, justify="right")
    for p in POLYMERS.values():
        table.add_row(
            p.name,
            f"{p.quantum_yield:.2f}",
            f"{p.binding_efficiency:.2f}",
            f"{p.baseline_fluorescence:g}",
            f"{p.size_coefficient:.2f}",
        )
    print(table)


def _measure(args: argparse.Namespace) -> None:
    gen = _load(args)
    m = gen.generator.generate(
        args.n, args.polymer, args.dye, args.wavelength, gen.random_source()
    )
    print(m.model_dump())


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--seed", type=int, help="Random seed.")
    parser.add_argument(
        "--config", help="JSON file describing a DatasetGeneration to run."
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Hide the progress bar."
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate synthetic photodiode datasets of stained microplastics."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # both datasets
    generate = subparsers.add_parser("generate", help="Generate both datasets.")
    _add_common(generate)
    generate.add_argument(
        "--output-dir", default=".", help="Directory to write the CSV files to."
    )
    generate.add_argument(
        "--async",
        dest="use_async",
        action="store_true",
        help="Generate cooperatively on an asyncio event loop.",
    )
    generate.set_defaults(func=_generate)

    # single tables
    sweep = subparsers.add_parser("sweep", help="Generate the sweep dataset.")
    _add_common(sweep)
    sweep.add_argument("--output", help=f"CSV file (default: {SWEEP_FILENAME}).")
    sweep.set_defaults(func=_sweep)

    filtration = subparsers.add_parser(
        "filtration", help="Generate the filtration dataset."
    )
    _add_common(filtration)
    filtration.add_argument(
        "--output", help=f"CSV file (default: {FILTRATION_FILENAME})."
    )
    filtration.set_defaults(func=_filtration)

    # polymer profiles
    polymers = subparsers.add_parser("polymers", help="Show the polymer profiles.")
    polymers.set_defaults(func=_polymers)

    # single reading
    measure = subparsers.add_parser("measure", help="Simulate a single reading.")
    _add_common(measure)
    measure.add_argument("n", type=int, help="Number of particles.")
    measure.add_argument("polymer", choices=list(POLYMERS), help="Polymer type.")
    measure.add_argument(
        "--dye", type=float, default=5.0, help="Nile Red concentration (µg/mL)."
    )
    measure.add_argument(
        "--wavelength", type=float, default=488, help="Excitation wavelength (nm)."
    )
    measure.set_defaults(func=_measure)

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the mpfluor CLI."""
    args = parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
