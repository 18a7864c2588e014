"""Synthetic photodiode datasets for Nile Red stained microplastics."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mpfluor")
except PackageNotFoundError:
    __version__ = "uninstalled"

from .schema import DatasetGeneration, MeasurementGenerator

__all__ = ["DatasetGeneration", "MeasurementGenerator", "__version__"]
