from .backend import RandomSource, ReplaySource
from .datasets import (
    FiltrationGrid,
    FiltrationRow,
    RetentionFilter,
    SweepGrid,
    SweepRow,
    build_filtration,
    build_sweep,
    iter_filtration,
    iter_sweep,
)
from .detectors import NoiseModel, Photodiode
from .emission import FluorescenceModel
from .generation import DatasetGeneration, GenerationResult
from .measurement import Background, Measurement, MeasurementGenerator
from .polymer import PE, PET, POLYMERS, PP, PS, PolymerProfile, get_polymer
from .sample import LogNormalSizes
from .settings import Settings

__all__ = [
    "PE",
    "PET",
    "POLYMERS",
    "PP",
    "PS",
    "Background",
    "DatasetGeneration",
    "FiltrationGrid",
    "FiltrationRow",
    "FluorescenceModel",
    "GenerationResult",
    "LogNormalSizes",
    "Measurement",
    "MeasurementGenerator",
    "NoiseModel",
    "Photodiode",
    "PolymerProfile",
    "RandomSource",
    "ReplaySource",
    "RetentionFilter",
    "Settings",
    "SweepGrid",
    "SweepRow",
    "build_filtration",
    "build_sweep",
    "get_polymer",
    "iter_filtration",
    "iter_sweep",
]
