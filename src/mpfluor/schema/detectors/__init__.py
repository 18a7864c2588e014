from ._noise import NoiseModel, NoiseTerms
from ._photodiode import Photodiode

__all__ = ["NoiseModel", "NoiseTerms", "Photodiode"]
