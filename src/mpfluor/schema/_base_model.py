from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class SimBaseModel(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(
        validate_assignment=True,
        validate_default=True,
    )


class FrozenModel(SimBaseModel):
    """Immutable, hashable model for process-wide constants and derived records."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        validate_default=True,
        frozen=True,
    )
