import random
from typing import Annotated, ClassVar, Literal

from annotated_types import Gt
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._base_model import SimBaseModel
from .backend import RandomSource

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(SimBaseModel, BaseSettings):
    random_seed: int | None = Field(
        default_factory=lambda: random.randint(0, 2**32 - 1),
        description="Seed for the random source.  If `None`, every run differs.",
    )
    yield_every: Annotated[int, Gt(0)] = Field(
        50,
        description="Number of generated rows between cooperative yields when "
        "running asynchronously (see `DatasetGeneration.arun`).",
    )
    log_level: LogLevel = "INFO"
    show_progress: bool = Field(
        True, description="Show a progress bar when generating from the CLI."
    )

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        validate_assignment=True,
        # this allows any of these to be set via environment variables: MPFLUOR_<name>
        env_prefix="MPFLUOR_",
        env_nested_delimiter="__",
    )

    def random_source(self) -> RandomSource:
        return RandomSource(seed=self.random_seed)
