from __future__ import annotations

import itertools
from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from collections.abc import Iterable


class RandomSource:
    """Source of uniform(0, 1) draws shared by every stochastic component.

    All randomness in a generation run flows through :meth:`uniform`, so the
    order in which components request draws fully determines the output for a
    given seed.
    """

    @classmethod
    def create(cls, source: RandomSource | int | None = None) -> RandomSource:
        if isinstance(source, RandomSource):
            return source
        return cls(seed=source)

    def __init__(self, seed: int | None = None) -> None:
        self._random_seed = seed
        self._rng = np.random.default_rng(seed)

    @property
    def random_seed(self) -> int | None:
        return self._random_seed

    def set_random_seed(self, seed: int) -> None:
        self._random_seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self, size: int | tuple[int, ...] | None = None) -> Any:
        """Return uniform(0, 1) draws; a python float when `size` is None."""
        if size is None:
            return float(self._rng.random())
        return self._rng.random(size)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(seed={self._random_seed})"


class ReplaySource(RandomSource):
    """Replay a fixed sequence of uniform draws, cycling when exhausted."""

    def __init__(self, values: Iterable[float]) -> None:
        self._values = np.asarray(list(values), dtype=float)
        if self._values.size == 0:
            raise ValueError("ReplaySource requires at least one value")
        if np.any((self._values < 0) | (self._values >= 1)):
            raise ValueError("Replay values must lie in [0, 1)")
        self._random_seed = None
        self._cycle = itertools.cycle(self._values.tolist())
        self.consumed = 0

    def set_random_seed(self, seed: int) -> None:
        raise TypeError("ReplaySource cannot be reseeded")

    def uniform(self, size: int | tuple[int, ...] | None = None) -> Any:
        if size is None:
            self.consumed += 1
            return next(self._cycle)
        n = int(np.prod(size))
        self.consumed += n
        out: npt.NDArray = np.fromiter(
            itertools.islice(self._cycle, n), dtype=float, count=n
        )
        return out.reshape(size)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self._values.size})"
