from __future__ import annotations

import numpy as np

from combine_models.errors import InvalidArgument

_SEED_MOD = 2**64


class SeededSampler:
    """Deterministic index generator for resampling with replacement.

    The draw sequence depends only on the seed and on the bounds of all prior
    calls. Build a new sampler for every build so repeated builds with the same
    seed draw the same indices.
    """

    def __init__(self, seed: int) -> None:
        self.seed = int(seed)
        # negative seeds are folded into the unsigned range numpy accepts
        self._rng = np.random.default_rng(self.seed % _SEED_MOD)
        self.draws = 0

    def __repr__(self) -> str:
        return f"SeededSampler(seed={self.seed}, draws={self.draws})"

    def next(self, bound: int) -> int:
        """Return an integer in ``[0, bound)``."""
        if isinstance(bound, bool) or not isinstance(bound, (int, np.integer)) or bound <= 0:
            raise InvalidArgument(f"Sampler bound must be a positive integer, got {bound!r}")
        self.draws += 1
        return int(self._rng.integers(0, int(bound)))

    def draw(self, bound: int, count: int) -> list[int]:
        """Draw *count* indices in ``[0, bound)``, in order."""
        if count < 0:
            raise InvalidArgument(f"Draw count must be non-negative, got {count}")
        return [self.next(bound) for _ in range(count)]
