from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class RandomSource:
    """
    A thin wrapper around random.Random to:
    - keep placement and attack rolls off the global random state
    - support optional deterministic seeding for tests
    """

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)
        if self.seed is not None:
            logger.debug("Initialized RandomSource with deterministic seed=%s", self.seed)
        else:
            logger.debug("Initialized RandomSource with non-deterministic seed")

    def randrange(self, stop: int) -> int:
        return self._rng.randrange(stop)

    def random(self) -> float:
        return self._rng.random()

    def chance(self, probability: float) -> bool:
        """Bernoulli trial: True with the given probability."""
        return self._rng.random() < probability


__all__ = ["RandomSource"]
