"""Match configuration for the Pandemic simulation engine.

A MatchConfig fixes everything a match needs before players join: the
difficulty, the random seed, where the first research station stands
and where the board and card data are read from.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from core.constants import (
    Difficulty,
    EPIDEMIC_INFECTION_COUNT,
    STARTING_CITY,
)


@dataclass(frozen=True)
class MatchConfig:
    """Settings for a single match.

    Attributes:
        difficulty: Controls how many epidemic cards are seeded.
        seed: Seed for role assignment and every shuffle. None for a
            non-reproducible match.
        starting_city: City holding the first research station and all
            pawns at the start.
        epidemic_infection_count: Cubes placed on the city revealed by an
            epidemic.
        data_dir: Directory holding cities.json and the card files. The
            files shipped with the package are used if None.
    """

    difficulty: Difficulty = Difficulty.NORMAL
    seed: Optional[int] = None
    starting_city: str = STARTING_CITY
    epidemic_infection_count: int = EPIDEMIC_INFECTION_COUNT
    data_dir: Optional[Path] = None

    def __post_init__(self):
        if self.epidemic_infection_count < 1:
            raise ValueError(
                f"epidemic_infection_count must be at least 1, got {self.epidemic_infection_count}"
            )


DEFAULT_MATCH_CONFIG = MatchConfig()
