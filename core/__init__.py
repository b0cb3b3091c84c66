"""Core data models for the Pandemic simulation engine."""

from .constants import (
    DiseaseColor,
    DiseaseState,
    Stage,
    Role,
    Difficulty,
    MatchState,
    CardType,
    MIN_PLAYERS,
    MAX_PLAYERS,
    MAX_CUBES_PER_CITY,
    CUBES_PER_COLOR,
    MAX_OUTBREAKS,
    INFECTION_RATE_SEQUENCE,
    MAX_ACTIONS_PER_TURN,
    PLAYER_CARDS_PER_TURN,
    MAX_HAND_SIZE,
    MAX_RESEARCH_STATIONS,
    MAX_STATIONS_ON_BOARD,
    CARDS_TO_CURE,
    SCIENTIST_CARDS_TO_CURE,
    STARTING_HAND_SIZES,
    EPIDEMIC_SPLITS,
    STARTING_CITY,
    ROLE_POOL,
)

from .exceptions import (
    PandemicError,
    IllegalStateTransition,
    InvalidMove,
    ResourceLimit,
    RuleViolation,
)

from .board import CityName, City, CityBoard

from .cards import (
    PlayerCard,
    InfectionCard,
    EpidemicCard,
    Card,
    PlayerPileCard,
    CardPile,
    seed_epidemics,
    recycle_discards,
)

from .game_state import MatchSnapshot

__all__ = [
    # Constants
    "DiseaseColor",
    "DiseaseState",
    "Stage",
    "Role",
    "Difficulty",
    "MatchState",
    "CardType",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
    "MAX_CUBES_PER_CITY",
    "CUBES_PER_COLOR",
    "MAX_OUTBREAKS",
    "INFECTION_RATE_SEQUENCE",
    "MAX_ACTIONS_PER_TURN",
    "PLAYER_CARDS_PER_TURN",
    "MAX_HAND_SIZE",
    "MAX_RESEARCH_STATIONS",
    "MAX_STATIONS_ON_BOARD",
    "CARDS_TO_CURE",
    "SCIENTIST_CARDS_TO_CURE",
    "STARTING_HAND_SIZES",
    "EPIDEMIC_SPLITS",
    "STARTING_CITY",
    "ROLE_POOL",
    # Exceptions
    "PandemicError",
    "IllegalStateTransition",
    "InvalidMove",
    "ResourceLimit",
    "RuleViolation",
    # Board
    "CityName",
    "City",
    "CityBoard",
    # Cards
    "PlayerCard",
    "InfectionCard",
    "EpidemicCard",
    "Card",
    "PlayerPileCard",
    "CardPile",
    "seed_epidemics",
    "recycle_discards",
    # Snapshot
    "MatchSnapshot",
]
