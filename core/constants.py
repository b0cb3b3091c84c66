"""Constants and enums for the Pandemic simulation engine."""

from enum import Enum


class DiseaseColor(Enum):
    """The four disease colors on the board."""

    RED = "red"
    YELLOW = "yellow"
    BLUE = "blue"
    BLACK = "black"


class DiseaseState(Enum):
    """Global state of a disease color.

    Transitions only move forward: UNCURED -> CURED -> ERADICATED.
    A color may also go straight from UNCURED to ERADICATED when its
    last cube is treated away.
    """

    UNCURED = "uncured"
    CURED = "cured"
    ERADICATED = "eradicated"


class Stage(Enum):
    """Stages of a single player's turn."""

    INACTIVE = "inactive"
    ACTION = "action"
    DRAW = "draw"
    INFECTOR = "infector"


class Role(Enum):
    """Player roles. Each role is granted at most once per match."""

    MEDIC = "medic"
    SCIENTIST = "scientist"
    DISPATCHER = "dispatcher"
    RESEARCHER = "researcher"
    OPERATIONS_EXPERT = "operations-expert"


class Difficulty(Enum):
    """Difficulty levels, controlling how many epidemic cards are seeded."""

    INTRODUCTION = "introduction"
    NORMAL = "normal"
    HEROIC = "heroic"


class MatchState(Enum):
    """Lifecycle of a match."""

    SETTING_UP = "setting-up"
    IN_PROGRESS = "in-progress"
    WON = "won"
    LOST = "lost"


class CardType(Enum):
    """Card categories as they appear in the card data files."""

    PLAYER = "player"
    INFECTION = "infection"
    EPIDEMIC = "epidemic"


# Player limits
MIN_PLAYERS = 2
MAX_PLAYERS = 4

# Disease limits
MAX_CUBES_PER_CITY = 3
CUBES_PER_COLOR = 24
MAX_OUTBREAKS = 8

# Number of infection cards drawn per turn, indexed by infection-rate step
INFECTION_RATE_SEQUENCE = (2, 2, 2, 3, 3, 4, 4)

# Turn limits
MAX_ACTIONS_PER_TURN = 4
PLAYER_CARDS_PER_TURN = 2
MAX_HAND_SIZE = 7

# Research stations that may be placed besides the starting one
MAX_RESEARCH_STATIONS = 6
MAX_STATIONS_ON_BOARD = MAX_RESEARCH_STATIONS + 1

# Cards of one color needed to discover a cure
CARDS_TO_CURE = 5
SCIENTIST_CARDS_TO_CURE = 4

# Starting hand size by player count
STARTING_HAND_SIZES = {
    2: 4,
    3: 3,
    4: 2,
}

# Number of player-pile segments (one epidemic each) by difficulty
EPIDEMIC_SPLITS = {
    Difficulty.INTRODUCTION: 4,
    Difficulty.NORMAL: 5,
    Difficulty.HEROIC: 6,
}

# Initial infection: 3 cards at each severity, most severe first
INITIAL_INFECTION_CARDS_PER_ROUND = 3
INITIAL_INFECTION_CUBES = (3, 2, 1)

# Cubes placed on the city revealed by an epidemic
EPIDEMIC_INFECTION_COUNT = 3

STARTING_CITY = "atlanta"

# Roles in the order they are offered before random assignment
ROLE_POOL = [
    Role.MEDIC,
    Role.SCIENTIST,
    Role.DISPATCHER,
    Role.RESEARCHER,
    Role.OPERATIONS_EXPERT,
]

# Regular turn stage order
STAGE_ORDER = [
    Stage.INACTIVE,
    Stage.ACTION,
    Stage.DRAW,
    Stage.INFECTOR,
]
