"""Simulation engine for the Pandemic board game.

This module provides the game logic including:
- Event bus carrying turn, disease and match notifications
- Disease engine for infections, outbreaks, epidemics and cures
- Stage machine and PlayerTurn for each player's turn
- Match controller for setup, turn rotation and the outcome
"""

from .events import (
    EventType,
    MatchEvent,
    EventBus,
    LOSS_EVENTS,
    WIN_EVENTS,
)

from .disease_engine import DiseaseEngine

from .stage_machine import (
    StageMachine,
    StageTransitionResult,
    STAGE_TRANSITIONS,
)

from .player_turn import PlayerTurn, ValidationResult

from .config import MatchConfig, DEFAULT_MATCH_CONFIG

from .setup import SetupManager, SetupValidationResult

from .match_controller import MatchController

__all__ = [
    # Events
    "EventType",
    "MatchEvent",
    "EventBus",
    "LOSS_EVENTS",
    "WIN_EVENTS",
    # Disease engine
    "DiseaseEngine",
    # Stage machine
    "StageMachine",
    "StageTransitionResult",
    "STAGE_TRANSITIONS",
    # Players
    "PlayerTurn",
    "ValidationResult",
    # Config
    "MatchConfig",
    "DEFAULT_MATCH_CONFIG",
    # Setup
    "SetupManager",
    "SetupValidationResult",
    # Match controller
    "MatchController",
]
