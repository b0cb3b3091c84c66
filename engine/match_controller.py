"""Match controller for the Pandemic simulation.

The MatchController is the primary interface for running a match. It
provides:
- add_player() / remove_player() / set_turn_order() / set_difficulty():
  assemble the match while it is setting up
- start(): deal, seed epidemics and infections, and hand out the first turn
- player() / current_player: the PlayerTurn objects that take the actions
- snapshot(): a detached, serializable view of the match

The controller listens on the shared event bus. A TURN_ENDED event passes
the turn to the next player in rotation; the loss and win events end the
match. The first outcome reached is final.

Usage:
    match = MatchController(MatchConfig(seed=7))
    match.add_player("ana")
    match.add_player("ben")
    match.start()

    player = match.current_player
    player.start_turn()
    player.drive_to("chicago")
    ...
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional

from core.board import CityBoard
from core.cards import (
    CardPile,
    EpidemicCard,
    InfectionCard,
    PlayerPileCard,
    recycle_discards,
)
from core.constants import Difficulty, MatchState, Role, MAX_PLAYERS, ROLE_POOL
from core.exceptions import IllegalStateTransition, ResourceLimit, RuleViolation
from core.game_state import MatchSnapshot
from data.loader import (
    CITIES_FILE,
    CardSet,
    load_board,
    load_cards,
    load_default_board,
    load_default_cards,
)

from .config import DEFAULT_MATCH_CONFIG, MatchConfig
from .disease_engine import DiseaseEngine
from .events import LOSS_EVENTS, WIN_EVENTS, EventBus, EventType, MatchEvent
from .player_turn import PlayerTurn
from .setup import SetupManager

logger = logging.getLogger(__name__)


class MatchController:
    """Owns the board, piles, disease engine, roster and turn order of a match."""

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        board: Optional[CityBoard] = None,
        cards: Optional[CardSet] = None,
    ):
        """Create a match in the SETTING_UP state.

        Args:
            config: Match settings. DEFAULT_MATCH_CONFIG if None.
            board: The city board. Loaded from config.data_dir (or the
                shipped data) if None.
            cards: The card set. Loaded the same way if None.

        Raises:
            DataLoadError: If board or card data cannot be loaded.
            ValueError: If the starting city is not on the board.
        """
        self.config = config if config is not None else DEFAULT_MATCH_CONFIG
        self._rng = random.Random(self.config.seed)

        self.board = board if board is not None else self._load_board()
        if self.config.starting_city not in self.board:
            raise ValueError(f"Starting city {self.config.starting_city} is not on the board")
        if cards is None:
            cards = self._load_cards()

        self.events = EventBus()
        self.events.subscribe(self._on_event)
        self.disease_engine = DiseaseEngine(self.board, self.events)

        self.player_draw_pile: CardPile[PlayerPileCard] = CardPile(cards.player_cards, rng=self._rng)
        self.player_discard_pile: CardPile[PlayerPileCard] = CardPile(rng=self._rng)
        self.infection_draw_pile: CardPile[InfectionCard] = CardPile(cards.infection_cards, rng=self._rng)
        self.infection_discard_pile: CardPile[InfectionCard] = CardPile(rng=self._rng)
        self.epidemic_pile: CardPile[EpidemicCard] = CardPile(cards.epidemic_cards, rng=self._rng)

        self.state = MatchState.SETTING_UP
        self.difficulty = self.config.difficulty
        self.outcome_reason: Optional[str] = None
        self.available_roles: list[Role] = list(ROLE_POOL)
        self._players: dict[str, PlayerTurn] = {}
        self.turn_order: list[str] = []
        self._current_index = 0

    def _load_board(self) -> CityBoard:
        if self.config.data_dir is None:
            return load_default_board()
        return load_board(Path(self.config.data_dir) / CITIES_FILE)

    def _load_cards(self) -> CardSet:
        if self.config.data_dir is None:
            return load_default_cards(self.board)
        return load_cards(self.config.data_dir, self.board)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def is_in_progress(self) -> bool:
        return self.state == MatchState.IN_PROGRESS

    @property
    def is_over(self) -> bool:
        """True once the match has been won or lost."""
        return self.state in (MatchState.WON, MatchState.LOST)

    @property
    def players(self) -> list[PlayerTurn]:
        """Players in registration order."""
        return list(self._players.values())

    @property
    def players_by_name(self) -> dict[str, PlayerTurn]:
        return dict(self._players)

    @property
    def current_player(self) -> Optional[PlayerTurn]:
        """The player holding the turn, or None outside play."""
        if not self.is_in_progress or not self.turn_order:
            return None
        return self._players[self.turn_order[self._current_index]]

    @property
    def research_stations_placed(self) -> int:
        return self.board.research_station_count

    def player(self, name: str) -> PlayerTurn:
        """Get a player by name.

        Raises:
            KeyError: If no player has that name.
        """
        try:
            return self._players[name]
        except KeyError:
            raise KeyError(f"Cannot get player: {name}. Player does not exist") from None

    # -------------------------------------------------------------------------
    # Assembling the match
    # -------------------------------------------------------------------------

    def _require_setting_up(self, operation: str) -> None:
        if self.state != MatchState.SETTING_UP:
            raise IllegalStateTransition(
                f"Cannot {operation}. Match is already {self.state.value}"
            )

    def add_player(self, name: str) -> PlayerTurn:
        """Register a player with a randomly drawn role.

        Roles are drawn without replacement from the role pool.

        Raises:
            IllegalStateTransition: If the match has started.
            RuleViolation: If the name is taken.
            ResourceLimit: If the match already has four players.
        """
        self._require_setting_up("add player")
        if name in self._players:
            raise RuleViolation(f"Player with name '{name}' already exists")
        if len(self._players) >= MAX_PLAYERS:
            raise ResourceLimit(f"Cannot add player. Can only have {MAX_PLAYERS} players")

        role = self.available_roles.pop(self._rng.randrange(len(self.available_roles)))
        player = PlayerTurn(self, name, role, self.config.starting_city)
        self._players[name] = player
        logger.info("Added player %s as %s", name, role.value)
        return player

    def remove_player(self, name: str) -> None:
        """Unregister a player, returning their role to the pool.

        Raises:
            IllegalStateTransition: If the match has started.
            KeyError: If no player has that name.
        """
        self._require_setting_up("remove player")
        player = self.player(name)
        self.available_roles.append(player.role)
        del self._players[name]
        if name in self.turn_order:
            self.turn_order.remove(name)
        logger.info("Removed player %s", name)

    def set_turn_order(self, names: list[str]) -> None:
        """Fix the turn order explicitly.

        Raises:
            IllegalStateTransition: If the match has started.
            RuleViolation: If the names are not a permutation of the players.
        """
        self._require_setting_up("set turn order")
        if len(names) != len(self._players) or set(names) != set(self._players):
            raise RuleViolation(
                f"Cannot set playing order: {names}. "
                f"Names do not match registered players {list(self._players)}"
            )
        self.turn_order = list(names)

    def set_difficulty(self, difficulty: Difficulty) -> None:
        """Change the difficulty before the match starts."""
        self._require_setting_up("set difficulty")
        self.difficulty = difficulty

    # -------------------------------------------------------------------------
    # Match lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Set up the match and give the turn to the first player.

        Raises:
            IllegalStateTransition: If the match has already started.
            RuleViolation: If the roster or card supply cannot start a match.
        """
        self._require_setting_up("start match")
        if len(self.turn_order) != len(self._players):
            self.turn_order = list(self._players)

        setup = SetupManager(self)
        result = setup.validate()
        if not result.valid:
            raise RuleViolation(result.reason)
        setup.run()

        self.state = MatchState.IN_PROGRESS
        self._current_index = 0
        self._give_turn()
        logger.info(
            "Match started (%s) with players %s", self.difficulty.value, ", ".join(self.turn_order)
        )

    def _give_turn(self) -> None:
        player = self._players[self.turn_order[self._current_index]]
        player.has_turn = True
        logger.debug("Turn passes to %s", player.name)

    def _next_player_turn(self) -> None:
        self._current_index = (self._current_index + 1) % len(self.turn_order)
        self._give_turn()

    def complete(self, outcome: MatchState, reason: Optional[str] = None) -> None:
        """End the match with an outcome. The first outcome is final.

        Every player is forced INACTIVE and MATCH_ENDED is published.

        Raises:
            ValueError: If the outcome is not WON or LOST.
            IllegalStateTransition: If the match has not started.
        """
        if outcome not in (MatchState.WON, MatchState.LOST):
            raise ValueError(f"Invalid match outcome: {outcome.value}")
        if self.state == MatchState.SETTING_UP:
            raise IllegalStateTransition("Cannot complete a match that has not started")
        if self.is_over:
            return

        for player in self._players.values():
            player.force_inactive()
        self.state = outcome
        self.outcome_reason = reason
        logger.info("Match %s: %s", outcome.value, reason or "no reason given")
        self.events.publish(EventType.MATCH_ENDED, outcome=outcome.value, reason=reason)

    def _on_event(self, event: MatchEvent) -> None:
        if not self.is_in_progress:
            return
        if event.event_type == EventType.TURN_ENDED:
            self._next_player_turn()
        elif event.event_type in LOSS_EVENTS:
            self.complete(MatchState.LOST, event.event_type.value)
        elif event.event_type in WIN_EVENTS:
            self.complete(MatchState.WON, event.event_type.value)

    # -------------------------------------------------------------------------
    # Piles
    # -------------------------------------------------------------------------

    def recycle_infection_discards(self) -> None:
        """Shuffle the infection discards back on top of the infection draw pile."""
        recycled = len(self.infection_discard_pile)
        self.infection_draw_pile = recycle_discards(
            self.infection_draw_pile, self.infection_discard_pile
        )
        logger.debug("Recycled %d infection cards onto the draw pile", recycled)

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def snapshot(self) -> MatchSnapshot:
        """Take a detached, read-only view of the match."""
        current = self.current_player
        return MatchSnapshot(
            state=self.state,
            difficulty=self.difficulty,
            turn_order=list(self.turn_order),
            current_player=current.name if current is not None else None,
            players=[player.to_dict() for player in self._players.values()],
            board=self.board.clone(),
            disease=self.disease_engine.to_dict(),
            pile_sizes={
                "player_draw": len(self.player_draw_pile),
                "player_discard": len(self.player_discard_pile),
                "infection_draw": len(self.infection_draw_pile),
                "infection_discard": len(self.infection_discard_pile),
                "epidemic": len(self.epidemic_pile),
            },
        )

    def __str__(self) -> str:
        return (
            f"MatchController(state={self.state.value}, difficulty={self.difficulty.value}, "
            f"players={list(self._players)})"
        )
