"""Per-player turn state machine for the Pandemic simulation.

A PlayerTurn holds everything about one player: hand, location, role,
the current stage of their turn and the per-turn counters. Every
operation is guarded by a runtime check of the current stage:

- INACTIVE: start_turn (only while holding the turn)
- ACTION: up to four actions, then finish_action_stage
- DRAW: draw_cards (two per turn), then finish_draw_stage
- INFECTOR: draw_infection_cards once, then end_turn

discard_cards is allowed in any stage so an over-full hand can be
brought back under the limit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Type

from core.board import City, CityName
from core.cards import EpidemicCard, InfectionCard, PlayerCard, PlayerPileCard
from core.constants import (
    DiseaseColor,
    DiseaseState,
    Role,
    Stage,
    CARDS_TO_CURE,
    MAX_ACTIONS_PER_TURN,
    MAX_HAND_SIZE,
    MAX_STATIONS_ON_BOARD,
    PLAYER_CARDS_PER_TURN,
    SCIENTIST_CARDS_TO_CURE,
)
from core.exceptions import (
    IllegalStateTransition,
    InvalidMove,
    PandemicError,
    ResourceLimit,
    RuleViolation,
)

from .events import EventType
from .stage_machine import StageMachine

if TYPE_CHECKING:
    from .match_controller import MatchController

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of validating an action before it is taken.

    Attributes:
        valid: Whether the action is legal.
        reason: Description of why the action is illegal (if it is).
        error: Exception type raised when the illegal action is attempted.
    """

    valid: bool
    reason: Optional[str] = None
    error: Type[PandemicError] = InvalidMove

    def raise_if_invalid(self) -> None:
        if not self.valid:
            raise self.error(self.reason)


VALID = ValidationResult(valid=True)


class PlayerTurn:
    """One player's hand, position and turn stage.

    Attributes:
        name: Unique player name.
        role: Role granted for this match.
        location: Name of the city the pawn stands in.
        hand: Player cards held, in the order received.
        has_turn: True while this player holds the turn.
        actions_taken: Actions spent this turn (0-4).
        cards_drawn: Player cards drawn this turn (0-2).
        has_drawn_infection_cards: True once the infector stage has drawn.
        operations_flight_used: True once the operations expert has used
            the station flight this turn.
    """

    def __init__(self, match: MatchController, name: str, role: Role, location: CityName):
        """Create a player at a city.

        Args:
            match: The match whose board, piles and disease engine the
                player acts on.
            name: Unique player name.
            role: Role granted for this match.
            location: Starting city.

        Raises:
            KeyError: If the starting city is not on the board.
        """
        match.board.get_city(location)
        self.match = match
        self.name = name
        self.role = role
        self.location: CityName = location
        self.hand: list[PlayerCard] = []
        self.has_turn = False
        self.actions_taken = 0
        self.cards_drawn = 0
        self.has_drawn_infection_cards = False
        self.operations_flight_used = False
        self._stages = StageMachine()

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def stage(self) -> Stage:
        """Current stage of this player's turn."""
        return self._stages.stage

    @property
    def city(self) -> City:
        """State of the city the pawn stands in."""
        return self.match.board.get_city(self.location)

    @property
    def has_too_many_cards(self) -> bool:
        return len(self.hand) > MAX_HAND_SIZE

    @property
    def actions_remaining(self) -> int:
        return MAX_ACTIONS_PER_TURN - self.actions_taken

    @property
    def can_act(self) -> bool:
        """True if the player may take another action right now."""
        return (
            self.stage == Stage.ACTION
            and self.actions_taken < MAX_ACTIONS_PER_TURN
            and not self.has_too_many_cards
        )

    def card_for_city(self, city_name: CityName) -> Optional[PlayerCard]:
        """Return the first card in hand naming a city, if any."""
        for card in self.hand:
            if card.city == city_name:
                return card
        return None

    def cards_of_color(self, color: DiseaseColor) -> list[PlayerCard]:
        """Return the cards in hand of a disease color, in hand order."""
        return [card for card in self.hand if card.color == color]

    def cards_needed_to_cure(self) -> int:
        return SCIENTIST_CARDS_TO_CURE if self.role == Role.SCIENTIST else CARDS_TO_CURE

    # -------------------------------------------------------------------------
    # Turn flow
    # -------------------------------------------------------------------------

    def start_turn(self) -> None:
        """Begin the turn: INACTIVE -> ACTION.

        Raises:
            IllegalStateTransition: If it is not this player's turn, the
                player is mid-turn, or the match is not in progress.
        """
        if not self.match.is_in_progress:
            raise IllegalStateTransition(
                f"Cannot start turn for player: {self.name}. The match is not in progress"
            )
        if not self.has_turn:
            raise IllegalStateTransition(
                f"Cannot start turn for player: {self.name}. It is not their turn"
            )
        self._stages.advance_to(Stage.ACTION)
        self.actions_taken = 0
        self.cards_drawn = 0
        self.has_drawn_infection_cards = False
        self.operations_flight_used = False
        logger.info("%s (%s) starts their turn at %s", self.name, self.role.value, self.location)
        self.match.events.publish(EventType.TURN_STARTED, player=self.name)

    def finish_action_stage(self) -> None:
        """Move from ACTION to DRAW once all four actions are spent.

        Raises:
            IllegalStateTransition: If actions remain or the stage is wrong.
        """
        self._stages.require(Stage.ACTION, "finish the action stage")
        if self.actions_taken < MAX_ACTIONS_PER_TURN:
            raise IllegalStateTransition(
                f"Cannot finish action stage. {self.name} has "
                f"{self.actions_remaining} moves left"
            )
        self._stages.advance_to(Stage.DRAW)

    def draw_cards(self, n: int = 1) -> list[PlayerPileCard]:
        """Draw player cards during the draw stage.

        Player cards go to the hand. An epidemic card triggers an epidemic
        at the city on the bottom infection card, that card is discarded,
        the infection discard pile is recycled on top of the infection
        draw pile and the epidemic card is discarded. The epidemic city
        comes from the bottom of the infection pile, as in the printed
        rules, not from the top card.

        If the draw pile runs out, PLAYER_CARDS_EXHAUSTED is published and
        the draw stops. The draw also stops if the match ends part way.

        Args:
            n: Number of cards to draw.

        Returns:
            The cards actually drawn, in draw order.

        Raises:
            IllegalStateTransition: If not in the draw stage.
            RuleViolation: If n is less than 1.
            ResourceLimit: If the hand is over the limit or the draw would
                exceed two cards this turn.
        """
        self._stages.require(Stage.DRAW, "draw player cards")
        if n < 1:
            raise RuleViolation(f"Cannot draw {n} cards. Must draw at least one")
        self._check_hand_limit()
        if self.cards_drawn + n > PLAYER_CARDS_PER_TURN:
            raise ResourceLimit(
                f"Cannot draw {n} cards. Only "
                f"{PLAYER_CARDS_PER_TURN - self.cards_drawn} draws left"
            )

        drawn: list[PlayerPileCard] = []
        for _ in range(n):
            if self.stage != Stage.DRAW:
                break
            cards = self.match.player_draw_pile.draw(1)
            if not cards:
                logger.warning("Player draw pile exhausted while %s was drawing", self.name)
                self.match.events.publish(EventType.PLAYER_CARDS_EXHAUSTED, player=self.name)
                break
            card = cards[0]
            drawn.append(card)
            self.cards_drawn += 1
            if isinstance(card, EpidemicCard):
                self._resolve_epidemic(card)
            else:
                self.hand.append(card)
                logger.debug("%s drew %s", self.name, card)
        return drawn

    def _resolve_epidemic(self, card: EpidemicCard) -> None:
        match = self.match
        infection_card = match.infection_draw_pile.draw_bottom()
        if infection_card is None:
            logger.warning("Epidemic drawn with an empty infection pile")
            match.disease_engine.advance_infection_rate()
        else:
            match.disease_engine.epidemic_at(
                infection_card.city,
                infection_card.color,
                match.config.epidemic_infection_count,
            )
            match.infection_discard_pile.put(infection_card)
        match.recycle_infection_discards()
        match.player_discard_pile.put(card)

    def finish_draw_stage(self) -> None:
        """Move from DRAW to INFECTOR once two cards have been drawn.

        A hand over the limit is allowed here; it must be trimmed before
        the next action.

        Raises:
            IllegalStateTransition: If fewer than two cards were drawn.
        """
        self._stages.require(Stage.DRAW, "finish the draw stage")
        if self.cards_drawn < PLAYER_CARDS_PER_TURN:
            raise IllegalStateTransition(
                f"Cannot finish draw stage. {self.name} has not taken "
                f"{PLAYER_CARDS_PER_TURN} cards"
            )
        self._stages.advance_to(Stage.INFECTOR)

    def draw_infection_cards(self) -> list[InfectionCard]:
        """Draw infection cards equal to the infection rate.

        Each card infects its city with one cube of its color and is then
        discarded. The draw stops if the match ends part way.

        Returns:
            The infection cards drawn.

        Raises:
            IllegalStateTransition: If not in the infector stage or the
                cards were already drawn this turn.
        """
        self._stages.require(Stage.INFECTOR, "draw infection cards")
        if self.has_drawn_infection_cards:
            raise IllegalStateTransition(
                f"Cannot draw infection cards. {self.name} has already taken cards"
            )
        self.has_drawn_infection_cards = True

        match = self.match
        drawn: list[InfectionCard] = []
        for _ in range(match.disease_engine.infection_rate):
            if self.stage != Stage.INFECTOR:
                break
            cards = match.infection_draw_pile.draw(1)
            if not cards:
                logger.warning("Infection draw pile is empty")
                break
            card = cards[0]
            drawn.append(card)
            logger.debug("%s drew infection card %s", self.name, card)
            match.disease_engine.infect(card.city, card.color)
            match.infection_discard_pile.put(card)
        return drawn

    def end_turn(self) -> None:
        """End the turn: INFECTOR -> INACTIVE, passing the turn on.

        Raises:
            IllegalStateTransition: If the infection cards were not drawn.
        """
        self._stages.require(Stage.INFECTOR, "end the turn")
        if not self.has_drawn_infection_cards:
            raise IllegalStateTransition(
                f"Cannot end turn. {self.name} has not drawn infection cards"
            )
        self._stages.advance_to(Stage.INACTIVE)
        self.has_turn = False
        logger.info("%s ends their turn", self.name)
        self.match.events.publish(EventType.TURN_ENDED, player=self.name)

    def force_inactive(self) -> None:
        """Drop out of the turn from any stage. Used when the match ends."""
        self._stages.force_inactive()
        self.has_turn = False

    # -------------------------------------------------------------------------
    # Hand management
    # -------------------------------------------------------------------------

    def receive_cards(self, cards: list[PlayerCard]) -> None:
        """Add cards to the hand without drawing (used when dealing)."""
        self.hand.extend(cards)

    def discard_cards(self, *cards: PlayerCard) -> None:
        """Discard cards from an over-full hand. Allowed in any stage.

        Raises:
            RuleViolation: If the hand is not over the limit.
            InvalidMove: If a card is not in the hand.
        """
        if not self.has_too_many_cards:
            raise RuleViolation(
                f"Cannot discard cards. {self.name} may only discard with more "
                f"than {MAX_HAND_SIZE} cards"
            )
        for card in cards:
            if card not in self.hand:
                raise InvalidMove(f"Cannot discard {card}. {self.name} does not hold it")
        for card in cards:
            self._discard(card)

    def _discard(self, card: PlayerCard) -> None:
        self.hand.remove(card)
        self.match.player_discard_pile.put(card)
        logger.debug("%s discarded %s", self.name, card)

    # -------------------------------------------------------------------------
    # Validation helpers
    # -------------------------------------------------------------------------

    def _check_hand_limit(self) -> None:
        if self.has_too_many_cards:
            raise ResourceLimit(
                f"Player has too many cards: {len(self.hand)}. "
                f"Please discard {len(self.hand) - MAX_HAND_SIZE} cards"
            )

    def _begin_action(self, operation: str) -> None:
        """Check that an action may be taken now."""
        self._stages.require(Stage.ACTION, operation)
        if self.actions_taken >= MAX_ACTIONS_PER_TURN:
            raise IllegalStateTransition(
                f"Cannot {operation}. {self.name} has no actions left this turn"
            )
        self._check_hand_limit()

    def _spend_action(self) -> None:
        self.actions_taken += 1

    def _validate_destination(self, city_name: CityName) -> ValidationResult:
        if city_name not in self.match.board:
            return ValidationResult(False, f"Invalid move. Unknown city: {city_name}")
        if city_name == self.location:
            return ValidationResult(
                False, f"Invalid move. {self.name} is already at {self.location}"
            )
        return VALID

    def validate_drive_to(self, city_name: CityName) -> ValidationResult:
        """Check whether a drive to a city is legal from here."""
        result = self._validate_destination(city_name)
        if not result.valid:
            return result
        if not self.match.board.are_neighbors(self.location, city_name):
            return ValidationResult(
                False, f"Invalid move. {self.location} does not neighbour {city_name}"
            )
        return VALID

    def validate_direct_flight_to(self, city_name: CityName) -> ValidationResult:
        result = self._validate_destination(city_name)
        if not result.valid:
            return result
        if self.card_for_city(city_name) is None:
            return ValidationResult(
                False,
                f"Invalid move. {self.name} does not have needed city card ({city_name}) to act.",
            )
        return VALID

    def validate_charter_flight_to(self, city_name: CityName) -> ValidationResult:
        result = self._validate_destination(city_name)
        if not result.valid:
            return result
        if self.card_for_city(self.location) is None:
            return ValidationResult(
                False,
                f"Invalid move. {self.name} does not have needed city card "
                f"({self.location}) to act.",
            )
        return VALID

    def validate_shuttle_flight_to(self, city_name: CityName) -> ValidationResult:
        result = self._validate_destination(city_name)
        if not result.valid:
            return result
        board = self.match.board
        if not (self.city.has_research_station and board.get_city(city_name).has_research_station):
            return ValidationResult(
                False,
                f"Invalid move. {self.name}'s current city ({self.location}) "
                f"or {city_name} does not have a research station",
            )
        return VALID

    def validate_build_research_station(
        self, relocate_from: Optional[CityName] = None
    ) -> ValidationResult:
        """Check whether a research station can be built here.

        Once every station is on the board, an existing station elsewhere
        must be named in relocate_from; it is moved here.
        """
        board = self.match.board
        if self.city.has_research_station:
            return ValidationResult(
                False, f"Cannot build research station. {self.location} already has one"
            )
        if self.role != Role.OPERATIONS_EXPERT and self.card_for_city(self.location) is None:
            return ValidationResult(
                False,
                f"Invalid move. {self.name} does not have needed city card "
                f"({self.location}) to act.",
            )

        if board.research_station_count < MAX_STATIONS_ON_BOARD:
            if relocate_from is not None:
                return ValidationResult(
                    False,
                    f"Cannot relocate research station from {relocate_from}. "
                    "Research stations are still available",
                    RuleViolation,
                )
            return VALID

        if relocate_from is None:
            return ValidationResult(
                False,
                f"Cannot place research station at: {self.location}. "
                "No research stations left to place",
                ResourceLimit,
            )
        if relocate_from not in board:
            return ValidationResult(False, f"Invalid move. Unknown city: {relocate_from}")
        if relocate_from == self.location:
            return ValidationResult(
                False, f"Cannot relocate a research station to its own city ({relocate_from})"
            )
        if not board.get_city(relocate_from).has_research_station:
            return ValidationResult(
                False,
                f"Cannot place research station at: {self.location}. "
                f"{relocate_from} does not have a research station to replace",
            )
        return VALID

    def validate_cure_disease(self, color: DiseaseColor) -> ValidationResult:
        if not self.city.has_research_station:
            return ValidationResult(
                False,
                f"Cannot cure disease. {self.location} does not have a research station",
            )
        state = self.match.disease_engine.state_of(color)
        if state != DiseaseState.UNCURED:
            return ValidationResult(
                False,
                f"Cannot cure disease. {color.value} is already {state.value}",
                RuleViolation,
            )
        if len(self.cards_of_color(color)) < self.cards_needed_to_cure():
            return ValidationResult(
                False,
                f"Cannot cure disease. Not enough cards to cure {color.value}",
                ResourceLimit,
            )
        return VALID

    def _card_to_share(
        self,
        giver: PlayerTurn,
        receiver: PlayerTurn,
        card: Optional[PlayerCard],
    ) -> PlayerCard:
        """Pick the card a giver hands to a receiver, raising if sharing is illegal."""
        players = self.match.players_by_name
        if giver is receiver:
            raise InvalidMove(f"{giver.name} cannot share knowledge with themselves")
        if players.get(giver.name) is not giver or players.get(receiver.name) is not receiver:
            raise InvalidMove("Cannot share knowledge with a player outside the match")
        if giver.location != receiver.location:
            raise InvalidMove(
                f"Cannot share knowledge between {giver.name} and {receiver.name}. "
                "Players are in different locations"
            )

        # The researcher may hand over any card
        if giver.role == Role.RESEARCHER and card is not None:
            if card not in giver.hand:
                raise InvalidMove(f"Cannot share knowledge. {giver.name} does not hold {card}")
            return card

        shared = giver.card_for_city(giver.location)
        if shared is None or (card is not None and card != shared):
            raise InvalidMove(
                f"Cannot share knowledge between {giver.name} and {receiver.name}. "
                f"Player does not have card for {giver.location}"
            )
        return shared

    # -------------------------------------------------------------------------
    # Movement actions
    # -------------------------------------------------------------------------

    def drive_to(self, city_name: CityName) -> None:
        """Move to an adjacent city.

        Raises:
            InvalidMove: If the city is unknown, current or not adjacent.
        """
        self._begin_action("drive")
        self.validate_drive_to(city_name).raise_if_invalid()
        self._arrive(city_name)
        self._spend_action()

    def take_direct_flight_to(self, city_name: CityName) -> None:
        """Fly anywhere by discarding the destination's city card."""
        self._begin_action("take a direct flight")
        self.validate_direct_flight_to(city_name).raise_if_invalid()
        self._discard(self.card_for_city(city_name))
        self._arrive(city_name)
        self._spend_action()

    def take_charter_flight_to(self, city_name: CityName) -> None:
        """Fly anywhere by discarding the current city's card."""
        self._begin_action("take a charter flight")
        self.validate_charter_flight_to(city_name).raise_if_invalid()
        self._discard(self.card_for_city(self.location))
        self._arrive(city_name)
        self._spend_action()

    def take_shuttle_flight_to(self, city_name: CityName) -> None:
        """Fly between two research stations."""
        self._begin_action("take a shuttle flight")
        self.validate_shuttle_flight_to(city_name).raise_if_invalid()
        self._arrive(city_name)
        self._spend_action()

    def take_operations_flight_to(self, city_name: CityName, card: PlayerCard) -> None:
        """Operations expert only: fly from a research station to any city
        by discarding any city card, once per turn.

        Raises:
            RuleViolation: If the player is not the operations expert or
                has already used the flight this turn.
            InvalidMove: If the player is not at a station, the destination
                is invalid or the card is not a city card in hand.
        """
        self._begin_action("take an operations flight")
        if self.role != Role.OPERATIONS_EXPERT:
            raise RuleViolation(f"{self.name} is not the operations expert")
        if self.operations_flight_used:
            raise RuleViolation(f"{self.name} has already taken an operations flight this turn")
        if not self.city.has_research_station:
            raise InvalidMove(
                f"Invalid move. {self.location} does not have a research station"
            )
        self._validate_destination(city_name).raise_if_invalid()
        if card not in self.hand or card.city is None:
            raise InvalidMove(f"Invalid move. {self.name} does not hold city card {card}")

        self._discard(card)
        self.operations_flight_used = True
        self._arrive(city_name)
        self._spend_action()

    def dispatch_to_pawn(self, other: PlayerTurn, city_name: CityName) -> None:
        """Dispatcher only: move another pawn to a city holding a pawn.

        Raises:
            RuleViolation: If the player is not the dispatcher.
            InvalidMove: If the pawn is not in the match, is already there,
                or no pawn stands in the city.
        """
        self._begin_action("dispatch a pawn")
        if self.role != Role.DISPATCHER:
            raise RuleViolation(f"{self.name} is not the dispatcher")
        if other is self or self.match.players_by_name.get(other.name) is not other:
            raise InvalidMove(f"Cannot dispatch {other.name}")
        if city_name not in self.match.board:
            raise InvalidMove(f"Invalid move. Unknown city: {city_name}")
        if city_name == other.location:
            raise InvalidMove(f"Invalid move. {other.name} is already at {city_name}")
        if not any(player.location == city_name for player in self.match.players):
            raise InvalidMove(f"Invalid move. No pawn stands in {city_name}")

        other._arrive(city_name)
        self._spend_action()

    def _arrive(self, city_name: CityName) -> None:
        logger.debug("%s moves %s -> %s", self.name, self.location, city_name)
        self.location = city_name
        self.clear_cured_cubes()

    def clear_cured_cubes(self) -> None:
        """Medic only: remove every cube of a cured color where the pawn stands."""
        if self.role != Role.MEDIC or not self.match.is_in_progress:
            return
        engine = self.match.disease_engine
        for color in self.city.infected_colors():
            if engine.state_of(color) == DiseaseState.CURED:
                engine.treat_disease_at(self.location, color)

    # -------------------------------------------------------------------------
    # Other actions
    # -------------------------------------------------------------------------

    def build_research_station(self, relocate_from: Optional[CityName] = None) -> None:
        """Build a research station in the current city.

        Discards the current city's card unless the player is the
        operations expert.

        Args:
            relocate_from: City whose station is moved here once all
                stations are on the board.
        """
        self._begin_action("build a research station")
        self.validate_build_research_station(relocate_from).raise_if_invalid()

        if self.role != Role.OPERATIONS_EXPERT:
            self._discard(self.card_for_city(self.location))
        if relocate_from is not None:
            self.match.board.get_city(relocate_from).remove_research_station()
        self.city.build_research_station()
        logger.info("%s built a research station at %s", self.name, self.location)
        self._spend_action()

    def cure_disease(self, color: DiseaseColor) -> None:
        """Discover a cure at a research station, discarding the cards used.

        Raises:
            InvalidMove: If there is no research station here.
            RuleViolation: If the color is not uncured.
            ResourceLimit: If the hand lacks enough cards of the color.
        """
        self._begin_action("cure disease")
        self.validate_cure_disease(color).raise_if_invalid()

        for card in self.cards_of_color(color)[: self.cards_needed_to_cure()]:
            self._discard(card)
        self._spend_action()
        self.match.disease_engine.cure_disease(color)
        for player in self.match.players:
            player.clear_cured_cubes()

    def treat_disease(self, color: DiseaseColor) -> int:
        """Remove cubes of a color from the current city.

        Removes one cube, or every cube when the color is cured or the
        player is the medic. The medic treating a cured color spends no
        action.

        Returns:
            The number of cubes removed.
        """
        self._begin_action("treat disease")
        engine = self.match.disease_engine
        count = self.city.cube_count(color) if self.role == Role.MEDIC else 1
        free = self.role == Role.MEDIC and engine.state_of(color) == DiseaseState.CURED
        removed = engine.treat_disease_at(self.location, color, count)
        if not free:
            self._spend_action()
        return removed

    def share_knowledge_with(self, other: PlayerTurn, card: Optional[PlayerCard] = None) -> None:
        """Give a card to a co-located player.

        The card must match the current city, unless this player is the
        researcher, who may give any named card.
        """
        self._begin_action("share knowledge")
        shared = self._card_to_share(self, other, card)
        self.hand.remove(shared)
        other.hand.append(shared)
        logger.debug("%s gave %s to %s", self.name, shared, other.name)
        self._spend_action()

    def take_knowledge_from(self, other: PlayerTurn, card: Optional[PlayerCard] = None) -> None:
        """Take a card from a co-located player.

        The card must match the current city, unless the other player is
        the researcher, who may hand over any named card.
        """
        self._begin_action("share knowledge")
        shared = self._card_to_share(other, self, card)
        other.hand.remove(shared)
        self.hand.append(shared)
        logger.debug("%s took %s from %s", self.name, shared, other.name)
        self._spend_action()

    def pass_action(self) -> None:
        """Spend an action doing nothing."""
        self._begin_action("pass")
        self._spend_action()

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "role": self.role.value,
            "location": self.location,
            "stage": self.stage.value,
            "has_turn": self.has_turn,
            "hand": [card.card_id for card in self.hand],
            "actions_taken": self.actions_taken,
            "cards_drawn": self.cards_drawn,
            "has_drawn_infection_cards": self.has_drawn_infection_cards,
        }

    def __str__(self) -> str:
        return (
            f"{self.name} ({self.role.value}) at {self.location}, "
            f"stage={self.stage.value}, hand={len(self.hand)}"
        )

    def __repr__(self) -> str:
        return f"PlayerTurn(name={self.name!r}, role={self.role!r}, location={self.location!r})"
