"""Initial match setup for the Pandemic simulation.

Handles the setup which occurs once when a match starts:
1. Shuffle the player draw pile and deal the starting hands
2. Seed one epidemic card into each segment of the player draw pile
3. Shuffle the infection pile and place the initial infections
4. Build the starting research station

After setup completes, the first player in turn order holds the turn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from core.cards import seed_epidemics
from core.constants import (
    MatchState,
    EPIDEMIC_SPLITS,
    INITIAL_INFECTION_CARDS_PER_ROUND,
    INITIAL_INFECTION_CUBES,
    MAX_PLAYERS,
    MIN_PLAYERS,
    STARTING_HAND_SIZES,
)

if TYPE_CHECKING:
    from .match_controller import MatchController

logger = logging.getLogger(__name__)


@dataclass
class SetupValidationResult:
    """Result of checking whether a match can start.

    Attributes:
        valid: Whether the match can start.
        reason: Description of why it cannot (if it cannot).
    """

    valid: bool
    reason: Optional[str] = None


class SetupManager:
    """Runs the one-off setup of a match.

    The steps run in a fixed order; each is also callable on its own so
    tests can inspect the piles between steps.
    """

    def __init__(self, match: MatchController):
        self.match = match

    def validate(self) -> SetupValidationResult:
        """Check the roster, turn order and card supply before starting."""
        match = self.match
        if match.state != MatchState.SETTING_UP:
            return SetupValidationResult(
                False, f"Cannot start match. Match is already {match.state.value}"
            )

        count = len(match.players)
        if not MIN_PLAYERS <= count <= MAX_PLAYERS:
            return SetupValidationResult(
                False,
                f"Cannot start match. Not enough players. Currently {count} "
                f"but need between {MIN_PLAYERS} and {MAX_PLAYERS}",
            )

        splits = EPIDEMIC_SPLITS[match.difficulty]
        if len(match.epidemic_pile) < splits:
            return SetupValidationResult(
                False,
                f"Cannot start match. {match.difficulty.value} needs {splits} epidemic cards, "
                f"only {len(match.epidemic_pile)} available",
            )

        dealt = STARTING_HAND_SIZES[count] * count
        if len(match.player_draw_pile) < dealt:
            return SetupValidationResult(
                False, f"Cannot start match. Not enough player cards to deal {dealt}"
            )

        needed = INITIAL_INFECTION_CARDS_PER_ROUND * len(INITIAL_INFECTION_CUBES)
        if len(match.infection_draw_pile) < needed:
            return SetupValidationResult(
                False, f"Cannot start match. Not enough infection cards to seed {needed}"
            )

        return SetupValidationResult(True)

    # -------------------------------------------------------------------------
    # Setup steps
    # -------------------------------------------------------------------------

    def deal_starting_hands(self) -> int:
        """Shuffle the player draw pile and deal each player their hand.

        Returns:
            Number of cards dealt to each player.
        """
        match = self.match
        hand_size = STARTING_HAND_SIZES[len(match.players)]
        match.player_draw_pile.shuffle()
        for name in match.turn_order:
            match.player(name).receive_cards(match.player_draw_pile.draw(hand_size))
        logger.debug("Dealt %d cards to each of %d players", hand_size, len(match.players))
        return hand_size

    def seed_epidemics(self) -> int:
        """Split the player draw pile and seed one epidemic per segment.

        Returns:
            Number of epidemic cards seeded.
        """
        match = self.match
        splits = EPIDEMIC_SPLITS[match.difficulty]
        epidemics = match.epidemic_pile.draw(splits)
        match.player_draw_pile = seed_epidemics(match.player_draw_pile, epidemics)
        logger.debug("Seeded %d epidemic cards", len(epidemics))
        return len(epidemics)

    def seed_initial_infections(self) -> int:
        """Shuffle the infection pile and place the opening cubes.

        Three rounds of three cards each, at three, two and one cubes.
        Each card is discarded after infecting its city.

        Returns:
            Number of infection cards drawn.
        """
        match = self.match
        match.infection_draw_pile.shuffle()
        drawn = 0
        for cubes in INITIAL_INFECTION_CUBES:
            for card in match.infection_draw_pile.draw(INITIAL_INFECTION_CARDS_PER_ROUND):
                match.disease_engine.infect(card.city, card.color, cubes)
                match.infection_discard_pile.put(card)
                drawn += 1
        logger.debug("Seeded %d initial infections", drawn)
        return drawn

    def place_starting_station(self) -> None:
        """Build the research station in the starting city."""
        city = self.match.board.get_city(self.match.config.starting_city)
        if not city.has_research_station:
            city.build_research_station()

    def run(self) -> None:
        """Run every setup step in order."""
        self.deal_starting_hands()
        self.seed_epidemics()
        self.seed_initial_infections()
        self.place_starting_station()
