"""Tests for the match setup logic.

Tests cover:
1. Validation of the roster and card supply before starting
2. Dealing the starting hands
3. Seeding the epidemic cards
4. Seeding the initial infections
5. The starting research station
"""

import pytest

from core.cards import EpidemicCard
from core.constants import (
    Difficulty,
    EPIDEMIC_SPLITS,
    INITIAL_INFECTION_CUBES,
)
from data.loader import CardSet
from engine.config import MatchConfig
from engine.match_controller import MatchController
from engine.setup import SetupManager, SetupValidationResult


# =============================================================================
# Fixtures
# =============================================================================


def make_match(board, cards, players=("ana", "ben"), difficulty=Difficulty.NORMAL):
    match = MatchController(MatchConfig(seed=1, difficulty=difficulty), board=board, cards=cards)
    for name in players:
        match.add_player(name)
    match.set_turn_order(list(players))
    return match


@pytest.fixture
def setup_match(board, cards) -> MatchController:
    return make_match(board, cards)


@pytest.fixture
def manager(setup_match) -> SetupManager:
    return SetupManager(setup_match)


# =============================================================================
# Validation Tests
# =============================================================================

class TestSetupValidation:
    """Test checks made before a match starts."""

    def test_valid_match(self, manager):
        result = manager.validate()
        assert result == SetupValidationResult(True)

    def test_too_few_players(self, board, cards):
        match = make_match(board, cards, players=("ana",))
        result = SetupManager(match).validate()
        assert not result.valid
        assert "Not enough players" in result.reason

    def test_too_few_epidemic_cards(self, board, cards):
        short = CardSet(cards.player_cards, cards.infection_cards, cards.epidemic_cards[:4])
        match = make_match(board, short)
        result = SetupManager(match).validate()
        assert not result.valid
        assert "epidemic" in result.reason

    def test_introduction_needs_fewer_epidemics(self, board, cards):
        short = CardSet(cards.player_cards, cards.infection_cards, cards.epidemic_cards[:4])
        match = make_match(board, short, difficulty=Difficulty.INTRODUCTION)
        assert SetupManager(match).validate().valid

    def test_too_few_player_cards(self, board, cards):
        short = CardSet(cards.player_cards[:7], cards.infection_cards, cards.epidemic_cards)
        match = make_match(board, short)
        result = SetupManager(match).validate()
        assert not result.valid
        assert "player cards" in result.reason

    def test_too_few_infection_cards(self, board, cards):
        short = CardSet(cards.player_cards, cards.infection_cards[:8], cards.epidemic_cards)
        match = make_match(board, short)
        result = SetupManager(match).validate()
        assert not result.valid
        assert "infection cards" in result.reason

    def test_started_match_invalid(self, setup_match):
        setup_match.start()
        assert not SetupManager(setup_match).validate().valid


# =============================================================================
# Setup Step Tests
# =============================================================================

class TestDealStartingHands:
    """Test dealing the starting hands."""

    def test_deal(self, setup_match, manager):
        assert manager.deal_starting_hands() == 4
        assert all(len(p.hand) == 4 for p in setup_match.players)
        assert len(setup_match.player_draw_pile) == 40

    def test_hands_are_disjoint(self, setup_match, manager):
        manager.deal_starting_hands()
        ana, ben = setup_match.players
        assert not set(ana.hand) & set(ben.hand)


class TestSeedEpidemics:
    """Test seeding epidemics into the player draw pile."""

    def test_seed(self, setup_match, manager):
        manager.deal_starting_hands()
        assert manager.seed_epidemics() == EPIDEMIC_SPLITS[Difficulty.NORMAL]
        cards = setup_match.player_draw_pile.contents
        assert sum(isinstance(card, EpidemicCard) for card in cards) == 5
        assert len(setup_match.epidemic_pile) == 1

    def test_seed_heroic(self, board, cards):
        match = make_match(board, cards, difficulty=Difficulty.HEROIC)
        manager = SetupManager(match)
        manager.deal_starting_hands()
        assert manager.seed_epidemics() == 6
        assert match.epidemic_pile.is_empty()


class TestSeedInitialInfections:
    """Test placing the opening cubes."""

    def test_nine_cards_drawn(self, setup_match, manager):
        assert manager.seed_initial_infections() == 9
        assert len(setup_match.infection_discard_pile) == 9
        assert len(setup_match.infection_draw_pile) == 39

    def test_cubes_by_round(self, setup_match, manager):
        manager.seed_initial_infections()
        discards = setup_match.infection_discard_pile.contents
        board = setup_match.board
        for index, card in enumerate(discards):
            expected = INITIAL_INFECTION_CUBES[index // 3]
            assert board.get_city(card.city).cube_count(card.color) == expected

    def test_cube_total(self, setup_match, manager):
        manager.seed_initial_infections()
        engine = setup_match.disease_engine
        assert sum(engine.cube_counts.values()) == 3 * sum(INITIAL_INFECTION_CUBES)
        assert engine.outbreaks == 0


class TestStartingStation:
    """Test the starting research station."""

    def test_station_placed(self, setup_match, manager):
        manager.place_starting_station()
        assert setup_match.board.get_city("atlanta").has_research_station
        assert setup_match.board.research_station_count == 1

    def test_station_placed_once(self, setup_match, manager):
        manager.place_starting_station()
        manager.place_starting_station()
        assert setup_match.board.research_station_count == 1

    def test_custom_starting_city(self, board, cards):
        match = MatchController(MatchConfig(starting_city="paris"), board=board, cards=cards)
        match.add_player("ana")
        assert match.player("ana").location == "paris"
        SetupManager(match).place_starting_station()
        assert board.get_city("paris").has_research_station


class TestRun:
    """Test the full setup sequence."""

    def test_run(self, setup_match, manager):
        manager.run()
        assert all(len(p.hand) == 4 for p in setup_match.players)
        assert len(setup_match.player_draw_pile) == 45
        assert len(setup_match.infection_discard_pile) == 9
        assert setup_match.board.get_city("atlanta").has_research_station
