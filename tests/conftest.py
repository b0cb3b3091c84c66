"""Shared fixtures for the match-level tests."""

import pytest

from core.board import CityBoard
from core.constants import DiseaseColor, Role
from data.loader import CardSet, load_default_board, load_default_cards
from engine.config import MatchConfig
from engine.match_controller import MatchController
from engine.player_turn import PlayerTurn

from helpers import BLUE_CITIES, quiet_player_pile


@pytest.fixture
def board() -> CityBoard:
    return load_default_board()


@pytest.fixture
def cards(board) -> CardSet:
    return load_default_cards(board)


@pytest.fixture
def quiet_cards(cards) -> CardSet:
    """Card set whose infection cards only name black cities.

    Setup seeds nine of the twelve, so North and South America and the
    red region start without cubes.
    """
    return CardSet(
        player_cards=list(cards.player_cards),
        infection_cards=[c for c in cards.infection_cards if c.color == DiseaseColor.BLACK],
        epidemic_cards=list(cards.epidemic_cards),
    )


@pytest.fixture
def match(board, quiet_cards) -> MatchController:
    """A started two-player match: ana holds the turn, both stand in atlanta.

    Roles are fixed so role abilities only apply where a test asks for them.
    """
    match = MatchController(MatchConfig(seed=7), board=board, cards=quiet_cards)
    match.add_player("ana")
    match.add_player("ben")
    match.set_turn_order(["ana", "ben"])
    match.start()
    match.player("ana").role = Role.DISPATCHER
    match.player("ben").role = Role.SCIENTIST
    quiet_player_pile(match, BLUE_CITIES)
    return match


@pytest.fixture
def ana(match) -> PlayerTurn:
    return match.player("ana")


@pytest.fixture
def ben(match) -> PlayerTurn:
    return match.player("ben")
