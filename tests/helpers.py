"""Helpers shared by the match-level tests."""

from core.board import CityBoard
from core.cards import CardPile, PlayerCard
from engine.match_controller import MatchController
from engine.player_turn import PlayerTurn


BLUE_CITIES = [
    "san francisco", "chicago", "montreal", "new york", "washington", "atlanta",
    "london", "madrid", "paris", "essen", "milan", "st petersburg",
]
RED_CITIES = [
    "beijing", "seoul", "shanghai", "tokyo", "osaka", "taipei",
    "hong kong", "bangkok", "jakarta", "ho chi minh", "manila", "sydney",
]


def city_card(board: CityBoard, name: str) -> PlayerCard:
    """Build the player card for a city on the board."""
    return PlayerCard(
        card_id=f"player-{name.replace(' ', '-')}",
        city=name,
        color=board.get_city(name).color,
    )


def quiet_player_pile(match: MatchController, names: list[str]) -> CardPile:
    """Replace the player draw pile with city cards only, last name on top."""
    pile = CardPile([city_card(match.board, name) for name in names])
    match.player_draw_pile = pile
    return pile


def spend_actions(player: PlayerTurn) -> None:
    """Pass until the action budget is used up."""
    while player.actions_remaining:
        player.pass_action()


def play_full_turn(player: PlayerTurn) -> None:
    """Play a turn of passes: actions, two draws, infections, end."""
    player.start_turn()
    spend_actions(player)
    player.finish_action_stage()
    player.draw_cards(2)
    player.finish_draw_stage()
    player.draw_infection_cards()
    player.end_turn()
