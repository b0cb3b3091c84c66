"""Board and card data loader for the Pandemic simulation engine.

Loads and validates the city network and the three card files from JSON,
converting them into a CityBoard and card lists ready for a match.

City file format::

    [{"name": "atlanta", "color": "blue", "neighbours": ["chicago", ...],
      "position": {"x": -86, "y": 34}}, ...]

Card file format (player, infection and epidemic files alike)::

    [{"id": "player-atlanta", "type": "player", "city": "atlanta",
      "diseaseType": "blue"}, ...]
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from core.board import City, CityBoard
from core.cards import EpidemicCard, InfectionCard, PlayerCard
from core.constants import CardType, DiseaseColor

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent
CITIES_FILE = "cities.json"
PLAYER_CARDS_FILE = "player_cards.json"
INFECTION_CARDS_FILE = "infection_cards.json"
EPIDEMIC_CARDS_FILE = "epidemic_cards.json"


class DataLoadError(Exception):
    """Raised when board or card loading or validation fails."""
    pass


def _read_json(file_path: str | Path, kind: str) -> Any:
    path = Path(file_path)

    if not path.exists():
        raise DataLoadError(f"{kind} file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON in {kind.lower()} file: {e}")
    except IOError as e:
        raise DataLoadError(f"Error reading {kind.lower()} file: {e}")

    logger.debug("Loaded %s data from %s", kind.lower(), path)
    return data


def _parse_color(value: Any, context: str) -> DiseaseColor:
    try:
        return DiseaseColor(value)
    except ValueError:
        raise DataLoadError(
            f"Invalid disease color '{value}' in {context}. "
            f"Valid colors: {', '.join(c.value for c in DiseaseColor)}"
        )


# -----------------------------------------------------------------------------
# Cities
# -----------------------------------------------------------------------------


class CityLoader:
    """Loads and validates the city network from JSON."""

    EXPECTED_CITIES = 48
    EXPECTED_CITIES_PER_COLOR = 12

    def __init__(self, strict: bool = True):
        """Initialize the loader.

        Args:
            strict: If True, enforce the standard board shape (48 cities,
                    12 per color) and require every neighbour list to be
                    mirrored. Set to False for custom or test boards, where
                    one-sided neighbour entries are connected both ways.
        """
        self.strict = strict

    def load_from_file(self, file_path: str | Path) -> CityBoard:
        """Load a board from a JSON file.

        Raises:
            DataLoadError: If the file cannot be read, parsed or validated.
        """
        return self.load_from_list(_read_json(file_path, "City"))

    def load_from_list(self, data: list[dict[str, Any]]) -> CityBoard:
        """Load a board from a list of city records.

        Args:
            data: City records with 'name', 'color' and 'neighbours' keys.

        Returns:
            A CityBoard with the loaded topology and no cubes.

        Raises:
            DataLoadError: If validation fails.
        """
        self._validate_structure(data)

        board = CityBoard()
        for record in data:
            city = self._create_city(record)
            if city.name in board:
                raise DataLoadError(f"Duplicate city: {city.name}")
            board.add_city(city)

        for record in data:
            name = record["name"]
            for neighbour in record["neighbours"]:
                if neighbour not in board:
                    raise DataLoadError(f"City {name} references unknown neighbour: {neighbour}")
                if neighbour == name:
                    raise DataLoadError(f"Self-loop connection not allowed: {name}")
                board.connect(name, neighbour)

        self._validate_board(board, data)
        return board

    def _validate_structure(self, data: Any) -> None:
        """Validate the basic structure of the city data."""
        if not isinstance(data, list):
            raise DataLoadError("City data must be a list")

        if len(data) == 0:
            raise DataLoadError("Board must have at least one city")

    def _create_city(self, record: Any) -> City:
        """Create a City from a city record."""
        if not isinstance(record, dict):
            raise DataLoadError(f"City record must be a dictionary, got {record!r}")

        for key in ("name", "color", "neighbours"):
            if key not in record:
                raise DataLoadError(f"City record missing required field: {key}")

        name = record["name"]
        if not isinstance(name, str) or not name:
            raise DataLoadError(f"Invalid city name: {name!r}")

        if not isinstance(record["neighbours"], list):
            raise DataLoadError(f"'neighbours' of {name} must be a list")

        position = None
        if "position" in record:
            position_data = record["position"]
            if not isinstance(position_data, dict) or "x" not in position_data or "y" not in position_data:
                raise DataLoadError(f"Invalid position format for city {name}")
            position = (position_data["x"], position_data["y"])

        return City(
            name=name,
            color=_parse_color(record["color"], f"city {name}"),
            position=position,
        )

    def _validate_board(self, board: CityBoard, data: list[dict[str, Any]]) -> None:
        """Validate the complete board."""
        if self.strict:
            if len(board) != self.EXPECTED_CITIES:
                raise DataLoadError(
                    f"Expected {self.EXPECTED_CITIES} cities, found {len(board)}"
                )

            for color in DiseaseColor:
                count = len(board.get_cities_of_color(color))
                if count != self.EXPECTED_CITIES_PER_COLOR:
                    raise DataLoadError(
                        f"Expected {self.EXPECTED_CITIES_PER_COLOR} {color.value} cities, "
                        f"found {count}"
                    )

            # Every listed neighbour must list the city back
            for record in data:
                for neighbour in record["neighbours"]:
                    listed = next(r for r in data if r["name"] == neighbour)
                    if record["name"] not in listed["neighbours"]:
                        raise DataLoadError(
                            f"Asymmetric connection: {record['name']} lists {neighbour} "
                            f"but {neighbour} does not list {record['name']}"
                        )

        # Check connectivity (all cities should be reachable from any city)
        if len(board) > 1:
            start = next(iter(board.cities.keys()))
            visited: set[str] = set()
            self._dfs(board, start, visited)

            if len(visited) != len(board):
                unreachable = set(board.cities.keys()) - visited
                raise DataLoadError(
                    f"Board is not connected. Unreachable cities: {sorted(unreachable)}"
                )

    def _dfs(self, board: CityBoard, name: str, visited: set[str]) -> None:
        """Depth-first search to check connectivity."""
        visited.add(name)
        for neighbour in board.get_neighbors(name):
            if neighbour not in visited:
                self._dfs(board, neighbour, visited)


# -----------------------------------------------------------------------------
# Cards
# -----------------------------------------------------------------------------


@dataclass
class CardSet:
    """The three card collections a match starts from.

    Attributes:
        player_cards: City cards for the player draw pile.
        infection_cards: Cards for the infection draw pile.
        epidemic_cards: Epidemic cards to seed into the player draw pile.
    """

    player_cards: list[PlayerCard] = field(default_factory=list)
    infection_cards: list[InfectionCard] = field(default_factory=list)
    epidemic_cards: list[EpidemicCard] = field(default_factory=list)


class CardLoader:
    """Loads and validates card records from JSON."""

    def load_from_file(self, file_path: str | Path, card_type: CardType) -> list:
        """Load one card file, checking every record has the given type.

        Raises:
            DataLoadError: If the file cannot be read, parsed or validated.
        """
        return self.load_from_list(_read_json(file_path, "Card"), card_type)

    def load_from_list(self, data: Any, card_type: CardType) -> list:
        """Build cards of one type from card records.

        Args:
            data: Card records with 'id' and 'type' keys, plus 'city' and
                'diseaseType' for player and infection cards.
            card_type: The type every record must declare.

        Returns:
            The cards, in file order.

        Raises:
            DataLoadError: If validation fails.
        """
        if not isinstance(data, list):
            raise DataLoadError("Card data must be a list")

        cards = []
        seen_ids: set[str] = set()
        for record in data:
            card = self._create_card(record, card_type)
            if card.card_id in seen_ids:
                raise DataLoadError(f"Duplicate card ID: {card.card_id}")
            seen_ids.add(card.card_id)
            cards.append(card)
        return cards

    def _create_card(self, record: Any, card_type: CardType):
        if not isinstance(record, dict):
            raise DataLoadError(f"Card record must be a dictionary, got {record!r}")

        for key in ("id", "type"):
            if key not in record:
                raise DataLoadError(f"Card record missing required field: {key}")

        card_id = record["id"]
        try:
            declared = CardType(record["type"])
        except ValueError:
            raise DataLoadError(f"Invalid card type '{record['type']}' for card {card_id}")
        if declared != card_type:
            raise DataLoadError(
                f"Card {card_id} has type {declared.value}, expected {card_type.value}"
            )

        if card_type == CardType.EPIDEMIC:
            return EpidemicCard(card_id=card_id)

        city = record.get("city")
        color = record.get("diseaseType")
        if card_type == CardType.INFECTION:
            if city is None or color is None:
                raise DataLoadError(f"Infection card {card_id} needs a city and a diseaseType")
            return InfectionCard(card_id=card_id, city=city, color=_parse_color(color, f"card {card_id}"))

        return PlayerCard(
            card_id=card_id,
            city=city,
            color=_parse_color(color, f"card {card_id}") if color is not None else None,
        )


def validate_cards(cards: CardSet, board: CityBoard) -> None:
    """Check every card names a city on the board with the city's color.

    Raises:
        DataLoadError: On the first card that does not match the board.
    """
    for card in [*cards.player_cards, *cards.infection_cards]:
        if card.city is None:
            continue
        if card.city not in board:
            raise DataLoadError(f"Card {card.card_id} references unknown city: {card.city}")
        native = board.get_city(card.city).color
        if card.color is not None and native is not None and card.color != native:
            raise DataLoadError(
                f"Card {card.card_id} has color {card.color.value} "
                f"but {card.city} is {native.value}"
            )


# -----------------------------------------------------------------------------
# Convenience functions
# -----------------------------------------------------------------------------


def load_board(file_path: str | Path, strict: bool = True) -> CityBoard:
    """Convenience function to load a board from a file."""
    loader = CityLoader(strict=strict)
    return loader.load_from_file(file_path)


def load_default_board() -> CityBoard:
    """Load the standard 48-city board.

    Raises:
        DataLoadError: If the default city file is missing or invalid.
    """
    return load_board(DATA_DIR / CITIES_FILE, strict=True)


def load_cards(data_dir: str | Path, board: Optional[CityBoard] = None) -> CardSet:
    """Load the player, infection and epidemic card files from a directory.

    Args:
        data_dir: Directory holding the three card files.
        board: If given, every card is checked against it.

    Raises:
        DataLoadError: If any file is missing or invalid.
    """
    directory = Path(data_dir)
    loader = CardLoader()
    cards = CardSet(
        player_cards=loader.load_from_file(directory / PLAYER_CARDS_FILE, CardType.PLAYER),
        infection_cards=loader.load_from_file(directory / INFECTION_CARDS_FILE, CardType.INFECTION),
        epidemic_cards=loader.load_from_file(directory / EPIDEMIC_CARDS_FILE, CardType.EPIDEMIC),
    )
    if board is not None:
        validate_cards(cards, board)
    logger.debug(
        "Loaded %d player, %d infection and %d epidemic cards",
        len(cards.player_cards), len(cards.infection_cards), len(cards.epidemic_cards),
    )
    return cards


def load_default_cards(board: Optional[CityBoard] = None) -> CardSet:
    """Load the card files shipped with the package."""
    return load_cards(DATA_DIR, board)


def get_board_stats(board: CityBoard) -> dict[str, Any]:
    """Get statistics about a city board.

    Args:
        board: The board to analyze.

    Returns:
        Dictionary with board statistics.
    """
    num_connections = sum(len(neighbours) for neighbours in board.adjacency.values()) // 2
    degrees = [len(board.get_neighbors(name)) for name in board.cities]

    return {
        "num_cities": len(board),
        "num_connections": num_connections,
        "cities_by_color": {
            color.value: len(board.get_cities_of_color(color)) for color in DiseaseColor
        },
        "max_neighbours": max(degrees, default=0),
        "min_neighbours": min(degrees, default=0),
        "num_research_stations": board.research_station_count,
    }
