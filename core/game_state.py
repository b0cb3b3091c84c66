"""Read-only match snapshots for the Pandemic simulation engine.

A MatchSnapshot is a detached copy of everything a presentation layer
needs: match state, turn order, each player's stage and hand, per-city
cubes and stations, disease states and counters, and pile sizes. It is
safe to keep after the match moves on, and supports serialization and
state hashing for comparing runs.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, Optional

from .board import CityBoard
from .constants import (
    DiseaseColor,
    Difficulty,
    MatchState,
    CUBES_PER_COLOR,
    MAX_CUBES_PER_CITY,
    MAX_OUTBREAKS,
    MAX_STATIONS_ON_BOARD,
)


@dataclass
class MatchSnapshot:
    """State of a match at one moment.

    Attributes:
        state: Lifecycle state of the match.
        difficulty: Difficulty the match was set up with.
        turn_order: Player names in turn order.
        current_player: Name of the player holding the turn, if any.
        players: Serialized players (see PlayerTurn.to_dict).
        board: Detached copy of the city board.
        disease: Serialized disease engine state.
        pile_sizes: Number of cards in each named pile.
    """

    state: MatchState
    difficulty: Difficulty
    turn_order: list[str] = field(default_factory=list)
    current_player: Optional[str] = None
    players: list[dict[str, Any]] = field(default_factory=list)
    board: CityBoard = field(default_factory=CityBoard)
    disease: dict[str, Any] = field(default_factory=dict)
    pile_sizes: dict[str, int] = field(default_factory=dict)

    @property
    def outbreaks(self) -> int:
        return self.disease.get("outbreaks", 0)

    @property
    def infection_rate(self) -> int:
        return self.disease.get("infection_rate", 0)

    def get_player(self, name: str) -> dict[str, Any]:
        """Get a serialized player by name.

        Raises:
            KeyError: If no player has that name.
        """
        for player in self.players:
            if player["name"] == name:
                return player
        raise KeyError(f"Unknown player: {name}")

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize the snapshot to a JSON-compatible dictionary."""
        return {
            "state": self.state.value,
            "difficulty": self.difficulty.value,
            "turn_order": list(self.turn_order),
            "current_player": self.current_player,
            "players": [dict(player) for player in self.players],
            "cities": self._serialize_cities(),
            "disease": dict(self.disease),
            "pile_sizes": dict(self.pile_sizes),
        }

    def _serialize_cities(self) -> dict[str, Any]:
        return {
            name: {
                "research_station": city.has_research_station,
                "cubes": {color.value: count for color, count in city.cubes.items() if count},
            }
            for name, city in sorted(self.board.cities.items())
        }

    def state_hash(self) -> str:
        """Compute a hash of the snapshot.

        Two seeded matches driven through the same operations produce
        the same hash.

        Returns:
            A hex string hash of the serialized state.
        """
        state_json = json.dumps(self.to_dict(), sort_keys=True)
        return hashlib.sha256(state_json.encode()).hexdigest()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> list[str]:
        """Check the snapshot for internal consistency.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors: list[str] = []

        for city in self.board:
            for color, count in city.cubes.items():
                if not 0 <= count <= MAX_CUBES_PER_CITY:
                    errors.append(f"{city.name} holds {count} {color.value} cubes")

        cube_counts = self.disease.get("cube_counts", {})
        for color in DiseaseColor:
            on_board = self.board.count_cubes(color)
            tracked = cube_counts.get(color.value, 0)
            if on_board != tracked:
                errors.append(
                    f"{color.value} cubes on board ({on_board}) differ from tracked count ({tracked})"
                )
            if tracked > CUBES_PER_COLOR:
                errors.append(f"{color.value} cube count {tracked} exceeds {CUBES_PER_COLOR}")

        if not 0 <= self.outbreaks <= MAX_OUTBREAKS:
            errors.append(f"Invalid outbreak count: {self.outbreaks}")

        if self.board.research_station_count > MAX_STATIONS_ON_BOARD:
            errors.append(f"Too many research stations: {self.board.research_station_count}")

        holders = [player["name"] for player in self.players if player["has_turn"]]
        if len(holders) > 1:
            errors.append(f"More than one player holds the turn: {holders}")

        return errors

    # -------------------------------------------------------------------------
    # String representation
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        lines = [
            f"MatchSnapshot(state={self.state.value}, difficulty={self.difficulty.value})",
            f"  Outbreaks: {self.outbreaks}",
            f"  Infection rate: {self.infection_rate}",
            f"  Research stations: {[c.name for c in self.board.get_research_stations()]}",
            f"  Players ({len(self.players)}):",
        ]
        for player in self.players:
            marker = "*" if player["name"] == self.current_player else " "
            lines.append(
                f"   {marker}{player['name']} ({player['role']}) at {player['location']}, "
                f"stage={player['stage']}, hand={len(player['hand'])}"
            )
        states = self.disease.get("disease_states", {})
        counts = self.disease.get("cube_counts", {})
        for color in DiseaseColor:
            lines.append(
                f"  {color.value}: {states.get(color.value, '?')}, "
                f"{counts.get(color.value, 0)} cubes on board"
            )
        return "\n".join(lines)
