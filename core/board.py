"""City board model for the Pandemic simulation engine.

The board is represented as an arena of cities keyed by name plus a
separate adjacency map:
- Cities carry the mutable per-city state (cubes, research station)
- Adjacency is symmetric and fixed once the board is built
- Only per-city state changes during play
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .constants import DiseaseColor


# Type alias for clarity
CityName = str


def _empty_cubes() -> dict[DiseaseColor, int]:
    return {color: 0 for color in DiseaseColor}


@dataclass
class City:
    """State of a single city on the board.

    Attributes:
        name: Unique identifier for this city.
        color: The city's native disease color (from the board data).
        has_research_station: True if a research station stands here.
        cubes: Number of disease cubes per color (0-3 each).
        position: Optional (x, y) map coordinates for visualization.
    """

    name: CityName
    color: Optional[DiseaseColor] = None
    has_research_station: bool = False
    cubes: dict[DiseaseColor, int] = field(default_factory=_empty_cubes)
    position: Optional[tuple[float, float]] = None

    @property
    def is_infected(self) -> bool:
        """True if the city holds at least one cube of any color."""
        return any(count > 0 for count in self.cubes.values())

    def is_infected_with(self, color: DiseaseColor) -> bool:
        """Check if the city holds at least one cube of a color."""
        return self.cubes.get(color, 0) > 0

    def cube_count(self, color: DiseaseColor) -> int:
        """Return the number of cubes of a color in this city."""
        return self.cubes.get(color, 0)

    def infected_colors(self) -> list[DiseaseColor]:
        """Return the colors present in this city, in enum order."""
        return [color for color in DiseaseColor if self.cubes.get(color, 0) > 0]

    def set_cubes(self, color: DiseaseColor, count: int) -> None:
        """Set the cube count for a color.

        Only the disease engine should call this; it owns the global
        cube accounting that must stay in step with the city counts.

        Raises:
            ValueError: If count is negative.
        """
        if count < 0:
            raise ValueError(f"Cube count for {self.name} cannot be negative ({count})")
        self.cubes[color] = count

    def build_research_station(self) -> None:
        """Place a research station in this city.

        Raises:
            ValueError: If a station already stands here.
        """
        if self.has_research_station:
            raise ValueError(f"{self.name} already has a research station")
        self.has_research_station = True

    def remove_research_station(self) -> None:
        """Remove this city's research station.

        Raises:
            ValueError: If no station stands here.
        """
        if not self.has_research_station:
            raise ValueError(f"{self.name} has no research station to remove")
        self.has_research_station = False

    def clone(self) -> City:
        """Create a deep copy of this city."""
        return City(
            name=self.name,
            color=self.color,
            has_research_station=self.has_research_station,
            cubes=dict(self.cubes),
            position=self.position,
        )


@dataclass
class CityBoard:
    """The game board represented as an arena of cities plus adjacency.

    The topology (cities, adjacency) is fixed at creation.
    Only per-city state (cubes, research stations) changes during play.

    Attributes:
        cities: Mapping from city name to city state.
        adjacency: Mapping from city name to set of neighbouring city names.
    """

    cities: dict[CityName, City] = field(default_factory=dict)
    adjacency: dict[CityName, set[CityName]] = field(default_factory=dict)

    def __contains__(self, name: object) -> bool:
        return name in self.cities

    def __iter__(self):
        return iter(self.cities.values())

    def __len__(self) -> int:
        return len(self.cities)

    def add_city(self, city: City) -> None:
        """Register a city. Used only while the board is being built.

        Raises:
            ValueError: If a city with the same name exists.
        """
        if city.name in self.cities:
            raise ValueError(f"Duplicate city: {city.name}")
        self.cities[city.name] = city
        self.adjacency.setdefault(city.name, set())

    def connect(self, city_a: CityName, city_b: CityName) -> None:
        """Connect two cities (bidirectional). Used only while building.

        Raises:
            KeyError: If either city does not exist.
            ValueError: For a self-loop.
        """
        if city_a not in self.cities:
            raise KeyError(f"Unknown city: {city_a}")
        if city_b not in self.cities:
            raise KeyError(f"Unknown city: {city_b}")
        if city_a == city_b:
            raise ValueError(f"Self-loop connection not allowed: {city_a}")
        self.adjacency[city_a].add(city_b)
        self.adjacency[city_b].add(city_a)

    def get_city(self, name: CityName) -> City:
        """Get the state of a specific city.

        Raises:
            KeyError: If the city does not exist.
        """
        try:
            return self.cities[name]
        except KeyError:
            raise KeyError(f"Unknown city: {name}") from None

    def get_neighbors(self, name: CityName) -> set[CityName]:
        """Get all cities adjacent to a given city."""
        return self.adjacency.get(name, set())

    def are_neighbors(self, city_a: CityName, city_b: CityName) -> bool:
        """Check whether two cities share a connection."""
        return city_b in self.adjacency.get(city_a, set())

    def get_research_stations(self) -> list[City]:
        """Return all cities with a research station."""
        return [city for city in self.cities.values() if city.has_research_station]

    @property
    def research_station_count(self) -> int:
        """Number of research stations currently on the board."""
        return sum(1 for city in self.cities.values() if city.has_research_station)

    def get_infected_cities(self, color: Optional[DiseaseColor] = None) -> list[City]:
        """Return infected cities, optionally only those with a given color."""
        if color is None:
            return [city for city in self.cities.values() if city.is_infected]
        return [city for city in self.cities.values() if city.is_infected_with(color)]

    def get_cities_of_color(self, color: DiseaseColor) -> list[City]:
        """Return all cities whose native color matches."""
        return [city for city in self.cities.values() if city.color == color]

    def count_cubes(self, color: DiseaseColor) -> int:
        """Return the total number of cubes of a color across the board."""
        return sum(city.cube_count(color) for city in self.cities.values())

    def clone(self) -> CityBoard:
        """Create a deep copy of this board."""
        new_board = CityBoard()
        new_board.cities = {name: city.clone() for name, city in self.cities.items()}
        new_board.adjacency = {name: set(neighbors) for name, neighbors in self.adjacency.items()}
        return new_board
