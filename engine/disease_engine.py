"""Disease and outbreak engine for the Pandemic simulation.

The DiseaseEngine owns the global disease state:
- per-color state (uncured, cured, eradicated)
- per-color count of cubes on the board
- the outbreak counter and the infection-rate step

It places and removes cubes on the CityBoard and publishes the losing
and winning signals (eighth outbreak, cube supply exhausted, all
diseases cured) on the event bus instead of raising.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from core.board import CityBoard, CityName
from core.constants import (
    DiseaseColor,
    DiseaseState,
    CUBES_PER_COLOR,
    EPIDEMIC_INFECTION_COUNT,
    INFECTION_RATE_SEQUENCE,
    MAX_CUBES_PER_CITY,
    MAX_OUTBREAKS,
)
from core.exceptions import InvalidMove, RuleViolation

from .events import EventBus, EventType

logger = logging.getLogger(__name__)


class DiseaseEngine:
    """Infects, treats, cures and cascades outbreaks across a CityBoard.

    Outbreak cascades carry their own set of cities already outbreaking.
    The set is created by the outermost ``infect`` or ``outbreak_at`` call
    and passed down the recursion, so a city outbreaks at most once per
    cascade however the board's cycles route the spread.
    """

    def __init__(self, board: CityBoard, events: Optional[EventBus] = None):
        """Initialize the engine.

        Args:
            board: The city board to place cubes on.
            events: Event bus to publish on. A private bus is created if None.
        """
        self.board = board
        self.events = events if events is not None else EventBus()
        self._states: dict[DiseaseColor, DiseaseState] = {
            color: DiseaseState.UNCURED for color in DiseaseColor
        }
        self._cube_counts: dict[DiseaseColor, int] = {color: 0 for color in DiseaseColor}
        self._infection_rate_step = 0
        self.outbreaks = 0

    # -------------------------------------------------------------------------
    # Read-only accessors
    # -------------------------------------------------------------------------

    @property
    def infection_rate(self) -> int:
        """Number of infection cards drawn in the infector stage."""
        return INFECTION_RATE_SEQUENCE[self._infection_rate_step]

    @property
    def infection_rate_step(self) -> int:
        return self._infection_rate_step

    def state_of(self, color: DiseaseColor) -> DiseaseState:
        """Get the global state of a disease color."""
        return self._states[color]

    def cube_count(self, color: DiseaseColor) -> int:
        """Number of cubes of a color currently on the board."""
        return self._cube_counts[color]

    def cubes_remaining(self, color: DiseaseColor) -> int:
        """Number of cubes of a color left in the supply."""
        return CUBES_PER_COLOR - self._cube_counts[color]

    @property
    def disease_states(self) -> dict[DiseaseColor, DiseaseState]:
        """Copy of the per-color state map."""
        return dict(self._states)

    @property
    def cube_counts(self) -> dict[DiseaseColor, int]:
        """Copy of the per-color cube counts."""
        return dict(self._cube_counts)

    def all_diseases_cured(self) -> bool:
        """True when no color is still uncured."""
        return all(state != DiseaseState.UNCURED for state in self._states.values())

    # -------------------------------------------------------------------------
    # Infection and outbreaks
    # -------------------------------------------------------------------------

    def infect(self, city_name: CityName, color: DiseaseColor, count: int = 1) -> None:
        """Add cubes of a color to a city.

        Does nothing for an eradicated color. The city holds at most
        MAX_CUBES_PER_CITY cubes per color; a cube beyond that triggers an
        outbreak at the city instead of being placed.

        Args:
            city_name: The city to infect.
            color: The disease color.
            count: Number of cubes to add.

        Raises:
            KeyError: If the city does not exist.
        """
        self._infect(city_name, color, count, cascade=set())

    def outbreak_at(self, city_name: CityName, color: DiseaseColor) -> None:
        """Spread a color from a city to all of its neighbours.

        The outbreak counter stops at MAX_OUTBREAKS.

        Raises:
            KeyError: If the city does not exist.
        """
        self.board.get_city(city_name)
        self._outbreak(city_name, color, cascade=set())

    def epidemic_at(
        self,
        city_name: CityName,
        color: DiseaseColor,
        count: int = EPIDEMIC_INFECTION_COUNT,
    ) -> None:
        """Increase the infection rate, then infect a city heavily.

        The infection-rate step saturates at the end of the sequence.
        """
        self.advance_infection_rate()
        logger.info(
            "Epidemic at %s (%s); infection rate is now %d",
            city_name, color.value, self.infection_rate,
        )
        self.events.publish(
            EventType.EPIDEMIC,
            city=city_name,
            color=color.value,
            infection_rate=self.infection_rate,
        )
        self.infect(city_name, color, count)

    def advance_infection_rate(self) -> int:
        """Move one step along the infection-rate sequence, saturating.

        Returns:
            The new infection rate.
        """
        self._infection_rate_step = min(
            self._infection_rate_step + 1, len(INFECTION_RATE_SEQUENCE) - 1
        )
        return self.infection_rate

    def _infect(
        self,
        city_name: CityName,
        color: DiseaseColor,
        count: int,
        cascade: set[CityName],
    ) -> None:
        if self._states[color] == DiseaseState.ERADICATED:
            logger.debug("Skipping %s infection at %s: eradicated", color.value, city_name)
            return
        if count <= 0:
            return

        city = self.board.get_city(city_name)
        current = city.cube_count(color)
        wanted = current + count
        overflow = wanted > MAX_CUBES_PER_CITY
        to_place = min(wanted, MAX_CUBES_PER_CITY) - current

        if to_place > 0:
            self._place_cubes(city_name, color, to_place)

        if overflow and city_name not in cascade:
            self._outbreak(city_name, color, cascade)

    def _place_cubes(self, city_name: CityName, color: DiseaseColor, count: int) -> None:
        """Move cubes from the supply to a city, signalling exhaustion."""
        available = self.cubes_remaining(color)
        if count > available:
            logger.warning(
                "Out of %s cubes: needed %d, %d left", color.value, count, available
            )
            self.events.publish(
                EventType.DISEASE_CUBES_EXHAUSTED,
                color=color.value,
                city=city_name,
            )
            count = available
        if count <= 0:
            return
        city = self.board.get_city(city_name)
        city.set_cubes(color, city.cube_count(color) + count)
        self._cube_counts[color] += count
        logger.debug(
            "Placed %d %s cube(s) at %s (now %d)",
            count, color.value, city_name, city.cube_count(color),
        )

    def _outbreak(self, city_name: CityName, color: DiseaseColor, cascade: set[CityName]) -> None:
        cascade.add(city_name)
        logger.info("Outbreak of %s at %s", color.value, city_name)

        for neighbor in sorted(self.board.get_neighbors(city_name)):
            self._infect(neighbor, color, 1, cascade)

        # Counter saturates at the limit; the limit is signalled once
        limit_reached = False
        if self.outbreaks < MAX_OUTBREAKS:
            self.outbreaks += 1
            limit_reached = self.outbreaks == MAX_OUTBREAKS
        self.events.publish(
            EventType.OUTBREAK,
            city=city_name,
            color=color.value,
            outbreaks=self.outbreaks,
        )
        if limit_reached:
            logger.warning("Outbreak limit of %d reached", MAX_OUTBREAKS)
            self.events.publish(EventType.OUTBREAK_LIMIT_REACHED, outbreaks=self.outbreaks)

    # -------------------------------------------------------------------------
    # Treatment and cures
    # -------------------------------------------------------------------------

    def treat_disease_at(self, city_name: CityName, color: DiseaseColor, count: int = 1) -> int:
        """Remove cubes of a color from a city.

        A cured color is removed from the city entirely; an uncured color
        loses ``count`` cubes. When the last cube of a color leaves the
        board, the color is eradicated.

        Args:
            city_name: The city to treat.
            color: The disease color to remove.
            count: Cubes to remove for an uncured color (at least 1).

        Returns:
            The number of cubes removed.

        Raises:
            RuleViolation: If the color is eradicated or count < 1.
            InvalidMove: If the city holds no cubes of the color.
        """
        state = self._states[color]
        if state == DiseaseState.ERADICATED:
            raise RuleViolation(f"Cannot treat disease. {color.value} is already eradicated")

        city = self.board.get_city(city_name)
        current = city.cube_count(color)
        if current == 0:
            raise InvalidMove(
                f"Cannot treat disease. {city_name} is not infected with {color.value}"
            )
        if count < 1:
            raise RuleViolation(f"Cannot treat {count} cubes. Must treat at least one")

        removed = current if state == DiseaseState.CURED else min(count, current)
        city.set_cubes(color, current - removed)
        self._cube_counts[color] -= removed
        logger.debug(
            "Treated %d %s cube(s) at %s (now %d)",
            removed, color.value, city_name, city.cube_count(color),
        )

        if self._cube_counts[color] == 0:
            self._eradicate(color)
        return removed

    def cure_disease(self, color: DiseaseColor) -> None:
        """Mark a color as cured.

        Raises:
            RuleViolation: If the color is not currently uncured.
        """
        if self._states[color] != DiseaseState.UNCURED:
            raise RuleViolation(
                f"Cannot cure disease. {color.value} is already {self._states[color].value}"
            )
        self._states[color] = DiseaseState.CURED
        logger.info("Cure discovered for %s", color.value)
        self.events.publish(EventType.DISEASE_CURED, color=color.value)
        self._check_all_cured()

    def _eradicate(self, color: DiseaseColor) -> None:
        self._states[color] = DiseaseState.ERADICATED
        logger.info("%s eradicated", color.value)
        self.events.publish(EventType.DISEASE_ERADICATED, color=color.value)
        self._check_all_cured()

    def _check_all_cured(self) -> None:
        if self.all_diseases_cured():
            logger.info("All diseases cured")
            self.events.publish(EventType.ALL_DISEASES_CURED)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize the global disease state."""
        return {
            "disease_states": {color.value: state.value for color, state in self._states.items()},
            "cube_counts": {color.value: count for color, count in self._cube_counts.items()},
            "outbreaks": self.outbreaks,
            "infection_rate_step": self._infection_rate_step,
            "infection_rate": self.infection_rate,
        }

    def __str__(self) -> str:
        return (
            f"DiseaseEngine(outbreaks={self.outbreaks}, "
            f"infection_rate={self.infection_rate})"
        )
