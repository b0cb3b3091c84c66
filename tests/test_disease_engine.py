"""Tests for the disease engine and the event bus.

Tests cover:
- Event bus subscription, delivery order and history
- Infection with the per-city cube cap
- Outbreak cascades, including cycles on the board
- The outbreak limit and cube exhaustion signals
- Epidemics and the infection-rate sequence
- Treatment, cures and eradication
"""

import pytest

from core.board import City, CityBoard
from core.constants import (
    DiseaseColor,
    DiseaseState,
    CUBES_PER_COLOR,
    INFECTION_RATE_SEQUENCE,
    MAX_OUTBREAKS,
)
from core.exceptions import InvalidMove, RuleViolation
from engine.disease_engine import DiseaseEngine
from engine.events import EventBus, EventType, MatchEvent, LOSS_EVENTS, WIN_EVENTS


BLUE = DiseaseColor.BLUE
RED = DiseaseColor.RED


def make_board(names: list[str], edges: list[tuple[str, str]]) -> CityBoard:
    board = CityBoard()
    for name in names:
        board.add_city(City(name=name, color=BLUE))
    for a, b in edges:
        board.connect(a, b)
    return board


@pytest.fixture
def triangle_board() -> CityBoard:
    """a, b and c form a cycle; d hangs off c."""
    return make_board(["a", "b", "c", "d"], [("a", "b"), ("b", "c"), ("c", "a"), ("c", "d")])


@pytest.fixture
def line_board() -> CityBoard:
    """Twelve cities in a line, c0 - c1 - ... - c11."""
    names = [f"c{i}" for i in range(12)]
    return make_board(names, list(zip(names, names[1:])))


@pytest.fixture
def engine(triangle_board) -> DiseaseEngine:
    return DiseaseEngine(triangle_board)


@pytest.fixture
def received(engine) -> list[MatchEvent]:
    """Every event the engine publishes, in order."""
    events: list[MatchEvent] = []
    engine.events.subscribe(events.append)
    return events


def types_of(events: list[MatchEvent]) -> list[EventType]:
    return [event.event_type for event in events]


# =============================================================================
# Event Bus Tests
# =============================================================================

class TestEventBus:
    """Test the synchronous event bus."""

    def test_publish_records_history(self):
        bus = EventBus()
        event = bus.publish(EventType.OUTBREAK, city="a", color="blue", outbreaks=1)
        assert event.payload == {"city": "a", "color": "blue", "outbreaks": 1}
        assert bus.get_history() == [event]
        assert len(bus) == 1

    def test_handlers_run_in_subscription_order(self):
        bus = EventBus()
        calls = []
        bus.subscribe(lambda e: calls.append("first"))
        bus.subscribe(lambda e: calls.append("second"))
        bus.publish(EventType.TURN_STARTED, player="alice")
        assert calls == ["first", "second"]

    def test_duplicate_subscription_ignored(self):
        bus = EventBus()
        calls = []
        handler = calls.append
        bus.subscribe(handler)
        bus.subscribe(handler)
        bus.publish(EventType.TURN_ENDED, player="alice")
        assert len(calls) == 1

    def test_unsubscribe(self):
        bus = EventBus()
        calls = []
        bus.subscribe(calls.append)
        bus.unsubscribe(calls.append)
        bus.publish(EventType.TURN_ENDED, player="alice")
        assert calls == []

    def test_history_filter_and_clear(self):
        bus = EventBus()
        bus.publish(EventType.OUTBREAK, city="a")
        bus.publish(EventType.EPIDEMIC, city="b")
        assert len(bus.get_history(EventType.EPIDEMIC)) == 1
        bus.clear_history()
        assert bus.get_history() == []

    def test_handler_errors_propagate(self):
        bus = EventBus()

        def broken(event):
            raise RuntimeError("handler failed")

        bus.subscribe(broken)
        with pytest.raises(RuntimeError):
            bus.publish(EventType.OUTBREAK)

    def test_event_to_dict(self):
        event = MatchEvent(EventType.DISEASE_CURED, {"color": "red"})
        assert event.to_dict() == {"event_type": "disease_cured", "payload": {"color": "red"}}
        assert str(event) == "disease_cured(color=red)"

    def test_outcome_event_sets(self):
        assert EventType.OUTBREAK_LIMIT_REACHED in LOSS_EVENTS
        assert EventType.DISEASE_CUBES_EXHAUSTED in LOSS_EVENTS
        assert EventType.PLAYER_CARDS_EXHAUSTED in LOSS_EVENTS
        assert WIN_EVENTS == {EventType.ALL_DISEASES_CURED}


# =============================================================================
# Infection Tests
# =============================================================================

class TestInfection:
    """Test placing cubes."""

    def test_initial_state(self, engine):
        assert engine.outbreaks == 0
        assert engine.infection_rate == 2
        assert all(state == DiseaseState.UNCURED for state in engine.disease_states.values())
        assert all(count == 0 for count in engine.cube_counts.values())

    def test_infect_adds_cubes(self, engine):
        engine.infect("d", BLUE, 2)
        assert engine.board.get_city("d").cube_count(BLUE) == 2
        assert engine.cube_count(BLUE) == 2
        assert engine.cubes_remaining(BLUE) == CUBES_PER_COLOR - 2

    def test_infect_caps_at_three(self, engine, received):
        engine.infect("d", BLUE, 3)
        assert engine.board.get_city("d").cube_count(BLUE) == 3
        assert engine.outbreaks == 0
        assert received == []

    def test_infect_non_positive_is_noop(self, engine):
        engine.infect("d", BLUE, 0)
        engine.infect("d", BLUE, -2)
        assert engine.cube_count(BLUE) == 0

    def test_colors_are_independent(self, engine):
        engine.infect("d", BLUE, 3)
        engine.infect("d", RED, 1)
        assert engine.board.get_city("d").cube_count(RED) == 1
        assert engine.outbreaks == 0

    def test_unknown_city(self, engine):
        with pytest.raises(KeyError):
            engine.infect("nowhere", BLUE)

    def test_eradicated_color_not_placed(self, engine):
        engine.infect("d", BLUE, 1)
        engine.treat_disease_at("d", BLUE)
        assert engine.state_of(BLUE) == DiseaseState.ERADICATED

        engine.infect("a", BLUE, 3)
        assert engine.board.get_city("a").cube_count(BLUE) == 0
        assert engine.cube_count(BLUE) == 0


# =============================================================================
# Outbreak Tests
# =============================================================================

class TestOutbreaks:
    """Test outbreaks and their cascades."""

    def test_overflow_triggers_outbreak(self, engine, received):
        engine.infect("d", BLUE, 3)
        engine.infect("d", BLUE, 1)

        assert engine.outbreaks == 1
        assert engine.board.get_city("d").cube_count(BLUE) == 3
        assert engine.board.get_city("c").cube_count(BLUE) == 1
        assert types_of(received) == [EventType.OUTBREAK]
        assert received[0].payload == {"city": "d", "color": "blue", "outbreaks": 1}

    def test_partial_overflow_fills_then_outbreaks(self, engine):
        engine.infect("d", BLUE, 2)
        engine.infect("d", BLUE, 3)
        assert engine.board.get_city("d").cube_count(BLUE) == 3
        assert engine.outbreaks == 1

    def test_outbreak_at_spreads_to_neighbours(self, engine):
        engine.outbreak_at("c", BLUE)
        for name in ("a", "b", "d"):
            assert engine.board.get_city(name).cube_count(BLUE) == 1
        assert engine.board.get_city("c").cube_count(BLUE) == 0
        assert engine.outbreaks == 1

    def test_cascade_on_cycle_terminates(self, engine, received):
        for name in ("a", "b", "c"):
            engine.infect(name, BLUE, 3)

        engine.infect("a", BLUE, 1)

        # Each city in the cycle outbreaks exactly once
        assert engine.outbreaks == 3
        outbreak_cities = [e.payload["city"] for e in received if e.event_type == EventType.OUTBREAK]
        assert sorted(outbreak_cities) == ["a", "b", "c"]
        for name in ("a", "b", "c"):
            assert engine.board.get_city(name).cube_count(BLUE) == 3
        assert engine.board.get_city("d").cube_count(BLUE) == 1
        assert engine.cube_count(BLUE) == 10

    def test_separate_infections_can_outbreak_again(self, engine):
        engine.infect("d", BLUE, 3)
        engine.infect("d", BLUE, 1)
        engine.infect("d", BLUE, 1)
        assert engine.outbreaks == 2

    def test_outbreak_limit_signalled(self):
        engine = DiseaseEngine(make_board(["solo"], []))
        received = []
        engine.events.subscribe(received.append)

        engine.infect("solo", BLUE, 3)
        for _ in range(MAX_OUTBREAKS + 2):
            engine.infect("solo", BLUE, 1)

        assert engine.outbreaks == MAX_OUTBREAKS
        limit_events = [e for e in received if e.event_type == EventType.OUTBREAK_LIMIT_REACHED]
        assert len(limit_events) == 1
        assert limit_events[0].payload == {"outbreaks": MAX_OUTBREAKS}

    def test_counter_stops_at_limit_during_cascade(self, engine, received):
        engine.outbreaks = MAX_OUTBREAKS - 1
        for name in ("a", "b", "c"):
            engine.infect(name, BLUE, 3)

        engine.infect("a", BLUE, 1)

        assert engine.outbreaks == MAX_OUTBREAKS
        outbreak_events = [e for e in received if e.event_type == EventType.OUTBREAK]
        assert len(outbreak_events) == 3
        assert all(e.payload["outbreaks"] == MAX_OUTBREAKS for e in outbreak_events)
        assert types_of(received).count(EventType.OUTBREAK_LIMIT_REACHED) == 1
        assert engine.to_dict()["outbreaks"] == MAX_OUTBREAKS

    def test_board_count_matches_tracked_count(self, engine):
        for name in ("a", "b", "c"):
            engine.infect(name, BLUE, 3)
        engine.infect("b", BLUE, 2)
        assert engine.board.count_cubes(BLUE) == engine.cube_count(BLUE)


# =============================================================================
# Cube Supply Tests
# =============================================================================

class TestCubeExhaustion:
    """Test running out of cubes of a color."""

    def test_exact_supply_is_not_exhaustion(self, line_board):
        engine = DiseaseEngine(line_board)
        received = []
        engine.events.subscribe(received.append)

        for i in range(8):
            engine.infect(f"c{i}", BLUE, 3)

        assert engine.cube_count(BLUE) == CUBES_PER_COLOR
        assert engine.cubes_remaining(BLUE) == 0
        assert received == []

    def test_exhaustion_places_what_remains(self, line_board):
        engine = DiseaseEngine(line_board)
        received = []
        engine.events.subscribe(received.append)

        for i in range(7):
            engine.infect(f"c{i}", BLUE, 3)
        engine.infect("c8", BLUE, 2)
        engine.infect("c10", BLUE, 3)

        assert engine.board.get_city("c10").cube_count(BLUE) == 1
        assert engine.cube_count(BLUE) == CUBES_PER_COLOR
        assert engine.board.count_cubes(BLUE) == CUBES_PER_COLOR
        assert types_of(received) == [EventType.DISEASE_CUBES_EXHAUSTED]
        assert received[0].payload == {"color": "blue", "city": "c10"}

    def test_exhaustion_with_empty_supply(self, line_board):
        engine = DiseaseEngine(line_board)
        received = []
        engine.events.subscribe(received.append)

        for i in range(8):
            engine.infect(f"c{i}", BLUE, 3)
        engine.infect("c10", BLUE, 1)

        assert engine.board.get_city("c10").cube_count(BLUE) == 0
        assert engine.cube_count(BLUE) == CUBES_PER_COLOR
        assert types_of(received) == [EventType.DISEASE_CUBES_EXHAUSTED]


# =============================================================================
# Epidemic Tests
# =============================================================================

class TestEpidemics:
    """Test epidemics and the infection rate."""

    def test_epidemic_raises_rate_then_infects(self, engine, received):
        engine.epidemic_at("d", BLUE)

        assert engine.infection_rate_step == 1
        assert engine.board.get_city("d").cube_count(BLUE) == 3
        assert received[0].event_type == EventType.EPIDEMIC
        assert received[0].payload == {
            "city": "d", "color": "blue", "infection_rate": INFECTION_RATE_SEQUENCE[1],
        }

    def test_epidemic_on_infected_city_outbreaks(self, engine):
        engine.infect("d", BLUE, 1)
        engine.epidemic_at("d", BLUE)
        assert engine.board.get_city("d").cube_count(BLUE) == 3
        assert engine.outbreaks == 1

    def test_epidemic_custom_count(self, engine):
        engine.epidemic_at("d", BLUE, count=2)
        assert engine.board.get_city("d").cube_count(BLUE) == 2

    def test_infection_rate_follows_sequence(self, engine):
        rates = [engine.infection_rate]
        for _ in range(len(INFECTION_RATE_SEQUENCE) - 1):
            rates.append(engine.advance_infection_rate())
        assert tuple(rates) == INFECTION_RATE_SEQUENCE

    def test_infection_rate_saturates(self, engine):
        for _ in range(20):
            engine.advance_infection_rate()
        assert engine.infection_rate_step == len(INFECTION_RATE_SEQUENCE) - 1
        assert engine.infection_rate == INFECTION_RATE_SEQUENCE[-1]


# =============================================================================
# Treatment and Cure Tests
# =============================================================================

class TestTreatment:
    """Test removing cubes."""

    def test_treat_uncured_removes_one(self, engine):
        engine.infect("d", BLUE, 3)
        assert engine.treat_disease_at("d", BLUE) == 1
        assert engine.board.get_city("d").cube_count(BLUE) == 2
        assert engine.cube_count(BLUE) == 2

    def test_treat_count_is_capped(self, engine):
        engine.infect("d", BLUE, 2)
        engine.infect("a", BLUE, 1)
        assert engine.treat_disease_at("d", BLUE, count=3) == 2
        assert engine.board.get_city("d").cube_count(BLUE) == 0

    def test_treat_cured_removes_all(self, engine):
        engine.infect("d", BLUE, 3)
        engine.infect("a", BLUE, 1)
        engine.cure_disease(BLUE)
        assert engine.treat_disease_at("d", BLUE) == 3
        assert engine.state_of(BLUE) == DiseaseState.CURED

    def test_treat_clean_city_is_invalid(self, engine):
        with pytest.raises(InvalidMove):
            engine.treat_disease_at("d", BLUE)

    def test_treat_zero_cubes_is_violation(self, engine):
        engine.infect("d", BLUE, 1)
        with pytest.raises(RuleViolation):
            engine.treat_disease_at("d", BLUE, count=0)
        assert engine.cube_count(BLUE) == 1

    def test_last_cube_eradicates(self, engine, received):
        engine.infect("d", BLUE, 1)
        engine.cure_disease(BLUE)
        engine.treat_disease_at("d", BLUE)

        assert engine.state_of(BLUE) == DiseaseState.ERADICATED
        assert EventType.DISEASE_ERADICATED in types_of(received)

    def test_treat_eradicated_is_violation(self, engine):
        engine.infect("d", BLUE, 1)
        engine.treat_disease_at("d", BLUE)
        with pytest.raises(RuleViolation):
            engine.treat_disease_at("d", BLUE)


class TestCures:
    """Test curing diseases and the winning signal."""

    def test_cure(self, engine, received):
        engine.cure_disease(RED)
        assert engine.state_of(RED) == DiseaseState.CURED
        assert types_of(received) == [EventType.DISEASE_CURED]
        assert received[0].payload == {"color": "red"}

    def test_cured_color_still_spreads(self, engine):
        engine.infect("d", RED, 1)
        engine.cure_disease(RED)

        engine.infect("d", RED, 1)
        engine.infect("a", RED, 2)

        assert engine.state_of(RED) == DiseaseState.CURED
        assert engine.board.get_city("d").cube_count(RED) == 2
        assert engine.board.get_city("a").cube_count(RED) == 2
        assert engine.cube_count(RED) == 4

    def test_cure_twice_is_violation(self, engine):
        engine.cure_disease(RED)
        with pytest.raises(RuleViolation):
            engine.cure_disease(RED)
        assert engine.state_of(RED) == DiseaseState.CURED

    def test_cure_eradicated_is_violation(self, engine):
        engine.infect("d", RED, 1)
        engine.treat_disease_at("d", RED)
        with pytest.raises(RuleViolation):
            engine.cure_disease(RED)
        assert engine.state_of(RED) == DiseaseState.ERADICATED

    def test_all_cured_signalled_once(self, engine, received):
        for color in DiseaseColor:
            engine.cure_disease(color)

        assert engine.all_diseases_cured()
        assert types_of(received).count(EventType.ALL_DISEASES_CURED) == 1
        assert received[-1].event_type == EventType.ALL_DISEASES_CURED

    def test_eradication_counts_towards_win(self, engine, received):
        engine.cure_disease(RED)
        engine.cure_disease(DiseaseColor.YELLOW)
        engine.cure_disease(DiseaseColor.BLACK)
        engine.infect("d", BLUE, 1)
        engine.treat_disease_at("d", BLUE)

        assert engine.all_diseases_cured()
        assert received[-1].event_type == EventType.ALL_DISEASES_CURED


class TestSerialization:
    """Test engine serialization."""

    def test_to_dict(self, engine):
        engine.infect("d", BLUE, 2)
        engine.cure_disease(RED)
        data = engine.to_dict()

        assert data["disease_states"]["red"] == "cured"
        assert data["cube_counts"]["blue"] == 2
        assert data["outbreaks"] == 0
        assert data["infection_rate_step"] == 0
        assert data["infection_rate"] == 2

    def test_str(self, engine):
        assert str(engine) == "DiseaseEngine(outbreaks=0, infection_rate=2)"
