"""Tests for the turn stage machine."""

import pytest

from core.constants import Stage, STAGE_ORDER
from core.exceptions import IllegalStateTransition
from engine.stage_machine import StageMachine, StageTransitionResult, STAGE_TRANSITIONS


class TestTransitionTable:
    """Test the transition table itself."""

    def test_every_stage_has_transitions(self):
        for stage in Stage:
            assert stage in STAGE_TRANSITIONS
            assert len(STAGE_TRANSITIONS[stage]) == 1

    def test_table_follows_stage_order(self):
        assert STAGE_TRANSITIONS == {
            Stage.INACTIVE: [Stage.ACTION],
            Stage.ACTION: [Stage.DRAW],
            Stage.DRAW: [Stage.INFECTOR],
            Stage.INFECTOR: [Stage.INACTIVE],
        }

    def test_table_is_a_cycle(self):
        stage = Stage.INACTIVE
        visited = []
        for _ in range(len(Stage)):
            visited.append(stage)
            stage = STAGE_TRANSITIONS[stage][0]
        assert visited == STAGE_ORDER
        assert stage == Stage.INACTIVE


class TestStageMachine:
    """Test StageMachine transitions."""

    def test_starts_inactive(self):
        machine = StageMachine()
        assert machine.stage == Stage.INACTIVE
        assert machine.is_inactive()

    def test_full_cycle(self):
        machine = StageMachine()
        for target in [Stage.ACTION, Stage.DRAW, Stage.INFECTOR, Stage.INACTIVE]:
            result = machine.transition_to(target)
            assert result == StageTransitionResult(success=True, new_stage=target)
        assert machine.is_inactive()

    def test_invalid_transition_result(self):
        machine = StageMachine()
        result = machine.transition_to(Stage.DRAW)
        assert not result.success
        assert result.new_stage is None
        assert "Cannot transition from inactive to draw" in result.reason
        assert machine.stage == Stage.INACTIVE

    @pytest.mark.parametrize("stage,target", [
        (Stage.INACTIVE, Stage.INFECTOR),
        (Stage.ACTION, Stage.ACTION),
        (Stage.ACTION, Stage.INACTIVE),
        (Stage.DRAW, Stage.ACTION),
        (Stage.INFECTOR, Stage.DRAW),
    ])
    def test_advance_to_rejects_skips(self, stage, target):
        machine = StageMachine(stage)
        assert not machine.can_transition_to(target)
        with pytest.raises(IllegalStateTransition):
            machine.advance_to(target)
        assert machine.stage == stage

    def test_force_inactive(self):
        machine = StageMachine(Stage.DRAW)
        machine.force_inactive()
        assert machine.stage == Stage.INACTIVE

    def test_require(self):
        machine = StageMachine(Stage.ACTION)
        machine.require(Stage.ACTION, "drive")
        with pytest.raises(IllegalStateTransition, match="Cannot drive during the action stage"):
            machine.require(Stage.DRAW, "drive")

    def test_str(self):
        assert str(StageMachine(Stage.DRAW)) == "StageMachine(stage=draw)"
