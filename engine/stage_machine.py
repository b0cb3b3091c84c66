"""Stage state machine for a single player's turn.

Manages the stage transitions of a turn:
- INACTIVE -> ACTION when the player starts a turn
- ACTION -> DRAW once the action budget is spent
- DRAW -> INFECTOR once the player cards are drawn
- INFECTOR -> INACTIVE when the turn ends

The stage machine only enforces the transition table. The conditions for
leaving a stage (actions spent, cards drawn) are checked by PlayerTurn.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.constants import Stage, STAGE_ORDER
from core.exceptions import IllegalStateTransition


# Valid stage transitions: each stage leads to the next, wrapping around
STAGE_TRANSITIONS: dict[Stage, list[Stage]] = {
    stage: [STAGE_ORDER[(index + 1) % len(STAGE_ORDER)]]
    for index, stage in enumerate(STAGE_ORDER)
}


@dataclass
class StageTransitionResult:
    """Result of a stage transition attempt.

    Attributes:
        success: Whether the transition was successful.
        new_stage: The new stage if successful, None otherwise.
        reason: Description of why the transition failed (if it did).
    """

    success: bool
    new_stage: Optional[Stage]
    reason: Optional[str] = None


class StageMachine:
    """State machine for the stages of one player's turn."""

    def __init__(self, initial_stage: Stage = Stage.INACTIVE):
        self._stage = initial_stage

    @property
    def stage(self) -> Stage:
        """Get the current stage."""
        return self._stage

    def get_valid_transitions(self) -> list[Stage]:
        """Get the list of valid next stages from the current stage."""
        return STAGE_TRANSITIONS.get(self._stage, [])

    def can_transition_to(self, target_stage: Stage) -> bool:
        return target_stage in self.get_valid_transitions()

    def transition_to(self, target_stage: Stage) -> StageTransitionResult:
        """Attempt to transition to a new stage.

        Args:
            target_stage: The stage to transition to.

        Returns:
            StageTransitionResult indicating success or failure.
        """
        if not self.can_transition_to(target_stage):
            valid = self.get_valid_transitions()
            return StageTransitionResult(
                success=False,
                new_stage=None,
                reason=f"Cannot transition from {self._stage.value} to {target_stage.value}. "
                f"Valid transitions: {[s.value for s in valid]}",
            )

        self._stage = target_stage
        return StageTransitionResult(success=True, new_stage=target_stage)

    def advance_to(self, target_stage: Stage) -> None:
        """Transition to a new stage, raising on an invalid transition.

        Raises:
            IllegalStateTransition: If the transition table forbids it.
        """
        result = self.transition_to(target_stage)
        if not result.success:
            raise IllegalStateTransition(result.reason)

    def force_inactive(self) -> None:
        """Drop to INACTIVE from any stage. Used when the match ends."""
        self._stage = Stage.INACTIVE

    def require(self, stage: Stage, operation: str) -> None:
        """Check the machine is in a given stage before an operation.

        Raises:
            IllegalStateTransition: If the current stage differs.
        """
        if self._stage != stage:
            raise IllegalStateTransition(
                f"Cannot {operation} during the {self._stage.value} stage. "
                f"Requires the {stage.value} stage"
            )

    def is_inactive(self) -> bool:
        return self._stage == Stage.INACTIVE

    # -------------------------------------------------------------------------
    # String representation
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        return f"StageMachine(stage={self._stage.value})"

    def __repr__(self) -> str:
        return f"StageMachine(stage={self._stage!r})"
