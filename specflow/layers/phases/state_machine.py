"""Phase state machine.

Tracks the current phase of a specification project and decides whether a
phase change is allowed, using cached PhaseValidationResult entries.

Transition rule:
    - target at or before the current phase: always allowed
    - target ahead of the current phase: allowed only when every phase
      before the target has a cached result with is_complete == True

The cache is only read here. It is written through ``record()``, which the
document store calls from its validate_phase operation.
"""

import logging
from typing import Optional

from specflow.exceptions import PhaseTransitionError
from specflow.models import (
    SpecificationPhase,
    PHASE_ORDER,
    PhaseValidationResult,
    PhaseStatus,
)

logger = logging.getLogger(__name__)


# Phases whose completion counts toward overall project completion
GATED_PHASES = [
    SpecificationPhase.REQUIREMENTS,
    SpecificationPhase.DESIGN,
    SpecificationPhase.TASKS,
]


class PhaseStateMachine:
    """Current phase plus the per-phase validation cache."""

    def __init__(self, initial_phase: SpecificationPhase = SpecificationPhase.REQUIREMENTS):
        self.current_phase = SpecificationPhase(initial_phase)
        self._cache: dict[SpecificationPhase, Optional[PhaseValidationResult]] = {
            phase: None for phase in PHASE_ORDER
        }

    # ==================== cache ====================

    @property
    def phase_validation(self) -> dict[SpecificationPhase, Optional[PhaseValidationResult]]:
        """Read-only copy of the validation cache."""
        return dict(self._cache)

    def cached(self, phase: SpecificationPhase) -> Optional[PhaseValidationResult]:
        return self._cache[SpecificationPhase(phase)]

    def record(self, result: PhaseValidationResult) -> None:
        self._cache[result.phase] = result

    def clear(self, phase: Optional[SpecificationPhase] = None) -> None:
        """Drop one cached result, or all of them when no phase is given."""
        if phase is None:
            for key in self._cache:
                self._cache[key] = None
        else:
            self._cache[SpecificationPhase(phase)] = None

    def reset(self, phase: SpecificationPhase = SpecificationPhase.REQUIREMENTS) -> None:
        """Start over for another project: new current phase, empty cache."""
        self.current_phase = SpecificationPhase(phase)
        self.clear()

    def _is_complete(self, phase: SpecificationPhase) -> bool:
        result = self._cache[phase]
        return result is not None and result.is_complete

    # ==================== transitions ====================

    def can_transition_to(self, target: SpecificationPhase) -> bool:
        target = SpecificationPhase(target)

        if target.order <= self.current_phase.order:
            return True

        return all(self._is_complete(phase) for phase in PHASE_ORDER[:target.order])

    def transition_to(self, target: SpecificationPhase) -> SpecificationPhase:
        """
        Move to ``target`` if allowed.

        Raises:
            PhaseTransitionError: a phase before the target is not complete
        """
        target = SpecificationPhase(target)

        if not self.can_transition_to(target):
            blocking = self.first_incomplete_phase()
            raise PhaseTransitionError(
                f"Cannot transition to {target.value}. Previous phases must be completed.",
                details={
                    "current_phase": self.current_phase.value,
                    "target_phase": target.value,
                    "blocking_phase": blocking.value if blocking else None,
                },
            )

        previous = self.current_phase
        self.current_phase = target
        logger.info(f"[PhaseStateMachine] {previous.value} -> {target.value}")
        return previous

    # ==================== progress helpers ====================

    def phase_status(self, phase: SpecificationPhase) -> PhaseStatus:
        phase = SpecificationPhase(phase)
        if phase == self.current_phase:
            return PhaseStatus.CURRENT
        if phase.order < self.current_phase.order:
            return PhaseStatus.COMPLETED
        if self.can_transition_to(phase):
            return PhaseStatus.AVAILABLE
        return PhaseStatus.LOCKED

    def first_incomplete_phase(self) -> Optional[SpecificationPhase]:
        for phase in PHASE_ORDER:
            if not self._is_complete(phase):
                return phase
        return None

    def project_completion(self) -> int:
        """Share of requirements/design/tasks marked complete, 0-100."""
        completed = sum(1 for phase in GATED_PHASES if self._is_complete(phase))
        return round(completed / len(GATED_PHASES) * 100)

    def can_complete_project(self) -> bool:
        return all(self._is_complete(phase) for phase in GATED_PHASES)
