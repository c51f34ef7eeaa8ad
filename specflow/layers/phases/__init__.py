"""Phase state machine layer."""

from .state_machine import PhaseStateMachine, GATED_PHASES

__all__ = ["PhaseStateMachine", "GATED_PHASES"]
