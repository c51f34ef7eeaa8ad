"""Workflow engine layers."""

# Note: Import layers individually to avoid circular imports
# Use: from specflow.layers.validation import ValidationEngine
# Use: from specflow.layers.phases import PhaseStateMachine

__all__ = [
    "validation",
    "phases",
]
