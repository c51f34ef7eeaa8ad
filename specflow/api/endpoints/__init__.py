"""API endpoints package."""

from . import health
from . import projects
from . import documents
from . import phases
from . import autosave

__all__ = ["health", "projects", "documents", "phases", "autosave"]
