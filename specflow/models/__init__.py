"""Data models for the specification workflow engine."""

from .common import (
    SpecificationPhase,
    PHASE_ORDER,
    DocumentType,
    DocumentStatus,
    ValidationType,
    ValidationSeverity,
    ProjectComplexity,
    MethodologyType,
    ProjectStatus,
    PhaseStatus,
)
from .validation import (
    ValidationLocation,
    ValidationResult,
    PhaseValidationResult,
)
from .document import (
    DocumentMetadata,
    SpecificationDocument,
    RequirementsDocument,
    DesignDocument,
    TasksDocument,
    AnyDocument,
    DocumentSet,
    build_document,
)
from .project import (
    SpecificationProject,
    ProjectSettings,
    ProjectMember,
    CreateProjectData,
    ProjectUpdates,
    new_project_id,
)
from .workflow import (
    AutoSaveConfig,
    SpecificationLoadingState,
    SpecificationErrorState,
    ProjectExport,
    StoreSnapshot,
    EXPORT_FORMAT_VERSION,
)

__all__ = [
    # Enums
    "SpecificationPhase",
    "PHASE_ORDER",
    "DocumentType",
    "DocumentStatus",
    "ValidationType",
    "ValidationSeverity",
    "ProjectComplexity",
    "MethodologyType",
    "ProjectStatus",
    "PhaseStatus",
    # Validation models
    "ValidationLocation",
    "ValidationResult",
    "PhaseValidationResult",
    # Document models
    "DocumentMetadata",
    "SpecificationDocument",
    "RequirementsDocument",
    "DesignDocument",
    "TasksDocument",
    "AnyDocument",
    "DocumentSet",
    "build_document",
    # Project models
    "SpecificationProject",
    "ProjectSettings",
    "ProjectMember",
    "CreateProjectData",
    "ProjectUpdates",
    "new_project_id",
    # Workflow models
    "AutoSaveConfig",
    "SpecificationLoadingState",
    "SpecificationErrorState",
    "ProjectExport",
    "StoreSnapshot",
    "EXPORT_FORMAT_VERSION",
]
