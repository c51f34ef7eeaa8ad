"""Rule-based document validator.

Scores a specification document against the structural and formatting rules
for its type and aggregates the outcome into a PhaseValidationResult.
"""

from typing import Optional

from specflow.models import (
    SpecificationPhase,
    ValidationResult,
    ValidationType,
    ValidationSeverity,
    PhaseValidationResult,
    SpecificationDocument,
    RequirementsDocument,
    DesignDocument,
    TasksDocument,
    DocumentSet,
)
from specflow.utils.text import word_count
from . import rules


def _result(
    result_id: str,
    rule: str,
    validation_type: ValidationType,
    severity: ValidationSeverity,
    message: str,
    suggestion: Optional[str] = None,
) -> ValidationResult:
    return ValidationResult(
        id=result_id,
        type=validation_type,
        severity=severity,
        message=message,
        suggestion=suggestion,
        rule=rule,
    )


class ValidationEngine:
    """
    Stateless document validator.

    The async ``validate_*`` methods form the validation collaborator contract
    used by the document store; the synchronous ``check_*`` methods hold the
    actual rules and only look at the text content.
    """

    # ==================== collaborator contract ====================

    async def validate_requirements(self, document: RequirementsDocument) -> list[ValidationResult]:
        return self.check_requirements(document.content)

    async def validate_design(self, document: DesignDocument) -> list[ValidationResult]:
        return self.check_design(document.content)

    async def validate_tasks(self, document: TasksDocument) -> list[ValidationResult]:
        return self.check_tasks(document.content)

    async def validate_document(self, document: SpecificationDocument) -> list[ValidationResult]:
        """Dispatch to the rule set matching the document type."""
        match document:
            case RequirementsDocument():
                return await self.validate_requirements(document)
            case DesignDocument():
                return await self.validate_design(document)
            case TasksDocument():
                return await self.validate_tasks(document)
            case _:
                raise TypeError(f"Unsupported document: {type(document).__name__}")

    # ==================== rule sets ====================

    def check_requirements(self, content: str) -> list[ValidationResult]:
        """
        Requirements rules, in order:

        1. empty document (error, stops here)
        2. at least one user story (error)
        3. EARS acceptance criteria (warning)
        4. introduction section (warning)
        5. at least two numbered requirements (warning)
        6. at least 100 words (warning)
        """
        if not content or not content.strip():
            return [_result(
                "req-empty", "document-completeness",
                ValidationType.COMPLETENESS, ValidationSeverity.ERROR,
                "Requirements document cannot be empty",
            )]

        results = []

        if not rules.USER_STORY_PATTERN.search(content):
            results.append(_result(
                "req-no-user-stories", "user-story-required",
                ValidationType.FORMAT, ValidationSeverity.ERROR,
                "Requirements document must contain at least one user story",
                'Add user stories in the format: "As a [role], I want [feature], so that [benefit]"',
            ))

        if not rules.EARS_PATTERN.search(content):
            results.append(_result(
                "req-no-ears", "ears-format-recommended",
                ValidationType.FORMAT, ValidationSeverity.WARNING,
                "Consider using EARS format for acceptance criteria",
                'Use format: "WHEN [event] THEN [system] SHALL [response]"',
            ))

        if not rules.INTRODUCTION_PATTERN.search(content):
            results.append(_result(
                "req-no-intro", "document-structure",
                ValidationType.COMPLETENESS, ValidationSeverity.WARNING,
                "Requirements document should include an introduction section",
                "Add an introduction section explaining the project overview",
            ))

        sections = rules.NUMBERED_REQUIREMENT_PATTERN.findall(content)
        if len(sections) < rules.REQUIREMENTS_MIN_SECTIONS:
            results.append(_result(
                "req-insufficient", "requirement-quantity",
                ValidationType.COMPLETENESS, ValidationSeverity.WARNING,
                "Consider adding more detailed requirements (at least 2 requirements recommended)",
                "Break down functionality into specific, testable requirements",
            ))

        if word_count(content) < rules.REQUIREMENTS_MIN_WORDS:
            results.append(_result(
                "req-too-short", "document-length",
                ValidationType.COMPLETENESS, ValidationSeverity.WARNING,
                "Requirements document seems too brief for a complete specification",
                "Consider adding more detail to requirements and acceptance criteria",
            ))

        return results

    def check_design(self, content: str) -> list[ValidationResult]:
        """Design rules: required sections, diagrams, technology choices, length."""
        if not content or not content.strip():
            return [_result(
                "design-empty", "document-completeness",
                ValidationType.COMPLETENESS, ValidationSeverity.ERROR,
                "Design document cannot be empty",
            )]

        results = []

        for pattern, name, result_id in rules.DESIGN_SECTIONS:
            if not pattern.search(content):
                results.append(_result(
                    result_id, "design-structure",
                    ValidationType.COMPLETENESS, ValidationSeverity.WARNING,
                    f"Design document should include a {name} section",
                    f"Add a {name} section to describe the system {name.lower()}",
                ))

        if not rules.DIAGRAM_PATTERN.search(content):
            results.append(_result(
                "design-no-diagrams", "visual-documentation",
                ValidationType.QUALITY, ValidationSeverity.INFO,
                "Consider adding diagrams to illustrate the system architecture",
                "Use Mermaid diagrams or images to visualize system components and relationships",
            ))

        mentions = rules.TECHNOLOGY_PATTERN.findall(content)
        if len(mentions) < rules.DESIGN_MIN_TECH_MENTIONS:
            results.append(_result(
                "design-no-tech", "technology-specification",
                ValidationType.COMPLETENESS, ValidationSeverity.WARNING,
                "Design document should specify technology choices",
                "Include information about frameworks, databases, and other technologies to be used",
            ))

        if word_count(content) < rules.DESIGN_MIN_WORDS:
            results.append(_result(
                "design-too-short", "document-length",
                ValidationType.COMPLETENESS, ValidationSeverity.WARNING,
                "Design document seems too brief for a complete specification",
                "Consider adding more detail to architecture and component descriptions",
            ))

        return results

    def check_tasks(self, content: str) -> list[ValidationResult]:
        """Task rules: checklist format, numbering, traceability, hierarchy."""
        if not content or not content.strip():
            return [_result(
                "tasks-empty", "document-completeness",
                ValidationType.COMPLETENESS, ValidationSeverity.ERROR,
                "Task document cannot be empty",
            )]

        results = []
        items = rules.CHECKLIST_PATTERN.findall(content)

        if not items:
            results.append(_result(
                "tasks-no-checklist", "task-format",
                ValidationType.FORMAT, ValidationSeverity.ERROR,
                "Task document must contain a checklist format with - [ ] items",
                "Use markdown checklist format: - [ ] Task description",
            ))
        elif len(items) < rules.TASKS_MIN_ITEMS:
            results.append(_result(
                "tasks-insufficient", "task-granularity",
                ValidationType.COMPLETENESS, ValidationSeverity.WARNING,
                "Consider breaking down work into more specific tasks (at least 3 recommended)",
                "Add more granular tasks for better project tracking",
            ))

        if not rules.NUMBERED_TASK_PATTERN.search(content):
            results.append(_result(
                "tasks-no-numbering", "task-numbering",
                ValidationType.FORMAT, ValidationSeverity.INFO,
                "Consider numbering tasks for better organization",
                "Use format: - [ ] 1. Task description or - [ ] 1.1 Subtask description",
            ))

        if not rules.REQUIREMENT_REF_PATTERN.search(content):
            results.append(_result(
                "tasks-no-req-refs", "requirement-traceability",
                ValidationType.QUALITY, ValidationSeverity.WARNING,
                "Tasks should reference specific requirements for traceability",
                'Add requirement references like "_Requirements: 1.1, 2.3_" to tasks',
            ))

        if len(items) > rules.TASKS_HIERARCHY_THRESHOLD and not rules.SUBTASK_PATTERN.search(content):
            results.append(_result(
                "tasks-no-subtasks", "task-hierarchy",
                ValidationType.QUALITY, ValidationSeverity.INFO,
                "Consider breaking large tasks into subtasks for better management",
                "Use hierarchical numbering: 1. Main task, 1.1 Subtask, 1.2 Subtask",
            ))

        return results

    # ==================== phase aggregation ====================

    async def validate_phase(
        self,
        phase: SpecificationPhase,
        documents: DocumentSet,
    ) -> PhaseValidationResult:
        """
        Validate one phase against the current document set.

        Completion rule for document phases:
            is_complete = no errors AND minimum content reached
            percentage  = 100 if complete else max(0, 100 - errors * 25)

        Phases without a document (implementation, review, completed) are
        reported as not complete with a single informational result.
        """
        results: list[ValidationResult] = []
        is_complete = False
        completion = 0

        doc_type = phase.document_type
        if doc_type is None:
            results.append(_result(
                "phase-not-implemented", "phase-validation",
                ValidationType.COMPLETENESS, ValidationSeverity.INFO,
                f"{phase.value} phase validation not yet implemented",
            ))
        else:
            document = documents.get(doc_type)
            if document is None:
                results.append(_result(
                    f"{_id_prefix(phase)}-missing", "document-required",
                    ValidationType.COMPLETENESS, ValidationSeverity.ERROR,
                    f"{_label(phase)} document is missing",
                ))
            else:
                results = await self.validate_document(document)
                errors = sum(1 for r in results if r.is_error)
                is_complete = errors == 0 and self.meets_minimum_content(document)
                completion = 100 if is_complete else max(0, 100 - errors * rules.ERROR_PENALTY)

        return PhaseValidationResult(
            phase=phase,
            is_valid=not any(r.is_error for r in results),
            is_complete=is_complete,
            validation_results=results,
            completion_percentage=completion,
            required_fields=self.required_fields(phase),
            missing_fields=self.missing_fields(phase, documents),
        )

    @staticmethod
    def meets_minimum_content(document: SpecificationDocument) -> bool:
        """Type-specific minimum content check used by the completion rule."""
        match document:
            case RequirementsDocument():
                return len(document.content) > rules.REQUIREMENTS_MIN_LENGTH
            case DesignDocument():
                return len(document.content) > rules.DESIGN_MIN_LENGTH
            case TasksDocument():
                return rules.OPEN_TASK_MARKER in document.content
            case _:
                return False

    # ==================== field hints ====================

    @staticmethod
    def required_fields(phase: SpecificationPhase) -> list[str]:
        return list(rules.REQUIRED_FIELDS.get(phase, []))

    def missing_fields(self, phase: SpecificationPhase, documents: DocumentSet) -> list[str]:
        """
        Secondary pass used for UI hints only.

        Phases with a document report every required field when the document
        is absent; phases without documents report nothing missing.
        """
        doc_type = phase.document_type
        if doc_type is None:
            return []

        document = documents.get(doc_type)
        if document is None:
            return self.required_fields(phase)

        content = document.content
        missing = []

        match phase:
            case SpecificationPhase.REQUIREMENTS:
                if not rules.USER_STORY_PATTERN.search(content):
                    missing.append("user stories")
                if not rules.EARS_PATTERN.search(content):
                    missing.append("acceptance criteria")
            case SpecificationPhase.DESIGN:
                if not rules.ARCHITECTURE_PATTERN.search(content):
                    missing.append("architecture overview")
                if not rules.COMPONENTS_PATTERN.search(content):
                    missing.append("component specifications")
            case SpecificationPhase.TASKS:
                if rules.OPEN_TASK_MARKER not in content:
                    missing.append("task breakdown")
                if not rules.REQUIREMENT_REF_MARKER.search(content):
                    missing.append("requirement traceability")

        return missing


def _id_prefix(phase: SpecificationPhase) -> str:
    return "req" if phase == SpecificationPhase.REQUIREMENTS else phase.value


def _label(phase: SpecificationPhase) -> str:
    return "Task" if phase == SpecificationPhase.TASKS else phase.value.capitalize()
