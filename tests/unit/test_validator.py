"""ValidationEngine unit tests.

Tests the rule-based document checks and the phase aggregation:
- check_requirements: user stories, EARS clauses, structure, length
- check_design: required sections, diagrams, technology mentions
- check_tasks: checklist format, numbering, traceability, hierarchy
- validate_phase: completion rule and missing-document handling
"""

import pytest

from specflow.layers.validation import ValidationEngine
from specflow.models import (
    DocumentSet,
    DocumentType,
    SpecificationPhase,
    ValidationSeverity,
    build_document,
)


@pytest.fixture
def engine():
    return ValidationEngine()


def _rules(results) -> set[str]:
    return {r.rule for r in results}


def _ids(results) -> set[str]:
    return {r.id for r in results}


def _documents(**contents) -> DocumentSet:
    """Helper to build a DocumentSet from keyword contents (requirements=..., ...)."""
    documents = DocumentSet()
    for name, content in contents.items():
        documents.put(build_document(DocumentType(name), "project-test", content))
    return documents


# ============================================================
# check_requirements
# ============================================================

class TestCheckRequirements:
    def test_empty_document_single_error(self, engine):
        results = engine.check_requirements("   \n  ")
        assert len(results) == 1
        assert results[0].id == "req-empty"
        assert results[0].severity == ValidationSeverity.ERROR

    def test_missing_user_story_is_error(self, engine):
        results = engine.check_requirements("# Introduction\nSome text without stories")
        story = [r for r in results if r.rule == "user-story-required"]
        assert len(story) == 1
        assert story[0].severity == ValidationSeverity.ERROR

    def test_user_story_sentence_form_accepted(self, engine):
        content = "As a user I want to log in so that I can see my data"
        assert "user-story-required" not in _rules(engine.check_requirements(content))

    def test_ears_without_shall_flagged(self, engine):
        content = "WHEN user clicks login THEN system authenticates"
        results = engine.check_requirements(content)
        assert "ears-format-recommended" in _rules(results)

    def test_ears_with_shall_not_flagged(self, engine):
        content = "WHEN user clicks login THEN system SHALL authenticate"
        results = engine.check_requirements(content)
        assert "ears-format-recommended" not in _rules(results)

    def test_if_then_shall_form_accepted(self, engine):
        content = "IF the token expires THEN the system SHALL log out the user"
        assert "req-no-ears" not in _ids(engine.check_requirements(content))

    def test_ears_is_case_insensitive(self, engine):
        content = "when user clicks login then system shall authenticate"
        assert "req-no-ears" not in _ids(engine.check_requirements(content))

    def test_structure_warnings(self, engine):
        results = engine.check_requirements("**User Story:** short")
        ids = _ids(results)
        assert "req-no-intro" in ids
        assert "req-insufficient" in ids
        assert "req-too-short" in ids
        for r in results:
            if r.id in {"req-no-intro", "req-insufficient", "req-too-short"}:
                assert r.severity == ValidationSeverity.WARNING

    def test_well_formed_document_has_no_errors(self, engine, requirements_content):
        results = engine.check_requirements(requirements_content)
        assert not any(r.is_error for r in results)
        ids = _ids(results)
        assert "req-no-intro" not in ids
        assert "req-insufficient" not in ids


# ============================================================
# check_design
# ============================================================

class TestCheckDesign:
    def test_empty_design(self, engine):
        results = engine.check_design("")
        assert _ids(results) == {"design-empty"}

    def test_missing_sections_reported(self, engine):
        results = engine.check_design("Just some prose about the system")
        ids = _ids(results)
        assert {
            "design-no-overview",
            "design-no-architecture",
            "design-no-components",
            "design-no-data-models",
        } <= ids
        assert "design-no-diagrams" in ids
        assert "design-no-tech" in ids
        assert not any(r.is_error for r in results)

    def test_diagram_is_info(self, engine):
        results = engine.check_design("## Overview\nno pictures")
        diagram = [r for r in results if r.id == "design-no-diagrams"][0]
        assert diagram.severity == ValidationSeverity.INFO

    def test_complete_design_sections(self, engine, design_content):
        ids = _ids(engine.check_design(design_content))
        assert "design-no-architecture" not in ids
        assert "design-no-diagrams" not in ids
        assert "design-no-tech" not in ids


# ============================================================
# check_tasks
# ============================================================

class TestCheckTasks:
    def test_no_checklist_is_error(self, engine):
        results = engine.check_tasks("1. Do something\n2. Do more")
        checklist = [r for r in results if r.rule == "task-format"]
        assert checklist and checklist[0].severity == ValidationSeverity.ERROR

    def test_missing_requirement_reference(self, engine):
        results = engine.check_tasks("- [ ] 1.1 Implement user authentication")
        refs = [r for r in results if r.rule == "requirement-traceability"]
        assert len(refs) == 1
        assert refs[0].severity in (ValidationSeverity.WARNING, ValidationSeverity.INFO)

    def test_requirement_reference_removes_issue(self, engine):
        content = "- [ ] 1.1 Implement user authentication\n_Requirements: 1.1_"
        assert "requirement-traceability" not in _rules(engine.check_tasks(content))

    def test_few_tasks_warning(self, engine):
        results = engine.check_tasks("- [ ] 1. One\n- [x] 2. Two")
        assert "tasks-insufficient" in _ids(results)

    def test_unnumbered_tasks_info(self, engine):
        results = engine.check_tasks("- [ ] One\n- [ ] Two\n- [ ] Three")
        assert "tasks-no-numbering" in _ids(results)

    def test_large_flat_list_suggests_subtasks(self, engine):
        content = "\n".join(f"- [ ] {i}. Task {i}" for i in range(1, 8))
        assert "tasks-no-subtasks" in _ids(engine.check_tasks(content))

    def test_large_list_with_subtasks(self, engine):
        lines = [f"- [ ] {i}. Task {i}" for i in range(1, 7)] + ["- [ ] 1.1 Subtask"]
        assert "tasks-no-subtasks" not in _ids(engine.check_tasks("\n".join(lines)))


# ============================================================
# validate_phase
# ============================================================

class TestValidatePhase:
    @pytest.mark.asyncio
    async def test_requirements_without_user_story_incomplete(self, engine):
        documents = _documents(requirements="# Introduction\n" + "plain text " * 30)
        result = await engine.validate_phase(SpecificationPhase.REQUIREMENTS, documents)

        assert result.is_complete is False
        assert result.is_valid is False
        errors = [r for r in result.validation_results if r.is_error]
        assert any(r.rule == "user-story-required" for r in errors)
        assert result.completion_percentage == 75

    @pytest.mark.asyncio
    async def test_requirements_complete(self, engine):
        content = (
            "**User Story:** As a user, I want to log in, so that I can work.\n"
            "WHEN the user submits the form THEN the system SHALL create a session."
        )
        assert len(content) > 100
        result = await engine.validate_phase(
            SpecificationPhase.REQUIREMENTS, _documents(requirements=content)
        )
        assert result.is_complete is True
        assert result.completion_percentage == 100

    @pytest.mark.asyncio
    async def test_short_requirements_not_complete(self, engine):
        content = "**User Story:** As a user"
        result = await engine.validate_phase(
            SpecificationPhase.REQUIREMENTS, _documents(requirements=content)
        )
        assert result.is_valid is True
        assert result.is_complete is False
        assert result.completion_percentage == 100

    @pytest.mark.asyncio
    async def test_missing_document(self, engine):
        result = await engine.validate_phase(SpecificationPhase.TASKS, DocumentSet())
        assert result.is_complete is False
        assert result.completion_percentage == 0
        assert _ids(result.validation_results) == {"tasks-missing"}
        assert result.validation_results[0].rule == "document-required"
        assert result.validation_results[0].message == "Task document is missing"
        assert result.missing_fields == result.required_fields

    @pytest.mark.asyncio
    async def test_missing_requirements_id(self, engine):
        result = await engine.validate_phase(SpecificationPhase.REQUIREMENTS, DocumentSet())
        assert _ids(result.validation_results) == {"req-missing"}

    @pytest.mark.asyncio
    async def test_phase_without_document(self, engine):
        result = await engine.validate_phase(SpecificationPhase.REVIEW, DocumentSet())
        assert result.is_complete is False
        assert result.is_valid is True
        assert len(result.validation_results) == 1
        assert result.validation_results[0].severity == ValidationSeverity.INFO
        assert result.missing_fields == []

    @pytest.mark.asyncio
    async def test_tasks_phase_complete(self, engine, tasks_content):
        result = await engine.validate_phase(
            SpecificationPhase.TASKS, _documents(tasks=tasks_content)
        )
        assert result.is_complete is True
        assert result.missing_fields == []

    @pytest.mark.asyncio
    async def test_design_missing_fields(self, engine):
        result = await engine.validate_phase(
            SpecificationPhase.DESIGN, _documents(design="# Overview\nsmall")
        )
        assert "architecture overview" in result.missing_fields
        assert "component specifications" in result.missing_fields


# ============================================================
# validate_document dispatch
# ============================================================

class TestValidateDocument:
    @pytest.mark.asyncio
    async def test_dispatch_by_type(self, engine):
        tasks = build_document(DocumentType.TASKS, "p", "no checklist here")
        results = await engine.validate_document(tasks)
        assert "tasks-no-checklist" in _ids(results)

        design = build_document(DocumentType.DESIGN, "p", "")
        results = await engine.validate_document(design)
        assert _ids(results) == {"design-empty"}
