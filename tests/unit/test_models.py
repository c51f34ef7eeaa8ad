"""Pydantic model unit tests.

Tests enum ordering helpers, the tagged document union,
DocumentSet access and the export envelope aliases.
"""

import json

import pytest
from pydantic import TypeAdapter, ValidationError

from specflow.models import (
    PHASE_ORDER,
    AnyDocument,
    AutoSaveConfig,
    DesignDocument,
    DocumentSet,
    DocumentType,
    ProjectExport,
    RequirementsDocument,
    SpecificationPhase,
    SpecificationProject,
    TasksDocument,
    build_document,
    new_project_id,
)


# ===================================================================
# Enums
# ===================================================================

class TestPhases:
    def test_phase_order(self):
        assert [p.order for p in PHASE_ORDER] == [0, 1, 2, 3, 4, 5]

    def test_document_type_mapping(self):
        assert SpecificationPhase.DESIGN.document_type == DocumentType.DESIGN
        assert SpecificationPhase.IMPLEMENTATION.document_type is None
        assert DocumentType.TASKS.phase == SpecificationPhase.TASKS


# ===================================================================
# Documents
# ===================================================================

class TestDocuments:
    @pytest.mark.parametrize(
        "doc_type,cls,prefix",
        [
            (DocumentType.REQUIREMENTS, RequirementsDocument, "req"),
            (DocumentType.DESIGN, DesignDocument, "design"),
            (DocumentType.TASKS, TasksDocument, "tasks"),
        ],
    )
    def test_build_document(self, doc_type, cls, prefix):
        document = build_document(doc_type, "project-1", "body")
        assert isinstance(document, cls)
        assert document.id == f"{prefix}-project-1"
        assert document.type == doc_type
        assert document.version == 1

    def test_union_discriminates_on_type(self):
        adapter = TypeAdapter(AnyDocument)
        raw = build_document(DocumentType.TASKS, "p", "- [ ] 1. x").model_dump_json()
        assert isinstance(adapter.validate_json(raw), TasksDocument)

    def test_unknown_type_rejected(self):
        adapter = TypeAdapter(AnyDocument)
        with pytest.raises(ValidationError):
            adapter.validate_python({"id": "x", "project_id": "p", "title": "t", "type": "notes"})

    def test_version_must_be_positive(self):
        with pytest.raises(ValidationError):
            RequirementsDocument(id="x", project_id="p", title="t", version=0)


class TestDocumentSet:
    def test_put_get_present(self):
        documents = DocumentSet()
        documents.put(build_document(DocumentType.TASKS, "p", "t"))
        documents.put(build_document(DocumentType.REQUIREMENTS, "p", "r"))

        assert documents.get(DocumentType.DESIGN) is None
        assert [t for t, _ in documents.present()] == [DocumentType.REQUIREMENTS, DocumentType.TASKS]

    def test_from_documents_keeps_last_per_type(self):
        first = build_document(DocumentType.DESIGN, "p", "one")
        second = build_document(DocumentType.DESIGN, "p", "two")
        documents = DocumentSet.from_documents([first, second])
        assert documents.as_list() == [second]


# ===================================================================
# Projects and workflow models
# ===================================================================

class TestProjectModels:
    def test_new_project_defaults(self):
        project = SpecificationProject(name="x")
        assert project.id.startswith("project-")
        assert project.current_phase == SpecificationPhase.REQUIREMENTS
        assert project.settings.collaboration.max_collaborators == 10

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            SpecificationProject(name="")

    def test_new_project_id_prefix(self):
        assert new_project_id("imported").startswith("imported-")

    def test_autosave_defaults(self):
        config = AutoSaveConfig()
        assert config.enabled is True
        assert config.interval == 30000
        assert config.debounce_delay == 2000

    def test_autosave_rejects_non_positive(self):
        with pytest.raises(ValidationError):
            AutoSaveConfig(interval=0)

    def test_export_envelope_alias(self):
        envelope = ProjectExport(project=SpecificationProject(name="x"))
        data = json.loads(envelope.model_dump_json(by_alias=True))
        assert set(data) == {"project", "documents", "exportedAt", "version"}
        assert data["version"] == "1.0"
