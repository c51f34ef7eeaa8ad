"""
명세 문서 API입니다.
현재 프로젝트의 요구사항/설계/작업 문서를 편집, 검증, 저장합니다.
"""

from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from specflow.exceptions import InputValidationError
from specflow.models import DocumentType
from specflow.services import DocumentStore, get_document_store
from specflow.utils import validate_document_content

router = APIRouter()


class DocumentEdit(BaseModel):
    """문서 편집 요청 데이터 모델"""
    content: str
    metadata: Optional[dict[str, Any]] = None


def _active_store() -> DocumentStore:
    store = get_document_store()
    if store.current_project is None:
        raise InputValidationError("현재 프로젝트가 선택되지 않았습니다")
    return store


@router.get("")
async def list_documents() -> dict:
    """현재 프로젝트의 문서 전체 조회"""
    store = _active_store()
    return {
        "project_id": store.current_project.id,
        "unsaved_changes": store.unsaved_changes,
        "last_saved": store.last_saved.isoformat() if store.last_saved else None,
        "documents": store.documents.model_dump(mode="json"),
    }


@router.post("/validate")
async def validate_all_documents() -> dict:
    """존재하는 문서를 모두 검증합니다. (단계 캐시는 바뀌지 않음)"""
    store = _active_store()
    results = await store.validate_all_documents()
    return {
        doc_type: [r.model_dump(mode="json") for r in items]
        for doc_type, items in results.items()
    }


@router.post("/save")
async def save_all_documents() -> dict:
    """메모리의 문서를 모두 저장합니다."""
    store = _active_store()
    await store.save_all_documents()
    return {
        "message": "문서가 저장되었습니다",
        "unsaved_changes": store.unsaved_changes,
        "last_saved": store.last_saved.isoformat() if store.last_saved else None,
    }


@router.get("/{doc_type}")
async def get_document(doc_type: DocumentType) -> dict:
    """문서 하나 조회"""
    store = _active_store()
    document = store.get_document(doc_type)

    if document is None:
        raise HTTPException(status_code=404, detail="문서를 찾을 수 없습니다")

    return document.model_dump(mode="json")


@router.put("/{doc_type}")
async def update_document(doc_type: DocumentType, edit: DocumentEdit) -> dict:
    """
    문서 내용을 갱신합니다.
    문서가 없으면 새로 만들고, 있으면 version 을 1 올립니다.
    자동 저장이 켜져 있으면 디바운스 타이머가 다시 무장됩니다.
    """
    store = _active_store()
    content = validate_document_content(edit.content)
    document = await store.update_document(doc_type, content, edit.metadata)
    return document.model_dump(mode="json")


@router.post("/{doc_type}/validate")
async def validate_document(doc_type: DocumentType) -> dict:
    """문서 하나를 검증합니다."""
    store = _active_store()
    if store.get_document(doc_type) is None:
        raise HTTPException(status_code=404, detail="문서를 찾을 수 없습니다")

    results = await store.validate_document(doc_type)
    return {
        "type": doc_type.value,
        "error_count": sum(1 for r in results if r.is_error),
        "results": [r.model_dump(mode="json") for r in results],
    }


@router.post("/{doc_type}/save")
async def save_document(doc_type: DocumentType) -> dict:
    """문서 하나를 저장합니다."""
    store = _active_store()
    if store.get_document(doc_type) is None:
        raise HTTPException(status_code=404, detail="문서를 찾을 수 없습니다")

    await store.save_document(doc_type)
    return {
        "message": "문서가 저장되었습니다",
        "type": doc_type.value,
        "unsaved_changes": store.unsaved_changes,
    }
