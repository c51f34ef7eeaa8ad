"""
명세 프로젝트 관리 API입니다.
프로젝트 생성/조회/수정/삭제와 JSON 내보내기/가져오기 기능을 제공합니다.
"""

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import Response

from specflow.exceptions import ProjectNotFoundError
from specflow.models import (
    CreateProjectData,
    ProjectStatus,
    ProjectUpdates,
    SpecificationPhase,
)
from specflow.services import get_document_store
from specflow.utils import validate_import_payload

router = APIRouter()


@router.get("")
async def list_projects(
    status: Optional[ProjectStatus] = None,
    phase: Optional[SpecificationPhase] = None,
) -> dict:
    """
    프로젝트 목록 조회.
    status 또는 phase 로 걸러낼 수 있습니다.
    """
    store = get_document_store()
    projects = await store.fetch_projects()

    if status is not None:
        matched = {p.id for p in store.projects_by_status(status)}
        projects = [p for p in projects if p.id in matched]
    if phase is not None:
        matched = {p.id for p in store.projects_by_phase(phase)}
        projects = [p for p in projects if p.id in matched]

    return {
        "total": len(projects),
        "current_project_id": store.current_project.id if store.current_project else None,
        "projects": [p.model_dump(mode="json", exclude={"documents"}) for p in projects],
    }


@router.post("")
async def create_project(data: CreateProjectData) -> dict:
    """새 프로젝트를 만들고 현재 프로젝트로 지정합니다."""
    store = get_document_store()
    project = await store.create_project(data)
    return project.model_dump(mode="json")


@router.get("/recent")
async def recent_projects(limit: int = 5) -> dict:
    """최근 수정된 프로젝트 목록"""
    store = get_document_store()
    return {
        "projects": [
            p.model_dump(mode="json", exclude={"documents"})
            for p in store.recent_projects(limit)
        ],
    }


@router.post("/import")
async def import_project(request: Request) -> dict:
    """
    내보낸 JSON 으로 프로젝트를 가져옵니다.
    가져온 프로젝트는 새 ID를 받으며 현재 프로젝트는 바뀌지 않습니다.
    """
    serialized = validate_import_payload(await request.body())

    store = get_document_store()
    project = await store.import_project(serialized)

    return {
        "message": "프로젝트를 가져왔습니다",
        "project": project.model_dump(mode="json"),
    }


@router.get("/{project_id}")
async def get_project(project_id: str) -> dict:
    """ID로 프로젝트를 조회하고 현재 프로젝트로 지정한 뒤 문서를 불러옵니다."""
    store = get_document_store()
    project = await store.fetch_project_by_id(project_id)
    documents = await store.load_documents()

    return {
        "project": project.model_dump(mode="json", exclude={"documents"}),
        "documents": documents.model_dump(mode="json"),
        "current_phase": store.current_phase.value,
    }


@router.patch("/{project_id}")
async def update_project(project_id: str, updates: ProjectUpdates) -> dict:
    """프로젝트 정보 수정"""
    store = get_document_store()
    project = await store.update_project(project_id, updates)

    if project is None:
        raise ProjectNotFoundError(details={"project_id": project_id})

    return project.model_dump(mode="json", exclude={"documents"})


@router.delete("/{project_id}")
async def delete_project(project_id: str) -> dict:
    """프로젝트 삭제"""
    store = get_document_store()
    removed = await store.delete_project(project_id)

    if not removed:
        raise ProjectNotFoundError(details={"project_id": project_id})

    return {"message": "프로젝트가 삭제되었습니다", "project_id": project_id}


@router.get("/{project_id}/export")
async def export_project(project_id: str) -> Response:
    """프로젝트와 문서를 JSON 파일로 다운로드"""
    store = get_document_store()
    content = await store.export_project(project_id)

    return Response(
        content=content,
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{project_id}.json"'
        },
    )
