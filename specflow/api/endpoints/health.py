"""
헬스 체크(Health Check) 엔드포인트입니다.
서버가 살아서 정상적으로 응답하는지 확인하는 용도입니다.
"""

from fastapi import APIRouter

from specflow.config import get_settings
from specflow.services import get_document_store

router = APIRouter()


@router.get("")
async def health_check():
    """
    기본 상태 확인 함수.
    서버가 켜져 있으면 {"status": "healthy"}를 반환합니다.
    """
    return {"status": "healthy"}


@router.get("/detail")
async def health_check_detail():
    """
    상세 상태 확인 함수.
    저장소 경로와 자동 저장 상태도 같이 보여줍니다.
    """
    settings = get_settings()
    store = get_document_store()
    return {
        "status": "healthy",
        "config": {
            "storage_path": settings.storage_path,
            "autosave_enabled": store.auto_save.enabled,
            "autosave_running": store.autosave.is_running,
        },
        "projects": len(store.projects),
        "unsaved_changes": store.unsaved_changes,
    }
