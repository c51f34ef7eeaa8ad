"""
자동 저장 설정 API입니다.
"""

from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from specflow.services import get_document_store

router = APIRouter()


class AutoSaveUpdate(BaseModel):
    """자동 저장 부분 설정 (밀리초)"""
    enabled: Optional[bool] = None
    interval: Optional[int] = Field(default=None, gt=0)
    debounce_delay: Optional[int] = Field(default=None, gt=0)


def _state() -> dict:
    store = get_document_store()
    return {
        "config": store.auto_save.model_dump(),
        "running": store.autosave.is_running,
        "debounce_pending": store.autosave.debounce_pending,
        "unsaved_changes": store.unsaved_changes,
        "last_saved": store.last_saved.isoformat() if store.last_saved else None,
    }


@router.get("")
async def get_autosave() -> dict:
    return _state()


@router.patch("")
async def configure_autosave(update: AutoSaveUpdate) -> dict:
    """설정을 병합합니다. 켜져 있으면 새 설정으로 타이머를 다시 무장합니다."""
    store = get_document_store()
    store.configure_auto_save(**update.model_dump(exclude_none=True))
    return _state()


@router.post("/enable")
async def enable_autosave() -> dict:
    get_document_store().enable_auto_save()
    return _state()


@router.post("/disable")
async def disable_autosave() -> dict:
    get_document_store().disable_auto_save()
    return _state()
