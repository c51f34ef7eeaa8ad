"""
문서 저장소(DocumentStore) 운영 관련 데이터 모델입니다.
자동 저장 설정, 로딩/에러 상태, 내보내기 포맷, 상태 스냅샷을 정의합니다.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .common import SpecificationPhase
from .document import DocumentSet
from .project import SpecificationProject


EXPORT_FORMAT_VERSION = "1.0"


class AutoSaveConfig(BaseModel):
    """
    자동 저장 설정입니다. (시간 단위는 모두 밀리초)

    - interval: 주기 저장 간격 (저장 안 된 변경이 있을 때만 저장)
    - debounce_delay: 마지막 편집 후 이 시간 동안 편집이 없으면 저장
    """

    enabled: bool = True
    interval: int = Field(default=30000, gt=0, description="주기 저장 간격 (ms)")
    debounce_delay: int = Field(default=2000, gt=0, description="디바운스 지연 (ms)")


class SpecificationLoadingState(BaseModel):
    """작업 그룹별 진행 중 여부"""

    projects: bool = False
    current_project: bool = False
    documents: bool = False
    validation: bool = False
    saving: bool = False
    phase_transition: bool = False


class SpecificationErrorState(BaseModel):
    """작업 그룹별 마지막 에러 메시지"""

    projects: Optional[str] = None
    current_project: Optional[str] = None
    documents: Optional[str] = None
    validation: Optional[str] = None
    saving: Optional[str] = None
    phase_transition: Optional[str] = None


class ProjectExport(BaseModel):
    """
    프로젝트 내보내기/가져오기 JSON 포맷입니다.

    {
      "project": {...},
      "documents": {"requirements": ..., "design": ..., "tasks": ...},
      "exportedAt": "<ISO-8601>",
      "version": "1.0"
    }
    """

    model_config = ConfigDict(populate_by_name=True)

    project: SpecificationProject
    documents: DocumentSet = Field(default_factory=DocumentSet)
    exported_at: datetime = Field(default_factory=datetime.now, alias="exportedAt")
    version: str = EXPORT_FORMAT_VERSION


class StoreSnapshot(BaseModel):
    """
    세션 간에 보존하는 저장소 상태입니다.
    (프로젝트 목록, 현재 프로젝트, 현재 단계, 문서, 자동 저장 설정)
    """

    projects: list[SpecificationProject] = Field(default_factory=list)
    current_project_id: Optional[str] = None
    current_phase: SpecificationPhase = SpecificationPhase.REQUIREMENTS
    documents: DocumentSet = Field(default_factory=DocumentSet)
    auto_save: AutoSaveConfig = Field(default_factory=AutoSaveConfig)
    saved_at: datetime = Field(default_factory=datetime.now)
