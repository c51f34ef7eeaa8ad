"""
명세 프로젝트 데이터 모델입니다.
프로젝트 본체, 기본 설정값, 생성/수정 요청 데이터를 정의합니다.
"""

import uuid
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from .common import (
    MethodologyType,
    ProjectComplexity,
    ProjectStatus,
    SpecificationPhase,
)
from .document import AnyDocument


def new_project_id(prefix: str = "project") -> str:
    """새 프로젝트 ID 생성 (예: project-1a2b3c4d)"""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


class CollaborationSettings(BaseModel):
    real_time_editing: bool = True
    commenting_enabled: bool = True
    review_workflow: bool = False
    approval_required: bool = False
    max_collaborators: int = 10


class ValidationSettings(BaseModel):
    auto_validation: bool = True
    validation_rules: list[str] = Field(default_factory=list)
    custom_rules: list[str] = Field(default_factory=list)
    strict_mode: bool = False


class TemplateSettings(BaseModel):
    default_templates: list[str] = Field(default_factory=list)
    custom_templates: list[str] = Field(default_factory=list)
    template_validation: bool = True


class NotificationSettings(BaseModel):
    email_notifications: bool = True
    in_app_notifications: bool = True
    webhooks: list[str] = Field(default_factory=list)


class ProjectSettings(BaseModel):
    """프로젝트 생성 시 적용되는 기본 설정 묶음"""

    visibility: Literal["private", "team", "public"] = "private"
    collaboration: CollaborationSettings = Field(default_factory=CollaborationSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    templates: TemplateSettings = Field(default_factory=TemplateSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)


class ProjectMember(BaseModel):
    user_id: str
    role: Literal["owner", "lead", "contributor", "reviewer", "observer"] = "contributor"
    permissions: list[Literal["read", "write", "review", "approve", "admin"]] = Field(
        default_factory=lambda: ["read"]
    )
    joined_at: datetime = Field(default_factory=datetime.now)


class SpecificationProject(BaseModel):
    """
    명세 프로젝트입니다.

    - 생성 시 단계는 항상 requirements 입니다.
    - documents 에는 문서 종류별로 최대 1개의 문서만 존재합니다.
    """

    id: str = Field(default_factory=new_project_id)
    name: str = Field(..., min_length=1)
    description: str = ""
    domain: str = ""
    complexity: ProjectComplexity = ProjectComplexity.MODERATE
    methodology: MethodologyType = MethodologyType.AGILE
    status: ProjectStatus = ProjectStatus.PLANNING
    current_phase: SpecificationPhase = SpecificationPhase.REQUIREMENTS
    documents: list[AnyDocument] = Field(default_factory=list)
    team: list[ProjectMember] = Field(default_factory=list)
    settings: ProjectSettings = Field(default_factory=ProjectSettings)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None


class CreateProjectData(BaseModel):
    """프로젝트 생성 요청 데이터"""

    name: str = Field(..., min_length=1)
    description: str = ""
    domain: str = ""
    complexity: ProjectComplexity = ProjectComplexity.MODERATE
    methodology: MethodologyType = MethodologyType.AGILE
    template_id: Optional[str] = None


class ProjectUpdates(BaseModel):
    """
    프로젝트 수정 요청 데이터 (지정한 필드만 반영)
    단계는 여기서 바꿀 수 없습니다. 단계 이동은 transition_to_phase 를 사용합니다.
    """

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None
    domain: Optional[str] = None
    status: Optional[ProjectStatus] = None
