"""
검증 결과 데이터 모델입니다.
문서 규칙 검사 결과(ValidationResult)와 단계 단위 집계 결과(PhaseValidationResult)를 정의합니다.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from .common import SpecificationPhase, ValidationSeverity, ValidationType


class ValidationLocation(BaseModel):
    """문제가 발견된 위치 (줄/열/섹션)"""

    line: Optional[int] = Field(default=None, description="줄 번호")
    column: Optional[int] = Field(default=None, description="열 번호")
    section: Optional[str] = Field(default=None, description="섹션 이름")
    element: Optional[str] = Field(default=None, description="요소 이름")


class ValidationResult(BaseModel):
    """
    개별 규칙 검사 결과입니다.
    검증 실패는 예외가 아니라 이 데이터로 표현됩니다.
    """

    id: str = Field(..., description="결과 ID (예: req-no-user-stories)")
    type: ValidationType = Field(..., description="규칙 분류")
    severity: ValidationSeverity
    message: str = Field(..., description="사용자에게 보여줄 메시지")
    suggestion: Optional[str] = Field(default=None, description="수정 제안")
    rule: str = Field(..., description="규칙 식별자 (예: user-story-required)")
    location: Optional[ValidationLocation] = None

    @property
    def is_error(self) -> bool:
        return self.severity == ValidationSeverity.ERROR


class PhaseValidationResult(BaseModel):
    """
    단계 검증 결과입니다.
    단계 이동 가능 여부 판단에 사용되는 캐시 항목이기도 합니다.
    """

    phase: SpecificationPhase
    is_valid: bool = Field(..., description="오류(error)가 하나도 없는지 여부")
    is_complete: bool = Field(..., description="단계 완료 조건 충족 여부")
    validation_results: list[ValidationResult] = Field(default_factory=list)
    completion_percentage: int = Field(default=0, ge=0, le=100)
    required_fields: list[str] = Field(default_factory=list)
    missing_fields: list[str] = Field(default_factory=list)
    validated_at: datetime = Field(default_factory=datetime.now)

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.validation_results if r.is_error)
