"""
공통 열거형 모듈입니다.
프로젝트, 문서, 검증 결과에서 함께 사용하는 상태값과 분류를 정의합니다.
"""

from enum import Enum
from typing import Optional


class SpecificationPhase(str, Enum):
    """
    명세 프로젝트가 거치는 6단계입니다.

    순서가 의미를 가지며, 앞 단계가 완료되어야 다음 단계로 이동할 수 있습니다.
    (이전 단계로 돌아가는 것은 언제든 가능합니다.)
    """

    REQUIREMENTS = "requirements"      # 요구사항 정의
    DESIGN = "design"                  # 설계
    TASKS = "tasks"                    # 작업 분해
    IMPLEMENTATION = "implementation"  # 구현
    REVIEW = "review"                  # 검토
    COMPLETED = "completed"            # 완료

    @property
    def order(self) -> int:
        """단계 순서 (0부터 시작)"""
        return PHASE_ORDER.index(self)

    @property
    def document_type(self) -> Optional["DocumentType"]:
        """이 단계에서 작성하는 문서 종류 (문서가 없는 단계는 None)"""
        try:
            return DocumentType(self.value)
        except ValueError:
            return None


PHASE_ORDER: list[SpecificationPhase] = [
    SpecificationPhase.REQUIREMENTS,
    SpecificationPhase.DESIGN,
    SpecificationPhase.TASKS,
    SpecificationPhase.IMPLEMENTATION,
    SpecificationPhase.REVIEW,
    SpecificationPhase.COMPLETED,
]


class DocumentType(str, Enum):
    """단계별로 작성하는 문서 종류입니다."""

    REQUIREMENTS = "requirements"
    DESIGN = "design"
    TASKS = "tasks"

    @property
    def phase(self) -> SpecificationPhase:
        return SpecificationPhase(self.value)


class DocumentStatus(str, Enum):
    """문서 상태입니다."""

    DRAFT = "draft"        # 초안
    REVIEW = "review"      # 검토 중
    APPROVED = "approved"  # 승인됨
    REJECTED = "rejected"  # 반려됨
    ARCHIVED = "archived"  # 보관됨


class ValidationType(str, Enum):
    """검증 규칙의 분류입니다."""

    FORMAT = "format"
    COMPLETENESS = "completeness"
    CONSISTENCY = "consistency"
    QUALITY = "quality"
    METHODOLOGY = "methodology"


class ValidationSeverity(str, Enum):
    """
    검증 결과의 심각도입니다.

    - ERROR: 단계 완료를 막습니다.
    - WARNING / INFO / SUGGESTION: 안내용이며 완료 여부에 영향이 없습니다.
    """

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUGGESTION = "suggestion"


class ProjectComplexity(str, Enum):
    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"
    ENTERPRISE = "enterprise"


class MethodologyType(str, Enum):
    WATERFALL = "waterfall"
    AGILE = "agile"
    LEAN = "lean"
    HYBRID = "hybrid"


class ProjectStatus(str, Enum):
    """프로젝트 진행 상태입니다."""

    PLANNING = "planning"    # 계획 중
    ACTIVE = "active"        # 진행 중
    ON_HOLD = "on_hold"      # 보류
    COMPLETED = "completed"  # 완료
    CANCELLED = "cancelled"  # 취소


class PhaseStatus(str, Enum):
    """화면에 표시할 단계별 상태입니다."""

    CURRENT = "current"      # 현재 단계
    COMPLETED = "completed"  # 이미 지나온 단계
    AVAILABLE = "available"  # 이동 가능한 다음 단계
    LOCKED = "locked"        # 선행 단계 미완료로 잠김
