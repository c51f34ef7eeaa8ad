"""
명세 워크플로 엔진 커스텀 예외 계층입니다.
각 컴포넌트별 구조화된 에러 코드와 메시지를 제공합니다.

참고: 문서 규칙 위반은 예외가 아니라 ValidationResult 데이터로 표현됩니다.
"""

from typing import Optional, Any


class SpecWorkflowError(Exception):
    """명세 워크플로 엔진 기본 예외 클래스."""

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class PhaseTransitionError(SpecWorkflowError):
    """선행 단계가 완료되지 않은 상태에서 다음 단계로 이동하려 할 때."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_PHASE_001", details=details)


class ProjectNotFoundError(SpecWorkflowError):
    """존재하지 않는 프로젝트 ID 조회."""

    def __init__(self, message: str = "Project not found", details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_PROJECT_404", details=details)


class ImportFormatError(SpecWorkflowError):
    """가져오기 데이터를 해석할 수 없을 때."""

    def __init__(
        self,
        message: str = "Invalid project data format",
        details: Optional[Any] = None,
    ):
        super().__init__(message, error_code="ERR_IMPORT_001", details=details)


class StorageError(SpecWorkflowError):
    """파일 저장소 관련 에러."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_STORE_001", details=details)


class InputValidationError(SpecWorkflowError):
    """입력 유효성 검증 에러 (400 응답)."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, error_code="ERR_INPUT_001", details=details)
