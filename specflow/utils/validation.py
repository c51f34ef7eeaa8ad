"""입력 유효성 검증 유틸리티.

API로 들어오는 문서 본문과 가져오기 데이터의 크기/형식을 검사합니다.
문서 내용의 품질 검증(규칙 검사)은 layers.validation 에서 담당합니다.
"""

import re

from specflow.config import get_settings
from specflow.exceptions import InputValidationError


# 제어 문자 (탭/개행 제외)
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def validate_document_content(content: str) -> str:
    """
    문서 본문 검증.

    - 널 바이트 등 제어 문자 제거
    - 길이 제한

    Args:
        content: 원본 문서 본문

    Returns:
        제어 문자가 제거된 본문

    Raises:
        InputValidationError: 길이 제한 초과
    """
    settings = get_settings()

    cleaned = CONTROL_CHARS.sub("", content)

    if len(cleaned) > settings.max_document_chars:
        raise InputValidationError(
            f"문서가 너무 깁니다 (최대 {settings.max_document_chars}자)",
            details={"length": len(cleaned), "max_length": settings.max_document_chars},
        )

    return cleaned


def validate_import_payload(payload: bytes) -> str:
    """
    가져오기 데이터 검증.

    Args:
        payload: 요청 본문 바이트

    Returns:
        UTF-8 로 디코딩된 문자열

    Raises:
        InputValidationError: 빈 데이터, 크기 초과, 인코딩 오류
    """
    settings = get_settings()

    if not payload:
        raise InputValidationError("가져올 데이터가 비어있습니다")

    if len(payload) > settings.max_import_bytes:
        raise InputValidationError(
            f"가져오기 데이터가 너무 큽니다 (최대 {settings.max_import_bytes} bytes)",
            details={"size_bytes": len(payload), "max_bytes": settings.max_import_bytes},
        )

    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError:
        raise InputValidationError("가져오기 데이터는 UTF-8 JSON 이어야 합니다")
