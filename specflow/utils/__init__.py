"""유틸리티 모듈."""

from .validation import (
    validate_document_content,
    validate_import_payload,
)
from .text import word_count, estimated_read_time

__all__ = [
    "validate_document_content",
    "validate_import_payload",
    "word_count",
    "estimated_read_time",
]
