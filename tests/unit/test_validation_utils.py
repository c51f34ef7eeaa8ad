"""Unit tests for input validation utilities.

Tests document content cleaning and size limits, and import payload checks.
"""

import pytest
from unittest.mock import patch, MagicMock

from specflow.exceptions import InputValidationError


def _make_settings(**overrides):
    """Create a mock Settings object with sensible defaults."""
    defaults = {
        "max_document_chars": 100,
        "max_import_bytes": 50,
    }
    defaults.update(overrides)
    settings = MagicMock()
    for k, v in defaults.items():
        setattr(settings, k, v)
    return settings


SETTINGS_PATH = "specflow.utils.validation.get_settings"


# ---------------------------------------------------------------------------
# validate_document_content
# ---------------------------------------------------------------------------

class TestValidateDocumentContent:
    def test_plain_content_unchanged(self):
        from specflow.utils.validation import validate_document_content
        with patch(SETTINGS_PATH, return_value=_make_settings()):
            assert validate_document_content("# Title\n\tbody") == "# Title\n\tbody"

    def test_control_characters_stripped(self):
        from specflow.utils.validation import validate_document_content
        with patch(SETTINGS_PATH, return_value=_make_settings()):
            assert validate_document_content("a\x00b\x07c") == "abc"

    def test_too_long_rejected(self):
        from specflow.utils.validation import validate_document_content
        with patch(SETTINGS_PATH, return_value=_make_settings(max_document_chars=5)):
            with pytest.raises(InputValidationError) as exc_info:
                validate_document_content("123456")
        assert exc_info.value.details["max_length"] == 5


# ---------------------------------------------------------------------------
# validate_import_payload
# ---------------------------------------------------------------------------

class TestValidateImportPayload:
    def test_decodes_utf8(self):
        from specflow.utils.validation import validate_import_payload
        with patch(SETTINGS_PATH, return_value=_make_settings()):
            assert validate_import_payload('{"a": "한"}'.encode("utf-8")) == '{"a": "한"}'

    def test_empty_rejected(self):
        from specflow.utils.validation import validate_import_payload
        with patch(SETTINGS_PATH, return_value=_make_settings()):
            with pytest.raises(InputValidationError):
                validate_import_payload(b"")

    def test_oversized_rejected(self):
        from specflow.utils.validation import validate_import_payload
        with patch(SETTINGS_PATH, return_value=_make_settings(max_import_bytes=3)):
            with pytest.raises(InputValidationError):
                validate_import_payload(b"{}{}")

    def test_invalid_encoding_rejected(self):
        from specflow.utils.validation import validate_import_payload
        with patch(SETTINGS_PATH, return_value=_make_settings()):
            with pytest.raises(InputValidationError):
                validate_import_payload(b"\xff\xfe\xfa")
