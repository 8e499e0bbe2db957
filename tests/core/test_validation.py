"""Tests for the shared input validators."""

from __future__ import annotations

import pytest

from issueboard.core import IssueFormData
from issueboard.validation import sanitize_principal, validate_form, validate_title


class TestSanitizePrincipal:
    def test_strips(self) -> None:
        assert sanitize_principal("  alice  ") == ("alice", None)

    def test_not_string(self) -> None:
        cleaned, err = sanitize_principal(None)
        assert cleaned == ""
        assert err == "creator must be a string"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty(self, value: str) -> None:
        assert sanitize_principal(value, "creator_id")[1] == "creator_id must not be empty"

    def test_too_long(self) -> None:
        assert "at most 254" in (sanitize_principal("x" * 255)[1] or "")

    @pytest.mark.parametrize("value", ["bob\nadmin", "bob\x00", "bob\u200b"])
    def test_control_and_format_chars(self, value: str) -> None:
        assert "control characters" in (sanitize_principal(value)[1] or "")


class TestValidateTitle:
    def test_ok(self) -> None:
        assert validate_title("Fine") == "Fine"

    def test_too_long(self) -> None:
        with pytest.raises(ValueError, match="at most 200"):
            validate_title("x" * 201)

    def test_not_string(self) -> None:
        with pytest.raises(TypeError):
            validate_title(None)


class TestValidateForm:
    def test_valid(self) -> None:
        validate_form(IssueFormData(title="ok", priority="high", status="in_progress"))

    def test_bad_assignee_type(self) -> None:
        with pytest.raises(TypeError, match="assigned_to"):
            validate_form(IssueFormData(title="ok", assigned_to=None))  # type: ignore[arg-type]

    def test_bad_status(self) -> None:
        with pytest.raises(ValueError, match="Invalid status"):
            validate_form(IssueFormData(title="ok", status="closed"))  # type: ignore[arg-type]
