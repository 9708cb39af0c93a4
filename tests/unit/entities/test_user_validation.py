"""Unit tests for user request-body validation."""

import pytest

from src.user_registry.entities.core.user import (
    FieldViolation,
    UserPatch,
    parse_user_payload,
    validate_user_payload,
)


def _fields(violations: list[FieldViolation]) -> list[str]:
    return [violation.field for violation in violations]


class TestValidateUserPayload:
    """Test the pure validation function."""

    def test_valid_payload(self):
        assert validate_user_payload({"name": "Taro", "email": "taro@example.com"}) == []

    def test_id_is_ignored(self):
        body = {"id": "not-an-int", "name": "Taro", "email": "taro@example.com"}

        assert validate_user_payload(body) == []

    @pytest.mark.parametrize("body", [None, [], "Taro", 42])
    def test_body_must_be_object(self, body):
        violations = validate_user_payload(body)

        assert _fields(violations) == ["body"]

    def test_missing_fields_reports_both(self):
        violations = validate_user_payload({})

        assert _fields(violations) == ["name", "email"]
        assert all(v.message == "Field is required" for v in violations)

    def test_name_must_be_string(self):
        violations = validate_user_payload({"name": 12, "email": "taro@example.com"})

        assert _fields(violations) == ["name"]

    def test_blank_name_rejected(self):
        violations = validate_user_payload({"name": "   ", "email": "taro@example.com"})

        assert _fields(violations) == ["name"]

    def test_name_length_boundary(self):
        at_limit = {"name": "a" * 100, "email": "taro@example.com"}
        over_limit = {"name": "a" * 101, "email": "taro@example.com"}

        assert validate_user_payload(at_limit) == []
        violations = validate_user_payload(over_limit)
        assert _fields(violations) == ["name"]
        assert "100" in violations[0].message

    @pytest.mark.parametrize(
        "email",
        ["not-an-email", "taro@", "@example.com", "taro@example", "taro example@example.com"],
    )
    def test_malformed_email_rejected(self, email):
        violations = validate_user_payload({"name": "Taro", "email": email})

        assert _fields(violations) == ["email"]

    def test_email_must_be_string(self):
        violations = validate_user_payload({"name": "Taro", "email": ["taro@example.com"]})

        assert _fields(violations) == ["email"]

    def test_overlong_email_rejected(self):
        email = "a" * 250 + "@example.com"

        violations = validate_user_payload({"name": "Taro", "email": email})

        assert _fields(violations) == ["email"]

    def test_validation_does_not_normalize(self):
        body = {"name": "Taro", "email": "Taro@Example.com"}

        assert validate_user_payload(body) == []
        assert parse_user_payload(body) == UserPatch(name="Taro", email="Taro@Example.com")

    @pytest.mark.parametrize("field", ["name", "email"])
    def test_lone_surrogate_rejected(self, field):
        body = {"name": "Taro", "email": "taro@example.com"}
        body[field] = "\ud800" + body[field]

        violations = validate_user_payload(body)

        assert _fields(violations) == [field]
        assert violations[0].message == "Must be valid Unicode text"

    def test_non_ascii_text_accepted(self):
        assert validate_user_payload({"name": "太郎", "email": "taro@example.com"}) == []
