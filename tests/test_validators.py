"""
Tests for validators.py module.

Tests the password policy, email format checks and name sanitizing.
"""

import pytest

from clean_api.validators import (
    PasswordValidator,
    normalize_email,
    sanitize_name,
    validate_email_format,
)


class TestPasswordValidator:
    def test_valid_password(self):
        assert PasswordValidator.validate("Passw0rd!") == (True, "")
        assert PasswordValidator.errors("Passw0rd!") == []

    @pytest.mark.parametrize(
        "password,expected",
        [
            ("Pa0!", "at least 8 characters"),
            ("passw0rd!", "uppercase"),
            ("PASSW0RD!", "lowercase"),
            ("Password!", "digit"),
            ("Passw0rdd", "non-alphanumeric"),
        ],
    )
    def test_each_rule(self, password, expected):
        is_valid, message = PasswordValidator.validate(password)
        assert is_valid is False
        assert expected in message

    def test_collects_every_violation(self):
        problems = PasswordValidator.errors("abc")
        assert len(problems) == 4

    def test_empty(self):
        assert PasswordValidator.errors("") == ["Password is required"]

    def test_too_long(self):
        password = "Aa1!" * 40
        assert any("must not exceed" in p for p in PasswordValidator.errors(password))

    def test_requirements_message(self):
        message = PasswordValidator.get_requirements_message()
        assert "8-128" in message


class TestEmailFormat:
    @pytest.mark.parametrize("email", ["jane@example.com", "admin@localhost", "a.b+c@sub.example.org"])
    def test_valid(self, email):
        assert validate_email_format(email) == (True, "")

    @pytest.mark.parametrize(
        "email",
        ["", "no-at-sign", "two@@example.com", "@example.com", "jane@", "ja ne@example.com",
         "jane..doe@example.com", "jane@.example.com"],
    )
    def test_invalid(self, email):
        is_valid, message = validate_email_format(email)
        assert is_valid is False
        assert message

    def test_normalize(self):
        assert normalize_email("  Jane.Doe@Example.COM ") == "jane.doe@example.com"


class TestSanitizeName:
    def test_strips_markup_characters(self):
        assert sanitize_name(" <b>Jane</b> ") == "bJane/b"

    def test_truncates(self):
        assert sanitize_name("x" * 150) == "x" * 100

    def test_empty(self):
        assert sanitize_name("") == ""
