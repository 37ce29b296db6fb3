"""
Validation utilities for the identity subsystem.

Provides the password policy, email normalization and name sanitizing.
"""

import re
from typing import List, Tuple


class PasswordValidator:
    """
    Password strength validator.

    Enforces the account password policy:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one non-alphanumeric character
    - Maximum 128 characters
    """

    MIN_LENGTH = 8
    MAX_LENGTH = 128

    UPPERCASE_PATTERN = re.compile(r"[A-Z]")
    LOWERCASE_PATTERN = re.compile(r"[a-z]")
    DIGIT_PATTERN = re.compile(r"\d")
    NON_ALPHANUMERIC_PATTERN = re.compile(r"[^A-Za-z0-9]")

    @classmethod
    def errors(cls, password: str) -> List[str]:
        """
        Collect every policy violation for a password.

        Args:
            password: Password string to validate

        Returns:
            List of error messages, empty when the password is acceptable
        """
        if not password:
            return ["Password is required"]

        problems = []
        if len(password) < cls.MIN_LENGTH:
            problems.append(f"Password must be at least {cls.MIN_LENGTH} characters long")
        if len(password) > cls.MAX_LENGTH:
            problems.append(f"Password must not exceed {cls.MAX_LENGTH} characters")
        if not cls.UPPERCASE_PATTERN.search(password):
            problems.append("Password must contain at least one uppercase letter")
        if not cls.LOWERCASE_PATTERN.search(password):
            problems.append("Password must contain at least one lowercase letter")
        if not cls.DIGIT_PATTERN.search(password):
            problems.append("Password must contain at least one digit")
        if not cls.NON_ALPHANUMERIC_PATTERN.search(password):
            problems.append("Password must contain at least one non-alphanumeric character")
        return problems

    @classmethod
    def validate(cls, password: str) -> Tuple[bool, str]:
        """
        Validate password strength.

        Args:
            password: Password string to validate

        Returns:
            Tuple of (is_valid, first error message)
        """
        problems = cls.errors(password)
        if problems:
            return False, problems[0]
        return True, ""

    @classmethod
    def get_requirements_message(cls) -> str:
        """Get password requirements message for user display."""
        return (
            f"Password must be {cls.MIN_LENGTH}-{cls.MAX_LENGTH} characters long and contain "
            "at least one uppercase letter, one lowercase letter, one digit, "
            "and one non-alphanumeric character"
        )


def validate_email_format(email: str) -> Tuple[bool, str]:
    """
    Validate an email address.

    Checks for common security issues and malformed addresses. Single-label
    domains such as `localhost` are accepted.

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not email:
        return False, "Email is required"

    if len(email) > 256:
        return False, "Email address is too long"

    if email.count("@") != 1:
        return False, "Email must contain exactly one @ symbol"

    local_part, domain = email.rsplit("@", 1)

    if len(local_part) == 0:
        return False, "Email local part cannot be empty"

    if len(local_part) > 64:
        return False, "Email local part is too long"

    if len(domain) == 0:
        return False, "Email domain cannot be empty"

    if any(ch.isspace() for ch in email):
        return False, "Email cannot contain whitespace"

    if ".." in email:
        return False, "Email cannot contain consecutive dots"

    if domain.startswith(".") or domain.endswith("."):
        return False, "Email domain cannot start or end with a dot"

    return True, ""


def normalize_email(email: str) -> str:
    """Normalize an email address for lookups and uniqueness checks."""
    return email.strip().lower()


def sanitize_name(name: str, max_length: int = 100) -> str:
    """
    Sanitize a first or last name.

    Removes potential XSS vectors and limits length.

    Args:
        name: Raw name input
        max_length: Maximum stored length

    Returns:
        Sanitized name
    """
    if not name:
        return ""

    sanitized = name.strip()

    sanitized = re.sub(r"[<>\"\'&]", "", sanitized)

    return sanitized[:max_length]
