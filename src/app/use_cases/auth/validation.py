"""
Input validation shared by sign-up, sign-in and password reset.
"""

from typing import Dict, Optional

from email_validator import EmailNotValidError, validate_email

from src.app.services.policy import AuthPolicy
from src.libs.result import Error


def is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def password_error(password: str, policy: AuthPolicy) -> Optional[str]:
    if len(password) < policy.password_min_length:
        return f"Password should be at least {policy.password_min_length} characters"
    if len(password) > policy.password_max_length:
        return f"Password should be less than {policy.password_max_length + 1} characters"
    return None


def validate_credentials(email: str, password: str, policy: AuthPolicy) -> Optional[Error]:
    """Field-level checks. Returns a VALIDATION_ERROR listing every bad field."""
    fields: Dict[str, str] = {}

    if not is_valid_email(email):
        fields["email"] = "Invalid email address"

    message = password_error(password, policy)
    if message:
        fields["password"] = message

    if not fields:
        return None

    first_field = next(iter(fields))
    return Error(
        "VALIDATION_ERROR",
        fields[first_field],
        field=first_field,
        details={"fields": fields},
    )
