"""
Local Input Validators

Checks run before any backend call. Each returns an error message suitable
for display, or None when the value is acceptable.
"""

import json
import re
from typing import Any, Optional, Union

from config import ApplicationConfig
from src.domain.entities import PhoneIdentifier

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
OTP_PATTERN = re.compile(r"^[0-9]{6}$")
SPECIAL_CHARACTERS = set("!@#$%^&*()_+-=[]{};':\"\\|,.<>/?~`")


def validate_email(email: str) -> Optional[str]:
    if not email:
        return "Email is required"
    if not EMAIL_PATTERN.match(email):
        return "Please enter a valid email address"
    domain = email.split("@")[1].lower()
    if domain in ApplicationConfig.DISPOSABLE_EMAIL_DOMAINS:
        return "Please enter a valid email address"
    return None


def validate_password(password: str) -> Optional[str]:
    """Policy for new passwords (sign-up, reset, change)"""
    if not password:
        return "Password is required"
    if re.search(r"\s", password):
        return "Password must not contain spaces"
    if len(password) < 8:
        return "Password must be at least 8 characters long"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least 1 uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least 1 lowercase letter"
    if not re.search(r"[0-9]", password):
        return "Password must contain at least 1 digit"
    if not any(char in SPECIAL_CHARACTERS for char in password):
        return "Password must contain at least 1 special character (!@#$%^&*)"
    return None


def validate_otp(code: Any) -> Optional[str]:
    if not code:
        return "OTP is required"
    # str.isdigit accepts non-ASCII digits, the pattern does not
    if not isinstance(code, str) or not OTP_PATTERN.match(code):
        return "Please enter a valid 6-digit numeric OTP"
    return None


def validate_mobile(mobile: str) -> Optional[str]:
    if not mobile:
        return "Mobile number is required"
    digits = re.sub(r"\D", "", mobile)
    if len(digits) != 10:
        return "Please enter a valid 10-digit mobile number"
    return None


def validate_passwords_match(password: str, confirm_password: str) -> Optional[str]:
    if password != confirm_password:
        return "Passwords do not match"
    return None


def parse_login_identifier(raw: Any) -> Union[str, PhoneIdentifier]:
    """
    Accept an e-mail, a {countryCode, mobile} mapping, or that mapping
    encoded as a JSON string by the phone entry widget.

    Raises:
        ValueError: the identifier is neither a valid e-mail nor a phone pair
    """
    if isinstance(raw, PhoneIdentifier):
        return raw
    if isinstance(raw, dict):
        return _phone_from_mapping(raw)
    if not isinstance(raw, str):
        raise ValueError("Please enter a valid email address")

    candidate = raw.strip()
    if candidate.startswith("{") and candidate.endswith("}"):
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            return _phone_from_mapping(parsed)

    error = validate_email(candidate)
    if error:
        raise ValueError(error)
    return candidate


def _phone_from_mapping(value: dict) -> PhoneIdentifier:
    country_code = value.get("countryCode", value.get("country_code"))
    mobile = value.get("mobile")
    if not isinstance(country_code, str) or not isinstance(mobile, str):
        raise ValueError("Please enter a valid mobile number (including country code)")
    if not country_code or validate_mobile(mobile):
        raise ValueError("Please enter a valid mobile number (including country code)")
    return PhoneIdentifier(country_code=country_code, mobile=mobile)
