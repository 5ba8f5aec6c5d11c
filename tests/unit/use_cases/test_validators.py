import pytest

from src.app.use_cases.auth.validators import (
    parse_login_identifier,
    validate_email,
    validate_mobile,
    validate_otp,
    validate_password,
    validate_passwords_match,
)
from src.domain.entities import PhoneIdentifier


@pytest.mark.parametrize(
    "email,valid",
    [
        ("owner@example.com", True),
        ("first.last+tag@sub.example.org", True),
        ("", False),
        ("not-an-email", False),
        ("user@mailinator.com", False),
        ("user@ZOAXE.com", False),
    ],
)
def test_validate_email(email, valid):
    assert (validate_email(email) is None) is valid


@pytest.mark.parametrize(
    "password,message",
    [
        ("Secure#Pass1", None),
        ("", "Password is required"),
        ("Sec ure#Pass1", "Password must not contain spaces"),
        ("Se#1a", "Password must be at least 8 characters long"),
        ("secure#pass1", "Password must contain at least 1 uppercase letter"),
        ("SECURE#PASS1", "Password must contain at least 1 lowercase letter"),
        ("Secure#Pass", "Password must contain at least 1 digit"),
        ("SecurePass1", "Password must contain at least 1 special character (!@#$%^&*)"),
    ],
)
def test_validate_password(password, message):
    assert validate_password(password) == message


@pytest.mark.parametrize(
    "code,valid",
    [("123456", True), ("12345", False), ("1234567", False), ("12a456", False), ("", False), (None, False), ("١٢٣٤٥٦", False)],
)
def test_validate_otp(code, valid):
    assert (validate_otp(code) is None) is valid


def test_validate_mobile_counts_digits_only():
    assert validate_mobile("555-123-4567") is None
    assert validate_mobile("55512345") == "Please enter a valid 10-digit mobile number"


def test_validate_passwords_match():
    assert validate_passwords_match("a", "a") is None
    assert validate_passwords_match("a", "b") == "Passwords do not match"


def test_parse_login_identifier_email():
    assert parse_login_identifier("  owner@example.com ") == "owner@example.com"


def test_parse_login_identifier_json_phone():
    """Test the phone widget's JSON string becomes a phone pair"""
    identifier = parse_login_identifier('{"countryCode": "+1", "mobile": "5551234567"}')

    assert identifier == PhoneIdentifier(country_code="+1", mobile="5551234567")


def test_parse_login_identifier_mapping():
    identifier = parse_login_identifier({"countryCode": "+44", "mobile": "7700900123"})

    assert identifier.to_wire() == {"countryCode": "+44", "mobile": "7700900123"}


@pytest.mark.parametrize(
    "raw",
    ["", "nobody", '{"countryCode": "+1"}', {"countryCode": "+1", "mobile": "12"}, 42],
)
def test_parse_login_identifier_rejects_invalid(raw):
    with pytest.raises(ValueError):
        parse_login_identifier(raw)
