import re
from dataclasses import dataclass

import phonenumbers

MIN_PHONE_DIGITS = 7


@dataclass(frozen=True)
class PhoneValidation:
    is_valid: bool
    error: str | None = None
    formatted: str | None = None
    national: str | None = None
    country: str | None = None


def clean_phone_number(phone: str) -> str:
    """Remove spaces and punctuation, keeping a leading +."""
    phone = phone.strip()
    digits = re.sub(r"\D", "", phone)
    return f"+{digits}" if phone.startswith("+") else digits


def validate_phone_number(phone: str | None, region: str = "US") -> PhoneValidation:
    """Validate a phone number and format it as E.164."""
    if not phone or not phone.strip():
        return PhoneValidation(is_valid=False, error="Phone number is required")

    if len(re.sub(r"\D", "", phone)) < MIN_PHONE_DIGITS:
        return PhoneValidation(is_valid=False, error="Phone number too short")

    try:
        parsed = phonenumbers.parse(clean_phone_number(phone), region)
    except phonenumbers.NumberParseException:
        return PhoneValidation(is_valid=False, error="Invalid phone number format")

    if not phonenumbers.is_valid_number(parsed):
        return PhoneValidation(is_valid=False, error="Invalid phone number format")

    country = phonenumbers.region_code_for_number(parsed)
    national = str(parsed.national_number)
    # Indian mobile numbers have 10 digits and start with 6-9
    if region == "IN" and country == "IN":
        if len(national) != 10 or national[0] not in "6789":
            return PhoneValidation(is_valid=False, error="Invalid Indian mobile number")

    return PhoneValidation(
        is_valid=True,
        formatted=phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164),
        national=national,
        country=country,
    )
