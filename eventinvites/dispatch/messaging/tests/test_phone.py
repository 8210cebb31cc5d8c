from eventinvites.dispatch.messaging.phone import clean_phone_number, validate_phone_number


def test_clean_phone_number():
    assert clean_phone_number(" +1 (650) 253-0000 ") == "+16502530000"
    assert clean_phone_number("650.253.0000") == "6502530000"


def test_validate_national_number_uses_default_region():
    result = validate_phone_number("(650) 253-0000", region="US")

    assert result.is_valid is True
    assert result.formatted == "+16502530000"
    assert result.country == "US"


def test_validate_international_number():
    result = validate_phone_number("+44 20 7031 3000", region="US")

    assert result.is_valid is True
    assert result.formatted == "+442070313000"
    assert result.country == "GB"


def test_validate_missing_number():
    assert validate_phone_number(None).error == "Phone number is required"
    assert validate_phone_number("   ").error == "Phone number is required"


def test_validate_short_number():
    result = validate_phone_number("12-34")

    assert result.is_valid is False
    assert result.error == "Phone number too short"


def test_validate_garbage():
    result = validate_phone_number("+999 1234 5678")

    assert result.is_valid is False
    assert result.error == "Invalid phone number format"


def test_validate_indian_mobile():
    assert validate_phone_number("98765 43210", region="IN").formatted == "+919876543210"
