import pytest

from laundry.utils import format_naira_from_kobo, kobo_to_naira, naira_to_kobo
from laundry.validators import normalize_nigerian_phone, password_problem, validate_nigerian_phone


@pytest.mark.parametrize("naira,kobo", [(1500.5, 150050), ("1500.50", 150050), (0, 0), (19.99, 1999), (0.015, 2)])
def test_naira_to_kobo(naira, kobo):
    assert naira_to_kobo(naira) == kobo


def test_kobo_to_naira_and_format():
    assert kobo_to_naira(150050) == 1500.5
    assert format_naira_from_kobo(150050) == "₦1,500.50"
    assert format_naira_from_kobo(10_000_000) == "₦100,000.00"


@pytest.mark.parametrize("phone", ["08012345678", "07031234567", "09112345678", "+2348012345678", "234 801 234 5678"])
def test_valid_nigerian_phones(phone):
    assert validate_nigerian_phone(phone)


@pytest.mark.parametrize("phone", ["", "0801234567", "18012345678", "06012345678", "+447911123456", "0801234567a"])
def test_invalid_nigerian_phones(phone):
    assert not validate_nigerian_phone(phone)


def test_normalize_nigerian_phone():
    assert normalize_nigerian_phone("+234 801-234-5678") == "08012345678"
    assert normalize_nigerian_phone(None) is None


@pytest.mark.parametrize("password,problem", [
    ("Short1", "Password must be at least 8 characters long"),
    ("alllowercase1", "Password must contain at least one uppercase letter, one lowercase letter, and one number"),
    ("NoDigitsHere", "Password must contain at least one uppercase letter, one lowercase letter, and one number"),
    ("Str0ngPass", None),
])
def test_password_rules(password, problem):
    assert password_problem(password) == problem
