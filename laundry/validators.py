"""Registration form validation rules"""

import re
from typing import Optional

NIGERIAN_PHONE_RE = re.compile(r"^0[789][01]\d{8}$")
PHONE_ERROR = "Please enter a valid Nigerian phone number (0XXXXXXXXXX)"


def normalize_nigerian_phone(phone: Optional[str]) -> Optional[str]:
    """
    Bring a Nigerian mobile number to its local 11-digit form.

    Spaces and dashes are dropped and the ``+234``/``234`` prefix is replaced
    by a leading zero, so ``+234 801 234 5678`` becomes ``08012345678``.
    """
    if phone is None:
        return None
    digits = re.sub(r"[\s\-()]", "", phone)
    if digits.startswith("+234"):
        digits = "0" + digits[4:]
    elif digits.startswith("234") and len(digits) == 13:
        digits = "0" + digits[3:]
    return digits


def validate_nigerian_phone(phone: Optional[str]) -> bool:
    normalized = normalize_nigerian_phone(phone)
    return bool(normalized) and NIGERIAN_PHONE_RE.match(normalized) is not None


def password_problem(password: str) -> Optional[str]:
    """
    Check a password against the sign-up rules.

    Returns:
        The message to show the user, or None when the password is acceptable.
    """
    if len(password) < 8:
        return "Password must be at least 8 characters long"
    if not (re.search(r"[a-z]", password) and re.search(r"[A-Z]", password) and re.search(r"\d", password)):
        return "Password must contain at least one uppercase letter, one lowercase letter, and one number"
    return None
