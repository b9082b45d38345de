"""Syntactic checks for contact details supplied at signup and login."""

import re

# Whitespace as JavaScript's \s defines it (includes the BOM, excludes \x1c-\x1f)
WHITESPACE = r"\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"

# local@domain.tld with no whitespace or extra "@" in any part
EMAIL_PATTERN = re.compile(
    rf"^[^{WHITESPACE}@]+@[^{WHITESPACE}@]+\.[^{WHITESPACE}@]+$"
)

# E.164: optional "+", a non-zero leading digit, 2 to 15 ASCII digits in total
PHONE_PATTERN = re.compile(r"^\+?[1-9][0-9]{1,14}$")


def is_valid_email(value: str | None) -> bool:
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_phone_number(value: str | None) -> bool:
    if not isinstance(value, str):
        return False
    return PHONE_PATTERN.fullmatch(value) is not None
