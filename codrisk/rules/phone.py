# codrisk/rules/phone.py
import re
from typing import NamedTuple

# 01XXXXXXXXX, optionally written with the 880 country code
BD_MOBILE_RE = re.compile(r"^(?:880|0)1[3-9][0-9]{8}$")
_SEPARATORS_RE = re.compile(r"[\s\-+()]")


class PhoneResult(NamedTuple):
    is_valid: bool
    reason: str = ""


def normalize_phone(phone: str | None) -> str:
    return _SEPARATORS_RE.sub("", phone or "")


def is_valid_bd_phone(phone: str | None) -> PhoneResult:
    cleaned = normalize_phone(phone)
    if not cleaned:
        return PhoneResult(False, "No phone number provided")
    if not BD_MOBILE_RE.match(cleaned):
        return PhoneResult(False, f'Invalid format: "{phone}"')
    return PhoneResult(True)
