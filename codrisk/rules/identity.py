# codrisk/rules/identity.py
import re
from typing import List, NamedTuple

_NAME_CHARS_RE = re.compile(r"[^a-z\s]")


class NameResult(NamedTuple):
    is_mismatch: bool
    reason: str = ""


def _name_words(name: str) -> List[str]:
    return _NAME_CHARS_RE.sub("", name.lower()).split()


def check_name_mismatch(shipping_name: str | None, profile_name: str | None) -> NameResult:
    """Mismatch only when the two names share no word at all; nicknames and initials pass."""
    if not shipping_name or not profile_name:
        return NameResult(False)

    shipping_words = _name_words(shipping_name)
    profile_words = set(_name_words(profile_name))
    if not shipping_words or not profile_words:
        return NameResult(False)

    if any(w in profile_words for w in shipping_words):
        return NameResult(False)
    return NameResult(
        True,
        f'Shipping name "{shipping_name}" doesn\'t match profile name "{profile_name}"',
    )
