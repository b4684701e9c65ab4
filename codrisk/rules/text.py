# codrisk/rules/text.py
import re
from typing import List, NamedTuple

from ..utils.formatting import percent

VOWELS = "aeiou"
MIN_LETTERS = 3
MIN_VOWEL_RATIO = 0.15
VOWEL_RATIO_MIN_LENGTH = 5  # ratio only judged above this many letters
MIN_CLUSTERS = 2

_NON_LETTER_RE = re.compile(r"[^a-z]")
_REPEATED_RE = re.compile(r"([a-z])\1{2,}")
_CONSONANT_CLUSTER_RE = re.compile(r"[^aeiou]{4,}")


class GibberishResult(NamedTuple):
    is_gibberish: bool
    reason: str = ""


class ShortPartsResult(NamedTuple):
    is_short: bool
    reason: str = ""


def _quoted(items: List[str]) -> str:
    return ", ".join(f'"{i}"' for i in items)


def is_gibberish_text(text: str | None) -> GibberishResult:
    """
    Flag keyboard-mash / repeated-character noise in a name or address.

    Checks run in order, first hit wins:
      - a run of 3+ identical letters ("aaa", "kkkk")
      - 2+ clusters of 4+ consonants
      - vowel ratio under 15% when there are more than 5 letters
    Short input (under 3 letters) is never flagged.
    """
    if not text or len(text.strip()) < MIN_LETTERS:
        return GibberishResult(False)

    cleaned = _NON_LETTER_RE.sub("", text.lower())
    if len(cleaned) < MIN_LETTERS:
        return GibberishResult(False)

    repeated = _REPEATED_RE.search(cleaned)
    if repeated:
        return GibberishResult(True, f'Repeated characters detected: "{repeated.group(0)}"')

    clusters = _CONSONANT_CLUSTER_RE.findall(cleaned)
    if len(clusters) >= MIN_CLUSTERS:
        return GibberishResult(True, f"Multiple consonant clusters: {_quoted(clusters)}")

    vowels = sum(1 for c in cleaned if c in VOWELS)
    ratio = vowels / len(cleaned)
    if len(cleaned) > VOWEL_RATIO_MIN_LENGTH and ratio < MIN_VOWEL_RATIO:
        return GibberishResult(True, f"Very low vowel ratio ({percent(ratio)}%)")

    return GibberishResult(False)


def check_short_address_parts(address_parts: List[str]) -> ShortPartsResult:
    """Two or more 1-2 character address fields ("a", "bd") look like filler typed to get past the form."""
    short = [p.strip() for p in address_parts or [] if 0 < len(p.strip()) < 3]
    if len(short) >= 2:
        return ShortPartsResult(True, f"Multiple very short address fields: {_quoted(short)}")
    return ShortPartsResult(False)
