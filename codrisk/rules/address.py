# codrisk/rules/address.py
import re
from typing import List, NamedTuple

# loose: anything phone-shaped, validated later by rules.phone
PHONE_LIKE_RE = re.compile(r"^[0-9+\-\s()]{7,15}$")
PHONE_SCAN_SLOTS = (1, 2)


class ParsedAddress(NamedTuple):
    name: str
    phone: str
    address_parts: List[str]


def parse_shipping_address(address: str | None) -> ParsedAddress:
    """
    Best-effort split of "Name, Phone, Line 1, City, District".
    The first segment is the name; the phone is looked for in the next two
    segments only and everything after it is address.
    """
    if not address:
        return ParsedAddress("", "", [])

    parts = [p.strip() for p in address.split(",")]
    name = parts[0]
    phone = ""
    start = 1

    for i in PHONE_SCAN_SLOTS:
        if i < len(parts) and PHONE_LIKE_RE.match(parts[i]):
            phone = parts[i]
            start = i + 1
            break

    return ParsedAddress(name, phone, parts[start:])
