from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol


# "1185 Budapest", "00-906 Warsaw"; numeric postcodes only
POSTCODE_CITY_RE = re.compile(r"^(?P<postal>\d[\d\- ]*\d|\d)\s+(?P<city>\D.*)$")
# "Springfield, IL 62701" style tail: "IL 62701"
STATE_ZIP_RE = re.compile(r"^(?P<state>[A-Z]{2})\s+(?P<postal>\d{5}(?:-\d{4})?)$")


@dataclass(frozen=True)
class ResolvedAddress:
    street_address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class AddressResolver(Protocol):
    async def __call__(self, address: str) -> ResolvedAddress: ...


def _looks_like_street(part: str) -> bool:
    return any(ch.isdigit() for ch in part)


def parse_address_parts(address: str) -> ResolvedAddress:
    """
    Split a free-text postal address into its parts.

    Understands the two layouts booking exports use:
      "Andrássy út 8, 1061 Budapest, Hungary"
      "1 Main St, Springfield, IL 62701, USA"
    Anything it cannot place leaves `city` as None.
    """
    if not address or not address.strip():
        raise ValueError("Cannot resolve an empty address")

    parts = [p.strip() for p in address.split(",") if p.strip()]
    street: str | None = None
    city: str | None = None
    state: str | None = None
    postal: str | None = None
    country: str | None = None

    if len(parts) >= 2 and not any(ch.isdigit() for ch in parts[-1]):
        country = parts.pop()

    if parts and STATE_ZIP_RE.match(parts[-1]):
        m = STATE_ZIP_RE.match(parts.pop())
        state, postal = m.group("state"), m.group("postal")
        if parts and not _looks_like_street(parts[-1]):
            city = parts.pop()
    elif parts:
        m = POSTCODE_CITY_RE.match(parts[-1])
        if m:
            parts.pop()
            postal, city = m.group("postal"), m.group("city").strip()
        elif len(parts) >= 2 and not _looks_like_street(parts[-1]):
            city = parts.pop()

    if parts:
        street = ", ".join(parts)

    return ResolvedAddress(street_address=street, city=city, state=state, postal_code=postal, country=country)


async def parse_address(address: str) -> ResolvedAddress:
    return parse_address_parts(address)
