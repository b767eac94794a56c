from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from trip_calendar.errors import MissingFieldError


T = TypeVar("T")


@dataclass(frozen=True)
class Match(Generic[T]):
    value: T
    index: int


def split_lines(text: str | None) -> list[str]:
    if not text:
        return []
    return [line.strip() for line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n")]


def find_first(lines: Sequence[str], extractor: Callable[[str, int, Sequence[str]], T | None]) -> Match[T] | None:
    """
    Run `extractor` over `lines` in order and return the first result that is not None.

    Falsy results such as "" still count as a match, which is why the value is
    wrapped in a `Match` instead of being returned bare.
    """
    for i, line in enumerate(lines):
        value = extractor(line, i, lines)
        if value is not None:
            return Match(value=value, index=i)
    return None


def require_first(
    lines: Sequence[str],
    extractor: Callable[[str, int, Sequence[str]], T | None],
    *,
    field: str,
    entry_uid: str | None = None,
) -> T:
    match = find_first(lines, extractor)
    if match is None:
        raise MissingFieldError(field, entry_uid=entry_uid)
    return match.value


def value_after(line: str, separator: str) -> str:
    """Text after the last `separator`, stripped; the whole line when the separator is absent."""
    return line.rsplit(separator, 1)[-1].strip()
