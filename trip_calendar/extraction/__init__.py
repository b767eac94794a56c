from .flight import parse_flight, parse_legacy_flight
from .scanner import Match, find_first, require_first, split_lines
from .stay import fix_date, parse_check_datetime, parse_stay, parse_time

__all__ = [
    "parse_flight",
    "parse_legacy_flight",
    "Match",
    "find_first",
    "require_first",
    "split_lines",
    "fix_date",
    "parse_check_datetime",
    "parse_stay",
    "parse_time",
]
