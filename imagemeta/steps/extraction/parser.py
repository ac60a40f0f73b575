"""Matching of tool output lines against configured prefixes."""

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional


@dataclass(frozen=True)
class LineMatch:
    prefix: str
    target: str
    value: str


def match_line(line: str, prefix: str) -> Optional[str]:
    """Value of `line` for `prefix`, or None.

    The line must start with the prefix and contain a colon; the value is the
    text after the first colon with surrounding whitespace removed. Blank
    values do not count as a match.
    """
    if not line.startswith(prefix) or ":" not in line:
        return None
    value = line.split(":", 1)[1].strip()
    return value or None


def extract_values(lines: Iterable[str], mapping: Mapping[str, str]) -> list[LineMatch]:
    """All matches of `lines` against `mapping`, in line order then mapping order."""
    matches = []
    for line in lines:
        for prefix, target in mapping.items():
            value = match_line(line, prefix)
            if value is not None:
                matches.append(LineMatch(prefix, target, value))
    return matches
