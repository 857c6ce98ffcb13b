"""
Turns model output text into a list of items.
"""
import re
from dataclasses import dataclass
from typing import List, Optional

_LINE_BREAK = re.compile(r"\r?\n")
_HEADING = re.compile(r"^#+")
_NUMBERED = re.compile(r"^\d+[).]\s*")
_BULLET = re.compile(r"^[-*•]\s*")

ITEM_PREFIX = re.compile(r"^ITEM\s*\d+\s*:", re.IGNORECASE)


@dataclass
class ParsedItems:
    items: List[str]
    # untouched model output, returned to the caller for auditing
    raw: str


def clean_line(line: str) -> str:
    """Strip a "1." / "1)" marker, then a bullet."""
    line = _NUMBERED.sub("", line.strip())
    line = _BULLET.sub("", line)
    return line.strip()


def lines_to_items(text: Optional[str]) -> List[str]:
    """Non-empty, non-heading lines with list markers removed."""
    items = []
    for line in _LINE_BREAK.split(str(text or "")):
        line = line.strip()
        if not line or _HEADING.match(line):
            continue
        cleaned = clean_line(line)
        if cleaned:
            items.append(cleaned)
    return items


def parse_items(
    text: Optional[str],
    count: Optional[int] = None,
    require_prefix: bool = False,
) -> ParsedItems:
    """
    Args:
        text: raw model output, may be empty
        count: maximum number of items
        require_prefix: keep only "ITEM<n>:" lines; when there are fewer than
            count, borrow the remaining lines in order and give them a prefix

    Returns:
        ParsedItems with at most count items. Fewer is not an error.
    """
    raw = "" if text is None else str(text)
    lines = lines_to_items(raw)

    if not require_prefix:
        return ParsedItems(items=lines if count is None else lines[:count], raw=raw)

    items = [line for line in lines if ITEM_PREFIX.match(line)]
    if count is None:
        return ParsedItems(items=items, raw=raw)

    items = items[:count]
    for line in lines:
        if len(items) >= count:
            break
        if ITEM_PREFIX.match(line):
            continue
        items.append(f"ITEM{len(items) + 1}: {line}")

    return ParsedItems(items=items, raw=raw)
