"""
Bloom verb pool normalization.

Turns the client-supplied verb list into a clean, deduplicated pool that
matches the PLO link level, so prompts only advertise verbs of the right
cognitive demand.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple


class BloomLevel(str, Enum):
    REMEMBER = "Remember"
    UNDERSTAND = "Understand"
    APPLY = "Apply"
    ANALYZE = "Analyze"
    EVALUATE = "Evaluate"
    CREATE = "Create"


class LinkLevel(str, Enum):
    INTRODUCED = "I"
    REINFORCED = "R"
    MASTERED = "M"
    ASSESSED = "A"


LINK_LEVEL_BLOOM = {
    LinkLevel.INTRODUCED: (BloomLevel.REMEMBER, BloomLevel.UNDERSTAND),
    LinkLevel.REINFORCED: (BloomLevel.APPLY, BloomLevel.ANALYZE),
    LinkLevel.MASTERED: (BloomLevel.ANALYZE, BloomLevel.EVALUATE),
    LinkLevel.ASSESSED: (BloomLevel.EVALUATE, BloomLevel.CREATE),
}

SUGGEST_POOL_LIMIT = 120
EVALUATE_POOL_LIMIT = 180

_BLOOM_BY_NAME = {level.value.lower(): level for level in BloomLevel}


@dataclass(frozen=True)
class VerbEntry:
    verb: str
    level: Optional[BloomLevel] = None

    def render(self) -> str:
        return f"{self.verb}({self.level.value if self.level else ''})"


DEFAULT_VERBS: Tuple[VerbEntry, ...] = (
    VerbEntry("Trình bày", BloomLevel.UNDERSTAND),
    VerbEntry("Giải thích", BloomLevel.UNDERSTAND),
    VerbEntry("Vận dụng", BloomLevel.APPLY),
    VerbEntry("Phân tích", BloomLevel.ANALYZE),
    VerbEntry("Đánh giá", BloomLevel.EVALUATE),
    VerbEntry("Thiết kế", BloomLevel.CREATE),
)


def parse_link_level(raw: Any) -> LinkLevel:
    """Unknown or empty values fall back to I."""
    text = str(raw or "").strip().upper()
    try:
        return LinkLevel(text)
    except ValueError:
        return LinkLevel.INTRODUCED


def parse_bloom_level(raw: Any) -> Optional[BloomLevel]:
    return _BLOOM_BY_NAME.get(str(raw or "").strip().lower())


def coerce_entry(raw: Any) -> Optional[VerbEntry]:
    """Accepts a plain verb string or a {verb, level} mapping; None if unusable."""
    if raw is None:
        return None
    if isinstance(raw, dict):
        verb = str(raw.get("verb") or "").strip()
        level = parse_bloom_level(raw.get("level"))
    else:
        verb = str(raw).strip()
        level = None
    if not verb:
        return None
    return VerbEntry(verb=verb, level=level)


def permitted_levels(link_level: Any) -> Tuple[BloomLevel, ...]:
    return LINK_LEVEL_BLOOM[parse_link_level(link_level)]


def normalize_verbs(
    raw_entries: Optional[Iterable[Any]],
    link_level: Any,
    limit: int = SUGGEST_POOL_LIMIT,
) -> List[VerbEntry]:
    """
    Build the verb pool for a prompt.

    Entries outside the permitted Bloom levels are dropped, unless that would
    drop every entry, in which case the unfiltered pool is kept. The default
    verbs are used only when nothing usable was supplied at all.

    Args:
        raw_entries: client list of strings or {verb, level} mappings
        link_level: I / R / M / A
        limit: maximum pool size

    Returns:
        ordered, case-insensitively unique, never empty list of VerbEntry
    """
    entries = [e for e in (coerce_entry(r) for r in (raw_entries or [])) if e is not None]

    allowed = permitted_levels(link_level)
    filtered = [e for e in entries if e.level in allowed]
    pool = filtered or entries

    seen = set()
    unique: List[VerbEntry] = []
    for entry in pool:
        key = entry.verb.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)

    unique = unique[:max(0, limit)]
    if not unique:
        return list(DEFAULT_VERBS)
    return unique


def render_verbs(entries: Iterable[VerbEntry]) -> str:
    """verb(Level), verb(Level), ..."""
    return ", ".join(e.render() for e in entries)
