"""
Request and response shapes for the /api routes.

Inputs are never rejected: each request shape has exactly one
``from_payload`` step that fills permissive defaults, so a malformed body
still produces a usable request.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.verb_pool import LinkLevel, parse_link_level

DEFAULT_SUGGEST_COUNT = 6
DEFAULT_RAW_MAX_TOKENS = 600


def as_text(value: Any) -> str:
    """None and containers render as empty text."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    return str(value).strip()


def as_positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        number = int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return default
    return number if number > 0 else default


def as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def as_model_override(value: Any) -> Optional[str]:
    text = as_text(value)
    return text or None


def pick_link_level(payload: Dict[str, Any]) -> LinkLevel:
    # linkLevel wins over the legacy "level" key
    raw = payload.get("linkLevel")
    if as_text(raw) == "":
        raw = payload.get("level")
    return parse_link_level(raw)


class CourseInfo(BaseModel):
    label: str = ""
    fullname: str = ""
    # total credits
    tong: str = ""

    @classmethod
    def from_payload(cls, raw: Any) -> "CourseInfo":
        data = raw if isinstance(raw, dict) else {}
        return cls(
            label=as_text(data.get("label")),
            fullname=as_text(data.get("fullname")),
            tong=as_text(data.get("tong")),
        )


class SuggestRequest(BaseModel):
    plo: str = ""
    plo_text: str = ""
    course: CourseInfo = Field(default_factory=CourseInfo)
    link_level: LinkLevel = LinkLevel.INTRODUCED
    bloom_verbs: List[Any] = Field(default_factory=list)
    count: int = DEFAULT_SUGGEST_COUNT
    model: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "SuggestRequest":
        data = payload if isinstance(payload, dict) else {}
        return cls(
            plo=as_text(data.get("plo")),
            plo_text=as_text(data.get("ploText")),
            course=CourseInfo.from_payload(data.get("course")),
            link_level=pick_link_level(data),
            bloom_verbs=as_list(data.get("bloomVerbs")),
            count=as_positive_int(data.get("count"), DEFAULT_SUGGEST_COUNT),
            model=as_model_override(data.get("model")),
        )


class EvaluateRequest(BaseModel):
    plo: str = ""
    plo_text: str = ""
    clo_text: str = ""
    course: CourseInfo = Field(default_factory=CourseInfo)
    link_level: LinkLevel = LinkLevel.INTRODUCED
    bloom_verbs: List[Any] = Field(default_factory=list)
    model: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "EvaluateRequest":
        data = payload if isinstance(payload, dict) else {}
        return cls(
            plo=as_text(data.get("plo")),
            plo_text=as_text(data.get("ploText")),
            clo_text=as_text(data.get("cloText")),
            course=CourseInfo.from_payload(data.get("course")),
            link_level=pick_link_level(data),
            bloom_verbs=as_list(data.get("bloomVerbs")),
            model=as_model_override(data.get("model")),
        )


class RawRequest(BaseModel):
    prompt: str = ""
    max_tokens: int = DEFAULT_RAW_MAX_TOKENS
    model: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "RawRequest":
        data = payload if isinstance(payload, dict) else {}
        prompt = data.get("prompt")
        return cls(
            # passed through untouched, no trimming
            prompt=prompt if isinstance(prompt, str) else as_text(prompt),
            max_tokens=as_positive_int(data.get("max_tokens"), DEFAULT_RAW_MAX_TOKENS),
            model=as_model_override(data.get("model")),
        )


class SuggestResponse(BaseModel):
    items: List[str]
    raw: str
    model: str


class TextResponse(BaseModel):
    text: str
    model: str


class WhoAmIResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    ok: bool = True
    allowed_origins: List[str]
    model: str
    model_mode: str
