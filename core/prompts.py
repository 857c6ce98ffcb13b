"""
Prompt builders for the suggestion, evaluation and raw paths.

Templates live in core/templates/curriculum/*.md. Rendering is a pure
function of the request and the verb pool.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.schemas import CourseInfo, EvaluateRequest, RawRequest, SuggestRequest
from core.utils import load_prompt
from core.verb_pool import LINK_LEVEL_BLOOM, LinkLevel, VerbEntry, render_verbs

SUGGEST_TEMPLATE = "curriculum/suggest"
EVALUATE_TEMPLATE = "curriculum/evaluate"


def _course_vars(course: CourseInfo) -> Dict[str, str]:
    return {
        "course_label": course.label,
        "course_fullname": course.fullname,
        "course_credits": course.tong,
    }


def _level_vars(link_level: LinkLevel) -> Dict[str, str]:
    return {
        "link_level": link_level.value,
        "bloom_levels": ", ".join(level.value for level in LINK_LEVEL_BLOOM[link_level]),
    }


def build_suggest_prompt(
    request: SuggestRequest,
    verbs: List[VerbEntry],
    prompts_dir: Optional[Path] = None,
) -> str:
    variables: Dict[str, Any] = {
        "count": request.count,
        "plo": request.plo,
        "plo_text": request.plo_text,
        "verbs": render_verbs(verbs),
    }
    variables.update(_course_vars(request.course))
    variables.update(_level_vars(request.link_level))
    return load_prompt(SUGGEST_TEMPLATE, variables, prompts_dir=prompts_dir)


def build_evaluate_prompt(
    request: EvaluateRequest,
    verbs: List[VerbEntry],
    prompts_dir: Optional[Path] = None,
) -> str:
    variables: Dict[str, Any] = {
        "plo": request.plo,
        "plo_text": request.plo_text,
        "clo_text": request.clo_text,
        "verbs": render_verbs(verbs),
    }
    variables.update(_course_vars(request.course))
    variables.update(_level_vars(request.link_level))
    return load_prompt(EVALUATE_TEMPLATE, variables, prompts_dir=prompts_dir)


def build_raw_prompt(request: RawRequest) -> str:
    """Debug path: the caller's prompt, verbatim."""
    return request.prompt
