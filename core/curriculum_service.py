"""
CurriculumService: the three request kinds, end to end.

request -> verb pool -> prompt -> model -> completion (with fallback) -> items
"""
from pathlib import Path
from typing import Optional

from core.completion import create_with_fallback
from core.config_manager import ServiceConfig
from core.llm_adapter import BaseLLMAdapter, CompletionParams
from core.logger import get_logger
from core.model_selector import RequestKind, pick_model
from core.output_parser import parse_items
from core.prompts import build_evaluate_prompt, build_raw_prompt, build_suggest_prompt
from core.schemas import (
    EvaluateRequest,
    RawRequest,
    SuggestRequest,
    SuggestResponse,
    TextResponse,
)
from core.verb_pool import EVALUATE_POOL_LIMIT, SUGGEST_POOL_LIMIT, normalize_verbs

logger = get_logger("curriculum")

# Suggestions: short and fast.
SUGGEST_VERBOSITY = "low"
SUGGEST_REASONING = "minimal"
SUGGEST_MAX_OUTPUT_TOKENS = 800
SUGGEST_TEMPERATURE = 0.5

# Evaluations: balanced quality, room for the six-part report.
EVALUATE_VERBOSITY = "medium"
EVALUATE_REASONING = "medium"
EVALUATE_MAX_OUTPUT_TOKENS = 900
EVALUATE_TEMPERATURE = 0.2

RAW_VERBOSITY = "low"


class CurriculumService:
    def __init__(
        self,
        config: ServiceConfig,
        llm: BaseLLMAdapter,
        prompts_dir: Optional[Path] = None,
    ):
        self.config = config
        self.llm = llm
        self.prompts_dir = prompts_dir

    def suggest(self, request: SuggestRequest) -> SuggestResponse:
        verbs = normalize_verbs(request.bloom_verbs, request.link_level, limit=SUGGEST_POOL_LIMIT)
        prompt = build_suggest_prompt(request, verbs, prompts_dir=self.prompts_dir)
        model = pick_model(RequestKind.SUGGEST, request.model, self.config)

        logger.info(
            "suggest plo=%s level=%s count=%d verbs=%d model=%s",
            request.plo, request.link_level.value, request.count, len(verbs), model,
        )
        response = create_with_fallback(self.llm, CompletionParams(
            model=model,
            input=prompt,
            max_output_tokens=SUGGEST_MAX_OUTPUT_TOKENS,
            verbosity=SUGGEST_VERBOSITY,
            reasoning_effort=SUGGEST_REASONING,
            temperature=SUGGEST_TEMPERATURE,
        ))

        parsed = parse_items(response.content, count=request.count, require_prefix=True)
        if len(parsed.items) < request.count:
            logger.info("suggest returned %d of %d items", len(parsed.items), request.count)
        return SuggestResponse(items=parsed.items, raw=parsed.raw, model=model)

    def evaluate(self, request: EvaluateRequest) -> TextResponse:
        verbs = normalize_verbs(request.bloom_verbs, request.link_level, limit=EVALUATE_POOL_LIMIT)
        prompt = build_evaluate_prompt(request, verbs, prompts_dir=self.prompts_dir)
        model = pick_model(RequestKind.EVALUATE, request.model, self.config)

        logger.info("evaluate plo=%s level=%s model=%s", request.plo, request.link_level.value, model)
        response = create_with_fallback(self.llm, CompletionParams(
            model=model,
            input=prompt,
            max_output_tokens=EVALUATE_MAX_OUTPUT_TOKENS,
            verbosity=EVALUATE_VERBOSITY,
            reasoning_effort=EVALUATE_REASONING,
            temperature=EVALUATE_TEMPERATURE,
        ))
        return TextResponse(text=response.content or "", model=model)

    def raw(self, request: RawRequest) -> TextResponse:
        model = pick_model(RequestKind.RAW, request.model, self.config)
        response = create_with_fallback(self.llm, CompletionParams(
            model=model,
            input=build_raw_prompt(request),
            max_output_tokens=request.max_tokens,
            verbosity=RAW_VERBOSITY,
        ))
        return TextResponse(text=response.content or "", model=model)
