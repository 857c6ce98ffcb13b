"""
Completion calls with parameter fallback.

Newer request hints (text.verbosity, reasoning.effort) are not accepted by
every model or API version. When a call fails, the hints are dropped one at
a time, in a fixed order, and the call is retried.
"""
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from core.llm_adapter import BaseLLMAdapter, CompletionParams, LLMResponse
from core.logger import get_logger

logger = get_logger("completion")

UNKNOWN_PARAM_MARKERS = ("unknown", "unrecognized", "invalid parameter", "unsupported")


@dataclass(frozen=True)
class StripStep:
    name: str
    field: str

    def applies(self, params: CompletionParams) -> bool:
        return getattr(params, self.field) is not None

    def apply(self, params: CompletionParams) -> CompletionParams:
        return replace(params, **{self.field: None})


FALLBACK_PLAN: Tuple[StripStep, ...] = (
    StripStep(name="verbosity", field="verbosity"),
    StripStep(name="reasoning", field="reasoning_effort"),
)

MAX_FALLBACK_RETRIES = len(FALLBACK_PLAN)


def is_unknown_parameter_error(error: BaseException) -> bool:
    """True when the error text looks like a rejected request field."""
    message = str(getattr(error, "message", None) or error).lower()
    return any(marker in message for marker in UNKNOWN_PARAM_MARKERS)


def _next_step(params: CompletionParams, plan: Sequence[StripStep]) -> Optional[int]:
    for index, step in enumerate(plan):
        if step.applies(params):
            return index
    return None


def create_with_fallback(
    llm: BaseLLMAdapter,
    params: CompletionParams,
    plan: Sequence[StripStep] = FALLBACK_PLAN,
) -> LLMResponse:
    """
    Call the upstream API, stripping optional hints on failure.

    Any failure triggers the next applicable strip step, whatever its cause;
    the parameter-rejection classification is only logged. Steps are consumed
    in order, so each is applied at most once and there are never more than
    len(plan) retries. When no step applies, the last error is re-raised.
    """
    current = params
    remaining = tuple(plan)

    while True:
        try:
            return llm.create(current)
        except Exception as e:
            index = _next_step(current, remaining)
            if index is None:
                raise
            step = remaining[index]
            remaining = remaining[index + 1:]
            logger.warning(
                "completion failed on %s (param_rejected=%s), retrying without %s: %s",
                current.model,
                is_unknown_parameter_error(e),
                step.name,
                e,
            )
            current = step.apply(current)
