from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from core.curriculum_service import CurriculumService
from core.exceptions import ServiceError
from core.logger import get_logger
from core.schemas import (
    EvaluateRequest,
    RawRequest,
    SuggestRequest,
    SuggestResponse,
    TextResponse,
)
from web.backend.security import enforce_rate_limit, require_app_token

logger = get_logger("api")

# rate limit first, then the token check
router = APIRouter(dependencies=[Depends(enforce_rate_limit), Depends(require_app_token)])


async def _read_payload(request: Request) -> Dict[str, Any]:
    """Request body as a dict; anything unparsable counts as empty."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _service(request: Request) -> CurriculumService:
    return request.app.state.service


def _failure(tag: str, error: Exception, response: Response) -> JSONResponse:
    detail = error.get_user_message() if isinstance(error, ServiceError) else str(error)
    logger.error("[%s] %s", tag, detail, exc_info=True)
    # the limiter already wrote its headers on the dependency response
    headers = {k: v for k, v in response.headers.items() if k.lower().startswith("ratelimit-")}
    return JSONResponse(status_code=500, content={"error": tag}, headers=headers)


@router.post("/suggest", response_model=SuggestResponse)
async def suggest(request: Request, response: Response):
    payload = await _read_payload(request)
    try:
        return await run_in_threadpool(_service(request).suggest, SuggestRequest.from_payload(payload))
    except Exception as e:
        return _failure("suggest_failed", e, response)


@router.post("/evaluate", response_model=TextResponse)
async def evaluate(request: Request, response: Response):
    payload = await _read_payload(request)
    try:
        return await run_in_threadpool(_service(request).evaluate, EvaluateRequest.from_payload(payload))
    except Exception as e:
        return _failure("evaluate_failed", e, response)


@router.post("/raw", response_model=TextResponse)
async def raw(request: Request, response: Response):
    payload = await _read_payload(request)
    try:
        return await run_in_threadpool(_service(request).raw, RawRequest.from_payload(payload))
    except Exception as e:
        return _failure("raw_failed", e, response)
