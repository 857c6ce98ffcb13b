from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from core.config_manager import ServiceConfig, load_config
from core.curriculum_service import CurriculumService
from core.exceptions import GateRejected
from core.llm_adapter import BaseLLMAdapter, create_llm_adapter
from core.logger import get_logger, setup_logging
from core.schemas import WhoAmIResponse
from web.backend.routers import curriculum
from web.backend.security import FixedWindowRateLimiter

logger = get_logger("app")

PREFLIGHT_MAX_AGE = 86400


def create_app(
    config: Optional[ServiceConfig] = None,
    llm: Optional[BaseLLMAdapter] = None,
) -> FastAPI:
    # uvicorn reload workers import the factory without going through main()
    if not get_logger().handlers:
        setup_logging()

    config = config or load_config()
    llm = llm or create_llm_adapter(config)

    app = FastAPI(title="cm-gpt-service", version="1.0")
    app.state.config = config
    app.state.service = CurriculumService(config, llm)
    app.state.rate_limiter = FixedWindowRateLimiter(
        max_requests=config.rate_limit_max,
        window_seconds=config.rate_limit_window,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.allowed_origins),
        allow_origin_regex=config.origin_regex,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=PREFLIGHT_MAX_AGE,
    )

    @app.exception_handler(GateRejected)
    async def gate_rejected(_request: Request, exc: GateRejected):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.error}, headers=exc.headers)

    @app.get("/health", response_class=PlainTextResponse)
    @app.get("/healthz", response_class=PlainTextResponse)
    async def health_check():
        return "ok"

    @app.get("/whoami", response_model=WhoAmIResponse)
    async def whoami():
        return WhoAmIResponse(
            ok=True,
            allowed_origins=list(config.allowed_origins),
            model=config.default_model,
            model_mode=config.model_mode,
        )

    app.include_router(curriculum.router, prefix="/api", tags=["curriculum"])

    logger.info(
        "app created: mode=%s default_model=%s origins=%s token=%s",
        config.model_mode,
        config.default_model,
        list(config.allowed_origins),
        "on" if config.token_required else "off",
    )
    return app
