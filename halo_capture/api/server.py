"""HTTP API for HALO review and expertise capture.

Usage:
    halo-capture -c halo-capture.yaml serve --port 3000
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..config import load_config
from ..core.assessment import run_assessment
from ..core.capture import AGENT_METHODS, capture_expertise, run_agent_chat
from ..core.resolver import merge_overrides
from ..core.review import run_review
from ..providers import LazyProvider
from ..schemas import (
    AgentChatRequest,
    AssessmentRequest,
    CaptureRequest,
    ReviewRequest,
)
from ..token_counter import create_token_counter
from ..types import ChatProvider, HaloConfig, HaloError, UnknownMethodKey

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body") or "body"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def create_app(
    config_path: str | None = None,
    *,
    config: HaloConfig | None = None,
    provider: ChatProvider | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config_path: Path to a halo-capture config file (ignored when config is given).
        config: Pre-built config.
        provider: Text-generation provider to use instead of building one from config.
    """
    config = config or load_config(config_path)
    token_counter = create_token_counter(config.token_counter)
    llm = LazyProvider(config.provider, provider)

    app = FastAPI(title="halo-capture")
    app.state.config = config
    app.state.provider = llm

    @app.exception_handler(HaloError)
    async def halo_error_handler(request: Request, exc: HaloError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc.error)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "message": _validation_message(exc)},
        )

    @app.get("/api/health")
    def health():
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "provider": config.provider.provider,
            "model": config.provider.model,
            "env": {
                "hasApiKey": bool(os.environ.get(config.provider.api_key_env)),
            },
        }

    @app.post("/api/halo-review")
    def halo_review(body: ReviewRequest):
        result = run_review(
            body.turns(),
            body.settings.to_settings(),
            llm,
            config.review,
            max_reply_tokens=body.max_reply_tokens,
            token_counter=token_counter,
        )
        return {
            "success": True,
            "review": result.to_dict(),
            "message": "HALO analysis completed successfully",
        }

    @app.post("/api/assessment")
    def assessment(body: AssessmentRequest):
        response = run_assessment(
            body,
            llm,
            max_tokens=config.capture.assessment_max_tokens,
            overrides=merge_overrides(config.prompts.overrides, body.prompt_overrides),
        )
        return response.to_dict()

    @app.post("/api/multi-agent/{agent}")
    def agent_chat(agent: str, body: AgentChatRequest):
        if agent not in AGENT_METHODS:
            raise UnknownMethodKey(agent, list(AGENT_METHODS))
        reply = run_agent_chat(
            agent,
            body.messages,
            llm,
            config.capture.chat_max_tokens,
            overrides=merge_overrides(config.prompts.overrides, body.prompt_overrides),
            user_info=body.user_info,
        )
        return {"agent": agent, "reply": reply}

    @app.post("/api/hume-tools/capture-expertise")
    def capture(body: CaptureRequest):
        result = capture_expertise(body, llm, config.capture.capture_max_tokens)
        return result.to_dict()

    return app
