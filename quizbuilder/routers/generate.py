"""
Transport boundary: forwards a prompt to the LLM and relays raw text.

Errors are returned as {"error": ..., "details"?: ...} with 400/405/500
status codes rather than FastAPI's default {"detail": ...} body.
"""

import json
import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from quizbuilder.core.config import settings
from quizbuilder.core.exceptions import LLMError, MissingCredentialError
from quizbuilder.core.llm import llm_client
from quizbuilder.schemas import GenerateRequest, GenerateResponse, PingResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])


def _error(status_code: int, message: str, details=None) -> JSONResponse:
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


@router.post("/generate", response_model=GenerateResponse)
async def generate(request: Request):
    """Forward {prompt, model?} to the chat-completion model; returns {content}."""
    if not llm_client.has_key:
        return _error(500, "Missing OPENAI_API_KEY")
    
    try:
        body = await request.json()
        payload = GenerateRequest.model_validate(body)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        logger.warning(f"Rejected generate request: {type(e).__name__}")
        return _error(400, "Missing prompt")
    
    if not payload.prompt.strip():
        return _error(400, "Missing prompt")
    
    model = payload.model or settings.MODEL_NAME
    logger.debug(f"Generate request: model={model}, prompt={len(payload.prompt)} chars")
    
    try:
        content = await llm_client.complete(payload.prompt, model)
    except MissingCredentialError as e:
        return _error(500, str(e))
    except LLMError as e:
        logger.error(f"Upstream generation failed: {e}")
        return _error(500, str(e) or "OpenAI request failed", e.details)
    
    return GenerateResponse(content=content)


@router.api_route(
    "/generate",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def generate_method_not_allowed():
    return _error(405, "Method not allowed")


@router.get("/ping", response_model=PingResponse)
async def ping():
    """Liveness probe; reports whether an upstream key is configured."""
    return PingResponse(
        ok=True,
        hasKey=llm_client.has_key,
        model=settings.MODEL_NAME,
        t=int(time.time() * 1000),
    )
