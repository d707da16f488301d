"""
Quiz Builder API.

Run with: uvicorn quizbuilder.main:app --port 4001
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from quizbuilder import __version__
from quizbuilder.core.config import settings
from quizbuilder.core.llm import llm_client
from quizbuilder.core.logging_config import setup_logging
from quizbuilder.routers import generate, quiz

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.ENVIRONMENT, settings.LOG_LEVEL, settings.LOG_DIR)
    logger.info(f"Quiz Builder {__version__} up (env={settings.ENVIRONMENT}, model={settings.MODEL_NAME})")
    if not llm_client.has_key:
        logger.warning("OPENAI_API_KEY is not set; /api/generate will answer 500")

    yield

    logger.info("Quiz Builder shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    version=__version__,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.include_router(generate.router)
app.include_router(quiz.router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "version": __version__}
