"""Quiz build and grading routes."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from quizbuilder.core.config import settings
from quizbuilder.core.prompt_builder import build_prompt
from quizbuilder.schemas import (
    GenerateOptions,
    GradeRequest,
    QuizBuildRequest,
    QuizBuildResponse,
    QuizConfig,
    QuizResult,
)
from quizbuilder.services.generation_client import LocalGenerationClient
from quizbuilder.services.grading import grade_quiz
from quizbuilder.services.quiz_service import generate_quiz_questions

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_V1_STR}/quiz", tags=["quiz"])


@router.post("/generate", response_model=QuizBuildResponse, response_model_exclude_none=True)
async def build_quiz(request: QuizBuildRequest):
    """
    Build a quiz from the setup form.
    Always answers with exactly `count` questions when enforceExactCount is set.
    """
    config = QuizConfig(
        topic=request.topic,
        count=request.count,
        allowedTypes=request.allowedTypes,
        reference=request.reference,
        withAnswers=request.withAnswers,
    )
    prompt = build_prompt(config)
    
    questions = await generate_quiz_questions(
        prompt,
        GenerateOptions(
            count=config.count,
            allowedTypes=config.allowedTypes,
            enforceExactCount=request.enforceExactCount,
            topic=config.topic,
        ),
        client=LocalGenerationClient(),
    )
    logger.info(f"Built quiz on '{config.topic}' with {len(questions)} questions")
    
    return QuizBuildResponse(
        topic=config.topic,
        questions=questions,
        generatedAt=datetime.now(timezone.utc).isoformat(),
    )


@router.post("/grade", response_model=QuizResult, response_model_exclude_none=True)
async def grade(request: GradeRequest):
    """Grade multiple-choice and matching answers; written answers go to review."""
    return grade_quiz(request.questions, request.submission)
