"""Request schemas."""

from pydantic import BaseModel, Field
from typing import List, Optional

from quizbuilder.core.config import settings
from quizbuilder.core.constants import ALL_QUESTION_TYPES, QuestionType
from .quiz import QuizQuestion, QuizSubmission


class GenerateRequest(BaseModel):
    """Body of the transport endpoint."""
    prompt: str = Field(..., description="Prompt forwarded to the model")
    model: Optional[str] = Field(None, description="Chat-completion model identifier")


class QuizBuildRequest(BaseModel):
    """Build-quiz form submitted by the setup page."""
    topic: str = Field("", max_length=200, description="Quiz topic; blank uses a generic label")
    count: int = Field(
        default=settings.DEFAULT_QUESTION_COUNT,
        ge=1,
        le=settings.MAX_QUESTION_COUNT,
        description="Exact number of questions",
    )
    allowedTypes: List[QuestionType] = Field(
        default_factory=lambda: list(ALL_QUESTION_TYPES),
        description="Question types the quiz may contain",
    )
    reference: Optional[str] = Field(
        None,
        max_length=settings.MAX_REFERENCE_CHARS,
        description="Reference material pasted by the user",
    )
    withAnswers: bool = Field(True, description="Ask the model for answer keys")
    enforceExactCount: bool = Field(True, description="Pad or truncate to exactly `count`")
    
    class Config:
        json_schema_extra = {
            "example": {
                "topic": "Photosynthesis",
                "count": 5,
                "allowedTypes": ["multiple-choice", "written"],
                "reference": "Week 1: light reactions\nWeek 2: Calvin cycle",
            }
        }


class GradeRequest(BaseModel):
    questions: List[QuizQuestion]
    submission: QuizSubmission = Field(default_factory=QuizSubmission)
