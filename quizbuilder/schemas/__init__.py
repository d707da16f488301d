"""Schemas package."""

from .quiz import (
    MultipleChoiceQuestion,
    WrittenQuestion,
    MatchingQuestion,
    QuizQuestion,
    QuizConfig,
    GenerateOptions,
    QuizSubmission,
    ReviewItem,
    QuizResult,
)
from .requests import GenerateRequest, QuizBuildRequest, GradeRequest
from .responses import GenerateResponse, ErrorResponse, PingResponse, QuizBuildResponse

__all__ = [
    # Questions
    "MultipleChoiceQuestion",
    "WrittenQuestion",
    "MatchingQuestion",
    "QuizQuestion",
    # Generation
    "QuizConfig",
    "GenerateOptions",
    # Grading
    "QuizSubmission",
    "ReviewItem",
    "QuizResult",
    # Requests
    "GenerateRequest",
    "QuizBuildRequest",
    "GradeRequest",
    # Responses
    "GenerateResponse",
    "ErrorResponse",
    "PingResponse",
    "QuizBuildResponse",
]
