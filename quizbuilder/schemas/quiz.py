"""
Quiz-related Pydantic schemas.

Field names follow the JSON wire format (camelCase) so generated
questions round-trip to the browser unchanged.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator, model_validator

from quizbuilder.core.config import settings
from quizbuilder.core.constants import (
    ALL_QUESTION_TYPES,
    DEFAULT_TOPIC,
    QuestionType,
    normalize_allowed_types,
)


def _coerce_count(value: Any) -> int:
    """Clamp a requested count to >= 1, falling back to the default."""
    if value is None or isinstance(value, bool):
        return settings.DEFAULT_QUESTION_COUNT
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return settings.DEFAULT_QUESTION_COUNT
    return max(1, count)


def _coerce_topic(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_TOPIC
    return value.strip()


# ============================================================================
# Questions
# ============================================================================

class BaseQuestion(BaseModel):
    """Fields shared by every question variant."""
    id: int = Field(..., ge=1)
    text: str = ""
    points: Union[int, float] = 1
    explanation: Optional[str] = None

    @field_validator("points")
    @classmethod
    def _positive_points(cls, value):
        if value <= 0:
            raise ValueError("points must be positive")
        return value


class MultipleChoiceQuestion(BaseQuestion):
    type: Literal["multiple-choice"] = "multiple-choice"
    options: List[str] = Field(default_factory=list)
    correctIndex: Optional[int] = None
    
    @model_validator(mode="after")
    def _check_correct_index(self):
        if self.correctIndex is not None and not 0 <= self.correctIndex < len(self.options):
            raise ValueError(
                f"correctIndex {self.correctIndex} out of range for {len(self.options)} options"
            )
        return self


class WrittenQuestion(BaseQuestion):
    type: Literal["written"] = "written"
    answerBoxes: int = Field(default=1, ge=1)
    expectedAnswers: List[str] = Field(default_factory=list)


class MatchingQuestion(BaseQuestion):
    type: Literal["matching"] = "matching"
    leftItems: List[str] = Field(default_factory=list)
    rightItems: List[str] = Field(default_factory=list)
    # correctMatches[i] is the index in rightItems that leftItems[i] pairs with
    correctMatches: Optional[List[int]] = None
    
    @model_validator(mode="after")
    def _check_correct_matches(self):
        if self.correctMatches is None:
            return self
        if len(self.correctMatches) != len(self.leftItems):
            raise ValueError("correctMatches must have one entry per left item")
        if any(not 0 <= n < len(self.rightItems) for n in self.correctMatches):
            raise ValueError("correctMatches entries must index into rightItems")
        return self


QuizQuestion = Annotated[
    Union[MultipleChoiceQuestion, WrittenQuestion, MatchingQuestion],
    Field(discriminator="type"),
]


# ============================================================================
# Generation inputs
# ============================================================================

class QuizConfig(BaseModel):
    """Input to the prompt builder. Degenerate values fall back to defaults."""
    topic: str = DEFAULT_TOPIC
    count: int = Field(default_factory=lambda: settings.DEFAULT_QUESTION_COUNT)
    allowedTypes: List[QuestionType] = Field(default_factory=lambda: list(ALL_QUESTION_TYPES))
    reference: Optional[str] = None
    withAnswers: bool = True
    
    @field_validator("topic", mode="before")
    @classmethod
    def _topic(cls, value):
        return _coerce_topic(value)
    
    @field_validator("count", mode="before")
    @classmethod
    def _count(cls, value):
        return _coerce_count(value)
    
    @field_validator("allowedTypes", mode="before")
    @classmethod
    def _allowed_types(cls, value):
        return normalize_allowed_types(value)


class GenerateOptions(BaseModel):
    """Options for generate_quiz_questions."""
    count: int = Field(default_factory=lambda: settings.DEFAULT_QUESTION_COUNT)
    allowedTypes: List[QuestionType] = Field(default_factory=lambda: list(ALL_QUESTION_TYPES))
    enforceExactCount: bool = True
    topic: str = DEFAULT_TOPIC
    
    @field_validator("topic", mode="before")
    @classmethod
    def _topic(cls, value):
        return _coerce_topic(value)
    
    @field_validator("count", mode="before")
    @classmethod
    def _count(cls, value):
        return _coerce_count(value)
    
    @field_validator("enforceExactCount", mode="before")
    @classmethod
    def _enforce(cls, value):
        return True if value is None else value
    
    @field_validator("allowedTypes", mode="before")
    @classmethod
    def _allowed_types(cls, value):
        return normalize_allowed_types(value)


# ============================================================================
# Grading
# ============================================================================

class QuizSubmission(BaseModel):
    """Answers collected by the client, keyed by question id."""
    selectedAnswers: Dict[int, int] = Field(default_factory=dict)
    matchingAnswers: Dict[int, List[int]] = Field(default_factory=dict)
    writtenAnswers: Dict[int, List[str]] = Field(default_factory=dict)


class ReviewItem(BaseModel):
    """A question the student missed, or one that needs manual review."""
    question: QuizQuestion
    yourAnswer: Any = None
    correctAnswer: Any = None
    explanation: Optional[str] = None
    autoGraded: bool = True


class QuizResult(BaseModel):
    total: int
    correct: int
    score: int = Field(..., ge=0, le=100)  # percent of auto-gradable questions
    review: List[ReviewItem] = Field(default_factory=list)
