"""Response schemas."""

from pydantic import BaseModel
from typing import Any, List, Optional

from .quiz import QuizQuestion


class GenerateResponse(BaseModel):
    content: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None


class PingResponse(BaseModel):
    ok: bool = True
    hasKey: bool
    model: str
    t: int


class QuizBuildResponse(BaseModel):
    topic: str
    questions: List[QuizQuestion]
    generatedAt: str
