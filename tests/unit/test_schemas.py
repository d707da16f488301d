"""
Unit tests for quizbuilder/schemas
Tests: discriminated union, index invariants, lenient config models
"""

import pytest
from pydantic import TypeAdapter, ValidationError

from quizbuilder.core.constants import QuestionType, normalize_allowed_types
from quizbuilder.schemas import (
    MatchingQuestion,
    MultipleChoiceQuestion,
    QuizBuildRequest,
    QuizConfig,
    QuizQuestion,
)

_adapter = TypeAdapter(QuizQuestion)


class TestQuestionModels:

    def test_union_dispatches_on_type(self):
        q = _adapter.validate_python({"id": 1, "type": "matching", "text": "M"})
        assert isinstance(q, MatchingQuestion)
        assert q.leftItems == []

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            _adapter.validate_python({"id": 1, "type": "essay", "text": "E"})

    def test_dangling_correct_index_rejected(self):
        with pytest.raises(ValidationError):
            MultipleChoiceQuestion(id=1, text="Q", options=["a"], correctIndex=1)

    def test_dangling_correct_matches_rejected(self):
        with pytest.raises(ValidationError):
            MatchingQuestion(id=1, text="Q", leftItems=["a"], rightItems=["x"], correctMatches=[2])

    def test_ids_positive(self):
        with pytest.raises(ValidationError):
            MultipleChoiceQuestion(id=0, text="Q")

    def test_points_positive(self):
        with pytest.raises(ValidationError):
            MultipleChoiceQuestion(id=1, text="Q", points=0)

    def test_exclude_none_dump(self):
        dumped = MultipleChoiceQuestion(id=1, text="Q", options=["a"]).model_dump(exclude_none=True)
        assert dumped == {"id": 1, "text": "Q", "points": 1, "type": "multiple-choice", "options": ["a"]}


class TestConfigModels:

    def test_quiz_config_defaults(self):
        config = QuizConfig()
        assert config.topic == "this subject"
        assert config.count == 5
        assert config.withAnswers is True
        assert len(config.allowedTypes) == 3

    def test_quiz_config_lenient(self):
        config = QuizConfig(topic="", count=-2, allowedTypes=["match", "essay"])
        assert config.topic == "this subject"
        assert config.count == 1
        assert config.allowedTypes == [QuestionType.MATCHING]

    def test_build_request_limits(self):
        with pytest.raises(ValidationError):
            QuizBuildRequest(count=0)
        with pytest.raises(ValidationError):
            QuizBuildRequest(count=51)
        with pytest.raises(ValidationError):
            QuizBuildRequest(reference="x" * 1401)

    def test_build_request_rejects_unknown_type(self):
        with pytest.raises(ValidationError):
            QuizBuildRequest(allowedTypes=["essay"])


def test_normalize_allowed_types_keeps_order():
    assert normalize_allowed_types(["written", "mcq", "written"]) == [
        QuestionType.WRITTEN,
        QuestionType.MULTIPLE_CHOICE,
    ]
