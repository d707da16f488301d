"""
Unit tests for quizbuilder/services/grading.py
Tests: exact-match grading of MC and matching, written review, score rounding
"""

import pytest

from quizbuilder.schemas import (
    MatchingQuestion,
    MultipleChoiceQuestion,
    QuizSubmission,
    WrittenQuestion,
)
from quizbuilder.services.grading import grade_quiz, score_percent


@pytest.fixture
def questions():
    return [
        MultipleChoiceQuestion(id=1, text="2+2?", options=["3", "4"], correctIndex=1, explanation="Arithmetic"),
        MatchingQuestion(id=2, text="Match", leftItems=["a", "b"], rightItems=["x", "y"], correctMatches=[1, 0]),
        WrittenQuestion(id=3, text="Explain", expectedAnswers=["Because"]),
    ]


class TestGradeQuiz:

    def test_all_correct(self, questions):
        submission = QuizSubmission(selectedAnswers={1: 1}, matchingAnswers={2: [1, 0]})
        result = grade_quiz(questions, submission)
        assert result.total == 3
        assert result.correct == 2
        assert result.score == 100
        # written always goes to manual review
        assert len(result.review) == 1
        assert result.review[0].autoGraded is False
        assert result.review[0].correctAnswer == ["Because"]

    def test_wrong_multiple_choice_reports_option_text(self, questions):
        result = grade_quiz(questions, QuizSubmission(selectedAnswers={1: 0}, matchingAnswers={2: [1, 0]}))
        item = result.review[0]
        assert item.question.id == 1
        assert item.yourAnswer == "3"
        assert item.correctAnswer == "4"
        assert item.explanation == "Arithmetic"
        assert result.score == 50

    def test_unanswered(self, questions):
        result = grade_quiz(questions, QuizSubmission())
        assert result.correct == 0
        assert result.score == 0
        assert len(result.review) == 3

    def test_missing_correct_index_never_correct(self):
        q = MultipleChoiceQuestion(id=1, text="Q", options=["a"])
        result = grade_quiz([q], QuizSubmission(selectedAnswers={1: 0}))
        assert result.correct == 0

    def test_only_written_scores_zero(self):
        result = grade_quiz([WrittenQuestion(id=1, text="Q")], QuizSubmission(writtenAnswers={1: ["mine"]}))
        assert result.score == 0
        assert result.review[0].yourAnswer == ["mine"]

    def test_string_keys_from_json(self, questions):
        submission = QuizSubmission.model_validate({"selectedAnswers": {"1": 1}, "matchingAnswers": {"2": [1, 0]}})
        assert grade_quiz(questions, submission).correct == 2


@pytest.mark.parametrize("correct,gradable,expected", [
    (0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 2, 50), (1, 8, 13), (3, 3, 100),
])
def test_score_percent(correct, gradable, expected):
    assert score_percent(correct, gradable) == expected
