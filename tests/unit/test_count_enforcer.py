"""
Unit tests for quizbuilder/services/count_enforcer.py
Tests: dedup-before-pad, filler variety and type preference, truncation, id density
"""

import pytest

from quizbuilder.core.constants import DEFAULT_TOPIC
from quizbuilder.schemas import MatchingQuestion, MultipleChoiceQuestion, WrittenQuestion
from quizbuilder.services.count_enforcer import (
    create_filler_question,
    ensure_exact_count,
    filler_type,
    normalization_key,
)


def _mc(qid, text):
    return MultipleChoiceQuestion(id=qid, text=text, options=["a", "b"])


class TestNormalizationKey:

    def test_collapses_whitespace_and_case(self):
        assert normalization_key("  What   IS\n DNA? ") == "what is dna?"

    def test_none_is_empty(self):
        assert normalization_key(None) == ""


class TestFillerQuestions:

    def test_type_preference_order(self):
        assert filler_type(["written", "matching", "multiple-choice"]).value == "multiple-choice"
        assert filler_type(["written", "matching"]).value == "matching"
        assert filler_type(["written"]).value == "written"

    def test_multiple_choice_filler_is_valid(self):
        q = create_filler_question(1, ["multiple-choice"], "Cells")
        assert isinstance(q, MultipleChoiceQuestion)
        assert "Cells" in q.text
        assert q.correctIndex == 0
        assert len(q.options) == 4

    def test_matching_filler_is_valid(self):
        q = create_filler_question(2, ["matching"], "Cells")
        assert isinstance(q, MatchingQuestion)
        assert q.correctMatches == [0, 1, 2]
        assert len(q.leftItems) == len(q.rightItems) == 3

    def test_written_filler_is_valid(self):
        q = create_filler_question(1, ["written"], "Cells")
        assert isinstance(q, WrittenQuestion)
        assert q.answerBoxes == 1
        assert q.expectedAnswers

    def test_consecutive_fillers_differ(self):
        texts = [create_filler_question(i, ["multiple-choice"], "Cells").text for i in range(1, 6)]
        assert len(set(texts)) == 5

    def test_consecutive_matching_fillers_differ(self):
        texts = [create_filler_question(i, ["matching"], "Cells").text for i in range(1, 4)]
        assert len(set(texts)) == 3

    def test_blank_topic_uses_default(self):
        assert DEFAULT_TOPIC in create_filler_question(1, ["written"], "  ").text

    def test_deterministic(self):
        a = create_filler_question(3, ["multiple-choice"], "Cells")
        b = create_filler_question(3, ["multiple-choice"], "Cells")
        assert a == b


class TestEnsureExactCount:

    def test_dedup_before_pad(self):
        questions = [_mc(1, "What is DNA?"), _mc(2, "what  is dna?")]
        result = ensure_exact_count(questions, 1, ["multiple-choice"], "Biology")
        assert len(result) == 1
        assert result[0].text == "What is DNA?"

    def test_pads_with_fillers(self):
        result = ensure_exact_count([_mc(9, "Q1")], 4, ["multiple-choice"], "Cells")
        assert len(result) == 4
        assert result[0].text == "Q1"
        assert len({normalization_key(q.text) for q in result}) == 4

    def test_truncates_in_order(self):
        questions = [_mc(i, f"Q{i}") for i in range(1, 6)]
        result = ensure_exact_count(questions, 3, ["multiple-choice"], "Cells")
        assert [q.text for q in result] == ["Q1", "Q2", "Q3"]

    def test_ids_dense(self):
        questions = [_mc(40, "A"), _mc(7, "B"), _mc(7, "C")]
        result = ensure_exact_count(questions, 5, ["multiple-choice"], "Cells")
        assert [q.id for q in result] == [1, 2, 3, 4, 5]

    def test_empty_text_dropped(self):
        result = ensure_exact_count([_mc(1, "   "), _mc(2, "Real")], 2, ["multiple-choice"], "Cells")
        assert result[0].text == "Real"
        assert result[1].text.strip()

    def test_filler_skips_text_already_present(self):
        taken = create_filler_question(2, ["written"], "Cells").text
        result = ensure_exact_count([WrittenQuestion(id=1, text=taken)], 2, ["written"], "Cells")
        assert normalization_key(result[0].text) != normalization_key(result[1].text)

    def test_fillers_respect_allowed_types(self):
        result = ensure_exact_count([], 6, ["written"], "Cells")
        assert all(q.type == "written" for q in result)

    def test_large_shortfall_still_exact(self):
        result = ensure_exact_count([], 12, ["matching"], "Cells")
        assert len(result) == 12
        assert [q.id for q in result] == list(range(1, 13))

    def test_input_not_mutated(self):
        questions = [_mc(5, "A")]
        ensure_exact_count(questions, 1, ["multiple-choice"], "Cells")
        assert questions[0].id == 5

    @pytest.mark.parametrize("count", [1, 2, 7])
    def test_exact_length(self, count):
        assert len(ensure_exact_count([_mc(1, "A"), _mc(2, "B")], count, [], "Cells")) == count
