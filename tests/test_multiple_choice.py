import random

import pytest

from kanadrill.exceptions import SessionStateError, ValidationError
from kanadrill.models import QuizItem, SessionState
from kanadrill.multiple_choice import (
    MultipleChoiceSession,
    check_quiz_items,
    default_count,
    generate_options,
)

KANA_POOL = [
    QuizItem(glyph="か", reading="ka", meaning="ka"),
    QuizItem(glyph="き", reading="ki", meaning="ki"),
    QuizItem(glyph="く", reading="ku", meaning="ku"),
    QuizItem(glyph="け", reading="ke", meaning="ke"),
    QuizItem(glyph="こ", reading="ko", meaning="ko"),
]


def meaning_of(pool, question):
    return next(item.meaning for item in pool if item.glyph == question.glyph)


class TestOptionGeneration:
    """Four unique options, always including the correct meaning."""

    def test_four_unique_options(self, quiz_pool, rng):
        for item in quiz_pool:
            options = generate_options(item.meaning, quiz_pool, rng)
            assert len(options) == 4
            assert len(set(options)) == 4
            assert item.meaning in options

    def test_duplicate_meanings_in_pool(self, rng):
        pool = KANA_POOL + [QuizItem(glyph="カ", reading="ka", meaning="ka")]
        options = generate_options("ka", pool, rng)
        assert options.count("ka") == 1
        assert len(set(options)) == 4

    def test_same_seed_same_options(self, quiz_pool):
        first = generate_options("meaning 0", quiz_pool, random.Random(5))
        second = generate_options("meaning 0", quiz_pool, random.Random(5))
        assert first == second

    def test_default_count(self, quiz_pool):
        assert default_count(quiz_pool) == 10
        assert default_count(quiz_pool[:6]) == 6
        assert default_count(quiz_pool, 4) == 4


class TestQuizItemCheck:
    """Quiz sets must be able to produce four distinct options."""

    def test_accepts_varied_pool(self, quiz_pool):
        check_quiz_items(quiz_pool)

    def test_rejects_small_pool(self):
        with pytest.raises(ValidationError, match="at least 5 items"):
            check_quiz_items(KANA_POOL[:4])

    def test_rejects_pool_with_few_meanings(self):
        pool = [
            QuizItem(glyph=f"g{i}", reading=f"r{i}", meaning=["a", "b", "c"][i % 3])
            for i in range(6)
        ]
        with pytest.raises(ValidationError, match="at least 4 different meanings"):
            check_quiz_items(pool)

class TestMultipleChoiceStart:
    """Validation and truncation when a quiz starts."""

    def test_requires_five_items(self, rng):
        session = MultipleChoiceSession(rng)
        with pytest.raises(ValidationError, match="at least 5 items"):
            session.start(KANA_POOL[:4], 4, True)
        assert session.state == SessionState.IDLE

    def test_requires_positive_count(self, rng):
        session = MultipleChoiceSession(rng)
        with pytest.raises(ValidationError):
            session.start(KANA_POOL, 0, True)
        assert session.state == SessionState.IDLE

    def test_truncates_in_load_order(self, quiz_pool, rng):
        session = MultipleChoiceSession(rng)
        assert session.start(quiz_pool, 5, True) == 5
        assert set(session.items) == set(quiz_pool[:5])
        assert session.pool == quiz_pool

    def test_count_larger_than_pool(self, quiz_pool, rng):
        session = MultipleChoiceSession(rng)
        assert session.start(quiz_pool, 50, False) == 12

    def test_distractors_come_from_untruncated_pool(self, quiz_pool, rng):
        session = MultipleChoiceSession(rng)
        session.start(quiz_pool, 1, True)
        question = session.next_question()
        assert question.options.count("meaning 0") == 1
        assert len(set(question.options) - {"meaning 0"}) == 3

    def test_same_seed_same_quiz(self, quiz_pool):
        runs = []
        for _ in range(2):
            session = MultipleChoiceSession(random.Random(11))
            session.start(quiz_pool, 8, True)
            questions = []
            while session.next_question() is not None:
                questions.append(session.current_question)
                session.submit_answer("x")
            runs.append(questions)
        assert runs[0] == runs[1]


class TestMultipleChoiceQuestions:
    """Question flow, answers and results."""

    def test_scenario_kana_pool(self, rng):
        session = MultipleChoiceSession(rng)
        session.start(KANA_POOL, 5, True)
        question = session.next_question()
        correct = meaning_of(KANA_POOL, question)

        assert question.number == 1
        assert question.total == 5
        assert question.reading == correct
        assert len(set(question.options)) == 4
        assert correct in question.options

        result = session.submit_answer(correct)
        assert result.is_correct is True
        assert result.glyph == question.glyph
        assert session.position == 1
        assert session.current_question == question

    def test_hidden_reading(self, rng):
        session = MultipleChoiceSession(rng)
        session.start(KANA_POOL, 5, False)
        question = session.next_question()
        assert question.reading is None
        result = session.submit_answer("nothing")
        assert result.reading == meaning_of(KANA_POOL, question)

    def test_answer_is_recorded_once(self, rng):
        session = MultipleChoiceSession(rng)
        session.start(KANA_POOL, 5, True)
        question = session.next_question()
        correct = meaning_of(KANA_POOL, question)
        wrong = next(o for o in question.options if o != correct)

        first = session.submit_answer(wrong)
        second = session.submit_answer(correct)
        assert first.is_correct is False
        assert second == first
        assert len(session.quiz_results) == 1

    def test_must_answer_before_next(self, rng):
        session = MultipleChoiceSession(rng)
        session.start(KANA_POOL, 5, True)
        session.next_question()
        with pytest.raises(SessionStateError):
            session.next_question()

    def test_answer_without_question(self, rng):
        session = MultipleChoiceSession(rng)
        with pytest.raises(SessionStateError):
            session.submit_answer("ka")
        session.start(KANA_POOL, 5, True)
        with pytest.raises(SessionStateError):
            session.submit_answer("ka")

    def test_full_quiz(self, quiz_pool, rng):
        session = MultipleChoiceSession(rng)
        session.start(quiz_pool, 10, True)
        seen = []
        while True:
            question = session.next_question()
            if question is None:
                break
            assert session.state == SessionState.IN_PROGRESS
            correct = meaning_of(quiz_pool, question)
            assert len(set(question.options)) == 4
            assert correct in question.options
            seen.append(question.glyph)
            answer = correct if len(seen) % 2 else question.options[
                (question.options.index(correct) + 1) % 4
            ]
            session.submit_answer(answer)

        assert session.state == SessionState.COMPLETE
        assert sorted(seen) == sorted(item.glyph for item in quiz_pool[:10])

        results = session.results()
        assert results.total == 10
        assert results.correct_count == 5
        assert len(results.incorrect) == 5
        assert results.score_percentage == 50
        assert [r.glyph for r in results.results] == seen

    def test_results_before_complete(self, rng):
        session = MultipleChoiceSession(rng)
        session.start(KANA_POOL, 5, True)
        session.next_question()
        with pytest.raises(SessionStateError):
            session.results()

    def test_next_question_after_complete(self, rng):
        session = MultipleChoiceSession(rng)
        session.start(KANA_POOL, 5, True)
        while session.next_question() is not None:
            session.submit_answer("x")
        with pytest.raises(SessionStateError):
            session.next_question()

    def test_restart(self, rng):
        session = MultipleChoiceSession(rng)
        session.start(KANA_POOL, 5, True)
        session.next_question()
        session.restart()
        assert session.state == SessionState.IDLE
        assert session.total == 0
        assert session.current_question is None
