import random

import pytest

from ashagames.services.games.generators import GenerationError, retry_until_valid
from ashagames.services.games.minigames.math_quiz import (
    MathQuizGame,
    generate_options,
    generate_question,
    valid_options,
)


def _evaluate(question):
    a, b = question.num1, question.num2
    return {'+': a + b, '-': a - b, '×': a * b}[question.operation]


def test_generated_questions_have_four_distinct_positive_options():
    rng = random.Random(42)
    for _ in range(500):
        question = generate_question(rng)
        assert question.answer == _evaluate(question)
        assert len(question.options) == 4
        assert len(set(question.options)) == 4
        assert question.options.count(question.answer) == 1
        assert all(o > 0 for o in question.options)
        assert all(abs(o - question.answer) <= 10 for o in question.options)


def test_small_answers_still_get_valid_options():
    rng = random.Random(7)
    for _ in range(200):
        options = generate_options(rng, 1)
        assert sorted(options)[0] >= 1
        assert options.count(1) == 1
        assert len(set(options)) == 4


def test_valid_options_predicate():
    assert valid_options(5, [5, 6, 7, 8])
    assert not valid_options(5, [5, 5, 7, 8])
    assert not valid_options(5, [5, 0, 7, 8])
    assert not valid_options(5, [6, 7, 8, 9])
    assert not valid_options(5, [5, 6, 7])


def test_retry_gives_up_after_budget():
    with pytest.raises(GenerationError):
        retry_until_valid(lambda: 1, lambda value: value > 1, attempts=5)


def _right(question):
    return question.options.index(question.answer)


def _wrong(question):
    return next(i for i, o in enumerate(question.options) if o != question.answer)


def test_seven_correct_answers_score_seventy(make_game, scheduler, recorder):
    game = make_game(MathQuizGame)
    game.start()
    assert len(game.questions) == 10
    for number in range(10):
        question = game.current_question
        index = _right(question) if number < 7 else _wrong(question)
        result = game.submit_action({'option': index})
        assert result.accepted
        assert result.points == (10 if number < 7 else 0)
        scheduler.advance(1.0)

    assert game.phase.value == 'ended'
    # Feedback windows pause the countdown
    assert game.time_remaining == 30
    assert recorder.completed == [(70, 10)]
    assert game.outcome.reason == 'questions_exhausted'
    assert game.outcome.summary['message'] == '7 out of 10 correct'


def test_answer_during_feedback_is_refused(make_game, scheduler):
    game = make_game(MathQuizGame)
    game.start()
    game.submit_action({'option': _right(game.current_question)})
    assert game.score == 10
    second = game.submit_action({'option': 0})
    assert not second.accepted
    assert game.score == 10
    assert game.round_index == 0
    scheduler.advance(1.0)
    assert game.round_index == 1


def test_invalid_option_changes_nothing(make_game):
    game = make_game(MathQuizGame)
    game.start()
    result = game.submit_action({'option': 7})
    assert not result.accepted
    assert game.score == 0
    assert not game.blocking


def test_timeout_ends_quiz(make_game, scheduler, recorder):
    game = make_game(MathQuizGame)
    game.start()
    game.submit_action({'option': _right(game.current_question)})
    scheduler.advance(1.0)
    scheduler.advance(30.0)
    assert recorder.completed == [(10, 31)]
    assert game.outcome.reason == 'timeout'
    assert game.outcome.summary['message'] == '1 out of 10 correct'


def test_restart_regenerates_questions(make_game, scheduler):
    game = make_game(MathQuizGame)
    game.start()
    first = list(game.questions)
    scheduler.advance(30.0)
    game.start()
    assert game.questions != first
    assert game.time_remaining == 30
