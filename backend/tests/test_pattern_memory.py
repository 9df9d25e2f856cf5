import random

from ashagames.services.games.minigames.pattern_memory import (
    GRID_SIZE,
    INPUT,
    SHOWING,
    PatternMemoryGame,
    generate_sequence,
    sequence_length,
)


def _reveal(game, scheduler):
    """Let the whole reveal run: one second per cell plus the half-second hold."""
    scheduler.advance(len(game.sequence) * 1.0 + 0.5)


def _enter(game, cells):
    return [game.submit_action({'cell': c}) for c in cells]


def test_sequence_length_grows_and_caps():
    assert [sequence_length(level) for level in range(1, 12)] == [3, 4, 5, 6, 7, 8, 9, 10, 10, 10, 10]


def test_sequences_stay_on_the_grid():
    rng = random.Random(3)
    for level in range(1, 9):
        sequence = generate_sequence(rng, level)
        assert len(sequence) == sequence_length(level)
        assert all(0 <= cell < GRID_SIZE for cell in sequence)


def test_reveal_blocks_input_until_done(make_game, scheduler):
    game = make_game(PatternMemoryGame)
    game.start()
    assert game.stage == SHOWING
    assert not game.submit_action({'cell': game.sequence[0]}).accepted
    scheduler.advance(1.0)
    assert game.showing_index == 1
    assert game.to_dict()['highlight'] == game.sequence[0]
    scheduler.advance(2.0)
    assert game.showing_index == 3
    assert game.stage == SHOWING
    assert game.blocking
    scheduler.advance(0.5)
    assert game.stage == INPUT
    assert not game.blocking


def test_completing_a_level_scores_ten_times_level(make_game, scheduler):
    game = make_game(PatternMemoryGame)
    game.start()
    _reveal(game, scheduler)
    results = _enter(game, game.sequence)
    assert all(r.accepted for r in results)
    assert results[-1].points == 10
    assert game.score == 10
    assert game.levels_completed == 1
    scheduler.advance(1.0)
    assert game.level == 2
    assert game.stage == SHOWING
    assert len(game.sequence) == 4


def test_first_wrong_cell_ends_without_partial_credit(make_game, scheduler, recorder):
    game = make_game(PatternMemoryGame)
    game.start()
    _reveal(game, scheduler)
    _enter(game, game.sequence)
    scheduler.advance(1.0)
    _reveal(game, scheduler)
    wrong = (game.sequence[1] + 1) % GRID_SIZE
    _enter(game, [game.sequence[0], wrong])
    assert game.phase.value == 'ended'
    assert game.outcome.reason == 'wrong_input'
    assert game.outcome.level == 1
    assert len(recorder.completed) == 1
    assert recorder.completed[0][0] == 10
    assert not game.submit_action({'cell': 0}).accepted


def test_all_levels_cleared(make_game, scheduler, recorder):
    game = make_game(PatternMemoryGame)
    game.start()
    for level in range(1, 9):
        assert game.level == level
        _reveal(game, scheduler)
        _enter(game, game.sequence)
        if level < 8:
            scheduler.advance(1.0)
    assert game.outcome.reason == 'all_levels'
    assert recorder.completed[0][0] == sum(10 * level for level in range(1, 9))
    assert game.outcome.summary['levels_completed'] == 8


def test_off_grid_cell_is_refused(make_game, scheduler):
    game = make_game(PatternMemoryGame)
    game.start()
    _reveal(game, scheduler)
    assert not game.submit_action({'cell': GRID_SIZE}).accepted
    assert game.entered == []
    assert game.phase.value == 'running'


def test_close_during_reveal_stops_the_reveal(make_game, scheduler, recorder):
    game = make_game(PatternMemoryGame)
    game.start()
    scheduler.advance(1.0)
    game.close()
    scheduler.advance(10.0)
    assert game.showing_index == 1
    assert recorder.completed == []
    assert recorder.closed == 1
