import random

from ashagames.services.games.minigames.animal_care import (
    DECAY_FLOOR,
    FEEDS,
    AnimalCareGame,
    Animal,
    generate_animals,
)
from ashagames.services.games.scoring import care_bonus


WATER = 2
MEDICINE = 3
SPECIAL = 4


def test_feeding_improvement_is_clamped():
    cow = Animal('cow', 'Cow', 'adult', health=95, hunger=10, happiness=50)
    improvement = cow.feed(FEEDS[0])
    # health +5 (capped), hunger -10 (floored at 0), happiness +5
    assert (cow.health, cow.hunger, cow.happiness) == (100, 0, 55)
    assert improvement == 20


def test_negative_improvement_scores_nothing(make_game):
    game = make_game(AnimalCareGame)
    game.start()
    game.animals[0] = Animal('cow', 'Cow', 'adult', health=100, hunger=0, happiness=50)
    result = game.submit_action({'feed': MEDICINE})
    assert result.accepted
    assert result.points == 0
    assert game.score == 0
    assert game.animals[0].happiness == 48


def test_insufficient_budget_is_rejected_without_changes(make_game):
    game = make_game(AnimalCareGame)
    game.start()
    game.budget = 5
    before = [(a.health, a.hunger, a.happiness) for a in game.animals]
    result = game.submit_action({'feed': SPECIAL})
    assert not result.accepted
    assert result.feedback == 'Budget too low!'
    assert game.budget == 5
    assert game.score == 0
    assert [(a.health, a.hunger, a.happiness) for a in game.animals] == before
    assert not game.blocking


def test_decay_stays_within_floor_and_cap():
    rng = random.Random(11)
    for _ in range(200):
        animals = generate_animals(rng)
        animals.append(Animal('cow', 'Cow', 'adult', health=0, hunger=100, happiness=0))
        for _ in range(5):
            for animal in animals:
                animal.decay(rng)
                for value in (animal.health, animal.hunger, animal.happiness):
                    assert DECAY_FLOOR <= value <= 100


def test_starting_attributes_in_range(rng):
    for animal in generate_animals(rng):
        for value in (animal.health, animal.hunger, animal.happiness):
            assert 0 <= value <= 100


def test_animals_fed_in_turn_and_budget_refills(make_game, scheduler):
    game = make_game(AnimalCareGame)
    game.start()
    for expected in range(3):
        assert game.current_animal == expected
        game.submit_action({'feed': WATER})
        scheduler.advance(2.0)
    assert game.round_index == 1
    assert game.current_animal == 0
    assert game.budget == 50 - 3 + 20
    assert game.time_remaining == 60


def test_full_game_adds_care_bonus(make_game, scheduler, recorder):
    game = make_game(AnimalCareGame)
    game.start()
    earned = 0
    for _ in range(5 * 3):
        result = game.submit_action({'feed': WATER})
        assert result.accepted
        earned += result.points
        scheduler.advance(2.0)
    assert game.outcome.reason == 'rounds_exhausted'
    bonus = care_bonus(game.animals)
    assert game.outcome.bonus == bonus
    assert recorder.completed == [(earned + bonus, 30)]


def test_round_timeout_ends_game(make_game, scheduler, recorder):
    game = make_game(AnimalCareGame)
    game.start()
    scheduler.advance(60.0)
    assert game.outcome.reason == 'timeout'
    assert recorder.completed == [(care_bonus(game.animals), 60)]
