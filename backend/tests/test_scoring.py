from types import SimpleNamespace

from ashagames.services.games.scoring import (
    adherence_bonus,
    apply_penalty,
    care_bonus,
    clamp,
    dose_points,
    level_points,
)


def test_clamp_bounds():
    assert clamp(120) == 100
    assert clamp(-3) == 0
    assert clamp(10, 20) == 20
    assert clamp(55) == 55


def test_level_and_dose_points():
    assert [level_points(level) for level in (1, 2, 8)] == [10, 20, 80]
    assert dose_points('critical') == 15
    assert dose_points('important') == 10
    assert dose_points('moderate') == 5


def test_penalty_floors_at_zero():
    assert apply_penalty(12, 5) == 7
    assert apply_penalty(3, 10) == 0


def test_care_bonus_counts_only_good_attributes():
    animals = [
        SimpleNamespace(health=70, hunger=20, happiness=60),
        SimpleNamespace(health=40, hunger=80, happiness=30),
    ]
    assert care_bonus(animals) == 20 + 30 + 10


def test_adherence_bonus():
    assert adherence_bonus(10, 10) == 50
    assert adherence_bonus(7, 10) == 35
    assert adherence_bonus(1, 3) == 16
    assert adherence_bonus(0, 0) == 0
