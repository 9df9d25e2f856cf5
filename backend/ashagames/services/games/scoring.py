from typing import Iterable


ATTRIBUTE_MIN = 0
ATTRIBUTE_MAX = 100

DOSE_POINTS = {
    'critical': 15,
    'important': 10,
    'moderate': 5,
}
WRONG_DOSE_PENALTY = 5
MISSED_DOSE_PENALTY = 10
ADHERENCE_BONUS_MAX = 50


def clamp(value: int, low: int = ATTRIBUTE_MIN, high: int = ATTRIBUTE_MAX) -> int:
    return max(low, min(high, value))


def level_points(level: int) -> int:
    """Points for reproducing a whole pattern-memory level."""
    return 10 * level


def dose_points(importance: str) -> int:
    return DOSE_POINTS[importance]


def apply_penalty(score: int, penalty: int) -> int:
    return max(0, score - penalty)


def care_bonus(animals: Iterable) -> int:
    """End-of-game bonus for well kept animals.

    Each animal contributes health above 50, hunger below 50 and happiness
    above 50.
    """
    bonus = 0
    for animal in animals:
        bonus += max(0, animal.health - 50)
        bonus += max(0, 50 - animal.hunger)
        bonus += max(0, animal.happiness - 50)
    return bonus


def adherence_bonus(completed: int, total: int) -> int:
    if total <= 0:
        return 0
    return (ADHERENCE_BONUS_MAX * completed) // total
