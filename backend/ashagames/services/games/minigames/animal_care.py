import random
from dataclasses import asdict, dataclass
from typing import List

from ..engine import ActionResult, GameEngine, read_index
from ..scoring import care_bonus, clamp


DECAY_FLOOR = 20


@dataclass(frozen=True)
class Feed:
    name: str
    health_boost: int
    hunger_reduction: int
    happiness_boost: int
    cost: int


FEEDS = (
    Feed('Green fodder', 10, 15, 5, 2),
    Feed('Grain mix', 5, 20, 3, 3),
    Feed('Water', 2, 5, 8, 1),
    Feed('Medicine', 25, 0, -2, 5),
    Feed('Special feed', 15, 25, 10, 6),
)


@dataclass
class Animal:
    kind: str
    name: str
    age: str
    health: int
    hunger: int
    happiness: int

    def feed(self, feed: Feed) -> int:
        """Apply a feed and return the total improvement it produced."""
        health = clamp(self.health + feed.health_boost)
        hunger = clamp(self.hunger - feed.hunger_reduction)
        happiness = clamp(self.happiness + feed.happiness_boost)
        improvement = (health - self.health) + (self.hunger - hunger) + (happiness - self.happiness)
        self.health, self.hunger, self.happiness = health, hunger, happiness
        return improvement

    def decay(self, rng: random.Random) -> None:
        """Time passing between rounds."""
        self.health = clamp(self.health - rng.randint(5, 19), DECAY_FLOOR)
        self.hunger = clamp(self.hunger + rng.randint(10, 29), DECAY_FLOOR)
        self.happiness = clamp(self.happiness - rng.randint(5, 14), DECAY_FLOOR)


def generate_animals(rng: random.Random) -> List[Animal]:
    return [
        Animal('cow', 'Cow', 'adult', rng.randint(40, 69), rng.randint(30, 69), rng.randint(40, 69)),
        Animal('goat', 'Goat', 'young', rng.randint(50, 79), rng.randint(40, 89), rng.randint(35, 64)),
        Animal('chicken', 'Chicken', 'young', rng.randint(30, 69), rng.randint(40, 99), rng.randint(30, 69)),
    ]


class AnimalCareGame(GameEngine):
    name = 'animal_care'
    # Per round; the countdown restarts with each new round
    time_limit = 60
    max_rounds = 5
    start_budget = 50
    round_budget = 20
    feedback_seconds = 2.0

    def reset(self) -> None:
        self.animals = generate_animals(self.rng)
        self.current_animal = 0
        self.budget = self.start_budget

    def handle_action(self, payload) -> ActionResult:
        index = read_index(payload, 'feed', len(FEEDS))
        if index is None:
            return ActionResult(False, 'Choose a feed.')
        feed = FEEDS[index]
        if self.budget < feed.cost:
            return ActionResult(False, 'Budget too low!')
        self.budget -= feed.cost
        animal = self.animals[self.current_animal]
        improvement = animal.feed(feed)
        points = max(0, improvement)
        self.score += points
        message = f'{feed.name} earned {points} points.'
        self.hold(self.feedback_seconds, self._next_animal, message)
        return ActionResult(True, message, points)

    def _next_animal(self) -> None:
        if self.current_animal + 1 < len(self.animals):
            self.current_animal += 1
            return
        self._next_round()

    def _next_round(self) -> None:
        if self.round_index + 1 >= self.max_rounds:
            self.finish('rounds_exhausted')
            return
        for animal in self.animals:
            animal.decay(self.rng)
        self.round_index += 1
        self.current_animal = 0
        self.budget += self.round_budget
        self.reset_countdown()

    def end_bonus(self) -> int:
        return care_bonus(self.animals)

    def level_reached(self) -> int:
        return self.round_index + 1

    def summary(self):
        return {
            'rounds': self.round_index + 1,
            'animals': [asdict(a) for a in self.animals],
            'message': f'Cared for the animals over {self.round_index + 1} rounds',
        }

    def describe(self):
        return {
            'round_number': self.round_index + 1,
            'max_rounds': self.max_rounds,
            'budget': self.budget,
            'current_animal': self.current_animal,
            'animals': [asdict(a) for a in self.animals],
            'feeds': [asdict(f) for f in FEEDS],
        }
