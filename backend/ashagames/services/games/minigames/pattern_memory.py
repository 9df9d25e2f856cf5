import random
from typing import Tuple

from ..engine import ActionResult, GameEngine, read_index
from ..scoring import level_points


GRID_SIZE = 9
MAX_LEVEL = 8
MAX_SEQUENCE = 10

SHOWING = 'showing'
INPUT = 'input'


def sequence_length(level: int) -> int:
    return min(level + 2, MAX_SEQUENCE)


def generate_sequence(rng: random.Random, level: int, grid_size: int = GRID_SIZE) -> Tuple[int, ...]:
    return tuple(rng.randrange(grid_size) for _ in range(sequence_length(level)))


class PatternMemoryGame(GameEngine):
    """Repeat a growing sequence of grid cells.

    Each level first reveals its sequence one cell per second (``showing``),
    then accepts input. The first wrong cell ends the game without credit
    for the level in progress.
    """

    name = 'pattern_memory'
    ticks = False
    reveal_seconds = 1.0
    input_delay_seconds = 0.5
    level_pause_seconds = 1.0

    def reset(self) -> None:
        self.level = 1
        self.levels_completed = 0
        self._begin_level()

    def _begin_level(self) -> None:
        self.round_index = self.level - 1
        self.sequence = generate_sequence(self.rng, self.level)
        self.entered = []
        self.stage = SHOWING
        self.showing_index = 0
        self.hold(self.reveal_seconds, self._reveal_next)

    def _reveal_next(self) -> None:
        self.showing_index += 1
        if self.showing_index < len(self.sequence):
            self.hold(self.reveal_seconds, self._reveal_next)
        else:
            self.hold(self.input_delay_seconds, self._accept_input)

    def _accept_input(self) -> None:
        self.stage = INPUT
        self.showing_index = 0

    def handle_action(self, payload) -> ActionResult:
        cell = read_index(payload, 'cell', GRID_SIZE)
        if cell is None:
            return ActionResult(False, 'Pick a cell on the grid.')
        if self.stage != INPUT:
            return ActionResult(False, 'Watch the pattern first.')
        self.entered.append(cell)
        if self.sequence[len(self.entered) - 1] != cell:
            self.finish('wrong_input')
            return ActionResult(True, 'Wrong cell. Game over.')
        if len(self.entered) < len(self.sequence):
            return ActionResult(True)

        points = level_points(self.level)
        self.score += points
        self.levels_completed += 1
        if self.level >= MAX_LEVEL:
            self.finish('all_levels')
            return ActionResult(True, 'All levels complete!', points)
        message = f'Level {self.level} complete!'
        self.hold(self.level_pause_seconds, self._next_level, message)
        return ActionResult(True, message, points)

    def _next_level(self) -> None:
        self.level += 1
        self._begin_level()

    def level_reached(self) -> int:
        return self.levels_completed

    def summary(self):
        return {
            'levels_completed': self.levels_completed,
            'message': f'{self.levels_completed} levels completed',
        }

    def describe(self):
        data = {
            'level': self.level,
            'max_level': MAX_LEVEL,
            'grid_size': GRID_SIZE,
            'sequence_length': len(self.sequence),
            'stage': self.stage,
            'entered': list(self.entered),
        }
        if self.stage == SHOWING:
            data['revealed'] = list(self.sequence[:self.showing_index])
            data['highlight'] = self.sequence[self.showing_index - 1] if self.showing_index else None
        return data
