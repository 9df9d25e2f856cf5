import random
from typing import Callable, List, Optional, Sequence, TypeVar


T = TypeVar('T')

MAX_ATTEMPTS = 1000


class GenerationError(RuntimeError):
    """No valid candidate was produced within the retry budget."""


def make_rng(seed: Optional[int] = None) -> random.Random:
    return random.Random(seed)


def retry_until_valid(make: Callable[[], T], is_valid: Callable[[T], bool], attempts: int = MAX_ATTEMPTS) -> T:
    for _ in range(attempts):
        candidate = make()
        if is_valid(candidate):
            return candidate
    raise GenerationError(f'no valid candidate after {attempts} attempts')


def shuffled(rng: random.Random, items: Sequence[T]) -> List[T]:
    result = list(items)
    rng.shuffle(result)
    return result
