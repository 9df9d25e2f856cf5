import random
from dataclasses import dataclass
from typing import List, Tuple

from ..engine import ActionResult, GameEngine, read_index
from ..generators import retry_until_valid, shuffled


OPERATIONS = ('+', '-', '×')
OPTION_COUNT = 4
DISTRACTOR_SPREAD = 10


@dataclass(frozen=True)
class Question:
    num1: int
    num2: int
    operation: str
    answer: int
    options: Tuple[int, ...]

    @property
    def text(self) -> str:
        return f'{self.num1} {self.operation} {self.num2}'

    def to_dict(self) -> dict:
        return {
            'num1': self.num1,
            'num2': self.num2,
            'operation': self.operation,
            'text': self.text,
            'options': list(self.options),
        }


def valid_options(answer: int, options: List[int]) -> bool:
    return (
        len(options) == OPTION_COUNT
        and len(set(options)) == OPTION_COUNT
        and options.count(answer) == 1
        and all(o > 0 for o in options)
    )


def generate_options(rng: random.Random, answer: int) -> List[int]:
    """The answer plus three distinct positive distractors within answer±10, shuffled."""
    def make():
        return [answer] + [answer + rng.randint(-DISTRACTOR_SPREAD, DISTRACTOR_SPREAD) for _ in range(OPTION_COUNT - 1)]

    options = retry_until_valid(make, lambda candidate: valid_options(answer, candidate))
    return shuffled(rng, options)


def generate_question(rng: random.Random) -> Question:
    operation = rng.choice(OPERATIONS)
    if operation == '+':
        num1 = rng.randint(1, 50)
        num2 = rng.randint(1, 50)
        answer = num1 + num2
    elif operation == '-':
        num1 = rng.randint(10, 59)
        num2 = rng.randint(1, num1 - 1)
        answer = num1 - num2
    else:
        num1 = rng.randint(1, 12)
        num2 = rng.randint(1, 12)
        answer = num1 * num2
    return Question(num1, num2, operation, answer, tuple(generate_options(rng, answer)))


class MathQuizGame(GameEngine):
    name = 'math'
    time_limit = 30
    question_count = 10
    points_per_answer = 10
    feedback_seconds = 1.0

    def reset(self) -> None:
        self.questions = [generate_question(self.rng) for _ in range(self.question_count)]
        self.correct = 0
        self.selected = None

    @property
    def current_question(self) -> Question:
        return self.questions[self.round_index]

    def handle_action(self, payload) -> ActionResult:
        question = self.current_question
        index = read_index(payload, 'option', len(question.options))
        if index is None:
            return ActionResult(False, 'Choose one of the four answers.')
        chosen = question.options[index]
        self.selected = chosen
        if chosen == question.answer:
            self.correct += 1
            self.score += self.points_per_answer
            result = ActionResult(True, 'Correct!', self.points_per_answer)
        else:
            result = ActionResult(True, f'Wrong. {question.text} = {question.answer}')
        self.hold(self.feedback_seconds, self._next_question, result.feedback)
        return result

    def _next_question(self) -> None:
        self.selected = None
        if self.round_index + 1 >= len(self.questions):
            self.finish('questions_exhausted')
            return
        self.round_index += 1

    def summary(self):
        total = len(self.questions)
        return {
            'correct': self.correct,
            'total': total,
            'message': f'{self.correct} out of {total} correct',
        }

    def describe(self):
        data = {'question_number': self.round_index + 1, 'question_count': len(self.questions), 'selected': self.selected}
        if self.running:
            data['question'] = self.current_question.to_dict()
        return data
