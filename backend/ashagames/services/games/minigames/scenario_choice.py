from dataclasses import dataclass
from typing import Dict, Tuple

from ..engine import ActionResult, GameEngine, read_index


@dataclass(frozen=True)
class Option:
    text: str
    points: int
    feedback: str


@dataclass(frozen=True)
class Scenario:
    title: str
    description: str
    options: Tuple[Option, ...]
    # Household resources the situation consumes
    costs: Dict[str, int]


SCENARIOS = (
    Scenario(
        title='Water shortage',
        description='The household water supply is running low. How should water be used for a family of five?',
        options=(
            Option('Share it equally across all chores', 5, 'Good! Balanced distribution matters.'),
            Option('Secure drinking water first', 10, 'Excellent! Drinking water comes first.'),
            Option('Buy water from outside', 3, 'Okay, but household resources are better.'),
        ),
        costs={'water': 3, 'soap': 5, 'medicine': 5},
    ),
    Scenario(
        title='Sanitation problem',
        description='The children have diarrhoea. What should be done right away?',
        options=(
            Option('Prepare and give ORS solution', 10, 'Correct! ORS prevents dehydration.'),
            Option('Tell them to drink water', 5, 'Good, but ORS is better.'),
            Option('Wait for the doctor to arrive', 2, 'That may be too late. Treat it immediately.'),
        ),
        costs={'water': 4, 'soap': 3, 'medicine': 8},
    ),
    Scenario(
        title='Hand-washing habit',
        description='Family members do not wash their hands before eating. What should be done?',
        options=(
            Option('Explain it to everyone and keep soap available', 10, 'Excellent! Both education and access matter.'),
            Option('Tell only the children', 5, 'A good start, but everyone should do it.'),
            Option('Remind them whenever you remember', 2, 'Building a regular habit works better.'),
        ),
        costs={'water': 6, 'soap': 9, 'medicine': 2},
    ),
)

START_RESOURCES = {'water': 10, 'soap': 10, 'medicine': 10}
RESOURCE_REFILL = 2


class ScenarioChoiceGame(GameEngine):
    name = 'scenario_choice'
    # Per scenario; the countdown restarts with each new scenario
    time_limit = 45
    feedback_seconds = 3.0

    def __init__(self, *args, scenarios=SCENARIOS, **kwargs):
        super().__init__(*args, **kwargs)
        self.scenarios = tuple(scenarios)

    def reset(self) -> None:
        self.resources = dict(START_RESOURCES)
        self.selected = None

    @property
    def current_scenario(self) -> Scenario:
        return self.scenarios[self.round_index]

    def handle_action(self, payload) -> ActionResult:
        scenario = self.current_scenario
        index = read_index(payload, 'option', len(scenario.options))
        if index is None:
            return ActionResult(False, 'Choose one of the options.')
        option = scenario.options[index]
        self.selected = index
        self.score += option.points
        for resource, cost in scenario.costs.items():
            self.resources[resource] = max(0, self.resources[resource] - cost + RESOURCE_REFILL)
        self.hold(self.feedback_seconds, self._next_scenario, option.feedback)
        return ActionResult(True, option.feedback, option.points)

    def _next_scenario(self) -> None:
        self.selected = None
        if self.round_index + 1 >= len(self.scenarios):
            self.finish('scenarios_exhausted')
            return
        self.round_index += 1
        self.reset_countdown()

    def summary(self):
        return {
            'scenarios': len(self.scenarios),
            'resources': dict(self.resources),
            'message': f'{len(self.scenarios)} situations handled',
        }

    def describe(self):
        data = {
            'scenario_number': self.round_index + 1,
            'scenario_count': len(self.scenarios),
            'resources': dict(self.resources),
            'selected': self.selected,
        }
        if self.running:
            scenario = self.current_scenario
            data['scenario'] = {
                'title': scenario.title,
                'description': scenario.description,
                'options': [o.text for o in scenario.options],
            }
        return data
