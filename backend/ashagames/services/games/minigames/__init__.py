"""The five mini-game rule sets, keyed by catalog name."""
from .animal_care import AnimalCareGame
from .math_quiz import MathQuizGame
from .medicine_schedule import MedicineScheduleGame
from .pattern_memory import PatternMemoryGame
from .scenario_choice import ScenarioChoiceGame


GAME_TYPES = {
    cls.name: cls
    for cls in (MathQuizGame, PatternMemoryGame, ScenarioChoiceGame, AnimalCareGame, MedicineScheduleGame)
}
