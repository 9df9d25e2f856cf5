import copy
from dataclasses import asdict, dataclass, field
from typing import List, Optional, Tuple

from ..engine import ActionResult, GameEngine, as_int
from ..scoring import (
    MISSED_DOSE_PENALTY,
    WRONG_DOSE_PENALTY,
    adherence_bonus,
    apply_penalty,
    clamp,
    dose_points,
)


SIMULATED_HOURS = 48
MISSED_CHECK_HOURS = 4
MAX_ALERTS = 5
PATIENT_HEALTH_FLOOR = 10


@dataclass(frozen=True)
class Medicine:
    name: str
    dosage: str
    interval_hours: int
    first_dose_hour: int
    importance: str


@dataclass
class Patient:
    id: int
    name: str
    age: int
    condition: str
    health: float
    medicines: Tuple[Medicine, ...] = field(default_factory=tuple)


@dataclass
class ScheduleItem:
    patient_id: int
    medicine_index: int
    due_hour: int
    completed: bool = False
    # Set once the overdue penalty has been charged for this dose
    missed: bool = False

    def complete(self) -> None:
        if self.completed:
            raise ValueError('dose already completed')
        self.completed = True


PATIENTS = (
    Patient(1, 'Sunita Devi', 45, 'Diabetes', 75, (
        Medicine('Metformin', '500mg', 12, 0, 'critical'),
        Medicine('Vitamin B12', '1 tablet', 24, 8, 'moderate'),
    )),
    Patient(2, 'Ram Prasad', 60, 'Hypertension', 65, (
        Medicine('Enalapril', '5mg', 24, 0, 'critical'),
        Medicine('Calcium', '500mg', 12, 6, 'moderate'),
    )),
    Patient(3, 'Geeta Ben', 35, 'TB treatment', 55, (
        Medicine('Rifampicin', '450mg', 24, 0, 'critical'),
        Medicine('Isoniazid', '300mg', 24, 0, 'critical'),
        Medicine('Multivitamin', '1 tablet', 24, 12, 'moderate'),
    )),
    Patient(4, 'Mohan Ji', 70, 'Heart disease', 50, (
        Medicine('Aspirin', '75mg', 24, 0, 'important'),
        Medicine('Atorvastatin', '20mg', 24, 18, 'important'),
    )),
)


def build_schedule(patients, hours: int = SIMULATED_HOURS) -> List[ScheduleItem]:
    """Every dose due before ``hours``, ordered by due hour, then patient, then medicine."""
    items = []
    for patient in patients:
        for index, medicine in enumerate(patient.medicines):
            for hour in range(medicine.first_dose_hour, hours, medicine.interval_hours):
                items.append(ScheduleItem(patient.id, index, hour))
    items.sort(key=lambda item: (item.due_hour, item.patient_id, item.medicine_index))
    return items


class MedicineScheduleGame(GameEngine):
    """Give each patient the right medicine at the right simulated hour."""

    name = 'medicine_schedule'

    def __init__(self, *args, hour_duration: float = 1.0, patients=PATIENTS, hours: int = SIMULATED_HOURS, **kwargs):
        super().__init__(*args, **kwargs)
        self.tick_interval = hour_duration
        self.template = tuple(patients)
        self.hours = hours

    @classmethod
    def options_from_config(cls, config):
        return {'hour_duration': float(config.get('MEDICINE_HOUR_SEC', 1.0))}

    def reset(self) -> None:
        self.patients = copy.deepcopy(list(self.template))
        self.schedule = build_schedule(self.patients, self.hours)
        self.current_hour = 0
        self.alerts = []

    def _patient(self, patient_id) -> Optional[Patient]:
        for patient in self.patients:
            if patient.id == patient_id:
                return patient
        return None

    def medicine_for(self, item: ScheduleItem) -> Medicine:
        return self._patient(item.patient_id).medicines[item.medicine_index]

    def _alert(self, message: str) -> None:
        self.alerts.append(message)
        del self.alerts[:-MAX_ALERTS]

    def due_now(self) -> List[ScheduleItem]:
        return [i for i in self.schedule if i.due_hour == self.current_hour and not i.completed]

    def tick(self) -> None:
        hour = self.current_hour + 1
        if hour >= self.hours:
            self.finish('schedule_complete')
            return
        self.current_hour = hour
        if hour % MISSED_CHECK_HOURS == 0:
            self._penalize_missed()

    def handle_action(self, payload) -> ActionResult:
        if not isinstance(payload, dict):
            return ActionResult(False, 'Choose a patient and a medicine.')
        patient_id = as_int(payload.get('patient_id'))
        medicine_index = as_int(payload.get('medicine_index'))
        if patient_id is None or medicine_index is None:
            return ActionResult(False, 'Choose a patient and a medicine.')

        item = next(
            (i for i in self.due_now() if i.patient_id == patient_id and i.medicine_index == medicine_index),
            None,
        )
        if item is None:
            before = self.score
            self.score = apply_penalty(self.score, WRONG_DOSE_PENALTY)
            points = self.score - before
            message = f'Wrong time or medicine! {points} points'
            self._alert(message)
            return ActionResult(True, message, points)

        item.complete()
        patient = self._patient(patient_id)
        medicine = patient.medicines[medicine_index]
        points = dose_points(medicine.importance)
        self.score += points
        patient.health = clamp(patient.health + points / 2)
        message = f'Correct! {medicine.name} given to {patient.name}. +{points} points'
        self._alert(message)
        return ActionResult(True, message, points)

    def _penalize_missed(self) -> None:
        for item in self.schedule:
            if item.completed or item.missed or item.due_hour >= self.current_hour:
                continue
            medicine = self.medicine_for(item)
            if medicine.importance != 'critical':
                continue
            item.missed = True
            patient = self._patient(item.patient_id)
            self.score = apply_penalty(self.score, MISSED_DOSE_PENALTY)
            patient.health = clamp(patient.health - MISSED_DOSE_PENALTY, PATIENT_HEALTH_FLOOR)
            self._alert(f"{patient.name} missed {medicine.name}! -{MISSED_DOSE_PENALTY} points")

    def before_finish(self) -> None:
        self._penalize_missed()

    def critical_counts(self) -> Tuple[int, int]:
        critical = [i for i in self.schedule if self.medicine_for(i).importance == 'critical']
        return sum(1 for i in critical if i.completed), len(critical)

    def end_bonus(self) -> int:
        return adherence_bonus(*self.critical_counts())

    def summary(self):
        completed, total = self.critical_counts()
        average = sum(p.health for p in self.patients) / len(self.patients) if self.patients else 0
        return {
            'critical_completed': completed,
            'critical_total': total,
            'average_health': round(average),
            'message': f'{completed} of {total} critical doses given on time',
        }

    def describe(self):
        return {
            'current_hour': self.current_hour,
            'hours': self.hours,
            'day': self.current_hour // 24,
            'hour_of_day': self.current_hour % 24,
            'patients': [
                {
                    'id': p.id,
                    'name': p.name,
                    'age': p.age,
                    'condition': p.condition,
                    'health': p.health,
                    'medicines': [asdict(m) for m in p.medicines],
                }
                for p in self.patients
            ],
            'due': [asdict(i) for i in self.due_now()],
            'alerts': list(self.alerts),
        }
