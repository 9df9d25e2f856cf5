from ashagames import db
from ashagames.models import Game


CATALOG = [
    {
        'name': 'math',
        'display_name': 'Math Game',
        'description': 'Practise the basic arithmetic used when recording health data.',
        'category': 'educational',
        'difficulty': 'beginner',
        'instructions': '10 questions in 30 seconds. Each correct answer is worth 10 points.',
    },
    {
        'name': 'pattern_memory',
        'display_name': 'Muldwarka',
        'description': 'Remember numbers and patterns. A memory-building game.',
        'category': 'cultural',
        'difficulty': 'intermediate',
        'instructions': 'Watch the highlighted cells, then press them in the same order.',
    },
    {
        'name': 'scenario_choice',
        'display_name': 'Panadar',
        'description': 'Water and resource management in everyday health situations.',
        'category': 'health',
        'difficulty': 'beginner',
        'instructions': 'Pick the best response to each situation within 45 seconds.',
    },
    {
        'name': 'animal_care',
        'display_name': 'Chara',
        'description': 'Livestock nutrition and care management.',
        'category': 'health',
        'difficulty': 'intermediate',
        'instructions': 'Choose the right feed for each animal without running out of budget.',
    },
    {
        'name': 'medicine_schedule',
        'display_name': 'Damli',
        'description': 'Keep four patients on their medicine schedule over two simulated days.',
        'category': 'health',
        'difficulty': 'advanced',
        'instructions': 'Give each due dose at the right hour. Missed critical doses cost points.',
    },
]


def ensure_catalog() -> int:
    """Insert any catalog game missing from the database. Returns how many were added."""
    existing = {g.name for g in Game.query.all()}
    added = 0
    for entry in CATALOG:
        if entry['name'] in existing:
            continue
        db.session.add(Game(**entry))
        added += 1
    if added:
        db.session.commit()
    return added
