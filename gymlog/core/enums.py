"""Shared enums for models and API."""

from enum import Enum


class BodyPart(str, Enum):
    """Body part / muscle label for exercises and plans."""

    ALL = "all"
    CHEST = "chest"
    LOWER_BACK = "lowerback"
    BACK = "back"
    SHOULDERS = "shoulders"
    UPPER_ABS = "upperabs"
    SIDE_ABS = "sideabs"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    LEGS = "legs"
    MIDDLE_QUADS = "middlequads"
    INNER_QUADS = "innerquads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CORE = "core"
    CALVES = "calves"
    FRONT_CALVES = "frontcalves"
    FOREARMS = "forearms"
    LATS = "lats"
    TRAPS = "traps"
    REAR_DELTS = "reardelts"
    FULL_BODY = "full-body"


class ExerciseType(str, Enum):
    CARDIO = "cardio"
    COMPOUND = "compound"
    ISOLATED = "isolated"
    MOBILITY = "mobility"
    CALISTHENICS = "calisthenics"
    ENDURANCE = "endurance"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def enum_values(enum_cls: type[Enum]) -> list[str]:
    """Store enum values (not member names) in the database."""
    return [member.value for member in enum_cls]
