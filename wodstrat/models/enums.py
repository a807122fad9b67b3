"""Enumerations shared by the parser and the strategy analyzers."""
from __future__ import annotations

from enum import Enum, IntEnum


class WorkoutType(str, Enum):
    AMRAP = "Amrap"
    FOR_TIME = "ForTime"
    EMOM = "Emom"
    INTERVALS = "Intervals"
    ROUNDS = "Rounds"
    TABATA = "Tabata"


class RepSchemeType(str, Enum):
    FIXED = "Fixed"
    DESCENDING = "Descending"
    ASCENDING = "Ascending"
    CUSTOM = "Custom"


class MovementCategory(str, Enum):
    WEIGHTLIFTING = "Weightlifting"
    GYMNASTICS = "Gymnastics"
    CARDIO = "Cardio"
    STRONGMAN = "Strongman"


class LoadUnit(str, Enum):
    KG = "kg"
    LB = "lb"
    POOD = "pood"


class DistanceUnit(str, Enum):
    M = "m"
    KM = "km"
    FT = "ft"
    MI = "mi"


class IssueSeverity(str, Enum):
    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"


class ConfidenceLevel(str, Enum):
    PERFECT = "Perfect"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class IssueCode(IntEnum):
    """Stable parsing issue codes, grouped by numeric range."""

    # Input validation (100-199)
    EMPTY_INPUT = 100
    INPUT_TOO_LONG = 101
    INPUT_TOO_SHORT = 102
    BINARY_CONTENT = 103
    INVALID_CHARACTERS = 104

    # Workout structure (200-299)
    NO_WORKOUT_STRUCTURE = 200
    NO_MOVEMENTS_DETECTED = 201
    INVALID_WORKOUT_TYPE = 202
    AMBIGUOUS_WORKOUT_TYPE = 203
    MISSING_DURATION = 204
    MISSING_ROUND_COUNT = 205
    CONTRADICTORY_METADATA = 206

    # Movement lines (300-399)
    UNKNOWN_MOVEMENT = 300
    AMBIGUOUS_MOVEMENT = 301
    INVALID_REP_COUNT = 302
    INVALID_WEIGHT = 303
    INVALID_DISTANCE = 304
    INVALID_TIME = 305
    INVALID_CALORIES = 306
    EMPTY_MOVEMENT_LINE = 307
    UNRECOGNIZED_MOVEMENT_FORMAT = 308

    # Consistency (400-499)
    DUPLICATE_MOVEMENT = 400
    INCONSISTENT_UNITS = 401
    VALUE_OUT_OF_RANGE = 402

    # System (500-599)
    INTERNAL_ERROR = 500
    TIMEOUT = 501


class BenchmarkMetricType(str, Enum):
    TIME = "Time"
    REPS = "Reps"
    WEIGHT = "Weight"
    PACE = "Pace"

    @property
    def lower_is_better(self) -> bool:
        return self in (BenchmarkMetricType.TIME, BenchmarkMetricType.PACE)


class PacingLevel(str, Enum):
    LIGHT = "Light"
    MODERATE = "Moderate"
    HEAVY = "Heavy"


class ExperienceLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class LoadClassification(str, Enum):
    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"
    BODYWEIGHT = "Bodyweight"
    NOT_APPLICABLE = "N/A"


class EstimateType(str, Enum):
    TIME = "Time"
    ROUNDS_REPS = "RoundsReps"


class CardioType(str, Enum):
    RUNNING = "Running"
    ROWING = "Rowing"
    OTHER = "Other"


class AlertSeverity(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RiskAlertType(str, Enum):
    SCALING_RECOMMENDED = "ScalingRecommended"
    TIME_CAP_RISK = "TimeCapRisk"
    RECOVERY_IMPACT = "RecoveryImpact"
    PACING_MISMATCH = "PacingMismatch"
    BENCHMARK_GAP = "BenchmarkGap"
