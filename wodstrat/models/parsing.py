"""Pydantic models produced by the workout text parser."""
from __future__ import annotations

from pydantic import BaseModel, Field, computed_field

from wodstrat.models.enums import (
    ConfidenceLevel,
    DistanceUnit,
    IssueCode,
    IssueSeverity,
    LoadUnit,
    RepSchemeType,
    WorkoutType,
)
from wodstrat.models.reference import MovementDefinition

KG_PER_LB = 0.453592
KG_PER_POOD = 16.38
LB_PER_KG = 2.20462
LB_PER_POOD = 36.11
METERS_PER_UNIT = {
    DistanceUnit.M: 1.0,
    DistanceUnit.KM: 1000.0,
    DistanceUnit.FT: 0.3048,
    DistanceUnit.MI: 1609.344,
}


class Weight(BaseModel):
    """A load with its unit."""

    value: float = Field(ge=0)
    unit: LoadUnit = LoadUnit.LB

    def to_kg(self) -> float:
        if self.unit == LoadUnit.KG:
            return self.value
        if self.unit == LoadUnit.POOD:
            return self.value * KG_PER_POOD
        return self.value * KG_PER_LB

    def to_lb(self) -> float:
        if self.unit == LoadUnit.LB:
            return self.value
        if self.unit == LoadUnit.POOD:
            return self.value * LB_PER_POOD
        return self.value * LB_PER_KG

    def __str__(self) -> str:
        value = int(self.value) if self.value == int(self.value) else self.value
        return f"{value} {self.unit.value}"


class Distance(BaseModel):
    """A distance with its unit."""

    value: float = Field(ge=0)
    unit: DistanceUnit = DistanceUnit.M

    def to_meters(self) -> float:
        return self.value * METERS_PER_UNIT[self.unit]

    def __str__(self) -> str:
        value = int(self.value) if self.value == int(self.value) else self.value
        return f"{value}{self.unit.value}"


class RepScheme(BaseModel):
    """Reps per round, e.g. 21-15-9."""

    reps: list[int]
    scheme_type: RepSchemeType

    @property
    def total_reps(self) -> int:
        return sum(self.reps)

    @property
    def round_count(self) -> int:
        return len(self.reps)

    def __str__(self) -> str:
        return "-".join(str(r) for r in self.reps)


class IntervalConfig(BaseModel):
    """Work/rest interval structure."""

    rounds: int = Field(ge=1)
    work_seconds: int = Field(ge=0)
    rest_seconds: int = Field(default=0, ge=0)

    @property
    def total_seconds(self) -> int:
        return self.rounds * (self.work_seconds + self.rest_seconds)


class ParsingIssue(BaseModel):
    """A single error, warning or informational note raised while parsing."""

    code: IssueCode
    severity: IssueSeverity
    message: str
    suggestion: str | None = None
    line_number: int | None = Field(default=None, ge=1)
    context: str | None = None
    similar_names: list[str] = Field(default_factory=list)

    @property
    def is_blocking(self) -> bool:
        return self.severity == IssueSeverity.ERROR


class ParsedMovement(BaseModel):
    """One movement line recovered from the workout text."""

    sequence_order: int = Field(ge=1)
    line_number: int | None = Field(default=None, ge=1)
    original_text: str
    movement_text: str = ""
    movement: MovementDefinition | None = None
    rep_count: int | None = Field(default=None, ge=0)
    load: Weight | None = None
    load_female: Weight | None = None
    distance: Distance | None = None
    calories: int | None = Field(default=None, ge=0)
    calories_female: int | None = Field(default=None, ge=0)
    duration_seconds: int | None = Field(default=None, ge=0)
    height_inches: int | None = None
    rep_scheme: RepScheme | None = None
    notes: str | None = None
    confidence: int = Field(default=0, ge=0, le=100)

    @property
    def is_resolved(self) -> bool:
        return self.movement is not None

    @property
    def display_name(self) -> str:
        if self.movement is not None:
            return self.movement.display_name
        return self.movement_text or self.original_text

    @property
    def has_quantity(self) -> bool:
        return any(
            value is not None
            for value in (
                self.rep_count,
                self.distance,
                self.calories,
                self.duration_seconds,
                self.rep_scheme,
            )
        )

    @property
    def total_reps(self) -> int | None:
        """Explicit rep count, or the sum of the propagated rep scheme."""
        if self.rep_count is not None:
            return self.rep_count
        if self.rep_scheme is not None:
            return self.rep_scheme.total_reps
        return None


class ParsedWorkout(BaseModel):
    """Structured representation of a workout description."""

    name: str | None = None
    workout_type: WorkoutType = WorkoutType.FOR_TIME
    time_cap_seconds: int | None = Field(default=None, ge=0)
    round_count: int | None = Field(default=None, ge=0)
    interval_duration_seconds: int | None = Field(default=None, ge=0)
    interval: IntervalConfig | None = None
    rep_scheme: RepScheme | None = None
    movements: list[ParsedMovement] = Field(default_factory=list)
    issues: list[ParsingIssue] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_valid(self) -> bool:
        return not self.issues and bool(self.movements)


class ConfidenceBreakdown(BaseModel):
    """Sub-scores that feed the overall parse confidence."""

    workout_type_confidence: int = Field(default=0, ge=0, le=100)
    time_domain_confidence: int = Field(default=0, ge=0, le=100)
    movement_identification_confidence: int = Field(default=0, ge=0, le=100)
    movements_identified: int = 0
    total_movement_lines: int = 0
    movements_with_complete_data: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def identification_rate(self) -> float:
        if self.total_movement_lines <= 0:
            return 0.0
        return self.movements_identified / self.total_movement_lines * 100


class ParsedWorkoutResult(BaseModel):
    """Parse outcome: workout, diagnostics and confidence."""

    workout: ParsedWorkout
    errors: list[ParsingIssue] = Field(default_factory=list)
    warnings: list[ParsingIssue] = Field(default_factory=list)
    info: list[ParsingIssue] = Field(default_factory=list)
    confidence: int = Field(default=0, ge=0, le=100)
    confidence_level: ConfidenceLevel = ConfidenceLevel.LOW
    breakdown: ConfidenceBreakdown = Field(default_factory=ConfidenceBreakdown)
    success: bool = False
    error_limit_reached: bool = False
    parsed_description: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_usable(self) -> bool:
        return self.success or (self.workout.is_valid and self.confidence >= 60)
