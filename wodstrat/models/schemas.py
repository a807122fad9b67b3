"""Pydantic models describing analyzer results."""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, computed_field

from wodstrat.models.enums import (
    AlertSeverity,
    ConfidenceLevel,
    EstimateType,
    LoadClassification,
    PacingLevel,
    RiskAlertType,
    WorkoutType,
)
from wodstrat.models.parsing import ParsedWorkoutResult

UNNAMED_WORKOUT = "Unnamed Workout"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Pacing
class CardioPaceTarget(BaseModel):
    """Target pace for a cardio movement."""

    display_primary: str
    display_secondary: str | None = None
    value_per_unit: float = Field(ge=0, description="Seconds per pace unit")
    pace_unit: str
    is_derived_from_benchmark: bool = False


class MovementPacing(BaseModel):
    """Pacing recommendation for one movement."""

    movement_definition_id: int | None = None
    movement_name: str
    pacing_level: PacingLevel
    athlete_percentile: float = Field(ge=0, le=100)
    guidance_text: str
    recommended_sets: list[int] = []
    benchmark_used: str = ""
    has_population_data: bool = False
    has_athlete_benchmark: bool = False
    is_cardio: bool = False
    target_pace: CardioPaceTarget | None = None


class PacingDistribution(BaseModel):
    heavy_count: int = 0
    moderate_count: int = 0
    light_count: int = 0
    total_movements: int = 0
    incomplete_data_count: int = 0


class WorkoutPacingResult(BaseModel):
    """Pacing recommendations for a whole workout."""

    workout_name: str = UNNAMED_WORKOUT
    workout_type: WorkoutType
    movement_pacing: list[MovementPacing] = []
    overall_strategy_notes: str = ""
    distribution: PacingDistribution = Field(default_factory=PacingDistribution)
    calculated_at: datetime = Field(default_factory=_utcnow)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_complete(self) -> bool:
        return self.distribution.incomplete_data_count == 0


# Volume load
class MovementVolumeLoad(BaseModel):
    """Volume load and classification for one movement."""

    movement_definition_id: int | None = None
    movement_name: str
    weight: float = Field(default=0, ge=0)
    weight_unit: str = "kg"
    reps: int = Field(default=0, ge=0)
    rounds: int = Field(default=1, ge=0)
    volume_load: float = Field(default=0, ge=0)
    volume_load_formatted: str = ""
    load_classification: LoadClassification
    benchmark_used: str = ""
    athlete_benchmark_percentile: float | None = None
    tip: str = ""
    recommended_weight: float | None = None
    recommended_weight_formatted: str | None = None
    has_sufficient_data: bool = False


class VolumeLoadDistribution(BaseModel):
    high_count: int = 0
    moderate_count: int = 0
    low_count: int = 0
    bodyweight_count: int = 0
    total_movements: int = 0
    insufficient_data_count: int = 0


class WorkoutVolumeLoadResult(BaseModel):
    """Volume load analysis for a whole workout."""

    workout_name: str = UNNAMED_WORKOUT
    workout_type: WorkoutType
    movement_volumes: list[MovementVolumeLoad] = []
    total_volume_load: float = 0
    total_volume_load_formatted: str = ""
    overall_assessment: str = ""
    distribution: VolumeLoadDistribution = Field(default_factory=VolumeLoadDistribution)
    calculated_at: datetime = Field(default_factory=_utcnow)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_complete(self) -> bool:
        return self.distribution.insufficient_data_count == 0


# Time estimate
class RestRecommendation(BaseModel):
    """Rest suggested after a movement."""

    after_movement: str
    movement_definition_id: int | None = None
    suggested_rest_seconds: int = Field(ge=0)
    rest_range: str
    reasoning: str
    pacing_level: PacingLevel


class EmomMinute(BaseModel):
    """Feasibility of the work prescribed in one EMOM minute."""

    minute: int = Field(ge=1)
    prescribed_work: str
    estimated_completion_seconds: int = Field(ge=0)
    is_feasible: bool
    buffer_seconds: int
    recommendation: str
    movement_names: list[str] = []


class EmomFeasibility(BaseModel):
    minutes: list[EmomMinute] = []
    average_buffer_seconds: float = 0
    all_feasible: bool = True
    assessment: str = ""


class TimeEstimateResult(BaseModel):
    """Estimated completion time or AMRAP score range."""

    workout_name: str = UNNAMED_WORKOUT
    workout_type: WorkoutType
    estimate_type: EstimateType
    min_estimate: int = Field(ge=0)
    max_estimate: int = Field(ge=0)
    min_extra_reps: int | None = None
    max_extra_reps: int | None = None
    formatted_range: str
    confidence_level: ConfidenceLevel
    factors_summary: str = ""
    rest_recommendations: list[RestRecommendation] = []
    emom_feasibility: EmomFeasibility | None = None
    benchmark_coverage_count: int = 0
    total_movement_count: int = 0
    average_percentile: float = 0
    calculated_at: datetime = Field(default_factory=_utcnow)


# Strategy insights
class DifficultyBreakdown(BaseModel):
    pacing_factor: float
    volume_factor: float
    time_factor: float
    experience_modifier: float
    base_score: float
    explanation: str


class DifficultyScore(BaseModel):
    """Overall workout difficulty on a 1-10 scale."""

    score: int = Field(ge=1, le=10)
    label: str
    description: str
    breakdown: DifficultyBreakdown


class KeyFocusMovement(BaseModel):
    movement_definition_id: int | None = None
    movement_name: str
    reason: str
    recommendation: str
    priority: int = Field(ge=1)
    pacing_level: PacingLevel
    load_classification: LoadClassification
    scaling_recommended: bool = False


class RiskAlert(BaseModel):
    alert_type: RiskAlertType
    severity: AlertSeverity
    title: str
    message: str
    affected_movements: list[str] = []
    suggested_action: str


class StrategyConfidence(BaseModel):
    """How personalized the strategy is, from benchmark coverage."""

    level: str
    percentage: int = Field(ge=0, le=100)
    explanation: str
    missing_benchmarks: list[str] = []
    covered_movement_count: int = 0
    total_movement_count: int = 0


class StrategyInsightsResult(BaseModel):
    """Synthesis of the pacing, volume and time analyses."""

    workout_name: str = UNNAMED_WORKOUT
    workout_type: WorkoutType
    difficulty_score: DifficultyScore
    strategy_confidence: StrategyConfidence
    key_focus_movements: list[KeyFocusMovement] = []
    risk_alerts: list[RiskAlert] = []
    strategy_summary: str = ""
    pacing_analysis: WorkoutPacingResult | None = None
    volume_load_analysis: WorkoutVolumeLoadResult | None = None
    time_estimate: TimeEstimateResult | None = None
    calculated_at: datetime = Field(default_factory=_utcnow)


class WorkoutStrategy(BaseModel):
    """Parse result plus every analysis derived from it."""

    parse_result: ParsedWorkoutResult
    pacing: WorkoutPacingResult
    volume_load: WorkoutVolumeLoadResult
    time_estimate: TimeEstimateResult
    insights: StrategyInsightsResult
    calculated_at: datetime = Field(default_factory=_utcnow)
