"""Read-only reference data consumed by the parser and the analyzers.

These models stand in for whatever storage the host application uses: the
core never writes them, it only reads catalog entries, benchmark definitions,
population percentile tables and the athlete's recorded values.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from wodstrat.models.enums import (
    BenchmarkMetricType,
    ExperienceLevel,
    MovementCategory,
)


class MovementDefinition(BaseModel):
    """Movement catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: int
    canonical_name: str
    display_name: str
    category: MovementCategory
    is_bodyweight: bool = False
    aliases: tuple[str, ...] = ()


class BenchmarkDefinition(BaseModel):
    """A benchmark athletes can record (e.g. back squat 1RM, 5k run)."""

    model_config = ConfigDict(frozen=True)

    id: int
    slug: str
    name: str
    metric_type: BenchmarkMetricType
    unit: str = ""


class PopulationBenchmarkPercentile(BaseModel):
    """Population reference values at five fixed percentile brackets."""

    model_config = ConfigDict(frozen=True)

    benchmark_definition_id: int
    percentile_20: float
    percentile_40: float
    percentile_60: float
    percentile_80: float
    percentile_95: float
    gender: str | None = None
    experience_level: ExperienceLevel | None = None

    def brackets(self) -> tuple[tuple[float, float], ...]:
        """Return ordered (percentile, value) pairs."""
        return (
            (20.0, self.percentile_20),
            (40.0, self.percentile_40),
            (60.0, self.percentile_60),
            (80.0, self.percentile_80),
            (95.0, self.percentile_95),
        )


class BenchmarkMovementMapping(BaseModel):
    """Links a benchmark to a movement it predicts performance for."""

    model_config = ConfigDict(frozen=True)

    benchmark_definition_id: int
    movement_definition_id: int
    relevance_factor: float = Field(default=1.0, ge=0)


class AthleteBenchmark(BaseModel):
    """A value the athlete recorded for a benchmark."""

    model_config = ConfigDict(frozen=True)

    benchmark_definition_id: int
    value: float
    unit: str | None = Field(
        default=None,
        description="Unit the value was recorded in when it differs from the benchmark unit.",
    )
    recorded_at: datetime | None = None


class AthleteProfile(BaseModel):
    """Athlete attributes that shift thresholds and ranges."""

    model_config = ConfigDict(frozen=True)

    experience_level: ExperienceLevel = ExperienceLevel.INTERMEDIATE
    gender: str | None = None
