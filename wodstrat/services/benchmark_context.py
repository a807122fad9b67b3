"""Joins athlete benchmarks, population tables and movement mappings."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

import yaml

from wodstrat.config import get_settings
from wodstrat.models.enums import ExperienceLevel, LoadUnit
from wodstrat.models.parsing import Weight
from wodstrat.models.reference import (
    AthleteBenchmark,
    AthleteProfile,
    BenchmarkDefinition,
    BenchmarkMovementMapping,
    PopulationBenchmarkPercentile,
)
from wodstrat.services.percentile import calculate_benchmark_percentile

logger = logging.getLogger(__name__)

LOAD_UNITS = frozenset(unit.value for unit in LoadUnit)


@dataclass(frozen=True)
class ReferenceData:
    """Benchmark definitions, population tables and mappings shared by all athletes."""

    benchmarks: tuple[BenchmarkDefinition, ...] = ()
    population: tuple[PopulationBenchmarkPercentile, ...] = ()
    mappings: tuple[BenchmarkMovementMapping, ...] = ()

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ReferenceData":
        with Path(path).open("r", encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        reference = cls(
            benchmarks=tuple(BenchmarkDefinition(**entry) for entry in data.get("benchmarks", [])),
            population=tuple(PopulationBenchmarkPercentile(**entry) for entry in data.get("population", [])),
            mappings=tuple(BenchmarkMovementMapping(**entry) for entry in data.get("mappings", [])),
        )
        if not reference.benchmarks:
            logger.warning("No benchmark definitions found in %s", path)
        logger.debug(
            "Loaded %d benchmarks, %d population rows, %d mappings from %s",
            len(reference.benchmarks),
            len(reference.population),
            len(reference.mappings),
            path,
        )
        return reference


@lru_cache()
def load_reference_data(path: str | None = None) -> ReferenceData:
    """Return the cached reference data, reading the configured YAML file on first use."""
    return ReferenceData.from_yaml(path or get_settings().benchmark_reference_path)


@dataclass(frozen=True)
class MovementBenchmarkData:
    """Benchmark facts available for one movement."""

    mapping: BenchmarkMovementMapping | None = None
    benchmark: BenchmarkDefinition | None = None
    athlete_value: float | None = None
    population: PopulationBenchmarkPercentile | None = None
    percentile: float | None = None

    @property
    def has_athlete_benchmark(self) -> bool:
        return self.athlete_value is not None

    @property
    def has_population_data(self) -> bool:
        return self.population is not None

    @property
    def has_sufficient_data(self) -> bool:
        return self.percentile is not None

    @property
    def benchmark_name(self) -> str:
        return self.benchmark.name if self.benchmark else ""


_EMPTY = MovementBenchmarkData()


class AthleteBenchmarkContext:
    """
    Everything the analyzers need to know about one athlete's benchmarks.

    The most recent recording wins when a benchmark was recorded more than
    once. Population rows matching the athlete's gender and experience are
    preferred over the general table.
    """

    def __init__(
        self,
        athlete_benchmarks: Iterable[AthleteBenchmark] = (),
        reference: ReferenceData | None = None,
        profile: AthleteProfile | None = None,
    ):
        self.reference = reference if reference is not None else load_reference_data()
        self.profile = profile or AthleteProfile()
        self._benchmarks = {b.id: b for b in self.reference.benchmarks}

        self._athlete_values: dict[int, AthleteBenchmark] = {}
        for recorded in athlete_benchmarks:
            current = self._athlete_values.get(recorded.benchmark_definition_id)
            if (
                current is None
                or current.recorded_at is None
                or (recorded.recorded_at is not None and recorded.recorded_at >= current.recorded_at)
            ):
                self._athlete_values[recorded.benchmark_definition_id] = recorded

        self._mappings: dict[int, list[BenchmarkMovementMapping]] = {}
        for mapping in self.reference.mappings:
            self._mappings.setdefault(mapping.movement_definition_id, []).append(mapping)

    @property
    def experience_level(self) -> ExperienceLevel:
        return self.profile.experience_level

    def athlete_value(self, benchmark_id: int) -> float | None:
        """Recorded value, converted to the benchmark unit when both are load units."""
        recorded = self._athlete_values.get(benchmark_id)
        if recorded is None:
            return None
        benchmark = self.benchmark(benchmark_id)
        target = benchmark.unit if benchmark else ""
        if recorded.unit and recorded.unit != target and recorded.value >= 0:
            if recorded.unit in LOAD_UNITS and target in (LoadUnit.KG, LoadUnit.LB):
                weight = Weight(value=recorded.value, unit=recorded.unit)
                converted = weight.to_kg() if target == LoadUnit.KG else weight.to_lb()
                logger.debug("Converted benchmark %d from %s to %s", benchmark_id, recorded.unit, target)
                return converted
            logger.warning(
                "Benchmark %d recorded in %s but defined in %s; using the raw value",
                benchmark_id,
                recorded.unit,
                target or "no unit",
            )
        return recorded.value

    def benchmark(self, benchmark_id: int) -> BenchmarkDefinition | None:
        return self._benchmarks.get(benchmark_id)

    def best_mapping(self, movement_id: int) -> BenchmarkMovementMapping | None:
        """Prefer mappings the athlete has recorded, then higher relevance."""
        candidates = self._mappings.get(movement_id)
        if not candidates:
            return None
        return max(
            candidates,
            key=lambda m: (m.benchmark_definition_id in self._athlete_values, m.relevance_factor),
        )

    def population_for(self, benchmark_id: int) -> PopulationBenchmarkPercentile | None:
        rows = [row for row in self.reference.population if row.benchmark_definition_id == benchmark_id]
        if not rows:
            return None

        gender = (self.profile.gender or "").lower() or None

        def score(row: PopulationBenchmarkPercentile) -> tuple[int, int]:
            row_gender = (row.gender or "").lower() or None
            if row_gender is not None and row_gender != gender:
                return (-1, 0)
            gender_score = 1 if row_gender == gender and gender is not None else 0
            if row.experience_level is not None and row.experience_level != self.profile.experience_level:
                return (-1, 0)
            experience_score = 1 if row.experience_level is not None else 0
            return (gender_score, experience_score)

        best = max(rows, key=score)
        return best if score(best)[0] >= 0 else None

    def resolve(self, movement_id: int | None) -> MovementBenchmarkData:
        """Collect mapping, athlete value, population row and percentile for a movement."""
        if movement_id is None:
            return _EMPTY
        mapping = self.best_mapping(movement_id)
        if mapping is None:
            return _EMPTY

        benchmark = self.benchmark(mapping.benchmark_definition_id)
        value = self.athlete_value(mapping.benchmark_definition_id)
        population = self.population_for(mapping.benchmark_definition_id)
        percentile = None
        if benchmark is not None and value is not None and population is not None:
            percentile = calculate_benchmark_percentile(value, population, benchmark.metric_type)
        return MovementBenchmarkData(
            mapping=mapping,
            benchmark=benchmark,
            athlete_value=value,
            population=population,
            percentile=percentile,
        )
