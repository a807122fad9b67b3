"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

from typing import Callable, Dict, Optional

import pytest

from wodstrat.logging_config import configure_logging

configure_logging()

from wodstrat.models.enums import ExperienceLevel
from wodstrat.models.reference import AthleteBenchmark, AthleteProfile
from wodstrat.parsing.catalog import MovementCatalog, load_catalog
from wodstrat.parsing.parser import WorkoutParser
from wodstrat.services.benchmark_context import (
    AthleteBenchmarkContext,
    ReferenceData,
    load_reference_data,
)


@pytest.fixture(scope="session")
def catalog() -> MovementCatalog:
    """Packaged movement catalog."""

    return load_catalog()


@pytest.fixture(scope="session")
def parser(catalog: MovementCatalog) -> WorkoutParser:
    """Parser bound to the packaged catalog."""

    return WorkoutParser(catalog=catalog)


@pytest.fixture(scope="session")
def reference() -> ReferenceData:
    """Packaged benchmark definitions, population tables and mappings."""

    return load_reference_data()


@pytest.fixture
def make_context(reference: ReferenceData) -> Callable[..., AthleteBenchmarkContext]:
    """Build an athlete context from {benchmark_id: value}."""

    def _make(
        values: Optional[Dict[int, float]] = None,
        experience: ExperienceLevel = ExperienceLevel.INTERMEDIATE,
        gender: Optional[str] = None,
    ) -> AthleteBenchmarkContext:
        benchmarks = [
            AthleteBenchmark(benchmark_definition_id=benchmark_id, value=value)
            for benchmark_id, value in (values or {}).items()
        ]
        return AthleteBenchmarkContext(
            benchmarks,
            reference=reference,
            profile=AthleteProfile(experience_level=experience, gender=gender),
        )

    return _make
