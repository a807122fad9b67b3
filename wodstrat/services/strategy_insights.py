"""Difficulty score, focus movements, risk alerts and summary for a workout."""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any

from wodstrat.models.enums import (
    AlertSeverity,
    ConfidenceLevel,
    EstimateType,
    ExperienceLevel,
    LoadClassification,
    PacingLevel,
    RiskAlertType,
    WorkoutType,
)
from wodstrat.models.parsing import ParsedWorkout
from wodstrat.models.schemas import (
    DifficultyBreakdown,
    DifficultyScore,
    KeyFocusMovement,
    MovementPacing,
    MovementVolumeLoad,
    RiskAlert,
    StrategyConfidence,
    StrategyInsightsResult,
    TimeEstimateResult,
    WorkoutPacingResult,
    WorkoutVolumeLoadResult,
)
from wodstrat.services.formatting import format_time
from wodstrat.services.strategy_config import load_section

logger = logging.getLogger(__name__)

PACING_POINTS = MappingProxyType({
    PacingLevel.LIGHT: 8,
    PacingLevel.MODERATE: 5,
    PacingLevel.HEAVY: 2,
})

VOLUME_POINTS = MappingProxyType({
    LoadClassification.HIGH: 8,
    LoadClassification.MODERATE: 5,
    LoadClassification.LOW: 2,
    LoadClassification.BODYWEIGHT: 4,
    LoadClassification.NOT_APPLICABLE: 5,
})

DEFAULT_FACTOR = 5.0

# (max score, label, description)
DIFFICULTY_LABELS = (
    (2, "Very Easy", "This workout plays to your strengths. Push the pace and aim for a PR."),
    (4, "Easy", "Manageable workout with room to push. Focus on consistent effort."),
    (6, "Moderate", "Balanced challenge. Pace yourself and stay mentally engaged."),
    (8, "Hard", "Demanding workout. Strategic breaks and pacing are essential."),
    (10, "Very Hard", "Extremely challenging. Consider scaling and prioritize completion over pace."),
)

SEVERITY_ORDER = MappingProxyType({
    AlertSeverity.HIGH: 0,
    AlertSeverity.MEDIUM: 1,
    AlertSeverity.LOW: 2,
})

FINISHING_WORKOUT_TYPES = frozenset({WorkoutType.FOR_TIME, WorkoutType.ROUNDS})
SIGNIFICANT_LOADS = frozenset({LoadClassification.HIGH, LoadClassification.MODERATE})


def difficulty_label(score: int) -> tuple[str, str]:
    for max_score, label, description in DIFFICULTY_LABELS:
        if score <= max_score:
            return label, description
    return DIFFICULTY_LABELS[-1][1], DIFFICULTY_LABELS[-1][2]


def time_factor(max_estimate_seconds: int, workout_type: WorkoutType) -> float:
    """
    Difficulty points for workout length.

    Only For Time and Rounds workouts scale with their estimate; fixed-length
    formats get a flat score.
    """
    if workout_type in FINISHING_WORKOUT_TYPES:
        minutes = max_estimate_seconds / 60
        if minutes < 10:
            return 4.0
        if minutes < 15:
            return 6.0
        if minutes < 20:
            return 7.0
        if minutes < 30:
            return 8.0
        return 9.0
    if workout_type == WorkoutType.TABATA:
        return 6.0
    return DEFAULT_FACTOR


def _has_full_data(pacing: MovementPacing) -> bool:
    return pacing.has_athlete_benchmark and pacing.has_population_data


class StrategyInsightsService:
    """Combines pacing, volume and time results into workout-level insights."""

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config or self._load_config()

    def _load_config(self) -> dict[str, Any]:
        return load_section("insights", self._default_config())

    def _default_config(self) -> dict[str, Any]:
        return {
            "weights": {"pacing": 0.4, "volume": 0.3, "time": 0.3},
            "experience_modifiers": {"Beginner": 1.2, "Intermediate": 1.0, "Advanced": 0.85},
            "time_cap_risk_ratio": 0.9,
            "recovery_impact_min_difficulty": 8,
            "key_focus_limit": 3,
        }

    # Difficulty

    @staticmethod
    def pacing_factor(pacing: WorkoutPacingResult) -> float:
        if not pacing.movement_pacing:
            return DEFAULT_FACTOR
        return sum(PACING_POINTS[m.pacing_level] for m in pacing.movement_pacing) / len(pacing.movement_pacing)

    @staticmethod
    def volume_factor(volume: WorkoutVolumeLoadResult) -> float:
        if not volume.movement_volumes:
            return DEFAULT_FACTOR
        points = sum(VOLUME_POINTS[v.load_classification] for v in volume.movement_volumes)
        return points / len(volume.movement_volumes)

    @staticmethod
    def explain_difficulty(pacing: float, volume: float, time: float, modifier: float) -> str:
        parts = []
        if pacing >= 7:
            parts.append("Many movements target your weaknesses")
        elif pacing <= 3:
            parts.append("Most movements play to your strengths")
        if volume >= 7:
            parts.append("heavy relative loads")
        elif volume <= 3:
            parts.append("manageable loads")
        if time >= 7:
            parts.append("longer duration workout")
        elif time <= 3:
            parts.append("shorter workout")

        explanation = f"Based on {', '.join(parts)}" if parts else "Based on balanced workout characteristics"
        if modifier > 1:
            explanation += ", adjusted up for beginner experience"
        elif modifier < 1:
            explanation += ", adjusted down for advanced experience"
        return explanation + "."

    def calculate_difficulty(
        self,
        pacing: WorkoutPacingResult,
        volume: WorkoutVolumeLoadResult,
        time_estimate: TimeEstimateResult,
        experience: ExperienceLevel = ExperienceLevel.INTERMEDIATE,
    ) -> DifficultyScore:
        """
        Score a workout from 1 (very easy) to 10 (very hard) for this athlete.

        Example:
            An intermediate athlete facing only Light, High-load movements in
            a 25 minute For Time scores round(8*0.4 + 8*0.3 + 8*0.3) = 8.
        """
        weights = self.config["weights"]
        pacing_points = self.pacing_factor(pacing)
        volume_points = self.volume_factor(volume)
        time_points = time_factor(time_estimate.max_estimate, time_estimate.workout_type)
        base = pacing_points * weights["pacing"] + volume_points * weights["volume"] + time_points * weights["time"]
        modifier = self.config["experience_modifiers"].get(experience.value, 1.0)

        score = int(min(max(round(base * modifier), 1), 10))
        label, description = difficulty_label(score)
        return DifficultyScore(
            score=score,
            label=label,
            description=description,
            breakdown=DifficultyBreakdown(
                pacing_factor=round(pacing_points, 2),
                volume_factor=round(volume_points, 2),
                time_factor=round(time_points, 2),
                experience_modifier=modifier,
                base_score=round(base, 2),
                explanation=self.explain_difficulty(pacing_points, volume_points, time_points, modifier),
            ),
        )

    # Focus movements

    @staticmethod
    def _focus_score(pacing: MovementPacing, volume: MovementVolumeLoad | None) -> int:
        score = 0
        if pacing.pacing_level == PacingLevel.LIGHT:
            score += 3
        elif pacing.pacing_level == PacingLevel.MODERATE:
            score += 1
        if volume is not None:
            if volume.load_classification == LoadClassification.HIGH:
                score += 3
            elif volume.load_classification == LoadClassification.MODERATE:
                score += 1
        if not _has_full_data(pacing):
            score += 1
        return score

    @staticmethod
    def _focus_reason(pacing: MovementPacing, volume: MovementVolumeLoad | None) -> str:
        reasons = []
        if pacing.pacing_level == PacingLevel.LIGHT:
            reasons.append("this is a relative weakness")
        if volume is not None and volume.load_classification == LoadClassification.HIGH:
            reasons.append("high load relative to your 1RM")
        if not pacing.has_athlete_benchmark:
            reasons.append("no benchmark data available")
        if not reasons:
            return "Requires strategic attention."
        text = "; ".join(reasons)
        return text[0].upper() + text[1:]

    @staticmethod
    def _focus_recommendation(pacing: MovementPacing, volume: MovementVolumeLoad | None) -> str:
        load = volume.load_classification if volume is not None else None
        if pacing.pacing_level == PacingLevel.LIGHT and load in SIGNIFICANT_LOADS:
            return "Consider scaling weight and break into smaller sets to maintain quality."
        if pacing.pacing_level == PacingLevel.LIGHT:
            return "Break into manageable sets and protect your energy for other movements."
        if load == LoadClassification.HIGH:
            return "Manage your effort carefully with strategic rest between sets."
        return "Stay focused and maintain consistent effort throughout."

    def identify_key_focus_movements(
        self,
        pacing: WorkoutPacingResult,
        volume: WorkoutVolumeLoadResult,
    ) -> list[KeyFocusMovement]:
        """Top movements by weakness and load, highest priority first."""
        volumes: list[MovementVolumeLoad | None] = list(volume.movement_volumes)
        volumes += [None] * (len(pacing.movement_pacing) - len(volumes))
        scored = [
            (self._focus_score(p, v), p, v) for p, v in zip(pacing.movement_pacing, volumes)
        ]
        # sorted() is stable, so ties keep workout order
        top = sorted(scored, key=lambda item: item[0], reverse=True)[: self.config["key_focus_limit"]]

        focus = []
        for score, movement_pacing, movement_volume in top:
            if score <= 0:
                continue
            load = (
                movement_volume.load_classification
                if movement_volume is not None
                else LoadClassification.NOT_APPLICABLE
            )
            focus.append(
                KeyFocusMovement(
                    movement_definition_id=movement_pacing.movement_definition_id,
                    movement_name=movement_pacing.movement_name,
                    reason=self._focus_reason(movement_pacing, movement_volume),
                    recommendation=self._focus_recommendation(movement_pacing, movement_volume),
                    priority=len(focus) + 1,
                    pacing_level=movement_pacing.pacing_level,
                    load_classification=load,
                    scaling_recommended=(
                        movement_pacing.pacing_level == PacingLevel.LIGHT and load in SIGNIFICANT_LOADS
                    ),
                )
            )
        return focus

    # Risk alerts

    def generate_risk_alerts(
        self,
        pacing: WorkoutPacingResult,
        volume: WorkoutVolumeLoadResult,
        time_estimate: TimeEstimateResult,
        difficulty_score: int,
        time_cap_seconds: int | None = None,
    ) -> list[RiskAlert]:
        """Risk alerts sorted High, Medium, Low."""
        alerts = []
        pairs = list(zip(pacing.movement_pacing, volume.movement_volumes))

        scaling = [
            p.movement_name
            for p, v in pairs
            if p.pacing_level == PacingLevel.LIGHT and v.load_classification in SIGNIFICANT_LOADS
        ]
        if len(scaling) >= 2:
            alerts.append(
                RiskAlert(
                    alert_type=RiskAlertType.SCALING_RECOMMENDED,
                    severity=AlertSeverity.MEDIUM,
                    title="Consider Scaling",
                    message=(
                        f"Found {len(scaling)} movements where you have Light pacing (weakness) combined with "
                        "significant volume. Consider scaling weights to maintain intensity."
                    ),
                    affected_movements=scaling,
                    suggested_action=(
                        "Scale weights down 10-20% on these movements to maintain workout intensity "
                        "and movement quality."
                    ),
                )
            )

        if (
            time_cap_seconds
            and time_estimate.estimate_type == EstimateType.TIME
            and time_estimate.workout_type in FINISHING_WORKOUT_TYPES
            and time_estimate.max_estimate > int(time_cap_seconds * self.config["time_cap_risk_ratio"])
        ):
            alerts.append(
                RiskAlert(
                    alert_type=RiskAlertType.TIME_CAP_RISK,
                    severity=AlertSeverity.HIGH,
                    title="Time Cap Risk",
                    message=(
                        f"Your estimated finish time ({format_time(time_estimate.max_estimate)}) is approaching "
                        f"the time cap ({format_time(time_cap_seconds)}). "
                        "You may not finish the workout as prescribed."
                    ),
                    suggested_action=(
                        "Consider scaling the workout or adjusting your pacing strategy to ensure completion."
                    ),
                )
            )

        high_load = [v.movement_name for v in volume.movement_volumes if v.load_classification == LoadClassification.HIGH]
        if difficulty_score >= self.config["recovery_impact_min_difficulty"] and high_load:
            alerts.append(
                RiskAlert(
                    alert_type=RiskAlertType.RECOVERY_IMPACT,
                    severity=AlertSeverity.LOW,
                    title="Recovery Impact",
                    message="This is a demanding workout with high volume loads. Expect extended recovery time.",
                    affected_movements=high_load,
                    suggested_action=(
                        "Plan for adequate rest and recovery. "
                        "Consider reducing training intensity in the following days."
                    ),
                )
            )

        heavy = [m.movement_name for m in pacing.movement_pacing if m.pacing_level == PacingLevel.HEAVY]
        light = [m.movement_name for m in pacing.movement_pacing if m.pacing_level == PacingLevel.LIGHT]
        if len(heavy) >= 2 and len(light) >= 2:
            alerts.append(
                RiskAlert(
                    alert_type=RiskAlertType.PACING_MISMATCH,
                    severity=AlertSeverity.LOW,
                    title="Varied Movement Strengths",
                    message=(
                        f"This workout has a mix of movements where you excel ({', '.join(heavy)}) and "
                        f"movements that challenge you ({', '.join(light)}). Strategy adjustments recommended."
                    ),
                    affected_movements=light + heavy,
                    suggested_action=(
                        "Push hard on your strength movements while being conservative on weaker movements. "
                        "Use rest strategically."
                    ),
                )
            )

        gaps = self.benchmark_gaps(pacing, volume)
        if gaps:
            alerts.append(
                RiskAlert(
                    alert_type=RiskAlertType.BENCHMARK_GAP,
                    severity=AlertSeverity.LOW,
                    title="Missing Benchmark Data",
                    message=(
                        "Some movements lack benchmark data, which affects the accuracy of these recommendations."
                    ),
                    affected_movements=gaps,
                    suggested_action=(
                        "Record benchmarks for these movements to improve future strategy recommendations."
                    ),
                )
            )

        return sorted(alerts, key=lambda alert: SEVERITY_ORDER[alert.severity])

    @staticmethod
    def benchmark_gaps(pacing: WorkoutPacingResult, volume: WorkoutVolumeLoadResult) -> list[str]:
        """Movement names missing pacing data or, for loaded movements, volume data."""
        names = [p.movement_name for p in pacing.movement_pacing if not _has_full_data(p)]
        names += [
            v.movement_name
            for v in volume.movement_volumes
            if not v.has_sufficient_data and v.load_classification != LoadClassification.BODYWEIGHT
        ]
        return list(dict.fromkeys(names))

    # Confidence and summary

    @staticmethod
    def calculate_strategy_confidence(
        pacing: WorkoutPacingResult,
        time_estimate: TimeEstimateResult,
    ) -> StrategyConfidence:
        total = len(pacing.movement_pacing)
        covered = sum(1 for p in pacing.movement_pacing if _has_full_data(p))
        coverage = round(covered / total * 100) if total else 0

        if coverage >= 80 and time_estimate.confidence_level == ConfidenceLevel.HIGH:
            level = "High"
            explanation = "Strong benchmark coverage across movements. Recommendations are highly personalized."
        elif coverage >= 80:
            level = "High"
            explanation = f"Strong benchmark coverage ({coverage}%). Some time estimate uncertainty exists."
        elif coverage >= 50:
            level = "Medium"
            explanation = (
                f"Partial benchmark coverage ({coverage}%). "
                "Recommendations are moderately personalized with some default assumptions."
            )
        else:
            level = "Low"
            explanation = f"Limited benchmark coverage ({coverage}%). Record more benchmarks for better personalization."

        return StrategyConfidence(
            level=level,
            percentage=coverage,
            explanation=explanation,
            missing_benchmarks=[p.movement_name for p in pacing.movement_pacing if not _has_full_data(p)],
            covered_movement_count=covered,
            total_movement_count=total,
        )

    @staticmethod
    def generate_summary(
        difficulty_score: int,
        focus: list[KeyFocusMovement],
        alerts: list[RiskAlert],
    ) -> str:
        if difficulty_score <= 3:
            parts = ["This workout favors your strengths."]
        elif difficulty_score <= 5:
            parts = ["A balanced workout with manageable challenges."]
        elif difficulty_score <= 7:
            parts = ["This workout will test you."]
        else:
            parts = ["Expect a significant challenge."]

        if focus:
            parts.append(f"Pay special attention to {focus[0].movement_name}: {focus[0].recommendation}")

        alert_types = {alert.alert_type for alert in alerts}
        if RiskAlertType.SCALING_RECOMMENDED in alert_types:
            parts.append("Consider scaling weights to maintain intensity throughout.")
        elif RiskAlertType.TIME_CAP_RISK in alert_types:
            parts.append("Watch your pace to avoid the time cap.")
        return " ".join(parts)

    def calculate_insights(
        self,
        workout: ParsedWorkout,
        pacing: WorkoutPacingResult,
        volume: WorkoutVolumeLoadResult,
        time_estimate: TimeEstimateResult,
        experience: ExperienceLevel = ExperienceLevel.INTERMEDIATE,
    ) -> StrategyInsightsResult:
        """
        Build the insight bundle from the three analyzer results.

        Args:
            workout: The parsed workout (for its time cap)
            pacing: Pacing analysis of the same workout
            volume: Volume load analysis of the same workout
            time_estimate: Time estimate of the same workout
            experience: Athlete experience level

        Returns:
            StrategyInsightsResult carrying the analyses it was built from
        """
        difficulty = self.calculate_difficulty(pacing, volume, time_estimate, experience)
        focus = self.identify_key_focus_movements(pacing, volume)
        alerts = self.generate_risk_alerts(pacing, volume, time_estimate, difficulty.score, workout.time_cap_seconds)
        logger.debug(
            "Insights for %s: difficulty %d (%s), %d alerts",
            pacing.workout_name,
            difficulty.score,
            difficulty.label,
            len(alerts),
        )
        return StrategyInsightsResult(
            workout_name=pacing.workout_name,
            workout_type=pacing.workout_type,
            difficulty_score=difficulty,
            strategy_confidence=self.calculate_strategy_confidence(pacing, time_estimate),
            key_focus_movements=focus,
            risk_alerts=alerts,
            strategy_summary=self.generate_summary(difficulty.score, focus, alerts),
            pacing_analysis=pacing,
            volume_load_analysis=volume,
            time_estimate=time_estimate,
        )
