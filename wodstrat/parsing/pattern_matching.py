"""Regex-driven extraction of workout structure and movement line fields."""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from wodstrat.models.enums import DistanceUnit, LoadUnit, RepSchemeType, WorkoutType
from wodstrat.models.parsing import Distance, IntervalConfig, RepScheme, Weight
from wodstrat.parsing import patterns

TABATA_ROUNDS = 8
TABATA_WORK_SECONDS = 20
TABATA_REST_SECONDS = 10

_EMOM_TAIL = re.compile(r"^\s*(?:[xX:\-]|for)?\s*(\d+)\s*(min(?:ute)?s?|rounds?)?", re.IGNORECASE)
_DISTANCE_TAIL = re.compile(r"^\s*(?:m\b|meters?|km|k\b|mi\b|miles?)", re.IGNORECASE)
_EMPTY_PARENS = re.compile(r"\(\s*\)")
_SPACES = re.compile(r"\s+")
_EDGE_PUNCTUATION = " ,;:-@/"
_LEADING_MULTIPLIER = re.compile(r"^[xX]\s+")


@dataclass
class WorkoutTypeMatch:
    """Result of workout format detection."""

    workout_type: WorkoutType
    confidence: float
    time_cap_seconds: int | None = None
    round_count: int | None = None
    interval_seconds: int | None = None
    interval: IntervalConfig | None = None
    matched_pattern: str | None = None


@dataclass
class MovementLineFields:
    """Quantities and residual text pulled out of one movement line."""

    reps: int | None = None
    duration_seconds: int | None = None
    weight: Weight | None = None
    weight_female: Weight | None = None
    distance: Distance | None = None
    calories: int | None = None
    calories_female: int | None = None
    height_inches: int | None = None
    percentage: str | None = None
    modifiers: list[str] = field(default_factory=list)
    movement_text: str = ""

    @property
    def has_quantity(self) -> bool:
        return any(
            value is not None
            for value in (self.reps, self.duration_seconds, self.distance, self.calories)
        )


def parse_load_unit(unit: str | None) -> LoadUnit:
    if unit is None:
        return LoadUnit.LB
    normalized = unit.lower()
    if normalized == "kg":
        return LoadUnit.KG
    if normalized == "pood":
        return LoadUnit.POOD
    return LoadUnit.LB


def parse_distance_unit(unit: str) -> DistanceUnit:
    normalized = unit.lower()
    if normalized in ("km", "k"):
        return DistanceUnit.KM
    if normalized in ("ft", "feet"):
        return DistanceUnit.FT
    if normalized.startswith("mi"):
        return DistanceUnit.MI
    return DistanceUnit.M


def extract_time_cap(text: str) -> int | None:
    """
    Find an explicit time cap in seconds.

    Accepts "Time Cap: 20", "Cap 12:30", "TC 15 min" and "20 min cap".
    """
    match = patterns.TIME_CAP.search(text)
    if match is None:
        return None
    if match.group(3):
        return int(match.group(3)) * 60
    minutes = int(match.group(1))
    seconds = int(match.group(2)) if match.group(2) else 0
    return minutes * 60 + seconds


def _interval_unit_seconds(value: int, unit: str | None) -> int:
    if unit is None or unit.lower().startswith("min"):
        return value * 60
    if unit.lower().startswith("sec"):
        return value
    # clock form, "2:30" split into value "2" and unit ":30"
    return value * 60 + int(unit.lstrip(":"))


def extract_interval(text: str) -> IntervalConfig | None:
    """
    Parse "N x work/rest" interval notation.

    Returns None for distance repeats such as "5 x 400m" and for text that
    carries no work duration.

    Example:
        >>> extract_interval("5 x 3 min on / 1 min off").total_seconds
        1200
    """
    match = patterns.INTERVAL.search(text)
    if match is None or match.group(6) is not None or match.group(2) is None:
        return None
    if match.group(3) is None and _DISTANCE_TAIL.match(text[match.end(2):]):
        return None

    rounds = int(match.group(1))
    if rounds < 1:
        return None
    work = _interval_unit_seconds(int(match.group(2)), match.group(3))
    rest = 0
    if match.group(4) is not None:
        rest = _interval_unit_seconds(int(match.group(4)), match.group(5))
    return IntervalConfig(rounds=rounds, work_seconds=work, rest_seconds=rest)


def _detect_emom(match: re.Match, text: str) -> WorkoutTypeMatch:
    interval_minutes_text = match.group(1) or match.group(2)
    interval_minutes = int(interval_minutes_text) if interval_minutes_text else 1
    interval_minutes = max(interval_minutes, 1)
    interval_seconds = interval_minutes * 60

    total_minutes = match.group(3) or match.group(4)
    time_cap = int(total_minutes) * 60 if total_minutes else None
    if time_cap is None:
        tail = _EMOM_TAIL.match(text[match.end():])
        if tail is not None:
            count = int(tail.group(1))
            unit = (tail.group(2) or "").lower()
            time_cap = count * interval_seconds if unit.startswith("round") else count * 60

    rounds = time_cap // interval_seconds if time_cap else None
    return WorkoutTypeMatch(
        workout_type=WorkoutType.EMOM,
        confidence=1.0,
        time_cap_seconds=time_cap,
        round_count=rounds,
        interval_seconds=interval_seconds,
        matched_pattern="EMOM",
    )


def detect_workout_type(text: str) -> WorkoutTypeMatch:
    """
    Detect the workout format from header text.

    Patterns are tried in a fixed order and the first match wins: Tabata,
    AMRAP, EMOM, work/rest intervals, "For Time", rounds, a chipper rep
    scheme, then a default of For Time with low confidence.

    Args:
        text: Header lines, or the whole workout when it has none

    Returns:
        WorkoutTypeMatch with confidence in [0, 1]
    """
    if patterns.TABATA.search(text):
        interval = IntervalConfig(
            rounds=TABATA_ROUNDS,
            work_seconds=TABATA_WORK_SECONDS,
            rest_seconds=TABATA_REST_SECONDS,
        )
        return WorkoutTypeMatch(
            workout_type=WorkoutType.TABATA,
            confidence=1.0,
            time_cap_seconds=interval.total_seconds,
            round_count=TABATA_ROUNDS,
            interval_seconds=TABATA_WORK_SECONDS + TABATA_REST_SECONDS,
            interval=interval,
            matched_pattern="Tabata",
        )

    match = patterns.AMRAP.search(text)
    if match:
        minutes = match.group(1) or match.group(2)
        return WorkoutTypeMatch(
            workout_type=WorkoutType.AMRAP,
            confidence=1.0,
            time_cap_seconds=int(minutes) * 60 if minutes else None,
            matched_pattern="AMRAP",
        )

    match = patterns.EMOM.search(text)
    if match:
        return _detect_emom(match, text)

    interval = extract_interval(text)
    if interval is not None:
        return WorkoutTypeMatch(
            workout_type=WorkoutType.INTERVALS,
            confidence=0.9,
            time_cap_seconds=interval.total_seconds,
            round_count=interval.rounds,
            interval_seconds=interval.work_seconds + interval.rest_seconds,
            interval=interval,
            matched_pattern="Interval",
        )

    match = patterns.FOR_TIME.search(text)
    if match:
        rounds = int(match.group(1)) if match.group(1) else None
        return WorkoutTypeMatch(
            workout_type=WorkoutType.FOR_TIME,
            confidence=1.0,
            time_cap_seconds=extract_time_cap(text),
            round_count=rounds,
            matched_pattern="ForTime",
        )

    match = patterns.ROUNDS.search(text)
    if match:
        return WorkoutTypeMatch(
            workout_type=WorkoutType.ROUNDS,
            confidence=0.9,
            time_cap_seconds=extract_time_cap(text),
            round_count=int(match.group(1)),
            matched_pattern="Rounds",
        )

    if patterns.CHIPPER_REP_SCHEME.search(text):
        return WorkoutTypeMatch(
            workout_type=WorkoutType.FOR_TIME,
            confidence=0.8,
            time_cap_seconds=extract_time_cap(text),
            matched_pattern="Chipper",
        )

    return WorkoutTypeMatch(
        workout_type=WorkoutType.FOR_TIME,
        confidence=0.5,
        time_cap_seconds=extract_time_cap(text),
    )


def signalled_workout_types(text: str) -> list[WorkoutType]:
    """Return every distinct format keyword family present in the text."""
    found = []
    if patterns.AMRAP.search(text):
        found.append(WorkoutType.AMRAP)
    if patterns.EMOM.search(text):
        found.append(WorkoutType.EMOM)
    if patterns.TABATA.search(text):
        found.append(WorkoutType.TABATA)
    if patterns.FOR_TIME.search(text):
        found.append(WorkoutType.FOR_TIME)
    return found


def determine_rep_scheme_type(reps: list[int]) -> RepSchemeType:
    """
    Classify a rep sequence.

    Example:
        >>> determine_rep_scheme_type([21, 15, 9])
        <RepSchemeType.DESCENDING: 'Descending'>
    """
    if len(reps) <= 1 or len(set(reps)) == 1:
        return RepSchemeType.FIXED
    pairs = list(zip(reps, reps[1:]))
    if all(a > b for a, b in pairs):
        return RepSchemeType.DESCENDING
    if all(a < b for a, b in pairs):
        return RepSchemeType.ASCENDING
    return RepSchemeType.CUSTOM


def extract_rep_scheme(text: str) -> RepScheme | None:
    """Find a chipper ("21-15-9"), per-round ("10/8/6") or fixed ("5 rounds of 10") scheme."""
    match = patterns.CHIPPER_REP_SCHEME.search(text)
    if match is None:
        match = patterns.PER_ROUND_REP.search(text)
    if match is not None:
        reps = [int(value) for value in re.split(r"[-/]", match.group(1))]
        if all(rep > 0 for rep in reps):
            return RepScheme(reps=reps, scheme_type=determine_rep_scheme_type(reps))

    match = patterns.FIXED_REP.search(text)
    if match is not None:
        rounds, reps = int(match.group(1)), int(match.group(2))
        if rounds > 0 and reps > 0:
            return RepScheme(reps=[reps] * rounds, scheme_type=RepSchemeType.FIXED)
    return None


def _overlaps(span: tuple[int, int], claimed: list[tuple[int, int]]) -> bool:
    return any(span[0] < end and start < span[1] for start, end in claimed)


def parse_movement_line(line: str) -> MovementLineFields:
    """
    Extract quantities from a single movement line.

    Quantities are claimed in a fixed order (gender calorie pair, calories,
    distance, height, gender load pair, load) and a later match overlapping
    an earlier claim is ignored, so "24/20 in" is a height and "15/12 cal"
    is never read as a load. A leading number is a rep count unless it
    belongs to one of the claimed quantities or to a duration.

    Example:
        >>> fields = parse_movement_line("21 Thrusters (95/65 lb)")
        >>> fields.reps, fields.movement_text, str(fields.weight)
        (21, 'Thrusters', '95 lb')
    """
    result = MovementLineFields()
    text = line.strip()
    claimed: list[tuple[int, int]] = []

    def claim(match: re.Match | None) -> re.Match | None:
        if match is None or _overlaps(match.span(), claimed):
            return None
        claimed.append(match.span())
        return match

    match = claim(patterns.GENDER_CALORIE.search(text))
    if match:
        result.calories = int(match.group(1))
        result.calories_female = int(match.group(2))
    else:
        match = claim(patterns.CALORIE.search(text))
        if match:
            result.calories = int(match.group(1))

    match = claim(patterns.DISTANCE.search(text))
    if match:
        result.distance = Distance(
            value=float(match.group(1)), unit=parse_distance_unit(match.group(2))
        )

    match = claim(patterns.HEIGHT.search(text))
    if match:
        result.height_inches = int(match.group(1))

    match = claim(patterns.GENDER_LOAD.search(text))
    if match:
        unit = parse_load_unit(match.group(3))
        result.weight = Weight(value=float(match.group(1)), unit=unit)
        result.weight_female = Weight(value=float(match.group(2)), unit=unit)
    else:
        match = claim(patterns.LOAD.search(text))
        if match:
            result.weight = Weight(value=float(match.group(1)), unit=parse_load_unit(match.group(2)))

    match = patterns.PERCENTAGE.search(text)
    if match and match.group(1) and not _overlaps(match.span(), claimed):
        claimed.append(match.span())
        result.percentage = match.group(0).strip()

    match = patterns.MOVEMENT_WITH_DURATION.match(text)
    if match and not _overlaps(match.span(1 if match.group(1) else 4), claimed):
        if match.group(1):
            value = int(match.group(1))
            result.duration_seconds = value * 60 if match.group(2).lower().startswith("min") else value
            claimed.append((match.start(1), match.end(2)))
        else:
            result.duration_seconds = int(match.group(4))
            claimed.append((match.start(4) - 1, match.end(4)))

    match = patterns.MOVEMENT_WITH_REPS.match(text)
    if match and not _overlaps(match.span(1), claimed):
        result.reps = int(match.group(1))
        claimed.append(match.span(1))

    residual = text
    for start, end in sorted(claimed, reverse=True):
        residual = residual[:start] + " " + residual[end:]

    for modifier in re.findall(r"\(([^)]*)\)", residual):
        cleaned = modifier.strip(_EDGE_PUNCTUATION)
        if cleaned:
            result.modifiers.append(cleaned)
    residual = re.sub(r"\([^)]*\)", " ", residual)
    residual = _EMPTY_PARENS.sub(" ", residual)
    residual = _SPACES.sub(" ", residual).strip(_EDGE_PUNCTUATION + ".")
    result.movement_text = _LEADING_MULTIPLIER.sub("", residual)
    return result
