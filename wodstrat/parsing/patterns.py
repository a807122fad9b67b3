"""Compiled regular expressions for workout text recognition."""
from __future__ import annotations

import re

_I = re.IGNORECASE

# Workout type patterns
AMRAP = re.compile(
    r"(?:(\d+)\s*(?:min(?:ute)?s?)\s*AMRAP|AMRAP\s*(?:in\s*)?(\d+)?\s*(?:min(?:ute)?s?)?|AMRAP)", _I
)
FOR_TIME = re.compile(
    r"(?:(\d+)\s*(?:Rounds?\s*)?For\s*Time|For\s*Time|Complete\s+as\s+fast\s+as\s+possible)", _I
)
EMOM = re.compile(
    r"(?:E(\d*)MOM|Every\s*(\d+)?\s*(?:min(?:ute)?s?)\s*(?:on\s*the\s*(?:min(?:ute)?)?)?"
    r"|(\d+)\s*(?:min(?:ute)?s?)\s*EMOM|EMOM\s*(\d+)?)",
    _I,
)
ROUNDS = re.compile(r"(\d+)\s*(?:Rounds?|RFT|Sets?)\s*(?:of|:)?", _I)
INTERVAL = re.compile(
    r"(\d+)\s*[xX]\s*(?:(\d+)\s*(min|sec|:?\d+)?\s*(?:on|work)?\s*/?\s*(\d+)?\s*(min|sec)?\s*(?:off|rest)?"
    r"|(\d+)\s*[mM])",
    _I,
)
TABATA = re.compile(
    r"Tabata|8\s*(?:rounds?\s*(?:of\s*)?)?:?20\s*(?:sec(?:ond)?s?)?\s*(?:on|work)?\s*[/:]?\s*:?10"
    r"\s*(?:sec(?:ond)?s?)?\s*(?:off|rest)?",
    _I,
)

# Time patterns
TIME_CAP = re.compile(
    r"(?:Time\s*Cap|Cap|TC)\s*[:=]?\s*(\d+)(?::(\d+))?(?:\s*(?:min(?:ute)?s?)?)?"
    r"|(\d+)\s*(?:min(?:ute)?s?)\s*cap",
    _I,
)
DURATION = re.compile(r"(?:(\d+)\s*(min(?:ute)?s?|sec(?:ond)?s?)|:(\d+))", _I)
CLOCK = re.compile(r"(\d{1,2}):(\d{2})(?!\d)")

# Rep scheme patterns
CHIPPER_REP_SCHEME = re.compile(r"^(\d+(?:-\d+)+)$", re.MULTILINE)
FIXED_REP = re.compile(r"(\d+)[ \t]*(?:rounds?|sets?)[ \t]*(?:of[ \t]*)?(\d+)[ \t]*(?:reps?)?", _I)
PER_ROUND_REP = re.compile(r"(\d+(?:/\d+)+)")

# Movement line patterns
MOVEMENT_WITH_REPS = re.compile(r"^(\d+)\s+(.+?)(?:\s*\(([^)]+)\))?$", re.MULTILINE)
MOVEMENT_WITH_DURATION = re.compile(
    r"(?:(\d+)\s*(min(?:ute)?s?|sec(?:ond)?s?)\s+(.+)|:(\d+)\s+(.+))", _I
)

# Load and quantity patterns
LOAD = re.compile(r"(\d+(?:\.\d+)?)\s*(lbs?|kg|pood|#)", _I)
GENDER_LOAD = re.compile(r"(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)\s*(lbs?|kg|pood)?", _I)
PERCENTAGE = re.compile(r"(\d+)\s*%\s*(?:of\s*)?(1RM|bodyweight|BW)?|bodyweight|BW", _I)
DISTANCE = re.compile(r"(\d+(?:\.\d+)?)\s*(m(?:eters?)?|km|k|ft|feet|mi(?:les?)?)\b", _I)
CALORIE = re.compile(r"(\d+)\s*(?:Cal(?:orie)?s?)\b", _I)
GENDER_CALORIE = re.compile(r"(\d+)\s*/\s*(\d+)\s*(?:Cal(?:orie)?s?)\b", _I)
HEIGHT = re.compile(r"(\d+)\s*(?:in(?:ch)?(?:es)?\b|\"|'')", _I)

# Header-only shapes that the generic patterns above would also find inside movement lines
ROUNDS_HEADER = re.compile(
    r"^\s*(\d+)\s*(?:rounds?|rft|sets?)\b(?:\s*(?:of|for\s*time|:))?(?:\s*\d+\s*(?:reps?)?)?\s*:?\s*$", _I
)
INTERVAL_HEADER = re.compile(r"^\s*\d+\s*[xX]\s*\d+\s*(?:min|sec|:\d+)", _I)
PER_ROUND_HEADER = re.compile(r"^\s*\d+(?:/\d+){2,}\s*(?:reps?)?\s*$", _I)

NAMED_WORKOUT = re.compile(
    r"^(Fran|Diane|Helen|Grace|Isabel|Karen|Mary|Cindy|Annie|Eva|Kelly|Linda|Nancy|Angie|"
    r"Chelsea|Elizabeth|Filthy Fifty|Fight Gone Bad|Murph|DT|Roy|Jackie)\b",
    _I,
)
WORKOUT_TITLE = re.compile(r"^[\"']?([A-Z][A-Za-z0-9\s\-']+)[\"']?$")


def contains_workout_type(text: str) -> bool:
    """Return True when the text names a workout format."""
    return any(
        pattern.search(text)
        for pattern in (AMRAP, FOR_TIME, EMOM, TABATA, ROUNDS)
    )


def is_header_line(line: str) -> bool:
    """Return True for lines describing workout structure rather than a movement."""
    if not line or not line.strip():
        return True
    return any(
        pattern.search(line)
        for pattern in (
            AMRAP,
            FOR_TIME,
            EMOM,
            TABATA,
            TIME_CAP,
            CHIPPER_REP_SCHEME,
            ROUNDS_HEADER,
            INTERVAL_HEADER,
            PER_ROUND_HEADER,
        )
    )
