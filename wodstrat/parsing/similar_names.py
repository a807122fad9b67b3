"""Edit-distance suggestions for unrecognized movement names."""
from __future__ import annotations

from typing import Sequence

from wodstrat.parsing.errors import SIMILAR_NAME_SUGGESTION_COUNT

DEFAULT_MAX_DISTANCE = 3


def levenshtein_distance(source: str, target: str) -> int:
    """
    Compute the Levenshtein edit distance between two strings.

    Example:
        >>> levenshtein_distance("thruster", "thrusters")
        1
    """
    if not source:
        return len(target)
    if not target:
        return len(source)

    rows, cols = len(source) + 1, len(target) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if source[i - 1] == target[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,
                table[i][j - 1] + 1,
                table[i - 1][j - 1] + cost,
            )
    return table[-1][-1]


def find_similar_names(
    token: str,
    names: Sequence[str],
    max_distance: int = DEFAULT_MAX_DISTANCE,
    max_results: int = SIMILAR_NAME_SUGGESTION_COUNT,
) -> list[str]:
    """
    Suggest catalog names close to an unrecognized token.

    Comparison is case-insensitive. Results are ordered by increasing distance;
    ties keep catalog order.

    Args:
        token: The unrecognized text
        names: Known movement names in catalog order
        max_distance: Largest edit distance still suggested
        max_results: Maximum number of suggestions

    Returns:
        Up to ``max_results`` names from ``names``
    """
    if not token or not token.strip():
        return []

    needle = token.strip().lower()
    scored = []
    for index, name in enumerate(names):
        distance = levenshtein_distance(needle, name.lower())
        if distance <= max_distance:
            scored.append((distance, index, name))

    scored.sort(key=lambda item: (item[0], item[1]))
    return [name for _, _, name in scored[:max_results]]
