"""Clearance level scoring from account age, followers and contribution volume."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Union

from .models import ClearanceLevel
from .stats import parse_timestamp

DAYS_PER_YEAR = 365.25
MAX_AGE_SCORE = 40.0
MAX_FOLLOWER_SCORE = 30.0
MAX_CONTRIBUTION_SCORE = 30.0

# Evaluated top-down; the first band whose minimum score is reached wins.
CLEARANCE_BANDS = (
    (85, 10, "FLEET ADMIRAL"),
    (75, 9, "ADMIRAL"),
    (65, 8, "VICE ADMIRAL"),
    (55, 7, "COMMODORE"),
    (45, 6, "CAPTAIN"),
    (35, 5, "COMMANDER"),
    (25, 4, "LT COMMANDER"),
    (15, 3, "LIEUTENANT"),
    (8, 2, "LT JUNIOR GRADE"),
)
BASE_LEVEL = (1, "ENSIGN")


def years_since(created_at: Union[str, datetime, None], now: datetime) -> float:
    """Return fractional years (365.25-day years) between ``created_at`` and ``now``.

    Missing or unparseable creation dates, and dates in the future, yield 0.
    """
    if isinstance(created_at, datetime):
        created = parse_timestamp(created_at.isoformat())
    else:
        created = parse_timestamp(created_at)
    reference = parse_timestamp(now.isoformat())

    if created is None or reference is None:
        return 0.0

    elapsed_days = (reference - created).total_seconds() / 86400
    return max(0.0, elapsed_days / DAYS_PER_YEAR)


def _log_score(value: int, cap: float) -> float:
    if value <= 0:
        return 0.0
    return min(math.log10(value) * 10, cap)


def clearance_score(
    created_at: Union[str, datetime, None],
    followers: int,
    total_contributions: int,
    now: datetime,
) -> float:
    """Return the 0-100 clearance score."""
    age_score = min(years_since(created_at, now) * 4, MAX_AGE_SCORE)
    follower_score = _log_score(followers, MAX_FOLLOWER_SCORE)
    contribution_score = _log_score(total_contributions, MAX_CONTRIBUTION_SCORE)
    return age_score + follower_score + contribution_score


def calculate_clearance_level(
    created_at: Union[str, datetime, None],
    followers: int,
    total_contributions: int,
    now: datetime,
) -> ClearanceLevel:
    """Map account age, followers and contributions to a 1-10 clearance level.

    ``now`` is explicit so the result is reproducible for a given input.
    """
    score = clearance_score(created_at, followers, total_contributions, now)

    for minimum, level, title in CLEARANCE_BANDS:
        if score >= minimum:
            return ClearanceLevel(level=level, title=title, score=score)

    level, title = BASE_LEVEL
    return ClearanceLevel(level=level, title=title, score=score)
