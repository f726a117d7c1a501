from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from skillpath.normalize import coerce_datetime

DAY_SECONDS = 24 * 60 * 60
DAYS_PER_MONTH = 30

# (upper bound in months, score); anything older scores STALE_SCORE
FRESHNESS_BANDS = (
    (1, 100),
    (6, 80),
    (12, 50),
)
STALE_SCORE = 20


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def days_since(last_used: Any, now: Any = None) -> int | None:
    last = coerce_datetime(last_used)
    if last is None:
        return None
    current = coerce_datetime(now) or utc_now()
    elapsed = abs((current - last).total_seconds())
    return math.ceil(elapsed / DAY_SECONDS)


def calculate_freshness_score(last_used: Any, now: Any = None) -> int:
    days = days_since(last_used, now)
    if days is None:
        return 0
    months = days / DAYS_PER_MONTH
    for upper, score in FRESHNESS_BANDS:
        if months < upper:
            return score
    return STALE_SCORE
