from __future__ import annotations

from datetime import datetime
from typing import Optional

from app.utils.time import days_before, ensure_aware, format_day, utcnow

# Business defaults for the weekly analysis window
ANALYSIS_WINDOW_DAYS = 7


def trailing_window(now: Optional[datetime] = None, *, days: int = ANALYSIS_WINDOW_DAYS) -> tuple[datetime, datetime]:
    """
    (start, end) of the trailing analysis window in UTC, both ends inclusive.
    - If `now` is None, the window ends at the current time.
    """
    end = ensure_aware(now or utcnow())
    return days_before(end, days), end


def week_label(start: datetime, end: datetime) -> str:
    """
    Reference label stored with an analysis, e.g. 'Week 12/10/2026 to 19/10/2026'.
    """
    return f"Week {format_day(start)} to {format_day(end)}"
