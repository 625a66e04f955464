"""
Workload figures behind the workload chart.

All totals are in minutes. Sessions with unusable times count as zero;
sessions on a day that is not a weekday name are left out of the per-day
figures but still count for their course.
"""

from __future__ import annotations

from typing import Sequence

from smartschedule.conflicts import session_range
from smartschedule.model import WEEKDAYS, ClassSession, normalize_day


def session_minutes(session: ClassSession) -> int:
    rng = session_range(session)
    return 0 if rng is None else rng[1] - rng[0]


def minutes_per_day(sessions: Sequence[ClassSession], days: Sequence[str] = WEEKDAYS[:5]) -> dict[str, int]:
    """
    Minutes scheduled on each day, in weekday order. Days listed in `days`
    appear even if empty; weekend days appear only if something is scheduled.
    """
    out: dict[str, int] = {d: 0 for d in days}
    for s in sessions:
        day = normalize_day(s.day)
        if day is None:
            continue
        out[day] = out.get(day, 0) + session_minutes(s)
    return {d: out[d] for d in WEEKDAYS if d in out}


def minutes_per_course(sessions: Sequence[ClassSession]) -> dict[str, int]:
    """
    Minutes per course id, in order of first appearance.
    """
    out: dict[str, int] = {}
    for s in sessions:
        out[s.course_id] = out.get(s.course_id, 0) + session_minutes(s)
    return out


def total_minutes(sessions: Sequence[ClassSession]) -> int:
    return sum(session_minutes(s) for s in sessions)
