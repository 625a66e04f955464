"""
Overlap detection for a generated week.

The AI service is asked for a conflict-free timetable, but nothing forces it
to deliver one. Given the returned sessions, list the pairs that overlap on
the same weekday.
Overlap rule:
    start < other_end AND end > other_start
"""

from __future__ import annotations

from typing import Optional, Sequence

from smartschedule.model import ClassSession, normalize_day


def time_to_minutes(hhmm: str) -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises ValueError for invalid formats.
    """
    parts = hhmm.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid time format: {hhmm!r}")
    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValueError(f"Invalid time value: {hhmm!r}")
    return h * 60 + m


def session_range(session: ClassSession) -> Optional[tuple[int, int]]:
    """
    (start, end) in minutes, or None if the times are unusable.
    """
    try:
        start = time_to_minutes(session.start)
        end = time_to_minutes(session.end)
    except ValueError:
        return None
    if end <= start:
        return None
    return start, end


def _overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    return a_start < b_end and a_end > b_start


def find_overlaps(sessions: Sequence[ClassSession]) -> list[tuple[ClassSession, ClassSession]]:
    """
    Find overlapping session pairs (A,B), each pair appears once (i<j), in
    the order the sessions were given.
    """
    overlaps: list[tuple[ClassSession, ClassSession]] = []

    parsed: list[tuple[str, int, int, ClassSession]] = []
    for s in sessions:
        day = normalize_day(s.day)
        rng = session_range(s)
        if day is None or rng is None:
            continue
        parsed.append((day, rng[0], rng[1], s))

    # a week holds a few dozen sessions at most
    for i in range(len(parsed)):
        d1, s1, e1, ev1 = parsed[i]
        for j in range(i + 1, len(parsed)):
            d2, s2, e2, ev2 = parsed[j]
            if d1 != d2:
                continue
            if _overlaps(s1, e1, s2, e2):
                overlaps.append((ev1, ev2))

    return overlaps
