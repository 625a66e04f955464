"""
Central data model definitions used across the project.

This module defines the canonical structure of Course, SchedulePreferences,
ClassSession and GenerationResult objects so that:
- all modules share the same field names
- the payload sent to (and read back from) the AI service has one home
- unknown metadata from either side survives in an ``extra`` mapping
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

DIFFICULTIES = ("easy", "medium", "hard")

WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

_DAY_ALIASES = {
    "mon": "Mon",
    "monday": "Mon",
    "tue": "Tue",
    "tues": "Tue",
    "tuesday": "Tue",
    "wed": "Wed",
    "wednesday": "Wed",
    "thu": "Thu",
    "thur": "Thu",
    "thurs": "Thu",
    "thursday": "Thu",
    "fri": "Fri",
    "friday": "Fri",
    "sat": "Sat",
    "saturday": "Sat",
    "sun": "Sun",
    "sunday": "Sun",
}

_COURSE_KEYS = {"id", "name", "credits", "sessionsPerWeek", "durationMinutes", "difficulty"}

_SESSION_KEYS = {"courseId", "course", "day", "startTime", "start", "endTime", "end", "type", "kind", "location"}


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


def new_course_id() -> str:
    return uuid.uuid4().hex[:8]


def normalize_day(day: str) -> Optional[str]:
    """
    Map 'Monday', 'mon', 'MON' ... to the short form used by the views.
    Returns None for anything that is not a weekday name.
    """
    return _DAY_ALIASES.get(_safe_str(day).strip().lower())


@dataclass
class Course:
    """
    One course the user wants placed into the weekly timetable.
    """

    name: str
    course_id: str = field(default_factory=new_course_id)
    credits: int = 3
    sessions_per_week: int = 2
    session_minutes: int = 60
    difficulty: str = "medium"
    extra: dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        payload.update(
            {
                "id": self.course_id,
                "name": self.name,
                "credits": self.credits,
                "sessionsPerWeek": self.sessions_per_week,
                "durationMinutes": self.session_minutes,
                "difficulty": self.difficulty,
            }
        )
        return payload

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Course":
        """
        Build a Course from a course-file / payload dict.

        Raises ValueError if the course has no name.
        """
        name = _safe_str(data.get("name")).strip()
        if not name:
            raise ValueError("Course needs a name")

        cid = _safe_str(data.get("id")).strip() or new_course_id()
        difficulty = _safe_str(data.get("difficulty") or "medium").strip().lower()
        if difficulty not in DIFFICULTIES:
            difficulty = "medium"

        return cls(
            name=name,
            course_id=cid,
            credits=int(data.get("credits", 3)),
            sessions_per_week=int(data.get("sessionsPerWeek", 2)),
            session_minutes=int(data.get("durationMinutes", 60)),
            difficulty=difficulty,
            extra={k: v for k, v in data.items() if k not in _COURSE_KEYS},
        )


@dataclass
class SchedulePreferences:
    """
    User constraints bounding the generated timetable.

    end_time is expected to be later than start_time but this is not checked
    here; the service decides what to do with an odd window.
    """

    start_time: str = "08:00"
    end_time: str = "15:00"
    lunch_duration: int = 45
    include_breaks: bool = True

    def __post_init__(self) -> None:
        if self.lunch_duration < 0:
            raise ValueError(f"Lunch duration must not be negative: {self.lunch_duration}")

    def to_payload(self) -> dict[str, Any]:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "lunchDuration": self.lunch_duration,
            "includeBreaks": self.include_breaks,
        }


@dataclass
class ClassSession:
    """
    One scheduled occurrence of a course, as returned by the AI service.

    The day is kept exactly as the service returned it; views use
    normalize_day() when they need a weekday column.
    """

    course_id: str
    day: str
    start: str
    end: str
    kind: str = "lecture"
    location: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "ClassSession":
        """
        Accepts both the short keys (course/start/end/kind) and the
        camelCase keys the model usually answers with.
        """
        course_id = data.get("courseId", data.get("course"))
        start = data.get("startTime", data.get("start"))
        end = data.get("endTime", data.get("end"))
        kind = data.get("type", data.get("kind")) or "lecture"
        location = data.get("location")

        return cls(
            course_id=_safe_str(course_id).strip(),
            day=_safe_str(data.get("day")).strip(),
            start=_safe_str(start).strip(),
            end=_safe_str(end).strip(),
            kind=_safe_str(kind).strip(),
            location=_safe_str(location).strip() or None,
            extra={k: v for k, v in data.items() if k not in _SESSION_KEYS},
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        payload.update(
            {
                "courseId": self.course_id,
                "day": self.day,
                "startTime": self.start,
                "endTime": self.end,
                "type": self.kind,
            }
        )
        if self.location:
            payload["location"] = self.location
        return payload


@dataclass(frozen=True)
class GenerationResult:
    sessions: tuple[ClassSession, ...]
    summary: str = ""
