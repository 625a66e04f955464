"""
Top-level application state.

One AppState object owns everything the session knows about:

    courses      the Course Store
    preferences  the Preference Store
    sessions     \\
    summary       > the Result Store (last successful generation)
    error        the single visible error notice (None = no notice)
    busy         True while a generate request is in flight

Views only read from it; editors change it through the setter methods below.
Nothing here is written to disk.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from smartschedule.model import ClassSession, Course, GenerationResult, SchedulePreferences


@dataclass
class AppState:
    courses: list[Course] = field(default_factory=list)
    preferences: SchedulePreferences = field(default_factory=SchedulePreferences)
    sessions: list[ClassSession] = field(default_factory=list)
    summary: str = ""
    error: Optional[str] = None
    busy: bool = False

    # -- Course Store -------------------------------------------------------

    def set_courses(self, courses: list[Course]) -> None:
        self.courses = list(courses)

    def add_course(self, course: Course) -> None:
        if self.course_by_id(course.course_id) is not None:
            raise ValueError(f"Duplicate course id: {course.course_id}")
        self.courses.append(course)

    def update_course(self, course_id: str, **changes: Any) -> Course:
        """
        Replace the course with the given id by an updated copy.

        Raises KeyError if the id is unknown.
        """
        for i, c in enumerate(self.courses):
            if c.course_id == course_id:
                updated = replace(c, **changes)
                self.courses[i] = updated
                return updated
        raise KeyError(course_id)

    def remove_course(self, course_id: str) -> Course:
        for i, c in enumerate(self.courses):
            if c.course_id == course_id:
                return self.courses.pop(i)
        raise KeyError(course_id)

    def course_by_id(self, course_id: str) -> Optional[Course]:
        for c in self.courses:
            if c.course_id == course_id:
                return c
        return None

    # -- Preference Store ---------------------------------------------------

    def set_preferences(self, preferences: SchedulePreferences) -> None:
        self.preferences = preferences

    def update_preferences(self, **changes: Any) -> SchedulePreferences:
        # replace() re-runs __post_init__, so invalid values raise here
        self.preferences = replace(self.preferences, **changes)
        return self.preferences

    # -- Result Store -------------------------------------------------------

    @property
    def has_schedule(self) -> bool:
        return len(self.sessions) > 0

    def store_result(self, result: GenerationResult) -> None:
        self.sessions = list(result.sessions)
        self.summary = result.summary

    def clear_result(self) -> None:
        self.sessions = []
        self.summary = ""
