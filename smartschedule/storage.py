"""
Course list files.

The session itself is never saved. Users can, however, keep their course list
in a small JSON file and load it into a session (or save the current list
from the interactive menu):

    {"courses": [{"id": "c1", "name": "Algebra", "credits": 5, ...}, ...]}

A bare JSON list of course objects is accepted on load as well.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from smartschedule.model import Course

logger = logging.getLogger(__name__)


def load_courses(path: str | Path) -> list[Course]:
    """
    Load courses from a course file.

    Returns an empty list if the file does not exist or is invalid. Single
    broken entries are skipped, the rest of the file is still used.
    """
    course_path = Path(path)
    if not course_path.exists():
        return []

    try:
        data = json.loads(course_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Could not read course file %s", course_path)
        return []

    items = data.get("courses", []) if isinstance(data, dict) else data
    if not isinstance(items, list):
        return []

    out: list[Course] = []
    seen: set[str] = set()
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            course = Course.from_payload(item)
        except (ValueError, TypeError) as exc:
            logger.warning("Skipping course entry %r: %s", item, exc)
            continue
        if course.course_id in seen:
            continue
        seen.add(course.course_id)
        out.append(course)
    return out


def save_courses(courses: Iterable[Course], path: str | Path) -> None:
    """
    Save courses to a course file. Creates parent directories if needed.
    """
    course_path = Path(path)
    course_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {"courses": [c.to_payload() for c in courses]}
    course_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
