"""
iCalendar (.ics) export.

A generated schedule is a template week (weekday + time, no dates). Each
session becomes one weekly-recurring event, anchored on a chosen Monday, so
the file can be imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Sequence

from smartschedule.conflicts import session_range
from smartschedule.model import WEEKDAYS, ClassSession, Course, normalize_day


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _dt_local(day: date, time_hh_mm: str) -> str:
    """
    Convert date + time to ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    dt = datetime.strptime(f"{day.isoformat()} {time_hh_mm}", "%Y-%m-%d %H:%M")
    return dt.strftime("%Y%m%dT%H%M00")


def next_monday(today: Optional[date] = None) -> date:
    today = today or date.today()
    return today + timedelta(days=7 - today.weekday())


def export_sessions_to_ics(
    sessions: Sequence[ClassSession],
    courses: Sequence[Course],
    out_path: str | Path,
    week_start: Optional[date] = None,
    weeks: Optional[int] = None,
) -> int:
    """
    Export sessions to an .ics file. Returns number of exported events.

    week_start is moved back to its Monday; default is next week's Monday.
    weeks limits the recurrence (COUNT); None repeats without end.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    monday = week_start or next_monday()
    monday = monday - timedelta(days=monday.weekday())
    names = {c.course_id: c.name for c in courses}

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//SmartSchedule//EN")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    count = 0
    for i, s in enumerate(sessions):
        day = normalize_day(s.day)
        if day is None:
            continue
        if session_range(s) is None:
            continue
        on = monday + timedelta(days=WEEKDAYS.index(day))

        try:
            dtstart = _dt_local(on, s.start)
            dtend = _dt_local(on, s.end)
        except ValueError:
            continue

        name = names.get(s.course_id, s.course_id)
        summary = f"{name} ({s.kind})" if s.kind and s.kind != "lecture" else name
        summary = summary or "SmartSchedule Session"
        uid = f"{s.course_id}-{dtstart}-{i}@smartschedule"

        rrule = "RRULE:FREQ=WEEKLY"
        if weeks:
            rrule += f";COUNT={weeks}"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(uid)}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{dtstart}")
        lines.append(f"DTEND:{dtend}")
        lines.append(rrule)
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if s.location:
            lines.append(f"LOCATION:{_ics_escape(s.location)}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
