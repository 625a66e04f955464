"""
Terminal views.

Pure renderers of AppState: they read courses / preferences / results and
print rich tables. Nothing in here changes state.
"""

from __future__ import annotations

from typing import Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from smartschedule.conflicts import find_overlaps, session_range
from smartschedule.model import WEEKDAYS, ClassSession, Course, SchedulePreferences, normalize_day
from smartschedule.workload import minutes_per_course, minutes_per_day, total_minutes

console = Console()

BAR_WIDTH = 30

_DIFFICULTY_STYLE = {"easy": "green", "medium": "yellow", "hard": "red"}


def _course_name(course_id: str, courses: Sequence[Course]) -> str:
    for c in courses:
        if c.course_id == course_id:
            return c.name
    return course_id


def _fmt_minutes(m: int) -> str:
    h, rest = divmod(m, 60)
    if h and rest:
        return f"{h}h {rest:02d}m"
    if h:
        return f"{h}h"
    return f"{rest}m"


def _start_key(session: ClassSession) -> tuple[int, str]:
    # unparsable times go last
    rng = session_range(session)
    return (rng[0] if rng else 24 * 60, session.start)


def session_line(session: ClassSession, courses: Sequence[Course]) -> str:
    bits = [escape(f"{session.start}-{session.end}"), f"[bold]{escape(_course_name(session.course_id, courses))}[/]"]
    if session.kind and session.kind != "lecture":
        bits.append(escape(f"({session.kind})"))
    if session.location:
        bits.append(f"@ {escape(session.location)}")
    return " ".join(bits)


def print_courses(courses: Sequence[Course], out: Optional[Console] = None) -> None:
    out = out or console
    if not courses:
        out.print("No courses yet.")
        return

    table = Table(title="Courses", box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Credits", justify="right")
    table.add_column("Sessions/week", justify="right")
    table.add_column("Minutes", justify="right")
    table.add_column("Difficulty")
    for i, c in enumerate(courses, start=1):
        style = _DIFFICULTY_STYLE.get(c.difficulty, "white")
        table.add_row(
            str(i),
            escape(c.course_id),
            escape(c.name),
            str(c.credits),
            str(c.sessions_per_week),
            str(c.session_minutes),
            f"[{style}]{c.difficulty}[/]",
        )
    out.print(table)


def print_preferences(preferences: SchedulePreferences, out: Optional[Console] = None) -> None:
    out = out or console
    table = Table(title="Preferences", box=box.SIMPLE, show_header=False)
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("Day starts", preferences.start_time)
    table.add_row("Day ends", preferences.end_time)
    table.add_row("Lunch", f"{preferences.lunch_duration} min")
    table.add_row("Breaks", "yes" if preferences.include_breaks else "no")
    out.print(table)


def print_schedule(
    sessions: Sequence[ClassSession], courses: Sequence[Course], summary: str = "", out: Optional[Console] = None
) -> None:
    """
    Weekly timetable: one column per weekday, sessions sorted by start time,
    followed by the AI summary and any overlap warnings.
    """
    out = out or console
    if not sessions:
        out.print("No schedule generated yet.")
        return

    buckets: dict[str, list[ClassSession]] = {d: [] for d in WEEKDAYS[:5]}
    unplaced: list[ClassSession] = []
    for s in sessions:
        day = normalize_day(s.day)
        if day is None:
            unplaced.append(s)
            continue
        buckets.setdefault(day, []).append(s)

    days = [d for d in WEEKDAYS if d in buckets]
    for d in days:
        buckets[d].sort(key=_start_key)

    table = Table(title="Weekly timetable", box=box.SIMPLE)
    for day in days:
        table.add_column(day)
    max_len = max(len(buckets[d]) for d in days)
    for r in range(max_len):
        row = []
        for day in days:
            row.append(session_line(buckets[day][r], courses) if r < len(buckets[day]) else "")
        table.add_row(*row)
    out.print(table)

    if unplaced:
        out.print("[yellow]Sessions with an unknown day:[/]")
        for s in unplaced:
            out.print(f"  - {escape(s.day or '?')}: {session_line(s, courses)}")

    if summary:
        out.print(Panel(escape(summary), title="AI summary", border_style="magenta"))

    overlaps = find_overlaps(sessions)
    if overlaps:
        out.print(f"[red]Overlapping sessions: {len(overlaps)}[/]")
        for a, b in overlaps:
            out.print(f"  - {normalize_day(a.day)}: {session_line(a, courses)}  <->  {session_line(b, courses)}")


def _bar(value: int, peak: int) -> str:
    if peak <= 0:
        return ""
    n = round(BAR_WIDTH * value / peak)
    return "█" * n


def print_workload(sessions: Sequence[ClassSession], courses: Sequence[Course], out: Optional[Console] = None) -> None:
    out = out or console
    if not sessions:
        out.print("No schedule generated yet.")
        return

    per_day = minutes_per_day(sessions)
    peak = max(per_day.values(), default=0)
    table = Table(title="Workload per day", box=box.SIMPLE)
    table.add_column("Day")
    table.add_column("Load")
    table.add_column("Time", justify="right")
    for day, minutes in per_day.items():
        table.add_row(day, f"[cyan]{_bar(minutes, peak)}[/]", _fmt_minutes(minutes))
    out.print(table)

    per_course = minutes_per_course(sessions)
    peak = max(per_course.values(), default=0)
    table = Table(title="Workload per course", box=box.SIMPLE)
    table.add_column("Course")
    table.add_column("Load")
    table.add_column("Time", justify="right")
    for cid, minutes in per_course.items():
        table.add_row(escape(_course_name(cid, courses)), f"[magenta]{_bar(minutes, peak)}[/]", _fmt_minutes(minutes))
    out.print(table)

    out.print(f"Total scheduled: [bold]{_fmt_minutes(total_minutes(sessions))}[/]")
