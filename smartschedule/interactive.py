from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from rich.markup import escape

from smartschedule.export_ics import export_sessions_to_ics
from smartschedule.model import DIFFICULTIES, Course
from smartschedule.orchestrator import GenerateOutcome, ScheduleOrchestrator
from smartschedule.render import console, print_courses, print_preferences, print_schedule, print_workload
from smartschedule.state import AppState
from smartschedule.storage import load_courses, save_courses

DEFAULT_COURSE_FILE = "courses.json"


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    # prompts contain literal [..] hints, not markup
    return console.input(escape(msg))


def _prompt_int(msg: str, default: int, minimum: int = 0) -> Optional[int]:
    raw = _prompt(f"{msg} [{default}]: ").strip()
    if not raw:
        return default
    if not raw.isdecimal() or int(raw) < minimum:
        _println(f"Please enter a whole number >= {minimum}.")
        return None
    return int(raw)


def _prompt_time(msg: str, default: str) -> Optional[str]:
    raw = _prompt(f"{msg} [{default}]: ").strip()
    if not raw:
        return default
    parts = raw.split(":")
    if len(parts) != 2 or not all(p.isdecimal() for p in parts):
        _println("Please use HH:MM.")
        return None
    h, m = int(parts[0]), int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        _println("Please use HH:MM.")
        return None
    return f"{h:02d}:{m:02d}"


def run_interactive(state: AppState, orchestrator: ScheduleOrchestrator) -> None:
    """
    Interactive menu loop. All edits go through the AppState setters; the
    generate entry is the only place that talks to the AI service.
    """
    while True:
        _print_header(state)

        choice = _prompt(
            "\n[1] Add course\n"
            "[2] Edit course\n"
            "[3] Remove course\n"
            "[4] Preferences\n"
            "[5] Generate schedule\n"
            "[6] Timetable\n"
            "[7] Workload chart\n"
            "[8] Export .ics\n"
            "[9] Load / save course file\n"
            "[0] Exit\n"
            "Select: "
        ).strip()

        if choice == "0":
            _println("Bye.")
            return

        if choice == "1":
            _flow_add_course(state)
        elif choice == "2":
            _flow_edit_course(state)
        elif choice == "3":
            _flow_remove_course(state)
        elif choice == "4":
            _flow_preferences(state)
        elif choice == "5":
            _flow_generate(state, orchestrator)
        elif choice == "6":
            print_schedule(state.sessions, state.courses, state.summary)
        elif choice == "7":
            print_workload(state.sessions, state.courses)
        elif choice == "8":
            _flow_export(state)
        elif choice == "9":
            _flow_course_file(state)
        else:
            _println("Invalid choice.")


def _print_header(state: AppState) -> None:
    p = state.preferences
    _println("\n=== SmartSchedule (interactive) ===")
    _println(
        f"Courses: {len(state.courses)} | Day: {p.start_time}-{p.end_time} | "
        f"Lunch: {p.lunch_duration} min | Breaks: {'yes' if p.include_breaks else 'no'}"
    )
    if state.has_schedule:
        _println(f"Schedule: {len(state.sessions)} sessions")
    if state.error:
        _println(f"[bold red]![/] [red]{escape(state.error)}[/]")


def _ask_course_fields(base: Optional[Course] = None) -> Optional[dict]:
    """
    Prompt for the editable course fields. Returns None if the input was
    invalid or the user left the name blank on a new course.
    """
    default_name = base.name if base else ""
    label = f"Course name [{default_name}]: " if base else "Course name [blank = back]: "
    name = _prompt(label).strip() or default_name
    if not name:
        return None

    credits = _prompt_int("Credits", base.credits if base else 3, minimum=0)
    if credits is None:
        return None
    per_week = _prompt_int("Sessions per week", base.sessions_per_week if base else 2, minimum=1)
    if per_week is None:
        return None
    minutes = _prompt_int("Minutes per session", base.session_minutes if base else 60, minimum=1)
    if minutes is None:
        return None

    default_diff = base.difficulty if base else "medium"
    difficulty = _prompt(f"Difficulty ({'/'.join(DIFFICULTIES)}) [{default_diff}]: ").strip().lower() or default_diff
    if difficulty not in DIFFICULTIES:
        _println("Unknown difficulty.")
        return None

    return {
        "name": name,
        "credits": credits,
        "sessions_per_week": per_week,
        "session_minutes": minutes,
        "difficulty": difficulty,
    }


def _flow_add_course(state: AppState) -> None:
    while True:
        fields = _ask_course_fields()
        if fields is None:
            return

        course = Course(**fields)
        state.add_course(course)
        _println(f"Added: {escape(course.name)} ({escape(course.course_id)})")

        more = _prompt("Add another course? [Y/n]: ").strip().lower()
        if more == "n":
            return


def _pick_course(state: AppState, action: str) -> Optional[Course]:
    if not state.courses:
        _println("No courses yet.")
        return None

    print_courses(state.courses)
    pick = _prompt(f"Enter number to {action} (or blank to cancel): ").strip()
    if not pick:
        return None
    if not pick.isdecimal():
        _println("Not a number.")
        return None
    idx = int(pick)
    if not (1 <= idx <= len(state.courses)):
        _println("Out of range.")
        return None
    return state.courses[idx - 1]


def _flow_edit_course(state: AppState) -> None:
    course = _pick_course(state, "edit")
    if course is None:
        return
    fields = _ask_course_fields(course)
    if fields is None:
        return
    state.update_course(course.course_id, **fields)
    _println(f"Updated: {escape(fields['name'])}")


def _flow_remove_course(state: AppState) -> None:
    while True:
        course = _pick_course(state, "remove")
        if course is None:
            return
        state.remove_course(course.course_id)
        _println(f"Removed: {escape(course.name)}")

        if not state.courses:
            return
        more = _prompt("Remove another course? [Y/n]: ").strip().lower()
        if more == "n":
            return


def _flow_preferences(state: AppState) -> None:
    print_preferences(state.preferences)
    p = state.preferences

    start = _prompt_time("Day starts at", p.start_time)
    if start is None:
        return
    end = _prompt_time("Day ends at", p.end_time)
    if end is None:
        return
    lunch = _prompt_int("Lunch duration (minutes)", p.lunch_duration, minimum=0)
    if lunch is None:
        return
    breaks_in = _prompt(f"Include breaks between sessions? [{'Y/n' if p.include_breaks else 'y/N'}]: ").strip().lower()
    include_breaks = p.include_breaks if not breaks_in else breaks_in != "n"

    if end <= start:
        _println("[yellow]Note: the day ends before it starts; the AI may not find a sensible plan.[/]")

    state.update_preferences(start_time=start, end_time=end, lunch_duration=lunch, include_breaks=include_breaks)
    _println("Preferences saved.")


def _flow_generate(state: AppState, orchestrator: ScheduleOrchestrator) -> None:
    with console.status("Generating...", spinner="dots"):
        outcome = asyncio.run(orchestrator.generate())

    if outcome is GenerateOutcome.SUCCEEDED:
        _println(f"[green]Schedule ready:[/] {len(state.sessions)} sessions.")
        print_schedule(state.sessions, state.courses, state.summary)
    elif outcome is GenerateOutcome.IGNORED:
        _println("A schedule is already being generated.")
    else:
        _println(f"[red]{escape(state.error)}[/]")


def _flow_export(state: AppState) -> None:
    if not state.has_schedule:
        _println("No schedule generated yet.")
        return

    downloads = Path.home() / "Downloads"
    default_name = "smartschedule.ics"

    out_in = _prompt(f"Please enter desired file name, default is [{default_name}]: ").strip()
    out_path = downloads / (out_in or default_name)

    if out_path.suffix.lower() != ".ics":
        out_path = out_path.with_suffix(".ics")

    weeks = _prompt_int("Repeat for how many weeks (0 = no end)", 14, minimum=0)
    if weeks is None:
        return

    n = export_sessions_to_ics(state.sessions, state.courses, out_path, weeks=weeks or None)
    _println(f"\nExported {n} weekly sessions.")
    _println(f"Saved to: {escape(str(out_path.resolve()))}")


def _flow_course_file(state: AppState) -> None:
    action = _prompt("[l] Load  [s] Save  [blank = back]: ").strip().lower()
    if action not in ("l", "s"):
        return

    path_in = _prompt(f"Course file [{DEFAULT_COURSE_FILE}]: ").strip()
    path = Path(path_in or DEFAULT_COURSE_FILE)

    if action == "s":
        save_courses(state.courses, path)
        _println(f"Saved {len(state.courses)} courses to: {escape(str(path.resolve()))}")
        return

    if not path.exists():
        _println(f"File not found: {escape(str(path))}")
        return
    courses = load_courses(path)
    if not courses:
        _println("No courses found in that file.")
        return
    state.set_courses(courses)
    _println(f"Loaded {len(courses)} courses.")
