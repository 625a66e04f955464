"""
CLI (Command Line Interface).

    smartschedule generate --courses courses.json [--start 08:00] [--end 15:00]
                           [--lunch 45] [--no-breaks] [--ics out.ics] [--json out.json]
    smartschedule interactive [--courses courses.json]

Note:
- The interactive UI lives in smartschedule/interactive.py
- generate runs exactly one generate cycle and exits with 0 on success,
  1 if the schedule could not be generated
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

from rich.logging import RichHandler

from smartschedule.config import load_settings
from smartschedule.export_ics import export_sessions_to_ics
from smartschedule.gemini import GeminiScheduleService
from smartschedule.model import SchedulePreferences
from smartschedule.orchestrator import GenerateOutcome, ScheduleOrchestrator
from smartschedule.render import console, print_schedule, print_workload
from smartschedule.state import AppState
from smartschedule.storage import load_courses

logger = logging.getLogger(__name__)


def _hhmm(value: str) -> str:
    """
    argparse type for 'HH:MM' times (normalized to two-digit hours).
    """
    parts = value.strip().split(":")
    try:
        if len(parts) != 2:
            raise ValueError
        h, m = int(parts[0]), int(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid time {value!r}, expected HH:MM")
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise argparse.ArgumentTypeError(f"invalid time {value!r}, expected HH:MM")
    return f"{h:02d}:{m:02d}"


def _minutes(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid minutes {value!r}")
    if n < 0:
        raise argparse.ArgumentTypeError("minutes must not be negative")
    return n


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_state(args: argparse.Namespace) -> AppState:
    state = AppState()
    if args.courses:
        state.set_courses(load_courses(args.courses))
    return state


def _cmd_generate(args: argparse.Namespace) -> int:
    """
    Load courses, run one generate cycle, print the result.
    """
    path = Path(args.courses)
    if not path.exists():
        console.print(f"Course file not found: {path}", markup=False)
        return 1

    state = _build_state(args)
    state.set_preferences(
        SchedulePreferences(
            start_time=args.start,
            end_time=args.end,
            lunch_duration=args.lunch,
            include_breaks=not args.no_breaks,
        )
    )

    orchestrator = ScheduleOrchestrator(state, GeminiScheduleService(load_settings()))
    with console.status("Generating...", spinner="dots"):
        outcome = asyncio.run(orchestrator.generate())

    if outcome is not GenerateOutcome.SUCCEEDED:
        console.print(state.error or "Schedule was not generated.", markup=False)
        return 1

    print_schedule(state.sessions, state.courses, state.summary)
    print_workload(state.sessions, state.courses)

    if args.json:
        out = Path(args.json)
        out.parent.mkdir(parents=True, exist_ok=True)
        payload = {"sessions": [s.to_payload() for s in state.sessions], "summary": state.summary}
        out.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        console.print(f"Saved schedule to: {out}", markup=False)

    if args.ics:
        n = export_sessions_to_ics(state.sessions, state.courses, args.ics)
        console.print(f"Exported {n} weekly sessions to: {args.ics}", markup=False)

    return 0


def _cmd_interactive(args: argparse.Namespace) -> int:
    from smartschedule.interactive import run_interactive

    state = _build_state(args)
    orchestrator = ScheduleOrchestrator(
        state,
        GeminiScheduleService(load_settings()),
        keep_schedule_on_failure=not args.clear_on_failure,
    )
    run_interactive(state, orchestrator)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="smartschedule", description="SmartSchedule – AI weekly timetable planner")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_gen = sub.add_parser("generate", help="Generate a schedule from a course file")
    p_gen.add_argument("--courses", "-c", type=str, required=True, help="Course file (JSON)")
    p_gen.add_argument("--start", type=_hhmm, default="08:00", help="Day start (HH:MM)")
    p_gen.add_argument("--end", type=_hhmm, default="15:00", help="Day end (HH:MM)")
    p_gen.add_argument("--lunch", type=_minutes, default=45, help="Lunch duration in minutes")
    p_gen.add_argument("--no-breaks", action="store_true", help="Allow back-to-back sessions")
    p_gen.add_argument("--ics", type=str, default=None, help="Also export to this .ics file")
    p_gen.add_argument("--json", type=str, default=None, help="Also save the raw schedule as JSON")

    p_int = sub.add_parser("interactive", help="Interactive menu mode")
    p_int.add_argument("--courses", "-c", type=str, default=None, help="Preload a course file (JSON)")
    p_int.add_argument(
        "--clear-on-failure", action="store_true", help="Hide the previous schedule when a regeneration fails"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "generate":
        raise SystemExit(_cmd_generate(args))
    if args.command == "interactive":
        raise SystemExit(_cmd_interactive(args))

    raise SystemExit(2)
