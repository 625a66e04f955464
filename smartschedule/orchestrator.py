"""
Generate request lifecycle.

The orchestrator mediates exactly one request/response cycle with the
scheduling service per "Generate" trigger:

    Idle -> Validating -> Idle                      (no courses: rejected)
    Idle -> Validating -> Pending -> Succeeded -> Idle
    Idle -> Validating -> Pending -> Failed    -> Idle

The busy flag is cleared on every path. There is no retry, no timeout and no
cancellation here. A trigger that arrives while a request is pending is
ignored (single flight).
"""

from __future__ import annotations

import enum
import logging
from dataclasses import replace
from typing import Awaitable, Callable, Sequence

from smartschedule.model import Course, GenerationResult, SchedulePreferences
from smartschedule.state import AppState

logger = logging.getLogger(__name__)

EMPTY_COURSES_MESSAGE = "Please add at least one course to generate a schedule."
GENERIC_FAILURE_MESSAGE = "Something went wrong while generating the schedule."

ScheduleService = Callable[[Sequence[Course], SchedulePreferences], Awaitable[GenerationResult]]


class GenerateOutcome(enum.Enum):
    REJECTED = "rejected"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    IGNORED = "ignored"


def failure_message(exc: BaseException) -> str:
    """
    User-facing text for a failed generation: the exception's own message
    if it has one, the generic message otherwise.
    """
    try:
        msg = str(exc).strip()
    except Exception:
        msg = ""
    return msg or GENERIC_FAILURE_MESSAGE


class ScheduleOrchestrator:
    """
    Drives one AppState through generate cycles against a scheduling service.

    keep_schedule_on_failure controls what a failed regeneration does to the
    previously generated schedule: True keeps it visible (stale but valid),
    False clears it together with setting the error.
    """

    def __init__(self, state: AppState, service: ScheduleService, keep_schedule_on_failure: bool = True):
        self.state = state
        self.service = service
        self.keep_schedule_on_failure = keep_schedule_on_failure

    async def generate(self) -> GenerateOutcome:
        state = self.state

        if state.busy:
            logger.debug("Generate ignored: request already in flight")
            return GenerateOutcome.IGNORED

        if not state.courses:
            logger.debug("Generate rejected: no courses")
            state.error = EMPTY_COURSES_MESSAGE
            return GenerateOutcome.REJECTED

        courses = [replace(c, extra=dict(c.extra)) for c in state.courses]
        preferences = replace(state.preferences)

        state.error = None
        state.busy = True
        logger.debug("Generate pending: %d course(s)", len(courses))

        try:
            result = await self.service(courses, preferences)
        except Exception as exc:
            logger.info("Schedule generation failed: %s", exc)
            state.error = failure_message(exc)
            if not self.keep_schedule_on_failure:
                state.clear_result()
            return GenerateOutcome.FAILED
        finally:
            state.busy = False

        state.store_result(result)
        state.error = None
        logger.debug("Generate succeeded: %d session(s)", len(result.sessions))
        return GenerateOutcome.SUCCEEDED
