"""
Tests for the generate request lifecycle.

The scheduling service is replaced by small async fakes, so these tests never
touch the network. They check:
- empty course list is rejected before any service call
- busy flag goes False -> True -> False around the call
- success stores sessions + summary and clears the error
- failure sets the message (or the generic one) and keeps the old schedule
- a second trigger while pending is ignored
"""

import asyncio
import unittest

from smartschedule.model import ClassSession, Course, GenerationResult, SchedulePreferences
from smartschedule.orchestrator import (
    EMPTY_COURSES_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    GenerateOutcome,
    ScheduleOrchestrator,
    failure_message,
)
from smartschedule.state import AppState


def _algebra_result() -> GenerationResult:
    session = ClassSession.from_payload({"course": "c1", "day": "Mon", "start": "08:00", "end": "09:00"})
    return GenerationResult(sessions=(session,), summary="Balanced plan")


class FakeService:
    def __init__(self, result=None, error=None, state=None):
        self.result = result
        self.error = error
        self.state = state
        self.calls = []
        self.busy_during_call = []

    async def __call__(self, courses, preferences):
        self.calls.append((list(courses), preferences))
        if self.state is not None:
            self.busy_during_call.append(self.state.busy)
        if self.error is not None:
            raise self.error
        return self.result


class TestOrchestrator(unittest.IsolatedAsyncioTestCase):
    def _state(self) -> AppState:
        state = AppState()
        state.add_course(Course(name="Algebra", course_id="c1"))
        state.set_preferences(
            SchedulePreferences(start_time="08:00", end_time="15:00", lunch_duration=45, include_breaks=True)
        )
        return state

    async def test_empty_courses_rejected_without_call(self) -> None:
        state = AppState()
        service = FakeService(result=_algebra_result())
        outcome = await ScheduleOrchestrator(state, service).generate()

        self.assertIs(outcome, GenerateOutcome.REJECTED)
        self.assertEqual(state.error, EMPTY_COURSES_MESSAGE)
        self.assertEqual(state.error, "Please add at least one course to generate a schedule.")
        self.assertEqual(service.calls, [])
        self.assertFalse(state.busy)
        self.assertEqual(state.sessions, [])

    async def test_success_stores_result(self) -> None:
        state = self._state()
        service = FakeService(result=_algebra_result(), state=state)

        self.assertFalse(state.busy)
        outcome = await ScheduleOrchestrator(state, service).generate()

        self.assertIs(outcome, GenerateOutcome.SUCCEEDED)
        self.assertEqual(service.busy_during_call, [True])
        self.assertFalse(state.busy)
        self.assertIsNone(state.error)
        self.assertEqual(len(state.sessions), 1)
        s = state.sessions[0]
        self.assertEqual((s.course_id, s.day, s.start, s.end), ("c1", "Mon", "08:00", "09:00"))
        self.assertEqual(state.summary, "Balanced plan")

    async def test_service_called_once_with_current_inputs(self) -> None:
        state = self._state()
        service = FakeService(result=_algebra_result())
        await ScheduleOrchestrator(state, service).generate()

        self.assertEqual(len(service.calls), 1)
        courses, prefs = service.calls[0]
        self.assertEqual(courses, state.courses)
        self.assertEqual(prefs, state.preferences)

    async def test_success_clears_previous_error(self) -> None:
        state = self._state()
        state.error = "old problem"
        await ScheduleOrchestrator(state, FakeService(result=_algebra_result())).generate()
        self.assertIsNone(state.error)

    async def test_failure_uses_exception_message_and_keeps_schedule(self) -> None:
        state = self._state()
        orch = ScheduleOrchestrator(state, FakeService(result=_algebra_result()))
        await orch.generate()
        before = list(state.sessions)

        orch.service = FakeService(error=RuntimeError("Quota exceeded"))
        outcome = await orch.generate()

        self.assertIs(outcome, GenerateOutcome.FAILED)
        self.assertEqual(state.error, "Quota exceeded")
        self.assertEqual(state.sessions, before)
        self.assertEqual(state.summary, "Balanced plan")
        self.assertFalse(state.busy)

    async def test_failure_without_message_uses_generic(self) -> None:
        state = self._state()
        outcome = await ScheduleOrchestrator(state, FakeService(error=RuntimeError())).generate()

        self.assertIs(outcome, GenerateOutcome.FAILED)
        self.assertEqual(state.error, GENERIC_FAILURE_MESSAGE)
        self.assertEqual(state.error, "Something went wrong while generating the schedule.")
        self.assertEqual(state.sessions, [])
        self.assertFalse(state.busy)

    async def test_failure_can_clear_schedule(self) -> None:
        state = self._state()
        orch = ScheduleOrchestrator(state, FakeService(result=_algebra_result()), keep_schedule_on_failure=False)
        await orch.generate()
        self.assertTrue(state.has_schedule)

        orch.service = FakeService(error=ValueError("bad"))
        await orch.generate()

        self.assertFalse(state.has_schedule)
        self.assertEqual(state.summary, "")
        self.assertEqual(state.error, "bad")

    async def test_repeated_generation_is_stable(self) -> None:
        state = self._state()
        orch = ScheduleOrchestrator(state, FakeService(result=_algebra_result()))
        await orch.generate()
        first = (list(state.sessions), state.summary)
        await orch.generate()
        self.assertEqual((list(state.sessions), state.summary), first)

    async def test_trigger_while_pending_is_ignored(self) -> None:
        state = self._state()
        release = asyncio.Event()
        calls = []

        async def slow_service(courses, preferences):
            calls.append(courses)
            await release.wait()
            return _algebra_result()

        orch = ScheduleOrchestrator(state, slow_service)
        first = asyncio.create_task(orch.generate())
        await asyncio.sleep(0)
        self.assertTrue(state.busy)

        second = await orch.generate()
        self.assertIs(second, GenerateOutcome.IGNORED)

        release.set()
        self.assertIs(await first, GenerateOutcome.SUCCEEDED)
        self.assertEqual(len(calls), 1)
        self.assertFalse(state.busy)

    async def test_snapshot_is_isolated_from_later_edits(self) -> None:
        state = self._state()
        service = FakeService(result=_algebra_result())
        await ScheduleOrchestrator(state, service).generate()

        state.update_course("c1", name="Geometry")
        courses, _ = service.calls[0]
        self.assertEqual(courses[0].name, "Algebra")


class TestFailureMessage(unittest.TestCase):
    def test_blank_message_falls_back(self) -> None:
        self.assertEqual(failure_message(RuntimeError("   ")), GENERIC_FAILURE_MESSAGE)

    def test_message_is_kept(self) -> None:
        self.assertEqual(failure_message(RuntimeError("Network down")), "Network down")


if __name__ == "__main__":
    unittest.main()
