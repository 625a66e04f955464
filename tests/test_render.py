import unittest

from rich.console import Console

from smartschedule.model import ClassSession, Course, SchedulePreferences
from smartschedule.render import print_courses, print_preferences, print_schedule, print_workload


def _console() -> Console:
    return Console(record=True, width=160, color_system=None)


class TestRender(unittest.TestCase):
    def setUp(self) -> None:
        self.courses = [Course(name="Algebra", course_id="c1"), Course(name="Biology [lab]", course_id="c2")]
        self.sessions = [
            ClassSession(course_id="c1", day="Mon", start="10:00", end="11:00"),
            ClassSession(course_id="c2", day="Monday", start="10:30", end="11:30"),
            ClassSession(course_id="c1", day="Wed", start="08:00", end="09:00"),
        ]

    def test_schedule_view(self) -> None:
        out = _console()
        print_schedule(self.sessions, self.courses, "Balanced plan", out=out)
        text = out.export_text()
        self.assertIn("Weekly timetable", text)
        self.assertIn("Algebra", text)
        self.assertIn("Biology [lab]", text)
        self.assertIn("Balanced plan", text)
        self.assertIn("Overlapping sessions: 1", text)

    def test_schedule_view_empty(self) -> None:
        out = _console()
        print_schedule([], self.courses, out=out)
        self.assertIn("No schedule generated yet.", out.export_text())

    def test_bracketed_service_text_is_printed_literally(self) -> None:
        sessions = [ClassSession(course_id="[/]", day="Tue", start="[b]9:00", end="10:00[/]", kind="[/]")]
        out = _console()
        print_schedule(sessions, self.courses, "Summary [/] [bold]", out=out)
        text = out.export_text()
        self.assertIn("([/])", text)
        self.assertIn("[b]9:00-10:00[/]", text)
        self.assertIn("Summary [/] [bold]", text)

    def test_sessions_sorted_by_clock_time(self) -> None:
        courses = [Course(name="Late", course_id="late"), Course(name="Early", course_id="early")]
        sessions = [
            ClassSession(course_id="late", day="Mon", start="10:00", end="11:00"),
            ClassSession(course_id="early", day="Mon", start="9:00", end="9:45"),
        ]
        out = _console()
        print_schedule(sessions, courses, out=out)
        text = out.export_text()
        self.assertLess(text.index("Early"), text.index("Late"))

    def test_workload_chart(self) -> None:
        out = _console()
        print_workload(self.sessions, self.courses, out=out)
        text = out.export_text()
        self.assertIn("Workload per day", text)
        self.assertIn("Workload per course", text)
        self.assertIn("Total scheduled: 3h", text)

    def test_courses_and_preferences(self) -> None:
        out = _console()
        print_courses(self.courses, out=out)
        print_preferences(SchedulePreferences(lunch_duration=30), out=out)
        text = out.export_text()
        self.assertIn("c1", text)
        self.assertIn("30 min", text)


if __name__ == "__main__":
    unittest.main()
