import unittest

from smartschedule.model import ClassSession, Course, SchedulePreferences, normalize_day


class TestClassSessionPayload(unittest.TestCase):
    def test_short_keys(self) -> None:
        s = ClassSession.from_payload({"course": "c1", "day": "Mon", "start": "08:00", "end": "09:00"})
        self.assertEqual(s.course_id, "c1")
        self.assertEqual(s.day, "Mon")
        self.assertEqual(s.start, "08:00")
        self.assertEqual(s.end, "09:00")
        self.assertEqual(s.kind, "lecture")
        self.assertIsNone(s.location)
        self.assertEqual(s.extra, {})

    def test_camel_case_keys_and_extra(self) -> None:
        s = ClassSession.from_payload(
            {
                "courseId": "c2",
                "day": "Wednesday",
                "startTime": "13:00",
                "endTime": "14:30",
                "type": "study",
                "room": "B12",
            }
        )
        self.assertEqual(s.course_id, "c2")
        # day is stored as returned
        self.assertEqual(s.day, "Wednesday")
        self.assertEqual(s.kind, "study")
        self.assertEqual(s.extra, {"room": "B12"})

        payload = s.to_payload()
        self.assertEqual(payload["startTime"], "13:00")
        self.assertEqual(payload["room"], "B12")


class TestCourse(unittest.TestCase):
    def test_payload_roundtrip_keeps_extra(self) -> None:
        c = Course.from_payload({"id": "c1", "name": "Algebra", "credits": 5, "color": "#ff0000"})
        self.assertEqual(c.course_id, "c1")
        self.assertEqual(c.credits, 5)
        self.assertEqual(c.extra, {"color": "#ff0000"})

        payload = c.to_payload()
        self.assertEqual(payload["id"], "c1")
        self.assertEqual(payload["sessionsPerWeek"], 2)
        self.assertEqual(payload["color"], "#ff0000")

    def test_missing_name_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Course.from_payload({"id": "c1"})

    def test_generated_id_and_unknown_difficulty(self) -> None:
        c = Course.from_payload({"name": "Art", "difficulty": "extreme"})
        self.assertTrue(c.course_id)
        self.assertEqual(c.difficulty, "medium")


class TestPreferences(unittest.TestCase):
    def test_payload(self) -> None:
        p = SchedulePreferences()
        self.assertEqual(
            p.to_payload(),
            {"startTime": "08:00", "endTime": "15:00", "lunchDuration": 45, "includeBreaks": True},
        )

    def test_negative_lunch_rejected(self) -> None:
        with self.assertRaises(ValueError):
            SchedulePreferences(lunch_duration=-1)

    def test_end_before_start_is_not_checked(self) -> None:
        p = SchedulePreferences(start_time="15:00", end_time="08:00")
        self.assertEqual(p.end_time, "08:00")


class TestNormalizeDay(unittest.TestCase):
    def test_aliases(self) -> None:
        self.assertEqual(normalize_day("Monday"), "Mon")
        self.assertEqual(normalize_day(" thu "), "Thu")
        self.assertEqual(normalize_day("FRI"), "Fri")
        self.assertIsNone(normalize_day("Someday"))
        self.assertIsNone(normalize_day(""))


if __name__ == "__main__":
    unittest.main()
