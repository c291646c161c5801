import unittest
from datetime import datetime, timedelta, timezone

from tutorschedule.shift import InvalidShiftError, Shift, shift_from_event, split_course_tags, week_day_of


def make_event(summary: str, start: str, end: str) -> dict:
    return {"summary": summary, "status": "confirmed", "start": {"dateTime": start}, "end": {"dateTime": end}}


class TestSplitCourseTags(unittest.TestCase):
    def test_default_delimiters(self) -> None:
        self.assertEqual(split_course_tags("CS101 / MATH 121, CS201 & ECON-UA1"), ["CS101", "MATH 121", "CS201", "ECON-UA1"])

    def test_custom_delimiters(self) -> None:
        self.assertEqual(split_course_tags("CS101 | CS102", delimiters=["|"]), ["CS101", "CS102"])
        # '/' is not a delimiter here
        self.assertEqual(split_course_tags("CS101/CS102", delimiters=["|"]), ["CS101/CS102"])

    def test_multi_character_delimiter(self) -> None:
        self.assertEqual(split_course_tags("CS101 and CS102", delimiters=[" and "]), ["CS101", "CS102"])

    def test_empty_parts_dropped(self) -> None:
        self.assertEqual(split_course_tags(" / CS101 // "), ["CS101"])
        self.assertEqual(split_course_tags(""), [])

    def test_no_delimiters_keeps_whole_title(self) -> None:
        self.assertEqual(split_course_tags("  CS101 / CS102 ", delimiters=[]), ["CS101 / CS102"])


class TestShiftFromEvent(unittest.TestCase):
    def test_normal_event(self) -> None:
        event = make_event("CS101 / MATH121", "2022-10-18T09:00:00-04:00", "2022-10-18T11:00:00-04:00")
        shift = shift_from_event(event, "ARC")

        self.assertEqual(shift.location, "ARC")
        # 2022-10-18 is a Tuesday, Sunday = 0
        self.assertEqual(shift.week_day, 2)
        self.assertEqual(shift.courses_given, ("CS101", "MATH121"))
        self.assertEqual(shift.end - shift.start, timedelta(hours=2))
        self.assertEqual(shift.start.utcoffset(), timedelta(hours=-4))

    def test_utc_suffix(self) -> None:
        event = make_event("CS101", "2022-10-16T13:00:00Z", "2022-10-16T14:00:00Z")
        shift = shift_from_event(event, "UHall")
        self.assertEqual(shift.start, datetime(2022, 10, 16, 13, 0, tzinfo=timezone.utc))
        self.assertEqual(shift.week_day, 0)

    def test_missing_title_gives_empty_tags(self) -> None:
        event = {"start": {"dateTime": "2022-10-18T09:00:00"}, "end": {"dateTime": "2022-10-18T10:00:00"}}
        self.assertEqual(shift_from_event(event, "ARC").courses_given, ())

    def test_end_before_start_rejected(self) -> None:
        event = make_event("CS101", "2022-10-18T11:00:00", "2022-10-18T09:00:00")
        with self.assertRaises(InvalidShiftError):
            shift_from_event(event, "ARC")

    def test_zero_length_rejected(self) -> None:
        event = make_event("CS101", "2022-10-18T11:00:00", "2022-10-18T11:00:00")
        with self.assertRaises(InvalidShiftError):
            shift_from_event(event, "ARC")

    def test_all_day_event_rejected(self) -> None:
        event = {"summary": "CS101", "start": {"date": "2022-10-18"}, "end": {"date": "2022-10-19"}}
        with self.assertRaises(InvalidShiftError):
            shift_from_event(event, "ARC")

    def test_garbage_timestamp_rejected(self) -> None:
        event = make_event("CS101", "tomorrow", "2022-10-18T11:00:00")
        with self.assertRaises(InvalidShiftError):
            shift_from_event(event, "ARC")

    def test_mixed_offsets_rejected(self) -> None:
        event = make_event("CS101", "2022-10-18T09:00:00", "2022-10-18T11:00:00+00:00")
        with self.assertRaises(InvalidShiftError):
            shift_from_event(event, "ARC")

    def test_non_mapping_is_type_error(self) -> None:
        with self.assertRaises(TypeError):
            shift_from_event(["CS101"], "ARC")  # type: ignore[arg-type]


class TestShift(unittest.TestCase):
    def test_invalid_week_day(self) -> None:
        with self.assertRaises(InvalidShiftError):
            Shift("ARC", 7, datetime(2022, 10, 18, 9), datetime(2022, 10, 18, 10))

    def test_tags_stored_as_tuple(self) -> None:
        shift = Shift("ARC", 2, datetime(2022, 10, 18, 9), datetime(2022, 10, 18, 10), ["CS101"])  # type: ignore[arg-type]
        self.assertEqual(shift.courses_given, ("CS101",))

    def test_week_day_of(self) -> None:
        self.assertEqual(week_day_of(datetime(2022, 10, 16)), 0)
        self.assertEqual(week_day_of(datetime(2022, 10, 22)), 6)


if __name__ == "__main__":
    unittest.main()
