import json
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from tutorschedule.binning import build_schedule
from tutorschedule.matching import CourseInfo
from tutorschedule.serialize import schedule_to_dict, write_schedule_json
from tutorschedule.shift import Shift


class TestSerialize(unittest.TestCase):
    def setUp(self) -> None:
        shifts = [Shift("ARC", 2, datetime(2022, 10, 18, 9), datetime(2022, 10, 18, 11), ("CS101",))]
        self.schedule, _ = build_schedule([CourseInfo("CS101"), CourseInfo("MATH121")], ["ARC"], shifts)

    def test_wire_shape(self) -> None:
        data = schedule_to_dict(self.schedule)
        self.assertEqual(len(data), 2)
        cs101 = data[0]
        self.assertEqual(cs101["course"], {"abbreviation": "CS101"})
        daily = cs101["locationSchedules"][0]["dailySchedules"]
        self.assertEqual([d["weekDay"] for d in daily], list(range(7)))
        self.assertEqual(daily[2]["intervals"], [{"start": "2022-10-18T09:00:00", "end": "2022-10-18T11:00:00"}])

    def test_write_without_empty_courses(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "schedule.json"
            n = write_schedule_json(self.schedule, out, include_empty=False)
            self.assertEqual(n, 1)
            data = json.loads(out.read_text(encoding="utf-8"))
            self.assertEqual([c["course"]["abbreviation"] for c in data], ["CS101"])


if __name__ == "__main__":
    unittest.main()
