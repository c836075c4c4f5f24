"""
Unit tests for group schedules.
"""

import unittest
import sys
import os
from datetime import datetime, timezone

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from errors import PreconditionError
from group_schedule import next_movie_night, parse_time, sunday_based_weekday, validate_schedule
from movie_models import Group


def weekly(day, time="20:00"):
    return Group(id="g1", name="Weekly", schedule_type="recurring", schedule_time=time, schedule_day=day)


class TestValidation(unittest.TestCase):

    def test_parse_time(self):
        self.assertEqual(parse_time("07:05"), (7, 5))
        self.assertEqual(parse_time("23:59"), (23, 59))
        for bad in ["24:00", "7:05", "12:60", "", None]:
            with self.assertRaises(PreconditionError):
                parse_time(bad)

    def test_validate_schedule(self):
        validate_schedule("recurring", "20:00", schedule_day=0)
        validate_schedule("oneoff", "20:00", schedule_date=datetime(2024, 5, 1))

        with self.assertRaises(PreconditionError):
            validate_schedule("monthly", "20:00", schedule_day=1)
        with self.assertRaises(PreconditionError):
            validate_schedule("recurring", "20:00", schedule_day=7)
        with self.assertRaises(PreconditionError):
            validate_schedule("recurring", "20:00")
        with self.assertRaises(PreconditionError):
            validate_schedule("oneoff", "20:00", schedule_date="2024-05-01")


class TestNextMovieNight(unittest.TestCase):

    def setUp(self):
        # Wednesday evening
        self.now = datetime(2024, 3, 6, 18, 0, tzinfo=timezone.utc)

    def test_sunday_based_weekday(self):
        self.assertEqual(sunday_based_weekday(datetime(2024, 3, 3)), 0)
        self.assertEqual(sunday_based_weekday(self.now), 3)
        self.assertEqual(sunday_based_weekday(datetime(2024, 3, 9)), 6)

    def test_later_this_week(self):
        self.assertEqual(
            next_movie_night(weekly(5), self.now),
            datetime(2024, 3, 8, 20, 0, tzinfo=timezone.utc)
        )

    def test_earlier_weekday_wraps(self):
        self.assertEqual(
            next_movie_night(weekly(1), self.now),
            datetime(2024, 3, 11, 20, 0, tzinfo=timezone.utc)
        )

    def test_same_day(self):
        """Test tonight counts until the start time has passed."""
        self.assertEqual(
            next_movie_night(weekly(3, "20:00"), self.now),
            datetime(2024, 3, 6, 20, 0, tzinfo=timezone.utc)
        )
        self.assertEqual(
            next_movie_night(weekly(3, "17:00"), self.now),
            datetime(2024, 3, 13, 17, 0, tzinfo=timezone.utc)
        )

    def test_one_off(self):
        group = Group(
            id="g2",
            name="Premiere",
            schedule_type="oneoff",
            schedule_time="19:30",
            schedule_date=datetime(2024, 4, 1, tzinfo=timezone.utc)
        )
        self.assertEqual(
            next_movie_night(group, self.now),
            datetime(2024, 4, 1, 19, 30, tzinfo=timezone.utc)
        )


if __name__ == '__main__':
    unittest.main()
