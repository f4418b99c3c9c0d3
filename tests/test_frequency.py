import unittest
from datetime import datetime

from services.bucketing.errors import ConfigurationError, InvalidFrequency
from services.bucketing.frequency import Frequency, labels


class TestFrequencyLabels(unittest.TestCase):
    def test_day_labels_inclusive_end(self):
        x, long_labels = labels(Frequency.DAY, datetime(2020, 1, 1), datetime(2020, 1, 3, 23, 59, 59))
        self.assertEqual(x, ["01/01/2020", "02/01/2020", "03/01/2020"])
        self.assertEqual(long_labels[0], "Wednesday 01/01/2020")

    def test_end_equal_to_last_step_is_included(self):
        x, _ = labels(Frequency.DAY, datetime(2020, 1, 1), datetime(2020, 1, 3))
        self.assertEqual(len(x), 3)

    def test_hour_labels_one_day(self):
        x, long_labels = labels(Frequency.HOUR, datetime(2020, 3, 29), datetime(2020, 3, 29, 23, 59, 59))
        self.assertEqual(len(x), 24)
        self.assertEqual(x[0], "29/03/2020 00:00")
        self.assertEqual(x[-1], "29/03/2020 23:00")
        self.assertEqual(long_labels[1], "Sunday 29/03/2020 01:00")

    def test_month_steps_clip_to_month_end(self):
        x, _ = labels(Frequency.MONTH, datetime(2020, 1, 31), datetime(2020, 4, 30))
        self.assertEqual(x, ["Jan 2020", "Feb 2020", "Mar 2020", "Apr 2020"])

    def test_month_step_keeps_day_of_month(self):
        start = datetime(2020, 1, 31)
        self.assertEqual(start + Frequency.MONTH.step(1), datetime(2020, 2, 29))
        self.assertEqual(start + Frequency.MONTH.step(2), datetime(2020, 3, 31))

    def test_week_and_year(self):
        x, _ = labels(Frequency.WEEK, datetime(2020, 1, 6), datetime(2020, 1, 26))
        self.assertEqual(x, ["06/01/2020", "13/01/2020", "20/01/2020"])
        y, _ = labels(Frequency.YEAR, datetime(2016, 2, 29), datetime(2019, 1, 1))
        self.assertEqual(y, ["2016", "2017", "2018"])

    def test_empty_when_start_after_end(self):
        self.assertEqual(labels(Frequency.DAY, datetime(2020, 1, 2), datetime(2020, 1, 1)), ([], []))

    def test_from_key(self):
        self.assertIs(Frequency.from_key("day"), Frequency.DAY)
        self.assertIs(Frequency.from_key(" Month "), Frequency.MONTH)
        with self.assertRaises(InvalidFrequency):
            Frequency.from_key("fortnight")
        with self.assertRaises(ConfigurationError):
            Frequency.from_key("")

    def test_truncate(self):
        d = datetime(2020, 1, 15, 13, 45, 12)
        self.assertEqual(Frequency.HOUR.truncate(d), datetime(2020, 1, 15, 13))
        self.assertEqual(Frequency.DAY.truncate(d), datetime(2020, 1, 15))
        self.assertEqual(Frequency.WEEK.truncate(d), datetime(2020, 1, 13))
        self.assertEqual(Frequency.MONTH.truncate(d), datetime(2020, 1, 1))
        self.assertEqual(Frequency.YEAR.truncate(d), datetime(2020, 1, 1))


if __name__ == "__main__":
    unittest.main()
