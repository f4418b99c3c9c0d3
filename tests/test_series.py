import unittest
from datetime import datetime

from services.bucketing.axes import build_evolution_axis
from services.bucketing.frequency import Frequency
from services.charts.series import build_evolution_series, build_group_by_series, build_xy_series
from services.config.env import WEEKDAY_LABELS
from services.storage.repository import GroupRow, SeriesRow, XYRow

DAYS = WEEKDAY_LABELS["fr"]


class TestEvolutionSeries(unittest.TestCase):
    def test_zero_fills_missing_days(self):
        axis = build_evolution_axis(Frequency.DAY, datetime(2020, 1, 1), datetime(2020, 1, 3, 23, 59, 59))
        series = build_evolution_series(axis, Frequency.DAY, [SeriesRow(date=datetime(2020, 1, 2), value=5)])
        out = series.to_dict()
        self.assertEqual(out["axeX"], ["01/01/2020", "02/01/2020", "03/01/2020"])
        self.assertEqual(out["axeY"], [0, 5, 0])
        self.assertEqual(out["label"][0], "Wednesday 01/01/2020")

    def test_empty_results(self):
        axis = build_evolution_axis(Frequency.MONTH, datetime(2020, 1, 1), datetime(2020, 6, 30))
        series = build_evolution_series(axis, Frequency.MONTH, [])
        self.assertEqual(series.axe_y, (0, 0, 0, 0, 0, 0))

    def test_axis_order_regardless_of_row_order(self):
        axis = build_evolution_axis(Frequency.MONTH, datetime(2020, 1, 1), datetime(2020, 4, 30))
        rows = [SeriesRow(date=datetime(2020, 4, 1), value=4.0), SeriesRow(date=datetime(2020, 2, 1), value=2.0)]
        series = build_evolution_series(axis, Frequency.MONTH, rows)
        self.assertEqual(series.axe_x, ("Jan 2020", "Feb 2020", "Mar 2020", "Apr 2020"))
        self.assertEqual(series.axe_y, (0, 2.0, 0, 4.0))

    def test_rows_outside_axis_are_dropped(self):
        axis = build_evolution_axis(Frequency.DAY, datetime(2020, 1, 1), datetime(2020, 1, 2))
        series = build_evolution_series(
            axis, Frequency.DAY, [SeriesRow(date=datetime(2019, 12, 31), value=9), SeriesRow(date=datetime(2020, 1, 1), value=1)]
        )
        self.assertEqual(series.axe_y, (1, 0))

    def test_hour_rows_match_on_hour(self):
        axis = build_evolution_axis(Frequency.HOUR, datetime(2020, 1, 1), datetime(2020, 1, 1, 3))
        series = build_evolution_series(axis, Frequency.HOUR, [SeriesRow(date=datetime(2020, 1, 1, 2), value=1.5)])
        self.assertEqual(series.axe_y, (0, 0, 1.5, 0))


class TestGroupBySeries(unittest.TestCase):
    def test_missing_weekdays_are_zero(self):
        series = build_group_by_series(DAYS, [GroupRow(group_key=0, value=10.0), GroupRow(group_key=6, value=3.0)])
        out = series.to_dict()
        self.assertEqual(out["label"], list(DAYS))
        self.assertEqual(out["axeX"], list(DAYS))
        self.assertEqual(out["axeY"], [10.0, 0, 0, 0, 0, 0, 3.0])

    def test_keys_outside_range_are_ignored(self):
        rows = [GroupRow(group_key=7, value=1.0), GroupRow(group_key=-1, value=2.0), GroupRow(group_key=2, value=5.0)]
        with self.assertLogs("services.charts.series", level="WARNING") as cm:
            series = build_group_by_series(DAYS, rows)
        self.assertEqual(series.axe_y, (0, 0, 5.0, 0, 0, 0, 0))
        self.assertEqual(len(cm.output), 2)


class TestXYSeries(unittest.TestCase):
    def test_points_keep_storage_order(self):
        rows = [
            XYRow(date=datetime(2020, 1, 2), x_value=4.0, y_value=120.0),
            XYRow(date=datetime(2020, 1, 1), x_value=-1.5, y_value=180.0),
        ]
        out = build_xy_series(Frequency.DAY, rows).to_dict()
        self.assertEqual(out["axeX"], [4.0, -1.5])
        self.assertEqual(out["axeY"], [120.0, 180.0])
        self.assertEqual(out["date"], ["Thursday 02/01/2020", "Wednesday 01/01/2020"])

    def test_month_dates(self):
        out = build_xy_series(Frequency.MONTH, [XYRow(date=datetime(2020, 3, 1), x_value=1, y_value=2)]).to_dict()
        self.assertEqual(out["date"], ["Mar 2020"])


if __name__ == "__main__":
    unittest.main()
