import io
import json
import unittest
from contextlib import redirect_stdout
from unittest import mock

from services.bucketing import cli


class TestCalendarCLI(unittest.TestCase):
    def test_prints_labels(self):
        buf = io.StringIO()
        with mock.patch("sys.argv", ["cli", "day", "2020-01-01", "2020-01-02"]), redirect_stdout(buf):
            cli.main()
        out = json.loads(buf.getvalue())
        self.assertEqual(out["x"], ["01/01/2020", "02/01/2020"])
        self.assertEqual(out["label"], ["Wednesday 01/01/2020", "Thursday 02/01/2020"])

    def test_unknown_frequency_exits(self):
        with mock.patch("sys.argv", ["cli", "decade", "2020-01-01", "2020-01-02"]), redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                cli.main()
        self.assertEqual(cm.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
