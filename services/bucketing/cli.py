import json
import sys
from datetime import datetime

from .errors import ConfigurationError
from .frequency import Frequency, labels


def main():
    if len(sys.argv) != 4:
        print("Usage: python -m services.bucketing.cli <frequency> <start> <end>")
        sys.exit(2)
    try:
        frequency = Frequency.from_key(sys.argv[1])
    except ConfigurationError as e:
        print(str(e))
        sys.exit(2)
    start = datetime.fromisoformat(sys.argv[2])
    end = datetime.fromisoformat(sys.argv[3])
    axis, long_labels = labels(frequency, start, end)
    print(json.dumps({"x": axis, "label": long_labels}, indent=2))


if __name__ == "__main__":
    main()
