# tests/helpers.py
from datetime import datetime, timedelta, timezone

from sleep_tracker.core.models.data_models import SleepRecord


class FixedClock:
    """Clock returning a fixed time that advances one minute per call"""

    def __init__(self, start=datetime(2024, 3, 4, 7, 30, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


def make_record(day, seconds=27000, memo="", score=None):
    return SleepRecord(
        sleep_date=day,
        duration_seconds=seconds,
        memo=memo,
        recorded_at=datetime(day.year, day.month, day.day, 7, 0, tzinfo=timezone.utc),
        sleep_score=score,
    )
