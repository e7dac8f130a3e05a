# sleep_tracker/core/services/sleep_service.py
import logging
from datetime import datetime, timezone

from sleep_tracker.core.exceptions import InvalidSession, StorageUnavailable
from sleep_tracker.core.models.data_models import SleepRecord
from sleep_tracker.utils.time_format import format_sleep_time

logger = logging.getLogger(__name__)


class SessionRecorder:
    """Turns a measured sleep session into a SleepRecord and saves it"""

    def __init__(self, record_store, clock=None):
        self.record_store = record_store
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def record_session(self, duration_seconds, memo="", sleep_score=None):
        """
        Save a sleep session confirmed at wake-up.

        A storage failure does not raise; the result carries a warning instead
        so the wake-up flow can continue.
        """
        if not duration_seconds or duration_seconds <= 0:
            raise InvalidSession("No measured sleep time - start a new sleep session first.")

        now = self.clock()
        record = SleepRecord(
            sleep_date=now.date(),
            duration_seconds=int(duration_seconds),
            memo=memo or "",
            recorded_at=now,
            sleep_score=sleep_score,
        )

        try:
            await self.record_store.append(record)
        except StorageUnavailable as e:
            logger.warning(f"Sleep record not saved: {e}")
            return {
                "saved": False,
                "record": record,
                "sleep_time": format_sleep_time(record.duration_seconds),
                "warning": "Your sleep record could not be saved on this device.",
            }

        return {
            "saved": True,
            "record": record,
            "sleep_time": format_sleep_time(record.duration_seconds),
            "warning": None,
        }
