# sleep_tracker/core/repositories/record_store.py
import logging
from typing import List

from pydantic import ValidationError

from sleep_tracker.core.exceptions import StorageUnavailable
from sleep_tracker.core.models.data_models import SleepRecord
from sleep_tracker.utils.constants import storage_keys

logger = logging.getLogger(__name__)


class RecordStore:
    """Append-only persistence of sleep sessions under a single store key"""

    def __init__(self, store, key=storage_keys['sleep_records']):
        self.store = store
        self.key = key

    def _load_raw(self):
        raw = self.store.get(self.key, default=[])
        if not isinstance(raw, list):
            logger.warning(f"Stored value at '{self.key}' is not a list, treating it as empty")
            return []
        return raw

    async def append(self, record: SleepRecord) -> None:
        """
        Append a record to the stored sequence and write the whole sequence back.

        Entries already stored are kept as they are, including ones that no longer
        validate. Raises StorageUnavailable if the store cannot be read or written.
        """
        records = self._load_raw()
        records.append(record.to_storage())
        self.store.set(self.key, records)
        logger.info(f"Appended sleep record for {record.sleep_date} ({len(records)} total)")

    async def read_all(self) -> List[SleepRecord]:
        """Return all records in append order. Never raises for missing or corrupt data."""
        try:
            raw = self._load_raw()
        except StorageUnavailable as e:
            logger.warning(f"Could not read sleep records: {e}")
            return []

        records = []
        for i, entry in enumerate(raw):
            try:
                records.append(SleepRecord.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping invalid sleep record at index {i}: {e.error_count()} error(s)")
        return records

    def clear(self):
        """Remove every stored record"""
        return self.store.remove(self.key)
