# sleep_tracker/core/storage/local_store.py
import json
import logging
import os
import re
import tempfile

from sleep_tracker.core.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

_VALID_KEY = re.compile(r'^[A-Za-z0-9_.-]+$')


class LocalStore:
    """
    Process-local durable key-value store.

    Each key is kept as a JSON document in its own file under data_dir, so values
    survive restarts the way browser local storage does.
    """

    def __init__(self, data_dir='data/local_store'):
        self.data_dir = data_dir

    def _path(self, key):
        if not _VALID_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return os.path.join(self.data_dir, f"{key}.json")

    def get(self, key, default=None):
        """Read a value. Missing keys and undecodable JSON return default."""
        path = self._path(key)
        if not os.path.exists(path):
            return default

        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw = f.read()
        except OSError as e:
            raise StorageUnavailable(key, str(e)) from e

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to read key '{key}': stored value is not valid JSON ({e})")
            return default

    def set(self, key, value):
        """Write a value, replacing the previous one in a single step"""
        path = self._path(key)
        try:
            serialized = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Value for key '{key}' is not JSON serializable: {e}") from e

        tmp_path = None
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(serialized)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageUnavailable(key, str(e)) from e

    def remove(self, key):
        """Delete a key. Returns False if it did not exist."""
        path = self._path(key)
        if not os.path.exists(path):
            return False
        try:
            os.remove(path)
        except OSError as e:
            raise StorageUnavailable(key, str(e)) from e
        return True

    def has(self, key):
        return os.path.exists(self._path(key))

    def keys(self):
        if not os.path.isdir(self.data_dir):
            return []
        return sorted(
            name[:-len('.json')]
            for name in os.listdir(self.data_dir)
            if name.endswith('.json') and not name.startswith('.')
        )

    def clear(self):
        for key in self.keys():
            self.remove(key)
