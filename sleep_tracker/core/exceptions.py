# sleep_tracker/core/exceptions.py


class SleepTrackerError(Exception):
    """Base class for sleep tracker errors"""


class StorageUnavailable(SleepTrackerError):
    """The durable store could not be read or written"""

    def __init__(self, key, reason=None):
        self.key = key
        self.reason = reason
        message = f"Storage unavailable for key '{key}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class NoActiveUser(SleepTrackerError):
    """No current user could be resolved from either source"""

    def __init__(self, message="No signed-in user found - please sign in again."):
        super().__init__(message)


class InvalidSession(SleepTrackerError, ValueError):
    """A sleep session was submitted without a measured duration"""
