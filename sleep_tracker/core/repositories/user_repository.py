# sleep_tracker/core/repositories/user_repository.py
import logging
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from sleep_tracker.core.exceptions import StorageUnavailable
from sleep_tracker.core.models.data_models import UserProfile
from sleep_tracker.utils.constants import storage_keys

logger = logging.getLogger(__name__)


def parse_profile(raw) -> Optional[UserProfile]:
    """Validate a stored profile, returning None if it does not have the expected shape"""
    if isinstance(raw, UserProfile):
        return raw
    if not isinstance(raw, dict):
        return None
    try:
        return UserProfile.model_validate(raw)
    except ValidationError as e:
        logger.warning(f"Ignoring malformed user profile: {e.error_count()} error(s)")
        return None


def same_identity(a: Dict, b: Dict) -> bool:
    """Match by id when both sides have one, otherwise by email"""
    if a.get('id') and b.get('id'):
        return str(a['id']) == str(b['id'])
    return bool(a.get('email')) and a.get('email') == b.get('email')


def find_index(users: List, identity: Dict) -> Optional[int]:
    for i, user in enumerate(users):
        if isinstance(user, dict) and same_identity(user, identity):
            return i
    return None


class UserRepository:
    """Data access layer for the current-user slot and the all-users collection"""

    def __init__(self, store):
        self.store = store
        self.current_key = storage_keys['current_user']
        self.users_key = storage_keys['users']

    def _read(self, key, default):
        try:
            return self.store.get(key, default=default)
        except StorageUnavailable as e:
            logger.warning(f"Could not read '{key}', treating it as empty: {e}")
            return default

    def get_current_record(self) -> Optional[Dict]:
        """
        Get the signed-in user exactly as stored.

        Returns None if the slot is empty, unreadable, or does not hold a valid profile.
        """
        raw = self._read(self.current_key, None)
        if parse_profile(raw) is None:
            return None
        return raw

    def get_current(self) -> Optional[UserProfile]:
        """Get the signed-in user, or None if the slot is empty or unreadable"""
        return parse_profile(self.get_current_record())

    def set_current(self, profile: Union[UserProfile, Dict]):
        """Write the current-user slot. Mappings are stored as given."""
        data = profile.to_storage() if isinstance(profile, UserProfile) else dict(profile)
        self.store.set(self.current_key, data)
        return profile

    def remove_current(self):
        return self.store.remove(self.current_key)

    def get_users(self) -> List[Dict]:
        """Get the raw user collection. Anything other than a readable list reads as empty."""
        users = self._read(self.users_key, [])
        if not isinstance(users, list):
            logger.warning(f"Stored value at '{self.users_key}' is not a list, treating it as empty")
            return []
        return users

    def set_users(self, users: List[Dict]):
        self.store.set(self.users_key, users)

    def find_by_identity(self, identity) -> Optional[UserProfile]:
        """Find a user in the collection by profile, mapping, or bare id/email string"""
        users = self.get_users()

        if isinstance(identity, str):
            # A bare key is tried as an id first, then as an email
            for field in ('id', 'email'):
                index = find_index(users, {field: identity})
                if index is not None:
                    return parse_profile(users[index])
            return None

        if isinstance(identity, UserProfile):
            identity = identity.to_storage()
        index = find_index(users, identity)
        if index is None:
            return None
        return parse_profile(users[index])

    def add_user(self, profile: UserProfile):
        """Add a profile to the collection, replacing an existing entry with the same identity"""
        users = self.get_users()
        entry = profile.to_storage()
        index = find_index(users, entry)
        if index is None:
            users.append(entry)
        else:
            users[index] = entry
        self.set_users(users)
        return profile
