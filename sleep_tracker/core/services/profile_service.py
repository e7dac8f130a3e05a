# sleep_tracker/core/services/profile_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union

from sleep_tracker.core.analysis.sleep_metrics import profile_stats_patch
from sleep_tracker.core.exceptions import NoActiveUser, StorageUnavailable
from sleep_tracker.core.models.data_models import ProfilePatch, UserProfile
from sleep_tracker.core.repositories.user_repository import find_index, parse_profile

logger = logging.getLogger(__name__)


def utc_now():
    return datetime.now(timezone.utc)


class ProfileReconciler:
    """
    Service layer for profile edits.

    The current-user slot is authoritative. The all-users collection is kept in
    sync on a best-effort basis: a missing entry is logged, never fatal.

    update_profile is a read-merge-write sequence with no locking. Two concurrent
    updates race and the later one wins entirely; callers must serialize edits.
    """

    def __init__(self, repository, clock=utc_now):
        self.repository = repository
        self.clock = clock

    async def _resolve_current(self, app_state: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """The current user as a stored mapping, from the slot or else the app-state snapshot"""
        stored = self.repository.get_current_record()
        if stored is not None:
            return stored

        snapshot = self._snapshot_user(app_state)
        recovered = parse_profile(snapshot)
        if recovered is None:
            raise NoActiveUser()
        record = dict(snapshot) if isinstance(snapshot, Mapping) else recovered.to_storage()

        # Self-heal: the in-memory state survived but the durable slot did not
        logger.info(f"Restoring current-user slot for {recovered.identity_key} from application state")
        try:
            self.repository.set_current(record)
        except StorageUnavailable as e:
            logger.warning(f"Could not restore current-user slot: {e}")
        return record

    async def get_current_user(self, app_state: Optional[Mapping[str, Any]] = None) -> UserProfile:
        """Resolve the current user from the slot, falling back to the app-state snapshot"""
        return UserProfile.model_validate(await self._resolve_current(app_state))

    async def update_profile(self,
                             partial_update: Union[ProfilePatch, Mapping[str, Any], None] = None,
                             app_state: Optional[Mapping[str, Any]] = None) -> UserProfile:
        """
        Merge a partial update over the current user and write it to both locations

        The patch is laid over the record as stored, so fields this client does not
        know about, null values and id types are kept as they are.

        Args:
            partial_update: ProfilePatch or mapping of field -> value. Unknown fields
                are merged verbatim; None values leave the stored value in place.
            app_state: Application-state snapshot, used when the durable slot is empty.
                The user is read from app_state['auth']['user'].

        Returns:
            The merged profile, stamped with a new updatedAt
        """
        patch = self._to_patch(partial_update)
        previous = await self._resolve_current(app_state)

        merged_data = {**previous, **patch.changes(), 'updatedAt': self.clock().isoformat()}
        merged = UserProfile.model_validate(merged_data)

        self.repository.set_current(merged_data)

        users = self.repository.get_users()
        index = find_index(users, previous)
        if index is None:
            logger.warning(
                f"User {merged.identity_key} is missing from the user collection; "
                f"current-user slot updated only"
            )
        else:
            users[index] = merged_data
            self.repository.set_users(users)

        return merged

    async def refresh_stats(self, records, app_state: Optional[Mapping[str, Any]] = None) -> UserProfile:
        """Recompute averageScore, averageSleepHours and totalDays from sleep records"""
        return await self.update_profile(profile_stats_patch(records), app_state=app_state)

    @staticmethod
    def _to_patch(partial_update):
        if partial_update is None:
            return ProfilePatch()
        if isinstance(partial_update, ProfilePatch):
            return partial_update
        return ProfilePatch.model_validate(dict(partial_update))

    @staticmethod
    def _snapshot_user(app_state):
        if not isinstance(app_state, Mapping):
            return None
        auth = app_state.get('auth')
        if not isinstance(auth, Mapping):
            return None
        return auth.get('user')
