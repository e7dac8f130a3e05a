# sleep_tracker/api/dependencies.py
from functools import lru_cache

from fastapi import Depends, Request

from sleep_tracker.config.config_manager import ConfigManager
from sleep_tracker.core.repositories.record_store import RecordStore
from sleep_tracker.core.repositories.user_repository import UserRepository
from sleep_tracker.core.services.profile_service import ProfileReconciler
from sleep_tracker.core.services.sleep_service import SessionRecorder
from sleep_tracker.core.storage.local_store import LocalStore


@lru_cache()
def get_config():
    return ConfigManager()


def get_store(config: ConfigManager = Depends(get_config)):
    return LocalStore(config.get('storage.data_dir', 'data/local_store'))


def get_record_store(store: LocalStore = Depends(get_store)):
    return RecordStore(store)


def get_session_recorder(record_store: RecordStore = Depends(get_record_store)):
    return SessionRecorder(record_store)


def get_profile_reconciler(store: LocalStore = Depends(get_store)):
    return ProfileReconciler(UserRepository(store))


def get_app_state(request: Request):
    """In-memory application state kept by the host app, e.g. {'auth': {'user': {...}}}"""
    return getattr(request.app.state, 'app_state', None)
