# tests/conftest.py
from datetime import date

import pytest

from sleep_tracker.core.models.data_models import UserProfile
from sleep_tracker.core.repositories.record_store import RecordStore
from sleep_tracker.core.repositories.user_repository import UserRepository
from sleep_tracker.core.storage.local_store import LocalStore
from tests.helpers import FixedClock, make_record


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "store"


@pytest.fixture
def store(data_dir):
    return LocalStore(str(data_dir))


@pytest.fixture
def record_store(store):
    return RecordStore(store)


@pytest.fixture
def user_repository(store):
    return UserRepository(store)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def sample_user():
    return UserProfile(
        id="u-1",
        email="mina@example.com",
        display_name="A",
        avatar_token="🙂",
        average_score=80,
        average_sleep_hours=7.2,
        total_days=12,
        updated_at="2024-03-01T08:00:00+00:00",
        birthDate="1990-01-15",
    )


@pytest.fixture
def week_records():
    # Week of Sunday 2024-03-03 .. Saturday 2024-03-09
    return [
        make_record(date(2024, 3, 3), 6 * 3600, score=70),
        make_record(date(2024, 3, 5), 7 * 3600 + 1800, score=85),
        make_record(date(2024, 3, 9), 8 * 3600, score=90),
    ]
