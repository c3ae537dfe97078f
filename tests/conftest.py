"""
Shared fixtures for the tracker tests.
"""
from datetime import datetime, timezone
import itertools
import pytest

from jobtrail.personal.models import User
from jobtrail.storage.json_store import JsonJobRepository
from jobtrail.storage.models import JobApplication

@pytest.fixture
def user():
    """A signed-in user."""
    return User(id="user-1", name="Ada", email="ada@example.com")

@pytest.fixture
def other_user():
    return User(id="user-2", name="Grace", email="grace@example.com")

@pytest.fixture
def repository(tmp_path):
    """A JSON repository in a temporary directory."""
    return JsonJobRepository(str(tmp_path / "active"))

@pytest.fixture
def token(repository, user):
    """Access token for ``user``."""
    return repository.create_session(user)

@pytest.fixture
def make_job():
    """Factory for domain jobs with sensible defaults."""
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        created = datetime(2024, 1, n, 12, 0, tzinfo=timezone.utc)
        data = {
            "id": f"job-{n}",
            "company_name": f"Company {n}",
            "position": "Engineer",
            "job_type": "full-time",
            "status": "saved",
            "priority": "medium",
            "created_at": created,
            "updated_at": created,
        }
        data.update(overrides)
        return JobApplication(**data)
    return _make
