"""
In-memory store for the signed-in user's job applications.
"""
import logging
from typing import Any, Callable, List, Mapping, Optional, Union
from pydantic import BaseModel, Field

from ..personal.models import User
from ..storage.mapper import from_persistence, to_persistence
from ..storage.models import JobApplication, JobDraft, JobUpdate
from ..storage.repository import JobRepository
from ..utils.errors import BackendError, NotAuthenticated
from .notifications import Notifier

logger = logging.getLogger(__name__)

class StoreState(BaseModel):
    """Snapshot published to subscribers after every change."""
    jobs: List[JobApplication] = Field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None

StateListener = Callable[[StoreState], None]

def _load_row(row) -> JobApplication:
    """Map a backend row, reporting a malformed one as a backend failure."""
    try:
        return from_persistence(row)
    except (ValueError, TypeError) as e:
        raise BackendError(f"Backend returned a malformed job row: {e}") from e

class ApplicationStore:
    """Single in-memory source of truth for one user's applications.
    
    The repository is the durable owner; this store is a cache kept consistent
    with it after each successful mutation. Operations are not queued: two
    overlapping updates of the same record both reach the backend and the one
    that finishes last wins locally.
    """
    
    def __init__(
        self,
        repository: JobRepository,
        access_token: Optional[str],
        notifier: Optional[Notifier] = None
    ):
        """Initialize the store.
        
        Args:
            repository: Backend used for every read and write
            access_token: Session token identifying the acting user
            notifier: Where transient messages go; a private one if None
        """
        self._repository = repository
        self._access_token = access_token
        self.notifier = notifier or Notifier()
        self._jobs: List[JobApplication] = []
        self.is_loading = False
        self.error: Optional[str] = None
        self._listeners: List[StateListener] = []
        self._closed = False

    @property
    def jobs(self) -> List[JobApplication]:
        return list(self._jobs)

    @property
    def state(self) -> StoreState:
        return StoreState(jobs=list(self._jobs), is_loading=self.is_loading, error=self.error)

    def get(self, job_id: str) -> Optional[JobApplication]:
        """Look up a job in the local collection."""
        for job in self._jobs:
            if job.id == job_id:
                return job
        return None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call ``listener`` with the new state after each change.
        
        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def close(self):
        """Drop cached data and listeners; the store is unusable afterwards."""
        self._closed = True
        self._jobs = []
        self.is_loading = False
        self.error = None
        self._listeners.clear()
        self._access_token = None

    def _publish(self):
        state = self.state
        for listener in list(self._listeners):
            listener(state)

    def _start(self):
        self.is_loading = True
        self._publish()

    def _succeed(self, message: Optional[str] = None):
        self.is_loading = False
        self.error = None
        self._publish()
        if message:
            self.notifier.success(message)

    def _fail(self, message: str):
        logger.exception(message)
        self.is_loading = False
        self.error = message
        self._publish()
        self.notifier.error(message)

    async def _current_user(self) -> User:
        if self._closed:
            raise NotAuthenticated("Session closed")
        user = await self._repository.get_user(self._access_token)
        if user is None:
            raise NotAuthenticated()
        return user

    async def fetch_all(self) -> List[JobApplication]:
        """Replace the collection with the user's jobs, newest first.
        
        Raises:
            NotAuthenticated: if no user is signed in
            BackendError: if the backend query fails
        """
        self._start()
        try:
            user = await self._current_user()
            rows = await self._repository.list_jobs(user.id)
            jobs = [_load_row(row) for row in rows]
        except Exception:
            self._fail("Failed to fetch jobs")
            raise
        self._jobs = jobs
        logger.debug("Loaded %d jobs for %s", len(jobs), user.id)
        self._succeed()
        return self.jobs

    async def add(self, fields: Union[JobDraft, Mapping[str, Any]]) -> JobApplication:
        """Create a job and put it at the front of the collection.
        
        Args:
            fields: New job's fields; id and timestamps come from the backend
            
        Returns:
            The job as stored by the backend
        """
        self._start()
        try:
            draft = fields if isinstance(fields, JobDraft) else JobDraft.model_validate(dict(fields))
            user = await self._current_user()
            row = await self._repository.insert_job(to_persistence(draft, user.id))
            job = _load_row(row)
        except Exception:
            self._fail("Failed to add job")
            raise
        self._jobs = [job] + [j for j in self._jobs if j.id != job.id]
        self._succeed("Job added successfully")
        return job

    async def update(
        self,
        job_id: str,
        fields: Union[JobUpdate, Mapping[str, Any]]
    ) -> JobApplication:
        """Apply a partial change to one of the user's jobs.
        
        The backend only touches a row matching both ``job_id`` and the acting
        user, so a guessed id from another account fails with ``BackendError``.
        """
        self._start()
        try:
            changes = fields if isinstance(fields, JobUpdate) else JobUpdate.model_validate(dict(fields))
            user = await self._current_user()
            row = await self._repository.update_job(job_id, user.id, to_persistence(changes, user.id))
            job = _load_row(row)
        except Exception:
            self._fail("Failed to update job")
            raise
        self._jobs = [job if j.id == job_id else j for j in self._jobs]
        self._succeed("Job updated successfully")
        return job

    async def remove(self, job_id: str):
        """Delete a job. Removing an id that is already gone succeeds."""
        self._start()
        try:
            user = await self._current_user()
            await self._repository.delete_job(job_id, user.id)
        except Exception:
            self._fail("Failed to delete job")
            raise
        self._jobs = [j for j in self._jobs if j.id != job_id]
        self._succeed("Job deleted successfully")
