"""
Backend contract for job data and identity.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from ..personal.models import User
from .mapper import Row


class JobRepository(ABC):
    """Narrow interface to whatever backend stores job applications.
    
    Every call takes the session token or owner id explicitly; implementations
    must not rely on an ambient "current user". Failures are reported as
    ``BackendError``.
    """

    @abstractmethod
    async def get_user(self, access_token: Optional[str]) -> Optional[User]:
        """Return the user for a session token, or None if not signed in."""

    @abstractmethod
    async def list_jobs(self, user_id: str) -> List[Row]:
        """Return every row owned by ``user_id``, newest ``created_at`` first."""

    @abstractmethod
    async def insert_job(self, row: Row) -> Row:
        """Insert a row and return it with server-assigned id and timestamps.
        
        ``priority`` defaults to ``"medium"`` when omitted.
        """

    @abstractmethod
    async def update_job(self, job_id: str, user_id: str, changes: Row) -> Row:
        """Apply ``changes`` to the row matching both id and owner.
        
        Raises:
            BackendError: if no row matches (missing id or wrong owner)
        """

    @abstractmethod
    async def delete_job(self, job_id: str, user_id: str) -> None:
        """Delete the row matching both id and owner; a missing row is a no-op."""
