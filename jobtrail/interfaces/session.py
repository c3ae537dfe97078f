"""
Session lifecycle: a store lives from login to logout.
"""
import logging
from typing import Optional

from ..personal.models import User
from ..storage.repository import JobRepository
from ..utils.errors import NotAuthenticated
from .notifications import Notifier
from .store import ApplicationStore

logger = logging.getLogger(__name__)


class Session:
    """Binds a signed-in user to a freshly built store."""

    def __init__(self, user: User, store: ApplicationStore):
        self.user = user
        self.store = store
        self.closed = False

    @classmethod
    async def open(
        cls,
        repository: JobRepository,
        access_token: Optional[str],
        notifier: Optional[Notifier] = None
    ) -> "Session":
        """Verify the token and create a store for its user.
        
        Raises:
            NotAuthenticated: if the token does not identify a user
        """
        user = await repository.get_user(access_token)
        if user is None:
            raise NotAuthenticated()
        logger.info("Session started for %s", user.email)
        return cls(user, ApplicationStore(repository, access_token, notifier))

    def close(self):
        """Discard the store at logout."""
        if self.closed:
            return
        self.store.close()
        self.closed = True
        logger.info("Session closed for %s", self.user.email)

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()
