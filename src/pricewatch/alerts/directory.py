"""Owner email lookup used by the monitoring job."""

import asyncio
from typing import Optional, Protocol

from ..ormdb.repositories import UserProfileRepository


class OwnerDirectory(Protocol):
    """Resolves an alert owner's email address."""

    async def resolve_owner_email(self, owner_id: str) -> Optional[str]:
        """Return the owner's email address, or None if none is on file."""
        ...


class UserProfileDirectory:
    """Owner directory backed by the ``user_profiles`` table."""

    def __init__(self, repository_factory=UserProfileRepository):
        self._repository_factory = repository_factory

    def _lookup(self, owner_id: str) -> Optional[str]:
        with self._repository_factory() as repo:
            return repo.get_email(owner_id)

    async def resolve_owner_email(self, owner_id: str) -> Optional[str]:
        return await asyncio.to_thread(self._lookup, owner_id)
