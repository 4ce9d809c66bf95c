"""
Transient key/value draft cache.

Holds at most one value per key with latest-write-wins semantics. Used to
keep a user's in-progress prescreen questions across page reloads; it is a
recovery aid, not a history.
"""
import logging
from datetime import datetime
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from jobforms.models.draft_entry import DraftEntry

logger = logging.getLogger(__name__)


class DraftStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def delete(self, key: str) -> None: ...


def draft_key(prefix: str, user_id: Optional[object]) -> str:
    """`<prefix>-<user_id>`, or `<prefix>-anonymous` when there is no user."""
    return f"{prefix}-{user_id if user_id else 'anonymous'}"


class InMemoryDraftStore:
    """Dict-backed store for tests and single-process use."""

    def __init__(self):
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class DatabaseDraftStore:
    """Store backed by the `draft_entries` table. Commits on every write."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch(self, key: str) -> Optional[DraftEntry]:
        result = await self.db.execute(
            select(DraftEntry).where(DraftEntry.key == key)
        )
        return result.scalar_one_or_none()

    async def get(self, key: str) -> Optional[str]:
        entry = await self._fetch(key)
        return entry.value if entry else None

    async def set(self, key: str, value: str) -> None:
        entry = await self._fetch(key)
        if entry is None:
            self.db.add(DraftEntry(key=key, value=value))
            try:
                await self.db.commit()
                return
            except IntegrityError:
                # A concurrent write created the row first; overwrite it
                await self.db.rollback()
                logger.debug(f"Draft {key} inserted concurrently, updating instead")
                entry = await self._fetch(key)

        entry.value = value
        entry.updated_at = datetime.utcnow()
        await self.db.commit()

    async def delete(self, key: str) -> None:
        entry = await self._fetch(key)
        if entry:
            await self.db.delete(entry)
            await self.db.commit()
            logger.debug(f"Deleted draft {key}")
