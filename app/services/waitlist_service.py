from app.core.errors import PersistenceError
from app.models.waitlist import WaitlistEntry
from typing import Any, Callable, Dict, List, Optional
from datetime import datetime
import asyncio
import logging
import uuid

import pytz

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


class WaitlistStore:
    """Persistence for waitlist entries, backed by a Supabase table.

    Entries are append/remove only: ``id`` and ``createdAt`` are assigned
    here at creation and never changed afterwards.
    """

    def __init__(
        self,
        client: Any,
        table: str = "WaitlistEntry",
        timeout: float = 10.0,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.supabase = client
        self.table = table
        self.timeout = timeout
        self.clock = clock or utc_now

    async def _execute(self, query, action: str):
        try:
            return await asyncio.wait_for(query.execute(), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out after {self.timeout}s while trying to {action}")
            raise PersistenceError(f"Timed out while trying to {action}") from e
        except Exception as e:
            logger.error(f"Error trying to {action}: {e}")
            raise PersistenceError(f"Failed to {action}: {e}") from e

    async def create(
        self,
        email: str,
        wait_list_code: Optional[str] = "",
        preferences: Optional[List[str]] = None
    ) -> WaitlistEntry:
        """Insert a new entry and return it as stored"""
        entry = WaitlistEntry(
            id=str(uuid.uuid4()),
            email=email,
            wait_list_code=wait_list_code or "",
            preferences=list(preferences or []),
            created_at=self.clock()
        )
        row = entry.model_dump(by_alias=True, mode="json")

        response = await self._execute(
            self.supabase.table(self.table).insert(row),
            "create waitlist entry"
        )
        if not response.data:
            logger.error(f"Insert returned no rows for waitlist entry {entry.id}")
            raise PersistenceError("Failed to insert waitlist entry")

        logger.info(f"Added waitlist entry {entry.id} for {email}")
        return self._to_entry(response.data[0])

    async def list_all(self) -> List[WaitlistEntry]:
        """All entries, most recent first"""
        response = await self._execute(
            self.supabase.table(self.table).select('*').order('createdAt', desc=True),
            "list waitlist entries"
        )
        return [self._to_entry(row) for row in response.data or []]

    async def get_by_id(self, entry_id: str) -> Optional[WaitlistEntry]:
        """Entry with the given id, or None"""
        response = await self._execute(
            self.supabase.table(self.table).select('*').eq('id', entry_id),
            "get waitlist entry"
        )
        return self._to_entry(response.data[0]) if response.data else None

    async def delete_by_id(self, entry_id: str) -> bool:
        """Remove an entry. Returns False when no entry had that id."""
        response = await self._execute(
            self.supabase.table(self.table).delete().eq('id', entry_id),
            "delete waitlist entry"
        )
        if not response.data:
            logger.info(f"No waitlist entry to delete for id {entry_id}")
            return False

        logger.info(f"Deleted waitlist entry {entry_id}")
        return True

    async def ping(self) -> bool:
        await self._execute(
            self.supabase.table(self.table).select('id').limit(1),
            "reach waitlist table"
        )
        return True

    @staticmethod
    def _to_entry(row: Dict[str, Any]) -> WaitlistEntry:
        return WaitlistEntry.model_validate(row)
