"""Per-entity record cache with optimistic writes"""

import dataclasses
import logging
import uuid
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

from finance_gateway.domain.models import from_row
from finance_gateway.infrastructure.database.repositories import Repository

T = TypeVar("T")

logger = logging.getLogger(__name__)

TEMP_PREFIX = "temp_"


def temp_id() -> str:
    return f"{TEMP_PREFIX}{uuid.uuid4()}"


class EntityCollection(Generic[T]):
    """
    Local view of one resource, kept in sync with its repository.

    Writes are optimistic: the local state changes first, then the store is
    called. On success the local record is replaced with the stored row; on
    failure the previous state is restored and the error propagates.
    """

    def __init__(self, repository: Repository[T], sort_key: Optional[Callable[[T], Any]] = None):
        self.repository = repository
        self.sort_key = sort_key
        self.items: List[T] = []

    def _index(self, record_id: str) -> int:
        for i, item in enumerate(self.items):
            if item.id == record_id:
                return i
        return -1

    def get(self, record_id: str) -> Optional[T]:
        index = self._index(record_id)
        return self.items[index] if index >= 0 else None

    async def refresh(self, **query) -> List[T]:
        self.items = await self.repository.list(**query)
        if self.sort_key:
            self.items.sort(key=self.sort_key)
        return self.items

    async def create(self, values: Mapping[str, Any]) -> T:
        placeholder = from_row(
            self.repository.model,
            {"id": temp_id(), self.repository.owner_column or "user_id": self.repository.owner_id, **values},
        )
        self.items.insert(0, placeholder)
        try:
            created = await self.repository.create(values)
        except Exception:
            self.items.remove(placeholder)
            logger.warning("Reverted optimistic create", extra={"table": self.repository.table})
            raise
        self.items[self._index(placeholder.id)] = created
        return created

    async def update(self, record_id: str, changes: Mapping[str, Any]) -> T:
        index = self._index(record_id)
        previous = self.items[index] if index >= 0 else None
        if previous is not None:
            names = {f.name for f in dataclasses.fields(previous)}
            patch: Dict[str, Any] = {k: v for k, v in changes.items() if k in names}
            self.items[index] = dataclasses.replace(previous, **patch)
        try:
            updated = await self.repository.update(record_id, changes)
        except Exception:
            if previous is not None:
                self.items[index] = previous
            logger.warning("Reverted optimistic update", extra={"table": self.repository.table, "record_id": record_id})
            raise
        if previous is not None:
            self.items[index] = updated
        return updated

    async def delete(self, record_id: str) -> None:
        index = self._index(record_id)
        removed = self.items.pop(index) if index >= 0 else None
        try:
            await self.repository.delete(record_id)
        except Exception:
            if removed is not None:
                self.items.insert(index, removed)
            logger.warning("Reverted optimistic delete", extra={"table": self.repository.table, "record_id": record_id})
            raise
