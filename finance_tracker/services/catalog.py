"""
Catalog Service

Plain CRUD for records with no balance rules: debts, categories and
subscriptions. One instance per record type.
"""

from typing import Generic

from finance_tracker.services.storage import LedgerStorageInterface, NotFoundError
from finance_tracker.services.storage.interface import RecordT


class CatalogService(Generic[RecordT]):
    """
    CRUD over one record type.

    Usage:
        debts = CatalogService(storage, Debt)
        debt = await debts.create(Debt(type="Car Loan", ...))
    """

    def __init__(self, storage: LedgerStorageInterface, model: type[RecordT]):
        self._storage = storage
        self._model = model

    @property
    def entity(self) -> str:
        return self._model.__name__

    async def get(self, record_id: int) -> RecordT:
        record = await self._storage.find_by_id(self._model, record_id)
        if record is None:
            raise NotFoundError(self.entity, record_id)
        return record

    async def list_all(self, active_only: bool = False) -> list[RecordT]:
        if active_only:
            return await self._storage.find_many(self._model, active_only=True)
        return await self._storage.find_many(self._model)

    async def create(self, record: RecordT) -> RecordT:
        # Ids are always assigned by storage
        return await self._storage.create(record.model_copy(update={"id": None}))

    async def update(self, record_id: int, record: RecordT) -> RecordT:
        """Replace every field of an existing record, keeping its id and creation time."""
        current = await self.get(record_id)
        changes = {"id": current.id}
        if "created_at" in self._model.model_fields:
            changes["created_at"] = current.created_at
        return await self._storage.update(record.model_copy(update=changes))

    async def delete(self, record_id: int) -> RecordT:
        current = await self.get(record_id)
        await self._storage.delete(self._model, record_id)
        return current
