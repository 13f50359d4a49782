from typing import Optional, List
import asyncio
import logging
import weakref
from beanie import PydanticObjectId

# Models
from pdc_pro.models.user import User
from pdc_pro.models.inspection import Inspection, utcnow

# Schemas
from pdc_pro.schemas.inspection import InspectionPayloadSchema

# Logger setup
logger = logging.getLogger(__name__)

# One lock per owner while any call for that owner is running
_owner_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(owner_id: str) -> asyncio.Lock:
    lock = _owner_locks.get(owner_id)
    if lock is None:
        lock = asyncio.Lock()
        _owner_locks[owner_id] = lock
    return lock


class InspectionRepository:
    """
    Repository for inspection sub-documents (MongoDB/Beanie).

    Inspections live inside the owning User document, so every operation
    is addressed by (owner_id, inspection_id). An unknown owner, an unknown
    inspection and another owner's inspection all look the same: None.
    Writes are read-merge-write under a per-owner lock.
    """

    async def list(self, owner_id: str) -> Optional[List[Inspection]]:
        """All inspections of the owner, in storage order."""
        user = await self._get_owner(owner_id)
        if not user:
            return None
        return list(user.inspections)

    async def get(self, owner_id: str, inspection_id: str) -> Optional[Inspection]:
        user = await self._get_owner(owner_id)
        if not user:
            return None
        return user.find_inspection(inspection_id)

    async def create(
        self,
        owner_id: str,
        payload: InspectionPayloadSchema
    ) -> Optional[Inspection]:
        """
        Append a new inspection built from the caller's fields over defaults.
        Status defaults to Draft; both timestamps are stamped to now.
        """
        async with _lock_for(owner_id):
            user = await self._get_owner(owner_id)
            if not user:
                return None

            now = utcnow()
            inspection = Inspection(**payload.to_model_fields())
            inspection.created_at = now
            inspection.updated_at = now

            user.inspections.append(inspection)
            await user.save()

        logger.info(f"Created inspection {inspection.id} for user {owner_id}")
        return inspection

    async def update(
        self,
        owner_id: str,
        inspection_id: str,
        payload: InspectionPayloadSchema
    ) -> Optional[Inspection]:
        """
        Replace every supplied top-level field wholesale and refresh updated_at.
        No deep merge of individual checks happens here.
        """
        async with _lock_for(owner_id):
            user = await self._get_owner(owner_id)
            if not user:
                return None

            inspection = user.find_inspection(inspection_id)
            if not inspection:
                return None

            for field, value in payload.to_model_fields().items():
                setattr(inspection, field, value)
            inspection.touch()

            await user.save()

        logger.info(f"Updated inspection {inspection_id} ({inspection.status.value})")
        return inspection

    async def delete(self, owner_id: str, inspection_id: str) -> bool:
        async with _lock_for(owner_id):
            user = await self._get_owner(owner_id)
            if not user:
                return False

            inspection = user.find_inspection(inspection_id)
            if not inspection:
                return False

            user.inspections.remove(inspection)
            await user.save()

        logger.info(f"Deleted inspection {inspection_id} for user {owner_id}")
        return True

    async def _get_owner(self, owner_id: str) -> Optional[User]:
        if not owner_id or not PydanticObjectId.is_valid(owner_id):
            return None
        return await User.get(PydanticObjectId(owner_id))
