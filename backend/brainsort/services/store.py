"""
Checklist Store
One document per user in the checklists collection; every write replaces it whole.
"""
from typing import List, Optional
import logging

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from ..exceptions import StoreError
from ..models import Checklist, ChecklistItem
from .encryption import EncryptionService

logger = logging.getLogger(__name__)


class ChecklistStore:
    """Load, save and clear a user's checklist"""

    def __init__(self, collection: AsyncIOMotorCollection, encryption: Optional[EncryptionService] = None):
        self.collection = collection
        self.encryption = encryption

    async def load(self, user_id: str) -> Optional[Checklist]:
        """The user's checklist, or None if nothing was generated yet"""
        try:
            document = await self.collection.find_one({"user_id": user_id}, {"_id": 0})
        except PyMongoError as e:
            logger.error(f"Checklist load failed for {user_id}: {e}")
            raise StoreError(f"Checklist load failed: {e}") from e

        if document is None:
            return None
        if self.encryption:
            document = self.encryption.decrypt_checklist(document)
        return Checklist(**document)

    async def save(self, user_id: str, items: List[ChecklistItem]) -> Checklist:
        """Overwrite the user's checklist with a fresh timestamp"""
        checklist = Checklist(user_id=user_id, checklist=list(items))
        document = checklist.model_dump()
        if self.encryption:
            document = self.encryption.encrypt_checklist(document)

        try:
            await self.collection.replace_one({"user_id": user_id}, document, upsert=True)
        except PyMongoError as e:
            logger.error(f"Checklist save failed for {user_id}: {e}")
            raise StoreError(f"Checklist save failed: {e}") from e

        logger.debug(f"Saved {len(checklist.checklist)} items for {user_id}")
        return checklist

    async def clear(self, user_id: str):
        """Delete the document itself, so a later load returns None"""
        try:
            await self.collection.delete_one({"user_id": user_id})
        except PyMongoError as e:
            logger.error(f"Checklist clear failed for {user_id}: {e}")
            raise StoreError(f"Checklist clear failed: {e}") from e
