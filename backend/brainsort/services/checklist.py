"""
Checklist Service
Combines the generator with the store: what the checklist view does on each action.
"""
from typing import List, Optional
import logging

from ..exceptions import ChecklistItemNotFoundError, ChecklistNotFoundError, EmptyInputError
from ..models import Checklist, ChecklistItem
from .generator import ChecklistGenerator
from .store import ChecklistStore

logger = logging.getLogger(__name__)


class ChecklistService:

    def __init__(self, generator: ChecklistGenerator, store: ChecklistStore):
        self.generator = generator
        self.store = store

    async def current(self, user_id: str) -> Optional[Checklist]:
        return await self.store.load(user_id)

    async def generate(self, user_id: str, raw_input: str) -> Checklist:
        """
        Generate tasks from raw input and persist them as a new checklist.

        The previous checklist is removed before the model is called, so a
        failed generation leaves nothing stale behind.
        """
        if not raw_input or not raw_input.strip():
            raise EmptyInputError("Raw input is empty")

        await self.store.clear(user_id)
        tasks = await self.generator.generate(raw_input)
        return await self.store.save(user_id, [ChecklistItem(text=task) for task in tasks])

    async def toggle(self, user_id: str, index: int) -> Checklist:
        """Flip done on one item and write the whole list back"""
        checklist = await self.store.load(user_id)
        if checklist is None:
            raise ChecklistNotFoundError(f"No checklist for user {user_id}")
        if not 0 <= index < len(checklist.checklist):
            raise ChecklistItemNotFoundError(
                f"Item {index} out of range (checklist has {len(checklist.checklist)} items)"
            )

        items = list(checklist.checklist)
        items[index] = items[index].model_copy(update={"done": not items[index].done})
        return await self.store.save(user_id, items)

    async def replace(self, user_id: str, items: List[ChecklistItem]) -> Checklist:
        return await self.store.save(user_id, items)

    async def reset(self, user_id: str):
        await self.store.clear(user_id)
        logger.info(f"Checklist reset for {user_id}")
