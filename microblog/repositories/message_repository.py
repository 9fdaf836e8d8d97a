"""
Microblog Backend: Message Repository
=====================================

What:  All SQL touching the `message` table.
Who:   Used by MessageService; constructed per request with the request's
       AsyncSession (see microblog.dependencies).

Ordering:
    Lists are returned in message_id order, i.e. insertion order.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select, update

from microblog.exceptions import PersistenceError
from microblog.models.message import Message
from microblog.repositories.base import Repository

logger = logging.getLogger(__name__)


class MessageRepository(Repository[Message]):
    """Data access object for messages."""

    async def get_by_id(self, message_id: int) -> Optional[Message]:
        result = await self._execute(
            select(Message).where(Message.message_id == message_id),
            f"Error while retrieving the message with id: {message_id}",
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> List[Message]:
        result = await self._execute(
            select(Message).order_by(Message.message_id),
            "Error while retrieving all messages",
        )
        return list(result.scalars().all())

    async def find_by_posted_by(self, account_id: int) -> List[Message]:
        result = await self._execute(
            select(Message)
            .where(Message.posted_by == account_id)
            .order_by(Message.message_id),
            f"Error while retrieving messages by account ID: {account_id}",
        )
        return list(result.scalars().all())

    async def insert(self, message: Message) -> Message:
        """
        Insert a new message and return it with its assigned message_id.

        Raises:
            PersistenceError: statement failed or no id was assigned
        """
        entity = Message(
            posted_by=message.posted_by,
            message_text=message.message_text,
            time_posted_epoch=message.time_posted_epoch,
        )
        self.session.add(entity)
        await self._flush("Error while inserting a message")

        if entity.message_id is None:
            raise PersistenceError(
                message="Failed to insert message, no ID obtained.",
                operation=type(self).__name__,
            )
        logger.info("Message created: id=%d posted_by=%d", entity.message_id, entity.posted_by)
        return entity

    async def update(self, message: Message) -> bool:
        result = await self._execute(
            update(Message)
            .where(Message.message_id == message.message_id)
            .values(
                posted_by=message.posted_by,
                message_text=message.message_text,
                time_posted_epoch=message.time_posted_epoch,
            ),
            f"Error while updating the message with id: {message.message_id}",
        )
        return result.rowcount > 0

    async def delete(self, message: Message) -> bool:
        result = await self._execute(
            delete(Message).where(Message.message_id == message.message_id),
            f"Error while deleting the message with id: {message.message_id}",
        )
        return result.rowcount > 0
