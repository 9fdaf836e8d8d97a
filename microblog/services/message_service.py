"""
Microblog Backend: Message Service
==================================

What:  Business rules for creating, editing, deleting and reading messages.
How:   Validates candidates, then delegates to MessageRepository. Each
       method issues at most one mutating statement.
Who:   Called by the /messages and /accounts/{id}/messages routes.

Message Rules:
    - the author account must have been resolved by the caller
    - text must be non-blank and at most MAX_MESSAGE_LENGTH characters
    - the resolved author must be the account named in posted_by
    - updates replace message_text only; posted_by and time_posted_epoch
      keep their stored values whatever the candidate carries
"""

import logging
from typing import List, Optional

from microblog.exceptions import (
    AuthorizationError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    ValidationError,
)
from microblog.models.account import Account
from microblog.models.message import Message
from microblog.repositories.message_repository import MessageRepository

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 254


def validate_message_text(text: Optional[str]) -> None:
    """Raise ValidationError unless text is non-blank and within the length cap."""
    if text is None or not text.strip():
        raise ValidationError("Message text cannot be blank", field="message_text")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise ValidationError(
            f"Message text cannot exceed {MAX_MESSAGE_LENGTH} characters",
            field="message_text",
            context={"length": len(text)},
        )


class MessageService:
    """Domain operations on messages."""

    def __init__(self, repository: MessageRepository):
        self.repository = repository

    async def create_message(
        self, candidate: Message, author: Optional[Account]
    ) -> Message:
        """
        Create a message on behalf of a resolved author account.

        Args:
            candidate: Message carrying posted_by, message_text and
                time_posted_epoch (message_id is ignored)
            author: The account looked up from candidate.posted_by, or None
                when no such account exists

        Raises:
            ValidationError: no author, blank text or text too long
            AuthorizationError: author.account_id != candidate.posted_by
            ServiceError: the database failed
        """
        if author is None:
            raise ValidationError(
                "Message author does not exist",
                field="posted_by",
                context={"posted_by": candidate.posted_by},
            )
        validate_message_text(candidate.message_text)
        if author.account_id != candidate.posted_by:
            raise AuthorizationError(
                "Account is not authorized to post this message",
                context={"account_id": author.account_id, "posted_by": candidate.posted_by},
            )

        try:
            message = await self.repository.insert(candidate)
        except PersistenceError as e:
            raise ServiceError("Could not create the message", context=e.context) from e

        logger.info("Message %d posted by account %d", message.message_id, message.posted_by)
        return message

    async def update_message(self, candidate: Message) -> Message:
        """
        Replace the text of an existing message.

        Only candidate.message_id and candidate.message_text are read; the
        other fields come from the stored row.

        Raises:
            NotFoundError: no message with that id
            ValidationError: merged text is blank or too long
            ServiceError: the database failed
        """
        existing = await self.get_message_by_id(candidate.message_id)
        if existing is None:
            raise NotFoundError(resource="message", resource_id=candidate.message_id)

        merged = Message(
            message_id=existing.message_id,
            posted_by=existing.posted_by,
            message_text=candidate.message_text,
            time_posted_epoch=existing.time_posted_epoch,
        )
        validate_message_text(merged.message_text)

        try:
            updated = await self.repository.update(merged)
        except PersistenceError as e:
            raise ServiceError(
                f"Could not update message {merged.message_id}", context=e.context
            ) from e

        if not updated:
            raise NotFoundError(resource="message", resource_id=merged.message_id)
        logger.info("Message %d updated", merged.message_id)
        return merged

    async def delete_message(self, existing: Message) -> Message:
        """
        Delete a message by identity and return what was deleted.

        Raises:
            NotFoundError: the delete affected no rows
            ServiceError: the database failed
        """
        try:
            deleted = await self.repository.delete(existing)
        except PersistenceError as e:
            raise ServiceError(
                f"Could not delete message {existing.message_id}", context=e.context
            ) from e

        if not deleted:
            raise NotFoundError(resource="message", resource_id=existing.message_id)
        logger.info("Message %d deleted", existing.message_id)
        return existing

    async def get_message_by_id(self, message_id: int) -> Optional[Message]:
        try:
            return await self.repository.get_by_id(message_id)
        except PersistenceError as e:
            raise ServiceError(
                f"Could not retrieve message {message_id}", context=e.context
            ) from e

    async def get_all_messages(self) -> List[Message]:
        try:
            return await self.repository.get_all()
        except PersistenceError as e:
            raise ServiceError("Could not retrieve messages", context=e.context) from e

    async def get_messages_by_account_id(self, account_id: int) -> List[Message]:
        try:
            return await self.repository.find_by_posted_by(account_id)
        except PersistenceError as e:
            raise ServiceError(
                f"Could not retrieve messages for account {account_id}",
                context=e.context,
            ) from e
