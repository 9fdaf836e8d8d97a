"""
Microblog Backend: Message Service Unit Tests
=============================================

What:  Tests for MessageService rules (create, update, delete, reads).
How:   Uses AsyncMock repositories (no real database).

What we test:
    ✅ Author must be resolved and must match posted_by
    ✅ Text must be non-blank and at most 254 characters
    ✅ Updates replace message_text only
    ✅ Zero-row deletes/updates raise NotFoundError
"""

import pytest

from microblog.exceptions import (
    AuthorizationError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    ValidationError,
)
from microblog.models.account import Account
from microblog.models.message import Message
from microblog.services.message_service import MAX_MESSAGE_LENGTH, MessageService


def make_candidate(text="hello", posted_by=1, epoch=1000):
    return Message(posted_by=posted_by, message_text=text, time_posted_epoch=epoch)


class TestCreateMessage:
    """Tests for the message creation rules."""

    @pytest.fixture(autouse=True)
    def _service(self, mock_message_repository):
        self.repository = mock_message_repository
        self.service = MessageService(mock_message_repository)

    @pytest.mark.asyncio
    async def test_create_message_success(self, sample_account, sample_message):
        self.repository.insert.return_value = sample_message

        result = await self.service.create_message(make_candidate(), sample_account)

        assert result.message_id == 10
        self.repository.insert.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_message_without_author(self):
        """An unresolved author (None) is a validation failure."""
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_message(make_candidate(), None)

        assert exc_info.value.field == "posted_by"
        self.repository.insert.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", None, "x" * (MAX_MESSAGE_LENGTH + 1)])
    async def test_create_message_invalid_text(self, sample_account, text):
        with pytest.raises(ValidationError):
            await self.service.create_message(make_candidate(text=text), sample_account)

        self.repository.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_message_at_max_length(self, sample_account):
        """Exactly 254 characters is accepted."""
        text = "x" * MAX_MESSAGE_LENGTH
        self.repository.insert.return_value = Message(
            message_id=11, posted_by=1, message_text=text, time_posted_epoch=1000
        )

        result = await self.service.create_message(make_candidate(text=text), sample_account)

        assert len(result.message_text) == 254

    @pytest.mark.asyncio
    async def test_create_message_author_mismatch(self):
        """The resolved author must be the account named in posted_by."""
        other = Account(account_id=2, username="bob", password="abcd")

        with pytest.raises(AuthorizationError):
            await self.service.create_message(make_candidate(posted_by=1), other)

        self.repository.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_message_persistence_failure(self, sample_account):
        self.repository.insert.side_effect = PersistenceError("Error while inserting a message")

        with pytest.raises(ServiceError) as exc_info:
            await self.service.create_message(make_candidate(), sample_account)

        assert isinstance(exc_info.value.__cause__, PersistenceError)


class TestUpdateMessage:
    """Tests for text-only updates."""

    @pytest.fixture(autouse=True)
    def _service(self, mock_message_repository):
        self.repository = mock_message_repository
        self.service = MessageService(mock_message_repository)

    @pytest.mark.asyncio
    async def test_update_message_changes_text_only(self, sample_message):
        """posted_by and time_posted_epoch keep their stored values."""
        self.repository.get_by_id.return_value = sample_message
        self.repository.update.return_value = True
        candidate = Message(message_id=10, posted_by=99, message_text="hello edited", time_posted_epoch=5)

        result = await self.service.update_message(candidate)

        assert result.message_id == 10
        assert result.message_text == "hello edited"
        assert result.posted_by == 1
        assert result.time_posted_epoch == 1000
        persisted = self.repository.update.await_args.args[0]
        assert persisted.posted_by == 1
        assert persisted.time_posted_epoch == 1000

    @pytest.mark.asyncio
    async def test_update_missing_message(self):
        self.repository.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.update_message(Message(message_id=404, message_text="hi"))

        self.repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "  ", None, "y" * 255])
    async def test_update_message_invalid_text(self, sample_message, text):
        self.repository.get_by_id.return_value = sample_message

        with pytest.raises(ValidationError):
            await self.service.update_message(Message(message_id=10, message_text=text))

        self.repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_affecting_no_rows(self, sample_message):
        """A row deleted between fetch and update is reported as not found."""
        self.repository.get_by_id.return_value = sample_message
        self.repository.update.return_value = False

        with pytest.raises(NotFoundError):
            await self.service.update_message(Message(message_id=10, message_text="new"))


class TestDeleteMessage:
    """Tests for delete-by-identity."""

    @pytest.fixture(autouse=True)
    def _service(self, mock_message_repository):
        self.repository = mock_message_repository
        self.service = MessageService(mock_message_repository)

    @pytest.mark.asyncio
    async def test_delete_message_returns_deleted(self, sample_message):
        self.repository.delete.return_value = True

        result = await self.service.delete_message(sample_message)

        assert result is sample_message

    @pytest.mark.asyncio
    async def test_delete_message_not_found(self, sample_message):
        self.repository.delete.return_value = False

        with pytest.raises(NotFoundError):
            await self.service.delete_message(sample_message)

    @pytest.mark.asyncio
    async def test_delete_twice_never_succeeds_twice(self, sample_message):
        self.repository.delete.side_effect = [True, False]

        await self.service.delete_message(sample_message)
        with pytest.raises(NotFoundError):
            await self.service.delete_message(sample_message)


class TestMessageReads:
    """Tests for pass-through reads."""

    @pytest.fixture(autouse=True)
    def _service(self, mock_message_repository):
        self.repository = mock_message_repository
        self.service = MessageService(mock_message_repository)

    @pytest.mark.asyncio
    async def test_get_message_by_id_miss(self):
        self.repository.get_by_id.return_value = None

        assert await self.service.get_message_by_id(1) is None

    @pytest.mark.asyncio
    async def test_get_all_messages(self, sample_message):
        self.repository.get_all.return_value = [sample_message]

        assert await self.service.get_all_messages() == [sample_message]

    @pytest.mark.asyncio
    async def test_get_messages_by_account_id(self, sample_message):
        self.repository.find_by_posted_by.return_value = [sample_message]

        result = await self.service.get_messages_by_account_id(1)

        assert result == [sample_message]
        self.repository.find_by_posted_by.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_reads_wrap_persistence_errors(self):
        self.repository.get_by_id.side_effect = PersistenceError("db down")
        self.repository.find_by_posted_by.side_effect = PersistenceError("db down")

        with pytest.raises(ServiceError):
            await self.service.get_message_by_id(1)
        with pytest.raises(ServiceError):
            await self.service.get_messages_by_account_id(1)
