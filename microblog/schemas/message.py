"""
Microblog Backend: Message Request/Response Schemas
===================================================

What:  Pydantic models for the /messages payloads.
How:   Requests are converted to transient Message entities for the
       service layer; responses are built from ORM objects
       (from_attributes).
"""

from typing import Optional

from pydantic import BaseModel, Field

from microblog.models.message import Message


class MessageCreate(BaseModel):
    """
    What:  Body of POST /messages.
    Example:
        {"posted_by": 1, "message_text": "hello", "time_posted_epoch": 1000}
    """
    posted_by: int = Field(description="account_id of the author")
    message_text: Optional[str] = Field(default=None, description="Text, 1-254 characters")
    time_posted_epoch: int = Field(description="Client-supplied epoch timestamp")

    def to_entity(self) -> Message:
        return Message(
            posted_by=self.posted_by,
            message_text=self.message_text,
            time_posted_epoch=self.time_posted_epoch,
        )


class MessageUpdate(BaseModel):
    """
    What:  Body of PATCH /messages/{message_id}.
    Only message_text is honored; any other field sent is ignored.
    """
    message_text: Optional[str] = Field(default=None, description="Replacement text")

    model_config = {"extra": "ignore"}

    def to_entity(self, message_id: int) -> Message:
        return Message(message_id=message_id, message_text=self.message_text)


class MessageResponse(BaseModel):
    """What:  A stored message."""
    message_id: int = Field(description="Store-assigned message identifier")
    posted_by: int = Field(description="account_id of the author")
    message_text: str = Field(description="Message text")
    time_posted_epoch: int = Field(description="Client-supplied epoch timestamp")

    model_config = {"from_attributes": True}
