"""
Microblog Backend: Message SQLAlchemy Model
===========================================

What:  ORM model representing the `message` table.
Who:   Used by MessageRepository for queries and by MessageService as the
       entity type passed between layers.

Table Design:
    - message_id: integer primary key assigned by the database, never reused
    - posted_by: references account.account_id; the service checks the
      author exists at creation time, deletes do not cascade
    - message_text: VARCHAR(255); the service caps text at 254 characters
    - time_posted_epoch: caller-supplied epoch timestamp (BIGINT)

Index on posted_by:
    Serves GET /accounts/{account_id}/messages.
"""

from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from microblog.database import Base


class Message(Base):
    """
    A text post made by an account.

    Lifecycle:
        absent → active   on create
        active → active   on update (text only)
        active → absent   on delete (row removed, no soft delete)
    """

    __tablename__ = "message"
    __table_args__ = {"sqlite_autoincrement": True}

    message_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    posted_by: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("account.account_id"),
        nullable=False,
        index=True,
    )

    message_text: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    time_posted_epoch: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Message(message_id={self.message_id}, posted_by={self.posted_by}, "
            f"time_posted_epoch={self.time_posted_epoch})>"
        )
