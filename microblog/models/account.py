"""
Microblog Backend: Account SQLAlchemy Model
===========================================

What:  ORM model representing the `account` table.
Who:   Used by AccountRepository for queries and by AccountService as the
       entity type passed between layers.

Table Design:
    - account_id: integer primary key assigned by the database
    - username: UNIQUE at the schema level, so concurrent registrations of
      the same name cannot both commit
    - password: stored as submitted (no hashing in this system)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from microblog.database import Base


class Account(Base):
    """
    A registered user.

    Lifecycle:
        1. Created on registration (POST /register)
        2. Only the password may change afterwards
        3. Deleted explicitly; messages are not cascaded
    """

    __tablename__ = "account"
    # AUTOINCREMENT keeps SQLite from reissuing the id of a deleted row
    __table_args__ = {"sqlite_autoincrement": True}

    account_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Account(account_id={self.account_id}, username='{self.username}')>"
