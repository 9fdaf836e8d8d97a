"""
Microblog Backend: Account Repository
=====================================

What:  All SQL touching the `account` table.
Who:   Used by AccountService; constructed per request with the request's
       AsyncSession (see microblog.dependencies).
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, func, select, update

from microblog.exceptions import PersistenceError
from microblog.models.account import Account
from microblog.repositories.base import Repository

logger = logging.getLogger(__name__)


class AccountRepository(Repository[Account]):
    """Data access object for accounts."""

    async def get_by_id(self, account_id: int) -> Optional[Account]:
        result = await self._execute(
            select(Account).where(Account.account_id == account_id),
            f"Error while retrieving the account with ID: {account_id}",
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> List[Account]:
        result = await self._execute(
            select(Account).order_by(Account.account_id),
            "Error while retrieving all accounts",
        )
        return list(result.scalars().all())

    async def find_by_username(self, username: str) -> Optional[Account]:
        result = await self._execute(
            select(Account).where(Account.username == username),
            f"Error while finding account with username: {username}",
        )
        return result.scalars().first()

    async def username_exists(self, username: str) -> bool:
        result = await self._execute(
            select(func.count()).select_from(Account).where(Account.username == username),
            f"Error while checking if username exists: {username}",
        )
        return (result.scalar() or 0) > 0

    async def insert(self, account: Account) -> Account:
        """
        Insert a new account and return it with its assigned account_id.

        Raises:
            DuplicateKeyError: username already taken (UNIQUE constraint)
            PersistenceError: any other failure, including no id assigned
        """
        entity = Account(username=account.username, password=account.password)
        self.session.add(entity)
        await self._flush("Creating account failed due to SQL error")

        if entity.account_id is None:
            raise PersistenceError(
                message="Creating account failed, no ID obtained.",
                operation=type(self).__name__,
            )
        logger.info("Account created: %s (id=%d)", entity.username, entity.account_id)
        return entity

    async def update(self, account: Account) -> bool:
        result = await self._execute(
            update(Account)
            .where(Account.account_id == account.account_id)
            .values(username=account.username, password=account.password),
            "Updating account failed due to SQL error",
        )
        return result.rowcount > 0

    async def delete(self, account: Account) -> bool:
        result = await self._execute(
            delete(Account).where(Account.account_id == account.account_id),
            "Deleting account failed due to SQL error",
        )
        return result.rowcount > 0
