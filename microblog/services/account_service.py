"""
Microblog Backend: Account Service
==================================

What:  Business rules for registration, login and account maintenance.
How:   Validates candidates, then delegates to AccountRepository.
       Persistence faults are wrapped in ServiceError (or translated into
       ConflictError for duplicate usernames) before leaving this module.
Who:   Called by the /register and /login routes, and by the message routes
       to resolve a message author.

Registration Rules:
    - username and password are trimmed before any check
    - username must be non-empty
    - password must be non-empty and at least 4 characters
    - username must not already exist; the existence query is backed by the
      schema's UNIQUE constraint, so a concurrent duplicate insert also
      surfaces as ConflictError
"""

import logging
from typing import List, Optional

from microblog.exceptions import (
    ConflictError,
    DuplicateKeyError,
    InvalidArgumentError,
    PersistenceError,
    ServiceError,
    ValidationError,
)
from microblog.models.account import Account
from microblog.repositories.account_repository import AccountRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 4


class AccountService:
    """
    Domain operations on accounts.

    Error Handling Strategy:
        Rule violations raise ValidationError / ConflictError /
        InvalidArgumentError. Any PersistenceError from the repository is
        re-raised as ServiceError with the original chained as __cause__.
    """

    def __init__(self, repository: AccountRepository):
        self.repository = repository

    async def create_account(self, candidate: Account) -> Account:
        """
        Register a new account.

        Returns:
            The persisted account, including its assigned account_id.

        Raises:
            ValidationError: blank username, blank or too-short password
            ConflictError: username already registered
            ServiceError: the database failed
        """
        username = (candidate.username or "").strip()
        password = (candidate.password or "").strip()

        if not username:
            raise ValidationError("Username cannot be blank", field="username")
        if not password:
            raise ValidationError("Password cannot be blank", field="password")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                field="password",
            )

        try:
            if await self.repository.username_exists(username):
                raise ConflictError(
                    f"Username '{username}' already exists",
                    context={"username": username},
                )
            account = await self.repository.insert(
                Account(username=username, password=password)
            )
        except DuplicateKeyError as e:
            logger.info("Concurrent registration for username %s rejected", username)
            raise ConflictError(
                f"Username '{username}' already exists",
                context={"username": username},
            ) from e
        except PersistenceError as e:
            raise ServiceError("Could not create the account", context=e.context) from e

        logger.info("Registered account %d (%s)", account.account_id, account.username)
        return account

    async def validate_login(self, candidate: Account) -> Optional[Account]:
        """
        Check a username/password pair.

        Returns the stored account only when the username exists and the
        stored password equals the supplied one exactly. Unknown usernames
        and wrong passwords both return None.
        """
        try:
            account = await self.repository.find_by_username(candidate.username)
        except PersistenceError as e:
            raise ServiceError("Could not validate login", context=e.context) from e

        if account is not None and account.password == candidate.password:
            return account
        logger.info("Login rejected for username %r", candidate.username)
        return None

    async def get_account_by_id(self, account_id: int) -> Optional[Account]:
        try:
            return await self.repository.get_by_id(account_id)
        except PersistenceError as e:
            raise ServiceError(
                f"Could not retrieve account {account_id}", context=e.context
            ) from e

    async def get_all_accounts(self) -> List[Account]:
        try:
            return await self.repository.get_all()
        except PersistenceError as e:
            raise ServiceError("Could not retrieve accounts", context=e.context) from e

    async def update_account(self, account: Account) -> bool:
        try:
            return await self.repository.update(account)
        except PersistenceError as e:
            raise ServiceError(
                f"Could not update account {account.account_id}", context=e.context
            ) from e

    async def delete_account(self, account: Account) -> bool:
        """
        Delete an account by id.

        Raises:
            InvalidArgumentError: account_id is 0 or unset
            ServiceError: the database failed
        """
        if not account.account_id:
            raise InvalidArgumentError(
                "Account id cannot be null or zero", argument="account_id"
            )
        try:
            return await self.repository.delete(account)
        except PersistenceError as e:
            raise ServiceError(
                f"Could not delete account {account.account_id}", context=e.context
            ) from e
