"""
Microblog Backend: Dependency Providers
=======================================

What:  FastAPI dependencies that assemble repositories and services.
How:   Each request gets its own AsyncSession from get_db_session; the
       repositories and services built on top of it live for that request
       only. FastAPI caches get_db_session per request, so the account and
       message services used by one handler share a single transaction.
Who:   Injected into route handlers with Depends(); tests swap the database
       by overriding get_db_session on the app.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from microblog.database import get_db_session
from microblog.repositories.account_repository import AccountRepository
from microblog.repositories.message_repository import MessageRepository
from microblog.services.account_service import AccountService
from microblog.services.message_service import MessageService


def get_account_service(db: AsyncSession = Depends(get_db_session)) -> AccountService:
    return AccountService(AccountRepository(db))


def get_message_service(db: AsyncSession = Depends(get_db_session)) -> MessageService:
    return MessageService(MessageRepository(db))
