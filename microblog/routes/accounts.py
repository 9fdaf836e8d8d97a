"""
Microblog Backend: Account Route Handlers
=========================================

What:  Handles POST /register and POST /login.
How:   Decodes the credentials body, delegates to AccountService, returns
       the account as JSON.

Status codes:
    /register: 200 with the created account; 400 on blank fields, short
               password or duplicate username (via the ServiceError handler)
    /login:    200 with the matched account; 401 when nothing matches
"""

import logging

from fastapi import APIRouter, Depends

from microblog.dependencies import get_account_service
from microblog.exceptions import AuthenticationError
from microblog.schemas.account import AccountCredentials, AccountResponse
from microblog.schemas.common import ErrorResponse
from microblog.services.account_service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Accounts"])


@router.post(
    "/register",
    response_model=AccountResponse,
    responses={
        200: {"description": "Account created", "model": AccountResponse},
        400: {"description": "Invalid or duplicate credentials", "model": ErrorResponse},
    },
    summary="Register a new account",
)
async def register(
    payload: AccountCredentials,
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    account = await account_service.create_account(payload.to_entity())
    return AccountResponse.model_validate(account)


@router.post(
    "/login",
    response_model=AccountResponse,
    responses={
        200: {"description": "Credentials matched", "model": AccountResponse},
        401: {"description": "Credentials did not match", "model": ErrorResponse},
    },
    summary="Check a username/password pair",
)
async def login(
    payload: AccountCredentials,
    account_service: AccountService = Depends(get_account_service),
) -> AccountResponse:
    """
    Stateless credential check.

    No session or token is issued; the response is the stored account when
    the username exists and the password matches exactly.
    """
    account = await account_service.validate_login(payload.to_entity())
    if account is None:
        raise AuthenticationError()
    return AccountResponse.model_validate(account)
