"""
Microblog Backend: Message Route Handlers
=========================================

What:  Handles the /messages resource and GET /accounts/{account_id}/messages.
How:   Decodes path/body parameters, delegates to MessageService (and
       AccountService to resolve authors), returns JSON.

Empty-body responses:
    GET and DELETE on a message id that does not exist answer 200 with an
    empty body rather than 404. DELETE is therefore idempotent: the second
    delete of the same id is a no-op.

Non-numeric ids in the path fail FastAPI's int conversion and are answered
with 400 by the RequestValidationError handler in main.py.
"""

import logging
from typing import List, Union

from fastapi import APIRouter, Depends, Response

from microblog.dependencies import get_account_service, get_message_service
from microblog.exceptions import NotFoundError
from microblog.schemas.common import ErrorResponse
from microblog.schemas.message import MessageCreate, MessageResponse, MessageUpdate
from microblog.services.account_service import AccountService
from microblog.services.message_service import MessageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Messages"])


def _empty_response() -> Response:
    return Response(status_code=200)


@router.post(
    "/messages",
    response_model=MessageResponse,
    responses={
        200: {"description": "Message created", "model": MessageResponse},
        400: {"description": "Invalid text, unknown or mismatched author", "model": ErrorResponse},
    },
    summary="Post a new message",
)
async def create_message(
    payload: MessageCreate,
    account_service: AccountService = Depends(get_account_service),
    message_service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    author = await account_service.get_account_by_id(payload.posted_by)
    message = await message_service.create_message(payload.to_entity(), author)
    return MessageResponse.model_validate(message)


@router.get(
    "/messages",
    response_model=List[MessageResponse],
    summary="List all messages",
)
async def list_messages(
    message_service: MessageService = Depends(get_message_service),
) -> List[MessageResponse]:
    messages = await message_service.get_all_messages()
    return [MessageResponse.model_validate(m) for m in messages]


@router.get(
    "/messages/{message_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "The message, or an empty body when it does not exist"},
        400: {"description": "message_id is not numeric", "model": ErrorResponse},
    },
    summary="Get a single message",
)
async def get_message(
    message_id: int,
    message_service: MessageService = Depends(get_message_service),
) -> Union[MessageResponse, Response]:
    message = await message_service.get_message_by_id(message_id)
    if message is None:
        return _empty_response()
    return MessageResponse.model_validate(message)


@router.delete(
    "/messages/{message_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "The deleted message, or an empty body when it did not exist"},
    },
    summary="Delete a message",
)
async def delete_message(
    message_id: int,
    message_service: MessageService = Depends(get_message_service),
) -> Union[MessageResponse, Response]:
    existing = await message_service.get_message_by_id(message_id)
    if existing is None:
        return _empty_response()

    try:
        deleted = await message_service.delete_message(existing)
    except NotFoundError:
        # Removed by another request between the lookup and the delete
        logger.info("Message %d already deleted", message_id)
        return _empty_response()
    return MessageResponse.model_validate(deleted)


@router.patch(
    "/messages/{message_id}",
    response_model=MessageResponse,
    responses={
        200: {"description": "Message updated", "model": MessageResponse},
        400: {"description": "Invalid text or unknown message", "model": ErrorResponse},
    },
    summary="Replace the text of a message",
)
async def update_message(
    message_id: int,
    payload: MessageUpdate,
    message_service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    message = await message_service.update_message(payload.to_entity(message_id))
    return MessageResponse.model_validate(message)


@router.get(
    "/accounts/{account_id}/messages",
    response_model=List[MessageResponse],
    responses={
        400: {"description": "Service fault", "model": ErrorResponse},
    },
    summary="List the messages posted by one account",
)
async def list_account_messages(
    account_id: int,
    message_service: MessageService = Depends(get_message_service),
) -> List[MessageResponse]:
    messages = await message_service.get_messages_by_account_id(account_id)
    return [MessageResponse.model_validate(m) for m in messages]
