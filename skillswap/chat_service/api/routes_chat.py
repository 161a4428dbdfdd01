from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from skillswap.core.errors import raise_for_result
from skillswap.core.events import RefreshNotifier, chat_topic, get_notifier
from skillswap.core.security import get_current_user_id
from skillswap.db.database import get_async_session
from .. import schemas
from ..service import ChatService

router = APIRouter(tags=["Chat"])


@router.get("/{match_id}/messages", response_model=List[schemas.MessageOut])
async def list_messages(
    match_id: int,
    after: Optional[int] = None,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
):
    return raise_for_result(await ChatService(db).list_messages(match_id, user_id, after))


@router.post("/{match_id}/messages", response_model=schemas.MessageOut, status_code=201)
async def send_message(
    match_id: int,
    data: schemas.MessageCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    notifier: RefreshNotifier = Depends(get_notifier),
):
    message = raise_for_result(await ChatService(db).send_message(match_id, user_id, data.body, data.type))
    notifier.publish(chat_topic(match_id), {"message_id": message.id, "sender_id": user_id})
    return message
