import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from skillswap.core.result import ErrorKind, Result
from skillswap.db.models import Message
from skillswap.db.transaction import transactional
from skillswap.match_service.connections import ACTIVE_STATUSES
from skillswap.match_service.repository import MatchRepository

logger = logging.getLogger("chat_service")

MESSAGE_TYPES = ("text", "file", "link")


class MessageRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, match_id: int, sender_id: int, body: str, type: str) -> Message:
        message = Message(match_id=match_id, sender_id=sender_id, body=body, type=type, created_at=datetime.utcnow())
        self.session.add(message)
        await self.session.flush()
        return message

    async def list_for_match(self, match_id: int, after_id: int = None):
        query = select(Message).filter(Message.match_id == match_id)
        if after_id is not None:
            query = query.filter(Message.id > after_id)
        result = await self.session.execute(query.order_by(Message.created_at.asc(), Message.id.asc()))
        return list(result.scalars().all())


class ChatService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.matches = MatchRepository(session)
        self.messages = MessageRepository(session)

    async def _participant_match(self, match_id: int, user_id: int):
        match = await self.matches.get(match_id)
        if not match:
            return None, Result.not_found("Match not found")
        if user_id not in match.users:
            return None, Result.failure(ErrorKind.FORBIDDEN, "Not a participant of this match")
        return match, None

    @transactional
    async def send_message(self, match_id: int, sender_id: int, body: str, type: str = "text") -> Result:
        if not (body or "").strip():
            return Result.invalid("Message must not be empty")
        if type not in MESSAGE_TYPES:
            return Result.invalid(f"Unknown message type '{type}'")
        match, failure = await self._participant_match(match_id, sender_id)
        if failure:
            return failure
        if match.status not in ACTIVE_STATUSES:
            return Result.failure(ErrorKind.INVALID_STATE, "Chat opens once the match is connected")
        message = await self.messages.create(match_id, sender_id, body, type)
        logger.info(f"User {sender_id} sent message {message.id} in match {match_id}")
        return Result.success(message)

    @transactional
    async def list_messages(self, match_id: int, user_id: int, after_id: int = None) -> Result:
        match, failure = await self._participant_match(match_id, user_id)
        if failure:
            return failure
        return Result.success(await self.messages.list_for_match(match_id, after_id))
