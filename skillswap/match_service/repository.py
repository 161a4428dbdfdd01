from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_, and_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from skillswap.db.models import Match, MatchRequest


class MatchRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user_a: int, user_b: int, status: str = "pending") -> Match:
        now = datetime.utcnow()
        match = Match(
            requester_id=user_a,
            target_id=user_b,
            status=status,
            total_sessions=0,
            last_session_at=None,
            created_at=now,
            updated_at=now,
        )
        self.session.add(match)
        await self.session.flush()
        return match

    async def get(self, match_id: int) -> Optional[Match]:
        result = await self.session.execute(select(Match).filter(Match.id == match_id))
        return result.scalars().first()

    async def list_by_user(self, user_id: int) -> List[Match]:
        result = await self.session.execute(
            select(Match)
            .filter(or_(Match.requester_id == user_id, Match.target_id == user_id))
            .order_by(Match.updated_at.desc(), Match.id.desc())
        )
        return list(result.scalars().all())

    async def update_status(self, match_id: int, status: str, **fields) -> Optional[Match]:
        match = await self.get(match_id)
        if not match:
            return None
        match.status = status
        for key, value in fields.items():
            setattr(match, key, value)
        match.updated_at = datetime.utcnow()
        await self.session.flush()
        return match


class NotificationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, requester_id: int, target_id: int) -> MatchRequest:
        now = datetime.utcnow()
        request = MatchRequest(
            requester_id=requester_id,
            target_id=target_id,
            status="pending",
            is_read=False,
            created_at=now,
            updated_at=now,
        )
        self.session.add(request)
        await self.session.flush()
        return request

    async def get(self, request_id: int) -> Optional[MatchRequest]:
        result = await self.session.execute(select(MatchRequest).filter(MatchRequest.id == request_id))
        return result.scalars().first()

    async def find_pending(self, requester_id: int, target_id: int) -> Optional[MatchRequest]:
        result = await self.session.execute(
            select(MatchRequest).filter_by(requester_id=requester_id, target_id=target_id, status="pending")
        )
        return result.scalars().first()

    async def list_pending_for_target(self, user_id: int) -> List[MatchRequest]:
        result = await self.session.execute(
            select(MatchRequest)
            .filter_by(target_id=user_id, status="pending")
            .order_by(MatchRequest.created_at.desc(), MatchRequest.id.desc())
        )
        return list(result.scalars().all())

    async def list_pending_involving(self, user_id: int) -> List[MatchRequest]:
        result = await self.session.execute(
            select(MatchRequest).filter(
                and_(
                    MatchRequest.status == "pending",
                    or_(MatchRequest.requester_id == user_id, MatchRequest.target_id == user_id),
                )
            )
        )
        return list(result.scalars().all())

    async def update_status(self, request_id: int, status: str, **fields) -> Optional[MatchRequest]:
        request = await self.get(request_id)
        if not request:
            return None
        request.status = status
        for key, value in fields.items():
            setattr(request, key, value)
        request.updated_at = datetime.utcnow()
        await self.session.flush()
        return request

    async def claim_pending(self, request_id: int, status: str) -> bool:
        """Move a pending request to ``status`` in one conditional UPDATE; False if it was no longer pending."""
        result = await self.session.execute(
            update(MatchRequest)
            .where(MatchRequest.id == request_id, MatchRequest.status == "pending")
            .values(status=status, updated_at=datetime.utcnow())
        )
        return result.rowcount == 1

    async def mark_read(self, request_id: int) -> Optional[MatchRequest]:
        request = await self.get(request_id)
        if not request:
            return None
        request.is_read = True
        request.updated_at = datetime.utcnow()
        await self.session.flush()
        return request
