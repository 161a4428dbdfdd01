"""
Connection lifecycle between two users.

A match request goes ``pending -> accepted | rejected``. Accepting one spawns
a Match in ``connected`` status; a match then moves ``connected <->
in_session`` as learning sessions start and end. Matches never reach a
terminal state.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.core.result import ErrorKind, Result
from skillswap.db.transaction import transactional
from skillswap.user_service.repository import UserRepository
from .matcher import excluded_user_ids, find_potential_matches
from .repository import MatchRepository, NotificationRepository

logger = logging.getLogger("match_service")


class MatchStatus:
    PENDING = "pending"
    ACCEPTED = "accepted"
    CONNECTED = "connected"
    IN_SESSION = "in_session"


class RequestStatus:
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


SESSION_MODES = ("chat", "video", "files")

# statuses from which a learning session may start
SESSION_READY = (MatchStatus.ACCEPTED, MatchStatus.CONNECTED)
# statuses in which partners may talk to each other
ACTIVE_STATUSES = (MatchStatus.ACCEPTED, MatchStatus.CONNECTED, MatchStatus.IN_SESSION)


class ConnectionService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.matches = MatchRepository(session)
        self.notifications = NotificationRepository(session)

    @transactional
    async def find_matches(self, user_id: int) -> Result:
        current_user = await self.users.get(user_id)
        if not current_user:
            return Result.not_found("Current user not found")
        existing = await self.matches.list_by_user(user_id)
        pending = await self.notifications.list_pending_involving(user_id)
        all_users = await self.users.get_all()
        candidates = find_potential_matches(current_user, all_users, excluded_user_ids(user_id, existing, pending))
        logger.info(f"Found {len(candidates)} potential matches for user {user_id}")
        return Result.success(candidates)

    @transactional
    async def create_match_request(self, requester_id: int, target_id: int) -> Result:
        if requester_id == target_id:
            return Result.invalid("Cannot send a match request to yourself")
        if not await self.users.get(requester_id):
            return Result.not_found("Requester not found")
        if not await self.users.get(target_id):
            return Result.not_found("Target user not found")
        if await self.notifications.find_pending(requester_id, target_id):
            logger.warning(f"Duplicate match request {requester_id} -> {target_id}")
            return Result.failure(ErrorKind.DUPLICATE_REQUEST, "Match request already sent")
        try:
            request = await self.notifications.create(requester_id, target_id)
        except IntegrityError:
            # параллельный запрос успел раньше, сработал уникальный индекс
            logger.warning(f"Duplicate match request {requester_id} -> {target_id} rejected by the database")
            return Result.failure(ErrorKind.DUPLICATE_REQUEST, "Match request already sent")
        logger.info(f"Match request {request.id} created: {requester_id} -> {target_id}")
        return Result.success(request)

    async def _load_pending(self, request_id: int, acting_user_id):
        request = await self.notifications.get(request_id)
        if not request:
            return None, Result.not_found("Notification not found")
        if acting_user_id is not None and request.target_id != acting_user_id:
            return None, Result.failure(ErrorKind.FORBIDDEN, "Only the recipient can answer this request")
        if request.status != RequestStatus.PENDING:
            return None, Result.failure(ErrorKind.INVALID_STATE, f"Request is already {request.status}")
        return request, None

    @transactional
    async def accept_match_request(self, request_id: int, acting_user_id: int = None) -> Result:
        request, failure = await self._load_pending(request_id, acting_user_id)
        if failure:
            return failure
        if not await self.notifications.claim_pending(request.id, RequestStatus.ACCEPTED):
            return Result.failure(ErrorKind.INVALID_STATE, "Request was answered in the meantime")
        # обе записи фиксируются одним коммитом
        match = await self.matches.create(request.requester_id, request.target_id, status=MatchStatus.CONNECTED)
        await self.notifications.update_status(request.id, RequestStatus.ACCEPTED, match_id=match.id)
        logger.info(f"Request {request.id} accepted, match {match.id} connected")
        return Result.success(match)

    @transactional
    async def reject_match_request(self, request_id: int, acting_user_id: int = None) -> Result:
        request, failure = await self._load_pending(request_id, acting_user_id)
        if failure:
            return failure
        if not await self.notifications.claim_pending(request.id, RequestStatus.REJECTED):
            return Result.failure(ErrorKind.INVALID_STATE, "Request was answered in the meantime")
        request = await self.notifications.get(request.id)
        logger.info(f"Request {request.id} rejected")
        return Result.success(request)

    @transactional
    async def mark_notification_read(self, request_id: int, acting_user_id: int = None) -> Result:
        request = await self.notifications.get(request_id)
        if not request:
            return Result.not_found("Notification not found")
        if acting_user_id is not None and request.target_id != acting_user_id:
            return Result.failure(ErrorKind.FORBIDDEN, "Only the recipient can read this notification")
        return Result.success(await self.notifications.mark_read(request_id))

    @transactional
    async def list_notifications(self, user_id: int) -> Result:
        requests = await self.notifications.list_pending_for_target(user_id)
        requesters = {u.id: u for u in await self.users.get_many({r.requester_id for r in requests})}
        # запросы от удалённых профилей не показываем
        items = [
            {"request": r, "requester": requesters[r.requester_id]}
            for r in requests if r.requester_id in requesters
        ]
        return Result.success(items)

    @transactional
    async def list_matches(self, user_id: int) -> Result:
        matches = await self.matches.list_by_user(user_id)
        partners = {u.id: u for u in await self.users.get_many({m.partner_of(user_id) for m in matches})}
        return Result.success([
            {"match": m, "partner": partners.get(m.partner_of(user_id))} for m in matches
        ])

    async def _load_match(self, match_id: int, acting_user_id):
        match = await self.matches.get(match_id)
        if not match:
            return None, Result.not_found("Match not found")
        if acting_user_id is not None and acting_user_id not in match.users:
            return None, Result.failure(ErrorKind.FORBIDDEN, "Not a participant of this match")
        return match, None

    @transactional
    async def start_learning_session(self, match_id: int, mode: str = "chat", acting_user_id: int = None) -> Result:
        if mode not in SESSION_MODES:
            return Result.invalid(f"Unknown session mode '{mode}'")
        match, failure = await self._load_match(match_id, acting_user_id)
        if failure:
            return failure
        if match.status not in SESSION_READY:
            logger.warning(f"Cannot start session on match {match_id} in status {match.status}")
            return Result.failure(
                ErrorKind.INVALID_STATE,
                f"Cannot start a session while the match is {match.status}",
            )
        match = await self.matches.update_status(
            match_id,
            MatchStatus.IN_SESSION,
            session_mode=mode,
            last_session_at=datetime.utcnow(),
            total_sessions=(match.total_sessions or 0) + 1,
        )
        logger.info(f"Session started on match {match_id} ({mode})")
        return Result.success(match)

    @transactional
    async def end_learning_session(self, match_id: int, acting_user_id: int = None) -> Result:
        match, failure = await self._load_match(match_id, acting_user_id)
        if failure:
            return failure
        if match.status != MatchStatus.IN_SESSION:
            return Result.failure(ErrorKind.INVALID_STATE, "No learning session in progress")
        match = await self.matches.update_status(match_id, MatchStatus.CONNECTED)
        logger.info(f"Session ended on match {match_id}")
        return Result.success(match)
