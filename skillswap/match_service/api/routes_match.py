from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from skillswap.core.errors import raise_for_result
from skillswap.core.events import MATCHES_TOPIC, NOTIFICATIONS_TOPIC, RefreshNotifier, get_notifier
from skillswap.core.security import get_current_user_id
from skillswap.db.database import get_async_session
from skillswap.user_service.schemas import UserOut
from .. import schemas
from ..connections import ConnectionService

match_router = APIRouter(tags=["Matches"])
notifications_router = APIRouter(tags=["Notifications"])

logger = logging.getLogger("match_service")


def _candidate_out(candidate) -> schemas.MatchCandidateOut:
    return schemas.MatchCandidateOut(
        candidate=UserOut.model_validate(candidate.candidate),
        common_skills_have=candidate.common_skills_have,
        common_skills_to_learn=candidate.common_skills_to_learn,
        match_score=candidate.match_score,
    )


def _match_out(item) -> schemas.MatchWithPartnerOut:
    partner = item["partner"]
    return schemas.MatchWithPartnerOut(
        **schemas.MatchOut.model_validate(item["match"]).model_dump(),
        partner=UserOut.model_validate(partner) if partner else None,
    )


def _notification_out(item) -> schemas.NotificationOut:
    requester = item["requester"]
    return schemas.NotificationOut(
        **schemas.MatchRequestOut.model_validate(item["request"]).model_dump(),
        requester_name=requester.name,
        requester_skills=requester.skills_have or [],
        requester_skills_to_learn=requester.skills_to_learn or [],
    )


@match_router.get("/potential", response_model=List[schemas.MatchCandidateOut])
async def potential_matches(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    candidates = raise_for_result(await ConnectionService(db).find_matches(user_id))
    return [_candidate_out(c) for c in candidates]


@match_router.get("/", response_model=List[schemas.MatchWithPartnerOut])
async def my_matches(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    items = raise_for_result(await ConnectionService(db).list_matches(user_id))
    return [_match_out(item) for item in items]


@match_router.post("/requests", response_model=schemas.MatchRequestOut, status_code=201)
async def request_match(
    data: schemas.MatchRequestCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    notifier: RefreshNotifier = Depends(get_notifier),
):
    request = raise_for_result(await ConnectionService(db).create_match_request(user_id, data.target_id))
    notifier.publish(NOTIFICATIONS_TOPIC, {"request_id": request.id, "target_id": request.target_id})
    return request


@match_router.post("/{match_id}/session/start", response_model=schemas.MatchOut)
async def start_session(
    match_id: int,
    data: schemas.SessionStart,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    notifier: RefreshNotifier = Depends(get_notifier),
):
    match = raise_for_result(await ConnectionService(db).start_learning_session(match_id, data.mode, user_id))
    notifier.publish(MATCHES_TOPIC, {"match_id": match.id, "status": match.status})
    return match


@match_router.post("/{match_id}/session/end", response_model=schemas.MatchOut)
async def end_session(
    match_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    notifier: RefreshNotifier = Depends(get_notifier),
):
    match = raise_for_result(await ConnectionService(db).end_learning_session(match_id, user_id))
    notifier.publish(MATCHES_TOPIC, {"match_id": match.id, "status": match.status})
    return match


@notifications_router.get("/", response_model=List[schemas.NotificationOut])
async def my_notifications(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    items = raise_for_result(await ConnectionService(db).list_notifications(user_id))
    return [_notification_out(item) for item in items]


@notifications_router.post("/{request_id}/accept", response_model=schemas.MatchOut)
async def accept_request(
    request_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    notifier: RefreshNotifier = Depends(get_notifier),
):
    match = raise_for_result(await ConnectionService(db).accept_match_request(request_id, user_id))
    notifier.publish(MATCHES_TOPIC, {"match_id": match.id, "status": match.status})
    return match


@notifications_router.post("/{request_id}/reject", response_model=schemas.MatchRequestOut)
async def reject_request(request_id: int, user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(await ConnectionService(db).reject_match_request(request_id, user_id))


@notifications_router.post("/{request_id}/read", response_model=schemas.MatchRequestOut)
async def read_notification(request_id: int, user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(await ConnectionService(db).mark_notification_read(request_id, user_id))
