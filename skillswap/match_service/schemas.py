from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from skillswap.user_service.schemas import UserOut


class MatchRequestCreate(BaseModel):
    target_id: int


class SessionStart(BaseModel):
    mode: str = "chat"


class MatchCandidateOut(BaseModel):
    candidate: UserOut
    common_skills_have: List[str] = []
    common_skills_to_learn: List[str] = []
    match_score: int

    class Config:
        from_attributes = True


class MatchRequestOut(BaseModel):
    id: int
    requester_id: int
    target_id: int
    status: str
    is_read: bool = False
    match_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotificationOut(MatchRequestOut):
    requester_name: str
    requester_skills: List[str] = []
    requester_skills_to_learn: List[str] = []


class MatchOut(BaseModel):
    id: int
    requester_id: int
    target_id: int
    status: str
    session_mode: Optional[str] = None
    last_session_at: Optional[datetime] = None
    total_sessions: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MatchWithPartnerOut(MatchOut):
    partner: Optional[UserOut] = None
