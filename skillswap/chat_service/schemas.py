from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class MessageCreate(BaseModel):
    body: str
    type: str = "text"


class MessageOut(BaseModel):
    id: int
    match_id: int
    sender_id: int
    body: str
    type: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
