from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime


class UserBase(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    bio: Optional[str] = None
    location: Optional[str] = None
    skills_have: List[str] = []
    skills_to_learn: List[str] = []


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    skills_have: Optional[List[str]] = None
    skills_to_learn: Optional[List[str]] = None


class UserOut(BaseModel):
    id: int
    name: str
    bio: Optional[str] = None
    location: Optional[str] = None
    skills_have: List[str] = []
    skills_to_learn: List[str] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
