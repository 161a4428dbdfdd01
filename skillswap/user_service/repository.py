from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from skillswap.core.skills import normalize_skills
from skillswap.db.models import User

UPDATABLE_FIELDS = ("name", "bio", "location", "skills_have", "skills_to_learn")


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(select(User).filter(User.id == user_id))
        return result.scalars().first()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).filter(User.email == email))
        return result.scalars().first()

    async def get_many(self, user_ids) -> List[User]:
        if not user_ids:
            return []
        result = await self.session.execute(select(User).filter(User.id.in_(list(user_ids))))
        return list(result.scalars().all())

    async def get_all(self) -> List[User]:
        # newest first, as the profile browser shows them
        result = await self.session.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
        return list(result.scalars().all())

    async def create(self, name: str, email: str, password_hash: str, **fields) -> User:
        now = datetime.utcnow()
        user = User(
            name=name,
            email=email,
            password_hash=password_hash,
            bio=fields.get("bio"),
            location=fields.get("location"),
            skills_have=normalize_skills(fields.get("skills_have")),
            skills_to_learn=normalize_skills(fields.get("skills_to_learn")),
            created_at=now,
            updated_at=now,
        )
        self.session.add(user)
        await self.session.flush()
        return user

    async def update(self, user_id: int, fields: dict) -> Optional[User]:
        user = await self.get(user_id)
        if not user:
            return None
        for key, value in fields.items():
            if key not in UPDATABLE_FIELDS:
                continue
            if key in ("skills_have", "skills_to_learn"):
                value = normalize_skills(value)
            setattr(user, key, value)
        user.updated_at = datetime.utcnow()
        await self.session.flush()
        return user
