from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from skillswap.db.models import CourseProgress

PROGRESS_FIELDS = ("completed_lessons", "current_section", "current_lesson", "total_lessons")


class ProgressRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: int, course_id: int) -> Optional[CourseProgress]:
        result = await self.session.execute(select(CourseProgress).filter_by(user_id=user_id, course_id=course_id))
        return result.scalars().first()

    async def upsert(self, user_id: int, course_id: int, fields: dict) -> CourseProgress:
        """Merge ``fields`` into the record, creating it when missing."""
        progress = await self.get(user_id, course_id)
        if not progress:
            progress = CourseProgress(
                user_id=user_id,
                course_id=course_id,
                completed_lessons=[],
                current_section=0,
                current_lesson=0,
                total_lessons=None,
            )
            self.session.add(progress)
        for key, value in fields.items():
            if key in PROGRESS_FIELDS:
                # JSON-колонки присваиваем целиком, иначе изменение не отследится
                setattr(progress, key, list(value) if key == "completed_lessons" else value)
        progress.updated_at = datetime.utcnow()
        await self.session.flush()
        return progress

    async def list_for_user(self, user_id: int) -> List[CourseProgress]:
        result = await self.session.execute(
            select(CourseProgress).filter_by(user_id=user_id).order_by(CourseProgress.updated_at.desc())
        )
        return list(result.scalars().all())

    async def list_for_course(self, course_id: int) -> List[CourseProgress]:
        result = await self.session.execute(select(CourseProgress).filter_by(course_id=course_id))
        return list(result.scalars().all())
