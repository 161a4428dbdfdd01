from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from skillswap.db.models import Course, User

COURSE_FIELDS = ("title", "description", "level", "duration", "is_public", "tags", "sections")


class CourseRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, course_id: int) -> Optional[Course]:
        result = await self.session.execute(select(Course).filter(Course.id == course_id))
        return result.scalars().first()

    async def create(self, instructor_id: int, fields: dict) -> Course:
        now = datetime.utcnow()
        course = Course(instructor_id=instructor_id, created_at=now, updated_at=now)
        for key in COURSE_FIELDS:
            if key in fields:
                setattr(course, key, fields[key])
        self.session.add(course)
        await self.session.flush()
        return course

    async def update(self, course_id: int, fields: dict) -> Optional[Course]:
        course = await self.get(course_id)
        if not course:
            return None
        for key, value in fields.items():
            if key in COURSE_FIELDS:
                setattr(course, key, value)
        course.updated_at = datetime.utcnow()
        await self.session.flush()
        return course

    async def delete(self, course: Course):
        await self.session.delete(course)
        await self.session.flush()

    async def list_public_with_instructor(self):
        result = await self.session.execute(
            select(Course, User)
            .join(User, Course.instructor_id == User.id)
            .filter(Course.is_public == True)  # noqa: E712
            .order_by(Course.created_at.desc(), Course.id.desc())
        )
        return result.all()

    async def list_by_instructors_with_instructor(self, instructor_ids):
        if not instructor_ids:
            return []
        result = await self.session.execute(
            select(Course, User)
            .join(User, Course.instructor_id == User.id)
            .filter(Course.instructor_id.in_(list(instructor_ids)))
            .order_by(Course.created_at.desc(), Course.id.desc())
        )
        return result.all()

    async def list_by_instructor(self, instructor_id: int) -> List[Course]:
        result = await self.session.execute(
            select(Course).filter(Course.instructor_id == instructor_id).order_by(Course.created_at.desc(), Course.id.desc())
        )
        return list(result.scalars().all())
