import logging

from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.core.result import Result
from skillswap.course_service.repository import CourseRepository
from skillswap.course_service.structure import lesson_at
from skillswap.db.transaction import transactional
from . import tracker
from .repository import ProgressRepository

logger = logging.getLogger("progress_service")


def summarize(record) -> dict:
    state = tracker.ProgressState.from_record(record)
    return {
        "user_id": record.user_id,
        "course_id": record.course_id,
        "completed_lessons": state.completed_lessons,
        "current_section": state.current_section,
        "current_lesson": state.current_lesson,
        "total_lessons": state.total_lessons,
        "percentage": tracker.percentage(state),
        "is_completed": tracker.is_completed(state),
        "updated_at": record.updated_at,
    }


class ProgressService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.progress = ProgressRepository(session)
        self.courses = CourseRepository(session)

    async def _course_for(self, course_id: int, section_index: int, lesson_index: int):
        """Load the course and check the indices against it; unknown courses pass unchecked."""
        course = await self.courses.get(course_id)
        if course is not None and lesson_at(course.sections, section_index, lesson_index) is None:
            return course, Result.invalid(
                f"Course {course_id} has no lesson {lesson_index} in section {section_index}"
            )
        return course, None

    @transactional
    async def get(self, user_id: int, course_id: int) -> Result:
        record = await self.progress.get(user_id, course_id)
        # нет записи - это не ошибка, просто курс ещё не начат
        return Result.success(summarize(record) if record else None)

    @transactional
    async def list_for_user(self, user_id: int) -> Result:
        records = await self.progress.list_for_user(user_id)
        return Result.success({r.course_id: summarize(r) for r in records})

    @transactional
    async def complete_lesson(self, user_id: int, course_id: int, section_index: int, lesson_index: int) -> Result:
        course, failure = await self._course_for(course_id, section_index, lesson_index)
        if failure:
            return failure
        state = tracker.ProgressState.from_record(await self.progress.get(user_id, course_id))
        state = tracker.mark_lesson_complete(state, section_index, lesson_index, course)
        record = await self.progress.upsert(user_id, course_id, state.as_fields())
        logger.info(
            f"User {user_id} completed lesson {tracker.lesson_key(section_index, lesson_index)} "
            f"of course {course_id} ({tracker.percentage(state)}%)"
        )
        return Result.success(summarize(record))

    @transactional
    async def undo_lesson(self, user_id: int, course_id: int, section_index: int, lesson_index: int) -> Result:
        record = await self.progress.get(user_id, course_id)
        key = tracker.lesson_key(section_index, lesson_index)
        if not record or key not in (record.completed_lessons or []):
            return Result.invalid("Lesson is not marked as completed")
        state = tracker.unmark_lesson_complete(tracker.ProgressState.from_record(record), section_index, lesson_index)
        record = await self.progress.upsert(user_id, course_id, state.as_fields())
        logger.info(f"User {user_id} undid lesson {key} of course {course_id}")
        return Result.success(summarize(record))

    @transactional
    async def update_position(self, user_id: int, course_id: int, section_index: int, lesson_index: int) -> Result:
        course, failure = await self._course_for(course_id, section_index, lesson_index)
        if failure:
            return failure
        state = tracker.ProgressState.from_record(await self.progress.get(user_id, course_id))
        state = tracker.update_position(state, section_index, lesson_index, course)
        record = await self.progress.upsert(user_id, course_id, state.as_fields())
        return Result.success(summarize(record))
