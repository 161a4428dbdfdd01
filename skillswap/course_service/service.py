import logging

from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.core.result import ErrorKind, Result
from skillswap.core.skills import normalize_skills
from skillswap.db.transaction import transactional
from skillswap.match_service.connections import ACTIVE_STATUSES
from skillswap.match_service.repository import MatchRepository
from skillswap.progress_service.repository import ProgressRepository
from skillswap.progress_service.tracker import ProgressState
from skillswap.user_service.repository import UserRepository
from . import structure
from .repository import CourseRepository

logger = logging.getLogger("course_service")

# columns a client may clear by sending null; a null anywhere else means "leave as is"
CLEARABLE_FIELDS = ("description", "duration")


def supplied_fields(fields: dict) -> dict:
    return {key: value for key, value in fields.items() if value is not None or key in CLEARABLE_FIELDS}


def with_instructor(course, instructor, from_connection: bool = False) -> dict:
    return {
        "course": course,
        "instructor_name": instructor.name or "Unknown Instructor",
        "instructor_title": instructor.bio or "Instructor",
        "is_from_connection": from_connection,
    }


class CourseService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.courses = CourseRepository(session)
        self.users = UserRepository(session)
        self.matches = MatchRepository(session)
        self.progress = ProgressRepository(session)

    def _clean(self, fields: dict) -> dict:
        cleaned = dict(fields)
        if "tags" in cleaned:
            cleaned["tags"] = normalize_skills(cleaned["tags"])
        if "sections" in cleaned:
            cleaned["sections"] = structure.assign_ids(cleaned["sections"])
        if "title" in cleaned and cleaned["title"]:
            cleaned["title"] = cleaned["title"].strip()
        return cleaned

    async def _owned(self, course_id: int, instructor_id: int):
        course = await self.courses.get(course_id)
        if not course:
            return None, Result.not_found("Course not found")
        if course.instructor_id != instructor_id:
            return None, Result.failure(ErrorKind.FORBIDDEN, "Only the instructor can change this course")
        return course, None

    @transactional
    async def create_course(self, instructor_id: int, fields: dict) -> Result:
        fields = supplied_fields(fields)
        error = structure.validate_course(fields.get("title"), fields.get("level"), fields.get("sections"))
        if error:
            return Result.invalid(error)
        if not await self.users.get(instructor_id):
            return Result.not_found("Instructor not found")
        course = await self.courses.create(instructor_id, self._clean(fields))
        logger.info(f"User {instructor_id} created course {course.id} '{course.title}'")
        return Result.success(course)

    @transactional
    async def update_course(self, course_id: int, instructor_id: int, fields: dict) -> Result:
        course, failure = await self._owned(course_id, instructor_id)
        if failure:
            return failure
        fields = supplied_fields(fields)
        error = structure.validate_course(
            fields.get("title", course.title),
            fields.get("level", course.level),
            fields.get("sections", course.sections),
        )
        if error:
            return Result.invalid(error)
        old_sections = list(course.sections or [])
        course = await self.courses.update(course_id, self._clean(fields))
        if "sections" in fields:
            # прогресс учеников переносим на новые позиции уроков
            records = await self.progress.list_for_course(course_id)
            for record in records:
                state = structure.remap_lesson_keys(ProgressState.from_record(record), old_sections, course.sections)
                await self.progress.upsert(record.user_id, course_id, state.as_fields())
            logger.info(f"Remapped {len(records)} progress record(s) for course {course_id}")
        logger.info(f"Course {course_id} updated")
        return Result.success(course)

    @transactional
    async def delete_course(self, course_id: int, instructor_id: int) -> Result:
        course, failure = await self._owned(course_id, instructor_id)
        if failure:
            return failure
        # learners' progress records are kept
        await self.courses.delete(course)
        logger.info(f"Course {course_id} deleted by user {instructor_id}")
        return Result.success(course_id)

    @transactional
    async def get_course(self, course_id: int) -> Result:
        course = await self.courses.get(course_id)
        if not course:
            return Result.not_found("Course not found")
        return Result.success(course)

    @transactional
    async def list_public_courses(self) -> Result:
        rows = await self.courses.list_public_with_instructor()
        return Result.success([with_instructor(course, user) for course, user in rows])

    @transactional
    async def list_courses_by_user(self, user_id: int) -> Result:
        if not await self.users.get(user_id):
            return Result.not_found("User not found")
        return Result.success(await self.courses.list_by_instructor(user_id))

    @transactional
    async def list_connected_courses(self, user_id: int) -> Result:
        matches = await self.matches.list_by_user(user_id)
        partner_ids = {m.partner_of(user_id) for m in matches if m.status in ACTIVE_STATUSES}
        rows = await self.courses.list_by_instructors_with_instructor(partner_ids)
        return Result.success([with_instructor(course, user, from_connection=True) for course, user in rows])
