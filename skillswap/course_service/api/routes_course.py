from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from skillswap.core.errors import raise_for_result
from skillswap.core.events import COURSES_TOPIC, RefreshNotifier, get_notifier
from skillswap.core.security import get_current_user_id
from skillswap.db.database import get_async_session
from .. import schemas
from ..service import CourseService

course_router = APIRouter(tags=["Courses"])


def _list_item(item) -> schemas.CourseListItem:
    return schemas.CourseListItem(
        **schemas.CourseOut.model_validate(item["course"]).model_dump(),
        instructor_name=item["instructor_name"],
        instructor_title=item["instructor_title"],
        is_from_connection=item["is_from_connection"],
    )


@course_router.get("/", response_model=List[schemas.CourseListItem])
async def list_public_courses(db: AsyncSession = Depends(get_async_session)):
    items = raise_for_result(await CourseService(db).list_public_courses())
    return [_list_item(item) for item in items]


@course_router.get("/connected", response_model=List[schemas.CourseListItem])
async def list_connected_courses(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    items = raise_for_result(await CourseService(db).list_connected_courses(user_id))
    return [_list_item(item) for item in items]


@course_router.get("/by-user/{user_id}", response_model=List[schemas.CourseOut])
async def list_user_courses(user_id: int, db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(await CourseService(db).list_courses_by_user(user_id))


@course_router.get("/{course_id}", response_model=schemas.CourseOut)
async def get_course_detail(course_id: int, db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(await CourseService(db).get_course(course_id))


@course_router.post("/", response_model=schemas.CourseOut, status_code=201)
async def create_course(
    course_data: schemas.CourseCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    notifier: RefreshNotifier = Depends(get_notifier),
):
    course = raise_for_result(await CourseService(db).create_course(user_id, course_data.model_dump()))
    notifier.publish(COURSES_TOPIC, {"course_id": course.id, "action": "created"})
    return course


@course_router.patch("/{course_id}", response_model=schemas.CourseOut)
async def update_course(
    course_id: int,
    course_data: schemas.CourseUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    notifier: RefreshNotifier = Depends(get_notifier),
):
    fields = course_data.model_dump(exclude_unset=True)
    course = raise_for_result(await CourseService(db).update_course(course_id, user_id, fields))
    notifier.publish(COURSES_TOPIC, {"course_id": course.id, "action": "updated"})
    return course


@course_router.delete("/{course_id}", status_code=204)
async def delete_course(
    course_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    notifier: RefreshNotifier = Depends(get_notifier),
):
    raise_for_result(await CourseService(db).delete_course(course_id, user_id))
    notifier.publish(COURSES_TOPIC, {"course_id": course_id, "action": "deleted"})
