from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict
import logging

from skillswap.core.errors import raise_for_result
from skillswap.core.security import get_current_user_id
from skillswap.db.database import get_async_session
from .. import schemas
from ..service import ProgressService

router = APIRouter(tags=["Progress"])

logger = logging.getLogger("progress_service")


@router.get("/my-courses", response_model=Dict[int, schemas.ProgressOut])
async def get_my_courses(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    logger.info(f"Fetching courses progress for user {user_id}")
    return raise_for_result(await ProgressService(db).list_for_user(user_id))


@router.get("/{course_id}", response_model=schemas.ProgressOut)
async def get_course_progress(course_id: int, user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    progress = raise_for_result(await ProgressService(db).get(user_id, course_id))
    if progress is None:
        raise HTTPException(status_code=404, detail="No progress found for this course")
    return progress


@router.post("/complete-lesson", response_model=schemas.ProgressOut)
async def complete_lesson(data: schemas.LessonRef, user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    logger.info(f"Received complete_lesson request with data: {data}")
    return raise_for_result(
        await ProgressService(db).complete_lesson(user_id, data.course_id, data.section_index, data.lesson_index)
    )


@router.post("/undo-complete-lesson", response_model=schemas.ProgressOut)
async def undo_complete_lesson(data: schemas.LessonRef, user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(
        await ProgressService(db).undo_lesson(user_id, data.course_id, data.section_index, data.lesson_index)
    )


@router.post("/position", response_model=schemas.ProgressOut)
async def update_position(data: schemas.LessonRef, user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_async_session)):
    return raise_for_result(
        await ProgressService(db).update_position(user_id, data.course_id, data.section_index, data.lesson_index)
    )
