from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class LessonRef(BaseModel):
    course_id: int
    section_index: int = Field(..., ge=0)
    lesson_index: int = Field(..., ge=0)


class ProgressOut(BaseModel):
    user_id: int
    course_id: int
    completed_lessons: List[str] = []
    current_section: int = 0
    current_lesson: int = 0
    total_lessons: Optional[int] = None
    percentage: int = 0
    is_completed: bool = False
    updated_at: Optional[datetime] = None
