from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class LessonIn(BaseModel):
    id: Optional[str] = None  # keep the id when editing, or progress on this lesson is lost
    title: str
    description: Optional[str] = None
    video_url: Optional[str] = None
    duration: Optional[str] = None
    is_preview: bool = False


class SectionIn(BaseModel):
    id: Optional[str] = None
    title: str
    lessons: List[LessonIn] = []


class CourseCreate(BaseModel):
    title: str
    description: Optional[str] = None
    level: str = "Beginner"
    duration: Optional[str] = None
    is_public: bool = True
    tags: List[str] = []
    sections: List[SectionIn] = []


class CourseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    level: Optional[str] = None
    duration: Optional[str] = None
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None
    sections: Optional[List[SectionIn]] = None


class LessonOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    video_url: Optional[str] = None
    duration: Optional[str] = None
    is_preview: bool = False


class SectionOut(BaseModel):
    id: str
    title: str
    lessons: List[LessonOut] = []


class CourseOut(BaseModel):
    id: int
    instructor_id: int
    title: str
    description: Optional[str] = None
    level: str
    duration: Optional[str] = None
    is_public: bool = True
    tags: List[str] = []
    sections: List[SectionOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CourseListItem(CourseOut):
    instructor_name: str
    instructor_title: str
    is_from_connection: bool = False
