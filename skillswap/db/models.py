from sqlalchemy import (
    Column, Integer, String, DateTime, ForeignKey, Boolean, Text, JSON, Index, text
)
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(Text, nullable=False)
    bio = Column(Text, nullable=True)
    location = Column(String(100), nullable=True)
    # lowercase labels, treated as sets
    skills_have = Column(JSON, nullable=False, default=list)
    skills_to_learn = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    courses = relationship("Course", back_populates="instructor")


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    instructor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    level = Column(String(20), nullable=False, default="Beginner")
    duration = Column(String(50), nullable=True)
    is_public = Column(Boolean, default=True)
    tags = Column(JSON, nullable=False, default=list)
    # [{id, title, lessons: [{id, title, description, video_url, duration, is_preview}]}]
    sections = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    instructor = relationship("User", back_populates="courses")


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    target_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")
    session_mode = Column(String(20), nullable=True)
    last_session_at = Column(DateTime, nullable=True)
    total_sessions = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def users(self):
        return (self.requester_id, self.target_id)

    def partner_of(self, user_id):
        return self.target_id if self.requester_id == user_id else self.requester_id


class MatchRequest(Base):
    __tablename__ = "match_requests"

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    target_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="pending")
    is_read = Column(Boolean, default=False)
    match_id = Column(Integer, ForeignKey("matches.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # не больше одного ожидающего запроса на упорядоченную пару
    __table_args__ = (
        Index(
            "uq_match_requests_pending_pair",
            "requester_id",
            "target_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )


class CourseProgress(Base):
    __tablename__ = "course_progress"

    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    # без внешнего ключа: прогресс переживает удаление курса
    course_id = Column(Integer, primary_key=True)
    completed_lessons = Column(JSON, nullable=False, default=list)
    current_section = Column(Integer, default=0)
    current_lesson = Column(Integer, default=0)
    total_lessons = Column(Integer, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, ForeignKey("matches.id"), nullable=False, index=True)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    body = Column(Text, nullable=False)
    type = Column(String(20), default="text")
    created_at = Column(DateTime, default=datetime.utcnow)
