"""
Course progress arithmetic.

Progress for a (user, course) pair is a set of completed lesson keys, the
position the learner should resume from and a cached lesson count. Lesson
keys are ``"<section index>-<lesson index>"``.
"""

import math
from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class ProgressState:
    completed_lessons: List[str] = field(default_factory=list)
    current_section: int = 0
    current_lesson: int = 0
    total_lessons: Optional[int] = None

    @classmethod
    def from_record(cls, record) -> "ProgressState":
        if record is None:
            return cls()
        return cls(
            completed_lessons=list(record.completed_lessons or []),
            current_section=record.current_section or 0,
            current_lesson=record.current_lesson or 0,
            total_lessons=record.total_lessons,
        )

    def as_fields(self) -> dict:
        return {
            "completed_lessons": list(self.completed_lessons),
            "current_section": self.current_section,
            "current_lesson": self.current_lesson,
            "total_lessons": self.total_lessons,
        }


def lesson_key(section_index: int, lesson_index: int) -> str:
    return f"{section_index}-{lesson_index}"


def parse_lesson_key(key: str):
    section, _, lesson = key.partition("-")
    return int(section), int(lesson)


def _sections(course) -> Optional[list]:
    if course is None:
        return None
    if isinstance(course, dict):
        return course.get("sections")
    return getattr(course, "sections", None)


def count_lessons(course) -> Optional[int]:
    sections = _sections(course)
    if sections is None:
        return None
    return sum(len(section.get("lessons") or []) for section in sections)


def mark_lesson_complete(state: ProgressState, section_index: int, lesson_index: int, course: Any = None) -> ProgressState:
    key = lesson_key(section_index, lesson_index)
    completed = list(state.completed_lessons)
    if key not in completed:
        completed.append(key)
    total = count_lessons(course)
    return ProgressState(
        completed_lessons=completed,
        current_section=section_index,
        current_lesson=lesson_index + 1,
        total_lessons=total if total is not None else state.total_lessons,
    )


def unmark_lesson_complete(state: ProgressState, section_index: int, lesson_index: int) -> ProgressState:
    key = lesson_key(section_index, lesson_index)
    return ProgressState(
        completed_lessons=[k for k in state.completed_lessons if k != key],
        current_section=state.current_section,
        current_lesson=state.current_lesson,
        total_lessons=state.total_lessons,
    )


def update_position(state: ProgressState, section_index: int, lesson_index: int, course: Any = None) -> ProgressState:
    total = count_lessons(course)
    return ProgressState(
        completed_lessons=list(state.completed_lessons),
        current_section=section_index,
        current_lesson=lesson_index,
        total_lessons=total if total is not None else state.total_lessons,
    )


def percentage(state: ProgressState) -> int:
    total = state.total_lessons
    if not total or total <= 0:
        return 0
    completed = len(set(state.completed_lessons))
    # round half up, so 2.5% reads as 3%
    value = math.floor(100 * completed / total + 0.5)
    return min(100, value)


def is_completed(state: ProgressState) -> bool:
    # an unknown lesson count counts as a single lesson
    return len(set(state.completed_lessons)) >= (state.total_lessons or 1)
