"""
Course structure helpers: stable ids for sections and lessons, and the
translation of positional progress keys across a course edit.
"""

import uuid
from typing import Dict, List, Optional, Tuple

from skillswap.progress_service.tracker import ProgressState, lesson_key, parse_lesson_key

LEVELS = ("Beginner", "Intermediate", "Advanced", "Expert")

LESSON_FIELDS = ("title", "description", "video_url", "duration", "is_preview")


def new_id() -> str:
    return uuid.uuid4().hex


def assign_ids(sections: List[dict]) -> List[dict]:
    """Copy ``sections`` giving every section and lesson without an id a fresh one."""
    result = []
    for section in sections or []:
        lessons = []
        for lesson in section.get("lessons") or []:
            item = {name: lesson.get(name) for name in LESSON_FIELDS}
            item["is_preview"] = bool(item["is_preview"])
            item["id"] = lesson.get("id") or new_id()
            lessons.append(item)
        result.append({
            "id": section.get("id") or new_id(),
            "title": section.get("title"),
            "lessons": lessons,
        })
    return result


def lesson_positions(sections: List[dict]) -> Dict[str, Tuple[int, int]]:
    """Map lesson id -> (section index, lesson index)."""
    positions = {}
    for s_idx, section in enumerate(sections or []):
        for l_idx, lesson in enumerate(section.get("lessons") or []):
            if lesson.get("id"):
                positions[lesson["id"]] = (s_idx, l_idx)
    return positions


def lesson_at(sections: List[dict], section_index: int, lesson_index: int) -> Optional[dict]:
    if section_index < 0 or lesson_index < 0 or section_index >= len(sections or []):
        return None
    lessons = sections[section_index].get("lessons") or []
    if lesson_index >= len(lessons):
        return None
    return lessons[lesson_index]


def validate_course(title: Optional[str], level: Optional[str], sections: List[dict]) -> Optional[str]:
    """Return an error message, or None when the course can be stored."""
    if not (title or "").strip():
        return "Course title is required"
    if level is not None and level not in LEVELS:
        return f"Level must be one of {', '.join(LEVELS)}"
    for s_idx, section in enumerate(sections or []):
        if not (section.get("title") or "").strip():
            return f"Section {s_idx + 1} needs a title"
        for l_idx, lesson in enumerate(section.get("lessons") or []):
            if not (lesson.get("title") or "").strip():
                return f"Lesson {l_idx + 1} of section {s_idx + 1} needs a title"
    return None


def remap_lesson_keys(state: ProgressState, old_sections: List[dict], new_sections: List[dict]) -> ProgressState:
    """
    Carry progress across a course edit.

    Each completed key is resolved to a lesson id through the old layout and
    re-addressed through the new one; keys whose lesson was deleted are
    dropped. The resume position follows its lesson the same way, falling
    back to the start of the course. ``total_lessons`` is recounted.
    """
    old_by_position = {pos: lesson_id for lesson_id, pos in lesson_positions(old_sections).items()}
    new_positions = lesson_positions(new_sections)

    def translate(position):
        lesson_id = old_by_position.get(position)
        return new_positions.get(lesson_id) if lesson_id else None

    completed = []
    for key in state.completed_lessons:
        try:
            moved = translate(parse_lesson_key(key))
        except ValueError:
            continue
        if moved is not None:
            new_key = lesson_key(*moved)
            if new_key not in completed:
                completed.append(new_key)

    position = translate((state.current_section, state.current_lesson))
    if position is None:
        # the resume point may sit one past the last lesson of its section
        previous = translate((state.current_section, state.current_lesson - 1))
        position = (previous[0], previous[1] + 1) if previous else (0, 0)

    return ProgressState(
        completed_lessons=completed,
        current_section=position[0],
        current_lesson=position[1],
        total_lessons=sum(len(s.get("lessons") or []) for s in new_sections),
    )
