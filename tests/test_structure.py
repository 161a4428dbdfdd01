"""
Unit tests for course structure helpers and progress remapping.
"""

from skillswap.course_service import structure
from skillswap.progress_service.tracker import ProgressState


def section(id, *lesson_ids):
    return {"id": id, "title": id, "lessons": [{"id": l, "title": l} for l in lesson_ids]}


class TestAssignIds:
    """Test cases for assign_ids."""

    def test_new_items_get_ids(self):
        sections = structure.assign_ids([{"title": "Intro", "lessons": [{"title": "Hello"}]}])

        assert sections[0]["id"]
        assert sections[0]["lessons"][0]["id"]
        assert sections[0]["lessons"][0]["is_preview"] is False

    def test_existing_ids_are_kept(self):
        """Ids sent back by the client survive an edit."""
        sections = structure.assign_ids([section("s1", "l1")])

        assert sections[0]["id"] == "s1"
        assert sections[0]["lessons"][0]["id"] == "l1"


class TestValidateCourse:
    """Test cases for validate_course."""

    def test_title_required(self):
        assert structure.validate_course("  ", "Beginner", []) == "Course title is required"

    def test_unknown_level(self):
        assert "Level must be one of" in structure.validate_course("Guitar", "Wizard", [])

    def test_lesson_title_required(self):
        message = structure.validate_course("Guitar", "Expert", [{"title": "S", "lessons": [{"title": ""}]}])

        assert message == "Lesson 1 of section 1 needs a title"

    def test_valid_course(self):
        assert structure.validate_course("Guitar", "Advanced", [section("s1", "l1")]) is None


class TestRemapLessonKeys:
    """Test cases for remap_lesson_keys."""

    def test_section_reorder_moves_keys(self):
        """Swapping two sections carries completion with the lessons."""
        old = [section("a", "a0", "a1"), section("b", "b0")]
        new = [section("b", "b0"), section("a", "a0", "a1")]
        state = ProgressState(completed_lessons=["0-1", "1-0"], current_section=1, current_lesson=0, total_lessons=3)

        remapped = structure.remap_lesson_keys(state, old, new)

        assert sorted(remapped.completed_lessons) == ["0-0", "1-1"]
        assert (remapped.current_section, remapped.current_lesson) == (0, 0)
        assert remapped.total_lessons == 3

    def test_deleted_lesson_is_dropped(self):
        """Keys of removed lessons disappear and later lessons shift down."""
        old = [section("a", "a0", "a1", "a2")]
        new = [section("a", "a0", "a2")]
        state = ProgressState(completed_lessons=["0-1", "0-2"], total_lessons=3)

        remapped = structure.remap_lesson_keys(state, old, new)

        assert remapped.completed_lessons == ["0-1"]
        assert remapped.total_lessons == 2

    def test_added_lessons_update_total(self):
        old = [section("a", "a0")]
        new = [section("a", "a0", "a1"), section("b", "b0")]
        state = ProgressState(completed_lessons=["0-0"], total_lessons=1)

        remapped = structure.remap_lesson_keys(state, old, new)

        assert remapped.completed_lessons == ["0-0"]
        assert remapped.total_lessons == 3

    def test_resume_point_past_end_of_section(self):
        """A position one past the last lesson follows that lesson."""
        old = [section("a", "a0", "a1"), section("b", "b0")]
        new = [section("b", "b0"), section("a", "a0", "a1")]
        state = ProgressState(completed_lessons=["0-1"], current_section=0, current_lesson=2)

        remapped = structure.remap_lesson_keys(state, old, new)

        assert (remapped.current_section, remapped.current_lesson) == (1, 2)

    def test_lost_resume_point_restarts(self):
        old = [section("a", "a0")]
        new = [section("b", "b0")]
        state = ProgressState(completed_lessons=["0-0"], current_section=0, current_lesson=0)

        remapped = structure.remap_lesson_keys(state, old, new)

        assert remapped.completed_lessons == []
        assert (remapped.current_section, remapped.current_lesson) == (0, 0)
