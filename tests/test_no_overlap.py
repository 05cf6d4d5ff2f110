"""Tests for pairwise no-overlap constraints."""

from __future__ import annotations

import pytest

from timetable_weaver.constraints.no_overlap import (
    NoOverlapStats,
    add_pairwise_no_overlap,
    conflicting_pairs,
    lessons_conflict,
)
from timetable_weaver.data.availability import Availability
from timetable_weaver.data.models import Lesson, StudentClass, Subject, Teacher, TimetableConfig
from timetable_weaver.model_builder import TimetableModelBuilder


DAYS = 2
PERIODS = 2


def full() -> Availability:
    return Availability.full(DAYS, PERIODS)


@pytest.fixture
def basic_config() -> TimetableConfig:
    """
    Lessons:
        0: Alice / Class 1
        1: Alice / Class 2   (shares teacher with 0)
        2: Bob   / Class 1   (shares class with 0)
        3: Bob   / Class 3   (shares teacher with 2)
    """
    alice, bob = Teacher("Alice", full()), Teacher("Bob", full())
    c1, c2, c3 = (StudentClass(f"Class {i}", full()) for i in (1, 2, 3))
    math = Subject("Math", full())

    return TimetableConfig(
        days=DAYS,
        periods_per_day=PERIODS,
        teachers=[alice, bob],
        classes=[c1, c2, c3],
        subjects=[math],
        lessons=[
            Lesson(c1, alice, math),
            Lesson(c2, alice, math),
            Lesson(c1, bob, math),
            Lesson(c3, bob, math),
        ],
    )


class TestConflictDetection:
    """Tests for deciding which pairs conflict."""

    def test_conflicting_pairs(self, basic_config):
        assert conflicting_pairs(basic_config.lessons) == [(0, 1), (0, 2), (2, 3)]

    def test_same_teacher_and_class(self, basic_config):
        lesson = basic_config.lessons[0]
        twin = Lesson(lesson.student_class, lesson.teacher, lesson.subject)
        assert lessons_conflict(lesson, twin)

    def test_same_names_different_objects_do_not_conflict(self):
        """Entities are compared by identity, not by name."""
        math = Subject("Math", full())
        a = Lesson(StudentClass("Class 1", full()), Teacher("Alice", full()), math)
        b = Lesson(StudentClass("Class 1", full()), Teacher("Alice", full()), math)
        assert not lessons_conflict(a, b)

    def test_shared_subject_alone_is_not_a_conflict(self, basic_config):
        _, second, _, fourth = basic_config.lessons
        assert second.subject is fourth.subject
        assert not lessons_conflict(second, fourth)


class TestPairwiseNoOverlap:
    """Tests for the posted encoding."""

    def test_stats(self, basic_config, recording_backend):
        builder = TimetableModelBuilder(basic_config, backend=recording_backend)
        builder.create_variables()

        stats = add_pairwise_no_overlap(builder)

        assert stats == NoOverlapStats(
            pairs_checked=6,
            teacher_conflicts=2,
            class_conflicts=1,
            constrained_pairs=3,
            indicator_vars=6,
        )

    def test_encoding_per_pair(self, basic_config, recording_backend):
        builder = TimetableModelBuilder(basic_config, backend=recording_backend)
        builder.create_variables()
        add_pairwise_no_overlap(builder)

        assert recording_backend.count("eq") == 3 * 2
        assert recording_backend.count("ne") == 3 * 2
        assert recording_backend.count("or") == 3

        # Every reified constraint is conditioned on an indicator
        for c in recording_backend.constraints:
            if c[0] in ("eq", "ne"):
                assert c[3] is not None

    def test_indicator_names(self, basic_config, recording_backend):
        builder = TimetableModelBuilder(basic_config, backend=recording_backend)
        builder.create_variables()
        add_pairwise_no_overlap(builder)

        names = {v.name for v in recording_backend.variables if v.is_bool}
        assert "lesson_0_1_day_equal" in names
        assert "lesson_2_3_period_equal" in names
        assert "lesson_1_3_day_equal" not in names

    @pytest.mark.parametrize("slot_a,slot_b,expected", [
        ((0, 0), (0, 0), False),  # Same slot
        ((0, 0), (0, 1), True),   # Same day, different period
        ((0, 1), (1, 1), True),   # Same period, different day
        ((0, 0), (1, 1), True),   # Both differ
    ])
    def test_pair_must_differ_in_a_coordinate(self, recording_backend, slot_a, slot_b, expected):
        """Mechanically evaluate the encoding for two lessons sharing a teacher."""
        alice = Teacher("Alice", full())
        c1, c2 = StudentClass("Class 1", full()), StudentClass("Class 2", full())
        math = Subject("Math", full())
        config = TimetableConfig(
            days=DAYS, periods_per_day=PERIODS,
            teachers=[alice], classes=[c1, c2], subjects=[math],
            lessons=[Lesson(c1, alice, math), Lesson(c2, alice, math)],
        )
        builder = TimetableModelBuilder(config, backend=recording_backend)
        builder.create_variables()
        add_pairwise_no_overlap(builder)

        base = {
            "lesson_0_day": slot_a[0], "lesson_0_period": slot_a[1],
            "lesson_1_day": slot_b[0], "lesson_1_period": slot_b[1],
        }
        satisfiable = any(
            recording_backend.satisfied({
                **base,
                "lesson_0_1_day_equal": day_equal,
                "lesson_0_1_period_equal": period_equal,
            })
            for day_equal in (0, 1)
            for period_equal in (0, 1)
        )
        assert satisfiable is expected

    def test_no_pairs_without_shared_entities(self, recording_backend):
        math = Subject("Math", full())
        lessons = [
            Lesson(StudentClass(f"Class {i}", full()), Teacher(f"Teacher {i}", full()), math)
            for i in range(3)
        ]
        config = TimetableConfig(
            days=DAYS, periods_per_day=PERIODS,
            teachers=[l.teacher for l in lessons],
            classes=[l.student_class for l in lessons],
            subjects=[math],
            lessons=lessons,
        )
        builder = TimetableModelBuilder(config, backend=recording_backend)
        builder.create_variables()

        stats = add_pairwise_no_overlap(builder)

        assert stats.constrained_pairs == 0
        assert recording_backend.constraints == []
