"""Unit tests for the catalog, the student directory and the enroll/swap primitives."""
import pytest

from classswap.catalog import Catalog, StudentDirectory
from classswap.enrollment import enroll, swap
from classswap.errors import (
    ClassNotFoundError, DuplicateClassError, DuplicateCourseError, RosterIntegrityError,
    StudentNotFoundError,
)
from classswap.models import ClassId, ClassSection, Student


class TestCatalog:
    """Tests for catalog indexing."""

    def test_lookup_exact_identity(self, campus):
        catalog, _ = campus
        section = catalog.lookup(ClassId("L.EIC002", "1LEIC01"))
        assert section.class_id == ClassId("L.EIC002", "1LEIC01")

    def test_lookup_miss_raises(self, campus):
        catalog, _ = campus
        with pytest.raises(ClassNotFoundError) as exc_info:
            catalog.lookup(ClassId("L.EIC002", "1LEIC99"))
        assert exc_info.value.class_id == ClassId("L.EIC002", "1LEIC99")
        assert catalog.get(ClassId("L.EIC002", "1LEIC99")) is None

    def test_sections_of_course_in_registration_order(self):
        catalog = Catalog()
        for label in ("3", "1", "2"):
            catalog.add_section(ClassSection(ClassId("A", label)))
        catalog.add_section(ClassSection(ClassId("B", "1")))
        assert [s.class_id.section_id for s in catalog.sections_of_course("A")] == ["3", "1", "2"]
        assert catalog.sections_of_course("Z") == []

    def test_sections_sorted_by_identity(self):
        catalog = Catalog()
        for cid in (ClassId("B", "1"), ClassId("A", "2"), ClassId("A", "1")):
            catalog.add_section(ClassSection(cid))
        assert [s.class_id for s in catalog] == [ClassId("A", "1"), ClassId("A", "2"), ClassId("B", "1")]
        assert catalog.courses() == ["A", "B"]
        assert len(catalog) == 3

    def test_duplicate_section_rejected(self):
        catalog = Catalog()
        catalog.add_section(ClassSection(ClassId("A", "1")))
        with pytest.raises(DuplicateClassError):
            catalog.add_section(ClassSection(ClassId("A", "1")))
        assert len(catalog.sections_of_course("A")) == 1

    def test_sections_named_spans_courses(self, campus):
        catalog, _ = campus
        named = catalog.sections_named("1LEIC02")
        assert [s.class_id.course_id for s in named] == ["L.EIC001", "L.EIC002"]


class TestStudentDirectory:
    """Tests for the student directory."""

    def test_add_returns_existing(self):
        directory = StudentDirectory()
        first = directory.add(Student("up1", "Ana"))
        again = directory.add(Student("up1", "Other"))
        assert again is first
        assert directory.lookup("up1").name == "Ana"

    def test_lookup_miss_raises(self):
        with pytest.raises(StudentNotFoundError):
            StudentDirectory().lookup("nobody")

    def test_iterates_by_id(self):
        directory = StudentDirectory()
        for sid in ("up3", "up1", "up2"):
            directory.add(Student(sid))
        assert [s.id for s in directory] == ["up1", "up2", "up3"]


class TestEnroll:
    """Tests for load-time enrollment."""

    def test_updates_both_sides(self):
        student = Student("up1")
        section = ClassSection(ClassId("A", "1"))
        enroll(student, section)
        assert student.classes == [ClassId("A", "1")]
        assert section.has_student("up1")

    def test_repeat_is_noop(self):
        student = Student("up1")
        section = ClassSection(ClassId("A", "1"))
        enroll(student, section)
        enroll(student, section)
        assert section.roster_size == 1

    def test_second_section_of_course_rejected(self):
        student = Student("up1")
        enroll(student, ClassSection(ClassId("A", "1")))
        other = ClassSection(ClassId("A", "2"))
        with pytest.raises(DuplicateCourseError):
            enroll(student, other)
        assert other.roster_size == 0
        assert student.classes == [ClassId("A", "1")]


class TestSwap:
    """Tests for the swap primitive."""

    def test_moves_student(self):
        student = Student("up1")
        old, new = ClassSection(ClassId("A", "1")), ClassSection(ClassId("A", "2"))
        enroll(student, old)
        assert swap(student, old, new) == ClassId("A", "1")
        assert student.classes == [ClassId("A", "2")]
        assert not old.has_student("up1")
        assert new.has_student("up1")

    def test_first_enrollment_is_pure_addition(self):
        student = Student("up1")
        new = ClassSection(ClassId("A", "2"))
        assert swap(student, None, new) is None
        assert student.classes == [ClassId("A", "2")]
        assert new.roster_size == 1

    def test_wrong_old_section_leaves_state_untouched(self):
        student = Student("up1")
        held = ClassSection(ClassId("A", "1"))
        enroll(student, held)
        stranger = ClassSection(ClassId("A", "3"))
        new = ClassSection(ClassId("A", "2"))
        with pytest.raises(RosterIntegrityError):
            swap(student, stranger, new)
        assert student.classes == [ClassId("A", "1")]
        assert held.has_student("up1")
        assert new.roster_size == 0

    def test_missing_from_old_roster_fails_loudly(self):
        student = Student("up1")
        old, new = ClassSection(ClassId("A", "1")), ClassSection(ClassId("A", "2"))
        enroll(student, old)
        old.remove_student(student)
        with pytest.raises(RosterIntegrityError):
            swap(student, old, new)
        assert student.classes == [ClassId("A", "1")]
        assert new.roster_size == 0
