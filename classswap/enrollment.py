"""Mutations that touch a section roster and a student's class set together.

Nothing else in the package calls ClassSection.add_student/remove_student
or Student.add_class/change_class directly, so the two sides never drift.
"""
from typing import Optional

from .errors import DuplicateCourseError, RosterIntegrityError
from .models import ClassId, ClassSection, Student


def enroll(student: Student, section: ClassSection):
    """Initial enrollment, used while loading state."""
    held = student.class_for(section.class_id.course_id)
    if held is not None:
        if held == section.class_id:
            return
        raise DuplicateCourseError(student.id, held, section.class_id)
    if section.has_student(student.id):
        raise RosterIntegrityError(
            f"Student {student.id} is on the roster of {section.class_id} without holding it"
        )
    student.add_class(section.class_id)
    section.add_student(student)


def swap(student: Student, old: Optional[ClassSection], new: ClassSection) -> Optional[ClassId]:
    """Move student from old (None for a first enrollment in the course) into new.

    All preconditions are checked before anything changes, so a raised
    RosterIntegrityError leaves both sections and the student untouched.
    Returns the identity of the section left, if any.
    """
    held = student.class_for(new.class_id.course_id)
    old_id = old.class_id if old is not None else None
    if held != old_id:
        raise RosterIntegrityError(
            f"Student {student.id} holds {held}, expected {old_id}"
        )
    if old is not None and old.class_id == new.class_id:
        return None
    if old is not None and not old.has_student(student.id):
        raise RosterIntegrityError(f"Student {student.id} missing from roster of {old.class_id}")
    if new.has_student(student.id):
        raise RosterIntegrityError(f"Student {student.id} already on roster of {new.class_id}")

    if old is not None:
        old.remove_student(student)
    new.add_student(student)
    student.change_class(new.class_id)
    return old_id
