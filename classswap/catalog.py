from typing import Dict, Iterator, List, Optional

from .errors import ClassNotFoundError, DuplicateClassError, StudentNotFoundError
from .models import ClassId, ClassSection, Student


class Catalog:
    """Every class section, indexed by identity and by course."""

    def __init__(self):
        self._by_id: Dict[ClassId, ClassSection] = {}
        # course_id -> sections in registration order
        self._by_course: Dict[str, List[ClassSection]] = {}

    def add_section(self, section: ClassSection) -> ClassSection:
        if section.class_id in self._by_id:
            raise DuplicateClassError(section.class_id)
        self._by_id[section.class_id] = section
        self._by_course.setdefault(section.class_id.course_id, []).append(section)
        return section

    def get(self, class_id: ClassId) -> Optional[ClassSection]:
        return self._by_id.get(class_id)

    def lookup(self, class_id: ClassId) -> ClassSection:
        section = self._by_id.get(class_id)
        if section is None:
            raise ClassNotFoundError(class_id)
        return section

    def sections_of_course(self, course_id: str) -> List[ClassSection]:
        return list(self._by_course.get(course_id, ()))

    def sections_named(self, section_id: str) -> List[ClassSection]:
        return [s for s in self.sections() if s.class_id.section_id == section_id]

    def sections(self) -> List[ClassSection]:
        return [self._by_id[cid] for cid in sorted(self._by_id)]

    def courses(self) -> List[str]:
        return sorted(self._by_course)

    def __contains__(self, class_id) -> bool:
        return class_id in self._by_id

    def __iter__(self) -> Iterator[ClassSection]:
        return iter(self.sections())

    def __len__(self) -> int:
        return len(self._by_id)


class StudentDirectory:
    def __init__(self):
        self._by_id: Dict[str, Student] = {}

    def add(self, student: Student) -> Student:
        """Register student, returning the already registered one when the id is taken."""
        return self._by_id.setdefault(student.id, student)

    def get(self, student_id: str) -> Optional[Student]:
        return self._by_id.get(student_id)

    def lookup(self, student_id: str) -> Student:
        student = self._by_id.get(student_id)
        if student is None:
            raise StudentNotFoundError(student_id)
        return student

    def students(self) -> List[Student]:
        return sorted(self._by_id.values())

    def __contains__(self, student_id) -> bool:
        return student_id in self._by_id

    def __iter__(self) -> Iterator[Student]:
        return iter(self.students())

    def __len__(self) -> int:
        return len(self._by_id)
