from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Dict, List, Optional, Tuple

WEEKDAYS: Tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
WEEKDAY_INDEX: Dict[str, int] = {day: i for i, day in enumerate(WEEKDAYS)}


@dataclass(frozen=True)
class Slot:
    weekday: str
    start: float  # fractional hours, 10.5 == 10:30
    duration: float
    category: str = ""  # T, TP, PL ...

    def __post_init__(self):
        if self.weekday not in WEEKDAY_INDEX:
            raise ValueError(f"Unknown weekday {self.weekday!r}")
        if self.duration <= 0:
            raise ValueError(f"Slot duration must be positive, got {self.duration}")

    @property
    def end(self) -> float:
        return self.start + self.duration

    def collides(self, other: "Slot") -> bool:
        """Same weekday and overlapping [start, end) intervals; touching ends don't count."""
        if self.weekday != other.weekday:
            return False
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True, order=True)
class ClassId:
    course_id: str
    section_id: str

    def same_course(self, other: "ClassId") -> bool:
        return self.course_id == other.course_id

    def __str__(self):
        return f"{self.course_id}/{self.section_id}"


@total_ordering
class Student:
    """A student and the sections they hold, at most one per course.

    Identity is the id alone; the name is carried for reports and for
    writing the enrollment file back.
    """

    def __init__(self, id: str, name: str = ""):
        self.id = id
        self.name = name
        # course_id -> ClassId, insertion ordered
        self._classes: Dict[str, ClassId] = {}

    @property
    def classes(self) -> List[ClassId]:
        return list(self._classes.values())

    def class_for(self, course_id: str) -> Optional[ClassId]:
        return self._classes.get(course_id)

    def is_enrolled(self, course_id: str) -> bool:
        return course_id in self._classes

    def add_class(self, class_id: ClassId) -> bool:
        if class_id.course_id in self._classes:
            return False
        self._classes[class_id.course_id] = class_id
        return True

    def remove_class(self, class_id: ClassId) -> bool:
        if self._classes.get(class_id.course_id) != class_id:
            return False
        del self._classes[class_id.course_id]
        return True

    def change_class(self, class_id: ClassId) -> Optional[ClassId]:
        """Replace the section held for class_id's course, keeping its position."""
        old = self._classes.get(class_id.course_id)
        self._classes[class_id.course_id] = class_id
        return old

    def __eq__(self, other):
        if not isinstance(other, Student):
            return NotImplemented
        return self.id == other.id

    def __lt__(self, other):
        if not isinstance(other, Student):
            return NotImplemented
        return self.id < other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"Student(id={self.id!r}, name={self.name!r}, classes={[str(c) for c in self.classes]})"


class ClassSection:
    def __init__(self, class_id: ClassId, slots: Optional[List[Slot]] = None):
        self.class_id = class_id
        self._slots: List[Slot] = list(slots or [])
        # student_id -> Student
        self._roster: Dict[str, Student] = {}

    @property
    def slots(self) -> Tuple[Slot, ...]:
        return tuple(self._slots)

    @property
    def students(self) -> List[Student]:
        return list(self._roster.values())

    @property
    def roster_size(self) -> int:
        return len(self._roster)

    def add_slot(self, slot: Slot):
        self._slots.append(slot)

    def has_student(self, student_id: str) -> bool:
        return student_id in self._roster

    def add_student(self, student: Student) -> bool:
        if student.id in self._roster:
            return False
        self._roster[student.id] = student
        return True

    def remove_student(self, student: Student) -> bool:
        return self._roster.pop(student.id, None) is not None

    def collides_with(self, other: "ClassSection") -> bool:
        return any(a.collides(b) for a in self._slots for b in other._slots)

    def __repr__(self):
        return f"ClassSection({self.class_id}, slots={len(self._slots)}, students={self.roster_size})"


@dataclass(frozen=True)
class Request:
    student_id: str
    class_id: ClassId


class RejectReason(str, Enum):
    COLLISION = "collision"
    CAPACITY = "capacity"


@dataclass(frozen=True)
class Decision:
    reason: Optional[RejectReason] = None
    detail: str = ""

    @property
    def accepted(self) -> bool:
        return self.reason is None


@dataclass(frozen=True)
class RejectedRequest:
    request: Request
    reason: RejectReason
    detail: str = ""


@dataclass
class BatchResult:
    accepted: List[Request] = field(default_factory=list)
    rejected: List[RejectedRequest] = field(default_factory=list)
    # requests naming an unknown student or section, when skipping is enabled
    skipped: List[Request] = field(default_factory=list)
