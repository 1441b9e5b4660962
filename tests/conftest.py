"""Shared fixtures: small in-memory campuses built without touching the CSV loaders."""
from typing import Dict, Iterable, List, Tuple

import pytest
import structlog

from classswap.catalog import Catalog, StudentDirectory
from classswap.enrollment import enroll
from classswap.models import ClassId, ClassSection, Slot, Student
from classswap.scheduling.engine import EnrollmentEngine


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo any setup_logging() call so later tests never write to a closed capture stream."""
    saved = structlog.get_config()
    yield
    structlog.configure(**saved)


def _build(sections: Dict[ClassId, List[Slot]], enrollments: Iterable[Tuple[str, str, ClassId]]):
    catalog = Catalog()
    for class_id, slots in sections.items():
        catalog.add_section(ClassSection(class_id, slots))
    directory = StudentDirectory()
    for student_id, name, class_id in enrollments:
        student = directory.add(Student(student_id, name))
        enroll(student, catalog.lookup(class_id))
    return catalog, directory


@pytest.fixture
def make_state():
    """Factory: make_state(sections, enrollments) -> (Catalog, StudentDirectory)."""
    return _build


@pytest.fixture
def make_course():
    """Factory for one course whose sections have no slots and the given roster sizes.

    make_course("C", [5, 5, 5]) enrolls s0..s14 and returns (catalog, directory).
    """
    def factory(course_id: str, sizes: List[int]):
        sections = {ClassId(course_id, f"S{i + 1}"): [] for i in range(len(sizes))}
        enrollments = []
        n = 0
        for i, size in enumerate(sizes):
            for _ in range(size):
                enrollments.append((f"s{n}", f"Student {n}", ClassId(course_id, f"S{i + 1}")))
                n += 1
        return _build(sections, enrollments)
    return factory


@pytest.fixture
def campus():
    """Two courses, two sections each.

    L.EIC001/1LEIC01  Mon 08:00-10:00 T     roster: up002
    L.EIC001/1LEIC02  Tue 10:00-12:00 TP    roster: up001
    L.EIC002/1LEIC01  Mon 09:00-10:30 T     roster: -
    L.EIC002/1LEIC02  Wed 14:00-15:00 PL    roster: up001
    """
    sections = {
        ClassId("L.EIC001", "1LEIC01"): [Slot("Monday", 8.0, 2.0, "T")],
        ClassId("L.EIC001", "1LEIC02"): [Slot("Tuesday", 10.0, 2.0, "TP")],
        ClassId("L.EIC002", "1LEIC01"): [Slot("Monday", 9.0, 1.5, "T")],
        ClassId("L.EIC002", "1LEIC02"): [Slot("Wednesday", 14.0, 1.0, "PL")],
    }
    enrollments = [
        ("up001", "Ana", ClassId("L.EIC001", "1LEIC02")),
        ("up001", "Ana", ClassId("L.EIC002", "1LEIC02")),
        ("up002", "Bruno", ClassId("L.EIC001", "1LEIC01")),
    ]
    return _build(sections, enrollments)


@pytest.fixture
def engine(campus):
    catalog, directory = campus
    return EnrollmentEngine(catalog, directory)
