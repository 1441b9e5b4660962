from collections import Counter

from ..catalog import Catalog, StudentDirectory
from ..errors import RosterIntegrityError


def one_section_per_course_ok(directory: StudentDirectory) -> bool:
    for student in directory:
        courses = Counter(c.course_id for c in student.classes)
        if any(n > 1 for n in courses.values()):
            return False
    return True


def rosters_consistent_ok(catalog: Catalog, directory: StudentDirectory) -> bool:
    # student side -> section side
    for student in directory:
        for class_id in student.classes:
            section = catalog.get(class_id)
            if section is None or not section.has_student(student.id):
                return False
    # section side -> student side
    for section in catalog:
        for member in section.students:
            student = directory.get(member.id)
            if student is None or student.class_for(section.class_id.course_id) != section.class_id:
                return False
    return True


def catalog_index_ok(catalog: Catalog) -> bool:
    sections = catalog.sections()
    for section in sections:
        if catalog.get(section.class_id) is not section:
            return False
        if not any(s is section for s in catalog.sections_of_course(section.class_id.course_id)):
            return False
    by_course = sum(len(catalog.sections_of_course(c)) for c in catalog.courses())
    return by_course == len(sections)


def check_state(catalog: Catalog, directory: StudentDirectory):
    if not catalog_index_ok(catalog):
        raise RosterIntegrityError("Catalog indexes disagree with the registered sections")
    if not one_section_per_course_ok(directory):
        raise RosterIntegrityError("A student holds two sections of the same course")
    if not rosters_consistent_ok(catalog, directory):
        raise RosterIntegrityError("Section rosters and student class lists disagree")
