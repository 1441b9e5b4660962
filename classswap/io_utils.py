import csv
import io
import os
from typing import IO, Iterable, List, Tuple, Union

from .catalog import Catalog, StudentDirectory
from .enrollment import enroll
from .errors import LoadError
from .logging_setup import get_logger
from .models import ClassId, ClassSection, Request, Slot, Student

TextOrPath = Union[str, os.PathLike, IO]

logger = get_logger(__name__)

CLASSES_PER_UC = "classes_per_uc.csv"
CLASSES = "classes.csv"
STUDENTS_CLASSES = "students_classes.csv"
REQUESTS = "requests.csv"

ENROLLMENT_HEADER = ["StudentCode", "StudentName", "UcCode", "ClassCode"]
REQUEST_HEADER = ["StudentCode", "UcCode", "ClassCode"]


def _open_text(src: TextOrPath):
    """Return a text-mode file handle and a flag indicating whether to close it.

    Accepts a filesystem path, a text IO object, or a BytesIO buffer.
    """
    if isinstance(src, (str, os.PathLike)):
        f = open(src, 'r', newline='', encoding='utf-8')
        return f, True
    if isinstance(src, io.BytesIO):
        src.seek(0)
        f = io.TextIOWrapper(src, encoding='utf-8', newline='')
        return f, True
    if hasattr(src, 'read'):
        if hasattr(src, 'seek') and src.seekable():
            src.seek(0)
        return src, False
    raise TypeError("Unsupported input type; expected path or file-like object")


def _rows(src: TextOrPath, columns: List[str], verbatim: Tuple[str, ...] = ()):
    """Yield (line_number, row) pairs, checking the header carries every column.

    Values are stripped except in the verbatim columns, which are written
    back unchanged.
    """
    f, should_close = _open_text(src)
    try:
        r = csv.DictReader(f)
        missing = [c for c in columns if c not in (r.fieldnames or [])]
        if missing:
            raise LoadError(f"Missing column(s) {', '.join(missing)}")
        for row in r:
            if not any((v or '').strip() for v in row.values() if isinstance(v, str)):
                continue
            values = {c: (row[c] or '') if c in verbatim else (row[c] or '').strip()
                      for c in columns}
            yield r.line_num, values
    finally:
        if should_close:
            # TextIOWrapper.close() would also close a caller's BytesIO
            if isinstance(f, io.TextIOWrapper) and isinstance(src, io.BytesIO):
                f.detach()
            else:
                f.close()


def _hours(value: str, line: int, column: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise LoadError(f"Line {line}: {column} is not a number: {value!r}") from None


def load_catalog(classes_per_uc: TextOrPath, classes: TextOrPath) -> Catalog:
    """Sections from classes_per_uc.csv, then their slots from classes.csv."""
    catalog = Catalog()
    for _, row in _rows(classes_per_uc, ["UcCode", "ClassCode"]):
        class_id = ClassId(row["UcCode"], row["ClassCode"])
        if class_id not in catalog:
            catalog.add_section(ClassSection(class_id))

    slots = 0
    for line, row in _rows(classes, ["ClassCode", "UcCode", "Weekday", "StartHour", "Duration", "Type"]):
        section = catalog.get(ClassId(row["UcCode"], row["ClassCode"]))
        if section is None:
            logger.warning("Slot for unknown class ignored", line=line,
                           course=row["UcCode"], section=row["ClassCode"])
            continue
        start = _hours(row["StartHour"], line, "StartHour")
        duration = _hours(row["Duration"], line, "Duration")
        try:
            slot = Slot(row["Weekday"], start, duration, row["Type"])
        except ValueError as exc:
            raise LoadError(f"Line {line}: {exc}") from exc
        section.add_slot(slot)
        slots += 1

    logger.info("Catalog loaded", sections=len(catalog), courses=len(catalog.courses()), slots=slots)
    return catalog


def load_students(src: TextOrPath, catalog: Catalog) -> StudentDirectory:
    """Students and their enrollments; the first name seen for an id wins.

    Raises ClassNotFoundError for a row naming a section missing from the
    catalog and DuplicateCourseError when a student would hold two sections
    of one course.
    """
    directory = StudentDirectory()
    rows = 0
    for _, row in _rows(src, ENROLLMENT_HEADER, verbatim=("StudentName",)):
        student = directory.add(Student(row["StudentCode"], row["StudentName"]))
        section = catalog.lookup(ClassId(row["UcCode"], row["ClassCode"]))
        enroll(student, section)
        rows += 1
    logger.info("Students loaded", students=len(directory), enrollments=rows)
    return directory


def load_state(data_dir: Union[str, os.PathLike]) -> Tuple[Catalog, StudentDirectory]:
    catalog = load_catalog(os.path.join(data_dir, CLASSES_PER_UC), os.path.join(data_dir, CLASSES))
    directory = load_students(os.path.join(data_dir, STUDENTS_CLASSES), catalog)
    return catalog, directory


def load_requests(src: TextOrPath) -> List[Request]:
    return [Request(row["StudentCode"], ClassId(row["UcCode"], row["ClassCode"]))
            for _, row in _rows(src, REQUEST_HEADER)]


def parse_request(text: str) -> Request:
    """STUDENT:UC:CLASS, as given on the command line."""
    parts = [p.strip() for p in text.split(':')]
    if len(parts) != 3 or not all(parts):
        raise LoadError(f"Expected STUDENT:UC:CLASS, got {text!r}")
    return Request(parts[0], ClassId(parts[1], parts[2]))


def enrollment_rows(directory: StudentDirectory) -> Iterable[List[str]]:
    for student in directory:
        for class_id in student.classes:
            yield [student.id, student.name, class_id.course_id, class_id.section_id]


def write_enrollments(dst: IO, directory: StudentDirectory):
    w = csv.writer(dst, lineterminator='\n')
    w.writerow(ENROLLMENT_HEADER)
    w.writerows(enrollment_rows(directory))


def enrollments_csv(directory: StudentDirectory) -> str:
    buf = io.StringIO()
    write_enrollments(buf, directory)
    return buf.getvalue()


def save_enrollments_csv(path: Union[str, os.PathLike], directory: StudentDirectory):
    with open(path, 'w', newline='', encoding='utf-8') as f:
        write_enrollments(f, directory)
    logger.info("Enrollments written", path=str(path), students=len(directory))
