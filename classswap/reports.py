"""Tabular views of the catalog, the students and the request outcomes.

Every builder returns a pandas DataFrame so the CLI can print it and the
Streamlit front-end can show it as is; render_week() turns a slot table
into the per-weekday text layout the CLI prints.
"""
import math
from typing import Iterable, List, Sequence, Tuple

import pandas as pd

from .catalog import Catalog, StudentDirectory
from .models import WEEKDAY_INDEX, WEEKDAYS, ClassId, RejectedRequest, Request, Slot, Student

SLOT_COLUMNS = ["weekday", "start", "end", "course", "section", "type"]
REQUEST_COLUMNS = ["student_id", "name", "course", "section"]


def format_hour(hours: float) -> str:
    """10.5 -> '10:30'"""
    minutes = int(math.floor(hours * 60 + 0.5))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _slot_frame(pairs: Iterable[Tuple[ClassId, Slot]]) -> pd.DataFrame:
    rows = [
        {
            "weekday": slot.weekday,
            "start_h": slot.start,
            "start": format_hour(slot.start),
            "end": format_hour(slot.end),
            "course": class_id.course_id,
            "section": class_id.section_id,
            "type": slot.category,
        }
        for class_id, slot in pairs
    ]
    df = pd.DataFrame(rows, columns=["weekday", "start_h"] + SLOT_COLUMNS[1:])
    df["day"] = df["weekday"].map(WEEKDAY_INDEX)
    df = df.sort_values(["day", "start_h"], kind="stable")
    return df.drop(columns=["day", "start_h"]).reset_index(drop=True)


def student_schedule(student: Student, catalog: Catalog) -> pd.DataFrame:
    pairs = []
    for class_id in student.classes:
        for slot in catalog.lookup(class_id).slots:
            pairs.append((class_id, slot))
    return _slot_frame(pairs)


def class_schedule(section_id: str, catalog: Catalog) -> pd.DataFrame:
    """Timetable of a section label across every course that uses it."""
    pairs = [(s.class_id, slot) for s in catalog.sections_named(section_id) for slot in s.slots]
    return _slot_frame(pairs)


def course_schedule(course_id: str, catalog: Catalog) -> pd.DataFrame:
    """All slots of a course; identical slots shared by several sections appear once."""
    pairs = [(s.class_id, slot) for s in catalog.sections_of_course(course_id) for slot in s.slots]
    df = _slot_frame(pairs)
    if df.empty:
        return df
    merged = (
        df.groupby(["weekday", "start", "end", "course", "type"], sort=False, as_index=False)
        .agg(section=("section", lambda labels: ", ".join(labels)))
    )
    return merged[SLOT_COLUMNS]


def course_students(course_id: str, catalog: Catalog) -> pd.DataFrame:
    rows = [
        {"student_id": st.id, "name": st.name, "section": s.class_id.section_id}
        for s in catalog.sections_of_course(course_id)
        for st in s.students
    ]
    df = pd.DataFrame(rows, columns=["student_id", "name", "section"])
    return df.sort_values(["name", "student_id"], kind="stable").reset_index(drop=True)


def _request_row(request: Request, directory: StudentDirectory) -> dict:
    student = directory.get(request.student_id)
    return {
        "student_id": request.student_id,
        "name": student.name if student is not None else "",
        "course": request.class_id.course_id,
        "section": request.class_id.section_id,
    }


def requests_frame(requests: Sequence[Request], directory: StudentDirectory) -> pd.DataFrame:
    return pd.DataFrame([_request_row(r, directory) for r in requests], columns=REQUEST_COLUMNS)


def rejected_frame(rejected: Sequence[RejectedRequest], directory: StudentDirectory) -> pd.DataFrame:
    rows = []
    for item in rejected:
        row = _request_row(item.request, directory)
        row["reason"] = item.reason.value
        row["detail"] = item.detail
        rows.append(row)
    return pd.DataFrame(rows, columns=REQUEST_COLUMNS + ["reason", "detail"])


def render_week(df: pd.DataFrame, labels: List[str]) -> str:
    """One block per weekday, slots in start order: '   HH:MM to HH:MM   <labels...>'."""
    lines = []
    for day in WEEKDAYS:
        lines.append(f">> {day}:")
        for row in df[df["weekday"] == day].itertuples(index=False):
            values = row._asdict()
            text = "   ".join(str(values[c]) for c in labels)
            lines.append(f"   {values['start']} to {values['end']}   {text}")
    return "\n".join(lines)


def render_table(df: pd.DataFrame, empty: str = "(none)") -> str:
    if df.empty:
        return empty
    return df.to_string(index=False)
