import sys, os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import io

import pandas as pd
import streamlit as st

from classswap.errors import ClassSwapError
from classswap.graph_build import alternatives, build_collision_graph
from classswap.io_utils import (
    enrollments_csv, load_catalog, load_requests, load_students, parse_request
)
from classswap.logging_setup import setup_logging
from classswap.reports import (
    class_schedule, course_schedule, course_students, rejected_frame, requests_frame, student_schedule
)
from classswap.scheduling.engine import EnrollmentEngine
from classswap.scheduling.evaluation import course_spreads, summary
from classswap.scheduling.evaluator import BalanceParams

# ---------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------
st.set_page_config(page_title="ClassSwap", layout="wide")
st.title("ClassSwap – Class Change Requests")
setup_logging("WARNING")


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def _bytes_of(upload):
    if upload is None:
        return None
    return upload.getvalue()


def load_engine(per_uc: bytes, classes: bytes, enrollments: bytes, params: BalanceParams) -> EnrollmentEngine:
    # Fresh state on every run; the engine is the only writer while a batch runs.
    catalog = load_catalog(io.BytesIO(per_uc), io.BytesIO(classes))
    directory = load_students(io.BytesIO(enrollments), catalog)
    return EnrollmentEngine(catalog, directory, params)


# ---------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------
st.subheader("Inputs")
with st.form("controls"):
    c1, c2, c3 = st.columns(3)
    per_uc_file = c1.file_uploader("classes_per_uc.csv (UcCode,ClassCode)", type=["csv"])
    classes_file = c2.file_uploader("classes.csv (ClassCode,UcCode,Weekday,StartHour,Duration,Type)", type=["csv"])
    students_file = c3.file_uploader("students_classes.csv (StudentCode,StudentName,UcCode,ClassCode)", type=["csv"])

    r1, r2 = st.columns(2)
    requests_file = r1.file_uploader("(Optional) requests.csv (StudentCode,UcCode,ClassCode)", type=["csv"])
    typed_requests = r2.text_area("(Optional) Requests, one STUDENT:UC:CLASS per line")

    b1, b2, b3 = st.columns(3)
    max_spread = b1.number_input("Max spread", min_value=1, value=4, step=1)
    per_extra = b2.number_input("Students per extra place", min_value=1, value=16, step=1)
    base = b3.number_input("Base allowance", min_value=0, value=4, step=1)

    submitted = st.form_submit_button("Load & process")

if submitted:
    st.session_state.loaded = True
# Widgets below the form rerun the script without resubmitting it.
if not st.session_state.get("loaded"):
    st.info("Upload the three CSV files and press **Load & process**.")
    st.stop()

if per_uc_file is None or classes_file is None or students_file is None:
    st.error("classes_per_uc.csv, classes.csv and students_classes.csv are all required.")
    st.stop()

params = BalanceParams(int(max_spread), int(per_extra), int(base))
try:
    engine = load_engine(_bytes_of(per_uc_file), _bytes_of(classes_file), _bytes_of(students_file), params)
    requests = load_requests(io.BytesIO(_bytes_of(requests_file))) if requests_file else []
    requests += [parse_request(line) for line in typed_requests.splitlines() if line.strip()]
except ClassSwapError as exc:
    st.error(f"Could not load data: {exc}")
    st.stop()

catalog, directory = engine.catalog, engine.directory

# ---------------------------------------------------------------------
# Processing
# ---------------------------------------------------------------------
for r in requests:
    engine.submit(r.student_id, r.class_id)
batch = engine.process_all(on_missing="skip") if requests else None

G = build_collision_graph(catalog)
st.subheader("Summary")
st.code(summary(G, catalog, directory, batch))

if batch is not None:
    a, b = st.columns(2)
    a.markdown("**Accepted**")
    a.dataframe(requests_frame(batch.accepted, directory), use_container_width=True)
    b.markdown("**Rejected**")
    b.dataframe(rejected_frame(batch.rejected, directory), use_container_width=True)
    if batch.skipped:
        st.warning(f"{len(batch.skipped)} request(s) named an unknown student or class and were skipped.")
        st.dataframe(requests_frame(batch.skipped, directory), use_container_width=True)

    st.download_button(
        "Download students_classes.csv",
        data=enrollments_csv(directory).encode("utf-8"),
        file_name="students_classes.csv",
        mime="text/csv",
    )

# ---------------------------------------------------------------------
# Timetables
# ---------------------------------------------------------------------
st.subheader("Timetables")
tab_student, tab_class, tab_course = st.tabs(["Student", "Class", "Course"])

with tab_student:
    ids = [s.id for s in directory]
    if ids:
        sid = st.selectbox("Student", ids)
        student = directory.lookup(sid)
        st.caption(f"{student.name} – " + ", ".join(str(c) for c in student.classes))
        st.dataframe(student_schedule(student, catalog), use_container_width=True)
        course = st.selectbox("Move within course", [c.course_id for c in student.classes] or catalog.courses())
        free = alternatives(G, catalog, student, course)
        st.write("Collision-free sections: " + (", ".join(s.class_id.section_id for s in free) or "none"))

with tab_class:
    labels = sorted({s.class_id.section_id for s in catalog})
    if labels:
        label = st.selectbox("Class", labels)
        st.dataframe(class_schedule(label, catalog), use_container_width=True)

with tab_course:
    courses = catalog.courses()
    if courses:
        course_id = st.selectbox("Course", courses)
        st.dataframe(course_schedule(course_id, catalog), use_container_width=True)
        sizes = pd.DataFrame(
            [{"section": s.class_id.section_id, "students": s.roster_size}
             for s in catalog.sections_of_course(course_id)]
        )
        st.bar_chart(sizes.set_index("section"))
        st.caption(f"Spread: {course_spreads(catalog)[course_id]}")
        st.dataframe(course_students(course_id, catalog), use_container_width=True)
