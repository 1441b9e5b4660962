import argparse
import os

from classswap.errors import ClassSwapError
from classswap.graph_build import alternatives, build_collision_graph
from classswap.io_utils import (
    STUDENTS_CLASSES, load_requests, load_state, parse_request, save_enrollments_csv
)
from classswap.logging_setup import setup_logging
from classswap.reports import (
    class_schedule, course_schedule, course_students, rejected_frame, render_table,
    render_week, requests_frame, student_schedule
)
from classswap.scheduling.engine import ON_MISSING_CHOICES, EnrollmentEngine
from classswap.scheduling.evaluation import summary
from classswap.scheduling.evaluator import BalanceParams


def print_reports(args, engine: EnrollmentEngine):
    catalog, directory = engine.catalog, engine.directory
    if args.student:
        student = directory.lookup(args.student)
        print(f">> {student.name} ({student.id}) is enrolled in: "
              + ", ".join(str(c) for c in student.classes))
        print(render_week(student_schedule(student, catalog), ["course", "type"]))
        if args.options:
            G = build_collision_graph(catalog)
            found = alternatives(G, catalog, student, args.options)
            print(f">> Collision-free sections of {args.options}: "
                  + (", ".join(s.class_id.section_id for s in found) or "none"))
    if args.section:
        df = class_schedule(args.section, catalog)
        print(f">> Schedule for class {args.section}:" if not df.empty else ">> Class not found")
        if not df.empty:
            print(render_week(df, ["course", "type"]))
    if args.course:
        df = course_schedule(args.course, catalog)
        print(f">> Schedule for {args.course}:" if not df.empty else ">> Course not found")
        if not df.empty:
            print(render_week(df, ["type", "section"]))
    if args.course_students:
        df = course_students(args.course_students, catalog)
        print(f">> Number of students: {len(df)}")
        print(render_table(df))


def main():
    p = argparse.ArgumentParser(description="ClassSwap – class change requests with collision and balance checks")
    p.add_argument('--data', type=str, default='data',
                   help='Folder with classes_per_uc.csv, classes.csv, students_classes.csv')

    # Requests
    p.add_argument('--requests', type=str, help='CSV StudentCode,UcCode,ClassCode')
    p.add_argument('--request', action='append', default=[], metavar='STUDENT:UC:CLASS',
                   help='Single request, may be repeated (processed after --requests)')
    p.add_argument('--on-missing', choices=ON_MISSING_CHOICES, default='raise',
                   help='What to do with a request naming an unknown student or class')

    # Balance rule
    p.add_argument('--max-spread', type=int, default=4)
    p.add_argument('--students-per-extra', type=int, default=16)
    p.add_argument('--base-allowance', type=int, default=4)

    # Reports (printed after the requests are processed)
    p.add_argument('--student', type=str, help='Print the timetable of a student')
    p.add_argument('--options', type=str, metavar='UC',
                   help='With --student: list sections of UC the student could move to')
    p.add_argument('--section', type=str, help='Print the timetable of a class label, e.g. 1LEIC05')
    p.add_argument('--course', type=str, help='Print the timetable of a course')
    p.add_argument('--course-students', type=str, metavar='UC', help='List the students of a course')

    # Output
    p.add_argument('--write', action='store_true', help='Write students_classes.csv back after processing')
    p.add_argument('--out', type=str, default=None, help='Enrollment output path (default: overwrite input)')
    p.add_argument('--log-level', type=str, default='WARNING')
    p.add_argument('--json-logs', action='store_true')
    args = p.parse_args()

    setup_logging(args.log_level, json_logs=args.json_logs)

    try:
        catalog, directory = load_state(args.data)
        params = BalanceParams(args.max_spread, args.students_per_extra, args.base_allowance)
        engine = EnrollmentEngine(catalog, directory, params)

        requests = load_requests(args.requests) if args.requests else []
        requests += [parse_request(r) for r in args.request]
        for r in requests:
            engine.submit(r.student_id, r.class_id)

        batch = None
        if requests:
            print(">> Pending requests:")
            print(render_table(requests_frame(engine.pending, directory)))
            batch = engine.process_all(on_missing=args.on_missing)
            print(">> Accepted requests:")
            print(render_table(requests_frame(batch.accepted, directory)))
            if batch.rejected:
                print(">> Rejected requests:")
                print(render_table(rejected_frame(batch.rejected, directory)))
            else:
                print(">> All requests were accepted!")
            if batch.skipped:
                print(">> Skipped requests (unknown student or class):")
                print(render_table(requests_frame(batch.skipped, directory)))

        print_reports(args, engine)
        print(summary(build_collision_graph(catalog), catalog, directory, batch))

        if args.write:
            out = args.out or os.path.join(args.data, STUDENTS_CLASSES)
            save_enrollments_csv(out, directory)
            print(f"Saved: {out}")
    except (ClassSwapError, OSError, ValueError) as exc:
        raise SystemExit(f"Error: {exc}")


if __name__ == '__main__':
    main()
