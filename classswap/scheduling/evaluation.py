from typing import Dict, Optional

import networkx as nx

from ..catalog import Catalog, StudentDirectory
from ..models import BatchResult
from .validation import catalog_index_ok, one_section_per_course_ok, rosters_consistent_ok


def course_spreads(catalog: Catalog) -> Dict[str, int]:
    spreads = {}
    for course_id in catalog.courses():
        sizes = [s.roster_size for s in catalog.sections_of_course(course_id)]
        spreads[course_id] = max(sizes) - min(sizes)
    return spreads


def summary(G: nx.Graph, catalog: Catalog, directory: StudentDirectory,
            batch: Optional[BatchResult] = None) -> str:
    enrollments = sum(len(s.classes) for s in directory)
    spreads = course_spreads(catalog)
    widest = max(spreads.items(), key=lambda kv: kv[1], default=None)
    ok_courses = one_section_per_course_ok(directory)
    ok_rosters = rosters_consistent_ok(catalog, directory)
    ok_index = catalog_index_ok(catalog)

    out = (
        f"Students: {len(directory)}  Enrollments: {enrollments}\n"
        f"Courses: {len(spreads)}  Sections: {len(catalog)}\n"
        f"Colliding section pairs: {G.number_of_edges()}\n"
    )
    if widest is not None:
        out += f"Widest spread: {widest[1]} ({widest[0]})\n"
    if batch is not None:
        out += (
            f"Accepted: {len(batch.accepted)}  Rejected: {len(batch.rejected)}  "
            f"Skipped: {len(batch.skipped)}\n"
        )
    out += (
        f"Valid (one per course): {ok_courses}  Valid (rosters): {ok_rosters}  "
        f"Valid (index): {ok_index}\n"
    )
    return out
