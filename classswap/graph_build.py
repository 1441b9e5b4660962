from typing import List

import networkx as nx

from .catalog import Catalog
from .models import ClassSection, Student


def build_collision_graph(catalog: Catalog) -> nx.Graph:
    """Nodes are ClassIds; an edge joins two sections of different courses sharing time."""
    G = nx.Graph()
    sections = catalog.sections()
    for section in sections:
        G.add_node(section.class_id, roster=section.roster_size)
    for i in range(len(sections)):
        for j in range(i + 1, len(sections)):
            a, b = sections[i], sections[j]
            if a.class_id.same_course(b.class_id):
                continue
            if a.collides_with(b):
                G.add_edge(a.class_id, b.class_id)
    return G


def alternatives(G: nx.Graph, catalog: Catalog, student: Student, course_id: str) -> List[ClassSection]:
    """Sections of course_id the student could hold without clashing with the rest of their timetable."""
    others = [c for c in student.classes if c.course_id != course_id]
    found = []
    for section in catalog.sections_of_course(course_id):
        if section.class_id == student.class_for(course_id):
            continue
        if not any(G.has_edge(section.class_id, held) for held in others):
            found.append(section)
    return found
