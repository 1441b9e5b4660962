"""Tests for the collision graph, invariant checks and the batch summary."""
from classswap.graph_build import alternatives, build_collision_graph
from classswap.models import ClassId, Slot
from classswap.scheduling.evaluation import course_spreads, summary
from classswap.scheduling.validation import (
    catalog_index_ok, check_state, one_section_per_course_ok, rosters_consistent_ok,
)


def test_collision_graph_edges(campus):
    catalog, _ = campus
    G = build_collision_graph(catalog)
    assert G.number_of_nodes() == 4
    # only L.EIC001/1LEIC01 (Mon 08-10) and L.EIC002/1LEIC01 (Mon 09-10:30) overlap
    assert list(G.edges()) in (
        [(ClassId("L.EIC001", "1LEIC01"), ClassId("L.EIC002", "1LEIC01"))],
        [(ClassId("L.EIC002", "1LEIC01"), ClassId("L.EIC001", "1LEIC01"))],
    )


def test_same_course_sections_never_joined(make_state):
    slot = Slot("Monday", 8.0, 1.0)
    catalog, _ = make_state({ClassId("A", "1"): [slot], ClassId("A", "2"): [slot]}, [])
    assert build_collision_graph(catalog).number_of_edges() == 0


def test_alternatives(campus):
    catalog, directory = campus
    G = build_collision_graph(catalog)
    bruno = directory.lookup("up002")
    # Bruno sits on Monday 08:00; L.EIC002/1LEIC01 clashes, 1LEIC02 does not
    found = alternatives(G, catalog, bruno, "L.EIC002")
    assert [s.class_id for s in found] == [ClassId("L.EIC002", "1LEIC02")]
    # the section already held is not offered
    assert [s.class_id for s in alternatives(G, catalog, bruno, "L.EIC001")] == [ClassId("L.EIC001", "1LEIC02")]


def test_validation_on_loaded_state(campus):
    catalog, directory = campus
    assert one_section_per_course_ok(directory)
    assert rosters_consistent_ok(catalog, directory)
    assert catalog_index_ok(catalog)
    check_state(catalog, directory)


def test_validation_detects_orphan_roster_entry(campus):
    catalog, directory = campus
    catalog.lookup(ClassId("L.EIC002", "1LEIC01")).add_student(directory.lookup("up002"))
    assert not rosters_consistent_ok(catalog, directory)


def test_summary(engine):
    engine.submit("up001", ClassId("L.EIC001", "1LEIC01"))
    engine.submit("up002", ClassId("L.EIC002", "1LEIC01"))
    batch = engine.process_all()
    text = summary(build_collision_graph(engine.catalog), engine.catalog, engine.directory, batch)
    assert "Students: 2  Enrollments: 3" in text
    assert "Colliding section pairs: 1" in text
    assert "Accepted: 1  Rejected: 1  Skipped: 0" in text
    assert "Valid (rosters): True" in text


def test_course_spreads(make_course):
    catalog, _ = make_course("C", [10, 2, 5])
    assert course_spreads(catalog) == {"C": 8}
