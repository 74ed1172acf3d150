"""Test persistence stores."""

import sqlite3

import pytest

from familyroots.errors import PersistenceError
from familyroots.graph.family.graph import FamilyGraph
from familyroots.models import RelationshipEdge, RelationshipKind


def save(store, graph, tree_id="rao"):
    for person in graph:
        assert store.write_person(person.model_copy(update={"family_tree_id": tree_id}))
    assert store.write_edges(graph.edges)


@pytest.fixture(params=["memory_store", "graphlite_store"])
def store(request):
    """Each store implementation."""
    return request.getfixturevalue(request.param)


class TestStores:
    """Behaviour shared by every store."""

    def test_round_trip(self, store, family):
        """Persons and edges load back as written."""
        graph, ids = family
        save(store, graph)

        persons, edges = store.load_all("rao")
        assert {p.id for p in persons} == set(ids.values())
        assert set(edges) == set(graph.edges)
        assert all(p.parent_relationships == [] for p in persons)

        loaded = FamilyGraph.from_records(persons, edges)
        assert loaded.get_person(ids["kid"]).first_name == "Kiran"
        assert loaded.get_person(ids["mom"]).birth_place == "Pune"
        assert set(loaded.get_person(ids["dad"]).spouse_ids) == {ids["ex"], ids["mom"]}
        assert loaded.check_integrity() == []

    def test_load_other_tree(self, store, family):
        """Trees are isolated from each other."""
        graph, _ = family
        save(store, graph)
        assert store.load_all("other") == ([], [])

    def test_rewrite_person(self, store, family):
        """Writing a person again replaces the record."""
        graph, ids = family
        save(store, graph)
        kid = graph.get_person(ids["kid"]).model_copy(update={"family_tree_id": "rao", "occupation": "Pilot"})
        assert store.write_person(kid)

        persons, edges = store.load_all("rao")
        assert len(persons) == len(ids)
        assert next(p for p in persons if p.id == ids["kid"]).occupation == "Pilot"
        assert set(edges) == set(graph.edges)

    def test_delete_edges_for(self, store, family):
        """Edges in both directions are removed."""
        graph, ids = family
        save(store, graph)
        assert store.delete_edges_for(ids["dad"])

        _, edges = store.load_all("rao")
        assert edges
        for edge in edges:
            assert ids["dad"] not in (edge.person_id, edge.related_person_id)

    def test_delete_person(self, store, family):
        """Deleted person is not loaded."""
        graph, ids = family
        save(store, graph)
        assert store.delete_edges_for(ids["kid"])
        assert store.delete_person(ids["kid"])

        persons, _ = store.load_all("rao")
        assert ids["kid"] not in {p.id for p in persons}

    def test_delete_edges(self, store, family):
        """Only the given edges are removed."""
        graph, ids = family
        save(store, graph)
        doomed = [e for e in graph.edges if ids["dad"] in (e.person_id, e.related_person_id)
                  and e.kind == RelationshipKind.SPOUSE]
        assert store.delete_edges(doomed)

        _, edges = store.load_all("rao")
        assert set(edges) == set(graph.edges) - set(doomed)

    def test_write_edges_twice(self, store, family):
        """Writing stored edges again does not duplicate them."""
        graph, _ = family
        save(store, graph)
        assert store.write_edges(graph.edges)

        _, edges = store.load_all("rao")
        assert sorted(edges, key=repr) == sorted(graph.edges, key=repr)

    def test_delete_unknown(self, store):
        """Deleting unknown ids succeeds."""
        assert store.delete_edges_for("missing")
        assert store.delete_person("missing")


class TestGraphLiteStore:
    """GraphLite specific behaviour."""

    def test_edge_to_unknown_person(self, graphlite_store, family):
        """Edges to persons without a record are not written."""
        graph, ids = family
        save(graphlite_store, graph)
        edge = RelationshipEdge(
            person_id=ids["kid"], related_person_id="missing",
            kind=RelationshipKind.PARENT, subtype="biological",
        )
        assert graphlite_store.write_edges([edge]) is False

    def test_unknown_subtype(self, graphlite_store, family):
        """Edges with an unknown subtype are not written."""
        graph, ids = family
        save(graphlite_store, graph)
        edge = RelationshipEdge(
            person_id=ids["kid"], related_person_id=ids["ex"],
            kind=RelationshipKind.PARENT, subtype="foster",
        )
        assert graphlite_store.write_edges([edge]) is False
        _, edges = graphlite_store.load_all("rao")
        assert edge not in edges

    def test_broken_database(self, graphlite_store, family):
        """SQLite failures are reported instead of escaping."""
        graph, ids = family
        save(graphlite_store, graph)
        with sqlite3.connect(graphlite_store.db_path) as conn:
            conn.execute("DROP TABLE persons")

        with pytest.raises(PersistenceError):
            graphlite_store.load_all("rao")
        assert graphlite_store.write_person(graph.get_person(ids["kid"])) is False
        assert graphlite_store.write_edges(graph.edges) is False
        assert graphlite_store.delete_edges(graph.edges) is False
        assert graphlite_store.delete_edges_for(ids["kid"]) is False
