"""Persistence contract for family trees, plus an in-memory store."""

from abc import ABC, abstractmethod
from typing import Iterable

from familyroots.models import Person, RelationshipEdge


class FamilyStore(ABC):
    """
    Backend that persists persons and relationship edges.

    Write methods return False when nothing was committed; implementations may
    also raise PersistenceError. `load_all` reports failure by raising
    PersistenceError. Person records are stored without their relationship
    lists: edges are the only stored form of relationships.
    """

    @abstractmethod
    def load_all(self, tree_id: str) -> tuple[list[Person], list[RelationshipEdge]]:
        """Load every person of a tree and every edge between them."""

    @abstractmethod
    def write_person(self, person: Person) -> bool:
        """Insert or replace a person record."""

    @abstractmethod
    def write_edges(self, edges: Iterable[RelationshipEdge]) -> bool:
        """Insert edges exactly as given, skipping ones already stored.

        Reciprocal spouse edges arrive as separate entries.
        """

    @abstractmethod
    def delete_edges(self, edges: Iterable[RelationshipEdge]) -> bool:
        """Delete exactly the given edges; edges not stored are ignored."""

    @abstractmethod
    def delete_person(self, person_id: str) -> bool:
        """Delete a person record."""

    @abstractmethod
    def delete_edges_for(self, person_id: str) -> bool:
        """Delete every edge where the person is either endpoint."""


def _record(person: Person) -> Person:
    return person.model_copy(
        deep=True, update={"parent_relationships": [], "spouse_relationships": []}
    )


class InMemoryStore(FamilyStore):
    """Dictionary-backed store for tests and demos."""

    def __init__(self):
        self.persons: dict[str, Person] = {}
        self.edges: list[RelationshipEdge] = []

    def load_all(self, tree_id: str) -> tuple[list[Person], list[RelationshipEdge]]:
        persons = [_record(p) for p in self.persons.values() if p.family_tree_id == tree_id]
        ids = {p.id for p in persons}
        edges = [e for e in self.edges if e.person_id in ids and e.related_person_id in ids]
        return persons, edges

    def write_person(self, person: Person) -> bool:
        self.persons[person.id] = _record(person)
        return True

    def write_edges(self, edges: Iterable[RelationshipEdge]) -> bool:
        for edge in edges:
            if edge not in self.edges:
                self.edges.append(edge)
        return True

    def delete_edges(self, edges: Iterable[RelationshipEdge]) -> bool:
        doomed = set(edges)
        self.edges = [e for e in self.edges if e not in doomed]
        return True

    def delete_person(self, person_id: str) -> bool:
        self.persons.pop(person_id, None)
        return True

    def delete_edges_for(self, person_id: str) -> bool:
        self.edges = [
            e for e in self.edges
            if person_id not in (e.person_id, e.related_person_id)
        ]
        return True
