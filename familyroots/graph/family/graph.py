"""Main FamilyGraph facade combining all operations."""

import logging
from typing import Iterable, Iterator, Optional

from familyroots.errors import NotFoundError
from familyroots.models import (
    ParentRelationship,
    ParentType,
    Person,
    Photo,
    RelationshipEdge,
    RelationshipKind,
    SpouseRelationship,
    SpouseStatus,
)
from familyroots.graph.models import FamilyUnit, SiblingLink
from familyroots.graph.family import kinship, person, relationships, tree
from familyroots.graph.family.queries import FamilyQueries

logger = logging.getLogger(__name__)


class FamilyGraph:
    """
    Main interface for family graph operations.

    Holds every person of one family tree keyed by id. Relationship edges live
    on the persons (children point at parents, spouses at each other) and the
    full edge list is derived from them.

    Mutations never modify the graph they are called on: they return a new
    graph, so a rejected mutation leaves the caller's graph untouched.

    Usage:
        graph = FamilyGraph()
        graph, ramesh = graph.create_person({"first_name": "Ramesh", "gender": "male"})
        graph, padma = graph.create_person({
            "first_name": "Padma",
            "spouse_relationships": [{"person_id": ramesh.id, "status": "current"}],
        })
        forest = graph.build_forest()
    """

    def __init__(self, persons: Optional[Iterable[Person]] = None):
        self.persons: dict[str, Person] = {p.id: p for p in persons or []}
        self.queries = FamilyQueries(self)

    @classmethod
    def from_records(cls, persons: Iterable[Person], edges: Iterable[RelationshipEdge]) -> "FamilyGraph":
        """Build a graph from stored person records and relationship edges."""
        records = []
        for record in persons:
            record = record.model_copy(deep=True)
            record.parent_relationships = []
            record.spouse_relationships = []
            records.append(record)
        graph = cls(records)

        for edge in edges:
            owner = graph.persons.get(edge.person_id)
            if owner is None or edge.related_person_id not in graph.persons:
                logger.warning(
                    "Skipping dangling %s edge %s -> %s",
                    edge.kind.value, edge.person_id, edge.related_person_id,
                )
                continue

            try:
                if edge.kind == RelationshipKind.PARENT:
                    if owner.parent_relationship(edge.related_person_id) is None:
                        owner.parent_relationships.append(
                            ParentRelationship(person_id=edge.related_person_id, type=ParentType(edge.subtype))
                        )
                elif owner.spouse_relationship(edge.related_person_id) is None:
                    owner.spouse_relationships.append(
                        SpouseRelationship(person_id=edge.related_person_id, status=SpouseStatus(edge.subtype))
                    )
            except ValueError:
                logger.warning("Skipping edge with unknown subtype %r", edge.subtype)

        return graph

    @classmethod
    def from_dict(cls, data: dict) -> "FamilyGraph":
        """Load an exported {"persons": [...], "edges": [...]} document."""
        persons = [Person.model_validate(p) for p in data.get("persons", [])]
        edges = [RelationshipEdge.model_validate(e) for e in data.get("edges", [])]
        return cls.from_records(persons, edges)

    def to_dict(self) -> dict:
        """Export persons and edges as plain JSON-compatible data."""
        return {
            "persons": [
                p.model_dump(mode="json", exclude={"parent_relationships", "spouse_relationships"})
                for p in self.persons.values()
            ],
            "edges": [e.model_dump(mode="json") for e in self.edges],
        }

    def copy(self) -> "FamilyGraph":
        return FamilyGraph(p.model_copy(deep=True) for p in self.persons.values())

    @property
    def edges(self) -> list[RelationshipEdge]:
        """All relationship edges; every marriage yields one edge per side."""
        result = []
        for p in self.persons.values():
            for rel in p.parent_relationships:
                result.append(RelationshipEdge(
                    person_id=p.id, related_person_id=rel.person_id,
                    kind=RelationshipKind.PARENT, subtype=rel.type.value,
                ))
            for rel in p.spouse_relationships:
                result.append(RelationshipEdge(
                    person_id=p.id, related_person_id=rel.person_id,
                    kind=RelationshipKind.SPOUSE, subtype=rel.status.value,
                ))
        return result

    def __len__(self) -> int:
        return len(self.persons)

    def __contains__(self, person_id: str) -> bool:
        return person_id in self.persons

    def __iter__(self) -> Iterator[Person]:
        return iter(self.persons.values())

    def get_person(self, person_id: str) -> Optional[Person]:
        return self.persons.get(person_id)

    def require(self, person_id: str) -> Person:
        """Get person by id or raise NotFoundError."""
        found = self.persons.get(person_id)
        if found is None:
            raise NotFoundError(f"Person {person_id!r} not found", person_id)
        return found

    def check_integrity(self) -> list[str]:
        return relationships.check_integrity(self)

    # ─────────────────────────────────────────
    # Person operations (delegated)
    # ─────────────────────────────────────────

    def create_person(self, data: dict, created_by: str = "") -> tuple["FamilyGraph", Person]:
        return person.create_person(self, data, created_by)

    def update_person(self, person_id: str, patch: dict) -> "FamilyGraph":
        return person.update_person(self, person_id, patch)

    def delete_person(self, person_id: str) -> "FamilyGraph":
        return person.delete_person(self, person_id)

    def add_photo(self, person_id: str, url: str, caption: Optional[str] = None,
                  uploaded_by: str = "") -> tuple["FamilyGraph", Photo]:
        return person.add_photo(self, person_id, url, caption, uploaded_by)

    def set_profile_photo(self, person_id: str, url: Optional[str]) -> "FamilyGraph":
        return person.set_profile_photo(self, person_id, url)

    # ─────────────────────────────────────────
    # Relationship operations (delegated)
    # ─────────────────────────────────────────

    def set_spouse_status(self, person_id: str, other_id: str, status) -> "FamilyGraph":
        return relationships.set_spouse_status(self, person_id, other_id, status)

    def set_parent_type(self, person_id: str, parent_id: str, parent_type) -> "FamilyGraph":
        return relationships.set_parent_type(self, person_id, parent_id, parent_type)

    def add_parent(self, child_id: str, parent_id: str, parent_type=ParentType.BIOLOGICAL) -> "FamilyGraph":
        return relationships.add_parent(self, child_id, parent_id, parent_type)

    def remove_parent(self, child_id: str, parent_id: str) -> "FamilyGraph":
        return relationships.remove_parent(self, child_id, parent_id)

    def add_spouse(self, person_id: str, other_id: str, status=SpouseStatus.CURRENT) -> "FamilyGraph":
        return relationships.add_spouse(self, person_id, other_id, status)

    def remove_spouse(self, person_id: str, other_id: str) -> "FamilyGraph":
        return relationships.remove_spouse(self, person_id, other_id)

    # ─────────────────────────────────────────
    # Query operations (delegated)
    # ─────────────────────────────────────────

    def get_parents(self, person_id: str) -> list[Person]:
        return self.queries.get_parents(person_id)

    def get_children(self, person_id: str) -> list[Person]:
        return self.queries.get_children(person_id)

    def get_spouses(self, person_id: str) -> list[Person]:
        return self.queries.get_spouses(person_id)

    def get_siblings(self, person_id: str) -> list[Person]:
        return self.queries.get_siblings(person_id)

    def get_sibling_links(self, person_id: str) -> list[SiblingLink]:
        return self.queries.get_sibling_links(person_id)

    def get_full_siblings(self, person_id: str) -> list[Person]:
        return self.queries.get_full_siblings(person_id)

    def get_half_siblings(self, person_id: str) -> list[Person]:
        return self.queries.get_half_siblings(person_id)

    def get_descendants(self, person_id: str) -> set[str]:
        return self.queries.get_descendants(person_id)

    def get_ancestors(self, person_id: str) -> set[str]:
        return self.queries.get_ancestors(person_id)

    def parent_candidates(self, person_id: str) -> list[Person]:
        return self.queries.parent_candidates(person_id)

    def spouse_candidates(self, person_id: str) -> list[Person]:
        return self.queries.spouse_candidates(person_id)

    def search(self, query: str) -> list[Person]:
        return self.queries.search(query)

    # ─────────────────────────────────────────
    # Rendering and inference
    # ─────────────────────────────────────────

    def build_forest(self, name_filter: Optional[str] = None,
                     root_ids: Optional[list[str]] = None) -> list[FamilyUnit]:
        return tree.build_forest(self, name_filter, root_ids)

    def describe(self, person_id: str, other_id: str) -> str:
        return kinship.describe(self, person_id, other_id)
