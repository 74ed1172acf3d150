"""Family tree queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from familyroots.models import Person
from familyroots.graph.models import SiblingLink

if TYPE_CHECKING:
    from familyroots.graph.family.graph import FamilyGraph


class FamilyQueries:
    """Query operations derived from the relationship edges of a graph."""

    def __init__(self, graph: FamilyGraph):
        self.graph = graph

    def _resolve(self, ids) -> list[Person]:
        persons = self.graph.persons
        return [persons[pid] for pid in ids if pid in persons]

    def get_parents(self, person_id: str) -> list[Person]:
        """Get parents of a person (all parent types)."""
        person = self.graph.get_person(person_id)
        return self._resolve(person.parent_ids) if person else []

    def get_children(self, person_id: str) -> list[Person]:
        """Get every person listing this person as a parent."""
        return [
            p for p in self.graph.persons.values()
            if p.parent_relationship(person_id) is not None
        ]

    def get_spouses(self, person_id: str) -> list[Person]:
        """Get spouse(s) of a person regardless of status."""
        person = self.graph.get_person(person_id)
        return self._resolve(person.spouse_ids) if person else []

    def get_sibling_links(self, person_id: str) -> list[SiblingLink]:
        """Get siblings together with the parents they share with the person."""
        person = self.graph.get_person(person_id)
        if not person:
            return []

        links: dict[str, SiblingLink] = {}
        for parent_id in person.parent_ids:
            for child in self.get_children(parent_id):
                if child.id == person_id:
                    continue
                link = links.setdefault(child.id, SiblingLink(person=child))
                link.shared_parent_ids.append(parent_id)
        return list(links.values())

    def get_siblings(self, person_id: str) -> list[Person]:
        return [link.person for link in self.get_sibling_links(person_id)]

    def get_full_siblings(self, person_id: str) -> list[Person]:
        return [link.person for link in self.get_sibling_links(person_id) if link.is_full]

    def get_half_siblings(self, person_id: str) -> list[Person]:
        return [link.person for link in self.get_sibling_links(person_id) if link.is_half]

    def get_descendants(self, person_id: str) -> set[str]:
        """
        Descendant closure of a person, including the person.

        Follows the children relation and stops at revisits, so a corrupt
        graph containing a cycle still terminates.
        """
        if person_id not in self.graph:
            return set()

        visited = {person_id}
        stack = [person_id]
        while stack:
            current = stack.pop()
            for child in self.get_children(current):
                if child.id not in visited:
                    visited.add(child.id)
                    stack.append(child.id)
        return visited

    def get_ancestors(self, person_id: str) -> set[str]:
        """Every person reachable through parent edges, excluding the person."""
        ancestors: set[str] = set()
        stack = [person_id]
        while stack:
            current = self.graph.get_person(stack.pop())
            if not current:
                continue
            for parent_id in current.parent_ids:
                if parent_id not in ancestors and parent_id != person_id:
                    ancestors.add(parent_id)
                    stack.append(parent_id)
        return ancestors

    def parent_candidates(self, person_id: str) -> list[Person]:
        """Persons that may be added as a parent without creating a cycle."""
        person = self.graph.get_person(person_id)
        if not person:
            return []

        excluded = self.get_descendants(person_id)
        if person.spouse_id:
            excluded.add(person.spouse_id)
        return [p for p in self.graph.persons.values() if p.id not in excluded]

    def spouse_candidates(self, person_id: str) -> list[Person]:
        """Persons that may be married to this person."""
        person = self.graph.get_person(person_id)
        if not person:
            return []

        excluded = {person_id, *person.parent_ids}
        excluded.update(child.id for child in self.get_children(person_id))
        return [
            p for p in self.graph.persons.values()
            if p.id not in excluded and p.spouse_id in (None, person_id)
        ]

    def search(self, query: str) -> list[Person]:
        """Case-insensitive substring search over names and birthplace.

        An empty query returns no results rather than everyone.
        """
        needle = (query or "").strip().lower()
        if not needle:
            return []

        results = []
        for p in self.graph.persons.values():
            fields = (p.first_name, p.last_name, p.nickname, p.birth_place, p.full_name)
            if any(needle in (value or "").lower() for value in fields):
                results.append(p)
        return results
