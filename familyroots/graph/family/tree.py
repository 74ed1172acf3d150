"""Fold a family graph into nested family units for display."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, Optional

from familyroots.models import Person, SpouseStatus
from familyroots.graph.models import FamilyUnit

if TYPE_CHECKING:
    from familyroots.graph.family.graph import FamilyGraph


def _matches(person: Person, needle: str) -> bool:
    names = (person.first_name, person.last_name, f"{person.first_name} {person.last_name}")
    return any(needle in (name or "").lower() for name in names)


def _root_persons(graph: FamilyGraph, name_filter: Optional[str],
                  root_ids: Optional[list[str]]) -> list[Person]:
    if root_ids is not None:
        return [graph.require(pid) for pid in root_ids]

    needle = (name_filter or "").strip().lower()
    if needle:
        return [p for p in graph if _matches(p, needle)]
    return [p for p in graph if not p.parent_relationships]


def _new_unit(graph: FamilyGraph, person: Person, visited: set[str]) -> tuple[FamilyUnit, Iterator[str]]:
    """Create a unit for `person` and return it with its pending child ids."""
    visited.add(person.id)
    unit = FamilyUnit(person=person)
    partners = [person.id]

    for rel in person.spouse_relationships:
        spouse = graph.get_person(rel.person_id)
        if spouse is None:
            continue
        if rel.status == SpouseStatus.CURRENT and unit.current_spouse is None and spouse.id not in visited:
            unit.current_spouse = spouse
            visited.add(spouse.id)
            partners.append(spouse.id)
        elif rel.status != SpouseStatus.CURRENT:
            unit.ex_spouses.append(spouse)
            partners.append(spouse.id)

    child_ids: dict[str, None] = {}
    for partner_id in partners:
        for child in graph.get_children(partner_id):
            child_ids.setdefault(child.id)
    return unit, iter(child_ids)


def build_forest(graph: FamilyGraph, name_filter: Optional[str] = None,
                 root_ids: Optional[list[str]] = None) -> list[FamilyUnit]:
    """
    Build the display forest of family units.

    Roots are persons without parents, the persons matching `name_filter`, or
    the explicit `root_ids`. A single visited set spans the whole traversal so
    each person is placed once, either as a unit's person or as its current
    spouse. Ex-spouses are listed inline without being placed.

    Traversal uses an explicit stack of (unit, pending children) frames, which
    visits persons in the same order as a depth-first recursion would.
    """
    visited: set[str] = set()
    forest: list[FamilyUnit] = []

    for root in _root_persons(graph, name_filter, root_ids):
        if root.id in visited:
            continue
        unit, pending = _new_unit(graph, root, visited)
        forest.append(unit)

        stack = [(unit, pending)]
        while stack:
            parent_unit, pending = stack[-1]
            child_id = next(pending, None)
            if child_id is None:
                stack.pop()
                continue
            if child_id in visited:
                continue
            child_unit, child_pending = _new_unit(graph, graph.persons[child_id], visited)
            parent_unit.child_units.append(child_unit)
            stack.append((child_unit, child_pending))

    return forest
