"""Relationship operations between persons."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from familyroots.config import settings
from familyroots.errors import CycleError, NotFoundError, ValidationError
from familyroots.models import ParentRelationship, ParentType, SpouseRelationship, SpouseStatus

if TYPE_CHECKING:
    from familyroots.graph.family.graph import FamilyGraph

logger = logging.getLogger(__name__)


def _demoted_status() -> SpouseStatus:
    return SpouseStatus(settings.graph.demoted_spouse_status)


def _coerce_status(status) -> SpouseStatus:
    try:
        return SpouseStatus(status)
    except ValueError:
        raise ValidationError(f"Unknown spouse status {status!r}") from None


def _coerce_parent_type(parent_type) -> ParentType:
    try:
        return ParentType(parent_type)
    except ValueError:
        raise ValidationError(f"Unknown parent type {parent_type!r}") from None


def _coerce(model, entries: Iterable) -> list:
    try:
        return [
            entry.model_copy() if isinstance(entry, model) else model.model_validate(entry)
            for entry in entries
        ]
    except PydanticValidationError as e:
        raise ValidationError(f"Malformed relationship: {e}") from e


def _touch(*persons) -> None:
    now = datetime.now()
    for p in persons:
        p.updated_at = now


def _check_unique(person_id: str, entries: list, label: str) -> None:
    seen = set()
    for entry in entries:
        if entry.person_id in seen:
            raise ValidationError(f"Duplicate {label} {entry.person_id!r} for person {person_id!r}")
        seen.add(entry.person_id)


def _normalize_current(spouses: list[SpouseRelationship]) -> None:
    """Keep only the last `current` entry; earlier ones are demoted."""
    currents = [rel for rel in spouses if rel.status == SpouseStatus.CURRENT]
    for rel in currents[:-1]:
        rel.status = _demoted_status()


def _demote_current(graph: FamilyGraph, person_id: str, keep_id: str) -> None:
    """Demote any current marriage of `person_id` other than the one with `keep_id`."""
    person = graph.persons[person_id]
    for rel in person.spouse_relationships:
        if rel.status != SpouseStatus.CURRENT or rel.person_id == keep_id:
            continue
        rel.status = _demoted_status()
        other = graph.persons.get(rel.person_id)
        mirror = other.spouse_relationship(person_id) if other else None
        if mirror:
            mirror.status = rel.status
            _touch(other)
        logger.info("Demoted spouse %s of %s to %s", rel.person_id, person_id, rel.status.value)
    _touch(person)


def _unlink_spouses(graph: FamilyGraph, person_id: str) -> None:
    """Remove all spouse edges of a person from both sides."""
    person = graph.persons[person_id]
    for rel in person.spouse_relationships:
        other = graph.persons.get(rel.person_id)
        if other:
            other.spouse_relationships = [r for r in other.spouse_relationships if r.person_id != person_id]
            _touch(other)
    for other in graph.persons.values():
        if other.spouse_relationship(person_id) is not None:
            other.spouse_relationships = [r for r in other.spouse_relationships if r.person_id != person_id]
            _touch(other)
    person.spouse_relationships = []


def _check_parent_spouse_exclusive(graph: FamilyGraph, person_id: str) -> None:
    person = graph.persons[person_id]
    spouse_id = person.spouse_id
    if not spouse_id:
        return
    if spouse_id in person.parent_ids:
        raise CycleError(f"{spouse_id!r} cannot be both parent and current spouse of {person_id!r}")
    spouse = graph.persons.get(spouse_id)
    if spouse and person_id in spouse.parent_ids:
        raise CycleError(f"{person_id!r} cannot be both parent and current spouse of {spouse_id!r}")


def apply_relationships(graph: FamilyGraph, person_id: str,
                        parents: Optional[Iterable] = None,
                        spouses: Optional[Iterable] = None) -> None:
    """
    Replace a person's parent set and/or spouse set in place.

    `graph` must be a working copy: on any error it is left half-modified and
    the caller is expected to discard it. A set passed as None is left as is.
    Reciprocal spouse edges are rewritten on the other side of every marriage.
    """
    person = graph.require(person_id)
    new_parents = _coerce(ParentRelationship, parents) if parents is not None else None
    new_spouses = _coerce(SpouseRelationship, spouses) if spouses is not None else None

    if new_parents is not None:
        _check_unique(person_id, new_parents, "parent")
        if len(new_parents) > settings.graph.max_parents:
            raise ValidationError(
                f"Person {person_id!r} cannot have more than {settings.graph.max_parents} parents"
            )
        for rel in new_parents:
            graph.require(rel.person_id)

    if new_spouses is not None:
        _check_unique(person_id, new_spouses, "spouse")
        for rel in new_spouses:
            if rel.person_id == person_id:
                raise ValidationError(f"Person {person_id!r} cannot be their own spouse")
            graph.require(rel.person_id)

    if new_parents is not None:
        descendants = graph.get_descendants(person_id)
        for rel in new_parents:
            if rel.person_id in descendants:
                raise CycleError(f"{rel.person_id!r} is a descendant of {person_id!r} and cannot be a parent")
        person.parent_relationships = new_parents

    if new_spouses is not None:
        _normalize_current(new_spouses)
        _unlink_spouses(graph, person_id)
        for rel in new_spouses:
            if rel.status == SpouseStatus.CURRENT:
                _demote_current(graph, rel.person_id, keep_id=person_id)
            other = graph.persons[rel.person_id]
            other.spouse_relationships.append(SpouseRelationship(person_id=person_id, status=rel.status))
            _touch(other)
        person.spouse_relationships = new_spouses

    _check_parent_spouse_exclusive(graph, person_id)
    _touch(person)


def set_spouse_status(graph: FamilyGraph, person_id: str, other_id: str, status) -> FamilyGraph:
    """Change the status of a marriage on both sides.

    Making a marriage current demotes any other current marriage of either spouse.
    """
    status = _coerce_status(status)
    new = graph.copy()
    person = new.require(person_id)
    other = new.require(other_id)
    rel = person.spouse_relationship(other_id)
    if rel is None:
        raise NotFoundError(f"{person_id!r} and {other_id!r} are not spouses", other_id)

    if status == SpouseStatus.CURRENT:
        _demote_current(new, person_id, keep_id=other_id)
        _demote_current(new, other_id, keep_id=person_id)

    rel.status = status
    mirror = other.spouse_relationship(person_id)
    if mirror is None:
        other.spouse_relationships.append(SpouseRelationship(person_id=person_id, status=status))
    else:
        mirror.status = status

    _check_parent_spouse_exclusive(new, person_id)
    _touch(person, other)
    logger.debug("Set spouse status %s <-> %s to %s", person_id, other_id, status.value)
    return new


def set_parent_type(graph: FamilyGraph, person_id: str, parent_id: str, parent_type) -> FamilyGraph:
    """Change the subtype of an existing parent edge."""
    parent_type = _coerce_parent_type(parent_type)
    new = graph.copy()
    person = new.require(person_id)
    rel = person.parent_relationship(parent_id)
    if rel is None:
        raise NotFoundError(f"{parent_id!r} is not a parent of {person_id!r}", parent_id)

    rel.type = parent_type
    _touch(person)
    return new


def add_parent(graph: FamilyGraph, child_id: str, parent_id: str,
               parent_type=ParentType.BIOLOGICAL) -> FamilyGraph:
    parent_type = _coerce_parent_type(parent_type)
    new = graph.copy()
    child = new.require(child_id)
    parents = child.parent_relationships + [ParentRelationship(person_id=parent_id, type=parent_type)]
    apply_relationships(new, child_id, parents=parents)
    return new


def remove_parent(graph: FamilyGraph, child_id: str, parent_id: str) -> FamilyGraph:
    new = graph.copy()
    child = new.require(child_id)
    if child.parent_relationship(parent_id) is None:
        raise NotFoundError(f"{parent_id!r} is not a parent of {child_id!r}", parent_id)

    child.parent_relationships = [r for r in child.parent_relationships if r.person_id != parent_id]
    _touch(child)
    return new


def add_spouse(graph: FamilyGraph, person_id: str, other_id: str, status=SpouseStatus.CURRENT) -> FamilyGraph:
    """Add a marriage; a new current marriage displaces the previous one."""
    status = _coerce_status(status)
    new = graph.copy()
    person = new.require(person_id)
    if person.spouse_relationship(other_id) is not None:
        raise ValidationError(f"{person_id!r} and {other_id!r} are already spouses")

    spouses = person.spouse_relationships + [SpouseRelationship(person_id=other_id, status=status)]
    apply_relationships(new, person_id, spouses=spouses)
    return new


def remove_spouse(graph: FamilyGraph, person_id: str, other_id: str) -> FamilyGraph:
    new = graph.copy()
    person = new.require(person_id)
    if person.spouse_relationship(other_id) is None:
        raise NotFoundError(f"{person_id!r} and {other_id!r} are not spouses", other_id)

    person.spouse_relationships = [r for r in person.spouse_relationships if r.person_id != other_id]
    other = new.get_person(other_id)
    if other:
        other.spouse_relationships = [r for r in other.spouse_relationships if r.person_id != person_id]
        _touch(other)
    _touch(person)
    return new


def check_integrity(graph: FamilyGraph) -> list[str]:
    """
    Check every graph invariant.

    Returns a list of problems; an empty list means the graph is healthy.
    """
    problems: list[str] = []

    for person in graph.persons.values():
        pid = person.id
        parent_ids = person.parent_ids
        spouse_ids = person.spouse_ids

        if len(parent_ids) > settings.graph.max_parents:
            problems.append(f"{pid} has {len(parent_ids)} parents")
        if len(set(parent_ids)) != len(parent_ids):
            problems.append(f"{pid} lists a parent twice")
        if len(set(spouse_ids)) != len(spouse_ids):
            problems.append(f"{pid} lists a spouse twice")

        currents = [r for r in person.spouse_relationships if r.status == SpouseStatus.CURRENT]
        if len(currents) > 1:
            problems.append(f"{pid} has {len(currents)} current spouses")

        for ref in parent_ids + spouse_ids:
            if ref not in graph:
                problems.append(f"{pid} references unknown person {ref}")

        descendants = graph.get_descendants(pid)
        for parent_id in parent_ids:
            if parent_id in descendants:
                problems.append(f"{pid} is an ancestor of its parent {parent_id}")
        if person.spouse_id and person.spouse_id in parent_ids:
            problems.append(f"{pid} has current spouse {person.spouse_id} as a parent")

        for rel in person.spouse_relationships:
            other = graph.get_person(rel.person_id)
            mirror = other.spouse_relationship(pid) if other else None
            if other and (mirror is None or mirror.status != rel.status):
                problems.append(f"spouse edge {pid} -> {rel.person_id} has no matching reciprocal")

    return problems
