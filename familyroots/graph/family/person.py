"""Person operations for FamilyGraph."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from pydantic import ValidationError as PydanticValidationError

from familyroots.errors import ValidationError
from familyroots.models import Person, Photo
from familyroots.graph.family.relationships import apply_relationships

if TYPE_CHECKING:
    from familyroots.graph.family.graph import FamilyGraph

logger = logging.getLogger(__name__)

RELATIONSHIP_FIELDS = {"parent_relationships", "spouse_relationships"}
# Assigned by the graph, never taken from caller data
MANAGED_FIELDS = {"id", "created_at", "updated_at", "created_by", "photos"}


def _split(data: dict, protected: set[str]) -> tuple[dict, dict]:
    """Split caller data into scalar fields and relationship sets."""
    unknown = set(data) - set(Person.model_fields)
    if unknown:
        raise ValidationError(f"Unknown person fields: {', '.join(sorted(unknown))}")
    forbidden = set(data) & protected
    if forbidden:
        raise ValidationError(f"Fields cannot be set: {', '.join(sorted(forbidden))}")

    scalars = {k: v for k, v in data.items() if k not in RELATIONSHIP_FIELDS}
    rels = {k: v for k, v in data.items() if k in RELATIONSHIP_FIELDS}
    if "first_name" in scalars:
        first_name = scalars["first_name"]
        if not isinstance(first_name, str) or not first_name.strip():
            raise ValidationError("First name is required")
        scalars["first_name"] = first_name.strip()
    return scalars, rels


def _build(fields: dict) -> Person:
    try:
        return Person.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid person data: {e}") from e


def create_person(graph: FamilyGraph, data: dict, created_by: str = "") -> tuple[FamilyGraph, Person]:
    """
    Add a person, with optional initial parent and spouse edges.

    Returns the new graph and the created person.
    """
    if "first_name" not in data:
        raise ValidationError("First name is required")
    scalars, rels = _split(data, MANAGED_FIELDS)

    person = _build({**scalars, "created_by": created_by})
    new = graph.copy()
    new.persons[person.id] = person
    if rels:
        apply_relationships(
            new, person.id,
            parents=rels.get("parent_relationships"),
            spouses=rels.get("spouse_relationships"),
        )

    logger.debug("Created person %s (%s)", person.id, person.full_name)
    return new, new.persons[person.id]


def update_person(graph: FamilyGraph, person_id: str, patch: dict) -> FamilyGraph:
    """
    Merge scalar changes into a person.

    A relationship set present in the patch replaces the person's whole set of
    that kind; an absent one is kept.
    """
    current = graph.require(person_id)
    scalars, rels = _split(patch, MANAGED_FIELDS | {"family_tree_id"})

    new = graph.copy()
    merged = current.model_dump()
    merged.update(scalars)
    merged["updated_at"] = datetime.now()
    new.persons[person_id] = _build(merged)

    if rels:
        apply_relationships(
            new, person_id,
            parents=rels.get("parent_relationships"),
            spouses=rels.get("spouse_relationships"),
        )

    logger.debug("Updated person %s: %s", person_id, ", ".join(sorted(patch)))
    return new


def delete_person(graph: FamilyGraph, person_id: str) -> FamilyGraph:
    """Remove a person and every edge referencing it. Unknown ids are a no-op."""
    if person_id not in graph:
        return graph

    new = graph.copy()
    del new.persons[person_id]
    now = datetime.now()
    for other in new.persons.values():
        parents = [r for r in other.parent_relationships if r.person_id != person_id]
        spouses = [r for r in other.spouse_relationships if r.person_id != person_id]
        if len(parents) != len(other.parent_relationships) or len(spouses) != len(other.spouse_relationships):
            other.parent_relationships = parents
            other.spouse_relationships = spouses
            other.updated_at = now

    logger.debug("Deleted person %s", person_id)
    return new


def add_photo(graph: FamilyGraph, person_id: str, url: str, caption: Optional[str] = None,
              uploaded_by: str = "") -> tuple[FamilyGraph, Photo]:
    """Append a photo to a person's gallery."""
    if not (url or "").strip():
        raise ValidationError("Photo URL is required")

    new = graph.copy()
    person = new.require(person_id)
    photo = Photo(url=url, caption=caption, tagged_person_ids=[person_id], uploaded_by=uploaded_by)
    person.photos.append(photo)
    person.updated_at = photo.uploaded_at
    return new, photo


def set_profile_photo(graph: FamilyGraph, person_id: str, url: Optional[str]) -> FamilyGraph:
    return update_person(graph, person_id, {"profile_photo": url})
