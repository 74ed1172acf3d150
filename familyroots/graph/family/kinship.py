"""Describe how one person relates to another in plain words."""

from __future__ import annotations

from typing import TYPE_CHECKING

from familyroots.models import Gender, Person

if TYPE_CHECKING:
    from familyroots.graph.family.graph import FamilyGraph


def _gendered(person: Person, male: str, female: str, neutral: str) -> str:
    if person.gender == Gender.MALE:
        return male
    if person.gender == Gender.FEMALE:
        return female
    return neutral


def describe(graph: FamilyGraph, person_id: str, other_id: str) -> str:
    """
    Label for how `other_id` relates to `person_id`, e.g. "Mother".

    Only direct parentage, marriage, shared parents and one generation beyond
    are recognised; anything else, cousins and in-laws included, is "Related".
    """
    a = graph.require(person_id)
    b = graph.require(other_id)

    if a.id == b.id:
        return "Self"

    if b.id in a.parent_ids:
        return _gendered(b, "Father", "Mother", "Parent")

    if a.id in b.parent_ids:
        return _gendered(b, "Son", "Daughter", "Child")

    if b.id in a.spouse_ids:
        return _gendered(b, "Husband", "Wife", "Spouse")

    shared = set(a.parent_ids) & set(b.parent_ids)
    if len(shared) >= 2:
        return _gendered(b, "Brother", "Sister", "Sibling")
    if len(shared) == 1:
        return _gendered(b, "Half-Brother", "Half-Sister", "Half-Sibling")

    for parent in graph.get_parents(a.id):
        if b.id in parent.parent_ids:
            return _gendered(b, "Grandfather", "Grandmother", "Grandparent")

    for parent in graph.get_parents(b.id):
        if a.id in parent.parent_ids:
            return _gendered(b, "Grandson", "Granddaughter", "Grandchild")

    return "Related"
