"""Shared pytest fixtures."""

import pytest

from familyroots.graph.family.graph import FamilyGraph


@pytest.fixture
def graph():
    """Empty family graph."""
    return FamilyGraph()


@pytest.fixture
def family():
    """
    Three generations with a remarriage.

    Grandpa + Grandma (current) -> Dad
    Dad + Mom (current) -> Kid, Daughter
    Dad + Ex (divorced) -> HalfKid
    """
    g = FamilyGraph()
    ids = {}

    def add(key, **data):
        nonlocal g
        g, person = g.create_person(data)
        ids[key] = person.id

    add("grandpa", first_name="Ravi", last_name="Rao", gender="male")
    add("grandma", first_name="Lata", last_name="Rao", gender="female",
        spouse_relationships=[{"person_id": ids["grandpa"], "status": "current"}])
    add("dad", first_name="Arun", last_name="Rao", gender="male",
        parent_relationships=[{"person_id": ids["grandpa"]}, {"person_id": ids["grandma"]}])
    add("ex", first_name="Nina", last_name="Shah", gender="female",
        spouse_relationships=[{"person_id": ids["dad"], "status": "divorced"}])
    add("mom", first_name="Meera", last_name="Rao", gender="female", birth_place="Pune",
        spouse_relationships=[{"person_id": ids["dad"], "status": "current"}])
    add("kid", first_name="Kiran", last_name="Rao", gender="male",
        parent_relationships=[{"person_id": ids["dad"]}, {"person_id": ids["mom"]}])
    add("daughter", first_name="Asha", last_name="Rao", gender="female", nickname="Ash",
        parent_relationships=[{"person_id": ids["dad"]}, {"person_id": ids["mom"]}])
    add("halfkid", first_name="Dev", last_name="Shah",
        parent_relationships=[{"person_id": ids["dad"]}, {"person_id": ids["ex"]}])

    return g, ids
