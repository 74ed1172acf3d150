"""
Seed script for familyroots - populates the stores with a sample family.

This script:
1. Clears the person and graph databases
2. Creates three generations of the Sharma family, including a divorce,
   a remarriage and a step-child
3. Prints the resulting family tree and a few relationship labels

Run this script to start with a clean slate:
    python seed_data.py
"""

import logging
from pathlib import Path

from familyroots.config import settings
from familyroots.graph.graphlite_store import GraphLiteStore
from familyroots.session import FamilyTreeSession

TREE_ID = "sharma"


def clear_all_databases():
    """Remove all database files to start fresh."""
    print("=" * 80)
    print("CLEARING ALL DATABASES")
    print("=" * 80)

    for db_path in (settings.database.persons_db_path, settings.database.graph_db_path):
        path = Path(db_path)
        if path.exists():
            path.unlink()
            print(f"✅ Deleted: {path}")
        else:
            print(f"⚠️  Not found: {path}")

    print("\n✅ All databases cleared!\n")


def seed_sample_data(session: FamilyTreeSession) -> dict:
    """Create the sample family and return the created ids by key."""
    print("=" * 80)
    print("SEEDING SAMPLE FAMILY DATA")
    print("=" * 80)

    ids = {}

    def add(key, **data):
        person = session.create_person(data)
        ids[key] = person.id
        print(f"  + {person.full_name} {person.life_span}".rstrip())

    print("\n📁 Generation 1")
    add("ramesh", first_name="Ramesh", last_name="Sharma", gender="male",
        birth_date="1940-03-12", birth_place="Jaipur", is_living=False, death_date="2015-08-01")
    add("kamala", first_name="Kamala", last_name="Sharma", maiden_name="Joshi", gender="female",
        birth_date="1945-11-02", birth_place="Ajmer",
        spouse_relationships=[{"person_id": ids["ramesh"], "status": "widowed"}])

    print("\n📁 Generation 2")
    add("vijay", first_name="Vijay", last_name="Sharma", gender="male", birth_date="1968-06-21",
        occupation="Engineer",
        parent_relationships=[{"person_id": ids["ramesh"]}, {"person_id": ids["kamala"]}])
    add("anita", first_name="Anita", last_name="Verma", gender="female", birth_date="1970-01-15",
        spouse_relationships=[{"person_id": ids["vijay"], "status": "current"}])
    add("sunita", first_name="Sunita", last_name="Sharma", gender="female", birth_date="1972-09-30",
        occupation="Doctor",
        parent_relationships=[{"person_id": ids["ramesh"]}, {"person_id": ids["kamala"]}])

    print("\n📁 Generation 3")
    add("rohan", first_name="Rohan", last_name="Sharma", gender="male", birth_date="1995-04-04",
        parent_relationships=[{"person_id": ids["vijay"]}, {"person_id": ids["anita"]}])

    # Vijay remarries; the first marriage is demoted automatically
    print("\n💍 Remarriage")
    add("priya", first_name="Priya", last_name="Sharma", maiden_name="Nair", gender="female",
        birth_date="1975-12-09",
        spouse_relationships=[{"person_id": ids["vijay"], "status": "current"}])
    add("meena", first_name="Meena", last_name="Sharma", gender="female", birth_date="2003-07-18",
        parent_relationships=[{"person_id": ids["vijay"]}, {"person_id": ids["priya"]}])
    add("arjun", first_name="Arjun", last_name="Nair", gender="male", birth_date="2000-02-27",
        parent_relationships=[{"person_id": ids["priya"]}])
    session.add_parent(ids["arjun"], ids["vijay"], "step")

    print(f"\n✅ Seeded {len(session.graph)} persons into tree '{TREE_ID}'\n")
    return ids


def print_tree(session: FamilyTreeSession):
    """Print the family forest."""
    print("=" * 80)
    print("FAMILY TREE")
    print("=" * 80)

    stack = [(unit, 0) for unit in reversed(session.graph.build_forest())]
    while stack:
        unit, depth = stack.pop()
        line = "    " * depth + unit.person.full_name
        if unit.current_spouse:
            line += f" + {unit.current_spouse.full_name}"
        for ex in unit.ex_spouses:
            line += f" (formerly {ex.first_name})"
        print(line)
        stack.extend((child, depth + 1) for child in reversed(unit.child_units))
    print()


def print_relationships(session: FamilyTreeSession, ids: dict):
    """Print relationship labels for a few pairs."""
    print("=" * 80)
    print("RELATIONSHIPS")
    print("=" * 80)

    graph = session.graph
    pairs = [
        ("rohan", "vijay"), ("rohan", "anita"), ("rohan", "meena"),
        ("meena", "ramesh"), ("arjun", "vijay"), ("sunita", "rohan"),
    ]
    for a, b in pairs:
        label = graph.describe(ids[a], ids[b])
        print(f"  {graph.get_person(ids[b]).first_name} is {a.title()}'s {label}")
    print()


def main():
    """Main seeding function."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    clear_all_databases()
    settings.database.ensure_dirs()
    session = FamilyTreeSession(GraphLiteStore(), tree_id=TREE_ID, user_id="seed")

    ids = seed_sample_data(session)
    print_tree(session)
    print_relationships(session, ids)

    print("=" * 80)
    print("✅ SEEDING COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
