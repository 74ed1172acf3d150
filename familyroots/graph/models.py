"""Shared data models for graph queries and tree rendering."""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from familyroots.models import Person


@dataclass
class SiblingLink:
    """A sibling together with the parents shared with the reference person."""
    person: Person
    shared_parent_ids: list[str] = field(default_factory=list)

    @property
    def is_full(self) -> bool:
        return len(self.shared_parent_ids) >= 2

    @property
    def is_half(self) -> bool:
        return len(self.shared_parent_ids) == 1


@dataclass
class FamilyUnit:
    """Person, their spouses and the units of their children, ready for display."""
    person: Person
    current_spouse: Optional[Person] = None
    ex_spouses: list[Person] = field(default_factory=list)
    child_units: list["FamilyUnit"] = field(default_factory=list)

    def iter_persons(self) -> Iterator[Person]:
        """Yield every person placed by this unit and its descendants' units.

        Ex-spouses are shown inline but are placed elsewhere, so they are skipped.
        """
        stack = [self]
        while stack:
            unit = stack.pop()
            yield unit.person
            if unit.current_spouse:
                yield unit.current_spouse
            stack.extend(reversed(unit.child_units))

    def to_dict(self) -> dict:
        """Convert to nested dictionary for presentation."""
        def node(unit: "FamilyUnit") -> dict:
            return {
                "person_id": unit.person.id,
                "name": unit.person.full_name,
                "current_spouse_id": unit.current_spouse.id if unit.current_spouse else None,
                "ex_spouse_ids": [p.id for p in unit.ex_spouses],
                "children": [],
            }

        root = node(self)
        stack = [(self, root)]
        while stack:
            unit, data = stack.pop()
            for child in unit.child_units:
                child_data = node(child)
                data["children"].append(child_data)
                stack.append((child, child_data))
        return root
