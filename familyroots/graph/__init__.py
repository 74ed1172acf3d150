"""Graph package - family relationship graph and its persistence."""

from familyroots.graph.models import FamilyUnit, SiblingLink
from familyroots.graph.family.graph import FamilyGraph
from familyroots.graph.store import FamilyStore, InMemoryStore

__all__ = [
    "FamilyUnit",
    "SiblingLink",
    "FamilyGraph",
    "FamilyStore",
    "InMemoryStore",
]
