"""FamilyRoots - family relationship graph engine."""

from familyroots.errors import CycleError, FamilyTreeError, NotFoundError, PersistenceError, ValidationError
from familyroots.models import Gender, ParentType, Person, Photo, RelationshipEdge, SpouseStatus
from familyroots.graph import FamilyGraph, FamilyUnit
from familyroots.session import FamilyTreeSession

__all__ = [
    "CycleError",
    "FamilyTreeError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
    "Gender",
    "ParentType",
    "Person",
    "Photo",
    "RelationshipEdge",
    "SpouseStatus",
    "FamilyGraph",
    "FamilyUnit",
    "FamilyTreeSession",
]
