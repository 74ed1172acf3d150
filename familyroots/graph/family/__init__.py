"""Family graph package."""
from familyroots.graph.family.queries import FamilyQueries
from familyroots.graph.family.graph import FamilyGraph

__all__ = ["FamilyQueries", "FamilyGraph"]
