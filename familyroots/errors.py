"""Errors raised by family tree operations."""


class FamilyTreeError(Exception):
    """Base class for all family tree errors."""


class ValidationError(FamilyTreeError):
    """Missing required field or malformed relationship data."""


class CycleError(FamilyTreeError):
    """Parent edge would create an ancestor cycle or pair a parent with a current spouse."""


class NotFoundError(FamilyTreeError):
    """Operation references a person or edge that does not exist."""

    def __init__(self, message: str, person_id: str = ""):
        super().__init__(message)
        self.person_id = person_id


class PersistenceError(FamilyTreeError):
    """Raised when the backing store fails to commit a change."""
