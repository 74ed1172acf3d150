"""Data models for the family tree."""

import uuid
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    UNSET = "unset"


class SpouseStatus(str, Enum):
    """Status of a marriage edge."""
    CURRENT = "current"
    DIVORCED = "divorced"
    WIDOWED = "widowed"
    SEPARATED = "separated"


class ParentType(str, Enum):
    """Subtype of a parent edge."""
    BIOLOGICAL = "biological"
    STEP = "step"
    ADOPTIVE = "adoptive"


class RelationshipKind(str, Enum):
    PARENT = "parent"
    SPOUSE = "spouse"


def new_id() -> str:
    return str(uuid.uuid4())


class Photo(BaseModel):
    """Photo attached to a person."""

    id: str = Field(default_factory=new_id)
    url: str
    caption: Optional[str] = None
    taken_at: Optional[date] = None
    tagged_person_ids: list[str] = Field(default_factory=list)
    uploaded_at: datetime = Field(default_factory=datetime.now)
    uploaded_by: str = ""


class SpouseRelationship(BaseModel):
    """One side of a marriage, as seen from the owning person."""

    person_id: str
    status: SpouseStatus = SpouseStatus.CURRENT


class ParentRelationship(BaseModel):
    """Link from a child to one of its parents."""

    person_id: str
    type: ParentType = ParentType.BIOLOGICAL


class RelationshipEdge(BaseModel):
    """
    Directed labelled edge as stored by a persistence backend.

    Parent edges point child -> parent. Spouse edges are stored as a
    reciprocal pair with matching subtype.
    """

    model_config = ConfigDict(frozen=True)

    person_id: str
    related_person_id: str
    kind: RelationshipKind
    subtype: str


class Person(BaseModel):
    """A family member with biographical facts and outgoing relationships."""

    id: str = Field(default_factory=new_id)
    family_tree_id: str = ""
    first_name: str
    last_name: str = ""
    maiden_name: Optional[str] = None
    nickname: Optional[str] = None
    gender: Gender = Gender.UNSET
    birth_date: Optional[date] = None
    birth_place: Optional[str] = None
    death_date: Optional[date] = None
    death_place: Optional[str] = None
    is_living: bool = True
    profile_photo: Optional[str] = None
    photos: list[Photo] = Field(default_factory=list)
    bio: Optional[str] = None
    occupation: Optional[str] = None
    spouse_relationships: list[SpouseRelationship] = Field(default_factory=list)
    parent_relationships: list[ParentRelationship] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    created_by: str = ""

    @property
    def spouse_id(self) -> Optional[str]:
        """Id of the current spouse, if any."""
        for rel in self.spouse_relationships:
            if rel.status == SpouseStatus.CURRENT:
                return rel.person_id
        return None

    @property
    def spouse_ids(self) -> list[str]:
        return [rel.person_id for rel in self.spouse_relationships]

    @property
    def parent_ids(self) -> list[str]:
        return [rel.person_id for rel in self.parent_relationships]

    @property
    def full_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        if self.maiden_name:
            name += f" (née {self.maiden_name})"
        return name

    @property
    def life_span(self) -> str:
        """Short display span such as 'b. 1950' or '1900 - 1980'."""
        birth = str(self.birth_date.year) if self.birth_date else ""
        death = str(self.death_date.year) if self.death_date else ""

        if self.is_living:
            return f"b. {birth}" if birth else ""
        if birth and death:
            return f"{birth} - {death}"
        if birth:
            return f"b. {birth}"
        if death:
            return f"d. {death}"
        return ""

    @property
    def age(self) -> Optional[int]:
        """Age today, or age at death."""
        if not self.birth_date:
            return None
        end = self.death_date or date.today()
        return end.year - self.birth_date.year - (
            (end.month, end.day) < (self.birth_date.month, self.birth_date.day)
        )

    def spouse_relationship(self, other_id: str) -> Optional[SpouseRelationship]:
        for rel in self.spouse_relationships:
            if rel.person_id == other_id:
                return rel
        return None

    def parent_relationship(self, parent_id: str) -> Optional[ParentRelationship]:
        for rel in self.parent_relationships:
            if rel.person_id == parent_id:
                return rel
        return None
