"""Test the relationship inferencer."""

import pytest

from familyroots.errors import NotFoundError


class TestDescribe:
    """Tests for relationship labels."""

    @pytest.mark.parametrize("a, b, label", [
        ("kid", "dad", "Father"),
        ("kid", "mom", "Mother"),
        ("dad", "kid", "Son"),
        ("dad", "daughter", "Daughter"),
        ("dad", "halfkid", "Child"),
        ("dad", "mom", "Wife"),
        ("mom", "dad", "Husband"),
        ("dad", "ex", "Wife"),
        ("kid", "daughter", "Sister"),
        ("daughter", "kid", "Brother"),
        ("kid", "halfkid", "Half-Sibling"),
        ("halfkid", "daughter", "Half-Sister"),
        ("kid", "grandpa", "Grandfather"),
        ("daughter", "grandma", "Grandmother"),
        ("grandpa", "kid", "Grandson"),
        ("grandma", "daughter", "Granddaughter"),
        ("kid", "ex", "Related"),
        ("mom", "grandpa", "Related"),
    ])
    def test_labels(self, family, a, b, label):
        """Label describes how b relates to a."""
        graph, ids = family
        assert graph.describe(ids[a], ids[b]) == label

    def test_parent_without_gender(self, graph):
        """Scenario D: ungendered parent is 'Parent'."""
        graph, parent = graph.create_person({"first_name": "Sam"})
        graph, child = graph.create_person({
            "first_name": "Kim",
            "parent_relationships": [{"person_id": parent.id}],
        })
        assert graph.describe(child.id, parent.id) == "Parent"
        graph = graph.update_person(parent.id, {"gender": "female"})
        assert graph.describe(child.id, parent.id) == "Mother"

    def test_parent_wins_over_sibling(self, family):
        """Parent match is checked before shared parents."""
        graph, ids = family
        graph = graph.add_parent(ids["kid"], ids["halfkid"], "step")
        assert graph.describe(ids["kid"], ids["halfkid"]) == "Parent"

    def test_self(self, family):
        """A person described against themselves."""
        graph, ids = family
        assert graph.describe(ids["kid"], ids["kid"]) == "Self"

    def test_unknown(self, family):
        """Unknown person raises NotFoundError."""
        graph, ids = family
        with pytest.raises(NotFoundError):
            graph.describe(ids["kid"], "missing")
