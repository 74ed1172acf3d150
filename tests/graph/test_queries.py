"""Test family queries."""

from familyroots.models import ParentRelationship


def names(persons):
    return sorted(p.first_name for p in persons)


class TestFamilyQueries:
    """Tests for derived relationship queries."""

    def test_get_parents(self, family):
        """Parents in stored order."""
        graph, ids = family
        assert [p.id for p in graph.get_parents(ids["kid"])] == [ids["dad"], ids["mom"]]

    def test_get_children(self, family):
        """Children of a person across marriages."""
        graph, ids = family
        assert names(graph.get_children(ids["dad"])) == ["Asha", "Dev", "Kiran"]
        assert names(graph.get_children(ids["ex"])) == ["Dev"]

    def test_get_spouses_any_status(self, family):
        """Spouses include former spouses."""
        graph, ids = family
        assert names(graph.get_spouses(ids["dad"])) == ["Meera", "Nina"]

    def test_unknown_person(self, graph):
        """Unknown ids yield empty results."""
        assert graph.get_parents("missing") == []
        assert graph.get_children("missing") == []
        assert graph.get_spouses("missing") == []
        assert graph.get_siblings("missing") == []
        assert graph.get_descendants("missing") == set()


class TestSiblings:
    """Tests for sibling classification."""

    def test_full_and_half(self, family):
        """Sharing both parents is full, sharing one is half."""
        graph, ids = family
        assert names(graph.get_siblings(ids["kid"])) == ["Asha", "Dev"]
        assert names(graph.get_full_siblings(ids["kid"])) == ["Asha"]
        assert names(graph.get_half_siblings(ids["kid"])) == ["Dev"]

    def test_shared_parent_ids(self, family):
        """Links record which parents are shared."""
        graph, ids = family
        links = {link.person.id: link for link in graph.get_sibling_links(ids["halfkid"])}
        assert links[ids["kid"]].shared_parent_ids == [ids["dad"]]
        assert links[ids["kid"]].is_half

    def test_excludes_self(self, family):
        """A person is not their own sibling."""
        graph, ids = family
        assert ids["kid"] not in [p.id for p in graph.get_siblings(ids["kid"])]

    def test_only_child(self, family):
        """No shared parents means no siblings."""
        graph, ids = family
        assert graph.get_siblings(ids["dad"]) == []


class TestDescendants:
    """Tests for the descendant closure."""

    def test_includes_self(self, family):
        """Closure contains the start person."""
        graph, ids = family
        assert graph.get_descendants(ids["kid"]) == {ids["kid"]}

    def test_closure(self, family):
        """Closure spans every generation below."""
        graph, ids = family
        expected = {ids[k] for k in ("grandpa", "dad", "kid", "daughter", "halfkid")}
        assert graph.get_descendants(ids["grandpa"]) == expected

    def test_terminates_on_cycle(self, family):
        """A corrupt cycle does not loop forever."""
        graph, ids = family
        grandpa = graph.get_person(ids["grandpa"])
        grandpa.parent_relationships.append(ParentRelationship(person_id=ids["kid"]))
        assert ids["grandpa"] in graph.get_descendants(ids["kid"])

    def test_ancestors(self, family):
        """Ancestors walk upwards and exclude the person."""
        graph, ids = family
        assert graph.get_ancestors(ids["kid"]) == {ids["dad"], ids["mom"], ids["grandpa"], ids["grandma"]}


class TestCandidates:
    """Tests for candidate filters used by editing screens."""

    def test_parent_candidates_exclude_descendants_and_spouse(self, family):
        """Descendants, self and current spouse are not valid parents."""
        graph, ids = family
        candidates = {p.id for p in graph.parent_candidates(ids["dad"])}
        assert candidates == {ids["grandpa"], ids["grandma"], ids["ex"]}

    def test_spouse_candidates(self, family):
        """Self, parents, children and people married to others are excluded."""
        graph, ids = family
        candidates = {p.id for p in graph.spouse_candidates(ids["kid"])}
        assert candidates == {ids["ex"], ids["daughter"], ids["halfkid"]}
        assert ids["mom"] in {p.id for p in graph.spouse_candidates(ids["dad"])}


class TestSearch:
    """Tests for person search."""

    def test_empty_query_returns_nothing(self, family):
        """Blank query is not a wildcard."""
        graph, _ = family
        assert graph.search("") == []
        assert graph.search("   ") == []

    def test_case_insensitive_fields(self, family):
        """First name, last name, nickname and birthplace are searched."""
        graph, ids = family
        assert names(graph.search("kir")) == ["Kiran"]
        assert names(graph.search("SHAH")) == ["Dev", "Nina"]
        assert names(graph.search("ash")) == ["Asha"]
        assert names(graph.search("pune")) == ["Meera"]

    def test_full_name(self, family):
        """Full name matches across first and last name."""
        graph, _ = family
        assert names(graph.search("meera rao")) == ["Meera"]
