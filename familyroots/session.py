"""Keep a local family graph in step with a persistence backend."""

import logging
from typing import Callable, Optional

from familyroots.errors import PersistenceError
from familyroots.models import ParentType, Person, Photo, SpouseStatus
from familyroots.graph.family.graph import FamilyGraph
from familyroots.graph.store import FamilyStore

logger = logging.getLogger(__name__)


class FamilyTreeSession:
    """
    One user's working view of a family tree.

    Every mutation is validated and applied to a copy of the local graph
    first, then the changed records and edges are written to the store and the
    whole tree is reloaded, replacing local state. If the store fails, the
    writes already made are undone, the tree is reloaded and the
    PersistenceError is raised. Local state is never replaced by a graph the
    store has not accepted.

    Usage:
        session = FamilyTreeSession(InMemoryStore(), tree_id="smith", user_id="u1")
        alice = session.create_person({"first_name": "Alice"})
        bob = session.create_person({
            "first_name": "Bob",
            "spouse_relationships": [{"person_id": alice.id, "status": "current"}],
        })
    """

    def __init__(self, store: FamilyStore, tree_id: str, user_id: str = ""):
        self.store = store
        self.tree_id = tree_id
        self.user_id = user_id
        self.graph = FamilyGraph()
        self.reload()

    def reload(self) -> FamilyGraph:
        """Replace the local graph with the stored tree.

        The local graph is only replaced once the store has loaded successfully.
        """
        persons, edges = self.store.load_all(self.tree_id)
        self.graph = FamilyGraph.from_records(persons, edges)
        for problem in self.graph.check_integrity():
            logger.warning("Tree %s: %s", self.tree_id, problem)
        logger.info("Reloaded tree %s with %d persons", self.tree_id, len(self.graph))
        return self.graph

    def _check(self, ok: bool, action: str) -> None:
        if not ok:
            raise PersistenceError(f"Store failed to {action}")

    def _sync(self, old: FamilyGraph, new: FamilyGraph) -> None:
        """
        Write the difference between two graphs to the store.

        Records are written before the edges that need them, and new edges are
        added before old ones are removed.
        """
        old_edges = set(old.edges)
        new_edges = set(new.edges)
        added = [e for e in new.edges if e not in old_edges]
        removed = [e for e in old.edges if e not in new_edges]

        for person in new:
            if old.get_person(person.id) != person:
                self._check(self.store.write_person(person), f"write person {person.id}")
        if added:
            self._check(self.store.write_edges(added), "write edges")
        if removed:
            self._check(self.store.delete_edges(removed), "delete edges")

        for person_id in old.persons.keys() - new.persons.keys():
            self._check(self.store.delete_edges_for(person_id), f"delete edges of {person_id}")
            self._check(self.store.delete_person(person_id), f"delete person {person_id}")

    def _rollback(self, old: FamilyGraph, new: FamilyGraph) -> None:
        """Write `old` back over every record and edge `_sync` may have changed."""
        old_edges = set(old.edges)
        new_edges = set(new.edges)
        created = [pid for pid in new.persons if pid not in old]

        steps = []
        for person in old:
            if new.get_person(person.id) != person:
                steps.append((f"restore person {person.id}", lambda p=person: self.store.write_person(p)))
        added = [e for e in new.edges if e not in old_edges]
        if added:
            steps.append(("remove new edges", lambda: self.store.delete_edges(added)))
        removed = [e for e in old.edges if e not in new_edges]
        if removed:
            steps.append(("restore old edges", lambda: self.store.write_edges(removed)))
        for person_id in created:
            steps.append((f"remove edges of {person_id}", lambda pid=person_id: self.store.delete_edges_for(pid)))
            steps.append((f"remove person {person_id}", lambda pid=person_id: self.store.delete_person(pid)))

        for action, step in steps:
            try:
                ok = step()
            except PersistenceError as e:
                logger.error("Rollback for tree %s could not %s: %s", self.tree_id, action, e)
                continue
            if not ok:
                logger.error("Rollback for tree %s could not %s", self.tree_id, action)

    def _commit(self, new: FamilyGraph) -> FamilyGraph:
        old = self.graph
        try:
            self._sync(old, new)
        except PersistenceError:
            logger.error("Persistence failed for tree %s; rolling back", self.tree_id)
            self._rollback(old, new)
            try:
                self.reload()
            except PersistenceError as e:
                logger.error("Reload of tree %s failed, keeping last loaded state: %s", self.tree_id, e)
            raise
        return self.reload()

    def _apply(self, mutation: Callable[[FamilyGraph], FamilyGraph]) -> FamilyGraph:
        return self._commit(mutation(self.graph))

    # ─────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────

    def create_person(self, data: dict) -> Person:
        new, person = self.graph.create_person(
            {**data, "family_tree_id": self.tree_id}, created_by=self.user_id
        )
        self._commit(new)
        return self.graph.require(person.id)

    def update_person(self, person_id: str, patch: dict) -> Person:
        self._apply(lambda g: g.update_person(person_id, patch))
        return self.graph.require(person_id)

    def delete_person(self, person_id: str) -> None:
        self._apply(lambda g: g.delete_person(person_id))

    def set_spouse_status(self, person_id: str, other_id: str, status) -> None:
        self._apply(lambda g: g.set_spouse_status(person_id, other_id, status))

    def set_parent_type(self, person_id: str, parent_id: str, parent_type) -> None:
        self._apply(lambda g: g.set_parent_type(person_id, parent_id, parent_type))

    def add_parent(self, child_id: str, parent_id: str, parent_type=ParentType.BIOLOGICAL) -> None:
        self._apply(lambda g: g.add_parent(child_id, parent_id, parent_type))

    def remove_parent(self, child_id: str, parent_id: str) -> None:
        self._apply(lambda g: g.remove_parent(child_id, parent_id))

    def add_spouse(self, person_id: str, other_id: str, status=SpouseStatus.CURRENT) -> None:
        self._apply(lambda g: g.add_spouse(person_id, other_id, status))

    def remove_spouse(self, person_id: str, other_id: str) -> None:
        self._apply(lambda g: g.remove_spouse(person_id, other_id))

    def add_photo(self, person_id: str, url: str, caption: Optional[str] = None) -> Photo:
        new, photo = self.graph.add_photo(person_id, url, caption, uploaded_by=self.user_id)
        self._commit(new)
        return photo

    def set_profile_photo(self, person_id: str, url: Optional[str]) -> None:
        self._apply(lambda g: g.set_profile_photo(person_id, url))
