"""Family tree store: person records in SQLite, edges in GraphLite."""

import logging
import sqlite3
from pathlib import Path
from typing import Iterable, Optional

from graphlite import connect, V

from familyroots.config import settings
from familyroots.errors import PersistenceError
from familyroots.models import ParentType, Person, RelationshipEdge, RelationshipKind, SpouseStatus
from familyroots.graph.store import FamilyStore

logger = logging.getLogger(__name__)

# Parent edges are mirrored so both directions are outgoing lookups
CHILD_OF = {t: f"child_of_{t.value}" for t in ParentType}
PARENT_OF = {t: f"parent_of_{t.value}" for t in ParentType}
SPOUSE_OF = {s: f"spouse_{s.value}" for s in SpouseStatus}


class GraphLiteStore(FamilyStore):
    """Persist family trees with SQLite person rows and GraphLite relations."""

    RELATION_TYPES = [*CHILD_OF.values(), *PARENT_OF.values(), *SPOUSE_OF.values()]

    def __init__(self, persons_db_path: Optional[str] = None, graph_db_path: Optional[str] = None):
        self.db_path = persons_db_path or settings.database.persons_db_path
        self.graph_db_path = graph_db_path or settings.database.graph_db_path
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        Path(self.graph_db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()
        self.graph = connect(self.graph_db_path, graphs=self.RELATION_TYPES)

    def _init_db(self):
        """Initialize database schema."""
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS persons (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    person_id TEXT NOT NULL UNIQUE,
                    tree_id TEXT NOT NULL,
                    data TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_tree ON persons(tree_id)")

    def _row_ids(self, person_ids: Iterable[str]) -> dict[str, int]:
        """Map person ids to the integer vertex ids used in the graph."""
        wanted = list(dict.fromkeys(person_ids))
        if not wanted:
            return {}
        marks = ", ".join("?" for _ in wanted)
        with sqlite3.connect(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT person_id, id FROM persons WHERE person_id IN ({marks})", wanted
            ).fetchall()
        return {row[0]: row[1] for row in rows}

    def _find(self, vertex: int, relation: str) -> list[int]:
        return self.graph.find(getattr(V(vertex), relation)).to(list)

    @staticmethod
    def _links(edge: RelationshipEdge, src: int, dst: int) -> list[tuple[int, str, int]]:
        """Stored (source, relation, target) rows of an edge; ValueError on unknown subtype."""
        if edge.kind == RelationshipKind.PARENT:
            parent_type = ParentType(edge.subtype)
            return [(src, CHILD_OF[parent_type], dst), (dst, PARENT_OF[parent_type], src)]
        return [(src, SPOUSE_OF[SpouseStatus(edge.subtype)], dst)]

    def load_all(self, tree_id: str) -> tuple[list[Person], list[RelationshipEdge]]:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.row_factory = sqlite3.Row
                rows = conn.execute(
                    "SELECT id, person_id, data FROM persons WHERE tree_id = ? ORDER BY id", (tree_id,)
                ).fetchall()

            persons = [Person.model_validate_json(row["data"]) for row in rows]
            vertices = {row["id"]: row["person_id"] for row in rows}

            edges = []
            for vertex, person_id in vertices.items():
                for parent_type, relation in CHILD_OF.items():
                    for parent in self._find(vertex, relation):
                        if parent in vertices:
                            edges.append(RelationshipEdge(
                                person_id=person_id, related_person_id=vertices[parent],
                                kind=RelationshipKind.PARENT, subtype=parent_type.value,
                            ))
                for status, relation in SPOUSE_OF.items():
                    for spouse in self._find(vertex, relation):
                        if spouse in vertices:
                            edges.append(RelationshipEdge(
                                person_id=person_id, related_person_id=vertices[spouse],
                                kind=RelationshipKind.SPOUSE, subtype=status.value,
                            ))
        except sqlite3.Error as e:
            logger.error("Error loading tree %s: %s", tree_id, e)
            raise PersistenceError(f"Could not load tree {tree_id!r}: {e}") from e

        logger.debug("Loaded %d persons and %d edges for tree %s", len(persons), len(edges), tree_id)
        return persons, edges

    def write_person(self, person: Person) -> bool:
        data = person.model_dump_json(exclude={"parent_relationships", "spouse_relationships"})
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    INSERT INTO persons (person_id, tree_id, data) VALUES (?, ?, ?)
                    ON CONFLICT(person_id) DO UPDATE SET tree_id = excluded.tree_id, data = excluded.data
                """, (person.id, person.family_tree_id, data))
            return True
        except sqlite3.Error as e:
            logger.error("Error writing person %s: %s", person.id, e)
            return False

    def write_edges(self, edges: Iterable[RelationshipEdge]) -> bool:
        edges = list(edges)
        try:
            ids = self._row_ids(pid for e in edges for pid in (e.person_id, e.related_person_id))

            # Resolve everything up front so a bad edge commits nothing
            links = []
            for edge in edges:
                src = ids.get(edge.person_id)
                dst = ids.get(edge.related_person_id)
                if src is None or dst is None:
                    logger.error("Cannot write edge for unknown person: %s -> %s",
                                 edge.person_id, edge.related_person_id)
                    return False
                try:
                    rows = self._links(edge, src, dst)
                except ValueError:
                    logger.error("Cannot write edge with unknown subtype %r", edge.subtype)
                    return False
                links.extend(row for row in rows if row[2] not in self._find(row[0], row[1]))

            with self.graph.transaction() as tr:
                for src, relation, dst in dict.fromkeys(links):
                    tr.store(getattr(V(src), relation)(dst))
            return True
        except sqlite3.Error as e:
            logger.error("Error writing edges: %s", e)
            return False

    def delete_edges(self, edges: Iterable[RelationshipEdge]) -> bool:
        edges = list(edges)
        try:
            ids = self._row_ids(pid for e in edges for pid in (e.person_id, e.related_person_id))

            links = []
            for edge in edges:
                src = ids.get(edge.person_id)
                dst = ids.get(edge.related_person_id)
                if src is None or dst is None:
                    continue
                try:
                    links.extend(self._links(edge, src, dst))
                except ValueError:
                    logger.error("Cannot delete edge with unknown subtype %r", edge.subtype)
                    return False

            with self.graph.transaction() as tr:
                for src, relation, dst in links:
                    tr.delete(getattr(V(src), relation)(dst))
            return True
        except sqlite3.Error as e:
            logger.error("Error deleting edges: %s", e)
            return False

    def delete_person(self, person_id: str) -> bool:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("DELETE FROM persons WHERE person_id = ?", (person_id,))
            return True
        except sqlite3.Error as e:
            logger.error("Error deleting person %s: %s", person_id, e)
            return False

    def delete_edges_for(self, person_id: str) -> bool:
        """Delete all edges of a person, both directions, before removing them."""
        try:
            vertex = self._row_ids([person_id]).get(person_id)
            if vertex is None:
                return True

            # Collect endpoints first; the transaction only applies deletes
            parents = {t: self._find(vertex, rel) for t, rel in CHILD_OF.items()}
            children = {t: self._find(vertex, rel) for t, rel in PARENT_OF.items()}
            spouses = {s: self._find(vertex, rel) for s, rel in SPOUSE_OF.items()}

            with self.graph.transaction() as tr:
                for parent_type in ParentType:
                    child_of, parent_of = CHILD_OF[parent_type], PARENT_OF[parent_type]
                    for parent in parents[parent_type]:
                        tr.delete(getattr(V(vertex), child_of)(parent))
                        tr.delete(getattr(V(parent), parent_of)(vertex))
                    for child in children[parent_type]:
                        tr.delete(getattr(V(vertex), parent_of)(child))
                        tr.delete(getattr(V(child), child_of)(vertex))

                for status, relation in SPOUSE_OF.items():
                    for spouse in spouses[status]:
                        tr.delete(getattr(V(vertex), relation)(spouse))
                        tr.delete(getattr(V(spouse), relation)(vertex))
            return True
        except sqlite3.Error as e:
            logger.error("Error deleting relationships for person %s: %s", person_id, e)
            return False
