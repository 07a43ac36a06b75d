"""SQLite persistence for notes."""
from __future__ import annotations

import logging
import random
import re
import sqlite3
import string
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .models import NOTE_TYPES, Note

LOGGER = logging.getLogger(__name__)

SCHEMA = """
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    type TEXT NOT NULL,
    structure TEXT,
    title TEXT NOT NULL DEFAULT '',
    content TEXT NOT NULL DEFAULT '',
    favorite INTEGER NOT NULL DEFAULT 0,
    created_at INTEGER NOT NULL,
    updated_at INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS note_tags (
    note_id TEXT NOT NULL,
    position INTEGER NOT NULL,
    tag TEXT NOT NULL,
    FOREIGN KEY(note_id) REFERENCES notes(id) ON DELETE CASCADE,
    UNIQUE(note_id, tag)
);

CREATE INDEX IF NOT EXISTS idx_notes_updated_at ON notes(updated_at);
CREATE INDEX IF NOT EXISTS idx_note_tags_note_id ON note_tags(note_id);
CREATE INDEX IF NOT EXISTS idx_note_tags_tag ON note_tags(tag);
"""

FILTERS = ("all", "poem", "song", "fav")

_BASE36 = string.digits + string.ascii_lowercase
_WHITESPACE_RE = re.compile(r"\s+")


def now_ms() -> int:
    return int(time.time() * 1000)


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: List[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def new_note_id() -> str:
    """Timestamp in base 36 followed by random base-36 characters."""

    suffix = "".join(random.choice(_BASE36) for _ in range(10))
    return _base36(now_ms()) + suffix


def normalize_tag(tag: str) -> str:
    """Lowercase ``tag`` and join its words with dashes: ``"Mar Azul"`` becomes ``"mar-azul"``."""

    return _WHITESPACE_RE.sub("-", tag.strip().lower())


def add_tag(note: Note, tag: str) -> bool:
    """Attach ``tag`` to ``note``; return ``False`` if it was blank or already there."""

    tag = normalize_tag(tag)
    if not tag or tag in note.tags:
        return False
    note.tags.append(tag)
    return True


def remove_tag(note: Note, tag: str) -> bool:
    tag = normalize_tag(tag)
    if tag not in note.tags:
        return False
    note.tags.remove(tag)
    return True


class NoteDatabase:
    """Note store backed by a single SQLite file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        if str(path) != ":memory:":
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(path))
        self.conn.row_factory = sqlite3.Row

    def close(self) -> None:
        self.conn.close()

    def initialize(self) -> None:
        """Create schema if it does not already exist."""

        with self.conn:
            self.conn.executescript(SCHEMA)

    # ------------------------------------------------------------------
    # write helpers
    # ------------------------------------------------------------------
    def create(self, type: str, structure: Optional[str] = None) -> Note:
        """Build a fresh, unsaved note."""

        if type not in NOTE_TYPES:
            raise ValueError(f"Unknown note type '{type}', expected one of {', '.join(NOTE_TYPES)}")
        stamp = now_ms()
        return Note(id=new_note_id(), type=type, structure=structure, created_at=stamp, updated_at=stamp)

    def save(self, note: Note, touch: bool = True) -> None:
        """Insert or update ``note`` and replace its tags."""

        with self.conn:
            self._write(note, touch)
        LOGGER.debug("Saved note %s (%s)", note.id, note.type)

    def save_many(self, notes: Iterable[Note], touch: bool = True) -> int:
        """Save ``notes`` in a single transaction; nothing is stored if one fails."""

        saved = 0
        with self.conn:
            for note in notes:
                self._write(note, touch)
                saved += 1
        LOGGER.debug("Saved %s notes", saved)
        return saved

    def _write(self, note: Note, touch: bool) -> None:
        if touch:
            note.updated_at = now_ms()
        values = (
            note.id,
            note.type,
            note.structure,
            note.title,
            note.content,
            int(note.favorite),
            note.created_at,
            note.updated_at,
        )
        self.conn.execute(
            """
            INSERT INTO notes (id, type, structure, title, content, favorite, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                type = excluded.type,
                structure = excluded.structure,
                title = excluded.title,
                content = excluded.content,
                favorite = excluded.favorite,
                created_at = excluded.created_at,
                updated_at = excluded.updated_at
            """,
            values,
        )
        self.conn.execute("DELETE FROM note_tags WHERE note_id = ?", (note.id,))
        tags = list(dict.fromkeys(tag for tag in note.tags if tag))
        self.conn.executemany(
            "INSERT INTO note_tags(note_id, position, tag) VALUES (?, ?, ?)",
            [(note.id, position, tag) for position, tag in enumerate(tags)],
        )

    def remove(self, note_id: str) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM note_tags WHERE note_id = ?", (note_id,))
            self.conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))
        LOGGER.debug("Removed note %s", note_id)

    # ------------------------------------------------------------------
    # query helpers
    # ------------------------------------------------------------------
    def get_by_id(self, note_id: str) -> Optional[Note]:
        row = self.conn.execute("SELECT * FROM notes WHERE id = ?", (note_id,)).fetchone()
        if row is None:
            return None
        return self._build_notes([row])[0]

    def get_all(self) -> List[Note]:
        """Every note, most recently updated first."""

        rows = self.conn.execute("SELECT * FROM notes ORDER BY updated_at DESC, rowid DESC").fetchall()
        return self._build_notes(rows)

    def get_all_tags(self) -> List[str]:
        tags: List[str] = []
        for note in self.get_all():
            tags.extend(note.tags)
        return list(dict.fromkeys(tags))

    def filter(self, kind: str = "all", tags: Iterable[str] = ()) -> List[Note]:
        """Notes matching the list filter ``kind`` and carrying every tag in ``tags``."""

        if kind not in FILTERS:
            raise ValueError(f"Unknown filter '{kind}', expected one of {', '.join(FILTERS)}")
        wanted = [normalize_tag(tag) for tag in tags if tag.strip()]
        result: List[Note] = []
        for note in self.get_all():
            if kind in NOTE_TYPES and note.type != kind:
                continue
            if kind == "fav" and not note.favorite:
                continue
            if not all(tag in note.tags for tag in wanted):
                continue
            result.append(note)
        return result

    def _load_tags(self, note_ids: Sequence[str]) -> Dict[str, List[str]]:
        if not note_ids:
            return {}
        placeholders = ",".join("?" for _ in note_ids)
        query = f"""
            SELECT note_id, tag
            FROM note_tags
            WHERE note_id IN ({placeholders})
            ORDER BY note_id, position
        """
        result: Dict[str, List[str]] = {}
        for row in self.conn.execute(query, tuple(note_ids)):
            result.setdefault(row["note_id"], []).append(row["tag"])
        return result

    def _build_notes(self, rows: Sequence[sqlite3.Row]) -> List[Note]:
        tags = self._load_tags([row["id"] for row in rows])
        return [
            Note(
                id=row["id"],
                type=row["type"],
                structure=row["structure"],
                title=row["title"],
                content=row["content"],
                tags=tags.get(row["id"], []),
                favorite=bool(row["favorite"]),
                created_at=int(row["created_at"]),
                updated_at=int(row["updated_at"]),
            )
            for row in rows
        ]
