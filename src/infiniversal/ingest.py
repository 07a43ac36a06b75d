"""Import notes exported from the browser app's local storage."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from tqdm import tqdm

from .database import NoteDatabase, normalize_tag, now_ms
from .models import NOTE_TYPES, Note

LOGGER = logging.getLogger(__name__)


class NoteImportError(ValueError):
    """Raised when a note dump cannot be understood."""


def load_note_dump(path: Path | str) -> List[Dict[str, Any]]:
    """Read the JSON array stored under ``infiniversal_notes``."""

    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf8"))
    except UnicodeDecodeError as exc:
        raise NoteImportError(f"{path} is not UTF-8 encoded: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise NoteImportError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise NoteImportError(f"{path} must contain a JSON array of notes")
    return data


def _timestamp(entry: Dict[str, Any], key: str, default: int) -> int:
    value = entry.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise NoteImportError(f"Note {entry['id']}: {key} must be a number, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise NoteImportError(f"Note {entry['id']}: {key} must be a number, got {value!r}") from exc


def parse_notes(entries: List[Dict[str, Any]]) -> List[Note]:
    """Build :class:`Note` objects, skipping entries without an id.

    A bad timestamp or tag list rejects the whole dump with
    :class:`NoteImportError`.
    """

    notes: List[Note] = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("id"):
            LOGGER.debug("Skipping malformed note entry: %r", entry)
            continue
        note_type = entry.get("type") if entry.get("type") in NOTE_TYPES else "poem"
        created = _timestamp(entry, "createdAt", now_ms())
        raw_tags = entry.get("tags") or []
        if not isinstance(raw_tags, list):
            raise NoteImportError(f"Note {entry['id']}: tags must be a list, got {raw_tags!r}")
        tags = [normalize_tag(str(tag)) for tag in raw_tags if str(tag).strip()]
        notes.append(
            Note(
                id=str(entry["id"]),
                type=note_type,
                structure=entry.get("structure") or None,
                title=entry.get("title") or "",
                content=entry.get("content") or "",
                tags=list(dict.fromkeys(tags)),
                favorite=bool(entry.get("favorite")),
                created_at=created,
                updated_at=_timestamp(entry, "updatedAt", created),
            )
        )
    return notes


def import_notes(db: NoteDatabase, path: Path | str) -> int:
    """Save every note in the dump at ``path`` and return how many were stored.

    The dump is validated in full before anything is written, and all notes
    are stored in one transaction.
    """

    notes = parse_notes(load_note_dump(path))
    imported = db.save_many(tqdm(notes, desc="Notes"), touch=False)
    LOGGER.info("Imported %s notes from %s", imported, path)
    return imported
