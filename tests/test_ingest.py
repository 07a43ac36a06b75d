import json

import _bootstrap  # noqa: F401
import pytest

from infiniversal.database import NoteDatabase
from infiniversal.ingest import NoteImportError, import_notes, load_note_dump, parse_notes

DUMP = [
    {
        "id": "lq1abc",
        "type": "poem",
        "structure": "haiku",
        "title": "Lluvia",
        "content": "<div>cae la lluvia</div>",
        "tags": ["agua", "agua", " "],
        "favorite": True,
        "createdAt": 1700000000000,
        "updatedAt": 1700000500000,
    },
    {"id": "lq2def", "type": "song", "content": "canta conmigo", "createdAt": 1700000000000},
    {"title": "sin id"},
    "basura",
]


def test_parse_notes_maps_camel_case_fields():
    notes = list(parse_notes(DUMP))
    assert [note.id for note in notes] == ["lq1abc", "lq2def"]
    first, second = notes
    assert first.tags == ["agua"]
    assert first.favorite is True
    assert first.updated_at == 1700000500000
    assert second.updated_at == second.created_at
    assert second.structure is None
    assert second.title == ""


def test_import_notes_keeps_original_timestamps(tmp_path):
    dump = tmp_path / "notes.json"
    dump.write_text(json.dumps(DUMP), encoding="utf8")

    db = NoteDatabase(tmp_path / "notes.db")
    db.initialize()
    try:
        assert import_notes(db, dump) == 2
        note = db.get_by_id("lq1abc")
        assert note.updated_at == 1700000500000
        assert [n.id for n in db.get_all()] == ["lq1abc", "lq2def"]
        # importing twice updates in place
        assert import_notes(db, dump) == 2
        assert len(db.get_all()) == 2
    finally:
        db.close()


def test_rejects_non_array_dump(tmp_path):
    dump = tmp_path / "notes.json"
    dump.write_text('{"notes": []}', encoding="utf8")
    with pytest.raises(NoteImportError):
        load_note_dump(dump)

    dump.write_text("not json", encoding="utf8")
    with pytest.raises(NoteImportError):
        load_note_dump(dump)


def test_bad_timestamp_rejects_whole_dump(tmp_path):
    dump = tmp_path / "notes.json"
    dump.write_text(
        json.dumps([{"id": "ok1", "content": "cae la lluvia"}, {"id": "bad", "createdAt": "ayer"}]),
        encoding="utf8",
    )

    db = NoteDatabase(tmp_path / "notes.db")
    db.initialize()
    try:
        with pytest.raises(NoteImportError, match="createdAt"):
            import_notes(db, dump)
        assert db.get_all() == []
    finally:
        db.close()


def test_bad_updated_at_and_tags_are_import_errors():
    with pytest.raises(NoteImportError, match="updatedAt"):
        parse_notes([{"id": "a", "updatedAt": {"when": "hoy"}}])
    with pytest.raises(NoteImportError, match="tags"):
        parse_notes([{"id": "a", "tags": "mar"}])


def test_imported_tags_are_normalized():
    (note,) = parse_notes([{"id": "a", "tags": ["Mar Azul", "mar azul", "Noche"]}])
    assert note.tags == ["mar-azul", "noche"]


def test_rejects_non_utf8_dump(tmp_path):
    dump = tmp_path / "notes.json"
    dump.write_bytes('[{"id": "a", "title": "Canción"}]'.encode("latin-1"))
    with pytest.raises(NoteImportError, match="UTF-8"):
        load_note_dump(dump)
