from __future__ import annotations

import _bootstrap  # noqa: F401
import pytest

from infiniversal.database import NoteDatabase
from infiniversal.models import Note


@pytest.fixture()
def sample_db(tmp_path):
    db_path = tmp_path / "notes.db"
    db = NoteDatabase(db_path)
    db.initialize()

    notes = [
        Note(
            id="soneto1",
            type="poem",
            structure="soneto",
            title="Mar de noche",
            content="la luna blanca brilla sobre el mar\ny canta el viento sobre la ciudad",
            tags=["mar", "noche"],
            favorite=True,
            created_at=1_000,
            updated_at=3_000,
        ),
        Note(
            id="haiku1",
            type="poem",
            structure="haiku",
            title="Lluvia",
            content="la luna blanca\nla noche brilla sola\ncae la lluvia",
            tags=["noche"],
            created_at=1_000,
            updated_at=2_000,
        ),
        Note(
            id="cancion1",
            type="song",
            title="",
            content="<div>[ Estribillo ]</div><div>canta conmigo</div>",
            tags=["mar"],
            created_at=1_000,
            updated_at=1_000,
        ),
    ]
    for note in notes:
        db.save(note, touch=False)

    try:
        yield db
    finally:
        db.close()
