"""Command line interface for Infiniversal."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from .database import FILTERS, NoteDatabase, add_tag, remove_tag
from .ingest import NoteImportError, import_notes
from .metrics import append_section, format_syllables, format_word_count, line_metrics, plain_text, text_stats
from .models import NOTE_TYPES, Note
from .structures import STRUCTURES, UnknownStructureError, check_poem
from .syllables import count_word, verse_name

LOGGER = logging.getLogger("infiniversal")

DB_ENV_VAR = "INFINIVERSAL_DB"
DB_FILENAME = "infiniversal.db"


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _default_database_path() -> Path:
    """Resolve the note database from the environment, the cwd or the XDG data dir."""

    override = os.environ.get(DB_ENV_VAR)
    if override:
        return Path(override).expanduser()
    local = Path.cwd() / DB_FILENAME
    if local.exists():
        return local
    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "infiniversal" / DB_FILENAME


def _read_text(value: Optional[str]) -> str:
    if value is not None:
        return value
    return sys.stdin.read()


def build_parser() -> argparse.ArgumentParser:
    # options shared with every subcommand so they may follow it on the command line
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--database", default=argparse.SUPPRESS, help="SQLite database path")
    common.add_argument("--verbose", action="store_true", default=argparse.SUPPRESS, help="Enable debug logging")

    parser = argparse.ArgumentParser(description="Offline notebook for poets and songwriters", parents=[common])
    subparsers = parser.add_subparsers(dest="command", required=True)

    count_parser = subparsers.add_parser("count", parents=[common], help="Count words and syllables line by line")
    count_parser.add_argument("text", nargs="?", help="Text to analyse (read from stdin when omitted)")

    word_parser = subparsers.add_parser("word", parents=[common], help="Count the syllables of a single word")
    word_parser.add_argument("word", help="Word to inspect")

    check_parser = subparsers.add_parser("check", parents=[common], help="Validate verse meter against a structure")
    check_parser.add_argument("structure", help="Structure key (soneto, cuarteto, lira, haiku, silva, libre)")
    check_parser.add_argument("text", nargs="?", help="Poem text (read from stdin when omitted)")

    subparsers.add_parser("structures", parents=[common], help="List the poem structure guides")

    new_parser = subparsers.add_parser("new", parents=[common], help="Create a note")
    new_parser.add_argument("type", choices=NOTE_TYPES)
    new_parser.add_argument("--structure", choices=sorted(STRUCTURES), help="Poem structure guide")
    new_parser.add_argument("--title", default="", help="Note title")
    new_parser.add_argument("--content", default="", help="Note body")
    new_parser.add_argument("--tag", action="append", default=[], help="Tag to attach (repeatable)")
    new_parser.add_argument("--section", action="append", default=[], help="Song section marker to append, e.g. Estribillo (repeatable)")

    list_parser = subparsers.add_parser("list", parents=[common], help="List notes, newest first")
    list_parser.add_argument("--filter", choices=FILTERS, default="all", help="Restrict by type or favourites")
    list_parser.add_argument("--tag", action="append", default=[], help="Only notes carrying this tag (repeatable)")

    show_parser = subparsers.add_parser("show", parents=[common], help="Print a note with its verse metrics")
    show_parser.add_argument("id", help="Note id")

    edit_parser = subparsers.add_parser("edit", parents=[common], help="Update a note")
    edit_parser.add_argument("id", help="Note id")
    edit_parser.add_argument("--title", help="New title")
    edit_parser.add_argument("--content", help="New body")
    edit_parser.add_argument("--favorite", dest="favorite", action="store_true", default=None, help="Mark as favourite")
    edit_parser.add_argument("--no-favorite", dest="favorite", action="store_false", default=None)
    edit_parser.add_argument("--tag", action="append", default=[], help="Tag to add (repeatable)")
    edit_parser.add_argument("--untag", action="append", default=[], help="Tag to remove (repeatable)")
    edit_parser.add_argument("--section", action="append", default=[], help="Song section marker to append (repeatable)")

    delete_parser = subparsers.add_parser("delete", parents=[common], help="Delete a note")
    delete_parser.add_argument("id", help="Note id")

    import_parser = subparsers.add_parser("import", parents=[common], help="Import a JSON note dump")
    import_parser.add_argument("path", help="Path to the exported notes JSON")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(args, "verbose", False))

    if args.command == "count":
        _print_count(_read_text(args.text))
        return
    if args.command == "word":
        syllables = count_word(args.word)
        print(f"{args.word}: {format_syllables(syllables)} ({verse_name(syllables)})")
        return
    if args.command == "check":
        try:
            passed = _print_check(_read_text(args.text), args.structure)
        except UnknownStructureError:
            print(f"Unknown structure '{args.structure}'. Choose from: {', '.join(STRUCTURES)}")
            raise SystemExit(1)
        if not passed:
            raise SystemExit(1)
        return
    if args.command == "structures":
        _print_structures()
        return

    db_path = Path(getattr(args, "database", None) or _default_database_path())
    LOGGER.debug("Using database %s", db_path)
    db = NoteDatabase(db_path)
    db.initialize()
    try:
        _run_note_command(db, args)
    finally:
        db.close()


def _run_note_command(db: NoteDatabase, args: argparse.Namespace) -> None:
    if args.command == "new":
        note = db.create(args.type, args.structure)
        note.title = args.title
        note.content = args.content
        for section in args.section:
            note.content = append_section(note.content, section)
        for tag in args.tag:
            add_tag(note, tag)
        db.save(note)
        print(note.id)
    elif args.command == "list":
        _print_notes(db.filter(args.filter, args.tag))
    elif args.command == "show":
        _print_note(_require_note(db, args.id))
    elif args.command == "edit":
        note = _require_note(db, args.id)
        if args.title is not None:
            note.title = args.title
        if args.content is not None:
            note.content = args.content
        for section in args.section:
            note.content = append_section(note.content, section)
        if args.favorite is not None:
            note.favorite = args.favorite
        for tag in args.tag:
            add_tag(note, tag)
        for tag in args.untag:
            remove_tag(note, tag)
        db.save(note)
        LOGGER.info("Updated note %s", note.id)
    elif args.command == "delete":
        _require_note(db, args.id)
        db.remove(args.id)
        LOGGER.info("Deleted note %s", args.id)
    elif args.command == "import":
        try:
            count = import_notes(db, args.path)
        except (OSError, NoteImportError) as exc:
            print(f"Import failed: {exc}")
            raise SystemExit(1)
        print(f"Imported {count} notes")


def _require_note(db: NoteDatabase, note_id: str) -> Note:
    note = db.get_by_id(note_id)
    if note is None:
        print(f"No note with id {note_id}")
        raise SystemExit(1)
    return note


def _print_count(text: str) -> None:
    stats = text_stats(text)
    print(f"{format_word_count(stats.words)} · {format_syllables(stats.syllables)} · {stats.characters} car.")
    rows = [
        [metric.number, metric.text, metric.syllables, metric.verse_name or "—"]
        for metric in line_metrics(text)
        if metric.text
    ]
    if rows:
        print(tabulate(rows, headers=["Line", "Text", "Syllables", "Verse"]))


def _print_check(text: str, structure_key: str) -> bool:
    checks = check_poem(text, structure_key)
    if not checks:
        print("No verses to check")
        return True
    rows = []
    for check in checks:
        expected = "/".join(str(n) for n in check.expected) or "—"
        rows.append([check.number, check.text, expected, check.actual, "ok" if check.ok else "✗"])
    print(tabulate(rows, headers=["Verse", "Text", "Expected", "Syllables", ""]))
    failures = sum(1 for check in checks if not check.ok)
    if failures:
        print(f"{failures} verse(s) do not fit {STRUCTURES[structure_key.lower()].name}")
    return failures == 0


def _print_structures() -> None:
    rows = []
    for structure in STRUCTURES.values():
        verses = structure.verse_count or "libre"
        hints = " / ".join(stanza.hint for stanza in structure.stanzas)
        rows.append([structure.key, structure.name, verses, hints])
    print(tabulate(rows, headers=["Key", "Name", "Verses", "Guide"]))


def _format_timestamp(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


def _print_notes(notes: List[Note]) -> None:
    if not notes:
        print("No notes found")
        return
    rows = []
    for note in notes:
        stats = text_stats(plain_text(note.content))
        rows.append(
            [
                note.id,
                "★" if note.favorite else "",
                note.type,
                note.display_title,
                ", ".join(note.tags),
                stats.words,
                stats.syllables,
                _format_timestamp(note.updated_at),
            ]
        )
    headers = ["Id", "Fav", "Type", "Title", "Tags", "Words", "Syllables", "Updated"]
    print(tabulate(rows, headers=headers))


def _print_note(note: Note) -> None:
    title = note.display_title
    text = plain_text(note.content)
    print(title)
    print("─" * len(title))
    print()
    print(text)
    print()
    stats = text_stats(text)
    details = [note.type]
    if note.structure:
        details.append(note.structure)
    if note.tags:
        details.append("#" + " #".join(note.tags))
    print(" · ".join(details))
    print(f"{format_word_count(stats.words)} · {format_syllables(stats.syllables)} · {stats.characters} car.")
    rows = [
        [metric.number, metric.syllables, metric.verse_name or "—"]
        for metric in line_metrics(text)
        if metric.text
    ]
    if rows:
        print(tabulate(rows, headers=["Line", "Syllables", "Verse"]))


if __name__ == "__main__":  # pragma: no cover
    main()
