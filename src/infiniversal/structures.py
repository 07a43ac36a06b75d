"""Poem structure guides and verse meter validation."""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .metrics import verse_lines
from .models import PoemStructure, Stanza, VerseCheck
from .syllables import count_line

ENDECASILABO = 11


class UnknownStructureError(KeyError):
    """Raised when a structure key is not one of :data:`STRUCTURES`."""


STRUCTURES: Dict[str, PoemStructure] = {
    "soneto": PoemStructure(
        key="soneto",
        name="Soneto",
        stanzas=(
            Stanza("1.er Cuarteto", 4, "ABBA · versos endecasílabos (11 síl.)", (ENDECASILABO,) * 4),
            Stanza("2.º Cuarteto", 4, "ABBA · versos endecasílabos (11 síl.)", (ENDECASILABO,) * 4),
            Stanza("1.er Terceto", 3, "CDC · libre rimado", (ENDECASILABO,) * 3),
            Stanza("2.º Terceto", 3, "DCD · libre rimado", (ENDECASILABO,) * 3),
        ),
    ),
    "cuarteto": PoemStructure(
        key="cuarteto",
        name="Cuarteto",
        stanzas=(Stanza("Cuarteto", 4, "ABBA · 4 versos endecasílabos", (ENDECASILABO,) * 4),),
    ),
    "lira": PoemStructure(
        key="lira",
        name="Lira",
        stanzas=(Stanza("Lira", 5, "Versos: 7-11-7-7-11 sílabas · rima aBabB", (7, 11, 7, 7, 11)),),
    ),
    "haiku": PoemStructure(
        key="haiku",
        name="Haiku",
        stanzas=(Stanza("Haiku", 3, "Verso 1: 5 síl. · Verso 2: 7 síl. · Verso 3: 5 síl.", (5, 7, 5)),),
    ),
    "silva": PoemStructure(
        key="silva",
        name="Silva",
        stanzas=(Stanza("Silva", 0, "Mezcla libre de heptasílabos y endecasílabos"),),
        free_meter=(7, ENDECASILABO),
    ),
    "libre": PoemStructure(
        key="libre",
        name="Verso libre",
        stanzas=(Stanza("", 0, "Sin estructura fija · tu ritmo, tus reglas."),),
    ),
}


def get_structure(key: Optional[str]) -> PoemStructure:
    try:
        return STRUCTURES[(key or "").lower()]
    except KeyError:
        raise UnknownStructureError(key) from None


def expected_meter(structure: PoemStructure) -> List[Tuple[int, ...]]:
    """Allowed syllable counts for each verse of a fixed-length structure."""

    meter: List[Tuple[int, ...]] = []
    for stanza in structure.stanzas:
        if stanza.meter:
            meter.extend((count,) for count in stanza.meter)
        else:
            meter.extend(() for _ in range(stanza.verses))
    return meter


def check_poem(text: Optional[str], key: str) -> List[VerseCheck]:
    """Compare every verse of ``text`` with the meter of structure ``key``.

    Blank lines and song section markers are ignored. For fixed structures
    a missing verse is reported with ``actual=0`` and a surplus verse with
    an empty ``expected``; both fail.
    """

    structure = get_structure(key)
    lines = verse_lines(text)
    checks: List[VerseCheck] = []

    if structure.verse_count == 0:
        allowed = structure.free_meter
        for number, line in enumerate(lines, start=1):
            actual = count_line(line)
            checks.append(
                VerseCheck(number, line, allowed, actual, ok=not allowed or actual in allowed)
            )
        return checks

    meter = expected_meter(structure)
    for index in range(max(len(lines), len(meter))):
        line = lines[index] if index < len(lines) else ""
        actual = count_line(line)
        if index >= len(meter):
            checks.append(VerseCheck(index + 1, line, (), actual, ok=False))
            continue
        expected = meter[index]
        present = index < len(lines)
        ok = present and (not expected or actual in expected)
        checks.append(VerseCheck(index + 1, line, expected, actual, ok=ok))
    return checks


def is_valid(text: Optional[str], key: str) -> bool:
    return all(check.ok for check in check_poem(text, key))
