"""Dataclasses shared by the store, metrics and structure guides."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

NOTE_TYPES = ("poem", "song")


@dataclass
class Note:
    id: str
    type: str
    structure: Optional[str] = None
    title: str = ""
    content: str = ""
    tags: List[str] = field(default_factory=list)
    favorite: bool = False
    created_at: int = 0
    updated_at: int = 0

    @property
    def display_title(self) -> str:
        return self.title or "Sin título"


@dataclass(frozen=True)
class TextStats:
    words: int
    syllables: int
    characters: int


@dataclass(frozen=True)
class LineMetric:
    number: int
    text: str
    syllables: int
    verse_name: Optional[str]


@dataclass(frozen=True)
class Stanza:
    label: str
    verses: int
    hint: str
    meter: Tuple[int, ...] = ()


@dataclass(frozen=True)
class PoemStructure:
    key: str
    name: str
    stanzas: Tuple[Stanza, ...]
    # allowed syllable counts for every line when the verse count is open
    free_meter: Tuple[int, ...] = ()

    @property
    def verse_count(self) -> int:
        return sum(stanza.verses for stanza in self.stanzas)


@dataclass(frozen=True)
class VerseCheck:
    number: int
    text: str
    expected: Tuple[int, ...]
    actual: int
    ok: bool
