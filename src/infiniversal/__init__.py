"""Infiniversal: an offline notebook for poets and songwriters."""

from .database import NoteDatabase
from .structures import STRUCTURES, check_poem
from .syllables import count_line, count_text, count_word, count_words, verse_name

__all__ = [
    "NoteDatabase",
    "STRUCTURES",
    "check_poem",
    "count_line",
    "count_text",
    "count_word",
    "count_words",
    "verse_name",
]
