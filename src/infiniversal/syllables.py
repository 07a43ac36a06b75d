"""Spanish syllable counting and verse classification."""
from __future__ import annotations

import re
import unicodedata
from typing import Dict, List, Optional

# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------

VOWELS = frozenset("aeiouáéíóúüAEIOUÁÉÍÓÚÜ")

# Pairs of adjacent vowels that share a single syllable nucleus. Anything
# not listed here is treated as a hiatus. A written accent on the closed
# vowel of an open/closed pair (día, raíz, aúlla) marks a hiatus, so those
# pairs are deliberately absent.
DIPHTHONGS = frozenset(
    {
        "ai",
        "au",
        "ei",
        "eu",
        "oi",
        "ou",
        "ia",
        "ie",
        "io",
        "iu",
        "ua",
        "ue",
        "ui",
        "uo",
        "ái",
        "áu",
        "éi",
        "éu",
        "ói",
        "íu",
        "úi",
        "uí",
        "iá",
        "ié",
        "ió",
        "iú",
        "uá",
        "ué",
        "uó",
        "üe",
        "üi",
    }
)

_NON_LETTER_RE = re.compile(r"[^a-záéíóúüñA-ZÁÉÍÓÚÜÑ]")
_WHITESPACE_RE = re.compile(r"\s+")

VERSE_NAMES: Dict[int, str] = {
    1: "Monosílabo",
    2: "Bisílabo",
    3: "Trisílabo",
    4: "Tetrasílabo",
    5: "Pentasílabo",
    6: "Hexasílabo",
    7: "Heptasílabo",
    8: "Octosílabo",
    9: "Eneasílabo",
    10: "Decasílabo",
    11: "Endecasílabo",
    12: "Dodecasílabo",
    13: "Tridecasílabo",
    14: "Alejandrino",
}


def is_vowel(char: str) -> bool:
    """Return ``True`` if ``char`` is a Spanish vowel, accented or not."""

    return char in VOWELS


def _split(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [token for token in _WHITESPACE_RE.split(text.strip()) if token]


# ---------------------------------------------------------------------------
# Counting
# ---------------------------------------------------------------------------


def count_word(word: Optional[str]) -> int:
    """Count the syllables of a single word.

    Each vowel opens a syllable unless it closes a diphthong with the vowel
    before it. Any non-empty word counts as at least one syllable, so
    vowel-less tokens such as ``"shh"`` or ``"y"`` still score ``1``.
    """

    if not word:
        return 0
    word = unicodedata.normalize("NFC", word.lower())
    count = 0
    i = 0
    length = len(word)
    while i < length:
        if is_vowel(word[i]):
            count += 1
            if i + 1 < length and is_vowel(word[i + 1]) and word[i : i + 2] in DIPHTHONGS:
                i += 1
        i += 1
    return max(1, count)


def clean_word(token: str) -> str:
    """Strip everything that is not a Spanish letter from ``token``."""

    return _NON_LETTER_RE.sub("", unicodedata.normalize("NFC", token))


def count_text(text: Optional[str]) -> int:
    """Return the total syllables across the whitespace-delimited words of ``text``."""

    total = 0
    for token in _split(text):
        clean = clean_word(token)
        if clean:
            total += count_word(clean)
    return total


def count_line(line: Optional[str]) -> int:
    """Syllables in a single verse line."""

    return count_text(line)


def count_words(text: Optional[str]) -> int:
    """Return the number of words in ``text``.

    Tokens made only of punctuation (a lone dash, an ellipsis) are not words.
    """

    return sum(1 for token in _split(text) if any(char.isalnum() for char in token))


def verse_name(n: int) -> str:
    """Return the traditional metrical name for a line of ``n`` syllables."""

    return VERSE_NAMES.get(n, f"{n} sílabas")
