"""Editor statistics and per-line verse metrics."""
from __future__ import annotations

import html
import re
from typing import List, Optional

from .models import LineMetric, TextStats
from .syllables import count_line, count_text, count_words, verse_name

SECTION_MARKER_RE = re.compile(r"^\[\s*[^\]]+?\s*\]$")
TAG_RE = re.compile(r"<[^>]+>")
BLANK_RUN_RE = re.compile(r"\n{3,}")


def plain_text(content: Optional[str]) -> str:
    """Turn stored editor markup into plain text, one block per line."""

    text = html.unescape(TAG_RE.sub("\n", content or ""))
    return BLANK_RUN_RE.sub("\n\n", text).strip()


def text_stats(text: Optional[str]) -> TextStats:
    """Word, syllable and character totals for a whole note."""

    text = text or ""
    return TextStats(words=count_words(text), syllables=count_text(text), characters=len(text))


def line_metrics(text: Optional[str]) -> List[LineMetric]:
    """Return the syllable count and verse name of every line in ``text``."""

    metrics: List[LineMetric] = []
    for number, raw in enumerate((text or "").splitlines(), start=1):
        line = raw.strip()
        syllables = count_line(line)
        metrics.append(
            LineMetric(
                number=number,
                text=line,
                syllables=syllables,
                verse_name=verse_name(syllables) if syllables > 0 else None,
            )
        )
    return metrics


def is_section_marker(line: str) -> bool:
    """``True`` for song section markers such as ``[ Estribillo ]``."""

    return bool(SECTION_MARKER_RE.match(line.strip()))


def append_section(content: str, section: str) -> str:
    """Append a ``[ Section ]`` marker line followed by a blank line to ``content``."""

    name = " ".join(section.split())
    if not name:
        return content
    if content and not content.endswith("\n"):
        content += "\n"
    return f"{content}[ {name} ]\n\n"


def verse_lines(text: Optional[str]) -> List[str]:
    """Non-blank lines of ``text`` that are not song section markers."""

    lines: List[str] = []
    for raw in (text or "").splitlines():
        line = raw.strip()
        if line and not is_section_marker(line):
            lines.append(line)
    return lines


def format_word_count(words: int) -> str:
    return f"{words} palabra{'' if words == 1 else 's'}"


def format_syllables(syllables: int) -> str:
    return f"{syllables} síl."
