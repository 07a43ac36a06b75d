import _bootstrap  # noqa: F401

from infiniversal.metrics import (
    append_section,
    format_syllables,
    format_word_count,
    is_section_marker,
    line_metrics,
    plain_text,
    text_stats,
    verse_lines,
)


def test_text_stats_counts_words_syllables_and_characters():
    stats = text_stats("Un ave vuela")
    assert (stats.words, stats.syllables, stats.characters) == (3, 5, 12)
    assert text_stats(None) == text_stats("")
    assert text_stats("").words == 0


def test_line_metrics_name_each_line():
    metrics = line_metrics("la luna blanca\n\n  la luna blanca brilla sobre el mar  ")
    assert [metric.number for metric in metrics] == [1, 2, 3]
    assert metrics[0].syllables == 5
    assert metrics[0].verse_name == "Pentasílabo"
    assert metrics[1].syllables == 0
    assert metrics[1].verse_name is None
    assert metrics[2].text == "la luna blanca brilla sobre el mar"
    assert metrics[2].verse_name == "Endecasílabo"


def test_section_markers_are_not_verses():
    assert is_section_marker("[ Estribillo ]")
    assert is_section_marker("[Verso 2]")
    assert not is_section_marker("canta [bajito] conmigo")
    text = "[ Verso ]\ncanta conmigo\n\n[ Estribillo ]\ncae la lluvia\n"
    assert verse_lines(text) == ["canta conmigo", "cae la lluvia"]


def test_plain_text_strips_editor_markup():
    content = "<div>la luna&nbsp;blanca</div><div><br></div><div><br></div><div>cae la lluvia</div>"
    text = plain_text(content)
    assert "<" not in text
    assert "\n\n\n" not in text
    assert text.splitlines()[0] == "la luna\xa0blanca"
    assert text.endswith("cae la lluvia")
    assert text_stats(text).syllables == 10


def test_labels():
    assert format_word_count(1) == "1 palabra"
    assert format_word_count(0) == "0 palabras"
    assert format_syllables(11) == "11 síl."


def test_append_section_adds_marker_line():
    assert append_section("", "Estribillo") == "[ Estribillo ]\n\n"
    content = append_section("canta conmigo", "  Verso   2 ")
    assert content == "canta conmigo\n[ Verso 2 ]\n\n"
    assert append_section(content, "   ") == content
    assert verse_lines(content) == ["canta conmigo"]
