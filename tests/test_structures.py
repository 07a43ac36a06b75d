import _bootstrap  # noqa: F401
import pytest

from infiniversal.structures import (
    STRUCTURES,
    UnknownStructureError,
    check_poem,
    expected_meter,
    get_structure,
    is_valid,
)

ENDECASILABOS = [
    "la luna blanca brilla sobre el mar",
    "y canta el viento sobre la ciudad",
]

HAIKU = "la luna blanca\nla noche brilla sola\ncae la lluvia"


def test_known_structures():
    assert set(STRUCTURES) == {"soneto", "cuarteto", "lira", "haiku", "silva", "libre"}
    assert STRUCTURES["soneto"].verse_count == 14
    assert expected_meter(STRUCTURES["lira"]) == [(7,), (11,), (7,), (7,), (11,)]
    assert get_structure("SONETO").name == "Soneto"


def test_unknown_structure():
    with pytest.raises(UnknownStructureError):
        get_structure("villanela")
    with pytest.raises(KeyError):
        check_poem("hola", "villanela")


def test_valid_haiku():
    checks = check_poem(HAIKU, "haiku")
    assert [check.actual for check in checks] == [5, 7, 5]
    assert all(check.ok for check in checks)
    assert is_valid(HAIKU, "haiku")


def test_sonnet_made_of_endecasilabos():
    quartet = "\n".join(ENDECASILABOS * 2)
    tercets = "\n".join(ENDECASILABOS + ENDECASILABOS[:1]) + "\n\n" + "\n".join(ENDECASILABOS[:1] + ENDECASILABOS)
    sonnet = "\n\n".join([quartet, quartet, tercets])
    assert len(check_poem(sonnet, "soneto")) == 14
    assert is_valid(sonnet, "soneto")


def test_short_line_fails_meter():
    checks = check_poem("la luna blanca\n" + "\n".join(ENDECASILABOS[:1] * 3), "cuarteto")
    assert not checks[0].ok
    assert checks[0].expected == (11,)
    assert checks[0].actual == 5
    assert all(check.ok for check in checks[1:])


def test_missing_and_extra_verses():
    missing = check_poem("la luna blanca", "haiku")
    assert len(missing) == 3
    assert missing[0].ok
    assert missing[1].actual == 0 and not missing[1].ok

    extra = check_poem(HAIKU + "\ncae la lluvia", "haiku")
    assert len(extra) == 4
    assert extra[3].expected == ()
    assert not extra[3].ok


def test_silva_accepts_heptasilabos_and_endecasilabos():
    assert is_valid("la noche brilla sola\n" + ENDECASILABOS[0], "silva")
    checks = check_poem("la noche brilla sola\ncae la lluvia", "silva")
    assert [check.ok for check in checks] == [True, False]
    assert checks[1].expected == (7, 11)


def test_free_verse_accepts_anything():
    assert is_valid("shh\ncae la lluvia\n[ Estribillo ]", "libre")
    assert check_poem("", "libre") == []
