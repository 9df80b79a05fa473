import pytest

from pair_map import (
    ALPHABET,
    FormatError,
    InvalidSymbolError,
    PairMap,
    index_letter,
    letter_index,
)
from rotor_bank import REFLECTOR_PATTERN, ROTOR_PATTERNS, RotorBank, standard_bank


ALL_PATTERNS = list(ROTOR_PATTERNS) + [REFLECTOR_PATTERN]


@pytest.mark.parametrize("pattern", ALL_PATTERNS)
def test_standard_tables_are_fixed_point_free_involutions(pattern):
    pm = PairMap.build(pattern)
    for ch in ALPHABET:
        partner = pm.lookup(ch)
        assert partner != ch
        assert pm.lookup(partner) == ch


def test_lookup_examples():
    cog1 = PairMap.build(ROTOR_PATTERNS[0])
    assert cog1.lookup("A") == "K"
    assert cog1.lookup("k") == "A"
    assert cog1.lookup_index(letter_index("E")) == letter_index("Z")


def test_build_is_case_insensitive_and_tolerates_whitespace():
    pm = PairMap.build("  ab cd\tef gh ij kl mn op qr st uv wx  yz \n")
    assert pm.pattern == REFLECTOR_PATTERN
    assert pm == PairMap.build(REFLECTOR_PATTERN)
    assert list(pm)[0] == ("A", "B")
    assert len(pm) == 26


@pytest.mark.parametrize("pattern", [
    "",
    "AB CD EF",
    "AB CD EF GH IJ KL MN OP QR ST UV WX YZ AB",
    "ABC DEF GHI JKL MNO PQR STU VWX YZ",
    "AB CD EF GH IJ KL MN OP QR ST UV WX Y1",
    "AB,CD,EF,GH,IJ,KL,MN,OP,QR,ST,UV,WX,YZ",
])
def test_build_rejects_bad_shape(pattern):
    with pytest.raises(FormatError):
        PairMap.build(pattern)


def test_build_rejects_self_pair():
    with pytest.raises(FormatError, match="paired with itself"):
        PairMap.build("AA CD EF GH IJ KL MN OP QR ST UV WX YZ")


def test_build_rejects_repeated_letter():
    with pytest.raises(FormatError, match="more than one pair"):
        PairMap.build("AB AC DE FG HI JK LM NO PQ RS TU VW XY")


def test_build_rejects_non_string():
    with pytest.raises(FormatError):
        PairMap.build(None)


@pytest.mark.parametrize("bad", ["1", " ", "!", "", "AB", "é", 5, None])
def test_lookup_rejects_non_letters(bad):
    pm = PairMap.build(REFLECTOR_PATTERN)
    with pytest.raises(InvalidSymbolError):
        pm.lookup(bad)


@pytest.mark.parametrize("bad", [-1, 26, "A", 2.0])
def test_lookup_index_rejects_out_of_range(bad):
    pm = PairMap.build(REFLECTOR_PATTERN)
    with pytest.raises(InvalidSymbolError):
        pm.lookup_index(bad)


def test_contains():
    pm = PairMap.build(REFLECTOR_PATTERN)
    assert "q" in pm
    assert "1" not in pm
    assert 3 not in pm


def test_letter_index_helpers():
    assert letter_index("a") == 0
    assert index_letter(25) == "Z"
    with pytest.raises(InvalidSymbolError):
        index_letter(26)


def test_pairmap_is_immutable():
    pm = PairMap.build(REFLECTOR_PATTERN)
    with pytest.raises(AttributeError):
        pm.table = ()


# ---- RotorBank ----

def test_standard_bank_is_shared():
    assert standard_bank() is standard_bank()


def test_rotor_bank_needs_three_rotors():
    with pytest.raises(FormatError):
        RotorBank.from_patterns(ROTOR_PATTERNS[:2], REFLECTOR_PATTERN)


def test_forward_applies_offset_with_wrap():
    bank = standard_bank()
    # cog 1 at setting 1: 'Z' turns to 'A', which is wired to 'K'
    assert bank.forward(0, letter_index("Z"), 1) == letter_index("K")


def test_backward_undoes_forward():
    bank = standard_bank()
    for r in range(3):
        for s in (0, 1, 13, 25):
            for x in range(26):
                assert bank.backward(r, bank.forward(r, x, s), s) == x


def test_reflect():
    assert standard_bank().reflect(letter_index("Z")) == letter_index("Y")
