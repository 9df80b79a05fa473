import threading

import pytest

from pair_map import PairMap
from rotor_bank import REFLECTOR_PATTERN, ROTOR_PATTERNS, RotorBank
from enigma_engine import CipherEngine, EngineFault, convert
from key_search import (
    BLOCK_SIZE,
    KEYSPACE_SIZE,
    Candidate,
    SearchCancelled,
    crack,
    crack_parallel,
    format_candidate,
    iter_keyspace,
)


@pytest.fixture(scope="module")
def hello_ct():
    return convert("HELLOWORLD", 3, 7, 12)


@pytest.fixture(scope="module")
def hello_found(hello_ct):
    return crack(hello_ct, "HELLO")


def test_keyspace_order_and_size():
    triples = list(iter_keyspace())
    assert len(triples) == KEYSPACE_SIZE == 17576
    assert triples[0] == (0, 0, 0)
    assert triples[1] == (0, 0, 1)
    assert triples[-1] == (25, 25, 25)
    assert triples == sorted(triples)
    assert len(list(iter_keyspace(4))) == BLOCK_SIZE


def test_crack_finds_planted_settings(hello_found):
    assert Candidate(3, 7, 12, "HELLOWORLD") in hello_found
    for c in hello_found:
        assert "HELLO" in c.decoded


def test_crack_results_in_ascending_order(hello_found):
    keys = [c.settings for c in hello_found]
    assert keys == sorted(keys)


def test_crack_fragment_is_case_insensitive(hello_ct, hello_found):
    assert crack(hello_ct, "hello") == hello_found


def test_crack_accepts_unnormalized_ciphertext(hello_ct, hello_found):
    spaced = " ".join(hello_ct.lower())
    assert crack(spaced, "HELLO") == hello_found


def test_crack_no_match_is_empty(hello_ct):
    assert crack(hello_ct, "HELLOWORLDHELLOWORLD") == []


def test_crack_evaluates_whole_keyspace():
    calls = []

    class CountingEngine(CipherEngine):
        def convert(self, text, s1, s2, s3):
            calls.append((s1, s2, s3))
            return super().convert(text, s1, s2, s3)

    crack("ABC", "ZZZZ", engine=CountingEngine())
    assert len(calls) == KEYSPACE_SIZE


def test_empty_fragment_matches_everything():
    found = crack("QWE", "")
    assert len(found) == KEYSPACE_SIZE


def test_crack_progress():
    seen = []
    crack("AB", "NOPE", on_progress=lambda done, total: seen.append((done, total)))
    assert len(seen) == 26
    assert seen[0] == (BLOCK_SIZE, KEYSPACE_SIZE)
    assert seen[-1] == (KEYSPACE_SIZE, KEYSPACE_SIZE)


def test_crack_cancel():
    ev = threading.Event()
    ev.set()
    with pytest.raises(SearchCancelled):
        crack("ABC", "A", cancel=ev)


def test_crack_cancel_midway():
    ev = threading.Event()

    def progress(done, total):
        if done >= 3 * BLOCK_SIZE:
            ev.set()

    with pytest.raises(SearchCancelled):
        crack("ABC", "A", cancel=ev, on_progress=progress)


def test_parallel_threads_match_sequential(hello_ct, hello_found):
    assert crack_parallel(hello_ct, "HELLO", executor="thread", workers=4) == hello_found


def test_parallel_processes_match_sequential(hello_ct, hello_found):
    assert crack_parallel(hello_ct, "hello", executor="process", workers=2) == hello_found


def test_parallel_progress_reaches_total(hello_ct):
    seen = []
    crack_parallel(hello_ct, "HELLO", executor="thread", workers=3,
                   on_progress=lambda d, t: seen.append(d))
    assert sorted(seen) == seen
    assert seen[-1] == KEYSPACE_SIZE
    assert len(seen) == 26


def test_parallel_cancel():
    ev = threading.Event()
    ev.set()
    with pytest.raises(SearchCancelled):
        crack_parallel("ABCDEF", "A", executor="thread", workers=2, cancel=ev)


def test_parallel_bad_executor():
    with pytest.raises(ValueError):
        crack_parallel("ABC", "A", executor="fibers")


def test_engine_fault_aborts_search():
    standard = RotorBank.from_patterns(ROTOR_PATTERNS, REFLECTOR_PATTERN)
    broken = CipherEngine(RotorBank(rotors=standard.rotors,
                                    reflector=PairMap(table=(99,) * 26, pairs=())))
    with pytest.raises(EngineFault):
        crack("ABC", "A", engine=broken)
    with pytest.raises(EngineFault):
        crack_parallel("ABC", "A", engine=broken, executor="thread", workers=2)


def test_format_candidate():
    assert format_candidate(Candidate(3, 7, 12, "HELLOWORLD")) == " 3  7 12: HELLOWORLD"
    assert format_candidate(Candidate(10, 0, 25, "X")) == "10  0 25: X"
