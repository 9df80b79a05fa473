#!/usr/bin/env python3
"""
enigma_selftest.py — black-box self-test for CipherEngine (and crack()).

Usage:
    import enigma_selftest as est
    from enigma_engine import CipherEngine
    report = est.run_self_test(CipherEngine())

    # or just:  python enigma_selftest.py

Each check lands in report["tests"][name] as {"ok": bool, "why": str}; a check
that raises is recorded as a failure, never propagated.

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from enigma_engine import CipherEngine, RangeError, normalize_text
from key_search import crack

_SAMPLE = "Attack at Dawn!"
_SAMPLE_SETTINGS = (0, 0, 0)
_CRIB_PLAINTEXT = "HELLOWORLD"
_CRIB_SETTINGS = (3, 7, 12)

def _ok(why: str = "") -> Dict[str, Any]:
    return {"ok": True, "why": why}

def _fail(why: str) -> Dict[str, Any]:
    return {"ok": False, "why": why}

def run_self_test(engine: Optional[CipherEngine] = None, *, include_crack: bool = True) -> Dict[str, Any]:
    engine = engine or CipherEngine()
    tests: Dict[str, Dict[str, Any]] = {}
    ct0 = ""

    # 1) Round trip on the classic sample
    try:
        ct0 = engine.convert(_SAMPLE, *_SAMPLE_SETTINGS)
        pt0 = engine.convert(ct0, *_SAMPLE_SETTINGS)
        tests["round_trip"] = _ok() if pt0 == "ATTACKATDAWN" else _fail(f"got {pt0!r}")
    except Exception as e:
        tests["round_trip"] = _fail(f"exception: {e}")

    # 2) Mixed case / punctuation converts like the stripped text
    try:
        a = engine.convert("he,LLo  w0rld!!", 5, 6, 7)
        b = engine.convert(normalize_text("he,LLo  w0rld!!"), 5, 6, 7)
        tests["normalization"] = _ok() if a == b else _fail("punctuated and stripped inputs differ")
    except Exception as e:
        tests["normalization"] = _fail(f"exception: {e}")

    # 3) Every out-of-range position is rejected
    try:
        bad = []
        for pos in range(3):
            for value in (-1, 26):
                s = [0, 0, 0]
                s[pos] = value
                try:
                    engine.convert("ABC", *s)
                    bad.append(tuple(s))
                except RangeError:
                    pass
        tests["range_checks"] = _ok() if not bad else _fail(f"accepted {bad}")
    except Exception as e:
        tests["range_checks"] = _fail(f"exception: {e}")

    # 4) Determinism
    try:
        runs = {engine.convert(_SAMPLE, 11, 22, 3) for _ in range(3)}
        tests["determinism"] = _ok() if len(runs) == 1 else _fail("output changed between calls")
    except Exception as e:
        tests["determinism"] = _fail(f"exception: {e}")

    # 5) Reflector property: no letter maps to itself
    try:
        src = "A" * 60
        out = engine.convert(src, 24, 24, 0)
        tests["no_fixed_points"] = _ok() if "A" not in out else _fail("a letter encrypted to itself")
    except Exception as e:
        tests["no_fixed_points"] = _fail(f"exception: {e}")

    # 6) Crack finds the planted settings
    if include_crack:
        try:
            ct = engine.convert(_CRIB_PLAINTEXT, *_CRIB_SETTINGS)
            found = crack(ct, "hello", engine=engine)
            hit = any(c.settings == _CRIB_SETTINGS and c.decoded == _CRIB_PLAINTEXT for c in found)
            tests["crack"] = _ok(f"{len(found)} candidate(s)") if hit else _fail("planted settings not found")
        except Exception as e:
            tests["crack"] = _fail(f"exception: {e}")
    else:
        tests["crack"] = _ok("skipped")

    return {
        "engine": repr(engine),
        "all_passed": all(t["ok"] for t in tests.values()),
        "tests": tests,
        "sample": {"plaintext": _SAMPLE, "settings": _SAMPLE_SETTINGS, "ciphertext": ct0},
    }

if __name__ == "__main__":  # pragma: no cover
    rep = run_self_test()
    print(f"Engine: {rep['engine']}")
    print("All passed:", rep["all_passed"])
    for name, r in rep["tests"].items():
        status = "OK " if r["ok"] else "FAIL"
        why = f"  ({r['why']})" if r["why"] else ""
        print(f" - {name:16s}: {status}{why}")
    print("Sample ciphertext:", rep["sample"]["ciphertext"])
