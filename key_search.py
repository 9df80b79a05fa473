"""
key_search.py — Brute-force recovery of cog settings from a known-plaintext fragment ("crib").

The keyspace is only 26 × 26 × 26 = 17,576 setting triples, so every triple is
tried: decode the ciphertext at that setting and keep it if the crib appears in
the decoded text. All matches are returned, never just the first one.

Two front-ends, same results:
  - crack():           single process, ascending (setting1, setting2, setting3)
  - crack_parallel():  fans the 26 setting1-blocks out to a process (or thread)
                       pool and merges; output is re-sorted into the same order

Both accept a threading.Event to cancel an in-flight search (SearchCancelled
is raised) and an on_progress(done, total) callback.

Knobs:
  ENIGMA_CRACK_WORKERS   default pool size for crack_parallel (else os.cpu_count())

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
import os
import itertools
import threading
import concurrent.futures
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from pair_map import ALPHABET_SIZE, EnigmaError
from enigma_engine import CipherEngine, default_engine, normalize_text

# =========================
# Constants / knobs
# =========================

BLOCK_SIZE = ALPHABET_SIZE * ALPHABET_SIZE         # triples per setting1 value (676)
KEYSPACE_SIZE = ALPHABET_SIZE * BLOCK_SIZE          # 17,576

def _env_workers() -> Optional[int]:
    raw = os.getenv("ENIGMA_CRACK_WORKERS", "").strip()
    if not raw:
        return None
    try:
        n = int(raw)
    except ValueError:
        return None
    return n if n > 0 else None

DEFAULT_WORKERS = _env_workers()

# seconds between cancellation checks while waiting on the pool
_POLL_INTERVAL = 0.05

ProgressFn = Callable[[int, int], None]

# =========================
# Exceptions / results
# =========================

class SearchCancelled(EnigmaError):
    """Raised when the cancel event is set while a search is running."""

@dataclass(frozen=True)
class Candidate:
    setting1: int
    setting2: int
    setting3: int
    decoded: str

    @property
    def settings(self) -> Tuple[int, int, int]:
        return self.setting1, self.setting2, self.setting3

def format_candidate(c: Candidate) -> str:
    """' 3  7 12: HELLOWORLD': the classic one-line report."""
    return f"{c.setting1:>2} {c.setting2:>2} {c.setting3:>2}: {c.decoded}"

# =========================
# Keyspace
# =========================

def iter_keyspace(setting1: Optional[int] = None) -> Iterator[Tuple[int, int, int]]:
    """All triples in ascending order, or only those of one setting1 block."""
    firsts: Iterable[int] = range(ALPHABET_SIZE) if setting1 is None else (setting1,)
    for s1 in firsts:
        for s2, s3 in itertools.product(range(ALPHABET_SIZE), repeat=2):
            yield s1, s2, s3

def _scan(engine: CipherEngine, ciphertext: str, target: str,
          triples: Iterable[Tuple[int, int, int]],
          cancel: Optional[threading.Event] = None) -> List[Candidate]:
    found: List[Candidate] = []
    for s1, s2, s3 in triples:
        if cancel is not None and cancel.is_set():
            raise SearchCancelled("search cancelled")
        decoded = engine.convert(ciphertext, s1, s2, s3)
        if target in decoded:
            found.append(Candidate(s1, s2, s3, decoded))
    return found

def _scan_block(engine: CipherEngine, ciphertext: str, target: str, setting1: int,
                cancel: Optional[threading.Event] = None) -> List[Candidate]:
    # pool entry point; must stay module-level so it pickles
    return _scan(engine, ciphertext, target, iter_keyspace(setting1), cancel)

# =========================
# Public API
# =========================

def crack(ciphertext: str, fragment: str, *,
          engine: Optional[CipherEngine] = None,
          cancel: Optional[threading.Event] = None,
          on_progress: Optional[ProgressFn] = None) -> List[Candidate]:
    """
    Try every setting triple; return every Candidate whose decoding contains
    `fragment` (uppercased), in ascending setting order. No match -> [].
    """
    engine = engine or default_engine()
    ciphertext = normalize_text(ciphertext)
    target = fragment.upper()

    results: List[Candidate] = []
    for s1 in range(ALPHABET_SIZE):
        results.extend(_scan(engine, ciphertext, target, iter_keyspace(s1), cancel))
        if on_progress:
            on_progress((s1 + 1) * BLOCK_SIZE, KEYSPACE_SIZE)
    return results

def crack_parallel(ciphertext: str, fragment: str, *,
                   engine: Optional[CipherEngine] = None,
                   workers: Optional[int] = None,
                   executor: str = "process",
                   cancel: Optional[threading.Event] = None,
                   on_progress: Optional[ProgressFn] = None) -> List[Candidate]:
    """
    Same result as crack(), computed as 26 independent setting1-blocks on a
    pool. `executor` is "process" (default) or "thread".
    """
    if executor == "process":
        pool_cls = concurrent.futures.ProcessPoolExecutor
    elif executor == "thread":
        pool_cls = concurrent.futures.ThreadPoolExecutor
    else:
        raise ValueError("executor must be 'process' or 'thread'")

    engine = engine or default_engine()
    ciphertext = normalize_text(ciphertext)
    target = fragment.upper()
    worker_count = workers or DEFAULT_WORKERS or os.cpu_count() or 1

    results: List[Candidate] = []
    done_triples = 0
    # an Event cannot cross a process boundary; thread workers poll it directly
    block_cancel = cancel if executor == "thread" else None

    with pool_cls(max_workers=min(worker_count, ALPHABET_SIZE)) as pool:
        pending = {
            pool.submit(_scan_block, engine, ciphertext, target, s1, block_cancel)
            for s1 in range(ALPHABET_SIZE)
        }
        try:
            while pending:
                if cancel is not None and cancel.is_set():
                    raise SearchCancelled("search cancelled")
                done, pending = concurrent.futures.wait(
                    pending,
                    timeout=_POLL_INTERVAL,
                    return_when=concurrent.futures.FIRST_COMPLETED,
                )
                for fut in done:
                    # an EngineFault in any block aborts the whole search
                    results.extend(fut.result())
                    done_triples += BLOCK_SIZE
                    if on_progress:
                        on_progress(done_triples, KEYSPACE_SIZE)
        except BaseException:
            for fut in pending:
                fut.cancel()
            raise

    results.sort(key=lambda c: c.settings)
    return results
