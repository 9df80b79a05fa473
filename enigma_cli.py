#!/usr/bin/env python3
"""
enigma_cli.py — Encrypt/decrypt and crack from the command line.

Usage:
  enigma_cli convert [--settings S1 S2 S3] [--text TEXT]
  enigma_cli crack CIPHERTEXT FRAGMENT [--parallel] [--workers N] [--threads]

convert:
  Any missing cog setting is asked for interactively, one cog at a time, until a
  whole number between 0 and 25 is typed. Missing text is asked for as well.
  The cipher is self-reciprocal: run the ciphertext through the same settings
  to get the plaintext back.

crack:
  Tries all 17,576 cog settings and prints every one whose decoding contains
  FRAGMENT, as "S1 S2 S3: DECODED".

Exit codes: 0=OK (including "no matches"), 2=usage/error.

Copyright:
  (c) 2025 Robert Dowell. Educational use encouraged.
"""

from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from pair_map import EnigmaError
from enigma_engine import SETTING_MAX, SETTING_MIN, convert
from key_search import KEYSPACE_SIZE, crack, crack_parallel, format_candidate


# ---------------- helpers ----------------

def _inp(prompt: str) -> str:
    try:
        return input(prompt)
    except EOFError:
        return ""

def _prompt_setting(cog: int, *, max_tries: int = 100) -> int:
    """Ask until the answer is an int in range; EOF / too many tries aborts."""
    for _ in range(max_tries):
        try:
            raw = input(f"Pick a number between {SETTING_MIN} and {SETTING_MAX} for the setting of cog #{cog}: ")
        except EOFError:
            raise SystemExit(2)
        try:
            value = int(raw.strip())
        except ValueError:
            continue
        if SETTING_MIN <= value <= SETTING_MAX:
            return value
    raise SystemExit(2)

def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="enigma_cli",
        description="Three-cog rotor cipher: convert text or brute-force the settings",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_conv = sub.add_parser("convert", help="Encrypt or decrypt text (same operation)")
    p_conv.add_argument("--settings", nargs=3, type=int, metavar=("S1", "S2", "S3"), default=None,
                        help="Cog settings, each 0..25 (prompted if omitted)")
    p_conv.add_argument("--text", default=None, help="Message (prompted if omitted)")

    p_crack = sub.add_parser("crack", help="Recover cog settings from a known fragment")
    p_crack.add_argument("ciphertext")
    p_crack.add_argument("fragment")
    p_crack.add_argument("--parallel", action="store_true", help="Spread the search over a worker pool")
    p_crack.add_argument("--workers", type=int, default=None, help="Pool size (default: ENIGMA_CRACK_WORKERS or CPU count)")
    p_crack.add_argument("--threads", action="store_true", help="Use threads instead of processes with --parallel")

    return ap


# ---------------- commands ----------------

def cmd_convert(args) -> int:
    if args.settings is not None:
        settings = list(args.settings)
    else:
        settings = [_prompt_setting(i) for i in range(3)]

    text = args.text
    if text is None:
        print("Type the plaintext to encrypt or the ciphertext to decrypt:")
        text = _inp("")

    result = convert(text, *settings)
    print("The converted text is:")
    print(result)
    return 0

def cmd_crack(args) -> int:
    if args.workers is not None and args.workers < 1:
        print("--workers must be at least 1.", file=sys.stderr)
        return 2
    if args.parallel:
        found = crack_parallel(
            args.ciphertext, args.fragment,
            workers=args.workers,
            executor="thread" if args.threads else "process",
        )
    else:
        found = crack(args.ciphertext, args.fragment)

    for c in found:
        print(format_candidate(c))
    print(f"{len(found)} candidate(s) out of {KEYSPACE_SIZE} settings.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    ap = _build_parser()
    args = ap.parse_args(argv)

    try:
        if args.cmd == "convert":
            return cmd_convert(args)
        elif args.cmd == "crack":
            return cmd_crack(args)
        else:
            print("Unknown command.", file=sys.stderr)
            return 2

    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        return 2
    except EnigmaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
