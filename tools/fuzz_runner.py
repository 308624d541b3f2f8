#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Mutation fuzzing of the decoder.
#
# Generates three fuzz categories:
#   A) valid texts from the invariants generator, then byte-level mutations
#   B) random splices of grammar fragments (markers, tags, brackets, entries)
#   C) valid texts truncated at a random offset
#
# The decoder may accept or reject each input, but a rejection must be a
# RivError.  Anything else prints a repro payload and exits non-zero.

import json, os, random, sys
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)
sys.path.insert(0, os.path.join(ROOT, "tools"))

from riv import RivError, deserialize, serialize
import invariants_runner as gen

SEED = int(os.environ.get("RIV_SEED", "4242"))
ROUNDS = int(os.environ.get("RIV_FUZZ_ROUNDS", "5000"))

random.seed(SEED)

FRAGMENTS = [
    "#nil", "#yes", "#no", "#nan", "#inf", "#-inf", "true", "null",
    "#big:", "#date:", "#regex:", "#error:", "#buffer:", "#set:", "#map:",
    '"', '"x"', "\\", "<", ">", "<>", "@", "@n", ":", ":k", "=>", " => ",
    "\n", "\n  ", "\n    ", "\r\n", " ", "\t", "-", "0", "12", ".", "e", "E+",
    '"1,2"', '"/a/g"', '"2024-01-01T00:00:00.000Z"', '"0"',
]
MUTATION_CHARS = '<>@:="\\#-. \n\t0123456789abcxyz'


def decode_outcome(text: str) -> Dict[str, Any]:
    try:
        deserialize(text)
        return {"ok": True}
    except RivError as e:
        return {"err": e.code}


def crash(label: str, text: str, exc: BaseException, round_no: int) -> None:
    print("CRASH:", label)
    print("EXC :", "{}: {}".format(type(exc).__name__, exc))
    print("CTX:", json.dumps({"round": round_no, "input": text}, ensure_ascii=False)[:4000])
    raise SystemExit(1)


# --- generators ---

def valid_text() -> str:
    return serialize(gen.gen_value(0))


def mutate(text: str) -> str:
    chars = list(text)
    for _ in range(random.randint(1, 4)):
        op = random.random()
        pos = random.randint(0, len(chars))
        if op < 0.35 and chars:
            del chars[min(pos, len(chars) - 1)]
        elif op < 0.70:
            chars.insert(pos, random.choice(MUTATION_CHARS))
        elif chars:
            chars[min(pos, len(chars) - 1)] = random.choice(MUTATION_CHARS)
    return "".join(chars)


def splice() -> str:
    return "".join(random.choice(FRAGMENTS) for _ in range(random.randint(1, 12)))


def truncate(text: str) -> str:
    return text[:random.randint(0, len(text))]


def main() -> int:
    accepted = rejected = 0
    for i in range(ROUNDS):
        r = random.random()
        if r < 0.50:
            label, text = "A mutation", mutate(valid_text())
        elif r < 0.80:
            label, text = "B splice", splice()
        else:
            label, text = "C truncation", truncate(valid_text())

        try:
            outcome = decode_outcome(text)
        except Exception as exc:
            crash(label, text, exc, i)
        if "ok" in outcome:
            accepted += 1
        else:
            rejected += 1

    print(f"OK: fuzz ROUNDS={ROUNDS} seed={SEED} accepted={accepted} rejected={rejected}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
