#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Property checks over seeded random value graphs.
#
# For every generated value v this runner checks:
#   - round-trip:   deserialize(serialize(v)) is structurally the same as v
#   - idempotence:  serialize(deserialize(serialize(v))) == serialize(v)
#   - clone:        clone(v) matches v and shares no container with it
#   - minify:       the single-line form has no newline
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import math, os, random, re, sys
from datetime import datetime, timedelta, timezone
from typing import Any

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from riv import BigInt, Record, ValueMap, clone, deserialize, minify, serialize

SEED = int(os.environ.get("RIV_SEED", "1337"))
TRIALS = int(os.environ.get("RIV_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("RIV_GEN_MAX_DEPTH", "5"))
MAX_KEYS = int(os.environ.get("RIV_GEN_MAX_KEYS", "6"))
MAX_LIST = int(os.environ.get("RIV_GEN_MAX_LIST", "6"))
MAX_STR = int(os.environ.get("RIV_GEN_MAX_STR", "24"))

random.seed(SEED)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
PATTERNS = [r"^\d+$", "a.b", "[xyz]+", "(?P<word>\\w+)", "a/b", ""]
FLAG_SETS = [0, re.I, re.M, re.S, re.I | re.M, re.X]
KEY_CHARS = "abcdefghijklmnopqrstuvwxyz_-:#@<>\"0123456789"
NAME_CHARS = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_-.:"


def rand_string() -> str:
    # Mostly printable ASCII; the escaped characters and non-ASCII now and then.
    out = []
    for _ in range(random.randint(0, MAX_STR)):
        r = random.random()
        if r < 0.75:
            out.append(chr(random.randint(0x20, 0x7E)))
        elif r < 0.85:
            out.append(random.choice('"\\\n\r\t\b\f'))
        elif r < 0.95:
            out.append(chr(random.randint(0xA0, 0x2FFF)))
        else:
            out.append(chr(random.randint(0x10000, 0x10FFFF)))
    return "".join(out)


def rand_key() -> str:
    return "".join(random.choice(KEY_CHARS) for _ in range(random.randint(1, 10)))


def rand_name() -> str:
    return "".join(random.choice(NAME_CHARS) for _ in range(random.randint(1, 8)))


def rand_float() -> float:
    r = random.random()
    if r < 0.05:
        return float("nan")
    if r < 0.10:
        return random.choice([math.inf, -math.inf])
    if r < 0.40:
        return random.uniform(-1e6, 1e6)
    return random.choice([0.0, -0.0, 0.1, 1e-300, 1e300, 5e-324]) * random.choice([1, -1])


def rand_date() -> datetime:
    ms = random.randint(-62135596800000 + 86400000, 253402300799000)
    return EPOCH + timedelta(milliseconds=ms)


def rand_scalar() -> Any:
    r = random.randint(0, 10)
    if r == 0:
        return None
    if r == 1:
        return random.random() < 0.5
    if r == 2:
        return random.randint(-10 ** 12, 10 ** 12)
    if r == 3:
        return rand_float()
    if r == 4:
        return BigInt(random.randint(-10 ** 40, 10 ** 40))
    if r == 5:
        return rand_date()
    if r == 6:
        return re.compile(random.choice(PATTERNS), random.choice(FLAG_SETS))
    if r == 7:
        return Exception(rand_string())
    if r == 8:
        return bytes(random.getrandbits(8) for _ in range(random.randint(0, 12)))
    return rand_string()


def rand_hashable() -> Any:
    r = random.random()
    if r < 0.4:
        return random.randint(-1000, 1000)
    if r < 0.8:
        return rand_string()
    return tuple(random.randint(0, 9) for _ in range(random.randint(0, 3)))


def gen_value(depth: int) -> Any:
    if depth >= MAX_GEN_DEPTH or random.random() < 0.35:
        return rand_scalar()
    r = random.random()
    if r < 0.40:
        rec = Record(name=rand_name() if random.random() < 0.3 else None)
        for _ in range(random.randint(0, MAX_KEYS)):
            rec[rand_key()] = gen_value(depth + 1)
        return rec
    if r < 0.75:
        return [gen_value(depth + 1) for _ in range(random.randint(0, MAX_LIST))]
    if r < 0.87:
        return {rand_hashable() for _ in range(random.randint(0, MAX_LIST))}
    return ValueMap((rand_hashable(), gen_value(depth + 2)) for _ in range(random.randint(0, 4)))


def same(a: Any, b: Any) -> bool:
    """Structural comparison that knows about NaN, patterns and errors."""
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a):
        return math.isnan(b)
    if isinstance(a, re.Pattern):
        return isinstance(b, re.Pattern) and (a.pattern, a.flags) == (b.pattern, b.flags)
    if isinstance(a, BaseException):
        return isinstance(b, BaseException) and str(a) == str(b)
    if isinstance(a, dict):
        if not isinstance(b, dict) or list(a) != list(b):
            return False
        if getattr(a, "name", None) != getattr(b, "name", None):
            return False
        return all(same(a[k], b[k]) for k in a)
    if isinstance(a, list):
        return isinstance(b, list) and len(a) == len(b) and all(map(same, a, b))
    if type(a) is not type(b):
        return False
    return a == b


def shares_container(a: Any, b: Any) -> bool:
    if isinstance(a, (list, dict, set)) and a is b:
        return True
    if isinstance(a, dict) and isinstance(b, dict):
        return any(shares_container(a[k], b.get(k)) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        return any(shares_container(x, y) for x, y in zip(a, b))
    return False


def fail(label: str, value: Any, **ctx: Any) -> None:
    print("INVARIANT FAIL:", label)
    print("VALUE:", repr(value)[:2000])
    for k, v in ctx.items():
        print("{}:".format(k.upper()), repr(v)[:2000])
    raise SystemExit(1)


def main() -> int:
    for i in range(TRIALS):
        v = gen_value(0)
        text = serialize(v)

        back = deserialize(text)
        if not same(v, back):
            fail("round-trip", v, trial=i, text=text, back=back)

        again = serialize(back)
        if again != text:
            fail("idempotence", v, trial=i, text=text, again=again)

        copy = clone(v)
        if not same(v, copy) or shares_container(v, copy):
            fail("clone independence", v, trial=i, copy=copy)

        if "\n" in minify(v):
            fail("minify single line", v, trial=i)

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
