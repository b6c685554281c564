"""Daily puzzle generation.

Each date maps to a fixed scramble: an FNV-1a hash of the seed string feeds
a mulberry32 generator, which picks 9 to 16 presses applied to an all-off
board. Every generated board is therefore solvable.
"""
from __future__ import annotations

import datetime as dt
import math
import re
from typing import Callable, List, NamedTuple, Optional

from .algebra import build_matrix
from .board import GRID_SIZE

SEED_PREFIX = "flipfive:"
MAX_ARCHIVE_DAYS = 90
MIN_SCRAMBLES = 9
MAX_SCRAMBLES = 16

_MASK32 = 0xFFFFFFFF
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DailyPuzzle(NamedTuple):
    date: str
    seed: str
    start_bits: int
    scramble: List[int]


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def hash_seed(text: str) -> int:
    """32-bit FNV-1a over the string's UTF-16 code units."""
    h = 2166136261
    for unit in _utf16_units(text):
        h ^= unit
        h = _imul(h, 16777619)
    return h


def _utf16_units(text: str):
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a generator of floats in [0, 1) seeded with a 32-bit int."""
    state = seed & _MASK32

    def rng() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK32
        t = _imul(state ^ (state >> 15), state | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    return rng


def scramble_length(date_str: str, rng: Callable[[], float]) -> int:
    day_index = hash_seed(date_str) % 3650
    base = MIN_SCRAMBLES + day_index // 365
    return min(MAX_SCRAMBLES, base + math.floor(rng() * 5))


def generate_daily(date_str: str, n: int = GRID_SIZE) -> DailyPuzzle:
    """Build the starting board for `date_str` (YYYY-MM-DD)."""
    if parse_date(date_str) is None:
        raise ValueError(f"Invalid puzzle date: {date_str!r}")

    seed = f"{SEED_PREFIX}{date_str}"
    rng = mulberry32(hash_seed(seed))
    N = n * n
    rows = build_matrix(n)

    scrambles = scramble_length(date_str, rng)
    presses: list[int] = []
    bits = 0
    last = -1
    for _ in range(scrambles):
        i = math.floor(rng() * N)
        # avoid pressing the same cell twice in a row
        if i == last:
            i = (i + 7) % N
        last = i
        presses.append(i)
        bits ^= rows[i]
    return DailyPuzzle(date_str, seed, bits, presses)


def _to_date(date_str: str) -> dt.date:
    if not _DATE_RE.match(date_str):
        raise ValueError(f"Expected YYYY-MM-DD, got {date_str!r}")
    return dt.date.fromisoformat(date_str)


def parse_date(text: Optional[str]) -> Optional[str]:
    """Return `text` if it is a valid YYYY-MM-DD date, else None."""
    if not text:
        return None
    try:
        _to_date(text)
    except ValueError:
        return None
    return text


def today_utc() -> str:
    return dt.datetime.now(dt.timezone.utc).date().isoformat()


def add_days(date_str: str, delta: int) -> str:
    return (_to_date(date_str) + dt.timedelta(days=delta)).isoformat()


def clamp_to_today(date_str: str, today: Optional[str] = None) -> str:
    today = today or today_utc()
    return today if date_str > today else date_str


def archive_dates(
    range_days: int = 30, today: Optional[str] = None
) -> list[str]:
    """Most recent `range_days` dates ending at `today`, newest first."""
    if not 0 < range_days <= MAX_ARCHIVE_DAYS:
        raise ValueError(
            f"range_days must be in 1..{MAX_ARCHIVE_DAYS}, got {range_days}"
        )
    today = today or today_utc()
    return [add_days(today, -i) for i in range(range_days)]
