"""
core/catalog/weeks.py — Arrival-week codes and sliding week windows.

Pure module — no I/O, no logging. The only ambient input is "today", and
every function that needs it takes an explicit ``from_date`` instead.

A week code is the 4-character string ``WWYY``: two-digit week number
followed by the last two digits of the year. Weeks start on Sunday and
week 1 is the (possibly partial) week containing January 1st::

    week = ceil((day_of_year + weekday_of_jan_1) / 7)

where ``day_of_year`` is 1-based and ``weekday_of_jan_1`` counts from
Sunday (0) to Saturday (6).

Two-digit years are read as 2000–2099. Codes and dates outside that range
are rejected rather than guessed.

Codes must never be ordered as raw strings: ``"5024" > "0125"`` as text,
yet week 1 of 2025 is the newer of the two. Use ``compare_weeks`` or
``week_sort_key``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime

from core.catalog._validation import require_int
from core.catalog.errors import InvalidInputError, InvalidWeekCodeError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MIN_YEAR = 2000
MAX_YEAR = 2099
MIN_WEEK = 1
MAX_WEEK = 53

# Walking backwards always lands on week 52 of the previous year. Week 53
# only exists in some years, and a stable 52-week year keeps window
# arithmetic uniform.
ROLLOVER_WEEK = 52

_WEEK_CODE = re.compile(r"[0-9]{4}")


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, order=True)
class WeekParts:
    """A decoded week code.

    Field order is ``(year, week)`` so the generated comparisons order
    weeks chronologically.
    """

    year: int
    week: int

    @property
    def code(self) -> str:
        """The ``WWYY`` code for these parts."""
        return f"{self.week:02d}{self.year % 100:02d}"


@dataclass(frozen=True)
class WeekWindow:
    """The N most recent week codes, newest first, no duplicates."""

    codes: tuple[str, ...]

    @property
    def current(self) -> str:
        """The newest code in the window (this week's drop)."""
        return self.codes[0]

    @property
    def older(self) -> tuple[str, ...]:
        """Everything except the newest code (the recent backlog)."""
        return self.codes[1:]

    def __iter__(self) -> Iterator[str]:
        return iter(self.codes)

    def __len__(self) -> int:
        return len(self.codes)

    def __contains__(self, code: object) -> bool:
        return code in self.codes


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def encode_week(day: date | datetime) -> str:
    """Encode a calendar date as a ``WWYY`` week code.

    The formula can reach 54 on December 31st of a leap year starting on a
    Saturday; that day is folded into week 53 so every encoded code decodes.

    Args:
        day: Any ``date`` or ``datetime`` (time of day is ignored).

    Returns:
        A 4-character code, e.g. ``"0125"`` for 1 January 2025.

    Example:
        >>> encode_week(date(2025, 1, 5))
        '0225'
    """
    if isinstance(day, datetime):
        day = day.date()
    jan_1 = date(day.year, 1, 1)
    first_weekday = (jan_1.weekday() + 1) % 7  # Python counts from Monday
    day_of_year = day.timetuple().tm_yday
    week = min(math.ceil((day_of_year + first_weekday) / 7), MAX_WEEK)
    return f"{week:02d}{day.year % 100:02d}"


def decode_week(code: str) -> WeekParts:
    """Decode a ``WWYY`` code into its week and four-digit year.

    Raises:
        InvalidWeekCodeError: If ``code`` is not exactly four ASCII digits
            or the week is outside 1–53.
    """
    if not isinstance(code, str) or not _WEEK_CODE.fullmatch(code):
        raise InvalidWeekCodeError(code, "expected exactly four digits (WWYY)")
    week = int(code[:2])
    if not (MIN_WEEK <= week <= MAX_WEEK):
        raise InvalidWeekCodeError(code, f"week {week} is outside {MIN_WEEK}–{MAX_WEEK}")
    return WeekParts(year=MIN_YEAR + int(code[2:]), week=week)


def is_week_code(value: object) -> bool:
    """True if ``value`` decodes as a week code."""
    try:
        decode_week(value)  # type: ignore[arg-type]
    except InvalidWeekCodeError:
        return False
    return True


def week_sort_key(code: str) -> tuple[int, int]:
    """Chronological sort key ``(year, week)`` for a week code."""
    parts = decode_week(code)
    return parts.year, parts.week


def compare_weeks(a: str, b: str) -> int:
    """Compare two week codes chronologically.

    Returns:
        -1 if ``a`` is older than ``b``, 0 if equal, 1 if newer.
    """
    key_a, key_b = week_sort_key(a), week_sort_key(b)
    return (key_a > key_b) - (key_a < key_b)


def sort_weeks_by_recency(values: Iterable[object]) -> list[str]:
    """Return the distinct valid week codes in ``values``, newest first.

    Anything that is not a week code (legacy ``WK12`` labels, blanks,
    non-strings) is dropped.
    """
    codes = {v for v in values if is_week_code(v)}
    return sorted(codes, key=week_sort_key, reverse=True)  # type: ignore[arg-type]


def previous_week(code: str) -> str:
    """Return the code of the week before ``code``.

    Week 1 rolls back to week 52 of the previous year.

    Raises:
        InvalidWeekCodeError: If ``code`` is malformed.
        InvalidInputError: If the previous week falls before ``MIN_YEAR``.
    """
    parts = decode_week(code)
    if parts.week > MIN_WEEK:
        return WeekParts(year=parts.year, week=parts.week - 1).code
    if parts.year - 1 < MIN_YEAR:
        raise InvalidInputError(f"week before {code} falls outside {MIN_YEAR}–{MAX_YEAR}")
    return WeekParts(year=parts.year - 1, week=ROLLOVER_WEEK).code


def format_week_display(code: str) -> str:
    """Human-readable label for a week code, e.g. ``"Week 46, 2025"``."""
    parts = decode_week(code)
    return f"Week {parts.week}, {parts.year}"


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------


def _start_code(from_date: date | datetime | None) -> str:
    day = from_date if from_date is not None else date.today()
    if not (MIN_YEAR <= day.year <= MAX_YEAR):
        raise InvalidInputError(
            f"from_date {day.isoformat()} is outside the supported years {MIN_YEAR}–{MAX_YEAR}"
        )
    return encode_week(day)


def recent_weeks(count: int, from_date: date | datetime | None = None) -> WeekWindow:
    """Return the ``count`` most recent week codes, newest first.

    Args:
        count: Window size, at least 1.
        from_date: Reference day. Defaults to today.

    Returns:
        A WeekWindow of exactly ``count`` strictly descending codes.

    Raises:
        InvalidInputError: If ``count`` is not a positive int, or the window
            would reach back before ``MIN_YEAR``.

    Example:
        >>> list(recent_weeks(3, date(2025, 1, 2)))
        ['0125', '5224', '5124']
    """
    require_int(count, "count", minimum=1)
    code = _start_code(from_date)
    codes = [code]
    for _ in range(count - 1):
        code = previous_week(code)
        codes.append(code)
    return WeekWindow(codes=tuple(codes))


def current_and_older(
    count: int, from_date: date | datetime | None = None
) -> tuple[str, tuple[str, ...]]:
    """Split ``recent_weeks(count)`` into this week and the older backlog."""
    window = recent_weeks(count, from_date)
    return window.current, window.older


def target_weeks(
    max_weeks: int,
    available: Iterable[object],
    from_date: date | datetime | None = None,
    max_lookback: int = 52,
) -> list[str]:
    """Pick the most recent weeks that actually have stock.

    Walks back week by week from the current week and keeps only codes
    present in ``available``. Stops once ``min(max_weeks, len(available))``
    weeks are found or ``max_lookback`` weeks have been checked.

    Args:
        max_weeks: Maximum number of weeks to return.
        available: Week codes seen in the catalog; invalid entries ignored.
        from_date: Reference day. Defaults to today.
        max_lookback: How many calendar weeks to scan before giving up.

    Returns:
        Stocked week codes, newest first.
    """
    require_int(max_weeks, "max_weeks", minimum=0)
    require_int(max_lookback, "max_lookback", minimum=0)
    stocked = set(sort_weeks_by_recency(available))
    needed = min(max_weeks, len(stocked))

    found: list[str] = []
    code = _start_code(from_date)
    for _ in range(max_lookback):
        if len(found) >= needed:
            break
        if code in stocked:
            found.append(code)
        if decode_week(code) == WeekParts(year=MIN_YEAR, week=MIN_WEEK):
            break
        code = previous_week(code)
    return found
