# barbershop/slots.py
"""
Slot grid arithmetic for one business day.

Everything here is pure: no store access, no clock. Times of day are
``datetime.time`` values on the same calendar day.
"""

from datetime import date, time
from typing import Iterable, List, Optional, Sequence, Tuple

Interval = Tuple[time, time]

_MINUTES_PER_DAY = 24 * 60


def _to_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def _from_minutes(total: int) -> time:
    return time(total // 60, total % 60)


def generate_daily_slots(open_time: time, close_time: time, interval_minutes: int) -> List[time]:
    """Start times from ``open_time`` every ``interval_minutes``, strictly before ``close_time``."""
    slots = []
    current = _to_minutes(open_time)
    end = _to_minutes(close_time)
    while current < end:
        slots.append(_from_minutes(current))
        current += interval_minutes
    return slots


def compute_end_time(start: time, duration_minutes: int) -> time:
    """
    ``start`` plus ``duration_minutes`` with the usual 60-minute carry.

    Assumes the result stays on the same day; anything past midnight is
    clamped to 23:59.
    """
    total = _to_minutes(start) + duration_minutes
    if total >= _MINUTES_PER_DAY:
        return time(23, 59)
    return _from_minutes(total)


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    # half-open intervals: [a_start, a_end) and [b_start, b_end)
    return a_start < b_end and b_start < a_end


def filter_available(
    all_slots: Sequence[time],
    occupied: Iterable[Interval],
    *,
    mode: str = "start",
    interval_minutes: Optional[int] = None,
) -> List[time]:
    """
    Drop the slots already taken by ``occupied`` (start, end) pairs.

    ``mode="start"`` only rejects a slot whose start equals an occupied
    start. ``mode="overlap"`` treats each slot as ``[s, s + interval)`` and
    rejects it when it intersects any occupied interval.
    """
    taken = list(occupied)
    if not taken:
        return list(all_slots)

    if mode == "overlap":
        if not interval_minutes:
            raise ValueError("interval_minutes is required for overlap mode")
        available = []
        for slot in all_slots:
            slot_end = compute_end_time(slot, interval_minutes)
            if not any(overlaps(slot, slot_end, start, end) for start, end in taken):
                available.append(slot)
        return available

    taken_starts = {start.replace(second=0, microsecond=0) for start, _ in taken}
    return [slot for slot in all_slots if slot not in taken_starts]


def is_open_day(day: date, closed_weekdays: Iterable[int]) -> bool:
    return day.weekday() not in set(closed_weekdays)


def format_slot(t: time) -> str:
    return t.strftime("%H:%M")
