"""Bookable slot generation from a doctor's working window."""

from datetime import date, datetime, time, timedelta
from typing import NamedTuple

from clinic_portal.core import config

LUNCH_BREAK = (config.LUNCH_BREAK_START, config.LUNCH_BREAK_END)


class Slot(NamedTuple):
    start_time: time
    end_time: time


def overlaps(start: time, end: time, blackout: tuple[time, time]) -> bool:
    blackout_start, blackout_end = blackout
    return not (end <= blackout_start or start >= blackout_end)


def generate_slots(
    window_start: time,
    window_end: time,
    slot_duration: timedelta = timedelta(minutes=config.SLOT_DURATION_MINUTES),
    blackout: tuple[time, time] | None = None,
) -> list[Slot]:
    """Split a working window into consecutive fixed-length slots.

    A trailing remainder shorter than ``slot_duration`` is dropped, and any
    slot overlapping ``blackout`` (half-open) is skipped. Returns an empty list
    for an empty or inverted window.
    """
    if window_start >= window_end or slot_duration <= timedelta(0):
        return []

    # Arithmetic on a fixed anchor day; time objects do not support timedelta.
    anchor = date.min
    current = datetime.combine(anchor, window_start)
    boundary = datetime.combine(anchor, window_end)

    slots: list[Slot] = []
    while current + slot_duration <= boundary:
        candidate_end = current + slot_duration
        slot = Slot(current.time(), candidate_end.time())
        if blackout is None or not overlaps(slot.start_time, slot.end_time, blackout):
            slots.append(slot)
        current = candidate_end

    return slots


def generate_window_slots(window, blackout: tuple[time, time] | None = LUNCH_BREAK) -> list[Slot]:
    return generate_slots(window.start_time, window.end_time, blackout=blackout)


def find_slot(window, start_time: time) -> Slot | None:
    for slot in generate_window_slots(window):
        if slot.start_time == start_time:
            return slot
    return None
