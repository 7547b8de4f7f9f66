# backend/studio_booking/services/slots/rules.py
"""
Schedule rule resolution.

A rule is a recurring weekly half-open interval [start_time, end_time)
tagged with a slot type. Several rules may cover the same minute:
- any AVAILABLE rule wins outright
- otherwise any PENDING_CONFIRM rule wins
- otherwise (nothing, or only UNAVAILABLE) → UNAVAILABLE

Rules are duck-typed: anything with day_of_week, start_time, end_time
and slot_type attributes (ORM rows in production, transient rows in tests).
"""

from collections import defaultdict
from typing import Iterable

from ...models.enums import SlotType
from .timeutils import time_str_to_minutes


BOOKABLE_TYPES = (SlotType.AVAILABLE, SlotType.PENDING_CONFIRM)


def rules_for_day(rules: Iterable, day_of_week: int) -> list:
    return [r for r in rules if r.day_of_week == day_of_week]


def _covers(rule, minute: int) -> bool:
    return time_str_to_minutes(rule.start_time) <= minute < time_str_to_minutes(rule.end_time)


def resolve_slot_type(rules: Iterable, day_of_week: int, minute: int) -> SlotType:
    """Base classification of `minute` (0..1439) on `day_of_week` (Sunday=0)."""
    result = SlotType.UNAVAILABLE
    for rule in rules_for_day(rules, day_of_week):
        if not _covers(rule, minute):
            continue
        if rule.slot_type == SlotType.AVAILABLE:
            return SlotType.AVAILABLE
        if rule.slot_type == SlotType.PENDING_CONFIRM:
            result = SlotType.PENDING_CONFIRM
    return result


def is_bookable(rules: Iterable, day_of_week: int, minute: int) -> bool:
    """True when some AVAILABLE or PENDING_CONFIRM rule covers the minute."""
    return any(
        _covers(rule, minute) and rule.slot_type in BOOKABLE_TYPES
        for rule in rules_for_day(rules, day_of_week)
    )


def find_rule_overlaps(rules: Iterable) -> dict[int, list[tuple]]:
    """
    Overlapping same-day rules, per day_of_week.

    Overlap is a warning for the admin, never a write-time error.
    Rules are swept by start time; each rule is paired with every
    earlier rule still open at its start.
    """
    by_day: dict[int, list] = defaultdict(list)
    for rule in rules:
        by_day[rule.day_of_week].append(rule)

    overlaps: dict[int, list[tuple]] = {}
    for day, day_rules in sorted(by_day.items()):
        ordered = sorted(day_rules, key=lambda r: time_str_to_minutes(r.start_time))
        pairs = []
        open_rules: list = []
        for rule in ordered:
            start = time_str_to_minutes(rule.start_time)
            open_rules = [r for r in open_rules if time_str_to_minutes(r.end_time) > start]
            pairs.extend((earlier, rule) for earlier in open_rules)
            open_rules.append(rule)
        if pairs:
            overlaps[day] = pairs
    return overlaps
