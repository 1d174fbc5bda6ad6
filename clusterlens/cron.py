"""Parsing of standard five-field cron schedules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from zoneinfo import ZoneInfo

_MONTHS = {n: i for i, n in enumerate(
    ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"], 1)}
_DAYS = {n: i for i, n in enumerate(["sun", "mon", "tue", "wed", "thu", "fri", "sat"])}

_FIELDS = (
    (0, 59, {}),
    (0, 23, {}),
    (1, 31, {}),
    (1, 12, _MONTHS),
    (0, 6, _DAYS),
)

_DESCRIPTORS = {
    "@yearly": "0 0 1 1 *",
    "@annually": "0 0 1 1 *",
    "@monthly": "0 0 1 * *",
    "@weekly": "0 0 * * 0",
    "@daily": "0 0 * * *",
    "@midnight": "0 0 * * *",
    "@hourly": "0 * * * *",
}

_UNITS = {"ns": 1e-9, "us": 1e-6, "µs": 1e-6, "ms": 1e-3, "s": 1.0, "m": 60.0, "h": 3600.0}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


class CronSyntaxError(ValueError):
    """Raised for a schedule that cannot be parsed."""


@dataclass(frozen=True)
class Schedule:
    """The sets of times a schedule fires at, or a fixed interval."""

    minutes: frozenset[int] = frozenset()
    hours: frozenset[int] = frozenset()
    days_of_month: frozenset[int] = frozenset()
    months: frozenset[int] = frozenset()
    days_of_week: frozenset[int] = frozenset()
    location: str | None = None
    every: timedelta | None = None


def _parse_int(text: str, names: dict[str, int]) -> int:
    if text.lower() in names:
        return names[text.lower()]
    if not re.fullmatch(r"[+-]?\d+", text):
        raise CronSyntaxError(f"failed to parse int from {text}")
    value = int(text)
    if value < 0:
        raise CronSyntaxError(f"negative number ({value}) not allowed: {text}")
    return value


def _parse_range(expr: str, lo: int, hi: int, names: dict[str, int]) -> set[int]:
    range_and_step = expr.split("/")
    low_high = range_and_step[0].split("-")
    single = len(low_high) == 1
    if low_high[0] in ("*", "?"):
        start, end = lo, hi
    else:
        start = _parse_int(low_high[0], names)
        if len(low_high) == 1:
            end = start
        elif len(low_high) == 2:
            end = _parse_int(low_high[1], names)
        else:
            raise CronSyntaxError(f"too many hyphens: {expr}")
    if len(range_and_step) == 1:
        step = 1
    elif len(range_and_step) == 2:
        step = _parse_int(range_and_step[1], {})
        if single:
            end = hi
    else:
        raise CronSyntaxError(f"too many slashes: {expr}")
    if start < lo:
        raise CronSyntaxError(f"beginning of range ({start}) below minimum ({lo}): {expr}")
    if end > hi:
        raise CronSyntaxError(f"end of range ({end}) above maximum ({hi}): {expr}")
    if start > end:
        raise CronSyntaxError(f"beginning of range ({start}) beyond end of range ({end}): {expr}")
    if step == 0:
        raise CronSyntaxError(f"step of range should be a positive number: {expr}")
    return set(range(start, end + 1, step))


def _parse_field(field: str, lo: int, hi: int, names: dict[str, int]) -> frozenset[int]:
    values: set[int] = set()
    for part in field.split(","):
        values |= _parse_range(part, lo, hi, names)
    return frozenset(values)


def _parse_duration(text: str) -> timedelta:
    body = text[1:] if text[:1] in "+-" else text
    if not body or body == "0":
        if body == "0":
            return timedelta(0)
        raise CronSyntaxError(f"failed to parse duration {text}")
    pos, seconds = 0, 0.0
    while pos < len(body):
        m = _DURATION_PART.match(body, pos)
        if not m:
            raise CronSyntaxError(f"failed to parse duration {text}")
        seconds += float(m.group(1)) * _UNITS[m.group(2)]
        pos = m.end()
    return timedelta(seconds=-seconds if text.startswith("-") else seconds)


def parse_standard(spec: str) -> Schedule:
    """Parse a five-field schedule, a descriptor such as @daily, or @every <duration>."""
    if not spec:
        raise CronSyntaxError("empty spec string")
    location = None
    if spec.startswith(("TZ=", "CRON_TZ=")):
        head, _, spec = spec.partition(" ")
        location = head.split("=", 1)[1]
        try:
            ZoneInfo(location)
        except Exception as exc:
            raise CronSyntaxError(f"provided bad location {location}: {exc}") from exc
        spec = spec.strip()
    if spec.startswith("@"):
        if spec.startswith("@every "):
            interval = _parse_duration(spec[len("@every "):].strip())
            whole = max(int(interval.total_seconds()), 1)
            return Schedule(location=location, every=timedelta(seconds=whole))
        if spec not in _DESCRIPTORS:
            raise CronSyntaxError(f"unrecognized descriptor: {spec}")
        spec = _DESCRIPTORS[spec]
    fields = spec.split()
    if len(fields) != 5:
        raise CronSyntaxError(f"expected exactly 5 fields, found {len(fields)}: {fields}")
    parsed = [_parse_field(f, lo, hi, names) for f, (lo, hi, names) in zip(fields, _FIELDS)]
    return Schedule(*parsed, location=location)


def check_cron_schedule_is_valid(schedule: str) -> bool:
    """Return True for a valid schedule; raise CronSyntaxError otherwise."""
    parse_standard(schedule)
    return True