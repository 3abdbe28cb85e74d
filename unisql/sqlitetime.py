"""Parse timestamps stored by SQLite and format them with reference layouts.

Layouts use the reference time ``Mon Jan 2 15:04:05 MST 2006`` notation.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

__all__ = ["parse_time", "format_time", "convert_bytes"]

# Accepts every timestamp shape SQLite stores: date only, date with
# hours and minutes, date with seconds and optional fraction and offset.
_TIME_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})"
    r"(?:[ T](\d{1,2}):(\d{2})"
    r"(?::(\d{2})(?:[.,](\d+))?(?:([+-])(\d{2}):(\d{2}))?)?)?"
)

_MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
_WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Layout elements, longest first so that prefixes resolve correctly.
_TOKENS = [
    "Z07:00:00", "-07:00:00", "Z070000", "-070000",
    "January", "Monday",
    "Z07:00", "-07:00", "Z0700", "-0700",
    "2006", "Jan", "Mon", "MST", "002", "__2", "Z07", "-07",
    "01", "02", "03", "04", "05", "06", "15", "_2", "PM", "pm",
    "1", "2", "3", "4", "5",
]
_GUARDED = {"Jan", "Mon", "MST"}


def parse_time(value: datetime | bytes | str) -> datetime | None:
    """Parse a SQLite timestamp; return ``None`` for an empty string.

    Timestamps without an offset are taken as UTC.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("utf-8", errors="replace")
    if not isinstance(value, str):
        raise TypeError(f"cannot convert type {type(value).__name__} to Time")
    if value == "":
        return None
    m = _TIME_RE.fullmatch(value)
    if m is None:
        raise ValueError("could not parse time")
    year, month, day, hour, minute, second, frac, sign, tzh, tzm = m.groups()
    micro = int(frac[:6].ljust(6, "0")) if frac else 0
    try:
        tz = timezone.utc
        if sign:
            offset = timedelta(hours=int(tzh), minutes=int(tzm))
            tz = timezone(-offset if sign == "-" else offset)
        return datetime(
            int(year), int(month), int(day),
            int(hour or 0), int(minute or 0), int(second or 0),
            micro, tzinfo=tz,
        )
    except ValueError as exc:
        raise ValueError("could not parse time") from exc


def _next_chunk(layout: str, i: int) -> str | None:
    """Return the layout element starting at ``layout[i]``, if any."""
    c = layout[i]
    if c in ".," and i + 1 < len(layout) and layout[i + 1] in "09":
        digit = layout[i + 1]
        j = i + 1
        while j < len(layout) and layout[j] == digit:
            j += 1
        if j >= len(layout) or not layout[j].isdigit():
            return layout[i:j]
        return None
    rest = layout[i:]
    for token in _TOKENS:
        if not rest.startswith(token):
            continue
        after = rest[len(token):]
        if token in _GUARDED and after[:1].islower():
            continue
        if token == "_2" and after.startswith("006"):
            continue
        return token
    return None


def _offset(value: datetime, seconds_too: bool, colon: bool, minutes: bool) -> str:
    total = int(value.utcoffset().total_seconds())
    sign = "-" if total < 0 else "+"
    total = abs(total)
    hh, rem = divmod(total, 3600)
    mm, ss = divmod(rem, 60)
    sep = ":" if colon else ""
    out = f"{sign}{hh:02d}"
    if minutes:
        out += f"{sep}{mm:02d}"
    if seconds_too:
        out += f"{sep}{ss:02d}"
    return out


def _zone_name(value: datetime) -> str:
    offset = value.utcoffset()
    if offset == timedelta(0):
        return "UTC"
    if isinstance(value.tzinfo, timezone):
        return _offset(value, False, False, True).replace(":", "")
    return value.tzname() or _offset(value, False, False, True)


def _render(token: str, value: datetime) -> str:
    hour12 = value.hour % 12 or 12
    yday = value.timetuple().tm_yday
    simple = {
        "2006": f"{value.year:04d}",
        "06": f"{value.year % 100:02d}",
        "January": _MONTHS[value.month - 1],
        "Jan": _MONTHS[value.month - 1][:3],
        "1": str(value.month),
        "01": f"{value.month:02d}",
        "Monday": _WEEKDAYS[value.weekday()],
        "Mon": _WEEKDAYS[value.weekday()][:3],
        "2": str(value.day),
        "02": f"{value.day:02d}",
        "_2": f"{value.day:2d}",
        "002": f"{yday:03d}",
        "__2": f"{yday:3d}",
        "15": f"{value.hour:02d}",
        "3": str(hour12),
        "03": f"{hour12:02d}",
        "4": str(value.minute),
        "04": f"{value.minute:02d}",
        "5": str(value.second),
        "05": f"{value.second:02d}",
        "PM": "PM" if value.hour >= 12 else "AM",
        "pm": "pm" if value.hour >= 12 else "am",
    }
    if token in simple:
        return simple[token]
    if token == "MST":
        return _zone_name(value)
    if token[0] in ".,":
        digits = f"{value.microsecond * 1000:09d}"[: len(token) - 1]
        if token[1] == "9":
            digits = digits.rstrip("0")
            if not digits:
                return ""
        return token[0] + digits
    numeric = token[1:]
    if token[0] == "Z" and value.utcoffset() == timedelta(0):
        return "Z"
    return _offset(
        value,
        seconds_too=numeric in ("070000", "07:00:00"),
        colon=":" in numeric,
        minutes=numeric != "07",
    )


def format_time(value: datetime, layout: str) -> str:
    """Format ``value`` according to a reference-time ``layout``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    parts: list[str] = []
    i = 0
    while i < len(layout):
        token = _next_chunk(layout, i)
        if token is None:
            parts.append(layout[i])
            i += 1
            continue
        parts.append(_render(token, value))
        i += len(token)
    return "".join(parts)


def convert_bytes(buf: bytes | str, tfmt: str) -> str:
    """Return ``buf`` as text, reformatted with ``tfmt`` if it is a timestamp."""
    s = buf.decode("utf-8", errors="replace") if isinstance(buf, (bytes, bytearray)) else buf
    if s.strip():
        try:
            parsed = parse_time(s)
        except ValueError:
            return s
        if parsed is not None:
            return format_time(parsed, tfmt)
    return s