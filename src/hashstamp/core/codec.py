"""Stamp grammar encoding and parsing.

Two layouts are supported::

    0:date:resource:suffix                    (version 0, implicit bits)
    1:bits:date:resource:ext:rand:counter     (version 1)

Fields are joined with ``:`` and the joined text is exactly what gets hashed,
so nothing here trims or re-encodes field contents.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum

from hashstamp.core.exceptions import InvalidArgumentError, MalformedStampError

DELIMITER = ":"
DATE_LENGTHS = (6, 10, 12)  # YYMMDD[hhmm[ss]]
_FIELD_COUNTS = {0: 4, 1: 7}


class StampVersion(IntEnum):
    V0 = 0
    V1 = 1


class DatePrecision(str, Enum):
    DAY = "day"
    SECOND = "second"


_DATE_FORMATS = {
    DatePrecision.DAY: "%y%m%d",
    DatePrecision.SECOND: "%y%m%d%H%M%S",
}


def _is_decimal(text: str) -> bool:
    return text.isascii() and text.isdigit()


def format_stamp_date(timestamp: datetime, precision: DatePrecision = DatePrecision.DAY) -> str:
    """Return the fixed-width ``YYMMDD[hhmmss]`` form of ``timestamp``."""
    return timestamp.strftime(_DATE_FORMATS[DatePrecision(precision)])


def counter_bounds(width_bits: int) -> tuple[int, int]:
    """Return the ``(min, max)`` values of a signed counter of ``width_bits``."""
    half = 1 << (width_bits - 1)
    return -half, half - 1


def encode_counter_bytes(value: int, width_bits: int = 32) -> bytes:
    """Return the little-endian two's complement bytes of ``value``."""
    try:
        return value.to_bytes(width_bits // 8, "little", signed=True)
    except OverflowError:
        raise InvalidArgumentError(
            "Counter does not fit in the configured width",
            {"value": value, "width_bits": width_bits},
        ) from None


def encode_counter(value: int, width_bits: int = 32) -> str:
    """Return the base-64 text of the raw counter bytes."""
    return base64.b64encode(encode_counter_bytes(value, width_bits)).decode("ascii")


def build_prefix(
    version: StampVersion | int,
    resource: str,
    date_text: str,
    bits: int | None = None,
) -> str:
    """Return the fixed leading part of a stamp, ending with a delimiter.

    Version 0 yields ``0:date:resource:`` and version 1 yields
    ``1:bits:date:resource::`` (empty extension field included).
    """
    version = StampVersion(version)
    if version is StampVersion.V0:
        return DELIMITER.join(("0", date_text, resource, ""))
    if bits is None:
        raise InvalidArgumentError("Version 1 stamps need a bit count")
    return DELIMITER.join(("1", str(bits), date_text, resource, "", ""))


@dataclass(frozen=True)
class Stamp:
    """A parsed stamp. ``text`` is the exact string that was hashed."""

    version: StampVersion
    date: str
    resource: str
    suffix: str
    text: str
    bits: int | None = None
    extension: str = ""
    counter: str = ""

    @property
    def rand(self) -> str:
        return self.suffix

    def fields(self) -> list[str]:
        return self.text.split(DELIMITER)

    def to_text(self) -> str:
        return DELIMITER.join(self.fields())


def parse_stamp(text: str) -> Stamp:
    """Split ``text`` into its fields.

    Raises:
        MalformedStampError: If the version is unknown, the field count is
            wrong, or the bits/date fields are not decimal.
    """
    if not isinstance(text, str):
        raise MalformedStampError("Stamp must be text", {"type": type(text).__name__})
    fields = text.split(DELIMITER)
    head = fields[0]
    if not _is_decimal(head) or int(head) not in _FIELD_COUNTS:
        raise MalformedStampError("Unsupported stamp version", {"version": head[:8]})
    version = StampVersion(int(head))
    expected = _FIELD_COUNTS[version]
    if len(fields) != expected:
        raise MalformedStampError(
            "Wrong number of stamp fields",
            {"version": int(version), "expected": expected, "found": len(fields)},
        )

    if version is StampVersion.V0:
        _, date, resource, suffix = fields
        bits = None
        extension = counter = ""
    else:
        _, bits_text, date, resource, extension, suffix, counter = fields
        if not _is_decimal(bits_text):
            raise MalformedStampError("Bits field is not a decimal number", {"bits": bits_text[:8]})
        bits = int(bits_text)

    if not _is_decimal(date) or len(date) not in DATE_LENGTHS:
        raise MalformedStampError("Date field must be YYMMDD[hhmm[ss]]", {"date": date[:16]})

    return Stamp(
        version=version,
        date=date,
        resource=resource,
        suffix=suffix,
        text=text,
        bits=bits,
        extension=extension,
        counter=counter,
    )
