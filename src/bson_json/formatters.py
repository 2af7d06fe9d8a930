#!/usr/bin/python -OOOO
# vim: set fileencoding=utf8 shiftwidth=4 tabstop=4 textwidth=80 foldmethod=marker :
# Copyright (c) 2010, Kou Man Tong. All rights reserved.
# Copyright (c) 2015, Ayun Park. All rights reserved.
# For licensing, see LICENSE file included in the package.
"""
Pure string formatters for the pieces of a value the renderers delegate:
string escaping, base64, UUIDs, dates and numbers.
"""
import math
from binascii import b2a_base64
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, Optional
from uuid import UUID

from bson_json.options import UuidEncoding
from bson_json.types import Binary, BinarySubtype, Number

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Bounds are exclusive. The upper one leaves room for any local UTC offset.
MIN_DATE_MS = -2208988800000  # 1900-01-01T00:00:00Z
MAX_DATE_MS = 253402214400000  # 9999-12-31T00:00:00Z

_ESCAPES: Dict[int, str] = {c: f"\\u{c:04x}" for c in range(0x20)}
_ESCAPES.update({
    ord('"'): '\\"',
    ord("\\"): "\\\\",
    ord("\b"): "\\b",
    ord("\f"): "\\f",
    ord("\n"): "\\n",
    ord("\r"): "\\r",
    ord("\t"): "\\t",
    0x7F: "\\u007f",
})
_ESCAPES_WITH_SLASH = dict(_ESCAPES)
_ESCAPES_WITH_SLASH[ord("/")] = "\\/"

_LEGACY_UUID_CONSTRUCTORS = {
    UuidEncoding.DEFAULT: "LUUID",
    UuidEncoding.JAVA_LEGACY: "JUUID",
    UuidEncoding.CSHARP_LEGACY: "CSUUID",
    UuidEncoding.PYTHON_LEGACY: "PYUUID",
}


def escape_json_string(text: str, escape_slash: bool = False) -> str:
    """
    Escape text for use between double quotes in JSON output.

    escape_slash is set when the text sits between regex delimiters.
    """
    return text.translate(_ESCAPES_WITH_SLASH if escape_slash else _ESCAPES)


def base64_encode(data: bytes) -> str:
    return b2a_base64(data, newline=False).decode("ascii")


def _legacy_uuid(data: bytes, encoding: UuidEncoding) -> UUID:
    if encoding is UuidEncoding.JAVA_LEGACY:
        # Java drivers write each 8-byte half in reverse order.
        return UUID(bytes=data[7::-1] + data[:7:-1])
    if encoding is UuidEncoding.CSHARP_LEGACY:
        return UUID(bytes_le=data)
    return UUID(bytes=data)


def format_uuid(value: Binary, encoding: UuidEncoding) -> str:
    """
    Render a 16 byte UUID binary as a shell constructor, e.g. UUID("...").

    Legacy (subtype 3) values are reordered and labelled according to
    encoding; the standard subtype always uses the RFC 4122 layout.
    """
    if value.subtype not in (BinarySubtype.UUID, BinarySubtype.UUID_LEGACY):
        raise ValueError(f"Binary subtype {value.subtype} is not a UUID subtype")
    if len(value.data) != 16:
        raise ValueError(f"UUID payload must be 16 bytes, got {len(value.data)}")

    if value.subtype == BinarySubtype.UUID:
        return f'UUID("{UUID(bytes=value.data)}")'
    constructor = _LEGACY_UUID_CONSTRUCTORS[encoding]
    return f'{constructor}("{_legacy_uuid(value.data, encoding)}")'


def is_supported_date(millis: int) -> bool:
    return MIN_DATE_MS < millis < MAX_DATE_MS


def format_iso_date(millis: int, local_time: bool = False, with_millis: bool = True) -> str:
    """
    ISO-8601 text for an epoch millisecond value.

    Only defined when is_supported_date(millis); callers check first.
    """
    moment = EPOCH + timedelta(milliseconds=millis)
    timespec = "milliseconds" if with_millis else "seconds"
    if local_time:
        return moment.astimezone().isoformat(timespec=timespec)
    return moment.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


def format_number(value: Number) -> Optional[str]:
    """
    Decimal text with 16 significant digits, or NaN / Infinity / -Infinity.

    Returns None when the value has no double representation.
    """
    if isinstance(value, Decimal) and value.is_nan():
        # signaling NaNs refuse float conversion
        return "NaN"
    if isinstance(value, float):
        number = value
    else:
        try:
            number = float(value)
        except OverflowError:
            return None
        source_infinite = isinstance(value, Decimal) and value.is_infinite()
        if math.isinf(number) and not source_infinite:
            return None

    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    return "%.16g" % number
