#!/usr/bin/python -OOOO
# vim: set fileencoding=utf8 shiftwidth=4 tabstop=4 textwidth=80 foldmethod=marker :
# Copyright (c) 2010, Kou Man Tong. All rights reserved.
# Copyright (c) 2015, Ayun Park. All rights reserved.
# For licensing, see LICENSE file included in the package.
"""
Conversions into the typed document tree: from raw BSON bytes and from plain
Python values.
"""
import calendar
import logging
import re
import struct
import warnings
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union
from uuid import UUID

from bson_json.types import (Array, Binary, BinarySubtype, Boolean, Code, CodeWithScope,
                             Date, DBRef, Document, Double, Field, Int32, Int64, MaxKey,
                             MinKey, Null, Object, ObjectId, Regex, String, Symbol,
                             Timestamp, TypedValue, Undefined, Unsupported)

logger = logging.getLogger(__name__)

Key = Union[str, bytes]
OnUnknown = Optional[Callable[[Any], Any]]

INT32_MIN = -0x80000000
INT32_MAX = 0x7FFFFFFF
INT64_MIN = -0x8000000000000000
INT64_MAX = 0x7FFFFFFFFFFFFFFF

# re flags that have a BSON regex option letter
_REGEX_FLAG_LETTERS = (
    (re.IGNORECASE, "i"),
    (re.LOCALE, "l"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.UNICODE, "u"),
    (re.VERBOSE, "x"),
)

_double_struct = struct.Struct("<d")
_int_struct = struct.Struct("<i")
_timestamp_struct = struct.Struct("<II")
_byte_struct = struct.Struct("<B")
_long_struct = struct.Struct("<q")
_int_char_struct = struct.Struct("<iB")


class BSONDecodeError(ValueError):
    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


class UnknownSerializerError(ValueError):
    def __init__(self, key: Key, value: Any):
        super().__init__(f"Unable to serialize: key '{key!r}' value: {value} type: {type(value)}")


class MissingTimezoneWarning(RuntimeWarning):
    def __init__(self, *args: object):
        if len(args) < 1:
            args = ("Input datetime object has no tzinfo, assuming UTC.",)
        super().__init__(*args)


def decode_cstring(data: bytes, base: int) -> Tuple[int, str]:
    try:
        end = data.index(0, base)
    except ValueError as e:
        raise BSONDecodeError("unterminated cstring", base) from e
    return end + 1, data[base:end].decode("utf-8", errors="surrogateescape")


def decode_string(data: bytes, base: int) -> Tuple[int, str]:
    length = _int_struct.unpack_from(data, base)[0]
    if length < 1 or base + 4 + length > len(data):
        raise BSONDecodeError(f"invalid string length {length}", base)
    value = data[base + 4:base + 4 + length - 1].decode("utf-8", errors="surrogateescape")
    return base + 4 + length, value


def decode_value(element_type: int, data: bytes, base: int) -> Tuple[int, TypedValue]:
    value: TypedValue
    if element_type == 0x01:  # double
        value = Double(_double_struct.unpack_from(data, base)[0])
        base += 8
    elif element_type == 0x02:  # string
        base, text = decode_string(data, base)
        value = String(text)
    elif element_type == 0x03:  # document
        base, document = decode_document(data, base)
        value = Object(document)
    elif element_type == 0x04:  # array
        base, document = decode_document(data, base)
        value = Array(document)
    elif element_type == 0x05:  # binary
        length, binary_subtype = _int_char_struct.unpack_from(data, base)
        if binary_subtype == BinarySubtype.BINARY_OLD and length >= 4:
            # old binary carries its own inner length prefix
            value = Binary(binary_subtype, data[base + 9:base + 5 + length])
        else:
            value = Binary(binary_subtype, data[base + 5:base + 5 + length])
        base += 5 + length
    elif element_type == 0x06:  # undefined
        value = Undefined()
    elif element_type == 0x07:  # object_id
        value = ObjectId(data[base:base + 12])
        base += 12
    elif element_type == 0x08:  # boolean
        value = Boolean(bool(_byte_struct.unpack_from(data, base)[0]))
        base += 1
    elif element_type == 0x09:  # UTCdatetime
        value = Date(_long_struct.unpack_from(data, base)[0])
        base += 8
    elif element_type == 0x0A:  # none
        value = Null()
    elif element_type == 0x0B:  # regex
        base, pattern = decode_cstring(data, base)
        base, flags = decode_cstring(data, base)
        value = Regex(pattern, flags)
    elif element_type == 0x0C:  # DBPointer
        base, namespace = decode_string(data, base)
        value = DBRef(namespace, ObjectId(data[base:base + 12]))
        base += 12
    elif element_type in (0x0D, 0x0E):  # code, symbol
        base, text = decode_string(data, base)
        value = Code(text) if element_type == 0x0D else Symbol(text)
    elif element_type == 0x0F:  # code w/ scope
        total = _int_struct.unpack_from(data, base)[0]
        _, source = decode_string(data, base + 4)
        scope_base = base + 4 + 4 + _int_struct.unpack_from(data, base + 4)[0]
        _, scope = decode_document(data, scope_base)
        value = CodeWithScope(source, scope)
        base += total
    elif element_type == 0x10:  # int32
        value = Int32(_int_struct.unpack_from(data, base)[0])
        base += 4
    elif element_type == 0x11:  # timestamp
        increment, seconds = _timestamp_struct.unpack_from(data, base)
        value = Timestamp(seconds, increment)
        base += 8
    elif element_type == 0x12:  # int64
        value = Int64(_long_struct.unpack_from(data, base)[0])
        base += 8
    elif element_type == 0x13:  # decimal128
        value = Unsupported(element_type, data[base:base + 16])
        base += 16
    elif element_type == 0xFF:
        value = MinKey()
    elif element_type == 0x7F:
        value = MaxKey()
    else:
        raise BSONDecodeError(f"Unknown element type: 0x{element_type:02x}", base)
    return base, value


def decode_document(data: bytes, base: int) -> Tuple[int, Document]:
    """
    Decode the document starting at data[base].

    Arrays come through here as well; their field names are kept as stored.
    """
    if base + 5 > len(data):
        raise BSONDecodeError("truncated document", base)
    length = _int_struct.unpack_from(data, base)[0]
    end_point = base + length
    if length < 5 or end_point > len(data):
        raise BSONDecodeError(f"invalid document length {length}", base)
    if data[end_point - 1] != 0:
        raise BSONDecodeError("missing null-terminator in document", end_point - 1)
    base += 4

    fields: List[Field] = []
    while base < end_point - 1:
        element_type = _byte_struct.unpack_from(data, base)[0]
        base, name = decode_cstring(data, base + 1)
        try:
            base, value = decode_value(element_type, data, base)
        except struct.error as e:
            raise BSONDecodeError(f"truncated value for field {name!r}", base) from e
        fields.append((name, value))

    if base != end_point - 1:
        raise BSONDecodeError("document elements overrun the declared length", base)
    return end_point, Document(tuple(fields))


def loads(data: bytes) -> Document:
    """
    Given BSON bytes, outputs a Document.
    """
    end_point, document = decode_document(data, 0)
    if end_point != len(data):
        logger.debug("Ignoring %d trailing bytes after document", len(data) - end_point)
    return document


def datetime_to_millis(value: datetime) -> int:
    if value.tzinfo is None:
        warnings.warn(MissingTimezoneWarning(), None, 4)
    return int(round(calendar.timegm(value.utctimetuple()) * 1000 +
                     (value.microsecond / 1000.0)))


def regex_flags(flags: int) -> str:
    return "".join(letter for flag, letter in _REGEX_FLAG_LETTERS if flags & flag)


def to_value(name: Key, value: Any, on_unknown: OnUnknown = None) -> TypedValue:
    if isinstance(value, TypedValue):
        return value
    elif isinstance(value, bool):
        return Boolean(value)
    elif isinstance(value, int):
        if INT32_MIN <= value <= INT32_MAX:
            return Int32(value)
        if INT64_MIN <= value <= INT64_MAX:
            return Int64(value)
        raise ValueError(f"BSON format supports only int value <= {INT64_MAX}")
    elif isinstance(value, float):
        return Double(value)
    elif isinstance(value, str):
        return String(value)
    elif isinstance(value, bytes):
        return Binary(BinarySubtype.GENERIC, value)
    elif isinstance(value, UUID):
        return Binary(BinarySubtype.UUID, value.bytes)
    elif isinstance(value, datetime):
        return Date(datetime_to_millis(value))
    elif value is None:
        return Null()
    elif isinstance(value, Document):
        return Object(value)
    elif isinstance(value, Mapping):
        return Object(to_document(value, on_unknown))
    elif isinstance(value, (list, tuple)):
        return Array(Document(tuple(
            (str(i), to_value(str(i), item, on_unknown)) for i, item in enumerate(value))))
    elif isinstance(value, re.Pattern):
        pattern = value.pattern
        if isinstance(pattern, bytes):
            pattern = pattern.decode("utf-8")
        return Regex(pattern, regex_flags(value.flags))
    elif isinstance(value, Decimal):
        return Double(value)
    elif on_unknown is not None:
        return to_value(name, on_unknown(value), on_unknown)
    raise UnknownSerializerError(name, value)


def to_document(obj: Union[Document, Mapping[Key, Any]], on_unknown: OnUnknown = None) -> Document:
    """
    Given a mapping, outputs a Document in the mapping's key order.

    on_unknown is an optional function which converts values of unsupported
    types into something that can be converted.
    """
    if isinstance(obj, Document):
        return obj
    fields = []
    for key, value in obj.items():
        name = key.decode("utf-8") if isinstance(key, bytes) else str(key)
        fields.append((name, to_value(name, value, on_unknown)))
    return Document(tuple(fields))
