#!/usr/bin/python -OOOO
# vim: set fileencoding=utf8 shiftwidth=4 tabstop=4 textwidth=80 foldmethod=marker :
# Copyright (c) 2010, Kou Man Tong. All rights reserved.
# Copyright (c) 2015, Ayun Park. All rights reserved.
# For licensing, see LICENSE file included in the package.
"""
Typed document tree consumed by the renderers.

Every value is an immutable instance of one TypedValue subclass, tagged with
its BSON type code. Documents keep their fields in order and may hold
duplicate names.
"""
from binascii import b2a_hex
from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import ClassVar, Iterator, Optional, Tuple, Union


class BSONType(IntEnum):
    DOUBLE = 0x01
    STRING = 0x02
    OBJECT = 0x03
    ARRAY = 0x04
    BINARY = 0x05
    UNDEFINED = 0x06
    OBJECT_ID = 0x07
    BOOLEAN = 0x08
    DATE = 0x09
    NULL = 0x0A
    REGEX = 0x0B
    DBREF = 0x0C
    CODE = 0x0D
    SYMBOL = 0x0E
    CODE_W_SCOPE = 0x0F
    INT32 = 0x10
    TIMESTAMP = 0x11
    INT64 = 0x12
    DECIMAL128 = 0x13
    MIN_KEY = -1
    MAX_KEY = 0x7F


class BinarySubtype(IntEnum):
    GENERIC = 0x00
    FUNCTION = 0x01
    BINARY_OLD = 0x02
    UUID_LEGACY = 0x03
    UUID = 0x04
    MD5 = 0x05
    ENCRYPTED = 0x06
    USER_DEFINED = 0x80


UUID_SUBTYPES = (BinarySubtype.UUID_LEGACY, BinarySubtype.UUID)

Number = Union[int, float, Decimal]


class TypedValue:
    """Base of every value variant."""
    bson_type: ClassVar[int]


Field = Tuple[str, TypedValue]


@dataclass(frozen=True)
class Document:
    fields: Tuple[Field, ...] = ()

    @classmethod
    def of(cls, *pairs: Field) -> "Document":
        return cls(tuple(pairs))

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def is_empty(self) -> bool:
        return not self.fields

    def get(self, name: str) -> Optional[TypedValue]:
        """First value stored under name, or None."""
        for key, value in self.fields:
            if key == name:
                return value
        return None

    def keys(self) -> Tuple[str, ...]:
        return tuple(key for key, _ in self.fields)


@dataclass(frozen=True)
class Double(TypedValue):
    bson_type = BSONType.DOUBLE
    value: Number


@dataclass(frozen=True)
class Int32(TypedValue):
    bson_type = BSONType.INT32
    value: int


@dataclass(frozen=True)
class Int64(TypedValue):
    bson_type = BSONType.INT64
    value: int


@dataclass(frozen=True)
class Boolean(TypedValue):
    bson_type = BSONType.BOOLEAN
    value: bool


@dataclass(frozen=True)
class String(TypedValue):
    bson_type = BSONType.STRING
    value: str


@dataclass(frozen=True)
class Symbol(TypedValue):
    bson_type = BSONType.SYMBOL
    value: str


@dataclass(frozen=True)
class Object(TypedValue):
    bson_type = BSONType.OBJECT
    document: Document = field(default_factory=Document)


@dataclass(frozen=True)
class Array(TypedValue):
    bson_type = BSONType.ARRAY
    document: Document = field(default_factory=Document)

    @classmethod
    def of(cls, *values: TypedValue) -> "Array":
        return cls(Document(tuple((str(i), value) for i, value in enumerate(values))))


@dataclass(frozen=True)
class Binary(TypedValue):
    bson_type = BSONType.BINARY
    subtype: int
    data: bytes


@dataclass(frozen=True)
class ObjectId(TypedValue):
    bson_type = BSONType.OBJECT_ID
    oid: bytes

    def __post_init__(self) -> None:
        if len(self.oid) != 12:
            raise ValueError(f"ObjectId must be 12 bytes, got {len(self.oid)}")

    @classmethod
    def from_hex(cls, text: str) -> "ObjectId":
        return cls(bytes.fromhex(text))

    @property
    def hex(self) -> str:
        return b2a_hex(self.oid).decode("ascii")


@dataclass(frozen=True)
class Date(TypedValue):
    """Milliseconds since the Unix epoch, UTC."""
    bson_type = BSONType.DATE
    millis: int


@dataclass(frozen=True)
class Null(TypedValue):
    bson_type = BSONType.NULL


@dataclass(frozen=True)
class Undefined(TypedValue):
    bson_type = BSONType.UNDEFINED


@dataclass(frozen=True)
class Regex(TypedValue):
    bson_type = BSONType.REGEX
    pattern: str
    flags: str = ""


@dataclass(frozen=True)
class DBRef(TypedValue):
    bson_type = BSONType.DBREF
    namespace: str
    oid: ObjectId


@dataclass(frozen=True)
class Code(TypedValue):
    bson_type = BSONType.CODE
    source: str


@dataclass(frozen=True)
class CodeWithScope(TypedValue):
    bson_type = BSONType.CODE_W_SCOPE
    source: str
    scope: Document = field(default_factory=Document)


@dataclass(frozen=True)
class Timestamp(TypedValue):
    bson_type = BSONType.TIMESTAMP
    seconds: int
    increment: int


@dataclass(frozen=True)
class MinKey(TypedValue):
    bson_type = BSONType.MIN_KEY


@dataclass(frozen=True)
class MaxKey(TypedValue):
    bson_type = BSONType.MAX_KEY


@dataclass(frozen=True)
class Unsupported(TypedValue):
    """A decoded value whose type has no model here (e.g. Decimal128)."""
    type_code: int
    payload: bytes = b""

    @property
    def bson_type(self) -> int:  # type: ignore[override]
        return self.type_code


__all__ = [
    "BSONType", "BinarySubtype", "UUID_SUBTYPES", "Number", "TypedValue", "Field", "Document",
    "Double", "Int32", "Int64", "Boolean", "String", "Symbol", "Object", "Array", "Binary",
    "ObjectId", "Date", "Null", "Undefined", "Regex", "DBRef", "Code", "CodeWithScope",
    "Timestamp", "MinKey", "MaxKey", "Unsupported",
]
