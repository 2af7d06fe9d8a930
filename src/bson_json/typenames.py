#!/usr/bin/python -OOOO
# vim: set fileencoding=utf8 shiftwidth=4 tabstop=4 textwidth=80 foldmethod=marker :
# Copyright (c) 2010, Kou Man Tong. All rights reserved.
# Copyright (c) 2015, Ayun Park. All rights reserved.
# For licensing, see LICENSE file included in the package.
"""
Display labels and classification helpers for BSON types.
"""
from typing import Optional

from bson_json.options import UuidEncoding
from bson_json.types import (Array, Binary, BinarySubtype, BSONType, Object,
                             TypedValue, UUID_SUBTYPES)

UNSUPPORTED_TYPE_NAME = "Type is not supported"

TYPE_NAMES = {
    BSONType.DOUBLE: "Double",
    BSONType.STRING: "String",
    BSONType.OBJECT: "Object",
    BSONType.ARRAY: "Array",
    BSONType.UNDEFINED: "Undefined",
    BSONType.OBJECT_ID: "ObjectId",
    BSONType.BOOLEAN: "Boolean",
    BSONType.DATE: "Date",
    BSONType.NULL: "Null",
    BSONType.REGEX: "Regular Expression",
    BSONType.DBREF: "DBRef",
    BSONType.CODE: "Code",
    BSONType.SYMBOL: "Symbol",
    BSONType.CODE_W_SCOPE: "CodeWScope",
    BSONType.INT32: "Int32",
    BSONType.TIMESTAMP: "Timestamp",
    BSONType.INT64: "Int64",
}

LEGACY_UUID_NAMES = {
    UuidEncoding.DEFAULT: "Legacy UUID",
    UuidEncoding.JAVA_LEGACY: "Java UUID (Legacy)",
    UuidEncoding.CSHARP_LEGACY: ".NET UUID (Legacy)",
    UuidEncoding.PYTHON_LEGACY: "Python UUID (Legacy)",
}

SIMPLE_TYPES = frozenset([
    BSONType.DOUBLE,
    BSONType.INT32,
    BSONType.INT64,
    BSONType.STRING,
    BSONType.BOOLEAN,
    BSONType.DATE,
    BSONType.OBJECT_ID,
])


def type_name(bson_type: int, binary_subtype: Optional[int] = None,
              uuid_encoding: UuidEncoding = UuidEncoding.DEFAULT) -> str:
    if bson_type == BSONType.BINARY:
        if binary_subtype == BinarySubtype.UUID:
            return "UUID"
        if binary_subtype == BinarySubtype.UUID_LEGACY:
            return LEGACY_UUID_NAMES.get(uuid_encoding, "Legacy UUID")
        return "Binary"
    return TYPE_NAMES.get(bson_type, UNSUPPORTED_TYPE_NAME)


def value_type_name(value: TypedValue,
                    uuid_encoding: UuidEncoding = UuidEncoding.DEFAULT) -> str:
    subtype = value.subtype if isinstance(value, Binary) else None
    return type_name(value.bson_type, subtype, uuid_encoding)


def is_document(value: TypedValue) -> bool:
    return isinstance(value, (Object, Array))


def is_array(value: TypedValue) -> bool:
    return isinstance(value, Array)


def is_simple_type(bson_type: int) -> bool:
    return bson_type in SIMPLE_TYPES


def is_uuid_type(bson_type: int, binary_subtype: Optional[int]) -> bool:
    return bson_type == BSONType.BINARY and binary_subtype in UUID_SUBTYPES


def is_uuid_value(value: TypedValue) -> bool:
    return isinstance(value, Binary) and value.subtype in UUID_SUBTYPES
