#!/usr/bin/python -OOOO
# vim: set fileencoding=utf8 shiftwidth=4 tabstop=4 textwidth=80 foldmethod=marker :
# Copyright (c) 2010, Kou Man Tong. All rights reserved.
# Copyright (c) 2015, Ayun Park. All rights reserved.
# For licensing, see LICENSE file included in the package.
"""
Unadorned display text for values, as shown when copying a single value.
Strings are not quoted or escaped here.
"""
from bson_json.formatters import format_iso_date, format_uuid, is_supported_date
from bson_json.options import TimeZoneMode, UuidEncoding
from bson_json.renderer import EXTENDED_REGEX_FLAGS
from bson_json.typenames import is_uuid_value
from bson_json.types import (Array, Binary, Boolean, Code, CodeWithScope, Date, DBRef,
                             Document, Double, Int32, Int64, Null, Object, ObjectId,
                             Regex, String, Symbol, Timestamp, TypedValue, Undefined)


def plain_document(document: Document,
                   uuid_encoding: UuidEncoding = UuidEncoding.DEFAULT,
                   time_zone: TimeZoneMode = TimeZoneMode.UTC) -> str:
    lines = [f'"{name}" : {plain_value(value, uuid_encoding, time_zone)}'
             for name, value in document]
    if not lines:
        return "{}"
    return "{\n" + ",\n".join(lines) + "\n}"


def plain_value(value: TypedValue,
                uuid_encoding: UuidEncoding = UuidEncoding.DEFAULT,
                time_zone: TimeZoneMode = TimeZoneMode.UTC) -> str:
    local_time = time_zone is TimeZoneMode.LOCAL

    if isinstance(value, Double):
        return "%f" % value.value
    elif isinstance(value, (Int32, Int64)):
        return str(value.value)
    elif isinstance(value, Boolean):
        return "true" if value.value else "false"
    elif isinstance(value, (String, Symbol)):
        return value.value
    elif isinstance(value, (Object, Array)):
        return plain_document(value.document, uuid_encoding, time_zone)
    elif isinstance(value, Binary):
        if is_uuid_value(value) and len(value.data) == 16:
            return format_uuid(value, uuid_encoding)
        return "<binary>"
    elif isinstance(value, Undefined):
        return "<undefined>"
    elif isinstance(value, Null):
        return "<null>"
    elif isinstance(value, ObjectId):
        return f'ObjectId("{value.hex}")'
    elif isinstance(value, Date):
        if not is_supported_date(value.millis):
            return str(value.millis)
        return format_iso_date(value.millis, local_time, with_millis=False)
    elif isinstance(value, Regex):
        flags = "".join(flag for flag in value.flags if flag in EXTENDED_REGEX_FLAGS)
        return f"/{value.pattern}/{flags}"
    elif isinstance(value, DBRef):
        return ""
    elif isinstance(value, (Code, CodeWithScope)):
        return value.source
    elif isinstance(value, Timestamp):
        millis = value.seconds * 1000
        if not is_supported_date(millis):
            return str(value.seconds)
        return format_iso_date(millis, with_millis=False)
    return "<unsupported>"
