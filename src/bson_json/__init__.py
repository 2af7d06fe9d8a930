#!/usr/bin/python -OOOO
# vim: set fileencoding=utf8 shiftwidth=4 tabstop=4 textwidth=80 foldmethod=marker :
# Copyright (c) 2010, Kou Man Tong. All rights reserved.
# Copyright (c) 2015, Ayun Park. All rights reserved.
# For licensing, see LICENSE file included in the package.
"""
JSON text rendering of BSON documents.

Documents are rendered in one of two dialects:
    strict      { "$oid" : "..." }, { "$date" : ... }, ...
    extended    ObjectId("..."), ISODate("..."), ...

Legacy UUID binaries (subtype 3) are shown according to the byte order used
by the driver that wrote them (Java, C#, Python), and dates can be shown in
UTC or local time.

Rendering never fails on a well-formed tree; values that cannot be shown
degrade to placeholder text.
"""
import logging
from typing import Any, Mapping, Optional, Union

from bson_json.codec import (BSONDecodeError, MissingTimezoneWarning, OnUnknown,
                             UnknownSerializerError, loads, to_document, to_value)
from bson_json.options import OutputDialect, RenderContext, TimeZoneMode, UuidEncoding
from bson_json.plain import plain_document, plain_value
from bson_json.renderer import (UNSUPPORTED_PLACEHOLDER, UnrepresentableNumberError,
                                UnrepresentableNumberWarning, render_array, render_document,
                                render_element, render_value)
from bson_json.typenames import (UNSUPPORTED_TYPE_NAME, is_array, is_document, is_simple_type,
                                 is_uuid_type, type_name, value_type_name)
from bson_json.types import *  # noqa: F401,F403
from bson_json.types import __all__ as _types_all

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "dumps", "dumps_value", "loads", "to_document", "to_value",
    "render_document", "render_array", "render_element", "render_value",
    "plain_document", "plain_value",
    "type_name", "value_type_name", "is_array", "is_document", "is_simple_type",
    "is_uuid_type",
    "OutputDialect", "RenderContext", "TimeZoneMode", "UuidEncoding",
    "BSONDecodeError", "MissingTimezoneWarning", "UnknownSerializerError",
    "UnrepresentableNumberError", "UnrepresentableNumberWarning",
    "UNSUPPORTED_PLACEHOLDER", "UNSUPPORTED_TYPE_NAME",
    *_types_all,
]

PrettyOption = Union[bool, int]


def _root_level(pretty: PrettyOption) -> Optional[int]:
    if pretty is True:
        return 1
    if pretty is False or pretty is None:
        return None
    if pretty < 0:
        raise ValueError(f"pretty level must be non-negative, got {pretty}")
    return pretty


def dumps(obj: Union[Document, Mapping[Any, Any]],
          dialect: OutputDialect = OutputDialect.STRICT,
          pretty: PrettyOption = False,
          uuid_encoding: UuidEncoding = UuidEncoding.DEFAULT,
          time_zone: TimeZoneMode = TimeZoneMode.UTC,
          strict_numbers: bool = False,
          max_array_holes: Optional[int] = None,
          on_unknown: OnUnknown = None) -> str:
    """
    Given a Document (or a mapping of Python values), outputs JSON text.

    pretty=True indents root fields by one step; an int picks the root level.
    max_array_holes bounds the undefined entries filled into one gap of a
    sparse array.
    """
    context = RenderContext(dialect, uuid_encoding, time_zone, strict_numbers,
                            max_array_holes)
    return render_document(to_document(obj, on_unknown), context, _root_level(pretty))


def dumps_value(value: Any, name: Optional[str] = None,
                dialect: OutputDialect = OutputDialect.STRICT,
                pretty: PrettyOption = False,
                uuid_encoding: UuidEncoding = UuidEncoding.DEFAULT,
                time_zone: TimeZoneMode = TimeZoneMode.UTC,
                strict_numbers: bool = False) -> str:
    """
    Render one value, prefixed with its field name when name is given.
    """
    context = RenderContext(dialect, uuid_encoding, time_zone, strict_numbers)
    return render_element(name, to_value(name or "", value), context,
                          name is not None, _root_level(pretty))
