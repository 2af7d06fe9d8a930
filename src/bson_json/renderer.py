#!/usr/bin/python -OOOO
# vim: set fileencoding=utf8 shiftwidth=4 tabstop=4 textwidth=80 foldmethod=marker :
# Copyright (c) 2010, Kou Man Tong. All rights reserved.
# Copyright (c) 2015, Ayun Park. All rights reserved.
# For licensing, see LICENSE file included in the package.
"""
JSON text rendering of typed documents.

Two dialects are produced:
    strict      "$"-prefixed wrappers, e.g. { "$oid" : "..." }
    extended    mongo shell constructors, e.g. ObjectId("...")

pretty_level is None for compact output. Otherwise fields of a document at
level n are indented by n steps and its closing bracket by n - 1; nested
documents are rendered one level deeper.
"""
import logging
import re
import warnings
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Type

from bson_json.formatters import (base64_encode, escape_json_string, format_iso_date,
                                  format_number, format_uuid, is_supported_date)
from bson_json.options import DEFAULT_CONTEXT, OutputDialect, RenderContext
from bson_json.typenames import is_uuid_value
from bson_json.types import (Array, Binary, Boolean, Code, CodeWithScope, Date, DBRef,
                             Document, Double, Int32, Int64, MaxKey, MinKey, Null, Object,
                             ObjectId, Regex, String, Symbol, Timestamp, TypedValue,
                             Undefined, Unsupported, Number)

logger = logging.getLogger(__name__)

PrettyLevel = Optional[int]
ValueRenderer = Callable[[TypedValue, RenderContext, PrettyLevel], str]

INDENT = "    "
UNSUPPORTED_PLACEHOLDER = "<unsupported>"
EXTENDED_REGEX_FLAGS = "gim"

_LEADING_INTEGER = re.compile(r"\s*([+-]?[0-9]+)")


class UnrepresentableNumberWarning(RuntimeWarning):
    def __init__(self, value: Number):
        super().__init__(f"Number {value!r} cannot be represented in JSON, rendered as null")


class UnrepresentableNumberError(ValueError):
    def __init__(self, value: Number):
        super().__init__(f"Number {value!r} cannot be represented in JSON")
        self.value = value


def _child_level(pretty_level: PrettyLevel) -> PrettyLevel:
    return None if pretty_level is None else pretty_level + 1


def _entry_separator(pretty_level: PrettyLevel) -> str:
    if pretty_level is None:
        return " "
    return "\n" + INDENT * pretty_level


def _closing(pretty_level: PrettyLevel, bracket: str) -> str:
    if pretty_level is None:
        return " " + bracket
    return "\n" + INDENT * max(pretty_level - 1, 0) + bracket


def _nominal_index(name: str) -> int:
    # Leading base-10 integer of the field name; 0 when there is none.
    match = _LEADING_INTEGER.match(name)
    return int(match.group(1)) if match else 0


def render_document(document: Document, context: RenderContext = DEFAULT_CONTEXT,
                    pretty_level: PrettyLevel = None) -> str:
    if document.is_empty():
        return "{}"

    child_level = _child_level(pretty_level)
    entries = [
        _entry_separator(pretty_level) +
        render_element(name, value, context, True, child_level)
        for name, value in document
    ]
    return "{" + ",".join(entries) + _closing(pretty_level, "}")


def render_array(document: Document, context: RenderContext = DEFAULT_CONTEXT,
                 pretty_level: PrettyLevel = None) -> str:
    """
    Render the fields of document positionally.

    A field whose name is a larger index than the number of entries emitted
    so far marks a hole, which is filled with undefined before the field
    itself is rendered. Filling is unbounded unless context.max_array_holes
    is set; a single field name such as "20000000" then costs that many
    entries. Past the cap, the rest of a hole is skipped.
    """
    if document.is_empty():
        return "[]"

    child_level = _child_level(pretty_level)
    fields = document.fields
    entries: List[str] = []
    limit = context.max_array_holes
    expected = 0
    holes = 0
    position = 0
    while position < len(fields):
        name, value = fields[position]
        index = _nominal_index(name)
        if index > expected and (limit is None or holes < limit):
            entries.append("undefined")
            holes += 1
        else:
            if index > expected:
                logger.debug("Skipping %d array holes before index %d", index - expected, index)
                expected = index
            entries.append(render_element(None, value, context, False, child_level))
            holes = 0
            position += 1
        expected += 1

    separator = _entry_separator(pretty_level)
    return "[" + ",".join(separator + entry for entry in entries) + \
           _closing(pretty_level, "]")


def render_element(name: Optional[str], value: TypedValue,
                   context: RenderContext = DEFAULT_CONTEXT,
                   include_field_name: bool = False,
                   pretty_level: PrettyLevel = None) -> str:
    prefix = ""
    if include_field_name:
        prefix = f'"{escape_json_string(name or "")}" : '
    return prefix + render_value(value, context, pretty_level)


def render_value(value: TypedValue, context: RenderContext = DEFAULT_CONTEXT,
                 pretty_level: PrettyLevel = None) -> str:
    for cls in type(value).__mro__:
        renderer = _RENDERERS.get(cls)
        if renderer is not None:
            return renderer(value, context, pretty_level)
    logger.debug("No renderer for %s, using placeholder", type(value).__name__)
    return UNSUPPORTED_PLACEHOLDER


def _render_text(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, (String, Symbol))
    return f'"{escape_json_string(value.value)}"'


def _render_int64(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, Int64)
    return f"NumberLong({value.value})"


def _render_number(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, (Double, Int32))
    text = format_number(value.value)
    if text is not None:
        return text
    if context.strict_numbers:
        raise UnrepresentableNumberError(value.value)
    warnings.warn(UnrepresentableNumberWarning(value.value), None, 2)
    return "null"


def _render_boolean(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, Boolean)
    return "true" if value.value else "false"


def _render_null(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    return "null"


def _render_undefined(value: TypedValue, context: RenderContext,
                      pretty_level: PrettyLevel) -> str:
    return "undefined"


def _render_object(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, Object)
    return render_document(value.document, context, pretty_level)


def _render_array(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, Array)
    return render_array(value.document, context, pretty_level)


def _render_binary(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, Binary)
    if is_uuid_value(value) and len(value.data) == 16:
        return format_uuid(value, context.uuid_encoding)
    return (f'{{ "$binary" : "{base64_encode(value.data)}", '
            f'"$type" : "{value.subtype:02x}" }}')


def _render_object_id(value: TypedValue, context: RenderContext,
                      pretty_level: PrettyLevel) -> str:
    assert isinstance(value, ObjectId)
    if context.extended:
        return f'ObjectId("{value.hex}")'
    return f'{{ "$oid" : "{value.hex}" }}'


def _render_dbref(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, DBRef)
    namespace = escape_json_string(value.namespace)
    if context.extended:
        return f'DBRef("{namespace}", "{value.oid.hex}")'
    return f'{{ "$ref" : "{namespace}", "$id" : "{value.oid.hex}" }}'


def _render_date(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, Date)
    millis = value.millis
    supported = is_supported_date(millis)
    if context.extended:
        if supported:
            return f'ISODate("{format_iso_date(millis, context.local_time)}")'
        return f"Date({millis})"
    # Strict output keeps raw milliseconds unless pretty printing.
    if supported and pretty_level is not None:
        return f'{{ "$date" : "{format_iso_date(millis, context.local_time)}" }}'
    return f'{{ "$date" : {millis} }}'


def _render_regex(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, Regex)
    if context.extended:
        flags = "".join(flag for flag in value.flags if flag in EXTENDED_REGEX_FLAGS)
        return f"/{escape_json_string(value.pattern, escape_slash=True)}/{flags}"
    return (f'{{ "$regex" : "{escape_json_string(value.pattern)}", '
            f'"$options" : "{escape_json_string(value.flags)}" }}')


def _render_code(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    assert isinstance(value, Code)
    return value.source


def _render_code_with_scope(value: TypedValue, context: RenderContext,
                            pretty_level: PrettyLevel) -> str:
    assert isinstance(value, CodeWithScope)
    if value.scope.is_empty():
        return value.source
    # scope is always strict JSON, whatever the surrounding dialect
    scope = render_document(value.scope, replace(context, dialect=OutputDialect.STRICT), None)
    return f'{{ "$code" : {value.source}, "$scope" : {scope} }}'


def _render_timestamp(value: TypedValue, context: RenderContext,
                      pretty_level: PrettyLevel) -> str:
    assert isinstance(value, Timestamp)
    if context.extended:
        return f"Timestamp({value.seconds}, {value.increment})"
    return f'{{ "$timestamp" : {{ "t" : {value.seconds}, "i" : {value.increment} }} }}'


def _render_min_key(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    return '{ "$minKey" : 1 }'


def _render_max_key(value: TypedValue, context: RenderContext, pretty_level: PrettyLevel) -> str:
    return '{ "$maxKey" : 1 }'


def _render_unsupported(value: TypedValue, context: RenderContext,
                        pretty_level: PrettyLevel) -> str:
    assert isinstance(value, Unsupported)
    logger.debug("Cannot render value of BSON type 0x%02x, using placeholder", value.type_code)
    return UNSUPPORTED_PLACEHOLDER


_RENDERERS: Dict[Type[TypedValue], ValueRenderer] = {
    String: _render_text,
    Symbol: _render_text,
    Int64: _render_int64,
    Int32: _render_number,
    Double: _render_number,
    Boolean: _render_boolean,
    Null: _render_null,
    Undefined: _render_undefined,
    Object: _render_object,
    Array: _render_array,
    Binary: _render_binary,
    ObjectId: _render_object_id,
    DBRef: _render_dbref,
    Date: _render_date,
    Regex: _render_regex,
    Code: _render_code,
    CodeWithScope: _render_code_with_scope,
    Timestamp: _render_timestamp,
    MinKey: _render_min_key,
    MaxKey: _render_max_key,
    Unsupported: _render_unsupported,
}
