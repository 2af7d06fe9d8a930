#!/usr/bin/python -OOOO
# vim: set fileencoding=utf8 shiftwidth=4 tabstop=4 textwidth=80 foldmethod=marker :
# Copyright (c) 2010, Kou Man Tong. All rights reserved.
# Copyright (c) 2015, Ayun Park. All rights reserved.
# For licensing, see LICENSE file included in the package.
"""
Rendering options.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class OutputDialect(Enum):
    STRICT = "strict"
    # mongo shell constructor syntax: ObjectId(...), ISODate(...)
    EXTENDED = "extended"


class UuidEncoding(Enum):
    DEFAULT = "default"
    JAVA_LEGACY = "java"
    CSHARP_LEGACY = "csharp"
    PYTHON_LEGACY = "python"


class TimeZoneMode(Enum):
    UTC = "utc"
    LOCAL = "local"


@dataclass(frozen=True)
class RenderContext:
    """
    Settings shared by every recursive render call.

    strict_numbers turns an unrepresentable number into an
    UnrepresentableNumberError instead of a null placeholder.
    max_array_holes caps the undefined entries emitted for one gap in a
    sparse array; None leaves it unbounded.
    """
    dialect: OutputDialect = OutputDialect.STRICT
    uuid_encoding: UuidEncoding = UuidEncoding.DEFAULT
    time_zone: TimeZoneMode = TimeZoneMode.UTC
    strict_numbers: bool = False
    max_array_holes: Optional[int] = None

    @property
    def extended(self) -> bool:
        return self.dialect is OutputDialect.EXTENDED

    @property
    def local_time(self) -> bool:
        return self.time_zone is TimeZoneMode.LOCAL


DEFAULT_CONTEXT = RenderContext()
