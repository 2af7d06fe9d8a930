#!/usr/bin/env python
from datetime import datetime, timezone
from decimal import Decimal
from unittest import TestCase

from bson_json import Binary, UuidEncoding
from bson_json.formatters import (MAX_DATE_MS, MIN_DATE_MS, base64_encode, escape_json_string,
                                  format_iso_date, format_number, format_uuid,
                                  is_supported_date)


class TestEscape(TestCase):
    def test_quotes_and_backslash(self):
        self.assertEqual(escape_json_string('a"b\\c'), 'a\\"b\\\\c')

    def test_control_characters(self):
        self.assertEqual(escape_json_string("\b\f\n\r\t"), "\\b\\f\\n\\r\\t")
        self.assertEqual(escape_json_string("\x01\x1f\x7f"), "\\u0001\\u001f\\u007f")

    def test_slash(self):
        self.assertEqual(escape_json_string("a/b"), "a/b")
        self.assertEqual(escape_json_string("a/b", escape_slash=True), "a\\/b")

    def test_unicode_untouched(self):
        self.assertEqual(escape_json_string("무지개"), "무지개")


class TestFormatters(TestCase):
    def test_base64(self):
        self.assertEqual(base64_encode(b""), "")
        self.assertEqual(base64_encode(b"hello"), "aGVsbG8=")

    def test_uuid_rejects_other_subtypes(self):
        with self.assertRaises(ValueError):
            format_uuid(Binary(0, bytes(16)), UuidEncoding.DEFAULT)
        with self.assertRaises(ValueError):
            format_uuid(Binary(4, bytes(15)), UuidEncoding.DEFAULT)

    def test_date_bounds(self):
        self.assertFalse(is_supported_date(MIN_DATE_MS))
        self.assertTrue(is_supported_date(MIN_DATE_MS + 1))
        self.assertTrue(is_supported_date(MAX_DATE_MS - 1))
        self.assertFalse(is_supported_date(MAX_DATE_MS))

    def test_iso_date_utc(self):
        self.assertEqual(format_iso_date(1367576430123), "2013-05-03T10:20:30.123Z")
        self.assertEqual(format_iso_date(-1), "1969-12-31T23:59:59.999Z")
        self.assertEqual(format_iso_date(1367576430123, with_millis=False),
                         "2013-05-03T10:20:30Z")

    def test_iso_date_local(self):
        expected = datetime(2013, 5, 3, 10, 20, 30, 123000, tzinfo=timezone.utc).astimezone()
        self.assertEqual(format_iso_date(1367576430123, local_time=True),
                         expected.isoformat(timespec="milliseconds"))

    def test_number(self):
        self.assertEqual(format_number(2.5), "2.5")
        self.assertEqual(format_number(12345678901234567890.0), "1.234567890123457e+19")
        self.assertEqual(format_number(-0.0), "-0")
        self.assertIsNone(format_number(10 ** 400))

    def test_decimal_nan(self):
        self.assertEqual(format_number(Decimal("NaN")), "NaN")
        self.assertEqual(format_number(Decimal("-sNaN")), "NaN")
