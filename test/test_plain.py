#!/usr/bin/env python
from unittest import TestCase

from bson_json import (Array, Binary, Boolean, CodeWithScope, Date, DBRef, Document, Double,
                       Int32, Int64, MaxKey, Null, Object, ObjectId, Regex, String, Timestamp,
                       Undefined, UuidEncoding, plain_document, plain_value)


class TestPlainValue(TestCase):
    def test_scalars(self):
        self.assertEqual(plain_value(Double(1.5)), "1.500000")
        self.assertEqual(plain_value(Int32(3)), "3")
        self.assertEqual(plain_value(Int64(2 ** 40)), "1099511627776")
        self.assertEqual(plain_value(Boolean(False)), "false")
        self.assertEqual(plain_value(String('a "b"')), 'a "b"')
        self.assertEqual(plain_value(Null()), "<null>")
        self.assertEqual(plain_value(Undefined()), "<undefined>")
        self.assertEqual(plain_value(MaxKey()), "<unsupported>")

    def test_object_id(self):
        oid = ObjectId.from_hex("5099803df3f4948bd2f98391")
        self.assertEqual(plain_value(oid), 'ObjectId("5099803df3f4948bd2f98391")')
        self.assertEqual(plain_value(DBRef("db.c", oid)), "")

    def test_dates(self):
        self.assertEqual(plain_value(Date(1367576430123)), "2013-05-03T10:20:30Z")
        self.assertEqual(plain_value(Date(-2 ** 62)), str(-2 ** 62))
        self.assertEqual(plain_value(Timestamp(1367576430, 1)), "2013-05-03T10:20:30Z")

    def test_regex(self):
        self.assertEqual(plain_value(Regex("a/b", "gimx")), "/a/b/gim")

    def test_binary(self):
        data = bytes.fromhex("00112233445566778899aabbccddeeff")
        self.assertEqual(plain_value(Binary(3, data), UuidEncoding.PYTHON_LEGACY),
                         'PYUUID("00112233-4455-6677-8899-aabbccddeeff")')
        self.assertEqual(plain_value(Binary(0, data)), "<binary>")

    def test_code_with_scope(self):
        value = CodeWithScope("f(x)", Document.of(("x", Int32(1))))
        self.assertEqual(plain_value(value), "f(x)")


class TestPlainDocument(TestCase):
    def test_empty(self):
        self.assertEqual(plain_document(Document()), "{}")

    def test_nested(self):
        doc = Document.of(("a", Int32(1)),
                          ("b", Object(Document.of(("c", String("x"))))),
                          ("d", Array.of(Boolean(True))))
        self.assertEqual(plain_document(doc),
                         '{\n"a" : 1,\n"b" : {\n"c" : x\n},\n"d" : {\n"0" : true\n}\n}')
