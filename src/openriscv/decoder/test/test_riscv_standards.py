import os
import unittest

from openriscv.decoder.riscv_enums import (
    ArgKind,
    ArgType,
    find_wiki_file,
)
from openriscv.decoder.riscv_standards import (
    Extension,
    Size,
    Standard,
    Standards,
)


class TestStandard(unittest.TestCase):
    def test_parse(self):
        standard = Standard.parse("rv32i")
        self.assertEqual(standard, 32 | (ord("I") << 8))
        self.assertIs(standard.size, Size.RV32)
        self.assertIs(standard.extension, Extension.I)
        self.assertEqual(str(standard), "RV32I")
        self.assertEqual(repr(standard), "Standard(RV32I)")

        self.assertEqual(Standard.parse("RV64C"), Standard.parse("rv64c"))
        self.assertEqual(str(Standard.parse("rv128i")), "RV128I")

    def test_invalid(self):
        for text in ("", "rv", "rv32", "rv32x", "rv16i", "x86", "rvi32",
                "rv32ii", None, 32):
            with self.subTest(text=text):
                standard = Standard.parse(text)
                self.assertEqual(standard, Standard.INVALID)
                self.assertFalse(standard.valid)
        self.assertEqual(str(Standard.INVALID), "INVALID")
        self.assertEqual(Standard.INVALID, 0)

    def test_pack(self):
        self.assertEqual(Standard.pack(Size.RV64, Extension.M),
            Standard.parse("rv64m"))
        self.assertEqual(Standard.pack(128, "C"), Standard.parse("rv128c"))
        self.assertEqual(Standard.pack(Size.INVALID, Extension.I),
            Standard.INVALID)
        self.assertEqual(str(Standard.pack(Size.RV32)), "RV32")

    def test_construct(self):
        self.assertEqual(Standard("rv32m"), Standard.parse("rv32m"))
        standard = Standard.parse("rv32a")
        self.assertIs(Standard(standard), standard)
        for value in (-1, (1 << 16), 33, (ord("Z") << 8) | 32,
                (ord("i") << 8) | 32, 1.0):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    Standard(value)

    def test_extension_codes(self):
        self.assertIs(Extension.decode(0), Extension.NONE)
        self.assertIs(Extension.decode(ord("C")), Extension.C)
        for code in (ord("c"), ord("Z"), 1):
            with self.subTest(code=code):
                with self.assertRaises(ValueError):
                    Extension.decode(code)

    def test_base(self):
        for size in (Size.RV32, Size.RV64, Size.RV128):
            for extension in Extension:
                with self.subTest(size=size, extension=extension):
                    standard = Standard.pack(size, extension)
                    base = standard.base()
                    self.assertEqual(base.base(), base)
                    self.assertTrue(base.valid)
                    self.assertIs(base.size, size)
                    self.assertIs(base.extension, Extension.NONE)
                    self.assertNotEqual(base, Standard.INVALID)

        self.assertEqual(Standard.INVALID.base(), Standard.INVALID)

    def test_base_distinct(self):
        standard = Standard.parse("rv32i")
        self.assertNotEqual(standard, standard.base())
        self.assertEqual(len({standard, standard.base()}), 2)


class TestStandards(unittest.TestCase):
    def test_with_bases(self):
        standards = Standards.with_bases([Standard.parse("rv32i")])
        self.assertEqual(standards,
            {Standard.parse("rv32i"), Standard.pack(Size.RV32)})
        self.assertTrue(standards.has("rv32i"))
        self.assertTrue(standards.has(Standard.pack(Size.RV32)))
        self.assertFalse(standards.has("rv64i"))
        self.assertFalse(standards.has(Standard.pack(Size.RV64)))

    def test_order(self):
        standards = Standards.with_bases(["rv64i", "rv32i"])
        self.assertEqual(str(standards), "RV32, RV64, RV32I, RV64I")
        self.assertEqual(list(standards), sorted(standards))

    def test_hashable(self):
        self.assertEqual(hash(Standards(["rv32i"])),
            hash(Standards([Standard.parse("rv32i")])))
        self.assertEqual(Standards(), frozenset())
        self.assertEqual(str(Standards()), "")


class TestArgType(unittest.TestCase):
    def test_kind(self):
        self.assertIs(ArgType.GENERAL.kind(1), ArgKind.FLAG)
        self.assertIs(ArgType.GENERAL.kind(4), ArgKind.UNSIGNED)
        self.assertIs(ArgType.UNSIGNED_IMMEDIATE.kind(1), ArgKind.UNSIGNED)
        self.assertIs(ArgType.INT_REG.kind(5), ArgKind.INT_REGISTER)
        self.assertIs(ArgType.COMPRESSED_REG.kind(3), ArgKind.INT_REGISTER)
        self.assertIs(ArgType.FLOAT_REG.kind(5), ArgKind.FLOAT_REGISTER)
        self.assertIs(ArgType.OFFSET.kind(13), ArgKind.SIGNED)
        self.assertIs(ArgType.SIGNED_IMMEDIATE.kind(12), ArgKind.SIGNED)

    def test_lookup(self):
        self.assertIs(ArgType("ireg"), ArgType.INT_REG)
        self.assertIs(ArgType("general"), ArgType.GENERAL)
        self.assertIs(ArgType("Float_Reg"), ArgType.FLOAT_REG)
        with self.assertRaises(ValueError):
            ArgType("vreg")

    def test_bundled_tables(self):
        self.assertTrue(os.path.isfile(find_wiki_file("opcodes")))


if __name__ == "__main__":
    unittest.main()
