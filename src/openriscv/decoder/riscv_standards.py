# SPDX-License-Identifier: LGPL-3-or-later

"""RISC-V standards: architecture size plus extension letter

A Standard packs the size into the low byte and the extension letter into
the high byte of a 16-bit value, so "RV32I" is ``32 | ord("I") << 8``.
The base of a standard keeps only the size ("RV32", any extension), and
both the standard and its base are distinct values that may live in the
same set.  The zero value is the invalid standard: it is what any
unrecognised text parses to, and it never appears in an operation's set.
"""

from openriscv.decoder.riscv_enums import (
    Enum as _Enum,
    unique as _unique,
)


@_unique
class Size(_Enum):
    INVALID = 0
    RV32 = 32
    RV64 = 64
    RV128 = 128


@_unique
class Extension(_Enum):
    NONE = ""
    I = "I" # base integer
    M = "M" # multiply and divide
    A = "A" # atomic
    S = "S" # supervisor
    F = "F" # single-precision floating point
    D = "D" # double-precision floating point
    Q = "Q" # quad-precision floating point
    C = "C" # compressed

    @property
    def code(self):
        if not self.value:
            return 0
        return ord(self.value)

    @classmethod
    def decode(cls, code):
        for item in cls:
            if item.code == code:
                return item
        raise ValueError(code)


class Standard(int):
    def __new__(cls, value=0):
        if isinstance(value, Standard):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if not isinstance(value, int):
            raise ValueError(value)
        if not (0 <= value < (1 << 16)):
            raise ValueError(value)

        # both halves must name something we know about
        Size(value & 0xff)
        Extension.decode(value >> 8)

        return super().__new__(cls, value)

    @classmethod
    def pack(cls, size, extension=Extension.NONE):
        size = Size(size)
        extension = Extension(extension)
        if size is Size.INVALID:
            return cls.INVALID
        return cls(size.value | (extension.code << 8))

    @classmethod
    def parse(cls, text):
        """parses "rv32i"-style names, anything else is INVALID"""
        if not isinstance(text, str):
            return cls.INVALID
        text = text.lower()
        if not text.startswith("rv") or len(text) < 4:
            return cls.INVALID

        size = {
            "32": Size.RV32,
            "64": Size.RV64,
            "128": Size.RV128,
        }.get(text[2:-1], Size.INVALID)
        if size is Size.INVALID:
            return cls.INVALID

        try:
            extension = Extension.decode(ord(text[-1].upper()))
        except ValueError:
            return cls.INVALID

        return cls.pack(size, extension)

    @property
    def size(self):
        return Size(self & 0xff)

    @property
    def extension(self):
        return Extension.decode(self >> 8)

    def base(self):
        return Standard(self & 0xff)

    @property
    def valid(self):
        return (self.size is not Size.INVALID)

    def __str__(self):
        if not self.valid:
            return "INVALID"
        size = self.size.value
        extension = self.extension
        if extension is Extension.NONE:
            return f"RV{size}"
        return f"RV{size}{extension.value}"

    def __repr__(self):
        return f"{self.__class__.__name__}({self!s})"


Standard.INVALID = Standard(0)


class Standards(frozenset):
    """the set of standards an operation belongs to, iterated in order"""
    def __new__(cls, items=()):
        return super().__new__(cls, map(Standard, items))

    @classmethod
    def with_bases(cls, standards):
        items = []
        for standard in map(Standard, standards):
            items.append(standard)
            items.append(standard.base())
        return cls(items)

    def has(self, standard):
        return (Standard(standard) in self)

    def __iter__(self):
        yield from sorted(frozenset.__iter__(self))

    def __str__(self):
        return ", ".join(map(str, self))

    def __repr__(self):
        return f"{self.__class__.__name__}({{{self!s}}})"
