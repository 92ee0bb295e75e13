# SPDX-License-Identifier: LGPL-3-or-later

"""Enums used in RISC-V ISA metadata decoding

The operand types are the ones named in the "operands" table: each
operand is tagged with one of them, and together with the encoded width
the type decides how a consumer represents the decoded value (flag,
register number, signed or unsigned integer).
"""

from enum import (
    Enum as _Enum,
    unique,
)
import os
from os.path import dirname, join


def find_wiki_dir():
    filedir = os.path.dirname(os.path.abspath(__file__))
    basedir = dirname(filedir)
    isatables = join(basedir, 'isatables')
    return isatables


def find_wiki_file(name):
    return join(find_wiki_dir(), name)


class Enum(_Enum):
    @classmethod
    def _missing_(cls, desc):
        if isinstance(desc, str):
            keys = {item.name.lower():item for item in cls}
            return keys.get(desc.lower())
        return None


@unique
class ArgType(Enum):
    GENERAL = "arg"
    INT_REG = "ireg"
    FLOAT_REG = "freg"
    COMPRESSED_REG = "creg"
    OFFSET = "offset"
    SIGNED_IMMEDIATE = "simm"
    UNSIGNED_IMMEDIATE = "uimm"

    def kind(self, width):
        if self in (ArgType.INT_REG, ArgType.COMPRESSED_REG):
            return ArgKind.INT_REGISTER
        if self is ArgType.FLOAT_REG:
            return ArgKind.FLOAT_REGISTER
        if self in (ArgType.OFFSET, ArgType.SIGNED_IMMEDIATE):
            return ArgKind.SIGNED
        if self is ArgType.GENERAL and width == 1:
            return ArgKind.FLAG
        return ArgKind.UNSIGNED


@unique
class ArgKind(Enum):
    FLAG = "bool"
    INT_REGISTER = "IntRegister"
    FLOAT_REGISTER = "FloatRegister"
    SIGNED = "i32"
    UNSIGNED = "u32"
