# SPDX-License-Identifier: LGPL-3-or-later

"""Bit-field algebra for RISC-V encoding tables

Two notations are compiled here.

Matching specs, as found in the "opcodes" and "opcode-majors" tables::

    14..12=0x1      bits 14 down to 12 must hold 1
    12=0            single bit form

compile to a (test, mask) pair: ``mask`` selects the bits, ``test`` is the
value they must hold.  A line's full pair is the OR of its tokens.

Operand encodings, as found in the "operands" table::

    11:7                        contiguous, right-justified
    31:25[12|10:5],11:7[4:1|11] split: source runs redistributed

compile to an ordered sequence of DecodeStep (mask, then shift) whose
results, ORed together, reassemble the operand value from the raw word.
In the split form the bits inside the brackets are destination positions;
the source run starts at the bit before the colon and is consumed
downwards, one destination chunk at a time.
"""

import dataclasses as _dataclasses
import functools as _functools

import ply.lex as _lex
import ply.yacc as _yacc

from openriscv.exceptions import EncodingError
from openriscv.util import (
    log,
    LogType,
)

WORD_BITS = 32
WORD_MASK = ((1 << WORD_BITS) - 1)


class FieldSyntaxError(ValueError):
    pass


def range_mask(top, bottom):
    return ((1 << (top + 1)) - (1 << bottom))


def pattern(test, mask, width=WORD_BITS):
    """renders a (test, mask) pair MSB first, "-" marking don't-care bits"""
    def symbols():
        for bit in reversed(range(width)):
            if not (mask & (1 << bit)):
                yield "-"
            elif test & (1 << bit):
                yield "1"
            else:
                yield "0"

    return "".join(symbols())


class FieldLexer:
    tokens = (
        "NUMBER",
        "COLON",
        "DOTDOT",
        "EQUALS",
        "LBRACKET",
        "RBRACKET",
        "PIPE",
    )

    t_COLON = r":"
    t_DOTDOT = r"\.\."
    t_EQUALS = r"="
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_PIPE = r"\|"
    t_ignore = " \t"

    def t_NUMBER(self, t):
        r"0[xX][0-9a-fA-F]+|0[bB][01]+|0[oO][0-7]+|[0-9]+"
        if t.value[1:2].isalpha():
            t.value = int(t.value, 0)
        else:
            t.value = int(t.value, 10)
        return t

    def t_error(self, t):
        raise FieldSyntaxError(f"illegal character {t.value[0]!r}")

    def __init__(self):
        self.lexer = _lex.lex(module=self, errorlog=_lex.NullLogger())
        return super().__init__()


class Grammar:
    tokens = FieldLexer.tokens

    def __init__(self):
        self.__lexer = FieldLexer().lexer
        self.__parser = _yacc.yacc(module=self, start=self.start,
            debug=False, write_tables=False,
            errorlog=_yacc.NullLogger())
        return super().__init__()

    def parse(self, text):
        if not text.strip():
            raise FieldSyntaxError("empty")
        result = self.__parser.parse(text, lexer=self.__lexer)
        if result is None:
            raise FieldSyntaxError(text)
        return result


class MatchSpecGrammar(Grammar):
    start = "matchspec"

    def p_matchspec_range(self, p):
        "matchspec : NUMBER DOTDOT NUMBER EQUALS NUMBER"
        p[0] = (p[1], p[3], p[5])

    def p_matchspec_bit(self, p):
        "matchspec : NUMBER EQUALS NUMBER"
        p[0] = (p[1], p[1], p[3])

    def p_error(self, p):
        if p is None:
            raise FieldSyntaxError("unexpected end of matching spec")
        raise FieldSyntaxError(f"unexpected {p.value!r} in matching spec")


class EncodingGrammar(Grammar):
    start = "part"

    def p_part_field(self, p):
        "part : range"
        (top, bottom) = p[1]
        p[0] = (top, bottom, None)

    def p_part_split(self, p):
        "part : range LBRACKET chunks RBRACKET"
        (top, bottom) = p[1]
        p[0] = (top, bottom, tuple(p[3]))

    def p_range_bit(self, p):
        "range : NUMBER"
        p[0] = (p[1], p[1])

    def p_range_span(self, p):
        "range : NUMBER COLON NUMBER"
        p[0] = (p[1], p[3])

    def p_chunks_first(self, p):
        "chunks : range"
        p[0] = [p[1]]

    def p_chunks_next(self, p):
        "chunks : chunks PIPE range"
        p[0] = p[1] + [p[3]]

    def p_error(self, p):
        if p is None:
            raise FieldSyntaxError("unexpected end of operand encoding")
        raise FieldSyntaxError(f"unexpected {p.value!r} in operand encoding")


@_functools.lru_cache(maxsize=None)
def grammar(cls):
    return cls()


def parse_match_spec(token):
    """compiles "end..start=value" into (test, mask).

    anything malformed (including a value too wide for its range)
    contributes (0, 0), so that OR-accumulating a line's tokens is
    unaffected by it.
    """
    try:
        (end, start, value) = grammar(MatchSpecGrammar).parse(token)
    except FieldSyntaxError:
        return (0, 0)

    if end < start:
        return (0, 0)
    if value >> (end - start + 1):
        return (0, 0)

    return ((value << start), range_mask(end, start))


@_dataclasses.dataclass(eq=True, frozen=True)
class ShiftRight:
    amount: int = 0

    def __post_init__(self):
        if not isinstance(self.amount, int) or self.amount < 0:
            raise ValueError(self.amount)

    @property
    def signed(self):
        return self.amount

    def __call__(self, value):
        return (value >> self.amount)

    def __str__(self):
        return f">> {self.amount}"


@_dataclasses.dataclass(eq=True, frozen=True)
class ShiftLeft:
    amount: int = 0

    def __post_init__(self):
        if not isinstance(self.amount, int) or self.amount < 0:
            raise ValueError(self.amount)

    @property
    def signed(self):
        return -self.amount

    def __call__(self, value):
        return ((value << self.amount) & WORD_MASK)

    def __str__(self):
        return f"<< {self.amount}"


def make_shift(amount):
    """signed shift (negative is left) to its tagged form"""
    if amount < 0:
        return ShiftLeft(-amount)
    return ShiftRight(amount)


@_dataclasses.dataclass(eq=True, frozen=True)
class DecodeStep:
    mask: int
    shift: object = ShiftRight(0)

    @classmethod
    def signed(cls, mask, amount):
        return cls(mask=mask, shift=make_shift(amount))

    @property
    def amount(self):
        return self.shift.signed

    @property
    def destination(self):
        """the bits this step fills in the reassembled value"""
        return self.shift(self.mask)

    def apply(self, word):
        return self.shift(word & self.mask)

    def __str__(self):
        mask = f"0b{self.mask:0{WORD_BITS}b}"
        if self.amount == 0:
            return f"(inst & {mask})"
        return f"(inst & {mask}) {self.shift}"


def _decode_part(part):
    (top, bottom, chunks) = grammar(EncodingGrammar).parse(part)
    if top >= WORD_BITS:
        raise FieldSyntaxError(f"bit {top} is outside the instruction word")

    if chunks is None:
        if top < bottom:
            raise FieldSyntaxError(f"reversed range {top}:{bottom}")
        yield DecodeStep(mask=range_mask(top, bottom),
            shift=ShiftRight(bottom))
        return

    # the bit after the colon in the source is not used: the chunks
    # alone say how many source bits get consumed
    src_top = top
    for (dest_top, dest_bottom) in chunks:
        if dest_top < dest_bottom:
            raise FieldSyntaxError(f"reversed range {dest_top}:{dest_bottom}")
        if dest_top >= WORD_BITS:
            raise FieldSyntaxError(f"bit {dest_top} is outside the operand value")
        width = (dest_top - dest_bottom)
        src_bottom = (src_top - width)
        if src_bottom < 0:
            raise FieldSyntaxError(f"source run exhausted in {part!r}")
        yield DecodeStep.signed(mask=range_mask(src_top, src_bottom),
            amount=(src_bottom - dest_bottom))
        src_top -= (width + 1)


def encoded_width(steps):
    width = 0
    for step in steps:
        width = max(width, step.destination.bit_length())
    return width


def parse_decode_steps(descriptor, malformed=None):
    """compiles an operand encoding into (steps, encoded width).

    parts that fail to parse are dropped, logged and, when a list is
    given, appended to ``malformed``.  a descriptor left with no steps at
    all raises EncodingError.
    """
    steps = []
    for part in descriptor.split(","):
        try:
            steps.extend(tuple(_decode_part(part)))
        except FieldSyntaxError as error:
            log("dropping operand encoding part", repr(part), error,
                kind=LogType.SkipLine)
            if malformed is not None:
                malformed.append(part)

    if not steps:
        raise EncodingError(f"no decode steps in {descriptor!r}")

    return (tuple(steps), encoded_width(steps))
