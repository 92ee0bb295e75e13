import dataclasses as _dataclasses
import operator as _operator
import pathlib as _pathlib
import types as _types

from functools import cached_property

from openriscv.decoder.riscv_enums import (
    ArgKind as _ArgKind,
    ArgType as _ArgType,
    find_wiki_dir as _find_wiki_dir,
)
from openriscv.decoder.riscv_fields import (
    WORD_MASK as _WORD_MASK,
    parse_decode_steps as _parse_decode_steps,
    parse_match_spec as _parse_match_spec,
    pattern as _pattern,
)
from openriscv.decoder.riscv_standards import (
    Extension as _Extension,
    Standard as _Standard,
    Standards as _Standards,
)
from openriscv.exceptions import (
    EncodingError as _EncodingError,
    ResourceError as _ResourceError,
)
from openriscv.insndb.idents import (
    make_ident_title as _make_ident_title,
    make_ident_underscores as _make_ident_underscores,
)
from openriscv.util import (
    log as _log,
    LogType as _LogType,
    read_lines as _read_lines,
)

# the low 7 bits of a standard-length instruction
MAJOR_OPCODE_MASK = 0b1111111
# bits 0-1 both set: not a 16-bit compressed instruction
MAJOR_OPCODE_LOW = 0b11


class DataclassMeta(type):
    def __new__(metacls, name, bases, ns):
        cls = super().__new__(metacls, name, bases, ns)
        return _dataclasses.dataclass(cls, eq=True, frozen=True)


class Dataclass(metaclass=DataclassMeta):
    pass


def is_assigned_opcode_name(name):
    """only currently assigned major opcodes have all-uppercase names.

    the other rows in the major opcode table mark coding space that is
    reserved ("reserved", "custom-0", "48b", ...), and are not decodable.
    """
    return (name.upper() == name)


class Diagnostic(Dataclass):
    resource: str
    text: str
    reason: str

    def __str__(self):
        return f"{self.resource}: {self.text!r}: {self.reason}"


class MajorOpcode(Dataclass):
    name: str
    num: int

    @property
    def func_name(self):
        return _make_ident_underscores(self.name)

    @property
    def type_name(self):
        return _make_ident_title(self.name)

    def __str__(self):
        return f"{self.name} 0b{self.num:07b}"


class Codec(Dataclass):
    name: str
    operands: tuple = ()

    @property
    def func_name(self):
        return _make_ident_underscores(self.name)

    @property
    def type_name(self):
        return _make_ident_title(self.name)


class Argument(Dataclass):
    name: str
    type: _ArgType
    decoding: tuple
    enc_width: int
    label: str

    @property
    def func_name(self):
        return _make_ident_underscores(self.name)

    @property
    def type_name(self):
        return _make_ident_title(self.name)

    @property
    def func_local_name(self):
        return _make_ident_underscores(self.label).replace("_", "")

    @property
    def type_local_name(self):
        return _make_ident_title(self.label)

    @property
    def kind(self):
        return self.type.kind(self.enc_width)

    def extract(self, word):
        value = 0
        for step in self.decoding:
            value |= step.apply(word)
        return value

    def decode(self, word):
        """the operand value as a consumer would see it.

        compressed register specifiers name x8-x15.
        """
        value = self.extract(word)
        kind = self.kind
        if kind is _ArgKind.FLAG:
            return bool(value)
        if kind is _ArgKind.SIGNED:
            sign = (1 << (self.enc_width - 1))
            return ((value ^ sign) - sign)
        if self.type is _ArgType.COMPRESSED_REG:
            return (value + 8)
        return value


class Operation(Dataclass):
    name: str
    test: int
    mask: int
    codec: Codec
    major_opcode: MajorOpcode = None
    standards: _Standards = _Standards()
    full_name: str = ""
    description: str = ""
    pseudocode: str = ""

    def __post_init__(self):
        if (self.test & ~self.mask):
            raise ValueError(f"{self.name}: test bits outside mask")

    @property
    def func_name(self):
        return _make_ident_underscores(self.name)

    @property
    def type_name(self):
        return _make_ident_title(self.name)

    @property
    def compressed(self):
        return not (self.mask & 0xffff0000)

    def match(self, word):
        return ((word & self.mask) == self.test)

    def __repr__(self):
        pattern = _pattern(self.test, self.mask)
        return f"{self.__class__.__name__}({self.name} {pattern})"


class ISA(Dataclass):
    extension_names: _types.MappingProxyType
    major_opcodes: _types.MappingProxyType
    codecs: _types.MappingProxyType
    arguments: _types.MappingProxyType
    operations: tuple
    expansions: _types.MappingProxyType
    diagnostics: tuple = ()

    @cached_property
    def partitions(self):
        partitions = {num:[] for num in self.major_opcodes}
        partitions[None] = []
        for operation in self.operations:
            major = operation.major_opcode
            partitions[None if major is None else major.num].append(operation)
        return _types.MappingProxyType(
            {num:tuple(ops) for (num, ops) in partitions.items()})

    def candidates(self, word):
        """operations worth matching against word.

        a standard-length word with a known major opcode selects that
        opcode's operations, everything else falls back to the operations
        that have no major opcode.
        """
        num = (word & MAJOR_OPCODE_MASK)
        if (num & MAJOR_OPCODE_LOW) == MAJOR_OPCODE_LOW:
            if num in self.major_opcodes:
                return self.partitions[num]
        return self.partitions[None]

    def lookup(self, word, standard=None):
        """the most specific operation matching word, or None"""
        word &= _WORD_MASK
        matches = []
        for operation in self.candidates(word):
            if standard is not None and not operation.standards.has(standard):
                continue
            if operation.match(word):
                matches.append(operation)
        if not matches:
            return None
        return max(matches, key=lambda operation: bin(operation.mask).count("1"))

    def operations_for(self, standard):
        standard = _Standard(standard)
        return tuple(operation for operation in self.operations
            if operation.standards.has(standard))

    def operands(self, operation):
        return tuple(self.arguments[name]
            for name in operation.codec.operands
            if name in self.arguments)

    def decode(self, word, standard=None):
        operation = self.lookup(word, standard=standard)
        if operation is None:
            return (None, {})
        values = {}
        for argument in self.operands(operation):
            values[argument.name] = argument.decode(word)
        return (operation, values)


def _fields(line):
    return line.split()


def load_extension_names(lines, dropped):
    names = {}
    for line in lines:
        fields = _fields(line)
        if len(fields) < 5:
            continue

        # one name per letter: the 64 and 128 bit rows mostly repeat the
        # 32 bit text with "in addition to RV32..." on the end
        if fields[1] != "32":
            continue

        try:
            extension = _Extension(fields[2].upper())
            if extension is _Extension.NONE:
                raise ValueError(fields[2])
        except ValueError:
            dropped.append(("extensions", line, "unknown extension"))
            continue

        (_, quote, name) = line.partition('"')
        if not quote:
            continue
        (name, _, _) = name.partition('"')

        name = name[len("RV32x "):]
        prefix = "Standard Extension for "
        if name.startswith(prefix):
            name = name[len(prefix):]

        names[extension] = name.strip()

    return names


def load_major_opcodes(lines, accept=is_assigned_opcode_name):
    majors = {}
    for line in lines:
        fields = _fields(line)
        if len(fields) < 2:
            continue
        (*specs, name) = fields
        if not accept(name):
            continue

        num = MAJOR_OPCODE_LOW
        for spec in specs:
            (test, _) = _parse_match_spec(spec)
            num |= test
        num &= 0xff

        majors[num] = MajorOpcode(name=name, num=num)

    return majors


def load_codecs(lines):
    codecs = {}
    for line in lines:
        fields = _fields(line)
        if len(fields) < 2:
            continue
        (name, _, *operands) = fields
        codecs[name] = Codec(name=name, operands=tuple(operands))

    return codecs


def load_arguments(lines, dropped):
    arguments = {}
    for line in lines:
        fields = _fields(line)
        if len(fields) < 4:
            continue
        (name, encoding, argtype, label, *_) = fields

        try:
            argtype = _ArgType(argtype)
        except ValueError:
            dropped.append(("operands", line.strip(), "unknown operand type"))
            continue

        malformed = []
        try:
            (decoding, width) = _parse_decode_steps(encoding,
                malformed=malformed)
        except _EncodingError as error:
            dropped.append(("operands", line.strip(), str(error)))
            continue
        for part in malformed:
            dropped.append(("operands", part, "malformed encoding part"))

        arguments[name] = Argument(name=name, type=argtype,
            decoding=decoding, enc_width=width, label=label)

    return arguments


def load_strings(lines):
    """mnemonic "text" pairs: the text is whatever the first quotes hold"""
    strings = {}
    for line in lines:
        (mnemonic, quote, text) = line.partition('"')
        if not quote:
            continue
        (text, _, _) = text.partition('"')
        strings[mnemonic.strip()] = text.strip()

    return strings


def load_operations(lines, majors, codecs, dropped,
        full_names=None, descriptions=None, pseudocode=None):
    if full_names is None:
        full_names = {}
    if descriptions is None:
        descriptions = {}
    if pseudocode is None:
        pseudocode = {}

    operations = []
    for line in lines:
        fields = _fields(line)
        if len(fields) < 3:
            continue
        (name, *fields) = fields

        # field names and matching specs are mixed up until the codec
        # name: the field names are implied by the codec, so drop them
        (test, mask, codec) = (0, 0, None)
        tokens = iter(fields)
        for token in tokens:
            if token in codecs:
                codec = codecs[token]
                break
            if not token[0].isdigit():
                continue
            (value, bits) = _parse_match_spec(token)
            if not bits:
                dropped.append(("opcodes", token, "malformed matching spec"))
            test |= value
            mask |= bits

        if codec is None:
            dropped.append(("opcodes", line.strip(), "no codec"))
            continue

        test &= _WORD_MASK
        mask &= _WORD_MASK

        # standard-length operations can be partitioned by major opcode
        # instead of scanning over all of them
        major = None
        if (mask & MAJOR_OPCODE_MASK) == MAJOR_OPCODE_MASK:
            major = majors.get(test & MAJOR_OPCODE_MASK)

        # names are only unique within one architecture size
        standards = []
        for token in tokens:
            standard = _Standard.parse(token)
            if not standard.valid:
                dropped.append(("opcodes", token, "invalid standard"))
                continue
            standards.append(standard)

        operations.append(Operation(name=name,
            test=test, mask=mask,
            codec=codec, major_opcode=major,
            standards=_Standards.with_bases(standards),
            full_name=full_names.get(name, ""),
            description=descriptions.get(name, ""),
            pseudocode=pseudocode.get(name, "")))

    return sorted(operations, key=_operator.attrgetter("name"))


def load_expansions(lines):
    expansions = {}
    for line in lines:
        fields = _fields(line)
        if len(fields) < 2:
            continue
        expansions[fields[0]] = fields[1]

    return expansions


class Database:
    """assembles the ISA model from the tables in one directory.

    every table must load: a missing or unreadable one raises
    ResourceError naming it, and no model is produced.
    """
    EXTENSIONS = "extensions"
    MAJOR_OPCODES = "opcode-majors"
    CODECS = "codecs"
    OPERANDS = "operands"
    FULL_NAMES = "opcode-fullnames"
    DESCRIPTIONS = "opcode-descriptions"
    PSEUDOCODE = "opcode-pseudocode-alt"
    OPERATIONS = "opcodes"
    EXPANSIONS = "compression"

    def __init__(self, root=None, opcode_filter=is_assigned_opcode_name):
        if root is None:
            root = _find_wiki_dir()
        self.__root = _pathlib.Path(root)
        self.__opcode_filter = opcode_filter

        return super().__init__()

    @property
    def root(self):
        return self.__root

    def read(self, resource):
        _log("loading", resource, kind=_LogType.Stage)
        path = (self.__root / resource)
        try:
            return tuple(_read_lines(path))
        except (OSError, UnicodeDecodeError) as error:
            raise _ResourceError(resource, error) from error

    @cached_property
    def isa(self):
        dropped = []
        extension_names = load_extension_names(
            self.read(self.EXTENSIONS), dropped)
        majors = load_major_opcodes(self.read(self.MAJOR_OPCODES),
            accept=self.__opcode_filter)
        codecs = load_codecs(self.read(self.CODECS))
        arguments = load_arguments(self.read(self.OPERANDS), dropped)
        full_names = load_strings(self.read(self.FULL_NAMES))
        descriptions = load_strings(self.read(self.DESCRIPTIONS))
        pseudocode = load_strings(self.read(self.PSEUDOCODE))
        operations = load_operations(self.read(self.OPERATIONS),
            majors, codecs, dropped,
            full_names=full_names,
            descriptions=descriptions,
            pseudocode=pseudocode)
        expansions = load_expansions(self.read(self.EXPANSIONS))

        diagnostics = tuple(Diagnostic(resource=resource,
            text=text, reason=reason)
            for (resource, text, reason) in dropped)
        for diagnostic in diagnostics:
            _log("dropped", diagnostic, kind=_LogType.SkipLine)

        def frozen(mapping, key=None):
            return _types.MappingProxyType(dict(sorted(mapping.items(),
                key=key)))

        return ISA(
            extension_names=frozen(extension_names,
                key=lambda item: item[0].value),
            major_opcodes=frozen(majors),
            codecs=frozen(codecs),
            arguments=frozen(arguments),
            operations=tuple(operations),
            expansions=frozen(expansions),
            diagnostics=diagnostics)

    def __iter__(self):
        yield from self.isa.operations

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self.__root)!r})"

    def __getitem__(self, key):
        if isinstance(key, int):
            return self.isa.lookup(key)
        elif isinstance(key, str):
            for operation in self.isa.operations:
                if operation.name == key:
                    return operation
            return None

        raise ValueError("instruction word or name expected")
