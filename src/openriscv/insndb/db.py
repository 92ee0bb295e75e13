import argparse
import os

from openriscv.decoder.riscv_fields import (
    pattern,
)
from openriscv.decoder.riscv_standards import (
    Standard,
)
from openriscv.exceptions import (
    ResourceError,
)
from openriscv.insndb.core import (
    Database,
)


class Instruction(str):
    pass


class Word(int):
    def __new__(cls, string):
        value = int(string, 0)
        if not (0 <= value < (1 << 32)):
            raise ValueError(string)
        return super().__new__(cls, value)


def standard(string):
    value = Standard.parse(string)
    if not value.valid:
        raise ValueError(string)
    return value


def records(db, insn):
    return [operation for operation in db if operation.name == insn]


def list_command(db, args):
    for operation in db:
        print(operation.name)


def majors_command(db, args):
    for major in db.isa.major_opcodes.values():
        print(major)


def codecs_command(db, args):
    for codec in db.isa.codecs.values():
        print(codec.name, " ".join(codec.operands))


def operands_command(db, args):
    for argument in db.isa.arguments.values():
        print(argument.name, argument.type.value, argument.kind.value,
            argument.enc_width, argument.label)
        for step in argument.decoding:
            print("   ", step)


def opcodes_command(db, args):
    for operation in records(db, args["insn"]):
        print(pattern(operation.test, operation.mask),
            f"0x{operation.test:08x}", f"0x{operation.mask:08x}",
            "-" if operation.major_opcode is None
                else operation.major_opcode.name)


def standards_command(db, args):
    for operation in records(db, args["insn"]):
        print(operation.standards)


def decode_command(db, args):
    word = args["word"]
    (operation, values) = db.isa.decode(word, standard=args["standard"])
    if operation is None:
        print(f"0x{word:08x}", "unknown")
        return
    fields = [f"0x{word:08x}", operation.name]
    if values:
        fields.append(", ".join(f"{name}={value}"
            for (name, value) in values.items()))
    print(*fields)


def dump_command(db, args):
    isa = db.isa
    for (extension, name) in isa.extension_names.items():
        print("extension", extension.value, name)
    for major in isa.major_opcodes.values():
        print("major", major)
    for codec in isa.codecs.values():
        print("codec", codec.name, " ".join(codec.operands))
    for argument in isa.arguments.values():
        decoding = ", ".join(map(str, argument.decoding))
        print("operand", argument.name, argument.type.value,
            argument.enc_width, argument.label, decoding)
    for operation in isa.operations:
        print("operation", operation.name,
            pattern(operation.test, operation.mask),
            operation.codec.name, operation.standards)
    for (compressed, expanded) in isa.expansions.items():
        print("expansion", compressed, expanded)
    for diagnostic in isa.diagnostics:
        print("dropped", diagnostic)


def main():
    commands = {
        "list": (
            list_command,
            "list available instructions",
        ),
        "majors": (
            majors_command,
            "print assigned major opcodes",
        ),
        "codecs": (
            codecs_command,
            "print codecs and their operands",
        ),
        "operands": (
            operands_command,
            "print operands and their decode steps",
        ),
        "opcodes": (
            opcodes_command,
            "print instruction opcodes",
        ),
        "standards": (
            standards_command,
            "print instruction standards",
        ),
        "decode": (
            decode_command,
            "decode an instruction word",
        ),
        "dump": (
            dump_command,
            "print the whole model",
        ),
    }

    main_parser = argparse.ArgumentParser()
    main_parser.add_argument("-l", "--log",
        help="activate logging",
        action="store_true",
        default=False)
    main_parser.add_argument("-r", "--root",
        help="directory holding the ISA tables",
        default=None)
    main_subparser = main_parser.add_subparsers(dest="command", required=True)

    for (command, (handler, helper)) in commands.items():
        parser = main_subparser.add_parser(command, help=helper)
        if command in ("opcodes", "standards"):
            parser.add_argument("insn", type=Instruction,
                metavar="INSN", help="instruction")
        elif command == "decode":
            parser.add_argument("word", type=Word,
                metavar="WORD", help="instruction word (0x, 0b or decimal)")
            parser.add_argument("-s", "--standard", type=standard,
                default=None, help="only match this standard (e.g. rv32i)")

    args = vars(main_parser.parse_args())
    command = args.pop("command")
    log = args.pop("log")
    if not log:
        os.environ["SILENCELOG"] = "true"
    handler = commands[command][0]

    db = Database(args.pop("root"))
    try:
        handler(db, args)
    except ResourceError as error:
        main_parser.exit(1, f"{main_parser.prog}: {error}\n")


if __name__ == "__main__":
    main()
