"""SuperBASIC extension procedures and functions: link table and value encoding."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional


class ExtensionKind(enum.IntEnum):
    """Whether a SuperBASIC extension is a function or a procedure."""

    FUNCTION = 1
    PROCEDURE = 2


@dataclass(frozen=True)
class Extension:
    """One SuperBASIC keyword provided by the emulator."""

    name: str
    kind: ExtensionKind
    command: Optional[Callable] = field(default=None, compare=False)


DEFAULT_EXTENSIONS = (
    Extension("Kill_UQLX", ExtensionKind.PROCEDURE),
    Extension("UQLX_RELEASE$", ExtensionKind.FUNCTION),
    Extension("getXenv$", ExtensionKind.FUNCTION),
    Extension("getXargC", ExtensionKind.FUNCTION),
    Extension("getXarg$", ExtensionKind.FUNCTION),
    Extension("getXres", ExtensionKind.FUNCTION),
    Extension("getYres", ExtensionKind.FUNCTION),
    Extension("SCR_XLIM", ExtensionKind.FUNCTION),
    Extension("SCR_YLIM", ExtensionKind.FUNCTION),
    Extension("SCR_LLEN", ExtensionKind.FUNCTION),
    Extension("SCR_BASE", ExtensionKind.FUNCTION),
    Extension("EMU_SPEED", ExtensionKind.PROCEDURE),
    Extension("EMU_EXIT", ExtensionKind.PROCEDURE),
    Extension("EMU_VER$", ExtensionKind.FUNCTION),
)


def mangle_count(total_size, count):
    """The entry count QDOS expects for a group of names.

    Short names are counted as they are; long ones are counted in units of
    eight characters so that the name table is sized generously enough.
    """
    if count * 7 >= total_size:
        return count
    return (total_size + count + 7) // 8


def encode_float(value):
    """Encode an integer as a 6-byte QL floating point number.

    The result is a 12-bit exponent word followed by a normalised signed
    32-bit mantissa, both big-endian.
    """
    if not -0x80000000 <= value <= 0x7FFFFFFF:
        raise ValueError(f"{value} does not fit in 32 bits")
    if value == 0:
        return bytes(6)
    if value == -1:
        mantissa, shift = 0x80000000, 31
    else:
        negative = value < 0
        mantissa = ~value if negative else value
        shift = 0
        while not mantissa & 0x40000000:
            mantissa <<= 1
            shift += 1
        if negative:
            mantissa ^= (0xFFFFFFFF << shift) & 0xFFFFFFFF
    exponent = 0x81F - shift
    return exponent.to_bytes(2, "big") + (mantissa & 0xFFFFFFFF).to_bytes(4, "big")


def _encoded_name(ext: Extension) -> bytes:
    return ext.name.encode("latin-1")


def _name_table_size(extensions) -> int:
    size = 2 + 2 + 4 + 2  # two counts and the end markers
    for ext in extensions:
        size += (((len(_encoded_name(ext)) + 1) >> 1) << 1) + 2
    return size


def _check_kinds(extensions) -> None:
    for ext in extensions:
        if not isinstance(ext.kind, ExtensionKind):
            raise ValueError(f"wrong basic extension type {ext.kind!r}")


def table_size(extensions):
    """Bytes to allocate for the link table and instruction stubs of ``extensions``."""
    extensions = list(extensions)
    _check_kinds(extensions)
    return _name_table_size(extensions) + 2 * len(extensions) + 12 + 100


def build_link_table(extensions, base, command_code):
    """Build the BP.INIT link table for ``extensions`` placed at ``base``.

    Procedures are listed before functions, each group in the order given.
    Every keyword gets a one-word stub holding ``command_code``; the table
    entry points at it. Returns the table bytes and a mapping from each
    stub's address to its extension.
    """
    extensions = list(extensions)
    _check_kinds(extensions)
    if base & 1:
        raise ValueError("basic extension table must be word aligned")

    name_size = _name_table_size(extensions)
    instr_offset = ((name_size + 6 + 10) >> 1) << 1
    table = bytearray(instr_offset + 2 * len(extensions))
    addresses: dict[int, Extension] = {}
    pos = 0
    instr = instr_offset

    def put_word(offset: int, value: int) -> None:
        table[offset:offset + 2] = (value & 0xFFFF).to_bytes(2, "big")

    for kind in (ExtensionKind.PROCEDURE, ExtensionKind.FUNCTION):
        group = [ext for ext in extensions if ext.kind == kind]
        chars = sum(len(_encoded_name(ext)) for ext in group)
        put_word(pos, mangle_count(chars, len(group)))
        pos += 2
        for ext in group:
            put_word(instr, command_code)
            addresses[base + instr] = ext
            put_word(pos, instr - pos)
            pos += 2
            name = _encoded_name(ext)
            length = len(name) & 255
            table[pos] = length
            pos += 1
            table[pos:pos + length] = name[:length]
            pos += length
            if pos & 1:
                pos += 1
            instr += 2
        put_word(pos, 0)  # end of group marker
        pos += 2
    put_word(pos, 0)  # a second marker to be sure
    return bytes(table), addresses