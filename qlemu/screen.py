"""Screen geometry and the Pointer Environment screen patch."""

from __future__ import annotations

from dataclasses import dataclass

_PE_SCREEN_BASE = 0x20000
_PE_SCREEN_LEN = 0x8000
_PE_LINE_LEN = 0x80
_PE_XRES = 0x200
_PE_YRES = 0x100
_SEARCH_LIMIT = 24000


@dataclass
class ScreenSpecs:
    """Where screen memory lives and its geometry."""

    qm_lo: int = 128 * 1024
    qm_hi: int = 128 * 1024 + 32 * 1024
    qm_len: int = 0x8000
    linel: int = 128
    yres: int = 256
    xres: int = 512


def patch_pointer_environment(memory, start, screen):
    """Rewrite the Pointer Environment screen definition with ``screen``.

    The definition block (base, length, line length, x and y resolution) is
    searched for from ``start``. Returns its address, or ``None`` if no
    block describing the standard QL screen was found.
    """
    addr = start
    while True:
        found = memory.look_for(addr, _PE_SCREEN_BASE, _SEARCH_LIMIT)
        if found is None:
            return None
        try:
            matches = (
                memory.read_long(found + 4) == _PE_SCREEN_LEN
                and memory.read_word(found + 8) == _PE_LINE_LEN
                and memory.read_word(found + 10) == _PE_XRES
                and memory.read_word(found + 12) == _PE_YRES
            )
        except IndexError:
            return None
        if matches:
            memory.write_long(found, screen.qm_lo)
            memory.write_long(found + 4, screen.qm_len)
            memory.write_word(found + 8, screen.linel)
            memory.write_word(found + 10, screen.xres)
            memory.write_word(found + 12, screen.yres)
            return found
        addr = found + 2