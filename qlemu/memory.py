"""Big-endian emulated QL memory."""

from __future__ import annotations

ADDR_MASK = 0xFFFFFF


def sign_extend_byte(value):
    """Interpret the low 8 bits of ``value`` as a signed byte."""
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def sign_extend_word(value):
    """Interpret the low 16 bits of ``value`` as a signed word."""
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


class Memory:
    """A block of QL address space stored in 68000 (big-endian) byte order.

    Addresses wrap at 24 bits; reads and writes outside the block raise
    ``IndexError``. Reads return unsigned values.
    """

    def __init__(self, size):
        if size <= 0:
            raise ValueError("memory size must be positive")
        self._data = bytearray(size)

    def __len__(self) -> int:
        return len(self._data)

    def _span(self, addr: int, length: int) -> slice:
        start = addr & ADDR_MASK
        end = start + length
        if end > len(self._data):
            raise IndexError(f"address {start:#x} (+{length}) outside memory")
        return slice(start, end)

    def read_byte(self, addr):
        return self._data[self._span(addr, 1)][0]

    def read_word(self, addr):
        return int.from_bytes(self._data[self._span(addr, 2)], "big")

    def read_long(self, addr):
        return int.from_bytes(self._data[self._span(addr, 4)], "big")

    def write_byte(self, addr, value):
        self._data[self._span(addr, 1)] = bytes((value & 0xFF,))

    def write_word(self, addr, value):
        self._data[self._span(addr, 2)] = (value & 0xFFFF).to_bytes(2, "big")

    def write_long(self, addr, value):
        self._data[self._span(addr, 4)] = (value & 0xFFFFFFFF).to_bytes(4, "big")

    def read_bytes(self, addr, length):
        return bytes(self._data[self._span(addr, length)])

    def write_bytes(self, addr, data):
        self._data[self._span(addr, len(data))] = data

    def look_for(self, addr, value, limit):
        """Scan word-aligned steps from ``addr`` for the long ``value``.

        At most ``limit - 1`` positions are accepted as a match, as the ROM
        scanner does. Returns the address found or ``None``.
        """
        value &= 0xFFFFFFFF
        for step in range(max(limit - 1, 0)):
            where = addr + 2 * step
            if (where & ADDR_MASK) + 4 > len(self._data):
                return None
            if self.read_long(where) == value:
                return where
        return None