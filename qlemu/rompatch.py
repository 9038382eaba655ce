"""Searching and patching the QL ROM image."""

from __future__ import annotations

from .memory import Memory

ROM_SCAN_LIMIT = 48 * 1024

IPC_COMMAND_START = 0x2B80
IPC_READ_START = 0x2E98
IPC_WRITE_START = 0x2E78

IPC_COMMAND_SIGNATURE = 0x40E7007C
IPC_READ_SIGNATURE = 0x12BC000E
IPC_WRITE_SIGNATURE = 0xE9080000

BOOT_PATCH_ADDRESSES = (
    0x842A,  # Minerva 1.89
    0x83CA,  # Minerva 1.98
    0x83CC,  # Minerva 1.98a1
    0x8440,  # Minerva 1.91j1
    0x4BE6,  # JS
)

_DEFAULT_BOOT_NAMES = (b"mdv1", b"win1")


def _find_tagged(memory: Memory, tag: bytes) -> bool:
    """True if ``tag`` starts within the first 48K of ROM."""
    limit = min(ROM_SCAN_LIMIT, len(memory))
    window = memory.read_bytes(0, min(limit + len(tag) - 1, len(memory)))
    index = window.find(tag)
    return 0 <= index < limit


def test_minerva(memory):
    """Return True if the ROM looks like Minerva (contains "JSL1")."""
    return _find_tagged(memory, b"JSL1")


def test_minerva_version(memory, version):
    """Return True if the first four characters of ``version`` occur in ROM."""
    tag = version[:4].encode("latin-1")
    if not tag:
        raise ValueError("empty version string")
    return _find_tagged(memory, tag)


def patch_boot_device(memory, boot_device):
    """Replace the ROM's default boot device name with ``boot_device``.

    Only the known locations that hold "mdv1" or "win1" are changed, and
    only when ``boot_device`` is not empty. Returns the addresses patched.
    """
    if not boot_device:
        return []
    replacement = boot_device.encode("latin-1")[:4]
    if b"\0" in replacement:
        replacement = replacement[: replacement.index(b"\0")]
    replacement = replacement.ljust(4, b"\0")
    patched = []
    for addr in BOOT_PATCH_ADDRESSES:
        if addr + 4 > len(memory):
            continue
        if memory.read_bytes(addr, 4).lower() in _DEFAULT_BOOT_NAMES:
            memory.write_bytes(addr, replacement)
            patched.append(addr)
    return patched


def find_ipc_patches(memory):
    """Locate the IPC command, read and write routines in a JS-style ROM.

    Returns ``(command, read, write)`` addresses or ``None`` if any is missing.
    """
    command = memory.look_for(IPC_COMMAND_START, IPC_COMMAND_SIGNATURE, 2000)
    if command is None:
        return None
    read = memory.look_for(IPC_READ_START, IPC_READ_SIGNATURE, 2000)
    if read is None:
        return None
    write = memory.look_for(IPC_WRITE_START, IPC_WRITE_SIGNATURE, 2000)
    if write is None:
        return None
    return command, read, write


def look_for_pair(memory, addr, value, word, limit):
    """Find the long ``value`` followed, four bytes on, by the word ``word``.

    Scans in word steps from ``addr`` using a shared budget of ``limit``
    steps. Returns the address of ``value`` or ``None``.
    """
    remaining = limit
    value &= 0xFFFFFFFF
    word &= 0xFFFF
    try:
        while True:
            while True:
                if remaining <= 0:
                    remaining -= 1
                    break
                remaining -= 1
                if memory.read_long(addr) == value:
                    break
                addr += 2
            if memory.read_word(addr + 4) == word:
                return addr if remaining > 0 else None
            addr += 2
            if remaining <= 0:
                return None
    except IndexError:
        return None