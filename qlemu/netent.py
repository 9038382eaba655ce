"""Laying out service, protocol and network database entries in QL memory."""

from __future__ import annotations

import struct

SERVENT_SIZE = 16
"""QL service entry: name, aliases, port, protocol."""
PROTOENT_SIZE = 12
"""QL protocol entry: name, aliases, number."""
NETENT_SIZE = 16
"""QL network entry: name, aliases, address type, network number."""


def _align4(size: int) -> int:
    return (size + 3) & ~3


def _long(value: int) -> bytes:
    return struct.pack(">I", value & 0xFFFFFFFF)


def _c_string(text: str) -> bytes:
    return text.encode("latin-1") + b"\0"


def _alias_block(aliases, start: int) -> tuple[int, bytes]:
    """Alias strings, padded to four bytes, then a null-ended pointer list.

    Returns the address of the pointer list and the block's bytes.
    """
    encoded = [_c_string(alias) for alias in aliases]
    strings = b"".join(encoded)
    block = bytearray(strings.ljust(_align4(len(strings)), b"\0"))
    list_addr = start + len(block)
    pointer = start
    for item in encoded:
        block += _long(pointer)
        pointer += len(item)
    block += _long(0)
    return list_addr, bytes(block)


def _named_body(name: str, start: int) -> tuple[int, bytearray]:
    name_bytes = _c_string(name)
    return start, bytearray(name_bytes.ljust(_align4(len(name_bytes)), b"\0"))


def pack_service_entry(name, aliases, port, proto, base):
    """Return the bytes of a service entry placed at QL address ``base``.

    The name is followed directly by the protocol name; only the protocol
    string is padded to four bytes. The port is stored as a plain number.
    """
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port {port} out of range")
    start = base + SERVENT_SIZE
    body = bytearray(_c_string(name))
    proto_addr = start + len(body)
    proto_bytes = _c_string(proto)
    body += proto_bytes.ljust(_align4(len(proto_bytes)), b"\0")
    aliases_addr, block = _alias_block(aliases, start + len(body))
    body += block
    header = _long(start) + _long(aliases_addr) + _long(port) + _long(proto_addr)
    return header + bytes(body)


def pack_protocol_entry(name, aliases, number, base):
    """Return the bytes of a protocol entry placed at QL address ``base``."""
    name_addr, body = _named_body(name, base + PROTOENT_SIZE)
    aliases_addr, block = _alias_block(aliases, name_addr + len(body))
    body += block
    header = _long(name_addr) + _long(aliases_addr) + _long(number)
    return header + bytes(body)


def pack_network_entry(name, aliases, addrtype, net, base):
    """Return the bytes of a network entry placed at QL address ``base``."""
    name_addr, body = _named_body(name, base + NETENT_SIZE)
    aliases_addr, block = _alias_block(aliases, name_addr + len(body))
    body += block
    header = (
        _long(name_addr) + _long(aliases_addr) + _long(addrtype) + _long(net)
    )
    return header + bytes(body)