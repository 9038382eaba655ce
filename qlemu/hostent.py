"""Laying out host database entries in QL memory."""

from __future__ import annotations

import socket
import struct

HEADER_SIZE = 20
"""Size of the QL host entry: name, aliases, type, length, address list."""

HOST_NOT_FOUND = 1
TRY_AGAIN = 2
NO_RECOVERY = 3
NO_ADDRESS = 4

_HERROR_MESSAGES = {
    HOST_NOT_FOUND: "Host not found",
    NO_ADDRESS: "No address",
    NO_RECOVERY: "No recovery",
    TRY_AGAIN: "Try again",
}


def _align4(size: int) -> int:
    return (size + 3) & ~3


def _long(value: int) -> bytes:
    return struct.pack(">I", value & 0xFFFFFFFF)


def _address_bytes(address) -> bytes:
    if isinstance(address, str):
        return socket.inet_aton(address)
    data = bytes(address)
    if len(data) != 4:
        raise ValueError(f"an IPv4 address has four bytes, not {len(data)}")
    return data


def _c_string(text: str) -> bytes:
    return text.encode("latin-1") + b"\0"


def pack_host_entry(name, aliases, addresses, addrtype, base):
    """Return the bytes of a host entry placed at QL address ``base``.

    The 20-byte header holds pointers to the name, the alias list and the
    address list plus the address type and length; the strings and lists
    follow it. Addresses are stored in network byte order.
    """
    raw_addresses = [_address_bytes(address) for address in addresses]
    body = bytearray()

    def here() -> int:
        return base + HEADER_SIZE + len(body)

    name_addr = here()
    name_bytes = _c_string(name)
    body += name_bytes.ljust(_align4(len(name_bytes)), b"\0")

    list_addr = here()
    slots = len(raw_addresses) + 1
    data_addr = list_addr + 4 * slots
    for index in range(len(raw_addresses)):
        body += _long(data_addr + 4 * index)
    body += _long(0)
    for address in raw_addresses:
        body += address

    strings_addr = here()
    alias_bytes = [_c_string(alias) for alias in aliases]
    strings = b"".join(alias_bytes)
    body += strings.ljust(_align4(len(strings)), b"\0")
    aliases_addr = here()
    pointer = strings_addr
    for encoded in alias_bytes:
        body += _long(pointer)
        pointer += len(encoded)
    body += _long(0)

    header = (
        _long(name_addr)
        + _long(aliases_addr)
        + _long(addrtype)
        + _long(4)
        + _long(list_addr)
    )
    return header + bytes(body)


def herror_message(code):
    """Text for a resolver error code, or an empty string if it is unknown."""
    return _HERROR_MESSAGES.get(code, "")