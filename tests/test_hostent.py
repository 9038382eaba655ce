import socket
import struct

import pytest

from qlemu.hostent import (
    HEADER_SIZE,
    HOST_NOT_FOUND,
    NO_ADDRESS,
    NO_RECOVERY,
    TRY_AGAIN,
    herror_message,
    pack_host_entry,
)

BASE = 0x30000


def _long(data, addr):
    offset = addr - BASE
    return struct.unpack(">I", data[offset:offset + 4])[0]


def _string(data, addr):
    offset = addr - BASE
    end = data.index(b"\0", offset)
    return data[offset:end].decode("latin-1")


def _pointer_list(data, addr):
    values = []
    while True:
        value = _long(data, addr)
        if value == 0:
            return values
        values.append(value)
        addr += 4


def _entry(**overrides):
    args = dict(
        name="host.example.com",
        aliases=["alpha", "beta"],
        addresses=["10.0.0.1", "192.168.1.20"],
        addrtype=socket.AF_INET,
        base=BASE,
    )
    args.update(overrides)
    return pack_host_entry(**args)


def test_name_pointer_follows_header():
    data = _entry()
    assert _long(data, BASE) == BASE + HEADER_SIZE
    assert _string(data, _long(data, BASE)) == "host.example.com"


def test_addrtype_and_length():
    data = _entry()
    assert _long(data, BASE + 8) == socket.AF_INET
    assert _long(data, BASE + 12) == 4


def test_addresses_round_trip():
    data = _entry()
    pointers = _pointer_list(data, _long(data, BASE + 16))
    decoded = [
        socket.inet_ntoa(data[p - BASE:p - BASE + 4]) for p in pointers
    ]
    assert decoded == ["10.0.0.1", "192.168.1.20"]


def test_aliases_round_trip():
    data = _entry()
    pointers = _pointer_list(data, _long(data, BASE + 4))
    assert [_string(data, p) for p in pointers] == ["alpha", "beta"]


def test_address_bytes_accepted():
    data = _entry(addresses=[b"\x7f\x00\x00\x01"])
    pointers = _pointer_list(data, _long(data, BASE + 16))
    assert [data[p - BASE:p - BASE + 4] for p in pointers] == [b"\x7f\x00\x00\x01"]


def test_empty_lists_are_terminated():
    data = _entry(aliases=[], addresses=[])
    assert _pointer_list(data, _long(data, BASE + 4)) == []
    assert _pointer_list(data, _long(data, BASE + 16)) == []


def test_layout_sections_are_long_aligned():
    data = _entry(name="abc", aliases=["a"])
    assert _long(data, BASE + 4) % 4 == 0
    assert _long(data, BASE + 16) % 4 == 0
    assert len(data) % 4 == 0


def test_pointers_stay_inside_entry():
    data = _entry()
    end = BASE + len(data)
    for pointer in _pointer_list(data, _long(data, BASE + 4)):
        assert BASE + HEADER_SIZE <= pointer < end
    for pointer in _pointer_list(data, _long(data, BASE + 16)):
        assert BASE + HEADER_SIZE <= pointer + 4 <= end


def test_base_shift_moves_pointers_only():
    low = _entry(base=BASE)
    high = pack_host_entry(
        "host.example.com", ["alpha", "beta"], ["10.0.0.1", "192.168.1.20"],
        socket.AF_INET, BASE + 0x100,
    )
    assert len(low) == len(high)
    assert struct.unpack(">I", high[:4])[0] - struct.unpack(">I", low[:4])[0] == 0x100


def test_bad_address_length_rejected():
    with pytest.raises(ValueError):
        _entry(addresses=[b"\x01\x02\x03"])


@pytest.mark.parametrize(
    "code, text",
    [
        (HOST_NOT_FOUND, "Host not found"),
        (NO_ADDRESS, "No address"),
        (NO_RECOVERY, "No recovery"),
        (TRY_AGAIN, "Try again"),
    ],
)
def test_herror_messages(code, text):
    assert herror_message(code) == text


def test_unknown_herror_is_empty():
    assert herror_message(99) == ""