import struct

import pytest

from qlemu.netent import (
    NETENT_SIZE,
    PROTOENT_SIZE,
    SERVENT_SIZE,
    pack_network_entry,
    pack_protocol_entry,
    pack_service_entry,
)

BASE = 0x30000


def _long_at(blob, addr):
    offset = addr - BASE
    return struct.unpack(">I", blob[offset:offset + 4])[0]


def _string_at(blob, addr):
    offset = addr - BASE
    end = blob.index(b"\0", offset)
    return blob[offset:end].decode("latin-1")


def _aliases_at(blob, addr):
    names = []
    while True:
        pointer = _long_at(blob, addr)
        if pointer == 0:
            return names
        names.append(_string_at(blob, pointer))
        addr += 4


def test_service_entry_round_trip():
    blob = pack_service_entry("smtp", ["mail", "mx"], 25, "tcp", BASE)
    assert _string_at(blob, _long_at(blob, BASE)) == "smtp"
    assert _aliases_at(blob, _long_at(blob, BASE + 4)) == ["mail", "mx"]
    assert _long_at(blob, BASE + 8) == 25
    assert _string_at(blob, _long_at(blob, BASE + 12)) == "tcp"


def test_service_name_follows_header():
    blob = pack_service_entry("ftp", [], 21, "tcp", BASE)
    assert _long_at(blob, BASE) == BASE + SERVENT_SIZE
    # protocol string comes straight after the name and its terminator
    assert _long_at(blob, BASE + 12) == BASE + SERVENT_SIZE + len("ftp") + 1


def test_service_without_aliases():
    blob = pack_service_entry("echo", [], 7, "udp", BASE)
    assert _aliases_at(blob, _long_at(blob, BASE + 4)) == []


def test_service_port_range():
    with pytest.raises(ValueError):
        pack_service_entry("x", [], 70000, "tcp", BASE)


def test_protocol_entry_round_trip():
    blob = pack_protocol_entry("tcp", ["TCP"], 6, BASE)
    assert _long_at(blob, BASE) == BASE + PROTOENT_SIZE
    assert _string_at(blob, _long_at(blob, BASE)) == "tcp"
    assert _aliases_at(blob, _long_at(blob, BASE + 4)) == ["TCP"]
    assert _long_at(blob, BASE + 8) == 6


def test_network_entry_round_trip():
    blob = pack_network_entry("loopback", ["lo"], 2, 127, BASE)
    assert _long_at(blob, BASE) == BASE + NETENT_SIZE
    assert _string_at(blob, _long_at(blob, BASE)) == "loopback"
    assert _aliases_at(blob, _long_at(blob, BASE + 4)) == ["lo"]
    assert _long_at(blob, BASE + 8) == 2
    assert _long_at(blob, BASE + 12) == 127


def test_alias_list_is_long_aligned():
    blob = pack_protocol_entry("udp", ["a", "bcd", "efghij"], 17, BASE)
    assert _long_at(blob, BASE + 4) % 4 == 0
    assert len(blob) % 4 == 0