import pytest

from qlemu.ipc import ALT, CHAR_BUFF_LEN, CTRL, SHIFT, IPCController


def test_status_idle():
    ipc = IPCController()
    ipc.write_byte(1)
    assert ipc.read_byte() == 0


def test_status_reports_key_and_sound():
    ipc = IPCController()
    ipc.queue_key(0, 33, ord("a"))
    ipc.sound_on = True
    ipc.write_byte(1)
    assert ipc.read_byte() == 1 | 2


def test_read_keyboard_returns_queued_key():
    ipc = IPCController()
    ipc.queue_key(SHIFT, 33, ord("A"))
    ipc.write_byte(8)
    assert ipc.read_byte() == 1
    assert ipc.read_byte() == 4
    assert ipc.ascii_char == ord("A")
    assert ipc.read_byte() == 33
    assert ipc.pending_count() == 0


def test_modifier_bits():
    ipc = IPCController()
    ipc.queue_key(SHIFT | CTRL | ALT, 5, 0)
    ipc.write_byte(8)
    ipc.read_byte()
    assert ipc.read_byte() == 7


def test_read_keyboard_at_most_seven():
    ipc = IPCController()
    for n in range(10):
        ipc.queue_key(0, n, 0)
    ipc.write_byte(8)
    assert ipc.read_byte() == 7
    codes = []
    for _ in range(7):
        ipc.read_byte()
        codes.append(ipc.read_byte())
    assert codes == list(range(7))
    assert ipc.pending_count() == 3


def test_key_down_flag_in_header():
    ipc = IPCController()
    ipc.key_down = True
    ipc.write_byte(8)
    assert ipc.read_byte() == 8


def test_keyboard_row_command():
    ipc = IPCController(key_rows=[0, 0, 0, 0x42, 0, 0, 0, 0])
    ipc.write_byte(9)
    ipc.write_byte(3)
    assert ipc.read_byte() == 0x42


def test_row_seven_adds_modifiers():
    ipc = IPCController(key_rows=[0] * 8)
    ipc.shift = True
    ipc.control = True
    ipc.alt = True
    assert ipc.key_row(7) == 1 + 2 + 4
    assert ipc.key_row(6) == 0


def test_sound_command_consumes_parameters():
    ipc = IPCController()
    ipc.queue_key(0, 1, 0)
    ipc.write_byte(10)
    for _ in range(16):
        ipc.write_byte(0xFF)
    assert ipc.read_byte() == 0
    ipc.write_byte(1)
    assert ipc.read_byte() == 1


def test_full_buffer_wraps():
    ipc = IPCController()
    for n in range(CHAR_BUFF_LEN - 1):
        ipc.queue_key(0, n, 0)
    assert ipc.pending_count() == CHAR_BUFF_LEN - 1
    ipc.queue_key(0, 99, 0)
    assert ipc.pending_count() == 0
    ipc.queue_key(0, 100, 0)
    assert ipc.pending_count() == 1


def test_bad_row_count_rejected():
    with pytest.raises(ValueError):
        IPCController(key_rows=[0, 0, 0])