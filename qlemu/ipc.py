"""The keyboard and status side of the QL's 8049 IPC."""

from __future__ import annotations

CHAR_BUFF_LEN = 50

ALT = 1
CTRL = 2
SHIFT = 4

# number of parameter bytes that follow each IPC command
IPC_LEN = (0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 16, 0, 0, 0, 0, 0)


class IPCController:
    """Queues keystrokes and answers IPC commands written byte by byte."""

    def __init__(self, key_rows=None):
        rows = list(key_rows) if key_rows is not None else [0] * 8
        if len(rows) != 8:
            raise ValueError("the keyboard matrix has eight rows")
        self.key_rows = rows
        self.shift = False
        self.control = False
        self.alt = False
        self.key_down = False
        self.sound_on = False
        self.pending_ch1_receive = False
        self.pending_ch2_receive = False
        self.ascii_char = 0

        self._keys: list[tuple[int, int, int]] = []
        self._command = 0
        self._params_left = 0
        self._params: list[int] = []
        self._reply: list[tuple[int, int]] = []

    def queue_key(self, modifiers, code, ascii_char):
        """Add a keystroke; ``modifiers`` combines SHIFT, CTRL and ALT."""
        mod = 0
        if modifiers & SHIFT:
            mod |= 4
        if modifiers & CTRL:
            mod |= 2
        if modifiers & ALT:
            mod |= 1
        self._keys.append((mod, code & 0xFF, ascii_char & 0xFFFF))
        # a full ring buffer wraps onto itself and looks empty again
        if len(self._keys) == CHAR_BUFF_LEN:
            self._keys.clear()

    def pending_count(self):
        """Number of keystrokes waiting."""
        return len(self._keys)

    def key_row(self, row):
        """State of keyboard matrix row ``row``; row 7 carries the modifiers."""
        value = self.key_rows[row]
        if row == 7:
            value += int(self.shift) + (int(self.alt) << 2) + (int(self.control) << 1)
        return value & 0xFF

    def write_byte(self, value):
        """Accept one byte from the main CPU: a command or a parameter."""
        if self._params_left:
            self._params_left -= 1
            self._params.append(value & 0xFF)
        else:
            self._command = value & 15
            self._params_left = IPC_LEN[self._command]
            self._params = []
        if not self._params_left:
            self._execute(self._command)

    def read_byte(self):
        """Return the next reply byte, or 0 if there is none."""
        if not self._reply:
            return 0
        value, self.ascii_char = self._reply.pop(0)
        return value

    def _execute(self, command: int) -> None:
        if command == 1:
            status = 0
            if self._keys or self.key_down:
                status |= 1
            if self.sound_on:
                status |= 2
            if self.pending_ch1_receive:
                status |= 16
            if self.pending_ch2_receive:
                status |= 32
            self._reply = [(status, 0)]
        elif command == 8:
            count = min(len(self._keys), 7)
            header = count | (8 if self.key_down else 0)
            reply = [(header, 0)]
            for mod, code, ascii_char in self._keys[:count]:
                reply.append((mod, ascii_char))
                reply.append((code, ascii_char))
            del self._keys[:count]
            self._reply = reply
        elif command == 9:
            self._reply = [(self.key_row(self._params[0]), 0)]
        else:
            self._reply = []