"""Emulation of the QL's IPC beeper: parameter packing and waveform output."""

from __future__ import annotations

import random
import threading
from dataclasses import dataclass

TICK_8049 = 22917
"""IPC ticks per second."""

DEFAULT_FREQUENCY = 24000
MAX_IPC_PARAMS = 16
_BUFFERS = 3


def pack_ipc_command(arg):
    """Pack the nibble/byte parameters of an IPC sound command.

    ``arg`` is the raw command block: byte 1 holds the parameter count,
    bytes 2-5 a big-endian mask giving two bits per parameter (0 takes the
    low nibble, 2 the whole byte, anything else skips it), and the
    parameters start at byte 6. Returns 16 packed bytes.
    """
    mask = (arg[2] << 24) | (arg[3] << 16) | (arg[4] << 8) | arg[5]
    num_bytes = min(arg[1], MAX_IPC_PARAMS)
    pack = bytearray(MAX_IPC_PARAMS + 1)
    count = 0
    half = False
    for i in range(num_bytes):
        kind = (mask >> (2 * i)) & 0x03
        value = arg[6 + i]
        if kind == 0:
            if not half:
                pack[count] = (value & 0x0F) << 4
            else:
                pack[count] = (pack[count] + (value & 0x0F)) & 0xFF
                count += 1
            half = not half
        elif kind == 2:
            if not half:
                pack[count] = value
                count += 1
            else:
                pack[count] = (pack[count] + ((value & 0xF0) >> 4)) & 0xFF
                count += 1
                if count <= MAX_IPC_PARAMS:
                    pack[count] = (value & 0x0F) << 4
    return bytes(pack[:MAX_IPC_PARAMS])


def pitch_to_half_sample_count(pitch, frequency):
    """Samples in one half period of the wave for a QL pitch value."""
    pitch = (pitch + 255) % 256  # the ROM is off by one
    return int(frequency * (pitch + 10.6) / TICK_8049 + 0.5)


@dataclass
class BeepParameters:
    """The decoded parameters of one BEEP command."""

    length: int = 0
    pitch: int = 0
    pitch_2: int = 0
    grd_x: int = 0
    grd_y: int = 0
    wrap: int = 0
    random: int = 0
    fuzz: int = 0

    @classmethod
    def from_packed(cls, params):
        """Decode the output of :func:`pack_ipc_command`."""
        grd_y = (params[6] & 0xF0) >> 4
        if grd_y > 7:
            grd_y -= 0x10
        return cls(
            length=params[4] | ((params[5] & 0x7F) << 8),
            pitch=params[0],
            pitch_2=params[1],
            grd_x=params[2] | ((params[3] & 0x7F) << 8),
            grd_y=grd_y,
            wrap=params[6] & 0x0F,
            random=(params[7] & 0xF0) >> 4,
            fuzz=params[7] & 0x0F,
        )


class SoundGenerator:
    """Produces signed 8-bit mono samples for the beeps it is given.

    A volume of 0 disables sound entirely. Other volumes are taken as an
    absolute value, capped at 10, and scaled to an amplitude of 12 per step.
    """

    def __init__(self, volume, frequency=DEFAULT_FREQUENCY, rng=None):
        self.enabled = volume != 0
        self.amplitude = 12 * min(abs(volume), 10)
        self.frequency = frequency
        self._rng = rng if rng is not None else random.Random()
        self._lock = threading.Lock()
        self._beeps = [BeepParameters() for _ in range(_BUFFERS)]
        self._in_use = -1
        self._last_written = -1
        self._sound_on = False

        self._current_pitch = 0
        self._random = 0
        self._fuzz = 0
        self._left = 0
        self._pitch_left = 0
        self._half_cycle = 0
        self._wave_state = 0
        self._cycle_point = 0
        self._wrap_count = 0
        self._direction = 1

    # -- commands -------------------------------------------------------

    def beep(self, arg):
        """Start the beep described by the IPC command block ``arg``."""
        if not self.enabled:
            return
        params = BeepParameters.from_packed(pack_ipc_command(arg))
        self._sound_on = True
        with self._lock:
            slot = next(
                n for n in range(_BUFFERS)
                if n != self._in_use and n != self._last_written
            )
            self._beeps[slot] = params
            self._last_written = slot

    def kill(self):
        """Stop any sound playing or waiting to play."""
        if self.enabled:
            with self._lock:
                self._in_use = -1
                self._last_written = -1

    def active(self):
        """True while a beep is being produced."""
        return self._sound_on

    # -- output ---------------------------------------------------------

    @property
    def _beep(self) -> BeepParameters:
        return self._beeps[self._in_use]

    def render(self, length):
        """Return the next ``length`` samples as a list of signed ints."""
        buffer = [0] * length
        if not self.enabled:
            return buffer

        new_found = False
        with self._lock:
            if self._left < 0:
                self._in_use = -1
            if self._last_written >= 0 and self._last_written != self._in_use:
                self._in_use = self._last_written
                self._last_written = -1
                new_found = True

        if new_found:
            self._start_beep()

        if self._left < 0 or self._in_use == -1:
            self._sound_on = False
            return buffer

        written = 0
        if self._pitch_left < 0:
            # the previous note ended exactly at the end of the last buffer
            self._next_pitch()
        while written < length:
            remaining = length - written
            if self._pitch_left == 0:
                to_write = remaining
            elif self._pitch_left > remaining:
                to_write = remaining
                self._pitch_left -= to_write
                if self._left:
                    self._left -= to_write
            else:
                to_write = self._pitch_left
                if self._left:
                    if self._left > self._pitch_left:
                        self._left -= to_write
                    else:
                        self._left = -1
                self._pitch_left = -1

            self._populate(buffer, written, to_write)
            written += to_write

            if written < length:
                if self._left >= 0:
                    self._next_pitch()
                else:
                    self._wave_state = 0
                    self._cycle_point = 0
                    written = length
        return buffer

    def _start_beep(self) -> None:
        beep = self._beep
        self._current_pitch = beep.pitch_2 if beep.grd_y < 0 else beep.pitch
        self._random = 0
        self._fuzz = 0
        self._half_cycle = pitch_to_half_sample_count(
            self._current_pitch, self.frequency
        )
        self._left = (beep.length * self.frequency) // TICK_8049
        self._set_pitch_duration()
        self._cycle_point = 0
        self._wave_state = 0
        self._direction = 1
        self._wrap_count = beep.wrap
        self._fuzz_adjust()

    def _next_pitch(self) -> None:
        self._get_new_pitch()
        self._set_pitch_duration()

    def _get_new_pitch(self) -> None:
        beep = self._beep
        change = beep.grd_y
        if change:
            if change == -8:
                self._current_pitch = (self._current_pitch + 248) % 0x100
            else:
                step = change * self._direction
                try_pitch = (self._current_pitch + step) & 0xFF
                if beep.pitch < try_pitch < beep.pitch_2:
                    self._current_pitch = try_pitch
                elif self._wrap_count > 0:
                    self._current_pitch = beep.pitch_2 if step < 0 else beep.pitch
                    if self._wrap_count != 15:
                        self._wrap_count -= 1
                else:
                    self._current_pitch = try_pitch
                    self._wrap_count = beep.wrap
                    self._direction = -self._direction
        self._random_adjust()
        self._half_cycle = pitch_to_half_sample_count(
            self._current_pitch + self._random + self._fuzz, self.frequency
        )
        # the click heard on a real QL at each change of note
        if self._cycle_point + 1 < self._half_cycle:
            self._cycle_point += 1
        else:
            self._cycle_point -= 1

    def _fuzz_adjust(self) -> None:
        fuzz = self._beep.fuzz
        if fuzz > 7:
            self._fuzz = self._rng.randrange(1 << (fuzz - 7))
            self._half_cycle = pitch_to_half_sample_count(
                self._current_pitch + self._random + self._fuzz, self.frequency
            )
        else:
            self._fuzz = 0

    def _random_adjust(self) -> None:
        rand = self._beep.random
        if rand > 7:
            self._random = self._rng.randrange(1 << (rand - 7))
        else:
            self._random = 0

    def _set_pitch_duration(self) -> None:
        self._pitch_left = (self._beep.grd_x * self.frequency) // TICK_8049
        if self._left:
            if self._pitch_left:
                self._pitch_left = min(self._pitch_left, self._left)
            else:
                self._pitch_left = self._left

    def _populate(self, buffer, start: int, samples: int) -> None:
        if not self._wave_state:
            self._wave_state = -1
            self._fuzz_adjust()
            self._cycle_point = 0
        for pos in range(start, start + samples):
            buffer[pos] = self.amplitude * self._wave_state
            self._cycle_point += 1
            if self._cycle_point >= self._half_cycle:
                self._wave_state = -self._wave_state
                self._fuzz_adjust()
                self._cycle_point = 0