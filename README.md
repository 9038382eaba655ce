# qlemu

Components for emulating the Sinclair QL and its QDOS operating system.
The package is a library of pure-Python pieces, each usable and testable
on its own. It needs nothing beyond the standard library.

## Modules

- `qlemu.memory` – `Memory`, a block of QL address space kept in
  big-endian order. Addresses wrap at 24 bits and accesses outside the
  block raise `IndexError`. It offers `read_byte`, `read_word`,
  `read_long`, their `write_*` counterparts, `read_bytes` and
  `write_bytes`, and `look_for`, which scans in word steps for a long
  value and returns its address or `None`. `sign_extend_byte` and
  `sign_extend_word` turn raw values into signed ones.
- `qlemu.rompatch` – inspecting and patching a ROM image held in a
  `Memory`: `test_minerva` (looks for "JSL1" in the first 48K),
  `test_minerva_version`, `patch_boot_device` (replaces "mdv1"/"win1" at
  the known boot-name locations and returns the addresses changed),
  `find_ipc_patches` (locates the IPC command, read and write routines)
  and `look_for_pair`.
- `qlemu.screen` – `ScreenSpecs`, a dataclass of screen base, length,
  line length and resolution with the standard QL values as defaults,
  and `patch_pointer_environment`, which finds the Pointer Environment's
  screen definition and rewrites it from a `ScreenSpecs`.
- `qlemu.sound` – the IPC beeper: `pack_ipc_command` packs the nibble
  and byte parameters of a sound command, `BeepParameters.from_packed`
  decodes them, `pitch_to_half_sample_count` converts a QL pitch, and
  `SoundGenerator` produces signed 8-bit mono samples through `beep`,
  `kill`, `render` and `active`. Its random source can be passed in as
  `rng` for repeatable output.
- `qlemu.ipc` – `IPCController`, the keyboard queue and command
  protocol of the second processor: `queue_key`, `pending_count`,
  `write_byte` (commands and their parameters), `read_byte` (reply
  bytes) and `key_row`. It answers the status (1), keyboard read (8) and
  direct row read (9) commands; others produce no reply.
- `qlemu.basext` – SuperBASIC extension tables: `Extension`,
  `ExtensionKind`, the emulator's `DEFAULT_EXTENSIONS`, `mangle_count`,
  `encode_float` (an integer as a 6-byte QL float), `table_size` and
  `build_link_table`, which returns the BP.INIT table bytes and a map
  from each stub address to its extension.
- `qlemu.hostent` – `pack_host_entry` lays out a host entry (name,
  aliases, IPv4 addresses) at a given QL address; `herror_message`
  gives the text of a resolver error code.
- `qlemu.netent` – `pack_service_entry`, `pack_protocol_entry` and
  `pack_network_entry` do the same for service, protocol and network
  entries.

## Example

```python
from qlemu.memory import Memory
from qlemu.ipc import IPCController
from qlemu.basext import DEFAULT_EXTENSIONS, build_link_table, encode_float

mem = Memory(64 * 1024)
mem.write_long(0x100, 0x12345678)
assert mem.read_word(0x100) == 0x1234
assert mem.look_for(0x0, 0x12345678, 1000) == 0x100

ipc = IPCController()
ipc.queue_key(0, 0x2A, ord("a"))
ipc.write_byte(8)              # read keyboard
assert ipc.read_byte() == 1    # one key waiting
assert ipc.read_byte() == 0    # modifiers
assert ipc.read_byte() == 0x2A # key code

table, stubs = build_link_table(DEFAULT_EXTENSIONS, base=0x30000, command_code=0xAAAA)
assert encode_float(0) == bytes(6)
```

## What it does not do

There is no 68000 CPU core, so no code is executed and no ROM is booted;
the ROM helpers only search and rewrite bytes in a `Memory`. There is no
display window, no audio output device (the sound generator only returns
sample values), no keyboard input from the host, no file or disk devices,
no serial ports and no network sockets: `qlemu.hostent` and
`qlemu.netent` only build the byte layouts that such a device would hand
to QL programs. There is no command-line program.

## Installing

```
pip install .
```

With the test requirements, then run the tests:

```
pip install ".[test]"
pytest
```