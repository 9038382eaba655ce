"""Building blocks of a Sinclair QL emulator: memory, ROM patching, screen
geometry, IPC keyboard, beeper sound, SuperBASIC extension tables and
network database entry layouts."""

__version__ = "0.1.0"