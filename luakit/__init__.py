"""Building blocks of a Lua 5.3 runtime: numbers, type tags, opcodes, strings and the os library."""

__version__ = "0.1.0"
__all__ = ["config", "numbers", "values", "opcodes", "strings", "oslib"]