"""Numeric configuration of the interpreter: integer and float limits and formats."""

from __future__ import annotations

import locale
import math
import operator

INTEGER_BITS = 64
MAXINTEGER = (1 << (INTEGER_BITS - 1)) - 1
MININTEGER = -(1 << (INTEGER_BITS - 1))
MAXUNSIGNED = (1 << INTEGER_BITS) - 1

INTEGER_FMT = "%d"
NUMBER_FMT = "%.14g"

PATH_SEP = ";"
PATH_MARK = "?"
EXEC_DIR = "!"
DIRSEP = "/"

VERSION_MAJOR = "5"
VERSION_MINOR = "3"
VDIR = f"{VERSION_MAJOR}.{VERSION_MINOR}"
ROOT = "/usr/local/"
LDIR = f"{ROOT}share/lua/{VDIR}/"
CDIR = f"{ROOT}lib/lua/{VDIR}/"
PATH_DEFAULT = ";".join(
    [
        f"{LDIR}?.lua",
        f"{LDIR}?/init.lua",
        f"{CDIR}?.lua",
        f"{CDIR}?/init.lua",
        "./?.lua",
        "./?/init.lua",
    ]
)
CPATH_DEFAULT = ";".join([f"{CDIR}?.so", f"{CDIR}loadall.so", "./?.so"])

MAXSTACK = 1_000_000
IDSIZE = 60
BUFFERSIZE = 0x80 * 8 * 8


def wrap_integer(value: int) -> int:
    """Reduce an integer to the signed 64-bit range with two's-complement wrap-around."""
    value = operator.index(value) & MAXUNSIGNED
    return value - (1 << INTEGER_BITS) if value > MAXINTEGER else value


def to_unsigned(value: int) -> int:
    """Reinterpret a signed integer as its unsigned 64-bit counterpart."""
    return operator.index(value) & MAXUNSIGNED


def integer_to_string(value: int) -> str:
    """Format an integer the way the interpreter writes integers."""
    return INTEGER_FMT % wrap_integer(value)


def float_to_string(value: float) -> str:
    """Format a float with the interpreter's float format (14 significant digits)."""
    return NUMBER_FMT % float(value)


def float_to_integer(value: float) -> int | None:
    """Convert a float to an integer by truncation, or return None when out of range.

    The accepted range is [MININTEGER, -MININTEGER); NaN is rejected.
    """
    value = float(value)
    if value >= float(MININTEGER) and value < -float(MININTEGER):
        return math.trunc(value)
    return None


def locale_decimal_point() -> str:
    """Return the radix character of the current locale."""
    point = locale.localeconv()["decimal_point"]
    return point[0] if point else "."