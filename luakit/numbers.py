"""Number conversions, UTF-8 escapes, message formatting and chunk identifiers."""

from __future__ import annotations

import math
import operator
import re

from luakit.config import (
    IDSIZE,
    MAXINTEGER,
    MAXUNSIGNED,
    float_to_string,
    integer_to_string,
    locale_decimal_point,
    wrap_integer,
)

_SPACES = " \t\n\v\f\r"
_HEXDIGITS = "0123456789abcdefABCDEF"
_MAXBY10 = MAXINTEGER // 10
_MAXLASTD = MAXINTEGER % 10
# Only this many significant hex digits are accumulated; the rest only shift.
_MAXSIGDIG = 30
_MAXCODEPOINT = 0x10FFFF

_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_RETS = "..."
_PRE = '[string "'
_POS = '"]'


def int2fb(x: int) -> int:
    """Encode an unsigned integer as a "floating point byte" (eeeeexxx), rounding up."""
    x = operator.index(x)
    if x < 0:
        raise ValueError("int2fb requires a non-negative integer")
    if x < 8:
        return x
    e = 0
    while x >= (8 << 4):
        x = (x + 0xF) >> 4
        e += 4
    while x >= (8 << 1):
        x = (x + 1) >> 1
        e += 1
    return ((e + 1) << 3) | (x - 8)


def fb2int(x: int) -> int:
    """Decode a "floating point byte" back to an integer."""
    x = operator.index(x)
    if x < 8:
        return x
    return ((x & 7) + 8) << ((x >> 3) - 1)


def ceillog2(x: int) -> int:
    """Return ceil(log2(x)) for a positive integer."""
    x = operator.index(x)
    if x < 1:
        raise ValueError("ceillog2 requires a positive integer")
    return (x - 1).bit_length()


def hexavalue(c: str) -> int:
    """Return the value of a single hexadecimal digit."""
    if len(c) != 1 or c not in _HEXDIGITS:
        raise ValueError(f"not a hexadecimal digit: {c!r}")
    return int(c, 16)


def _skip_spaces(s: str, i: int) -> int:
    while i < len(s) and s[i] in _SPACES:
        i += 1
    return i


def _sign(s: str, i: int) -> tuple[bool, int]:
    if i < len(s) and s[i] == "-":
        return True, i + 1
    if i < len(s) and s[i] == "+":
        return False, i + 1
    return False, i


def _is_hex_prefix(s: str, i: int) -> bool:
    return s[i : i + 1] == "0" and s[i + 1 : i + 2] in ("x", "X")


def str2int(s: str) -> int | None:
    """Read a whole string as an integer numeral.

    Hexadecimal numerals wrap around; decimal numerals that overflow are
    rejected. Returns None when the string is not an integer numeral.
    """
    i = _skip_spaces(s, 0)
    neg, i = _sign(s, i)
    a = 0
    empty = True
    if _is_hex_prefix(s, i):
        i += 2
        while i < len(s) and s[i] in _HEXDIGITS:
            a = (a * 16 + int(s[i], 16)) & MAXUNSIGNED
            empty = False
            i += 1
    else:
        while i < len(s) and s[i].isascii() and s[i].isdigit():
            d = ord(s[i]) - ord("0")
            if a >= _MAXBY10 and (a > _MAXBY10 or d > _MAXLASTD + neg):
                return None
            a = a * 10 + d
            empty = False
            i += 1
    i = _skip_spaces(s, i)
    if empty or i != len(s):
        return None
    return wrap_integer(-a if neg else a)


def _strx2number(s: str) -> float | None:
    i = _skip_spaces(s, 0)
    neg, i = _sign(s, i)
    if not _is_hex_prefix(s, i):
        return None
    i += 2
    r = 0.0
    sigdig = nosigdig = e = 0
    hasdot = False
    while i < len(s):
        ch = s[i]
        if ch == ".":
            if hasdot:
                break
            hasdot = True
        elif ch in _HEXDIGITS:
            if sigdig == 0 and ch == "0":
                nosigdig += 1
            else:
                sigdig += 1
                if sigdig <= _MAXSIGDIG:
                    r = r * 16.0 + int(ch, 16)
                else:
                    e += 1
            if hasdot:
                e -= 1
        else:
            break
        i += 1
    if nosigdig + sigdig == 0:
        return None
    e *= 4
    if i < len(s) and s[i] in "pP":
        neg1, j = _sign(s, i + 1)
        start = j
        while j < len(s) and s[j].isascii() and s[j].isdigit():
            j += 1
        if j == start:
            return None
        exp1 = int(s[start:j])
        e += -exp1 if neg1 else exp1
        i = j
    if _skip_spaces(s, i) != len(s):
        return None
    if neg:
        r = -r
    try:
        return math.ldexp(r, e)
    except OverflowError:
        return -math.inf if neg else math.inf


def _str2decimal(s: str) -> float | None:
    start = _skip_spaces(s, 0)
    match = _DECIMAL.match(s, start)
    if match is None or _skip_spaces(s, match.end()) != len(s):
        return None
    return float(match.group())


def _str2d(s: str) -> float | None:
    mode = next((ch.lower() for ch in s if ch in ".xXnN"), "")
    if mode == "n":
        return None
    if mode == "x":
        return _strx2number(s)
    result = _str2decimal(s)
    if result is None:
        point = locale_decimal_point()
        if point != "." and point in s and "." not in s:
            result = _str2decimal(s.replace(point, ".", 1))
    return result


def str2number(s: str) -> int | float | None:
    """Convert a numeral to an integer, else to a float; None if it is neither.

    'inf' and 'nan' are never accepted.
    """
    value = str2int(s)
    if value is not None:
        return value
    return _str2d(s)


def number_to_string(value: int | float) -> str:
    """Format a number; floats that look like integers get a '.0' suffix."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"number expected, got {type(value).__name__}")
    if isinstance(value, int):
        return integer_to_string(value)
    text = float_to_string(value)
    if all(ch in "-0123456789" for ch in text):
        text += locale_decimal_point() + "0"
    return text


def utf8esc(codepoint: int) -> bytes:
    """Encode a code point (up to 0x10FFFF) as a UTF-8 byte sequence."""
    x = operator.index(codepoint)
    if not 0 <= x <= _MAXCODEPOINT:
        raise ValueError(f"code point out of range: {codepoint}")
    if x < 0x80:
        return bytes([x])
    tail = []
    mfb = 0x3F
    while True:
        tail.append(0x80 | (x & 0x3F))
        x >>= 6
        mfb >>= 1
        if x <= mfb:
            break
    first = ((~mfb << 1) | x) & 0xFF
    return bytes([first, *reversed(tail)])


def _pointer_to_string(arg: object) -> str:
    if arg is None:
        return "(nil)"
    address = arg if isinstance(arg, int) and not isinstance(arg, bool) else id(arg)
    return f"0x{address:x}"


def format_message(fmt: str, *args: object) -> str:
    """Format a message with the options %d, %I, %f, %c, %s, %p, %U and %%."""
    values = iter(args)

    def take() -> object:
        try:
            return next(values)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    parts: list[str] = []
    pos = 0
    while True:
        e = fmt.find("%", pos)
        if e < 0:
            break
        parts.append(fmt[pos:e])
        option = fmt[e + 1 : e + 2]
        if option == "s":
            s = take()
            parts.append("(null)" if s is None else str(s))
        elif option == "c":
            code = operator.index(take()) & 0xFF
            parts.append(chr(code) if 0x20 <= code < 0x7F else f"<\\{code}>")
        elif option in ("d", "I"):
            parts.append(number_to_string(operator.index(take())))
        elif option == "f":
            parts.append(number_to_string(float(take())))
        elif option == "p":
            parts.append(_pointer_to_string(take()))
        elif option == "U":
            encoded = utf8esc(operator.index(take()))
            parts.append(encoded.decode("utf-8", errors="surrogatepass"))
        elif option == "%":
            parts.append("%")
        else:
            raise ValueError(f"invalid option '%{option}' to 'lua_pushfstring'")
        pos = e + 2
    parts.append(fmt[pos:])
    return "".join(parts)


def chunkid(source: str, bufflen: int = IDSIZE) -> str:
    """Build a printable chunk identifier that fits in a buffer of 'bufflen' bytes."""
    length = len(source)
    if source.startswith("="):
        if length <= bufflen:
            return source[1:]
        return source[1:bufflen]
    if source.startswith("@"):
        if length <= bufflen:
            return source[1:]
        keep = bufflen - len(_RETS)
        return _RETS + source[length + 1 - keep :]
    newline = source.find("\n")
    avail = bufflen - (len(_PRE + _RETS + _POS) + 1)
    if length < avail and newline < 0:
        return _PRE + source + _POS
    if newline >= 0:
        length = newline
    length = min(length, avail)
    return _PRE + source[:length] + _RETS + _POS