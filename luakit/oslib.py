"""Operating-system facilities: time and date, environment, files, processes, locale."""

from __future__ import annotations

import locale as _locale
import os
import shutil
import subprocess
import tempfile
import time as _time
from collections.abc import Mapping, MutableMapping

from luakit.config import MAXINTEGER, MININTEGER, float_to_integer
from luakit.numbers import str2number

# Valid strftime conversions, grouped by length (C99 / POSIX set).
_STRFTIME_OPTIONS = (
    frozenset("aAbBcCdDeFgGhHIjmMnprRStTuUVwWxXyYzZ%"),
    frozenset(
        ["Ec", "EC", "Ex", "EX", "Ey", "EY"]
        + ["Od", "Oe", "OH", "OI", "Om", "OM", "OS", "Ou", "OU", "OV", "Ow", "OW", "Oy"]
    ),
)

# Limit for date fields, to keep arithmetic on them within a C int.
_MAXDATEFIELD = (2**31 - 1) // 2

_UNREPRESENTABLE = "time result cannot be represented in this installation"

_CATEGORIES = {
    "all": _locale.LC_ALL,
    "collate": _locale.LC_COLLATE,
    "ctype": _locale.LC_CTYPE,
    "monetary": _locale.LC_MONETARY,
    "numeric": _locale.LC_NUMERIC,
    "time": _locale.LC_TIME,
}


class OSLibError(RuntimeError):
    """Raised when an operating-system library call gets bad input or fails."""


def _to_integer(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = str2number(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return float_to_integer(value)
    return None


def _checktime(t: object) -> int:
    value = _to_integer(t)
    if value is None:
        raise OSLibError(f"number has no integer representation: {t!r}")
    if not MININTEGER <= value <= MAXINTEGER:
        raise OSLibError("time out-of-bounds")
    return value


def _date_fields(stm: _time.struct_time) -> dict[str, int | bool]:
    fields: dict[str, int | bool] = {
        "sec": stm.tm_sec,
        "min": stm.tm_min,
        "hour": stm.tm_hour,
        "day": stm.tm_mday,
        "month": stm.tm_mon,
        "year": stm.tm_year,
        "wday": (stm.tm_wday + 1) % 7 + 1,
        "yday": stm.tm_yday,
    }
    if stm.tm_isdst >= 0:
        fields["isdst"] = bool(stm.tm_isdst)
    return fields


def _check_option(conv: str) -> str:
    for length, group in enumerate(_STRFTIME_OPTIONS, start=1):
        if length > len(conv):
            break
        if conv[:length] in group:
            return conv[:length]
    raise OSLibError(f"bad argument #1 to 'date' (invalid conversion specifier '%{conv}')")


def clock() -> float:
    """Return the processor time used by the program, in seconds."""
    return _time.process_time()


def date(fmt: str = "%c", t: object = None) -> str | dict[str, int | bool]:
    """Format a time; a leading '!' selects UTC and '*t' returns a field table."""
    when = int(_time.time()) if t is None else _checktime(t)
    utc = fmt.startswith("!")
    spec = fmt[1:] if utc else fmt
    try:
        stm = _time.gmtime(when) if utc else _time.localtime(when)
    except (OverflowError, OSError, ValueError):
        raise OSLibError(_UNREPRESENTABLE) from None
    if spec == "*t":
        return _date_fields(stm)
    parts: list[str] = []
    pos = 0
    while pos < len(spec):
        percent = spec.find("%", pos)
        if percent < 0:
            parts.append(spec[pos:])
            break
        parts.append(spec[pos:percent])
        option = _check_option(spec[percent + 1 :])
        parts.append(_time.strftime("%" + option, stm))
        pos = percent + 1 + len(option)
    return "".join(parts)


def _getfield(fields: Mapping, key: str, default: int) -> int:
    raw = fields.get(key)
    value = _to_integer(raw)
    if value is None:
        if raw is not None:
            raise OSLibError(f"field '{key}' is not an integer")
        if default < 0:
            raise OSLibError(f"field '{key}' missing in date table")
        return default
    if not -_MAXDATEFIELD <= value <= _MAXDATEFIELD:
        raise OSLibError(f"field '{key}' is out-of-bound")
    return value


def time(fields: Mapping | None = None) -> int:
    """Return the current time, or the local time described by a field table.

    A mutable table is updated in place with the normalized fields.
    """
    if fields is None:
        return int(_time.time())
    if not isinstance(fields, Mapping):
        raise TypeError(f"table expected, got {type(fields).__name__}")
    sec = _getfield(fields, "sec", 0)
    minute = _getfield(fields, "min", 0)
    hour = _getfield(fields, "hour", 12)
    day = _getfield(fields, "day", -1)
    month = _getfield(fields, "month", -1)
    year = _getfield(fields, "year", -1)
    isdst_value = fields.get("isdst")
    isdst = -1 if isdst_value is None else int(isdst_value is not False)
    try:
        stamp = _time.mktime((year, month, day, hour, minute, sec, 0, 0, isdst))
        result = int(stamp)
        normalized = _time.localtime(result)
    except (OverflowError, OSError, ValueError):
        raise OSLibError(_UNREPRESENTABLE) from None
    if result == -1 or not MININTEGER <= result <= MAXINTEGER:
        raise OSLibError(_UNREPRESENTABLE)
    if isinstance(fields, MutableMapping):
        fields.update(_date_fields(normalized))
    return result


def difftime(t1: object, t2: object) -> float:
    """Return t1 - t2 in seconds, as a float."""
    return float(_checktime(t1) - _checktime(t2))


def execute(command: str | None = None) -> bool | tuple[bool | None, str, int]:
    """Run a shell command.

    Without a command, tell whether a shell is available. Otherwise return
    (True or None, "exit" or "signal", code).
    """
    if command is None:
        if os.name == "nt":
            return bool(os.environ.get("COMSPEC"))
        return shutil.which("sh") is not None
    try:
        completed = subprocess.run(command, shell=True, check=False)
    except OSError as exc:
        raise OSLibError(str(exc)) from exc
    code = completed.returncode
    if code < 0:
        return (None, "signal", -code)
    return (True if code == 0 else None, "exit", code)


def exit(status: object = None, close: bool = False) -> None:
    """Terminate the program; True means success, False failure.

    'close' is accepted for compatibility; there is no state to close here.
    """
    if isinstance(status, bool):
        code = 0 if status else 1
    elif status is None:
        code = 0
    else:
        value = _to_integer(status)
        if value is None:
            raise OSLibError(f"number has no integer representation: {status!r}")
        code = value
    raise SystemExit(code)


def getenv(name: str) -> str | None:
    """Return the value of an environment variable, or None when unset."""
    if not isinstance(name, str):
        raise TypeError(f"string expected, got {type(name).__name__}")
    return os.environ.get(name)


def remove(filename: str) -> None:
    """Delete a file or an empty directory."""
    if os.path.isdir(filename) and not os.path.islink(filename):
        os.rmdir(filename)
    else:
        os.remove(filename)


def rename(src: str, dst: str) -> None:
    """Rename a file or directory."""
    os.rename(src, dst)


def tmpname() -> str:
    """Create a new empty temporary file and return its name."""
    try:
        fd, path = tempfile.mkstemp(prefix="lua_")
    except OSError:
        raise OSLibError("unable to generate a unique filename") from None
    os.close(fd)
    return path


def setlocale(locale: str | None = None, category: str = "all") -> str | None:
    """Set or query the locale of a category; None when the request fails."""
    try:
        cat = _CATEGORIES[category]
    except KeyError:
        raise OSLibError(
            f"bad argument #2 to 'setlocale' (invalid option '{category}')"
        ) from None
    try:
        return _locale.setlocale(cat, locale)
    except _locale.Error:
        return None