import os
import time as stdtime

import pytest

from luakit import oslib
from luakit.oslib import OSLibError


def test_date_utc_format():
    assert oslib.date("!%Y-%m-%d", 0) == "1970-01-01"


def test_date_utc_table():
    assert oslib.date("!*t", 0) == {
        "sec": 0,
        "min": 0,
        "hour": 0,
        "day": 1,
        "month": 1,
        "year": 1970,
        "wday": 5,
        "yday": 1,
        "isdst": False,
    }


def test_date_literal_text_and_percent():
    assert oslib.date("!abc", 0) == "abc"
    assert oslib.date("!%%", 0) == "%"


def test_date_invalid_specifier():
    with pytest.raises(OSLibError, match="invalid conversion specifier '%Q'"):
        oslib.date("!%Q", 0)
    with pytest.raises(OSLibError, match="invalid conversion specifier '%Ez'"):
        oslib.date("!%Ez", 0)


def test_date_trailing_percent():
    with pytest.raises(OSLibError, match="invalid conversion specifier"):
        oslib.date("!abc%", 0)


def test_date_rejects_fractional_time():
    with pytest.raises(OSLibError):
        oslib.date("!%Y", 1.5)


def test_time_now():
    now = oslib.time()
    assert abs(now - stdtime.time()) <= 2


def test_time_round_trip():
    fields = {"year": 2001, "month": 6, "day": 15, "hour": 10, "min": 20, "sec": 30}
    t = oslib.time(dict(fields))
    back = oslib.date("*t", t)
    assert {key: back[key] for key in fields} == fields


def test_time_default_hour():
    t = oslib.time({"year": 2001, "month": 6, "day": 15})
    assert oslib.date("*t", t)["hour"] == 12


def test_time_normalizes_fields():
    fields = {"year": 2000, "month": 13, "day": 1}
    t = oslib.time(fields)
    assert fields == oslib.date("*t", t)
    assert fields["month"] <= 12


def test_time_missing_field():
    with pytest.raises(OSLibError, match="field 'day' missing in date table"):
        oslib.time({"year": 2000, "month": 1})


def test_time_non_integer_field():
    with pytest.raises(OSLibError, match="field 'day' is not an integer"):
        oslib.time({"year": 2000, "month": 1, "day": "x"})
    with pytest.raises(OSLibError, match="field 'day' is not an integer"):
        oslib.time({"year": 2000, "month": 1, "day": 1.5})


def test_time_out_of_bound_field():
    with pytest.raises(OSLibError, match="field 'day' is out-of-bound"):
        oslib.time({"year": 2000, "month": 1, "day": 2**31})


def test_difftime():
    assert oslib.difftime(1000, 1000) == 0.0
    assert oslib.difftime(50, 20) == -oslib.difftime(20, 50)
    with pytest.raises(OSLibError):
        oslib.difftime(5, 2.5)


def test_clock_is_monotonic():
    first = oslib.clock()
    second = oslib.clock()
    assert 0 <= first <= second


def test_getenv(monkeypatch):
    monkeypatch.setenv("LUAKIT_TEST_VAR", "value")
    monkeypatch.delenv("LUAKIT_TEST_MISSING", raising=False)
    assert oslib.getenv("LUAKIT_TEST_VAR") == "value"
    assert oslib.getenv("LUAKIT_TEST_MISSING") is None


def test_remove_file_and_directory(tmp_path):
    target = tmp_path / "f.txt"
    target.write_text("data")
    oslib.remove(str(target))
    assert not target.exists()
    folder = tmp_path / "d"
    folder.mkdir()
    oslib.remove(str(folder))
    assert not folder.exists()
    with pytest.raises(OSError):
        oslib.remove(str(target))


def test_rename(tmp_path):
    src = tmp_path / "a.txt"
    dst = tmp_path / "b.txt"
    src.write_text("data")
    oslib.rename(str(src), str(dst))
    assert not src.exists()
    assert dst.read_text() == "data"


def test_tmpname():
    path = oslib.tmpname()
    try:
        assert os.path.isfile(path)
        assert os.path.basename(path).startswith("lua_")
        assert oslib.tmpname() != path or False
    finally:
        os.remove(path)


def test_execute():
    assert oslib.execute() is True
    assert oslib.execute("exit 0") == (True, "exit", 0)
    assert oslib.execute("exit 3") == (None, "exit", 3)


def test_exit_codes():
    with pytest.raises(SystemExit) as info:
        oslib.exit(False)
    assert info.value.code == 1
    with pytest.raises(SystemExit) as info:
        oslib.exit(True)
    assert info.value.code == 0
    with pytest.raises(SystemExit) as info:
        oslib.exit(7)
    assert info.value.code == 7


def test_setlocale():
    previous = oslib.setlocale(None, "numeric")
    try:
        assert oslib.setlocale("C", "numeric") == "C"
        assert oslib.setlocale(None, "numeric") == "C"
    finally:
        oslib.setlocale(previous, "numeric")


def test_setlocale_invalid_category():
    with pytest.raises(OSLibError, match="invalid option 'bogus'"):
        oslib.setlocale(None, "bogus")