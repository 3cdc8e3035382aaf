# luakit

Pure-Python building blocks for a Lua 5.3 runtime, with no dependencies
outside the standard library.

## Modules

- `luakit.config` – integer and float conventions: 64-bit two's-complement
  wrap-around (`wrap_integer`, `to_unsigned`), integer and `%.14g` float
  formatting (`integer_to_string`, `float_to_string`), float-to-integer
  truncation that returns `None` when out of range (`float_to_integer`),
  the locale's radix character (`locale_decimal_point`), and constants
  such as `MAXINTEGER`, `MININTEGER`, `PATH_DEFAULT`, `CPATH_DEFAULT`
  and `IDSIZE`.
- `luakit.numbers` – numeral parsing (`str2int`, `str2number`; both
  return `None` for text that is not a numeral, and `inf`/`nan` are
  rejected), number printing (`number_to_string`, which adds `.0` to
  integral floats), "floating point byte" sizes (`int2fb`, `fb2int`),
  `ceillog2`, `hexavalue`, UTF-8 encoding of a code point (`utf8esc`),
  `format_message` (options `%d`, `%I`, `%f`, `%c`, `%s`, `%p`, `%U`,
  `%%`) and chunk names for error messages (`chunkid`).
- `luakit.values` – type tags with variant and collectable bits (`Tag`,
  `novariant`, `ctb`, `is_collectable`), power-of-two helpers (`lmod`,
  `twoto`) and the immutable tagged value `TValue` with its type tests
  and `number_value`.
- `luakit.opcodes` – the `OpCode`, `OpMode` and `OpArgMask` enums,
  functions that build and take apart 32-bit instructions
  (`create_abc`, `create_abx`, `create_asbx`, `create_ax`, `get_a`,
  `set_sbx`, ...; out-of-range fields raise `ValueError`), RK operand
  helpers (`is_k`, `index_k`, `rk_as_k`) and the per-opcode property
  table (`op_mode`, `b_mode`, `c_mode`, `test_a_mode`, `test_t_mode`,
  `opname`).
- `luakit.strings` – the string hash (`lua_hash`), `LuaString` (short
  or long, with a lazily computed `long_hash`) and `StringTable`, which
  interns strings of up to 40 bytes and grows as it fills.
- `luakit.oslib` – the `os` library: `clock`, `date`, `time`,
  `difftime`, `execute`, `exit`, `getenv`, `remove`, `rename`,
  `tmpname`, `setlocale`. Bad arguments and unrepresentable times raise
  `OSLibError`; `remove` and `rename` let the operating system's
  `OSError` through; `exit` raises `SystemExit`; `setlocale` returns
  `None` when the locale cannot be set.

## Installing

```
pip install .
```

## Examples

```python
from luakit.numbers import str2number, number_to_string
from luakit.opcodes import OpCode, create_abc, get_opcode, get_b

str2number("0x10")        # 16
str2number(" 1e2 ")       # 100.0
str2number("nan")         # None
number_to_string(2.0)     # "2.0"

i = create_abc(OpCode.ADD, 0, 1, 2)
get_opcode(i) is OpCode.ADD   # True
get_b(i)                      # 1
```

```python
from luakit.strings import StringTable

table = StringTable(seed=0)
a = table.new_string(b"hello")
b = table.new_string(b"hello")
a is b                    # True: short strings are interned
```

```python
from luakit import oslib

oslib.date("!%Y-%m-%d", 0)          # "1970-01-01"
oslib.date("!*t", 0)["year"]        # 1970
oslib.difftime(10, 4)               # 6.0

fields = {"year": 2020, "month": 1, "day": 1}
stamp = oslib.time(fields)          # local time; 'fields' is filled in
```

## What this package does not do

It cannot run Lua programs: there is no lexer, parser, code generator,
virtual machine, garbage collector or table implementation, and no
command-line program. `TValue` only carries a tag and a value; it
performs no arithmetic or metamethod dispatch.

## Running the tests

```
pip install .[test]
pytest
```