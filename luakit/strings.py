"""Strings with cached hashes, and the table that interns short strings."""

from __future__ import annotations

from dataclasses import dataclass

from luakit.config import MAXINTEGER
from luakit.values import Tag, lmod

# Strings up to this length are interned; longer ones are created fresh.
MAXSHORTLEN = 40
# Initial size of the string table (a power of 2).
MINSTRTABSIZE = 128
# At most about 2**HASHLIMIT bytes of a string take part in its hash.
HASHLIMIT = 5
MEMERRMSG = "not enough memory"

_UINT_MASK = 0xFFFFFFFF
_MAX_INT = 2**31 - 1
_HEADER_SIZE = 24


def _as_bytes(data: bytes | bytearray | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def lua_hash(data: bytes | str, seed: int) -> int:
    """Hash a byte string into an unsigned 32-bit value.

    Long strings are sampled: only one byte in every (len >> HASHLIMIT) + 1,
    counted from the end, contributes.
    """
    raw = _as_bytes(data)
    length = len(raw)
    h = (seed ^ length) & _UINT_MASK
    step = (length >> HASHLIMIT) + 1
    for byte in raw[::-step][: length // step]:
        h ^= ((h << 5) + (h >> 2) + byte) & _UINT_MASK
    return h


@dataclass(eq=False)
class LuaString:
    """A string object: its bytes, variant tag, hash and extra flag.

    For short strings 'extra' marks reserved words; for long strings it
    records whether 'hash' has already been computed.
    """

    data: bytes
    tag: Tag
    hash: int
    extra: int = 0

    def is_short(self) -> bool:
        return self.tag == Tag.SHRSTR

    def is_reserved(self) -> bool:
        """Tell whether this is a short string flagged as a reserved word."""
        return self.is_short() and self.extra > 0

    def long_hash(self) -> int:
        """Return the hash of a long string, computing it on first use."""
        if self.is_short():
            raise ValueError("long_hash applies only to long strings")
        if self.extra == 0:
            self.hash = lua_hash(self.data, self.hash)
            self.extra = 1
        return self.hash

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LuaString):
            return NotImplemented
        if self is other:
            return True
        # Short strings are interned, so equal short strings are the same object.
        if self.is_short() or other.is_short():
            return False
        return self.data == other.data

    def __hash__(self) -> int:
        return hash(self.data)


class StringTable:
    """Hash table that keeps exactly one object per distinct short string."""

    def __init__(self, seed: int = 0) -> None:
        self.seed = seed & _UINT_MASK
        self._buckets: list[list[LuaString]] = []
        self.nuse = 0
        self.resize(MINSTRTABSIZE)
        self.memerrmsg = self.intern(MEMERRMSG)

    @property
    def size(self) -> int:
        """Number of buckets (always a power of 2)."""
        return len(self._buckets)

    def resize(self, newsize: int) -> None:
        """Rehash every string into 'newsize' buckets."""
        buckets: list[list[LuaString]] = [[] for _ in range(newsize)]
        if newsize > 0:
            lmod(0, newsize)  # validates the size
        for chain in self._buckets:
            for ts in chain:
                buckets[lmod(ts.hash, newsize)].insert(0, ts)
        self._buckets = buckets

    def _chain(self, h: int) -> list[LuaString]:
        return self._buckets[lmod(h, self.size)]

    def intern(self, data: bytes | str) -> LuaString:
        """Return the unique short string with these bytes, creating it if needed."""
        raw = _as_bytes(data)
        if len(raw) > MAXSHORTLEN:
            raise ValueError(f"short strings hold at most {MAXSHORTLEN} bytes")
        h = lua_hash(raw, self.seed)
        for ts in self._chain(h):
            if ts.data == raw:
                return ts
        if self.nuse >= self.size and self.size <= _MAX_INT // 2:
            self.resize(self.size * 2)
        ts = LuaString(raw, Tag.SHRSTR, h)
        self._chain(h).insert(0, ts)
        self.nuse += 1
        return ts

    def new_string(self, data: bytes | str) -> LuaString:
        """Create a string: short ones are interned, long ones are always new."""
        raw = _as_bytes(data)
        if len(raw) <= MAXSHORTLEN:
            return self.intern(raw)
        if len(raw) >= MAXINTEGER - _HEADER_SIZE:
            raise MemoryError("memory allocation error: block too big")
        return LuaString(raw, Tag.LNGSTR, self.seed)

    def remove(self, s: LuaString) -> None:
        """Drop an interned string from the table."""
        chain = self._chain(s.hash)
        for index, ts in enumerate(chain):
            if ts is s:
                del chain[index]
                self.nuse -= 1
                return
        raise KeyError(s.data)

    def __contains__(self, s: object) -> bool:
        if not isinstance(s, LuaString) or not s.is_short():
            return False
        return any(ts is s for ts in self._chain(s.hash))

    def __len__(self) -> int:
        return self.nuse