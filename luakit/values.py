"""Tagged values: type tags with variant and collectable bits, and the value cell."""

from __future__ import annotations

import enum
import operator
from dataclasses import dataclass
from typing import Any

# Bits 0-3 hold the basic type, bits 4-5 the variant, bit 6 marks collectables.
_NOVARIANT_MASK = 0x0F
_VARIANT_MASK = 0x3F
BIT_ISCOLLECTABLE = 1 << 6


class Tag(enum.IntEnum):
    """Basic type tags and their variants."""

    NIL = 0
    BOOLEAN = 1
    LIGHTUSERDATA = 2
    NUMBER = 3
    STRING = 4
    TABLE = 5
    FUNCTION = 6
    USERDATA = 7
    THREAD = 8
    PROTO = 9
    DEADKEY = 10

    # Function variants.
    LCL = FUNCTION | (0 << 4)
    LCF = FUNCTION | (1 << 4)
    CCL = FUNCTION | (2 << 4)

    # String variants.
    SHRSTR = STRING | (0 << 4)
    LNGSTR = STRING | (1 << 4)

    # Number variants.
    NUMFLT = NUMBER | (0 << 4)
    NUMINT = NUMBER | (1 << 4)


NUMTAGS = Tag.PROTO
TOTALTAGS = Tag.PROTO + 2


def novariant(tag: int) -> int:
    """Return the basic type of a tag, without variant or collectable bits."""
    return operator.index(tag) & _NOVARIANT_MASK


def ctb(tag: int) -> int:
    """Mark a tag as collectable."""
    return operator.index(tag) | BIT_ISCOLLECTABLE


def is_collectable(tag: int) -> bool:
    """Tell whether a raw tag carries the collectable bit."""
    return bool(operator.index(tag) & BIT_ISCOLLECTABLE)


def lmod(s: int, size: int) -> int:
    """Reduce a hash modulo a power-of-two size."""
    size = operator.index(size)
    if size <= 0 or size & (size - 1):
        raise ValueError(f"size must be a positive power of 2, got {size}")
    return operator.index(s) & (size - 1)


def twoto(x: int) -> int:
    """Return 2 raised to the integer power x."""
    return 1 << operator.index(x)


@dataclass(frozen=True)
class TValue:
    """A value together with its raw type tag."""

    tag: int = Tag.NIL
    value: Any = None

    @property
    def variant_type(self) -> int:
        """The tag with its variant bits but without the collectable bit."""
        return self.tag & _VARIANT_MASK

    def base_type(self) -> int:
        """Return the basic type of this value."""
        return novariant(self.tag)

    def is_number(self) -> bool:
        return self.base_type() == Tag.NUMBER

    def is_integer(self) -> bool:
        return self.tag == Tag.NUMINT

    def is_float(self) -> bool:
        return self.tag == Tag.NUMFLT

    def is_string(self) -> bool:
        return self.base_type() == Tag.STRING

    def is_function(self) -> bool:
        return self.base_type() == Tag.FUNCTION

    def is_false(self) -> bool:
        """True for nil and for the boolean false."""
        if self.tag == Tag.NIL:
            return True
        return self.tag == Tag.BOOLEAN and not self.value

    def number_value(self) -> float:
        """Return the numeric value as a float; integers are converted."""
        if self.is_integer():
            return float(self.value)
        if self.is_float():
            return self.value
        raise TypeError("value is not a number")


NILOBJECT = TValue()