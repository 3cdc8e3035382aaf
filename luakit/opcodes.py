"""Virtual-machine instruction format: opcodes, argument fields and opcode properties.

An instruction is an unsigned 32-bit number. The opcode takes the low
6 bits; the arguments are laid out as follows:

    A   8 bits      B   9 bits      C   9 bits
    Bx  18 bits (B and C together)  Ax  26 bits (A, B and C together)
    sBx signed Bx, stored in excess-K form with K = MAXARG_sBx
"""

from __future__ import annotations

import enum
import operator

INSTRUCTION_BITS = 32
_INSTRUCTION_MASK = (1 << INSTRUCTION_BITS) - 1

SIZE_C = 9
SIZE_B = 9
SIZE_BX = SIZE_C + SIZE_B
SIZE_A = 8
SIZE_AX = SIZE_C + SIZE_B + SIZE_A
SIZE_OP = 6

POS_OP = 0
POS_A = POS_OP + SIZE_OP
POS_C = POS_A + SIZE_A
POS_B = POS_C + SIZE_C
POS_BX = POS_C
POS_AX = POS_A

MAXARG_BX = (1 << SIZE_BX) - 1
MAXARG_SBX = MAXARG_BX >> 1
MAXARG_AX = (1 << SIZE_AX) - 1
MAXARG_A = (1 << SIZE_A) - 1
MAXARG_B = (1 << SIZE_B) - 1
MAXARG_C = (1 << SIZE_C) - 1

# Bit that marks an RK operand as a constant index rather than a register.
BITRK = 1 << (SIZE_B - 1)
MAXINDEXRK = BITRK - 1

# An invalid register that still fits in the A field.
NO_REG = MAXARG_A

# Number of list items accumulated before a SETLIST instruction.
LFIELDS_PER_FLUSH = 50

# Maximum depth of nested calls and syntactical nesting.
MAXCCALLS = 200


class OpMode(enum.IntEnum):
    """Basic instruction formats."""

    ABC = 0
    ABX = 1
    ASBX = 2
    AX = 3


class OpArgMask(enum.IntEnum):
    """How an instruction uses its B or C argument."""

    N = 0  # not used
    U = 1  # used
    R = 2  # a register or a jump offset
    K = 3  # a constant or a register/constant


class OpCode(enum.IntEnum):
    """All opcodes, in instruction-encoding order."""

    MOVE = 0
    LOADK = enum.auto()
    LOADKX = enum.auto()
    LOADBOOL = enum.auto()
    LOADNIL = enum.auto()
    GETUPVAL = enum.auto()
    GETTABUP = enum.auto()
    GETTABLE = enum.auto()
    SETTABUP = enum.auto()
    SETUPVAL = enum.auto()
    SETTABLE = enum.auto()
    NEWTABLE = enum.auto()
    SELF = enum.auto()
    ADD = enum.auto()
    SUB = enum.auto()
    MUL = enum.auto()
    MOD = enum.auto()
    POW = enum.auto()
    DIV = enum.auto()
    IDIV = enum.auto()
    BAND = enum.auto()
    BOR = enum.auto()
    BXOR = enum.auto()
    SHL = enum.auto()
    SHR = enum.auto()
    UNM = enum.auto()
    BNOT = enum.auto()
    NOT = enum.auto()
    LEN = enum.auto()
    CONCAT = enum.auto()
    JMP = enum.auto()
    EQ = enum.auto()
    LT = enum.auto()
    LE = enum.auto()
    TEST = enum.auto()
    TESTSET = enum.auto()
    CALL = enum.auto()
    TAILCALL = enum.auto()
    RETURN = enum.auto()
    FORLOOP = enum.auto()
    FORPREP = enum.auto()
    TFORCALL = enum.auto()
    TFORLOOP = enum.auto()
    SETLIST = enum.auto()
    CLOSURE = enum.auto()
    VARARG = enum.auto()
    EXTRAARG = enum.auto()


NUM_OPCODES = len(OpCode)


def _opmode(t: int, a: int, b: OpArgMask, c: OpArgMask, mode: OpMode) -> int:
    """Pack opcode properties: bit 7 test, bit 6 sets A, bits 4-5 B, 2-3 C, 0-1 mode."""
    return (t << 7) | (a << 6) | (b << 4) | (c << 2) | mode


_N, _U, _R, _K = OpArgMask.N, OpArgMask.U, OpArgMask.R, OpArgMask.K

_OPMODES: dict[OpCode, int] = {
    OpCode.MOVE: _opmode(0, 1, _R, _N, OpMode.ABC),
    OpCode.LOADK: _opmode(0, 1, _K, _N, OpMode.ABX),
    OpCode.LOADKX: _opmode(0, 1, _N, _N, OpMode.ABX),
    OpCode.LOADBOOL: _opmode(0, 1, _U, _U, OpMode.ABC),
    OpCode.LOADNIL: _opmode(0, 1, _U, _N, OpMode.ABC),
    OpCode.GETUPVAL: _opmode(0, 1, _U, _N, OpMode.ABC),
    OpCode.GETTABUP: _opmode(0, 1, _U, _K, OpMode.ABC),
    OpCode.GETTABLE: _opmode(0, 1, _R, _K, OpMode.ABC),
    OpCode.SETTABUP: _opmode(0, 0, _K, _K, OpMode.ABC),
    OpCode.SETUPVAL: _opmode(0, 0, _U, _N, OpMode.ABC),
    OpCode.SETTABLE: _opmode(0, 0, _K, _K, OpMode.ABC),
    OpCode.NEWTABLE: _opmode(0, 1, _U, _U, OpMode.ABC),
    OpCode.SELF: _opmode(0, 1, _R, _K, OpMode.ABC),
    OpCode.ADD: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.SUB: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.MUL: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.MOD: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.POW: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.DIV: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.IDIV: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.BAND: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.BOR: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.BXOR: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.SHL: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.SHR: _opmode(0, 1, _K, _K, OpMode.ABC),
    OpCode.UNM: _opmode(0, 1, _R, _N, OpMode.ABC),
    OpCode.BNOT: _opmode(0, 1, _R, _N, OpMode.ABC),
    OpCode.NOT: _opmode(0, 1, _R, _N, OpMode.ABC),
    OpCode.LEN: _opmode(0, 1, _R, _N, OpMode.ABC),
    OpCode.CONCAT: _opmode(0, 1, _R, _R, OpMode.ABC),
    OpCode.JMP: _opmode(0, 0, _R, _N, OpMode.ASBX),
    OpCode.EQ: _opmode(1, 0, _K, _K, OpMode.ABC),
    OpCode.LT: _opmode(1, 0, _K, _K, OpMode.ABC),
    OpCode.LE: _opmode(1, 0, _K, _K, OpMode.ABC),
    OpCode.TEST: _opmode(1, 0, _N, _U, OpMode.ABC),
    OpCode.TESTSET: _opmode(1, 1, _R, _U, OpMode.ABC),
    OpCode.CALL: _opmode(0, 1, _U, _U, OpMode.ABC),
    OpCode.TAILCALL: _opmode(0, 1, _U, _U, OpMode.ABC),
    OpCode.RETURN: _opmode(0, 0, _U, _N, OpMode.ABC),
    OpCode.FORLOOP: _opmode(0, 1, _R, _N, OpMode.ASBX),
    OpCode.FORPREP: _opmode(0, 1, _R, _N, OpMode.ASBX),
    OpCode.TFORCALL: _opmode(0, 0, _N, _U, OpMode.ABC),
    OpCode.TFORLOOP: _opmode(0, 1, _R, _N, OpMode.ASBX),
    OpCode.SETLIST: _opmode(0, 0, _U, _U, OpMode.ABC),
    OpCode.CLOSURE: _opmode(0, 1, _U, _N, OpMode.ABX),
    OpCode.VARARG: _opmode(0, 1, _U, _N, OpMode.ABC),
    OpCode.EXTRAARG: _opmode(0, 0, _U, _U, OpMode.AX),
}


def _mask(size: int) -> int:
    return (1 << size) - 1


def _check_field(name: str, value: int, size: int) -> int:
    value = operator.index(value)
    if not 0 <= value <= _mask(size):
        raise ValueError(f"argument {name} out of range: {value}")
    return value


def _instruction(i: int) -> int:
    i = operator.index(i)
    if not 0 <= i <= _INSTRUCTION_MASK:
        raise ValueError(f"not a 32-bit instruction: {i}")
    return i


def _getarg(i: int, pos: int, size: int) -> int:
    return (_instruction(i) >> pos) & _mask(size)


def _setarg(i: int, name: str, v: int, pos: int, size: int) -> int:
    field = _mask(size) << pos
    v = _check_field(name, v, size)
    return (_instruction(i) & ~field & _INSTRUCTION_MASK) | (v << pos)


def _opcode(op: int) -> OpCode:
    return OpCode(operator.index(op))


def create_abc(op: int, a: int, b: int, c: int) -> int:
    """Build an iABC instruction."""
    return (
        (_opcode(op) << POS_OP)
        | (_check_field("A", a, SIZE_A) << POS_A)
        | (_check_field("B", b, SIZE_B) << POS_B)
        | (_check_field("C", c, SIZE_C) << POS_C)
    )


def create_abx(op: int, a: int, bx: int) -> int:
    """Build an iABx instruction."""
    return (
        (_opcode(op) << POS_OP)
        | (_check_field("A", a, SIZE_A) << POS_A)
        | (_check_field("Bx", bx, SIZE_BX) << POS_BX)
    )


def create_asbx(op: int, a: int, sbx: int) -> int:
    """Build an iAsBx instruction; the signed argument is stored in excess-K form."""
    return create_abx(op, a, operator.index(sbx) + MAXARG_SBX)


def create_ax(op: int, ax: int) -> int:
    """Build an iAx instruction."""
    return (_opcode(op) << POS_OP) | (_check_field("Ax", ax, SIZE_AX) << POS_AX)


def get_opcode(i: int) -> OpCode:
    """Return the opcode of an instruction."""
    return OpCode(_getarg(i, POS_OP, SIZE_OP))


def set_opcode(i: int, op: int) -> int:
    """Return the instruction with its opcode replaced."""
    return _setarg(i, "OP", _opcode(op), POS_OP, SIZE_OP)


def get_a(i: int) -> int:
    return _getarg(i, POS_A, SIZE_A)


def set_a(i: int, v: int) -> int:
    return _setarg(i, "A", v, POS_A, SIZE_A)


def get_b(i: int) -> int:
    return _getarg(i, POS_B, SIZE_B)


def set_b(i: int, v: int) -> int:
    return _setarg(i, "B", v, POS_B, SIZE_B)


def get_c(i: int) -> int:
    return _getarg(i, POS_C, SIZE_C)


def set_c(i: int, v: int) -> int:
    return _setarg(i, "C", v, POS_C, SIZE_C)


def get_bx(i: int) -> int:
    return _getarg(i, POS_BX, SIZE_BX)


def set_bx(i: int, v: int) -> int:
    return _setarg(i, "Bx", v, POS_BX, SIZE_BX)


def get_sbx(i: int) -> int:
    return get_bx(i) - MAXARG_SBX


def set_sbx(i: int, v: int) -> int:
    return _setarg(i, "sBx", operator.index(v) + MAXARG_SBX, POS_BX, SIZE_BX)


def get_ax(i: int) -> int:
    return _getarg(i, POS_AX, SIZE_AX)


def set_ax(i: int, v: int) -> int:
    return _setarg(i, "Ax", v, POS_AX, SIZE_AX)


def is_k(x: int) -> bool:
    """Tell whether an RK operand denotes a constant."""
    return bool(operator.index(x) & BITRK)


def index_k(r: int) -> int:
    """Return the constant index held by an RK operand."""
    return operator.index(r) & ~BITRK


def rk_as_k(x: int) -> int:
    """Encode a constant index as an RK operand."""
    return operator.index(x) | BITRK


def op_mode(op: int) -> OpMode:
    """Return the instruction format of an opcode."""
    return OpMode(_OPMODES[_opcode(op)] & 3)


def b_mode(op: int) -> OpArgMask:
    """Return how an opcode uses its B argument."""
    return OpArgMask((_OPMODES[_opcode(op)] >> 4) & 3)


def c_mode(op: int) -> OpArgMask:
    """Return how an opcode uses its C argument."""
    return OpArgMask((_OPMODES[_opcode(op)] >> 2) & 3)


def test_a_mode(op: int) -> bool:
    """Tell whether an opcode sets register A."""
    return bool(_OPMODES[_opcode(op)] & (1 << 6))


def test_t_mode(op: int) -> bool:
    """Tell whether an opcode is a test (the next instruction must be a jump)."""
    return bool(_OPMODES[_opcode(op)] & (1 << 7))


def opname(op: int) -> str:
    """Return the name of an opcode."""
    return _opcode(op).name