import pytest

from luakit import opcodes
from luakit.opcodes import OpArgMask, OpCode, OpMode


def test_number_of_opcodes():
    assert opcodes.NUM_OPCODES == 47
    assert OpCode.EXTRAARG == opcodes.NUM_OPCODES - 1
    assert opcodes.opname(opcodes.NUM_OPCODES - 1) == "EXTRAARG"
    with pytest.raises(ValueError):
        opcodes.opname(opcodes.NUM_OPCODES)


def test_opnames():
    assert opcodes.opname(OpCode.MOVE) == "MOVE"
    assert opcodes.opname(OpCode.TFORLOOP) == "TFORLOOP"
    assert opcodes.opname(0) == "MOVE"
    assert opcodes.opname(46) == "EXTRAARG"


def test_opname_invalid():
    with pytest.raises(ValueError):
        opcodes.opname(47)


def test_argument_limits():
    assert opcodes.MAXARG_BX == (1 << 18) - 1
    assert opcodes.MAXARG_SBX == opcodes.MAXARG_BX >> 1
    assert opcodes.MAXARG_AX == (1 << 26) - 1
    assert opcodes.NO_REG == opcodes.MAXARG_A
    assert opcodes.BITRK == 1 << 8
    assert opcodes.LFIELDS_PER_FLUSH == 50
    i = opcodes.create_abx(OpCode.LOADK, opcodes.NO_REG, opcodes.MAXARG_BX)
    assert opcodes.get_bx(i) == (1 << 18) - 1
    assert opcodes.get_a(i) == 255
    assert opcodes.rk_as_k(0) == 1 << 8
    assert opcodes.is_k(1 << 8) is True


def test_field_positions_cover_instruction():
    assert opcodes.POS_A == opcodes.SIZE_OP
    assert opcodes.POS_B + opcodes.SIZE_B == opcodes.INSTRUCTION_BITS
    i = opcodes.create_abc(OpCode.MOVE, 0, opcodes.MAXARG_B, 0)
    assert i == opcodes.MAXARG_B << opcodes.POS_B
    assert i >> opcodes.INSTRUCTION_BITS == 0
    j = opcodes.create_abc(OpCode.MOVE, opcodes.MAXARG_A, 0, 0)
    assert j == opcodes.MAXARG_A << opcodes.SIZE_OP


@pytest.mark.parametrize(
    "op,a,b,c",
    [
        (OpCode.MOVE, 0, 0, 0),
        (OpCode.ADD, 255, 511, 511),
        (OpCode.CALL, 3, 2, 1),
        (OpCode.SETLIST, 17, 0, 300),
    ],
)
def test_abc_round_trip(op, a, b, c):
    i = opcodes.create_abc(op, a, b, c)
    assert opcodes.get_opcode(i) is op
    assert (opcodes.get_a(i), opcodes.get_b(i), opcodes.get_c(i)) == (a, b, c)
    assert 0 <= i < 1 << 32


@pytest.mark.parametrize("bx", [0, 1, 1000, opcodes.MAXARG_BX])
def test_abx_round_trip(bx):
    i = opcodes.create_abx(OpCode.LOADK, 7, bx)
    assert opcodes.get_opcode(i) is OpCode.LOADK
    assert opcodes.get_a(i) == 7
    assert opcodes.get_bx(i) == bx


@pytest.mark.parametrize(
    "sbx", [-opcodes.MAXARG_SBX, -1, 0, 1, opcodes.MAXARG_SBX]
)
def test_asbx_round_trip(sbx):
    i = opcodes.create_asbx(OpCode.JMP, 0, sbx)
    assert opcodes.get_sbx(i) == sbx
    assert opcodes.get_bx(i) == sbx + opcodes.MAXARG_SBX


def test_ax_round_trip():
    i = opcodes.create_ax(OpCode.EXTRAARG, opcodes.MAXARG_AX)
    assert opcodes.get_opcode(i) is OpCode.EXTRAARG
    assert opcodes.get_ax(i) == opcodes.MAXARG_AX


def test_bx_overlaps_b_and_c():
    i = opcodes.create_abc(OpCode.MOVE, 0, 5, 9)
    assert opcodes.get_bx(i) == (5 << opcodes.SIZE_C) | 9


def test_setters_change_only_their_field():
    i = opcodes.create_abc(OpCode.ADD, 1, 2, 3)
    j = opcodes.set_b(i, 400)
    assert (opcodes.get_a(j), opcodes.get_b(j), opcodes.get_c(j)) == (1, 400, 3)
    j = opcodes.set_a(j, 200)
    assert (opcodes.get_a(j), opcodes.get_b(j), opcodes.get_c(j)) == (200, 400, 3)
    j = opcodes.set_c(j, 0)
    assert (opcodes.get_a(j), opcodes.get_b(j), opcodes.get_c(j)) == (200, 400, 0)
    assert opcodes.get_opcode(j) is OpCode.ADD


def test_set_opcode():
    i = opcodes.create_abc(OpCode.CALL, 4, 2, 1)
    j = opcodes.set_opcode(i, OpCode.TAILCALL)
    assert opcodes.get_opcode(j) is OpCode.TAILCALL
    assert (opcodes.get_a(j), opcodes.get_b(j), opcodes.get_c(j)) == (4, 2, 1)


def test_set_bx_sbx_ax():
    i = opcodes.create_abx(OpCode.CLOSURE, 3, 0)
    assert opcodes.get_bx(opcodes.set_bx(i, 12345)) == 12345
    i = opcodes.create_asbx(OpCode.FORPREP, 2, 0)
    j = opcodes.set_sbx(i, -42)
    assert opcodes.get_sbx(j) == -42
    assert opcodes.get_a(j) == 2
    k = opcodes.set_ax(opcodes.create_ax(OpCode.EXTRAARG, 0), 99)
    assert opcodes.get_ax(k) == 99


def test_out_of_range_arguments():
    with pytest.raises(ValueError):
        opcodes.create_abc(OpCode.MOVE, 256, 0, 0)
    with pytest.raises(ValueError):
        opcodes.create_abc(OpCode.MOVE, 0, -1, 0)
    with pytest.raises(ValueError):
        opcodes.create_asbx(OpCode.JMP, 0, -opcodes.MAXARG_SBX - 1)
    with pytest.raises(ValueError):
        opcodes.set_c(0, opcodes.MAXARG_C + 1)


def test_invalid_opcode_in_instruction():
    with pytest.raises(ValueError):
        opcodes.get_opcode(63)


def test_rk_operands():
    k = opcodes.rk_as_k(17)
    assert opcodes.is_k(k) is True
    assert opcodes.index_k(k) == 17
    assert opcodes.is_k(17) is False
    assert opcodes.index_k(opcodes.rk_as_k(opcodes.MAXINDEXRK)) == opcodes.MAXINDEXRK


def test_op_modes():
    assert opcodes.op_mode(OpCode.MOVE) is OpMode.ABC
    assert opcodes.op_mode(OpCode.LOADK) is OpMode.ABX
    assert opcodes.op_mode(OpCode.JMP) is OpMode.ASBX
    assert opcodes.op_mode(OpCode.EXTRAARG) is OpMode.AX


def test_argument_modes():
    assert opcodes.b_mode(OpCode.MOVE) is OpArgMask.R
    assert opcodes.c_mode(OpCode.MOVE) is OpArgMask.N
    assert opcodes.b_mode(OpCode.ADD) is OpArgMask.K
    assert opcodes.c_mode(OpCode.TEST) is OpArgMask.U
    assert opcodes.b_mode(OpCode.TEST) is OpArgMask.N


def test_test_modes():
    tests = {op for op in OpCode if opcodes.test_t_mode(op)}
    assert tests == {OpCode.EQ, OpCode.LT, OpCode.LE, OpCode.TEST, OpCode.TESTSET}


def test_a_modes():
    assert opcodes.test_a_mode(OpCode.MOVE) is True
    assert opcodes.test_a_mode(OpCode.SETTABLE) is False
    assert opcodes.test_a_mode(OpCode.TESTSET) is True
    assert opcodes.test_a_mode(OpCode.RETURN) is False


def test_every_opcode_has_properties():
    for op in OpCode:
        assert opcodes.op_mode(op) in OpMode
        assert opcodes.b_mode(op) in OpArgMask
        assert opcodes.c_mode(op) in OpArgMask
        assert opcodes.opname(op) == op.name