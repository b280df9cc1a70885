"""Tests for instruction decoding and classification."""

import pytest
from chipcore import OpKind, classify, decode
from chipcore.decode import INSTRUCTION_SET, match_opcode
from chipcore.emulator import INSTRUCTION_HANDLERS


def test_decode_fields():
    decoded = decode(0xD12F)

    assert decoded.raw == 0xD12F
    assert decoded.opcode == 0xD
    assert decoded.x == 0x1
    assert decoded.y == 0x2
    assert decoded.n == 0xF
    assert decoded.kk == 0x2F
    assert decoded.nnn == 0x12F


def test_every_kind_has_a_handler():
    assert len(INSTRUCTION_HANDLERS) == OpKind.UNKNOWN + 1


def test_instruction_set_in_dispatch_order():
    assert [kind for kind, _, _ in INSTRUCTION_SET] == list(range(OpKind.UNKNOWN))


@pytest.mark.parametrize("opcode,kind", [
    (0x00E0, OpKind.CLS),
    (0x00EE, OpKind.RET),
    (0x1234, OpKind.JP),
    (0x2345, OpKind.CALL),
    (0x3A12, OpKind.SE_IMM),
    (0x4A12, OpKind.SNE_IMM),
    (0x5AB0, OpKind.SE_REG),
    (0x6A12, OpKind.LD_IMM),
    (0x7A12, OpKind.ADD_IMM),
    (0x8AB0, OpKind.LD_REG),
    (0x8AB1, OpKind.OR),
    (0x8AB2, OpKind.AND),
    (0x8AB3, OpKind.XOR),
    (0x8AB4, OpKind.ADD_REG),
    (0x8AB5, OpKind.SUB),
    (0x8AB6, OpKind.SHR),
    (0x8AB7, OpKind.SUBN),
    (0x8ABE, OpKind.SHL),
    (0x9AB0, OpKind.SNE_REG),
    (0xA123, OpKind.LD_I),
    (0xB123, OpKind.JP_V0),
    (0xCA12, OpKind.RND),
    (0xDAB5, OpKind.DRW),
    (0xEA9E, OpKind.SKP),
    (0xEAA1, OpKind.SKNP),
    (0xFA07, OpKind.LD_VX_DT),
    (0xFA0A, OpKind.LD_VX_K),
    (0xFA15, OpKind.LD_DT_VX),
    (0xFA18, OpKind.LD_ST_VX),
    (0xFA1E, OpKind.ADD_I),
    (0xFA29, OpKind.LD_F),
    (0xFA33, OpKind.LD_B),
    (0xFA55, OpKind.STORE),
    (0xFA65, OpKind.LOAD),
])
def test_classify(opcode, kind):
    assert classify(decode(opcode)) == kind
    assert match_opcode(opcode) == kind


@pytest.mark.parametrize("opcode", [0x0000, 0x00E1, 0x01EF, 0x8AB8, 0x8ABF, 0xE000, 0xFA00, 0xFAFF])
def test_unknown(opcode):
    assert classify(decode(opcode)) == OpKind.UNKNOWN
    assert match_opcode(opcode) is None


def test_register_skips_match_any_low_nibble():
    assert match_opcode(0x5AB7) == OpKind.SE_REG
    assert match_opcode(0x9ABF) == OpKind.SNE_REG
