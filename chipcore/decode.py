"""CHIP-8 instruction decoding."""

from typing import Optional

import jax.numpy as jnp
from chex import dataclass


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    kk: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = jnp.asarray(instruction, dtype=jnp.uint16)
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        kk=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


class OpKind:
    """Every instruction kind, numbered in dispatch order."""
    CLS = 0        # 00E0
    RET = 1        # 00EE
    JP = 2         # 1nnn
    CALL = 3       # 2nnn
    SE_IMM = 4     # 3xkk
    SNE_IMM = 5    # 4xkk
    SE_REG = 6     # 5xy0
    LD_IMM = 7     # 6xkk
    ADD_IMM = 8    # 7xkk
    LD_REG = 9     # 8xy0
    OR = 10        # 8xy1
    AND = 11       # 8xy2
    XOR = 12       # 8xy3
    ADD_REG = 13   # 8xy4
    SUB = 14       # 8xy5
    SHR = 15       # 8xy6
    SUBN = 16      # 8xy7
    SHL = 17       # 8xyE
    SNE_REG = 18   # 9xy0
    LD_I = 19      # Annn
    JP_V0 = 20     # Bnnn
    RND = 21       # Cxkk
    DRW = 22       # Dxyn
    SKP = 23       # Ex9E
    SKNP = 24      # ExA1
    LD_VX_DT = 25  # Fx07
    LD_VX_K = 26   # Fx0A
    LD_DT_VX = 27  # Fx15
    LD_ST_VX = 28  # Fx18
    ADD_I = 29     # Fx1E
    LD_F = 30      # Fx29
    LD_B = 31      # Fx33
    STORE = 32     # Fx55
    LOAD = 33      # Fx65
    UNKNOWN = 34


# (kind, mask, pattern): an opcode is of ``kind`` when ``opcode & mask == pattern``.
INSTRUCTION_SET = (
    (OpKind.CLS, 0xF0FF, 0x00E0),
    (OpKind.RET, 0xF0FF, 0x00EE),
    (OpKind.JP, 0xF000, 0x1000),
    (OpKind.CALL, 0xF000, 0x2000),
    (OpKind.SE_IMM, 0xF000, 0x3000),
    (OpKind.SNE_IMM, 0xF000, 0x4000),
    (OpKind.SE_REG, 0xF000, 0x5000),
    (OpKind.LD_IMM, 0xF000, 0x6000),
    (OpKind.ADD_IMM, 0xF000, 0x7000),
    (OpKind.LD_REG, 0xF00F, 0x8000),
    (OpKind.OR, 0xF00F, 0x8001),
    (OpKind.AND, 0xF00F, 0x8002),
    (OpKind.XOR, 0xF00F, 0x8003),
    (OpKind.ADD_REG, 0xF00F, 0x8004),
    (OpKind.SUB, 0xF00F, 0x8005),
    (OpKind.SHR, 0xF00F, 0x8006),
    (OpKind.SUBN, 0xF00F, 0x8007),
    (OpKind.SHL, 0xF00F, 0x800E),
    (OpKind.SNE_REG, 0xF000, 0x9000),
    (OpKind.LD_I, 0xF000, 0xA000),
    (OpKind.JP_V0, 0xF000, 0xB000),
    (OpKind.RND, 0xF000, 0xC000),
    (OpKind.DRW, 0xF000, 0xD000),
    (OpKind.SKP, 0xF0FF, 0xE09E),
    (OpKind.SKNP, 0xF0FF, 0xE0A1),
    (OpKind.LD_VX_DT, 0xF0FF, 0xF007),
    (OpKind.LD_VX_K, 0xF0FF, 0xF00A),
    (OpKind.LD_DT_VX, 0xF0FF, 0xF015),
    (OpKind.LD_ST_VX, 0xF0FF, 0xF018),
    (OpKind.ADD_I, 0xF0FF, 0xF01E),
    (OpKind.LD_F, 0xF0FF, 0xF029),
    (OpKind.LD_B, 0xF0FF, 0xF033),
    (OpKind.STORE, 0xF0FF, 0xF055),
    (OpKind.LOAD, 0xF0FF, 0xF065),
)

_MASKS = jnp.array([mask for _, mask, _ in INSTRUCTION_SET], dtype=jnp.uint16)
_PATTERNS = jnp.array([pattern for _, _, pattern in INSTRUCTION_SET], dtype=jnp.uint16)


def classify(instruction: DecodedInstruction) -> jnp.ndarray:
    """Map a decoded instruction to its ``OpKind`` index (traceable)."""
    matches = (instruction.raw & _MASKS) == _PATTERNS
    return jnp.where(jnp.any(matches), jnp.argmax(matches), OpKind.UNKNOWN)


def match_opcode(opcode: int) -> Optional[int]:
    """Host-side lookup of the ``OpKind`` of a raw opcode, or None if unknown."""
    for kind, mask, pattern in INSTRUCTION_SET:
        if opcode & mask == pattern:
            return kind
    return None
