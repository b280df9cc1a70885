"""CHIP-8 disassembler producing pseudo-assembly for debug views.

Pure functions over raw memory: nothing here reads or changes live machine
state.
"""

from typing import Optional, Sequence

from chipcore.constants import MEMORY_SIZE
from chipcore.decode import OpKind, match_opcode

MNEMONICS = {
    OpKind.CLS: "CLS",
    OpKind.RET: "RETURN",
    OpKind.JP: "JUMP {nnn}",
    OpKind.CALL: "CALL {nnn}",
    OpKind.SE_IMM: "SE v{x}, {kk}",
    OpKind.SNE_IMM: "SNE v{x}, {kk}",
    OpKind.SE_REG: "SE v{x}, v{y}",
    OpKind.LD_IMM: "LD v{x}, {kk}",
    OpKind.ADD_IMM: "ADD v{x}, {kk}",
    OpKind.LD_REG: "LD v{x}, v{y}",
    OpKind.OR: "OR v{x}, v{y}",
    OpKind.AND: "AND v{x}, v{y}",
    OpKind.XOR: "XOR v{x}, v{y}",
    OpKind.ADD_REG: "ADD v{x}, v{y}",
    OpKind.SUB: "SUB v{x}, v{y}",
    OpKind.SHR: "SHR v{x}",
    OpKind.SUBN: "SUBN v{x}, v{y}",
    OpKind.SHL: "SHL v{x}",
    OpKind.SNE_REG: "SNE v{x}, v{y}",
    OpKind.LD_I: "LD I, {nnn}",
    OpKind.JP_V0: "JP v0, {nnn}",
    OpKind.RND: "RND v{x}, {kk}",
    OpKind.DRW: "DRW v{x}, v{y}, {n}",
    OpKind.SKP: "SKP v{x}",
    OpKind.SKNP: "SKNP v{x}",
    OpKind.LD_VX_DT: "LD v{x}, DT",
    OpKind.LD_VX_K: "LD v{x}, K",
    OpKind.LD_DT_VX: "LD DT, v{x}",
    OpKind.LD_ST_VX: "LD ST, v{x}",
    OpKind.ADD_I: "ADD I, v{x}",
    OpKind.LD_F: "LD F, v{x}",
    OpKind.LD_B: "LD B, v{x}",
    OpKind.STORE: "LD [I], v{x}",
    OpKind.LOAD: "LD v{x}, [I]",
}


def _hex(value: int) -> str:
    return f"0x{value:X}"


def format_opcode(opcode: int) -> str:
    """Render one opcode as a mnemonic; unknown words render as their hex value."""
    opcode = int(opcode)
    kind = match_opcode(opcode)
    if kind is None:
        return _hex(opcode)
    return MNEMONICS[kind].format(
        nnn=_hex(opcode & 0x0FFF),
        kk=_hex(opcode & 0x00FF),
        n=_hex(opcode & 0x000F),
        x=f"{(opcode & 0x0F00) >> 8:X}",
        y=f"{(opcode & 0x00F0) >> 4:X}",
    )


def disassemble(memory: Sequence[int]) -> dict[int, Optional[str]]:
    """Decode the word starting at every address.

    Both parities are decoded because programs may jump to odd addresses.
    The last address has no full word after it and maps to None.

    Raises:
        ValueError: if ``memory`` is larger than the 4KB address space
    """
    data = [int(byte) for byte in memory]
    if len(data) > MEMORY_SIZE:
        raise ValueError(f"Image is {len(data)} bytes, larger than {MEMORY_SIZE}")

    assembly: dict[int, Optional[str]] = {}
    for address in range(len(data)):
        if address + 1 >= len(data):
            assembly[address] = None
            continue
        assembly[address] = format_opcode((data[address] << 8) | data[address + 1])
    return assembly


def listing(assembly: dict[int, Optional[str]], pc: int, window: int = 12) -> list[str]:
    """Lines around ``pc`` sharing its parity, the current one marked with ``->``."""
    pc = int(pc)
    lines = []
    for address in range(pc - window // 2, pc + window // 2):
        if address % 2 != pc % 2:
            continue
        instruction = assembly.get(address)
        if instruction is None:
            continue
        if address == pc:
            lines.append(f"->  0x{address:X}: {instruction}")
        else:
            lines.append(f"0x{address:X}: {instruction}")
    return lines
