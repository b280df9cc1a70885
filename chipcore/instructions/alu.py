"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy)`` to ``(result, flag)``. A ``None`` flag leaves
VF untouched. The flag is written before the result, so ``8FyN`` keeps the
result in VF.
"""

import jax.numpy as jnp
from chipcore.constants import FLAG_REGISTER
from chipcore.state import MachineState, advance
from chipcore.decode import DecodedInstruction


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.uint16) + vy
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY (strictly)."""
    not_borrow = jnp.astype(vx > vy, jnp.uint8)
    return vx - vy, not_borrow


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = shifted out bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VY > VX (strictly)."""
    not_borrow = jnp.astype(vy > vx, jnp.uint8)
    return vy - vx, not_borrow


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = previous bit 7."""
    shifted_bit = (vx & 0x80) >> 7
    result = (jnp.astype(vx, jnp.uint16) << 1) & 0xFF
    return jnp.astype(result, jnp.uint8), shifted_bit


def make_alu_instruction(operation):
    """Wrap an ALU operation as an instruction."""
    def alu_instruction(state: MachineState, instruction: DecodedInstruction) -> MachineState:
        vx = state.V[instruction.x]
        vy = state.V[instruction.y]
        result, flag = operation(vx, vy)

        new_V = state.V
        if flag is not None:
            new_V = new_V.at[FLAG_REGISTER].set(flag)
        new_V = new_V.at[instruction.x].set(result)
        return advance(state.replace(V=new_V))

    alu_instruction.__doc__ = operation.__doc__
    return alu_instruction


execute_alu_set = make_alu_instruction(alu_set)
execute_alu_or = make_alu_instruction(alu_or)
execute_alu_and = make_alu_instruction(alu_and)
execute_alu_xor = make_alu_instruction(alu_xor)
execute_alu_add = make_alu_instruction(alu_add)
execute_alu_sub_xy = make_alu_instruction(alu_sub_xy)
execute_alu_shift_right = make_alu_instruction(alu_shift_right)
execute_alu_sub_yx = make_alu_instruction(alu_sub_yx)
execute_alu_shift_left = make_alu_instruction(alu_shift_left)
