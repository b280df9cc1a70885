"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipcore.state import MachineState, advance, fault_if
from chipcore.decode import DecodedInstruction
from chipcore.constants import FONT_START, GLYPH_SIZE, MEMORY_SIZE, NUM_REGISTERS, Fault

REGISTER_INDICES = jnp.arange(NUM_REGISTERS)


def execute_get_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX07 - Set VX to delay timer value."""
    return advance(state.replace(V=state.V.at[instruction.x].set(state.delay_timer)))


def execute_set_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX15 - Set delay timer to VX."""
    return advance(state.replace(delay_timer=state.V[instruction.x]))


def execute_set_sound_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX18 - Set sound timer to VX."""
    return advance(state.replace(sound_timer=state.V[instruction.x]))


def execute_add_to_index(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX1E - Add VX to I (16-bit wrap, VF untouched)."""
    return advance(state.replace(I=state.I + jnp.astype(state.V[instruction.x], jnp.uint16)))


def execute_font_character(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * GLYPH_SIZE
    return advance(state.replace(I=font_address))


def execute_bcd_conversion(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]
    base = jnp.astype(state.I, jnp.int32)

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = jnp.arange(3) + base
    stored = advance(state.replace(memory=state.memory.at[indices].set(digits, mode="drop")))
    return fault_if(base + 3 > MEMORY_SIZE, state, stored, Fault.ADDRESS_OUT_OF_RANGE)


def execute_store_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX55 - Store V0 through VX in memory starting at I."""
    base = jnp.astype(state.I, jnp.int32)
    last = jnp.astype(instruction.x, jnp.int32)

    register_mask = REGISTER_INDICES <= last
    base_indices = base + REGISTER_INDICES
    current_memory_values = state.memory.at[base_indices].get(mode="fill", fill_value=0)
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    new_memory = state.memory.at[base_indices].set(new_memory_values, mode="drop")

    stored = advance(state.replace(memory=new_memory))
    return fault_if(base + last >= MEMORY_SIZE, state, stored, Fault.ADDRESS_OUT_OF_RANGE)


def execute_load_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX65 - Load V0 through VX from memory starting at I."""
    base = jnp.astype(state.I, jnp.int32)
    last = jnp.astype(instruction.x, jnp.int32)

    register_mask = REGISTER_INDICES <= last
    memory_values = state.memory.at[base + REGISTER_INDICES].get(mode="fill", fill_value=0)
    new_V = jnp.where(register_mask, memory_values, state.V)

    loaded = advance(state.replace(V=new_V))
    return fault_if(base + last >= MEMORY_SIZE, state, loaded, Fault.ADDRESS_OUT_OF_RANGE)
