"""CHIP-8 register load and immediate instructions."""

import jax
import jax.numpy as jnp
from chipcore.state import MachineState, advance
from chipcore.decode import DecodedInstruction


def execute_set(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """6XKK - Set VX = KK."""
    return advance(state.replace(V=state.V.at[instruction.x].set(jnp.astype(instruction.kk, jnp.uint8))))


def execute_add(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """7XKK - Add KK to VX (wraps, VF untouched)."""
    return advance(state.replace(V=state.V.at[instruction.x].add(jnp.astype(instruction.kk, jnp.uint8))))


def execute_set_index(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """ANNN - Set I = NNN."""
    return advance(state.replace(I=instruction.nnn))


def execute_random(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """CXKK - Set VX = random byte & KK."""
    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.bits(subkey, shape=(), dtype=jnp.uint8)
    masked = random_value & jnp.astype(instruction.kk, jnp.uint8)
    return advance(state.replace(V=state.V.at[instruction.x].set(masked), rng=key))
