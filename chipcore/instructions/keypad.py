"""CHIP-8 keypad instructions (Exxx and the Fx0A key wait)."""

import jax
import jax.numpy as jnp
from chipcore.constants import Status
from chipcore.state import MachineState, advance
from chipcore.decode import DecodedInstruction
from chipcore.instructions.control_flow import make_skip_instruction


def _key_pressed(state: MachineState, instruction: DecodedInstruction) -> jnp.ndarray:
    return state.keypad[state.V[instruction.x] & 0xF]


execute_skip_if_key = make_skip_instruction(_key_pressed)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: ~_key_pressed(state, inst)
)


def execute_wait_for_key(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX0A - Suspend until a key is pressed; the result lands in VX.

    The latch is cleared so that only a press made after this point resolves
    the wait. The program counter stays on this instruction until then.
    """
    return state.replace(
        status=jnp.asarray(Status.AWAITING_KEY, dtype=jnp.int32),
        key_target=jnp.astype(instruction.x, jnp.uint8),
        keypad=jnp.zeros_like(state.keypad),
    )


def poll_keypad(state: MachineState) -> MachineState:
    """Resolve a pending key wait with the lowest pressed key, if any."""
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return advance(state.replace(
            V=state.V.at[state.key_target].set(pressed_key),
            status=jnp.asarray(Status.RUNNING, dtype=jnp.int32),
        ))

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, lambda s: s, state)
