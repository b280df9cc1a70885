"""Host-side keypad latch updates."""

import jax.numpy as jnp
from chipcore.constants import NUM_KEYS
from chipcore.errors import InvalidKeyError
from chipcore.state import MachineState


def _check_key(key: int) -> int:
    if not 0 <= key < NUM_KEYS:
        raise InvalidKeyError(f"Key must be in 0x0..0x{NUM_KEYS - 1:X}, got {key!r}")
    return key


def key_down(state: MachineState, key: int) -> MachineState:
    """Latch ``key`` as pressed."""
    return state.replace(keypad=state.keypad.at[_check_key(key)].set(True))


def key_up(state: MachineState, key: int) -> MachineState:
    """Latch ``key`` as released."""
    return state.replace(keypad=state.keypad.at[_check_key(key)].set(False))


def pressed_keys(state: MachineState) -> list[int]:
    return [int(key) for key in jnp.flatnonzero(state.keypad)]
