"""Debug control surface: pause, resume, single-step and host acknowledgements."""

import jax.numpy as jnp
from chipcore.constants import RunMode
from chipcore.state import MachineState


def pause(state: MachineState) -> MachineState:
    """Stop executing cycles until resumed or stepped."""
    return state.replace(run_mode=jnp.asarray(RunMode.PAUSED, dtype=jnp.int32))


def resume(state: MachineState) -> MachineState:
    """Run freely again, discarding any pending single step."""
    return state.replace(run_mode=jnp.asarray(RunMode.RUNNING, dtype=jnp.int32))


def single_step(state: MachineState) -> MachineState:
    """Request exactly one cycle from a paused machine. Ignored while running."""
    return state.replace(run_mode=jnp.where(
        state.run_mode == RunMode.PAUSED,
        jnp.asarray(RunMode.SINGLE_STEP_PENDING, dtype=jnp.int32),
        state.run_mode,
    ))


def clear_redraw(state: MachineState) -> MachineState:
    return state.replace(needs_redraw=jnp.asarray(False))


def clear_beeps(state: MachineState) -> MachineState:
    return state.replace(beeps=jnp.zeros((), dtype=jnp.uint8))
