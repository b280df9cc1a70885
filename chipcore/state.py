"""CHIP-8 machine state structures."""

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode

from chipcore.constants import (
    FONT_DATA, FONT_START, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS, PROGRAM_START,
    SCREEN_HEIGHT, SCREEN_WIDTH, STACK_SIZE, Fault, RunMode, Status,
)
from chipcore.logging import report_fault


class StackState(PyTreeNode):
    """Call stack: fixed slots plus a pointer one past the last pushed address."""
    data: jnp.ndarray
    pointer: jnp.ndarray


class MachineState(PyTreeNode):
    """Complete CHIP-8 machine state.

    Attributes:
        rng: PRNG key consumed by ``Cxkk``
        memory: 4096 byte cells, font at 0x000, programs from 0x200
        pc: Program counter
        I: Index register
        V: General registers V0..VF
        stack: Call stack
        display: 32x64 pixel matrix indexed ``[y, x]``
        delay_timer: Delay countdown
        sound_timer: Sound countdown
        keypad: Pressed state of keys 0x0..0xF
        opcode: Most recently fetched instruction word
        status: One of ``Status``
        key_target: Register receiving the key that resolves ``Fx0A``
        run_mode: One of ``RunMode``
        fault: One of ``Fault``; set when ``status`` is ``HALTED``
        needs_redraw: Latched by ``00E0``/``Dxyn`` until the host clears it
        beeps: Times the sound timer ran out since the host last cleared it (saturates at 255)
    """
    rng: jax.Array
    memory: jnp.ndarray
    pc: jnp.ndarray
    I: jnp.ndarray
    V: jnp.ndarray
    stack: StackState
    display: jnp.ndarray
    delay_timer: jnp.ndarray
    sound_timer: jnp.ndarray
    keypad: jnp.ndarray
    opcode: jnp.ndarray
    status: jnp.ndarray
    key_target: jnp.ndarray
    run_mode: jnp.ndarray
    fault: jnp.ndarray
    needs_redraw: jnp.ndarray
    beeps: jnp.ndarray


def create_state(rng: jax.Array = None) -> MachineState:
    """Create power-on machine state with font data loaded."""
    if rng is None:
        rng = jax.random.PRNGKey(0)
    memory = jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8)
    return MachineState(
        rng=rng,
        memory=memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA),
        pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16),
        I=jnp.zeros((), dtype=jnp.uint16),
        V=jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8),
        stack=StackState(
            data=jnp.zeros(STACK_SIZE, dtype=jnp.uint16),
            pointer=jnp.zeros((), dtype=jnp.int32),
        ),
        display=jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_),
        delay_timer=jnp.zeros((), dtype=jnp.uint8),
        sound_timer=jnp.zeros((), dtype=jnp.uint8),
        keypad=jnp.zeros(NUM_KEYS, dtype=jnp.bool_),
        opcode=jnp.zeros((), dtype=jnp.uint16),
        status=jnp.asarray(Status.RUNNING, dtype=jnp.int32),
        key_target=jnp.zeros((), dtype=jnp.uint8),
        run_mode=jnp.asarray(RunMode.RUNNING, dtype=jnp.int32),
        fault=jnp.asarray(Fault.NONE, dtype=jnp.int32),
        needs_redraw=jnp.asarray(False),
        beeps=jnp.zeros((), dtype=jnp.uint8),
    )


def reset(state: MachineState) -> MachineState:
    """Return to power-on state, keeping the PRNG stream."""
    return create_state(state.rng)


def advance(state: MachineState, amount: int = 2) -> MachineState:
    """Move the program counter past the current instruction."""
    return state.replace(pc=state.pc + amount)


def raise_fault(state: MachineState, fault: int) -> MachineState:
    """Halt the machine with ``fault``, leaving everything else untouched."""
    report_fault(fault, state.pc)
    return state.replace(
        status=jnp.asarray(Status.HALTED, dtype=jnp.int32),
        fault=jnp.asarray(fault, dtype=jnp.int32),
    )


def fault_if(condition, state: MachineState, updated: MachineState, fault: int) -> MachineState:
    """Return ``updated`` unless ``condition`` holds, else halt ``state`` with ``fault``."""
    return jax.lax.cond(
        condition,
        lambda: raise_fault(state, fault),
        lambda: updated,
    )
