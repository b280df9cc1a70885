"""Main CHIP-8 instruction cycle engine."""

from functools import partial
from typing import Union

import jax
import jax.lax
import jax.numpy as jnp
import numpy as np

from chipcore.constants import MEMORY_SIZE, PROGRAM_START, Fault, RunMode, Status
from chipcore.decode import classify, decode
from chipcore.logging import logger, scan_with_progress
from chipcore.state import MachineState, fault_if
from chipcore.instructions.system import execute_clear_screen, execute_return, execute_unknown
from chipcore.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
)
from chipcore.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipcore.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_shift_right, execute_alu_sub_yx, execute_alu_shift_left,
)
from chipcore.instructions.display import execute_display
from chipcore.instructions.keypad import (
    execute_skip_if_key, execute_skip_if_not_key, execute_wait_for_key, poll_keypad,
)
from chipcore.instructions.misc import (
    execute_get_delay_timer, execute_set_delay_timer, execute_set_sound_timer,
    execute_add_to_index, execute_font_character, execute_bcd_conversion,
    execute_store_registers, execute_load_registers,
)

# Indexed by OpKind
INSTRUCTION_HANDLERS = (
    execute_clear_screen,
    execute_return,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_set,
    execute_alu_or,
    execute_alu_and,
    execute_alu_xor,
    execute_alu_add,
    execute_alu_sub_xy,
    execute_alu_shift_right,
    execute_alu_sub_yx,
    execute_alu_shift_left,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_skip_if_not_key,
    execute_get_delay_timer,
    execute_wait_for_key,
    execute_set_delay_timer,
    execute_set_sound_timer,
    execute_add_to_index,
    execute_font_character,
    execute_bcd_conversion,
    execute_store_registers,
    execute_load_registers,
    execute_unknown,
)


def execute(state: MachineState, instruction) -> MachineState:
    """Execute single CHIP-8 instruction."""
    decoded_instruction = decode(instruction)
    state = state.replace(opcode=decoded_instruction.raw)

    return jax.lax.switch(
        classify(decoded_instruction),
        INSTRUCTION_HANDLERS,
        state, decoded_instruction
    )


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: MachineState) -> tuple[MachineState, jnp.uint16]:
    """Fetch the instruction at PC into ``state.opcode`` without moving PC."""
    pc = jnp.astype(state.pc, jnp.int32)
    high = state.memory.at[pc].get(mode="fill", fill_value=0)
    low = state.memory.at[pc + 1].get(mode="fill", fill_value=0)
    instruction = _pack_u16(high, low)

    fetched = state.replace(opcode=instruction)
    return fault_if(pc + 1 >= MEMORY_SIZE, fetched, fetched, Fault.ADDRESS_OUT_OF_RANGE), instruction


def tick_timers(state: MachineState) -> MachineState:
    """Count both timers down by one; count a beep each time sound runs out."""
    sound_ends = (state.sound_timer == 1) & (state.beeps < 255)
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
        beeps=jnp.where(sound_ends, state.beeps + 1, state.beeps),
    )


def _execute_and_tick(state: MachineState, instruction) -> MachineState:
    state = execute(state, instruction)
    return jax.lax.cond(state.status == Status.HALTED, lambda s: s, tick_timers, state)


def _await_key(state: MachineState, instruction) -> MachineState:
    return poll_keypad(state)


def _halted(state: MachineState, instruction) -> MachineState:
    return state


def _cycle(state: MachineState) -> MachineState:
    state, instruction = fetch(state)
    return jax.lax.switch(
        state.status,
        [_execute_and_tick, _await_key, _halted],  # indexed by Status
        state, instruction
    )


def run_cycle(state: MachineState) -> MachineState:
    """Advance the machine by one cycle, honouring the run mode.

    Paused or halted machines are left untouched. A pending single step runs
    exactly one cycle and drops back to paused.
    """
    active = (state.run_mode != RunMode.PAUSED) & (state.status != Status.HALTED)
    state = jax.lax.cond(active, _cycle, lambda s: s, state)
    return state.replace(run_mode=jnp.where(
        state.run_mode == RunMode.SINGLE_STEP_PENDING,
        jnp.asarray(RunMode.PAUSED, dtype=jnp.int32),
        state.run_mode,
    ))


def _run_cycle_body(state, _):
    return run_cycle(state), None


@partial(jax.jit, static_argnums=1)
def run_cycles(state: MachineState, n: int) -> MachineState:
    """Run ``n`` cycles in one compiled scan."""
    state, _ = jax.lax.scan(_run_cycle_body, state, length=n)
    return state


def run_cycles_with_progress(state: MachineState, n: int, desc: str = None) -> MachineState:
    """Run ``n`` cycles in one compiled scan, reporting progress with tqdm."""
    body = scan_with_progress(n, desc=desc)(_run_cycle_body)
    state, _ = jax.jit(lambda s: jax.lax.scan(body, s, jnp.arange(n)))(state)
    return state


def load_program(state: MachineState, program: Union[bytes, bytearray, np.ndarray]) -> MachineState:
    """Copy program bytes into memory from 0x200; bytes past 0x1000 are dropped."""
    data = np.frombuffer(bytes(program), dtype=np.uint8)
    capacity = MEMORY_SIZE - PROGRAM_START
    if len(data) > capacity:
        logger.warning(
            f"Program is {len(data)} bytes, only {capacity} fit; dropping {len(data) - capacity} bytes"
        )
        data = data[:capacity]
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(jnp.asarray(data))
    return state.replace(memory=new_memory)


def load_rom(state: MachineState, filename: str) -> MachineState:
    """Load ROM file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
