"""CHIP-8 system instructions (0x0xxx) and the unknown-opcode fallback."""

import jax.numpy as jnp
from chipcore.constants import Fault
from chipcore.state import MachineState, advance, fault_if
from chipcore.decode import DecodedInstruction
from chipcore.stack import pop
from chipcore.logging import report_unknown_opcode


def execute_unknown(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """Unrecognised opcode: report it and treat it as a no-op."""
    report_unknown_opcode(instruction.raw, state.pc)
    return advance(state)


def execute_clear_screen(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00E0 - Clear display."""
    return advance(state.replace(
        display=jnp.zeros_like(state.display),
        needs_redraw=jnp.asarray(True),
    ))


def execute_return(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00EE - Return from subroutine to the instruction after the call."""
    stack, address, underflow = pop(state.stack)
    returned = state.replace(stack=stack, pc=address + 2)
    return fault_if(underflow, state, returned, Fault.STACK_UNDERFLOW)
