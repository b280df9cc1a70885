"""CHIP-8 instruction cycle engine."""

from chipcore.constants import *
from chipcore.state import MachineState, StackState, create_state, reset
from chipcore.decode import DecodedInstruction, OpKind, classify, decode
from chipcore.emulator import (
    execute, fetch, load_program, load_rom, run_cycle, run_cycles, tick_timers,
)
from chipcore.control import pause, resume, single_step, clear_redraw, clear_beeps
from chipcore.keypad import key_down, key_up
from chipcore.machine import Machine
from chipcore.disassembler import disassemble, format_opcode
from chipcore.rendering import display_to_rgb, create_color_scheme

__all__ = [
    "MachineState",
    "StackState",
    "create_state",
    "reset",
    "fetch",
    "execute",
    "run_cycle",
    "run_cycles",
    "tick_timers",
    "load_program",
    "load_rom",
    "pause",
    "resume",
    "single_step",
    "clear_redraw",
    "clear_beeps",
    "key_down",
    "key_up",
    "Machine",
    "DecodedInstruction",
    "OpKind",
    "classify",
    "decode",
    "disassemble",
    "format_opcode",
    "display_to_rgb",
    "create_color_scheme",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "Status",
    "RunMode",
    "Fault",
]
