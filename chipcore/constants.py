"""CHIP-8 machine constants."""

import jax.numpy as jnp

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
FONT_START = 0x000
GLYPH_SIZE = 5

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

NUM_REGISTERS = 16
NUM_KEYS = 16
STACK_SIZE = 16
FLAG_REGISTER = 0xF
MAX_SPRITE_ROWS = 16  # n is a nibble, so at most 15 rows are drawn

FONT_DATA = jnp.array([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
], dtype=jnp.uint8)


class Status:
    """Execution status of the cycle controller."""
    RUNNING = 0
    AWAITING_KEY = 1
    HALTED = 2

    NAMES = {RUNNING: "running", AWAITING_KEY: "awaiting_key", HALTED: "halted"}


class RunMode:
    """Debugger run mode consumed by ``run_cycle``."""
    RUNNING = 0
    PAUSED = 1
    SINGLE_STEP_PENDING = 2

    NAMES = {RUNNING: "running", PAUSED: "paused", SINGLE_STEP_PENDING: "single_step_pending"}


class Fault:
    """Fault codes recorded when the machine halts."""
    NONE = 0
    STACK_OVERFLOW = 1
    STACK_UNDERFLOW = 2
    ADDRESS_OUT_OF_RANGE = 3

    NAMES = {
        NONE: "none",
        STACK_OVERFLOW: "stack overflow",
        STACK_UNDERFLOW: "stack underflow",
        ADDRESS_OUT_OF_RANGE: "address out of range",
    }
