"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipcore.state import MachineState, advance, fault_if
from chipcore.decode import DecodedInstruction
from chipcore.constants import (
    FLAG_REGISTER, MAX_SPRITE_ROWS, MEMORY_SIZE, SCREEN_HEIGHT, SCREEN_WIDTH, Fault,
)

# Pre-computed sprite offsets: rows are bytes, columns are bits MSB first
ROWS = jnp.arange(MAX_SPRITE_ROWS)
COLS = jnp.arange(8)


def blit_sprite(
    display: jnp.ndarray,
    sprite_rows: jnp.ndarray,
    height,
    origin_x,
    origin_y,
) -> tuple[jnp.ndarray, jnp.ndarray]:
    """XOR a sprite onto the display with toroidal wraparound.

    Args:
        display: Boolean array of shape (32, 64)
        sprite_rows: MAX_SPRITE_ROWS bytes, only the first ``height`` are drawn
        height: Number of rows to draw (0-15)
        origin_x: Column of the sprite's top-left pixel, wrapped modulo 64
        origin_y: Row of the sprite's top-left pixel, wrapped modulo 32

    Returns:
        Tuple of the new display and whether any lit pixel was turned off
    """
    visible = ROWS < height
    bits = (jnp.astype(sprite_rows, jnp.int32)[:, None] >> (7 - COLS)[None, :]) & 1
    sprite = jnp.astype(bits, jnp.bool_) & visible[:, None]

    ys = (jnp.astype(origin_y, jnp.int32) + ROWS) % SCREEN_HEIGHT
    xs = (jnp.astype(origin_x, jnp.int32) + COLS) % SCREEN_WIDTH
    # 16 rows and 8 columns never alias on a 32x64 torus
    layer = jnp.zeros_like(display).at[ys[:, None], xs[None, :]].set(sprite)

    collision = jnp.any(display & layer)
    return display ^ layer, collision


def execute_display(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """DXYN - Draw N-row sprite from memory[I] at (VX, VY); VF = collision."""
    height = jnp.astype(instruction.n, jnp.int32)
    first_row = jnp.astype(state.I, jnp.int32)
    out_of_range = (height > 0) & (first_row + height > MEMORY_SIZE)

    sprite_rows = state.memory.at[first_row + ROWS].get(mode="fill", fill_value=0)
    display, collision = blit_sprite(
        state.display,
        sprite_rows,
        height,
        state.V[instruction.x],
        state.V[instruction.y],
    )

    drawn = advance(state.replace(
        display=display,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        needs_redraw=jnp.asarray(True),
    ))
    return fault_if(out_of_range, state, drawn, Fault.ADDRESS_OUT_OF_RANGE)
