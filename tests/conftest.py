"""Test configuration and fixtures for CHIP-8 engine tests."""

import pytest
import jax.numpy as jnp
from chipcore import Machine, create_state, load_program


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


@pytest.fixture
def machine():
    """Provide a machine with nothing loaded."""
    return Machine()


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def assemble(*words):
    """Pack 16-bit instruction words into big-endian program bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def program_state(state, *words):
    """Load the given instruction words at 0x200."""
    return load_program(state, assemble(*words))
