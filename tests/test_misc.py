"""Tests for miscellaneous instructions (FXxx)."""

import jax.numpy as jnp
import pytest
from chipcore import execute, Fault, Status


def with_index(state, address):
    return state.replace(I=jnp.asarray(address, dtype=jnp.uint16))


class TestTimers:
    """Test timer instructions."""

    def test_get_delay_timer(self, fresh_state):
        """FX07 - VX = DT."""
        state = fresh_state.replace(delay_timer=jnp.asarray(0x33, dtype=jnp.uint8))
        state = execute(state, 0xF407)
        assert state.V[4] == 0x33

    def test_set_delay_timer(self, fresh_state):
        """FX15 - DT = VX."""
        state = fresh_state.replace(V=fresh_state.V.at[2].set(60))
        state = execute(state, 0xF215)
        assert state.delay_timer == 60

    def test_set_sound_timer(self, fresh_state):
        """FX18 - ST = VX."""
        state = fresh_state.replace(V=fresh_state.V.at[2].set(5))
        state = execute(state, 0xF218)
        assert state.sound_timer == 5


class TestIndexArithmetic:
    """Test FX1E and FX29."""

    def test_add_to_index(self, fresh_state):
        state = with_index(fresh_state, 0x100)
        state = state.replace(V=state.V.at[1].set(0x20))

        state = execute(state, 0xF11E)

        assert state.I == 0x120

    def test_add_to_index_leaves_flag(self, fresh_state):
        state = with_index(fresh_state, 0xFFF)
        state = state.replace(V=state.V.at[1].set(0x02).at[15].set(0x07))

        state = execute(state, 0xF11E)

        assert state.I == 0x1001
        assert state.V[15] == 0x07

    def test_add_to_index_wraps_at_16_bits(self, fresh_state):
        state = with_index(fresh_state, 0xFFFF)
        state = state.replace(V=state.V.at[1].set(0x02))

        state = execute(state, 0xF11E)

        assert state.I == 0x0001

    @pytest.mark.parametrize("digit", [0x0, 0x7, 0xA, 0xF])
    def test_font_character(self, fresh_state, digit):
        state = fresh_state.replace(V=fresh_state.V.at[6].set(digit))
        state = execute(state, 0xF629)
        assert state.I == digit * 5


class TestBCD:
    """Test FX33."""

    @pytest.mark.parametrize("value,digits", [
        (0, [0, 0, 0]),
        (7, [0, 0, 7]),
        (42, [0, 4, 2]),
        (156, [1, 5, 6]),
        (234, [2, 3, 4]),
        (255, [2, 5, 5]),
    ])
    def test_bcd_conversion(self, fresh_state, value, digits):
        state = with_index(fresh_state, 0x300)
        state = state.replace(V=state.V.at[3].set(value))

        state = execute(state, 0xF333)

        assert list(state.memory[0x300:0x303]) == digits
        assert state.I == 0x300

    def test_bcd_at_end_of_memory(self, fresh_state):
        state = with_index(fresh_state, 0xFFD)
        state = state.replace(V=state.V.at[3].set(123))

        state = execute(state, 0xF333)

        assert state.status == Status.RUNNING
        assert list(state.memory[0xFFD:]) == [1, 2, 3]

    def test_bcd_past_end_of_memory(self, fresh_state):
        state = with_index(fresh_state, 0xFFE)

        state = execute(state, 0xF333)

        assert state.status == Status.HALTED
        assert state.fault == Fault.ADDRESS_OUT_OF_RANGE
        assert state.pc == 0x200


class TestRegisterTransfer:
    """Test FX55 and FX65."""

    def test_store_registers(self, fresh_state):
        V = jnp.arange(16, dtype=jnp.uint8) + 1
        state = with_index(fresh_state.replace(V=V), 0x300)

        state = execute(state, 0xF355)  # store V0..V3

        assert list(state.memory[0x300:0x305]) == [1, 2, 3, 4, 0]
        assert state.I == 0x300

    def test_load_registers(self, fresh_state):
        memory = fresh_state.memory.at[0x300:0x304].set(jnp.array([9, 8, 7, 6], dtype=jnp.uint8))
        state = with_index(fresh_state.replace(memory=memory), 0x300)
        state = state.replace(V=state.V.at[3].set(0x55))

        state = execute(state, 0xF265)  # load V0..V2

        assert list(state.V[:4]) == [9, 8, 7, 0x55]
        assert state.I == 0x300

    def test_store_then_load_all(self, fresh_state):
        V = jnp.arange(16, dtype=jnp.uint8) * 3
        state = with_index(fresh_state.replace(V=V), 0x400)

        state = execute(state, 0xFF55)
        state = state.replace(V=jnp.zeros(16, dtype=jnp.uint8))
        state = execute(state, 0xFF65)

        assert jnp.array_equal(state.V, V)

    def test_store_past_end_of_memory(self, fresh_state):
        state = with_index(fresh_state, 0xFFE)

        state = execute(state, 0xF255)  # would write 0xFFE..0x1000

        assert state.status == Status.HALTED
        assert state.fault == Fault.ADDRESS_OUT_OF_RANGE
        assert state.memory[0xFFE] == 0

    def test_store_at_end_of_memory(self, fresh_state):
        state = with_index(fresh_state, 0xFFE)
        state = state.replace(V=state.V.at[0].set(5).at[1].set(6))

        state = execute(state, 0xF155)

        assert state.status == Status.RUNNING
        assert list(state.memory[0xFFE:]) == [5, 6]

    def test_load_past_end_of_memory(self, fresh_state):
        state = with_index(fresh_state, 0xFFF)

        state = execute(state, 0xF165)

        assert state.fault == Fault.ADDRESS_OUT_OF_RANGE
