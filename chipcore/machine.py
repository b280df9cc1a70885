from typing import Callable, Optional

import jax
import numpy as np

from chipcore import control, keypad
from chipcore.constants import MEMORY_SIZE, PROGRAM_START, Fault, RunMode, Status
from chipcore.disassembler import disassemble, listing
from chipcore.emulator import load_program, run_cycle, run_cycles, run_cycles_with_progress
from chipcore.errors import FAULT_ERRORS, RomTooLargeError
from chipcore.logging import ConsoleLogger, logger as default_logger
from chipcore.state import MachineState, create_state, reset

_run_cycle = jax.jit(run_cycle)


class Machine:
    """Host-facing CHIP-8 machine owning a single ``MachineState``.

    The pure functions in ``chipcore.emulator`` do the work; this class keeps
    the current state, enforces the idle state before a program is loaded and
    turns recorded faults into exceptions.
    """

    def __init__(
        self,
        cycles_per_frame: int = 10,
        seed: int = 0,
        strict_load: bool = False,
        on_beep: Optional[Callable[[], None]] = None,
        logger: Optional[ConsoleLogger] = None,
    ):
        """Initialize the machine.

        Args:
            cycles_per_frame: Cycles executed by ``run_frame``
            seed: Seed of the PRNG key used by ``Cxkk``
            strict_load: Raise ``RomTooLargeError`` instead of truncating programs
            on_beep: Called once for each time the sound timer runs out, after the batch that ran it out
            logger: Console logger, defaults to the package logger
        """
        if cycles_per_frame < 1:
            raise ValueError(f"cycles_per_frame must be positive, got {cycles_per_frame}")

        self.cycles_per_frame = cycles_per_frame
        self.strict_load = strict_load
        self.on_beep = on_beep
        self.logger = logger or default_logger

        self.state: MachineState = create_state(jax.random.PRNGKey(seed))
        self.program: Optional[bytes] = None
        self._assembly = {}

    @property
    def program_loaded(self) -> bool:
        return self.program is not None

    def load(self, program: bytes):
        """Load a program, resetting first if one was already running."""
        program = bytes(program)
        capacity = MEMORY_SIZE - PROGRAM_START
        if self.strict_load and len(program) > capacity:
            raise RomTooLargeError(f"Program is {len(program)} bytes, at most {capacity} fit")

        if self.program_loaded:
            self.state = reset(self.state)
        self.state = load_program(self.state, program)
        self.program = program
        self._assembly = disassemble(np.asarray(self.state.memory))
        self.logger.info(f"Loaded {len(program)} byte program")

    def load_file(self, filename: str):
        with open(filename, 'rb') as f:
            self.load(f.read())

    def reset(self, reload: bool = True):
        """Return to power-on state, reloading the current program by default."""
        self.state = reset(self.state)
        if reload and self.program_loaded:
            self.state = load_program(self.state, self.program)
        elif not reload:
            self.program = None
            self._assembly = {}
        self.logger.info("Reset")

    def run_cycle(self):
        """Run one cycle. Does nothing until a program is loaded.

        Raises:
            MachineFault: on the cycle where the machine halts
        """
        if not self.program_loaded:
            return
        self._commit(_run_cycle(self.state))

    def run_frame(self) -> bool:
        """Run ``cycles_per_frame`` cycles and return whether a redraw is needed."""
        if not self.program_loaded:
            return False
        self._commit(run_cycles(self.state, self.cycles_per_frame))
        return self.needs_redraw

    def run(self, cycles: int, progress: bool = False):
        """Run a fixed batch of cycles, optionally with a tqdm progress bar."""
        if not self.program_loaded:
            return
        if progress:
            self._commit(run_cycles_with_progress(self.state, cycles, desc=f"Running {cycles:,} cycles"))
        else:
            self._commit(run_cycles(self.state, cycles))

    def _commit(self, state: MachineState):
        previous_fault = int(self.state.fault)
        self.state = state

        beeps = int(state.beeps)
        if beeps:
            self.state = control.clear_beeps(self.state)
            if self.on_beep is not None:
                for _ in range(beeps):
                    self.on_beep()

        fault = int(state.fault)
        if fault != Fault.NONE and previous_fault == Fault.NONE:
            raise FAULT_ERRORS[fault](int(state.pc), int(state.opcode))

    def pause(self):
        self.state = control.pause(self.state)

    def resume(self):
        self.state = control.resume(self.state)

    def single_step(self):
        self.state = control.single_step(self.state)

    def key_down(self, key: int):
        self.state = keypad.key_down(self.state, key)

    def key_up(self, key: int):
        self.state = keypad.key_up(self.state, key)

    def consume_redraw(self) -> bool:
        """Return the redraw flag and clear it."""
        needs_redraw = self.needs_redraw
        if needs_redraw:
            self.state = control.clear_redraw(self.state)
        return needs_redraw

    @property
    def needs_redraw(self) -> bool:
        return bool(self.state.needs_redraw)

    @property
    def display(self) -> np.ndarray:
        """32x64 matrix of 0/1 pixels, indexed ``[y, x]``."""
        return np.asarray(self.state.display, dtype=np.uint8)

    @property
    def memory(self) -> np.ndarray:
        return np.asarray(self.state.memory)

    @property
    def registers(self) -> np.ndarray:
        return np.asarray(self.state.V)

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def opcode(self) -> int:
        return int(self.state.opcode)

    @property
    def status(self) -> str:
        return Status.NAMES[int(self.state.status)]

    @property
    def run_mode(self) -> str:
        return RunMode.NAMES[int(self.state.run_mode)]

    @property
    def paused(self) -> bool:
        return int(self.state.run_mode) != RunMode.RUNNING

    @property
    def fault(self) -> str:
        return Fault.NAMES[int(self.state.fault)]

    def listing(self, window: int = 12) -> list[str]:
        """Disassembly of the loaded program around PC."""
        return listing(self._assembly, self.pc, window)
