"""Exceptions raised by the host-facing machine API."""

from chipcore.constants import Fault


class ChipCoreError(Exception):
    """Base error for chipcore failures."""


class MachineFault(ChipCoreError):
    """The machine halted on a fault and must be reset."""

    fault = Fault.NONE

    def __init__(self, pc: int, opcode: int):
        self.pc = pc
        self.opcode = opcode
        super().__init__(
            f"{Fault.NAMES[self.fault]} at 0x{pc:03X} (opcode 0x{opcode:04X})"
        )


class StackOverflowError(MachineFault):
    """A call was made with every stack slot in use."""
    fault = Fault.STACK_OVERFLOW


class StackUnderflowError(MachineFault):
    """A return was made with an empty stack."""
    fault = Fault.STACK_UNDERFLOW


class AddressOutOfRangeError(MachineFault):
    """An instruction fetch or memory access fell outside 4KB."""
    fault = Fault.ADDRESS_OUT_OF_RANGE


class RomTooLargeError(ChipCoreError):
    """The program does not fit between 0x200 and 0x1000."""


class InvalidKeyError(ChipCoreError, ValueError):
    """A key code outside 0x0..0xF."""


FAULT_ERRORS = {
    error.fault: error
    for error in (StackOverflowError, StackUnderflowError, AddressOutOfRangeError)
}
