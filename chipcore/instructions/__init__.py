"""CHIP-8 instruction implementations, one pure function per opcode kind."""
