"""Opcode handlers, one pure ``(state, instruction) -> state`` function per operation."""
