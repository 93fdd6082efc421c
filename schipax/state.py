"""CHIP-8 / SuperChip8 emulator state structures."""

import dataclasses
from enum import IntEnum

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from schipax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, BIG_FONT_START, BIG_FONT_DATA, MEMORY_SIZE,
    HIRES_SCREEN_WIDTH, HIRES_SCREEN_HEIGHT, STACK_SIZE, NUM_REGISTERS, NUM_KEYS, NUM_FLAG_REGISTERS
)
from schipax.errors import Fault


class RunMode(IntEnum):
    """Execution engine states."""
    RUNNING = 0
    WAITING_FOR_KEY = 1
    HALTED = 2
    DONE = 3


@dataclasses.dataclass(frozen=True)
class Quirks:
    """Behaviors that differ between historical CHIP-8 interpreters.

    Attributes:
        shift_uses_vy: 8XY6/8XYE shift VY into VX instead of shifting VX in place
        load_store_increments_index: FX55/FX65 leave I pointing past the last register
        jump_uses_vx: BXNN jumps to XNN + VX instead of NNN + V0
        logic_resets_vf: 8XY1/8XY2/8XY3 clear VF
        index_overflow_sets_vf: FX1E sets VF when I leaves the 12-bit range
    """
    shift_uses_vy: bool = False
    load_store_increments_index: bool = False
    jump_uses_vx: bool = False
    logic_resets_vf: bool = False
    index_overflow_sets_vf: bool = False


QUIRK_PRESETS = {
    "default": Quirks(),
    "chip8": Quirks(shift_uses_vy=True, load_store_increments_index=True, logic_resets_vf=True),
    "schip": Quirks(jump_uses_vx=True),
}


def get_quirks(name: str) -> Quirks:
    """Look up a quirk preset by name ("default", "chip8", "schip")."""
    if name not in QUIRK_PRESETS:
        raise ValueError(
            f"Unknown quirk preset '{name}'. Available: {list(QUIRK_PRESETS.keys())}"
        )
    return QUIRK_PRESETS[name]


class StackState(PyTreeNode):
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main emulator state.

    The display is always allocated at the SuperChip8 size and indexed
    ``[x, y]``; in standard resolution only the top-left 64x32 region is active.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros((HIRES_SCREEN_WIDTH, HIRES_SCREEN_HEIGHT), dtype=jnp.bool_)
    )
    hires: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    flags: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_FLAG_REGISTERS, dtype=jnp.uint8))
    mode: jnp.ndarray = field(default_factory=lambda: jnp.asarray(int(RunMode.RUNNING), dtype=jnp.uint8))
    fault: jnp.ndarray = field(default_factory=lambda: jnp.asarray(int(Fault.NONE), dtype=jnp.uint8))
    fault_info: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.int32))
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0), quirks: Quirks = Quirks()) -> EmulatorState:
    """Create initial emulator state with both fonts loaded."""
    state = EmulatorState(rng, quirks=quirks)
    memory = state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA)
    memory = memory.at[BIG_FONT_START:BIG_FONT_START + len(BIG_FONT_DATA)].set(BIG_FONT_DATA)
    return state.replace(memory=memory)


def set_mode(state: EmulatorState, mode: RunMode) -> EmulatorState:
    """Switch the engine state."""
    return state.replace(mode=jnp.asarray(int(mode), dtype=jnp.uint8))


def halt(state: EmulatorState, fault: Fault, info) -> EmulatorState:
    """Stop execution and record why."""
    return state.replace(
        mode=jnp.asarray(int(RunMode.HALTED), dtype=jnp.uint8),
        fault=jnp.asarray(int(fault), dtype=jnp.uint8),
        fault_info=jnp.astype(info, jnp.int32),
    )


def halt_when(condition, state: EmulatorState, fault: Fault, info, update) -> EmulatorState:
    """Halt with ``fault`` when ``condition`` holds, otherwise apply ``update``."""
    return jax.lax.cond(
        condition,
        lambda s: halt(s, fault, info),
        update,
        state
    )
