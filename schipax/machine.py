"""Stateful host facade around the functional emulator core."""

from typing import Optional, Tuple, Union

import jax
import numpy as np

from schipax.constants import INSTRUCTION_FREQUENCY, TIMER_FREQUENCY
from schipax.display import screen
from schipax.emulator import reset, run, step
from schipax.errors import EmulatorError, error_from_state
from schipax.keypad import any_pressed, is_pressed, set_key
from schipax.logging import ConsoleLogger, format_registers
from schipax.memory import ByteData
from schipax.registers import get_register, set_register
from schipax.rendering import chip8_display_to_rgb, create_color_scheme
from schipax.state import EmulatorState, Quirks, RunMode, create_state, get_quirks
from schipax.timers import sound_active, tick


class Machine:
    """One virtual machine, as a frontend drives it.

    Holds the current ``EmulatorState`` and turns recorded faults into raised
    ``EmulatorError`` subclasses. A halted machine keeps raising until it is
    reset or a new ROM is loaded.

    Args:
        quirks: ``Quirks`` instance or preset name ("default", "chip8", "schip")
        seed: Seed for the CXNN random generator
        instruction_frequency: Instructions executed per second of emulated time
        timer_frequency: Timer ticks per second; one frame is one tick
        logger: Logger for load/reset/fault messages
    """

    def __init__(
        self,
        quirks: Union[str, Quirks] = "default",
        seed: int = 0,
        instruction_frequency: int = INSTRUCTION_FREQUENCY,
        timer_frequency: int = TIMER_FREQUENCY,
        logger: Optional[ConsoleLogger] = None,
    ):
        if instruction_frequency <= 0 or timer_frequency <= 0:
            raise ValueError("instruction_frequency and timer_frequency must be positive")

        self.quirks = get_quirks(quirks) if isinstance(quirks, str) else quirks
        self.instruction_frequency = instruction_frequency
        self.timer_frequency = timer_frequency
        self.instructions_per_frame = max(1, instruction_frequency // timer_frequency)
        self.logger = logger if logger is not None else ConsoleLogger("Machine", log_level="WARNING")

        self.state: EmulatorState = create_state(rng=jax.random.PRNGKey(seed), quirks=self.quirks)
        self.rom: Optional[bytes] = None

    def load(self, rom: ByteData, clear_flags: bool = False) -> None:
        """Reset the machine and load ``rom`` at 0x200."""
        rom = bytes(rom)
        self.state = reset(self.state, rom, clear_flags=clear_flags)
        self.rom = rom
        self.logger.info(f"Loaded ROM ({len(rom)} bytes)")

    def reset(self) -> None:
        """Power-cycle, reloading the current ROM if there is one."""
        self.state = reset(self.state, self.rom)
        self.logger.info("Machine reset")

    def _check(self) -> None:
        error = error_from_state(self.state)
        if error is not None:
            self.logger.error(f"{type(error).__name__}: {error}")
            self.logger.debug(format_registers(self.state))
            raise error

    def step(self) -> RunMode:
        """Execute one instruction and return the resulting run mode."""
        self._check()
        self.state = step(self.state)
        self._check()
        return self.status

    def run(self, cycles: int) -> RunMode:
        """Execute up to ``cycles`` instructions; stops early on a fault or EXIT."""
        if cycles < 0:
            raise ValueError(f"cycles must be non-negative, got {cycles}")
        self._check()
        if cycles:
            self.state = run(self.state, cycles)
        self._check()
        return self.status

    def run_frame(self) -> RunMode:
        """Run one timer period worth of instructions, then tick the timers."""
        status = self.run(self.instructions_per_frame)
        self.tick()
        return status

    def tick(self) -> None:
        """Count both timers down once."""
        self.state = tick(self.state)

    def get_register(self, index: int) -> int:
        return get_register(self.state, index)

    def set_register(self, index: int, value: int) -> None:
        self.state = set_register(self.state, index, value)

    def set_key(self, index: int, pressed: bool = True) -> None:
        self.state = set_key(self.state, index, pressed)

    def is_pressed(self, index: int) -> bool:
        return is_pressed(self.state, index)

    def any_pressed(self) -> Optional[int]:
        return any_pressed(self.state)

    @property
    def sound_active(self) -> bool:
        return sound_active(self.state)

    @property
    def screen(self) -> np.ndarray:
        """Active pixel grid, shape (width, height)."""
        return screen(self.state)

    def render(
        self,
        scale: int = 8,
        color_scheme: str = "classic",
        colors: Optional[Tuple[Tuple[int, int, int], Tuple[int, int, int]]] = None,
    ) -> np.ndarray:
        """RGB frame of the active screen; ``colors`` overrides ``color_scheme``."""
        on_color, off_color = colors if colors is not None else create_color_scheme(color_scheme)
        return chip8_display_to_rgb(self.screen, scale, on_color, off_color)

    @property
    def status(self) -> RunMode:
        return RunMode(int(self.state.mode))

    @property
    def error(self) -> Optional[EmulatorError]:
        """The fault that halted the machine, if any."""
        return error_from_state(self.state)
