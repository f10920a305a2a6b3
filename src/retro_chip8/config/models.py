from dataclasses import dataclass, field
from typing import Optional

from retro_chip8.common.types import Keymap
from retro_chip8.arch.chip8.state import STACK_CAPACITY
from retro_chip8.arch.chip8.keyboard import DEFAULT_KEYMAP

@dataclass
class MachineConfig:
    stack_capacity: int = STACK_CAPACITY
    random_seed: Optional[int] = None  # Noneの場合はOSのエントロピーでシード
    strict_decoding: bool = False

@dataclass
class TimingConfig:
    instruction_rate: int = 400  # Hz
    timer_rate: int = 60  # Hz
    frame_rate: int = 60  # Hz

@dataclass
class SystemConfig:
    machine: MachineConfig = field(default_factory=MachineConfig)
    timing: TimingConfig = field(default_factory=TimingConfig)
    keymap: Keymap = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
