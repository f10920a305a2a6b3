import logging
from typing import Tuple

from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from .models import SystemConfig

logger = logging.getLogger(__name__)

# @intent:responsibility システム構成（Config）に基づいて、メモリイメージ（Bus）とCPUを生成・接続します。
class SystemBuilder:
    def build_system(self, config: SystemConfig) -> Tuple[Chip8Cpu, Bus]:
        bus = Bus()
        machine = config.machine
        cpu = Chip8Cpu(
            bus,
            stack_capacity=machine.stack_capacity,
            seed=machine.random_seed,
            strict_decoding=machine.strict_decoding,
        )
        logger.debug(
            "System built: stack_capacity=%d, seed=%s, strict_decoding=%s",
            machine.stack_capacity, machine.random_seed, machine.strict_decoding,
        )
        return cpu, bus
