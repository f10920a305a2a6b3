import yaml
from typing import Dict, Any
from .models import SystemConfig, MachineConfig, TimingConfig
from retro_chip8.arch.chip8.keyboard import KEY_COUNT

class ConfigLoader:
    def load_from_file(self, path: str) -> SystemConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def load_from_string(self, text: str) -> SystemConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any]) -> SystemConfig:
        # Parse Machine
        machine_data = data.get("machine") or {}
        machine_defaults = MachineConfig()
        seed = machine_data.get("random_seed")
        machine = MachineConfig(
            stack_capacity=self._parse_positive(machine_data.get("stack_capacity", machine_defaults.stack_capacity), "stack_capacity"),
            random_seed=None if seed is None else self._parse_int(seed),
            strict_decoding=bool(machine_data.get("strict_decoding", False)),
        )

        # Parse Timing
        timing_data = data.get("timing") or {}
        defaults = TimingConfig()
        timing = TimingConfig(
            instruction_rate=self._parse_positive(timing_data.get("instruction_rate", defaults.instruction_rate), "instruction_rate"),
            timer_rate=self._parse_positive(timing_data.get("timer_rate", defaults.timer_rate), "timer_rate"),
            frame_rate=self._parse_positive(timing_data.get("frame_rate", defaults.frame_rate), "frame_rate"),
        )

        config = SystemConfig(machine=machine, timing=timing)

        # Parse Keymap (指定された場合は既定のキーマップを置き換える)
        keymap_data = data.get("keymap")
        if keymap_data is not None:
            config.keymap = {}
            for host_key, code in keymap_data.items():
                value = self._parse_int(code)
                if not 0 <= value < KEY_COUNT:
                    raise ValueError(f"Key code for '{host_key}' must be 0x0-0xF: {code}")
                config.keymap[str(host_key).lower()] = value

        return config

    def _parse_positive(self, value: Any, name: str) -> int:
        result = self._parse_int(value)
        if result <= 0:
            raise ValueError(f"{name} must be a positive integer: {value}")
        return result

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
