# tests/arch/chip8/test_disassembler.py
"""
retro_chip8.arch.chip8.disassemblerモジュールの単体テスト。
"""
import unittest

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.transport.bus import Bus

class TestChip8Disassembler(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.cpu = Chip8Cpu(self.bus)

    def _load(self, data: bytes, start=0x200):
        self.bus.load(start, data)

    def test_disassemble_program(self):
        self._load(bytes([0x00, 0xE0, 0xA2, 0x2A, 0xD0, 0x15, 0x12, 0x00]))
        result = self.cpu.disassemble(0x200, 8)
        self.assertEqual(result, [
            (0x200, "00E0", "CLS"),
            (0x202, "A22A", "LD I, $22A"),
            (0x204, "D015", "DRW V0, V1, 5"),
            (0x206, "1200", "JP $200"),
        ])

    def test_disassemble_does_not_log_bus_activity(self):
        self._load(bytes([0x60, 0x01]))
        self.bus.get_and_clear_activity_log()
        self.cpu.disassemble(0x200, 2)
        self.assertEqual(self.bus.get_and_clear_activity_log(), [])

    def test_disassemble_undefined_combination(self):
        self._load(bytes([0xF0, 0xFF]))
        self.assertEqual(self.cpu.disassemble(0x200, 2), [(0x200, "F0FF", "DW #F0FF")])

    def test_disassemble_stops_at_end_of_memory(self):
        result = self.cpu.disassemble(0xFFC, 16)
        self.assertEqual([entry[0] for entry in result], [0xFFC, 0xFFE])

if __name__ == '__main__':
    unittest.main()
