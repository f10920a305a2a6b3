# tests/arch/chip8/test_instructions_control.py
"""
CHIP-8制御命令（ジャンプ、サブルーチン、条件スキップ、キー入力スキップ、停止）の単体テスト。
"""
import random
import unittest

from retro_chip8.core.snapshot import StepStatus
from retro_chip8.common.errors import StackOverflowError, StackUnderflowError
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, CallStack
from retro_chip8.arch.chip8.display import Framebuffer
from retro_chip8.arch.chip8.keyboard import KeyboardLatch
from retro_chip8.arch.chip8.instructions import decode_instruction, execute_instruction, Chip8Io

# @intent:test_suite 実行時点でPCが次の命令を指していることを前提とした制御フローを検証します。

class TestChip8ControlInstructions(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.state = Chip8CpuState()
        self.io = Chip8Io(Framebuffer(), KeyboardLatch(), random.Random(0))

    def _execute(self, word, current_pc=0x200):
        self.state.pc = current_pc
        op = decode_instruction(word, current_pc)
        self.state.pc = (self.state.pc + op.length) & 0xFFF
        return execute_instruction(op, self.state, self.bus, self.io)

    def test_jp(self):
        self._execute(0x1ABC)
        self.assertEqual(self.state.pc, 0xABC)

    def test_jp_v0_wraps_to_12_bits(self):
        self.state.v[0] = 0x10
        self._execute(0xB300)
        self.assertEqual(self.state.pc, 0x310)

        self.state.v[0] = 0xFF
        self._execute(0xBFF0)
        self.assertEqual(self.state.pc, (0xFF0 + 0xFF) & 0xFFF)

    def test_call_and_ret(self):
        self._execute(0x2300, current_pc=0x204)
        self.assertEqual(self.state.pc, 0x300)
        self.assertEqual(self.state.stack.entries(), [0x206])
        self.assertEqual(self.state.sp, 1)

        self._execute(0x00EE, current_pc=0x300)
        self.assertEqual(self.state.pc, 0x206)
        self.assertEqual(self.state.sp, 0)

    def test_ret_with_empty_stack_raises(self):
        with self.assertRaises(StackUnderflowError):
            self._execute(0x00EE)

    def test_call_overflow_raises(self):
        self.state.stack = CallStack(capacity=2)
        self._execute(0x2300)
        self._execute(0x2400, current_pc=0x300)
        with self.assertRaises(StackOverflowError):
            self._execute(0x2500, current_pc=0x400)
        self.assertEqual(len(self.state.stack), 2)

    def test_halt_keeps_pc(self):
        status = self._execute(0x0000, current_pc=0x20A)
        self.assertEqual(status, StepStatus.HALTED)
        self.assertEqual(self.state.pc, 0x20A)

    def test_sys_is_noop(self):
        status = self._execute(0x0123)
        self.assertIsNone(status)
        self.assertEqual(self.state.pc, 0x202)

    def test_cls_requests_clear_without_touching_pixels(self):
        self.io.framebuffer.draw_sprite(0, 0, [0x80])
        self._execute(0x00E0)
        self.assertTrue(self.io.framebuffer.needs_clear())
        self.assertEqual(self.io.framebuffer.pixel_at(0, 0), 1)
        self.assertEqual(self.state.pc, 0x202)

    def test_skip_if_equal_immediate(self):
        self.state.v[0xA] = 0x12
        self._execute(0x3A12)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x3A13)
        self.assertEqual(self.state.pc, 0x202)

    def test_skip_if_not_equal_immediate(self):
        self.state.v[0xA] = 0x12
        self._execute(0x4A13)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x4A12)
        self.assertEqual(self.state.pc, 0x202)

    def test_skip_register_compare(self):
        self.state.v[1] = 7
        self.state.v[2] = 7
        self._execute(0x5120)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x9120)
        self.assertEqual(self.state.pc, 0x202)

        self.state.v[2] = 8
        self._execute(0x9120)
        self.assertEqual(self.state.pc, 0x204)

    def test_skp_consumes_matching_key(self):
        self.state.v[5] = 0xA
        self.io.keyboard.set_key(0xA)
        self._execute(0xE59E)
        self.assertEqual(self.state.pc, 0x204)
        self.assertTrue(self.io.keyboard.is_empty())

    def test_skp_keeps_non_matching_key(self):
        self.state.v[5] = 0xA
        self.io.keyboard.set_key(0xB)
        self._execute(0xE59E)
        self.assertEqual(self.state.pc, 0x202)
        self.assertEqual(self.io.keyboard.peek(), 0xB)

    def test_sknp_consumes_different_key(self):
        self.state.v[5] = 0xA
        self.io.keyboard.set_key(0x3)
        self._execute(0xE5A1)
        self.assertEqual(self.state.pc, 0x204)
        self.assertTrue(self.io.keyboard.is_empty())

    def test_sknp_does_not_skip_without_key_or_on_match(self):
        self.state.v[5] = 0xA
        self._execute(0xE5A1)
        self.assertEqual(self.state.pc, 0x202)

        self.io.keyboard.set_key(0xA)
        self._execute(0xE5A1)
        self.assertEqual(self.state.pc, 0x202)
        self.assertEqual(self.io.keyboard.peek(), 0xA)

if __name__ == '__main__':
    unittest.main()
