import os
import sys
import tempfile
import unittest
from unittest.mock import patch

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QKeyEvent
from PySide6.QtCore import Qt, QEvent

from retro_chip8.config.models import SystemConfig
from retro_chip8.ui.main_window import MainWindow

class TestMainWindow(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        if not QApplication.instance():
            cls.app = QApplication(sys.argv)
        else:
            cls.app = QApplication.instance()

    def setUp(self):
        self.window = MainWindow(SystemConfig())

    def tearDown(self):
        self.window.close()

    def _write_rom(self, directory, data):
        path = os.path.join(directory, "test.ch8")
        with open(path, "wb") as f:
            f.write(data)
        return path

    def test_load_rom_starts_pump(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write_rom(tmp, bytes([0x60, 0x01, 0x12, 0x02]))
            self.assertTrue(self.window.load_rom(path))
        self.assertTrue(self.window._pump.isActive())
        self.assertEqual(self.window.cpu.program_end, 0x204)
        self.assertIn("PC=$200", self.window.status_label.text())

    def test_load_missing_rom_reports_error(self):
        self.assertFalse(self.window.load_rom("/nonexistent/rom.ch8"))
        self.assertFalse(self.window._pump.isActive())
        self.assertIn("rom.ch8", self.window.status_label.text())

    def test_control_keys(self):
        scheduler = self.window.scheduler
        interval = scheduler.instruction_interval

        self.assertTrue(self.window.handle_key("P"))
        self.assertTrue(scheduler.paused)
        self.assertTrue(self.window.handle_key("="))
        self.assertLess(scheduler.instruction_interval, interval)
        self.assertTrue(self.window.handle_key("-"))
        self.assertTrue(self.window.handle_key("-"))
        self.assertGreater(scheduler.instruction_interval, interval)
        self.assertTrue(self.window.handle_key("u"))
        self.assertAlmostEqual(scheduler.instruction_interval, interval)

    def test_keypad_keys_are_latched(self):
        self.assertTrue(self.window.handle_key("w"))
        self.assertEqual(self.window.cpu.keyboard.peek(), 0x5)
        self.assertFalse(self.window.handle_key("k"))

    def test_key_press_event(self):
        event = QKeyEvent(QEvent.KeyPress, Qt.Key_V, Qt.NoModifier, "v")
        self.window.keyPressEvent(event)
        self.assertEqual(self.window.cpu.keyboard.peek(), 0xF)

    def test_beep_on_sound_rising_edge(self):
        self.window.cpu.get_state().timers.sound = 2
        with patch.object(QApplication, "beep") as beep:
            self.window._update_sound()
            self.window._update_sound()
            self.assertEqual(beep.call_count, 1)
            self.assertEqual(self.window.sound_label.text(), "BEEP")

            self.window.cpu.tick()
            self.window.cpu.tick()
            self.window._update_sound()
            self.assertEqual(self.window.sound_label.text(), "")

            self.window.cpu.get_state().timers.sound = 1
            self.window._update_sound()
            self.assertEqual(beep.call_count, 2)

if __name__ == '__main__':
    unittest.main()
