import os
import sys
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QColor

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.transport.bus import Bus
from retro_chip8.ui.screen_view import ScreenView, PIXEL_ON, PIXEL_OFF

class TestScreenView(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        if not QApplication.instance():
            cls.app = QApplication(sys.argv)
        else:
            cls.app = QApplication.instance()

    def setUp(self):
        self.cpu = Chip8Cpu(Bus())
        self.view = ScreenView()
        self.view.set_cpu(self.cpu)

    def test_build_image_reflects_framebuffer(self):
        self.cpu.framebuffer.draw_sprite(62, 31, [0xC0])
        image = self.view.build_image()
        self.assertEqual((image.width(), image.height()), (64, 32))
        self.assertEqual(image.pixelColor(62, 31), PIXEL_ON)
        self.assertEqual(image.pixelColor(63, 31), PIXEL_ON)
        self.assertEqual(image.pixelColor(0, 0), PIXEL_OFF)

    def test_build_image_without_cpu_is_blank(self):
        image = ScreenView().build_image()
        self.assertEqual(image.pixelColor(10, 10), QColor(0, 0, 0))

    def test_refresh_consumes_clear_request(self):
        """
        画面クリア要求がある場合は空白を表示し、要求をリセットすることを検証します。
        """
        self.cpu.framebuffer.draw_sprite(0, 0, [0x80])
        self.cpu.framebuffer.request_clear()

        self.view.refresh()
        self.assertEqual(self.view.current_image().pixelColor(0, 0), PIXEL_OFF)
        self.assertFalse(self.cpu.needs_clear())

        self.view.refresh()
        self.assertEqual(self.view.current_image().pixelColor(0, 0), PIXEL_ON)

    def test_target_rect_keeps_aspect_ratio(self):
        self.view.resize(640, 480)
        rect = self.view.target_rect()
        self.assertEqual((rect.x(), rect.y(), rect.width(), rect.height()), (0, 80, 640, 320))

        self.view.resize(800, 200)
        rect = self.view.target_rect()
        self.assertEqual((rect.x(), rect.y(), rect.width(), rect.height()), (200, 0, 400, 200))

if __name__ == '__main__':
    unittest.main()
