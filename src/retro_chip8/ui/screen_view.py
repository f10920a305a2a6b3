# src/retro_chip8/ui/screen_view.py
"""
フレームバッファを表示するウィジェット。
64x32のモノクロ画面を、2:1のアスペクト比を保ったままウィジェットいっぱいに拡大表示します。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QImage, QPainter, QColor
from PySide6.QtCore import Qt, QRect

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.display import DISPLAY_WIDTH, DISPLAY_HEIGHT

PIXEL_ON = QColor(255, 255, 255)
PIXEL_OFF = QColor(0, 0, 0)

# @intent:responsibility CPUのフレームバッファを画像化し、拡大描画します。
class ScreenView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setMinimumSize(DISPLAY_WIDTH * 4, DISPLAY_HEIGHT * 4)
        self.setFocusPolicy(Qt.NoFocus)
        self._cpu: Optional[Chip8Cpu] = None
        self._image = self._blank_image()

    def set_cpu(self, cpu: Chip8Cpu) -> None:
        self._cpu = cpu
        self._image = self._blank_image()
        self.update()

    def _blank_image(self) -> QImage:
        image = QImage(DISPLAY_WIDTH, DISPLAY_HEIGHT, QImage.Format_RGB32)
        image.fill(PIXEL_OFF)
        return image

    # @intent:responsibility 現在のフレームバッファから64x32のQImageを生成します。
    def build_image(self) -> QImage:
        image = self._blank_image()
        if self._cpu is None:
            return image
        on = PIXEL_ON.rgb()
        for y, row in enumerate(self._cpu.framebuffer.rows()):
            for x, cell in enumerate(row):
                if cell:
                    image.setPixel(x, y, on)
        return image

    # @intent:responsibility 表示クロックごとに呼ばれ、表示画像を更新します。
    # @intent:rationale 画面クリア要求が立っている場合は空白を表示し、要求を消費します。
    def refresh(self) -> None:
        if self._cpu is not None and self._cpu.needs_clear():
            self._image = self._blank_image()
        else:
            self._image = self.build_image()
        if self._cpu is not None:
            self._cpu.clear_acknowledged()
        self.update()

    def current_image(self) -> QImage:
        return self._image

    # @intent:responsibility アスペクト比を保った描画先の矩形を計算します。
    def target_rect(self) -> QRect:
        width = self.width()
        height = width * DISPLAY_HEIGHT // DISPLAY_WIDTH
        if height > self.height():
            height = self.height()
            width = height * DISPLAY_WIDTH // DISPLAY_HEIGHT
        return QRect((self.width() - width) // 2, (self.height() - height) // 2, width, height)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), PIXEL_OFF)
        painter.drawImage(self.target_rect(), self._image)
        painter.end()
