# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
画面表示、ROMロード、キー入力、実行ループ（QTimer）を束ねる薄いドライバです。
"""
import logging
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QApplication, QLabel, QFileDialog, QMessageBox
from PySide6.QtGui import QAction
from PySide6.QtCore import Qt, QTimer

from retro_chip8.config.models import SystemConfig
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.driver.scheduler import Scheduler
from .screen_view import ScreenView

logger = logging.getLogger(__name__)

# @intent:constant スケジューラを駆動するポーリング間隔（ミリ秒）。
PUMP_INTERVAL_MS = 1

# @intent:responsibility アプリケーションのメインウィンドウを定義し、ドライバループを駆動します。
class MainWindow(QMainWindow):
    def __init__(self, config: Optional[SystemConfig] = None, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("Retro CHIP-8 Tracer")
        self.resize(800, 600)

        self._config = config or SystemConfig()
        self._builder = SystemBuilder()
        self._sound_was_active = False

        self.screen_view = ScreenView(self)
        self.setCentralWidget(self.screen_view)

        self.status_label = QLabel("No ROM loaded", self)
        self.sound_label = QLabel("", self)
        self.statusBar().addWidget(self.status_label, 1)
        self.statusBar().addPermanentWidget(self.sound_label)

        self._setup_backend()
        self._create_menus()

        self._pump = QTimer(self)
        self._pump.setInterval(PUMP_INTERVAL_MS)
        self._pump.timeout.connect(self._on_pump)

    # @intent:responsibility 設定に従ってCPUとスケジューラを生成します。
    def _setup_backend(self) -> None:
        self.cpu, self.bus = self._builder.build_system(self._config)
        self.scheduler = Scheduler(self.cpu, self._config.timing)
        self.screen_view.set_cpu(self.cpu)

    def _create_menus(self) -> None:
        file_menu = self.menuBar().addMenu("File")

        self.open_action = QAction("Open ROM...", self)
        self.open_action.setShortcut("Ctrl+O")
        self.open_action.triggered.connect(self._open_rom_dialog)
        file_menu.addAction(self.open_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.setShortcut("Ctrl+R")
        self.reset_action.triggered.connect(self.reset)
        file_menu.addAction(self.reset_action)

        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

    def _open_rom_dialog(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open ROM", "", "CHIP-8 ROM (*.ch8 *.c8);;All Files (*)")
        if path and not self.load_rom(path):
            QMessageBox.warning(self, "Load Error", self.cpu.last_error)

    # @intent:responsibility 新しいシステムを構築してROMをロードし、実行を開始します。
    # @intent:post-condition ロードに失敗した場合は実行を開始せずFalseを返します。
    def load_rom(self, path: str) -> bool:
        self._pump.stop()
        self._setup_backend()
        if not self.cpu.load(path):
            self.status_label.setText(self.cpu.last_error)
            return False
        self.setWindowTitle(f"Retro CHIP-8 Tracer - {path}")
        self._update_status()
        self._pump.start()
        return True

    # @intent:responsibility ロード済みROMを最初から再実行します。
    def reset(self) -> None:
        self.cpu.reset()
        self.scheduler.restart()
        self.screen_view.refresh()
        self._update_status()

    def _on_pump(self) -> None:
        result = self.scheduler.advance()
        if result.frame_due:
            self.screen_view.refresh()
            self._update_sound()
            self._update_status()

    def _update_sound(self) -> None:
        active = self.cpu.sound_active()
        if active and not self._sound_was_active:
            QApplication.beep()
        self._sound_was_active = active
        self.sound_label.setText("BEEP" if active else "")

    def _update_status(self) -> None:
        state = self.cpu.get_state()
        if not self.scheduler.running:
            text = f"Halted: {self.cpu.last_error}"
        elif self.scheduler.paused:
            text = f"Paused  PC=${state.pc:03X}"
        else:
            text = f"PC=${state.pc:03X}  I=${state.i:03X}  {1.0 / self.scheduler.instruction_interval:.0f} Hz"
        self.status_label.setText(text)

    # @intent:responsibility ホストキーを解釈し、操作キーまたはCHIP-8キーとして処理します。
    # @intent:return キーが処理された場合True。
    def handle_key(self, text: str) -> bool:
        text = text.lower()
        if text == "p":
            self.scheduler.toggle_pause()
        elif text == "=":
            self.scheduler.speed_up()
        elif text == "-":
            self.scheduler.slow_down()
        elif text == "u":
            self.scheduler.reset_speed()
        elif text in self._config.keymap:
            self.cpu.set_key(self._config.keymap[text])
        else:
            return False
        self._update_status()
        return True

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.close()
            return
        if not self.handle_key(event.text()):
            super().keyPressEvent(event)

    def closeEvent(self, event):
        self._pump.stop()
        super().closeEvent(event)
