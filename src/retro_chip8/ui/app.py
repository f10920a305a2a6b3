# src/retro_chip8/ui/app.py
"""
アプリケーションのエントリポイント。
設定を読み込み、メインウィンドウを起動してROMの実行を開始します。
"""
import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import SystemConfig
from .main_window import MainWindow

logger = logging.getLogger(__name__)

def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 virtual machine")
    parser.add_argument("rom", nargs="?", help="raw CHIP-8 ROM image to run")
    parser.add_argument("--config", help="YAML machine configuration file")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv=None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = ConfigLoader().load_from_file(args.config) if args.config else SystemConfig()

    app = QApplication.instance() or QApplication(sys.argv[:1])
    main_win = MainWindow(config)
    if args.rom and not main_win.load_rom(args.rom):
        logger.error("Could not open ROM: %s", args.rom)
        return 1
    main_win.show()
    return app.exec()

if __name__ == '__main__':
    sys.exit(main())
