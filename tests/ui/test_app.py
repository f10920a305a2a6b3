import os
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from retro_chip8.ui.app import main, _parse_args

class TestApp(unittest.TestCase):
    def test_parse_args(self):
        args = _parse_args(["game.ch8", "--config", "chip8.yaml", "--log-level", "DEBUG"])
        self.assertEqual(args.rom, "game.ch8")
        self.assertEqual(args.config, "chip8.yaml")
        self.assertEqual(args.log_level, "DEBUG")

    def test_parse_args_defaults(self):
        args = _parse_args([])
        self.assertIsNone(args.rom)
        self.assertIsNone(args.config)
        self.assertEqual(args.log_level, "WARNING")

    def test_missing_rom_exits_with_error(self):
        """
        ROMを開けない場合は実行を開始せず、終了コード1を返すことを検証します。
        """
        self.assertEqual(main(["/nonexistent/rom.ch8"]), 1)

if __name__ == '__main__':
    unittest.main()
