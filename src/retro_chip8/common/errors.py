# retro_chip8/common/errors.py
"""
エラー分類モジュール。

ROMロード失敗、スタック異常、未知オペコードなど、エンジンが検出する
異常状態を例外クラスとして定義します。例外はエンジン内部で送出され、
Chip8Cpu.step() / Chip8Cpu.load() の境界で結果値に変換されます。
"""


# @intent:responsibility このパッケージが送出する全ての例外の基底クラス。
class Chip8Error(Exception):
    pass


# @intent:responsibility ROMファイルが開けない・サイズが不正な場合に送出されます。
class RomLoadError(Chip8Error):
    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not load ROM '{path}': {reason}")
        self.path = path
        self.reason = reason


# @intent:responsibility サブルーチン呼び出しのネストがスタック容量を超えた場合に送出されます。
class StackOverflowError(Chip8Error):
    def __init__(self, capacity: int):
        super().__init__(f"Call stack overflow (capacity {capacity}).")
        self.capacity = capacity


# @intent:responsibility 対応するCALLのないRETが実行された場合に送出されます。
class StackUnderflowError(Chip8Error):
    def __init__(self):
        super().__init__("Return with an empty call stack.")


# @intent:responsibility デコードできない命令語を検出した場合に送出されます。
# @intent:rationale 診断のため、命令語とそのアドレスを保持します。
class UnknownOpcodeError(Chip8Error):
    def __init__(self, word: int, address: int):
        super().__init__(f"Unknown opcode {word:04X} at ${address:03X}.")
        self.word = word
        self.address = address
