# src/retro_chip8/arch/chip8/keyboard.py
"""
キーボードラッチ。

外部ドライバがキー押下イベントで1つのキーコードをラッチし、
最初に一致した命令(EX9E / EXA1 / FX0A)がそれを消費（クリア）します。
実機のような「押されている間だけ有効」なキー状態ではなく、1回限りのラッチです。
"""
from typing import Optional

from retro_chip8.common.types import Keymap

KEY_COUNT = 16

# @intent:constant ホストキーボードの4x4ブロックとCHIP-8の16進キーパッドの標準的な対応。
#   1 2 3 4      1 2 3 C
#   Q W E R  ->  4 5 6 D
#   A S D F      7 8 9 E
#   Z X C V      A 0 B F
DEFAULT_KEYMAP: Keymap = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}

# @intent:responsibility 最大1つのキーコードを保持し、命令による消費を提供します。
class KeyboardLatch:
    def __init__(self):
        self._key: Optional[int] = None

    # @intent:pre-condition codeは0x0-0xFである必要があります。
    def set_key(self, code: int) -> None:
        if not 0 <= code < KEY_COUNT:
            raise ValueError(f"Key code {code} is not in range 0x0-0xF.")
        self._key = code

    def peek(self) -> Optional[int]:
        return self._key

    def is_empty(self) -> bool:
        return self._key is None

    # @intent:responsibility ラッチされたキーを返し、ラッチをクリアします。
    def consume(self) -> Optional[int]:
        key = self._key
        self._key = None
        return key
