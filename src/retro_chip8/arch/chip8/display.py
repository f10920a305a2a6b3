# src/retro_chip8/arch/chip8/display.py
"""
CHIP-8のモノクロフレームバッファ。

64x32ドットの1bitセルを行優先で保持します。セルを変更するのはスプライト描画(DXYN)の
XORだけで、それ以外のコンポーネントには読み取り専用として公開されます。
画面クリア命令(00E0)はセルを書き換えず、"needs clear" フラグを立てるだけです。
フラグは表示層が描画時に消費（リセット）します。
"""
from typing import List, Sequence

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8

# @intent:responsibility 64x32のピクセルグリッドと画面クリア要求フラグを管理します。
class Framebuffer:
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self._width = width
        self._height = height
        self._cells = bytearray(width * height)
        self._needs_clear = False

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    # @intent:responsibility 指定座標のピクセル値(0 または 1)を返します。
    # @intent:pre-condition 座標はグリッドの範囲内である必要があります。
    def pixel_at(self, x: int, y: int) -> int:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Pixel ({x}, {y}) out of bounds for {self._width}x{self._height} display.")
        return self._cells[y * self._width + x]

    # @intent:responsibility スプライトをXOR描画し、衝突（1→0への変化）が発生したかを返します。
    # @intent:rationale 開始座標は画面サイズで折り返しますが、描画開始後にはみ出した行・列は
    #                  折り返さずにクリップ（スキップ）します。
    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        x0 = x % self._width
        y0 = y % self._height
        collision = False
        for row, bits in enumerate(rows):
            py = y0 + row
            if py >= self._height:
                break
            for col in range(SPRITE_WIDTH):
                px = x0 + col
                if px >= self._width:
                    break
                bit = (bits >> (SPRITE_WIDTH - 1 - col)) & 1
                if not bit:
                    continue
                index = py * self._width + px
                if self._cells[index]:
                    collision = True
                self._cells[index] ^= 1
        return collision

    # @intent:responsibility 画面クリア要求を記録します(00E0)。
    def request_clear(self) -> None:
        self._needs_clear = True

    def needs_clear(self) -> bool:
        return self._needs_clear

    # @intent:responsibility 表示層がクリア要求を処理したことを通知し、フラグをリセットします。
    def clear_acknowledged(self) -> None:
        self._needs_clear = False

    # @intent:responsibility 表示・テスト用に、行ごとのピクセル値のリストを返します。
    def rows(self) -> List[List[int]]:
        w = self._width
        return [list(self._cells[y * w:(y + 1) * w]) for y in range(self._height)]
