# src/retro_chip8/arch/chip8/timers.py
"""
ディレイタイマーとサウンドタイマー。
"""
from dataclasses import dataclass

# @intent:responsibility 60Hzで減算される2つの8bitカウントダウンタイマーを保持します。
# @intent:invariant 各カウンタは命令で設定される場合を除き単調非増加であり、0で止まります。
@dataclass
class TimerPair:
    delay: int = 0
    sound: int = 0

    # @intent:responsibility 両タイマーを独立に1減算します（0の場合は何もしません）。
    def tick(self) -> None:
        if self.delay > 0:
            self.delay -= 1
        if self.sound > 0:
            self.sound -= 1

    # @intent:responsibility サウンドタイマーが動作中（非ゼロ）かを返します。
    def sound_active(self) -> bool:
        return self.sound > 0
