# retro_chip8/driver/scheduler.py
"""
ドライバ用スケジューラ。

命令クロック、60Hzタイマークロック、60Hz表示クロックの3つの論理クロックを
単一スレッド上で多重化します。コア自体はクロックを持たず、このスケジューラが
single_step() と tick() を固定レートで呼び出します。
"""
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.config.models import TimingConfig

logger = logging.getLogger(__name__)

# @intent:constant 命令クロックの速度調整幅と下限（秒）。
SPEED_STEP = 0.0001
MIN_INSTRUCTION_INTERVAL = 0.0001
# @intent:constant advance() 1回で追いつき実行する命令数の上限。
MAX_CATCH_UP_STEPS = 200

# @intent:responsibility 一定間隔で発火する論理クロックです。
# @intent:invariant 発火時刻は interval 刻みの格子上にあり、呼び出し間隔によって実効レートが変わりません。
class ClockDivider:
    def __init__(self, interval: float):
        self.interval = interval
        self._last: Optional[float] = None

    # @intent:responsibility 次の呼び出しで現在時刻に合わせ直します（一時停止からの再開時など）。
    def resync(self) -> None:
        self._last = None

    # @intent:responsibility now までに期限を迎えたティック数（最大 limit）を返し、位相を interval 単位で進めます。
    # @intent:post-condition limit を超える遅れは破棄し、now に再同期します。
    def due_ticks(self, now: float, limit: int = 1) -> int:
        if self._last is None:
            self._last = now
            return 1
        ticks = 0
        while ticks < limit and now - self._last >= self.interval:
            self._last += self.interval
            ticks += 1
        if now - self._last >= self.interval:
            self._last = now
        return ticks

    def fire(self, now: float) -> bool:
        return self.due_ticks(now) > 0

# @intent:responsibility advance() 1回分の結果を表します。
@dataclass(frozen=True)
class FrameResult:
    frame_due: bool   # 表示層が画面を更新すべきタイミング
    running: bool     # CPUがまだ実行可能か（停止していないか）

# @intent:responsibility 3つの論理クロックに従ってCPUを駆動します。
class Scheduler:
    """
    advance() を高頻度（例: 1ms毎）に呼び出すと、各クロックの発火に応じて
    タイマーのティックと命令の実行を行い、表示の更新タイミングを返します。
    命令クロックが呼び出し間隔より短い場合は、1回の呼び出しで複数の命令を実行します。
    """
    def __init__(self, cpu: Chip8Cpu, timing: Optional[TimingConfig] = None,
                 clock: Callable[[], float] = time.perf_counter):
        self._cpu = cpu
        self._timing = timing or TimingConfig()
        self._clock = clock
        self._default_interval = 1.0 / self._timing.instruction_rate
        self._instruction_clock = ClockDivider(self._default_interval)
        self._timer_clock = ClockDivider(1.0 / self._timing.timer_rate)
        self._frame_clock = ClockDivider(1.0 / self._timing.frame_rate)
        self._paused = False
        self._running = True

    @property
    def cpu(self) -> Chip8Cpu:
        return self._cpu

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def running(self) -> bool:
        return self._running

    @property
    def instruction_interval(self) -> float:
        return self._instruction_clock.interval

    def toggle_pause(self) -> bool:
        self._paused = not self._paused
        if not self._paused:
            self._resync()
        logger.info("Emulation %s", "paused" if self._paused else "resumed")
        return self._paused

    # @intent:responsibility 命令クロックを速くします（間隔を短縮、下限あり）。
    def speed_up(self) -> None:
        self._instruction_clock.interval = max(
            MIN_INSTRUCTION_INTERVAL, self._instruction_clock.interval - SPEED_STEP)

    def slow_down(self) -> None:
        self._instruction_clock.interval += SPEED_STEP

    def reset_speed(self) -> None:
        self._instruction_clock.interval = self._default_interval

    # @intent:responsibility 新しいROMのロードやリセット後に、停止状態を解除して再び実行可能にします。
    def restart(self) -> None:
        self._running = True
        self._resync()

    # 停止していた間の時間を命令とタイマーに持ち越さない
    def _resync(self) -> None:
        self._instruction_clock.resync()
        self._timer_clock.resync()

    # @intent:responsibility 現在時刻に基づき、発火したクロックの処理を行います。
    # @intent:post-condition 期限を迎えた命令ティックの数だけ命令を実行し、停止した時点で打ち切ります。
    # @intent:rationale 一時停止中および停止後も表示クロックは動作し続けます。
    def advance(self, now: Optional[float] = None) -> FrameResult:
        if now is None:
            now = self._clock()

        frame_due = self._frame_clock.fire(now)

        if not self._paused and self._running:
            if self._timer_clock.fire(now):
                self._cpu.tick()

            for _ in range(self._instruction_clock.due_ticks(now, MAX_CATCH_UP_STEPS)):
                if not self._cpu.single_step():
                    self._running = False
                    logger.info("Emulator terminated execution: %s", self._cpu.last_error)
                    break

        return FrameResult(frame_due=frame_due, running=self._running)
