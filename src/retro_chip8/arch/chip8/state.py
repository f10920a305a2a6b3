# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from retro_chip8.core.state import CpuState
from retro_chip8.common.errors import StackOverflowError, StackUnderflowError
from retro_chip8.arch.chip8.timers import TimerPair
# メモリ構成はメモリイメージ側の定義をそのまま公開する
from retro_chip8.transport.bus import MEMORY_SIZE, ADDRESS_MASK

# @intent:constant CHIP-8のプログラム配置とレジスタ構成を定義します。
PROGRAM_START = 0x200
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF       # VF: キャリー/ボロー/衝突/シフトアウトフラグ
STACK_CAPACITY = 256

# @intent:responsibility サブルーチンの戻りアドレスを保持する容量制限付きスタックです。
# @intent:invariant 深さは容量を超えません。空のスタックからのポップはエラーです。
class CallStack:
    """
    CALL/RET用の戻りアドレススタック。
    オーバーフロー、アンダーフローはそれぞれ専用の例外として報告されます。
    """
    def __init__(self, capacity: int = STACK_CAPACITY):
        if capacity <= 0:
            raise ValueError("Stack capacity must be a positive integer.")
        self._capacity = capacity
        self._entries: List[int] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, address: int) -> None:
        if len(self._entries) >= self._capacity:
            raise StackOverflowError(self._capacity)
        self._entries.append(address)

    def pop(self) -> int:
        if not self._entries:
            raise StackUnderflowError()
        return self._entries.pop()

    # @intent:responsibility UI・デバッガ向けに、底から順に並べたスタックの内容を返します。
    def entries(self) -> List[int]:
        return list(self._entries)

    def copy(self) -> "CallStack":
        clone = CallStack(self._capacity)
        clone._entries = list(self._entries)
        return clone

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallStack):
            return NotImplemented
        return self._capacity == other._capacity and self._entries == other._entries

    def __repr__(self) -> str:
        return f"CallStack(capacity={self._capacity}, entries={[f'${a:03X}' for a in self._entries]})"

# @intent:responsibility CHIP-8 CPUの全てのレジスタ（V0-VF, I, PC）、コールスタック、タイマーを保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    PCは0x200から開始し、常に2バイト単位で進みます。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)  # V0..VF
    i: int = 0x000  # Index Register (12bit)
    stack: CallStack = field(default_factory=CallStack)
    timers: TimerPair = field(default_factory=TimerPair)

    # @intent:accessor スタックポインタとして、現在のスタックの深さを返します。
    @property
    def sp(self) -> int:
        return len(self.stack)

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    # @intent:responsibility ミュータブルなフィールドも含めた独立したコピーを返します。
    def copy(self) -> "Chip8CpuState":
        return Chip8CpuState(
            pc=self.pc,
            v=list(self.v),
            i=self.i,
            stack=self.stack.copy(),
            timers=TimerPair(self.timers.delay, self.timers.sound),
        )
