# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。

フェッチ・デコード・実行のステートマシンと、外部ドライバに公開する操作
（ROMロード、1ステップ実行、タイマー、ピクセル参照、キー入力）を提供します。
"""
import logging
import random
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from retro_chip8.core.snapshot import Operation, Snapshot, StepStatus
from retro_chip8.common.types import RegisterLayoutInfo, RegisterInfo
from retro_chip8.common.errors import (
    Chip8Error, RomLoadError, StackOverflowError, StackUnderflowError, UnknownOpcodeError,
)
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.transport.bus import Bus
from retro_chip8.loader.loader import RomLoader
from retro_chip8.arch.chip8.state import (
    Chip8CpuState, CallStack, ADDRESS_MASK, PROGRAM_START, REGISTER_COUNT, STACK_CAPACITY,
)
from retro_chip8.arch.chip8.font import FONT
from retro_chip8.arch.chip8.display import Framebuffer
from retro_chip8.arch.chip8.keyboard import KeyboardLatch
from retro_chip8.arch.chip8.instructions import decode_instruction, execute_instruction, Chip8Io
from retro_chip8.arch.chip8.instructions.base import read_word
from retro_chip8.arch.chip8 import disassembler

logger = logging.getLogger(__name__)

# @intent:map エンジン内部の例外から、ドライバに返す結果ステータスへの対応表。
_ERROR_STATUS = {
    StackOverflowError: StepStatus.STACK_OVERFLOW,
    StackUnderflowError: StepStatus.STACK_UNDERFLOW,
    UnknownOpcodeError: StepStatus.UNKNOWN_OPCODE,
}

# @intent:utility_function 例外に対応するStepStatusを返します。派生クラスは基底クラスの対応に従います。
def _status_for(error: Chip8Error) -> StepStatus:
    return next(status for error_type, status in _ERROR_STATUS.items() if isinstance(error, error_type))

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。
    メモリイメージ（Bus）、レジスタ、コールスタック、タイマー、フレームバッファ、
    キーボードラッチを排他的に所有し、step()/single_step()で1命令ずつ実行します。
    """
    def __init__(self, bus: Bus, stack_capacity: int = STACK_CAPACITY,
                 seed: Optional[int] = None, strict_decoding: bool = False):
        self._stack_capacity = stack_capacity
        self._strict_decoding = strict_decoding
        self._rng = random.Random(seed)
        self._program_end = PROGRAM_START
        self._current_operation: Optional[Operation] = None
        self._halt_reason: Optional[StepStatus] = None
        self._last_error = ""
        self._io = Chip8Io(Framebuffer(), KeyboardLatch(), self._rng)
        super().__init__(bus)
        self._load_font()

    # @intent:responsibility フォントグリフをメモリの先頭(0x000-0x04F)に書き込みます。
    def _load_font(self) -> None:
        self._bus.load(0x000, bytes(FONT))

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState(stack=CallStack(self._stack_capacity))

    # @intent:responsibility レジスタ、スタック、タイマー、画面、キーラッチを初期状態に戻します。
    # @intent:rationale メモリイメージとプログラム終端は保持するため、ロード済みのROMを最初から再実行できます。
    def reset(self) -> None:
        super().reset()
        self._io = Chip8Io(Framebuffer(), KeyboardLatch(), self._rng)
        self._halt_reason = None
        self._last_error = ""

    # --- ROM Loader ---
    # @intent:responsibility ROMファイルを0x200からロードし、プログラム終端を記録します。
    # @intent:return 成功した場合True。ファイルが開けない・サイズが不正な場合はFalse（メモリも状態も変更されません）。
    # @intent:post-condition 成功した場合は reset() 済みで、新しいプログラムを0x200から実行できます。
    def load(self, path: str) -> bool:
        try:
            self._program_end = RomLoader().load_rom(path, self._bus)
        except RomLoadError as e:
            logger.error("%s", e)
            self._last_error = str(e)
            return False
        self.reset()
        return True

    # @intent:responsibility メモリ上のバイト列をROMとしてロードします（テスト、組み込み用）。
    def load_bytes(self, data: bytes) -> bool:
        try:
            self._program_end = RomLoader().load_bytes(data, self._bus)
        except RomLoadError as e:
            logger.error("%s", e)
            self._last_error = str(e)
            return False
        self.reset()
        return True

    @property
    def program_end(self) -> int:
        return self._program_end

    # --- Execution Engine ---
    # @intent:responsibility PCがプログラム範囲 [0x200, program_end) の外にある場合、状態を変更せずに停止します。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        if PROGRAM_START <= current_pc < self._program_end:
            return None
        message = (f"Tried to access out-of-range instruction at ${current_pc:03X} "
                   f"(program ${PROGRAM_START:03X}-${self._program_end:03X})")
        return self._create_snapshot(current_pc, None, StepStatus.OUT_OF_RANGE, message)

    def _fetch(self) -> int:
        return read_word(self._bus, self._state.pc)

    def _decode(self, word: int) -> Operation:
        operation = decode_instruction(word, self._state.pc, self._strict_decoding)
        self._current_operation = operation
        return operation

    # CHIP-8のPCは12bitアドレス空間内で2バイト単位に進む
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & ADDRESS_MASK

    def _execute(self, operation: Operation) -> Optional[StepStatus]:
        return execute_instruction(operation, self._state, self._bus, self._io)

    # @intent:responsibility 1命令サイクルを実行し、その結果のスナップショットを返します。
    # @intent:rationale スタック異常や未知オペコードは例外として検出し、ここで結果値（StepStatus）に変換します。
    #                  失敗したステップではPCを命令の先頭に戻し、ドライバが状態を確認・回復できるようにします。
    def step(self) -> Snapshot:
        initial_pc = self._state.pc
        self._current_operation = None
        try:
            snapshot = super().step()
        except tuple(_ERROR_STATUS) as e:
            self._state.pc = initial_pc
            status = _status_for(e)
            snapshot = self._create_snapshot(initial_pc, self._current_operation, status, str(e))

        if snapshot.status == StepStatus.HALTED:
            snapshot = replace(snapshot, message=f"Halt instruction at ${initial_pc:03X}")

        if not snapshot.status.is_running:
            logger.warning("Emulator terminated execution: %s (%s)", snapshot.status.value, snapshot.message)
            self._halt_reason = snapshot.status
            self._last_error = snapshot.message
        elif logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s [%s]", snapshot.metadata.symbol_info, snapshot.status.value)
        return snapshot

    # @intent:responsibility 1命令を実行し、実行を継続できるかを真偽値で返します。
    # @intent:return キー待ちを含め継続可能ならTrue、停止条件（範囲外、停止命令、エラー）ならFalse。
    def single_step(self) -> bool:
        return self.step().status.is_running

    # @intent:responsibility 直近の停止理由を返します。停止していなければNone。
    @property
    def halt_reason(self) -> Optional[StepStatus]:
        return self._halt_reason

    @property
    def last_error(self) -> str:
        return self._last_error

    def _copy_state(self) -> Chip8CpuState:
        return self._state.copy()

    # --- Timers ---
    # @intent:responsibility 60Hzのティックでディレイ/サウンドタイマーを減算します。
    def tick(self) -> None:
        self._state.timers.tick()

    def sound_active(self) -> bool:
        return self._state.timers.sound_active()

    # --- Framebuffer ---
    def pixel_at(self, x: int, y: int) -> int:
        return self._io.framebuffer.pixel_at(x, y)

    def needs_clear(self) -> bool:
        return self._io.framebuffer.needs_clear()

    def clear_acknowledged(self) -> None:
        self._io.framebuffer.clear_acknowledged()

    @property
    def framebuffer(self) -> Framebuffer:
        return self._io.framebuffer

    # --- Keyboard Latch ---
    # @intent:responsibility 外部ドライバからのキー押下（0x0-0xF）をラッチします。
    def set_key(self, code: int) -> None:
        self._io.keyboard.set_key(code)

    @property
    def keyboard(self) -> KeyboardLatch:
        return self._io.keyboard

    # --- UI / Introspection API ---
    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{n:X}": s.v[n] for n in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.timers.delay, "ST": s.timers.sound
        })
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{n:X}", 8) for n in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
