# retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令サイクルの実行結果を記録した不変のデータ構造を定義します。
ドライバ・UIへの情報提供と、デバッグ時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccessType, BusAccess


# @intent:responsibility 1ステップの実行結果を区別して表現します。
# @intent:rationale 停止条件を例外や戻り値の真偽だけでなく、明示的な値としてドライバに提示するため。
class StepStatus(Enum):
    OK = "OK"
    WAITING_FOR_KEY = "WAITING_FOR_KEY"  # FX0A: キー入力待ち（PCは進まない）
    HALTED = "HALTED"                    # 0x0000 による明示的な停止
    OUT_OF_RANGE = "OUT_OF_RANGE"        # PCがプログラム範囲外
    UNKNOWN_OPCODE = "UNKNOWN_OPCODE"
    STACK_OVERFLOW = "STACK_OVERFLOW"
    STACK_UNDERFLOW = "STACK_UNDERFLOW"

    # @intent:responsibility このステータスの後もドライバが実行を継続できるかを返します。
    @property
    def is_running(self) -> bool:
        return self in (StepStatus.OK, StepStatus.WAITING_FOR_KEY)


# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（HEX、ニーモニック、オペランド、命令種別）を記録するデータクラス。
    """
    opcode_hex: str # 例: "D125"
    mnemonic: str # 例: "DRW"
    operands: List[str] = field(default_factory=list) # 例: ["V1", "V2", "5"]
    kind: Any = None # アーキテクチャ固有の命令種別（Enum）。実行関数の選択に使用
    word: int = 0 # 生の命令語
    cycle_count: int = 1
    length: int = 2 # 命令のバイト長

    # @intent:responsibility "MNEMONIC op1, op2" 形式の表示文字列を返します。
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic


# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計命令数、命令アドレス、表示文字列）を記録するデータクラス。
    """
    cycle_count: int
    address: int = 0
    symbol_info: Optional[str] = None # 例: "$200: CLS"


# @intent:responsibility ある一時点におけるCPUとバスの状態、および実行結果を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    1ステップ実行後のCPU状態、実行した命令、結果ステータスを記録した不変のデータ構造。
    operationは、命令をフェッチできなかった場合（範囲外、未知オペコード）にNoneとなります。
    """
    state: CpuState
    operation: Optional[Operation]
    metadata: Metadata
    status: StepStatus = StepStatus.OK
    message: str = ""
    bus_activity: List[BusAccess] = field(default_factory=list)
