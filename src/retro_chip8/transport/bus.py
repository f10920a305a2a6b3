# retro_chip8/transport/bus.py
"""
Transport Layer (メモリイメージ)

CHIP-8の4KBフラットなメモリイメージを表現します。
全てのアドレスは12bitアドレス空間（0x000-0xFFF）に折り返されます。
命令実行による読み書きはアクセスログに記録され、Snapshotに含まれます。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List

# @intent:constant メモリイメージの大きさと、12bitアドレス空間への折り返しマスク。
MEMORY_SIZE = 0x1000
ADDRESS_MASK = MEMORY_SIZE - 1

# @intent:responsibility バスアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のバスアクセス操作を記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int  # 折り返し後の12bitアドレス
    data: int
    access_type: BusAccessType

# @intent:responsibility CHIP-8のメモリイメージ（フォント、プログラム、スクラッチ領域）を保持します。
# @intent:invariant 全てのセルは8bit値であり、アドレスは常に 0x000-0xFFF に収まります。
class Bus:
    """
    CHIP-8の4KBメモリイメージ。

    - read()/write(): 命令実行用。アドレスを12bitに折り返し、アクセスをログに記録します。
    - peek(): 逆アセンブラやUI用の、ログに残らない読み出し。
    - load(): フォントやROMの配置用の、ログに残らない一括書き込み。
    """
    def __init__(self):
        self._memory = bytearray(MEMORY_SIZE)
        self._bus_activity_log: List[BusAccess] = []

    @property
    def size(self) -> int:
        return MEMORY_SIZE

    def _log_access(self, address: int, data: int, access_type: BusAccessType) -> None:
        self._bus_activity_log.append(BusAccess(address=address, data=data, access_type=access_type))

    # @intent:responsibility 記録されたバスアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    # @intent:responsibility 指定アドレス（12bitに折り返し）から8bitのデータを読み出し、ログに記録します。
    def read(self, address: int) -> int:
        address &= ADDRESS_MASK
        data = self._memory[address]
        self._log_access(address, data, BusAccessType.READ)
        return data

    def peek(self, address: int) -> int:
        return self._memory[address & ADDRESS_MASK]

    # @intent:responsibility 指定アドレス（12bitに折り返し）に8bitのデータを書き込み、ログに記録します。
    # @intent:pre-condition dataは8bit値である必要があります。
    def write(self, address: int, data: int) -> None:
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        address &= ADDRESS_MASK
        self._memory[address] = data
        self._log_access(address, data, BusAccessType.WRITE)

    # @intent:responsibility ログを記録せずにバイト列を配置します（フォント初期化、ROMロード用）。
    # @intent:pre-condition 配置範囲はメモリイメージの終端を越えてはいけません（折り返しません）。
    def load(self, address: int, data: bytes) -> None:
        end = address + len(data)
        if address < 0 or end > MEMORY_SIZE:
            raise ValueError(
                f"Block ${address:03X}-${end:03X} does not fit in the {MEMORY_SIZE}-byte memory image."
            )
        self._memory[address:end] = data
