# retro_chip8/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Tuple

from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata, StepStatus
from retro_chip8.core.state import CpuState
from retro_chip8.common.types import RegisterLayoutInfo

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    Busとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:pre-condition `bus`は有効なBusオブジェクトである必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0
        # @intent:rationale Stateオブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からのアクセスは`get_state()`メソッドを介して行う。

    # @intent:responsibility 初期状態のCpuStateオブジェクトを生成します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        具体的なCPUアーキテクチャはこのメソッドを実装し、
        そのアーキテクチャに特化したCpuStateのサブクラスを返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        """
        現在のCPUの状態（レジスタ値など）を返します。
        """
        return self._state

    # @intent:responsibility 現在のPCから命令語をフェッチします。PCは更新しません。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    # @intent:responsibility フェッチした命令語を解析し、Operationオブジェクトに変換します。
    @abstractmethod
    def _decode(self, word: int) -> Operation:
        pass

    # @intent:responsibility デコードされた命令を実行し、CPUの状態を更新します。
    # @intent:return 通常完了以外の結果（停止、キー待ちなど）を示すStepStatus。通常完了ならNone。
    @abstractmethod
    def _execute(self, operation: Operation) -> Optional[StepStatus]:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→停止判定→フェッチ→デコード→PC更新→実行→Snapshot生成）を定義します。
    #                  アーキテクチャ固有の振る舞い（範囲外フェッチなど）はフックメソッドで対応します。
    def step(self) -> Snapshot:
        # 1. 前処理: 前サイクルまでの残存ログを破棄
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        # 2. 停止判定 (Hook)
        halt_snapshot = self._handle_halt(initial_pc)
        if halt_snapshot:
            return halt_snapshot

        # 3. フェッチ
        word = self._fetch()

        # 4. デコード
        operation = self._decode(word)

        # 5. PC更新 (Hook)
        # 実行前にPCを命令長分進める。分岐命令は実行時にPCを上書きする
        self._update_pc(operation)

        # 6. 実行
        status = self._execute(operation) or StepStatus.OK

        # 7. 後処理 & Snapshot生成
        return self._create_snapshot(initial_pc, operation, status)

    # @intent:return 実行できない状態であればその状態のSnapshot、そうでなければNone。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        """
        停止状態の場合の処理。デフォルトは何もしない（Noneを返す）。
        """
        return None

    # @intent:responsibility 命令実行前にPCを更新します。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # @intent:responsibility スナップショットを生成する共通ロジックです。
    def _create_snapshot(self, initial_pc: int, operation: Optional[Operation],
                         status: StepStatus, message: str = "") -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()

        if operation is not None and status == StepStatus.OK:
            self._cycle_count += operation.cycle_count

        symbol_info = f"${initial_pc:03X}: "
        symbol_info += operation.text() if operation is not None else "???"

        return Snapshot(
            state=self._copy_state(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, address=initial_pc, symbol_info=symbol_info),
            status=status,
            message=message,
            bus_activity=bus_activity
        )

    # @intent:responsibility Snapshotに格納する状態のコピーを生成します。
    # @intent:rationale Snapshotは不変であるべきため、以降の実行で変化しない独立したコピーを渡します。
    @abstractmethod
    def _copy_state(self) -> CpuState:
        pass

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        UIやデバッガがCPUの内部構造を知らなくても値を参照できるようにするために使用される。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """
        レジスタをUI上でどのように配置・グループ化すべきかの定義を返す。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, mnemonic) のタプルリストを返す。
        """
        pass
