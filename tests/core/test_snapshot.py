# tests/core/test_snapshot.py
"""
retro_chip8.core.snapshotモジュールの単体テスト。
"""
import pytest
from retro_chip8.core.state import CpuState
from retro_chip8.core.snapshot import (
    BusAccessType,
    BusAccess,
    Operation,
    Metadata,
    Snapshot,
    StepStatus,
)

# @intent:test_suite 実行結果を記録する不変スナップショットデータ構造の検証。

class TestStepStatus:
    # @intent:test_case_is_running OKとWAITING_FOR_KEYのみが実行継続可能であることを検証します。
    def test_is_running(self):
        assert StepStatus.OK.is_running
        assert StepStatus.WAITING_FOR_KEY.is_running
        for status in (StepStatus.HALTED, StepStatus.OUT_OF_RANGE, StepStatus.UNKNOWN_OPCODE,
                       StepStatus.STACK_OVERFLOW, StepStatus.STACK_UNDERFLOW):
            assert not status.is_running

class TestOperation:
    """
    Operationデータクラスの単体テスト。
    """
    # @intent:test_case_text オペランド付きの表示文字列を検証します。
    def test_operation_text_with_operands(self):
        op = Operation(opcode_hex="D125", mnemonic="DRW", operands=["V1", "V2", "5"])
        assert op.text() == "DRW V1, V2, 5"

    # @intent:test_case_text オペランドなしの場合はニーモニックのみになることを検証します。
    def test_operation_text_no_operands(self):
        op = Operation(opcode_hex="00E0", mnemonic="CLS")
        assert op.operands == []
        assert op.text() == "CLS"
        assert op.length == 2

    # @intent:test_case_immutability Operationが不変であることを検証します。
    def test_operation_immutability(self):
        op = Operation(opcode_hex="1200", mnemonic="JP")
        with pytest.raises(AttributeError):
            op.mnemonic = "CALL"

class TestMetadata:
    # @intent:test_case_init_no_symbol Metadataのデフォルト値を検証します。
    def test_metadata_defaults(self):
        meta = Metadata(cycle_count=100)
        assert meta.cycle_count == 100
        assert meta.address == 0
        assert meta.symbol_info is None

    # @intent:test_case_immutability Metadataが不変であることを検証します。
    def test_metadata_immutability(self):
        meta = Metadata(cycle_count=10)
        with pytest.raises(AttributeError):
            meta.cycle_count = 20

class TestSnapshot:
    """
    Snapshotデータクラスの単体テスト。
    """
    @pytest.fixture
    def sample_data(self):
        state = CpuState(pc=0x202)
        operation = Operation(opcode_hex="6012", mnemonic="LD", operands=["V0", "#12"])
        metadata = Metadata(cycle_count=1, address=0x200, symbol_info="$200: LD V0, #12")
        return state, operation, metadata

    # @intent:test_case_init Snapshotが正しく初期化され、既定のステータスがOKであることを検証します。
    def test_snapshot_init(self, sample_data):
        state, operation, metadata = sample_data
        snapshot = Snapshot(state=state, operation=operation, metadata=metadata)
        assert snapshot.state == state
        assert snapshot.operation == operation
        assert snapshot.status == StepStatus.OK
        assert snapshot.message == ""
        assert snapshot.bus_activity == []

    # @intent:test_case_immutability Snapshotが不変であることを検証します。
    def test_snapshot_immutability(self, sample_data):
        state, operation, metadata = sample_data
        snapshot = Snapshot(state=state, operation=operation, metadata=metadata)
        with pytest.raises(AttributeError):
            snapshot.state = CpuState(pc=0x300)
        with pytest.raises(AttributeError):
            snapshot.status = StepStatus.HALTED

    # @intent:test_case_default_factory_bus_activity インスタンスごとに独立したリストが生成されることを検証します。
    def test_snapshot_default_factory_bus_activity(self, sample_data):
        state, operation, metadata = sample_data
        snapshot1 = Snapshot(state=state, operation=operation, metadata=metadata)
        snapshot2 = Snapshot(state=state, operation=operation, metadata=metadata)
        assert snapshot1.bus_activity is not snapshot2.bus_activity

        snapshot1.bus_activity.append(BusAccess(address=0x200, data=0x60, access_type=BusAccessType.READ))
        assert len(snapshot2.bus_activity) == 0
