# tests/transport/test_bus.py
"""
retro_chip8.transport.busモジュールの単体テスト。
"""
import pytest
from retro_chip8.transport.bus import Bus, BusAccessType, MEMORY_SIZE

# @intent:test_suite 4KBメモリイメージのアドレス折り返し、アクセスログ、ログなしアクセスを検証します。

class TestBus:
    @pytest.fixture
    def bus(self):
        return Bus()

    # @intent:test_case_init メモリイメージが4KBで0初期化されていることを検証します。
    def test_memory_is_zeroed(self, bus):
        assert bus.size == MEMORY_SIZE == 0x1000
        assert all(bus.peek(a) == 0 for a in range(MEMORY_SIZE))

    # @intent:test_case_wrap 12bitを超えるアドレスは0x000側に折り返されることを検証します。
    def test_addresses_wrap_to_12_bits(self, bus):
        bus.write(0x1003, 0xBB)
        assert bus.read(0x003) == 0xBB
        assert bus.peek(0xF003) == 0xBB

        log = bus.get_and_clear_activity_log()
        assert [a.address for a in log] == [0x003, 0x003]

    # @intent:test_case_data 8bitを超える値の書き込みがValueErrorになることを検証します。
    def test_write_invalid_data(self, bus):
        with pytest.raises(ValueError, match="Data 256 is not an 8-bit value."):
            bus.write(0x300, 0x100)
        with pytest.raises(ValueError):
            bus.write(0x300, -1)
        assert bus.get_and_clear_activity_log() == []

    # @intent:test_case_activity_log read/writeがログに記録され、取得時にクリアされることを検証します。
    def test_bus_activity_log(self, bus):
        bus.write(0x300, 0x12)
        assert bus.read(0x300) == 0x12

        log = bus.get_and_clear_activity_log()
        assert [(a.address, a.data, a.access_type) for a in log] == [
            (0x300, 0x12, BusAccessType.WRITE),
            (0x300, 0x12, BusAccessType.READ),
        ]
        assert bus.get_and_clear_activity_log() == []

    # @intent:test_case_peek_load peekとloadはログに記録されないことを検証します。
    def test_bus_peek_and_load_are_not_logged(self, bus):
        bus.load(0x200, bytes([0xA2, 0x2A]))
        assert bus.peek(0x200) == 0xA2
        assert bus.peek(0x201) == 0x2A
        assert bus.get_and_clear_activity_log() == []

    # @intent:test_case_load_bounds loadはメモリ終端で折り返さず、はみ出す配置を拒否することを検証します。
    def test_load_rejects_block_past_end(self, bus):
        bus.load(0xFFE, b"\x12\x34")
        assert bus.peek(0xFFF) == 0x34

        with pytest.raises(ValueError, match="does not fit"):
            bus.load(0xFFF, b"\x56\x78")
        with pytest.raises(ValueError, match="does not fit"):
            bus.load(-1, b"\x00")
        assert bus.peek(0x000) == 0x00
        assert bus.peek(0xFFF) == 0x34
