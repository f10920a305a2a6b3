# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。

ヘッダなしの生バイナリ（ビッグエンディアンの16bit命令語の並び）を、
メモリイメージの0x200から配置します。
"""
import logging

from retro_chip8.transport.bus import Bus
from retro_chip8.common.errors import RomLoadError
from retro_chip8.arch.chip8.state import MEMORY_SIZE, PROGRAM_START

logger = logging.getLogger(__name__)

class RomLoader:
    """
    ROMファイルを読み込み、データをバスにロードするローダー。
    ロード後のプログラム終端アドレス（最後に書き込んだアドレスの次）を返します。
    """
    def __init__(self, start_address: int = PROGRAM_START, memory_size: int = MEMORY_SIZE):
        self._start_address = start_address
        self._memory_size = memory_size

    # @intent:responsibility プログラム領域に収まる最大バイト数を返します。
    @property
    def capacity(self) -> int:
        return self._memory_size - self._start_address

    # @intent:responsibility ROMファイルを開いて読み込み、バスにロードします。
    # @intent:post-condition 失敗した場合はRomLoadErrorを発生させ、メモリは一切変更されません。
    def load_rom(self, file_path: str, bus: Bus) -> int:
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise RomLoadError(file_path, e.strerror or str(e)) from e

        end = self.load_bytes(data, bus, source=file_path)
        logger.info("ROM loaded: %s (%d bytes, program end $%03X)", file_path, len(data), end)
        return end

    # @intent:responsibility バイト列を検証し、プログラム開始アドレスからバスにロードします。
    # @intent:rationale 検証を全て終えてから書き込むことで、部分的なロードを防ぎます。
    def load_bytes(self, data: bytes, bus: Bus, source: str = "<bytes>") -> int:
        if len(data) < 2:
            raise RomLoadError(source, f"program too short ({len(data)} bytes)")
        if len(data) > self.capacity:
            raise RomLoadError(source, f"program too large ({len(data)} bytes, limit {self.capacity})")

        if len(data) % 2:
            # 奇数長のプログラムは最後の命令語を0x00で補完する
            logger.warning("%s has odd length %d; padding with a zero byte", source, len(data))
            data = bytes(data) + b"\x00"

        bus.load(self._start_address, data)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Total instructions: %d", len(data) // 2)
        return self._start_address + len(data)
