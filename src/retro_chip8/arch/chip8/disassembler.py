# src/retro_chip8/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ言語（ニーモニック）に変換します。
Instruction Layerのデコードロジックを再利用しますが、バスアクセスログを汚さないように
peek（ログなし読み込み）を使用します。
"""
from typing import List, Tuple

from retro_chip8.transport.bus import Bus
from retro_chip8.common.errors import UnknownOpcodeError
from retro_chip8.arch.chip8.state import MEMORY_SIZE
from retro_chip8.arch.chip8.instructions import decode_instruction

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_word, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        # メモリ境界チェック（命令語は2バイト）
        if current_addr + 1 >= MEMORY_SIZE:
            break

        word = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        try:
            mnemonic_str = decode_instruction(word, current_addr).text()
        except UnknownOpcodeError:
            mnemonic_str = "???"

        result.append((current_addr, f"{word:04X}", mnemonic_str))
        current_addr += 2

    return result
