# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from typing import Optional

from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Operation, StepStatus
from retro_chip8.common.errors import UnknownOpcodeError
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Instruction, InstructionKind, Chip8Io
from .maps import DECODE_MAP, EXECUTE_MAP

# @intent:responsibility 命令語をCHIP-8の命令としてデコードします。
# @intent:post-condition 上位ニブルに対応するファミリがない場合、UnknownOpcodeErrorを発生させます。
def decode_instruction(word: int, address: int, strict: bool = False) -> Operation:
    """
    命令語をデコードし、命令種別を持つOperationオブジェクトを返します。
    `strict` が真の場合、既知ファミリ内の未定義の組み合わせも未知オペコードとして扱います。
    """
    ins = Instruction(word & 0xFFFF)
    decoder = DECODE_MAP.get(ins.opcode)
    if decoder is None:
        raise UnknownOpcodeError(ins.word, address)
    return decoder(ins, address, strict)

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:return 通常完了以外の結果（停止、キー待ち）を示すStepStatus。通常完了ならNone。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, io: Chip8Io) -> Optional[StepStatus]:
    executor = EXECUTE_MAP.get(operation.kind)
    if executor:
        return executor(state, bus, operation, io)
    return None
