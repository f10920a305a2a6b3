# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通定義とユーティリティ。

命令語のフィールド抽出（デコーダ）、命令種別、実行関数が参照する周辺デバイスの束を定義します。
"""
import random
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from retro_chip8.core.snapshot import Operation
from retro_chip8.common.errors import UnknownOpcodeError
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.display import Framebuffer
from retro_chip8.arch.chip8.keyboard import KeyboardLatch
from retro_chip8.arch.chip8.state import ADDRESS_MASK

# @intent:responsibility 16bit命令語と、そのフィールド抽出を提供します。
# @intent:rationale 純粋な値オブジェクトであり、どのような16bitパターンも何らかのフィールドの組にデコードできます。
#                  不正なエンコーディングの検出はディスパッチ側の責務です。
class Instruction(NamedTuple):
    word: int

    @property
    def opcode(self) -> int:
        """上位ニブル（命令ファミリ）。"""
        return (self.word >> 12) & 0xF

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.word & 0xF

    @property
    def nn(self) -> int:
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        return self.word & 0xFFF

# @intent:utility_function バスから16ビットワードをビッグエンディアン形式で読み込みます。
def read_word(bus: Bus, addr: int) -> int:
    """Big-endian 16-bit read."""
    return (bus.read(addr) << 8) | bus.read(addr + 1)


# @intent:responsibility デコード結果の命令種別（タグ）を定義します。実行関数の選択に使用されます。
class InstructionKind(Enum):
    SYS = "SYS"
    CLS = "CLS"
    RET = "RET"
    HALT = "HALT"
    JP = "JP"
    CALL = "CALL"
    SE_VX_NN = "SE_VX_NN"
    SNE_VX_NN = "SNE_VX_NN"
    SE_VX_VY = "SE_VX_VY"
    SNE_VX_VY = "SNE_VX_VY"
    LD_VX_NN = "LD_VX_NN"
    ADD_VX_NN = "ADD_VX_NN"
    LD_VX_VY = "LD_VX_VY"
    OR = "OR"
    AND = "AND"
    XOR = "XOR"
    ADD_VX_VY = "ADD_VX_VY"
    SUB = "SUB"
    SHR = "SHR"
    SUBN = "SUBN"
    SHL = "SHL"
    LD_I = "LD_I"
    JP_V0 = "JP_V0"
    RND = "RND"
    DRW = "DRW"
    SKP = "SKP"
    SKNP = "SKNP"
    LD_VX_DT = "LD_VX_DT"
    LD_VX_K = "LD_VX_K"
    LD_DT_VX = "LD_DT_VX"
    LD_ST_VX = "LD_ST_VX"
    ADD_I_VX = "ADD_I_VX"
    LD_F_VX = "LD_F_VX"
    LD_B_VX = "LD_B_VX"
    LD_MEM_VX = "LD_MEM_VX"
    LD_VX_MEM = "LD_VX_MEM"
    NOP = "NOP"  # 既知ファミリ内の未定義の組み合わせ

# @intent:responsibility 実行関数が参照する、レジスタ以外の周辺デバイスをまとめます。
@dataclass
class Chip8Io:
    framebuffer: Framebuffer
    keyboard: KeyboardLatch
    rng: random.Random

# @intent:utility_function Operationを生成する共通ヘルパーです。
def make_operation(ins: Instruction, kind: InstructionKind, mnemonic: str, *operands: str) -> Operation:
    return Operation(
        opcode_hex=f"{ins.word:04X}",
        mnemonic=mnemonic,
        operands=list(operands),
        kind=kind,
        word=ins.word,
    )

# オペランド表記
def reg(index: int) -> str:
    return f"V{index:X}"

def imm(value: int) -> str:
    return f"#{value:02X}"

def addr(value: int) -> str:
    return f"${value:03X}"

# @intent:utility_function 次の命令をスキップします（PCは既に次の命令を指しているため、さらに2進めます）。
def skip_next(state) -> None:
    state.pc = (state.pc + 2) & ADDRESS_MASK

# @intent:utility_function 実行中の命令にPCを巻き戻します（キー待ち、停止命令用）。
def rewind(state, op: Operation) -> None:
    state.pc = (state.pc - op.length) & ADDRESS_MASK

# @intent:responsibility 既知ファミリ内の未定義の組み合わせをデコードします。
# @intent:rationale 通常はNOPとして扱い、strictモードでは未知オペコードとして報告します。
def decode_unknown(ins: Instruction, address: int, strict: bool) -> Operation:
    if strict:
        raise UnknownOpcodeError(ins.word, address)
    return make_operation(ins, InstructionKind.NOP, "DW", f"#{ins.word:04X}")

# @intent:responsibility 未定義の組み合わせを実行します（何もしません）。
def execute_nop(state, bus: Bus, op: Operation, io: Chip8Io) -> None:
    # Intentional: 未定義の組み合わせはNOP
    pass
