# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ、停止）の実装。

実行関数が呼ばれる時点で、PCは既に次の命令（現在の命令 + 2）を指しています。
"""
from typing import Optional

from retro_chip8.core.snapshot import Operation, StepStatus
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, ADDRESS_MASK
from .base import (
    Instruction, InstructionKind, Chip8Io, make_operation, decode_unknown,
    reg, imm, addr, skip_next, rewind,
)

# --- 0NNN family ---
# @intent:responsibility 0x0ファミリ（CLS, RET, HALT, SYS）をデコードします。
def decode_0(ins: Instruction, address: int, strict: bool) -> Operation:
    if ins.word == 0x00E0:
        return make_operation(ins, InstructionKind.CLS, "CLS")
    if ins.word == 0x00EE:
        return make_operation(ins, InstructionKind.RET, "RET")
    if ins.word == 0x0000:
        return make_operation(ins, InstructionKind.HALT, "HALT")
    return make_operation(ins, InstructionKind.SYS, "SYS", addr(ins.nnn))

# @intent:responsibility SYS命令（機械語ルーチン呼び出し）を実行します。互換性のためNOPとして扱います。
def execute_sys(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    # Intentional: legacy machine-code call
    pass

# @intent:responsibility RET命令を実行し、スタックから戻りアドレスをポップしてPCに設定します。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    state.pc = state.stack.pop()

# @intent:responsibility 0x0000を明示的な停止として扱います。PCは停止命令を指したままになります。
def execute_halt(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> Optional[StepStatus]:
    rewind(state, op)
    return StepStatus.HALTED

# --- 1NNN / 2NNN / BNNN ---
def decode_1(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.JP, "JP", addr(ins.nnn))

# @intent:responsibility JP命令を実行し、PCを絶対アドレスに設定します。
def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    state.pc = Instruction(op.word).nnn

def decode_2(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.CALL, "CALL", addr(ins.nnn))

# @intent:responsibility CALL命令を実行し、戻りアドレス（次の命令）をプッシュしてからジャンプします。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    # state.pc はCPU.stepで既に次の命令を指している
    state.stack.push(state.pc)
    state.pc = Instruction(op.word).nnn

def decode_b(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.JP_V0, "JP", "V0", addr(ins.nnn))

# @intent:responsibility JP V0, addr 命令を実行します。ジャンプ先は12bitアドレス空間に収めます。
def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    state.pc = (state.v[0] + Instruction(op.word).nnn) & ADDRESS_MASK

# --- 3XNN / 4XNN ---
def decode_3(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.SE_VX_NN, "SE", reg(ins.x), imm(ins.nn))

def execute_se_vx_nn(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    if state.v[ins.x] == ins.nn:
        skip_next(state)

def decode_4(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.SNE_VX_NN, "SNE", reg(ins.x), imm(ins.nn))

def execute_sne_vx_nn(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    if state.v[ins.x] != ins.nn:
        skip_next(state)

# --- 5XY0 / 9XY0 ---
# 下位ニブルは参照しません（5XYN, 9XYN も同じ比較として扱います）。
def decode_5(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.SE_VX_VY, "SE", reg(ins.x), reg(ins.y))

def execute_se_vx_vy(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    if state.v[ins.x] == state.v[ins.y]:
        skip_next(state)

def decode_9(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.SNE_VX_VY, "SNE", reg(ins.x), reg(ins.y))

def execute_sne_vx_vy(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    if state.v[ins.x] != state.v[ins.y]:
        skip_next(state)

# --- EX9E / EXA1 ---
# @intent:responsibility 0xEファミリ（キー入力によるスキップ）をデコードします。
def decode_e(ins: Instruction, address: int, strict: bool) -> Operation:
    if ins.nn == 0x9E:
        return make_operation(ins, InstructionKind.SKP, "SKP", reg(ins.x))
    if ins.nn == 0xA1:
        return make_operation(ins, InstructionKind.SKNP, "SKNP", reg(ins.x))
    return decode_unknown(ins, address, strict)

# @intent:responsibility ラッチされたキーがVXと一致する場合、ラッチを消費して次の命令をスキップします。
def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    key = io.keyboard.peek()
    if key is not None and key == state.v[Instruction(op.word).x]:
        io.keyboard.consume()
        skip_next(state)

# @intent:responsibility ラッチされたキーが存在し、かつVXと異なる場合、ラッチを消費して次の命令をスキップします。
def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    key = io.keyboard.peek()
    if key is not None and key != state.v[Instruction(op.word).x]:
        io.keyboard.consume()
        skip_next(state)
