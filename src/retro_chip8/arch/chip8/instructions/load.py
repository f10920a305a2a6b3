# src/retro_chip8/arch/chip8/instructions/load.py
"""
転送命令（レジスタ、インデックス、タイマー、メモリ、キー入力待ち）の実装。

I + offset のアドレスはバス側で12bitアドレス空間に折り返されます。
"""
from typing import Optional

from retro_chip8.core.snapshot import Operation, StepStatus
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, ADDRESS_MASK
from retro_chip8.arch.chip8.font import FONT_GLYPH_SIZE
from .base import (
    Instruction, InstructionKind, Chip8Io, make_operation, decode_unknown, reg, imm, addr, rewind,
)

# --- 6XNN ---
def decode_6(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.LD_VX_NN, "LD", reg(ins.x), imm(ins.nn))

def execute_ld_vx_nn(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    state.v[ins.x] = ins.nn

# --- ANNN ---
def decode_a(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.LD_I, "LD", "I", addr(ins.nnn))

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    state.i = Instruction(op.word).nnn

# --- FXNN ---
# @intent:map FXNNファミリの下位バイトから (命令種別, ニーモニック, オペランド書式) への対応表。
_F_OPS = {
    0x07: (InstructionKind.LD_VX_DT, ("{x}", "DT")),
    0x0A: (InstructionKind.LD_VX_K, ("{x}", "K")),
    0x15: (InstructionKind.LD_DT_VX, ("DT", "{x}")),
    0x18: (InstructionKind.LD_ST_VX, ("ST", "{x}")),
    0x1E: (InstructionKind.ADD_I_VX, ("I", "{x}")),
    0x29: (InstructionKind.LD_F_VX, ("F", "{x}")),
    0x33: (InstructionKind.LD_B_VX, ("B", "{x}")),
    0x55: (InstructionKind.LD_MEM_VX, ("[I]", "{x}")),
    0x65: (InstructionKind.LD_VX_MEM, ("{x}", "[I]")),
}

# @intent:responsibility 0xFファミリを下位バイトでディスパッチしてデコードします。
def decode_f(ins: Instruction, address: int, strict: bool) -> Operation:
    entry = _F_OPS.get(ins.nn)
    if entry is None:
        return decode_unknown(ins, address, strict)
    kind, formats = entry
    mnemonic = "ADD" if kind == InstructionKind.ADD_I_VX else "LD"
    operands = [f.format(x=reg(ins.x)) for f in formats]
    return make_operation(ins, kind, mnemonic, *operands)

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    state.v[Instruction(op.word).x] = state.timers.delay

# @intent:responsibility キー入力待ち。ラッチが空の場合はPCを戻してWAITING_FOR_KEYを返します。
# @intent:rationale ブロッキングではなく協調的なポーリングです。ドライバが後のティックで再度stepを呼び出します。
def execute_ld_vx_k(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> Optional[StepStatus]:
    key = io.keyboard.consume()
    if key is None:
        rewind(state, op)
        return StepStatus.WAITING_FOR_KEY
    state.v[Instruction(op.word).x] = key
    return None

def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    state.timers.delay = state.v[Instruction(op.word).x]

def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    state.timers.sound = state.v[Instruction(op.word).x]

def execute_add_i_vx(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    state.i = (state.i + state.v[Instruction(op.word).x]) & ADDRESS_MASK

# @intent:responsibility Iをフォントグリフ VX の先頭アドレスに設定します。
def execute_ld_f_vx(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    state.i = state.v[Instruction(op.word).x] * FONT_GLYPH_SIZE

# @intent:responsibility VXを10進3桁（百、十、一の位）に分解し、I, I+1, I+2 に書き込みます。
def execute_ld_b_vx(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    value = state.v[Instruction(op.word).x]
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# @intent:responsibility V0..VX（両端含む）をIから始まるメモリへ書き込みます。Iは変化しません。
def execute_ld_mem_vx(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    for r in range(Instruction(op.word).x + 1):
        bus.write(state.i + r, state.v[r])

# @intent:responsibility Iから始まるメモリをV0..VX（両端含む）へ読み込みます。Iは変化しません。
def execute_ld_vx_mem(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    for r in range(Instruction(op.word).x + 1):
        state.v[r] = bus.read(state.i + r)
