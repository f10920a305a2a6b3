# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

全ての演算は8bit（mod 256）です。結果とフラグの両方を定義する命令は、
VFをフラグとして最後に書き込みます（X == F の場合はフラグが残ります）。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Instruction, InstructionKind, Chip8Io, make_operation, decode_unknown, reg, imm

# --- 7XNN ---
def decode_7(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.ADD_VX_NN, "ADD", reg(ins.x), imm(ins.nn))

# @intent:responsibility VXに即値を加算します。キャリーフラグは変化しません。
def execute_add_vx_nn(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    state.v[ins.x] = (state.v[ins.x] + ins.nn) & 0xFF

# --- 8XYN ---
# @intent:map 8XYNファミリの下位ニブルから (命令種別, ニーモニック) への対応表。
_ALU_OPS = {
    0x0: (InstructionKind.LD_VX_VY, "LD"),
    0x1: (InstructionKind.OR, "OR"),
    0x2: (InstructionKind.AND, "AND"),
    0x3: (InstructionKind.XOR, "XOR"),
    0x4: (InstructionKind.ADD_VX_VY, "ADD"),
    0x5: (InstructionKind.SUB, "SUB"),
    0x6: (InstructionKind.SHR, "SHR"),
    0x7: (InstructionKind.SUBN, "SUBN"),
    0xE: (InstructionKind.SHL, "SHL"),
}

# @intent:responsibility 0x8ファミリ（レジスタ間演算）を下位ニブルでディスパッチしてデコードします。
def decode_8(ins: Instruction, address: int, strict: bool) -> Operation:
    entry = _ALU_OPS.get(ins.n)
    if entry is None:
        return decode_unknown(ins, address, strict)
    kind, mnemonic = entry
    if kind in (InstructionKind.SHR, InstructionKind.SHL):
        return make_operation(ins, kind, mnemonic, reg(ins.x))
    return make_operation(ins, kind, mnemonic, reg(ins.x), reg(ins.y))

def execute_ld_vx_vy(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    state.v[ins.x] = state.v[ins.y]

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    state.v[ins.x] |= state.v[ins.y]

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    state.v[ins.x] &= state.v[ins.y]

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    state.v[ins.x] ^= state.v[ins.y]

# @intent:responsibility VX = VX + VY。VFは桁あふれした場合に1になります。
def execute_add_vx_vy(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    res = state.v[ins.x] + state.v[ins.y]
    state.v[ins.x] = res & 0xFF
    state.vf = 1 if res > 0xFF else 0

# @intent:responsibility VX = VX - VY。VFはボローが発生しなかった場合（VX >= VY）に1になります。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    v1, v2 = state.v[ins.x], state.v[ins.y]
    state.v[ins.x] = (v1 - v2) & 0xFF
    state.vf = 1 if v1 >= v2 else 0

# @intent:responsibility VX = VY - VX。VFはボローが発生しなかった場合（VY >= VX）に1になります。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    v1, v2 = state.v[ins.x], state.v[ins.y]
    state.v[ins.x] = (v2 - v1) & 0xFF
    state.vf = 1 if v2 >= v1 else 0

# @intent:responsibility VXを1bit右シフトします。VFはシフト前の最下位ビットです。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    v1 = state.v[ins.x]
    state.v[ins.x] = v1 >> 1
    state.vf = v1 & 0x01

# @intent:responsibility VXを1bit左シフトします。VFはシフト前の最上位ビットです。
def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    v1 = state.v[ins.x]
    state.v[ins.x] = (v1 << 1) & 0xFF
    state.vf = (v1 >> 7) & 0x01

# --- CXNN ---
def decode_c(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.RND, "RND", reg(ins.x), imm(ins.nn))

# @intent:responsibility VX = 乱数バイト AND NN。乱数源は起動時にシードされたPRNGです。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    state.v[ins.x] = io.rng.randrange(256) & ins.nn
