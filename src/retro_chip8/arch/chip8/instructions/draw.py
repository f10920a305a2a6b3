# src/retro_chip8/arch/chip8/instructions/draw.py
"""
表示命令（画面クリア、スプライト描画）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Instruction, InstructionKind, Chip8Io, make_operation, reg

# @intent:responsibility CLS命令を実行します。フレームバッファに画面クリア要求を記録します。
def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    io.framebuffer.request_clear()

# --- DXYN ---
def decode_d(ins: Instruction, address: int, strict: bool) -> Operation:
    return make_operation(ins, InstructionKind.DRW, "DRW", reg(ins.x), reg(ins.y), str(ins.n))

# @intent:responsibility Iから始まるNバイトのスプライトを (VX, VY) にXOR描画します。
# @intent:post-condition VFはピクセルが1から0に変化した場合に1、それ以外は0になります。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation, io: Chip8Io) -> None:
    ins = Instruction(op.word)
    # 座標はVFを書き換える前に読み出す
    x = state.v[ins.x]
    y = state.v[ins.y]
    rows = [bus.read(state.i + row) for row in range(ins.n)]
    collision = io.framebuffer.draw_sprite(x, y, rows)
    state.vf = 1 if collision else 0
