# src/retro_chip8/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。
"""
from . import alu
from . import control
from . import draw
from . import load
from .base import InstructionKind, execute_nop

# @intent:map 上位ニブル（命令ファミリ）からデコード関数へのマッピングテーブル。
# 0x8, 0xE, 0xF などの共有ファミリは、各デコード関数内でさらに下位フィールドによりディスパッチします。
DECODE_MAP = {
    0x0: control.decode_0,
    0x1: control.decode_1,
    0x2: control.decode_2,
    0x3: control.decode_3,
    0x4: control.decode_4,
    0x5: control.decode_5,
    0x6: load.decode_6,
    0x7: alu.decode_7,
    0x8: alu.decode_8,
    0x9: control.decode_9,
    0xA: load.decode_a,
    0xB: control.decode_b,
    0xC: alu.decode_c,
    0xD: draw.decode_d,
    0xE: control.decode_e,
    0xF: load.decode_f,
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    InstructionKind.SYS: control.execute_sys,
    InstructionKind.RET: control.execute_ret,
    InstructionKind.HALT: control.execute_halt,
    InstructionKind.JP: control.execute_jp,
    InstructionKind.CALL: control.execute_call,
    InstructionKind.JP_V0: control.execute_jp_v0,
    InstructionKind.SE_VX_NN: control.execute_se_vx_nn,
    InstructionKind.SNE_VX_NN: control.execute_sne_vx_nn,
    InstructionKind.SE_VX_VY: control.execute_se_vx_vy,
    InstructionKind.SNE_VX_VY: control.execute_sne_vx_vy,
    InstructionKind.SKP: control.execute_skp,
    InstructionKind.SKNP: control.execute_sknp,

    # ALU
    InstructionKind.ADD_VX_NN: alu.execute_add_vx_nn,
    InstructionKind.LD_VX_VY: alu.execute_ld_vx_vy,
    InstructionKind.OR: alu.execute_or,
    InstructionKind.AND: alu.execute_and,
    InstructionKind.XOR: alu.execute_xor,
    InstructionKind.ADD_VX_VY: alu.execute_add_vx_vy,
    InstructionKind.SUB: alu.execute_sub,
    InstructionKind.SHR: alu.execute_shr,
    InstructionKind.SUBN: alu.execute_subn,
    InstructionKind.SHL: alu.execute_shl,
    InstructionKind.RND: alu.execute_rnd,

    # Load/Store
    InstructionKind.LD_VX_NN: load.execute_ld_vx_nn,
    InstructionKind.LD_I: load.execute_ld_i,
    InstructionKind.LD_VX_DT: load.execute_ld_vx_dt,
    InstructionKind.LD_VX_K: load.execute_ld_vx_k,
    InstructionKind.LD_DT_VX: load.execute_ld_dt_vx,
    InstructionKind.LD_ST_VX: load.execute_ld_st_vx,
    InstructionKind.ADD_I_VX: load.execute_add_i_vx,
    InstructionKind.LD_F_VX: load.execute_ld_f_vx,
    InstructionKind.LD_B_VX: load.execute_ld_b_vx,
    InstructionKind.LD_MEM_VX: load.execute_ld_mem_vx,
    InstructionKind.LD_VX_MEM: load.execute_ld_vx_mem,

    # Display
    InstructionKind.CLS: draw.execute_cls,
    InstructionKind.DRW: draw.execute_drw,

    InstructionKind.NOP: execute_nop,
}
