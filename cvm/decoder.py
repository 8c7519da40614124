#!/usr/bin/env python3

"""
Instruction Decoder

Every 16-bit word splits into the same fixed fields, whatever the instruction:

    nnn = address (lowest 12 bits)
    kk  = byte    (lowest 8 bits)
    x   = register (second nibble)
    y   = register (third nibble)
    n   = nibble  (lowest 4 bits)

Decoding never fails.  The word is also classified up front into one of the
Op kinds, using its top nibble and, for the 0x0, 0x8, 0xE and 0xF families, a
secondary selector.  Words that match nothing are classified as None, and it is
up to the CPU to decide what to do with them.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from enum import Enum


class Op(Enum):
    CLS = "00E0"
    RET = "00EE"
    JP_ADDR = "1nnn"
    CALL_ADDR = "2nnn"
    SE_VX_BYTE = "3xkk"
    SNE_VX_BYTE = "4xkk"
    SE_VX_VY = "5xy0"
    LD_VX_BYTE = "6xkk"
    ADD_VX_BYTE = "7xkk"
    LD_VX_VY = "8xy0"
    OR_VX_VY = "8xy1"
    AND_VX_VY = "8xy2"
    XOR_VX_VY = "8xy3"
    ADD_VX_VY = "8xy4"
    SUB_VX_VY = "8xy5"
    SHR_VX = "8xy6"
    SUBN_VX_VY = "8xy7"
    SHL_VX = "8xyE"
    SNE_VX_VY = "9xy0"
    LD_I_ADDR = "Annn"
    JP_V0_ADDR = "Bnnn"
    RND_VX_BYTE = "Cxkk"
    DRW_VX_VY_N = "Dxyn"
    SKP_VX = "Ex9E"
    SKNP_VX = "ExA1"
    LD_VX_DT = "Fx07"
    LD_VX_K = "Fx0A"
    LD_DT_VX = "Fx15"
    LD_ST_VX = "Fx18"
    ADD_I_VX = "Fx1E"
    LD_F_VX = "Fx29"
    LD_B_VX = "Fx33"
    LD_MEM_VX = "Fx55"
    LD_VX_MEM = "Fx65"


Instruction = namedtuple("Instruction", ("opcode", "op", "addr", "byte", "x", "y", "nibble"))

# Families identified by their top nibble alone
_SINGLE_OPS = {
    0x1: Op.JP_ADDR,
    0x2: Op.CALL_ADDR,
    0x3: Op.SE_VX_BYTE,
    0x4: Op.SNE_VX_BYTE,
    0x5: Op.SE_VX_VY,  # Low nibble is ignored
    0x6: Op.LD_VX_BYTE,
    0x7: Op.ADD_VX_BYTE,
    0x9: Op.SNE_VX_VY,  # Low nibble is ignored
    0xA: Op.LD_I_ADDR,
    0xB: Op.JP_V0_ADDR,
    0xC: Op.RND_VX_BYTE,
    0xD: Op.DRW_VX_VY_N
}

# Families which need a second look.  Each maps to (selector field, {selector value: Op}).
_EXTENDED_OPS = {
    0x0: ("byte", {
        0xE0: Op.CLS,
        0xEE: Op.RET
    }),
    0x8: ("nibble", {
        0x0: Op.LD_VX_VY,
        0x1: Op.OR_VX_VY,
        0x2: Op.AND_VX_VY,
        0x3: Op.XOR_VX_VY,
        0x4: Op.ADD_VX_VY,
        0x5: Op.SUB_VX_VY,
        0x6: Op.SHR_VX,
        0x7: Op.SUBN_VX_VY,
        0xE: Op.SHL_VX
    }),
    0xE: ("byte", {
        0x9E: Op.SKP_VX,
        0xA1: Op.SKNP_VX
    }),
    0xF: ("byte", {
        0x07: Op.LD_VX_DT,
        0x0A: Op.LD_VX_K,
        0x15: Op.LD_DT_VX,
        0x18: Op.LD_ST_VX,
        0x1E: Op.ADD_I_VX,
        0x29: Op.LD_F_VX,
        0x33: Op.LD_B_VX,
        0x55: Op.LD_MEM_VX,
        0x65: Op.LD_VX_MEM
    })
}


def classify(opcode):
    family = opcode >> 12
    op = _SINGLE_OPS.get(family)

    if op is not None:
        return op

    # Top nibbles 0x0, 0x8, 0xE and 0xF are the only ones left
    field, selectors = _EXTENDED_OPS[family]
    selector = opcode & 0xF if field == "nibble" else opcode & 0xFF
    return selectors.get(selector)  # 0nnn (SYS addr) and friends fall through to None


def decode(opcode):
    opcode &= 0xFFFF
    return Instruction(
        opcode=opcode,
        op=classify(opcode),
        addr=opcode & 0xFFF,
        byte=opcode & 0xFF,
        x=(opcode >> 8) & 0xF,
        y=(opcode >> 4) & 0xF,
        nibble=opcode & 0xF
    )
