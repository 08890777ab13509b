"""The closed CHIP-8 instruction set.

``identify`` maps a decoded word onto exactly one ``Opcode`` member or raises
``UnknownInstructionError``. Words outside the base set, including the SCHIP
and XO-CHIP extensions, are unknown.
"""

from enum import Enum

from chipvm.decode import DecodedInstruction
from chipvm.errors import UnknownInstructionError


class Opcode(Enum):
    CLS = "00E0"
    RET = "00EE"
    JP = "1NNN"
    CALL = "2NNN"
    SE_IMM = "3XKK"
    SNE_IMM = "4XKK"
    SE_REG = "5XY0"
    LD_IMM = "6XKK"
    ADD_IMM = "7XKK"
    LD_REG = "8XY0"
    ADD_REG = "8XY4"
    SUB = "8XY5"
    SUBN = "8XY7"
    SNE_REG = "9XY0"
    LD_I = "ANNN"
    JP_V0 = "BNNN"
    RND = "CXKK"
    DRW = "DXYN"
    SKP = "EX9E"
    SKNP = "EXA1"
    LD_VX_DT = "FX07"
    LD_VX_K = "FX0A"
    LD_DT_VX = "FX15"
    LD_ST_VX = "FX18"
    ADD_I = "FX1E"
    LD_F = "FX29"
    LD_BCD = "FX33"
    LD_MEM_VX = "FX55"
    LD_VX_MEM = "FX65"


def identify(instruction: DecodedInstruction) -> Opcode:
    """Classify a decoded instruction, raising on unknown words."""
    match instruction.op:
        case 0x0 if instruction.raw == 0x00E0:
            return Opcode.CLS
        case 0x0 if instruction.raw == 0x00EE:
            return Opcode.RET
        case 0x1:
            return Opcode.JP
        case 0x2:
            return Opcode.CALL
        case 0x3:
            return Opcode.SE_IMM
        case 0x4:
            return Opcode.SNE_IMM
        case 0x5 if instruction.n == 0x0:
            return Opcode.SE_REG
        case 0x6:
            return Opcode.LD_IMM
        case 0x7:
            return Opcode.ADD_IMM
        case 0x8 if instruction.n in _ALU_OPCODES:
            return _ALU_OPCODES[instruction.n]
        case 0x9 if instruction.n == 0x0:
            return Opcode.SNE_REG
        case 0xA:
            return Opcode.LD_I
        case 0xB:
            return Opcode.JP_V0
        case 0xC:
            return Opcode.RND
        case 0xD:
            return Opcode.DRW
        case 0xE if instruction.kk in _KEY_OPCODES:
            return _KEY_OPCODES[instruction.kk]
        case 0xF if instruction.kk in _MISC_OPCODES:
            return _MISC_OPCODES[instruction.kk]
        case _:
            raise UnknownInstructionError(instruction.raw)


_ALU_OPCODES = {
    0x0: Opcode.LD_REG,
    0x4: Opcode.ADD_REG,
    0x5: Opcode.SUB,
    0x7: Opcode.SUBN,
}

_KEY_OPCODES = {
    0x9E: Opcode.SKP,
    0xA1: Opcode.SKNP,
}

_MISC_OPCODES = {
    0x07: Opcode.LD_VX_DT,
    0x0A: Opcode.LD_VX_K,
    0x15: Opcode.LD_DT_VX,
    0x18: Opcode.LD_ST_VX,
    0x1E: Opcode.ADD_I,
    0x29: Opcode.LD_F,
    0x33: Opcode.LD_BCD,
    0x55: Opcode.LD_MEM_VX,
    0x65: Opcode.LD_VX_MEM,
}
