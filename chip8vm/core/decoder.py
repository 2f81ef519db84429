"""Instruction fetch and decode.

Every opcode family decodes to its own frozen dataclass carrying exactly the
operand fields it uses. The executor dispatches on the dataclass type, which
keeps decoding and execution independently testable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from chip8vm.core.exceptions import InvalidProgramCounterError
from chip8vm.utils.consts import ConstUtils

if TYPE_CHECKING:
    from chip8vm.core.memory import Memory
    from chip8vm.core.state import MachineState


@dataclass(frozen=True)
class Instruction:
    """Base class for decoded instructions."""


# 0 family -------------------------------------------------------------------

@dataclass(frozen=True)
class Sys(Instruction):
    nnn: int

    def __str__(self) -> str:
        return f"SYS 0x{self.nnn:03X}"


@dataclass(frozen=True)
class ClearScreen(Instruction):
    def __str__(self) -> str:
        return "CLS"


@dataclass(frozen=True)
class Return(Instruction):
    def __str__(self) -> str:
        return "RET"


# Flow control ---------------------------------------------------------------

@dataclass(frozen=True)
class Jump(Instruction):
    nnn: int

    def __str__(self) -> str:
        return f"JP 0x{self.nnn:03X}"


@dataclass(frozen=True)
class Call(Instruction):
    nnn: int

    def __str__(self) -> str:
        return f"CALL 0x{self.nnn:03X}"


@dataclass(frozen=True)
class JumpWithOffset(Instruction):
    nnn: int

    @property
    def x(self) -> int:
        """Register selected by the high nibble of NNN (jump_uses_vx quirk)."""
        return self.nnn >> 8

    def __str__(self) -> str:
        return f"JP V0, 0x{self.nnn:03X}"


# Conditional skips ----------------------------------------------------------

@dataclass(frozen=True)
class SkipIfEqualImmediate(Instruction):
    x: int
    nn: int

    def __str__(self) -> str:
        return f"SE V{self.x:X}, 0x{self.nn:02X}"


@dataclass(frozen=True)
class SkipIfNotEqualImmediate(Instruction):
    x: int
    nn: int

    def __str__(self) -> str:
        return f"SNE V{self.x:X}, 0x{self.nn:02X}"


@dataclass(frozen=True)
class SkipIfRegistersEqual(Instruction):
    x: int
    y: int

    def __str__(self) -> str:
        return f"SE V{self.x:X}, V{self.y:X}"


@dataclass(frozen=True)
class SkipIfRegistersNotEqual(Instruction):
    x: int
    y: int

    def __str__(self) -> str:
        return f"SNE V{self.x:X}, V{self.y:X}"


# Immediate and register arithmetic -----------------------------------------

@dataclass(frozen=True)
class LoadImmediate(Instruction):
    x: int
    nn: int

    def __str__(self) -> str:
        return f"LD V{self.x:X}, 0x{self.nn:02X}"


@dataclass(frozen=True)
class AddImmediate(Instruction):
    x: int
    nn: int

    def __str__(self) -> str:
        return f"ADD V{self.x:X}, 0x{self.nn:02X}"


@dataclass(frozen=True)
class RegisterOp(Instruction):
    """Two-register 8XY_ instruction."""

    x: int
    y: int
    mnemonic = "?"

    def __str__(self) -> str:
        return f"{self.mnemonic} V{self.x:X}, V{self.y:X}"


@dataclass(frozen=True)
class LoadRegister(RegisterOp):
    mnemonic = "LD"


@dataclass(frozen=True)
class Or(RegisterOp):
    mnemonic = "OR"


@dataclass(frozen=True)
class And(RegisterOp):
    mnemonic = "AND"


@dataclass(frozen=True)
class Xor(RegisterOp):
    mnemonic = "XOR"


@dataclass(frozen=True)
class AddRegisters(RegisterOp):
    mnemonic = "ADD"


@dataclass(frozen=True)
class Subtract(RegisterOp):
    mnemonic = "SUB"


@dataclass(frozen=True)
class ShiftRight(RegisterOp):
    mnemonic = "SHR"


@dataclass(frozen=True)
class SubtractReverse(RegisterOp):
    mnemonic = "SUBN"


@dataclass(frozen=True)
class ShiftLeft(RegisterOp):
    mnemonic = "SHL"


# Index, random, draw --------------------------------------------------------

@dataclass(frozen=True)
class LoadIndex(Instruction):
    nnn: int

    def __str__(self) -> str:
        return f"LD I, 0x{self.nnn:03X}"


@dataclass(frozen=True)
class Random(Instruction):
    x: int
    nn: int

    def __str__(self) -> str:
        return f"RND V{self.x:X}, 0x{self.nn:02X}"


@dataclass(frozen=True)
class Draw(Instruction):
    x: int
    y: int
    n: int

    def __str__(self) -> str:
        return f"DRW V{self.x:X}, V{self.y:X}, {self.n}"


# Single-register instructions (EX__ and FX__) ------------------------------

@dataclass(frozen=True)
class RegisterInstruction(Instruction):
    """Instruction whose only operand is register X."""

    x: int
    template = "?"

    def __str__(self) -> str:
        return self.template.format(x=f"V{self.x:X}")


@dataclass(frozen=True)
class SkipIfKeyPressed(RegisterInstruction):
    template = "SKP {x}"


@dataclass(frozen=True)
class SkipIfKeyNotPressed(RegisterInstruction):
    template = "SKNP {x}"


@dataclass(frozen=True)
class LoadFromDelay(RegisterInstruction):
    template = "LD {x}, DT"


@dataclass(frozen=True)
class WaitForKey(RegisterInstruction):
    template = "LD {x}, K"


@dataclass(frozen=True)
class SetDelay(RegisterInstruction):
    template = "LD DT, {x}"


@dataclass(frozen=True)
class SetSound(RegisterInstruction):
    template = "LD ST, {x}"


@dataclass(frozen=True)
class AddToIndex(RegisterInstruction):
    template = "ADD I, {x}"


@dataclass(frozen=True)
class LoadFontGlyph(RegisterInstruction):
    template = "LD F, {x}"


@dataclass(frozen=True)
class StoreBCD(RegisterInstruction):
    template = "LD B, {x}"


@dataclass(frozen=True)
class StoreRegisters(RegisterInstruction):
    template = "LD [I], {x}"


@dataclass(frozen=True)
class LoadRegisters(RegisterInstruction):
    template = "LD {x}, [I]"


@dataclass(frozen=True)
class Unknown(Instruction):
    opcode: int

    def __str__(self) -> str:
        return f"DW 0x{self.opcode:04X}"


# Decoding -------------------------------------------------------------------

def split_nibbles(opcode: int) -> tuple[int, int, int, int]:
    """Split a 16-bit opcode into its four nibbles, most significant first."""
    return (
        (opcode >> 12) & 0xF,
        (opcode >> 8) & 0xF,
        (opcode >> 4) & 0xF,
        opcode & 0xF,
    )


_REGISTER_OPS: dict[int, type[RegisterOp]] = {
    0x0: LoadRegister,
    0x1: Or,
    0x2: And,
    0x3: Xor,
    0x4: AddRegisters,
    0x5: Subtract,
    0x6: ShiftRight,
    0x7: SubtractReverse,
    0xE: ShiftLeft,
}

_KEY_OPS: dict[int, type[RegisterInstruction]] = {
    0x9E: SkipIfKeyPressed,
    0xA1: SkipIfKeyNotPressed,
}

_MISC_OPS: dict[int, type[RegisterInstruction]] = {
    0x07: LoadFromDelay,
    0x0A: WaitForKey,
    0x15: SetDelay,
    0x18: SetSound,
    0x1E: AddToIndex,
    0x29: LoadFontGlyph,
    0x33: StoreBCD,
    0x55: StoreRegisters,
    0x65: LoadRegisters,
}


def _decode_system(opcode: int) -> Instruction:
    if opcode == 0x00E0:
        return ClearScreen()
    if opcode == 0x00EE:
        return Return()
    return Sys(opcode & ConstUtils.MASK_12_BITS)


def _decode_register_op(opcode: int) -> Instruction:
    _, x, y, n = split_nibbles(opcode)
    op = _REGISTER_OPS.get(n)
    if op is None:
        return Unknown(opcode)
    return op(x, y)


def _decode_pair(opcode: int, cls: Callable[[int, int], Instruction]) -> Instruction:
    _, x, y, n = split_nibbles(opcode)
    if n != 0:
        return Unknown(opcode)
    return cls(x, y)


def _decode_keys(opcode: int) -> Instruction:
    op = _KEY_OPS.get(opcode & ConstUtils.MASK_8_BITS)
    if op is None:
        return Unknown(opcode)
    return op((opcode >> 8) & 0xF)


def _decode_misc(opcode: int) -> Instruction:
    op = _MISC_OPS.get(opcode & ConstUtils.MASK_8_BITS)
    if op is None:
        return Unknown(opcode)
    return op((opcode >> 8) & 0xF)


def _x(opcode: int) -> int:
    return (opcode >> 8) & 0xF


def _nn(opcode: int) -> int:
    return opcode & ConstUtils.MASK_8_BITS


def _nnn(opcode: int) -> int:
    return opcode & ConstUtils.MASK_12_BITS


_DECODERS: dict[int, Callable[[int], Instruction]] = {
    0x0: _decode_system,
    0x1: lambda op: Jump(_nnn(op)),
    0x2: lambda op: Call(_nnn(op)),
    0x3: lambda op: SkipIfEqualImmediate(_x(op), _nn(op)),
    0x4: lambda op: SkipIfNotEqualImmediate(_x(op), _nn(op)),
    0x5: lambda op: _decode_pair(op, SkipIfRegistersEqual),
    0x6: lambda op: LoadImmediate(_x(op), _nn(op)),
    0x7: lambda op: AddImmediate(_x(op), _nn(op)),
    0x8: _decode_register_op,
    0x9: lambda op: _decode_pair(op, SkipIfRegistersNotEqual),
    0xA: lambda op: LoadIndex(_nnn(op)),
    0xB: lambda op: JumpWithOffset(_nnn(op)),
    0xC: lambda op: Random(_x(op), _nn(op)),
    0xD: lambda op: Draw(_x(op), (op >> 4) & 0xF, op & 0xF),
    0xE: _decode_keys,
    0xF: _decode_misc,
}


def decode(opcode: int) -> Instruction:
    """Decode a 16-bit opcode. Unrecognised words decode to Unknown."""
    opcode &= ConstUtils.MASK_16_BITS
    return _DECODERS[opcode >> 12](opcode)


def fetch(state: "MachineState") -> int:
    """Read the opcode at PC and advance PC past it.

    PC is advanced before execution so that jumps, calls and returns which
    overwrite it are not clobbered afterwards.

    Raises:
        InvalidProgramCounterError: PC is odd or outside 0x200-0xFFE
    """
    pc = state.program_counter
    if pc % 2 or not ConstUtils.PROGRAM_START <= pc <= ConstUtils.PROGRAM_END:
        raise InvalidProgramCounterError(pc)
    opcode = state.memory.read_word(pc)
    state.program_counter = pc + 2
    return opcode


def disassemble(memory: "Memory", start: int, count: int) -> list[tuple[int, int, Instruction]]:
    """Decode ``count`` consecutive words starting at ``start``.

    Returns:
        (address, opcode, instruction) triples; stops early at the end of memory.
    """
    listing = []
    address = start
    for _ in range(count):
        if address + 2 > memory.size:
            break
        opcode = memory.read_word(address)
        listing.append((address, opcode, decode(opcode)))
        address += 2
    return listing
