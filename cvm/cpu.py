#!/usr/bin/env python3

"""
CPU Emulator (CHIP-8)

Like a real computer, this is where most of the processing happens.  The CPU
owns the execution state (registers, program counter, timers and the input
latch), and is plugged into RAM, the call stack, the framebuffer and a random
byte source.

Each call to step() runs exactly one instruction: fetch the big-endian word at
PC, decode and classify it, then call the handler for its Op kind.  Handlers
move the program counter on themselves, so control transfer instructions can
simply set it.  Timers are owned here, but counted down by the Scheduler.

Unknown opcodes are ignored by default, leaving PC where it is, as the
original interpreters did.  In strict mode they halt emulation with a CPUError
instead, which is far easier to diagnose than a program spinning on garbage.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, ADDR_MASK, FONT_START, FONT_GLYPH_SIZE, NUM_KEYS, NUM_REGISTERS, PROGRAM_START
from .decoder import Op, decode
from .hostio import Loader
from .ram import RAMError


class CPUError(Exception):
    pass


def check_key(key):
    if not isinstance(key, int) or not 0 <= key < NUM_KEYS:
        raise CPUError("Key index {!r} is out of range (0x0 - 0xf)".format(key))


class CPU:
    def __init__(self, ram, stack, framebuffer, rng, debugger, strict=False):
        self.ram = ram
        self.stack = stack
        self.framebuffer = framebuffer
        self.rng = rng
        self.debugger = debugger
        self.live_debug = self.debugger.is_live()
        self.strict = strict

        # Define instruction pointers.
        # n = Nibble
        # kk = Byte
        # nnn = address
        # x/y = register (0-15)
        self.instructions = {
            Op.CLS: self._00E0,
            Op.RET: self._00EE,
            Op.JP_ADDR: self._1nnn,
            Op.CALL_ADDR: self._2nnn,
            Op.SE_VX_BYTE: self._3xkk,
            Op.SNE_VX_BYTE: self._4xkk,
            Op.SE_VX_VY: self._5xy0,
            Op.LD_VX_BYTE: self._6xkk,
            Op.ADD_VX_BYTE: self._7xkk,
            Op.LD_VX_VY: self._8xy0,
            Op.OR_VX_VY: self._8xy1,
            Op.AND_VX_VY: self._8xy2,
            Op.XOR_VX_VY: self._8xy3,
            Op.ADD_VX_VY: self._8xy4,
            Op.SUB_VX_VY: self._8xy5,
            Op.SHR_VX: self._8xy6,
            Op.SUBN_VX_VY: self._8xy7,
            Op.SHL_VX: self._8xyE,
            Op.SNE_VX_VY: self._9xy0,
            Op.LD_I_ADDR: self._Annn,
            Op.JP_V0_ADDR: self._Bnnn,
            Op.RND_VX_BYTE: self._Cxkk,
            Op.DRW_VX_VY_N: self._Dxyn,
            Op.SKP_VX: self._Ex9E,
            Op.SKNP_VX: self._ExA1,
            Op.LD_VX_DT: self._Fx07,
            Op.LD_VX_K: self._Fx0A,
            Op.LD_DT_VX: self._Fx15,
            Op.LD_ST_VX: self._Fx18,
            Op.ADD_I_VX: self._Fx1E,
            Op.LD_F_VX: self._Fx29,
            Op.LD_B_VX: self._Fx33,
            Op.LD_MEM_VX: self._Fx55,
            Op.LD_VX_MEM: self._Fx65
        }

        missing = [op.value for op in Op if op not in self.instructions]

        if missing:
            raise CPUError("No handler defined for: {}".format(", ".join(missing)))

        # Initialise registers
        self.v = memoryview(bytearray(NUM_REGISTERS))  # Bytearrays are mutable, so this should be fast
        self.i = PROGRAM_START  # Index register

        # Initialise timers
        self.dt = 0  # Delay timer integer (byte)
        self.st = 0  # Sound timer integer (byte)

        # Initialise program counter and current opcode
        self.pc = PROGRAM_START
        self.debug_pc = PROGRAM_START
        self.opcode = 0

        # Input latch, one flag per hex key
        self.keys = [False] * NUM_KEYS

    def load(self, image):
        # Raises RAMError if the image doesn't fit, before anything is changed
        self.ram.load_image(image)
        self.pc = PROGRAM_START
        self.i = PROGRAM_START

    def load_file(self, filename, loader=None):
        # Returns False (leaving the machine untouched) if the program couldn't be read or doesn't fit
        try:
            image = (loader or Loader()).load_binary(filename)
            self.load(image)
        except (OSError, RAMError):
            return False

        return True

    def set_key(self, key, down):
        check_key(key)
        self.keys[key] = bool(down)

    def step(self):
        # Keep track of the program counter before altering it in any way for debugging purposes
        self.debug_pc = self.pc
        self.opcode = self.fetch()
        instruction = decode(self.opcode)
        handler = self.instructions.get(instruction.op)

        if handler is None:
            self._opcode_unsupported()
            return

        handler(instruction)

    def fetch(self):
        # CHIP-8 is big-endian.  The second byte wraps to 0x000 if PC sits on the very last byte.
        pc = self.pc
        return (self.ram.read(pc) << 8) | self.ram.read((pc + 1) & ADDR_MASK)

    def inc_pc(self):
        self.pc = (self.pc + 2) & ADDR_MASK

    def skip_if(self, condition):
        # Skipping jumps over the next instruction, so the PC moves on by 4 rather than 2
        if condition:
            self.inc_pc()

        self.inc_pc()

    def _opcode_unsupported(self):
        if self.live_debug:
            self.debug("???")

        if not self.strict:
            return

        raise CPUError(
            (
                "Emulation halted.\n\n" +
                "{}Debug info:\n" +
                "{}\n\nOpcode 0x{:04x} at address 0x{:03x} is not a recognised instruction."
            ).format(APP_INTRO, self.debugger.debug(self, "???", verbose=True), self.opcode, self.debug_pc)
        )

    def debug(self, instruction):
        self.debugger.output(self, instruction)

    def _00E0(self, ins):  # CLS
        if self.live_debug:
            self.debug("CLS")

        self.framebuffer.clear()
        self.inc_pc()

    def _00EE(self, ins):  # RET
        if self.live_debug:
            self.debug("RET")

        # The stored address is that of the CALL itself, so step over it
        self.pc = self.stack.pop()
        self.inc_pc()

    def _1nnn(self, ins):  # JP addr
        if self.live_debug:
            self.debug("JP 0x{:03x}".format(ins.addr))

        self.pc = ins.addr

    def _2nnn(self, ins):  # CALL addr
        if self.live_debug:
            self.debug("CALL 0x{:03x}".format(ins.addr))

        self.stack.push(self.pc)
        self.pc = ins.addr

    def _3xkk(self, ins):  # SE Vx, byte
        if self.live_debug:
            self.debug("SE V{:01x}, 0x{:02x}".format(ins.x, ins.byte))

        self.skip_if(self.v[ins.x] == ins.byte)

    def _4xkk(self, ins):  # SNE Vx, byte
        if self.live_debug:
            self.debug("SNE V{:01x}, 0x{:02x}".format(ins.x, ins.byte))

        self.skip_if(self.v[ins.x] != ins.byte)

    def _5xy0(self, ins):  # SE Vx, Vy
        if self.live_debug:
            self.debug("SE V{:01x}, V{:01x}".format(ins.x, ins.y))

        self.skip_if(self.v[ins.x] == self.v[ins.y])

    def _6xkk(self, ins):  # LD Vx, byte
        if self.live_debug:
            self.debug("LD V{:01x}, 0x{:02x}".format(ins.x, ins.byte))

        self.v[ins.x] = ins.byte
        self.inc_pc()

    def _7xkk(self, ins):  # ADD Vx, byte
        vx = ins.x

        if self.live_debug:
            self.debug("ADD V{:01x}, 0x{:02x}".format(vx, ins.byte))

        # No carry flag for this one
        self.v[vx] = (self.v[vx] + ins.byte) & 0xFF
        self.inc_pc()

    def _8xy0(self, ins):  # LD Vx, Vy
        if self.live_debug:
            self.debug("LD V{:01x}, V{:01x}".format(ins.x, ins.y))

        self.v[ins.x] = self.v[ins.y]
        self.inc_pc()

    def _post_8xy1_8xy2_8xy3(self):
        # The logic operations always reset Vf, even if it was the destination
        self.v[0xF] = 0
        self.inc_pc()

    def _8xy1(self, ins):  # OR Vx, Vy
        if self.live_debug:
            self.debug("OR V{:01x}, V{:01x}".format(ins.x, ins.y))

        self.v[ins.x] |= self.v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy2(self, ins):  # AND Vx, Vy
        if self.live_debug:
            self.debug("AND V{:01x}, V{:01x}".format(ins.x, ins.y))

        self.v[ins.x] &= self.v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy3(self, ins):  # XOR Vx, Vy
        if self.live_debug:
            self.debug("XOR V{:01x}, V{:01x}".format(ins.x, ins.y))

        self.v[ins.x] ^= self.v[ins.y]
        self._post_8xy1_8xy2_8xy3()

    def _8xy4(self, ins):  # ADD Vx, Vy
        vx = ins.x
        vy = ins.y

        if self.live_debug:
            self.debug("ADD V{:01x}, V{:01x}".format(vx, vy))

        val = self.v[vx] + self.v[vy]
        self.v[vx] = val & 0xFF
        self.v[0xF] = int(val > 0xFF)  # Vf is set when carrying, after Vx in case Vf was the destination
        self.inc_pc()

    def _post_8xy5_8xy7(self, vx, val):  # Post-SUB/SUBN
        self.v[vx] = val & 0xFF
        # Vf is set when NOT borrowing, and this should happen AFTER Vx is set, as sometimes Vf is specified in the
        # parameters
        self.v[0xF] = int(val >= 0)
        self.inc_pc()

    def _8xy5(self, ins):  # SUB Vx, Vy
        if self.live_debug:
            self.debug("SUB V{:01x}, V{:01x}".format(ins.x, ins.y))

        self._post_8xy5_8xy7(ins.x, self.v[ins.x] - self.v[ins.y])

    def _8xy6(self, ins):  # SHR Vx
        # Only Vx is shifted.  Vy is decoded, but plays no part.
        vx = ins.x

        if self.live_debug:
            self.debug("SHR V{:01x}".format(vx))

        val = self.v[vx]
        self.v[vx] = val >> 1
        self.v[0xF] = val & 1
        self.inc_pc()

    def _8xy7(self, ins):  # SUBN Vx, Vy
        if self.live_debug:
            self.debug("SUBN V{:01x}, V{:01x}".format(ins.x, ins.y))

        self._post_8xy5_8xy7(ins.x, self.v[ins.y] - self.v[ins.x])

    def _8xyE(self, ins):  # SHL Vx
        vx = ins.x

        if self.live_debug:
            self.debug("SHL V{:01x}".format(vx))

        val = self.v[vx]
        self.v[vx] = (val << 1) & 0xFF
        self.v[0xF] = val >> 7
        self.inc_pc()

    def _9xy0(self, ins):  # SNE Vx, Vy
        if self.live_debug:
            self.debug("SNE V{:01x}, V{:01x}".format(ins.x, ins.y))

        self.skip_if(self.v[ins.x] != self.v[ins.y])

    def _Annn(self, ins):  # LD I, addr
        if self.live_debug:
            self.debug("LD I, 0x{:03x}".format(ins.addr))

        self.i = ins.addr
        self.inc_pc()

    def _Bnnn(self, ins):  # JP V0, addr
        if self.live_debug:
            self.debug("JP V0, 0x{:03x}".format(ins.addr))

        self.pc = (self.v[0x0] + ins.addr) & ADDR_MASK

    def _Cxkk(self, ins):  # RND Vx, byte
        if self.live_debug:
            self.debug("RND V{:01x}, 0x{:02x}".format(ins.x, ins.byte))

        # The ANDing here is intentional.  This is not a random number between 0 and 'byte' inclusive.
        self.v[ins.x] = self.rng.next_byte() & ins.byte
        self.inc_pc()

    def _Dxyn(self, ins):  # DRW Vx, Vy, nibble
        # Main sprite drawing routine.  Sprites are 8 pixels wide and 'nibble' rows tall, most-significant bit on the
        # left.  I is left untouched.
        height = ins.nibble

        if self.live_debug:
            self.debug("DRW V{:01x}, V{:01x}, 0x{:01x}".format(ins.x, ins.y, height))

        framebuffer = self.framebuffer
        vx_pos = self.v[ins.x]
        vy_pos = self.v[ins.y]
        i = self.i
        collided = False
        self.v[0xF] = 0

        for y in range(height):
            spr_data = self.ram.read((i + y) & ADDR_MASK)

            for x in range(8):
                # Clear sprite bits can't change anything, so only set ones are XORed in.  Wrapping is done by the
                # framebuffer.
                if spr_data & (0x80 >> x) and framebuffer.xor_pixel(vx_pos + x, vy_pos + y):
                    collided = True

        if collided:
            self.v[0xF] = 1

        self.inc_pc()

    def _Ex9E(self, ins):  # SKP Vx
        if self.live_debug:
            self.debug("SKP V{:01x}".format(ins.x))

        self.skip_if(self.keys[self.v[ins.x] & 0xF])

    def _ExA1(self, ins):  # SKNP Vx
        if self.live_debug:
            self.debug("SKNP V{:01x}".format(ins.x))

        self.skip_if(not self.keys[self.v[ins.x] & 0xF])

    def _Fx07(self, ins):  # LD Vx, DT
        if self.live_debug:
            self.debug("LD V{:01x}, DT".format(ins.x))

        self.v[ins.x] = self.dt
        self.inc_pc()

    def _Fx0A(self, ins):  # LD Vx, K
        if self.live_debug:
            self.debug("LD V{:01x}, K".format(ins.x))

        # The timers still need to run and the screen still needs updating while waiting for a key, so rather than
        # blocking, leave the program counter alone and this instruction will simply run again next cycle
        for key, down in enumerate(self.keys):
            if down:
                self.v[ins.x] = key
                self.inc_pc()
                break

    def _Fx15(self, ins):  # LD DT, Vx
        if self.live_debug:
            self.debug("LD DT, V{:01x}".format(ins.x))

        self.dt = self.v[ins.x]
        self.inc_pc()

    def _Fx18(self, ins):  # LD ST, Vx
        if self.live_debug:
            self.debug("LD ST, V{:01x}".format(ins.x))

        self.st = self.v[ins.x]
        self.inc_pc()

    def _Fx1E(self, ins):  # ADD I, Vx
        if self.live_debug:
            self.debug("ADD I, V{:01x}".format(ins.x))

        # Masked to the address space, and Vf is left alone
        self.i = (self.i + self.v[ins.x]) & ADDR_MASK
        self.inc_pc()

    def _Fx29(self, ins):  # LD F, Vx
        if self.live_debug:
            self.debug("LD F, V{:01x}".format(ins.x))

        self.i = (FONT_START + FONT_GLYPH_SIZE * self.v[ins.x]) & ADDR_MASK
        self.inc_pc()

    def _Fx33(self, ins):  # LD B, Vx
        if self.live_debug:
            self.debug("LD B, V{:01x}".format(ins.x))

        val = self.v[ins.x]
        i = self.i
        self.ram.write(i, val // 100)                           # Most-significant digit
        self.ram.write((i + 1) & ADDR_MASK, (val // 10) % 10)   # Middle digit
        self.ram.write((i + 2) & ADDR_MASK, val % 10)           # Least-significant digit
        self.inc_pc()

    def _Fx55(self, ins):  # LD [I], Vx
        if self.live_debug:
            self.debug("LD [I], V{:01x}".format(ins.x))

        i = self.i

        for reg in range(ins.x + 1):
            self.ram.write((i + reg) & ADDR_MASK, self.v[reg])

        # I ends up one past the last byte written
        self.i = (i + ins.x + 1) & ADDR_MASK
        self.inc_pc()

    def _Fx65(self, ins):  # LD Vx, [I]
        if self.live_debug:
            self.debug("LD V{:01x}, [I]".format(ins.x))

        i = self.i

        for reg in range(ins.x + 1):
            self.v[reg] = self.ram.read((i + reg) & ADDR_MASK)

        self.i = (i + ins.x + 1) & ADDR_MASK
        self.inc_pc()
