#!/usr/bin/env python3

"""
RAM Emulator

A flat 4KB byte store.  The system font lives at the very bottom of memory, and
programs are loaded from 0x200 upwards.  Everything in between (and anything
after the loaded program) starts zeroed.

Reads are unchecked for speed, but all writes are bounds-checked so that a bad
address can never silently extend the memory.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import MEM_SIZE, PROGRAM_START, MAX_IMAGE_SIZE, FONT_START, SYSTEM_FONT


class RAMError(Exception):
    pass


class RAM:
    def __init__(self, mem_size=MEM_SIZE, with_font=True):
        self.mem = memoryview(bytearray(mem_size))
        self.mem_top = mem_size - 1
        self.mem_size = mem_size

        if with_font:
            self.write_block(FONT_START, SYSTEM_FONT)

    def read(self, location):
        return self.mem[location]

    def read_block(self, location, size=1):
        return self.mem[location:location + size]

    def write(self, location, byte):
        self.check_overflow(location)
        self.mem[location] = byte

    def write_block(self, location, block):
        block_size = len(block)
        block_top = location + block_size
        self.check_overflow(block_top - 1)
        self.mem[location:block_top] = block

    def check_overflow(self, location):
        if location > self.mem_top or location < 0:
            raise RAMError("Memory overflow at 0x{:04x}".format(location))

    def load_image(self, image):
        # Refuse oversized images up front, so nothing is written when the program doesn't fit
        if len(image) > MAX_IMAGE_SIZE:
            raise RAMError(
                "Program image is {} bytes, but only {} bytes are available".format(len(image), MAX_IMAGE_SIZE)
            )

        self.write_block(PROGRAM_START, image)
