#!/usr/bin/env python3

"""
Framebuffer Emulator

Pixels are written here by the CPU, and only handed to the host (as a complete
snapshot) when the 60Hz-ish timer tick finds the buffer has changed.  Programs
cannot write directly into video memory.  The screen is cleared in one go, or
altered by XORing sprite pixels into it.

Coordinates always wrap around the edges of the 64x32 display, rather than
being clipped.  A pixel being switched off by an XOR is reported back as a
collision, which the CPU turns into the Vf flag.

Internally, the pixels are kept one byte each in a RAM bank (row-major), which
keeps the XOR path fast and lets the bank be reused for the snapshot.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import VID_WIDTH, VID_HEIGHT
from .ram import RAM


class Framebuffer:
    def __init__(self, vid_width=VID_WIDTH, vid_height=VID_HEIGHT):
        self.vid_width = vid_width
        self.vid_height = vid_height
        self.vid_size = vid_width * vid_height
        self.vram = RAM(self.vid_size, with_font=False)
        # The first timer tick should always publish a frame, so hosts can show a blank screen straight away
        self.dirty = True

    def clear(self):
        mem = self.vram.mem

        if any(mem):
            mem[:] = bytes(self.vid_size)
            self.dirty = True

    def xor_pixel(self, x, y):
        # Returns True if a set pixel was switched off (a collision)
        vram_loc = (y % self.vid_height) * self.vid_width + (x % self.vid_width)
        pixel = self.vram.read(vram_loc)
        self.vram.write(vram_loc, pixel ^ 1)
        self.dirty = True
        return pixel != 0

    def get_pixel(self, x, y):
        return self.vram.read((y % self.vid_height) * self.vid_width + (x % self.vid_width)) != 0

    def snapshot(self):
        # Immutable copy, safe to hand to another thread.  First axis is rows, second is columns.
        mem = self.vram.mem
        vid_width = self.vid_width
        return tuple(
            tuple(bool(pixel) for pixel in mem[row:row + vid_width])
            for row in range(0, self.vid_size, vid_width)
        )

    def flush(self):
        # Returns a snapshot if anything changed since the last flush, otherwise None
        if not self.dirty:
            return None

        self.dirty = False
        return self.snapshot()

    def get_vid_size(self):
        return self.vid_width, self.vid_height
