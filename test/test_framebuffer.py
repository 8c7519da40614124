#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from cvm.framebuffer import Framebuffer


class TestFrameBuffer(unittest.TestCase):
    def setUp(self):
        self.framebuffer = Framebuffer()
        self.framebuffer_small = Framebuffer(4, 5)

    def test_framebuffer_size(self):
        self.assertEqual((64, 32), self.framebuffer.get_vid_size())
        pixels = self.framebuffer.snapshot()
        self.assertEqual(32, len(pixels))
        self.assertTrue(all(len(row) == 64 for row in pixels))
        self.assertFalse(any(any(row) for row in pixels))

    def test_framebuffer_writes(self):
        fb = self.framebuffer_small
        self.assertFalse(fb.xor_pixel(0, 0))
        self.assertEqual("0100000000000000000000000000000000000000", fb.vram.mem.hex())
        self.assertFalse(fb.xor_pixel(1, 1))
        self.assertEqual("0100000000010000000000000000000000000000", fb.vram.mem.hex())
        self.assertTrue(fb.xor_pixel(4, 5))  # Wraps around to 0, 0 and erases it
        self.assertEqual("0000000000010000000000000000000000000000", fb.vram.mem.hex())

    def test_framebuffer_snapshot_layout(self):
        fb = self.framebuffer_small
        fb.xor_pixel(3, 1)
        pixels = fb.snapshot()
        self.assertEqual(5, len(pixels))  # Rows first
        self.assertEqual((False, False, False, True), pixels[1])
        self.assertEqual((False, False, False, False), pixels[0])

    def test_framebuffer_clear(self):
        fb = self.framebuffer_small
        fb.xor_pixel(2, 2)
        fb.flush()
        fb.clear()
        self.assertEqual("0000000000000000000000000000000000000000", fb.vram.mem.hex())
        self.assertTrue(fb.dirty)

    def test_framebuffer_clear_blank(self):
        fb = self.framebuffer_small
        fb.flush()
        fb.clear()
        self.assertFalse(fb.dirty)

    def test_framebuffer_flush(self):
        fb = self.framebuffer_small
        # A fresh framebuffer always has a frame waiting
        self.assertIsNotNone(fb.flush())
        self.assertIsNone(fb.flush())
        fb.xor_pixel(0, 4)
        pixels = fb.flush()
        self.assertTrue(pixels[4][0])
        self.assertIsNone(fb.flush())

    def test_framebuffer_snapshot_is_copy(self):
        fb = self.framebuffer
        pixels = fb.snapshot()
        fb.xor_pixel(0, 0)
        self.assertFalse(pixels[0][0])
        self.assertTrue(fb.get_pixel(0, 0))


if __name__ == "__main__":
    unittest.main()
