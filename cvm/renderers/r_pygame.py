#!/usr/bin/env python3

"""
PyGame Renderer Plugin

Draws each frame snapshot onto an SDL window surface via PyGame.  The surface
is allocated at the emulated screen size, and then the contents are stretched
(in the correct aspect ratio using 'Nearest Neighbour' translation) to fit the
window itself.  This means we don't have to draw the same pixel multiple times.

Set pixels are drawn in the foreground colour, and clear ones in the background
colour.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .r_null import RendererError, Renderer as RendererBase
from ..constants import APP_NAME, VID_WIDTH, VID_HEIGHT

BACKGROUND_COLOUR = 0x222222
FOREGROUND_COLOUR = 0xDDDDDD


class Renderer(RendererBase):
    def __init__(self, scale=None, **kwargs):
        if scale is None:
            scale = 640  # Default window width if not supplied, or set to default

        if scale < VID_WIDTH:
            raise RendererError("Window width must be at least {} pixels.".format(VID_WIDTH))

        pygame.display.init()
        self.set_title(APP_NAME)
        self.scaled_size = (scale, scale // 2)
        self.display_surface = pygame.display.set_mode(self.scaled_size, 0, 8)
        self.display_surface.set_alpha(None)

        # Split compound RGB values for faster byte-based lookup later
        self.rgb_map = [
            bytes([i >> 16, (i >> 8) & 0xFF, i & 0xFF]) for i in (BACKGROUND_COLOUR, FOREGROUND_COLOUR)
        ]

        self.rgb_buffer = memoryview(bytearray(VID_WIDTH * VID_HEIGHT * 3))  # 24-bit
        super().__init__(scale)

    def draw_frame(self, pixels):
        super().draw_frame(pixels)
        rgb_buffer = self.rgb_buffer
        rgb_map = self.rgb_map
        rgb_location = 0

        # Update RGB buffer in-place to minimise allocations and PyGame calls
        for row in pixels:
            for pixel in row:
                rgb_buffer[rgb_location:rgb_location + 3] = rgb_map[pixel]
                rgb_location += 3

        # Blit the bytearray straight to the surface.  This is much quicker than very frequent PixelArray updates
        render_surface = pygame.image.frombuffer(rgb_buffer, (VID_WIDTH, VID_HEIGHT), "RGB")
        scaled_win = pygame.transform.scale(render_surface, self.scaled_size)
        self.display_surface.blit(scaled_win, (0, 0))
        pygame.display.flip()

    def set_title(self, title):
        super().set_title(title)
        pygame.display.set_caption(title)

    def shutdown(self):
        # PyGame currently segfaults if display.quit is called via __del__
        pygame.display.quit()
        super().shutdown()
