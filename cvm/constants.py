#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

# App identification
APP_NAME = "ChipVM"
APP_VERSION = "1.0.0"
APP_COPYRIGHT = "Copyright (C) 2022 Gregory Maynard-Hoare, licensed under GNU Affero General Public License v3.0"
APP_INTRO = "{} V{} -- ".format(APP_NAME, APP_VERSION)

# Memory layout
MEM_SIZE = 0x1000        # 4KB address space
ADDR_MASK = 0xFFF        # Every address (PC, I, and anything derived from them) stays inside the address space
PROGRAM_START = 0x200    # Programs are loaded (and start executing) here
MAX_IMAGE_SIZE = MEM_SIZE - PROGRAM_START
FONT_START = 0x000
FONT_GLYPH_SIZE = 5      # Bytes per hex digit glyph

# Machine geometry
NUM_REGISTERS = 0x10
NUM_KEYS = 0x10
STACK_SIZE = 256
VID_WIDTH = 64
VID_HEIGHT = 32

# Timing, in seconds unless stated
TIMER_INTERVAL = 0.02          # Timers and frame output are serviced at most this often
DEFAULT_CYCLE_INTERVAL = 0.01  # One instruction is executed per cycle
TONE_MS_PER_TICK = 1000.0 / 60.0

# Default mappings for keys 0-F, later populated into a dictionary.  These are PyGame keyscans laid out in the usual
# 4x4 block on a QWERTY keyboard:
#
#   1 2 3 C        1 2 3 4
#   4 5 6 D   =>   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
DEFAULT_KEYMAP = "120,49,50,51,113,119,101,97,115,100,122,99,52,114,102,118"

# Hex digit glyphs 0-F, 4 pixels wide (high nibble) and 5 rows tall
SYSTEM_FONT = bytes((
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
))
