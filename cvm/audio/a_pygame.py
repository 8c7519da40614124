#!/usr/bin/env python3

"""
PyGame Audio Plugin

Plays the buzzer within PyGame / SDL.

The buzzer has no pitch control, so a single cycle of a square wave is built
once at start-up and looped for as long as each tone lasts.  PyGame stops the
loop by itself when the requested time runs out, so nothing here blocks.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .a_null import Audio as AudioBase

PLAYBACK_FREQUENCY = 44100
TONE_FREQUENCY = 500.0
DEFAULT_VOLUME = 0.1


class Audio(AudioBase):
    def __init__(self):
        pygame.mixer.pre_init(PLAYBACK_FREQUENCY, size=8, channels=1, buffer=512, allowedchanges=0)
        pygame.mixer.init()

        # One full wave: first half high, second half low.  8-bit unsigned samples.
        samples_per_wave = int(PLAYBACK_FREQUENCY / TONE_FREQUENCY)
        half_wave = samples_per_wave // 2
        wave = bytearray(b"\xFF" * half_wave + b"\x00" * (samples_per_wave - half_wave))

        self.sound = pygame.mixer.Sound(buffer=wave)
        self.sound.set_volume(DEFAULT_VOLUME)
        super().__init__()

    def play_tone(self, milliseconds):
        super().play_tone(milliseconds)

        if milliseconds <= 0:
            return

        # A new tone replaces any still sounding
        self.sound.stop()
        self.sound.play(loops=-1, maxtime=int(milliseconds))

    def shutdown(self):
        if self.sound:
            self.sound.stop()

        pygame.mixer.quit()
        super().shutdown()

    def is_null(self):
        # Only the null audio device should return True
        return False
