#!/usr/bin/env python3

"""
PyGame Input Plugin

Scans the PyGame event queue and passes key 'press' and 'release' events for
mapped keys on to the machine.  Escape, or closing the window, quits.

This needs the PyGame renderer to be active, as keyboard events are only
delivered to a PyGame window.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import pygame
from .i_null import Inputs as InputsBase


class Inputs(InputsBase):
    def __init__(self, keymap, renderer):
        self.pygame_methods = {
            pygame.QUIT:    self._pygame_quit,
            pygame.KEYDOWN: self._pygame_keydown,
            pygame.KEYUP:   self._pygame_keyup
        }

        super().__init__(keymap, renderer)

    def process_messages(self, machine):
        # Call PyGame method based on fast dictionary lookup of event
        quit_program = False

        for event in pygame.event.get():
            pygame_method = self.pygame_methods.get(event.type)

            if pygame_method and pygame_method(event, machine):  # Check via short circuit that we don't have 'None'
                quit_program = True  # Process more events, even if planning to quit

        return quit_program

    def _pygame_quit(self, event, machine):  # pylint: disable=unused-argument
        return True

    def _pygame_keydown(self, event, machine):
        hex_key = self.translate(event.key)

        if hex_key is not None:
            machine.key_down(hex_key)

        return False

    def _pygame_keyup(self, event, machine):
        if event.key == pygame.K_ESCAPE:
            return True

        hex_key = self.translate(event.key)

        if hex_key is not None:
            machine.key_up(hex_key)

        return False
