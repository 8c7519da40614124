#!/usr/bin/env python3

"""
Null Audio Plugin

Serves as a base class for other Audio plugins.  Can be used on its own if no
sound is required.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Audio:
    def __init__(self):
        # Total time requested, which the null device tracks even though it stays silent
        self.tones_played = 0
        self.milliseconds_played = 0

    def play_tone(self, milliseconds):
        # Sound the buzzer for the given duration, without blocking
        self.tones_played += 1
        self.milliseconds_played += milliseconds

    def shutdown(self):
        pass

    def is_null(self):
        # Only the null audio device should return True
        return True
