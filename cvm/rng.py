#!/usr/bin/env python3

"""
Random Byte Source

Feeds the RND instruction.  Each machine gets its own generator, so a seeded
machine behaves identically on every run without disturbing the global random
state.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from random import Random


class RandomByteSource:
    def __init__(self, seed=None):
        self.generator = Random(seed)

    def next_byte(self):
        return self.generator.randint(0, 0xFF)
