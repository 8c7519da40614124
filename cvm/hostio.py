#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading program images from the host for later writing into RAM.  The
system font is built in (see constants), so program images are the only thing
read from disk.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            return f.read()
