#!/usr/bin/env python3

"""
Call Stack Emulator

Return addresses are kept outside of system RAM, as no program can address the
stack directly.  A wrapped list gives us push/pop for free, and the depth of
the list doubles as the stack pointer.

Unlike the original hardware, running off either end of the stack is never
allowed to corrupt anything else.  It is reported as a StackError instead.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import STACK_SIZE


class StackError(Exception):
    pass


class Stack:
    def __init__(self, size=STACK_SIZE):
        self.items = []
        self.size = size

    def push(self, item):
        if len(self.items) >= self.size:
            raise StackError("Stack overflow ({} return addresses already held)".format(self.size))

        self.items.append(item)

    def pop(self):
        try:
            return self.items.pop()
        except IndexError:
            raise StackError("Stack underflow (return with no matching call)") from None

    @property
    def sp(self):
        return len(self.items)

    def get_items(self):
        # For debugging
        return self.items
