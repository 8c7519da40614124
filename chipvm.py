#!/usr/bin/env python3

__author__ = "Gregory Maynard-Hoare"
__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"
__version__ = "1.0.0"

import sys
from argparse import ArgumentParser
from cvm import main, StartupError
from cvm.constants import DEFAULT_KEYMAP
from cvm.cpu import CPUError
from cvm.inputs.i_null import InputsError
from cvm.ram import RAMError
from cvm.renderers.r_null import RendererError
from cvm.stack import StackError


def parse_args(argv=None):
    parser = ArgumentParser()
    parser.add_argument("filename", help="program image to execute (normally ending in .ch8 or .c8)")
    parser.add_argument(
        "-c", "--cycle_interval", type=float,
        help="set the time between instructions in milliseconds (default 10, 0 = uncapped)"
    )
    parser.add_argument(
        "-r", "--renderer", choices=["pygame", "null"],
        help="set the rendering, input, and audio systems (pygame by default if available, otherwise null)"
    )
    parser.add_argument(
        "-s", "--scale", type=int,
        help="set the window width in PyGame mode (default 640)"
    )
    parser.add_argument(
        "-m", "--mute", type=int, choices=[0, 1], default=0,
        help="mute the emulated audio.  0 = unmuted (default), 1 = muted"
    )
    parser.add_argument(
        "-k", "--keymap", default=DEFAULT_KEYMAP,
        help="redefine the 16 keyscan codes for keys 0-F.  Separate each decimal with a comma"
    )
    parser.add_argument(
        "--seed", type=int,
        help="seed the random number generator, for repeatable runs"
    )
    parser.add_argument(
        "--strict", action="store_true", default=False,
        help="halt on unrecognised instructions rather than silently skipping over them"
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", default=False,
        help="enable live debug output for every instruction executed.  Slows CPU execution"
    )
    return parser.parse_args(argv)  # Can call sys.exit(2) if args are incorrect


def run(argv=None):
    args = vars(parse_args(argv))

    # It is possible to start the emulator from a GUI by calling main with a dictionary
    try:
        main(args)
    except (StartupError, CPUError, StackError, RAMError, InputsError, RendererError) as e:
        print("{}: {}".format(type(e).__name__, e), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(run())
