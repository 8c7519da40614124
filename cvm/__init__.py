#!/usr/bin/env python3

"""
Main Startup Module

Simply call main(args) to start the emulator, replacing args with a dictionary
of options.  This can be done via the Terminal or GUI.

All options must be supplied.  Defaults can be specified with a 'None'.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from .constants import APP_INTRO, APP_COPYRIGHT, DEFAULT_CYCLE_INTERVAL
from .cpu import CPU
from .debugger import Debugger
from .framebuffer import Framebuffer
from .ram import RAM
from .rng import RandomByteSource
from .scheduler import Scheduler
from .stack import Stack


class StartupError(Exception):
    pass


def build_machine(strict=False, seed=None, debug=False, cycle_interval=None):
    # Assemble a complete machine with no host attached.  Returns the scheduler, which holds the CPU.
    debugger = Debugger()
    debugger.set_live(debug)
    cpu = CPU(RAM(), Stack(), Framebuffer(), RandomByteSource(seed), debugger, strict=strict)
    return Scheduler(cpu, cycle_interval=DEFAULT_CYCLE_INTERVAL if cycle_interval is None else cycle_interval)


def main(args):
    print("".join((APP_INTRO, APP_COPYRIGHT)))
    opt_renderer = args["renderer"]
    auto_select_renderer = opt_renderer is None  # If necessary, try PyGame first, then fall back to no display
    mute_audio = args["mute"]

    # flake8: noqa: F401
    if auto_select_renderer or opt_renderer == "pygame":
        # pylint: disable=unused-import, import-outside-toplevel, raise-missing-from
        try:
            import pygame
        except ImportError:
            if auto_select_renderer:
                print("PyGame does not appear to be installed.  Running without a display.")
                opt_renderer = "null"
            else:
                raise StartupError(
                    "PyGame does not appear to be installed."
                )
        else:
            opt_renderer = "pygame"
            from .inputs.i_pygame import Inputs
            from .renderers.r_pygame import Renderer

            if mute_audio:
                from .audio.a_null import Audio
            else:
                from .audio.a_pygame import Audio

    if opt_renderer == "null":
        # pylint: disable=import-outside-toplevel
        from .inputs.i_null import Inputs
        from .renderers.r_null import Renderer
        from .audio.a_null import Audio

    cycle_interval_ms = args["cycle_interval"]

    if cycle_interval_ms is not None and cycle_interval_ms < 0:
        raise StartupError("The cycle interval cannot be negative.")

    machine = build_machine(
        strict=args["strict"],
        seed=args["seed"],
        debug=args["debug"],
        cycle_interval=None if cycle_interval_ms is None else cycle_interval_ms / 1000.0
    )

    # Read the program image and write it into RAM
    if not machine.cpu.load_file(args["filename"]):
        raise StartupError("Unable to load '{}'.  It may be missing, unreadable, or too large.".format(
            args["filename"]
        ))

    # Set up the host plugins.  Inputs are linked to the renderer in case it provides them too.
    renderer = Renderer(scale=args["scale"])
    inputs = Inputs(args["keymap"], renderer)
    audio = Audio()

    try:
        machine.run(inputs, renderer, audio)
    finally:
        # The machine has quit, so shut down the rendering framework.  __del__ cannot be relied upon when using PyPy
        audio.shutdown()
        inputs.shutdown()
        renderer.shutdown()
