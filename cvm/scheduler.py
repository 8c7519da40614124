#!/usr/bin/env python3

"""
Scheduler

Drives the CPU one instruction per cycle, and services the timers and display
on a separate, coarser cadence.  Every cycle checks a monotonic clock, but the
timers are only counted down (and the framebuffer only flushed) once at least
20ms have passed since they were last serviced.  This keeps the instruction
rate independent of the timer rate, so the cycle interval can be tuned freely.

Nothing here talks to the host directly.  Key presses arrive through a queue
which is drained at the start of each cycle, and frames and tones leave through
another queue.  Both are thread-safe, so a host may post keys from its own
event thread while the scheduler runs elsewhere.  Cycles themselves must never
run concurrently.
"""

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

from collections import namedtuple
from queue import SimpleQueue, Empty
from time import perf_counter
from .constants import APP_NAME, DEFAULT_CYCLE_INTERVAL, TIMER_INTERVAL, TONE_MS_PER_TICK
from .cpu import check_key

FrameEvent = namedtuple("FrameEvent", ("pixels",))  # 32 rows of 64 booleans
ToneEvent = namedtuple("ToneEvent", ("milliseconds",))


class Scheduler:
    def __init__(self, cpu, cycle_interval=DEFAULT_CYCLE_INTERVAL, clock=perf_counter):
        self.cpu = cpu
        self.framebuffer = cpu.framebuffer
        self.cycle_interval = cycle_interval
        self.clock = clock
        self.key_events = SimpleQueue()
        self.events = SimpleQueue()
        self.last_timer_time = float("-inf")  # Service the timers on the very first cycle
        self.cycle_count = 0

    def key_down(self, key):
        # Validate here, so a bad key is reported to whoever sent it rather than surfacing mid-cycle
        check_key(key)
        self.key_events.put((key, True))

    def key_up(self, key):
        check_key(key)
        self.key_events.put((key, False))

    def _apply_key_events(self):
        while True:
            try:
                key, down = self.key_events.get_nowait()
            except Empty:
                return

            self.cpu.set_key(key, down)

    def cycle(self):
        self._apply_key_events()
        self.cpu.step()
        self.cycle_count += 1

        this_time = self.clock()

        if this_time - self.last_timer_time >= TIMER_INTERVAL:
            self.last_timer_time = this_time
            self.tick_timers()

    def tick_timers(self):
        cpu = self.cpu

        if cpu.dt > 0:
            cpu.dt -= 1

        if cpu.st > 0:
            # The whole remaining duration goes out as one pulse, and the sound timer is spent
            self.events.put(ToneEvent(int(round(cpu.st * TONE_MS_PER_TICK))))
            cpu.st = 0

        pixels = self.framebuffer.flush()

        if pixels is not None:
            self.events.put(FrameEvent(pixels))

    def get_events(self):
        events = []

        while True:
            try:
                events.append(self.events.get_nowait())
            except Empty:
                return events

    def run(self, inputs, renderer, audio):
        # Main host loop.  Returns when the inputs plugin reports the user wants to quit.
        next_perf_report_time = 0
        perf_counter_fps = 0
        perf_counter_ops = 0

        while True:
            this_time = self.clock()  # Do this first for maximum precision

            # Performance counters
            if this_time >= next_perf_report_time:
                next_perf_report_time = int(this_time) + 1.0
                renderer.set_title("{} - {} FPS, {} OPS".format(APP_NAME, perf_counter_fps, perf_counter_ops))
                perf_counter_fps = 0
                perf_counter_ops = 0

            if inputs.process_messages(self):
                return

            self.cycle()
            perf_counter_ops += 1

            for event in self.get_events():
                if isinstance(event, FrameEvent):
                    renderer.draw_frame(event.pixels)
                    perf_counter_fps += 1
                else:
                    audio.play_tone(event.milliseconds)

            # Wait for the next cycle.  Do this last for maximum precision (takes into account time spent on this
            # cycle)
            next_time = this_time + self.cycle_interval

            while self.clock() < next_time:  # Unfortunately we have to do this to get the timing right
                pass
