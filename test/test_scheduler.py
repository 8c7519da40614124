#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import unittest
from cvm import build_machine
from cvm.audio.a_null import Audio
from cvm.cpu import CPUError
from cvm.renderers.r_null import Renderer
from cvm.scheduler import FrameEvent, ToneEvent

# Exact binary fractions, so repeated advances never drift below the 20ms threshold
TICK = 0.03125
SHORT = 0.00390625


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class ScriptedInputs:
    # Quits after a fixed number of polls, pressing keys on the way
    def __init__(self, polls, presses=None):
        self.polls = polls
        self.presses = presses or {}
        self.count = 0

    def process_messages(self, machine):
        self.count += 1

        if self.count in self.presses:
            machine.key_down(self.presses[self.count])

        return self.count > self.polls


class TestScheduler(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.machine = build_machine(seed=1)
        self.machine.clock = self.clock
        self.cpu = self.machine.cpu

    def _load(self, image):
        self.cpu.load(image)

    def test_scheduler_first_cycle_ticks(self):
        self._load(b"\x12\x00")
        self.machine.cycle()
        events = self.machine.get_events()
        # The initial blank frame is published straight away
        self.assertEqual(1, len(events))
        self.assertIsInstance(events[0], FrameEvent)

    def test_scheduler_timer_threshold(self):
        self._load(b"\x12\x00")
        self.cpu.dt = 10
        self.machine.cycle()
        self.assertEqual(9, self.cpu.dt)

        # Not enough time has passed for another tick
        for _ in range(3):
            self.clock.advance(SHORT)
            self.machine.cycle()

        self.assertEqual(9, self.cpu.dt)
        self.clock.advance(4 * SHORT)
        self.machine.cycle()
        self.assertEqual(8, self.cpu.dt)

    def test_scheduler_delay_timer_decay(self):
        self._load(b"\x12\x00")
        self.machine.cycle()  # Use up the first tick
        self.cpu.dt = 5

        for _ in range(5):
            self.clock.advance(TICK)
            self.machine.cycle()

        self.assertEqual(0, self.cpu.dt)

        for _ in range(3):
            self.clock.advance(TICK)
            self.machine.cycle()

        self.assertEqual(0, self.cpu.dt)

    def test_scheduler_delay_timer_program(self):
        # LD V0, 3 / LD DT, V0 / LD V1, DT / JP 0x204
        self._load(b"\x60\x03\xF0\x15\xF1\x07\x12\x04")
        self.machine.cycle()
        self.clock.advance(TICK)
        self.machine.cycle()  # DT set to 3, then ticked down to 2
        self.assertEqual(2, self.cpu.dt)
        self.machine.cycle()
        self.assertEqual(2, self.cpu.v[0x1])

    def test_scheduler_tone(self):
        self._load(b"\x12\x00")
        self.machine.cycle()
        self.machine.get_events()
        self.cpu.st = 6
        self.clock.advance(TICK)
        self.machine.cycle()
        events = self.machine.get_events()
        self.assertEqual([ToneEvent(100)], events)
        self.assertEqual(0, self.cpu.st)

        # Only one pulse per request
        self.clock.advance(TICK)
        self.machine.cycle()
        self.assertEqual([], self.machine.get_events())

    def test_scheduler_frame_only_when_dirty(self):
        # LD I, font 0 / DRW V0, V0, 5 / JP 0x204
        self._load(b"\xA0\x00\xD0\x05\x12\x04")
        self.machine.cycle()
        self.assertEqual(1, len(self.machine.get_events()))  # Initial frame
        self.clock.advance(TICK)
        self.machine.cycle()  # Draws
        events = self.machine.get_events()
        self.assertEqual(1, len(events))
        self.assertEqual((True, True, True, True, False), events[0].pixels[0][:5])
        self.assertEqual((True, False, False, True, False), events[0].pixels[1][:5])
        self.clock.advance(TICK)
        self.machine.cycle()  # Just loops
        self.assertEqual([], self.machine.get_events())

    def test_scheduler_key_events(self):
        # LD V2, K / JP 0x202
        self._load(b"\xF2\x0A\x12\x02")

        for _ in range(4):
            self.machine.cycle()
            self.assertEqual(0x200, self.cpu.pc)

        self.machine.key_down(0x9)
        self.machine.key_down(0x4)
        self.machine.cycle()
        self.assertEqual(0x202, self.cpu.pc)
        self.assertEqual(0x4, self.cpu.v[0x2])
        self.machine.cycle()
        self.assertEqual(0x202, self.cpu.pc)

    def test_scheduler_key_up(self):
        self._load(b"\x12\x00")
        self.machine.key_down(0x1)
        self.machine.cycle()
        self.assertTrue(self.cpu.keys[0x1])
        self.machine.key_up(0x1)
        self.machine.cycle()
        self.assertFalse(self.cpu.keys[0x1])

    def test_scheduler_bad_key(self):
        self.assertRaises(CPUError, self.machine.key_down, 0x10)
        self.assertRaises(CPUError, self.machine.key_up, -1)

    def test_scheduler_clear_and_loop(self):
        self._load(b"\x00\xE0\x12\x02")

        for _ in range(50):
            self.clock.advance(0.01)
            self.machine.cycle()

        self.assertEqual(0x202, self.cpu.pc)
        self.assertFalse(any(any(row) for row in self.machine.framebuffer.snapshot()))

        for event in self.machine.get_events():
            self.assertFalse(any(any(row) for row in event.pixels))

    def test_scheduler_clear_then_jump_to_start(self):
        self._load(b"\x00\xE0\x12\x00")

        for _ in range(51):
            self.clock.advance(0.01)
            self.machine.cycle()
            self.assertIn(self.cpu.pc, (0x200, 0x202))

        # An odd number of cycles leaves us back at the start
        self.assertEqual(0x202, self.cpu.pc)
        self.machine.cycle()
        self.assertEqual(0x200, self.cpu.pc)
        self.assertFalse(any(any(row) for row in self.machine.framebuffer.snapshot()))

    def test_scheduler_run(self):
        self._load(b"\xA0\x00\xD0\x05\xC3\xFF\x60\x06\xF0\x18\x12\x0A")
        self.machine.cycle_interval = 0
        renderer = Renderer()
        audio = Audio()
        self.machine.run(ScriptedInputs(6), renderer, audio)
        self.assertEqual(6, self.machine.cycle_count)
        self.assertIsNotNone(renderer.last_frame)
        self.assertIn("FPS", renderer.title)

    def test_scheduler_run_tone(self):
        # LD V0, 12 / LD ST, V0 / JP 0x204
        self._load(b"\x60\x0C\xF0\x18\x12\x04")
        self.machine.cycle_interval = 0
        audio = Audio()

        class AdvancingInputs(ScriptedInputs):
            def process_messages(inner_self, machine):
                self.clock.advance(TICK)
                return super().process_messages(machine)

        self.machine.run(AdvancingInputs(4), Renderer(), audio)
        self.assertEqual(1, audio.tones_played)
        self.assertEqual(200, audio.milliseconds_played)

    def test_scheduler_run_keys(self):
        self._load(b"\xF5\x0A\x12\x02")
        self.machine.cycle_interval = 0
        self.machine.run(ScriptedInputs(5, presses={3: 0xE}), Renderer(), Audio())
        self.assertEqual(0xE, self.cpu.v[0x5])


if __name__ == "__main__":
    unittest.main()
