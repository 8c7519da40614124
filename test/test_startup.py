#!/usr/bin/env python3

__copyright__ = "Copyright (C) 2022 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from chipvm import parse_args, run
from cvm import build_machine, main, StartupError
from cvm.constants import DEFAULT_KEYMAP


class TestStartup(unittest.TestCase):
    def _args(self, **overrides):
        args = vars(parse_args(["NoFile.ch8", "-r", "null"]))
        args.update(overrides)
        return args

    def test_startup_defaults(self):
        args = self._args()
        self.assertEqual("NoFile.ch8", args["filename"])
        self.assertEqual(DEFAULT_KEYMAP, args["keymap"])
        self.assertIsNone(args["cycle_interval"])
        self.assertFalse(args["strict"])
        self.assertFalse(args["debug"])

    def test_startup_build_machine(self):
        machine = build_machine(strict=True, cycle_interval=0.005)
        self.assertTrue(machine.cpu.strict)
        self.assertEqual(0.005, machine.cycle_interval)
        self.assertEqual(0x200, machine.cpu.pc)

    def test_startup_missing_file(self):
        with redirect_stdout(io.StringIO()):
            self.assertRaises(StartupError, main, self._args())

    def test_startup_negative_interval(self):
        with redirect_stdout(io.StringIO()):
            self.assertRaises(StartupError, main, self._args(cycle_interval=-1.0))

    def test_startup_run_reports_errors(self):
        errors = io.StringIO()

        with redirect_stdout(io.StringIO()), redirect_stderr(errors):
            self.assertEqual(1, run(["NoFile.ch8", "-r", "null"]))

        self.assertIn("StartupError", errors.getvalue())


if __name__ == "__main__":
    unittest.main()
