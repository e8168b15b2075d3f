"""
Test cases for the console entry point.
"""
import types
import unittest
from unittest.mock import patch
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesturepad.__main__ import run


def fake_main_module(exc):
    module = types.ModuleType("gesturepad.main")

    async def main(argv=None):
        raise exc

    module.main = main
    return module


class TestRun(unittest.TestCase):
    """Test how run() ends the event loop."""

    def test_ctrl_c_exits_quietly(self):
        with patch.dict(sys.modules, {"gesturepad.main": fake_main_module(KeyboardInterrupt())}):
            with self.assertLogs("gesturepad.__main__", level="INFO") as logs:
                run()
        self.assertIn("Application interrupted by user", logs.output[0])

    def test_errors_propagate(self):
        with patch.dict(sys.modules, {"gesturepad.main": fake_main_module(RuntimeError("no camera"))}):
            with self.assertRaises(RuntimeError):
                run()


if __name__ == '__main__':
    unittest.main()
