"""
Integration test to verify all components work together for a full
detect -> snapshot -> dispatch cycle.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesturepad import (
    Button,
    ControllerProto,
    DetectionEntity,
    GestureProcessor,
    Keypoint,
    MockController,
    OutputDispatcher,
    load_config,
)
from gesturepad.features import HAND_LANDMARKS


def make_hand(wrist, pinky_curled=False):
    wx, wy = wrist
    keypoints = [Keypoint(x=float(wx), y=float(wy - 50)) for _ in range(21)]
    keypoints[HAND_LANDMARKS['wrist']] = Keypoint(x=float(wx), y=float(wy))
    keypoints[HAND_LANDMARKS['index_finger_mcp']] = Keypoint(x=float(wx), y=float(wy - 40))
    keypoints[HAND_LANDMARKS['thumb_ip']] = Keypoint(x=float(wx + 30), y=float(wy - 30))
    keypoints[HAND_LANDMARKS['thumb_tip']] = Keypoint(x=float(wx + 20), y=float(wy - 30))
    keypoints[HAND_LANDMARKS['index_finger_dip']] = Keypoint(x=float(wx), y=float(wy - 80))
    keypoints[HAND_LANDMARKS['index_finger_tip']] = Keypoint(x=float(wx), y=float(wy - 100))
    keypoints[HAND_LANDMARKS['pinky_finger_pip']] = Keypoint(x=float(wx - 20), y=float(wy - 70))
    pinky_y = wy - 60 if pinky_curled else wy - 85
    keypoints[HAND_LANDMARKS['pinky_finger_dip']] = Keypoint(x=float(wx - 20), y=float(pinky_y))
    return DetectionEntity(keypoints=keypoints, handedness="Left")


class TestIntegration(unittest.IsolatedAsyncioTestCase):
    """Drive the processor and dispatcher with a scripted hand trajectory."""

    async def asyncSetUp(self):
        self.cfg = load_config()
        self.controller = MockController()
        self.processor = GestureProcessor(self.cfg)
        self.dispatcher = OutputDispatcher(self.controller, self.cfg.buttons)

    async def run_frame(self, hands, t_now):
        snapshot = self.processor.process_frame(None, hands, t_now)
        return await self.dispatcher.dispatch(snapshot)

    def test_mock_controller_implements_protocol(self):
        self.assertIsInstance(MockController(), ControllerProto)

    async def test_hand_session(self):
        # Calibrate the anchor, then lean left, curl the pinky, then lose the hand
        await self.run_frame([make_hand((300, 300))], 0.0)
        self.assertEqual(self.controller.pressed, set())

        await self.run_frame([make_hand((260, 300))], 0.5)
        self.assertIn(Button.LEFT, self.controller.pressed)

        await self.run_frame([make_hand((260, 300), pinky_curled=True)], 0.6)
        self.assertIn(Button.B, self.controller.pressed)

        await self.run_frame([], 0.7)
        self.assertEqual(self.controller.pressed, set())
        self.assertEqual(self.controller.press_count, self.controller.release_count)

    async def test_release_all_on_shutdown(self):
        await self.run_frame([make_hand((300, 300))], 0.0)
        await self.run_frame([make_hand((300, 340))], 0.5)
        self.assertIn(Button.DOWN, self.controller.pressed)

        await self.dispatcher.release_all()
        self.assertEqual(self.controller.pressed, set())


if __name__ == '__main__':
    unittest.main()
