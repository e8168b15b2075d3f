"""
Test cases for the anchor tracker and quadrant classifier.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gesturepad.anchor import AnchorTracker, classify_quadrant
from gesturepad.features import HAND_LANDMARKS
from gesturepad.types import AnchorPoint, DetectionEntity, Keypoint


def point(x, y):
    return Keypoint(x=float(x), y=float(y))


def make_hand(wrist, knuckle):
    keypoints = [point(0, 0) for _ in range(21)]
    keypoints[HAND_LANDMARKS['wrist']] = point(*wrist)
    keypoints[HAND_LANDMARKS['index_finger_mcp']] = point(*knuckle)
    return DetectionEntity(keypoints=keypoints, handedness="Left")


class TestClassifyQuadrant(unittest.TestCase):
    """Test the four-way quadrant classifier."""

    def setUp(self):
        self.center = point(0, 0)

    def classify(self, x, y, inner=10, outer=100):
        return classify_quadrant(self.center, point(x, y), inner, outer)

    def test_axes(self):
        self.assertEqual(self.classify(50, 0), "right")
        self.assertEqual(self.classify(-50, 0), "left")
        self.assertEqual(self.classify(0, -50), "up")
        self.assertEqual(self.classify(0, 50), "down")

    def test_dominant_axis(self):
        self.assertEqual(self.classify(40, 10), "right")
        self.assertEqual(self.classify(-10, 40), "down")

    def test_ties_resolve_vertically(self):
        self.assertEqual(self.classify(30, 30), "down")
        self.assertEqual(self.classify(-30, -30), "up")
        self.assertEqual(self.classify(30, -30), "up")

    def test_dead_zone_and_cutoff(self):
        self.assertEqual(self.classify(5, 0), "none")
        self.assertEqual(self.classify(200, 0), "none")
        self.assertEqual(self.classify(10, 0), "right")
        self.assertEqual(self.classify(100, 0), "right")

    def test_point_on_center_is_none(self):
        self.assertEqual(self.classify(0, 0), "none")
        self.assertEqual(self.classify(0, 0, inner=0), "none")

    def test_missing_anchor_is_none(self):
        self.assertEqual(classify_quadrant(None, point(50, 0), 10, 100), "none")
        self.assertEqual(classify_quadrant(self.center, None, 10, 100), "none")

    def test_total_over_grid(self):
        """Every point gets exactly one label, and the same one every time."""
        labels = {"none", "left", "right", "up", "down"}
        for x in range(-120, 121, 15):
            for y in range(-120, 121, 15):
                first = self.classify(x, y)
                self.assertIn(first, labels)
                self.assertEqual(self.classify(x, y), first)


class TestAnchorTracker(unittest.TestCase):
    """Test the throttled anchor tracker."""

    def setUp(self):
        self.tracker = AnchorTracker(throttle_s=3.0)

    def test_unset_anchor(self):
        self.assertIsNone(self.tracker.anchor)
        self.assertEqual(self.tracker.classify(point(50, 0)), "none")

    def test_updates_inside_window_are_dropped(self):
        """Commit at 0 ms, drop at 1000 ms, commit again at 3100 ms."""
        self.assertTrue(self.tracker.update_reference_point(point(100, 100), 40, t_now=0.0))
        self.assertFalse(self.tracker.update_reference_point(point(200, 200), 40, t_now=1.0))
        self.assertEqual(self.tracker.anchor, AnchorPoint(point=point(100, 100), radius=40))

        self.assertTrue(self.tracker.update_reference_point(point(300, 300), 50, t_now=3.1))
        self.assertEqual(self.tracker.anchor, AnchorPoint(point=point(300, 300), radius=50))

    def test_window_is_measured_from_last_commit(self):
        self.tracker.update_reference_point(point(100, 100), 40, t_now=0.0)
        self.tracker.update_reference_point(point(150, 150), 40, t_now=2.9)
        self.assertTrue(self.tracker.update_reference_point(point(200, 200), 40, t_now=3.0))
        self.assertEqual(self.tracker.anchor.point, point(200, 200))

    def test_non_positive_radius_is_rejected(self):
        self.assertFalse(self.tracker.update_reference_point(point(100, 100), 0, t_now=0.0))
        self.assertFalse(self.tracker.update_reference_point(point(100, 100), -5, t_now=0.1))
        self.assertIsNone(self.tracker.anchor)
        # A rejected radius does not start the throttle window
        self.assertTrue(self.tracker.update_reference_point(point(100, 100), 40, t_now=0.2))

    def test_short_window(self):
        tracker = AnchorTracker(throttle_s=0.3)
        tracker.update_reference_point(point(0, 0), 10, t_now=0.0)
        self.assertFalse(tracker.update_reference_point(point(5, 5), 10, t_now=0.2))
        self.assertTrue(tracker.update_reference_point(point(5, 5), 10, t_now=0.35))

    def test_update_from_hand(self):
        hand = make_hand(wrist=(300, 300), knuckle=(300, 260))
        self.assertTrue(self.tracker.update_from_hand(hand, t_now=0.0))
        self.assertEqual(self.tracker.anchor.point, point(300, 300))
        self.assertAlmostEqual(self.tracker.anchor.radius, 60.0)

    def test_update_from_upside_down_hand_is_ignored(self):
        hand = make_hand(wrist=(300, 260), knuckle=(300, 300))
        self.assertFalse(self.tracker.update_from_hand(hand, t_now=0.0))
        self.assertIsNone(self.tracker.anchor)

    def test_classify_against_anchor(self):
        self.tracker.update_reference_point(point(300, 300), 60, t_now=0.0)
        # inner radius = 60 * 0.4 = 24
        self.assertEqual(self.tracker.classify(point(310, 300)), "none")
        self.assertEqual(self.tracker.classify(point(260, 300)), "left")
        self.assertEqual(self.tracker.classify(point(300, 340)), "down")
        self.assertEqual(self.tracker.classify(point(400, 300)), "none")
        self.assertEqual(self.tracker.classify(None), "none")

    def test_reset(self):
        self.tracker.update_reference_point(point(100, 100), 40, t_now=0.0)
        self.tracker.reset()
        self.assertIsNone(self.tracker.anchor)
        self.assertTrue(self.tracker.update_reference_point(point(200, 200), 40, t_now=0.5))


if __name__ == '__main__':
    unittest.main()
