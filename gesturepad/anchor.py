"""
Throttled anchor tracking and quadrant classification.

The anchor is a slowly updating reference point (center + radius) around a
tracked hand. Fast pointer motion is classified against it into one of four
directional quadrants, with a dead zone in the middle and a cutoff outside.
"""
import logging
import math
from typing import Optional

from .features import HAND_LANDMARKS
from .types import AnchorPoint, DetectionEntity, Keypoint, Quadrant, QUADRANT_NONE

logger = logging.getLogger(__name__)

DEFAULT_THROTTLE_S = 3.0
DEFAULT_RADIUS_SCALE = 1.5
DEFAULT_INNER_RATIO = 0.4


def classify_quadrant(center: Optional[Keypoint], point: Optional[Keypoint],
                      inner_radius: float, outer_radius: float) -> Quadrant:
    """
    Classify ``point`` into a quadrant around ``center``.

    Args:
        center: Anchor center (None if no anchor has been committed)
        point: Point being classified
        inner_radius: Dead zone radius; closer points are "none"
        outer_radius: Cutoff radius; farther points are "none"

    Returns:
        "left", "right", "up", "down" or "none". Ties between the axes
        resolve to the vertical axis.
    """
    if center is None or point is None:
        return QUADRANT_NONE

    dx = point.x - center.x
    dy = point.y - center.y
    r = math.hypot(dx, dy)

    if not math.isfinite(r) or r < inner_radius or r > outer_radius:
        return QUADRANT_NONE
    if r == 0:
        return QUADRANT_NONE

    if abs(dx) > abs(dy):
        return "left" if dx < 0 else "right"
    return "up" if dy < 0 else "down"


class AnchorTracker:
    """
    Holds the reference point for one tracked hand.

    Updates are rate-limited: once a point is committed, further updates are
    dropped until ``throttle_s`` seconds have passed. Dropped updates are not
    queued.
    """

    def __init__(self, throttle_s: float = DEFAULT_THROTTLE_S,
                 radius_scale: float = DEFAULT_RADIUS_SCALE,
                 inner_ratio: float = DEFAULT_INNER_RATIO):
        self.throttle_s = throttle_s
        self.radius_scale = radius_scale
        self.inner_ratio = inner_ratio
        self._anchor: Optional[AnchorPoint] = None
        self._last_commit: Optional[float] = None

    @property
    def anchor(self) -> Optional[AnchorPoint]:
        """Last committed anchor, or None if unset."""
        return self._anchor

    def update_reference_point(self, point: Keypoint, radius: float, t_now: float) -> bool:
        """
        Commit a new anchor unless the throttle window is still open.

        Args:
            point: New anchor center
            radius: Anchor radius in pixels, must be positive
            t_now: Current timestamp in seconds

        Returns:
            True if the anchor was replaced
        """
        if not math.isfinite(radius) or radius <= 0:
            return False

        if self._last_commit is not None and t_now - self._last_commit < self.throttle_s:
            return False

        self._anchor = AnchorPoint(point=point, radius=radius)
        self._last_commit = t_now
        logger.debug("Anchor committed at (%.1f, %.1f) r=%.1f", point.x, point.y, radius)
        return True

    def update_from_hand(self, hand: DetectionEntity, t_now: float) -> bool:
        """Recalibrate around the wrist, sized by the wrist-to-knuckle span."""
        wrist = hand.get(HAND_LANDMARKS['wrist'])
        knuckle = hand.get(HAND_LANDMARKS['index_finger_mcp'])
        if wrist is None or knuckle is None:
            return False
        radius = (wrist.y - knuckle.y) * self.radius_scale
        return self.update_reference_point(wrist, radius, t_now)

    def classify(self, point: Optional[Keypoint]) -> Quadrant:
        """Classify ``point`` against the current anchor."""
        if self._anchor is None:
            return QUADRANT_NONE
        radius = self._anchor.radius
        return classify_quadrant(self._anchor.point, point, radius * self.inner_ratio, radius)

    def reset(self) -> None:
        self._anchor = None
        self._last_commit = None
