"""
Gesture state machines that turn per-frame detections into control signals.
"""
import logging
import math
from typing import List, Optional, Tuple

from .anchor import AnchorTracker
from .config import Cfg
from .features import (
    HAND_LANDMARKS,
    analyze_hand,
    detect_head_tilt,
    detect_head_turn,
    eyes_state,
    is_mouth_open,
)
from .types import (
    DebouncerState,
    DetectionEntity,
    FingerDirection,
    GestureSnapshot,
    Quadrant,
    QUADRANT_NONE,
)

logger = logging.getLogger(__name__)


def dominant_direction(dx: float, dy: float) -> FingerDirection:
    """Classify a displacement by its dominant axis; ties go vertical."""
    if abs(dx) > abs(dy):
        return "left" if dx < 0 else "right"
    return "up" if dy < 0 else "down"


class DirectionalDebouncer:
    """
    Converts a jittery 2D trajectory (e.g. the index fingertip) into a
    low-chatter discrete direction.

    Features:
    - Minimum travel distance before a movement counts
    - At most one accepted sample per suppression window
    - Same-direction suppression so a direction never repeats back to back
    - Immediate reset when the tracked point is lost
    """

    def __init__(self, threshold: float = 10.0, window_s: float = 0.3):
        """Initialize the debouncer in the idle state."""
        self.threshold = threshold
        self.window_s = window_s
        self._state = DebouncerState()
        self._direction: Optional[FingerDirection] = None
        self._previous_position: Optional[Tuple[float, float]] = None

    @property
    def direction(self) -> Optional[FingerDirection]:
        """Direction currently signalled, None if none."""
        return self._direction

    @property
    def previous_position(self) -> Optional[Tuple[float, float]]:
        """Position before the last accepted sample, for trail rendering."""
        return self._previous_position

    @property
    def state(self) -> DebouncerState:
        return DebouncerState(**vars(self._state))

    @property
    def is_tracking(self) -> bool:
        return self._state.last_x is not None

    def reset(self) -> None:
        """Return to idle and forget the last position and direction."""
        self._state = DebouncerState()
        self._direction = None
        self._previous_position = None

    def update(self, x: Optional[float], y: Optional[float], t_now: float) -> Optional[FingerDirection]:
        """
        Feed one sample and return the direction currently signalled.

        Args:
            x: Horizontal position in pixels (None if tracking is lost)
            y: Vertical position in pixels (None if tracking is lost)
            t_now: Current timestamp in seconds

        Returns:
            The new direction when a movement was accepted, None when it was
            suppressed, or the held value when the sample was ignored
        """
        if x is None or y is None:
            if self.is_tracking:
                logger.debug("Tracking lost, debouncer reset")
            self.reset()
            return None

        last = self._state
        if last.last_time is not None and t_now - last.last_time < self.window_s:
            return self._direction

        if last.last_x is None:
            self._state = DebouncerState(last_x=x, last_y=y, last_time=t_now)
            self._direction = None
            return None

        dx = x - last.last_x
        dy = y - last.last_y
        if math.hypot(dx, dy) < self.threshold:
            return self._direction

        new_direction = dominant_direction(dx, dy)
        last_direction = last.last_direction
        if new_direction == last_direction:
            # Suppressed; the same direction may fire again on the next move
            self._direction = None
            last_direction = None
        else:
            self._direction = new_direction
            last_direction = new_direction
            logger.debug("Finger direction: %s", new_direction)

        self._previous_position = (last.last_x, last.last_y)
        self._state = DebouncerState(
            last_x=x, last_y=y, last_time=t_now, last_direction=last_direction
        )
        return self._direction


class GestureProcessor:
    """
    Main gesture processor that builds one GestureSnapshot per frame.

    Face detections drive head turn/tilt, mouth and eyes. The tracked hand
    drives pinch states, the anchor quadrant (which overrides head
    turn/tilt) and the fingertip direction.
    """

    def __init__(self, cfg: Cfg):
        """Initialize gesture processor with configuration."""
        self.cfg = cfg
        self.anchor = AnchorTracker(
            throttle_s=cfg.anchor.throttle_ms / 1000.0,
            radius_scale=cfg.anchor.radius_scale,
            inner_ratio=cfg.anchor.inner_ratio,
        )
        self.finger = DirectionalDebouncer(
            threshold=cfg.debouncer.threshold_px,
            window_s=cfg.debouncer.window_ms / 1000.0,
        )
        self.tracked_hand: Optional[DetectionEntity] = None
        self.quadrant: Quadrant = QUADRANT_NONE

    def process_frame(self, faces: Optional[List[DetectionEntity]],
                      hands: Optional[List[DetectionEntity]],
                      t_now: float) -> GestureSnapshot:
        """
        Process one frame of detections.

        Args:
            faces: Face detections (None or empty if none)
            hands: Hand detections (None or empty if none)
            t_now: Current timestamp in seconds

        Returns:
            Snapshot with every signal that could be computed this frame
        """
        direction = tilt = mouth_open = eyes = None
        hand_state = finger_direction = None

        if self.cfg.face_enabled and faces:
            face = faces[0]
            face_cfg = self.cfg.face
            direction = detect_head_turn(face, face_cfg.turn_threshold_px)
            tilt = detect_head_tilt(face, face_cfg.tilt_threshold_px)
            mouth_open = is_mouth_open(face, face_cfg.mouth_threshold_px)
            eyes = eyes_state(face, face_cfg.eye_closed_ratio)

        self.quadrant = QUADRANT_NONE
        self.tracked_hand = None

        if self.cfg.hand_enabled:
            hand = self._find_tracked_hand(hands)
            if hand is None:
                self.finger.reset()
            else:
                self.tracked_hand = hand
                hand_state = analyze_hand(hand)

                self.quadrant = self.anchor.classify(hand.get(HAND_LANDMARKS['wrist']))
                if self.quadrant in ("left", "right"):
                    direction = self.quadrant
                elif self.quadrant in ("up", "down"):
                    tilt = self.quadrant
                self.anchor.update_from_hand(hand, t_now)

                tip = hand.get(HAND_LANDMARKS['index_finger_tip'])
                if tip is None:
                    finger_direction = self.finger.update(None, None, t_now)
                else:
                    finger_direction = self.finger.update(tip.x, tip.y, t_now)

        return GestureSnapshot(
            direction=direction,
            tilt=tilt,
            mouth_open=mouth_open,
            eyes=eyes,
            hand_state=hand_state,
            finger_direction=finger_direction,
        )

    def _find_tracked_hand(self, hands: Optional[List[DetectionEntity]]) -> Optional[DetectionEntity]:
        for hand in hands or ():
            if hand.handedness and hand.handedness.lower() == self.cfg.anchor.tracked_hand:
                return hand
        return None
