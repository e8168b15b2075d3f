"""
Geometric feature extractors for face and hand detections.

All extractors are pure: they read a single frame's keypoints and return a
discrete label, or None when a required landmark is missing.
"""
from typing import Optional

from .types import DetectionEntity, Direction, EyesState, HandState, Tilt


# MediaPipe Face Mesh indices (refined landmarks, 478 points)
FACE_LANDMARKS = {
    'nose_tip': 1,
    'nose_bottom': 2,
    'nose_left_corner': 98,
    'nose_right_corner': 327,

    'upper_lip': 13,
    'lower_lip': 14,

    'left_lid_top': 159,
    'left_lid_bottom': 145,
    'left_iris_top': 470,
    'left_iris_bottom': 472,
    'right_lid_top': 386,
    'right_lid_bottom': 374,
    'right_iris_top': 475,
    'right_iris_bottom': 477,
}

# MediaPipe Hands indices
HAND_LANDMARKS = {
    'wrist': 0,
    'thumb_ip': 3,
    'thumb_tip': 4,
    'index_finger_mcp': 5,
    'index_finger_dip': 7,
    'index_finger_tip': 8,
    'pinky_finger_pip': 18,
    'pinky_finger_dip': 19,
}

DEFAULT_TURN_THRESHOLD = 5.0
DEFAULT_TILT_THRESHOLD = 5.0
DEFAULT_MOUTH_THRESHOLD = 10.0
DEFAULT_EYE_CLOSED_RATIO = 1.5


def _nose_points(face: Optional[DetectionEntity]):
    if face is None:
        return None
    points = (
        face.get(FACE_LANDMARKS['nose_tip']),
        face.get(FACE_LANDMARKS['nose_bottom']),
        face.get(FACE_LANDMARKS['nose_left_corner']),
        face.get(FACE_LANDMARKS['nose_right_corner']),
    )
    if any(p is None for p in points):
        return None
    return points


def detect_head_turn(face: Optional[DetectionEntity],
                     threshold: float = DEFAULT_TURN_THRESHOLD) -> Optional[Direction]:
    """
    Approximate head yaw from the horizontal offset of the nose tip.

    Args:
        face: Face detection (None if no face this frame)
        threshold: Dead band in pixels around a centered head

    Returns:
        "left" or "right", or None when centered or landmarks are missing
    """
    points = _nose_points(face)
    if points is None:
        return None
    tip, bottom, _, _ = points

    if abs(tip.x - bottom.x) <= threshold:
        return None
    return "right" if tip.x < bottom.x else "left"


def detect_head_tilt(face: Optional[DetectionEntity],
                     threshold: float = DEFAULT_TILT_THRESHOLD) -> Optional[Tilt]:
    """
    Approximate head pitch from the nose tip height against the nose corners.

    Image Y grows downward.

    Returns:
        "up" or "down", or None when level or landmarks are missing
    """
    points = _nose_points(face)
    if points is None:
        return None
    tip, _, left, right = points

    hi = max(left.y, right.y)
    lo = min(left.y, right.y)

    if lo <= tip.y <= hi and hi - lo <= threshold:
        return None
    if tip.y < hi:
        return "up"
    if tip.y > lo:
        return "down"
    return None


def is_mouth_open(face: Optional[DetectionEntity],
                  threshold: float = DEFAULT_MOUTH_THRESHOLD) -> Optional[bool]:
    """Return True when the inner lips are more than ``threshold`` px apart."""
    if face is None:
        return None
    upper = face.get(FACE_LANDMARKS['upper_lip'])
    lower = face.get(FACE_LANDMARKS['lower_lip'])
    if upper is None or lower is None:
        return None
    return abs(lower.y - upper.y) > threshold


def _eye_closed(face: DetectionEntity, side: str, ratio: float) -> Optional[bool]:
    iris_top = face.get(FACE_LANDMARKS[f'{side}_iris_top'])
    iris_bottom = face.get(FACE_LANDMARKS[f'{side}_iris_bottom'])
    lid_top = face.get(FACE_LANDMARKS[f'{side}_lid_top'])
    lid_bottom = face.get(FACE_LANDMARKS[f'{side}_lid_bottom'])
    if None in (iris_top, iris_bottom, lid_top, lid_bottom):
        return None

    iris_height = abs(iris_bottom.y - iris_top.y)
    lid_gap = abs(lid_bottom.y - lid_top.y)
    # A shut lid (gap 0) counts as closed
    return iris_height >= ratio * lid_gap


def eyes_state(face: Optional[DetectionEntity],
               ratio: float = DEFAULT_EYE_CLOSED_RATIO) -> Optional[EyesState]:
    """
    Detect closed eyes with a scale-invariant iris/lid ratio test.

    An eye is closed when the iris's visible height is at least ``ratio``
    times the gap between the eyelids.

    Returns:
        EyesState, or None if any iris or lid landmark is missing
    """
    if face is None:
        return None
    left = _eye_closed(face, 'left', ratio)
    right = _eye_closed(face, 'right', ratio)
    if left is None or right is None:
        return None
    return EyesState(left_closed=left, right_closed=right)


def analyze_hand(hand: Optional[DetectionEntity]) -> Optional[HandState]:
    """
    Compute pinch flags for a single hand.

    A finger counts as pressed when its tip has curled past the adjacent
    joint: along x for the thumb (mirrored by handedness), along y for the
    index and pinky fingers.

    Args:
        hand: Hand detection with handedness (None if no hand)

    Returns:
        HandState, or None if handedness or any keypoint is missing
    """
    if hand is None or not hand.handedness:
        return None

    thumb_ip = hand.get(HAND_LANDMARKS['thumb_ip'])
    thumb_tip = hand.get(HAND_LANDMARKS['thumb_tip'])
    index_dip = hand.get(HAND_LANDMARKS['index_finger_dip'])
    index_tip = hand.get(HAND_LANDMARKS['index_finger_tip'])
    pinky_pip = hand.get(HAND_LANDMARKS['pinky_finger_pip'])
    pinky_dip = hand.get(HAND_LANDMARKS['pinky_finger_dip'])
    if None in (thumb_ip, thumb_tip, index_dip, index_tip, pinky_pip, pinky_dip):
        return None

    side = hand.handedness.lower()
    if side == "left":
        thumb_pressed = thumb_tip.x > thumb_ip.x
    else:
        thumb_pressed = thumb_tip.x < thumb_ip.x

    return HandState(
        is_thumb_pressed=thumb_pressed,
        is_index_pressed=index_tip.y > index_dip.y,
        is_pinky_pressed=pinky_dip.y > pinky_pip.y,
        hand=side,
        keypoints=tuple(hand.keypoints),
    )
