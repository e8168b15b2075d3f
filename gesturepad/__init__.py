"""
Gesture Gamepad

Turns per-frame face and hand landmarks into stable, edge-triggered
gamepad button presses: head turn/tilt, mouth open, closed eyes, finger
pinches, anchor quadrants and fingertip swipes.
"""

__version__ = "0.1.0"

from .types import (
    Button,
    ButtonEvent,
    ControllerProto,
    DetectionEntity,
    EyesState,
    GestureSnapshot,
    HandState,
    Keypoint,
)
from .config import load_config, Cfg
from .controller_mock import MockController
from .features import analyze_hand, detect_head_tilt, detect_head_turn, eyes_state, is_mouth_open
from .anchor import AnchorTracker, classify_quadrant
from .gestures import DirectionalDebouncer, GestureProcessor
from .dispatcher import OutputDispatcher

__all__ = [
    "Button",
    "ButtonEvent",
    "ControllerProto",
    "DetectionEntity",
    "EyesState",
    "GestureSnapshot",
    "HandState",
    "Keypoint",
    "load_config",
    "Cfg",
    "MockController",
    "analyze_hand",
    "detect_head_tilt",
    "detect_head_turn",
    "eyes_state",
    "is_mouth_open",
    "AnchorTracker",
    "classify_quadrant",
    "DirectionalDebouncer",
    "GestureProcessor",
    "OutputDispatcher",
]
