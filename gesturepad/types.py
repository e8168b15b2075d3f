"""
Type definitions for the landmark-to-gamepad control engine.
"""
import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Literal, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable


Direction = Literal["left", "right"]
Tilt = Literal["up", "down"]
FingerDirection = Literal["left", "right", "up", "down"]
Quadrant = Literal["none", "left", "right", "up", "down"]

QUADRANT_NONE: Quadrant = "none"


class Button(IntEnum):
    """NES joypad button codes understood by the emulator back end."""
    A = 0
    B = 1
    SELECT = 2
    START = 3
    UP = 4
    DOWN = 5
    LEFT = 6
    RIGHT = 7


@dataclass(frozen=True)
class Keypoint:
    """One detected landmark, in pixel coordinates."""
    x: float
    y: float
    z: Optional[float] = None
    name: Optional[str] = None

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


@dataclass
class DetectionEntity:
    """
    One detected face or hand for a single frame.

    Keypoints are addressed either by their index in the model's fixed
    anatomical layout or by semantic name. Lookups never raise: a missing
    index, an unknown name or a point with non-finite coordinates all come
    back as None.
    """
    keypoints: Sequence[Keypoint]
    handedness: Optional[str] = None

    def get(self, index: int) -> Optional[Keypoint]:
        """Return the keypoint at ``index`` or None if it is absent."""
        if index < 0 or index >= len(self.keypoints):
            return None
        point = self.keypoints[index]
        if point is None or not point.is_finite():
            return None
        return point

    def named(self, name: str) -> Optional[Keypoint]:
        """Return the first keypoint carrying ``name`` or None."""
        for point in self.keypoints:
            if point is not None and point.name == name:
                return point if point.is_finite() else None
        return None

    def lookup(self, key: Union[int, str]) -> Optional[Keypoint]:
        if isinstance(key, str):
            return self.named(key)
        return self.get(key)


@dataclass(frozen=True)
class EyesState:
    """Closed flags for both eyes."""
    left_closed: bool
    right_closed: bool


@dataclass(frozen=True)
class HandState:
    """Pinch flags for one hand."""
    is_thumb_pressed: bool
    is_index_pressed: bool
    is_pinky_pressed: bool
    hand: str
    keypoints: Tuple[Keypoint, ...] = field(default=(), compare=False, repr=False)


@dataclass(frozen=True)
class AnchorPoint:
    """Slow-moving reference point used as the quadrant center."""
    point: Keypoint
    radius: float


@dataclass
class DebouncerState:
    """Last accepted sample of the directional debouncer."""
    last_x: Optional[float] = None
    last_y: Optional[float] = None
    last_time: Optional[float] = None
    last_direction: Optional[FingerDirection] = None


@dataclass(frozen=True)
class GestureSnapshot:
    """
    Discrete control signals computed for one frame.

    Every field is None when its inputs were not available this frame.
    """
    direction: Optional[Direction] = None
    tilt: Optional[Tilt] = None
    mouth_open: Optional[bool] = None
    eyes: Optional[EyesState] = None
    hand_state: Optional[HandState] = None
    finger_direction: Optional[FingerDirection] = None


SNAPSHOT_FIELDS = (
    "direction",
    "tilt",
    "mouth_open",
    "eyes",
    "hand_state",
    "finger_direction",
)


@dataclass(frozen=True)
class ButtonEvent:
    """A press or release sent to the controller."""
    action: Literal["press", "release"]
    button: Button


@runtime_checkable
class ControllerProto(Protocol):
    """Abstract protocol for game controllers driven by gesture signals."""

    async def press_button(self, button: Button) -> None:
        """Press ``button``. Must not be called for a button already held."""
        ...

    async def release_button(self, button: Button) -> None:
        """Release a previously pressed ``button``."""
        ...
