"""
Configuration management for the gesture control engine.
"""
import copy
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

from .types import Button


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"

MODES = ("face", "hand", "face_and_hand")

BUTTON_SIGNALS = (
    "left", "right", "up", "down",
    "mouth_open", "thumb", "index", "pinky",
    "left_eye", "right_eye",
)


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int
    flip_horizontal: bool


@dataclass
class MediaPipeConfig:
    """MediaPipe Face Mesh / Hands configuration settings."""
    max_num_faces: int
    max_num_hands: int
    refine_landmarks: bool
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class FaceConfig:
    """Face feature thresholds (pixels unless noted)."""
    turn_threshold_px: float
    tilt_threshold_px: float
    mouth_threshold_px: float
    eye_closed_ratio: float  # iris height / lid gap


@dataclass
class AnchorConfig:
    """Hand anchor and quadrant configuration."""
    tracked_hand: str
    throttle_ms: int
    radius_scale: float
    inner_ratio: float  # dead zone radius as a fraction of the anchor radius


@dataclass
class DebouncerConfig:
    """Fingertip direction debouncer configuration."""
    threshold_px: float
    window_ms: int


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    show_anchor: bool
    window_name: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    mode: str
    face: FaceConfig
    anchor: AnchorConfig
    debouncer: DebouncerConfig
    buttons: Dict[str, Optional[Button]]
    display: DisplayConfig

    @property
    def face_enabled(self) -> bool:
        return self.mode in ("face", "face_and_hand")

    @property
    def hand_enabled(self) -> bool:
        return self.mode in ("hand", "face_and_hand")


def load_config(path: Optional[str] = None,
                overrides: Optional[Dict[str, Any]] = None) -> Cfg:
    """
    Load configuration from YAML file.

    The packaged defaults are always loaded first; values from ``path`` and
    then ``overrides`` are merged on top, so any single setting can be
    overridden on its own.

    Args:
        path: Path to a config file. If None, only the defaults are used
        overrides: Nested dict of values applied last

    Returns:
        Configuration object with all settings
    """
    data = _read_yaml(DEFAULT_CONFIG_PATH)

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        data = _merge(data, _read_yaml(config_path))

    if overrides:
        data = _merge(data, overrides)

    return _dict_to_config(data)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, 'r') as f:
        data = yaml.safe_load(f)
    return data or {}


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``extra`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _parse_buttons(data: Dict[str, Any]) -> Dict[str, Optional[Button]]:
    buttons: Dict[str, Optional[Button]] = {}
    for signal, name in data.items():
        if signal not in BUTTON_SIGNALS:
            raise ValueError(f"Unknown button signal: {signal}")
        if name is None:
            buttons[signal] = None
            continue
        try:
            buttons[signal] = Button[str(name).upper()]
        except KeyError:
            raise ValueError(f"Unknown button for {signal}: {name}") from None
    return buttons


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps'],
        flip_horizontal=camera_data['flip_horizontal']
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_faces=mp_data['max_num_faces'],
        max_num_hands=mp_data['max_num_hands'],
        refine_landmarks=mp_data['refine_landmarks'],
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    mode = data['mode']
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode} (expected one of {', '.join(MODES)})")

    face_data = data['face']
    face = FaceConfig(
        turn_threshold_px=float(face_data['turn_threshold_px']),
        tilt_threshold_px=float(face_data['tilt_threshold_px']),
        mouth_threshold_px=float(face_data['mouth_threshold_px']),
        eye_closed_ratio=float(face_data['eye_closed_ratio'])
    )
    if face.eye_closed_ratio <= 0:
        raise ValueError("face.eye_closed_ratio must be positive")

    anchor_data = data['anchor']
    anchor = AnchorConfig(
        tracked_hand=str(anchor_data['tracked_hand']).lower(),
        throttle_ms=int(anchor_data['throttle_ms']),
        radius_scale=float(anchor_data['radius_scale']),
        inner_ratio=float(anchor_data['inner_ratio'])
    )
    if anchor.tracked_hand not in ("left", "right"):
        raise ValueError(f"anchor.tracked_hand must be left or right, got {anchor.tracked_hand}")
    if anchor.throttle_ms < 0:
        raise ValueError("anchor.throttle_ms must not be negative")
    if not 0 < anchor.inner_ratio < 1:
        raise ValueError("anchor.inner_ratio must be between 0 and 1")

    debouncer_data = data['debouncer']
    debouncer = DebouncerConfig(
        threshold_px=float(debouncer_data['threshold_px']),
        window_ms=int(debouncer_data['window_ms'])
    )
    if debouncer.threshold_px <= 0:
        raise ValueError("debouncer.threshold_px must be positive")
    if debouncer.window_ms < 0:
        raise ValueError("debouncer.window_ms must not be negative")

    buttons = _parse_buttons(data['buttons'])

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        show_anchor=display_data['show_anchor'],
        window_name=display_data['window_name']
    )

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        mode=mode,
        face=face,
        anchor=anchor,
        debouncer=debouncer,
        buttons=buttons,
        display=display
    )
