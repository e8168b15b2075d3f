"""
Face and hand landmark detection using MediaPipe.

Converts MediaPipe results into DetectionEntity lists in pixel coordinates.
"""
import cv2
import mediapipe as mp
import numpy as np
from typing import List, Optional

from .anchor import AnchorTracker
from .types import DetectionEntity, Keypoint


def _to_keypoints(landmark_list, width: int, height: int) -> List[Keypoint]:
    return [
        Keypoint(x=lm.x * width, y=lm.y * height, z=lm.z * width)
        for lm in landmark_list.landmark
    ]


class FaceMeshTracker:
    """Face landmark tracker using MediaPipe Face Mesh."""

    def __init__(self, max_num_faces: int = 1, refine_landmarks: bool = True,
                 min_detection_conf: float = 0.6, min_tracking_conf: float = 0.6):
        """
        Initialize the face tracker.

        Args:
            max_num_faces: Maximum number of faces to detect
            refine_landmarks: Add iris landmarks (required for eye state)
            min_detection_conf: Minimum confidence for face detection
            min_tracking_conf: Minimum confidence for face tracking
        """
        self.mp_face_mesh = mp.solutions.face_mesh
        self.face_mesh = self.mp_face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=max_num_faces,
            refine_landmarks=refine_landmarks,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    def process(self, frame_rgb: np.ndarray) -> List[DetectionEntity]:
        """
        Detect faces in an RGB frame.

        Returns:
            One DetectionEntity per face (empty list if none)
        """
        height, width = frame_rgb.shape[:2]
        results = self.face_mesh.process(frame_rgb)
        if not results.multi_face_landmarks:
            return []
        return [
            DetectionEntity(keypoints=_to_keypoints(face, width, height))
            for face in results.multi_face_landmarks
        ]

    def close(self) -> None:
        self.face_mesh.close()


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 2, min_detection_conf: float = 0.6, min_tracking_conf: float = 0.6):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    def process(self, frame_rgb: np.ndarray) -> List[DetectionEntity]:
        """
        Detect hands in an RGB frame.

        Returns:
            One DetectionEntity per hand with handedness "Left"/"Right"
        """
        height, width = frame_rgb.shape[:2]
        results = self.hands.process(frame_rgb)
        if not results.multi_hand_landmarks:
            return []

        entities = []
        handedness_list = results.multi_handedness or []
        for i, hand_landmarks in enumerate(results.multi_hand_landmarks):
            label: Optional[str] = None
            if i < len(handedness_list):
                label = handedness_list[i].classification[0].label
            entities.append(DetectionEntity(
                keypoints=_to_keypoints(hand_landmarks, width, height),
                handedness=label,
            ))
        return entities

    def close(self) -> None:
        self.hands.close()


def draw_keypoints(frame: np.ndarray, entity: DetectionEntity,
                   color=(0, 255, 0), radius: int = 2) -> np.ndarray:
    """Draw every keypoint of ``entity`` on the frame."""
    for point in entity.keypoints:
        if point is None or not point.is_finite():
            continue
        cv2.circle(frame, (int(point.x), int(point.y)), radius, color, -1)
    return frame


def draw_anchor(frame: np.ndarray, tracker: AnchorTracker, quadrant: str) -> np.ndarray:
    """Draw the anchor ring, its dead zone and the active quadrant label."""
    anchor = tracker.anchor
    if anchor is None:
        return frame

    center = (int(anchor.point.x), int(anchor.point.y))
    outer = int(anchor.radius)
    inner = int(anchor.radius * tracker.inner_ratio)
    cv2.circle(frame, center, outer, (200, 200, 0), 2)
    cv2.circle(frame, center, inner, (200, 200, 0), 1)
    if quadrant != "none":
        cv2.putText(frame, quadrant.upper(), (center[0] + outer + 5, center[1]),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (5, 255, 242), 2)
    return frame
