"""
Main application: webcam landmarks to gamepad button presses.
"""
import argparse
import asyncio
import logging
import time
from typing import Optional

import cv2

from .config import MODES, load_config
from .controller_mock import MockController
from .dispatcher import OutputDispatcher
from .gestures import GestureProcessor
from .landmarks import FaceMeshTracker, HandsTracker, draw_anchor, draw_keypoints
from .types import ControllerProto

logger = logging.getLogger(__name__)


class GestureControlApp:
    """Main application class for landmark-driven game control."""

    def __init__(self, config_path: Optional[str] = None, mode: Optional[str] = None,
                 controller: Optional[ControllerProto] = None):
        """Initialize the application with configuration."""
        overrides = {"mode": mode} if mode else None
        self.config = load_config(config_path, overrides)
        mp_cfg = self.config.mediapipe

        self.face_tracker = None
        if self.config.face_enabled:
            self.face_tracker = FaceMeshTracker(
                max_num_faces=mp_cfg.max_num_faces,
                refine_landmarks=mp_cfg.refine_landmarks,
                min_detection_conf=mp_cfg.min_detection_confidence,
                min_tracking_conf=mp_cfg.min_tracking_confidence
            )

        self.hand_tracker = None
        if self.config.hand_enabled:
            self.hand_tracker = HandsTracker(
                max_num_hands=mp_cfg.max_num_hands,
                min_detection_conf=mp_cfg.min_detection_confidence,
                min_tracking_conf=mp_cfg.min_tracking_confidence
            )

        self.controller = controller if controller is not None else MockController()
        self.processor = GestureProcessor(self.config)
        self.dispatcher = OutputDispatcher(self.controller, self.config.buttons)

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

    async def run(self):
        """Run the main application loop, one detection cycle per frame."""
        logger.info("Starting %s in %s mode", self.config.display.window_name, self.config.mode)
        print("Press 'q' to quit")

        try:
            while True:
                ret, frame = self.cap.read()
                if not ret:
                    logger.error("Failed to read frame from camera")
                    break

                if self.config.camera.flip_horizontal:
                    frame = cv2.flip(frame, 1)
                frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

                faces = self.face_tracker.process(frame_rgb) if self.face_tracker else None
                hands = self.hand_tracker.process(frame_rgb) if self.hand_tracker else None

                snapshot = self.processor.process_frame(faces, hands, time.monotonic())
                await self.dispatcher.dispatch(snapshot)

                self._draw(frame, faces, hands)
                cv2.imshow(self.config.display.window_name, frame)

                # Check for quit key
                if cv2.waitKey(1) & 0xFF == ord('q'):
                    break
        finally:
            await self.dispatcher.release_all()
            self.close()

    def _draw(self, frame, faces, hands):
        display = self.config.display
        if display.show_landmarks:
            for face in faces or ():
                draw_keypoints(frame, face, color=(255, 255, 255), radius=1)
            for hand in hands or ():
                draw_keypoints(frame, hand, radius=3)
        if display.show_anchor and self.processor.tracked_hand is not None:
            draw_anchor(frame, self.processor.anchor, self.processor.quadrant)

        held = ", ".join(b.name for b in sorted(self.dispatcher.held_buttons)) or "-"
        cv2.putText(frame, f"Held: {held}", (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)

    def close(self):
        """Release camera, windows and trackers."""
        self.cap.release()
        cv2.destroyAllWindows()
        if self.face_tracker:
            self.face_tracker.close()
        if self.hand_tracker:
            self.hand_tracker.close()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Drive a gamepad with face and hand gestures")
    parser.add_argument("--config", help="YAML file overriding config.default.yaml")
    parser.add_argument("--mode", choices=MODES, help="Which detectors to run")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def main(argv=None):
    """Entry point for the application."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        app = GestureControlApp(config_path=args.config, mode=args.mode)
        await app.run()
    except Exception as e:
        logger.error(f"Error: {e}")
        raise


if __name__ == "__main__":
    from .__main__ import run
    run()
