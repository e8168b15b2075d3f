"""
Mock controller implementation for testing gesture commands.
"""
import logging
from typing import List, Set, Tuple

from .types import Button

logger = logging.getLogger(__name__)


class MockController:
    """Mock controller that logs button edges instead of driving an emulator."""

    def __init__(self):
        """Initialize the mock controller."""
        self.pressed: Set[Button] = set()
        self.history: List[Tuple[str, Button]] = []
        self.press_count = 0
        self.release_count = 0

    async def press_button(self, button: Button) -> None:
        """Record a press. Pressing a held button is an error."""
        if button in self.pressed:
            raise RuntimeError(f"{button.name} is already pressed")
        self.pressed.add(button)
        self.history.append(("press", button))
        self.press_count += 1
        logger.info(f"[MockController] Press {button.name} (call #{self.press_count})")

    async def release_button(self, button: Button) -> None:
        """Record a release. Releasing a button that is not held is an error."""
        if button not in self.pressed:
            raise RuntimeError(f"{button.name} is not pressed")
        self.pressed.discard(button)
        self.history.append(("release", button))
        self.release_count += 1
        logger.info(f"[MockController] Release {button.name} (call #{self.release_count})")

    def reset_counters(self) -> None:
        """Reset action counters for testing."""
        self.pressed.clear()
        self.history.clear()
        self.press_count = 0
        self.release_count = 0
