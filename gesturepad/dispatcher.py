"""
Edge-triggered output dispatcher.

Compares each new GestureSnapshot against the last one dispatched and sends
press/release calls to the controller only when a signal changed. Several
signals may share one button, so the dispatcher tracks which signals hold
each button and only presses on the first holder and releases on the last.
"""
import logging
from collections import Counter
from typing import Any, Callable, Dict, FrozenSet, List, Optional

from .types import (
    Button,
    ButtonEvent,
    ControllerProto,
    GestureSnapshot,
    SNAPSHOT_FIELDS,
)

logger = logging.getLogger(__name__)

SignalListener = Callable[[Any], None]


def _signals_for(field: str, value: Any) -> List[str]:
    """Logical signal names active for one snapshot field value."""
    if value is None:
        return []
    if field in ("direction", "tilt", "finger_direction"):
        return [value]
    if field == "mouth_open":
        return ["mouth_open"] if value else []
    if field == "eyes":
        active = []
        if value.left_closed:
            active.append("left_eye")
        if value.right_closed:
            active.append("right_eye")
        return active
    if field == "hand_state":
        active = []
        if value.is_thumb_pressed:
            active.append("thumb")
        if value.is_index_pressed:
            active.append("index")
        if value.is_pinky_pressed:
            active.append("pinky")
        return active
    raise KeyError(field)


class OutputDispatcher:
    """Sends button edges for snapshot changes to a controller."""

    def __init__(self, controller: ControllerProto, button_map: Dict[str, Optional[Button]]):
        """
        Initialize the dispatcher.

        Args:
            controller: Controller receiving press/release calls
            button_map: Logical signal name -> button (None leaves it unmapped)
        """
        self.controller = controller
        self.button_map = dict(button_map)
        self.previous = GestureSnapshot()
        self._holds: Counter = Counter()
        self._listeners: Dict[str, List[SignalListener]] = {}

    @property
    def held_buttons(self) -> FrozenSet[Button]:
        return frozenset(button for button, count in self._holds.items() if count > 0)

    def subscribe(self, field: str, listener: SignalListener) -> None:
        """Call ``listener`` with the new value whenever ``field`` changes."""
        if field not in SNAPSHOT_FIELDS:
            raise ValueError(f"Unknown snapshot field: {field}")
        self._listeners.setdefault(field, []).append(listener)

    def buttons_for(self, snapshot: GestureSnapshot) -> Counter:
        """Count, per button, how many snapshot fields are holding it."""
        holds: Counter = Counter()
        for field in SNAPSHOT_FIELDS:
            buttons = set()
            for signal in _signals_for(field, getattr(snapshot, field)):
                button = self.button_map.get(signal)
                if button is not None:
                    buttons.add(button)
            holds.update(buttons)
        return holds

    async def dispatch(self, snapshot: GestureSnapshot) -> List[ButtonEvent]:
        """
        Dispatch the edges between the previous snapshot and ``snapshot``.

        Releases are sent before presses.

        Returns:
            Events sent to the controller, in order
        """
        changed = [
            field for field in SNAPSHOT_FIELDS
            if getattr(snapshot, field) != getattr(self.previous, field)
        ]
        if not changed:
            return []

        new_holds = self.buttons_for(snapshot)
        events: List[ButtonEvent] = []
        for button in sorted(self._holds):
            if self._holds[button] > 0 and new_holds[button] == 0:
                events.append(ButtonEvent("release", button))
        for button in sorted(new_holds):
            if new_holds[button] > 0 and self._holds[button] == 0:
                events.append(ButtonEvent("press", button))

        for event in events:
            logger.info("%s %s", event.action.capitalize(), event.button.name)
            if event.action == "press":
                await self.controller.press_button(event.button)
            else:
                await self.controller.release_button(event.button)
            # Record each edge as soon as the controller accepts it
            self._holds[event.button] = new_holds[event.button]

        self._holds = new_holds
        previous, self.previous = self.previous, snapshot

        for field in changed:
            value = getattr(snapshot, field)
            logger.debug("Signal %s: %r -> %r", field, getattr(previous, field), value)
            for listener in self._listeners.get(field, ()):
                listener(value)

        return events

    async def release_all(self) -> List[ButtonEvent]:
        """Release every held button and forget the previous snapshot."""
        events = [ButtonEvent("release", button) for button in sorted(self.held_buttons)]
        for event in events:
            await self.controller.release_button(event.button)
            del self._holds[event.button]
        self._holds = Counter()
        self.previous = GestureSnapshot()
        return events
