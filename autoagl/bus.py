# A tiny pub/sub event bus to keep the host and the altimeter logic decoupled.
from typing import Callable, Dict, List

# Host -> controller topics
FLIGHT_START = "flight_start"       # ()
MANUAL_TOGGLE = "manual_toggle"     # () pilot clicked the altimeter
MODE_CHANGED = "mode_changed"       # (mode, now) displayed mode actually changed
PAUSE = "pause"                     # ()
UNPAUSE = "unpause"                 # ()


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Callable]] = {}

    def on(self, topic: str, fn: Callable):
        self._subs.setdefault(topic, []).append(fn)

    def off(self, topic: str, fn: Callable):
        subs = self._subs.get(topic, [])
        if fn in subs:
            subs.remove(fn)

    def emit(self, topic: str, *args, **kwargs):
        for fn in list(self._subs.get(topic, [])):
            fn(*args, **kwargs)
