"""
Altimeter mode controller: arbitrates between the automatic recommendation
and the pilot's manual choices.

Whenever the pilot clicks the altimeter, the next mode change is taken as
their choice and "locks" that mode. While locked the controller leaves the
altimeter alone; once the recommendation comes round to agree with the
pilot's choice the lock is dropped and automatic switching resumes.

Example: climbing out in AGL, the controller switches to ASL. The pilot
clicks back to AGL, so AGL is locked and stays. Later the vessel descends
into the zone where AGL is recommended anyway, which clears the lock; on
the next climb the controller is free to switch to ASL again.
"""
from __future__ import annotations
import logging
import time
from typing import Callable, Optional

import config
from . import bus as B
from .models import AltimeterMode, ModeCommand, OverrideState, Recommendation, Vessel
from .parachutes import ParachuteCache
from .recommend import recommend
from .settings import Settings

logger = logging.getLogger(__name__)


class AltimeterController:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self.parachutes = ParachuteCache()
        self.override = OverrideState()
        self.paused: bool = False
        self.last_recommendation: Optional[Recommendation] = None
        self.next_evaluation: float = float("-inf")
        self.earliest_toggle: float = float("-inf")

    # ------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------
    def attach(self, bus: B.EventBus) -> None:
        logger.debug("Registering events")
        bus.on(B.FLIGHT_START, self.start)
        bus.on(B.MANUAL_TOGGLE, self.on_manual_toggle)
        bus.on(B.MODE_CHANGED, self.on_mode_changed)
        bus.on(B.PAUSE, self.on_pause)
        bus.on(B.UNPAUSE, self.on_unpause)

    def detach(self, bus: B.EventBus) -> None:
        logger.debug("Unregistering events")
        bus.off(B.FLIGHT_START, self.start)
        bus.off(B.MANUAL_TOGGLE, self.on_manual_toggle)
        bus.off(B.MODE_CHANGED, self.on_mode_changed)
        bus.off(B.PAUSE, self.on_pause)
        bus.off(B.UNPAUSE, self.on_unpause)

    def start(self) -> None:
        """Flight (re)start: forget the pilot's choices and all timers."""
        logger.info("Starting")
        self.override = OverrideState()
        self.parachutes.clear()
        self.paused = False
        self.last_recommendation = None
        self.next_evaluation = float("-inf")
        self.earliest_toggle = float("-inf")

    def on_manual_toggle(self) -> None:
        logger.info("User clicked the altimeter")
        self.override.pending_click = True

    def on_mode_changed(self, mode: AltimeterMode, now: Optional[float] = None) -> None:
        """Fired on every actual mode change, whoever caused it."""
        now = self.clock() if now is None else now
        logger.info("Altimeter mode changed to: %s", mode.name)
        self.earliest_toggle = now + config.MINIMUM_DWELL_S
        if self.override.pending_click:
            self.override.pending_click = False
            self.override.locked_mode = mode

    def on_pause(self) -> None:
        self.paused = True

    def on_unpause(self) -> None:
        self.paused = False

    # ------------------------------------------------------------
    # Per-frame decision
    # ------------------------------------------------------------
    def step(
        self,
        vessel: Optional[Vessel],
        displayed: AltimeterMode,
        settings: Settings,
        now: Optional[float] = None,
    ) -> Optional[ModeCommand]:
        """
        Run one frame. Returns the mode change the host should apply, if any.
        """
        if vessel is None or self.paused:
            return None

        chutes = self.parachutes.update(vessel)

        # Recommendation is comparatively expensive: only every so often
        now = self.clock() if now is None else now
        if now < self.next_evaluation:
            return None
        self.next_evaluation = now + config.UPDATE_INTERVAL_S

        if not settings.enabled:
            return None

        # Never touch the altimeter right after it changed (no flip-flopping)
        if now < self.earliest_toggle:
            return None

        rec = recommend(vessel, chutes, displayed, settings)
        self.last_recommendation = rec
        locked = self.override.locked_mode

        if locked == AltimeterMode.NONE:
            if rec.mode != displayed:
                logger.info("Automatically switching altimeter to %s (%s)", rec.mode.name, rec.reason)
                return ModeCommand(rec.mode, rec.reason)
            return None

        if rec.mode == locked:
            logger.info("Transitioned to auto-%s zone, clearing user selection", rec.mode.name)
            self.override.locked_mode = AltimeterMode.NONE
            return None

        # Pilot's choice disagrees with the recommendation: leave it be
        return None
