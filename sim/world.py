from __future__ import annotations
from typing import List, Optional, Tuple
import csv
import logging
import math
import os

from autoagl import bus as B
from autoagl.controller import AltimeterController
from autoagl.kinematics import clearance_over
from autoagl.math_utils import Vec3, ZERO, add, sub, mul, norm, dot, unit, cross, split_radial
from autoagl.models import (
    AltimeterMode, Body, ChuteState, Parachute, Part, Situation, SURFACE_SITUATIONS, Vessel,
)
from autoagl.monitor import SwitchMonitor
from autoagl.orbit import Orbit, gravity_accel, rk4_step
from autoagl.settings import Settings
from .scenarios import Flight
import config

logger = logging.getLogger(__name__)

NORTH: Vec3 = (0.0, 0.0, 1.0)

LOG_COLUMNS = [
    "time_s",
    "scenario",
    "body",
    "situation",
    "altitude_m",
    "terrain_m",
    "clearance_m",
    "vertical_mps",
    "horizontal_mps",
    "thrust_mps2",

    # altimeter state
    "displayed",
    "locked",
    "recommended",
    "reason",
    "threshold_s",
    "impact_s",
    "lead_s",

    # AUTO:<mode>, USER:<mode>, CLEAR, TOUCHDOWN, CRASH, ... ('|' separated)
    "events",
]


class World:
    """
    Host simulation for one vessel: integrates its motion, plays the role of
    the altimeter widget and drives the AltimeterController once per step.
    """

    def __init__(
        self,
        flight: Flight,
        settings: Optional[Settings] = None,
        log_path: str | None = config.LOG_PATH,
    ) -> None:
        self.settings = settings or Settings()
        self.bus = B.EventBus()
        self.controller = AltimeterController(clock=lambda: self.time_s)
        self.controller.attach(self.bus)
        self.monitor = SwitchMonitor()

        self.time_s: float = 0.0
        self.paused: bool = False
        self.altimeter: AltimeterMode = AltimeterMode.ASL
        self.last_reason: str = ""
        self.vessel_id: int = 0
        self._events: List[str] = []

        # --- Logging setup ---
        self.log_path = log_path
        self.log_file = None
        self.log_writer: csv.writer | None = None

        if self.log_path is not None:
            log_dir = os.path.dirname(self.log_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            self.log_file = open(self.log_path, "w", newline="", encoding="utf-8")
            self.log_writer = csv.writer(self.log_file)
            self.log_writer.writerow(LOG_COLUMNS)

        self.reset(flight)

    # ------------------------------------------------------------
    # Flight setup
    # ------------------------------------------------------------
    def reset(self, flight: Flight) -> None:
        """Load a flight; the controller sees this as a new flight session."""
        self.flight = flight
        self.body: Body = flight.body
        self.ut: float = 0.0
        self.vessel_id += 1
        self.crashed = False
        self.thrust_mps2: float = 0.0
        self.landed_at: Optional[Tuple[float, float]] = None

        self.parts: List[Part] = [Part("pod")]
        for i, (deploy_alt, state) in enumerate(flight.chutes):
            self.parts.append(Part(f"chute{i + 1}", Parachute(deploy_alt, state)))

        if flight.altitude_m is None or flight.situation in SURFACE_SITUATIONS:
            self._land(flight.lat_deg, flight.lon_deg, flight.situation or Situation.LANDED)
        else:
            self.position = self._to_inertial(flight.lat_deg, flight.lon_deg, flight.altitude_m)
            up = unit(self.position)
            east = unit(cross(NORTH, up))
            self.velocity = add(
                self._surface_velocity(self.position),
                add(mul(east, flight.horizontal_mps), mul(up, flight.vertical_mps)),
            )
            self.situation = flight.situation or self._classify()
            if flight.hover:
                self.thrust_mps2 = norm(gravity_accel(self.position, self.body.grav_param))

        self.bus.emit(B.FLIGHT_START)
        logger.info("Loaded scenario %s around %s", flight.name, self.body.name)

    # ------------------------------------------------------------
    # Geometry helpers
    # ------------------------------------------------------------
    def _to_inertial(self, lat: float, lon: float, altitude: float) -> Vec3:
        theta = math.radians(lon + self.body.rotation_angle(self.ut))
        phi = math.radians(lat)
        r = self.body.radius + altitude
        return (r * math.cos(phi) * math.cos(theta),
                r * math.cos(phi) * math.sin(theta),
                r * math.sin(phi))

    def _surface_velocity(self, position: Vec3) -> Vec3:
        if not self.body.rotates:
            return ZERO
        w = 2.0 * math.pi / self.body.rotation_period
        return (-w * position[1], w * position[0], 0.0)

    def _terrain_below(self) -> float:
        lat, lon = self.body.lat_lon(self.position, self.ut)
        return self.body.terrain_altitude(lat, lon)

    def _surface_height(self, terrain: float) -> float:
        # Vessels float on the ocean
        if self.body.ocean and terrain < 0.0:
            return 0.0
        return terrain

    @property
    def altitude(self) -> float:
        return norm(self.position) - self.body.radius

    # ------------------------------------------------------------
    # Situation
    # ------------------------------------------------------------
    def _classify(self) -> Situation:
        if self.body.atmosphere and self.altitude < self.body.atmosphere_depth:
            return Situation.FLYING
        orbit = Orbit(self.position, self.velocity, self.ut, self.body.grav_param)
        if orbit.periapsis < self.body.radius:
            return Situation.SUB_ORBITAL
        if orbit.eccentricity >= 1.0:
            return Situation.ESCAPING
        return Situation.ORBITING

    def _land(self, lat: float, lon: float, situation: Situation) -> None:
        self.landed_at = (lat, lon)
        self.situation = situation
        self._hold_on_surface()

    def _hold_on_surface(self) -> None:
        lat, lon = self.landed_at
        surface = self._surface_height(self.body.terrain_altitude(lat, lon))
        self.position = self._to_inertial(lat, lon, surface)
        self.velocity = self._surface_velocity(self.position)

    # ------------------------------------------------------------
    # Physics
    # ------------------------------------------------------------
    def _accel(self, position: Vec3) -> Vec3:
        g = gravity_accel(position, self.body.grav_param)
        return add(g, mul(unit(position), self.thrust_mps2))

    def _apply_chute_drag(self, dt: float) -> None:
        if not any(p.parachute and p.parachute.state == ChuteState.DEPLOYED for p in self.parts):
            return
        ground = self._surface_velocity(self.position)
        rel = sub(self.velocity, ground)
        up = unit(self.position)
        vertical = dot(rel, up)
        horizontal = sub(rel, mul(up, vertical))

        k = 1.0 - math.exp(-dt / config.CHUTE_RESPONSE_S)
        if vertical < -config.CHUTE_DESCENT_MPS:
            vertical += (-config.CHUTE_DESCENT_MPS - vertical) * k
        horizontal = mul(horizontal, 1.0 - 0.5 * k)
        self.velocity = add(ground, add(horizontal, mul(up, vertical)))

    def _deploy_chutes(self) -> None:
        clearance = clearance_over(self.body, self.altitude, self._terrain_below())
        for part in self.parts:
            chute = part.parachute
            if chute is None:
                continue
            if chute.state == ChuteState.ARMED and clearance < chute.deploy_altitude:
                chute.state = ChuteState.DEPLOYED
                self._events.append(f"CHUTE:{part.name}")
                logger.info("%s deployed at %.0f m", part.name, clearance)

    def _check_touchdown(self) -> None:
        terrain = self._terrain_below()
        if self.altitude > self._surface_height(terrain):
            return

        speed = norm(sub(self.velocity, self._surface_velocity(self.position)))
        self.crashed = speed > config.CRASH_SPEED_MPS
        splashed = self.body.ocean and terrain < 0.0
        lat, lon = self.body.lat_lon(self.position, self.ut)
        self._land(lat, lon, Situation.SPLASHED if splashed else Situation.LANDED)
        self.thrust_mps2 = 0.0

        event = "CRASH" if self.crashed else "TOUCHDOWN"
        self._events.append(event)
        print(f"[{event}] {self.situation.name} at t={self.time_s:.1f}s, {speed:.1f} m/s, "
              f"altimeter={self.altimeter.name}")

    def _try_lift_off(self) -> None:
        g = norm(gravity_accel(self.position, self.body.grav_param))
        if self.thrust_mps2 <= g:
            return
        self.landed_at = None
        # Unstick from the ground
        self.velocity = add(self.velocity, unit(self.position))
        self.situation = Situation.FLYING if self.body.atmosphere else Situation.SUB_ORBITAL
        self._events.append("LIFTOFF")

    # ------------------------------------------------------------
    # Simulation step
    # ------------------------------------------------------------
    def step(self, dt: float) -> None:
        if self.paused:
            return

        # --- 1) Move the vessel ---
        self.ut += dt
        self.time_s += dt
        if self.landed_at is not None:
            self._hold_on_surface()
            self._try_lift_off()
        else:
            self.position, self.velocity = rk4_step(self.position, self.velocity, self._accel, dt)
            self._apply_chute_drag(dt)
            self._deploy_chutes()
            self._check_touchdown()
            if self.landed_at is None:
                self.situation = self._classify()

        # --- 2) Altimeter logic ---
        locked_before = self.controller.override.locked_mode
        command = self.controller.step(self.snapshot(), self.altimeter, self.settings, now=self.time_s)
        if command is not None:
            self.set_altimeter(command.mode, by_user=False, reason=command.reason)
        if locked_before != AltimeterMode.NONE and self.controller.override.locked_mode == AltimeterMode.NONE:
            self.monitor.record_override_cleared()
            self._events.append("CLEAR")

        self.monitor.record_time(self.altimeter, dt)

        # --- 3) Log ---
        if self.log_writer is not None:
            self._write_log_row()
        self._events = []

    def snapshot(self) -> Vessel:
        """Telemetry as the altimeter logic sees it this frame."""
        terrain = self._terrain_below()
        orbit = None
        if self.landed_at is None:
            orbit = Orbit(self.position, self.velocity, self.ut, self.body.grav_param)
        return Vessel(
            vessel_id=self.vessel_id,
            situation=self.situation,
            body=self.body,
            position=self.position,
            velocity=self.velocity,
            altitude=self.altitude,
            terrain_altitude=terrain,
            vertical_speed=dot(self.velocity, unit(self.position)),
            ut=self.ut,
            parts=list(self.parts),
            orbit=orbit,
        )

    # ------------------------------------------------------------
    # Altimeter widget + pilot controls
    # ------------------------------------------------------------
    def set_altimeter(self, mode: AltimeterMode, by_user: bool = False, reason: str = "") -> None:
        if mode == self.altimeter:
            return
        self.altimeter = mode
        self.last_reason = reason if not by_user else "manual"
        self.monitor.record_change(self.time_s, by_user)
        self._events.append(("USER:" if by_user else "AUTO:") + mode.name)
        self.bus.emit(B.MODE_CHANGED, mode, self.time_s)

    def click_altimeter(self) -> None:
        """Pilot clicks the altimeter mode button."""
        self.bus.emit(B.MANUAL_TOGGLE)
        toggled = AltimeterMode.AGL if self.altimeter == AltimeterMode.ASL else AltimeterMode.ASL
        self.set_altimeter(toggled, by_user=True)

    def toggle_pause(self) -> None:
        self.paused = not self.paused
        self.bus.emit(B.PAUSE if self.paused else B.UNPAUSE)

    def adjust_thrust(self, delta_mps2: float) -> None:
        self.thrust_mps2 = max(0.0, self.thrust_mps2 + delta_mps2)

    def arm_chutes(self) -> None:
        for part in self.parts:
            if part.parachute is not None and part.parachute.state == ChuteState.STOWED:
                part.parachute.state = ChuteState.ARMED
                self._events.append(f"ARM:{part.name}")

    # ------------------------------------------------------------
    # Log
    # ------------------------------------------------------------
    def _write_log_row(self) -> None:
        terrain = self._terrain_below()
        horizontal, vertical = split_radial(self.position, sub(self.velocity, self._surface_velocity(self.position)))
        rec = self.controller.last_recommendation
        threshold = rec.threshold_s if rec is not None and rec.threshold_s is not None else float("nan")

        self.log_writer.writerow([
            f"{self.time_s:.3f}",
            self.flight.name,
            self.body.name,
            self.situation.name,
            f"{self.altitude:.1f}",
            f"{terrain:.1f}",
            f"{clearance_over(self.body, self.altitude, terrain):.1f}",
            f"{vertical:.2f}",
            f"{horizontal:.2f}",
            f"{self.thrust_mps2:.2f}",

            self.altimeter.name,
            self.controller.override.locked_mode.name,
            rec.mode.name if rec is not None else "",
            rec.reason if rec is not None else "",
            f"{threshold:.1f}",
            f"{rec.impact_s:.2f}" if rec is not None else "inf",
            f"{rec.lead_s:.1f}" if rec is not None else "0.0",

            "|".join(self._events),
        ])

    def close(self) -> None:
        """Call this when the simulation ends to flush/close the log file."""
        self.controller.detach(self.bus)
        if self.log_file is not None:
            self.log_file.close()
            self.log_file = None
            self.log_writer = None
