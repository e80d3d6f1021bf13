"""
Point-mass trajectory propagation around a single body.

Only gravity acts on the trajectory. Positions and velocities are
body-centred and inertial (the body rotates underneath them).
"""
from __future__ import annotations
import math
from typing import Callable, Tuple

from .math_utils import Vec3, add, mul, norm, cross, dot

# Longest single RK4 step when propagating (s)
MAX_STEP_S = 0.25

State = Tuple[Vec3, Vec3]


def gravity_accel(position: Vec3, grav_param: float) -> Vec3:
    r = norm(position)
    if r <= 0.0:
        return (0.0, 0.0, 0.0)
    return mul(position, -grav_param / (r * r * r))


def rk4_step(position: Vec3, velocity: Vec3, accel: Callable[[Vec3], Vec3], dt: float) -> State:
    """One RK4 step for a position-dependent acceleration field."""
    k1_r = velocity
    k1_v = accel(position)

    k2_r = add(velocity, mul(k1_v, 0.5 * dt))
    k2_v = accel(add(position, mul(k1_r, 0.5 * dt)))

    k3_r = add(velocity, mul(k2_v, 0.5 * dt))
    k3_v = accel(add(position, mul(k2_r, 0.5 * dt)))

    k4_r = add(velocity, mul(k3_v, dt))
    k4_v = accel(add(position, mul(k3_r, dt)))

    r_next = add(position, mul(add(add(k1_r, mul(k2_r, 2.0)), add(mul(k3_r, 2.0), k4_r)), dt / 6.0))
    v_next = add(velocity, mul(add(add(k1_v, mul(k2_v, 2.0)), add(mul(k3_v, 2.0), k4_v)), dt / 6.0))
    return r_next, v_next


class Orbit:
    """
    Trajectory through a state vector at epoch.

    position_at / velocity_at integrate forward (or backward) from the
    epoch; the last propagated state is kept so that a run of increasing
    sample times only integrates each stretch once.
    """

    def __init__(self, position: Vec3, velocity: Vec3, epoch: float, grav_param: float) -> None:
        self.position = position
        self.velocity = velocity
        self.epoch = epoch
        self.grav_param = grav_param
        self._last: Tuple[float, Vec3, Vec3] = (epoch, position, velocity)

    def _gravity(self, position: Vec3) -> Vec3:
        return gravity_accel(position, self.grav_param)

    # ------------------------------------------------------------
    # Propagation primitives
    # ------------------------------------------------------------
    def state_at(self, ut: float) -> State:
        t0, r, v = self._last
        # Only resume from the cached state when it lies between epoch and ut
        if not (self.epoch <= t0 <= ut or ut <= t0 <= self.epoch):
            t0, r, v = self.epoch, self.position, self.velocity

        span = ut - t0
        if span != 0.0:
            steps = max(1, int(math.ceil(abs(span) / MAX_STEP_S)))
            dt = span / steps
            for _ in range(steps):
                r, v = rk4_step(r, v, self._gravity, dt)
        self._last = (ut, r, v)
        return r, v

    def position_at(self, ut: float) -> Vec3:
        return self.state_at(ut)[0]

    def velocity_at(self, ut: float) -> Vec3:
        return self.state_at(ut)[1]

    # ------------------------------------------------------------
    # Conic elements (from the epoch state vector)
    # ------------------------------------------------------------
    @property
    def specific_energy(self) -> float:
        return dot(self.velocity, self.velocity) / 2.0 - self.grav_param / norm(self.position)

    @property
    def eccentricity(self) -> float:
        h = norm(cross(self.position, self.velocity))
        e2 = 1.0 + 2.0 * self.specific_energy * h * h / (self.grav_param ** 2)
        return math.sqrt(max(e2, 0.0))

    @property
    def periapsis(self) -> float:
        """Periapsis radius (m), measured from the body centre."""
        h = norm(cross(self.position, self.velocity))
        return h * h / (self.grav_param * (1.0 + self.eccentricity))
