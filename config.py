# Global knobs (simulation + altimeter logic thresholds)
SCREEN_W, SCREEN_H = 1200, 800
PIXELS_PER_KM = 60.0        # horizontal scale of the side profile
METERS_PER_PIXEL_V = 10.0   # vertical scale of the side profile

DT = 1/30.0                 # sim step (s)
SPEED_MULTIPLIER = 1.0

MOD_NAME = "AutoAGL"

# ---------------------------------------------------------------------
# Decision loop timing
# - UPDATE_INTERVAL_S: minimum wall time between two recommendations.
# - MINIMUM_DWELL_S: after ANY altimeter mode change (ours or the pilot's)
#   the controller keeps its hands off for at least this long.
# ---------------------------------------------------------------------
UPDATE_INTERVAL_S = 0.163
MINIMUM_DWELL_S = 1.0

# ---------------------------------------------------------------------
# Path projection: sample the trajectory every PROJECTION_STEP_S seconds,
# at most PROJECTION_SAMPLES times (30 s horizon).
# ---------------------------------------------------------------------
PROJECTION_STEP_S = 2.0
PROJECTION_SAMPLES = 15

# Free fall under net upward acceleration must reach at least this far
# below the surface to count as an impact (m).
IMPACT_MARGIN_M = 1.0

# Pressure normalization: 1.0 atm == Kerbin sea level
KERBIN_SEALEVEL_PRESSURE_KPA = 101.325

# ---------------------------------------------------------------------
# Settings option lists (values offered by the settings menu).
# 0 means "disabled" for both thresholds and multipliers.
# ---------------------------------------------------------------------
DISABLED = 0

DEFAULT_ATM_COLLISION_TIME_S = 10
DEFAULT_VAC_COLLISION_TIME_S = 30

COLLISION_TIMES_S = [
    DISABLED, 3, 5, DEFAULT_ATM_COLLISION_TIME_S, 15, 20,
    DEFAULT_VAC_COLLISION_TIME_S, 60, 90, 120,
]

DEFAULT_PARACHUTE_ALTITUDE_MULTIPLIER = 2.0
PARACHUTE_ALTITUDE_MULTIPLIERS = [
    DISABLED, 0.5, 1.0, 1.5, DEFAULT_PARACHUTE_ALTITUDE_MULTIPLIER, 3.0, 5.0,
]

# ---------------------------------------------------------------------
# Host simulation
# ---------------------------------------------------------------------
LOG_PATH = "logs/autoagl_log.csv"

# Touchdown faster than this (m/s) is logged as a crash
CRASH_SPEED_MPS = 12.0

# A fully open canopy caps the descent rate at this speed (m/s)
CHUTE_DESCENT_MPS = 6.5
# Time constant of the canopy drag pulling the descent rate toward it (s);
# gravity keeps the steady descent about g * this above CHUTE_DESCENT_MPS
CHUTE_RESPONSE_S = 0.2

# Manual controls: thrust added per key press (m/s^2)
THRUST_STEP_MPS2 = 2.0
