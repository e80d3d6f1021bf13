import math
import pygame
from typing import List, Tuple

import config
from autoagl.math_utils import norm
from autoagl.models import AltimeterMode
from .colors import WHITE, GREY, CYAN, AMBER, GROUND, WATER

# Vessel is drawn at this fraction of the profile width / height
ANCHOR_X = 0.30
ANCHOR_Y = 0.40


def profile_to_screen(rect: pygame.Rect, dx_m: float, dalt_m: float) -> Tuple[int, int]:
    """Offsets from the vessel (along track, altitude) to screen pixels."""
    sx = int(rect.x + rect.w * ANCHOR_X + dx_m / (1000.0 / config.PIXELS_PER_KM))
    sy = int(rect.y + rect.h * ANCHOR_Y - dalt_m / config.METERS_PER_PIXEL_V)
    return sx, sy


def _terrain_polyline(rect: pygame.Rect, world, lat: float, lon: float) -> List[Tuple[int, int]]:
    body = world.body
    points = []
    m_per_px = 1000.0 / config.PIXELS_PER_KM
    for px in range(rect.x, rect.x + rect.w + 1, 4):
        dx_m = (px - rect.x - rect.w * ANCHOR_X) * m_per_px
        dlon = math.degrees(dx_m / body.radius)
        height = body.terrain_altitude(lat, lon + dlon)
        points.append(profile_to_screen(rect, dx_m, height - world.altitude))
    return points


def _projected_points(rect: pygame.Rect, world) -> List[Tuple[int, int]]:
    """Coasting trajectory at the path-projection sample times."""
    vessel = world.snapshot()
    if vessel.orbit is None:
        return []
    points = []
    r0 = norm(vessel.position)
    lat0, lon0 = world.body.lat_lon(vessel.position, vessel.ut)
    for i in range(1, config.PROJECTION_SAMPLES + 1):
        t = vessel.ut + i * config.PROJECTION_STEP_S
        pos = vessel.orbit.position_at(t)
        lat, lon = world.body.lat_lon(pos, vessel.ut)
        if world.body.rotates:
            lon -= 360.0 * (t - vessel.ut) / world.body.rotation_period
        dlon = (lon - lon0 + 180.0) % 360.0 - 180.0
        dx_m = math.radians(dlon) * world.body.radius
        points.append(profile_to_screen(rect, dx_m, norm(pos) - r0))
    return points


def draw_profile(screen, font, world, rect: pygame.Rect) -> None:
    vessel_lat, vessel_lon = world.body.lat_lon(world.position, world.ut)

    # Terrain + sea level
    terrain = _terrain_polyline(rect, world, vessel_lat, vessel_lon)
    if world.body.ocean:
        sea_y = profile_to_screen(rect, 0.0, -world.altitude)[1]
        if sea_y < rect.bottom:
            pygame.draw.rect(screen, WATER, (rect.x, sea_y, rect.w, rect.bottom - sea_y))
    if len(terrain) > 1:
        polygon = [(rect.x, rect.bottom)] + terrain + [(rect.right, rect.bottom)]
        pygame.draw.polygon(screen, GROUND, polygon)
        pygame.draw.lines(screen, GREY, False, terrain, 1)

    # Projected coasting path
    for p in _projected_points(rect, world):
        if rect.collidepoint(p):
            pygame.draw.circle(screen, CYAN, p, 2)

    # Vessel
    vx, vy = profile_to_screen(rect, 0.0, 0.0)
    color = AMBER if world.altimeter == AltimeterMode.AGL else WHITE
    pygame.draw.polygon(screen, color, [(vx, vy - 9), (vx - 6, vy + 6), (vx + 6, vy + 6)])
    label = font.render(f"{world.situation.name}", True, GREY)
    screen.blit(label, (vx + 10, vy - 8))

    # Scale bar (1 km)
    x0, y0 = rect.x + 12, rect.bottom - 18
    pygame.draw.line(screen, WHITE, (x0, y0), (x0 + int(config.PIXELS_PER_KM), y0), 2)
    screen.blit(font.render("1 km", True, WHITE), (x0, y0 - 18))
