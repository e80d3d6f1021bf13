import pygame
import textwrap

from autoagl.kinematics import ground_clearance
from autoagl.models import AltimeterMode
from .colors import WHITE, AMBER, GREEN, GREY, CYAN, RED


def draw_hud(screen, font, world) -> pygame.Rect:
    """
    Side HUD panel: controls, altimeter, recommendation and override state.
    Returns the altimeter button rect (clicks on it toggle the mode).
    """
    screen_w, screen_h = screen.get_size()
    panel_w = int(screen_w * 0.30)
    panel_x = screen_w - panel_w
    margin_x, margin_y = 12, 10
    line_spacing = 20

    # translucent panel
    hud_surface = pygame.Surface((panel_w, screen_h), pygame.SRCALPHA)
    hud_surface.fill((0, 0, 0, 180))
    y = margin_y

    vessel = world.snapshot()
    override = world.controller.override
    rec = world.controller.last_recommendation

    header_lines = [
        f"t = {world.time_s:6.1f}s   {world.flight.name}",
        f"Body: {world.body.name}   {'PAUSED' if world.paused else ''}",
        "",
        "Controls:",
        "[1-7]    Load scenario",
        "[SPACE]  Pause / Resume",
        "[R]      Reload scenario",
        "[A]/click Toggle altimeter",
        "[UP/DOWN] Thrust +/-",
        "[P]      Arm parachutes",
        "",
    ]
    for line in header_lines:
        hud_surface.blit(font.render(line, True, WHITE), (margin_x, y))
        y += line_spacing

    if world.crashed:
        hud_surface.blit(font.render("CRASHED  [R] to retry", True, RED), (margin_x, y))
        y += line_spacing

    # ---- Altimeter button ----
    reading = vessel.altitude if world.altimeter == AltimeterMode.ASL else ground_clearance(vessel)
    button = pygame.Rect(margin_x, y, panel_w - 2 * margin_x, 44)
    color = AMBER if world.altimeter == AltimeterMode.AGL else GREEN
    pygame.draw.rect(hud_surface, color, button, 2)
    text = font.render(f"{world.altimeter.name}  {reading:>10,.0f} m", True, color)
    hud_surface.blit(text, (button.x + 10, button.y + 12))
    y += button.h + 10

    # ---- Decision state ----
    lines = [
        f"Vertical speed: {vessel.vertical_speed:7.1f} m/s",
        f"Thrust: {world.thrust_mps2:5.1f} m/s^2",
        f"Locked by pilot: {override.locked_mode.name}"
        + ("  (click pending)" if override.pending_click else ""),
    ]
    if rec is not None:
        threshold = f"{rec.threshold_s:.1f}s" if rec.threshold_s is not None else "off"
        impact = "inf" if rec.impact_s == float("inf") else f"{rec.impact_s:.1f}s"
        lines += [
            f"Recommended: {rec.mode.name}",
            f"Impact in: {impact} (threshold {threshold})",
            f"Worst sample: +{rec.lead_s:.0f}s",
        ]
    lines.append(f"Last switch: {world.last_reason or '-'}")

    stats = world.monitor.summary()
    lines.append(f"Switches: auto {stats.auto_switches} / user {stats.user_switches}")

    wrap_chars = (panel_w - 2 * margin_x) // 9
    for line in lines:
        for wline in textwrap.wrap(line, width=wrap_chars) or [""]:
            if y > screen_h - 2 * line_spacing:
                break
            hud_surface.blit(font.render(wline, True, CYAN), (margin_x, y))
            y += line_spacing

    # border line separating profile and HUD
    pygame.draw.line(hud_surface, GREY, (0, 0), (0, screen_h), 1)
    screen.blit(hud_surface, (panel_x, 0))

    return button.move(panel_x, 0)
