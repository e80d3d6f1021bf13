import pygame

from .colors import SKY
from .hud import draw_hud
from .profile_display import draw_profile


def render(screen, font, world) -> pygame.Rect:
    """Draw one frame; returns the altimeter button rect for click handling."""
    screen.fill(SKY)
    screen_w, screen_h = screen.get_size()
    profile_rect = pygame.Rect(0, 0, int(screen_w * 0.70), screen_h)
    draw_profile(screen, font, world, profile_rect)
    return draw_hud(screen, font, world)
