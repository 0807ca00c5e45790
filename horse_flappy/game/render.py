# horse_flappy/game/render.py
from __future__ import annotations
from typing import Iterable, List, Optional, Tuple
import pygame

from .config import (
    GROUND_H,
    COLOR_SKY_TOP, COLOR_SKY_BOT, COLOR_GROUND, COLOR_GRASS,
    COLOR_FENCE, COLOR_FENCE_CAP, COLOR_HORSE, COLOR_HORSE_DEAD,
    COLOR_FG, COLOR_OVERLAY, COLOR_OVERLAY_TEXT,
)
from .fences import Fence
from .horse import Horse

OVERLAY_LINES = {
    "ready": ("Horse Flappy", "SPACE / click to jump", "Pass the fences. Don't touch anything."),
    "paused": ("Paused", "Press P to resume"),
}


def _lerp(a: Tuple[int, int, int], b: Tuple[int, int, int], t: float) -> Tuple[int, int, int]:
    return tuple(int(a[i] + (b[i] - a[i]) * t) for i in range(3))


CLOUD_COUNT = 6
CLOUD_ALPHA = 102           # ~40 % opacity
CLOUD_DRIFT_PX_PER_S = 4.0
SHADOW_ALPHA = 38          # ~15 % opacity


def cloud_rects(field_w: int, t_s: float) -> List[pygame.Rect]:
    """Cloud boxes at time `t_s` (seconds); they slide left and wrap every field_w + 200 px."""
    shift = (t_s * CLOUD_DRIFT_PX_PER_S) % (field_w + 200)
    rects = []
    for i in range(CLOUD_COUNT):
        cw = 60 + (i % 3) * 20
        ch = 24 + (i % 2) * 10
        rects.append(pygame.Rect(int(field_w + i * 120 - shift), 40 + i * 30, cw, ch))
    return rects


def shadow_rect(horse: Horse, field_h: int) -> pygame.Rect:
    """Bounding box of the horse's shadow ellipse on the ground line."""
    rx, ry = horse.w * 0.55, 6
    cx, cy = horse.x + horse.w / 2, field_h - GROUND_H + 4
    return pygame.Rect(int(cx - rx), int(cy - ry), int(2 * rx), 2 * ry)


def draw_clouds(surf: pygame.Surface, t_s: Optional[float] = None):
    if t_s is None:
        t_s = pygame.time.get_ticks() / 1000.0
    layer = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
    for r in cloud_rects(surf.get_width(), t_s):
        pygame.draw.rect(layer, (255, 255, 255, CLOUD_ALPHA), r, border_radius=12)
    surf.blit(layer, (0, 0))


def draw_background(surf: pygame.Surface, t_s: Optional[float] = None):
    w, h = surf.get_size()
    # vertical sky gradient, one line per row
    for y in range(h):
        pygame.draw.line(surf, _lerp(COLOR_SKY_TOP, COLOR_SKY_BOT, y / max(1, h - 1)), (0, y), (w, y))
    draw_clouds(surf, t_s)
    pygame.draw.rect(surf, COLOR_GROUND, pygame.Rect(0, h - GROUND_H, w, GROUND_H))
    pygame.draw.rect(surf, COLOR_GRASS, pygame.Rect(0, h - GROUND_H, w, 14))


def draw_fences(surf: pygame.Surface, fences: Iterable[Fence]):
    h = surf.get_height()
    for f in fences:
        top, bot = f.rects(h)
        pygame.draw.rect(surf, COLOR_FENCE, top)
        pygame.draw.rect(surf, COLOR_FENCE, bot)
        # caps
        pygame.draw.rect(surf, COLOR_FENCE_CAP, pygame.Rect(top.x - 4, top.bottom - 12, f.w + 8, 12))
        pygame.draw.rect(surf, COLOR_FENCE_CAP, pygame.Rect(bot.x - 4, bot.y, f.w + 8, 12))


def draw_horse(surf: pygame.Surface, horse: Horse, alive: bool = True):
    color = COLOR_HORSE if alive else COLOR_HORSE_DEAD
    x, y, w, h = int(horse.x), int(horse.y), horse.w, horse.h
    shadow = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
    pygame.draw.ellipse(shadow, (0, 0, 0, SHADOW_ALPHA), shadow_rect(horse, surf.get_height()))
    surf.blit(shadow, (0, 0))
    pygame.draw.rect(surf, color, pygame.Rect(x, y, w, h))                  # body
    pygame.draw.rect(surf, color, pygame.Rect(x + w - 10, y + 4, 14, 12))   # head
    pygame.draw.polygon(surf, color, ((x + w + 2, y + 4), (x + w + 6, y - 6), (x + w - 1, y + 4)))
    pygame.draw.rect(surf, color, pygame.Rect(x - 8, y + h // 2 - 2, 8, 4))  # tail
    pygame.draw.rect(surf, (255, 255, 255), pygame.Rect(x + w + 4, y + 8, 3, 3))
    pygame.draw.rect(surf, (0, 0, 0), pygame.Rect(x + w + 5, y + 9, 1, 1))


def draw_overlay(surf: pygame.Surface, font: pygame.font.Font, lines: Tuple[str, ...]):
    w, h = surf.get_size()
    panel_h = 28 * (len(lines) + 1)
    panel = pygame.Surface((w - 60, panel_h), pygame.SRCALPHA)
    panel.fill(COLOR_OVERLAY)
    top = (h - panel_h) // 2
    surf.blit(panel, (30, top))
    for i, msg in enumerate(lines):
        txt = font.render(msg, True, COLOR_OVERLAY_TEXT)
        surf.blit(txt, (w // 2 - txt.get_width() // 2, top + 14 + i * 28))


def overlay_lines(mode: str, score: int, best: int) -> Optional[Tuple[str, ...]]:
    if mode == "gameover":
        tail = "  - New best!" if score >= best and score > 0 else ""
        return ("Game Over", f"Score: {score}{tail}", "Press R to restart")
    return OVERLAY_LINES.get(mode)


def draw_scene(surf: pygame.Surface,
               horse: Horse,
               fences: Iterable[Fence],
               score: int,
               mode: str,
               font: Optional[pygame.font.Font] = None,
               best: int = 0):
    draw_background(surf)
    draw_fences(surf, fences)
    draw_horse(surf, horse, alive=(mode != "gameover"))
    if font is None:
        return
    surf.blit(font.render(str(score), True, COLOR_FG), (12, 10))
    lines = overlay_lines(mode, score, best)
    if lines:
        draw_overlay(surf, font, lines)
