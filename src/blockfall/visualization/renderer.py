from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from blockfall.game import GHOST_VALUE, GameSnapshot, TetrominoType, color_for
from blockfall.game.pieces import BASE_SHAPES

BACKGROUND = (10, 10, 14)
EMPTY_CELL = (20, 20, 26)
GHOST_CELL = (60, 60, 72)
TEXT = (230, 230, 230)


def _color_for_value(v: int) -> Tuple[int, int, int]:
    if v == 0:
        return EMPTY_CELL
    if v == GHOST_VALUE:
        return GHOST_CELL
    try:
        return color_for(TetrominoType(abs(v)))
    except ValueError:
        return (200, 200, 200)


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_cells: int = 6) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, board_shape: Tuple[int, int]) -> Tuple[int, int]:
        h, w = board_shape
        width = self.margin * 3 + (w + self.panel_cells) * self.cell_size
        height = self.margin * 2 + h * self.cell_size
        return width, height

    def grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, _color_for_value(int(state[y, x])), rect)
        return surf

    def next_piece_surface(self, kind: TetrominoType) -> pygame.Surface:
        shape = BASE_SHAPES[kind]
        size = self.cell_size // 2
        surf = pygame.Surface((shape.shape[1] * size, shape.shape[0] * size), pygame.SRCALPHA)
        for py in range(shape.shape[0]):
            for px in range(shape.shape[1]):
                if shape[py, px]:
                    rect = pygame.Rect(px * size, py * size, size - 1, size - 1)
                    pygame.draw.rect(surf, color_for(kind), rect)
        return surf

    def _text(self, screen: pygame.Surface, message: str, pos: Tuple[int, int]) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 26)
        screen.blit(self._font.render(message, True, TEXT), pos)

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot) -> None:
        state = snapshot.compose(include_ghost=True)
        screen.fill(BACKGROUND)
        screen.blit(self.grid_surface(state), (self.margin, self.margin))

        panel_x = self.margin * 2 + state.shape[1] * self.cell_size
        y = self.margin
        self._text(screen, "Next", (panel_x, y))
        screen.blit(self.next_piece_surface(snapshot.next_kind), (panel_x, y + 24))
        y += 24 + self.cell_size * 2 + 12
        for label, value in (("Score", snapshot.score), ("Lines", snapshot.lines), ("Level", snapshot.level)):
            self._text(screen, f"{label}: {value}", (panel_x, y))
            y += 28

        if snapshot.game_over:
            self._text(screen, "Game Over - R to restart", (panel_x, y + 12))
        elif snapshot.paused:
            self._text(screen, "Paused - P to resume", (panel_x, y + 12))
        pygame.display.flip()
