from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

import pygame

from blockfall.game import Action, BlockfallGame, GameConfig
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_z: Action.ROTATE_CCW,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_p: Action.TOGGLE_PAUSE,
    pygame.K_r: Action.RESET,
}


def action_for_key(key: int) -> Optional[Action]:
    return KEY_TO_ACTION.get(key)


def run(seed: Optional[int] = None, cell_size: int = 28) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = BlockfallGame(GameConfig(random_seed=seed))
        renderer = Renderer(cell_size=cell_size)
        screen = pygame.display.set_mode(renderer.window_size((game.grid.height, game.grid.width)))
        pygame.display.set_caption("Blockfall")
        game.start()

        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        action = action_for_key(event.key)
                        if action is not None:
                            game.submit(action)

            # Commands first, then gravity for the elapsed frame time
            game.update(clock.tick(60))
            renderer.draw(screen, game.snapshot())
    finally:
        pygame.quit()


def main(argv: Optional[list] = None) -> None:  # pragma: no cover
    parser = argparse.ArgumentParser(description="Play Blockfall with the keyboard")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--cell-size", type=int, default=28)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run(seed=args.seed, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
