from __future__ import annotations

import argparse
import logging
import queue
from typing import Callable, Dict, Optional

import pygame

from command_stack.config import AppConfig, default_socket_path, GRAVITY_MS, POLL_MS
from command_stack.game import Game
from command_stack.game.events import CommandEvent
from command_stack.io import CommandListener, drain_events
from .renderer import Renderer


logger = logging.getLogger(__name__)

KEY_TO_ACTION: Dict[int, Callable[[Game], object]] = {
    pygame.K_LEFT: lambda game: game.move_current(-1, 0),
    pygame.K_RIGHT: lambda game: game.move_current(1, 0),
    pygame.K_DOWN: lambda game: game.move_current(0, 1),
    pygame.K_UP: lambda game: game.rotate_current(),
    pygame.K_SPACE: lambda game: game.hard_drop(),
}
QUIT_KEYS = (pygame.K_q, pygame.K_ESCAPE)


def run(config: Optional[AppConfig] = None) -> None:
    config = config or AppConfig()
    events: "queue.Queue[CommandEvent]" = queue.Queue()
    listener = CommandListener(config.socket_path, events)
    listener.start()

    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = Game()
        renderer = Renderer(cell_size=config.cell_size)
        screen = pygame.display.set_mode(renderer.window_size(game))
        pygame.display.set_caption("command-stack")

        last_fall = pygame.time.get_ticks()
        running = True
        while running:
            # Command events first, in arrival order
            for event in drain_events(events):
                game.handle_command_event(event)

            renderer.draw(screen, game)
            game.process_effects()

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key in QUIT_KEYS:
                        running = False
                    elif event.key == pygame.K_r and game.game_over:
                        logger.info(f"Restarting after game over (score {game.score})")
                        game = Game()
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            action(game)

            # Gravity
            now = pygame.time.get_ticks()
            if now - last_fall >= config.gravity_ms:
                game.tick_gravity()
                last_fall = now

            clock.tick(1000 // max(1, config.poll_ms))
    finally:
        pygame.quit()
        listener.stop()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Falling-block puzzle fed by your shell commands.")
    p.add_argument("--socket", type=str, default=default_socket_path(),
                   help="Unix socket the shell hook writes START/END lines to")
    p.add_argument("--gravity_ms", type=int, default=GRAVITY_MS)
    p.add_argument("--poll_ms", type=int, default=POLL_MS)
    p.add_argument("--cell_size", type=int, default=22)
    p.add_argument("--log-level", dest="log_level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level, format="[command-stack] %(asctime)s %(name)s - %(message)s")
    run(AppConfig(
        socket_path=args.socket,
        gravity_ms=args.gravity_ms,
        poll_ms=args.poll_ms,
        cell_size=args.cell_size,
    ))


if __name__ == "__main__":  # pragma: no cover
    main()
