# __main__.py - entry point
import logging
import os

import pygame

from patience import common as C
from patience import ui
from patience.modes import describe_game, new_game

logger = logging.getLogger(__name__)

HINTS = "F: FreeCell  K: Klondike  1/2/3: Spider  N: New  Esc: Quit"


class GameSession:
    """Current game choice and its tableau/view; replaced wholesale on a new game."""

    def __init__(self, game: str, spider_level: str):
        self.game = "klondike"
        self.spider_level = spider_level
        self.tableau = None
        self.view = None
        self.start(game, spider_level)

    def start(self, game: str, spider_level=None):
        if spider_level is not None:
            self.spider_level = spider_level
        level = self.spider_level if str(game).lower() == "spider" else None
        try:
            tableau = new_game(game, level)
        except ValueError as exc:
            logger.warning("%s; starting Klondike instead", exc)
            game, level = "klondike", None
            tableau = new_game(game)
        self.game = str(game).lower()
        self.tableau = tableau
        self.view = ui.TableauView(tableau)

    def restart(self):
        self.start(self.game)

    @property
    def title(self) -> str:
        level = self.spider_level if self.game == "spider" else None
        return describe_game(self.game, level)


GAME_KEYS = {
    pygame.K_f: ("freecell", None),
    pygame.K_k: ("klondike", None),
    pygame.K_1: ("spider", "easy"),
    pygame.K_2: ("spider", "medium"),
    pygame.K_3: ("spider", "hard"),
}


def _initial_window_size():
    info = pygame.display.Info()
    # Keep a safety margin so the window never hides under taskbar
    margin_w, margin_h = 120, 140
    w = min(ui.SCREEN_W, max(640, info.current_w - margin_w))
    h = min(ui.SCREEN_H, max(480, info.current_h - margin_h))
    return w, h


def main():
    settings = C.load_settings()
    C.setup_logging(settings["log_level"])

    os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
    pygame.init()

    w, h = _initial_window_size()
    ui.SCREEN_W, ui.SCREEN_H = w, h
    screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
    pygame.display.set_caption("Patience")
    ui.setup_fonts()
    clock = pygame.time.Clock()

    session = GameSession(settings["game"], settings["spider_level"])

    running = True
    while running:
        clock.tick(60)
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.VIDEORESIZE:
                ui.SCREEN_W, ui.SCREEN_H = e.size
                screen = pygame.display.set_mode((ui.SCREEN_W, ui.SCREEN_H), pygame.RESIZABLE)
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE:
                    running = False
                elif e.key == pygame.K_n:
                    session.restart()
                elif e.key in GAME_KEYS:
                    game, level = GAME_KEYS[e.key]
                    session.start(game, level)
                    C.save_settings({"game": session.game, "spider_level": session.spider_level})
            else:
                session.view.handle_event(e)
        screen.fill(ui.TABLE_BG)
        session.view.draw(screen)
        ui.draw_status_bar(screen, f"{session.title}    {HINTS}")
        pygame.display.flip()
    pygame.quit()


if __name__ == "__main__":
    main()
