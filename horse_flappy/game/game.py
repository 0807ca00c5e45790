# horse_flappy/game/game.py
import sys, argparse
import pygame
from pygame import K_SPACE, K_UP, K_ESCAPE, K_r, K_p
from .config import WIDTH, HEIGHT, FPS, BEST_FILE_DEFAULT, SEED_DEFAULT, COLOR_FG
from .engine import SimulationState
from .fences import FenceGen
from .render import draw_scene
from .session import Session
from .storage import BestScoreStore


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=SEED_DEFAULT,
                   help="Fence layout seed. Omit for a random layout each launch.")
    p.add_argument("--best-file", type=str, default=BEST_FILE_DEFAULT,
                   help="Where the best score is kept.")
    return p.parse_args()


class PygameView:
    """Renderer + HUD on one pygame window."""
    def __init__(self, screen: pygame.Surface, font: pygame.font.Font):
        self.screen = screen
        self.font = font
        self.score_text = "0"
        self.best_text = "Best: 0"
        self._best = 0

    def set_score_text(self, score: int):
        self.score_text = str(score)

    def set_best_text(self, best: int):
        self._best = best
        self.best_text = f"Best: {best}"

    def render(self, horse, fences, score, mode):
        draw_scene(self.screen, horse, fences, score, mode, font=self.font, best=self._best)
        best = self.font.render(self.best_text, True, COLOR_FG)
        self.screen.blit(best, (self.screen.get_width() - best.get_width() - 12, 10))
        pygame.display.flip()


def run():
    args = parse_args()

    pygame.init()
    pygame.display.set_caption("Horse Flappy")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 22)

    view = PygameView(screen, font)
    fence_gen = FenceGen(args.seed)
    session = Session(
        state=SimulationState(field_w=WIDTH, field_h=HEIGHT),
        fence_gen=fence_gen,
        store=BestScoreStore(args.best_file),
        renderer=view,
        hud=view,
    )
    print(f"Horse Flappy: seed={fence_gen.seed} best={session.state.best}")

    while True:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key in (K_SPACE, K_UP):
                    session.impulse()
                if event.key == K_r:
                    session.restart()
                if event.key == K_p:
                    session.pause_toggle()
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                session.impulse()

        prev_mode = session.mode
        session.frame(pygame.time.get_ticks())
        if prev_mode == "playing" and session.mode == "gameover":
            print(f"Game over ({session.death_cause}): score={session.state.score} best={session.state.best}")


if __name__ == "__main__":
    run()
