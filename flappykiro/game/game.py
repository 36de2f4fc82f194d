# flappykiro/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_SPACE, K_ESCAPE, K_1, K_2, K_3
from .config import WIDTH, HEIGHT, FPS, HIGH_SCORE_FILE
from .driver import FrameDriver
from .obstacles import make_rng
from .ports import SynthAudio, NullAudio, JsonHighScoreStore
from .render import GameRenderer
from .session import GameSession

TIER_KEYS = {K_1: 1, K_2: 2, K_3: 3}

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Flappy Kiro")
    p.add_argument("--seed", type=int, default=None,
                   help="Gap seed for reproducible towers. Omit for random, -1 for random and print it.")
    p.add_argument("--high-score-file", default=HIGH_SCORE_FILE,
                   help="JSON file holding the best score.")
    p.add_argument("--mute", action="store_true", help="Disable sound.")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)

def translate_event(event, driver: FrameDriver) -> bool:
    """
    Queue logical input for one pygame event. Returns False on quit.
    Nothing here looks at the mode: earlier events in the same batch may
    still change it, so the driver resolves meaning when it drains.
    """
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYDOWN:
        if event.key == K_ESCAPE:
            return False
        if event.key == K_SPACE:
            driver.push_primary()
        elif event.key in TIER_KEYS:
            driver.push_select(TIER_KEYS[event.key])
    if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
        driver.push_pointer(event.pos)
    return True

def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    rng, seed = make_rng(None if args.seed in (None, -1) else args.seed)
    if args.seed == -1:
        print(f"seed={seed}")

    pygame.init()
    pygame.display.set_caption("Flappy Kiro")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()

    audio = NullAudio() if args.mute else SynthAudio()
    session = GameSession(WIDTH, HEIGHT, audio=audio,
                          store=JsonHighScoreStore(args.high_score_file), rng=rng)
    driver = FrameDriver(session)
    renderer = GameRenderer(screen)

    running = True
    while running:
        clock.tick(FPS)
        # events queue up here and are applied at the start of the next tick
        for event in pygame.event.get():
            if not translate_event(event, driver):
                running = False
                break
        if not running:
            break
        driver.frame(renderer)
        pygame.display.flip()

    pygame.quit()
    return 0

def main():
    sys.exit(run())

if __name__ == "__main__":
    main()
