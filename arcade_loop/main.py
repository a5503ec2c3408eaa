#!/usr/bin/env python3
"""
ARCADE_LOOP - Terminal Arcade Games
====================================
Three falling-object arcade games on one loop engine.

Games:
    dodge   - Dodge the falling blocks
    dash    - Dash between meteors, grab orbs and power-ups
    catch   - Catch the fruit, avoid the bombs

Controls:
    A/D, LEFT/RIGHT - Move
    SPACE           - Start / Dash
    P               - Pause / Resume
    R               - Restart
    F               - Toggle FPS display
    Q/ESC           - Quit
"""

import argparse
import logging
import random
import sys
import time

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .clock import TARGET_FPS
from .engine import TerminalRenderer
from .persistence import JsonBestScoreStore, DEFAULT_BEST_FILE
from .player import InputHandler
from .session import GameSession
from .variants import VARIANTS, get_variant

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

FRAME_TIME = 1.0 / TARGET_FPS
MIN_WIDTH = 60
MIN_HEIGHT = 20


class TerminalGame:
    """Wires a GameSession to a blessed terminal."""

    def __init__(self, term: Terminal, session: GameSession,
                 renderer: TerminalRenderer):
        self.term = term
        self.session = session
        self.renderer = renderer
        self.input_handler = InputHandler()
        self.running = True

    def handle_input(self):
        """Drain all pending input from the terminal."""
        key = self.term.inkey(timeout=0)
        while key:
            self.input_handler.process_key(key)
            key = self.term.inkey(timeout=0)

        if self.input_handler.consume_quit():
            self.running = False
        if self.input_handler.consume_toggle_fps():
            self.renderer.show_fps = not self.renderer.show_fps

    def frame(self, timestamp_ms: float):
        """One host frame: input, simulation step, effects, draw."""
        self.handle_input()
        self.input_handler.update()
        self.session.step(timestamp_ms, self.input_handler.sample())
        self.renderer.handle_events(self.session.drain_events())
        self.renderer.draw(self.session.snapshot())


def run(game: TerminalGame):
    """Fixed 60 FPS host loop. Stops when game.running goes False."""
    term = game.term
    fps_timer = 0.0
    fps_frame_count = 0
    last_time = time.perf_counter()

    # Initial clear (only time we clear the whole screen)
    print(term.home + term.clear, end='', flush=True)

    while game.running:
        now = time.perf_counter()
        fps_timer += now - last_time
        last_time = now

        game.frame(now * 1000.0)
        fps_frame_count += 1

        if fps_timer >= 0.5:
            game.renderer.current_fps = fps_frame_count / fps_timer
            fps_frame_count = 0
            fps_timer = 0.0

        # Sleep for remaining frame time
        elapsed = time.perf_counter() - now
        sleep_time = FRAME_TIME - elapsed
        if sleep_time > 0.001:
            time.sleep(sleep_time * 0.9)

    print(term.normal, end='', flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='arcade-loop',
        description='Falling-object arcade games in your terminal.',
    )
    parser.add_argument('variant', nargs='?', default='dodge',
                        help='game to play: %s' % ', '.join(sorted(VARIANTS)))
    parser.add_argument('--seed', type=int, default=None,
                        help='random seed for reproducible spawns')
    parser.add_argument('--best-file', default=str(DEFAULT_BEST_FILE),
                        help='JSON file holding best scores')
    parser.add_argument('--log-file', default=None,
                        help='write debug logs to this file')
    parser.add_argument('--show-fps', action='store_true',
                        help='show the FPS counter from the start')
    return parser


def main(argv=None):
    """Entry point. Sets up terminal and runs the game loop."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = get_variant(args.variant)
    except KeyError:
        parser.error(f'unknown game {args.variant!r} '
                     f'(choose from {", ".join(sorted(VARIANTS))})')

    # Logging to stderr would corrupt the fullscreen display
    if args.log_file:
        logging.basicConfig(
            filename=args.log_file,
            level=logging.DEBUG,
            format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        )

    term = Terminal()
    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    store = JsonBestScoreStore(args.best_file, key=f'{config.name}Best')
    session = GameSession(config, store=store, rng=random.Random(args.seed))
    renderer = TerminalRenderer(term)
    renderer.show_fps = args.show_fps
    logger.info('Starting %s (seed=%s, best=%d)', config.name, args.seed, session.best)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        run(TerminalGame(term, session, renderer))


if __name__ == '__main__':
    main()
