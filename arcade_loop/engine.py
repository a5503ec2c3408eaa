"""
Terminal Rendering Engine
==========================
Double-buffered blessed renderer that draws session snapshots.

The playfield is scaled into the terminal's game area (everything
above the 3 HUD rows). Only changed cells are written each frame.
"""

from dataclasses import dataclass, field
from typing import List, Iterable
import math
import random

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")

from .components import HAZARD, COLLECTIBLE, POWERUP_SHIELD, POWERUP_SLOW
from .snapshot import Snapshot, EntityView
from .state import PHASE_IDLE, PHASE_PAUSED, PHASE_GAME_OVER
from .variants import MISSES


# ANSI 256 color constants
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196

GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

WHITE = 255

HUD_ROWS = 3

# Glyph and color per entity variant
VARIANT_STYLE = {
    HAZARD: ('#', NEON_RED),
    COLLECTIBLE: ('*', NEON_YELLOW),
    POWERUP_SHIELD: ('S', NEON_CYAN),
    POWERUP_SLOW: ('%', NEON_MAGENTA),
}
CIRCLE_GLYPHS = {
    HAZARD: 'O',
    COLLECTIBLE: 'o',
}


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7

    def matches(self, other: 'Cell') -> bool:
        return self.char == other.char and self.fg_color == other.fg_color

    def reset(self):
        self.char = ' '
        self.fg_color = 7


class DoubleBuffer:
    """
    Writes go to a back buffer; present() emits only the cells that
    differ from what is already on screen, then swaps.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()

    def _init_buffers(self):
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def clear_back(self):
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7):
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color)

    def put_centered(self, y: int, text: str, fg_color: int = 7):
        self.put_string(max(0, self.width // 2 - len(text) // 2), y, text, fg_color)

    def present(self) -> str:
        """Swap buffers and return the escape sequence for changed cells."""
        output_parts = []
        normal = self.term.normal

        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                if back_cell.matches(self.front[y][x]):
                    continue
                output_parts.append(self.term.move_xy(x, y))
                output_parts.append(normal)
                output_parts.append(self.term.color(back_cell.fg_color))
                output_parts.append(back_cell.char or ' ')

        self.front, self.back = self.back, self.front
        return ''.join(output_parts)


@dataclass
class TerminalRenderer:
    """
    Render sink that paints snapshots into a terminal.

    Game-area drawing is offset by screen shake; HUD rows never shake.
    """
    term: Terminal
    buffer: DoubleBuffer = field(init=False)
    rng: random.Random = field(default_factory=random.Random)

    # Screen shake state
    shake_x: int = 0
    shake_frames: int = 0
    shake_intensity: int = 1

    # FPS display
    show_fps: bool = False
    current_fps: float = 60.0
    frame: int = 0

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def game_height(self) -> int:
        """Height of the playable area (excluding HUD rows)."""
        return max(1, self.buffer.height - HUD_ROWS)

    def trigger_shake(self, intensity: int = 1, frames: int = 6):
        self.shake_intensity = intensity
        self.shake_frames = max(self.shake_frames, frames)

    def handle_events(self, events: Iterable[dict]):
        """Turn session events into screen effects."""
        for event in events:
            if event['type'] == 'hit':
                self.trigger_shake(1, 8)
            elif event['type'] == 'game_over':
                self.trigger_shake(2, 15)

    def _update_shake(self):
        if self.shake_frames > 0:
            self.shake_x = self.rng.randint(-self.shake_intensity, self.shake_intensity)
            self.shake_frames -= 1
        else:
            self.shake_x = 0

    # -------------------------------------------------------------------------
    # Coordinate mapping
    # -------------------------------------------------------------------------

    def _scale(self, snap: Snapshot):
        return self.width / snap.width, self.game_height / snap.height

    def _span(self, start: float, length: float, scale: float, limit: int):
        """Cell range [first, last] covering [start, start + length)."""
        first = int(math.floor(start * scale))
        last = int(math.ceil((start + length) * scale)) - 1
        return max(0, first), min(limit - 1, max(first, last))

    def _put_game(self, x: int, y: int, char: str, color: int):
        if 0 <= y < self.game_height:
            self.buffer.put(x + self.shake_x, y, char, color)

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def _draw_rect(self, snap: Snapshot, x: float, y: float, w: float, h: float,
                   char: str, color: int):
        sx, sy = self._scale(snap)
        x0, x1 = self._span(x, w, sx, self.width)
        y0, y1 = self._span(y, h, sy, self.game_height)
        if y + h <= 0:
            return
        for cy in range(y0, y1 + 1):
            for cx in range(x0, x1 + 1):
                self._put_game(cx, cy, char, color)

    def _draw_circle(self, snap: Snapshot, entity: EntityView, char: str, color: int):
        sx, sy = self._scale(snap)
        r = entity.radius
        if entity.y + r <= 0:
            return
        x0, x1 = self._span(entity.x - r, 2 * r, sx, self.width)
        y0, y1 = self._span(entity.y - r, 2 * r, sy, self.game_height)
        drawn = False
        for cy in range(y0, y1 + 1):
            for cx in range(x0, x1 + 1):
                # Cell centre back in playfield units
                px = (cx + 0.5) / sx
                py = (cy + 0.5) / sy
                if (px - entity.x) ** 2 + (py - entity.y) ** 2 <= r * r:
                    self._put_game(cx, cy, char, color)
                    drawn = True
        if not drawn:
            self._put_game(int(entity.x * sx), int(max(0.0, entity.y) * sy), char, color)

    def draw_entities(self, snap: Snapshot):
        for entity in snap.entities:
            char, color = VARIANT_STYLE.get(entity.variant, ('?', WHITE))
            if entity.shape == 'circle':
                self._draw_circle(snap, entity, CIRCLE_GLYPHS.get(entity.variant, char), color)
            else:
                self._draw_rect(snap, entity.x, entity.y, entity.width, entity.height,
                                char, color)

    def draw_player(self, snap: Snapshot):
        player = snap.player
        if player is None:
            return
        # Blink while invulnerable
        if player.invulnerable and (self.frame // 4) % 2 == 1:
            return
        color = NEON_GREEN
        if snap.shield_charges > 0:
            color = NEON_CYAN
        if player.dashing:
            color = WHITE
        self._draw_rect(snap, player.x, player.y, player.width, player.height, '=', color)

    def draw_hud(self, snap: Snapshot):
        ui_y = self.game_height
        width = self.width

        self.buffer.put_string(0, ui_y, '=' * width, GRAY_DARK)
        self.buffer.put_string(2, ui_y, f' {snap.title.upper()} ', NEON_MAGENTA)

        status = f' LEVEL:{snap.level}  SPEED:{snap.speed:.1f}x '
        self.buffer.put_string(width - len(status) - 1, ui_y, status, NEON_YELLOW)

        row = ui_y + 1
        self.buffer.put_string(2, row, f'SCORE:{snap.score}', WHITE)
        self.buffer.put_string(18, row, f'BEST:{snap.best}', GRAY_MED)
        if snap.damage_mode == MISSES:
            text = f'MISSES:{snap.misses}/{snap.miss_limit}'
        else:
            text = 'LIVES:' + '+' * snap.lives
        self.buffer.put_string(34, row, text, NEON_RED)

        effects = []
        if snap.shield_charges > 0:
            effects.append(('SHIELD', NEON_CYAN))
        if snap.slow_remaining > 0:
            effects.append((f'SLOW {snap.slow_remaining / 60:.0f}s', NEON_MAGENTA))
        ex = 52
        for text, color in effects:
            self.buffer.put_string(ex, row, text, color)
            ex += len(text) + 2

        controls = 'A/D or arrows:Move  SPACE:Start/Dash  P:Pause  R:Restart  Q:Quit'
        self.buffer.put_string(2, ui_y + 2, controls, GRAY_DARKER)

        if self.show_fps:
            fps_text = f'FPS:{self.current_fps:.0f}'
            self.buffer.put_string(width - len(fps_text) - 2, 0, fps_text, GRAY_MED)

    def draw_overlay(self, snap: Snapshot):
        mid = self.game_height // 2
        if snap.phase == PHASE_IDLE:
            self.buffer.put_centered(mid - 2, snap.title.upper(), NEON_MAGENTA)
            if (self.frame // 30) % 2 == 0:
                self.buffer.put_centered(mid, '[ PRESS SPACE TO START ]', NEON_GREEN)
        elif snap.phase == PHASE_PAUSED:
            self.buffer.put_centered(mid - 1, 'PAUSED', NEON_YELLOW)
            self.buffer.put_centered(mid + 1, 'P to resume  R to restart', GRAY_MED)
        elif snap.phase == PHASE_GAME_OVER:
            stats = snap.stats
            lines = [
                ('GAME OVER', NEON_RED),
                (f'SCORE: {snap.score}   BEST: {snap.best}', NEON_YELLOW),
                (f'SPAWNED {stats.spawned}  DODGED {stats.dodged}  '
                 f'CAUGHT {stats.collected}  HITS {stats.hits}', GRAY_MED),
            ]
            for i, (text, color) in enumerate(lines):
                self.buffer.put_centered(mid - 2 + i, text, color)
            if (self.frame // 30) % 2 == 0:
                self.buffer.put_centered(mid + 2, '[ R / SPACE - RESTART ]    [ Q - QUIT ]',
                                         NEON_CYAN)

    def render(self, snap: Snapshot) -> str:
        """Draw one snapshot and return the terminal output for it."""
        self.frame += 1
        self._update_shake()
        self.buffer.clear_back()
        self.draw_entities(snap)
        self.draw_player(snap)
        self.draw_hud(snap)
        self.draw_overlay(snap)
        return self.buffer.present()

    def draw(self, snap: Snapshot):
        """Render sink entry point: draw and flush to the terminal."""
        print(self.render(snap), end='', flush=True)
