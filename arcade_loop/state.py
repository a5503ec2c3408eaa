"""
Session State
==============
Mutable per-run state shared by the collision resolver and the session.
"""

from dataclasses import dataclass, field
from typing import Dict


# Session phases
PHASE_IDLE = 'idle'
PHASE_RUNNING = 'running'
PHASE_PAUSED = 'paused'
PHASE_GAME_OVER = 'game_over'


@dataclass
class RunStats:
    """Per-run counters for the game-over screen."""
    spawned: int = 0
    dodged: int = 0
    collected: int = 0
    missed: int = 0
    hits: int = 0
    shields_used: int = 0
    powerups: int = 0


@dataclass
class SessionState:
    """Score, lives and timers of the current run."""
    phase: str = PHASE_IDLE
    score: int = 0
    lives: int = 0
    misses: int = 0
    level: int = 1
    speed: float = 1.0
    elapsed: float = 0.0  # steps
    shield_charges: int = 0
    slow_remaining: float = 0.0  # steps
    trickle: float = 0.0  # fractional score not yet credited
    next_bonus_at: int = 0  # score that grants the next extra life
    spawn_cooldowns: Dict[str, float] = field(default_factory=dict)
    stats: RunStats = field(default_factory=RunStats)

    @property
    def running(self) -> bool:
        return self.phase == PHASE_RUNNING

    @property
    def paused(self) -> bool:
        return self.phase == PHASE_PAUSED

    @property
    def over(self) -> bool:
        return self.phase == PHASE_GAME_OVER

    @property
    def slow_active(self) -> bool:
        return self.slow_remaining > 0
