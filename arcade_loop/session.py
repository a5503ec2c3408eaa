"""
Game Session
=============
The loop engine: one run of one game variant at a time.

GameSession owns the ECS world, the clock, the random source and the
best-score store. The host calls step() once per frame with a
timestamp and an InputState; everything else (spawning, physics,
collisions, scoring, difficulty) happens inside.
"""

import logging
import random
from dataclasses import replace
from typing import List, Optional

from .ecs import World
from .clock import FrameClock
from .player import InputState, NO_INPUT, create_player
from .spawner import spawn_system
from .systems import (
    player_input_system, dash_system, invulnerability_system,
    movement_system, boundary_system, fall_system, exit_system
)
from .collision import resolve_collisions, resolve_exits, is_fatal
from .persistence import MemoryBestScoreStore
from .snapshot import Snapshot, build_snapshot
from .state import (
    SessionState, PHASE_IDLE, PHASE_RUNNING, PHASE_PAUSED, PHASE_GAME_OVER
)
from .variants import VariantConfig, LIVES

logger = logging.getLogger(__name__)


class GameSession:
    """Central game state container. Passed to render sinks as snapshots."""

    def __init__(self, config: VariantConfig, store=None,
                 rng: Optional[random.Random] = None,
                 clock: Optional[FrameClock] = None,
                 sink=None):
        self.config = config
        self.store = store if store is not None else MemoryBestScoreStore()
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock if clock is not None else FrameClock()
        self.sink = sink

        self.world = World()
        self.player_id = None
        self.state = SessionState()
        self.best = self._load_best()
        self.frame = 0

        self._events: List[dict] = []
        self._prev_inputs = NO_INPUT

        self._reset_run()
        self.state.phase = PHASE_IDLE

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def _load_best(self) -> int:
        try:
            best = int(self.store.load())
        except (OSError, ValueError, TypeError) as exc:
            logger.warning('Best score unavailable, starting from 0: %s', exc)
            return 0
        return max(0, best)

    def _save_best(self):
        try:
            self.store.save(self.best)
        except (OSError, ValueError) as exc:
            logger.warning('Best score write dropped: %s', exc)

    # -------------------------------------------------------------------------
    # Lifecycle commands
    # -------------------------------------------------------------------------

    @property
    def phase(self) -> str:
        return self.state.phase

    def _reset_run(self):
        """Fresh world, player, timers and counters."""
        config = self.config
        self.world.clear()
        self.player_id = create_player(self.world, config)
        self.clock.reset()

        self.state = SessionState(
            phase=PHASE_RUNNING,
            lives=config.lives if config.damage_mode == LIVES else 0,
            level=config.difficulty.level_at(0.0),
            speed=config.difficulty.speed_at(0.0),
            next_bonus_at=config.extra_life_every,
            spawn_cooldowns={sc.kind: 0.0 for sc in config.spawn_classes},
        )

    def start(self):
        """Begin a run from Idle or Game Over. No-op mid-run."""
        if self.state.phase in (PHASE_RUNNING, PHASE_PAUSED):
            logger.debug('start() ignored while %s', self.state.phase)
            return
        self._reset_run()
        self._events.append({'type': 'started'})
        logger.info('%s run started (best=%d)', self.config.name, self.best)

    def restart(self):
        """Throw away the current run and begin a new one."""
        self._reset_run()
        self._events.append({'type': 'started'})
        logger.info('%s run restarted (best=%d)', self.config.name, self.best)

    def pause(self):
        if self.state.phase != PHASE_RUNNING:
            logger.debug('pause() ignored while %s', self.state.phase)
            return
        self.state.phase = PHASE_PAUSED
        logger.info('Paused at score %d', self.state.score)

    def resume(self):
        if self.state.phase != PHASE_PAUSED:
            logger.debug('resume() ignored while %s', self.state.phase)
            return
        self.state.phase = PHASE_RUNNING
        logger.info('Resumed')

    def toggle_pause(self):
        if self.state.phase == PHASE_PAUSED:
            self.resume()
        else:
            self.pause()

    def _game_over(self):
        state = self.state
        state.phase = PHASE_GAME_OVER
        new_best = state.score > self.best
        if new_best:
            self.best = state.score
            self._save_best()
        self._events.append({'type': 'game_over', 'score': state.score,
                             'best': self.best, 'new_best': new_best})
        logger.info('%s game over: score=%d best=%d elapsed=%.0f steps',
                    self.config.name, state.score, self.best, state.elapsed)

    def _handle_commands(self, inputs: InputState) -> bool:
        """
        React to the rising edge of pause/restart/action.

        Returns True when a new run began this step.
        """
        prev = self._prev_inputs
        self._prev_inputs = inputs

        if inputs.restart and not prev.restart:
            self.restart()
            return True
        if inputs.pause and not prev.pause:
            self.toggle_pause()
            return False
        if inputs.action and not prev.action:
            if self.state.phase in (PHASE_IDLE, PHASE_GAME_OVER):
                self.start()
                return True
        return False

    # -------------------------------------------------------------------------
    # Per-frame step
    # -------------------------------------------------------------------------

    def step(self, timestamp_ms: float, inputs: InputState = NO_INPUT) -> bool:
        """
        Run one frame.

        The clock always advances so resuming never causes a jump; the
        simulation only runs while the session is Running. Returns True
        while a run is in progress (Running or Paused).
        """
        self.frame += 1
        dt = self.clock.tick(timestamp_ms)
        if self._handle_commands(inputs):
            # New run: nominal first step, and the starting press is not a dash
            dt = self.clock.tick(timestamp_ms)
            inputs = replace(inputs, action=False)

        if self.state.phase == PHASE_RUNNING:
            self._simulate(dt, inputs)

        if self.sink is not None:
            self.sink.draw(self.snapshot())

        return self.state.phase in (PHASE_RUNNING, PHASE_PAUSED)

    def _update_difficulty(self, dt: float):
        state = self.state
        curve = self.config.difficulty
        state.elapsed += dt
        state.speed = curve.speed_at(state.elapsed)
        level = curve.level_at(state.elapsed)
        if level != state.level:
            state.level = level
            self._events.append({'type': 'level_up', 'level': level})
            logger.debug('Level %d at %.0f steps', level, state.elapsed)

    def _award_bonuses(self):
        """Extra life (or forgiven miss) every extra_life_every points."""
        state = self.state
        config = self.config
        every = config.extra_life_every
        if every <= 0:
            return
        while state.score >= state.next_bonus_at:
            state.next_bonus_at += every
            if config.damage_mode == LIVES:
                if state.lives < config.max_lives:
                    state.lives += 1
                    self._events.append({'type': 'extra_life', 'lives': state.lives})
            elif state.misses > 0:
                state.misses -= 1
                self._events.append({'type': 'extra_life', 'misses': state.misses})

    def _simulate(self, dt: float, inputs: InputState):
        world = self.world
        state = self.state
        config = self.config

        self._update_difficulty(dt)

        # Timers
        slow_scale = config.slow_factor if state.slow_active else 1.0
        if state.slow_remaining > 0:
            state.slow_remaining = max(0.0, state.slow_remaining - dt)
        dash_system(world, dt)
        invulnerability_system(world, dt)

        # Spawning
        spawned = spawn_system(world, config, state.spawn_cooldowns,
                               state.speed, state.level, dt, self.rng)
        if spawned:
            state.stats.spawned += len(spawned)
            self._events.append({'type': 'spawned', 'count': len(spawned)})

        # Physics
        player_input_system(world, inputs)
        movement_system(world, dt)
        boundary_system(world, config.width)
        fall_system(world, dt, slow_scale)

        # Exits first, then contacts
        exited = exit_system(world, config.height, config.exit_margin)
        self._events.extend(resolve_exits(exited, state, config))
        if not is_fatal(state, config):
            self._events.extend(
                resolve_collisions(world, self.player_id, state, config)
            )

        world.process_dead_entities()

        if is_fatal(state, config):
            self._game_over()
            return

        # Passive score trickle
        if config.trickle_per_step > 0:
            state.trickle += config.trickle_per_step * dt
            whole = int(state.trickle)
            state.score += whole
            state.trickle -= whole

        self._award_bonuses()

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        return build_snapshot(self.world, self.player_id, self.state,
                              self.config, self.best)

    def drain_events(self) -> List[dict]:
        """Events since the last drain, oldest first."""
        events = self._events
        self._events = []
        return events
