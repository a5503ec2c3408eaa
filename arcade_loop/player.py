"""
Player Module
==============
Player entity creation, input sampling and input handling.
"""

from dataclasses import dataclass

from .ecs import World
from .components import (
    Position, Velocity, Friction, MaxSpeed, RectShape,
    PlayerControlled, PlayerTag, DashState, Invulnerable
)
from .variants import VariantConfig


@dataclass(frozen=True)
class InputState:
    """Boolean input signals sampled once per step."""
    left: bool = False
    right: bool = False
    action: bool = False
    pause: bool = False
    restart: bool = False

    @property
    def direction(self) -> int:
        return int(self.right) - int(self.left)


NO_INPUT = InputState()


def player_start_position(config: VariantConfig) -> tuple:
    """Centered horizontally, bottom_offset above the floor."""
    player = config.player
    return (config.width / 2 - player.width / 2,
            config.height - player.bottom_offset)


def create_player(world: World, config: VariantConfig) -> int:
    """Create the player entity with all required components."""
    player = config.player
    entity_id = world.create_entity()

    x, y = player_start_position(config)
    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Velocity(0.0, 0.0))
    world.add_component(entity_id, RectShape(player.width, player.height))
    world.add_component(entity_id, MaxSpeed(player.max_speed))
    world.add_component(entity_id, PlayerControlled(
        acceleration=player.acceleration,
        direct=player.direct,
    ))
    if not player.direct:
        world.add_component(entity_id, Friction(player.friction))

    if player.dash_multiplier is not None:
        world.add_component(entity_id, DashState(
            multiplier=player.dash_multiplier,
            duration=player.dash_duration,
            cooldown=player.dash_cooldown,
        ))
    world.add_component(entity_id, Invulnerable(0.0))
    world.add_component(entity_id, PlayerTag())

    return entity_id


# =============================================================================
# TERMINAL INPUT
# =============================================================================

LEFT_KEYS = ('a', 'KEY_LEFT')
RIGHT_KEYS = ('d', 'KEY_RIGHT')


class InputHandler:
    """
    Turns blessed keystrokes into per-step InputState samples.

    Terminals do not report key-up events, so held movement keys are
    emulated with frame timers refreshed by key auto-repeat. Action,
    pause, restart and quit are one-shot triggers consumed on read.
    """

    def __init__(self, hold_duration: int = 12):
        self.keys_held: dict = {}  # 'left'/'right' -> frames remaining
        self.hold_duration = hold_duration

        # Triggers raised since the last sample
        self._action = False
        self._pause = False
        self._restart = False
        self._quit = False
        self._toggle_fps = False

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        name = key.name or ''
        key_str = key.lower() if not key.is_sequence else ''

        if key_str == 'q' or name == 'KEY_ESCAPE':
            self._quit = True
        elif key_str in LEFT_KEYS or name in LEFT_KEYS:
            self.keys_held['left'] = self.hold_duration
            self.keys_held.pop('right', None)
        elif key_str in RIGHT_KEYS or name in RIGHT_KEYS:
            self.keys_held['right'] = self.hold_duration
            self.keys_held.pop('left', None)
        elif key_str == ' ' or name == 'KEY_ENTER':
            self._action = True
        elif key_str == 'p':
            self._pause = True
        elif key_str == 'r':
            self._restart = True
        elif key_str == 'f' or name == 'KEY_F1':
            self._toggle_fps = True

    def update(self) -> None:
        """Update key hold timers (call once per frame)."""
        expired = []
        for key, frames in self.keys_held.items():
            self.keys_held[key] = frames - 1
            if self.keys_held[key] <= 0:
                expired.append(key)
        for key in expired:
            del self.keys_held[key]

    def sample(self) -> InputState:
        """Build this frame's InputState and consume the one-shot triggers."""
        state = InputState(
            left='left' in self.keys_held,
            right='right' in self.keys_held,
            action=self._action,
            pause=self._pause,
            restart=self._restart,
        )
        self._action = False
        self._pause = False
        self._restart = False
        return state

    def consume_quit(self) -> bool:
        """Check and consume quit trigger."""
        triggered = self._quit
        self._quit = False
        return triggered

    def consume_toggle_fps(self) -> bool:
        """Check and consume FPS toggle trigger."""
        triggered = self._toggle_fps
        self._toggle_fps = False
        return triggered
