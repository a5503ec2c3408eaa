"""
Component Definitions
======================
All components are plain dataclasses with no behavior.
"""

from dataclasses import dataclass


# =============================================================================
# VARIANT TAGS
# =============================================================================

HAZARD = 'hazard'
COLLECTIBLE = 'collectible'
POWERUP_SHIELD = 'powerup-shield'
POWERUP_SLOW = 'powerup-slow'

ENTITY_VARIANTS = (HAZARD, COLLECTIBLE, POWERUP_SHIELD, POWERUP_SLOW)


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """Top-left corner for rects, centre for circles."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Movement velocity in playfield units per nominal step."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Friction:
    """Friction multiplier applied to velocity each step."""
    value: float = 0.92


@dataclass
class MaxSpeed:
    """Maximum horizontal speed."""
    value: float = 6.0


@dataclass
class RectShape:
    """Axis-aligned box anchored at Position."""
    width: float = 1.0
    height: float = 1.0


@dataclass
class CircleShape:
    """Circle centred on Position."""
    radius: float = 1.0


# =============================================================================
# PLAYER COMPONENTS
# =============================================================================

@dataclass
class PlayerTag:
    """Marks the player entity."""
    pass


@dataclass
class PlayerControlled:
    """How left/right input turns into motion."""
    acceleration: float = 0.9
    direct: bool = False  # True = input sets velocity outright


@dataclass
class DashState:
    """Dash burst state. Timers are in steps."""
    multiplier: float = 2.2
    duration: float = 10.0
    cooldown: float = 45.0
    frames_remaining: float = 0.0
    cooldown_remaining: float = 0.0


@dataclass
class Invulnerable:
    """Post-hit grace period in steps."""
    frames_remaining: float = 0.0


# =============================================================================
# FALLING ENTITY COMPONENTS
# =============================================================================

@dataclass
class Falling:
    """Marks a spawned entity: its spawn class and outcome tag."""
    kind: str = 'block'
    variant: str = HAZARD
