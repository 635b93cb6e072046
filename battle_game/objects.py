"""Base classes for everything that lives in the game world."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from battle_game.geometry import Vec2, local_to_world, world_to_local

TICK_PER_SECOND = 60
SECOND_PER_TICK = 1.0 / TICK_PER_SECOND


class SkillType(Enum):
    """Key a skill is bound to; P is passive and B is a bullet selection."""

    E = "E"
    Q = "Q"
    R = "R"
    P = "P"
    B = "B"


@dataclass
class Skill:
    """Description of a unit skill as shown to the player."""

    name: str = ""
    type: SkillType = SkillType.P
    time_remain: int = 0
    time_total: int = 0
    bullet_type: int = 0
    bullet_total_number: int = 0
    description: str = ""
    src: str = ""
    function: Optional[Callable[[], None]] = None
    switch_bullet: Optional[Callable[[int], None]] = None


class GameObject(ABC):
    """Something with an id, a position and a rotation (radians)."""

    def __init__(
        self,
        game_core: Any,
        id: int,
        position: Vec2 = Vec2(),
        rotation: float = 0.0,
    ) -> None:
        self.game_core = game_core
        self.id = id
        self.position = position
        self.rotation = rotation
        self.age = 0

    def local_to_world(self, p: Vec2) -> Vec2:
        """Map a point from this object's frame into world coordinates."""
        return local_to_world(p, self.position, self.rotation)

    def world_to_local(self, p: Vec2) -> Vec2:
        """Map a world point into this object's frame."""
        return world_to_local(p, self.position, self.rotation)

    def update(self) -> None:
        """Advance the object by one game tick; the base only counts ticks."""
        self.age += 1


class Obstacle(GameObject):
    """A static piece of scenery that may block movement and bullets."""

    def __init__(
        self, game_core: Any, id: int, position: Vec2, rotation: float = 0.0
    ) -> None:
        super().__init__(game_core, id, position, rotation)

    @abstractmethod
    def is_blocked(self, p: Vec2) -> bool:
        """Whether the world point ``p`` lies inside the obstacle."""

    def surface_normal(self, origin: Vec2, terminus: Vec2) -> tuple[Vec2, Vec2]:
        """Hit point and outward normal of the segment origin→terminus.

        A zero normal means the obstacle does not reflect.
        """
        return Vec2(), Vec2()


class Particle(GameObject):
    """A short-lived visual effect."""

    def __init__(
        self, game_core: Any, id: int, position: Vec2, rotation: float = 0.0
    ) -> None:
        super().__init__(game_core, id, position, rotation)


class Bullet(GameObject):
    """A projectile fired by a unit on behalf of a player."""

    def __init__(
        self,
        game_core: Any,
        id: int,
        unit_id: int,
        player_id: int,
        position: Vec2,
        rotation: float,
        damage_scale: float = 1.0,
    ) -> None:
        super().__init__(game_core, id, position, rotation)
        self.unit_id = unit_id
        self.player_id = player_id
        self.damage_scale = damage_scale
        self.destroyed = False

    def on_destroy(self) -> None:
        """Called once when the bullet is removed from the world."""
        self.destroyed = True