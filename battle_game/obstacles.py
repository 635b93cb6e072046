"""Concrete obstacles: solid blocks, rivers, bouncy blocks and temporary shields."""

from __future__ import annotations

from typing import Any

from battle_game.geometry import Vec2, rotate
from battle_game.objects import TICK_PER_SECOND, Obstacle

SAFETY_DECLARATION_TICKS = 3 * TICK_PER_SECOND


def segments_intersect(a: Vec2, b: Vec2, c: Vec2, d: Vec2) -> bool:
    """Whether segment a-b touches or crosses segment c-d."""
    if (
        max(c.x, d.x) < min(a.x, b.x)
        or max(c.y, d.y) < min(a.y, b.y)
        or max(a.x, b.x) < min(c.x, d.x)
        or max(a.y, b.y) < min(c.y, d.y)
    ):
        return False
    if (a - d).cross(c - d) * (b - d).cross(c - d) > 0:
        return False
    if (c - a).cross(b - a) * (d - a).cross(b - a) > 0:
        return False
    return True


class _RectangleObstacle(Obstacle):
    """An obstacle covering the rectangle [-scale, scale] in its own frame."""

    def __init__(
        self,
        game_core: Any,
        id: int,
        position: Vec2,
        rotation: float = 0.0,
        scale: Vec2 = Vec2(1.0, 1.0),
    ) -> None:
        super().__init__(game_core, id, position, rotation)
        self.scale = scale

    def _covers(self, p: Vec2) -> bool:
        local = self.world_to_local(p)
        return -self.scale.x <= local.x <= self.scale.x and (
            -self.scale.y <= local.y <= self.scale.y
        )


class Block(_RectangleObstacle):
    """A solid rectangular wall."""

    def is_blocked(self, p: Vec2) -> bool:
        return self._covers(p)


class River(_RectangleObstacle):
    """Water that stops units but lets bullets fly across."""

    def is_blocked(self, p: Vec2) -> bool:
        if not self._covers(p):
            return False
        return not any(
            bullet.position == p for bullet in self.game_core.bullets.values()
        )


class ReboundingBlock(_RectangleObstacle):
    """A block whose sides reflect bullets that strike them."""

    def is_blocked(self, p: Vec2) -> bool:
        return self._covers(p)

    def surface_normal(self, origin: Vec2, terminus: Vec2) -> tuple[Vec2, Vec2]:
        """World hit point and unit outward normal of the first side crossed.

        Returns two zero vectors when the segment crosses no side.
        """
        o = self.world_to_local(origin)
        t = self.world_to_local(terminus)
        sx, sy = self.scale.x, self.scale.y
        delta = t - o
        if segments_intersect(o, t, Vec2(-sx, -sy), Vec2(-sx, sy)):
            hit = o + delta * ((-sx - o.x) / delta.x)
            normal = Vec2(-1.0, 0.0)
        elif segments_intersect(o, t, Vec2(sx, -sy), Vec2(sx, sy)):
            hit = o + delta * ((sx - o.x) / delta.x)
            normal = Vec2(1.0, 0.0)
        elif segments_intersect(o, t, Vec2(-sx, -sy), Vec2(sx, -sy)):
            hit = o + delta * ((-sy - o.y) / delta.y)
            normal = Vec2(0.0, -1.0)
        elif segments_intersect(o, t, Vec2(-sx, sy), Vec2(sx, sy)):
            hit = o + delta * ((sy - o.y) / delta.y)
            normal = Vec2(0.0, 1.0)
        else:
            return Vec2(), Vec2()
        return self.local_to_world(hit), rotate(normal, self.rotation).normalized()


class SafetyDeclaration(_RectangleObstacle):
    """A temporary shield that disappears three seconds after it is placed."""

    def __init__(
        self,
        game_core: Any,
        id: int,
        position: Vec2,
        rotation: float = 0.0,
        scale: Vec2 = Vec2(3.0, 3.0),
    ) -> None:
        super().__init__(game_core, id, position, rotation, scale)
        self.valid_time = SAFETY_DECLARATION_TICKS

    def is_blocked(self, p: Vec2) -> bool:
        return self._covers(p)

    def update(self) -> None:
        """Count down, then ask the game to remove this obstacle."""
        if self.valid_time:
            self.valid_time -= 1
        else:
            self.game_core.push_event_remove_obstacle(self.id)