"""Visual effects: bullet holes, explosions, smoke and thunderbolts."""

from __future__ import annotations

from typing import Any

from battle_game.geometry import Vec2
from battle_game.objects import SECOND_PER_TICK, Particle

EXPLOSION_DAMAGE = 10.0


class _TimedParticle(Particle):
    """A particle that removes itself after a fixed number of ticks."""

    def __init__(
        self,
        game_core: Any,
        id: int,
        position: Vec2,
        rotation: float,
        duration: int,
    ) -> None:
        super().__init__(game_core, id, position, rotation)
        self.duration = duration

    def _tick_down(self) -> None:
        self.duration -= 1
        if self.duration <= 0:
            self.game_core.push_event_remove_particle(self.id)


class BulletHole(_TimedParticle):
    """The mark left by a critical hit."""

    def update(self) -> None:
        self._tick_down()


class Thunderbolt(_TimedParticle):
    """A brief lightning flash."""

    def update(self) -> None:
        self._tick_down()


class Explosion(_TimedParticle):
    """A blast that damages every unit inside it on its first tick."""

    def __init__(
        self,
        game_core: Any,
        id: int,
        position: Vec2,
        rotation: float,
        duration: int,
    ) -> None:
        super().__init__(game_core, id, position, rotation, duration)
        self.should_damage = True

    def update(self) -> None:
        if self.should_damage:
            for unit_id, unit in self.game_core.units.items():
                if self.is_in_explosion(unit.position):
                    self.game_core.push_event_deal_damage(
                        unit_id, self.id, EXPLOSION_DAMAGE
                    )
            self.should_damage = False
        self._tick_down()

    def is_in_explosion(self, position: Vec2) -> bool:
        """Whether a world point lies inside the blast's octagonal area."""
        p = self.world_to_local(position)
        return (
            -1.6 < p.x < 1.6
            and -2.0 < p.y < 2.0
            and p.x + p.y < 3.2
            and p.y - p.x < 3.2
        )


class Smoke(Particle):
    """A drifting puff whose strength fades until it is removed."""

    def __init__(
        self,
        game_core: Any,
        id: int,
        position: Vec2,
        rotation: float,
        velocity: Vec2,
        size: float = 0.2,
        color: tuple[float, float, float, float] = (1.0, 1.0, 1.0, 1.0),
        decay_scale: float = 1.0,
    ) -> None:
        super().__init__(game_core, id, position, rotation)
        self.velocity = velocity
        self.size = size
        self.color = color
        self.decay_scale = decay_scale
        self.strength = 1.0

    def update(self) -> None:
        self.position = self.position + self.velocity * SECOND_PER_TICK
        self.strength -= SECOND_PER_TICK * self.decay_scale
        if self.strength < 0.0:
            self.game_core.push_event_remove_particle(self.id)