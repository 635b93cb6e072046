"""Projectiles with special behaviour: rebounds, homing rockets, smoke bombs and more."""

from __future__ import annotations

import math
from typing import Any, Callable, Optional

from battle_game.bullets import SMOKE_COLOR, SMOKE_DECAY, _emit_smoke, _FlyingBullet
from battle_game.geometry import Vec2
from battle_game.objects import SECOND_PER_TICK, TICK_PER_SECOND, Bullet
from battle_game.particles import Smoke
from battle_game.unit import Unit

ROCKET_START_DAMAGE = 5.0
ROCKET_MAX_DAMAGE = 20.0
ROCKET_GROWTH = 1.02
ROCKET_SPEED_FACTOR = 0.25
SMOKE_BOMB_SPIN = 5.0
SMOKE_BOMB_PULSES = 5


def _fly_and_strike(
    bullet: _FlyingBullet,
    skip_id: int,
    damage: Optional[Callable[[Unit], float]],
) -> None:
    """Move, then hit every unit at the new position except ``skip_id``.

    With ``damage`` set to None the bullet only stops on contact.
    """
    core = bullet.game_core
    bullet._advance()
    should_die = core.is_blocked_by_obstacles(bullet.position)
    for unit_id in bullet._units_hit(skip_id):
        if damage is not None:
            core.push_event_deal_damage(unit_id, bullet.id, damage(core.units[unit_id]))
        should_die = True
    if should_die:
        core.push_event_remove_bullet(bullet.id)


class ReboundingBall(_FlyingBullet):
    """A ball that bounces off reflecting obstacles a limited number of times."""

    def __init__(
        self,
        game_core: Any,
        id: int,
        unit_id: int,
        player_id: int,
        position: Vec2,
        rotation: float,
        damage_scale: float,
        velocity: Vec2,
        rebounding_times: int = 1,
    ) -> None:
        super().__init__(
            game_core, id, unit_id, player_id, position, rotation, damage_scale, velocity
        )
        self.rebounding_times_left = rebounding_times

    def update(self) -> None:
        core = self.game_core
        last_position = self.position
        self._advance()
        should_die = False
        if core.is_blocked_by_obstacles(self.position):
            should_die = True
            obstacle = core.blocked_obstacle(self.position)
            if obstacle is not None and self.rebounding_times_left:
                point, normal = obstacle.surface_normal(last_position, self.position)
                if normal != Vec2():
                    self.rebounding_times_left -= 1
                    depth = normal.dot(self.position - point)
                    self.position = self.position - normal * (depth * 2.0)
                    self.velocity = self.velocity - normal * (
                        normal.dot(self.velocity) * 2.0
                    )
                    should_die = False
        for unit_id in self._units_hit(self.unit_id):
            core.push_event_deal_damage(unit_id, self.id, self.damage_scale * 10.0)
            should_die = True
        if should_die:
            core.push_event_remove_bullet(self.id)

    def on_destroy(self) -> None:
        _emit_smoke(self, 5, 2.0, 0.2)


def _rocket_heading(diff: Vec2) -> float:
    """Rotation that points the rocket sprite along ``diff``."""
    x, y = diff.x, diff.y
    if x < 0:
        if y < 0:
            return math.pi / 2 + math.atan(abs(y) / abs(x))
        if y == 0:
            return math.pi / 2
        return math.atan(abs(x) / abs(y))
    if x == 0:
        return 0.0 if y >= 0 else math.pi
    if y > 0:
        return math.pi * 2 - math.atan(abs(x) / abs(y))
    if y == 0:
        return 1.5 * math.pi
    return math.pi + math.atan(abs(x) / abs(y))


class Rocket(_FlyingBullet):
    """A rocket locked on the unit nearest the firing player's cursor.

    It speeds up and hits harder every tick until it connects.
    """

    def __init__(
        self,
        game_core: Any,
        id: int,
        unit_id: int,
        player_id: int,
        position: Vec2,
        rotation: float,
        damage_scale: float,
        velocity: Vec2,
    ) -> None:
        super().__init__(
            game_core, id, unit_id, player_id, position, rotation, damage_scale, velocity
        )
        self.harmful = ROCKET_START_DAMAGE
        self.player_locked = 0
        player = game_core.get_player(player_id)
        if player is None:
            raise LookupError(f"no player with id {player_id}")
        cursor = player.input_data.mouse_cursor_position
        best = math.inf
        for other_id, unit in game_core.units.items():
            if other_id == unit_id:
                continue
            distance = (cursor - unit.position).length()
            if distance < best:
                best = distance
                self.player_locked = other_id

    def update(self) -> None:
        core = self.game_core
        target = core.units.get(self.player_locked)
        if target is None:
            core.push_event_remove_bullet(self.id)
            return
        if self.harmful < ROCKET_MAX_DAMAGE:
            self.harmful *= ROCKET_GROWTH
        offset = target.position - self.position
        distance = offset.length()
        if distance > 0.0:
            diff = offset * (ROCKET_SPEED_FACTOR * self.harmful / distance)
        else:
            diff = Vec2()
        self.velocity = diff
        self._advance()
        self.rotation = _rocket_heading(diff)
        should_die = core.is_blocked_by_obstacles(self.position)
        for unit_id in self._units_hit(self.unit_id):
            core.push_event_deal_damage(unit_id, self.id, self.damage_scale * self.harmful)
            should_die = True
        if should_die:
            core.push_event_remove_bullet(self.id)

    def on_destroy(self) -> None:
        _emit_smoke(self, 5, 2.0, 0.2)


class SmokeBomb(Bullet):
    """A bomb thrown at a target that leaves a damaging cloud behind.

    The cloud pulses five times; each pulse hurts less, and the thrower
    takes half damage.
    """

    def __init__(
        self,
        game_core: Any,
        id: int,
        unit_id: int,
        player_id: int,
        position: Vec2,
        rotation: float,
        damage_scale: float,
        target: Vec2,
        radius: float,
        duration: float,
        damage_duration: float,
    ) -> None:
        super().__init__(
            game_core, id, unit_id, player_id, position, rotation, damage_scale
        )
        if duration <= 0:
            raise ValueError("flight duration must be positive")
        self.duration_ticks = int(duration * TICK_PER_SECOND + 0.5)
        self.damage_ticks = int(damage_duration * TICK_PER_SECOND + 0.5)
        if self.damage_ticks <= 0:
            raise ValueError("damage duration must last at least one tick")
        self.target = target
        self.velocity = (target - position) * (1.0 / duration)
        self.radius = radius
        self.current_time = 0

    def update(self) -> None:
        core = self.game_core
        self.current_time += 1
        if self.current_time < self.duration_ticks:
            self.position = self.position + self.velocity * SECOND_PER_TICK
            self.rotation += SMOKE_BOMB_SPIN * SECOND_PER_TICK
            return
        if self.current_time >= self.duration_ticks + self.damage_ticks * SMOKE_BOMB_PULSES:
            core.push_event_remove_bullet(self.id)
            return
        self.position = self.target
        elapsed = self.current_time - self.duration_ticks
        if elapsed == 0:
            core.push_event_generate_particle(
                Smoke,
                self.target,
                self.rotation,
                Vec2(),
                self.radius,
                SMOKE_COLOR,
                TICK_PER_SECOND / (self.damage_ticks * 8.0),
            )
        if elapsed % self.damage_ticks == 0:
            damage = self.damage_scale * (10.0 - 2.0 * (elapsed // self.damage_ticks))
            for unit_id, unit in core.units.items():
                if (unit.position - self.position).length() <= self.radius:
                    amount = damage * 0.5 if unit_id == self.unit_id else damage
                    core.push_event_deal_damage(unit_id, self.id, amount)


class SweatySoybean(_FlyingBullet):
    """A small bean dealing 10 damage on contact."""

    def update(self) -> None:
        # Units are skipped by comparing their id with the owning player's id.
        _fly_and_strike(self, self.player_id, lambda unit: self.damage_scale * 10.0)

    def on_destroy(self) -> None:
        _emit_smoke(self, 5, 2.0, 0.2)


class UdongeinDirectionalBullet(_FlyingBullet):
    """A light bullet dealing 2 damage and leaving no smoke."""

    def update(self) -> None:
        _fly_and_strike(self, self.unit_id, lambda unit: self.damage_scale * 2.0)


class WarningLine(_FlyingBullet):
    """A harmless tracer that vanishes on contact."""

    def update(self) -> None:
        # Units are skipped by comparing their id with the owning player's id.
        _fly_and_strike(self, self.player_id, None)


class WaterDrop(_FlyingBullet):
    """A drop that destroys any unit it touches."""

    def update(self) -> None:
        # Units are skipped by comparing their id with the owning player's id.
        _fly_and_strike(self, self.player_id, lambda unit: unit.max_health())

    def on_destroy(self) -> None:
        _emit_smoke(self, 5, 2.0, 0.2)