"""Projectiles: cannon balls, coins, critical shots, electric balls, beams, mines and missiles."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from battle_game.geometry import Vec2, rotate
from battle_game.objects import SECOND_PER_TICK, TICK_PER_SECOND, Bullet
from battle_game.particles import BulletHole, Explosion, Smoke
from battle_game.unit import Unit

SMOKE_COLOR = (0.0, 0.0, 0.0, 1.0)
SMOKE_DECAY = 3.0
BEAM_STEP = 0.1
BEAM_STEPS = 100
MINE_ARMING_TICKS = TICK_PER_SECOND * 2
MISSILE_RESISTANCE = 0.02
MISSILE_TRACKING_RANGE = 12.0
MISSILE_PROXIMITY = 1.0


def _emit_smoke(bullet: Bullet, count: int, spread: float, size: float) -> None:
    """Queue a burst of black smoke at the bullet's position."""
    core = bullet.game_core
    for _ in range(count):
        core.push_event_generate_particle(
            Smoke,
            bullet.position,
            bullet.rotation,
            core.random_in_circle() * spread,
            size,
            SMOKE_COLOR,
            SMOKE_DECAY,
        )


class _FlyingBullet(Bullet):
    """A bullet that travels at a constant velocity."""

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
            game_core, id, unit_id, player_id, position, rotation, damage_scale
        )
        self.velocity = velocity

    def _advance(self) -> None:
        self.position = self.position + self.velocity * SECOND_PER_TICK

    def _units_hit(self, skip_id: int) -> list[int]:
        """Ids of the units at the bullet's position, other than ``skip_id``."""
        return [
            unit_id
            for unit_id, unit in self.game_core.units.items()
            if unit_id != skip_id and unit.is_hit(self.position)
        ]


class CannonBall(_FlyingBullet):
    """A plain shell that deals 10 damage on impact."""

    def update(self) -> None:
        self._advance()
        should_die = self.game_core.is_blocked_by_obstacles(self.position)
        for unit_id in self._units_hit(self.unit_id):
            self.game_core.push_event_deal_damage(
                unit_id, self.id, self.damage_scale * 10.0
            )
            should_die = True
        if should_die:
            self.game_core.push_event_remove_bullet(self.id)

    def on_destroy(self) -> None:
        _emit_smoke(self, 5, 2.0, 0.2)


class Coin(_FlyingBullet):
    """A coin whose damage shrinks as its lifetime runs out; it passes through units."""

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
        life_time: int,
    ) -> None:
        super().__init__(
            game_core, id, unit_id, player_id, position, rotation, damage_scale, velocity
        )
        self.life_time = life_time
        self.total_time = life_time

    def update(self) -> None:
        if not self.life_time:
            self.game_core.push_event_remove_bullet(self.id)
            return
        self.life_time -= 1
        self._advance()
        should_die = self.game_core.is_blocked_by_obstacles(self.position)
        for unit_id in self._units_hit(self.unit_id):
            damage = self.damage_scale * 100.0 * self.life_time / self.total_time
            self.game_core.push_event_deal_damage(unit_id, self.id, damage)
            self.game_core.push_event_generate_particle(
                Explosion, self.game_core.units[unit_id].position, 0.0, 30
            )
        if should_die:
            self.game_core.push_event_remove_bullet(self.id)

    def on_destroy(self) -> None:
        _emit_smoke(self, 5, 2.0, 0.2)


class CritBullet(_FlyingBullet):
    """A shot that may strike critically for extra damage."""

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
        crit_chance: float,
        crit_damage: float,
    ) -> None:
        super().__init__(
            game_core, id, unit_id, player_id, position, rotation, damage_scale, velocity
        )
        self.crit_chance = crit_chance
        self.crit_damage = crit_damage

    def update(self) -> None:
        self._advance()
        core = self.game_core
        should_die = core.is_blocked_by_obstacles(self.position)
        # Units are skipped by comparing their id with the owning player's id.
        for unit_id in self._units_hit(self.player_id):
            if core.random_float() >= self.crit_chance:
                core.push_event_deal_damage(unit_id, self.id, self.damage_scale * 10.0)
            else:
                core.push_event_deal_damage(
                    unit_id,
                    self.id,
                    self.damage_scale * 10.0 * (1.0 + self.crit_damage),
                )
                core.push_event_generate_particle(
                    BulletHole, self.position, self.rotation, TICK_PER_SECOND
                )
            should_die = True
        if should_die:
            core.push_event_remove_bullet(self.id)

    def on_destroy(self) -> None:
        _emit_smoke(self, 5, 2.0, 0.2)


class ElectricBall(_FlyingBullet):
    """A heavy ball of charge dealing 63 damage on impact."""

    def update(self) -> None:
        self._advance()
        should_die = self.game_core.is_blocked_by_obstacles(self.position)
        for unit_id in self._units_hit(self.unit_id):
            self.game_core.push_event_deal_damage(
                unit_id, self.id, self.damage_scale * 63.0
            )
            should_die = True
        if should_die:
            self.game_core.push_event_remove_bullet(self.id)

    def on_destroy(self) -> None:
        _emit_smoke(self, 5, 8.0, 0.8)


class HitKind(Enum):
    """What a beam ran into."""

    MISS = "miss"
    OBSTACLE = "obstacle"
    UNIT = "unit"


@dataclass(frozen=True)
class HitResult:
    """Where a beam ends and what, if anything, it struck."""

    kind: HitKind
    unit: Optional[Unit]
    position: Vec2


class EnergyBeam(Bullet):
    """A one-tick beam that damages the first unit along its line."""

    def update(self) -> None:
        core = self.game_core
        hit = self.target()
        if hit.kind is HitKind.UNIT:
            core.push_event_deal_damage(
                hit.unit.id, self.id, self.damage_scale * 10.0 * SECOND_PER_TICK
            )
        if hit.kind is not HitKind.MISS and core.random_float() < 0.2:
            core.push_event_generate_particle(
                Smoke,
                hit.position,
                self.rotation,
                core.random_in_circle() * 2.0,
                0.2,
                core.player_color(self.player_id),
                SMOKE_DECAY,
            )
        core.push_event_remove_bullet(self.id)

    def target(self) -> HitResult:
        """March along the beam until it meets an obstacle, a unit or its end."""
        current = self.position
        step = rotate(Vec2(0.0, BEAM_STEP), self.rotation)
        units = self.game_core.units
        for _ in range(BEAM_STEPS):
            if self.game_core.is_blocked_by_obstacles(current):
                return HitResult(HitKind.OBSTACLE, None, current)
            for unit_id, unit in units.items():
                if unit_id != self.unit_id and unit.is_hit(current):
                    return HitResult(HitKind.UNIT, unit, current)
            current = current + step
        return HitResult(HitKind.MISS, None, current)


class Mine(_FlyingBullet):
    """A stationary charge that arms after two seconds and destroys whatever touches it."""

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
        self.ready_count_down = MINE_ARMING_TICKS

    def update(self) -> None:
        if self.ready_count_down:
            self.ready_count_down -= 1
            return
        core = self.game_core
        should_die = False
        # Units are skipped by comparing their id with the owning player's id.
        for unit_id in self._units_hit(self.player_id):
            core.push_event_deal_damage(
                unit_id, self.id, core.units[unit_id].max_health()
            )
            should_die = True
        if should_die:
            core.push_event_remove_bullet(self.id)

    def on_destroy(self) -> None:
        _emit_smoke(self, 5, 5.0, 0.2)


def _clamp_unit(value: float) -> float:
    return min(max(value, -1.0), 1.0)


class Missile(_FlyingBullet):
    """A homing missile that steers toward the most reachable enemy."""

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
        max_velocity: float,
    ) -> None:
        super().__init__(
            game_core, id, unit_id, player_id, position, rotation, damage_scale, velocity
        )
        self.max_velocity = max(1.0, max_velocity)
        self.resistance = MISSILE_RESISTANCE

    def _is_target(self, unit_id: int, unit: Unit) -> bool:
        return unit_id != self.unit_id and unit.player_id != self.player_id

    def update(self) -> None:
        core = self.game_core
        self._advance()
        self.rotation = math.atan2(self.velocity.y, self.velocity.x) - math.radians(90.0)
        should_die = core.is_blocked_by_obstacles(self.position)
        for unit_id, unit in core.units.items():
            if self._is_target(unit_id, unit) and unit.is_hit(self.position):
                core.push_event_deal_damage(unit_id, self.id, self.damage_scale * 10.0)
                should_die = True
        if should_die:
            core.push_event_remove_bullet(self.id)
            return

        best_diff = self.velocity
        best_cost = 500.0
        for unit_id, unit in core.units.items():
            if not self._is_target(unit_id, unit):
                continue
            diff = unit.position - self.position
            distance = diff.length()
            if distance > MISSILE_TRACKING_RANGE:
                continue
            if distance < MISSILE_PROXIMITY:
                core.push_event_deal_damage(unit_id, self.id, self.damage_scale * 10.0)
                core.push_event_remove_bullet(self.id)
                return
            cost = self._cost(diff)
            if cost < best_cost:
                best_cost = cost
                best_diff = diff

        fix = self._fix(best_diff)
        drag = 1.0 - self.resistance * self.velocity.length() / self.max_velocity
        self.velocity = self.velocity * drag + fix
        if self.velocity.length() > self.max_velocity:
            self.velocity = self.velocity.normalized() * self.max_velocity

    def _cost(self, diff: Vec2) -> float:
        distance = diff.length()
        speed = self.velocity.length()
        if speed < 1e-3:
            return distance
        cos_angle = _clamp_unit(diff.normalized().dot(self.velocity.normalized()))
        return distance * (1.0 - speed * cos_angle / self.max_velocity)

    def _fix(self, diff: Vec2) -> Vec2:
        thrust = self.resistance * self.max_velocity
        if diff.length() == 0.0:
            return Vec2()
        direction = diff.normalized()
        speed = self.velocity.length()
        if speed < 1e-3:
            return direction * (2.0 * thrust)
        heading = self.velocity.normalized()
        angle = math.acos(_clamp_unit(direction.dot(heading)))
        max_turn = math.atan2(
            thrust, (1.0 - self.resistance * speed / self.max_velocity) * speed
        )
        if angle < max_turn:
            return direction * thrust
        turn = math.radians(60.0)
        if rotate(heading, math.radians(90.0)).dot(direction) < 0:
            turn = -turn
        return rotate(heading * thrust, turn) + heading * (math.sin(angle) * thrust)

    def on_destroy(self) -> None:
        _emit_smoke(self, 6, 3.0, 0.2)