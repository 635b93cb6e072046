import math

import pytest

from battle_game.game_core import GameCore
from battle_game.geometry import Vec2
from battle_game.objects import SECOND_PER_TICK
from battle_game.obstacles import ReboundingBlock
from battle_game.particles import Smoke
from battle_game.player import InputData
from battle_game.special_bullets import (
    ReboundingBall,
    Rocket,
    SmokeBomb,
    SweatySoybean,
    UdongeinDirectionalBullet,
    WarningLine,
    WaterDrop,
)
from battle_game.unit import Unit


class DummyUnit(Unit):
    def is_hit(self, position):
        return (position - self.position).length() <= 0.5


def make_unit(core, player_id, position):
    unit_id = core.add_unit(DummyUnit, player_id)
    core.units[unit_id].position = position
    return unit_id


def tick(core, bullet):
    bullet.update()
    core.process_event_queue()


def lost_health(unit):
    return (1.0 - unit.health) * unit.max_health()


@pytest.fixture
def core():
    return GameCore()


def test_rebounding_ball_reflects_off_rebounding_block(core):
    core.obstacles.clear()
    core.add_obstacle(ReboundingBlock, Vec2(0.0, 0.0))
    velocity = Vec2(36.0, 0.0)
    bullet_id = core.add_bullet(
        ReboundingBall, 99, 99, Vec2(-1.5, 0.0), 0.0, 1.0, velocity
    )
    ball = core.bullets[bullet_id]
    tick(core, ball)
    assert bullet_id in core.bullets
    assert ball.velocity == -velocity
    assert ball.rebounding_times_left == 0
    assert ball.position.x < -1.0
    assert ball.position.y == pytest.approx(0.0)


def test_rebounding_ball_without_rebounds_is_removed(core):
    core.obstacles.clear()
    core.add_obstacle(ReboundingBlock, Vec2(0.0, 0.0))
    bullet_id = core.add_bullet(
        ReboundingBall, 99, 99, Vec2(-1.5, 0.0), 0.0, 1.0, Vec2(36.0, 0.0), 0
    )
    tick(core, core.bullets[bullet_id])
    assert bullet_id not in core.bullets
    assert len(core.particles) == 5
    assert all(isinstance(p, Smoke) for p in core.particles.values())


def test_rebounding_ball_dies_on_plain_block(core):
    # The default scene has a plain block at (-3, 4).
    bullet_id = core.add_bullet(
        ReboundingBall, 99, 99, Vec2(-4.5, 4.0), 0.0, 1.0, Vec2(36.0, 0.0)
    )
    tick(core, core.bullets[bullet_id])
    assert bullet_id not in core.bullets


def test_rebounding_ball_damages_unit(core):
    target = make_unit(core, 2, Vec2(0.0, -5.0))
    bullet_id = core.add_bullet(
        ReboundingBall, 99, 1, Vec2(0.0, -5.0), 0.0, 2.0, Vec2(0.0, 0.0)
    )
    tick(core, core.bullets[bullet_id])
    assert lost_health(core.units[target]) == pytest.approx(2.0 * 10.0)
    assert bullet_id not in core.bullets


def test_rebounding_ball_moves_with_velocity(core):
    start = Vec2(0.0, -5.0)
    velocity = Vec2(6.0, 3.0)
    bullet_id = core.add_bullet(ReboundingBall, 99, 99, start, 0.0, 1.0, velocity)
    ball = core.bullets[bullet_id]
    tick(core, ball)
    assert ball.position == start + velocity * SECOND_PER_TICK


def _rocket_setup(core):
    player_id = core.add_player()
    core.players[player_id].input_data = InputData(
        mouse_cursor_position=Vec2(5.2, -5.0)
    )
    owner = make_unit(core, player_id, Vec2(0.0, -5.0))
    near = make_unit(core, 2, Vec2(5.0, -5.0))
    far = make_unit(core, 2, Vec2(-5.0, -5.0))
    return player_id, owner, near, far


def test_rocket_locks_unit_nearest_cursor(core):
    player_id, owner, near, _ = _rocket_setup(core)
    bullet_id = core.add_bullet(
        Rocket, owner, player_id, Vec2(0.0, -5.0), 0.0, 1.0, Vec2()
    )
    assert core.bullets[bullet_id].player_locked == near


def test_rocket_homes_and_grows_stronger(core):
    player_id, owner, near, _ = _rocket_setup(core)
    bullet_id = core.add_bullet(
        Rocket, owner, player_id, Vec2(1.0, -5.0), 0.0, 1.0, Vec2()
    )
    rocket = core.bullets[bullet_id]
    before = (core.units[near].position - rocket.position).length()
    tick(core, rocket)
    after = (core.units[near].position - rocket.position).length()
    assert after < before
    assert rocket.harmful > 5.0
    assert rocket.rotation == pytest.approx(1.5 * math.pi)


def test_rocket_damage_equals_current_harm(core):
    player_id, owner, near, _ = _rocket_setup(core)
    bullet_id = core.add_bullet(
        Rocket, owner, player_id, Vec2(5.1, -5.0), 0.0, 1.0, Vec2()
    )
    rocket = core.bullets[bullet_id]
    tick(core, rocket)
    assert bullet_id not in core.bullets
    assert lost_health(core.units[near]) == pytest.approx(rocket.harmful)


def test_rocket_removed_when_target_gone(core):
    player_id, owner, near, _ = _rocket_setup(core)
    bullet_id = core.add_bullet(
        Rocket, owner, player_id, Vec2(1.0, -5.0), 0.0, 1.0, Vec2()
    )
    del core.units[near]
    tick(core, core.bullets[bullet_id])
    assert bullet_id not in core.bullets


def test_rocket_requires_player(core):
    with pytest.raises(LookupError):
        core.add_bullet(Rocket, 1, 42, Vec2(0.0, -5.0), 0.0, 1.0, Vec2())


def _bomb_setup(core):
    owner = make_unit(core, 1, Vec2(0.0, -3.5))
    enemy = make_unit(core, 2, Vec2(0.0, -3.0))
    bullet_id = core.add_bullet(
        SmokeBomb, owner, 1, Vec2(0.0, -5.0), 0.0, 1.0, Vec2(0.0, -3.0), 1.0, 0.5, 0.5
    )
    return owner, enemy, bullet_id


def test_smoke_bomb_lands_and_damages(core):
    owner, enemy, bullet_id = _bomb_setup(core)
    bomb = core.bullets[bullet_id]
    for _ in range(bomb.duration_ticks - 1):
        tick(core, bomb)
    assert not core.particles
    assert lost_health(core.units[enemy]) == 0.0
    tick(core, bomb)
    assert bomb.position == bomb.target
    assert len(core.particles) == 1
    enemy_loss = lost_health(core.units[enemy])
    assert enemy_loss == pytest.approx(10.0)
    assert lost_health(core.units[owner]) == pytest.approx(enemy_loss * 0.5)


def test_smoke_bomb_lifetime(core):
    _, _, bullet_id = _bomb_setup(core)
    bomb = core.bullets[bullet_id]
    ticks = 0
    while bullet_id in core.bullets:
        tick(core, bomb)
        ticks += 1
    assert ticks == bomb.duration_ticks + 5 * bomb.damage_ticks


def test_smoke_bomb_rejects_zero_damage_duration(core):
    with pytest.raises(ValueError):
        core.add_bullet(
            SmokeBomb, 1, 1, Vec2(0.0, -5.0), 0.0, 1.0, Vec2(0.0, -3.0), 1.0, 0.5, 0.0
        )


def test_sweaty_soybean_skips_unit_with_player_id(core):
    skipped = make_unit(core, 5, Vec2(0.0, -5.0))
    hit = make_unit(core, 5, Vec2(0.0, -5.0))
    bullet_id = core.add_bullet(
        SweatySoybean, 99, skipped, Vec2(0.0, -5.0), 0.0, 1.0, Vec2()
    )
    tick(core, core.bullets[bullet_id])
    assert core.units[skipped].health == 1.0
    assert lost_health(core.units[hit]) == pytest.approx(10.0)
    assert bullet_id not in core.bullets
    assert len(core.particles) == 5


def test_udongein_bullet_light_damage_no_smoke(core):
    owner = make_unit(core, 1, Vec2(0.0, -5.0))
    target = make_unit(core, 2, Vec2(0.0, -5.0))
    bullet_id = core.add_bullet(
        UdongeinDirectionalBullet, owner, 1, Vec2(0.0, -5.0), 0.0, 1.0, Vec2()
    )
    tick(core, core.bullets[bullet_id])
    assert core.units[owner].health == 1.0
    assert lost_health(core.units[target]) == pytest.approx(2.0)
    assert bullet_id not in core.bullets
    assert not core.particles


def test_warning_line_is_harmless(core):
    target = make_unit(core, 2, Vec2(0.0, -5.0))
    bullet_id = core.add_bullet(
        WarningLine, 99, 99, Vec2(0.0, -5.0), 0.0, 1.0, Vec2()
    )
    tick(core, core.bullets[bullet_id])
    assert core.units[target].health == 1.0
    assert bullet_id not in core.bullets
    assert not core.particles


def test_warning_line_flies_freely(core):
    start = Vec2(0.0, -5.0)
    velocity = Vec2(0.0, 6.0)
    bullet_id = core.add_bullet(WarningLine, 99, 99, start, 0.0, 1.0, velocity)
    line = core.bullets[bullet_id]
    tick(core, line)
    assert bullet_id in core.bullets
    assert line.position == start + velocity * SECOND_PER_TICK


def test_water_drop_destroys_unit(core):
    target = make_unit(core, 2, Vec2(0.0, -5.0))
    bullet_id = core.add_bullet(
        WaterDrop, 99, 99, Vec2(0.0, -5.0), 0.0, 1.0, Vec2()
    )
    tick(core, core.bullets[bullet_id])
    assert target not in core.units
    assert bullet_id not in core.bullets
    assert len(core.particles) == 5