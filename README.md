# battle_game

This package is the simulation core of a top-down battle game. Players
control units on a bounded 2D arena that also holds obstacles, bullets and
particles. The world advances in fixed ticks of 1/60 of a second. Changes to
the world are queued as events and applied at the end of each tick.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `battle_game.geometry`: the immutable `Vec2`, which supports `+`, `-`,
  scalar `*` and `/`, unary `-`, `length`, `normalized`, `dot` and `cross`.
  Calling `normalized` on a zero vector raises `ValueError`. The module also
  has `rotate`, `local_to_world` and `world_to_local`.
- `battle_game.objects`: the base classes `GameObject`, `Obstacle`,
  `Particle` and `Bullet`, the `SkillType` enum and the `Skill` dataclass.
  It also defines the constants `TICK_PER_SECOND` (60) and `SECOND_PER_TICK`.
- `battle_game.unit`: `Unit`, the abstract base class for player units.
  Health is a fraction clamped to [0, 1]. `max_health()` is the health scale
  times the basic maximum health, and is never below 1. The class also holds
  the life-bar settings and `generate_bullet`, which queues a bullet owned by
  the unit. `is_distant` compares a distance with `sight_range`, which is
  unlimited by default.
- `battle_game.player`: `Player` and `InputData`. A player with no living
  primary unit counts down and then spawns one. The first spawn happens on
  the first tick. After the unit is lost, the player waits five seconds
  (300 ticks).
- `battle_game.obstacles`: `Block`, `River` (blocks every point except the
  exact position of a bullet), `ReboundingBlock` (reports a hit point and a
  normal through `surface_normal`) and `SafetyDeclaration` (removes itself
  after three seconds). The module also has `segments_intersect`.
- `battle_game.particles`: `BulletHole`, `Thunderbolt`, `Explosion` and
  `Smoke`. `Explosion` deals 10 damage on its first tick to every unit inside
  its area. `Smoke` drifts and fades until it is removed.
- `battle_game.bullets`: `CannonBall`, `Coin`, `CritBullet`, `ElectricBall`,
  `EnergyBeam` (with `HitKind` and `HitResult`), `Mine` and the homing
  `Missile`.
- `battle_game.special_bullets`: `ReboundingBall`, `Rocket`, `SmokeBomb`,
  `SweatySoybean`, `UdongeinDirectionalBullet`, `WarningLine` and
  `WaterDrop`.
- `battle_game.game_core`: `GameCore`, which owns every entity, the event
  queue, the day/night counter and the random number generator.

## Usage

A player can only spawn after at least one unit type has been registered
as selectable. Without one, the first tick raises `LookupError`. Unit types
are subclasses of `Unit`:

```python
from battle_game.game_core import GameCore
from battle_game.unit import Unit


class Dummy(Unit):
    def is_hit(self, position):
        return (position - self.position).length() < 0.5

    def unit_name(self):
        return "Dummy"

    def author(self):
        return "Nobody"


core = GameCore()                       # default arena, seeded with 0
core.register_selectable_unit(Dummy, False)
print(core.selectable_unit_names())     # ['Dummy - By Nobody']

me = core.add_player()
enemy = core.add_player()
core.render_perspective = me

for _ in range(60):                     # one second of game time
    core.update()

unit = core.get_unit(core.get_player(me).primary_unit_id)
print(unit.position, unit.health)
```

`GameCore.update` runs one tick in this order:

1. Players.
2. Obstacles.
3. Bullets. A bullet outside the arena is removed instead of updated.
4. Units.
5. Particles. A particle outside the arena is removed instead of updated.

The tick ends with `process_event_queue`.

Changes are queued with the `push_event_*` methods:

- damage
- kill
- removal
- moving and rotating units
- generating bullets, obstacles and particles

The queue runs its events in order, including any events they queue
themselves. A bullet calls its `on_destroy` hook when it is removed. Most
bullets use this hook to queue a burst of smoke.

To fire a bullet from a unit, call `unit.generate_bullet(CannonBall, position,
rotation, 1.0, velocity)`. You can also call `core.add_bullet(...)` directly.
`add_bullet` and `add_particle` return 0 and create nothing when the position
is outside the arena.

`update_camera` points the camera at the primary unit of the observing
player. `player_color` returns one colour for a neutral observer, one for the
observer's own objects and one for everyone else's.

Random numbers come from `random.Random` seeded with 0. You can set another
seed with `GameCore(seed=...)`. The same seed and the same inputs give the
same simulation.

## What this package does not do

- It has no window, no rendering, no input capture and no command to start a
  game. You drive it by calling `update` yourself, and you supply each
  player's `InputData` yourself.
- It ships no playable unit types. `Unit` is abstract, so you define the
  units and register them with `register_selectable_unit`.