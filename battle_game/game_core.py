"""The game world: object registries, the event queue and the tick loop."""

from __future__ import annotations

import math
import random
from collections import deque
from typing import Any, Callable, Optional

from battle_game.geometry import Vec2
from battle_game.objects import Bullet, Obstacle, Particle
from battle_game.obstacles import Block, ReboundingBlock, River
from battle_game.player import Player
from battle_game.unit import Unit

Color = tuple[float, float, float, float]

NEUTRAL_COLOR: Color = (0.5, 1.0, 0.5, 1.0)
OWN_COLOR: Color = (1.0, 1.0, 1.0, 1.0)
ENEMY_COLOR: Color = (1.0, 0.5, 0.5, 1.0)

HALF_DAY_TICKS = 12 * 6


class GameCore:
    """Owns every object in the world and advances it one tick at a time.

    Changes that one object makes to the world are queued as events and
    applied together at the end of each tick.
    """

    def __init__(self, seed: int = 0) -> None:
        self._event_queue: deque[Callable[[], None]] = deque()
        self._random = random.Random(seed)

        self.units: dict[int, Unit] = {}
        self.bullets: dict[int, Bullet] = {}
        self.particles: dict[int, Particle] = {}
        self.obstacles: dict[int, Obstacle] = {}
        self.players: dict[int, Player] = {}
        self._unit_index = 1
        self._bullet_index = 1
        self._particle_index = 1
        self._obstacle_index = 1
        self._player_index = 1

        # The player watching the scene; 0 means a neutral observer.
        self.render_perspective = 0
        self.camera_position = Vec2()
        self.camera_rotation = 0.0

        self.boundary_low = Vec2(-10.0, -10.0)
        self.boundary_high = Vec2(10.0, 10.0)

        self.respawn_points: list[tuple[Vec2, float]] = []
        self._allocators: list[Callable[[int], int]] = []
        self._selectable_names: list[str] = []
        self.selectable_unit_skills: list[bool] = []

        self.time_of_day = 0
        self.night = False
        self.all_night = False
        self.all_day = False

        self.set_scene()

    # Scene and unit selection -------------------------------------------

    def set_scene(self) -> None:
        """Place the default obstacles, respawn points and boundary."""
        quarter_turn = math.pi / 4
        self.add_obstacle(Block, Vec2(-3.0, 4.0))
        self.add_obstacle(River, Vec2(3.0, 0.0))
        for corner in (
            Vec2(-10.0, -10.0),
            Vec2(10.0, -10.0),
            Vec2(10.0, 10.0),
            Vec2(-10.0, 10.0),
        ):
            self.add_obstacle(ReboundingBlock, corner, quarter_turn)
        self.respawn_points.append((Vec2(0.0, 0.0), 0.0))
        self.respawn_points.append((Vec2(3.0, 4.0), math.radians(90.0)))
        self.boundary_low = Vec2(-10.0, -10.0)
        self.boundary_high = Vec2(10.0, 10.0)

    def register_selectable_unit(self, unit_type: type, has_skills: bool = True) -> None:
        """Make ``unit_type`` available as a player's primary unit."""
        sample = unit_type(None, 0, 0)
        self._allocators.append(
            lambda player_id: self.add_unit(unit_type, player_id)
        )
        self._selectable_names.append(f"{sample.unit_name()} - By {sample.author()}")
        self.selectable_unit_skills.append(bool(has_skills))

    def selectable_unit_names(self) -> list[str]:
        """Display names of the selectable units, in registration order."""
        return list(self._selectable_names)

    def allocate_primary_unit(self, player_id: int) -> int:
        """Spawn the player's selected unit at a random respawn point.

        Returns the new unit id, or 0 when the player does not exist.
        """
        player = self.get_player(player_id)
        if player is None:
            return 0
        if not 0 <= player.selected_unit < len(self._allocators):
            raise LookupError(
                f"no selectable unit at index {player.selected_unit}"
            )
        unit_id = self._allocators[player.selected_unit](player_id)
        unit = self.units[unit_id]
        position, rotation = self.respawn_points[
            self.random_int(0, len(self.respawn_points) - 1)
        ]
        unit.position = position
        unit.rotation = rotation
        return unit_id

    # Tick loop ------------------------------------------------------------

    def update(self) -> None:
        """Advance the world by one tick: players, obstacles, bullets, units, particles."""
        if self.all_day and self.all_night:
            raise ValueError("all_day and all_night cannot both be set")
        if self.all_night:
            self.night = True
        if (
            self.time_of_day >= HALF_DAY_TICKS
            and not self.all_night
            and not self.all_day
        ):
            self.time_of_day = 0
            self.night = not self.night
        self.time_of_day += 1

        for player in list(self.players.values()):
            player.update()
        for obstacle in list(self.obstacles.values()):
            obstacle.update()
        for bullet_id, bullet in list(self.bullets.items()):
            if self.is_out_of_range(bullet.position):
                self.push_event_remove_bullet(bullet_id)
                continue
            bullet.update()
        for unit in list(self.units.values()):
            unit.update()
        for particle_id, particle in list(self.particles.items()):
            if self.is_out_of_range(particle.position):
                self.push_event_remove_particle(particle_id)
                continue
            particle.update()
        self.process_event_queue()

    def update_camera(self) -> None:
        """Point the camera at the observing player's primary unit, if alive."""
        observer = self.get_player(self.render_perspective)
        if observer is None:
            return
        unit = self.get_unit(observer.primary_unit_id)
        if unit is not None:
            self.set_camera(unit.position, 0.0)

    # Creation -------------------------------------------------------------

    def add_player(self) -> int:
        player_id = self._player_index
        self._player_index += 1
        self.players[player_id] = Player(self, player_id)
        return player_id

    def add_unit(self, unit_type: type, player_id: int, *args: Any) -> int:
        unit_id = self._unit_index
        self._unit_index += 1
        self.units[unit_id] = unit_type(self, unit_id, player_id, *args)
        return unit_id

    def add_obstacle(
        self, obstacle_type: type, position: Vec2, rotation: float = 0.0, *args: Any
    ) -> int:
        obstacle_id = self._obstacle_index
        self._obstacle_index += 1
        self.obstacles[obstacle_id] = obstacle_type(
            self, obstacle_id, position, rotation, *args
        )
        return obstacle_id

    def add_bullet(
        self,
        bullet_type: type,
        unit_id: int,
        player_id: int,
        position: Vec2,
        rotation: float = 0.0,
        damage_scale: float = 1.0,
        *args: Any,
    ) -> int:
        """Create a bullet; returns 0 without creating one when out of range."""
        if self.is_out_of_range(position):
            return 0
        bullet_id = self._bullet_index
        self._bullet_index += 1
        self.bullets[bullet_id] = bullet_type(
            self, bullet_id, unit_id, player_id, position, rotation, damage_scale, *args
        )
        return bullet_id

    def add_particle(
        self, particle_type: type, position: Vec2, rotation: float = 0.0, *args: Any
    ) -> int:
        """Create a particle; returns 0 without creating one when out of range."""
        if self.is_out_of_range(position):
            return 0
        particle_id = self._particle_index
        self._particle_index += 1
        self.particles[particle_id] = particle_type(
            self, particle_id, position, rotation, *args
        )
        return particle_id

    # Lookup ---------------------------------------------------------------

    def get_unit(self, unit_id: int) -> Optional[Unit]:
        return self.units.get(unit_id)

    def get_bullet(self, bullet_id: int) -> Optional[Bullet]:
        return self.bullets.get(bullet_id)

    def get_particle(self, particle_id: int) -> Optional[Particle]:
        return self.particles.get(particle_id)

    def get_obstacle(self, obstacle_id: int) -> Optional[Obstacle]:
        return self.obstacles.get(obstacle_id)

    def get_player(self, player_id: int) -> Optional[Player]:
        return self.players.get(player_id)

    def player_color(self, player_id: int) -> Color:
        """Colour of a player's objects as seen from the render perspective."""
        if self.render_perspective == 0:
            return NEUTRAL_COLOR
        if self.render_perspective == player_id:
            return OWN_COLOR
        return ENEMY_COLOR

    # Space queries --------------------------------------------------------

    def is_out_of_range(self, p: Vec2) -> bool:
        return (
            p.x < self.boundary_low.x
            or p.x > self.boundary_high.x
            or p.y < self.boundary_low.y
            or p.y > self.boundary_high.y
        )

    def is_blocked_by_obstacles(self, p: Vec2) -> bool:
        """Whether ``p`` is outside the world or inside any obstacle."""
        if self.is_out_of_range(p):
            return True
        return any(obstacle.is_blocked(p) for obstacle in self.obstacles.values())

    def blocked_obstacle(self, p: Vec2) -> Optional[Obstacle]:
        """The first obstacle containing ``p``; None outside the world."""
        if self.is_out_of_range(p):
            return None
        return next(
            (o for o in self.obstacles.values() if o.is_blocked(p)), None
        )

    # Events ---------------------------------------------------------------

    def push_event_move_unit(self, unit_id: int, new_position: Vec2) -> None:
        def event() -> None:
            unit = self.get_unit(unit_id)
            if unit is not None:
                unit.position = new_position

        self._event_queue.append(event)

    def push_event_rotate_unit(self, unit_id: int, new_rotation: float) -> None:
        def event() -> None:
            unit = self.get_unit(unit_id)
            if unit is not None:
                unit.rotation = new_rotation

        self._event_queue.append(event)

    def push_event_deal_damage(
        self, dst_unit_id: int, src_unit_id: int, damage: float
    ) -> None:
        def event() -> None:
            unit = self.get_unit(dst_unit_id)
            if unit is None:
                return
            unit.health = unit.health - damage / unit.max_health()
            if unit.health <= 0.0:
                self.push_event_kill_unit(dst_unit_id, src_unit_id)

        self._event_queue.append(event)

    def push_event_kill_unit(self, dst_unit_id: int, src_unit_id: int) -> None:
        self._event_queue.append(lambda: self.push_event_remove_unit(dst_unit_id))

    def push_event_remove_obstacle(self, obstacle_id: int) -> None:
        self._event_queue.append(lambda: self.obstacles.pop(obstacle_id, None))

    def push_event_remove_bullet(self, bullet_id: int) -> None:
        def event() -> None:
            bullet = self.bullets.pop(bullet_id, None)
            if bullet is not None:
                bullet.on_destroy()

        self._event_queue.append(event)

    def push_event_remove_particle(self, particle_id: int) -> None:
        self._event_queue.append(lambda: self.particles.pop(particle_id, None))

    def push_event_remove_unit(self, unit_id: int) -> None:
        self._event_queue.append(lambda: self.units.pop(unit_id, None))

    def push_event_generate_bullet(
        self,
        bullet_type: type,
        unit_id: int,
        player_id: int,
        position: Vec2,
        rotation: float = 0.0,
        damage_scale: float = 1.0,
        *args: Any,
    ) -> None:
        self._event_queue.append(
            lambda: self.add_bullet(
                bullet_type, unit_id, player_id, position, rotation, damage_scale, *args
            )
        )

    def push_event_generate_obstacle(
        self, obstacle_type: type, position: Vec2, rotation: float = 0.0, *args: Any
    ) -> None:
        self._event_queue.append(
            lambda: self.add_obstacle(obstacle_type, position, rotation, *args)
        )

    def push_event_generate_particle(
        self, particle_type: type, position: Vec2, rotation: float = 0.0, *args: Any
    ) -> None:
        self._event_queue.append(
            lambda: self.add_particle(particle_type, position, rotation, *args)
        )

    def process_event_queue(self) -> None:
        """Run queued events in order, including any they queue themselves."""
        while self._event_queue:
            self._event_queue.popleft()()

    # Camera and randomness -------------------------------------------------

    def set_camera(self, position: Vec2, rotation: float = 0.0) -> None:
        self.camera_position = position
        self.camera_rotation = rotation

    def random_float(self) -> float:
        """A uniform random number in [0, 1)."""
        return self._random.random()

    def random_int(self, low_bound: int, high_bound: int) -> int:
        """A uniform random integer in [low_bound, high_bound]."""
        return self._random.randint(low_bound, high_bound)

    def random_on_circle(self) -> Vec2:
        """A uniform random point on the unit circle."""
        theta = self.random_float() * math.pi * 2.0
        return Vec2(math.sin(theta), math.cos(theta))

    def random_in_circle(self) -> Vec2:
        """A uniform random point inside the unit disc."""
        theta = self.random_float() * math.pi * 2.0
        length = math.sqrt(self.random_float())
        return Vec2(math.sin(theta) * length, math.cos(theta) * length)