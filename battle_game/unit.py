"""The controllable unit base class."""

from __future__ import annotations

import math
from abc import abstractmethod
from typing import Any

from battle_game.geometry import Vec2
from battle_game.objects import GameObject, Skill


class Unit(GameObject):
    """A unit owned by a player, with health in the range [0, 1]."""

    def __init__(self, game_core: Any, id: int, player_id: int) -> None:
        super().__init__(game_core, id)
        self.player_id = player_id
        self._health = 1.0
        self.skills: list[Skill] = []
        self.life_bar_display = True
        self.life_bar_offset = Vec2(0.0, 1.0)
        self._life_bar_length = 2.4
        self.life_bar_front_color = (0.0, 1.0, 0.0, 0.9)
        self.life_bar_background_color = (1.0, 0.0, 0.0, 0.9)
        self.life_bar_fadeout_color = (1.0, 1.0, 1.0, 0.5)
        self.sight_range = math.inf

    @property
    def health(self) -> float:
        """Remaining health as a fraction of :meth:`max_health`."""
        return self._health

    @health.setter
    def health(self, value: float) -> None:
        self._health = min(max(value, 0.0), 1.0)

    @property
    def life_bar_length(self) -> float:
        return self._life_bar_length

    @life_bar_length.setter
    def life_bar_length(self, value: float) -> None:
        # Assigned lengths are capped at zero, as the game has always done.
        self._life_bar_length = min(value, 0.0)

    def damage_scale(self) -> float:
        return 1.0

    def speed_scale(self) -> float:
        return 1.0

    def basic_max_health(self) -> float:
        return 100.0

    def health_scale(self) -> float:
        return 1.0

    def max_health(self) -> float:
        """Scaled maximum health, never below 1."""
        return max(self.health_scale() * self.basic_max_health(), 1.0)

    def show_life_bar(self) -> None:
        self.life_bar_display = True

    def hide_life_bar(self) -> None:
        self.life_bar_display = False

    @abstractmethod
    def is_hit(self, position: Vec2) -> bool:
        """Whether a bullet at ``position`` hits this unit."""

    def unit_name(self) -> str:
        return "Unknown Unit"

    def author(self) -> str:
        return "Unknown Author"

    def is_distant(self, obj: GameObject) -> bool:
        """Whether ``obj`` lies beyond this unit's sight range (unlimited by default)."""
        if math.isinf(self.sight_range):
            return False
        offset = Vec2(obj.position.x - self.position.x, obj.position.y - self.position.y)
        return offset.length() > self.sight_range

    def generate_bullet(
        self,
        bullet_type: type,
        position: Vec2,
        rotation: float,
        damage_scale: float = 1.0,
        *args: Any,
    ) -> None:
        """Queue a bullet owned by this unit and its player."""
        self.game_core.push_event_generate_bullet(
            bullet_type,
            self.id,
            self.player_id,
            position,
            rotation,
            damage_scale,
            *args,
        )

    def update(self) -> None:
        """A unit without behaviour of its own stays put and only ages."""
        self.age += 1