"""Players and the input they feed to the game each frame."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from battle_game.geometry import Vec2
from battle_game.objects import TICK_PER_SECOND

KEY_RANGE = 349
MOUSE_BUTTON_RANGE = 8
RESPAWN_TICKS = TICK_PER_SECOND * 5


@dataclass
class InputData:
    """Keys and mouse buttons held or clicked, plus the cursor in world space."""

    key_down: frozenset[int] = field(default_factory=frozenset)
    mouse_button_down: frozenset[int] = field(default_factory=frozenset)
    mouse_button_clicked: frozenset[int] = field(default_factory=frozenset)
    mouse_cursor_position: Vec2 = field(default_factory=Vec2)


class Player:
    """A participant who controls one primary unit at a time."""

    def __init__(self, game_core: Any, id: int) -> None:
        self.game_core = game_core
        self.id = id
        self.input_data = InputData()
        self.primary_unit_id = 0
        self.resurrection_count_down = 1
        self.selected_unit = 0

    def update(self) -> None:
        """Count down while dead and respawn once the count reaches zero."""
        if self.game_core.get_unit(self.primary_unit_id) is not None:
            return
        if not self.resurrection_count_down:
            self.resurrection_count_down = RESPAWN_TICKS
        self.resurrection_count_down -= 1
        if not self.resurrection_count_down:
            self.primary_unit_id = self.game_core.allocate_primary_unit(self.id)