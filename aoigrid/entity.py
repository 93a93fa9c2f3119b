"""Core world data: positions, rotations, entities and the AOI node interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass
class Vector3:
    """A point in world space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Rotation:
    """Euler-angle orientation."""

    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0


@dataclass
class Entity:
    """A player-controlled object in the world."""

    player_id: int = 0
    move_seq: int = 0
    position: Vector3 = field(default_factory=Vector3)
    rotation: Rotation = field(default_factory=Rotation)
    visible_entities: set[int] = field(default_factory=set)


@dataclass
class AoiResult:
    """What one observer must learn about its surroundings this frame."""

    full_sync: bool = False
    enter_entities: list[int] = field(default_factory=list)
    update_entities: list[int] = field(default_factory=list)
    leave_entity_ids: list[int] = field(default_factory=list)


class AoiNode(ABC):
    """Area-of-interest index that tracks who can see whom."""

    @abstractmethod
    def add_entity(self, entity: Entity | None) -> None:
        """Start tracking an entity."""

    @abstractmethod
    def remove_entity(self, entity: Entity | None) -> None:
        """Stop tracking an entity."""

    @abstractmethod
    def aoi_update(self, moved_players: Iterable[Entity | None]) -> dict[int, AoiResult]:
        """Recompute visibility for moved players and return per-observer changes."""