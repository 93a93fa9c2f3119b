"""Grid-based area-of-interest index (nine-cell neighbourhood)."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from aoigrid.entity import AoiNode, AoiResult, Entity, Vector3

_MIN_CELL_SIZE = 1.0


@dataclass(frozen=True)
class CellKey:
    """Integer coordinates of a grid cell on the X/Z plane."""

    gx: int = 0
    gz: int = 0


@dataclass
class _PlayerState:
    player_id: int
    position: Vector3
    cell: CellKey
    visible_entities: set[int] = field(default_factory=set)


def _append_unique(ids: list[int], value: int) -> None:
    if value not in ids:
        ids.append(value)


class GridAoiNode(AoiNode):
    """AOI index that buckets players into square cells and checks real distance."""

    def __init__(self, cell_size: float = 30.0, view_radius: float = 30.0) -> None:
        self.cell_size = max(cell_size, _MIN_CELL_SIZE)
        self.view_radius = max(view_radius, self.cell_size)
        self._view_radius_sq = self.view_radius * self.view_radius
        self._cells: dict[CellKey, set[int]] = {}
        self._players: dict[int, _PlayerState] = {}
        self._pending_full_sync: set[int] = set()

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._players

    def __len__(self) -> int:
        return len(self._players)

    def add_entity(self, entity: Entity | None) -> None:
        """Register (or re-register) an entity; it gets a full sync next update."""
        if entity is None:
            return
        existing = self._players.get(entity.player_id)
        if existing is not None:
            self._erase_from_cell(entity.player_id, existing.cell)
        position = Vector3(entity.position.x, entity.position.y, entity.position.z)
        state = _PlayerState(entity.player_id, position, self.world_to_cell(position))
        self._players[entity.player_id] = state
        self._cells.setdefault(state.cell, set()).add(entity.player_id)
        self._pending_full_sync.add(entity.player_id)

    def remove_entity(self, entity: Entity | None) -> None:
        """Forget an entity and drop it from everyone's visible set."""
        if entity is None:
            return
        state = self._players.get(entity.player_id)
        if state is None:
            return
        for other_id in state.visible_entities:
            other = self._players.get(other_id)
            if other is not None:
                other.visible_entities.discard(entity.player_id)
        self._erase_from_cell(entity.player_id, state.cell)
        self._pending_full_sync.discard(entity.player_id)
        del self._players[entity.player_id]

    def aoi_update(self, moved_players: Iterable[Entity | None]) -> dict[int, AoiResult]:
        """Recompute visibility for moved and newly added players."""
        result: dict[int, AoiResult] = {}

        dirty_entities: dict[int, Entity] = {}
        for entity in moved_players:
            if entity is not None:
                dirty_entities[entity.player_id] = entity

        for player_id, entity in dirty_entities.items():
            if player_id not in self._players:
                self.add_entity(entity)
            self._update_player_transform(entity)

        dirty_ids = set(self._pending_full_sync) | dirty_entities.keys()
        if not dirty_ids:
            return result
        ordered_dirty = sorted(dirty_ids)

        recalculated: dict[int, set[int]] = {}
        for player_id in ordered_dirty:
            state = self._players.get(player_id)
            if state is None:
                continue
            recalculated[player_id] = {
                candidate_id
                for candidate_id in self._collect_candidates(state.cell)
                if candidate_id in self._players
                and self.is_in_view(state.position, self._players[candidate_id].position)
            }

        for player_id in ordered_dirty:
            state = self._players.get(player_id)
            new_visible = recalculated.get(player_id)
            if state is None or new_visible is None:
                continue

            full_sync = player_id in self._pending_full_sync
            old_visible = set(state.visible_entities)
            self_result = result.setdefault(player_id, AoiResult())
            if full_sync:
                self_result.full_sync = True

            for other_id in sorted(new_visible):
                if full_sync or other_id not in old_visible:
                    _append_unique(self_result.enter_entities, other_id)

            if not full_sync:
                for other_id in sorted(old_visible - new_visible):
                    _append_unique(self_result.leave_entity_ids, other_id)

            for other_id in sorted(new_visible):
                other = self._players.get(other_id)
                if other is None:
                    continue
                other_result = result.setdefault(other_id, AoiResult())
                if other_id not in old_visible:
                    _append_unique(other_result.enter_entities, player_id)
                    if other_id not in dirty_ids:
                        other.visible_entities.add(player_id)
                else:
                    _append_unique(other_result.update_entities, player_id)

            for other_id in sorted(old_visible - new_visible):
                other = self._players.get(other_id)
                if other is None:
                    continue
                _append_unique(
                    result.setdefault(other_id, AoiResult()).leave_entity_ids, player_id
                )
                if other_id not in dirty_ids:
                    other.visible_entities.discard(player_id)

        for player_id in ordered_dirty:
            state = self._players.get(player_id)
            new_visible = recalculated.get(player_id)
            if state is None or new_visible is None:
                continue
            state.visible_entities = set(new_visible)
            self._pending_full_sync.discard(player_id)

        return result

    def world_to_cell(self, position: Vector3) -> CellKey:
        """Return the cell containing a world position."""
        return CellKey(
            math.floor(position.x / self.cell_size),
            math.floor(position.z / self.cell_size),
        )

    def is_in_view(self, lhs: Vector3, rhs: Vector3) -> bool:
        """Whether two positions are within view radius on the X/Z plane."""
        dx = lhs.x - rhs.x
        dz = lhs.z - rhs.z
        return dx * dx + dz * dz <= self._view_radius_sq

    def _update_player_transform(self, entity: Entity) -> None:
        state = self._players.get(entity.player_id)
        if state is None:
            return
        position = Vector3(entity.position.x, entity.position.y, entity.position.z)
        new_cell = self.world_to_cell(position)
        if state.cell != new_cell:
            self._erase_from_cell(entity.player_id, state.cell)
            self._cells.setdefault(new_cell, set()).add(entity.player_id)
            state.cell = new_cell
        state.position = position

    def _erase_from_cell(self, player_id: int, cell: CellKey) -> None:
        members = self._cells.get(cell)
        if members is None:
            return
        members.discard(player_id)
        if not members:
            del self._cells[cell]

    def _collect_candidates(self, center: CellKey) -> set[int]:
        candidates: set[int] = set()
        for dz in (-1, 0, 1):
            for dx in (-1, 0, 1):
                candidates |= self._cells.get(CellKey(center.gx + dx, center.gz + dz), set())
        return candidates


def create_grid_aoi_node(cell_size: float = 30.0, view_radius: float = 30.0) -> GridAoiNode:
    """Build a grid AOI node."""
    return GridAoiNode(cell_size, view_radius)