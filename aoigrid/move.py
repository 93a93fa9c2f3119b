"""Keyboard-driven movement: key masks, direction vectors and input application."""

from __future__ import annotations

import enum
import math
from collections.abc import Iterable
from dataclasses import dataclass

from aoigrid.entity import Entity

MOVE_SPEED = 5.0
_EPSILON = 0.00001


class MoveKey(enum.IntFlag):
    """Bits of the movement key mask."""

    FORWARD = 1 << 0
    BACK = 1 << 1
    LEFT = 1 << 2
    RIGHT = 1 << 3


@dataclass(frozen=True)
class Vec2:
    """A 2D vector on the ground plane."""

    x: float = 0.0
    y: float = 0.0

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> Vec2:
        """Unit vector in the same direction, or zero for a near-zero vector."""
        length = self.length()
        if length <= _EPSILON:
            return Vec2()
        return Vec2(self.x / length, self.y / length)


@dataclass
class MoveInput:
    """One movement request from a client; yaw and pitch are in radians."""

    move_seq: int
    key_mask: int = 0
    yaw: float = 0.0
    pitch: float = 0.0


def key_mask_to_local_dir(key_mask: int) -> Vec2:
    """Turn pressed keys into a normalised direction in the player's frame."""
    x = 0
    y = 0
    if key_mask & MoveKey.LEFT:
        x -= 1
    if key_mask & MoveKey.RIGHT:
        x += 1
    if key_mask & MoveKey.FORWARD:
        y += 1
    if key_mask & MoveKey.BACK:
        y -= 1
    return Vec2(float(x), float(y)).normalized()


def rotate_local_to_world(local_dir: Vec2, yaw: float) -> Vec2:
    """Rotate a local direction by yaw into world X/Z."""
    c = math.cos(yaw)
    s = math.sin(yaw)
    return Vec2(local_dir.x * c + local_dir.y * s, -local_dir.x * s + local_dir.y * c)


def pick_latest_valid_input(
    entity: Entity, move_inputs: Iterable[MoveInput | None]
) -> MoveInput | None:
    """Return the input with the highest sequence newer than the entity's, if any."""
    latest: MoveInput | None = None
    best_seq = entity.move_seq
    for move_input in move_inputs:
        if move_input is None or move_input.move_seq <= entity.move_seq:
            continue
        if latest is None or move_input.move_seq > best_seq:
            latest = move_input
            best_seq = move_input.move_seq
    return latest


def apply_latest_move_input(
    entity: Entity,
    move_inputs: Iterable[MoveInput | None],
    dt_seconds: float,
    move_speed: float = MOVE_SPEED,
) -> bool:
    """Apply the newest input to the entity; return whether it moved."""
    latest = pick_latest_valid_input(entity, move_inputs)
    if latest is None:
        return False
    entity.move_seq = latest.move_seq
    entity.rotation.yaw = latest.yaw
    entity.rotation.pitch = latest.pitch
    direction = rotate_local_to_world(key_mask_to_local_dir(latest.key_mask), entity.rotation.yaw)
    if direction.length() <= _EPSILON:
        return False
    distance = move_speed * dt_seconds
    entity.position.x += direction.x * distance
    entity.position.z += direction.y * distance
    return True