"""Battle-side entity manager: queued client messages, fixed-rate ticks and AOI frames."""

from __future__ import annotations

import enum
import logging
import queue
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Union

from aoigrid.entity import AoiNode, AoiResult, Entity, Rotation, Vector3
from aoigrid.grid import create_grid_aoi_node
from aoigrid.move import MOVE_SPEED, MoveInput, apply_latest_move_input

logger = logging.getLogger(__name__)


class EntityState(enum.Enum):
    """How an entity in a state frame relates to the observer."""

    IN_VIEW = "in_view"
    OUT_OF_VIEW = "out_of_view"
    UPDATE = "update"


@dataclass(frozen=True)
class EntitySnapshot:
    """An entity's state as seen by one observer in one frame."""

    entity_id: int
    state: EntityState
    position: Vector3
    yaw: float
    pitch: float


@dataclass
class StateFrame:
    """All visibility changes one observer receives for a frame."""

    frame: int
    entities: list[EntitySnapshot] = field(default_factory=list)


@dataclass(frozen=True)
class PreloadEntity:
    """Loads a player's stored transform ahead of their bind request."""

    player_id: int
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0


@dataclass(frozen=True)
class BindRequest:
    """A player asks to enter the world."""

    player_id: int


@dataclass(frozen=True)
class MoveRequest:
    """A movement input from a player."""

    player_id: int
    move_input: MoveInput


@dataclass(frozen=True)
class LoginFailed:
    """Sent to a player whose bind request had no preloaded entity."""

    player_id: int


Message = Union[PreloadEntity, BindRequest, MoveRequest]
Outgoing = Union[StateFrame, LoginFailed]
SendCallback = Callable[[int, Outgoing], None]


class ObjectManager:
    """Owns the live entities, applies queued messages each tick and emits AOI frames."""

    def __init__(
        self,
        node: AoiNode | None = None,
        tick_rate: int = 30,
        send: SendCallback | None = None,
    ) -> None:
        if tick_rate <= 0:
            raise ValueError(f"tick rate must be positive, got {tick_rate}")
        self.node = node if node is not None else create_grid_aoi_node()
        self.tick_rate = tick_rate
        self.send = send
        self._frame = 0
        self._entities: dict[int, Entity] = {}
        self._waiting: dict[int, Entity] = {}
        self._move_inputs: dict[int, list[MoveInput]] = {}
        self._queue: queue.Queue[Message] = queue.Queue()
        self._stopped = threading.Event()

    @property
    def frame(self) -> int:
        """Number of ticks processed so far."""
        return self._frame

    def push(self, message: Message) -> None:
        """Queue a message for the next tick; safe to call from any thread."""
        self._queue.put(message)

    def entity(self, player_id: int) -> Entity | None:
        """Return the live entity for a player, or None if not bound."""
        return self._entities.get(player_id)

    def stop(self) -> None:
        """Make run() return; a stopped manager does not run again."""
        self._stopped.set()

    def run(self) -> None:
        """Tick at the configured rate until stop() is called."""
        period = 1.0 / self.tick_rate
        deadline = time.monotonic() + period
        while not self._stopped.wait(max(0.0, deadline - time.monotonic())):
            deadline += period
            self.tick()

    def tick(self) -> None:
        """Process queued messages, advance the frame and publish visibility changes."""
        self._handle_messages()
        self._frame += 1
        self._handle_update()

    def _handle_messages(self) -> None:
        for _ in range(self._queue.qsize()):
            try:
                message = self._queue.get_nowait()
            except queue.Empty:
                break
            match message:
                case PreloadEntity():
                    self._preload(message)
                case BindRequest(player_id=player_id):
                    self._login(player_id)
                case MoveRequest(player_id=player_id, move_input=move_input):
                    self._move(player_id, move_input)
                case _:
                    logger.error("unknown message: %r", message)

    def _preload(self, message: PreloadEntity) -> None:
        logger.debug("preload entity, player_id: %d", message.player_id)
        entity = self._waiting.setdefault(message.player_id, Entity())
        entity.player_id = message.player_id
        entity.position = Vector3(message.x, message.y, message.z)
        entity.rotation = Rotation(message.yaw, message.pitch, message.roll)

    def _login(self, player_id: int) -> None:
        if player_id in self._entities:
            logger.debug("player %d already bound", player_id)
            return
        entity = self._waiting.pop(player_id, None)
        if entity is None:
            logger.error("player information not found: %d", player_id)
            self._send(player_id, LoginFailed(player_id))
            return
        self._entities[player_id] = entity
        self.node.add_entity(entity)
        logger.debug("player %d bound", player_id)

    def _move(self, player_id: int, move_input: MoveInput) -> None:
        if player_id not in self._entities:
            return
        self._move_inputs.setdefault(player_id, []).append(move_input)

    def _handle_update(self) -> None:
        moved: list[Entity] = []
        dt = 1.0 / self.tick_rate
        for player_id, inputs in self._move_inputs.items():
            if not inputs:
                continue
            entity = self._entities.get(player_id)
            if entity is not None and apply_latest_move_input(entity, inputs, dt, MOVE_SPEED):
                moved.append(entity)
            inputs.clear()
        self._publish(self.node.aoi_update(moved))

    def _publish(self, results: dict[int, AoiResult]) -> None:
        for player_id, result in results.items():
            groups = (
                (result.enter_entities, EntityState.IN_VIEW),
                (result.leave_entity_ids, EntityState.OUT_OF_VIEW),
                (result.update_entities, EntityState.UPDATE),
            )
            snapshots = [
                self._snapshot(entity_id, state) for ids, state in groups for entity_id in ids
            ]
            if snapshots:
                self._send(player_id, StateFrame(self._frame, snapshots))

    def _snapshot(self, entity_id: int, state: EntityState) -> EntitySnapshot:
        entity = self._entities.get(entity_id) or Entity(player_id=entity_id)
        position = Vector3(entity.position.x, entity.position.y, entity.position.z)
        return EntitySnapshot(
            entity.player_id, state, position, entity.rotation.yaw, entity.rotation.pitch
        )

    def _send(self, player_id: int, message: Outgoing) -> None:
        if self.send is not None:
            self.send(player_id, message)