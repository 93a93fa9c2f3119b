# aoigrid

Server-side area-of-interest (AOI) tracking for multiplayer games. A uniform
grid over the world's X/Z plane finds who can see whom. A tick-driven object
manager applies player movement input and reports visibility changes to each
player.

## Modules

- `aoigrid.entity` holds the data model: `Vector3`, `Rotation`, `Entity`
  and the per-observer `AoiResult`. It also defines the abstract `AoiNode`
  interface with `add_entity`, `remove_entity` and `aoi_update`.
- `aoigrid.grid` provides `GridAoiNode` and `create_grid_aoi_node(cell_size=30.0, view_radius=30.0)`.
  Players are placed in square cells. Candidates are gathered from the 3×3
  block of cells around a player and then kept only if they lie within the
  view radius on the X/Z plane. The cell size is never less than 1.0, and the
  view radius is never less than the cell size. `player_id in node` and
  `len(node)` report which players are tracked.
- `aoigrid.move` handles key-mask movement. It provides:
  - the `MoveKey` flags `FORWARD`, `BACK`, `LEFT` and `RIGHT`;
  - `Vec2`, with `length()` and `normalized()`;
  - `MoveInput`, with `move_seq`, `key_mask`, and `yaw`/`pitch` in radians;
  - the functions `key_mask_to_local_dir`, `rotate_local_to_world`,
    `pick_latest_valid_input` and `apply_latest_move_input`;
  - `MOVE_SPEED`, which is 5.0 units per second.
- `aoigrid.manager` provides `ObjectManager(node=None, tick_rate=30, send=None)`.
  - It accepts `PreloadEntity`, `BindRequest` and `MoveRequest` messages through `push()`.
  - Each `tick()` processes the queued messages, advances `frame`, applies the
    newest movement input per player and runs the AOI update.
  - Through the `send(player_id, message)` callback it delivers either a
    `StateFrame` of `EntitySnapshot`s, whose states are `EntityState.IN_VIEW`,
    `OUT_OF_VIEW` or `UPDATE`, or a `LoginFailed` when a player binds without
    having been preloaded.
  - `run()` ticks at `tick_rate` per second until `stop()` is called.
  - `entity(player_id)` returns a bound player's entity.
  - A non-positive `tick_rate` raises `ValueError`.
- `aoigrid.store` provides `ThreadLocalStore`, a multimap that keeps separate
  contents for each thread. It has `get`, `has`, `put` and `erase`.

## Example

```python
from aoigrid.entity import Entity, Vector3
from aoigrid.grid import create_grid_aoi_node

node = create_grid_aoi_node(30.0, 30.0)
alice = Entity(player_id=1, position=Vector3(0.0, 0.0, 0.0))
bob = Entity(player_id=2, position=Vector3(10.0, 0.0, 0.0))
node.add_entity(alice)
node.add_entity(bob)

results = node.aoi_update([])
print(results[1].full_sync, results[1].enter_entities)  # True [1, 2]
```

### Reading an `AoiResult`

Each player's `AoiResult` has three lists:

- `enter_entities`: entities that came into view;
- `update_entities`: entities still in view that moved this frame;
- `leave_entity_ids`: entities that left view.

A player's first update after it is added is a full sync. It lists everything
the player can see, including the player itself.

### Driving the manager

```python
from aoigrid.manager import BindRequest, MoveRequest, ObjectManager, PreloadEntity
from aoigrid.move import MoveInput, MoveKey

sent = []
manager = ObjectManager(send=lambda player_id, message: sent.append((player_id, message)))
manager.push(PreloadEntity(player_id=7, x=0.0, z=0.0))
manager.push(BindRequest(player_id=7))
manager.tick()
manager.push(MoveRequest(7, MoveInput(move_seq=1, key_mask=MoveKey.FORWARD)))
manager.tick()
```

## What it does not do

This package has no network layer. It does not listen for connections,
route messages between gateway and battle servers, or encode messages for the
wire. Messages go in and out as plain Python objects. The package also has no
storage: entity transforms are not saved anywhere, and `PreloadEntity` is the
only way to give a player a starting position. There is no authentication and
no command-line program.

## Installing

```
pip install .
```

To run the tests, install with `pip install .[test]` and then run `pytest`.