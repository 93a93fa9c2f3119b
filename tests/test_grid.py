from aoigrid.entity import Entity, Vector3
from aoigrid.grid import CellKey, GridAoiNode, create_grid_aoi_node


def make(player_id, x=0.0, z=0.0):
    return Entity(player_id=player_id, position=Vector3(x, 0.0, z))


def test_world_to_cell_floors_coordinates():
    node = GridAoiNode(30.0, 30.0)
    assert node.world_to_cell(Vector3(45.0, 0.0, -1.0)) == CellKey(1, -1)
    assert node.world_to_cell(Vector3(0.0, 99.0, 0.0)) == CellKey(0, 0)


def test_view_radius_is_at_least_cell_size():
    node = GridAoiNode(10.0, 1.0)
    origin = Vector3(0.0, 0.0, 0.0)
    assert node.is_in_view(origin, Vector3(10.0, 0.0, 0.0)) is True
    assert node.is_in_view(origin, Vector3(10.5, 0.0, 0.0)) is False


def test_is_in_view_ignores_height():
    node = GridAoiNode()
    assert node.is_in_view(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 1000.0, 0.0)) is True


def test_new_player_gets_full_sync_including_self():
    node = GridAoiNode()
    node.add_entity(make(1))
    result = node.aoi_update([])
    assert result[1].full_sync is True
    assert result[1].enter_entities == [1]


def test_nearby_players_see_each_other():
    node = GridAoiNode()
    node.add_entity(make(1, 0.0, 0.0))
    node.add_entity(make(2, 5.0, 5.0))
    result = node.aoi_update([])
    assert set(result[1].enter_entities) == {1, 2}
    assert set(result[2].enter_entities) == {1, 2}
    assert result[1].leave_entity_ids == []


def test_far_players_do_not_see_each_other():
    node = GridAoiNode()
    node.add_entity(make(1, 0.0, 0.0))
    node.add_entity(make(2, 500.0, 500.0))
    result = node.aoi_update([])
    assert 2 not in result[1].enter_entities
    assert 1 not in result[2].enter_entities


def test_moving_into_and_out_of_view():
    node = GridAoiNode()
    p1 = make(1, 0.0, 0.0)
    p2 = make(2, 500.0, 0.0)
    node.add_entity(p1)
    node.add_entity(p2)
    node.aoi_update([])

    p2.position.x = 10.0
    entered = node.aoi_update([p2])
    assert entered[1].enter_entities == [2]
    assert 1 in entered[2].enter_entities
    assert entered[2].full_sync is False

    p2.position.x = 15.0
    moved = node.aoi_update([p2])
    assert moved[1].update_entities == [2]
    assert moved[1].enter_entities == []

    p2.position.x = 500.0
    left = node.aoi_update([p2])
    assert left[2].leave_entity_ids == [1]
    assert left[1].leave_entity_ids == [2]


def test_nothing_pending_returns_empty_result():
    node = GridAoiNode()
    node.add_entity(make(1))
    node.aoi_update([])
    assert node.aoi_update([]) == {}


def test_unknown_moved_player_is_registered():
    node = GridAoiNode()
    result = node.aoi_update([None, make(3, 1.0, 1.0)])
    assert 3 in node
    assert result[3].full_sync is True
    assert result[3].enter_entities == [3]


def test_remove_none_or_unknown_is_ignored():
    node = GridAoiNode()
    node.add_entity(make(1))
    node.remove_entity(None)
    node.remove_entity(make(9))
    assert len(node) == 1


def test_readding_triggers_full_sync_again():
    node = GridAoiNode()
    p1 = make(1)
    node.add_entity(p1)
    node.aoi_update([])
    node.add_entity(p1)
    assert len(node) == 1
    result = node.aoi_update([])
    assert result[1].full_sync is True


def test_factory_applies_parameters():
    node = create_grid_aoi_node(50.0, 80.0)
    assert isinstance(node, GridAoiNode)
    assert node.cell_size == 50.0
    assert node.view_radius == 80.0