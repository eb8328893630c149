from device_registry import DeviceRegistry
from errors import ErrorKind, Failure
from identity import IdentityAllocator


def register_drill(registry, name="Drill"):
    return registry.register(name, "Cordless", "SN1", "Acme")


def test_allocator_starts_at_one_and_increases():
    allocator = IdentityAllocator()
    assert allocator.peek() == 1
    assert [allocator.next() for _ in range(3)] == [1, 2, 3]
    assert allocator.peek() == 4


def test_register_assigns_first_id(registry):
    device = register_drill(registry)
    assert device.id == 1
    assert device.name == "Drill"
    assert device.serial_number == "SN1"
    assert device.image is None
    assert device.taken_by is None
    assert registry.last_registered_id == 1


def test_register_duplicate_name_conflicts(registry):
    register_drill(registry)
    result = register_drill(registry)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.CONFLICT
    assert registry.list_names() == ["Drill"]


def test_failed_registration_does_not_consume_an_id(registry):
    register_drill(registry)
    register_drill(registry)
    assert register_drill(registry, "Saw").id == 2


def test_ids_are_not_reused_after_delete(registry):
    first = register_drill(registry)
    second = register_drill(registry, "Saw")
    assert registry.delete(second.id) is None
    third = register_drill(registry, "Hammer")
    assert first.id < second.id < third.id


def test_list_names_keeps_insertion_order(registry):
    for name in ("Drill", "Saw", "Hammer"):
        register_drill(registry, name)
    registry.delete(2)
    assert registry.list_names() == ["Drill", "Hammer"]


def test_get_unknown_device(registry):
    result = registry.get(999)
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.NOT_FOUND


def test_update_overwrites_fields(registry):
    device = register_drill(registry)
    updated = registry.update(device.id, "Impact drill", "Corded", "SN2", "Bosch")
    assert updated is device
    assert device.to_dict()["serialNumber"] == "SN2"
    assert device.manufacturer == "Bosch"


def test_update_allows_duplicate_names_by_default(registry):
    register_drill(registry)
    saw = register_drill(registry, "Saw")
    updated = registry.update(saw.id, "Drill", "", "", "")
    assert not isinstance(updated, Failure)
    assert registry.list_names() == ["Drill", "Drill"]


def test_update_can_enforce_unique_names():
    registry = DeviceRegistry(unique_names_on_update=True)
    register_drill(registry)
    saw = register_drill(registry, "Saw")
    result = registry.update(saw.id, "Drill", "", "", "")
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.CONFLICT
    assert saw.name == "Saw"
    # keeping its own name is fine
    assert registry.update(saw.id, "Saw", "Table saw", "SN9", "Makita") is saw


def test_update_and_delete_unknown_device(registry):
    assert registry.update(5, "a", "b", "c", "d").kind == ErrorKind.NOT_FOUND
    assert registry.delete(5).kind == ErrorKind.NOT_FOUND


def test_reserve_and_release(registry):
    device = register_drill(registry)
    assert registry.reserve(device.id, "alice") is device
    assert device.taken_by == "alice"
    assert registry.reserve(device.id, "bob").kind == ErrorKind.CONFLICT
    assert registry.release(device.id, holder="bob").kind == ErrorKind.CONFLICT
    assert registry.release(device.id, holder="alice") is device
    assert device.available
    assert registry.release(device.id).kind == ErrorKind.CONFLICT


def test_find_by_owner(registry):
    drill = register_drill(registry)
    saw = register_drill(registry, "Saw")
    register_drill(registry, "Hammer")
    registry.reserve(drill.id, "alice")
    registry.reserve(saw.id, "alice")
    assert registry.find_by_owner("alice") == [drill, saw]
    assert registry.find_by_owner("bob") == []


def test_to_dict_reports_image_presence_only(registry):
    device = register_drill(registry)
    assert device.to_dict()["hasImage"] is False
    registry.set_image(device.id, "aGVsbG8=")
    data = device.to_dict()
    assert "image" not in data
    assert data["hasImage"] is True


def test_discard_restores_last_registered_id(registry):
    register_drill(registry)
    saw = register_drill(registry, "Saw")
    registry.discard(saw.id, 1)
    assert registry.list_names() == ["Drill"]
    assert registry.last_registered_id == 1
    assert register_drill(registry, "Saw").id == 3
