import random

import pytest

from draftroom.services.draft import ManualScheduler, RoomDirectory, RoomNotFound, generate_room_code
from conftest import CATALOG, RecordingBroadcast


@pytest.fixture()
def rooms():
    return RoomDirectory(CATALOG, scheduler=ManualScheduler(), broadcast=RecordingBroadcast(), rng=random.Random(11))


def test_room_codes_are_short_uppercase_tokens(rooms):
    codes = {rooms.create_room(f"host-{n}", f"Host {n}").room_id for n in range(20)}
    assert len(codes) == 20
    for code in codes:
        assert len(code) == 6
        assert code == code.upper()
        assert code.isalnum()
    assert len(rooms) == 20


def test_room_code_collision_is_rerolled():
    taken = {generate_room_code(set(), 6, random.Random(5))}
    again = generate_room_code(taken, 6, random.Random(5))
    assert again not in taken
    assert len(again) == 6


def test_lookup_is_case_insensitive_and_unknown_raises(rooms):
    room = rooms.create_room('h', 'Host')
    assert rooms.get(room.room_id.lower()) is room
    assert room.room_id in rooms
    with pytest.raises(RoomNotFound):
        rooms.get('NOPE00')
    with pytest.raises(RoomNotFound):
        rooms.join_room('NOPE00', 'x', 'X')
    with pytest.raises(RoomNotFound):
        rooms.start_game(None, 'x')


def test_operations_route_to_the_right_room(rooms):
    first = rooms.create_room('a', 'Alice')
    second = rooms.create_room('b', 'Bob')
    rooms.start_game(first.room_id, 'a')

    assert rooms.select_item(first.room_id, 'a', 1) is True

    assert len(rooms.snapshot(first.room_id)['availablePlayers']) == 3
    assert len(rooms.snapshot(second.room_id)['availablePlayers']) == 4
    assert rooms.snapshot(second.room_id)['status'] == 'lobby'


def test_empty_room_is_destroyed_with_its_timers(rooms):
    room = rooms.create_room('a', 'Alice')
    rooms.join_room(room.room_id, 'b', 'Bob')
    rooms.start_game(room.room_id, 'a')

    assert rooms.leave_room(room.room_id, 'a') is False
    assert room.room_id in rooms
    assert rooms.leave_room(room.room_id, 'b') is True

    assert room.room_id not in rooms
    assert room.closed
    assert rooms.scheduler.pending() == 0
    with pytest.raises(RoomNotFound):
        rooms.snapshot(room.room_id)


def test_disconnect_leaves_every_room(rooms):
    first = rooms.create_room('a', 'Alice')
    second = rooms.create_room('b', 'Bob')
    rooms.join_room(second.room_id, 'a', 'Alice')

    left = rooms.disconnect('a')

    assert sorted(left) == sorted([first.room_id, second.room_id])
    assert first.room_id not in rooms
    assert rooms.snapshot(second.room_id)['hostId'] == 'b'
    assert rooms.disconnect('a') == []


def test_shutdown_cancels_everything(rooms):
    for n in range(3):
        room = rooms.create_room(f"h{n}", 'Host')
        rooms.start_game(room.room_id, f"h{n}")
    assert rooms.scheduler.pending() == 6

    rooms.shutdown()

    assert len(rooms) == 0
    assert rooms.scheduler.pending() == 0
