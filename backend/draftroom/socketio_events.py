from flask import current_app, request
from flask_socketio import emit, join_room, leave_room
from draftroom import socketio
from draftroom.services.draft import DraftError, RoomDirectory, RoomNotFound
from typing import Any, Dict


def broadcast_to_room(room_id: str, event: str, payload: Dict[str, Any]) -> None:
    # socketio.emit rather than flask_socketio.emit: timer callbacks have no request context
    socketio.emit(event, payload, to=room_id)


def _directory() -> RoomDirectory:
    return current_app.extensions['draft_directory']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _emit_error(message: str) -> None:
    emit('error', {'message': message})


def _text(data, key) -> str:
    # Clients may send numbers for ids; treat every field as text
    value = (data or {}).get(key)
    return str(value).strip() if value is not None else ''


def handle_connect():
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    left = _directory().disconnect(sid)
    current_app.logger.info(f"[disconnect] sid={sid} rooms={left} reason={reason}")


def handle_create_room(data):
    user_name = _text(data, 'userName')
    if not user_name:
        _emit_error('userName is required')
        return
    coordinator = _directory().create_room(_get_sid(), user_name)
    join_room(coordinator.room_id)
    emit('room-created', {'roomId': coordinator.room_id, 'gameState': coordinator.snapshot()})


def handle_join_room(data):
    room_id = _text(data, 'roomId').upper()
    user_name = _text(data, 'userName')
    if not all([room_id, user_name]):
        _emit_error('roomId and userName are required')
        return
    try:
        coordinator = _directory().get(room_id)
        # Enter the Socket.IO room first so the joiner also receives user-joined
        join_room(coordinator.room_id)
        state = coordinator.join(_get_sid(), user_name)
    except RoomNotFound:
        leave_room(room_id)
        _emit_error('Room not found')
        return
    except DraftError as exc:
        leave_room(room_id)
        current_app.logger.info(f"[join-rejected] room={room_id} sid={_get_sid()} reason={exc}")
        _emit_error(str(exc))
        return
    emit('room-joined', {'roomId': coordinator.room_id, 'gameState': state})


def handle_start_game(data):
    room_id = (data or {}).get('roomId')
    if not room_id:
        _emit_error('roomId is required')
        return
    try:
        _directory().start_game(room_id, _get_sid())
    except DraftError as exc:
        current_app.logger.info(f"[start-rejected] room={room_id} sid={_get_sid()} reason={exc}")
        _emit_error(str(exc))


def handle_select_player(data):
    data = data or {}
    room_id = data.get('roomId')
    try:
        selected = _directory().select_item(room_id, _get_sid(), data.get('playerId'))
    except RoomNotFound:
        _emit_error('Room not found')
        return
    if not selected:
        current_app.logger.debug(f"[select-ignored] room={room_id} sid={_get_sid()} item={data.get('playerId')}")


def handle_leave_room(data):
    room_id = _text(data, 'roomId').upper()
    # Leave the Socket.IO room first; the sender does not get user-left
    leave_room(room_id)
    try:
        _directory().leave_room(room_id, _get_sid())
    except RoomNotFound:
        _emit_error('Room not found')
        return
    emit('room-left', {'roomId': room_id})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the default namespace."""
    socketio.on_event('connect', handle_connect)
    socketio.on_event('disconnect', handle_disconnect)
    socketio.on_event('create-room', handle_create_room)
    socketio.on_event('join-room', handle_join_room)
    socketio.on_event('start-game', handle_start_game)
    socketio.on_event('select-player', handle_select_player)
    socketio.on_event('leave-room', handle_leave_room)
