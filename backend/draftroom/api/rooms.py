from flask import Blueprint, current_app, jsonify
from draftroom.services.draft import RoomNotFound

rooms = Blueprint('rooms', __name__)


@rooms.route('/rooms/<string:room_id>/state', methods=['GET'])
def get_room_state(room_id):
    """Returns the same snapshot the room broadcasts to its members."""
    directory = current_app.extensions['draft_directory']
    try:
        return jsonify(directory.snapshot(room_id))
    except RoomNotFound as exc:
        return jsonify({'error': str(exc)}), 404


@rooms.route('/catalog', methods=['GET'])
def get_catalog():
    directory = current_app.extensions['draft_directory']
    return jsonify([item.to_dict() for item in directory.catalog])
