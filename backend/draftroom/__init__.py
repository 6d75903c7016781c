from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from draftroom.config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, supports_credentials=True, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from draftroom.catalog import load_catalog
    from draftroom.services.draft import ManualScheduler, RoomDirectory, SocketIOScheduler
    from draftroom.socketio_events import broadcast_to_room, register_socketio_handlers

    # Timers run on a manual clock in tests unless explicitly enabled
    if flask_app.config.get('TESTING') and not flask_app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        scheduler = ManualScheduler()
    else:
        scheduler = SocketIOScheduler(socketio)

    catalog = flask_app.config.get('CATALOG')
    if catalog is None:
        catalog = load_catalog(flask_app.config.get('CATALOG_PATH'))

    flask_app.extensions['draft_directory'] = RoomDirectory(
        catalog,
        scheduler=scheduler,
        broadcast=broadcast_to_room,
        turn_duration_ms=flask_app.config.get('TURN_DURATION_MS', 10000),
        broadcast_interval_ms=flask_app.config.get('BROADCAST_INTERVAL_MS', 1000),
        room_code_length=flask_app.config.get('ROOM_CODE_LENGTH', 6),
        min_participants=flask_app.config.get('MIN_PARTICIPANTS', 1),
        logger=flask_app.logger,
    )

    from draftroom.main import main
    flask_app.register_blueprint(main)

    from draftroom.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api')

    register_socketio_handlers()

    @click.command('validate-catalog')
    def validate_catalog_command():
        """Loads the configured catalog and reports its size."""
        items = load_catalog(flask_app.config.get('CATALOG_PATH'))
        categories = sorted({item.category for item in items})
        click.echo(f"Catalog OK: {len(items)} items in {len(categories)} categories ({', '.join(categories)})")

    flask_app.cli.add_command(validate_catalog_command)

    return flask_app
