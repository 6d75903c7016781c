import os
import random
import sys
import pytest

# Ensure the backend root (containing the `draftroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from draftroom import create_app, socketio
from draftroom.models import Item
from draftroom.services.draft import ManualScheduler, RoomCoordinator


CATALOG = [
    Item(id=1, name='Virat Kohli', category='Batsman', rating=95, country='India'),
    Item(id=2, name='Jasprit Bumrah', category='Bowler', rating=94, country='India'),
    Item(id=3, name='Ben Stokes', category='All-rounder', rating=91, country='England'),
    Item(id=4, name='Jos Buttler', category='Wicket-keeper', rating=89, country='England'),
]


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CATALOG = CATALOG
    TURN_DURATION_MS = 10000
    BROADCAST_INTERVAL_MS = 1000
    ROOM_CODE_LENGTH = 6
    MIN_PARTICIPANTS = 1
    CORS_ORIGINS = []
    LOG_LEVEL = 'DEBUG'


class RecordingBroadcast:
    """Collects room broadcasts as (room_id, event, payload) tuples."""

    def __init__(self):
        self.events = []

    def __call__(self, room_id, event, payload):
        self.events.append((room_id, event, payload))

    def names(self):
        return [event for _, event, _ in self.events]

    def clear(self):
        self.events = []


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application
    application.extensions['draft_directory'].shutdown()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def directory(flask_app):
    return flask_app.extensions['draft_directory']


@pytest.fixture()
def scheduler():
    return ManualScheduler(start=1000.0)


@pytest.fixture()
def broadcast():
    return RecordingBroadcast()


@pytest.fixture()
def make_room(scheduler, broadcast):
    """Build a standalone coordinator hosted by 'alice' on the test catalog."""
    def _make(seed=7, catalog=CATALOG, **kwargs):
        return RoomCoordinator(
            'ROOM01',
            'alice',
            'Alice',
            catalog,
            scheduler=scheduler,
            broadcast=broadcast,
            rng=random.Random(seed),
            **kwargs
        )
    return _make


@pytest.fixture()
def sio_client(flask_app):
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
