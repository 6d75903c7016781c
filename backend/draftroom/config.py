import os


def _origins(value):
    return [origin.strip() for origin in value.split(',') if origin.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Turn budget and periodic snapshot tick (milliseconds)
    TURN_DURATION_MS = int(os.environ.get('TURN_DURATION_MS', '10000'))
    BROADCAST_INTERVAL_MS = int(os.environ.get('BROADCAST_INTERVAL_MS', '1000'))
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '6'))
    MIN_PARTICIPANTS = int(os.environ.get('MIN_PARTICIPANTS', '1'))
    # JSON list of items; unset means the bundled cricket player list
    CATALOG_PATH = os.environ.get('CATALOG_PATH')
    CORS_ORIGINS = _origins(os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
    ))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
