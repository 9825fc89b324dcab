import os
import sys
from types import SimpleNamespace

import pytest

# Ensure the backend root (containing the `receiver` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from receiver import create_app, db, socketio
from receiver.display import Display
from receiver.events import EventType, GameEvent, PlayerInfo, PlayerState, StatusCode
from receiver.game import GameController


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    APPLICATION_NAME = 'Drawcast'
    STATUS_TEXT = 'Game is starting.'
    MAX_INACTIVITY_SEC = 6
    QUIT_GRACE_SEC = 0
    GRID_SIZE = 10
    EMPTY_COLOR = 'black'
    SELECTED_COLOR = 'blue'
    LEGACY_GRID_MESSAGES = True
    AUTO_START = True
    RESTART_ON_STOP = True


class FakeSessionManager:
    """Records every call the game controller makes on its session manager."""

    def __init__(self):
        self.listeners = {}
        self.players = []
        self.calls = []
        self.gameplay_states = []
        self.lobby_states = []
        self.sent_to_player = []
        self.sent_to_all = []
        self.stop_count = 0
        self.background_tasks = []

    def add_player(self, player_id, state=PlayerState.AVAILABLE, connected=True):
        player = SimpleNamespace(player_id=player_id, state=state, connected=connected)
        self.players.append(player)
        return player

    def add_event_listener(self, event_type, callback):
        self.calls.append(('add', event_type))
        self.listeners.setdefault(event_type, []).append(callback)

    def remove_event_listener(self, event_type, callback):
        self.calls.append(('remove', event_type))
        if callback in self.listeners.get(event_type, []):
            self.listeners[event_type].remove(callback)

    def listener_count(self):
        return sum(len(v) for v in self.listeners.values())

    def dispatch(self, event):
        for callback in list(self.listeners.get(event.type, [])):
            callback(event)

    def get_players(self):
        return list(self.players)

    def get_connected_players(self):
        return [p for p in self.players if p.connected and p.state not in PlayerState.QUIT_VARIANTS]

    def update_player_state(self, player_id, state, extra=None):
        for p in self.players:
            if p.player_id == player_id:
                p.state = state

    def update_gameplay_state(self, state, extra=None):
        self.gameplay_states.append(state)

    def update_lobby_state(self, state, extra=None):
        self.lobby_states.append(state)

    def send_game_message_to_player(self, player_id, message):
        self.sent_to_player.append((player_id, message))

    def send_game_message_to_all_connected_players(self, message):
        self.sent_to_all.append(message)

    def start_background_task(self, target, *args):
        self.background_tasks.append((target, args))

    def stop(self):
        self.stop_count += 1

    def stop_if(self, predicate):
        if not predicate():
            return False
        self.stop()
        return True


def make_event(event_type, player_id='p1', data=None, status=StatusCode.SUCCESS, reason=None):
    return GameEvent(
        type=event_type,
        status_code=status,
        player_info=PlayerInfo(player_id),
        extra_message_data=data,
        error_description=reason,
    )


@pytest.fixture()
def session():
    return FakeSessionManager()


@pytest.fixture()
def display():
    return Display(grid_size=10, empty_color='black')


@pytest.fixture()
def game(session, display):
    controller = GameController(session, display, selected_color='blue')
    controller.run(lambda: None)
    return controller


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def connect_player(flask_app):
    """Connect a controller socket and return (client, player_id)."""
    clients = []

    def _connect():
        c = socketio.test_client(flask_app, namespace='/ws')
        received = c.get_received('/ws')
        player_id = next(p['args'][0]['player_id'] for p in received if p['name'] == 'connected')
        clients.append(c)
        return c, player_id

    yield _connect
    for c in clients:
        try:
            if c.is_connected('/ws'):
                c.disconnect(namespace='/ws')
        except Exception:
            pass
