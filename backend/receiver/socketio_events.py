from flask_socketio import join_room, leave_room, emit
from flask import current_app, request

from receiver.services.session import SESSION_ROOM

DISPLAY_ROOM = 'display'
NAMESPACE = '/ws'


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _receiver():
    return current_app.extensions['receiver']


def handle_connect():
    join_room(SESSION_ROOM)
    emit('connected', {'player_id': _get_sid()})


def handle_disconnect(*args):
    # A controller going away without a quit request still counts as a quit
    _receiver().session.handle_player_quit(_get_sid(), dropped=True)


def handle_join_display(data=None):
    join_room(DISPLAY_ROOM)
    emit('display_snapshot', _receiver().display.snapshot())


def handle_leave_display(data=None):
    leave_room(DISPLAY_ROOM)
    emit('left', {'room': DISPLAY_ROOM})


def handle_player_available(data=None):
    event = _receiver().session.handle_player_available(_get_sid(), data)
    emit('player_state', {'player_id': event.player_id, 'state': event.player_info.player_state})


def handle_player_ready(data=None):
    _receiver().session.handle_player_ready(_get_sid(), data)


def handle_player_playing(data=None):
    _receiver().session.handle_player_playing(_get_sid(), data)


def handle_game_message(data=None):
    _receiver().session.handle_game_message(_get_sid(), data)


def handle_player_quit(data=None):
    _receiver().session.handle_player_quit(_get_sid())


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(socketio, namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join_display', handle_join_display, namespace=namespace)
    socketio.on_event('leave_display', handle_leave_display, namespace=namespace)
    socketio.on_event('player_available', handle_player_available, namespace=namespace)
    socketio.on_event('player_ready', handle_player_ready, namespace=namespace)
    socketio.on_event('player_playing', handle_player_playing, namespace=namespace)
    socketio.on_event('game_message', handle_game_message, namespace=namespace)
    socketio.on_event('player_quit', handle_player_quit, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
