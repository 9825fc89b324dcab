import json
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

from flask import current_app

from receiver import db
from receiver.events import (
    EventType,
    GameEvent,
    GameplayState,
    LobbyState,
    PlayerInfo,
    PlayerState,
    StatusCode,
)
from receiver.models import Player

SESSION_ROOM = 'session'

Listener = Callable[[GameEvent], None]


class SessionManager:
    """Player registry and message transport for one receiver session.

    Controllers talk to the receiver over Socket.IO; each lifecycle request or
    custom message is recorded in the registry and turned into a ``GameEvent``
    for the listeners of its kind. Listeners run one at a time under
    ``self._lock`` so game state is only ever touched from a single context.
    """

    def __init__(self, socketio, namespace: str = '/ws', application_name: str = 'Game',
                 status_text: str = ''):
        self.socketio = socketio
        self.namespace = namespace
        self.application_name = application_name
        self.application_state = status_text
        self.gameplay_state = GameplayState.LOADING
        self.lobby_state = LobbyState.CLOSED
        self.app = None
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)
        self._stop_listeners: List[Callable[[], None]] = []
        self._lock = threading.RLock()

    def init_app(self, app) -> None:
        self.app = app

    # ---- listeners ----

    def add_event_listener(self, event_type: str, callback: Listener) -> None:
        with self._lock:
            self._listeners[event_type].append(callback)

    def remove_event_listener(self, event_type: str, callback: Listener) -> None:
        with self._lock:
            try:
                self._listeners[event_type].remove(callback)
            except ValueError:
                pass

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type:
            return len(self._listeners.get(event_type, []))
        return sum(len(v) for v in self._listeners.values())

    def add_stop_listener(self, callback: Callable[[], None]) -> None:
        self._stop_listeners.append(callback)

    def dispatch(self, event: GameEvent) -> None:
        with self._lock:
            for callback in list(self._listeners.get(event.type, [])):
                callback(event)

    # ---- queries ----

    def get_players(self) -> List[Player]:
        return Player.query.order_by(Player.id).all()

    def get_connected_players(self) -> List[Player]:
        return [p for p in self.get_players() if p.is_connected]

    def get_player(self, player_id: str) -> Optional[Player]:
        if not player_id:
            return None
        return Player.query.filter_by(player_id=player_id).first()

    # ---- state broadcast ----

    def _emit(self, event: str, payload: Any, to: Optional[str] = SESSION_ROOM) -> None:
        self.socketio.emit(event, payload, to=to, namespace=self.namespace)

    def update_player_state(self, player_id: str, state: str, extra: Any = None) -> None:
        player = self.get_player(player_id)
        if not player:
            self._log('warning', f"[player-state] unknown player={player_id}")
            return
        player.state = state
        self._commit(player)
        self._emit('player_state', {'player_id': player_id, 'state': state, 'extra': extra})

    def update_gameplay_state(self, state: str, extra: Any = None) -> None:
        self.gameplay_state = state
        self._emit('gameplay_state', {'state': state, 'extra': extra})

    def update_lobby_state(self, state: str, extra: Any = None) -> None:
        self.lobby_state = state
        self._emit('lobby_state', {'state': state, 'extra': extra})

    def set_application_state(self, text: str) -> None:
        self.application_state = text
        self._emit('application_state', {'state': text})

    # ---- transport ----

    def send_game_message_to_player(self, player_id: str, message: Any) -> None:
        self._emit('game_message', message, to=player_id)

    def send_game_message_to_all_connected_players(self, message: Any) -> None:
        for player in self.get_connected_players():
            self._emit('game_message', message, to=player.player_id)

    def start_background_task(self, target: Callable, *args) -> None:
        app = self.app

        def _runner(*a):
            if app is None:
                target(*a)
                return
            with app.app_context():
                target(*a)

        self.socketio.start_background_task(_runner, *args)

    def stop(self) -> None:
        """End the whole session: notify clients, clear the registry, run stop hooks."""
        with self._lock:
            self._log('info', f"[session-stop] application={self.application_name}")
            self._emit('session_ended', {'application_name': self.application_name})
            try:
                Player.query.delete()
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise
            self.gameplay_state = GameplayState.LOADING
            self.lobby_state = LobbyState.CLOSED
            for callback in list(self._stop_listeners):
                callback()

    def stop_if(self, predicate: Callable[[], bool]) -> bool:
        """Stop the session only if ``predicate`` holds, checked under the same lock."""
        with self._lock:
            if not predicate():
                return False
            self.stop()
            return True

    # ---- controller requests ----

    def handle_player_available(self, player_id: str, data: Any = None) -> GameEvent:
        with self._lock:
            player = self._register(player_id)
            player.state = PlayerState.AVAILABLE
            player.connected = True
            self._commit(player)
            event = self._event(EventType.PLAYER_AVAILABLE, player, data)
            self.dispatch(event)
            return event

    def handle_player_ready(self, player_id: str, data: Any = None) -> GameEvent:
        with self._lock:
            if self.lobby_state != LobbyState.OPEN:
                return self._reject(EventType.PLAYER_READY, player_id, data,
                                    StatusCode.NOT_ALLOWED, 'Lobby is closed.')
            if data is not None and not isinstance(data, dict):
                return self._reject(EventType.PLAYER_READY, player_id, data,
                                    StatusCode.INVALID_REQUEST, 'Ready data must be an object.')
            player = self._register(player_id)
            player.state = PlayerState.READY
            player.connected = True
            player.name = (data or {}).get('name')
            player.player_data = json.dumps(data or {})
            self._commit(player)
            event = self._event(EventType.PLAYER_READY, player, data or {})
            self.dispatch(event)
            return event

    def handle_player_playing(self, player_id: str, data: Any = None) -> GameEvent:
        with self._lock:
            player = self.get_player(player_id)
            if not player or not player.is_connected:
                return self._reject(EventType.PLAYER_PLAYING, player_id, data,
                                    StatusCode.INVALID_REQUEST, 'Unknown player.')
            player.state = PlayerState.PLAYING
            self._commit(player)
            event = self._event(EventType.PLAYER_PLAYING, player, data)
            self.dispatch(event)
            return event

    def handle_game_message(self, player_id: str, data: Any = None) -> GameEvent:
        with self._lock:
            player = self.get_player(player_id)
            if not player or not player.is_connected:
                return self._reject(EventType.GAME_MESSAGE_RECEIVED, player_id, data,
                                    StatusCode.INVALID_REQUEST, 'Unknown player.')
            if not isinstance(data, dict):
                return self._reject(EventType.GAME_MESSAGE_RECEIVED, player_id, data,
                                    StatusCode.INVALID_REQUEST, 'Game message must be an object.')
            event = self._event(EventType.GAME_MESSAGE_RECEIVED, player, data)
            self.dispatch(event)
            return event

    def handle_player_quit(self, player_id: str, dropped: bool = False) -> Optional[GameEvent]:
        with self._lock:
            player = self.get_player(player_id)
            if not player or player.state in PlayerState.QUIT_VARIANTS:
                return None
            player.state = PlayerState.DROPPED if dropped else PlayerState.QUIT
            player.connected = False
            self._commit(player)
            self._emit('player_state', {'player_id': player_id, 'state': player.state, 'extra': None})
            event = self._event(EventType.PLAYER_QUIT, player, None)
            self.dispatch(event)
            return event

    # ---- helpers ----

    def _register(self, player_id: str) -> Player:
        player = self.get_player(player_id)
        if not player:
            player = Player(player_id=player_id, state=PlayerState.AVAILABLE, connected=True)
            db.session.add(player)
        return player

    def _commit(self, player: Player) -> None:
        try:
            db.session.add(player)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def _event(self, event_type: str, player: Player, data: Any) -> GameEvent:
        return GameEvent(
            type=event_type,
            status_code=StatusCode.SUCCESS,
            player_info=PlayerInfo(player.player_id, player.state, player.data),
            extra_message_data=data,
        )

    def _reject(self, event_type: str, player_id: str, data: Any, status: str, reason: str) -> GameEvent:
        player = self.get_player(player_id)
        event = GameEvent(
            type=event_type,
            status_code=status,
            player_info=PlayerInfo(player_id, player.state if player else None),
            extra_message_data=data,
            error_description=reason,
        )
        self._log('info', f"[request-rejected] type={event_type} player={player_id} status={status} reason={reason}")
        self._emit('error', {'type': event_type, 'status': status, 'message': reason}, to=player_id)
        self.dispatch(event)
        return event

    def _log(self, level: str, message: str) -> None:
        app = self.app
        if app is None:
            try:
                app = current_app._get_current_object()
            except RuntimeError:
                return
        getattr(app.logger, level)(message)

    def snapshot(self) -> Dict[str, Any]:
        return {
            'application_name': self.application_name,
            'application_state': self.application_state,
            'gameplay_state': self.gameplay_state,
            'lobby_state': self.lobby_state,
            'players': [p.to_dict() for p in self.get_players()],
        }
