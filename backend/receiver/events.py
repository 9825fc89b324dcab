"""Session event kinds, status codes and state names.

These mirror what a controller sees from the session manager: every
lifecycle request or custom message becomes a ``GameEvent`` that is handed
to the listeners registered for its ``EventType``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class EventType:
    PLAYER_AVAILABLE = 'player_available'
    PLAYER_READY = 'player_ready'
    PLAYER_PLAYING = 'player_playing'
    PLAYER_QUIT = 'player_quit'
    GAME_MESSAGE_RECEIVED = 'game_message_received'


class StatusCode:
    SUCCESS = 'success'
    INVALID_REQUEST = 'invalid_request'
    NOT_ALLOWED = 'not_allowed'
    ERROR = 'error'


class PlayerState:
    AVAILABLE = 'available'
    READY = 'ready'
    PLAYING = 'playing'
    IDLE = 'idle'
    QUIT = 'quit'
    DROPPED = 'dropped'

    QUIT_VARIANTS = frozenset({QUIT, DROPPED})


class GameplayState:
    LOADING = 'loading'
    RUNNING = 'running'
    PAUSED = 'paused'
    SHOWING_INFO_SCREEN = 'showing_info_screen'


class LobbyState:
    OPEN = 'open'
    CLOSED = 'closed'


@dataclass
class PlayerInfo:
    player_id: str
    player_state: Optional[str] = None
    player_data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GameEvent:
    type: str
    status_code: str = StatusCode.SUCCESS
    player_info: Optional[PlayerInfo] = None
    extra_message_data: Any = None
    error_description: Optional[str] = None

    @property
    def player_id(self) -> Optional[str]:
        return self.player_info.player_id if self.player_info else None
