"""Drawing game controller for the receiver.

Subscribes to the session manager's player and message notifications while
running, keeps a local index of player names plus the last word list a drawing
player broadcast, and mirrors lobby and gameplay progress on the display.
"""

import logging
import time
from typing import Callable, Dict, Optional

from receiver.display import CELL, Display
from receiver.events import EventType, GameEvent, GameplayState, LobbyState, PlayerState, StatusCode
from receiver.messages import (
    ArtistAnnouncement,
    ClearGrid,
    GridCell,
    GuessMessage,
    WordList,
    WordsRequest,
    parse_game_message,
)


class RunState:
    STOPPED = 'stopped'
    STARTING = 'starting'
    RUNNING = 'running'


class GameController:
    def __init__(self, game_manager, display: Display, logger: Optional[logging.Logger] = None,
                 selected_color: str = 'blue', empty_color: Optional[str] = None,
                 legacy_grid: bool = True, quit_grace_sec: float = 0):
        self.game_manager = game_manager
        self.display = display
        self.logger = logger or logging.getLogger(__name__)
        self.selected_color = selected_color
        self.empty_color = empty_color or display.empty_color
        self.legacy_grid = legacy_grid
        self.quit_grace_sec = quit_grace_sec

        self.run_state = RunState.STOPPED
        self._loaded_callback: Optional[Callable[[], None]] = None
        self._teardown_deadline: Optional[float] = None

        self.players: Dict[str, str] = {}
        self.words_message = None

        # Bound once so the same callables can be unsubscribed.
        self._listeners = (
            (EventType.PLAYER_READY, self.on_player_ready),
            (EventType.PLAYER_PLAYING, self.on_player_playing),
            (EventType.GAME_MESSAGE_RECEIVED, self.on_game_message),
            (EventType.PLAYER_QUIT, self.on_player_quit),
        )

    @property
    def is_running(self) -> bool:
        return self.run_state == RunState.RUNNING

    def run(self, loaded_callback: Callable[[], None]) -> None:
        """Run the game, calling ``loaded_callback`` once it is about to run.

        Calling ``run`` on a running game only invokes the callback.
        """
        if self.is_running:
            loaded_callback()
            return

        self._loaded_callback = loaded_callback
        self.run_state = RunState.STARTING
        self._start()

    def stop(self) -> None:
        if self._loaded_callback or not self.is_running:
            # Stopped before start completed: nothing was subscribed.
            self._loaded_callback = None
            self.run_state = RunState.STOPPED
            return

        self.run_state = RunState.STOPPED
        self._teardown_deadline = None
        for event_type, callback in self._listeners:
            self.game_manager.remove_event_listener(event_type, callback)
        self.logger.info("[game-stop] listeners removed")

    def _start(self) -> None:
        # No callback means stop() already cancelled this run.
        if not self._loaded_callback:
            return

        self.run_state = RunState.RUNNING
        self.game_manager.update_gameplay_state(GameplayState.RUNNING, None)

        self._loaded_callback()
        if not self._loaded_callback:
            # stop() was called from the callback and cancelled this run.
            return
        self._loaded_callback = None

        for event_type, listener in self._listeners:
            self.game_manager.add_event_listener(event_type, listener)

        # Lobby screen is showing and open for new players.
        self.game_manager.update_gameplay_state(GameplayState.SHOWING_INFO_SCREEN, None)
        self.game_manager.update_lobby_state(LobbyState.OPEN, None)
        self._update_title('Lobby')

        self.players = {}
        self.words_message = None

    def on_player_ready(self, event: GameEvent) -> None:
        if not self.is_success_event(event):
            return
        player_id = event.player_id
        data = event.extra_message_data or {}
        player_name = (data.get('name') if isinstance(data, dict) else None) or ''
        self.logger.info(f"[player-ready] player={player_id} name={player_name}")
        self._teardown_deadline = None
        self._update_info(f"{player_name} has joined.")
        self.players[player_id] = player_name

    def on_player_playing(self, event: GameEvent) -> None:
        if not self.is_success_event(event):
            return
        player_id = event.player_id
        # Promote every ready player, read fresh from the registry.
        for player in self.game_manager.get_players():
            if player.state == PlayerState.READY:
                self.game_manager.update_player_state(player.player_id, PlayerState.PLAYING, None)
        self.game_manager.update_gameplay_state(GameplayState.RUNNING, None)
        self.game_manager.update_lobby_state(LobbyState.CLOSED, None)
        self._update_title('Playing')
        self._update_info(f"{self.players.get(player_id, '')} is playing.")

    def on_player_quit(self, event: GameEvent) -> None:
        if not self.is_success_event(event):
            return
        connected = self.game_manager.get_connected_players()
        self.logger.info(f"[player-quit] player={event.player_id} connected={len(connected)}")
        if len(connected) > 0:
            return
        if self.quit_grace_sec > 0:
            deadline = time.time() + self.quit_grace_sec
            self._teardown_deadline = deadline
            self.logger.info(f"[teardown-scheduled] grace={self.quit_grace_sec}s")
            self.game_manager.start_background_task(self._teardown_if_idle, deadline)
            return
        self.logger.info("[teardown] no more players connected, stopping session")
        self.game_manager.stop()

    def _teardown_if_idle(self, deadline: float) -> None:
        sleep_for = max(0.0, deadline - time.time())
        if sleep_for:
            time.sleep(sleep_for)
        if self.game_manager.stop_if(lambda: self._is_idle_since(deadline)):
            self.logger.info("[teardown] grace period over, session stopped")

    def _is_idle_since(self, deadline: float) -> bool:
        if not self.is_running or self._teardown_deadline != deadline:
            self.logger.info("[teardown-abort] superseded")
            return False
        if self.game_manager.get_connected_players():
            self.logger.info("[teardown-abort] players reconnected")
            return False
        return True

    def on_game_message(self, event: GameEvent) -> None:
        if not self.is_success_event(event):
            return
        player_id = event.player_id
        message = parse_game_message(event.extra_message_data, legacy_grid=self.legacy_grid)
        self.logger.debug(f"[game-message] player={player_id} kind={message.kind}")

        if isinstance(message, ClearGrid):
            self._clear_grid()
            return
        if isinstance(message, ArtistAnnouncement):
            self._update_info(f"{self.players.get(message.artist_id, '')} is drawing.")
            return
        if isinstance(message, WordsRequest):
            if self.words_message:
                self.game_manager.send_game_message_to_player(player_id, self.words_message)
            return
        if isinstance(message, WordList):
            self.game_manager.send_game_message_to_all_connected_players(message.payload)
            self.words_message = message.payload
            return
        if isinstance(message, GuessMessage):
            self.game_manager.send_game_message_to_all_connected_players(message.payload)
            return
        if isinstance(message, GridCell):
            if not self.display.set_background(message.cell, self.selected_color):
                self.logger.debug(f"[game-message] no display cell {message.cell!r}")
            return
        self.logger.warning(f"[game-message-dropped] player={player_id} reason={message.reason}")

    def is_success_event(self, event: GameEvent) -> bool:
        if event.status_code != StatusCode.SUCCESS:
            self.logger.warning(
                f"[event-error] type={event.type} status={event.status_code} reason={event.error_description}"
            )
            return False
        return True

    def _clear_grid(self) -> None:
        self.display.set_background_by_type(CELL, self.empty_color)

    def _update_info(self, message: str) -> None:
        self.display.set_text('info', message)

    def _update_title(self, message: str) -> None:
        self.display.set_text('title', message)
