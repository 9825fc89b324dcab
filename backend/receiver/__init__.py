from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


class Receiver:
    """Collaborators of one running receiver, kept on ``app.extensions``."""

    def __init__(self, session, display, game):
        self.session = session
        self.display = display
        self.game = game


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Controllers that stay silent longer than this are dropped
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        ping_timeout=int(flask_app.config.get('MAX_INACTIVITY_SEC', 6)),
    )

    from receiver.main import main
    flask_app.register_blueprint(main)

    from receiver.api.receiver import receiver_api
    flask_app.register_blueprint(receiver_api, url_prefix='/api/receiver')

    from receiver.socketio_events import register_socketio_handlers, NAMESPACE, DISPLAY_ROOM
    register_socketio_handlers(socketio, namespace=NAMESPACE)

    from receiver import models  # noqa: F401
    with flask_app.app_context():
        db.create_all()

    from receiver.display import Display
    from receiver.game import GameController
    from receiver.services.session import SessionManager

    cfg = flask_app.config

    def push_display_change(change):
        socketio.emit('display_update', change, to=DISPLAY_ROOM, namespace=NAMESPACE)

    display = Display(
        grid_size=int(cfg.get('GRID_SIZE', 10)),
        empty_color=cfg.get('EMPTY_COLOR', 'black'),
        on_change=push_display_change,
    )
    session = SessionManager(
        socketio,
        namespace=NAMESPACE,
        application_name=cfg.get('APPLICATION_NAME', 'Game'),
        status_text=cfg.get('STATUS_TEXT', ''),
    )
    session.init_app(flask_app)
    game = GameController(
        session,
        display,
        logger=flask_app.logger,
        selected_color=cfg.get('SELECTED_COLOR', 'blue'),
        empty_color=cfg.get('EMPTY_COLOR', 'black'),
        legacy_grid=bool(cfg.get('LEGACY_GRID_MESSAGES', True)),
        quit_grace_sec=float(cfg.get('QUIT_GRACE_SEC', 0)),
    )
    flask_app.extensions['receiver'] = Receiver(session, display, game)

    def on_game_running():
        flask_app.logger.info('Game running.')
        session.set_application_state('Game running.')

    def start_game():
        with flask_app.app_context():
            game.run(on_game_running)

    def on_session_stopped():
        game.stop()
        if cfg.get('RESTART_ON_STOP', True):
            game.run(on_game_running)

    session.add_stop_listener(on_session_stopped)

    if cfg.get('AUTO_START', True):
        start_game()

    @click.command('session-reset')
    def session_reset_command():
        """Drops and recreates the player registry, then restarts the game."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            game.stop()
            game.run(on_game_running)
            print('Player registry has been reset!')

    flask_app.cli.add_command(session_reset_command)

    return flask_app
