from receiver import create_app, socketio

app = create_app()


def serve_options(flask_app):
    cfg = flask_app.config
    return {
        'host': cfg.get('HOST', '0.0.0.0'),
        'port': int(cfg.get('PORT', 5000)),
        'debug': bool(cfg.get('DEBUG', False)),
    }


if __name__ == '__main__':
    options = serve_options(app)
    app.logger.info(
        f"[serve] application={app.config.get('APPLICATION_NAME')} host={options['host']} port={options['port']}"
    )
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, **options)
