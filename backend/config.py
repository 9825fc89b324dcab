import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Player registry; process-lifetime by default
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    APPLICATION_NAME = os.environ.get('APPLICATION_NAME', 'Game')
    STATUS_TEXT = os.environ.get('STATUS_TEXT', 'Game is starting.')
    # In production, prefer a longer inactivity window (seconds)
    MAX_INACTIVITY_SEC = int(os.environ.get('MAX_INACTIVITY_SEC', '6'))
    # Wait before tearing down once the last player quits (seconds). 0 tears down immediately.
    QUIT_GRACE_SEC = int(os.environ.get('QUIT_GRACE_SEC', '0'))
    # Display grid
    GRID_SIZE = int(os.environ.get('GRID_SIZE', '10'))
    EMPTY_COLOR = os.environ.get('EMPTY_COLOR', 'black')
    SELECTED_COLOR = os.environ.get('SELECTED_COLOR', 'blue')
    # Accept old senders that paint a cell with {"grid": "<cell key>"}
    LEGACY_GRID_MESSAGES = os.environ.get('LEGACY_GRID_MESSAGES', '1') == '1'
    # Run the game controller as soon as the app is created
    AUTO_START = os.environ.get('AUTO_START', '1') == '1'
    # Run again after a global session stop, like a relaunched receiver page
    RESTART_ON_STOP = os.environ.get('RESTART_ON_STOP', '1') == '1'
    # Dev server; controllers on the local network must be able to reach it
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '5000'))
    DEBUG = os.environ.get('FLASK_DEBUG', '1') == '1'
