"""Session services: the player registry and message transport the game
controller runs against.

Transport concerns stay in ``receiver.socketio_events``; this package holds
the registry bookkeeping and the listener plumbing.
"""

from .manager import SessionManager, SESSION_ROOM

__all__ = ['SessionManager', 'SESSION_ROOM']
