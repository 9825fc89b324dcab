from receiver import db
from receiver.events import PlayerState
import json


class Player(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    # Socket.IO session id of the controller
    player_id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    name = db.Column(db.String(64), nullable=True)
    state = db.Column(db.String(32), default=PlayerState.AVAILABLE, nullable=False)
    connected = db.Column(db.Boolean, default=True, nullable=False)
    player_data = db.Column(db.Text, nullable=True)  # JSON-encoded extra data from the ready request

    @property
    def data(self):
        try:
            return json.loads(self.player_data) if self.player_data else {}
        except Exception:
            return {}

    @property
    def is_connected(self):
        return bool(self.connected) and self.state not in PlayerState.QUIT_VARIANTS

    def to_dict(self):
        return {
            'id': self.id,
            'player_id': self.player_id,
            'name': self.name,
            'state': self.state,
            'connected': self.is_connected,
            'player_data': self.data,
        }
