from flask import Blueprint, jsonify, current_app


receiver_api = Blueprint('receiver_api', __name__)


def _receiver():
    return current_app.extensions['receiver']


@receiver_api.route('/state', methods=['GET'])
def get_receiver_state():
    """
    Returns session and player information, for testing and debugging.
    """
    receiver = _receiver()
    payload = receiver.session.snapshot()
    payload['run_state'] = receiver.game.run_state
    payload['known_names'] = dict(receiver.game.players)
    payload['has_words'] = receiver.game.words_message is not None
    return jsonify(payload)


@receiver_api.route('/display', methods=['GET'])
def get_display():
    """
    Returns what the receiver display is currently showing.
    """
    return jsonify(_receiver().display.snapshot())
