from flask import Blueprint, jsonify, current_app

main = Blueprint('main', __name__)

@main.route('/')
def index():
    name = current_app.config.get('APPLICATION_NAME', 'Game')
    return jsonify({'message': f'Welcome to the {name} receiver!'})
