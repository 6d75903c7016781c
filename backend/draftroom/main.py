from flask import Blueprint, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the draft room server!'})


@main.route('/api/health')
def health():
    return jsonify({'status': 'OK', 'message': 'Draft server is running'})
