"""User/session routes: register, login, logout, current user."""
from flask import current_app, jsonify, request, session
from flask_login import current_user, login_required, login_user, logout_user

from models import User, db

MIN_PASSWORD_LENGTH = 6


def _credentials():
    data = request.get_json(silent=True) or {}
    username = str(data.get('username') or '').strip()
    password = str(data.get('password') or '')
    return username, password


def register():
    username, password = _credentials()

    if not username:
        return jsonify({'error': 'Username is required'}), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({'error': f'Password must be at least {MIN_PASSWORD_LENGTH} characters'}), 400
    if User.query.filter_by(username=username).first():
        return jsonify({'error': 'Username already exists'}), 400

    user = User(username=username)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    login_user(user, remember=True)
    session.permanent = True
    current_app.logger.info(f"Registered user {user.id} ({user.username})")
    return jsonify(user.to_dict()), 201


def login():
    username, password = _credentials()
    user = User.query.filter_by(username=username).first() if username else None
    if not user or not user.check_password(password):
        return jsonify({'error': 'Invalid username or password'}), 401

    login_user(user, remember=True)
    session.permanent = True
    return jsonify(user.to_dict())


@login_required
def logout():
    logout_user()
    return '', 204


def current_user_info():
    if current_user.is_authenticated:
        return jsonify(current_user.to_dict())
    return jsonify({'error': 'Not authenticated'}), 401


def register_routes(app):
    app.add_url_rule('/api/register', 'register', register, methods=['POST'])
    app.add_url_rule('/api/login', 'login', login, methods=['POST'])
    app.add_url_rule('/api/logout', 'logout', logout, methods=['POST'])
    app.add_url_rule('/api/user', 'current_user_info', current_user_info, methods=['GET'])
