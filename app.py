import atexit
import logging
import os

import click
from flask import Flask, current_app, jsonify, request
from flask_login import LoginManager

from backend.errors import AgendaError
from backend.notifier import EmailNotifier
from backend.reminders import ReminderScheduler
from config import Config
from models import User, db
from services import auth_routes, task_routes
from services.task_store import TaskStore

login_manager = LoginManager()


@login_manager.user_loader
def _load_user(user_id):
    try:
        return db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None


@login_manager.request_loader
def _load_user_from_api_key(req):
    """Resolve a shared API key + user id header pair for service callers."""
    shared_key = current_app.config.get('API_SHARED_KEY')
    api_key = req.headers.get('X-API-Key')
    api_user_id = req.headers.get('X-User-Id')
    if not (shared_key and api_key and api_user_id) or api_key != shared_key:
        return None
    try:
        return db.session.get(User, int(api_user_id))
    except (TypeError, ValueError):
        return None


@login_manager.unauthorized_handler
def _unauthorized():
    return jsonify({'error': 'Authentication required'}), 401


def _configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    app.logger.setLevel(level)
    # APScheduler logs every job run at INFO
    logging.getLogger('apscheduler').setLevel(max(level, logging.WARNING))


def _register_error_handlers(app):
    @app.errorhandler(AgendaError)
    def _handle_agenda_error(exc):
        if exc.status_code >= 500:
            app.logger.error(f"{request.method} {request.path} failed: {exc}")
        return jsonify(exc.to_dict()), exc.status_code


def _register_cli(app):
    @app.cli.command('init-db')
    def init_db_command():
        """Create missing tables."""
        db.create_all()
        click.echo('Database tables are ensured.')

    @app.cli.command('run-reminders')
    def run_reminders_command():
        """Run one reminder pass now."""
        result = app.extensions['reminder_scheduler'].tick()
        click.echo(f"checked={result.checked} sent={len(result.sent)} failed={len(result.failed)}")


def _start_reminder_jobs(app):
    scheduler = app.extensions['reminder_scheduler']
    if not app.config.get('ENABLE_REMINDER_JOBS'):
        return
    # Avoid double-start in Flask debug reloader
    if app.debug and os.environ.get('WERKZEUG_RUN_MAIN') != 'true':
        return
    scheduler.start()
    atexit.register(scheduler.stop)


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    _configure_logging(app)
    db.init_app(app)
    login_manager.init_app(app)

    store = TaskStore()
    notifier = EmailNotifier.from_config(app.config)
    app.extensions['task_store'] = store
    app.extensions['reminder_scheduler'] = ReminderScheduler(
        store,
        notifier,
        interval_seconds=app.config.get('REMINDER_INTERVAL_SECONDS', 60),
        app=app,
        timezone=app.config.get('DEFAULT_TIMEZONE', 'UTC'),
    )

    auth_routes.register_routes(app)
    task_routes.register_routes(app)
    _register_error_handlers(app)
    _register_cli(app)

    with app.app_context():
        db.create_all()

    if not notifier.configured:
        app.logger.warning("SMTP is not configured; reminder emails will not be delivered")

    _start_reminder_jobs(app)
    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=os.environ.get('FLASK_DEBUG', '0') == '1')
