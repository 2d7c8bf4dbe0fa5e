"""Task and category route handlers, registered by the app factory."""
from flask import Response, current_app, jsonify, request
from flask_login import current_user, login_required

from backend.time_helpers import today_local, week_range
from models import CATEGORIES, CATEGORY_IDS
from services import task_service
from services.export_service import tasks_to_csv, tasks_to_ics
from services.validation_service import parse_day_value


def _store():
    return current_app.extensions['task_store']


def _request_range():
    """
    Resolve the (start, end) listing window from query args.
    Returns ((start, end), None) or (None, error_response).
    """
    week_raw = request.args.get('week')
    if week_raw:
        day = today_local(current_app.config.get('DEFAULT_TIMEZONE')) if week_raw == 'current' else parse_day_value(week_raw)
        if not day:
            return None, (jsonify({'error': 'Invalid week'}), 400)
        return week_range(day), None

    start_raw = request.args.get('start')
    end_raw = request.args.get('end')
    if not start_raw and not end_raw:
        return (None, None), None
    start_day = parse_day_value(start_raw) if start_raw else None
    if not start_day:
        return None, (jsonify({'error': 'Invalid start date'}), 400)
    end_day = parse_day_value(end_raw) if end_raw else start_day
    if not end_day:
        return None, (jsonify({'error': 'Invalid end date'}), 400)
    if end_day < start_day:
        return None, (jsonify({'error': 'end must be on/after start'}), 400)
    return (start_day, end_day), None


@login_required
def list_tasks():
    window, error = _request_range()
    if error:
        return error
    start, end = window
    category = (request.args.get('category') or '').strip().lower() or None
    if category and category not in CATEGORY_IDS:
        return jsonify({'error': 'Unknown category'}), 400
    tasks = task_service.list_tasks(_store(), current_user.id, start, end, category=category)
    return jsonify([t.to_dict() for t in tasks])


@login_required
def create_task():
    data = request.get_json(silent=True)
    task = task_service.create_task(_store(), current_user.id, data if data is not None else {})
    current_app.logger.info(f"Task {task.id} created for user {current_user.id}")
    return jsonify(task.to_dict()), 201


@login_required
def task_detail(task_id):
    store = _store()
    if request.method == 'GET':
        return jsonify(task_service.get_task(store, current_user.id, task_id).to_dict())

    if request.method == 'DELETE':
        task_service.delete_task(store, current_user.id, task_id)
        return '', 204

    data = request.get_json(silent=True)
    task = task_service.update_task(store, current_user.id, task_id, data if data is not None else {})
    return jsonify(task.to_dict())


@login_required
def export_tasks():
    fmt = (request.args.get('format') or 'csv').lower()
    if fmt not in ('csv', 'ics'):
        return jsonify({'error': 'format must be csv or ics'}), 400
    window, error = _request_range()
    if error:
        return error
    start, end = window
    tasks = task_service.list_tasks(_store(), current_user.id, start, end)

    if fmt == 'ics':
        body, mimetype, filename = tasks_to_ics(tasks), 'text/calendar', 'agenda.ics'
    else:
        body, mimetype, filename = tasks_to_csv(tasks), 'text/csv', 'agenda.csv'
    return Response(
        body,
        mimetype=mimetype,
        headers={'Content-Disposition': f'attachment; filename="{filename}"'}
    )


def list_categories():
    return jsonify(CATEGORIES)


def register_routes(app):
    app.add_url_rule('/api/tasks', 'list_tasks', list_tasks, methods=['GET'])
    app.add_url_rule('/api/tasks', 'create_task', create_task, methods=['POST'])
    app.add_url_rule('/api/tasks/export', 'export_tasks', export_tasks, methods=['GET'])
    app.add_url_rule('/api/tasks/<int:task_id>', 'task_detail', task_detail, methods=['GET', 'PUT', 'PATCH', 'DELETE'])
    app.add_url_rule('/api/categories', 'list_categories', list_categories, methods=['GET'])
