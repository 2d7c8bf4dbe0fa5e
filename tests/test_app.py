from datetime import date, datetime, time

from app import create_app
from backend.reminders import ReminderScheduler
from fakes import TEST_CONFIG, FakeNotifier
from models import User, db


def test_factory_wires_store_and_scheduler(app):
    scheduler = app.extensions['reminder_scheduler']
    assert isinstance(scheduler, ReminderScheduler)
    assert scheduler.store is app.extensions['task_store']
    assert scheduler.running is False


def test_scheduler_starts_when_jobs_enabled():
    app = create_app(dict(TEST_CONFIG, ENABLE_REMINDER_JOBS=True))
    scheduler = app.extensions['reminder_scheduler']
    try:
        assert scheduler.running is True
    finally:
        scheduler.stop()
    assert scheduler.running is False


def test_tick_against_database_marks_task_sent(app, store):
    with app.app_context():
        user = User(username='gina')
        user.set_password('secret-pass')
        db.session.add(user)
        db.session.commit()
        task = store.insert({
            'title': 'Physio',
            'date': date(2024, 1, 15),
            'start_time': time(14, 0),
            'duration': 45,
            'category': 'health',
            'reminder': '1hour',
            'email': 'gina@example.com',
        }, user.id)
        task_id = task.id

    notifier = FakeNotifier()
    scheduler = ReminderScheduler(store, notifier, app=app)

    assert scheduler.tick(now=datetime(2024, 1, 15, 12, 30)).sent == []
    assert scheduler.tick(now=datetime(2024, 1, 15, 13, 5)).sent == [task_id]
    assert scheduler.tick(now=datetime(2024, 1, 15, 13, 6)).checked == 0

    with app.app_context():
        assert store.get(task_id).reminder_sent is True
    assert [m.to_email for m in notifier.sent] == ['gina@example.com']


def test_run_reminders_cli(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=['run-reminders'])
    assert result.exit_code == 0
    assert 'checked=0' in result.output
