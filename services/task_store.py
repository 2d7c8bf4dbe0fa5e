"""SQLAlchemy-backed repository for tasks."""
import logging
import threading
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from models import Task, db
from services.validation_service import TASK_FIELDS

logger = logging.getLogger(__name__)


class TaskStore:
    """
    Task persistence used by request handlers and the reminder scheduler.

    All reads and writes go through the Flask-SQLAlchemy session, so methods
    must run inside an application context. `locked()` serializes
    check-then-write sequences (conflict check followed by insert/update)
    within this process.
    """

    def __init__(self):
        self._write_lock = threading.RLock()

    @property
    def session(self):
        return db.session

    @contextmanager
    def locked(self):
        with self._write_lock:
            yield self

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    def _ordered(self, query):
        return query.order_by(Task.date.asc(), Task.start_time.asc(), Task.id.asc())

    def _owned(self, owner_id, category=None):
        query = Task.query.filter(Task.user_id == owner_id)
        if category:
            query = query.filter(Task.category == category)
        return query

    def list_by_owner(self, owner_id, category=None):
        return self._ordered(self._owned(owner_id, category)).all()

    def list_by_owner_and_date_range(self, owner_id, start, end, category=None):
        return self._ordered(self._owned(owner_id, category).filter(
            Task.date >= start,
            Task.date <= end
        )).all()

    def get(self, task_id, owner_id=None):
        task = self.session.get(Task, task_id)
        if task is None:
            return None
        if owner_id is not None and task.user_id != owner_id:
            return None
        return task

    def insert(self, fields, owner_id):
        task = Task(user_id=owner_id, reminder_sent=False)
        for name in TASK_FIELDS:
            if name in fields:
                setattr(task, name, fields[name])
        self.session.add(task)
        self._commit()
        logger.debug("Task added id=%s user=%s date=%s", task.id, owner_id, task.date)
        return task

    def update(self, task_id, fields):
        task = self.session.get(Task, task_id)
        if task is None:
            return None
        for name in TASK_FIELDS + ('reminder_sent',):
            if name in fields:
                setattr(task, name, fields[name])
        self._commit()
        return task

    def delete(self, task_id):
        task = self.session.get(Task, task_id)
        if task is None:
            return False
        self.session.delete(task)
        self._commit()
        return True

    def list_reminder_candidates(self):
        """Tasks with a reminder configured, an email, and nothing sent yet."""
        return Task.query.filter(
            Task.reminder.isnot(None),
            Task.reminder != 'none',
            Task.reminder_sent.is_(False),
            Task.email.isnot(None),
            Task.email != ''
        ).order_by(Task.date.asc(), Task.start_time.asc()).all()

    def mark_reminder_sent(self, task_id):
        """
        Flip reminder_sent only if it is still false.
        Returns True when this call performed the transition.
        """
        updated = Task.query.filter(
            Task.id == task_id,
            Task.reminder_sent.is_(False)
        ).update({'reminder_sent': True}, synchronize_session=False)
        self._commit()
        return updated == 1
