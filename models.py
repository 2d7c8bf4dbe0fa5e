from datetime import datetime
from enum import Enum

from flask_login import UserMixin
from flask_sqlalchemy import SQLAlchemy
from werkzeug.security import generate_password_hash, check_password_hash

from backend.time_helpers import end_minutes, format_day, format_time, minutes_to_time

db = SQLAlchemy()

MIN_DURATION_MINUTES = 15

CATEGORIES = [
    {'id': 'work', 'name': 'Work', 'color': 'hsl(291, 64%, 42%)'},
    {'id': 'personal', 'name': 'Personal', 'color': 'hsl(122, 39%, 49%)'},
    {'id': 'health', 'name': 'Health', 'color': 'hsl(33, 100%, 50%)'},
    {'id': 'urgent', 'name': 'Urgent', 'color': 'hsl(4, 90%, 58%)'},
]
CATEGORY_IDS = frozenset(c['id'] for c in CATEGORIES)


class ReminderOffset(str, Enum):
    """How long before a task's start its reminder email goes out."""

    NONE = 'none'
    MIN_15 = '15min'
    HOUR_1 = '1hour'
    DAY_1 = '1day'
    DAYS_2 = '2days'

    @property
    def minutes(self):
        return _OFFSET_MINUTES[self]

    @property
    def label(self):
        return _OFFSET_LABELS[self]

    @classmethod
    def parse(cls, raw):
        """Map a wire value to a member; unknown values raise ValueError."""
        if isinstance(raw, cls):
            return raw
        if raw is None:
            return cls.NONE
        value = str(raw).strip().lower()
        if not value:
            return cls.NONE
        return cls(value)


_OFFSET_MINUTES = {
    ReminderOffset.NONE: 0,
    ReminderOffset.MIN_15: 15,
    ReminderOffset.HOUR_1: 60,
    ReminderOffset.DAY_1: 1440,
    ReminderOffset.DAYS_2: 2880,
}

_OFFSET_LABELS = {
    ReminderOffset.NONE: 'no reminder',
    ReminderOffset.MIN_15: '15 minutes',
    ReminderOffset.HOUR_1: '1 hour',
    ReminderOffset.DAY_1: '1 day',
    ReminderOffset.DAYS_2: '2 days',
}


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    tasks = db.relationship('Task', backref='owner', lazy=True, cascade="all, delete-orphan")

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Task(db.Model):
    """
    Time-boxed entry on a user's week grid.
    `date` and `start_time` are naive local values; the task occupies
    [start_time, start_time + duration) on that date.
    """
    __table_args__ = (
        db.Index('ix_task_user_date', 'user_id', 'date'),
        db.Index('ix_task_reminder_pending', 'reminder_sent', 'reminder'),
        {'sqlite_autoincrement': True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    date = db.Column(db.Date, nullable=False)
    start_time = db.Column(db.Time, nullable=False)
    duration = db.Column(db.Integer, nullable=False, default=60)  # minutes
    category = db.Column(db.String(20), nullable=False, default='work')
    reminder = db.Column(db.String(10), nullable=True)  # ReminderOffset value; NULL = none
    email = db.Column(db.String(254), nullable=True)
    reminder_sent = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def reminder_offset(self):
        try:
            return ReminderOffset.parse(self.reminder)
        except ValueError:
            return ReminderOffset.NONE

    @property
    def end_time(self):
        return minutes_to_time(end_minutes(self.start_time, self.duration))

    def to_dict(self):
        offset = self.reminder_offset
        return {
            'id': self.id,
            'user_id': self.user_id,
            'title': self.title,
            'description': self.description,
            'date': format_day(self.date),
            'start_time': format_time(self.start_time),
            'end_time': self.end_time if self.start_time is not None else None,
            'duration': self.duration,
            'category': self.category,
            'reminder': offset.value if offset is not ReminderOffset.NONE else None,
            'email': self.email,
            'reminder_sent': bool(self.reminder_sent),
        }
