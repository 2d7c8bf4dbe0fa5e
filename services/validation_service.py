import re
from datetime import date, datetime, time

from backend.errors import ValidationError
from models import CATEGORY_IDS, MIN_DURATION_MINUTES, ReminderOffset

MAX_DURATION_MINUTES = 24 * 60
MAX_TITLE_LENGTH = 200

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
TIME_PATTERN = re.compile(r"^(?P<hour>\d{2}):(?P<minute>\d{2})$")
DAY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

TASK_FIELDS = ('title', 'description', 'date', 'start_time', 'duration', 'category', 'reminder', 'email')


def parse_time_str(val):
    """Parse a 24h 'HH:MM' string into a time object; return None on failure."""
    if not val:
        return None
    if isinstance(val, time):
        return val.replace(second=0, microsecond=0)
    m = TIME_PATTERN.match(str(val).strip())
    if not m:
        return None
    hour = int(m.group("hour"))
    minute = int(m.group("minute"))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return time(hour=hour, minute=minute)


def parse_day_value(raw):
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not DAY_PATTERN.match(str(raw).strip()):
        return None
    try:
        return datetime.strptime(str(raw).strip(), "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None


def parse_int(raw):
    if isinstance(raw, bool):
        return None
    if isinstance(raw, float) and not raw.is_integer():
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def is_valid_email(value):
    return bool(value) and bool(EMAIL_PATTERN.match(str(value).strip()))


def _clean_text(raw):
    return (str(raw) if raw is not None else "").strip()


def validate_task_payload(data, partial=False):
    """
    Validate a task create/update payload and return cleaned column values.

    With partial=True only keys present in `data` are checked (PUT semantics).
    Raises ValidationError carrying field-level messages.
    """
    if not isinstance(data, dict):
        raise ValidationError({"body": "Expected a JSON object"})

    errors = {}
    cleaned = {}

    def wanted(field):
        return not partial or field in data

    if wanted("title"):
        title = _clean_text(data.get("title"))
        if not title:
            errors["title"] = "Title is required"
        elif len(title) > MAX_TITLE_LENGTH:
            errors["title"] = f"Title must be at most {MAX_TITLE_LENGTH} characters"
        else:
            cleaned["title"] = title

    if "description" in data:
        cleaned["description"] = _clean_text(data.get("description")) or None

    if wanted("date"):
        day = parse_day_value(data.get("date")) if data.get("date") else None
        if not day:
            errors["date"] = "Date is required (YYYY-MM-DD)"
        else:
            cleaned["date"] = day

    if wanted("start_time"):
        start = parse_time_str(data.get("start_time"))
        if start is None:
            errors["start_time"] = "Start time is required (HH:MM, 24-hour)"
        else:
            cleaned["start_time"] = start

    if wanted("duration"):
        duration = parse_int(data.get("duration"))
        if duration is None:
            errors["duration"] = "Duration must be a whole number of minutes"
        elif duration < MIN_DURATION_MINUTES:
            errors["duration"] = f"Duration must be at least {MIN_DURATION_MINUTES} minutes"
        elif duration > MAX_DURATION_MINUTES:
            errors["duration"] = f"Duration must be at most {MAX_DURATION_MINUTES} minutes"
        else:
            cleaned["duration"] = duration

    if wanted("category"):
        category = _clean_text(data.get("category")).lower()
        if category not in CATEGORY_IDS:
            errors["category"] = f"Category must be one of: {', '.join(sorted(CATEGORY_IDS))}"
        else:
            cleaned["category"] = category

    if "reminder" in data:
        try:
            offset = ReminderOffset.parse(data.get("reminder"))
        except ValueError:
            errors["reminder"] = "Reminder must be one of: " + ", ".join(o.value for o in ReminderOffset)
        else:
            cleaned["reminder"] = None if offset is ReminderOffset.NONE else offset.value

    if "email" in data:
        email = _clean_text(data.get("email"))
        if email and not is_valid_email(email):
            errors["email"] = "Invalid email address"
        else:
            cleaned["email"] = email or None

    if errors:
        raise ValidationError(errors)

    if not partial:
        cleaned.setdefault("description", None)
        cleaned.setdefault("reminder", None)
        cleaned.setdefault("email", None)
        check_reminder_email(cleaned)
    return cleaned


def check_reminder_email(fields):
    """A reminder other than 'none' needs somewhere to go."""
    if fields.get("reminder") and not fields.get("email"):
        raise ValidationError({"email": "Email is required when a reminder is set"})
