from datetime import date, datetime, time, timedelta

import pytz

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(value):
    """Minutes since midnight for a `time` or an 'HH:MM' string."""
    if isinstance(value, time):
        return (value.hour * 60) + value.minute
    hours, minutes = str(value).split(':')[:2]
    return (int(hours) * 60) + int(minutes)


def minutes_to_time(minutes):
    """Render minutes since midnight as 'HH:MM' (wraps past midnight)."""
    minutes = int(minutes) % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def end_minutes(start_time, duration):
    return time_to_minutes(start_time) + int(duration)


def combine_local(day, start_time):
    """Naive local datetime for a task's start."""
    if not isinstance(start_time, time):
        total = time_to_minutes(start_time)
        start_time = time(hour=total // 60, minute=total % 60)
    return datetime.combine(day, start_time)


def week_range(day):
    """Monday..Sunday (inclusive) of the week containing `day`."""
    if isinstance(day, datetime):
        day = day.date()
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=6)


def now_local(tz_name='UTC'):
    tz = pytz.timezone(tz_name or 'UTC')
    return datetime.now(tz).replace(tzinfo=None)


def today_local(tz_name='UTC'):
    return now_local(tz_name).date()


def format_day(value):
    if isinstance(value, date):
        return value.isoformat()
    return value or None


def format_time(value):
    if isinstance(value, time):
        return value.strftime('%H:%M')
    return value or None
