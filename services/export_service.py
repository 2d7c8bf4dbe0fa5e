import csv
import io
from datetime import timedelta

from backend.time_helpers import combine_local, format_day, format_time

CSV_HEADERS = ['Title', 'Description', 'Date', 'Start Time', 'Duration (min)', 'Category', 'Reminder']


def tasks_to_csv(tasks):
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
    writer.writerow(CSV_HEADERS)
    for task in tasks:
        writer.writerow([
            task.title,
            task.description or '',
            format_day(task.date),
            format_time(task.start_time),
            task.duration,
            task.category,
            task.reminder or '',
        ])
    return buf.getvalue()


def _ics_escape(value):
    text = str(value or '')
    text = text.replace('\\', '\\\\').replace(';', '\\;').replace(',', '\\,')
    return text.replace('\r\n', '\\n').replace('\n', '\\n')


def _ics_stamp(value):
    return value.strftime('%Y%m%dT%H%M%S')


def tasks_to_ics(tasks, uid_domain='agenda.local'):
    """Render tasks as an iCalendar feed with floating (zone-less) times."""
    lines = [
        'BEGIN:VCALENDAR',
        'VERSION:2.0',
        'PRODID:-//Weekly Agenda//EN',
        'CALSCALE:GREGORIAN',
    ]
    for task in tasks:
        starts_at = combine_local(task.date, task.start_time)
        ends_at = starts_at + timedelta(minutes=int(task.duration))
        lines.extend([
            'BEGIN:VEVENT',
            f'UID:{task.id}@{uid_domain}',
            f'DTSTART:{_ics_stamp(starts_at)}',
            f'DTEND:{_ics_stamp(ends_at)}',
            f'SUMMARY:{_ics_escape(task.title)}',
            f'DESCRIPTION:{_ics_escape(task.description)}',
            f'CATEGORIES:{_ics_escape(task.category)}',
            'END:VEVENT',
        ])
    lines.append('END:VCALENDAR')
    return '\r\n'.join(lines) + '\r\n'
