from datetime import date, time

import pytest

from backend.errors import ValidationError
from services.validation_service import (
    check_reminder_email,
    is_valid_email,
    parse_day_value,
    parse_time_str,
    validate_task_payload,
)


def payload(**overrides):
    data = {
        'title': 'Standup',
        'date': '2024-01-15',
        'start_time': '09:00',
        'duration': 30,
        'category': 'work',
    }
    data.update(overrides)
    return data


def test_valid_payload_is_cleaned():
    cleaned = validate_task_payload(payload(title='  Standup  ', description='', reminder='none'))
    assert cleaned == {
        'title': 'Standup',
        'description': None,
        'date': date(2024, 1, 15),
        'start_time': time(9, 0),
        'duration': 30,
        'category': 'work',
        'reminder': None,
        'email': None,
    }


def test_missing_fields_are_reported_per_field():
    with pytest.raises(ValidationError) as exc:
        validate_task_payload({'category': 'work'})
    assert set(exc.value.errors) == {'title', 'date', 'start_time', 'duration'}


@pytest.mark.parametrize('duration', [0, 14, '10', 'abc', None, 1441, 59.9, 15.7, True])
def test_duration_bounds(duration):
    with pytest.raises(ValidationError) as exc:
        validate_task_payload(payload(duration=duration))
    assert 'duration' in exc.value.errors


def test_minimum_duration_is_accepted():
    assert validate_task_payload(payload(duration='15'))['duration'] == 15


def test_integral_float_duration_is_accepted():
    assert validate_task_payload(payload(duration=45.0))['duration'] == 45


def test_reminder_without_email_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_task_payload(payload(reminder='15min', email=''))
    assert 'email' in exc.value.errors


def test_reminder_with_email_is_accepted():
    cleaned = validate_task_payload(payload(reminder='1day', email='me@example.com'))
    assert cleaned['reminder'] == '1day'
    assert cleaned['email'] == 'me@example.com'


def test_unknown_reminder_and_category_are_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_task_payload(payload(reminder='30min', category='leisure'))
    assert set(exc.value.errors) == {'reminder', 'category'}


def test_invalid_email_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_task_payload(payload(email='not-an-email'))
    assert 'email' in exc.value.errors


def test_partial_payload_only_checks_supplied_fields():
    assert validate_task_payload({'start_time': '10:15'}, partial=True) == {'start_time': time(10, 15)}
    with pytest.raises(ValidationError):
        validate_task_payload({'title': ''}, partial=True)


def test_non_object_body_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_task_payload(['title'])
    assert 'body' in exc.value.errors


def test_parsers():
    assert parse_time_str('07:05') == time(7, 5)
    assert parse_time_str('7:05') is None
    assert parse_time_str('24:00') is None
    assert parse_time_str('9am') is None
    assert parse_day_value('2024-02-29') == date(2024, 2, 29)
    assert parse_day_value('2023-02-29') is None
    assert parse_day_value('2024-1-5') is None
    assert is_valid_email('a@b.co')
    assert not is_valid_email('a@b')


def test_check_reminder_email_on_merged_fields():
    check_reminder_email({'reminder': None, 'email': None})
    with pytest.raises(ValidationError):
        check_reminder_email({'reminder': '1hour', 'email': None})
