from datetime import date, time

import pytest

from models import User, db

DAY = date(2024, 1, 15)


@pytest.fixture()
def owner_ids(app_ctx):
    users = []
    for name in ('carol', 'dave'):
        user = User(username=name)
        user.set_password('secret-pass')
        db.session.add(user)
        users.append(user)
    db.session.commit()
    return [u.id for u in users]


def fields(start='09:00', day=DAY, **overrides):
    hours, minutes = (int(p) for p in start.split(':'))
    data = {
        'title': 'Focus block',
        'date': day,
        'start_time': time(hours, minutes),
        'duration': 60,
        'category': 'work',
    }
    data.update(overrides)
    return data


def test_insert_get_update_delete(store, owner_ids):
    owner, other = owner_ids
    task = store.insert(fields(), owner)
    assert task.id is not None
    assert task.reminder_sent is False

    assert store.get(task.id).title == 'Focus block'
    assert store.get(task.id, owner_id=owner) is task
    assert store.get(task.id, owner_id=other) is None

    updated = store.update(task.id, {'title': 'Deep work', 'duration': 90})
    assert updated.title == 'Deep work'
    assert updated.duration == 90
    assert store.update(99999, {'title': 'ghost'}) is None

    assert store.delete(task.id) is True
    assert store.delete(task.id) is False
    assert store.get(task.id) is None


def test_ids_are_not_reused_after_delete(store, owner_ids):
    owner, _ = owner_ids
    first = store.insert(fields('08:00'), owner)
    first_id = first.id
    store.delete(first_id)
    second = store.insert(fields('08:00'), owner)
    assert second.id > first_id


def test_listing_is_scoped_and_ordered(store, owner_ids):
    owner, other = owner_ids
    late = store.insert(fields('15:00'), owner)
    early = store.insert(fields('08:00'), owner)
    next_day = store.insert(fields('07:00', day=date(2024, 1, 16)), owner)
    store.insert(fields('10:00'), other)

    assert [t.id for t in store.list_by_owner(owner)] == [early.id, late.id, next_day.id]
    assert [t.id for t in store.list_by_owner_and_date_range(owner, DAY, DAY)] == [early.id, late.id]
    assert len(store.list_by_owner(other)) == 1


def test_reminder_candidates_filter(store, owner_ids):
    owner, _ = owner_ids
    wanted = store.insert(fields('08:00', reminder='15min', email='me@example.com'), owner)
    store.insert(fields('09:00'), owner)
    store.insert(fields('10:00', reminder='1hour', email=None), owner)
    already = store.insert(fields('11:00', reminder='1day', email='me@example.com'), owner)
    store.mark_reminder_sent(already.id)

    assert [t.id for t in store.list_reminder_candidates()] == [wanted.id]


def test_mark_reminder_sent_is_conditional(store, owner_ids):
    owner, _ = owner_ids
    task = store.insert(fields(reminder='15min', email='me@example.com'), owner)

    assert store.mark_reminder_sent(task.id) is True
    assert store.mark_reminder_sent(task.id) is False
    assert store.get(task.id).reminder_sent is True
    assert store.mark_reminder_sent(99999) is False
