"""Create/update/delete orchestration: validation, conflict check, persistence."""
import logging

from backend.conflicts import TaskSlot, find_conflict
from backend.errors import ConflictError, NotFoundError
from services.validation_service import check_reminder_email, validate_task_payload

logger = logging.getLogger(__name__)

SCHEDULE_FIELDS = ('date', 'start_time', 'duration')


def _conflict_for(store, owner_id, slot, exclude_task_id=None):
    siblings = [
        t for t in store.list_by_owner_and_date_range(owner_id, slot.date, slot.date)
        if t.id != exclude_task_id
    ]
    return find_conflict(slot, siblings)


def list_tasks(store, owner_id, start=None, end=None, category=None):
    if start is not None and end is not None:
        return store.list_by_owner_and_date_range(owner_id, start, end, category=category)
    return store.list_by_owner(owner_id, category=category)


def get_task(store, owner_id, task_id):
    task = store.get(task_id, owner_id=owner_id)
    if task is None:
        raise NotFoundError()
    return task


def create_task(store, owner_id, payload):
    fields = validate_task_payload(payload)
    slot = TaskSlot.from_fields(fields)
    with store.locked():
        conflict = _conflict_for(store, owner_id, slot)
        if conflict is not None:
            logger.info("Rejected task for user %s on %s: overlaps task %s", owner_id, slot.date, conflict.id)
            raise ConflictError(conflict)
        return store.insert(fields, owner_id)


def update_task(store, owner_id, task_id, payload):
    """
    Apply a partial update. The overlap check only runs when date, start
    time or duration actually change, and never counts the task itself.
    """
    with store.locked():
        task = get_task(store, owner_id, task_id)
        fields = validate_task_payload(payload, partial=True)

        merged = {
            'reminder': task.reminder,
            'email': task.email,
            'date': task.date,
            'start_time': task.start_time,
            'duration': task.duration,
        }
        merged.update(fields)
        check_reminder_email(merged)

        schedule_changed = any(
            name in fields and fields[name] != getattr(task, name)
            for name in SCHEDULE_FIELDS
        )
        if schedule_changed:
            slot = TaskSlot.from_fields(merged)
            conflict = _conflict_for(store, owner_id, slot, exclude_task_id=task.id)
            if conflict is not None:
                logger.info("Rejected update of task %s: overlaps task %s", task.id, conflict.id)
                raise ConflictError(conflict)

        # Clearing the reminder re-arms it for a later configuration;
        # moving a task whose reminder already went out does not.
        if 'reminder' in fields and fields['reminder'] is None:
            fields['reminder_sent'] = False

        return store.update(task.id, fields)


def delete_task(store, owner_id, task_id):
    with store.locked():
        task = get_task(store, owner_id, task_id)
        return store.delete(task.id)
