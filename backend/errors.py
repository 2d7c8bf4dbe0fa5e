"""Error taxonomy shared by the request path and the reminder scheduler."""


class AgendaError(Exception):
    status_code = 500
    message = 'Internal error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(AgendaError):
    """Malformed task payload; `errors` maps field name to a message."""
    status_code = 400
    message = 'Invalid task data'

    def __init__(self, errors, message=None):
        super().__init__(message)
        self.errors = dict(errors or {})

    def to_dict(self):
        return {'error': self.message, 'errors': self.errors}


class ConflictError(AgendaError):
    """Candidate overlaps an existing task of the same owner on the same day."""
    status_code = 409
    message = 'Task conflicts with existing task'

    def __init__(self, conflicting_task, message=None):
        super().__init__(message)
        self.conflicting_task = conflicting_task

    def to_dict(self):
        return {'error': self.message, 'conflicting_task': self.conflicting_task.to_dict()}


class NotFoundError(AgendaError):
    status_code = 404
    message = 'Task not found'


class DeliveryError(AgendaError):
    """Reminder could not be handed to the mail transport. Never user-facing."""

    def __init__(self, task_id, message=None):
        super().__init__(message or f'Reminder delivery failed for task {task_id}')
        self.task_id = task_id


class SchedulerTickError(AgendaError):
    """Unexpected failure while a reminder tick fetched or iterated tasks."""
    message = 'Reminder tick failed'
