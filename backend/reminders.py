"""
Reminder scheduler.

A polling job that, once per interval:
- fetches tasks with a reminder configured and not yet sent,
- checks whether "now" sits inside [task start - offset, task start),
- hands due reminders to the injected notifier,
- marks a task sent only after the notifier accepted the message.

A failed delivery leaves the task unsent so the next tick retries it, until
the task's start time closes the window. Reminders for tasks that already
started are never sent.
"""
import logging
import threading
from dataclasses import dataclass, field
from datetime import timedelta

from apscheduler.schedulers.background import BackgroundScheduler

from backend.errors import DeliveryError, SchedulerTickError
from backend.notifier import send_task_reminder
from backend.time_helpers import combine_local, now_local
from models import ReminderOffset

logger = logging.getLogger(__name__)

JOB_ID = 'task_reminders'


def reminder_instant(task):
    """Naive datetime at which the task's reminder window opens, or None."""
    offset = task.reminder_offset
    if offset is ReminderOffset.NONE:
        return None
    return combine_local(task.date, task.start_time) - timedelta(minutes=offset.minutes)


def should_remind(task, now):
    opens_at = reminder_instant(task)
    if opens_at is None:
        return False
    return opens_at <= now < combine_local(task.date, task.start_time)


@dataclass
class ReminderTickResult:
    checked: int = 0
    sent: list = field(default_factory=list)
    failed: list = field(default_factory=list)
    already_marked: list = field(default_factory=list)
    skipped: bool = False


class ReminderScheduler:
    """
    Owns the recurring reminder job. One instance per process, started and
    stopped by the app factory.
    """

    def __init__(self, store, notifier, clock=None, interval_seconds=60, app=None, timezone='UTC'):
        self.store = store
        self.notifier = notifier
        self.timezone = timezone or 'UTC'
        self.clock = clock or (lambda: now_local(self.timezone))
        self.interval_seconds = max(1, int(interval_seconds))
        self.app = app
        self._scheduler = None
        self._tick_lock = threading.Lock()

    @property
    def running(self):
        return bool(self._scheduler and self._scheduler.running)

    def start(self):
        if self.running:
            return
        self._scheduler = BackgroundScheduler(timezone=self.timezone)
        self._scheduler.add_job(
            self.tick,
            'interval',
            seconds=self.interval_seconds,
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True
        )
        self._scheduler.start()
        logger.info("Reminder scheduler started - checking every %s seconds", self.interval_seconds)

    def stop(self, wait=True):
        if not self.running:
            return
        self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("Reminder scheduler stopped")

    def tick(self, now=None):
        """Run one reminder pass. Never raises; overlapping calls are skipped."""
        if not self._tick_lock.acquire(blocking=False):
            logger.info("Reminder tick still in progress, skipping")
            return ReminderTickResult(skipped=True)
        try:
            if self.app is not None:
                with self.app.app_context():
                    return self._run(now)
            return self._run(now)
        except SchedulerTickError:
            logger.exception("Reminder tick aborted")
            return ReminderTickResult()
        except Exception:
            logger.exception("Unexpected error in reminder tick")
            return ReminderTickResult()
        finally:
            self._tick_lock.release()

    def _run(self, now):
        now = now or self.clock()
        try:
            candidates = self.store.list_reminder_candidates()
        except Exception as e:
            raise SchedulerTickError(f"Could not load reminder candidates: {e}") from e

        result = ReminderTickResult(checked=len(candidates))
        for task in candidates:
            try:
                if not should_remind(task, now):
                    continue
                self._deliver(task)
                if self.store.mark_reminder_sent(task.id):
                    logger.info("Reminder sent for task %s (%s)", task.id, task.title)
                    result.sent.append(task.id)
                else:
                    logger.warning("Task %s was already marked sent by another writer", task.id)
                    result.already_marked.append(task.id)
            except DeliveryError as e:
                logger.warning("%s; will retry on next tick", e)
                result.failed.append(task.id)
            except Exception:
                logger.exception("Error processing reminder for task %s", getattr(task, 'id', None))
                result.failed.append(getattr(task, 'id', None))
        return result

    def _deliver(self, task):
        try:
            accepted = send_task_reminder(self.notifier, task)
        except Exception as e:
            raise DeliveryError(task.id, f"Reminder delivery failed for task {task.id}: {e}") from e
        if not accepted:
            raise DeliveryError(task.id)
