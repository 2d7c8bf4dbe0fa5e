import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from backend.time_helpers import format_day, format_time

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Lightweight SMTP sender. `send` reports success instead of raising."""

    def __init__(self, host=None, port=587, username=None, password=None, from_addr=None, use_tls=True):
        self.host = host
        self.port = int(port or 587)
        self.username = username
        self.password = password
        self.from_addr = from_addr or username
        self.use_tls = use_tls

    @classmethod
    def from_config(cls, config):
        return cls(
            host=config.get('SMTP_HOST'),
            port=config.get('SMTP_PORT', 587),
            username=config.get('SMTP_USER'),
            password=config.get('SMTP_PASSWORD'),
            from_addr=config.get('SMTP_FROM'),
            use_tls=config.get('SMTP_USE_TLS', True),
        )

    @property
    def configured(self):
        return bool(self.host and self.from_addr)

    def send(self, to_email, subject, body_text, body_html=None):
        if not self.configured:
            logger.warning("SMTP host/from missing; email to %s not sent", to_email)
            return False

        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = self.from_addr
        msg['To'] = to_email
        msg.attach(MIMEText(body_text, 'plain'))
        if body_html:
            msg.attach(MIMEText(body_html, 'html'))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.sendmail(self.from_addr, [to_email], msg.as_string())
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP send to %s failed: %s", to_email, e)
            return False


def build_reminder_message(title, day, start_time, offset_label):
    """Return (subject, text, html) for a task reminder email."""
    day_str = format_day(day)
    time_str = format_time(start_time)
    subject = f"Reminder: {title}"
    text = (
        "This is a reminder for your upcoming task:\n\n"
        f"Task: {title}\n"
        f"Date: {day_str}\n"
        f"Time: {time_str}\n\n"
        f"This reminder was set for {offset_label} before the task."
    )
    html_body = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #1A73E8;">Task Reminder</h2>
      <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <h3 style="margin: 0 0 10px 0; color: #333;">{escape(title)}</h3>
        <p style="margin: 5px 0; color: #666;"><strong>Date:</strong> {day_str}</p>
        <p style="margin: 5px 0; color: #666;"><strong>Time:</strong> {time_str}</p>
      </div>
      <p style="color: #666; font-size: 14px;">
        This reminder was set for {offset_label} before the task.
      </p>
    </div>
    """
    return subject, text, html_body


def send_task_reminder(notifier, task):
    subject, text, html_body = build_reminder_message(
        task.title, task.date, task.start_time, task.reminder_offset.label
    )
    return notifier.send(task.email, subject, text, html_body)
