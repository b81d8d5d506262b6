"""
Signup notifications: a welcome email to the person who joined and an
alert email to the operator.
"""
import asyncio
import html
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from app.models.waitlist import WaitlistEntry
from app.services.email_sender import EmailSender

logger = logging.getLogger(__name__)

WELCOME = "welcome"
ALERT = "alert"


@dataclass
class NotificationOutcome:
    kind: str                  # "welcome" | "alert"
    to_email: str              # where the email was actually sent
    intended_email: str        # where it would go outside test mode
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


OutcomeHook = Callable[[NotificationOutcome], None]


class NotificationDispatcher:
    """Fans a new waitlist entry out to the welcome and alert emails.

    In test mode both emails are redirected to ``test_email`` and the welcome
    body names the address it was meant for. ``notify`` never raises: every
    send outcome is logged and handed to ``on_outcome`` instead.
    """

    def __init__(
        self,
        sender: EmailSender,
        operator_email: str,
        test_email: str,
        test_mode: bool = False,
        on_outcome: Optional[OutcomeHook] = None
    ):
        self.sender = sender
        self.operator_email = operator_email
        self.test_email = test_email
        self.test_mode = test_mode
        self.on_outcome = on_outcome

    def resolve_destinations(self, entry: WaitlistEntry) -> Tuple[str, str]:
        """(welcome recipient, alert recipient) for an entry"""
        if self.test_mode:
            return self.test_email, self.test_email
        return entry.email, self.operator_email

    def build_welcome(self, entry: WaitlistEntry) -> Tuple[str, str, str]:
        subject = "You're on the waitlist!"
        text = (
            "Thanks for joining the waitlist!\n\n"
            "We'll let you know as soon as your spot opens up."
        )
        body = (
            "<h1>Thanks for joining the waitlist!</h1>"
            "<p>We'll let you know as soon as your spot opens up.</p>"
        )
        if self.test_mode:
            text += f"\n\nIntended recipient: {entry.email}"
            body += f"<p>Intended recipient: {html.escape(entry.email)}</p>"
        return subject, body, text

    def build_alert(self, entry: WaitlistEntry) -> Tuple[str, str, str]:
        subject = f"New waitlist signup: {entry.email}"
        fields = [
            ("ID", entry.id),
            ("Email", entry.email),
            ("Wait list code", entry.wait_list_code or "-"),
            ("Preferences", ", ".join(entry.preferences) or "-"),
            ("Created at", entry.created_at.isoformat()),
        ]
        text = "\n".join(f"{label}: {value}" for label, value in fields)
        rows = "".join(
            f"<li><strong>{label}:</strong> {html.escape(str(value))}</li>"
            for label, value in fields
        )
        body = f"<h2>New waitlist signup</h2><ul>{rows}</ul>"
        return subject, body, text

    async def notify(self, entry: WaitlistEntry) -> None:
        """Send both emails for a freshly created entry. Best effort."""
        welcome_to, alert_to = self.resolve_destinations(entry)
        try:
            await asyncio.gather(
                self._send(WELCOME, welcome_to, entry.email, self.build_welcome(entry)),
                self._send(ALERT, alert_to, self.operator_email, self.build_alert(entry)),
            )
        except Exception as e:
            logger.error(f"❌ Notification dispatch for entry {entry.id} failed: {e}")

    async def _send(
        self,
        kind: str,
        to_email: str,
        intended_email: str,
        message: Tuple[str, str, str]
    ) -> NotificationOutcome:
        subject, html_content, text_content = message
        try:
            result = await self.sender.send_email(
                to_email=to_email,
                subject=subject,
                html_content=html_content,
                text_content=text_content,
                tags=["waitlist", kind]
            )
            outcome = NotificationOutcome(
                kind=kind,
                to_email=to_email,
                intended_email=intended_email,
                success=True,
                message_id=result.get("message_id")
            )
            logger.info(f"✅ {kind} email sent to {to_email}, message_id: {outcome.message_id}")
        except Exception as e:
            outcome = NotificationOutcome(
                kind=kind,
                to_email=to_email,
                intended_email=intended_email,
                success=False,
                error=str(e) or e.__class__.__name__
            )
            logger.error(f"❌ {kind} email to {to_email} failed: {outcome.error}")

        self._report(outcome)
        return outcome

    def _report(self, outcome: NotificationOutcome) -> None:
        if self.on_outcome is None:
            return
        try:
            self.on_outcome(outcome)
        except Exception as e:
            logger.warning(f"⚠️ Notification outcome hook raised: {e}")

