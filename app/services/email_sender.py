"""
Email sending service using Brevo (Sendinblue) API.
Handles transactional email delivery and error reporting.
"""
import httpx
import logging
from typing import Dict, Any, Optional, List
from datetime import datetime

import pytz

from app.core.errors import NotificationError

logger = logging.getLogger(__name__)


class EmailSender:
    """Handles email sending via Brevo API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        sender_email: str,
        sender_name: str,
        base_url: str = "https://api.brevo.com/v3"
    ):
        self.client = client
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.sender_email = sender_email
        self.sender_name = sender_name

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str,
        tags: Optional[List[str]] = None,
        to_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Send a single transactional email.

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML email content
            text_content: Plain text email content
            tags: Brevo tags for deliverability tracking
            to_name: Optional recipient display name

        Returns:
            Dict with send result including message_id

        Raises:
            NotificationError: if Brevo is unreachable, times out or rejects the send
        """
        recipient = {"email": to_email}
        if to_name:
            recipient["name"] = to_name

        email_data = {
            "sender": {
                "name": self.sender_name,
                "email": self.sender_email
            },
            "to": [recipient],
            "subject": subject,
            "htmlContent": html_content,
            "textContent": text_content,
            "tags": tags or []
        }

        try:
            response = await self.client.post(
                f"{self.base_url}/smtp/email",
                headers={
                    "api-key": self.api_key,
                    "accept": "application/json",
                    "content-type": "application/json"
                },
                json=email_data
            )
            response.raise_for_status()
            result = response.json()

        except httpx.HTTPStatusError as e:
            error_msg = f"HTTP error {e.response.status_code}: {e.response.text}"
            raise NotificationError(error_msg) from e

        except httpx.TimeoutException as e:
            raise NotificationError(f"Timed out sending to {to_email}") from e

        except httpx.RequestError as e:
            raise NotificationError(f"Request error: {str(e)}") from e

        except ValueError as e:
            raise NotificationError(f"Invalid response from Brevo: {str(e)}") from e

        message_id = result.get("messageId", "") if isinstance(result, dict) else ""

        logger.debug(f"Brevo accepted email to {to_email}, message_id: {message_id}")

        return {
            "success": True,
            "message_id": message_id,
            "to_email": to_email,
            "sent_at": datetime.now(pytz.UTC).isoformat()
        }
