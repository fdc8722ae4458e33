"""
ContactService Module

Runs a contact form submission through rate limiting, sanitization,
validation and mail dispatch. Every path ends in a ContactFormResponse.
"""

import re
import logging
from datetime import datetime, timezone
from typing import Optional

from markupsafe import Markup

from app.core.config import settings
from app.models.contact import (
    ContactFormRequest,
    ContactFormResponse,
    FieldErrors,
    SubmissionOutcome,
)
from app.services.mail_service import MailService, MailTimeoutError
from app.services.rate_limit_service import RateLimiter

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

UNKNOWN_CLIENT_ID = "unknown"
NOTIFICATION_TEMPLATE = "contact_form_notification"

RATE_LIMITED_MESSAGE = "Too many requests. Please wait a moment before trying again."
INVALID_MESSAGE = "Please fix the errors below"
SENT_MESSAGE = "Message sent successfully! I'll get back to you soon."
FAILED_MESSAGE = "Something went wrong. Please try again later."

NAME_ERROR = "Name must be at least 2 characters"
EMAIL_ERROR = "Please enter a valid email address"
MESSAGE_ERROR = "Message must be at least 10 characters"


def sanitize_input(value: Optional[str]) -> str:
    """Escape tag and attribute delimiters and trim surrounding whitespace.

    ``&`` is left alone, so existing entities are not double escaped.
    """
    if not value:
        return ""
    return (
        value.replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
        .strip()
    )


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def validate_submission(name: str, email: str, message: str) -> FieldErrors:
    """Check sanitized fields, collecting every failure."""
    errors = FieldErrors()

    if not name or len(name) < 2:
        errors.name = NAME_ERROR

    if not email or not is_valid_email(email):
        errors.email = EMAIL_ERROR

    if not message or len(message) < 10:
        errors.message_text = MESSAGE_ERROR

    return errors


def format_submission_time(moment: Optional[datetime] = None) -> str:
    moment = moment or datetime.now(timezone.utc)
    hour = moment.strftime("%I").lstrip("0")
    return f"{moment:%A, %B} {moment.day}, {moment.year} at {hour}:{moment:%M:%S %p} UTC"


class ContactService:
    """Contact form pipeline bound to one rate limiter and one mail service."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        mail_service: MailService,
        recipient: Optional[str] = None,
    ):
        self.rate_limiter = rate_limiter
        self.mail_service = mail_service
        self.recipient = recipient if recipient is not None else settings.CONTACT_EMAIL

    async def submit(self, request: ContactFormRequest) -> ContactFormResponse:
        """
        Process a contact form submission.

        Args:
            request: Raw form fields and the caller's client id

        Returns:
            The outcome to show the visitor. Never raises.
        """
        client_id = request.client_id.strip() or UNKNOWN_CLIENT_ID

        if self.rate_limiter.is_rate_limited(client_id):
            self._log_outcome(client_id, SubmissionOutcome.RATE_LIMITED)
            return ContactFormResponse(success=False, message=RATE_LIMITED_MESSAGE)

        name = sanitize_input(request.name)
        email = sanitize_input(request.email)
        message = sanitize_input(request.message)

        errors = validate_submission(name, email, message)
        if errors.has_errors():
            self._log_outcome(client_id, SubmissionOutcome.INVALID)
            return ContactFormResponse(
                success=False,
                message=INVALID_MESSAGE,
                field_errors=errors,
            )

        try:
            await self.dispatch(name, email, message)
        except MailTimeoutError as e:
            logger.error(f"Contact email timed out for client {client_id}: {str(e)}", exc_info=True)
            self._log_outcome(client_id, SubmissionOutcome.FAILED)
            return ContactFormResponse(success=False, message=FAILED_MESSAGE)
        except Exception as e:
            logger.error(f"Email send error for client {client_id}: {str(e)}", exc_info=True)
            self._log_outcome(client_id, SubmissionOutcome.FAILED)
            return ContactFormResponse(success=False, message=FAILED_MESSAGE)

        self._log_outcome(client_id, SubmissionOutcome.SENT)
        return ContactFormResponse(success=True, message=SENT_MESSAGE)

    async def dispatch(self, name: str, email: str, message: str) -> dict:
        """Send the owner notification for an already sanitized submission."""
        # Fields are escaped by sanitize_input; Markup stops Jinja escaping them again
        context = {
            "name": Markup(name),
            "email": Markup(email),
            "message": Markup(message),
            "submission_time": format_submission_time(),
        }
        return await self.mail_service.send_email(
            recipient=self.recipient,
            # headers cannot carry line breaks
            subject=f"New Portfolio Message from {' '.join(name.split())}",
            template_name=NOTIFICATION_TEMPLATE,
            context=context,
            reply_to=email,
        )

    def _log_outcome(self, client_id: str, outcome: SubmissionOutcome) -> None:
        if outcome == SubmissionOutcome.SENT:
            logger.info(f"Contact submission from client {client_id}: {outcome.value}")
        else:
            logger.warning(f"Contact submission from client {client_id}: {outcome.value}")
