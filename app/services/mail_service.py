"""
MailService Module

This module provides email sending capabilities over SMTP with template rendering using Jinja2.
"""

import asyncio
import os
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from jinja2 import Environment, FileSystemLoader, select_autoescape
from app.core.config import settings
from typing import Dict, Any, Optional

import logging

logger = logging.getLogger(__name__)

# Set up Jinja2 environment with proper auto-escaping and template inheritance
template_dir = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
jinja_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(['html', 'xml']),
    enable_async=True
)


class MailServiceError(Exception):
    """Raised when a message could not be handed to the mail server."""

    pass


class MailTimeoutError(MailServiceError):
    """Raised when the mail server did not answer within the send timeout."""

    pass


class MailService:
    """Mail service with template rendering capabilities."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        use_ssl: Optional[bool] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender_name: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.host = host if host is not None else settings.SMTP_HOST
        self.port = port if port is not None else settings.SMTP_PORT
        self.use_ssl = use_ssl if use_ssl is not None else settings.SMTP_SECURE
        self.username = username if username is not None else settings.SMTP_USER
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.sender_name = sender_name if sender_name is not None else settings.EMAIL_SENDER_NAME
        self.timeout = timeout if timeout is not None else settings.MAIL_SEND_TIMEOUT

    async def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Asynchronously render a Jinja template with the given context.

        Args:
            template_name: The name of the template file to render
            context: Dictionary of variables to pass to the template

        Returns:
            The rendered template as a string
        """
        try:
            template = jinja_env.get_template(template_name)
            return await template.render_async(**context)
        except Exception as e:
            logger.error(f"Error rendering template {template_name}: {str(e)}")
            raise MailServiceError(f"Error rendering template: {str(e)}") from e

    async def send_email(
        self,
        recipient: Optional[str],
        subject: str,
        template_name: str,
        context: Dict[str, Any],
        reply_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send an email built from a pair of Jinja templates.

        ``template_name`` is the base name: ``<name>.html`` provides the HTML
        part and ``<name>.txt`` the plain text part. The SMTP exchange runs in
        a worker thread and is abandoned after ``self.timeout`` seconds.

        Args:
            recipient: Email address of the recipient
            subject: Email subject line
            template_name: Base name of the templates to use
            context: Dictionary of variables to pass to the templates
            reply_to: Optional Reply-To address

        Returns:
            Dictionary containing the status and message id

        Raises:
            MailTimeoutError: If the mail server did not answer in time
            MailServiceError: If the message could not be rendered or sent
        """
        if not recipient:
            raise MailServiceError("No recipient address configured")

        html_content = await self.render_template(f"{template_name}.html", context)
        text_content = await self.render_template(f"{template_name}.txt", context)

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    self.send_mail,
                    recipients=[recipient],
                    title=subject,
                    text=text_content,
                    body=html_content,
                    reply_to=reply_to,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise MailTimeoutError(
                f"Mail server {self.host}:{self.port} did not respond within {self.timeout}s"
            ) from e

        logger.info(f"Email sent successfully to {recipient}")
        return response

    def create_email_multipart_message(
        self,
        sender: str,
        sender_name: Optional[str],
        recipients: list,
        title: str,
        text: str = None,
        body: str = None,
        reply_to: str = None,
    ) -> MIMEMultipart:
        """
        Creates a MIME multipart email message with optional plain text and HTML content.

        The message is ``multipart/alternative`` when both ``text`` and ``body``
        are given, otherwise ``multipart/mixed``.

        Args:
            sender (str): The sender's email address.
            sender_name (str, optional): Display name of the sender.
            recipients (list): List of primary recipient email addresses.
            title (str): Subject of the email.
            text (str, optional): Plain text version of the email body.
            body (str, optional): HTML version of the email body.
            reply_to (str, optional): Address replies should go to.

        Returns:
            MIMEMultipart: The constructed email message ready to be sent.
        """
        if text and body:
            content_subtype = "alternative"
        else:
            content_subtype = "mixed"

        message = MIMEMultipart(content_subtype)
        message["Subject"] = title

        if sender_name is None:
            message["From"] = f"{sender}"
        else:
            message["From"] = formataddr((sender_name, sender))

        message["To"] = ", ".join(recipients)
        message["Message-ID"] = make_msgid()

        if reply_to:
            message["Reply-To"] = reply_to

        # Plain text first so clients prefer the HTML part
        if text:
            message.attach(MIMEText(text, "plain", "utf-8"))

        if body:
            message.attach(MIMEText(body, "html", "utf-8"))

        return message

    def send_mail(
        self,
        recipients: list,
        title: str,
        text: str = None,
        body: str = None,
        reply_to: str = None,
    ) -> dict:
        """
        Sends an email over SMTP. Blocking; one attempt, no retry.

        Args:
            recipients (list): List of recipient email addresses.
            title (str): Subject line of the email.
            text (str, optional): Plain text version of the email body.
            body (str, optional): HTML version of the email body.
            reply_to (str, optional): Address replies should go to.

        Returns:
            dict: Status, message and the Message-ID of the sent email.

        Raises:
            MailServiceError: On configuration, connection, auth or protocol failure.
        """
        if not self.host:
            raise MailServiceError("SMTP host is not configured")

        sender = self.username or f"no-reply@{self.host}"
        msg = self.create_email_multipart_message(
            sender, self.sender_name, recipients, title, text, body, reply_to
        )

        try:
            with self._open_connection() as server:
                if not self.use_ssl:
                    server.ehlo()
                    if server.has_extn("starttls"):
                        server.starttls(context=ssl.create_default_context())
                        server.ehlo()
                if self.username:
                    server.login(self.username, self.password or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise MailServiceError(f"Failed to send mail via {self.host}:{self.port}: {str(e)}") from e

        return {
            "status": True,
            "message": "Email Successfully Sent.",
            "message_id": msg["Message-ID"],
        }

    def _open_connection(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(
                self.host,
                self.port,
                timeout=self.timeout,
                context=ssl.create_default_context(),
            )
        return smtplib.SMTP(self.host, self.port, timeout=self.timeout)
