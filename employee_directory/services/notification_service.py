"""Notification dispatching helpers."""
from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import getaddresses
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from employee_directory.exceptions import NotificationError


logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
RECIPIENT_DELIMITER = ","


def parse_recipients(to: str | Iterable[str]) -> list[str]:
    """Split a delimiter-joined address list, rejecting malformed entries."""

    raw = to if isinstance(to, str) else RECIPIENT_DELIMITER.join(to)
    parsed = getaddresses([raw])
    addresses = [address for _, address in parsed]
    if not addresses or any("@" not in address or address.startswith("@") for address in addresses):
        raise NotificationError(f"Malformed recipient list: {raw!r}")
    return addresses


class NotificationService:
    """Render Jinja2 email templates and deliver them over SMTP."""

    def __init__(
        self,
        sender: str,
        smtp_host: str = "localhost",
        smtp_port: int = 25,
        *,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = False,
        timeout: float = 10.0,
        templates_dir: Path = TEMPLATES_DIR,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        self.sender = sender
        self._smtp_host = smtp_host
        self._smtp_port = smtp_port
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout
        self._smtp_factory = smtp_factory
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def render(self, template_id: str, variables: Mapping[str, Any]) -> str:
        """Render ``template_id`` with ``variables``."""
        try:
            return self._env.get_template(template_id).render(**variables)
        except TemplateError as err:
            raise NotificationError(f"Could not render template {template_id}: {err}") from err

    def send(
        self,
        to: str | Iterable[str],
        subject: str,
        template_id: str,
        variables: Mapping[str, Any],
    ) -> None:
        """
        Render and deliver one HTML email.

        Args:
            to: Recipient addresses, either a list or joined with ``,``
            subject: Subject line
            template_id: Template file name under the templates directory
            variables: Template context

        Raises:
            NotificationError: Malformed address, render failure or SMTP failure
        """
        recipients = parse_recipients(to)
        body = self.render(template_id, variables)

        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(body, subtype="html")

        try:
            with self._smtp_factory(self._smtp_host, self._smtp_port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as err:
            raise NotificationError(f"SMTP delivery to {len(recipients)} recipient(s) failed: {err}") from err

        logger.info("Sent '%s' to %d recipient(s)", subject, len(recipients))
