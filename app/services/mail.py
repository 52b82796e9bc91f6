"""Outbound mail over SMTP."""

import logging
import smtplib
import ssl
from email.message import EmailMessage

from jinja2 import Template

from app.config import Settings, get_settings
from app.errors import UnexpectedError

logger = logging.getLogger("authkeeper.mail")

RESET_PASSWORD_SUBJECT = "Reset your password"

RESET_PASSWORD_TEMPLATE = Template(
    """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ subject }}</title>
  <style>
    body { font-family: Arial, sans-serif; background-color: #f4f4f4; margin: 0; padding: 0; color: #333333; }
    .container { max-width: 600px; margin: 20px auto; background-color: #ffffff; padding: 20px; border-radius: 8px; }
    .header { text-align: center; margin-bottom: 20px; }
    .content { line-height: 1.6; }
    .button { display: block; text-align: center; margin: 20px 0; }
    .button a { text-decoration: none; background-color: #1abc9c; color: #ffffff; padding: 12px 20px;
                border-radius: 5px; font-size: 16px; font-weight: bold; }
    .footer { text-align: center; font-size: 12px; color: #888888; margin-top: 20px; }
    .text-wrap { word-wrap: break-word; }
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h1>{{ app_name }}</h1><h1>{{ subject }}</h1></div>
    <div class="content">
      <p>Hello{% if name %}, {{ name }}{% endif %}!</p>
      <p>We received a request to reset the password for your account. If you did not make this request,
         you can ignore this email.</p>
      <p>Click the button below to choose a new password. The link expires in one hour.</p>
      <div class="button"><a href="{{ reset_url }}" target="_blank">Reset password</a></div>
      <p>Thanks,<br>The {{ app_name }} team</p>
    </div>
    <div class="footer">
      <p>If the button does not work, copy and paste this link into your browser:</p>
      <p class="text-wrap">{{ reset_url }}</p>
    </div>
  </div>
</body>
</html>
""",
    autoescape=True,
)


class MailDeliveryError(UnexpectedError):
    default_detail = "Could not send email"


class MailSender:
    """Sends HTML mail through the configured SMTP server.

    With no MAIL_HOST configured the sender only logs, which keeps local
    development usable without an SMTP account.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def enabled(self) -> bool:
        return bool(self.settings.MAIL_HOST)

    def _ssl_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if not self.settings.MAIL_TLS:
            # Test servers with self-signed certificates only
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def _connect(self) -> smtplib.SMTP:
        s = self.settings
        if s.MAIL_SECURE:
            return smtplib.SMTP_SSL(s.MAIL_HOST, s.MAIL_PORT, context=self._ssl_context(), timeout=30)
        client = smtplib.SMTP(s.MAIL_HOST, s.MAIL_PORT, timeout=30)
        try:
            client.starttls(context=self._ssl_context())
        except (smtplib.SMTPException, OSError):
            client.close()
            raise
        return client

    def send(self, to: str, subject: str, html: str) -> None:
        """Send one HTML message. Raises MailDeliveryError on any transport failure."""
        if not self.enabled:
            logger.warning("Mail transport not configured; not sending '%s' to %s", subject, to)
            return

        message = EmailMessage()
        message["From"] = f'"{self.settings.MAIL_FROM_NAME}" <{self.settings.MAIL_USER}>'
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html, subtype="html")

        try:
            with self._connect() as client:
                if self.settings.MAIL_USER:
                    client.login(self.settings.MAIL_USER, self.settings.MAIL_PASSWORD)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send '%s' to %s: %s", subject, to, e)
            raise MailDeliveryError() from e

    def send_reset_password_email(self, to: str, reset_url: str, name: str | None = None) -> None:
        """Render and send the password reset message."""
        if not self.enabled:
            # The link is a live credential; only print it on a developer machine.
            if self.settings.APP_ENV == "development":
                logger.info("PASSWORD RESET for %s: %s", to, reset_url)
            else:
                logger.warning("Mail transport not configured; password reset email for %s not sent", to)
            return
        html = RESET_PASSWORD_TEMPLATE.render(
            subject=RESET_PASSWORD_SUBJECT,
            app_name=self.settings.MAIL_FROM_NAME,
            name=name,
            reset_url=reset_url,
        )
        self.send(to, RESET_PASSWORD_SUBJECT, html)


_mail_sender: MailSender | None = None


def get_mail_sender() -> MailSender:
    """Get singleton mail sender instance."""
    global _mail_sender
    if _mail_sender is None:
        _mail_sender = MailSender()
    return _mail_sender
