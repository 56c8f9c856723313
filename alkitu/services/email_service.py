"""
Alkitu Site - Email Service
Handles outbound email via SendGrid or SMTP
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional

from flask import current_app
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To, Cc, Bcc, ReplyTo

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when a configured transport rejects a message"""


class EmailService:
    """Email delivery service; settings read from the app config at send time"""

    @property
    def enabled(self) -> bool:
        return bool(current_app.config.get('EMAIL_ENABLED', True))

    @property
    def sendgrid_key(self):
        return current_app.config.get('SENDGRID_API_KEY')

    @property
    def from_email(self):
        return current_app.config.get('EMAIL_FROM', 'info@alkitu.com')

    @property
    def from_name(self):
        return current_app.config.get('EMAIL_FROM_NAME', 'Alkitu')

    @property
    def smtp_host(self):
        return current_app.config.get('SMTP_HOST', 'smtp.gmail.com')

    @property
    def smtp_port(self):
        return int(current_app.config.get('SMTP_PORT', 587))

    @property
    def smtp_user(self):
        return current_app.config.get('SMTP_USER')

    @property
    def smtp_pass(self):
        return current_app.config.get('SMTP_PASS')

    @property
    def use_sendgrid(self):
        return bool(self.sendgrid_key)

    def is_configured(self) -> bool:
        return self.enabled and (self.use_sendgrid or bool(self.smtp_user and self.smtp_pass))

    def send_email(self, to: List[str], subject: str, html: str,
                   cc: Optional[List[str]] = None, bcc: Optional[List[str]] = None,
                   reply_to: Optional[str] = None, from_email: Optional[str] = None) -> bool:
        """
        Send an HTML email.

        Returns False when no transport is configured; raises
        EmailDeliveryError when the transport fails.
        """
        if isinstance(to, str):
            to = [to]
        if not to:
            logger.warning(f"No recipients for email: {subject}")
            return False

        if not self.is_configured():
            logger.warning(f"Email not configured. Would send to {', '.join(to)}: {subject}")
            return False

        try:
            if self.use_sendgrid:
                self._send_sendgrid(to, subject, html, cc or [], bcc or [], reply_to, from_email)
            else:
                self._send_smtp(to, subject, html, cc or [], bcc or [], reply_to, from_email)
        except EmailDeliveryError:
            raise
        except Exception as e:
            raise EmailDeliveryError(str(e)) from e

        logger.info(f"Email sent to {', '.join(to)}: {subject}")
        return True

    def _send_sendgrid(self, to, subject, html, cc, bcc, reply_to, from_email):
        """Send via SendGrid"""
        message = Mail(
            from_email=Email(from_email or self.from_email, self.from_name),
            to_emails=[To(addr) for addr in to],
            subject=subject,
            html_content=html
        )
        for addr in cc:
            message.add_cc(Cc(addr))
        for addr in bcc:
            message.add_bcc(Bcc(addr))
        if reply_to:
            message.reply_to = ReplyTo(reply_to)

        sg = SendGridAPIClient(self.sendgrid_key)
        response = sg.send(message)

        if response.status_code not in (200, 201, 202):
            raise EmailDeliveryError(f"SendGrid error: {response.status_code}")

    def _send_smtp(self, to, subject, html, cc, bcc, reply_to, from_email):
        """Send via SMTP"""
        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = f"{self.from_name} <{from_email or self.from_email}>"
        msg['To'] = ', '.join(to)
        if cc:
            msg['Cc'] = ', '.join(cc)
        if reply_to:
            msg['Reply-To'] = reply_to
        msg.attach(MIMEText(html, 'html'))

        with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
            server.starttls()
            server.login(self.smtp_user, self.smtp_pass)
            server.send_message(msg, to_addrs=list(to) + list(cc) + list(bcc))


email_service = EmailService()
