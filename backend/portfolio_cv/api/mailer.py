"""
邮件发送 - SMTP(SSL) 转发联系表单

依赖：
- smtplib / email: 标准库SMTP客户端与MIME构建
"""

from __future__ import annotations

import html
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from ..config.runtime_config import MailSettings
from ..interfaces import ConfigurationError, IMailTransport, TransportError
from ..models import ContactMessage

logger = logging.getLogger(__name__)

RULE = "─" * 48


def build_email(settings: MailSettings, message: ContactMessage) -> EmailMessage:
    """构建邮件（纯文本+HTML，访客地址作为 Reply-To）"""
    if not settings.configured:
        raise ConfigurationError("GMAIL_USER / GMAIL_APP_PASSWORD 未配置")

    email = EmailMessage()
    email["From"] = formataddr(("Portfolio Contact", settings.user))
    email["Reply-To"] = formataddr((message.name, message.email))
    email["To"] = settings.user
    email["Subject"] = f"Portfolio Inquiry from {message.name}"

    email.set_content("\n".join([
        "New message from your portfolio contact form",
        RULE,
        "",
        f"Name:    {message.name}",
        f"Email:   {message.email}",
        "",
        "Message:",
        message.message,
        "",
        RULE,
        f"Reply directly to this email to respond to {message.name}.",
    ]))

    name = html.escape(message.name)
    address = html.escape(message.email)
    body = html.escape(message.message)
    email.add_alternative(
        f"""\
<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto; background: #0b0f17; color: #e5e7eb;">
  <h2 style="color: #fff;">New Portfolio Message</h2>
  <p><strong>Name:</strong> {name}</p>
  <p><strong>Email:</strong> <a href="mailto:{address}" style="color: #00d4ff;">{address}</a></p>
  <p style="white-space: pre-wrap;">{body}</p>
  <p style="color: #6b7280; font-size: 12px;">Reply directly to this email to respond to {name}</p>
</div>
""",
        subtype="html",
    )
    return email


class SMTPMailTransport(IMailTransport):
    """SMTP发送实现"""

    def __init__(self, settings: MailSettings, timeout: float = 20.0):
        self.settings = settings
        self.timeout = timeout

    def send(self, message: ContactMessage) -> None:
        email = build_email(self.settings, message)
        try:
            with smtplib.SMTP_SSL(
                self.settings.smtp_host, self.settings.smtp_port, timeout=self.timeout
            ) as smtp:
                smtp.login(self.settings.user, self.settings.app_password)
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as e:
            raise TransportError(f"邮件发送失败: {e}") from e
        logger.info(f"联系表单已转发: {message.email}")
