"""
接口层 - 联系表单转发（FastAPI）

子模块：
- contact: 路由与校验
- mailer: SMTP 发送
"""

from .contact import app, validate_contact
from .mailer import SMTPMailTransport, build_email

__all__ = [
    "app",
    "validate_contact",
    "SMTPMailTransport",
    "build_email",
]
