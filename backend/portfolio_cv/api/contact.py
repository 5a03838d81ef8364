"""
联系表单转发接口 - POST /api/send-email

职责：
1. CORS：允许任意来源，仅支持 POST（含 OPTIONS 预检）
2. 校验 name/email/message，错误原因合并为一条可读信息（400）
3. 邮件服务未配置 → 500，不尝试发送
4. 发送失败只在服务端记日志，对外返回通用信息（500）

使用方式：
    uvicorn portfolio_cv.api.contact:app --host 0.0.0.0 --port 8000

测试要点：
- test_preflight: OPTIONS 返回 204 + CORS 头
- test_method_not_allowed: 非 POST 返回 405
- test_validation_errors_joined: 三项错误合并返回 400
- test_missing_credentials: 未配置返回 500 且不发送
- test_transport_failure: 发送失败返回通用 500
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from .. import __version__
from ..config.runtime_config import MailSettings, get_config
from ..interfaces import ContactValidationError, IMailTransport
from ..models import ContactMessage
from .mailer import SMTPMailTransport

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_NAME_LENGTH = 2
MIN_MESSAGE_LENGTH = 10


def validate_contact(payload: Any) -> ContactMessage:
    """
    校验联系表单

    Raises:
        ContactValidationError: 携带全部错误原因
    """
    data = payload if isinstance(payload, dict) else {}
    name = data.get("name")
    email = data.get("email")
    message = data.get("message")

    reasons = []
    if not isinstance(name, str) or len(name.strip()) < MIN_NAME_LENGTH:
        reasons.append("Name must be at least 2 characters")
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email.strip()):
        reasons.append("A valid email address is required")
    if not isinstance(message, str) or len(message.strip()) < MIN_MESSAGE_LENGTH:
        reasons.append("Message must be at least 10 characters")

    if reasons:
        raise ContactValidationError(reasons)
    return ContactMessage(name=name.strip(), email=email.strip(), message=message.strip())


def get_mail_settings() -> MailSettings:
    """邮件配置（从环境变量读取）"""
    return MailSettings()


def get_mail_transport(settings: MailSettings = Depends(get_mail_settings)) -> IMailTransport:
    """邮件发送器"""
    return SMTPMailTransport(settings, timeout=get_config().timeouts.smtp_sec)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=CORS_HEADERS)


app = FastAPI(title="Portfolio Contact Relay", version=__version__)


@app.options("/api/send-email")
async def send_email_preflight() -> Response:
    """CORS 预检"""
    return Response(status_code=204, headers=CORS_HEADERS)


@app.api_route("/api/send-email", methods=["GET", "PUT", "PATCH", "DELETE"])
async def send_email_method_not_allowed() -> JSONResponse:
    return _error(405, "Method not allowed")


@app.post("/api/send-email")
async def send_email(
    request: Request,
    settings: MailSettings = Depends(get_mail_settings),
    transport: IMailTransport = Depends(get_mail_transport),
) -> JSONResponse:
    """校验并转发联系表单"""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = {}

    try:
        message = validate_contact(payload)
    except ContactValidationError as e:
        return _error(400, str(e))

    if not settings.configured:
        logger.error("缺少 GMAIL_USER 或 GMAIL_APP_PASSWORD 环境变量")
        return _error(500, "Email service is not configured")

    try:
        await asyncio.to_thread(transport.send, message)
    except Exception:
        logger.exception("联系表单邮件发送失败")
        return _error(500, "Failed to send email. Please try again later.")

    return JSONResponse(
        {"success": True, "message": "Email sent successfully"},
        status_code=200,
        headers=CORS_HEADERS,
    )
