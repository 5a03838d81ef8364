"""
联系表单接口单元测试（FastAPI TestClient）
"""

from email.message import EmailMessage

import pytest
from fastapi.testclient import TestClient

from portfolio_cv.api import app, build_email, validate_contact
from portfolio_cv.api.contact import get_mail_settings, get_mail_transport
from portfolio_cv.config import MailSettings
from portfolio_cv.interfaces import (
    ConfigurationError,
    ContactValidationError,
    IMailTransport,
    TransportError,
)
from portfolio_cv.models import ContactMessage

URL = "/api/send-email"
VALID = {"name": "Ada Example", "email": "ada@example.com", "message": "Hello, I'd like to talk."}


class RecordingTransport(IMailTransport):
    def __init__(self):
        self.sent: list[ContactMessage] = []

    def send(self, message: ContactMessage) -> None:
        self.sent.append(message)


class BrokenTransport(IMailTransport):
    def send(self, message: ContactMessage) -> None:
        raise TransportError("smtp unreachable")


@pytest.fixture
def configured() -> MailSettings:
    return MailSettings(user="owner@example.com", app_password="app-secret")


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client(configured: MailSettings, transport: RecordingTransport):
    app.dependency_overrides[get_mail_settings] = lambda: configured
    app.dependency_overrides[get_mail_transport] = lambda: transport
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestValidation:
    """字段校验测试"""

    def test_all_reasons_joined(self):
        with pytest.raises(ContactValidationError) as exc:
            validate_contact({"name": "A", "email": "bad-email", "message": "short"})
        assert str(exc.value) == (
            "Name must be at least 2 characters. "
            "A valid email address is required. "
            "Message must be at least 10 characters"
        )
        assert len(exc.value.reasons) == 3

    def test_two_char_name_accepted(self):
        """名字恰好2个字符视为有效"""
        with pytest.raises(ContactValidationError) as exc:
            validate_contact({"name": "Al", "email": "bad-email", "message": "short"})
        assert len(exc.value.reasons) == 2

    def test_fields_trimmed(self):
        message = validate_contact({
            "name": "  Ada  ", "email": " ada@example.com ", "message": "  0123456789  ",
        })
        assert message == ContactMessage(name="Ada", email="ada@example.com",
                                         message="0123456789")

    def test_whitespace_only_rejected(self):
        with pytest.raises(ContactValidationError):
            validate_contact({"name": "   ", "email": "ada@example.com", "message": " " * 20})

    def test_non_string_fields(self):
        with pytest.raises(ContactValidationError) as exc:
            validate_contact({"name": 42, "email": None, "message": ["x"]})
        assert len(exc.value.reasons) == 3


class TestSendEmailEndpoint:
    """POST /api/send-email 测试"""

    def test_success(self, client: TestClient, transport: RecordingTransport):
        response = client.post(URL, json=VALID)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Email sent successfully"}
        assert response.headers["access-control-allow-origin"] == "*"
        assert transport.sent[0].email == "ada@example.com"

    def test_validation_errors_joined(self, client: TestClient, transport: RecordingTransport):
        response = client.post(URL, json={"name": "A", "email": "bad-email", "message": "short"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert "Name must be at least 2 characters" in error
        assert "A valid email address is required" in error
        assert "Message must be at least 10 characters" in error
        assert transport.sent == []

    def test_invalid_json_body(self, client: TestClient):
        response = client.post(URL, content=b"{not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400

    def test_missing_credentials(self, client: TestClient, transport: RecordingTransport):
        """未配置邮件服务：500 且不尝试发送"""
        app.dependency_overrides[get_mail_settings] = lambda: MailSettings(user="", app_password="")

        response = client.post(URL, json=VALID)

        assert response.status_code == 500
        assert response.json() == {"error": "Email service is not configured"}
        assert transport.sent == []

    def test_validation_checked_before_credentials(self, client: TestClient):
        app.dependency_overrides[get_mail_settings] = lambda: MailSettings(user="", app_password="")
        response = client.post(URL, json={})
        assert response.status_code == 400

    def test_transport_failure(self, client: TestClient):
        """发送失败：通用500，不暴露内部细节"""
        app.dependency_overrides[get_mail_transport] = lambda: BrokenTransport()

        response = client.post(URL, json=VALID)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to send email. Please try again later."}


class TestCors:
    """CORS 与方法限制测试"""

    def test_preflight(self, client: TestClient):
        response = client.options(URL)

        assert response.status_code == 204
        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"
        assert response.headers["access-control-allow-headers"] == "Content-Type"

    @pytest.mark.parametrize("method", ["get", "put", "delete", "patch"])
    def test_method_not_allowed(self, client: TestClient, method: str):
        response = getattr(client, method)(URL)

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}
        assert response.headers["access-control-allow-origin"] == "*"


class TestBuildEmail:
    """邮件构建测试"""

    def test_headers_and_bodies(self, configured: MailSettings):
        message = ContactMessage(name="Eve <script>", email="eve@example.com",
                                 message="Hi there, <b>bold</b> claims.")
        email: EmailMessage = build_email(configured, message)

        assert email["To"] == "owner@example.com"
        assert email["Subject"] == "Portfolio Inquiry from Eve <script>"
        assert "Portfolio Contact" in email["From"]
        assert "eve@example.com" in email["Reply-To"]

        html = email.get_body(("html",)).get_content()
        assert "&lt;b&gt;bold&lt;/b&gt;" in html
        assert "<script>" not in html
        plain = email.get_body(("plain",)).get_content()
        assert "Hi there, <b>bold</b> claims." in plain

    def test_requires_credentials(self):
        with pytest.raises(ConfigurationError):
            build_email(MailSettings(user="", app_password=""),
                        ContactMessage(name="Ada", email="a@b.co", message="0123456789"))
