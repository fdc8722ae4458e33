import pytest
from unittest.mock import AsyncMock
from app.services.contact_service import ContactService
from app.services.mail_service import MailService
from app.services.rate_limit_service import RateLimiter
from app.tests.constants.contact import ContactTestConstants


class FakeClock:
    """Manually advanced clock for rate limit tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="function")
def fake_clock():
    """Fixture providing a clock the test moves forward explicitly."""
    return FakeClock()


@pytest.fixture(scope="function")
def rate_limiter(fake_clock):
    """Fixture providing a limiter with the default 3 per 60s policy."""
    return RateLimiter(window_seconds=60, max_requests=3, clock=fake_clock)


@pytest.fixture(scope="function")
def mock_mail_service(mocker):
    """Fixture providing an autospecced MailService with send_email mocked."""
    mock = mocker.create_autospec(MailService, instance=True)
    mock.send_email = AsyncMock(
        return_value=ContactTestConstants.MOCK_SEND_RESPONSE.value
    )
    return mock


@pytest.fixture(scope="function")
def contact_service(rate_limiter, mock_mail_service):
    """Fixture providing a ContactService wired to the mocks above."""
    return ContactService(
        rate_limiter=rate_limiter,
        mail_service=mock_mail_service,
        recipient=ContactTestConstants.MOCK_OWNER_EMAIL.value,
    )


@pytest.fixture(scope="function")
def smtp_mail_service():
    """Fixture providing a MailService pointed at a fake SMTP host."""
    return MailService(
        host="smtp.example.com",
        port=587,
        use_ssl=False,
        username=ContactTestConstants.MOCK_SMTP_USER.value,
        password="secret",
        sender_name="Portfolio Contact",
        timeout=5,
    )


@pytest.fixture(scope="function")
def mock_smtp(mocker):
    """Fixture to patch smtplib.SMTP; returns (class mock, server mock)."""
    smtp_class = mocker.patch("app.services.mail_service.smtplib.SMTP")
    server = smtp_class.return_value.__enter__.return_value
    server.has_extn.return_value = True
    return smtp_class, server


@pytest.fixture(scope="function")
def mock_smtp_ssl(mocker):
    """Fixture to patch smtplib.SMTP_SSL; returns (class mock, server mock)."""
    smtp_class = mocker.patch("app.services.mail_service.smtplib.SMTP_SSL")
    server = smtp_class.return_value.__enter__.return_value
    return smtp_class, server
