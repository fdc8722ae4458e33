import logging
import pytest
from app.core.config import settings
from app.services.mail_service import MailServiceError
from app.tests.constants.contact import (
    ContactTestConstants,
    FAILED_MESSAGE,
    INVALID_MESSAGE,
    MOCK_FIELD_ERRORS,
    RATE_LIMITED_MESSAGE,
    SENT_MESSAGE,
)

SUBMIT_URL = f"{settings.API_V1_STR}/contact/submit"


class TestContactEndpoint:
    def test_root_status(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "online"

    def test_submit_contact_form_success(self, client, mock_mail_service):
        """Integration test for a valid submission being emailed."""
        response = client.post(SUBMIT_URL, json=ContactTestConstants.MOCK_VALID_SUBMISSION.value)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": SENT_MESSAGE}
        mock_mail_service.send_email.assert_awaited_once()

    def test_submit_contact_form_validation_errors(self, client, mock_mail_service):
        response = client.post(SUBMIT_URL, json=ContactTestConstants.MOCK_INVALID_SUBMISSION.value)

        assert response.status_code == 200
        assert response.json() == {
            "success": False,
            "message": INVALID_MESSAGE,
            "fieldErrors": MOCK_FIELD_ERRORS,
        }
        mock_mail_service.send_email.assert_not_awaited()

    def test_submit_contact_form_partial_errors(self, client):
        payload = {**ContactTestConstants.MOCK_VALID_SUBMISSION.value, "email": "jo@x"}

        response = client.post(SUBMIT_URL, json=payload)

        assert response.json()["fieldErrors"] == {"email": "Please enter a valid email address"}

    def test_submit_contact_form_rate_limited(self, client, mock_mail_service):
        for _ in range(3):
            client.post(SUBMIT_URL, json=ContactTestConstants.MOCK_VALID_SUBMISSION.value)

        response = client.post(SUBMIT_URL, json=ContactTestConstants.MOCK_VALID_SUBMISSION.value)

        assert response.status_code == 200
        assert response.json() == {"success": False, "message": RATE_LIMITED_MESSAGE}
        assert mock_mail_service.send_email.await_count == 3

    def test_submit_contact_form_send_failure(self, client, mock_mail_service):
        mock_mail_service.send_email.side_effect = MailServiceError("connection refused by smtp.example.com")

        response = client.post(SUBMIT_URL, json=ContactTestConstants.MOCK_VALID_SUBMISSION.value)

        assert response.status_code == 200
        assert response.json() == {"success": False, "message": FAILED_MESSAGE}

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"_clientId": None, "name": None, "email": None, "message": None},
        ],
    )
    def test_submit_contact_form_missing_fields(self, client, payload):
        response = client.post(SUBMIT_URL, json=payload)

        assert response.status_code == 200
        assert response.json()["fieldErrors"] == MOCK_FIELD_ERRORS

    def test_submit_contact_form_accepts_field_name(self, client, rate_limiter):
        payload = {
            "client_id": "by-name",
            "name": "Jo",
            "email": "jo@x.com",
            "message": "Hello there, this works",
        }

        response = client.post(SUBMIT_URL, json=payload)

        assert response.json()["success"] is True
        assert rate_limiter.get_record("by-name").count == 1

    def test_submit_contact_form_logs_client(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="app.api.endpoints.contact"):
            client.post(SUBMIT_URL, json=ContactTestConstants.MOCK_VALID_SUBMISSION.value)

        assert "Processing contact form submission from client abc" in caplog.text
