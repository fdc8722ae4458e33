import pytest
from fastapi.testclient import TestClient
from app.main import app
from app.api.endpoints.contact import get_contact_service
from app.tests.fixtures.contact import *


@pytest.fixture(scope="function")
def client(contact_service):
    """Fixture providing a TestClient whose contact service uses mocked mail."""
    app.dependency_overrides[get_contact_service] = lambda: contact_service

    with TestClient(app) as c:
        yield c

    # Clean up overrides after the test finished
    app.dependency_overrides.clear()
