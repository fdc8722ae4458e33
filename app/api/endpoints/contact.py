"""Contact form endpoints for the portfolio contact API.

This module contains the FastAPI route that accepts contact form submissions
and emails them to the site owner.
"""

import logging
from fastapi import APIRouter, Depends, Request, status

from app.models.contact import ContactFormRequest, ContactFormResponse
from app.services.contact_service import ContactService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_contact_service(request: Request) -> ContactService:
    """Return the contact service built for this application's lifespan."""
    return request.app.state.contact_service


@router.post(
    "/submit",
    response_model=ContactFormResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Submit contact form",
    description="Send a message to the portfolio owner. No authentication required; limited per client id.",
)
async def submit_contact_form(
    request: ContactFormRequest,
    contact_service: ContactService = Depends(get_contact_service),
) -> ContactFormResponse:
    """
    Submit a contact form message to the site owner.

    This endpoint:
    - Limits submissions per client id
    - Escapes markup characters and validates each field
    - Emails the owner with the visitor's address as Reply-To

    Failures come back in the body with ``success`` set to false; the
    status code is 200 either way.

    Args:
        request: Contact form data including the client id, name, email and message
        contact_service: Pipeline injected from the application state

    Returns:
        Outcome message, with per-field errors when validation failed
    """
    logger.info(f"Processing contact form submission from client {request.client_id or 'unknown'}")
    return await contact_service.submit(request)
