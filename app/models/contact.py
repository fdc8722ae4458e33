"""Contact form models for the portfolio contact API.

This module contains the Pydantic models for contact form functionality.
"""

from enum import Enum
from typing import Any, Optional
from typing_extensions import Annotated
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


FormText = Annotated[str, BeforeValidator(_coerce_text)]


class SubmissionOutcome(str, Enum):
    SENT = "sent"
    RATE_LIMITED = "rate_limited"
    INVALID = "invalid"
    FAILED = "failed"


class ContactFormRequest(BaseModel):
    """Request model for contact form submissions.

    Fields are deliberately unconstrained so that short or missing values
    reach the contact service and come back as field errors.

    Attributes:
        client_id: Opaque browser-generated token used to bucket rate limits
        name: Name of the person getting in touch
        email: Address to reply to
        message: The message body
    """
    client_id: Annotated[FormText, Field("", alias="_clientId", description="Opaque client token used for rate limiting")]
    name: Annotated[FormText, Field("", description="Name of the sender")]
    email: Annotated[FormText, Field("", description="Email address for the reply")]
    message: Annotated[FormText, Field("", description="The message text")]

    model_config = ConfigDict(populate_by_name=True)


class FieldErrors(BaseModel):
    """Per-field validation messages.

    Attributes:
        name: Error for the name field
        email: Error for the email field
        message_text: Error for the message field
    """
    name: Optional[str] = None
    email: Optional[str] = None
    message_text: Optional[str] = Field(None, alias="messageText")

    model_config = ConfigDict(populate_by_name=True)

    def has_errors(self) -> bool:
        return any(value is not None for value in (self.name, self.email, self.message_text))


class ContactFormResponse(BaseModel):
    """Response model for contact form submissions.

    Attributes:
        success: Whether the message was sent
        message: Outcome text shown to the visitor
        field_errors: Validation messages keyed by field, only on validation failure
    """
    success: bool = Field(..., description="Whether the message was sent")
    message: str = Field(..., description="Outcome text shown to the visitor")
    field_errors: Optional[FieldErrors] = Field(None, alias="fieldErrors", description="Validation messages keyed by field")

    model_config = ConfigDict(populate_by_name=True)
