"""Public workflow entry-link API schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from app.application.dtos.workflow import EntryCodeIssued, EntryResolution

CODE_SENT_MESSAGE = "Verification code sent to your email"


class EntryVerifyRequest(BaseModel):
    """Ask for a verification code on a workflow entry link."""

    email: EmailStr


class EntryVerifyResponse(BaseModel):
    """A code was mailed; it is valid until expires_at."""

    success: bool = True
    message: str = CODE_SENT_MESSAGE
    expires_at: datetime

    @classmethod
    def from_issued(cls, issued: EntryCodeIssued) -> EntryVerifyResponse:
        return cls(expires_at=issued.expires_at)


class EntryAccessRequest(BaseModel):
    """Access form submitted on a workflow entry link: email plus the mailed code."""

    email: EmailStr
    code: str = Field(..., min_length=1, max_length=32, description="Code from the verification email")


class EntryAccessResponse(BaseModel):
    """Link the visitor should be shown next.

    link_id is the routed target on a match, otherwise the entry link itself.
    """

    workflow_id: str
    matched: bool
    link_id: str
    link_type: str
    url: str
    document_id: str | None = None
    dataroom_id: str | None = None

    @classmethod
    def from_resolution(cls, resolution: EntryResolution) -> EntryAccessResponse:
        link = resolution.link
        return cls(
            workflow_id=resolution.workflow_id,
            matched=resolution.matched,
            link_id=link.id,
            link_type=link.link_type.value,
            url=resolution.url,
            document_id=link.document_id,
            dataroom_id=link.dataroom_id,
        )
