from pydantic import BaseModel, Field
from typing import Optional


class SubmissionRequest(BaseModel):
    """Body of POST /submit. Required-field and email checks happen in the service."""

    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    service: Optional[str] = None
    timeline: Optional[str] = None
    resume_file: Optional[str] = Field(default=None, alias="resumeFile")
    resume_file_name: Optional[str] = Field(default=None, alias="resumeFileName")
    idempotency_key: Optional[str] = Field(default=None, alias="idempotencyKey", max_length=128)

    class Config:
        populate_by_name = True
        extra = "ignore"


class SubmissionResponse(BaseModel):
    message: str
    submissionId: str

