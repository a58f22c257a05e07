# controllers/contact.py
"""Public contact-form endpoint."""

import json
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as SchemaError
from starlette.concurrency import run_in_threadpool

from ..dependencies import enforce_rate_limit, get_submission_service
from ..exceptions import UpstreamFailure, ValidationError
from ..schemas.submission import SubmissionRequest, SubmissionResponse
from ..services.submissions import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter()

FAILURE_MESSAGE = "Failed to process submission"


@router.post("/submit", response_model=SubmissionResponse, summary="Submit the contact form")
@router.post("/contact", response_model=SubmissionResponse, include_in_schema=False)
async def submit(
    request: Request,
    client_id: str = Depends(enforce_rate_limit),
    service: SubmissionService = Depends(get_submission_service),
):
    """Rate-limit, validate, store and announce a contact-form submission."""
    # The body is read by hand so the rate limit is checked before it is parsed
    try:
        data = json.loads(await request.body())
    except ValueError as exc:
        logger.error(f"Unreadable submission body from {client_id}: {exc}")
        raise UpstreamFailure(FAILURE_MESSAGE)

    try:
        payload = SubmissionRequest.model_validate(data)
    except SchemaError:
        raise ValidationError("Invalid request body")

    try:
        submission_id = await run_in_threadpool(service.submit, payload, client_id)
    except ValidationError:
        raise
    except Exception as exc:
        logger.error(f"Submission from {client_id} failed: {exc}", exc_info=True)
        raise UpstreamFailure(FAILURE_MESSAGE)

    return {"message": "Form submitted successfully", "submissionId": submission_id}
