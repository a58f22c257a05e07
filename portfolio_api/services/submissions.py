# services/submissions.py
"""Contact-form submission workflow and the submissions listing."""

import logging
import uuid
from typing import Any, Callable, Dict, List, Optional

from ..aws import scan_all
from ..config import Settings
from ..exceptions import ValidationError
from ..models import Submission, DEFAULT_SERVICE
from ..rate_limit import now_ms
from ..schemas.submission import SubmissionRequest
from ..validation import REQUIRED_SUBMISSION_FIELDS, missing_required_fields, validate_email
from .email import Mailer, send_submission_emails
from .idempotency import IdempotencyCache
from .storage import ResumeStorage

logger = logging.getLogger(__name__)


def check_submission(request: SubmissionRequest) -> None:
    """Required fields first, then the email shape. Raises ValidationError."""
    if missing_required_fields(request.model_dump()):
        raise ValidationError(f"Missing required fields: {', '.join(REQUIRED_SUBMISSION_FIELDS)}")

    if not validate_email(request.email):
        raise ValidationError("Invalid email address")


class SubmissionService:
    """Validates, stores and announces contact-form submissions."""

    def __init__(
        self,
        table,
        storage: ResumeStorage,
        mailer: Mailer,
        settings: Settings,
        idempotency: Optional[IdempotencyCache] = None,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.table = table
        self.storage = storage
        self.mailer = mailer
        self.settings = settings
        self.idempotency = idempotency
        self.clock = clock
        self.id_factory = id_factory

    def submit(self, request: SubmissionRequest, client_id: str) -> str:
        """Run the submission workflow and return the new submission id."""
        # 1. Validate
        check_submission(request)

        # 2. Replayed request?
        if request.idempotency_key and self.idempotency is not None:
            previous = self.idempotency.get(request.idempotency_key)
            if previous:
                logger.info(f"Duplicate submission suppressed, returning {previous}")
                return previous

        # 3. Identity
        submission_id = self.id_factory()
        timestamp = self.clock()

        # 4. Optional resume; failure here never blocks the submission
        resume_url = None
        resume_file_name = None
        if request.resume_file and request.resume_file_name:
            try:
                resume_url = self.storage.upload_resume(
                    submission_id, request.resume_file, request.resume_file_name, timestamp
                )
                resume_file_name = request.resume_file_name
            except Exception as exc:
                logger.warning(f"Resume upload failed for {submission_id}: {exc}", exc_info=True)

        # 5. Persist
        submission = Submission(
            id=submission_id,
            name=request.name,
            email=request.email,
            message=request.message,
            phone=request.phone or "",
            company=request.company or "",
            service=request.service or DEFAULT_SERVICE,
            timeline=request.timeline or "",
            ipAddress=client_id,
            createdAt=timestamp,
            updatedAt=timestamp,
            resumeUrl=resume_url,
            resumeFileName=resume_file_name,
        )
        self.table.put_item(Item=submission.to_item())
        logger.info(f"Stored submission {submission_id}")

        # 6. Notify operator and submitter
        try:
            send_submission_emails(
                self.mailer,
                submission,
                self.settings.from_email,
                self.settings.to_email,
                self.settings.site_name,
            )
        except Exception as exc:
            if self.settings.email_failure_policy != "ignore":
                raise
            logger.error(f"Email delivery failed for stored submission {submission_id}: {exc}", exc_info=True)

        # 7. Remember the key for replays
        if request.idempotency_key and self.idempotency is not None:
            self.idempotency.remember(request.idempotency_key, submission_id)

        return submission_id

    def list_submissions(self) -> List[Dict[str, Any]]:
        """Every submission, newest first."""
        submissions = scan_all(self.table)
        return sorted(submissions, key=lambda item: item.get("createdAt", 0), reverse=True)
