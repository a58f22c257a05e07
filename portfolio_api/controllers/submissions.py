# controllers/submissions.py
import logging

from fastapi import APIRouter, Depends

from ..config import Settings, get_settings
from ..dependencies import get_listing_service
from ..exceptions import UpstreamFailure
from ..services.submissions import SubmissionService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/submissions", summary="List contact-form submissions")
def list_submissions(
    service: SubmissionService = Depends(get_listing_service),
    settings: Settings = Depends(get_settings),
):
    """All submissions, newest first."""
    try:
        submissions = service.list_submissions()
    except Exception as exc:
        logger.error(f"Failed to retrieve submissions: {exc}", exc_info=True)
        raise UpstreamFailure(
            "Failed to retrieve submissions",
            details=str(exc) if settings.development else None,
        )

    return {"submissions": submissions, "count": len(submissions)}
