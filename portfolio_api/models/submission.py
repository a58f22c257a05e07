# models/submission.py
"""Contact-form submission record as stored in DynamoDB."""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

DEFAULT_SERVICE = "General Inquiry"


@dataclass
class Submission:
    """One accepted contact-form submission. Written once; status is changed by admin tooling."""

    id: str
    name: str
    email: str
    message: str
    ipAddress: str
    createdAt: int
    updatedAt: int
    phone: str = ""
    company: str = ""
    service: str = DEFAULT_SERVICE
    timeline: str = ""
    status: str = "new"  # new, read, replied, archived
    resumeUrl: Optional[str] = None
    resumeFileName: Optional[str] = None

    def to_item(self) -> Dict[str, Any]:
        """DynamoDB item; resume attributes are left out when no upload succeeded."""
        item = asdict(self)
        if not self.resumeUrl:
            item.pop("resumeUrl")
            item.pop("resumeFileName")
        return item
