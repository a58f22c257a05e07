# services/storage.py
"""Resume uploads to S3."""

import base64
import binascii
import logging
import posixpath
from typing import Dict, Optional

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def content_type_for(file_name: str) -> str:
    """Map a file extension to its MIME type, falling back to a generic binary type."""
    if "." not in file_name:
        return DEFAULT_CONTENT_TYPE
    extension = file_name.rsplit(".", 1)[1].lower()
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


def resume_key(submission_id: str, timestamp_ms: int, file_name: str) -> str:
    """Object key: resumes/<submissionId>/<epochMillis>-<fileName>."""
    # Only the base name is kept so a client cannot choose the key prefix
    base_name = posixpath.basename(file_name.replace("\\", "/"))
    return f"resumes/{submission_id}/{timestamp_ms}-{base_name}"


def decode_file(payload: str) -> bytes:
    """Decode a base64 payload, accepting an optional data-URL prefix."""
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Resume file is not valid base64") from exc


class ResumeStorage:
    """Thin object-store wrapper around an S3 client."""

    def __init__(self, client, bucket: Optional[str], region: str):
        self.client = client
        self.bucket = bucket
        self.region = region

    def put(self, bucket: str, key: str, body: bytes, content_type: str, metadata: Dict[str, str]) -> str:
        """Store ``body`` and return its https locator."""
        self.client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType=content_type,
            Metadata=metadata,
        )
        return f"https://{bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload_resume(self, submission_id: str, file_payload: str, file_name: str, timestamp_ms: int) -> str:
        """Decode and store a submitted resume, returning its locator."""
        if not self.bucket:
            raise ConfigurationError("RESUME_BUCKET is not configured")

        body = decode_file(file_payload)
        key = resume_key(submission_id, timestamp_ms, file_name)
        logger.info(f"Uploading resume for submission {submission_id} ({len(body)} bytes)")
        return self.put(
            self.bucket,
            key,
            body,
            content_type_for(file_name),
            {"submission-id": submission_id},
        )
