# validation.py
"""Input checks shared by the submission and project endpoints."""

import re
from numbers import Number
from typing import Any, Iterable, List, Mapping

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
TAG_PATTERN = re.compile(r"<[^>]*>")

REQUIRED_SUBMISSION_FIELDS = ("name", "email", "message")
PROJECT_STATUSES = ("draft", "published", "archived")
DEFAULT_TRUSTED_IMAGE_PREFIX = "https://res.cloudinary.com/"


def validate_email(email: Any) -> bool:
    """Loose shape check: something@something.something, no whitespace."""
    if not isinstance(email, str):
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def missing_required_fields(
    payload: Mapping[str, Any],
    fields: Iterable[str] = REQUIRED_SUBMISSION_FIELDS,
) -> List[str]:
    """Return the required fields that are absent or falsy (empty string included)."""
    return [field for field in fields if not payload.get(field)]


def sanitize_input(value: Any) -> Any:
    """Strip <...> tags and surrounding whitespace from strings."""
    if isinstance(value, str):
        return TAG_PATTERN.sub("", value).strip()
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def validate_project(
    project: Mapping[str, Any],
    trusted_image_prefix: str = DEFAULT_TRUSTED_IMAGE_PREFIX,
    partial: bool = False,
) -> List[str]:
    """Collect every field-level violation of a project.

    With ``partial=True`` only the keys present in ``project`` are checked,
    which is what an update patch needs.
    """
    errors: List[str] = []

    def checked(field: str) -> bool:
        return not partial or field in project

    category = project.get("category")
    if checked("category") and (not category or not isinstance(category, str)):
        errors.append("Category is required and must be a string")

    title = project.get("title")
    if checked("title") and (not title or not isinstance(title, str) or len(title) < 3):
        errors.append("Title is required and must be at least 3 characters")

    description = project.get("description")
    if checked("description") and (not description or not isinstance(description, str)):
        errors.append("Description is required")

    image_url = project.get("imageUrl")
    if checked("imageUrl"):
        if not image_url or not isinstance(image_url, str):
            errors.append("Image URL is required")
        elif not image_url.startswith(trusted_image_prefix):
            errors.append(f"Image URL must be from {_host_label(trusted_image_prefix)}")

    tags = project.get("tags")
    if tags is not None and not isinstance(tags, list):
        errors.append("Tags must be an array")

    order = project.get("order")
    if order is not None and not _is_number(order):
        errors.append("Order must be a number")

    status = project.get("status")
    if status is not None and status not in PROJECT_STATUSES:
        errors.append(f"Status must be one of: {', '.join(PROJECT_STATUSES)}")

    return errors


def _host_label(prefix: str) -> str:
    if prefix == DEFAULT_TRUSTED_IMAGE_PREFIX:
        return "Cloudinary"
    return prefix
