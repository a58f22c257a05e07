# exceptions.py
"""Typed errors raised by services and controllers.

Each error knows its HTTP status and the JSON body it answers with, so
``main.py`` can map the whole hierarchy with one exception handler.
"""

from typing import Any, Dict, List, Optional


class PortfolioError(Exception):
    """Base exception for all request-level business errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def payload(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(PortfolioError):
    """Missing or malformed input."""

    status_code = 400


class RateLimitExceeded(PortfolioError):
    """Client exceeded the submission rate."""

    status_code = 429

    def __init__(self, message: str = "Too many submissions. Please try again later."):
        super().__init__(message)


class UpstreamFailure(PortfolioError):
    """A collaborator call (DynamoDB, S3, SES) failed."""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.details = details

    def payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ConfigurationError(PortfolioError):
    """A setting required by the requested operation is missing.

    The message names the setting; it is logged, never sent to the client.
    """

    def payload(self) -> Dict[str, Any]:
        return {"error": "Server misconfigured"}


# Project endpoints answer with a {"success": false, "message": ...} envelope.

class AuthorizationFailure(PortfolioError):
    """Admin key missing or wrong."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)

    def payload(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message}


class ProjectNotFound(PortfolioError):
    status_code = 404

    def payload(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message}


class ProjectValidationError(ValidationError):
    """Project failed field-level checks; carries every violation."""

    def __init__(self, errors: List[Any], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = errors

    def payload(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message, "errors": self.errors}


class ProjectsUnavailable(UpstreamFailure):
    def payload(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "message": self.message}
        if self.details:
            body["error"] = self.details
        return body


class ProjectsMisconfigured(ConfigurationError):
    def payload(self) -> Dict[str, Any]:
        return {"success": False, "message": "Server misconfigured"}
