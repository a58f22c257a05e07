import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .config import get_settings
from .controllers import contact, projects, submissions
from .exceptions import ConfigurationError, PortfolioError
from .logging_config import set_request_id, setup_logging

settings = get_settings()
setup_logging(settings.log_level, settings.log_format)

logger = logging.getLogger(__name__)

app = FastAPI(title="Portfolio API")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag logs and responses with the Lambda request id (or a random one locally)."""

    async def dispatch(self, request: Request, call_next):
        context = request.scope.get("aws.context")
        rid = getattr(context, "aws_request_id", None) or uuid.uuid4().hex[:12]
        set_request_id(rid)
        try:
            response = await call_next(request)
        finally:
            set_request_id(None)
        response.headers["X-Request-ID"] = rid
        return response


app.add_middleware(RequestIDMiddleware)

# Origins come from CORS_ORIGINS, "*" by default
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Content-Type", "X-Api-Key"],
)


@app.exception_handler(PortfolioError)
async def portfolio_error_handler(request: Request, exc: PortfolioError):
    if isinstance(exc, ConfigurationError):
        logger.error(f"Configuration error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected malformed request to {request.url.path}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def unhandled_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# Include routers
app.include_router(contact.router, tags=["contact"])
app.include_router(projects.router, tags=["projects"])
app.include_router(submissions.router, tags=["submissions"])
