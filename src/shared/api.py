"""HTTP glue shared by every router: error mapping, request context and the
route-to-domain middleware."""

from http import HTTPStatus
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.domain import Domain
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.logging import add_context, clear_context

logger = structlog.get_logger(__name__)


def _error_body(status_code: int, message: str, issues: list[dict] | None = None) -> dict:
    body = {"message": message, "error": HTTPStatus(status_code).phrase, "statusCode": status_code}
    if issues is not None:
        body["issues"] = issues
    return body


def _error_response(status_code: int, message: str, issues: list[dict] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=_error_body(status_code, message, issues))


def _issues(messages) -> list[dict]:
    if isinstance(messages, dict):
        return [
            {"path": field, "message": str(msg)}
            for field, field_messages in messages.items()
            for msg in (field_messages if isinstance(field_messages, list | tuple) else [field_messages])
        ]
    return [{"path": "", "message": str(messages)}]


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    issues = _issues(exc.messages)
    message = issues[0]["message"] if issues else "Validation failed"
    return _error_response(400, message, issues)


async def handle_not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _error_response(404, _issues(exc.messages)[0]["message"])


async def handle_invalid_operation(request: Request, exc: InvalidOperationError) -> JSONResponse:
    return _error_response(400, _issues(exc.messages)[0]["message"])


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
    response = _error_response(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def handle_upstream_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Upstream service failed", path=request.url.path, error=str(exc))
    return _error_response(502, str(exc) or "Upstream service failed")


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    issues = [
        {
            "path": ".".join(str(part) for part in error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return _error_response(400, "Request validation failed", issues)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return _error_response(500, "Internal Server Error")


def register_exception_handlers(app: FastAPI, upstream_errors: tuple[type[Exception], ...] = ()) -> None:
    """Map domain and transport errors onto the ``{message, error, statusCode}`` envelope.

    ``upstream_errors`` are failures of third-party services (file storage,
    payment gateway) and answer 502.
    """
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(ObjectNotFoundError, handle_not_found)
    app.add_exception_handler(InvalidOperationError, handle_invalid_operation)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    for error_cls in upstream_errors:
        app.add_exception_handler(error_cls, handle_upstream_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def resolve_domain(route_domains: dict[str, Domain], path: str) -> Domain | None:
    """Return the domain owning the given request path, or None."""
    for prefix, domain in route_domains.items():
        if path == prefix or path.startswith(prefix + "/"):
            return domain
    return None


def domain_context_middleware(route_domains: dict[str, Domain]):
    """Build a middleware pushing the Protean domain context of each request."""

    async def middleware(request: Request, call_next):
        domain = resolve_domain(route_domains, request.url.path)
        if domain is not None:
            with domain.domain_context():
                response = await call_next(request)
            return response
        # Health check, docs
        return await call_next(request)

    return middleware


async def request_context_middleware(request: Request, call_next):
    """Bind request id, method and path to every log line emitted during the request."""
    request_id = request.headers.get("x-request-id") or uuid4().hex
    clear_context()
    add_context(request_id=request_id, method=request.method, path=request.url.path)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["x-request-id"] = request_id
    return response
