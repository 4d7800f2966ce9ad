from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ProblemDetails(BaseModel):
    type: str = "about:blank"
    title: str
    status: int
    detail: str | None = None
    instance: str | None = None


class RubrikError(Exception):
    """Base class for every failure talking to the Rubrik cluster."""

    pass


class AuthenticationError(RubrikError):
    """Raised when no session token could be obtained."""

    pass


class TransportError(RubrikError):
    """Raised on network-level failures (refused connection, timeout, TLS)."""

    pass


class HTTPStatusError(RubrikError):
    """Raised when the cluster answers with a non-2xx status."""

    def __init__(self, status_code: int, path: str):
        super().__init__(f"HTTP {status_code}: {path}")
        self.status_code = status_code
        self.path = path


class DecodeError(RubrikError):
    """Raised when a response body is not JSON or does not fit the expected record."""

    pass


async def http_exception_handler(request: Request, exc: HTTPException):
    problem = ProblemDetails(
        title="HTTP Error", status=exc.status_code, detail=str(exc.detail), instance=str(request.url)
    )
    return JSONResponse(status_code=exc.status_code, content=problem.model_dump())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problem = ProblemDetails(title="Validation Error", status=422, detail=str(exc), instance=str(request.url))
    return JSONResponse(status_code=422, content=problem.model_dump())


async def authentication_error_handler(request: Request, exc: AuthenticationError):
    problem = ProblemDetails(
        type="https://tools.ietf.org/html/rfc7231#section-6.6.3",
        title="Rubrik Authentication Failed",
        status=502,
        detail=str(exc),
        instance=str(request.url),
    )
    return JSONResponse(status_code=502, content=problem.model_dump())


async def rubrik_error_handler(request: Request, exc: RubrikError):
    problem = ProblemDetails(
        type="https://tools.ietf.org/html/rfc7231#section-6.6.4",
        title="Rubrik Unavailable",
        status=503,
        detail=str(exc),
        instance=str(request.url),
    )
    return JSONResponse(status_code=503, content=problem.model_dump())


async def generic_exception_handler(request: Request, exc: Exception):
    problem = ProblemDetails(
        title="Internal Server Error", status=500, detail="An unexpected error occurred.", instance=str(request.url)
    )
    return JSONResponse(status_code=500, content=problem.model_dump())
