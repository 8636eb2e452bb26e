from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Error carrying an HTTP status, a machine-readable code and a human message.
    `extra` holds endpoint-specific fields merged into the error body.
    """
    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = "INTERNAL_ERROR",
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.extra = extra or {}
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        body = {"code": self.code, "message": self.message}
        body.update(self.extra)
        return body


class UpstreamError(AppError):
    """A third-party API answered with a non-success status or an unusable body."""
    def __init__(self, service: str, message: str, upstream_status: Optional[int] = None, code: str = "UPSTREAM_ERROR"):
        self.service = service
        self.upstream_status = upstream_status
        super().__init__(message, status_code=500, code=code)


def missing_coordinates(latitude, longitude, message: str = "Latitude and longitude are required") -> None:
    """Raise a 400 when either coordinate is absent."""
    if latitude is None or longitude is None:
        raise AppError(message, status_code=400, code="MISSING_COORDINATES")
