"""Helpers shared by the endpoints that answer with an {ok, ..., meta} envelope."""
import time
import uuid
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from natureup.services.Speech_service import elapsed_ms

ENVELOPE_FALLBACK_METHODS = ["GET", "PUT", "PATCH", "DELETE"]


def start_trace() -> tuple[str, float]:
    """Fresh trace id and start time for an inbound request."""
    return str(uuid.uuid4()), time.monotonic()


async def read_json_body(request: Request) -> tuple[bool, Any]:
    """Returns (parsed, body); parsed is False when the body is not valid JSON."""
    try:
        return True, await request.json()
    except ValueError:
        return False, None


def envelope_error(status_code: int, message: str, code: str, trace_id: str, started: float | None = None) -> JSONResponse:
    meta = {"trace_id": trace_id}
    if started is not None:
        meta["latency_ms"] = elapsed_ms(started)
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "error": {"message": message, "code": code}, "meta": meta}
    )


def method_not_allowed() -> JSONResponse:
    trace_id, _ = start_trace()
    return envelope_error(405, "Method not allowed", "METHOD_NOT_ALLOWED", trace_id)


def envelope_response(envelope: BaseModel, failure_status: int = 500) -> JSONResponse:
    """Serialize an envelope, using 200 for ok and `failure_status` otherwise."""
    return JSONResponse(
        status_code=200 if envelope.ok else failure_status,
        content=envelope.model_dump(exclude_none=True)
    )
