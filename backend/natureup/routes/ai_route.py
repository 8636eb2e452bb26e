from functools import lru_cache
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from natureup.core.config import settings
from natureup.core.errors import AppError
from natureup.core.llm_connection import LLMService
from natureup.models.base_model import AiRequest, AiResponse
from natureup.routes.envelope import (
    ENVELOPE_FALLBACK_METHODS,
    envelope_error,
    envelope_response,
    method_not_allowed,
    read_json_body,
    start_trace,
)
from natureup.services.Ai_service import AiChatService

router = APIRouter()

@lru_cache
def get_ai_service() -> AiChatService:
    return AiChatService(LLMService(settings))

@router.post("/ai-chat", response_model=AiResponse)
async def ai_chat_endpoint(
    request: Request,
    service: AiChatService = Depends(get_ai_service)
):
    trace_id, started = start_trace()

    parsed, body = await read_json_body(request)
    if not parsed:
        return envelope_error(400, "Invalid JSON", "INVALID_JSON", trace_id)

    try:
        payload = AiRequest.model_validate(body)
        return envelope_response(await service.run(payload, trace_id, started))
    except ValidationError:
        return envelope_error(400, "Invalid request body", "INVALID_REQUEST", trace_id)
    except AppError as e:
        return envelope_error(e.status_code, e.message, e.code, trace_id)

@router.api_route("/ai-chat", methods=ENVELOPE_FALLBACK_METHODS, include_in_schema=False)
async def ai_chat_wrong_method():
    return method_not_allowed()
