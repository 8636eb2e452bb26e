from functools import lru_cache
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from natureup.core.config import settings
from natureup.core.llm_connection import build_provider
from natureup.core.llm_providers import BaseLLMProvider
from natureup.models.base_model import VoiceRequest, VoiceResponse
from natureup.routes.envelope import (
    ENVELOPE_FALLBACK_METHODS,
    envelope_error,
    envelope_response,
    method_not_allowed,
    read_json_body,
    start_trace,
)
from natureup.routes.speech_route import get_speech_service
from natureup.services.Speech_service import SpeechService
from natureup.services.Voice_service import VoiceChatService

router = APIRouter()

@lru_cache
def get_voice_provider() -> BaseLLMProvider:
    # Voice replies always come from OpenAI, whatever AI_PROVIDER says
    return build_provider(settings, "openai")

def get_voice_service(
    speech: SpeechService = Depends(get_speech_service),
    provider: BaseLLMProvider = Depends(get_voice_provider)
) -> VoiceChatService:
    return VoiceChatService(speech, provider)

@router.post("/voice-chat", response_model=VoiceResponse)
async def voice_chat_endpoint(
    request: Request,
    service: VoiceChatService = Depends(get_voice_service)
):
    trace_id, started = start_trace()

    parsed, body = await read_json_body(request)
    if not parsed:
        return envelope_error(400, "Invalid JSON", "INVALID_JSON", trace_id)

    try:
        payload = VoiceRequest.model_validate(body)
    except ValidationError:
        return envelope_error(400, "Invalid request body", "INVALID_REQUEST", trace_id)

    if not payload.audio_base64:
        return envelope_error(400, "Missing required field: audio_base64", "INVALID_REQUEST", trace_id)

    return envelope_response(await service.process(payload, trace_id, started))

@router.api_route("/voice-chat", methods=ENVELOPE_FALLBACK_METHODS, include_in_schema=False)
async def voice_chat_wrong_method():
    return method_not_allowed()
