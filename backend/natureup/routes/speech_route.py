from functools import lru_cache
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from natureup.core.config import settings
from natureup.models.base_model import TTSRequest, TTSResponse
from natureup.routes.envelope import (
    ENVELOPE_FALLBACK_METHODS,
    envelope_error,
    envelope_response,
    method_not_allowed,
    read_json_body,
    start_trace,
)
from natureup.services.Speech_service import SpeechService, TextToSpeechService

router = APIRouter()

@lru_cache
def get_speech_service() -> SpeechService:
    return SpeechService(settings)

def get_tts_service(speech: SpeechService = Depends(get_speech_service)) -> TextToSpeechService:
    return TextToSpeechService(speech)

@router.post("/text-to-speech", response_model=TTSResponse)
async def text_to_speech_endpoint(
    request: Request,
    service: TextToSpeechService = Depends(get_tts_service)
):
    trace_id, started = start_trace()

    parsed, body = await read_json_body(request)
    if not parsed:
        return envelope_error(400, "Invalid JSON", "INVALID_JSON", trace_id)

    try:
        payload = TTSRequest.model_validate(body)
    except ValidationError:
        return envelope_error(400, "Invalid request body", "INVALID_REQUEST", trace_id)

    if not payload.text:
        return envelope_error(400, "Missing required field: text", "INVALID_REQUEST", trace_id)

    return envelope_response(await service.speak(payload, trace_id, started))

@router.api_route("/text-to-speech", methods=ENVELOPE_FALLBACK_METHODS, include_in_schema=False)
async def text_to_speech_wrong_method():
    return method_not_allowed()
