import logging
from natureup.core.llm_providers import BaseLLMProvider
from natureup.core.logger import logs
from natureup.models.base_model import ErrorInfo, ResponseMeta, VoiceRequest, VoiceResponse
from natureup.services.Speech_service import SpeechService, elapsed_ms
from natureup.services.prompts import build_voice_system_prompt

VOICE_ERROR_CODE = "VOICE_PROCESSING_FAILED"
VOICE_TEMPERATURE = 0.7


class VoiceChatService:
    """
    Voice pipeline: transcribe -> assemble prompt -> complete -> synthesize.
    Each step feeds the next, so they run strictly in order.
    """

    def __init__(self, speech: SpeechService, provider: BaseLLMProvider):
        self.speech = speech
        self.provider = provider

    def build_messages(self, transcript: str, request: VoiceRequest) -> list[dict]:
        system_prompt = build_voice_system_prompt(request.user_context)
        return [
            {"role": "system", "content": system_prompt},
            *[m.model_dump() for m in request.conversation_history],
            {"role": "user", "content": transcript},
        ]

    async def process(self, request: VoiceRequest, trace_id: str, started: float) -> VoiceResponse:
        """
        Runs the whole pipeline. Any failure returns a single error envelope
        with no partial results.
        """
        try:
            transcript = await self.speech.transcribe(request.audio_base64)
            logs.trace(logging.INFO, trace_id, f"Transcribed {len(transcript)} characters")

            messages = self.build_messages(transcript, request)
            response_text = await self.provider.generate(messages, temperature=VOICE_TEMPERATURE)

            response_audio = await self.speech.synthesize(response_text)
        except Exception as e:
            logs.trace(logging.ERROR, trace_id, f"Voice processing failed: {str(e)}")
            return VoiceResponse(
                ok=False,
                error=ErrorInfo(message=str(e), code=VOICE_ERROR_CODE),
                meta=ResponseMeta(latency_ms=elapsed_ms(started), trace_id=trace_id)
            )

        return VoiceResponse(
            ok=True,
            transcript=transcript,
            response_text=response_text,
            response_audio_base64=response_audio,
            meta=ResponseMeta(latency_ms=elapsed_ms(started), trace_id=trace_id)
        )
