import base64
import binascii
import httpx
import logging
import time
from natureup.core.config import Settings
from natureup.core.errors import AppError, UpstreamError
from natureup.core.logger import logs
from natureup.models.base_model import ErrorInfo, ResponseMeta, TTSRequest, TTSResponse

TTS_ERROR_CODE = "TTS_PROCESSING_FAILED"


def elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def decode_audio(audio_base64: str) -> bytes:
    try:
        # Wrapped (MIME-style) base64 carries line breaks
        return base64.b64decode("".join(audio_base64.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise AppError(f"Invalid base64 audio: {str(e)}", status_code=400, code="INVALID_AUDIO")


def encode_audio(audio: bytes) -> str:
    return base64.b64encode(audio).decode("ascii")


class SpeechService:
    """
    OpenAI audio endpoints: Whisper transcription and text-to-speech.
    Each call opens its own connection.
    """

    def __init__(self, config: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.api_key = config.OPENAI_API_KEY
        self.base_url = config.OPENAI_BASE_URL.rstrip("/")
        self.transcription_model = config.TRANSCRIPTION_MODEL
        self.tts_model = config.TTS_MODEL
        self.default_voice = config.TTS_VOICE
        self.timeout = config.HTTP_TIMEOUT
        self.transport = transport

    def _headers(self) -> dict:
        if not self.api_key:
            raise UpstreamError("openai", "OPENAI_API_KEY not configured", code="CONFIG_ERROR")
        return {"Authorization": f"Bearer {self.api_key}"}

    async def transcribe(self, audio_base64: str) -> str:
        """Decode base64 audio and transcribe it. Returns "" when no text comes back."""
        headers = self._headers()
        audio = decode_audio(audio_base64)

        files = {"file": ("audio.m4a", audio, "audio/m4a")}
        data = {"model": self.transcription_model}
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/audio/transcriptions",
                    headers=headers,
                    files=files,
                    data=data
                )
            except httpx.HTTPError as e:
                logs.log(logging.ERROR, f"Whisper request failed: {str(e)}")
                raise UpstreamError("openai", f"Whisper request failed: {str(e)}")

        if response.status_code != 200:
            raise UpstreamError(
                "openai",
                f"Whisper API error: {response.status_code} {response.text}",
                upstream_status=response.status_code
            )
        try:
            return response.json().get("text") or ""
        except ValueError:
            raise UpstreamError("openai", "Whisper API returned invalid JSON", response.status_code)

    async def synthesize(self, text: str, voice: str | None = None) -> str:
        """Synthesize mp3 speech and return it base64-encoded."""
        headers = self._headers()
        headers["Content-Type"] = "application/json"
        payload = {
            "model": self.tts_model,
            "voice": voice or self.default_voice,
            "input": text,
            "response_format": "mp3"
        }
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                response = await client.post(f"{self.base_url}/audio/speech", headers=headers, json=payload)
            except httpx.HTTPError as e:
                logs.log(logging.ERROR, f"TTS request failed: {str(e)}")
                raise UpstreamError("openai", f"TTS request failed: {str(e)}")

        if response.status_code != 200:
            raise UpstreamError(
                "openai",
                f"TTS API error: {response.status_code} {response.text}",
                upstream_status=response.status_code
            )
        return encode_audio(response.content)


class TextToSpeechService:
    """Wraps synthesis in the {ok, audio_base64, meta} envelope."""

    def __init__(self, speech: SpeechService):
        self.speech = speech

    async def speak(self, request: TTSRequest, trace_id: str, started: float) -> TTSResponse:
        try:
            audio_base64 = await self.speech.synthesize(request.text, request.voice)
        except Exception as e:
            logs.trace(logging.ERROR, trace_id, f"TTS processing failed: {str(e)}")
            return TTSResponse(
                ok=False,
                error=ErrorInfo(message=str(e), code=TTS_ERROR_CODE),
                meta=ResponseMeta(latency_ms=elapsed_ms(started), trace_id=trace_id)
            )

        return TTSResponse(
            ok=True,
            audio_base64=audio_base64,
            meta=ResponseMeta(latency_ms=elapsed_ms(started), trace_id=trace_id)
        )
