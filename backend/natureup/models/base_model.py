from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
from enum import Enum

# --- Enums ---
class ConversationPhase(str, Enum):
    INITIAL_CHAT = "initial_chat"
    EXCURSION_PLANNING = "excursion_planning"
    EXCURSION_CREATION = "excursion_creation"
    EXCURSION_GUIDING = "excursion_guiding"
    POST_EXCURSION_FOLLOWUP = "post_excursion_followup"

class AiAction(str, Enum):
    HEALTH_COACH_MESSAGE = "health_coach_message"
    EXCURSION_PLAN = "excursion_plan"
    EXCURSION_CREATOR_MESSAGE = "excursion_creator_message"

# --- Domain Models ---
class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str

class LocationIntent(BaseModel):
    wants_suggestions: bool = False
    specific_location: Optional[str] = None

# --- Envelope Parts ---
class ErrorInfo(BaseModel):
    message: str
    code: Optional[str] = None

class ResponseMeta(BaseModel):
    """Per-request metadata. trace_id is generated once per inbound request."""
    trace_id: str
    latency_ms: Optional[int] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    assistant: Optional[str] = None

# --- API Request/Response Models ---
class VoiceRequest(BaseModel):
    audio_base64: Optional[str] = None
    conversation_history: List[ChatMessage] = []
    user_context: Optional[Dict[str, Any]] = None

class VoiceResponse(BaseModel):
    ok: bool
    transcript: Optional[str] = None
    response_text: Optional[str] = None
    response_audio_base64: Optional[str] = None
    error: Optional[ErrorInfo] = None
    meta: ResponseMeta

class TTSRequest(BaseModel):
    text: Optional[str] = None
    voice: Optional[str] = None

class TTSResponse(BaseModel):
    ok: bool
    audio_base64: Optional[str] = None
    error: Optional[ErrorInfo] = None
    meta: ResponseMeta

class AiRequest(BaseModel):
    action: Optional[str] = None
    input: Optional[Dict[str, Any]] = None
    context: Optional[Dict[str, Any]] = None
    conversation_history: List[ChatMessage] = []

class AiResponse(BaseModel):
    ok: bool
    result: Optional[Any] = None
    error: Optional[ErrorInfo] = None
    meta: ResponseMeta

class IntentRequest(BaseModel):
    message: str = Field(..., description="Free-text user input")

class IntentResponse(BaseModel):
    excursion: bool
    duration_minutes: Optional[int] = None
    location: LocationIntent
    confirmation: bool
