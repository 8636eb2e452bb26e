import json
import logging
from natureup.core.errors import AppError, UpstreamError
from natureup.core.llm_connection import LLMService
from natureup.core.logger import logs
from natureup.models.base_model import AiAction, AiRequest, AiResponse, ErrorInfo, ResponseMeta
from natureup.services.Speech_service import elapsed_ms
from natureup.services.phase_manager import assistant_for_phase
from natureup.services.prompts import build_ai_system_prompt, build_user_turn

AI_ERROR_CODE = "AI_RUN_FAILED"


def parse_reply(content: str):
    """Providers are asked for JSON; plain text is wrapped as {"reply": ...}."""
    try:
        return json.loads(content)
    except ValueError:
        return {"reply": content}


def parse_action(request: AiRequest) -> AiAction:
    if not request.action or request.input is None:
        raise AppError("Missing required fields: action, input", status_code=400, code="INVALID_REQUEST")
    try:
        return AiAction(request.action)
    except ValueError:
        raise AppError(f"Unsupported action: {request.action}", status_code=400, code="INVALID_REQUEST")


class AiChatService:
    """Runs one assistant action against the configured provider."""

    def __init__(self, llm: LLMService):
        self.llm = llm

    def build_messages(self, action: AiAction, request: AiRequest) -> list[dict]:
        messages = [{"role": "system", "content": build_ai_system_prompt(action, request.context)}]
        messages.extend(m.model_dump() for m in request.conversation_history)
        messages.append({"role": "user", "content": build_user_turn(action, request.input, request.context)})
        return messages

    async def run(self, request: AiRequest, trace_id: str, started: float) -> AiResponse:
        """Raises AppError for invalid requests; provider failures come back as an error envelope."""
        action = parse_action(request)

        try:
            provider = self.llm.provider
            content = await provider.generate(self.build_messages(action, request), json_mode=True)
            if not content:
                raise UpstreamError(provider.provider_id, f"No content in {provider.get_provider_name()} response")
            result = parse_reply(content)
        except Exception as e:
            logs.trace(logging.ERROR, trace_id, f"AI run failed: {str(e)}")
            return AiResponse(
                ok=False,
                error=ErrorInfo(message=str(e), code=AI_ERROR_CODE),
                meta=ResponseMeta(latency_ms=elapsed_ms(started), trace_id=trace_id)
            )

        latency = elapsed_ms(started)
        logs.log(logging.INFO, json.dumps({"tag": "perf", "action": action.value, "elapsed_ms": latency}),
                 extra={"trace_id": trace_id})
        return AiResponse(
            ok=True,
            result=result,
            meta=ResponseMeta(
                provider=provider.provider_id,
                model=provider.model,
                latency_ms=latency,
                assistant=assistant_for_phase((request.context or {}).get("phase")),
                trace_id=trace_id
            )
        )
