import httpx
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

from natureup.main import app
from natureup.models.places_model import PlacesResponse
from natureup.routes.ai_route import get_ai_service
from natureup.routes.places_route import get_places_service
from natureup.routes.speech_route import get_speech_service
from natureup.routes.trails_route import get_trails_service
from natureup.routes.voice_route import get_voice_provider, get_voice_service
from natureup.routes.weather_route import get_cache_repo
from natureup.services.Ai_service import AiChatService
from natureup.services.Places_service import PlacesService
from natureup.services.Trails_service import TrailsService
from natureup.services.Voice_service import VoiceChatService


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _voice_service(transcribe=None):
    speech = MagicMock()
    speech.transcribe = transcribe or AsyncMock(return_value="hello")
    speech.synthesize = AsyncMock(return_value="bXAz")
    provider = MagicMock()
    provider.generate = AsyncMock(return_value="Hi there")
    return VoiceChatService(speech, provider)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.parametrize("path", ["/weather", "/voice-chat", "/text-to-speech", "/unknown"])
def test_options_always_ok(client, path):
    assert client.options(path).status_code == 200


def test_cors_preflight(client):
    response = client.options(
        "/weather",
        headers={"Origin": "http://localhost:8081", "Access-Control-Request-Method": "POST"},
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_weather_missing_coordinates(client):
    app.dependency_overrides[get_cache_repo] = lambda: MagicMock()

    response = client.post("/weather", json={"latitude": 40.7})

    assert response.status_code == 400
    assert response.json()["code"] == "MISSING_COORDINATES"


def test_weather_uses_camel_case_fields(client):
    repo = MagicMock()
    repo.get = AsyncMock(return_value={
        "temperature": 70, "feels_like": 69, "description": "Clear sky", "icon": "☀️",
        "humidity": 40.0, "wind_speed": 3, "location": "America/New_York",
    })
    app.dependency_overrides[get_cache_repo] = lambda: repo

    response = client.post("/weather", json={"latitude": 40.7128, "longitude": -74.0060})

    assert response.status_code == 200
    body = response.json()
    assert body["feelsLike"] == 69
    assert body["windSpeed"] == 3
    assert body["source"] == "cache"


def test_nearby_places_fallback_is_200(client, test_settings):
    transport = httpx.MockTransport(lambda request: httpx.Response(500))
    app.dependency_overrides[get_places_service] = lambda: PlacesService(test_settings, transport=transport)

    response = client.post("/nearby-places", json={"latitude": 37.77, "longitude": -122.42})

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "fallback"
    assert body["error"] == "Using fallback mock data"
    assert len(body["places"]) == 3


def test_nearby_places_live_omits_error(client):
    service = MagicMock()
    service.get_places = AsyncMock(return_value=PlacesResponse(places=[], source="live"))
    app.dependency_overrides[get_places_service] = lambda: service

    body = client.post("/nearby-places", json={"latitude": 1.0, "longitude": 2.0}).json()

    assert body["source"] == "live"
    assert "error" not in body


def test_calculate_route_needs_two_waypoints(client):
    response = client.post("/calculate-route", json={"waypoints": [{"lat": 1.0, "lng": 2.0}]})

    assert response.status_code == 400
    assert response.json()["code"] == "INSUFFICIENT_WAYPOINTS"


def test_trails_failure_includes_empty_list(client, test_settings):
    config = test_settings.model_copy(update={"ALLTRAILS_API_TOKEN": ""})
    app.dependency_overrides[get_trails_service] = lambda: TrailsService(config)

    response = client.post("/alltrails-search", json={"latitude": 37.77, "longitude": -122.42})

    assert response.status_code == 500
    assert response.json()["trails"] == []
    assert response.json()["message"] == "AllTrails API token not configured"


def test_voice_chat_success(client):
    app.dependency_overrides[get_voice_service] = lambda: _voice_service()

    response = client.post("/voice-chat", json={"audio_base64": "YQ=="})

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["transcript"] == "hello"
    assert body["response_text"] == "Hi there"
    assert body["meta"]["trace_id"]


def test_voice_chat_uses_overridden_speech_and_provider(client):
    speech = MagicMock()
    speech.transcribe = AsyncMock(return_value="what bird is that")
    speech.synthesize = AsyncMock(return_value="bXAz")
    provider = MagicMock()
    provider.generate = AsyncMock(return_value="Sounds like a robin")
    app.dependency_overrides[get_speech_service] = lambda: speech
    app.dependency_overrides[get_voice_provider] = lambda: provider

    response = client.post("/voice-chat", json={"audio_base64": "YQ=="})

    assert response.status_code == 200
    assert response.json()["response_text"] == "Sounds like a robin"
    speech.transcribe.assert_awaited_once_with("YQ==")
    provider.generate.assert_awaited_once()


def test_voice_chat_failure_envelope(client):
    failing = AsyncMock(side_effect=RuntimeError("Whisper API error: 500"))
    app.dependency_overrides[get_voice_service] = lambda: _voice_service(transcribe=failing)

    response = client.post("/voice-chat", json={"audio_base64": "YQ=="})

    assert response.status_code == 500
    body = response.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "VOICE_PROCESSING_FAILED"
    assert "transcript" not in body
    assert "response_text" not in body


def test_voice_chat_missing_audio(client):
    app.dependency_overrides[get_voice_service] = lambda: _voice_service()

    response = client.post("/voice-chat", json={"conversation_history": []})

    assert response.status_code == 400
    assert response.json()["error"] == {"message": "Missing required field: audio_base64", "code": "INVALID_REQUEST"}


def test_voice_chat_invalid_json(client):
    app.dependency_overrides[get_voice_service] = lambda: _voice_service()

    response = client.post("/voice-chat", content=b"{not json", headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_JSON"


@pytest.mark.parametrize("path", ["/voice-chat", "/text-to-speech", "/ai-chat"])
def test_envelope_endpoints_reject_get(client, path):
    response = client.get(path)

    assert response.status_code == 405
    body = response.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "METHOD_NOT_ALLOWED"
    assert body["meta"]["trace_id"]


def test_text_to_speech_missing_text(client):
    app.dependency_overrides[get_speech_service] = lambda: MagicMock()

    response = client.post("/text-to-speech", json={"voice": "nova"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Missing required field: text"


def test_text_to_speech_success(client):
    speech = MagicMock()
    speech.synthesize = AsyncMock(return_value="bXAz")
    app.dependency_overrides[get_speech_service] = lambda: speech

    response = client.post("/text-to-speech", json={"text": "Breathe"})

    assert response.status_code == 200
    assert response.json()["audio_base64"] == "bXAz"


def test_ai_chat_unknown_action(client):
    app.dependency_overrides[get_ai_service] = lambda: AiChatService(MagicMock())

    response = client.post("/ai-chat", json={"action": "write_poem", "input": {}})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


def test_ai_chat_success(client):
    provider = MagicMock()
    provider.provider_id = "gemini"
    provider.model = "gemini-1.5-flash"
    provider.generate = AsyncMock(return_value='{"reply": "Hello!"}')
    llm = MagicMock()
    llm.provider = provider
    app.dependency_overrides[get_ai_service] = lambda: AiChatService(llm)

    response = client.post("/ai-chat", json={"action": "health_coach_message", "input": {"message": "hi"}})

    assert response.status_code == 200
    body = response.json()
    assert body["result"] == {"reply": "Hello!"}
    assert body["meta"]["provider"] == "gemini"
    assert body["meta"]["assistant"] == "health_coach"


def test_detect_intent(client):
    response = client.post("/detect-intent", json={"message": "Yes, I have 2 hours for a hike"})

    assert response.status_code == 200
    body = response.json()
    assert body["excursion"] is True
    assert body["duration_minutes"] == 120


def test_detect_intent_requires_message(client):
    response = client.post("/detect-intent", json={})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REQUEST"
