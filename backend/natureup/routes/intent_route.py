from fastapi import APIRouter

from natureup.models.base_model import IntentRequest, IntentResponse
from natureup.services.Intent_service import detect_all

router = APIRouter()

@router.post("/detect-intent", response_model=IntentResponse)
async def detect_intent_endpoint(request: IntentRequest):
    return detect_all(request.message)
