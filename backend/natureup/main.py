import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from natureup.core.config import settings
from natureup.core.db_connection import MongoConnection
from natureup.core.errors import AppError
from natureup.core.logger import logs
from natureup.routes.ai_route import router as ai_router
from natureup.routes.intent_route import router as intent_router
from natureup.routes.places_route import router as places_router
from natureup.routes.route_route import router as route_router
from natureup.routes.speech_route import router as speech_router
from natureup.routes.trails_route import router as trails_router
from natureup.routes.voice_route import router as voice_router
from natureup.routes.weather_route import router as weather_router

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    logs.log(logging.INFO, f"NatureUP Backend starting (cache storage: {settings.STORAGE_MODE})")
    yield
    MongoConnection.close()

app = FastAPI(title="NatureUP Backend", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Client-Info", "Apikey"],
)

app.include_router(weather_router)
app.include_router(places_router)
app.include_router(route_router)
app.include_router(trails_router)
app.include_router(speech_router)
app.include_router(voice_router)
app.include_router(ai_router)
app.include_router(intent_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logs.log(level, f"{request.url.path} failed: {exc.message}", extra={"code": exc.code})
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    if any(err.get("type") == "json_invalid" for err in exc.errors()):
        return JSONResponse(status_code=400, content={"code": "INVALID_JSON", "message": "Invalid JSON"})
    return JSONResponse(status_code=400, content={"code": "INVALID_REQUEST", "message": "Invalid request body"})


# Preflight for every path, including ones without a POST handler
@app.options("/{full_path:path}")
async def preflight(full_path: str):
    return JSONResponse(status_code=200, content="ok", headers=CORS_HEADERS)

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {
        "message": "Welcome to NatureUP API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "weather": "/weather",
            "nearby_places": "/nearby-places",
            "calculate_route": "/calculate-route",
            "alltrails_search": "/alltrails-search",
            "text_to_speech": "/text-to-speech",
            "voice_chat": "/voice-chat",
            "ai_chat": "/ai-chat",
            "detect_intent": "/detect-intent",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }

# --- Health Check ---
@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "NatureUP Backend", "storage": settings.STORAGE_MODE}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("natureup.main:app", host="0.0.0.0", port=8000, reload=True)
