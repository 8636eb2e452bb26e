from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Storage mode for the api cache: "mongodb" or "local"
    STORAGE_MODE: str = "local"

    # MongoDB Configuration (only needed if STORAGE_MODE=mongodb)
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB_NAME: str = "natureup_db"
    CACHE_COLLECTION: str = "api_cache"

    # Local Cache Configuration (only needed if STORAGE_MODE=local)
    LOCAL_CACHE_DIR: str = "data/cache"

    LOGGER: int = 20
    LOG_DIRECTORY: str = "logs"

    # LLM Provider Selection for /ai-chat
    AI_PROVIDER: str = "openai"  # Options: openai, gemini

    # OpenAI Configuration (chat, transcription and speech)
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    TRANSCRIPTION_MODEL: str = "whisper-1"
    TTS_MODEL: str = "tts-1"
    TTS_VOICE: str = "nova"

    # Gemini Configuration
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"

    # AllTrails Configuration
    ALLTRAILS_API_TOKEN: str = ""
    ALLTRAILS_URL: str = "https://chatgpt-production.alltrails.com/search-trails"

    # Open data APIs
    OPEN_METEO_URL: str = "https://api.open-meteo.com/v1/forecast"
    OSRM_BASE_URL: str = "https://router.project-osrm.org"
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"

    WEATHER_CACHE_TTL_MINUTES: int = 15
    HTTP_TIMEOUT: float = 30.0

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
