from functools import lru_cache
from pydantic import BaseModel
import os
from dotenv import load_dotenv
load_dotenv()  # loads the .env file at the repo root


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    app_name: str = os.getenv("APP_NAME", "Octopets")
    env: str = os.getenv("APP_ENV", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    mongodb_uri: str = os.getenv("MONGODB_URI", "memory://")
    db_name: str = os.getenv("DB_NAME", "octopets")
    frontend_base_url: str = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # OpenAI
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    openai_timeout_seconds: float = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "30"))
    pet_analysis_health_mode: str = os.getenv("PET_ANALYSIS_HEALTH_MODE", "models").lower()
    pet_analysis_rate_limit: str = os.getenv("PET_ANALYSIS_RATE_LIMIT", "10/minute")
    rate_limit_enabled: bool = _flag("RATE_LIMIT_ENABLED", "true")

    # Feature flags
    use_mock_data: bool = _flag("USE_MOCK_DATA", "false")
    seed_data: bool = _flag("SEED_DATA", "true")
    enable_crud: bool = _flag("ENABLE_CRUD", "true")
    errors: bool = _flag("ERRORS", "false")  # detailed 500 responses

    @property
    def uses_memory_store(self) -> bool:
        return self.mongodb_uri.startswith("memory://")


@lru_cache
def get_settings() -> Settings:
    return Settings()
