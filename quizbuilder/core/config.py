from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # App Config
    APP_NAME: str = "Quiz Builder"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development" # "development" or "production"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None
    
    # OpenAI (or any OpenAI-compatible provider)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    MODEL_NAME: str = "gpt-4o-mini"
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 2500
    
    # Transport boundary used by the generation client
    GENERATION_ENDPOINT: str = "http://localhost:4001/api/generate"
    GENERATION_TIMEOUT: float = 60.0 # seconds, per outbound call
    GENERATION_MAX_RETRIES: int = 1
    
    # Quiz limits
    DEFAULT_QUESTION_COUNT: int = 5
    MAX_QUESTION_COUNT: int = 50
    MAX_REFERENCE_CHARS: int = 1400
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

settings = Settings()
