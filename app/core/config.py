from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "Assessment Window Service"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
    ]

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./assessment.db"
    TEST_DATABASE_URL: Optional[str] = None
    DB_CONNECT_RETRIES: int = 5
    DB_CONNECT_BASE_DELAY: float = 0.5

    # Exam clock
    DEFAULT_TEST_DURATION_MINUTES: int = 60
    EXAM_DURATION_MINUTES: int = 120  # answer sessions without a test
    DEFAULT_SECTIONS: List[str] = ["A", "B"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"

settings = Settings()
