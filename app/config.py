"""
Application configuration
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080
    API_TITLE: str = "VT Preconditions API"
    API_VERSION: str = "0.1.0"

    # Artifacts (relative artifact dirs in requests resolve against this)
    ARTIFACTS_PATH: str = "/files/artifacts"

    # Preconditions
    NORETURN_DIFFERENCE_THRESHOLD: float = 0.0  # fraction in [0, 1]

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
