import os

from pydantic_settings import BaseSettings

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


class Settings(BaseSettings):
    # Shipped as package data, see pyproject.toml
    COEFFICIENTS_PATH: str = os.path.join(_PACKAGE_DIR, "data", "coefficients.json")

    # Resolution policies: see sash_coefficients/policies/registry.py for names
    BUCKETING_MODE: str = "ceiling"
    FALLBACK_MODE: str = "first_available"

    # Resolution client (order editor side)
    CLIENT_BASE_URL: str = "http://localhost:8000"
    CLIENT_TIMEOUT_SECONDS: float = 10.0
    CLIENT_DEBOUNCE_MS: int = 500

    class Config:
        env_file = ".env"


settings = Settings()
