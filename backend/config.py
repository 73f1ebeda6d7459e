# config.py
# Runtime settings for the environmental risk backend, read from the
# environment (and an optional .env file) once at import time

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _split_origins(raw):
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@dataclass(frozen=True)
class Settings:
    """Service configuration. Every field can be overridden via env vars."""
    pubchem_rest_url: str = os.getenv("PUBCHEM_REST_URL", "https://pubchem.ncbi.nlm.nih.gov/rest/pug")
    pubchem_view_url: str = os.getenv("PUBCHEM_VIEW_URL", "https://pubchem.ncbi.nlm.nih.gov/rest/pug_view")
    pubchem_compound_url: str = os.getenv("PUBCHEM_COMPOUND_URL", "https://pubchem.ncbi.nlm.nih.gov/compound")
    request_timeout: float = float(os.getenv("PUBCHEM_TIMEOUT", "30"))
    cors_origins: list = field(default_factory=lambda: _split_origins(os.getenv("CORS_ORIGINS", "http://localhost:3000")))
    port: int = int(os.getenv("PORT", "5000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
