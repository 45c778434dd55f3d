from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Realty Marketplace API"
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # -------------------------------------------------
    # Frontend Domains (CORS)
    # -------------------------------------------------
    FRONTEND_DOMAIN: Optional[str] = None

    FRONTEND_DOMAINS: List[str] = [
        "http://localhost:3000",
    ]

    # Built below from the two settings above
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    # -------------------------------------------------
    # Blob storage (listing media, payment proofs)
    # -------------------------------------------------
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    AWS_BUCKET_NAME: Optional[str] = None
    AWS_REGION: str = "us-east-2"

    # Max upload size for images / bank statements
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # -------------------------------------------------
    # Listing search
    # -------------------------------------------------
    PROPERTY_LIST_LIMIT: int = 200

    # Real environment variables only (no .env file)
    model_config = SettingsConfigDict(case_sensitive=True)


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
cors_origins = []

if settings.FRONTEND_DOMAIN:
    domain = settings.FRONTEND_DOMAIN
    if not domain.startswith("http"):
        domain = f"https://{domain}"
    cors_origins.append(domain.rstrip("/"))

cors_origins.extend([d.rstrip("/") for d in settings.FRONTEND_DOMAINS])

settings.BACKEND_CORS_ORIGINS = sorted(list(set(cors_origins)))
