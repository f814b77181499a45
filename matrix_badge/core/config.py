# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Core configuration — all env-driven, zero hardcode.
Single source of truth for every tunable parameter.
"""

import os


class Settings:
    """Application settings loaded from environment variables."""

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "matrix-badge")
    SERVICE_VERSION: str = os.getenv("SERVICE_VERSION", "1.0.0")
    SERVICE_PORT: int = int(os.getenv("SERVICE_PORT", "8080"))

    # Outbound HTTP (homeserver client API)
    HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT", "5.0"))
    HTTP_CONNECT_RETRIES: int = int(os.getenv("HTTP_CONNECT_RETRIES", "1"))
    USER_AGENT: str = os.getenv(
        "USER_AGENT", f"matrix-badge/{SERVICE_VERSION}"
    )

    # Service discovery
    SRV_PREFIX: str = os.getenv("SRV_PREFIX", "_matrix._tcp.")
    DNS_TIMEOUT: float = float(os.getenv("DNS_TIMEOUT", "3.0"))

    # Result cache
    CACHE_TTL_SECONDS: int = int(os.getenv("CACHE_TTL_SECONDS", "30"))
    CACHE_MAX_ENTRIES: int = int(os.getenv("CACHE_MAX_ENTRIES", "1000"))

    # Badge
    BADGE_LABEL: str = os.getenv("BADGE_LABEL", "chat")
    BADGE_COLOR: str = os.getenv("BADGE_COLOR", "brightgreen")

    CORS_ORIGINS: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
