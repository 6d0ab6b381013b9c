from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKREBUILD_")

    debug: bool = False

    # Uploads above this size are rejected before parsing
    max_upload_bytes: int = 5 * 1024 * 1024

    scryfall_api_url: str = "https://api.scryfall.com"
    user_agent: str = "deckrebuild/0.1"
    http_timeout: float = 30.0

    # Scryfall asks for 50-100ms between requests
    price_lookup_delay: float = 0.1
    price_cache_hours: int = 24


settings = Settings()


# =============================================================================
# UPLOAD FORMATS
# =============================================================================

# Extensions parsed as markup (.dek is the MTGO export format)
STRUCTURED_EXTENSIONS = frozenset({"dek", "xml"})

PLAIN_TEXT_EXTENSIONS = frozenset({"txt"})
