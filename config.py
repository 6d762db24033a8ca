"""
Configuration management for the Keyword Search service.
"""
import os
from typing import Dict, List
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class ServiceConfig(BaseModel):
    """Service configuration model."""
    log_level: str = Field(default="INFO", description="Logging level")
    port: int = Field(default=3000, description="HTTP port")

    # Authentication: bearer token -> user id
    api_tokens: Dict[str, str] = Field(default_factory=dict, description="Accepted bearer tokens mapped to user ids")

    # Quota and cache
    daily_search_limit: int = Field(default=3, gt=0, description="Successful searches allowed per user per day")
    cache_ttl_seconds: int = Field(default=24 * 60 * 60, gt=0, description="Transcript cache TTL in seconds")

    # Upstream transcript provider
    upstream_timeout_seconds: float = Field(default=30.0, gt=0, description="Timeout for a single caption fetch")
    caption_languages: List[str] = Field(default=["en"], description="Preferred caption languages, in order")

    # Storage
    storage_backend: str = Field(default="memory", description="Store backend (memory/sqlite)")
    database_path: str = Field(default=":memory:", description="SQLite database path")


def parse_api_tokens(raw: str) -> Dict[str, str]:
    """
    Parse an ``API_TOKENS`` value of the form ``token1:alice,token2:bob``.

    Entries without a user id are ignored.
    """
    tokens = {}
    for entry in raw.split(","):
        token, _, user_id = entry.strip().partition(":")
        if token and user_id:
            tokens[token.strip()] = user_id.strip()
    return tokens


def load_config() -> ServiceConfig:
    """Load configuration from environment variables."""
    return ServiceConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        port=int(os.getenv("PORT", "3000")),
        api_tokens=parse_api_tokens(os.getenv("API_TOKENS", "")),
        daily_search_limit=int(os.getenv("DAILY_SEARCH_LIMIT", "3")),
        cache_ttl_seconds=int(os.getenv("CACHE_TTL_SECONDS", str(24 * 60 * 60))),
        upstream_timeout_seconds=float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "30")),
        caption_languages=[
            lang.strip() for lang in os.getenv("CAPTION_LANGUAGES", "en").split(",") if lang.strip()
        ],
        storage_backend=os.getenv("STORAGE_BACKEND", "memory").lower(),
        database_path=os.getenv("DATABASE_PATH", ":memory:"),
    )


# Global configuration instance
config = load_config()
